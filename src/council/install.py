"""
Self-install -- put a `council` launcher on the user's PATH.

The launcher is a tiny shell script that re-runs this package with the
interpreter that installed it, so it keeps working outside the virtualenv.
"""

import logging
import os
import stat
import sys
from pathlib import Path

from .errors import InstallError

logger = logging.getLogger(__name__)

LAUNCHER_NAME = "council"
INSTALL_DIR_ENV = "COUNCIL_INSTALL_DIR"


def default_install_dir() -> Path:
    """~/.local/bin unless COUNCIL_INSTALL_DIR says otherwise."""
    override = os.environ.get(INSTALL_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".local" / "bin"


def render_launcher(python: str = sys.executable) -> str:
    return f'#!/bin/sh\nexec "{python}" -m council "$@"\n'


def install_launcher(target_dir: Path | None = None, python: str = sys.executable) -> Path:
    """Write an executable launcher into ``target_dir``. Returns its path."""
    target_dir = target_dir or default_install_dir()
    path = target_dir / LAUNCHER_NAME
    try:
        target_dir.mkdir(parents=True, exist_ok=True)
        path.write_text(render_launcher(python))
        mode = path.stat().st_mode
        path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    except OSError as e:
        raise InstallError(f"Could not install launcher to {path}: {e}") from e

    logger.info(f"[Install] Wrote launcher {path} -> {python}")
    return path


def is_on_path(directory: Path) -> bool:
    """Whether ``directory`` is listed in $PATH."""
    entries = os.environ.get("PATH", "").split(os.pathsep)
    resolved = directory.expanduser().resolve()
    return any(Path(p).expanduser().resolve() == resolved for p in entries if p)
