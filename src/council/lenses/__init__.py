"""Lens catalog and selection policy."""
from .catalog import LENSES, Lens
from .registry import LensRegistry, select_lenses
