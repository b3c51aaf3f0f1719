"""
council CLI - Spawn multiple advisors to analyze a task through orthogonal lenses.

Usage:
    council "Review the authentication module and suggest improvements"
    council -n 8 -t 900 --all "Why is the import pipeline slow?"
    council --no-synthesize "Audit error handling in src/api"
    council --list-lenses
    council --install
"""

import asyncio
import logging
import time

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.rule import Rule
from rich.table import Table

from .config import (
    DEFAULT_BACKEND,
    DEFAULT_CLI_PATH,
    DEFAULT_NUM_MEMBERS,
    DEFAULT_TIMEOUT_SECONDS,
    CouncilConfig,
    ExecutorConfig,
)
from .errors import CapabilityUnavailable, InstallError, UsageError
from .install import install_launcher, is_on_path
from .lenses import Lens, LensRegistry
from .llm import ExecutorProtocol, build_executor
from .orchestration import Council, CouncilResult, MemberResult, RunTask
from .validators import validate_run_options, validate_task

app = typer.Typer(
    help="Spawn multiple advisors to analyze a task through orthogonal lenses",
    add_completion=False,
)
console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger(__name__)

STATUS_INTERVAL_SECONDS = 30


def configure_logging(verbose: bool = False) -> None:
    """Route package logs to stderr through rich. WARNING by default."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


# =============================================================================
# MAIN COMMAND
# =============================================================================


@app.command()
def main(
    task: str = typer.Argument(None, help="Task description for the council to analyze"),
    num: int = typer.Option(
        DEFAULT_NUM_MEMBERS, "--num", "-n", envvar="COUNCIL_MEMBERS",
        help="Number of council members",
    ),
    timeout: int = typer.Option(
        DEFAULT_TIMEOUT_SECONDS, "--timeout", "-t", envvar="COUNCIL_TIMEOUT",
        help="Timeout per member in seconds (synthesis gets the same)",
    ),
    model: str = typer.Option(
        None, "--model", "-m", envvar="COUNCIL_MODEL",
        help="Model to use (sonnet, opus, haiku, or a full model id)",
    ),
    no_synthesize: bool = typer.Option(False, "--no-synthesize", help="Skip the synthesis phase"),
    show_all: bool = typer.Option(False, "--all", help="Show every member's full analysis"),
    install: bool = typer.Option(False, "--install", help="Install the council launcher to ~/.local/bin"),
    list_lenses: bool = typer.Option(False, "--list-lenses", help="List the available lenses and exit"),
    backend: str = typer.Option(
        DEFAULT_BACKEND, "--backend", envvar="COUNCIL_BACKEND",
        help="Analysis backend: cli, anthropic or openai",
    ),
    cli_path: str = typer.Option(
        DEFAULT_CLI_PATH, "--cli-path", envvar="COUNCIL_CLI",
        help="Executable used by the cli backend",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging to stderr"),
):
    """Analyze TASK with a council of lens-constrained advisors."""
    configure_logging(verbose)

    if install:
        _install()
        return

    if list_lenses:
        _print_lenses(LensRegistry())
        return

    try:
        task = validate_task(task)
        validate_run_options(num, timeout, backend)
    except UsageError as e:
        err_console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        err_console.print("\nUsage: council [OPTIONS] TASK")
        err_console.print("       council --install")
        err_console.print("\nFor more information try '--help'")
        raise typer.Exit(1)

    executor = build_executor(ExecutorConfig(backend=backend, cli_path=cli_path))
    try:
        executor.check_available()
    except CapabilityUnavailable as e:
        err_console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        if backend == "cli":
            err_console.print("\nPlease install Claude Code first:")
            err_console.print("  https://docs.anthropic.com/claude/docs/claude-code")
        raise typer.Exit(1)

    run_task = RunTask(
        content=task,
        config=CouncilConfig(
            num_members=num,
            timeout_seconds=timeout,
            model=model,
            synthesize=not no_synthesize,
            show_all=show_all,
        ),
    )

    try:
        asyncio.run(run_council(executor, run_task))
    except KeyboardInterrupt:
        err_console.print("\n[bold red]Interrupted.[/bold red] Council members terminated.")
        raise typer.Exit(130)


async def run_council(
    executor: ExecutorProtocol,
    run_task: RunTask,
    registry: LensRegistry | None = None,
    status_interval: float = STATUS_INTERVAL_SECONDS,
) -> CouncilResult:
    """Run one council with live progress and print the report.

    While members are still out, a status line is printed every
    ``status_interval`` seconds.
    """
    completed: list[int] = []

    def on_complete(member: MemberResult) -> None:
        completed.append(member.slot)
        _print_completed(member)

    council = Council(
        executor=executor,
        registry=registry,
        on_dispatch=_print_spawned,
        on_complete=on_complete,
    )
    selection = council.select(run_task)
    _print_header(run_task, selection)

    status = asyncio.create_task(
        _report_status(completed, len(selection), time.monotonic(), status_interval)
    )
    try:
        result = await council.run(run_task, selection=selection)
    finally:
        status.cancel()
        await asyncio.gather(status, return_exceptions=True)

    _print_report(result)
    return result


async def _report_status(
    completed: list[int], total: int, start: float, interval: float
) -> None:
    """Print "Still analyzing..." every ``interval`` seconds until all members report."""
    while True:
        await asyncio.sleep(interval)
        if len(completed) >= total:
            return
        elapsed = int(time.monotonic() - start)
        console.print(
            f"[blue]Still analyzing...[/blue] ({len(completed)}/{total} completed, "
            f"{elapsed // 60}m {elapsed % 60}s elapsed)"
        )


# =============================================================================
# PRESENTATION
# =============================================================================


def _print_header(run_task: RunTask, selection: list[Lens]) -> None:
    config = run_task.config
    console.print()
    console.print(Rule("[bold green]COUNCIL[/bold green]", style="green"))
    console.print(f"  [cyan]Members:[/cyan] {len(selection)}")
    console.print(f"  [cyan]Timeout:[/cyan] {config.timeout_seconds}s per member")
    if config.model:
        console.print(f"  [cyan]Model:[/cyan] {escape(config.model)}")
    console.print(f"  [cyan]Synthesize:[/cyan] {'yes' if config.synthesize else 'no'}")
    console.print(f"  [cyan]Task:[/cyan] {escape(run_task.content[:50])}")
    console.print()

    table = Table(title="Member Assignments")
    table.add_column("Member", style="bold")
    table.add_column("Lens", style="blue")
    table.add_column("")
    for slot, lens in enumerate(selection):
        marker = "[yellow]mandatory[/yellow]" if lens.mandatory else ""
        table.add_row(f"#{slot + 1}", lens.name.upper(), marker)
    console.print(table)
    console.print(Rule(style="green"))


def _print_spawned(slot: int, lens: Lens) -> None:
    console.print(f"[yellow]Spawning[/yellow]  Member #{slot + 1}: [blue]{lens.name.upper()}[/blue]")


def _print_completed(member: MemberResult) -> None:
    if member.failed:
        console.print(
            f"[red]Failed[/red]    Member #{member.member_number}: "
            f"[blue]{member.lens_name.upper()}[/blue] ({escape(member.error or '')})"
        )
    else:
        console.print(
            f"[green]Completed[/green] Member #{member.member_number}: "
            f"[blue]{member.lens_name.upper()}[/blue] ({member.duration_seconds:.1f}s)"
        )


def _print_report(result: CouncilResult) -> None:
    config = result.task.config
    console.print()
    console.print(Rule(
        f"[bold green]ALL {len(result.members)} MEMBERS COMPLETED "
        f"({result.member_seconds:.1f}s)[/bold green]",
        style="green",
    ))
    failed = len(result.failed_members)
    if failed:
        console.print(f"[yellow]{failed} out of {len(result.members)} members failed[/yellow]")

    if config.show_all or not config.synthesize:
        for member in result.members:
            console.print()
            console.print(Rule(
                f"[bold blue]MEMBER #{member.member_number}: {member.lens_name.upper()}[/bold blue]",
                style="blue",
            ))
            console.print(member.text, markup=False, highlight=False)

    if result.synthesis is None:
        console.print(Rule("[bold green]END OF COUNCIL[/bold green]", style="green"))
        return

    console.print()
    console.print(Rule("[bold magenta]SYNTHESIS & RECOMMENDATIONS[/bold magenta]", style="magenta"))
    if result.synthesis.succeeded:
        console.print(result.synthesis.text, markup=False, highlight=False)
    else:
        console.print(f"[red]{escape(f'[Synthesis failed: {result.synthesis.error}]')}[/red]")

    console.print(Rule(
        f"[bold green]TOTAL TIME: {result.total_seconds:.1f}s "
        f"(members: {result.member_seconds:.1f}s, "
        f"synthesis: {result.synthesis_seconds:.1f}s)[/bold green]",
        style="green",
    ))


def _print_lenses(registry: LensRegistry) -> None:
    table = Table(title=f"Lens Catalog ({len(registry)} lenses)")
    table.add_column("Lens", style="bold")
    table.add_column("Mandatory")
    table.add_column("Constraint")
    for lens in registry.lenses:
        constraint = lens.prompt.split("\n", 1)[0].removeprefix("CONSTRAINT: ")
        table.add_row(lens.name, "yes" if lens.mandatory else "", escape(constraint))
    console.print(table)


# =============================================================================
# INSTALL
# =============================================================================


def _install() -> None:
    try:
        path = install_launcher()
    except InstallError as e:
        err_console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)

    console.print("[green]Installing council...[/green]")
    console.print(f"  Target: {path}")
    console.print("\n[bold green]Successfully installed![/bold green]")
    console.print('\nRun: [cyan]council[/cyan] "your task"')
    if not is_on_path(path.parent):
        console.print("\n[yellow]Note:[/yellow]")
        console.print(f"  {path.parent} is not in your PATH. Add this to your ~/.bashrc or ~/.zshrc:")
        console.print(f'    export PATH="{path.parent}:$PATH"')


if __name__ == "__main__":
    app()
