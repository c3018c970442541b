"""
Main CLI entry point for tidyfolder.

Without a subcommand the interactive menu is started.
"""

import sys
from pathlib import Path
from typing import List, Optional, Tuple

import click
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn

from ..analysis.scanner import PlanScanner
from ..core.config import default_config_search_paths, find_config, load_config
from ..core.exceptions import ConfigError
from ..core.settings import OrganizerSettings, get_settings
from ..core.types import Action, Config
from ..core.worker import BackgroundOperation, OperationKind
from ..organization.executor import PlanExecutor, undo as undo_journal
from ..shared.file_utils import setup_logging
from ..shared.user_dirs import resolve_default_target_directory
from ..version import __version__
from .display import (
    console,
    display_execution_summary,
    display_plan,
    display_undo_result,
    wait_for,
)


def load_organizer_config(
    config_path: Optional[Path], settings: OrganizerSettings
) -> Tuple[Config, Path]:
    """
    Load the configuration given on the command line, or search for one.

    Args:
        config_path: Explicit config file, or None to search default locations
        settings: Application settings

    Returns:
        Tuple of (config, path it was loaded from)

    Raises:
        ConfigError: If no configuration could be loaded
    """
    if config_path is not None:
        config = load_config(config_path)
        if config is None:
            raise ConfigError(f"Could not load configuration from {config_path}")
        return config, config_path

    found = find_config(default_config_search_paths(settings.config_filename))
    if found is None:
        raise ConfigError("No usable configuration file found")
    return found


def resolve_target(target: Optional[Path]) -> Path:
    """
    Resolve the directory to organize.

    Raises:
        ConfigError: If no target can be determined or it is not a directory
    """
    if target is None:
        target = resolve_default_target_directory()
        if target is None:
            raise ConfigError("Could not determine the default Downloads directory")

    target = Path(target).expanduser()
    if not target.is_dir():
        raise ConfigError(f"Target directory does not exist: {target}")
    return target.resolve()


def _prepare(
    target: Optional[Path],
    config_path: Optional[Path],
    verbose: bool,
    quiet: bool,
) -> Tuple[OrganizerSettings, Config, Path]:
    settings = get_settings()
    setup_logging(verbose=verbose, quiet=quiet, log_file=settings.log_file)

    try:
        config, loaded_from = load_organizer_config(config_path, settings)
        target_dir = resolve_target(target)
    except ConfigError as e:
        console.print(f"[red]✗ {e}[/red]")
        sys.exit(1)

    console.print(f"[dim]Config: {loaded_from}[/dim]")
    console.print(f"[dim]Target: {target_dir}[/dim]")
    return settings, config, target_dir


def _scan(
    operation: BackgroundOperation,
    scanner: PlanScanner,
    target_dir: Path,
) -> Tuple[List[Action], bool]:
    """Scan in the background; returns the plan and whether it was cancelled."""
    message = wait_for(
        operation,
        OperationKind.SCAN,
        lambda token: scanner.generate_plan(target_dir, token),
        console.status(f"Scanning {target_dir}..."),
    )
    if not message.ok:
        console.print(f"[red]✗ Scan failed: {message.error}[/red]")
        sys.exit(1)
    return message.result, message.cancelled


target_argument = click.argument(
    "target",
    required=False,
    type=click.Path(file_okay=False, path_type=Path),
)
config_option = click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Configuration file (default: search working dir, user config, bundled)",
)
verbose_option = click.option(
    "-v", "--verbose", is_flag=True, default=False, help="Verbose output"
)
quiet_option = click.option(
    "-q", "--quiet", is_flag=True, default=False, help="Only show warnings and errors"
)
journal_option = click.option(
    "--journal",
    "journal_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Journal file (default: organizer_journal.json in the working dir)",
)


@click.group(invoke_without_command=True)
@click.option("--version", is_flag=True, help="Show version and exit")
@click.pass_context
def cli(ctx: click.Context, version: bool) -> None:
    """
    tidyfolder - sort a cluttered folder into category subfolders.

    Launches an interactive menu when no command is given.
    """
    if version:
        console.print(f"tidyfolder version {__version__}")
        sys.exit(0)

    if ctx.invoked_subcommand is None:
        from .interactive import interactive_mode

        interactive_mode()


@cli.command()
@target_argument
@config_option
@verbose_option
@quiet_option
def scan(
    target: Optional[Path],
    config_path: Optional[Path],
    verbose: bool,
    quiet: bool,
) -> None:
    """
    Preview the moves proposed for TARGET (default: Downloads).

    Nothing on disk is changed.
    """
    settings, config, target_dir = _prepare(target, config_path, verbose, quiet)
    scanner = PlanScanner(
        config, chunk_size=settings.chunk_size, max_workers=settings.max_workers
    )

    plan, cancelled = _scan(BackgroundOperation(), scanner, target_dir)
    if cancelled:
        console.print("[yellow]Scan cancelled; showing partial plan[/yellow]")
    display_plan(plan, target_dir)


@cli.command()
@target_argument
@config_option
@journal_option
@click.option(
    "--yes", "-y", is_flag=True, default=False, help="Apply without confirmation"
)
@verbose_option
@quiet_option
def apply(
    target: Optional[Path],
    config_path: Optional[Path],
    journal_path: Optional[Path],
    yes: bool,
    verbose: bool,
    quiet: bool,
) -> None:
    """
    Scan TARGET (default: Downloads) and apply the proposed moves.

    \b
    Examples:
        # Preview, confirm, then move
        tidyfolder apply ~/Downloads

        # Skip the confirmation prompt
        tidyfolder apply ~/Downloads --yes

        # Undo the last run
        tidyfolder undo
    """
    settings, config, target_dir = _prepare(target, config_path, verbose, quiet)
    scanner = PlanScanner(
        config, chunk_size=settings.chunk_size, max_workers=settings.max_workers
    )
    executor = PlanExecutor(journal_path or settings.journal_file)
    operation = BackgroundOperation()

    plan, cancelled = _scan(operation, scanner, target_dir)
    display_plan(plan, target_dir)
    if cancelled:
        console.print("[yellow]Scan cancelled; nothing applied[/yellow]")
        return
    if not plan:
        return

    if not yes and not click.confirm(f"Move {len(plan)} items?"):
        console.print("[yellow]Cancelled[/yellow]")
        return

    progress = Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
    )
    task_id = progress.add_task("Moving...", total=len(plan))

    def on_progress(done: int, total: int) -> None:
        progress.update(task_id, completed=done)

    message = wait_for(
        operation,
        OperationKind.EXECUTE,
        lambda token: executor.execute(plan, token, on_progress),
        progress,
    )
    if not message.ok or executor.last_summary is None:
        console.print(f"[red]✗ Execution failed: {message.error}[/red]")
        sys.exit(1)

    display_execution_summary(executor.last_summary)


@cli.command()
@journal_option
@verbose_option
@quiet_option
def undo(journal_path: Optional[Path], verbose: bool, quiet: bool) -> None:
    """Revert the moves recorded in the journal of the last run."""
    settings = get_settings()
    setup_logging(verbose=verbose, quiet=quiet, log_file=settings.log_file)

    result = undo_journal(journal_path or settings.journal_file)
    display_undo_result(result)
    if result.errors:
        sys.exit(1)


@cli.command()
@target_argument
@config_option
@journal_option
def interactive(
    target: Optional[Path],
    config_path: Optional[Path],
    journal_path: Optional[Path],
) -> None:
    """Start the interactive menu for TARGET (default: Downloads)."""
    from .interactive import interactive_mode

    interactive_mode(target, config_path, journal_path)


if __name__ == "__main__":
    cli()
