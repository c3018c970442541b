"""
Console rendering shared by the tidyfolder commands.
"""

from contextlib import AbstractContextManager
from pathlib import Path
from typing import List, Optional, Sequence

from rich.console import Console
from rich.table import Table

from ..core.types import Action
from ..core.worker import BackgroundOperation, Job, OperationKind, OperationMessage
from ..organization.executor import ExecutionSummary, UndoResult
from ..shared.file_utils import display_path

console = Console()

POLL_INTERVAL = 0.1
MAX_ERRORS_SHOWN = 10


def describe_action(action: Action, target_dir: Optional[Path] = None) -> str:
    """One-line description of an action for lists and prompts."""
    destination = action.to_path.parent
    if target_dir is not None:
        try:
            destination = destination.relative_to(target_dir)
        except ValueError:
            pass
    name = display_path(action.from_path.name)
    return f"Move '{name}' to '{display_path(destination)}'"


def plan_table(
    plan: Sequence[Action],
    target_dir: Optional[Path] = None,
    selected: Optional[Sequence[bool]] = None,
) -> Table:
    """
    Build a table of proposed actions.

    Args:
        plan: Actions to show
        target_dir: Base directory used to shorten destinations
        selected: Optional selection flags, one per action

    Returns:
        Rich table
    """
    table = Table(title=f"Proposed actions ({len(plan)})")
    table.add_column("#", style="dim", justify="right")
    if selected is not None:
        table.add_column("Apply", justify="center")
    table.add_column("Item", style="cyan")
    table.add_column("Category", style="green")
    table.add_column("Destination")

    for index, action in enumerate(plan, start=1):
        destination = action.to_path
        if target_dir is not None:
            try:
                destination = destination.relative_to(target_dir)
            except ValueError:
                pass

        row: List[str] = [str(index)]
        if selected is not None:
            row.append("[green]✓[/green]" if selected[index - 1] else "[dim]·[/dim]")
        row.extend(
            [display_path(action.from_path.name), action.reason, display_path(destination)]
        )
        table.add_row(*row)

    return table


def display_plan(plan: Sequence[Action], target_dir: Optional[Path] = None) -> None:
    """Print the plan, or a note when it is empty."""
    if not plan:
        console.print("[green]Scan complete. No actions proposed.[/green]")
        return
    console.print(plan_table(plan, target_dir))


def _print_errors(errors: Sequence[str]) -> None:
    if not errors:
        return
    console.print("\n[red]Errors:[/red]")
    for error in errors[:MAX_ERRORS_SHOWN]:
        console.print(f"  [red]• {error}[/red]")
    if len(errors) > MAX_ERRORS_SHOWN:
        console.print(f"  [dim]... and {len(errors) - MAX_ERRORS_SHOWN} more[/dim]")


def display_execution_summary(summary: ExecutionSummary) -> None:
    """Print the result of an execution run."""
    title = "Execution cancelled" if summary.cancelled else "Execution complete"
    table = Table(title=title)
    table.add_column("Metric", style="cyan")
    table.add_column("Count", style="green", justify="right")

    table.add_row("Attempted", str(summary.attempted))
    table.add_row("Moved", str(summary.moved))
    table.add_row("Renamed on collision", str(summary.renamed))
    table.add_row("Failed", str(summary.failed))

    console.print(table)
    _print_errors(summary.errors)

    if summary.journal_path is not None:
        console.print(f"\n[dim]Journal saved to {summary.journal_path}[/dim]")
        console.print("[dim]You can undo this run with:[/dim]")
        console.print(f"[dim]  tidyfolder undo --journal {summary.journal_path}[/dim]")


def display_undo_result(result: UndoResult) -> None:
    """Print the result of an undo pass."""
    if not result.journal_found:
        console.print("[yellow]No journal file found. Nothing to undo.[/yellow]")
        return
    if result.total == 0 and result.errors:
        console.print("[red]✗ Journal could not be read[/red]")
        _print_errors(result.errors)
        return

    table = Table(title="Undo")
    table.add_column("Metric", style="cyan")
    table.add_column("Count", style="green", justify="right")
    table.add_row("Journaled moves", str(result.total))
    table.add_row("Restored", str(result.restored))
    table.add_row("Failed", str(result.failed))
    console.print(table)
    _print_errors(result.errors)


def wait_for(
    operation: BackgroundOperation,
    kind: OperationKind,
    job: Job,
    live: AbstractContextManager,
) -> OperationMessage:
    """
    Run a job in the background and wait for its result.

    Ctrl-C requests cancellation and keeps waiting for the partial result.

    Args:
        operation: Background runner
        kind: Kind of operation
        job: Job callable
        live: Rich status or progress display shown while waiting

    Returns:
        Result message of the job
    """
    operation.start(kind, job)
    with live:
        while True:
            try:
                message = operation.poll(timeout=POLL_INTERVAL)
            except KeyboardInterrupt:
                if operation.cancel():
                    console.print("[yellow]Cancelling... finishing current step[/yellow]")
                continue
            if message is not None:
                return message
