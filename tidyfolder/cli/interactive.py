"""
Interactive menu for tidyfolder.

Scans, executions and undo run on a background worker; the menu loop is the
only place that touches the session state, updating it from the worker's
result messages.
"""

import logging
import threading
from collections import deque
from pathlib import Path
from typing import Deque, List, Optional

from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table

from ..analysis.scanner import PlanScanner
from ..core.exceptions import ConfigError
from ..core.settings import OrganizerSettings, get_settings
from ..core.types import Action, Config
from ..core.worker import BackgroundOperation, OperationKind, OperationMessage
from ..organization.executor import ExecutionSummary, PlanExecutor, UndoResult
from ..shared.file_utils import LOG_DATE_FORMAT, setup_logging
from ..version import __version__
from .display import (
    console,
    display_execution_summary,
    display_plan,
    display_undo_result,
    plan_table,
    wait_for,
)
from .main import load_organizer_config, resolve_target

logger = logging.getLogger(__name__)


class RecentLogHandler(logging.Handler):
    """Keep the most recent formatted log lines in memory."""

    def __init__(self, capacity: int = 100):
        super().__init__()
        self._lines: Deque[str] = deque(maxlen=capacity)
        self._lines_lock = threading.Lock()
        self.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(message)s", LOG_DATE_FORMAT)
        )

    def emit(self, record: logging.LogRecord) -> None:
        try:
            line = self.format(record)
        except Exception:
            self.handleError(record)
            return
        with self._lines_lock:
            self._lines.append(line)

    def lines(self) -> List[str]:
        with self._lines_lock:
            return list(self._lines)


def parse_selection(text: str, count: int) -> List[int]:
    """
    Parse a list of 1-based action numbers and ranges.

    Accepts entries like ``3``, ``1 4 7`` and ``2-5``, separated by spaces or
    commas. Numbers outside 1..count are ignored.

    Returns:
        Sorted 0-based indices
    """
    indices = set()
    for token in text.replace(",", " ").split():
        if "-" in token:
            start_text, _, end_text = token.partition("-")
            if not (start_text.isdigit() and end_text.isdigit()):
                continue
            start, end = int(start_text), int(end_text)
            if start > end:
                start, end = end, start
            numbers = range(start, end + 1)
        elif token.isdigit():
            numbers = range(int(token), int(token) + 1)
        else:
            continue

        indices.update(n - 1 for n in numbers if 1 <= n <= count)

    return sorted(indices)


class InteractiveSession:
    """State of one interactive session."""

    def __init__(
        self,
        config: Config,
        target_dir: Path,
        settings: OrganizerSettings,
        log_handler: Optional[RecentLogHandler] = None,
    ):
        self.config = config
        self.target_dir = target_dir
        self.settings = settings
        self.log_handler = log_handler
        self.scanner = PlanScanner(
            config, chunk_size=settings.chunk_size, max_workers=settings.max_workers
        )
        self.executor = PlanExecutor(settings.journal_file)
        self.operation = BackgroundOperation()

        self.plan: List[Action] = []
        self.selected: List[bool] = []
        self.status = "Ready. Scan to build a plan."

    @property
    def selected_actions(self) -> List[Action]:
        return [action for action, keep in zip(self.plan, self.selected) if keep]

    def handle_message(self, message: OperationMessage) -> None:
        """Apply a finished background operation to the session state."""
        if not message.ok:
            self.status = f"{message.kind.value.capitalize()} failed: {message.error}"
            return

        if message.kind == OperationKind.SCAN:
            self.plan = list(message.result)
            self.selected = [True] * len(self.plan)
            if message.cancelled:
                self.status = f"Scan cancelled. {len(self.plan)} actions found before stop."
            elif self.plan:
                self.status = f"Scan complete. {len(self.plan)} actions proposed."
            else:
                self.status = "Scan complete. No actions proposed."

        elif message.kind == OperationKind.EXECUTE:
            summary: Optional[ExecutionSummary] = self.executor.last_summary
            moved = summary.moved if summary else len(message.result)
            failed = summary.failed if summary else 0
            prefix = "Execution cancelled" if message.cancelled else "Execution complete"
            self.status = f"{prefix}. Moved {moved}, failed {failed}."
            # The plan refers to the old layout; a fresh scan is needed
            self.plan = []
            self.selected = []

        elif message.kind == OperationKind.UNDO:
            result: UndoResult = message.result
            self.status = (
                f"Undo finished. Restored {result.restored}, failed {result.failed}."
            )
            self.plan = []
            self.selected = []

    def toggle(self, indices: List[int]) -> None:
        for index in indices:
            self.selected[index] = not self.selected[index]

    def select_all(self, value: bool) -> None:
        self.selected = [value] * len(self.plan)

    def run_scan(self) -> None:
        message = wait_for(
            self.operation,
            OperationKind.SCAN,
            lambda token: self.scanner.generate_plan(self.target_dir, token),
            console.status(f"Scanning {self.target_dir}... (Ctrl-C to cancel)"),
        )
        self.handle_message(message)
        display_plan(self.plan, self.target_dir)

    def run_execute(self) -> None:
        actions = self.selected_actions
        if not actions:
            console.print("[yellow]No actions selected.[/yellow]")
            return
        if not Confirm.ask(f"Move {len(actions)} items?", default=False):
            return

        message = wait_for(
            self.operation,
            OperationKind.EXECUTE,
            lambda token: self.executor.execute(actions, token),
            console.status("Moving files... (Ctrl-C to cancel)"),
        )
        self.handle_message(message)
        if self.executor.last_summary is not None:
            display_execution_summary(self.executor.last_summary)

    def run_undo(self) -> None:
        if not Confirm.ask("Undo the last run?", default=False):
            return
        message = wait_for(
            self.operation,
            OperationKind.UNDO,
            lambda token: self.executor.undo(),
            console.status("Undoing last run..."),
        )
        self.handle_message(message)
        if message.ok:
            display_undo_result(message.result)

    def review_plan(self) -> None:
        """Show the plan and let the user toggle individual actions."""
        if not self.plan:
            console.print("[yellow]No plan yet. Run a scan first.[/yellow]")
            return

        while True:
            console.print(plan_table(self.plan, self.target_dir, self.selected))
            answer = Prompt.ask(
                "Toggle numbers (e.g. 1 3 5-8), [bold]a[/bold]ll, [bold]n[/bold]one, "
                "or Enter when done",
                default="",
            ).strip().lower()

            if not answer:
                return
            if answer == "a":
                self.select_all(True)
            elif answer == "n":
                self.select_all(False)
            else:
                self.toggle(parse_selection(answer, len(self.plan)))

    def show_log(self) -> None:
        if self.log_handler is None:
            return
        lines = self.log_handler.lines()
        if not lines:
            console.print("[dim]No log messages yet.[/dim]")
            return
        console.print(Panel("\n".join(lines), title="Recent log", border_style="dim"))


def print_banner() -> None:
    """Print the application banner."""
    console.print(
        Panel(
            f"[bold cyan]tidyfolder v{__version__}[/bold cyan]\n"
            "Sort a cluttered folder into category subfolders",
            border_style="cyan",
        )
    )


def print_menu(session: InteractiveSession) -> None:
    """Print the main menu."""
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Option", style="bold cyan", width=5)
    table.add_column("Action", style="bold")
    table.add_column("Description")

    selected = sum(session.selected)
    table.add_row("1", "Scan", f"Build a plan for {session.target_dir}")
    table.add_row("2", "Review plan", f"{selected}/{len(session.plan)} actions selected")
    table.add_row("3", "Apply", "Move the selected items")
    table.add_row("4", "Undo", "Revert the last run from its journal")
    table.add_row("5", "Show log", "Recent log messages")
    table.add_row("0", "Exit", "Quit the application")

    console.print(Panel(table, title="Main Menu", border_style="cyan"))
    console.print(f"[dim]{session.status}[/dim]")


def interactive_mode(
    target: Optional[Path] = None,
    config_path: Optional[Path] = None,
    journal_path: Optional[Path] = None,
) -> None:
    """
    Run the interactive CLI mode.

    Args:
        target: Directory to organize, the Downloads folder by default
        config_path: Explicit config file, or None to search default locations
        journal_path: Journal file overriding the configured one
    """
    settings = get_settings()
    if journal_path is not None:
        settings.journal_file = journal_path
    setup_logging(log_file=settings.log_file)

    # Console output is shown through the log panel instead
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if type(handler) is logging.StreamHandler:
            root_logger.removeHandler(handler)
    log_handler = RecentLogHandler(settings.log_buffer_size)
    root_logger.addHandler(log_handler)

    print_banner()

    try:
        config, loaded_from = load_organizer_config(config_path, settings)
        target_dir = resolve_target(target)
    except ConfigError as e:
        console.print(f"[red]✗ {e}[/red]")
        return

    console.print(f"[dim]Config: {loaded_from}[/dim]")
    session = InteractiveSession(config, target_dir, settings, log_handler)

    while True:
        console.print()
        print_menu(session)
        console.print()

        try:
            choice = Prompt.ask(
                "Select an option",
                choices=["0", "1", "2", "3", "4", "5"],
                default="0",
            )

            if choice == "0":
                console.print("\n[cyan]Goodbye![/cyan]")
                break
            elif choice == "1":
                session.run_scan()
            elif choice == "2":
                session.review_plan()
            elif choice == "3":
                session.run_execute()
            elif choice == "4":
                session.run_undo()
            elif choice == "5":
                session.show_log()

        except KeyboardInterrupt:
            console.print("\n\n[cyan]Goodbye![/cyan]")
            break
        except Exception as e:
            logger.error(f"Unexpected error: {e}")
            console.print(f"\n[red]Unexpected error: {e}[/red]")
            if not Confirm.ask("Continue?", default=True):
                break
