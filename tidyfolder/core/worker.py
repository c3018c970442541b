"""
Background execution of scan, execute and undo jobs.

A job runs on a worker thread that owns its inputs and reports back with a
single ``OperationMessage`` on a queue. The consuming side (the interactive
session loop) drains the queue and owns all mutable session state.
"""

import logging
import queue
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from .cancellation import CancellationToken
from .exceptions import OperationInProgressError

logger = logging.getLogger(__name__)


class OperationKind(str, Enum):
    """Kind of background operation."""

    SCAN = "scan"
    EXECUTE = "execute"
    UNDO = "undo"


@dataclass
class OperationMessage:
    """Result posted by a finished background operation."""

    kind: OperationKind
    result: Any = None
    error: Optional[str] = None
    cancelled: bool = False

    @property
    def ok(self) -> bool:
        """True if the job returned normally (possibly after cancellation)."""
        return self.error is None


Job = Callable[[CancellationToken], Any]


class BackgroundOperation:
    """Run at most one job at a time on a worker thread."""

    def __init__(self) -> None:
        self._messages: "queue.Queue[OperationMessage]" = queue.Queue()
        self._state_lock = threading.Lock()
        self._in_progress = False
        self._token: Optional[CancellationToken] = None
        self._thread: Optional[threading.Thread] = None

    @property
    def in_progress(self) -> bool:
        """True while a job is running."""
        with self._state_lock:
            return self._in_progress

    def start(self, kind: OperationKind, job: Job) -> CancellationToken:
        """
        Start a job on a new worker thread.

        Args:
            kind: Kind of operation, echoed in the result message
            job: Callable receiving the cancellation token for this run

        Returns:
            Token that cancels this run

        Raises:
            OperationInProgressError: If another job is still running
        """
        with self._state_lock:
            if self._in_progress:
                raise OperationInProgressError("An operation is already in progress")
            self._in_progress = True
            token = CancellationToken()
            self._token = token

        thread = threading.Thread(
            target=self._run,
            args=(kind, job, token),
            name=f"tidyfolder-{kind.value}",
            daemon=True,
        )
        self._thread = thread
        thread.start()
        return token

    def _run(self, kind: OperationKind, job: Job, token: CancellationToken) -> None:
        # Replaced below unless the job dies with a non-Exception such as SystemExit
        message = OperationMessage(kind=kind, error="Operation interrupted")
        try:
            message = OperationMessage(kind=kind, result=job(token), cancelled=token.cancelled)
        except Exception as e:
            logger.error(f"CRITICAL ERROR in {kind.value} operation: {e}")
            message = OperationMessage(kind=kind, error=str(e), cancelled=token.cancelled)
        finally:
            with self._state_lock:
                self._in_progress = False
                self._token = None
            self._messages.put(message)

    def cancel(self) -> bool:
        """
        Request cancellation of the running job.

        Returns:
            True if a job was running
        """
        with self._state_lock:
            token = self._token
        if token is None:
            return False
        token.cancel()
        return True

    def poll(self, timeout: Optional[float] = None) -> Optional[OperationMessage]:
        """
        Take the next result message.

        Args:
            timeout: Seconds to wait; None returns immediately

        Returns:
            Message, or None if none arrived
        """
        try:
            if timeout is None:
                return self._messages.get_nowait()
            return self._messages.get(timeout=timeout)
        except queue.Empty:
            return None

    def join(self, timeout: Optional[float] = None) -> None:
        """Wait for the worker thread to finish."""
        if self._thread is not None:
            self._thread.join(timeout)
