"""Cooperative cancellation for long-running scans and executions."""

import threading
from typing import Optional


class CancellationToken:
    """
    Shared cancel flag polled at coarse boundaries.

    Scans check it before each chunk and executions before each action.
    Nothing already started is interrupted, and work completed before the
    flag was observed is always kept.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        """Request cancellation."""
        self._event.set()

    @property
    def cancelled(self) -> bool:
        """True once cancellation has been requested."""
        return self._event.is_set()

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self.cancelled})"


def is_cancelled(token: Optional[CancellationToken]) -> bool:
    """Check an optional token."""
    return token is not None and token.cancelled
