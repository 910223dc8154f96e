"""
Cooperative cancellation.

The engine accepts any object with an ``is_set()`` method as a cancellation
signal (``asyncio.Event``, ``threading.Event`` or ``CancellationToken``).
"""

import logging
import threading
from typing import Optional, Protocol

from agriterra.core.errors import AnalysisCancelledError

logger = logging.getLogger(__name__)


class CancelSignal(Protocol):
    """Anything that can report whether cancellation was requested."""

    def is_set(self) -> bool: ...


class CancellationToken:
    """
    Thread-safe cancellation flag.

    Usage:
        token = CancellationToken()
        task = asyncio.create_task(engine.analyze_area(polygon, cancel=token))
        token.cancel("user aborted")
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self.reason: Optional[str] = None

    def cancel(self, reason: Optional[str] = None) -> None:
        """Request cancellation."""
        self.reason = reason
        self._event.set()

    def is_set(self) -> bool:
        """Whether cancellation was requested."""
        return self._event.is_set()


def check_cancelled(cancel: Optional[CancelSignal], stage: str) -> None:
    """
    Raise if cancellation was requested.

    Args:
        cancel: Cancellation signal, or None when the call is not cancellable
        stage: Pipeline stage name reported in the error

    Raises:
        AnalysisCancelledError: If the signal is set
    """
    if cancel is not None and cancel.is_set():
        logger.info(f"Cancellation observed during {stage}")
        raise AnalysisCancelledError(f"Analysis was cancelled during {stage}", stage=stage)
