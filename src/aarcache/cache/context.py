"""Per-pass sync context: cancellation signal and user-facing output."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


@dataclass
class SyncContext:
    """Carries cancellation state and output lines for one sync pass."""

    cancel_event: threading.Event = field(default_factory=threading.Event)
    messages: list[str] = field(default_factory=list)
    cancelled: bool = False

    @property
    def cancel_requested(self) -> bool:
        return self.cancel_event.is_set()

    def request_cancel(self) -> None:
        """Ask in-progress waits to stop; dispatched tasks keep running."""
        self.cancel_event.set()

    def set_cancelled(self) -> None:
        self.cancelled = True

    def output(self, message: str) -> None:
        self.messages.append(message)
        logger.info(message)
