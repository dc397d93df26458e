from __future__ import annotations

import logging
from collections import deque
from typing import Protocol

from mixpoint.core.config import settings
from mixpoint.core.errors import StorageError

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def notify(self, message: str) -> None:
        ...


class LoggingNotifier:
    """
    Sends user-facing messages to the `mixpoint.notifications` logger at INFO;
    the failure itself is logged at ERROR by whoever raised the notice.
    """

    def __init__(self):
        self.logger = logging.getLogger("mixpoint.notifications")

    def notify(self, message: str) -> None:
        self.logger.info(message)


class NotificationQueue:
    """
    Toast channel for the UI: messages wait here until the client drains them.
    Oldest messages are dropped once `maxlen` is reached.
    """

    def __init__(self, maxlen: int | None = None):
        self._messages: deque[str] = deque(maxlen=maxlen or settings.NOTIFICATION_BACKLOG)

    def notify(self, message: str) -> None:
        self._messages.append(message)

    def drain(self) -> list[str]:
        out = list(self._messages)
        self._messages.clear()
        return out

    def __len__(self) -> int:
        return len(self._messages)


def surface_storage_error(notifier: Notifier, operation: str, exc: Exception) -> StorageError:
    """Wrap a persistence failure, log it and report it once to the user."""
    err = StorageError("storage operation failed", operation=operation, details=str(exc))
    logger.error("%s failed: %s", operation, exc)
    notifier.notify(f"Oops, there was a problem: {err}")
    return err
