"""User notification sink.

Services report user-facing outcomes as ``(message, severity)`` events.
How they are shown (toast, console, log line) is up to the host.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Protocol

import structlog

logger = structlog.get_logger()


class Severity(str, Enum):
    """Notification severity, matching the UI's toast variants."""

    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    """A single user-facing message."""

    message: str
    severity: Severity


class Notifier(Protocol):
    """Receives user-facing messages."""

    def notify(self, message: str, severity: Severity) -> None: ...


_LOG_METHODS = {
    Severity.ERROR: "error",
    Severity.WARNING: "warning",
}


class LoggingNotifier:
    """Notifier that writes every message to the structured log."""

    def notify(self, message: str, severity: Severity) -> None:
        log = getattr(logger, _LOG_METHODS.get(severity, "info"))
        log("User notification", message=message, severity=severity.value)


class InMemoryNotifier:
    """Notifier that records messages, for hosts that render them later."""

    def __init__(self) -> None:
        self.notifications: list[Notification] = []

    def notify(self, message: str, severity: Severity) -> None:
        self.notifications.append(Notification(message=message, severity=severity))

    @property
    def messages(self) -> list[str]:
        return [n.message for n in self.notifications]

    @property
    def last(self) -> Notification | None:
        return self.notifications[-1] if self.notifications else None

    def clear(self) -> None:
        self.notifications.clear()
