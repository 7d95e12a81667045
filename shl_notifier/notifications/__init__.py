"""Push notification rendering, transport and dispatch."""

from .notifier import NotificationResult, Notifier, Outcome
from .transport import (
    ApnsTransport,
    LoggingTransport,
    Notification,
    NotificationTransport,
    SendResult,
    TransportError,
)

__all__ = [
    "ApnsTransport",
    "LoggingTransport",
    "Notification",
    "NotificationResult",
    "NotificationTransport",
    "Notifier",
    "Outcome",
    "SendResult",
    "TransportError",
]
