"""
Observable session state, notification sinks and cancellation tokens.

Components publish discrete state changes to a ``StateStore`` and hand
user-facing messages to a ``NotificationSink``; binding either to a UI is
the caller's concern.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Protocol

from .logger import StructuredLogger, get_logger
from .models import Notification


@dataclass(frozen=True)
class StateChange:
    key: str
    old: Any
    new: Any


Subscriber = Callable[[StateChange], None]


class StateStore:
    """Key/value state with subscribe/notify semantics."""

    def __init__(self, logger: Optional[StructuredLogger] = None):
        self._values: Dict[str, Any] = {}
        self._subscribers: List[Subscriber] = []
        self._logger = logger or get_logger()

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def snapshot(self) -> Dict[str, Any]:
        return dict(self._values)

    def set(self, key: str, value: Any) -> bool:
        """Store ``value`` and notify subscribers. Returns False if unchanged."""
        old = self._values.get(key)
        if key in self._values and old == value:
            return False
        self._values[key] = value
        change = StateChange(key=key, old=old, new=value)
        for callback in list(self._subscribers):
            try:
                callback(change)
            except Exception as e:
                # Subscriber failures are logged, never propagated
                self._logger.error(
                    "State subscriber failed",
                    key=key,
                    error=str(e),
                    error_type=type(e).__name__,
                )
        return True

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register ``callback``; returns a function that unregisters it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe


class NotificationSink(Protocol):
    def notify(self, notification: Notification) -> None:
        ...


class CollectingSink:
    """Keeps every notification in order."""

    def __init__(self):
        self.notifications: List[Notification] = []

    def notify(self, notification: Notification) -> None:
        self.notifications.append(notification)

    @property
    def titles(self) -> List[str]:
        return [n.title for n in self.notifications]

    def clear(self) -> None:
        self.notifications.clear()


class LoggingSink:
    """Writes notifications through the structured logger."""

    def __init__(self, logger: Optional[StructuredLogger] = None):
        self._logger = logger or get_logger()

    def notify(self, notification: Notification) -> None:
        self._logger.info(notification.title, message=notification.message)


class CancellationToken:
    """
    Liveness flag shared by a session and its deferred callbacks.

    Callbacks check ``cancelled`` before touching session state; cancelling
    never interrupts work already scheduled.
    """

    def __init__(self):
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True
