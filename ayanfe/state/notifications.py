"""
Notifications
User-facing toast messages raised by the state managers.

The managers only append here; a frontend subscribes with on_notify() and
decides how to show them (the Streamlit page forwards them to st.toast).
"""

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, Dict, List, Any


class NotificationVariant(str, Enum):
    """Visual weight of a notification"""
    DEFAULT = "default"
    DESTRUCTIVE = "destructive"

    @property
    def icon(self) -> str:
        return "⚠️" if self is NotificationVariant.DESTRUCTIVE else "✅"


@dataclass
class Notification:
    title: str
    description: str = ""
    variant: NotificationVariant = NotificationVariant.DEFAULT
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def is_error(self) -> bool:
        return self.variant is NotificationVariant.DESTRUCTIVE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "variant": self.variant.value,
            "timestamp": self.timestamp.isoformat(),
        }


class Notifier:
    """
    Bounded notification history with subscribers.

    Usage:
        notifier = Notifier()
        notifier.on_notify(lambda n: print(n.title))
        notifier.success("Badge updated")
        notifier.error("Update failed", "Server error")
    """

    def __init__(self, history_size: int = 50):
        self._history: deque = deque(maxlen=history_size)
        self._callbacks: List[Callable[[Notification], None]] = []

    def notify(
        self,
        title: str,
        description: str = "",
        variant: NotificationVariant = NotificationVariant.DEFAULT,
    ) -> Notification:
        notification = Notification(title=title, description=description, variant=variant)
        self._history.append(notification)
        for callback in self._callbacks:
            callback(notification)
        return notification

    def success(self, title: str, description: str = "") -> Notification:
        return self.notify(title, description, NotificationVariant.DEFAULT)

    def error(self, title: str, description: str = "") -> Notification:
        return self.notify(title, description, NotificationVariant.DESTRUCTIVE)

    def on_notify(self, callback: Callable[[Notification], None]) -> None:
        self._callbacks.append(callback)

    @property
    def history(self) -> List[Notification]:
        """Notifications, oldest first"""
        return list(self._history)

    @property
    def latest(self):
        return self._history[-1] if self._history else None

    def errors(self) -> List[Notification]:
        return [n for n in self._history if n.is_error]

    def clear(self) -> None:
        self._history.clear()
