"""Notification records emitted by the registry about its own state changes."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

# Error codes carried by NotificationKind.ERROR notifications
ERROR_UNKNOWN_TOPIC = "UNKNOWN_TOPIC"
ERROR_CAPACITY_EXCEEDED = "CAPACITY_EXCEEDED"

UNKNOWN_TOPIC_MESSAGE = "Unknown topic."
CAPACITY_EXCEEDED_MESSAGE = "Maximum number of subscribers exceeded."


class NotificationKind(str, Enum):
    """Kinds of registry mutation an observer can listen for."""

    ADD = "add"
    REMOVE = "remove"
    SUBSCRIBE = "subscribe"
    UNSUBSCRIBE = "unsubscribe"
    LIST = "list"
    UNLIST = "unlist"
    PUBLISH = "publish"
    BROADCAST = "broadcast"
    ERROR = "error"
    ALL = "*"


@dataclass(frozen=True)
class Notification:
    """A single registry mutation. Not retained after delivery."""

    kind: NotificationKind
    topic: Optional[str] = None
    data: Any = None
    code: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.kind is NotificationKind.ERROR

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for logging; listener handles are rendered with repr()."""
        data = self.data
        if callable(data):
            data = repr(data)
        out: Dict[str, Any] = {"kind": self.kind.value, "topic": self.topic, "data": data}
        if self.code is not None:
            out["code"] = self.code
        return out


def unknown_topic(topic: str) -> Notification:
    return Notification(
        NotificationKind.ERROR, topic, UNKNOWN_TOPIC_MESSAGE, ERROR_UNKNOWN_TOPIC
    )


def capacity_exceeded(topic: str) -> Notification:
    return Notification(
        NotificationKind.ERROR, topic, CAPACITY_EXCEEDED_MESSAGE, ERROR_CAPACITY_EXCEEDED
    )
