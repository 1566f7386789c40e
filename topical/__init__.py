"""In-process topic registry: publish/subscribe with pattern fan-out, one-shot subscriptions and change notifications."""

from topical.config import Settings, load_settings
from topical.errors import InvalidArgument, MissingArgument, TopicalError
from topical.notification import (
    ERROR_CAPACITY_EXCEEDED,
    ERROR_UNKNOWN_TOPIC,
    Notification,
    NotificationKind,
)
from topical.once import OnceListener
from topical.registry import Registry
from topical.selector import ExactName, Pattern
from topical.topic import TopicOptions

__all__ = [
    "Registry",
    "TopicOptions",
    "OnceListener",
    "ExactName",
    "Pattern",
    "Notification",
    "NotificationKind",
    "ERROR_UNKNOWN_TOPIC",
    "ERROR_CAPACITY_EXCEEDED",
    "TopicalError",
    "InvalidArgument",
    "MissingArgument",
    "Settings",
    "load_settings",
]
