"""Registry statistics built purely from notifications (topic counts, publications, broadcasts)."""

from typing import TYPE_CHECKING, Any, Dict, Optional

from topical.notification import Notification, NotificationKind

if TYPE_CHECKING:
    from topical.registry import Registry


class RegistryStats:
    """Observer that aggregates per-topic subscriber and publication counts.

    Knows nothing about registry internals; it only reacts to notifications,
    so counts reflect what was announced (a subscription silently replaced by
    once() is not announced, for example).
    """

    def __init__(self) -> None:
        self._topics: Dict[str, Dict[str, int]] = {}
        self._counters: Dict[str, int] = {"broadcasts": 0}
        self._gauges: Dict[str, int] = {"public": 0}
        self._errors: Dict[str, int] = {}
        self._registry: Optional["Registry"] = None
        # bound methods are recreated on each access; keep one so detach() finds it
        self._observer = self.observe

    def attach(self, registry: "Registry") -> "RegistryStats":
        """Start observing registry. Topics that already exist are picked up on first notification."""
        if self._registry is not None:
            self.detach()
        registry.on_notification(NotificationKind.ALL, self._observer)
        self._registry = registry
        return self

    def detach(self) -> None:
        if self._registry is not None:
            self._registry.off_notification(NotificationKind.ALL, self._observer)
            self._registry = None

    def _topic(self, name: str) -> Dict[str, int]:
        return self._topics.setdefault(name, {"subscribers": 0, "publications": 0})

    def observe(self, notification: Notification) -> None:
        kind = notification.kind
        if kind is NotificationKind.ADD:
            self._topics[notification.topic] = {"subscribers": 0, "publications": 0}
        elif kind is NotificationKind.REMOVE:
            self._topics.pop(notification.topic, None)
        elif kind is NotificationKind.SUBSCRIBE:
            self._topic(notification.topic)["subscribers"] += 1
        elif kind is NotificationKind.UNSUBSCRIBE:
            entry = self._topic(notification.topic)
            entry["subscribers"] = max(0, entry["subscribers"] - 1)
        elif kind is NotificationKind.LIST:
            self._gauges["public"] += 1
        elif kind is NotificationKind.UNLIST:
            self._gauges["public"] = max(0, self._gauges["public"] - 1)
        elif kind is NotificationKind.PUBLISH:
            if notification.topic in self._topics:
                self._topics[notification.topic]["publications"] += 1
        elif kind is NotificationKind.BROADCAST:
            self._counters["broadcasts"] += 1
        elif kind is NotificationKind.ERROR:
            code = notification.code or "UNKNOWN"
            self._errors[code] = self._errors.get(code, 0) + 1

    def topic(self, name: str) -> Dict[str, int]:
        return dict(self._topics.get(name, {"subscribers": 0, "publications": 0}))

    @property
    def broadcasts(self) -> int:
        return self._counters["broadcasts"]

    @property
    def public(self) -> int:
        return self._gauges["public"]

    def errors(self, code: str) -> int:
        return self._errors.get(code, 0)

    def snapshot(self) -> Dict[str, Any]:
        """Return a snapshot of all statistics."""
        return {
            "topics": {name: dict(entry) for name, entry in self._topics.items()},
            "broadcasts": self._counters["broadcasts"],
            "public": self._gauges["public"],
            "errors": dict(self._errors),
        }
