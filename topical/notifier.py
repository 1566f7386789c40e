"""Observer registry for registry notifications, owned by a Registry instance."""

from collections import defaultdict
from typing import Callable, DefaultDict, List, Union

from topical.errors import InvalidArgument
from topical.notification import Notification, NotificationKind

Observer = Callable[[Notification], None]


def to_kind(kind: Union[NotificationKind, str]) -> NotificationKind:
    """Accept a NotificationKind or its string value ("add", "publish", "*", ...)."""
    if isinstance(kind, NotificationKind):
        return kind
    if isinstance(kind, str):
        try:
            return NotificationKind(kind)
        except ValueError:
            raise InvalidArgument(f"unknown notification kind: {kind!r}.") from None
    raise InvalidArgument(
        f"notification kind must be a NotificationKind or string, got {type(kind).__name__}."
    )


class NotificationDispatcher:
    """Delivers notifications synchronously to observers registered per kind.

    Observers registered for NotificationKind.ALL receive every notification,
    after the kind-specific observers.
    """

    def __init__(self) -> None:
        self._observers: DefaultDict[NotificationKind, List[Observer]] = defaultdict(list)

    def on(self, kind: Union[NotificationKind, str], observer: Observer) -> None:
        kind = to_kind(kind)
        if not callable(observer):
            raise InvalidArgument("observer must be callable.")
        observers = self._observers[kind]
        if not any(o is observer for o in observers):
            observers.append(observer)

    def off(self, kind: Union[NotificationKind, str], observer: Observer) -> bool:
        """Remove observer for kind. Returns True if it was registered."""
        kind = to_kind(kind)
        observers = self._observers.get(kind, [])
        for i, o in enumerate(observers):
            if o is observer:
                del observers[i]
                return True
        return False

    def observer_count(self, kind: Union[NotificationKind, str]) -> int:
        return len(self._observers.get(to_kind(kind), []))

    def emit(self, notification: Notification) -> None:
        """Call every matching observer in registration order. Observer exceptions propagate."""
        observers = list(self._observers.get(notification.kind, ()))
        observers += list(self._observers.get(NotificationKind.ALL, ()))
        for observer in observers:
            observer(notification)
