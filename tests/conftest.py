from __future__ import annotations

from typing import Any, List

import pytest

from topical import Notification, NotificationKind, Registry


class Recorder:
    """Collects every notification a registry emits."""

    def __init__(self) -> None:
        self.notifications: List[Notification] = []

    def __call__(self, notification: Notification) -> None:
        self.notifications.append(notification)

    def kinds(self) -> List[str]:
        return [n.kind.value for n in self.notifications]

    def of(self, kind: NotificationKind) -> List[Notification]:
        return [n for n in self.notifications if n.kind is kind]

    def clear(self) -> None:
        self.notifications.clear()


class Calls:
    """Listener that records the events it receives."""

    def __init__(self) -> None:
        self.events: List[Any] = []

    def __call__(self, event: Any) -> None:
        self.events.append(event)


@pytest.fixture
def registry() -> Registry:
    return Registry()


@pytest.fixture
def recorder(registry: Registry) -> Recorder:
    rec = Recorder()
    registry.on_notification(NotificationKind.ALL, rec)
    return rec


@pytest.fixture
def calls() -> Calls:
    return Calls()
