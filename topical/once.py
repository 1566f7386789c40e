"""One-shot subscription wrapper installed by Registry.once()."""

import threading
from typing import Any

from topical.topic import Listener


class OnceListener:
    """Wraps a listener so it runs on its first dispatch only.

    The registry removes fired wrappers from the topic after the publish that
    fired them has emitted its own notification.
    """

    def __init__(self, listener: Listener, topic: str, lock: "threading.RLock") -> None:
        self._listener = listener
        self._topic = topic
        self._lock = lock
        self._fired = False

    @property
    def listener(self) -> Listener:
        return self._listener

    @property
    def topic(self) -> str:
        return self._topic

    @property
    def fired(self) -> bool:
        return self._fired

    def __call__(self, event: Any) -> None:
        with self._lock:
            if self._fired:
                return
            self._fired = True
        self._listener(event)

    def __repr__(self) -> str:
        return f"OnceListener(topic={self._topic!r}, listener={self._listener!r}, fired={self._fired})"
