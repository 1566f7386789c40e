"""In-memory topic registry: topic lifecycle, subscriptions, dispatch and change notifications."""

import logging
import re
import threading
from typing import Any, Dict, List, Optional, Union

from topical.config import Settings
from topical.errors import InvalidArgument, MissingArgument
from topical.notification import (
    Notification,
    NotificationKind,
    capacity_exceeded,
    unknown_topic,
)
from topical.notifier import NotificationDispatcher, Observer
from topical.observability import get_logger
from topical.once import OnceListener
from topical.selector import ExactName, TopicSelector, to_selector, validate_name
from topical.topic import Listener, Topic, TopicOptions, identity_index

# Distinguishes "no event given" from an explicit None event
_MISSING = object()


def _validate_listener(listener: object, operation: str) -> Listener:
    if not callable(listener):
        raise InvalidArgument(f"{operation}(): invalid listener. Listener must be callable.")
    return listener


def _describe(listener: Listener) -> str:
    return getattr(listener, "__qualname__", None) or repr(listener)


class Registry:
    """Named topics with ordered subscriber lists, plus a public broadcast listing.

    Every mutation emits a Notification to observers registered through
    on_notification(). publish() and broadcast() call listeners synchronously
    in subscription order; listener exceptions propagate to the caller.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings or Settings()
        self._topics: Dict[str, Topic] = {}
        self._listing: List[Listener] = []
        self._notifier = NotificationDispatcher()
        self._lock = threading.RLock()
        self._logger = get_logger("topical.registry")

    @property
    def settings(self) -> Settings:
        return self._settings

    # ---- Notifications ----

    def on_notification(self, kind: Union[NotificationKind, str], observer: Observer) -> "Registry":
        """Register observer for one notification kind, or "*" for all of them."""
        with self._lock:
            self._notifier.on(kind, observer)
        return self

    def off_notification(self, kind: Union[NotificationKind, str], observer: Observer) -> "Registry":
        with self._lock:
            self._notifier.off(kind, observer)
        return self

    def _emit(self, notification: Notification) -> None:
        # Callers hold self._lock so observers see the mutation and its notification together
        if self._logger.isEnabledFor(logging.DEBUG):
            self._logger.debug("notify", extra=notification.to_dict())
        self._notifier.emit(notification)

    # ---- Topics ----

    def topics(self) -> List[str]:
        """Names of all existing topics."""
        with self._lock:
            return list(self._topics)

    def has_topic(self, name: str) -> bool:
        validate_name(name, "has_topic")
        with self._lock:
            return name in self._topics

    def subscriber_count(self, name: str) -> int:
        """Number of subscribers of a topic (0 if the topic does not exist)."""
        validate_name(name, "subscriber_count")
        with self._lock:
            topic = self._topics.get(name)
            return topic.subscriber_count if topic is not None else 0

    def topic_options(self, name: str) -> Optional[TopicOptions]:
        validate_name(name, "topic_options")
        with self._lock:
            topic = self._topics.get(name)
            return topic.options if topic is not None else None

    def add_topic(self, name: str, options: Any = None, **overrides: Any) -> "Registry":
        """
        Create a topic if it does not exist yet.
        options may be a TopicOptions or a mapping with "max" / "duplicates"; keyword
        arguments override it. Adding an existing topic is a no-op.
        """
        validate_name(name, "add_topic")
        with self._lock:
            if name in self._topics:
                return self
            opts = TopicOptions.build(
                options,
                overrides,
                default_max=self._settings.default_max,
                default_duplicates=self._settings.default_duplicates,
            )
            self._topics[name] = Topic(name, opts)
            self._logger.info(
                "topic_added",
                extra={"topic": name, "max": opts.max, "duplicates": opts.duplicates},
            )
            self._emit(Notification(NotificationKind.ADD, name))
        return self

    def remove_topic(self, topic: Union[str, TopicSelector, "re.Pattern[str]"]) -> "Registry":
        """Remove a topic, or every topic matching a compiled pattern, with all its subscribers."""
        selector = to_selector(topic, "remove_topic")
        with self._lock:
            for name in selector.resolve(list(self._topics)):
                removed = self._topics.pop(name, None)
                if removed is None:
                    continue
                removed.clear()
                self._logger.info("topic_removed", extra={"topic": name})
                self._emit(Notification(NotificationKind.REMOVE, name))
        return self

    def _resolve(self, selector: TopicSelector, report_unknown: bool) -> List[str]:
        names = list(self._topics)
        targets = selector.resolve(names)
        if not targets and isinstance(selector, ExactName) and report_unknown:
            self._logger.warning("unknown_topic", extra={"topic": selector.name})
            self._emit(unknown_topic(selector.name))
        return targets

    def _reject_full(self, topic: Topic, listener: Listener) -> None:
        self._logger.warning(
            "capacity_exceeded",
            extra={
                "topic": topic.name,
                "max": topic.options.max,
                "listener": _describe(listener),
            },
        )
        self._emit(capacity_exceeded(topic.name))

    # ---- Public listing ----

    def list(self, listener: Listener) -> "Registry":
        """Subscribe listener to public broadcasts (once; repeated calls are no-ops)."""
        _validate_listener(listener, "list")
        with self._lock:
            if identity_index(self._listing, listener) is None:
                self._listing.append(listener)
                self._logger.info("listed", extra={"listener": _describe(listener)})
                self._emit(Notification(NotificationKind.LIST, None, listener))
        return self

    def unlist(self, listener: Listener) -> "Registry":
        _validate_listener(listener, "unlist")
        with self._lock:
            idx = identity_index(self._listing, listener)
            if idx is not None:
                del self._listing[idx]
                self._logger.info("unlisted", extra={"listener": _describe(listener)})
                self._emit(Notification(NotificationKind.UNLIST, None, listener))
        return self

    def listing(self) -> List[Listener]:
        """Copy of the public listing in broadcast order."""
        with self._lock:
            return list(self._listing)

    # ---- Subscriptions ----

    def subscribe(self, topic: Union[str, TopicSelector, "re.Pattern[str]"], listener: Listener) -> "Registry":
        """
        Append listener to a topic, or to every existing topic matching a compiled pattern.
        Unknown exact topics and full topics are reported as error notifications.
        """
        selector = to_selector(topic, "subscribe")
        _validate_listener(listener, "subscribe")
        with self._lock:
            for name in self._resolve(selector, report_unknown=True):
                target = self._topics.get(name)
                if target is None:
                    continue
                if not target.options.duplicates and target.contains(listener):
                    continue
                if target.is_full:
                    self._reject_full(target, listener)
                    continue
                target.append(listener)
                self._logger.info(
                    "subscribed",
                    extra={
                        "topic": name,
                        "listener": _describe(listener),
                        "subscriber_count": target.subscriber_count,
                    },
                )
                self._emit(Notification(NotificationKind.SUBSCRIBE, name, listener))
        return self

    def unsubscribe(self, topic: Union[str, TopicSelector, "re.Pattern[str]"], listener: Listener) -> "Registry":
        """Remove every occurrence of listener from the selected topics. Unknown topics are ignored."""
        selector = to_selector(topic, "unsubscribe")
        _validate_listener(listener, "unsubscribe")
        with self._lock:
            for name in self._resolve(selector, report_unknown=False):
                target = self._topics.get(name)
                if target is None or not target.remove_all(listener):
                    continue
                self._logger.info(
                    "unsubscribed",
                    extra={
                        "topic": name,
                        "listener": _describe(listener),
                        "subscriber_count": target.subscriber_count,
                    },
                )
                self._emit(Notification(NotificationKind.UNSUBSCRIBE, name, listener))
        return self

    def once(self, topic: str, listener: Listener) -> "Registry":
        """Subscribe listener to a single topic for its next delivery only."""
        validate_name(topic, "once")
        _validate_listener(listener, "once")
        with self._lock:
            target = self._topics.get(topic)
            if target is None:
                self._logger.warning("unknown_topic", extra={"topic": topic})
                self._emit(unknown_topic(topic))
                return self
            if target.remove_all(listener):
                self._logger.debug(
                    "once_replaced_subscription",
                    extra={"topic": topic, "listener": _describe(listener)},
                )
            if target.is_full:
                self._reject_full(target, listener)
                return self
            target.append(OnceListener(listener, topic, self._lock))
            self._logger.info(
                "subscribed_once",
                extra={"topic": topic, "listener": _describe(listener)},
            )
            self._emit(Notification(NotificationKind.SUBSCRIBE, topic, None))
        return self

    def _reap_once(self, name: str) -> None:
        """Drop one-shot wrappers of a topic that fired during the publish that just finished."""
        with self._lock:
            target = self._topics.get(name)
            if target is None:
                return
            fired = target.find(lambda s: isinstance(s, OnceListener) and s.fired)
            for wrapper in fired:
                if not target.remove_all(wrapper):
                    continue
                self._logger.info(
                    "unsubscribed_once",
                    extra={"topic": name, "listener": _describe(wrapper.listener)},
                )
                self._emit(Notification(NotificationKind.UNSUBSCRIBE, name, wrapper))

    # ---- Dispatch ----

    def publish(self, topic: str, event: Any = _MISSING) -> "Registry":
        """Call every subscriber of topic with event, in subscription order."""
        if not isinstance(topic, str):
            raise InvalidArgument("publish(): invalid topic. Topic must be a string.")
        if event is _MISSING:
            raise MissingArgument("publish(): insufficient arguments. Must provide an event.")
        with self._lock:
            target = self._topics.get(topic)
            if target is None:
                return self
            listeners = target.snapshot()
        if not listeners:
            return self
        self._logger.debug(
            "delivering",
            extra={"topic": topic, "subscriber_count": len(listeners)},
        )
        try:
            for listener in listeners:
                try:
                    listener(event)
                except Exception:
                    self._logger.exception(
                        "delivery_failed",
                        extra={"topic": topic, "listener": _describe(listener)},
                    )
                    raise
            with self._lock:
                self._emit(Notification(NotificationKind.PUBLISH, topic))
        except Exception:
            # fired one-shot wrappers still go, but the dispatch failure is what the caller sees
            try:
                self._reap_once(topic)
            except Exception:
                self._logger.exception("reap_failed", extra={"topic": topic})
            raise
        self._reap_once(topic)
        return self

    def broadcast(self, event: Any = _MISSING) -> "Registry":
        """Call every publicly listed listener with event, in listing order."""
        if event is _MISSING:
            raise MissingArgument(
                "broadcast(): insufficient arguments. Must provide an event to broadcast."
            )
        with self._lock:
            listeners = list(self._listing)
        if not listeners:
            return self
        self._logger.debug("broadcasting", extra={"subscriber_count": len(listeners)})
        for listener in listeners:
            try:
                listener(event)
            except Exception:
                self._logger.exception(
                    "broadcast_failed", extra={"listener": _describe(listener)}
                )
                raise
        with self._lock:
            self._emit(Notification(NotificationKind.BROADCAST))
        return self

    def __repr__(self) -> str:
        with self._lock:
            return f"Registry(topics={len(self._topics)}, listed={len(self._listing)})"
