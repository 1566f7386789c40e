import re

import pytest

from topical import (
    ERROR_CAPACITY_EXCEEDED,
    ERROR_UNKNOWN_TOPIC,
    ExactName,
    InvalidArgument,
    NotificationKind,
    Pattern,
)


def test_subscribe_then_publish(registry, recorder, calls):
    registry.add_topic("beep")
    recorder.clear()

    registry.subscribe("beep", calls)
    registry.publish("beep", "x")

    assert calls.events == ["x"]
    assert recorder.kinds() == ["subscribe", "publish"]
    assert recorder.notifications[0].topic == "beep"
    assert recorder.notifications[0].data is calls
    assert recorder.notifications[1].topic == "beep"


def test_subscribe_unknown_topic_emits_error(registry, recorder, calls):
    registry.subscribe("nope", calls)

    assert recorder.kinds() == ["error"]
    err = recorder.notifications[0]
    assert err.topic == "nope"
    assert err.code == ERROR_UNKNOWN_TOPIC
    assert err.data == "Unknown topic."
    assert registry.topics() == []


def test_duplicates_disallowed_dispatches_once(registry, recorder, calls):
    registry.add_topic("beep")
    registry.subscribe("beep", calls)
    registry.subscribe("beep", calls)
    registry.publish("beep", 1)

    assert calls.events == [1]
    assert len(recorder.of(NotificationKind.SUBSCRIBE)) == 1


def test_duplicates_allowed_dispatches_per_subscription(registry, calls):
    registry.add_topic("beep", duplicates=True)
    for _ in range(3):
        registry.subscribe("beep", calls)
    registry.publish("beep", 1)

    assert calls.events == [1, 1, 1]
    assert registry.subscriber_count("beep") == 3


def test_capacity_zero(registry, recorder, calls):
    registry.add_topic("beep", {"max": 0})
    recorder.clear()

    registry.subscribe("beep", calls)

    assert registry.subscriber_count("beep") == 0
    assert recorder.kinds() == ["error"]
    assert recorder.notifications[0].topic == "beep"
    assert recorder.notifications[0].code == ERROR_CAPACITY_EXCEEDED


def test_capacity_never_exceeded(registry, recorder):
    registry.add_topic("beep", max=2)
    listeners = [lambda e: None for _ in range(5)]
    for listener in listeners:
        registry.subscribe("beep", listener)

    assert registry.subscriber_count("beep") == 2
    assert len(recorder.of(NotificationKind.ERROR)) == 3


def test_duplicate_skip_takes_precedence_over_capacity(registry, recorder, calls):
    registry.add_topic("beep", max=1)
    registry.subscribe("beep", calls)
    recorder.clear()

    registry.subscribe("beep", calls)

    assert recorder.notifications == []


def test_pattern_fans_out(registry, calls):
    registry.add_topic("beep").add_topic("boop").add_topic("foo")
    registry.subscribe(re.compile(r"^b.+p$"), calls)
    registry.publish("beep", 1)
    registry.publish("boop", 2)
    registry.publish("foo", 3)

    assert calls.events == [1, 2]


def test_pattern_targets_are_independent(registry, recorder, calls):
    registry.add_topic("beep", max=0).add_topic("boop")
    recorder.clear()

    registry.subscribe(re.compile("^b"), calls)

    assert recorder.kinds() == ["error", "subscribe"]
    assert recorder.notifications[0].topic == "beep"
    assert recorder.notifications[1].topic == "boop"


def test_pattern_without_matches_is_silent(registry, recorder, calls):
    registry.add_topic("beep")
    recorder.clear()

    registry.subscribe(re.compile("^z"), calls)

    assert recorder.notifications == []


def test_selector_objects_accepted(registry, calls):
    registry.add_topic("beep").add_topic("boop")
    registry.subscribe(ExactName("beep"), calls)
    registry.subscribe(Pattern(re.compile("oo")), calls)
    registry.publish("beep", 1).publish("boop", 2)

    assert calls.events == [1, 2]


def test_equal_but_distinct_listeners_are_different_handles(registry):
    class Eq:
        def __call__(self, event):
            pass

        def __eq__(self, other):
            return isinstance(other, Eq)

        __hash__ = object.__hash__

    registry.add_topic("beep")
    registry.subscribe("beep", Eq())
    registry.subscribe("beep", Eq())

    assert registry.subscriber_count("beep") == 2


@pytest.mark.parametrize("topic", [1, None, b"beep", ""])
def test_subscribe_rejects_bad_topic(registry, calls, topic):
    with pytest.raises(InvalidArgument):
        registry.subscribe(topic, calls)


def test_subscribe_rejects_non_callable(registry):
    registry.add_topic("beep")
    with pytest.raises(InvalidArgument):
        registry.subscribe("beep", "not callable")
    assert registry.subscriber_count("beep") == 0


def test_unsubscribe_removes_all_occurrences(registry, recorder, calls):
    other = []
    registry.add_topic("beep", duplicates=True)
    registry.subscribe("beep", calls)
    registry.subscribe("beep", other.append)
    registry.subscribe("beep", calls)
    recorder.clear()

    registry.unsubscribe("beep", calls)
    registry.publish("beep", 1)

    assert calls.events == []
    assert other == [1]
    assert recorder.kinds() == ["unsubscribe", "publish"]
    assert recorder.notifications[0].data is calls


def test_unsubscribe_absent_listener_is_silent(registry, recorder, calls):
    registry.add_topic("beep")
    recorder.clear()

    registry.unsubscribe("beep", calls)
    registry.unsubscribe("nope", calls)

    assert recorder.notifications == []


def test_unsubscribe_pattern_notifies_per_topic_with_removal(registry, recorder, calls):
    registry.add_topic("beep").add_topic("boop").add_topic("bap")
    registry.subscribe("beep", calls)
    registry.subscribe("bap", calls)
    recorder.clear()

    registry.unsubscribe(re.compile("^b"), calls)

    assert [n.topic for n in recorder.of(NotificationKind.UNSUBSCRIBE)] == ["beep", "bap"]


def test_unsubscribe_preserves_order(registry):
    seen = []
    a = lambda e: seen.append("a")
    b = lambda e: seen.append("b")
    c = lambda e: seen.append("c")
    registry.add_topic("beep")
    for listener in (a, b, c):
        registry.subscribe("beep", listener)

    registry.unsubscribe("beep", b)
    registry.publish("beep", None)

    assert seen == ["a", "c"]
