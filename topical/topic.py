"""Topic state: an ordered subscriber list bounded by creation-time options."""

from dataclasses import dataclass
from typing import Any, Callable, List, Mapping, Optional

from topical.errors import InvalidArgument

Listener = Callable[[Any], Any]

_OPTION_KEYS = ("max", "duplicates")


@dataclass(frozen=True)
class TopicOptions:
    """Immutable per-topic options. max bounds the subscriber count; duplicates allows repeat handles."""

    max: int
    duplicates: bool = False

    def __post_init__(self) -> None:
        # bool is an int subclass but is never a valid capacity
        if isinstance(self.max, bool) or not isinstance(self.max, int) or self.max < 0:
            raise InvalidArgument(
                "invalid option. Max subscribers must be an integer greater than or equal to 0."
            )
        if not isinstance(self.duplicates, bool):
            raise InvalidArgument("invalid option. Duplicates flag must be a boolean.")

    @classmethod
    def build(
        cls,
        options: Any,
        overrides: Mapping[str, Any],
        default_max: int,
        default_duplicates: bool,
    ) -> "TopicOptions":
        """Merge an options value (None, mapping or TopicOptions) with keyword overrides and defaults."""
        if options is None:
            values: dict = {}
        elif isinstance(options, TopicOptions):
            values = {"max": options.max, "duplicates": options.duplicates}
        elif isinstance(options, Mapping):
            values = dict(options)
        else:
            raise InvalidArgument(
                f"invalid input argument. Options must be a mapping, got {type(options).__name__}."
            )
        values.update(overrides)
        unknown = sorted(set(values) - set(_OPTION_KEYS))
        if unknown:
            raise InvalidArgument(f"invalid option(s): {', '.join(unknown)}.")
        return cls(
            max=values.get("max", default_max),
            duplicates=values.get("duplicates", default_duplicates),
        )


class Topic:
    """Named channel owned by a Registry. Not thread-safe on its own; the registry lock guards it."""

    def __init__(self, name: str, options: TopicOptions) -> None:
        self._name = name
        self._options = options
        self._subscribers: List[Listener] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def options(self) -> TopicOptions:
        return self._options

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    @property
    def is_full(self) -> bool:
        return len(self._subscribers) >= self._options.max

    def contains(self, listener: Listener) -> bool:
        """Identity membership; two equal-but-distinct callables are different handles."""
        return any(s is listener for s in self._subscribers)

    def append(self, listener: Listener) -> None:
        self._subscribers.append(listener)

    def remove_all(self, listener: Listener) -> int:
        """Remove every occurrence of listener, keeping the order of the rest. Returns the number removed."""
        kept = [s for s in self._subscribers if s is not listener]
        removed = len(self._subscribers) - len(kept)
        self._subscribers = kept
        return removed

    def find(self, predicate: Callable[[Listener], bool]) -> List[Listener]:
        return [s for s in self._subscribers if predicate(s)]

    def snapshot(self) -> List[Listener]:
        """Copy of the subscriber list in dispatch order."""
        return list(self._subscribers)

    def clear(self) -> None:
        self._subscribers = []

    def __repr__(self) -> str:
        return (
            f"Topic(name={self._name!r}, subscribers={len(self._subscribers)}, "
            f"max={self._options.max}, duplicates={self._options.duplicates})"
        )


def identity_index(listeners: List[Listener], listener: Listener) -> Optional[int]:
    """Index of the first element that is listener, or None."""
    for i, candidate in enumerate(listeners):
        if candidate is listener:
            return i
    return None
