"""Topic selectors: an exact topic name or a regular-expression pattern over names."""

import re
from dataclasses import dataclass
from typing import Iterable, List, Union

from topical.errors import InvalidArgument


@dataclass(frozen=True)
class ExactName:
    """Selects the single topic with this name."""

    name: str

    def resolve(self, names: Iterable[str]) -> List[str]:
        return [self.name] if self.name in names else []


@dataclass(frozen=True)
class Pattern:
    """Selects every existing topic whose name the regex matches (re.search semantics)."""

    regex: "re.Pattern[str]"

    def resolve(self, names: Iterable[str]) -> List[str]:
        return [name for name in names if self.regex.search(name)]


TopicSelector = Union[ExactName, Pattern]


def validate_name(name: object, operation: str) -> str:
    """Return name if it is a non-empty string, else raise InvalidArgument."""
    if not isinstance(name, str):
        raise InvalidArgument(
            f"{operation}(): invalid topic. Topic must be a string, got {type(name).__name__}."
        )
    if not name:
        raise InvalidArgument(f"{operation}(): invalid topic. Topic must be a non-empty string.")
    return name


def _validate_regex(regex: object, operation: str) -> "re.Pattern[str]":
    if not isinstance(regex, re.Pattern) or not isinstance(regex.pattern, str):
        raise InvalidArgument(f"{operation}(): pattern must be a regular expression compiled from a str.")
    return regex


def to_selector(value: object, operation: str) -> TopicSelector:
    """Validate a caller-supplied topic or pattern once, at the API edge."""
    if isinstance(value, ExactName):
        validate_name(value.name, operation)
        return value
    if isinstance(value, Pattern):
        _validate_regex(value.regex, operation)
        return value
    if isinstance(value, re.Pattern):
        return Pattern(_validate_regex(value, operation))
    if isinstance(value, str):
        return ExactName(validate_name(value, operation))
    raise InvalidArgument(
        f"{operation}(): invalid topic. Topic must be a string or compiled regular expression, "
        f"got {type(value).__name__}."
    )
