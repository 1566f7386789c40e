"""Exceptions raised at the registry's call boundary."""


class TopicalError(Exception):
    """Base class for registry errors."""


class InvalidArgument(TopicalError, TypeError):
    """Raised when a topic name, selector, option, listener or kind has the wrong type or shape."""


class MissingArgument(TopicalError):
    """Raised when publish() or broadcast() is called without an event."""
