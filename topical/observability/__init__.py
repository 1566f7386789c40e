"""Observability: logging and notification-driven statistics for the registry."""

from topical.observability.logger import configure_logging, get_logger
from topical.observability.metrics import RegistryStats

__all__ = ["configure_logging", "get_logger", "RegistryStats"]
