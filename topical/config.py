"""Registry configuration loaded from the environment (and an optional .env file)."""

import os
import sys
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

ENV_DEFAULT_MAX = "TOPICAL_DEFAULT_MAX"
ENV_ALLOW_DUPLICATES = "TOPICAL_ALLOW_DUPLICATES"
ENV_LOG_LEVEL = "TOPICAL_LOG_LEVEL"

# Largest representable non-negative capacity
DEFAULT_MAX_SUBSCRIBERS = sys.maxsize

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    """Defaults applied to new topics, plus the package log level."""

    default_max: int = DEFAULT_MAX_SUBSCRIBERS
    default_duplicates: bool = False
    log_level: str = "INFO"


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean (true/false), got {raw!r}")


def _parse_max(name: str, raw: str) -> int:
    try:
        value = int(raw.strip())
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value < 0:
        raise ValueError(f"{name} must be >= 0, got {value}")
    return value


def load_settings(
    env_file: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """Build Settings from environment variables.

    When environ is None, .env (or env_file) is loaded into os.environ first
    without overriding variables that are already set.
    """
    if environ is None:
        load_dotenv(env_file)
        environ = os.environ
    defaults = Settings()
    raw_max = (environ.get(ENV_DEFAULT_MAX) or "").strip()
    raw_dup = (environ.get(ENV_ALLOW_DUPLICATES) or "").strip()
    raw_level = (environ.get(ENV_LOG_LEVEL) or "").strip()
    return Settings(
        default_max=_parse_max(ENV_DEFAULT_MAX, raw_max) if raw_max else defaults.default_max,
        default_duplicates=(
            _parse_bool(ENV_ALLOW_DUPLICATES, raw_dup) if raw_dup else defaults.default_duplicates
        ),
        log_level=raw_level.upper() if raw_level else defaults.log_level,
    )
