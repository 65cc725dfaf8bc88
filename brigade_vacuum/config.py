"""Configuration settings for brigade_vacuum.

Uses pydantic-settings for config parsing from environment variables
and defaults. Configuration precedence: CLI flags > env vars > defaults.
"""

import re
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from brigade_vacuum.errors import InvalidLimitError
from brigade_vacuum.types import (
    AgeLimit,
    AtMost,
    CountLimit,
    CreatedBefore,
    NoAgeLimit,
    Unlimited,
)

# Sentinel accepted on the configuration surface for "keep every build"
NO_MAX_BUILDS = -1

_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ms|s|m|h|d)")
_DURATION_UNITS = {
    "ms": timedelta(milliseconds=1),
    "s": timedelta(seconds=1),
    "m": timedelta(minutes=1),
    "h": timedelta(hours=1),
    "d": timedelta(days=1),
}


def parse_duration(text: str) -> timedelta:
    """Parse a Go-style duration string.

    Accepts sequences such as ``720h``, ``1h30m`` or ``30d``, and bare
    numbers, which are read as seconds.

    Args:
        text: Duration string.

    Returns:
        Parsed duration.

    Raises:
        ValueError: If the string is not a valid duration.
    """
    value = text.strip()
    if not value:
        raise ValueError("duration must not be empty")

    try:
        seconds: float | None = float(value)
    except ValueError:
        seconds = None

    try:
        if seconds is not None:
            total = timedelta(seconds=seconds)
        else:
            total = timedelta()
            pos = 0
            for match in _DURATION_PART.finditer(value):
                if match.start() != pos:
                    break
                amount, unit = match.groups()
                total += float(amount) * _DURATION_UNITS[unit]
                pos = match.end()
            if pos != len(value):
                raise ValueError(f"invalid duration: {text!r}")
    except OverflowError as e:
        raise ValueError(f"duration out of range: {text!r}") from e

    if total < timedelta(0):
        raise ValueError(f"duration must not be negative: {text!r}")
    return total


class Settings(BaseSettings):
    """Application settings.

    Settings are loaded from environment variables with the VACUUM_ prefix.
    CLI flags can override these at runtime.
    """

    model_config = SettingsConfigDict(
        env_prefix="VACUUM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Scope
    namespace: str = Field(
        default="default",
        description="Namespace whose build resources are vacuumed",
    )

    # Retention
    max_age: timedelta | None = Field(
        default=None,
        description="Delete builds older than this duration (unset disables)",
    )
    max_builds: int = Field(
        default=NO_MAX_BUILDS,
        ge=NO_MAX_BUILDS,
        description="Maximum number of builds to keep (-1 means unlimited)",
    )
    skip_running_builds: bool = Field(
        default=False,
        description="Never delete worker pods that are Running or Pending",
    )

    # Operational modes
    dry_run: bool = Field(
        default=False,
        description="Report what would be deleted without deleting",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    # Cluster access
    kubeconfig: Path | None = Field(
        default=None,
        description="Path to kubeconfig (in-cluster config is tried first if unset)",
    )
    kube_context: str | None = Field(
        default=None,
        description="Kubeconfig context to use",
    )
    request_timeout: int = Field(
        default=30,
        ge=1,
        description="Timeout for each Kubernetes API request in seconds",
    )

    @field_validator("max_age", mode="before")
    @classmethod
    def parse_max_age(cls, v: object) -> object:
        """Accept Go-style duration strings."""
        if isinstance(v, str):
            if not v.strip():
                return None
            return parse_duration(v)
        return v

    @field_validator("max_age")
    @classmethod
    def validate_max_age(cls, v: timedelta | None) -> timedelta | None:
        """Reject negative durations; zero disables."""
        if v is None:
            return None
        if v < timedelta(0):
            raise ValueError("max_age must not be negative")
        return v or None

    def age_limit(self, now: datetime | None = None) -> AgeLimit:
        """Translate max_age into an age limit relative to ``now``.

        Raises:
            InvalidLimitError: If the cutoff falls outside the datetime range.
        """
        if self.max_age is None:
            return NoAgeLimit()
        if now is None:
            now = datetime.now(timezone.utc)
        try:
            cutoff = now - self.max_age
        except OverflowError as e:
            raise InvalidLimitError(
                f"max_age {self.max_age} reaches before the earliest datetime"
            ) from e
        return CreatedBefore(cutoff=cutoff)

    def count_limit(self) -> CountLimit:
        """Translate max_builds into a count limit."""
        if self.max_builds == NO_MAX_BUILDS:
            return Unlimited()
        return AtMost(self.max_builds)


def get_settings() -> Settings:
    """Get the application settings singleton.

    Returns:
        Settings instance loaded from environment.
    """
    return Settings()


def print_settings_json(settings: Settings | None = None) -> str:
    """Render effective settings as JSON.

    Args:
        settings: Optional settings instance; uses default if not provided.

    Returns:
        JSON string of effective settings.
    """
    if settings is None:
        settings = get_settings()
    return settings.model_dump_json(indent=2)


__all__ = [
    "NO_MAX_BUILDS",
    "Settings",
    "get_settings",
    "parse_duration",
    "print_settings_json",
]
