"""
Package configuration.

Settings are a frozen dataclass held in a module-level slot. They can be
built from a plain mapping or from POLYHEDRAL_GEOMETRY_* environment
variables, and replaced at runtime with configure().
"""

import logging
import os
from dataclasses import dataclass, replace
from typing import Any, Mapping

from .scalars import ScalarDomain

ENV_PREFIX = "POLYHEDRAL_GEOMETRY_"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Settings:
    default_scalar: ScalarDomain = ScalarDomain.RATIONAL
    hilbert_box_limit: int = 100_000
    log_level: str = "WARNING"

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Settings":
        """Build settings from a mapping, validating every known key.

        Args:
            data: Keys default_scalar, hilbert_box_limit and log_level, all optional

        Returns:
            Settings

        Raises:
            ValueError: If a value cannot be parsed
        """
        defaults = cls()
        default_scalar = _parse_scalar(data.get("default_scalar", defaults.default_scalar))
        hilbert_box_limit = _parse_positive_int(
            data.get("hilbert_box_limit", defaults.hilbert_box_limit), "hilbert_box_limit"
        )
        log_level = _parse_log_level(data.get("log_level", defaults.log_level))
        return cls(
            default_scalar=default_scalar,
            hilbert_box_limit=hilbert_box_limit,
            log_level=log_level,
        )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if environ is None else environ
        data: dict[str, Any] = {}
        for key in ("default_scalar", "hilbert_box_limit", "log_level"):
            raw = env.get(ENV_PREFIX + key.upper())
            if raw is not None and raw != "":
                data[key] = raw
        return cls.from_mapping(data)

    @property
    def log_level_number(self) -> int:
        return logging.getLevelName(self.log_level)


def _parse_scalar(value: Any) -> ScalarDomain:
    if isinstance(value, ScalarDomain):
        return value
    text = str(value).strip()
    for domain in ScalarDomain:
        if text.lower() in (domain.value.lower(), domain.name.lower()):
            return domain
    raise ValueError(f"unknown scalar domain '{value}'")


def _parse_positive_int(value: Any, label: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError) as err:
        raise ValueError(f"{label} must be an integer, got {value!r}") from err
    if number <= 0:
        raise ValueError(f"{label} must be positive, got {number}")
    return number


def _parse_log_level(value: Any) -> str:
    if isinstance(value, int):
        name = logging.getLevelName(value)
    else:
        name = str(value).strip().upper()
    if name not in _LOG_LEVELS:
        raise ValueError(f"unknown log level '{value}'")
    return name


_settings = Settings.from_env()


def get_settings() -> Settings:
    """Current process-wide settings.

    Returns:
        The Settings last set by configure() or reset(), or read from the
        environment at import
    """
    return _settings


def configure(**overrides: Any) -> Settings:
    """Replace the process-wide settings, keeping unspecified fields.

    Unknown keys raise TypeError like dataclasses.replace does.
    """
    global _settings
    updated = replace(_settings, **overrides)
    _settings = Settings.from_mapping(
        {
            "default_scalar": updated.default_scalar,
            "hilbert_box_limit": updated.hilbert_box_limit,
            "log_level": updated.log_level,
        }
    )
    return _settings


def reset() -> Settings:
    """Reload settings from the environment."""
    global _settings
    _settings = Settings.from_env()
    return _settings
