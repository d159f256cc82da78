"""Runtime configuration for the value layer.

The configuration is process-wide: value types read it when they normalize
input, so it should be set once during startup (before values are created
concurrently).
"""

import logging
from dataclasses import asdict, dataclass, replace
from typing import Any

__all__ = [
    "EMPTY_VALUE",
    "ValueConfig",
    "configure",
    "configure_logging",
    "get_config",
]

# Placeholder shown for an empty field; treated as "no value" on input.
EMPTY_VALUE = "–"

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class ValueConfig:
    """Settings shared by all value types.

    Attributes
    ----------
    empty_value : str
        Sentinel string treated as an absent value (default: EN DASH).
    strict_enumerations : bool
        If True, registering an enumeration name twice raises
        EnumerationError. If False, the error is logged and the first
        registration is kept.
    reference_year : int | None
        Year used to expand two-digit years in American-style dates.
        If None, the current year is used.
    log_level : str
        Level applied by configure_logging() when no level is given.
    """

    empty_value: str = EMPTY_VALUE
    strict_enumerations: bool = True
    reference_year: int | None = None
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        """Validate settings."""
        if not isinstance(self.empty_value, str) or not self.empty_value:
            raise ValueError(f"empty_value must be a non-empty string, got {self.empty_value!r}")

        if self.reference_year is not None and not 1000 <= self.reference_year <= 9999:
            raise ValueError(f"reference_year must have 4 digits, got {self.reference_year}")

        if logging.getLevelName(self.log_level.upper()) not in range(0, 51):
            raise ValueError(f"unknown log_level: {self.log_level!r}")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)


_config = ValueConfig()


def get_config() -> ValueConfig:
    """Return the current configuration.

    Returns
    -------
    ValueConfig
        Active configuration.
    """
    return _config


def configure(**overrides: Any) -> ValueConfig:
    """Replace selected settings of the current configuration.

    Parameters
    ----------
    **overrides : Any
        ValueConfig field values to change.

    Returns
    -------
    ValueConfig
        The new active configuration.

    Raises
    ------
    ValueError
        If an override fails validation.
    TypeError
        If an override names an unknown setting.
    """
    global _config
    _config = replace(_config, **overrides)
    return _config


def configure_logging(level: str | int | None = None) -> None:
    """Attach a stream handler to the package logger.

    Parameters
    ----------
    level : str | int | None, optional
        Logging level; defaults to the configured ``log_level``.
    """
    if level is None:
        level = _config.log_level
    if isinstance(level, str):
        level = level.upper()

    logger = logging.getLogger("pubvalues")
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        logger.addHandler(handler)
