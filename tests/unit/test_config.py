"""Tests for runtime configuration."""

import logging

import pytest

from pubvalues.config import EMPTY_VALUE, ValueConfig, configure, configure_logging, get_config


@pytest.mark.unit
def test_defaults() -> None:
    """Test default settings."""
    config = ValueConfig()

    assert config.empty_value == EMPTY_VALUE
    assert config.strict_enumerations is True
    assert config.reference_year is None
    assert config.log_level == "WARNING"


@pytest.mark.unit
def test_configure_replaces_selected_settings() -> None:
    """Test configure() changes only the named settings."""
    config = configure(reference_year=1999)

    assert get_config() is config
    assert config.reference_year == 1999
    assert config.empty_value == EMPTY_VALUE


@pytest.mark.unit
@pytest.mark.parametrize(
    "overrides",
    [{"empty_value": ""}, {"reference_year": 99}, {"log_level": "LOUD"}],
)
def test_invalid_settings_rejected(overrides: dict) -> None:
    """Test validation of individual settings."""
    with pytest.raises(ValueError):
        ValueConfig(**overrides)


@pytest.mark.unit
def test_unknown_setting_rejected() -> None:
    """Test an unknown setting name is a TypeError and leaves config unchanged."""
    before = get_config()

    with pytest.raises(TypeError):
        configure(colour="red")

    assert get_config() is before


@pytest.mark.unit
def test_configure_logging_attaches_one_handler() -> None:
    """Test repeated calls do not stack handlers."""
    logger = logging.getLogger("pubvalues")
    saved_level, saved_handlers = logger.level, list(logger.handlers)
    logger.handlers.clear()
    try:
        configure_logging("info")
        configure_logging()

        assert len(logger.handlers) == 1
        assert logger.level == logging.WARNING
    finally:
        logger.handlers[:] = saved_handlers
        logger.setLevel(saved_level)
