"""Pytest configuration and fixtures for test suite."""

import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

# Add src directory to path for imports
SRC_PATH = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(SRC_PATH))

from pubvalues import config as value_config  # noqa: E402
from pubvalues.config import ValueConfig  # noqa: E402
from pubvalues.models import EnumRegistry  # noqa: E402


@pytest.fixture(autouse=True)
def default_config() -> Iterator[ValueConfig]:
    """Run every test with the default configuration and restore it afterwards."""
    saved = value_config.get_config()
    value_config.configure(**ValueConfig().to_dict())
    yield value_config.get_config()
    value_config.configure(**saved.to_dict())


@pytest.fixture
def registry() -> EnumRegistry:
    """Provide an empty enumeration registry."""
    return EnumRegistry()
