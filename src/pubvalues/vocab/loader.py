"""Load controlled vocabularies from JSON and register them.

The bundled ``data/enumerations.json`` is validated against
``data/enumerations.schema.json`` before anything is registered, so a bad
vocabulary file fails at import time instead of producing empty menus.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from importlib import resources
from pathlib import Path
from typing import Any

import jsonschema

from pubvalues.models.enumeration import DEFAULT_KEY, ENUMERATIONS, EnumRegistry, Enumeration

__all__ = [
    "SchemaValidationError",
    "load_enumerations",
    "load_schema",
    "register_enumerations",
    "validate_enumerations",
]

logger = logging.getLogger(__name__)

_DATA_PACKAGE = "pubvalues.vocab"
_ENUMERATIONS_FILE = "enumerations.json"
_SCHEMA_FILE = "enumerations.schema.json"


class SchemaValidationError(ValueError):
    """Raised when a vocabulary file does not match its schema."""

    def __init__(self, message: str, source: str | None = None) -> None:
        """Initialize schema validation error.

        Parameters
        ----------
        message : str
            Error message.
        source : str | None, optional
            File the vocabulary was read from.
        """
        super().__init__(f"{source}: {message}" if source else message)
        self.source = source


def _read_bundled(name: str) -> Any:
    text = resources.files(_DATA_PACKAGE).joinpath("data", name).read_text(encoding="utf-8")
    return json.loads(text)


def load_schema() -> dict[str, Any]:
    """Load the bundled vocabulary JSON schema.

    Returns
    -------
    dict[str, Any]
        The schema document.
    """
    return _read_bundled(_SCHEMA_FILE)


def validate_enumerations(data: Any, source: str | None = None) -> None:
    """Check vocabulary data against the schema.

    Parameters
    ----------
    data : Any
        Parsed vocabulary document.
    source : str | None, optional
        Name of the file, used in error messages.

    Raises
    ------
    SchemaValidationError
        If *data* does not match the schema or names a default value that is
        not one of its values.
    """
    try:
        jsonschema.validate(instance=data, schema=load_schema())
    except jsonschema.ValidationError as e:
        location = "/".join(str(p) for p in e.absolute_path) or "(root)"
        raise SchemaValidationError(f"{location}: {e.message}", source=source) from e

    for name, config in data.items():
        if isinstance(config, Mapping) and DEFAULT_KEY in config and config[DEFAULT_KEY] not in config:
            raise SchemaValidationError(f"{name}: default {config[DEFAULT_KEY]!r} is not a value", source=source)


def load_enumerations(path: str | Path | None = None) -> dict[str, Any]:
    """Read and validate a vocabulary file.

    Parameters
    ----------
    path : str | Path | None, optional
        JSON file to read; defaults to the bundled vocabularies.

    Returns
    -------
    dict[str, Any]
        Enumeration name to configuration.

    Raises
    ------
    SchemaValidationError
        If the file does not match the schema.
    FileNotFoundError
        If *path* does not exist.
    """
    if path is None:
        data = _read_bundled(_ENUMERATIONS_FILE)
        source = _ENUMERATIONS_FILE
    else:
        path = Path(path)
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
        source = str(path)

    validate_enumerations(data, source=source)
    logger.debug("loaded %d enumerations from %s", len(data), source)
    return data


def register_enumerations(
    data: Mapping[str, Any] | None = None,
    registry: EnumRegistry | None = None,
    strict: bool | None = None,
) -> dict[str, Enumeration]:
    """Register vocabularies with a registry.

    Parameters
    ----------
    data : Mapping[str, Any] | None, optional
        Enumeration configurations; defaults to the bundled vocabularies.
    registry : EnumRegistry | None, optional
        Target registry; defaults to the process-wide registry.
    strict : bool | None, optional
        Duplicate policy passed to EnumRegistry.add_enumerations.

    Returns
    -------
    dict[str, Enumeration]
        Entries that were added.
    """
    if data is None:
        data = load_enumerations()
    registry = registry if registry is not None else ENUMERATIONS
    return registry.add_enumerations(data, strict=strict)
