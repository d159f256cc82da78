"""Embedding value types in larger JSON records.

Values serialize to their bare string value and are rebuilt through the
type's ``cast``. Dataclass records whose fields hold value types can be
converted with ``record_to_dict`` and restored with ``record_from_dict``.
"""

from __future__ import annotations

import dataclasses
import json
import typing
from typing import Any, TypeVar

from pubvalues.models.scalar import ScalarType

__all__ = [
    "ValueEncoder",
    "deserialize",
    "dumps",
    "record_from_dict",
    "record_to_dict",
    "serialize",
]

R = TypeVar("R")


def serialize(value: Any) -> Any:
    """Convert value types (also inside lists and dicts) to plain data.

    Parameters
    ----------
    value : Any
        A value type instance, a container of them, or plain data.

    Returns
    -------
    Any
        Plain data suitable for json.dumps.
    """
    if isinstance(value, ScalarType):
        return value.serialize()
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return record_to_dict(value)
    if isinstance(value, dict):
        return {k: serialize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [serialize(v) for v in value]
    return value


def deserialize(value_type: type[ScalarType], data: Any) -> Any:
    """Rebuild value type instances from serialized data.

    Parameters
    ----------
    value_type : type[ScalarType]
        Type to rebuild.
    data : Any
        A serialized value or a list of them.

    Returns
    -------
    Any
        An instance (or list of instances); None for absent data.
    """
    if data is None:
        return None
    if isinstance(data, list):
        return [value_type.deserialize(item) for item in data]
    return value_type.deserialize(data)


class ValueEncoder(json.JSONEncoder):
    """JSON encoder that understands value types and dataclass records."""

    def default(self, o: Any) -> Any:
        if isinstance(o, ScalarType):
            return o.serialize()
        if dataclasses.is_dataclass(o) and not isinstance(o, type):
            return record_to_dict(o)
        return super().default(o)


def dumps(value: Any, **kwargs: Any) -> str:
    """Serialize to a JSON string with ValueEncoder."""
    kwargs.setdefault("ensure_ascii", False)
    return json.dumps(value, cls=ValueEncoder, **kwargs)


def record_to_dict(record: Any) -> dict[str, Any]:
    """Convert a dataclass record to a dictionary of plain data."""
    return {f.name: serialize(getattr(record, f.name)) for f in dataclasses.fields(record)}


def record_from_dict(record_type: type[R], data: dict[str, Any]) -> R:
    """Build a dataclass record, rebuilding value-type fields.

    Fields annotated with a ScalarType subclass (optionally inside
    ``list[...]`` or ``X | None``) are restored through the type's
    ``deserialize``; other fields are passed through.

    Parameters
    ----------
    record_type : type
        Dataclass to instantiate.
    data : dict[str, Any]
        Output of record_to_dict (unknown keys are ignored).

    Returns
    -------
    R
        New record instance.
    """
    hints = typing.get_type_hints(record_type)
    kwargs = {}
    for f in dataclasses.fields(record_type):
        if f.name not in data:
            continue
        value_type = _value_type(hints.get(f.name))
        kwargs[f.name] = deserialize(value_type, data[f.name]) if value_type else data[f.name]
    return record_type(**kwargs)


def _value_type(hint: Any) -> type[ScalarType] | None:
    if isinstance(hint, type) and issubclass(hint, ScalarType):
        return hint
    for arg in typing.get_args(hint):
        found = _value_type(arg)
        if found is not None:
            return found
    return None
