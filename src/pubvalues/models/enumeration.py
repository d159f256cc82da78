"""Controlled-vocabulary scalar types.

Enumerations live in an explicit registry service (``EnumRegistry``) keyed
by type name. Concrete ``EnumType`` subclasses register their vocabulary at
class-definition time and look it up by their own class name afterwards.

Registry writes are serialized with a lock; reads are lock-free because the
registry is populated during startup and only read thereafter.
"""

from __future__ import annotations

import logging
import re
import threading
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, ClassVar

from pubvalues.config import get_config
from pubvalues.models.scalar import ScalarRules, ScalarType

__all__ = [
    "ENUMERATIONS",
    "EnumRegistry",
    "EnumRules",
    "EnumType",
    "Enumeration",
    "EnumerationError",
    "camelize",
    "comparable",
    "comparable_map",
]

logger = logging.getLogger(__name__)

DEFAULT_KEY = "_default"

_NON_COMPARABLE_RE = re.compile(r"[_\W]+")
_WORD_BOUNDARY_RE = re.compile(r"(?:^|_)([a-zA-Z0-9])")


class EnumerationError(Exception):
    """Raised for enumeration programmer errors (duplicate or empty)."""

    def __init__(self, message: str, name: str | None = None) -> None:
        """Initialize enumeration error.

        Parameters
        ----------
        message : str
            Error message.
        name : str | None, optional
            Enumeration name involved.
        """
        super().__init__(message)
        self.name = name


def comparable(key: Any) -> str:
    """Fold a value for liberal case-insensitive comparison.

    Non-alphanumeric characters (including underscores) are disregarded.

    Parameters
    ----------
    key : Any
        Value to fold.

    Returns
    -------
    str
        Lowercase alphanumeric form.
    """
    if key is None:
        return ""
    return _NON_COMPARABLE_RE.sub("", str(key).lower())


def comparable_map(keys: Iterable[str], caller: str | None = None) -> dict[str, str]:
    """Create a mapping of comparable forms to original values.

    Parameters
    ----------
    keys : Iterable[str]
        Original values (mapping keys are used for a mapping).
    caller : str | None, optional
        Name used in diagnostics.

    Returns
    -------
    dict[str, str]
        Comparable form to original value.
    """
    keys = list(keys)
    result = {comparable(key): key for key in keys}
    if len(result) != len(keys):
        caller = caller or "comparable_map"
        logger.error("%s: %d map keys != %d original keys", caller, len(result), len(keys))
        logger.info("%s: map keys: %r", caller, list(result))
        logger.info("%s: original: %r", caller, keys)
    return result


def camelize(name: str) -> str:
    """Convert "search_sort" (or "SearchSort") to "SearchSort"."""
    if "_" not in name and name[:1].isupper():
        return name
    return _WORD_BOUNDARY_RE.sub(lambda m: m.group(1).upper(), name)


@dataclass(frozen=True)
class Enumeration:
    """A registered controlled vocabulary.

    Attributes
    ----------
    name : str
        Type name (the concrete class name).
    values : tuple[str, ...]
        Legal values, in menu order.
    pairs : Mapping[str, str]
        Value to display label.
    mapping : Mapping[str, str]
        Comparable form to canonical value.
    default : str | None
        Configured default value, if any.
    """

    name: str
    values: tuple[str, ...]
    pairs: Mapping[str, str] = field(repr=False, compare=False)
    mapping: Mapping[str, str] = field(repr=False, compare=False)
    default: str | None = None

    @classmethod
    def from_config(cls, name: str, config: Any) -> Enumeration:
        """Build an entry from a mapping or a list of values.

        Parameters
        ----------
        name : str
            Enumeration name.
        config : Any
            Either ``{value: label, "_default": value}`` or a list of values.

        Returns
        -------
        Enumeration
            Frozen registry entry.
        """
        if isinstance(config, Mapping):
            default = config.get(DEFAULT_KEY) or None
            pairs = {str(k): str(v) for k, v in config.items() if k != DEFAULT_KEY}
            values = list(pairs)
        else:
            default = None
            if isinstance(config, str) or not isinstance(config, Iterable):
                config = [] if config is None else [config]
            values = [str(v) for v in config]
            pairs = {v: v for v in values}
        mapping = comparable_map(values, f"Enumeration {name}")
        return cls(
            name=name,
            values=tuple(values),
            pairs=MappingProxyType(pairs),
            mapping=MappingProxyType(mapping),
            default=None if default is None else str(default),
        )

    def options(self) -> list[tuple[str, str]]:
        """Ordered (value, label) pairs for selection menus."""
        return list(self.pairs.items())


class EnumRegistry:
    """Process-wide table of enumerations keyed by type name."""

    def __init__(self) -> None:
        self._entries: dict[str, Enumeration] = {}
        self._lock = threading.Lock()

    def add_enumerations(
        self,
        entries: Mapping[str, Any],
        *,
        strict: bool | None = None,
    ) -> dict[str, Enumeration]:
        """Register several enumerations at once.

        Parameters
        ----------
        entries : Mapping[str, Any]
            Enumeration name to configuration (see Enumeration.from_config).
        strict : bool | None, optional
            Duplicate policy; defaults to the configured
            ``strict_enumerations``.

        Returns
        -------
        dict[str, Enumeration]
            The entries that were added.

        Raises
        ------
        EnumerationError
            In strict mode, if a name is already registered or empty.
        """
        added = {}
        for name, config in entries.items():
            entry = self.register(name, config, strict=strict)
            if entry is not None:
                added[entry.name] = entry
        return added

    def register(self, name: str, config: Any, *, strict: bool | None = None) -> Enumeration | None:
        """Register one enumeration.

        Parameters
        ----------
        name : str
            Enumeration name; camelized before use.
        config : Any
            Mapping of value to label or a list of values.
        strict : bool | None, optional
            Duplicate policy; defaults to the configured
            ``strict_enumerations``.

        Returns
        -------
        Enumeration | None
            The new entry, or None if it was rejected in non-strict mode.

        Raises
        ------
        EnumerationError
            In strict mode, if *name* is already registered or has no values.
        """
        if strict is None:
            strict = get_config().strict_enumerations
        name = camelize(str(name))
        entry = Enumeration.from_config(name, config)

        if not entry.values:
            return self._reject(name, f"{name}: no values for enumeration", strict)

        with self._lock:
            if name in self._entries:
                existing = None
            else:
                self._entries[name] = existing = entry
        if existing is None:
            return self._reject(name, f"{name}: enumeration already defined", strict)
        return entry

    def _reject(self, name: str, message: str, strict: bool) -> None:
        if strict:
            raise EnumerationError(message, name=name)
        logger.error(message)
        return None

    def get(self, name: str) -> Enumeration | None:
        """Return the entry for *name*, if registered."""
        return self._entries.get(camelize(str(name)))

    def values_for(self, name: str) -> tuple[str, ...] | None:
        """The values for an enumeration."""
        entry = self.get(name)
        return entry.values if entry else None

    def pairs_for(self, name: str) -> Mapping[str, str] | None:
        """The value/label pairs for an enumeration."""
        entry = self.get(name)
        return entry.pairs if entry else None

    def default_for(self, name: str) -> str | None:
        """The configured default for an enumeration."""
        entry = self.get(name)
        return entry.default if entry else None

    def names(self) -> list[str]:
        """Registered enumeration names, in registration order."""
        return list(self._entries)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and camelize(name) in self._entries

    def __len__(self) -> int:
        return len(self._entries)


ENUMERATIONS = EnumRegistry()


class EnumRules(ScalarRules):
    """Rules for one controlled vocabulary, resolved by type name."""

    def __init__(self, name: str, registry: EnumRegistry | None = None) -> None:
        self.name = name
        self.registry = registry if registry is not None else ENUMERATIONS

    @property
    def entry(self) -> Enumeration | None:
        """The registry entry for this vocabulary."""
        return self.registry.get(self.name)

    @property
    def values(self) -> tuple[str, ...]:
        entry = self.entry
        return entry.values if entry else ()

    @property
    def pairs(self) -> Mapping[str, str]:
        entry = self.entry
        return entry.pairs if entry else MappingProxyType({})

    @property
    def mapping(self) -> Mapping[str, str]:
        entry = self.entry
        return entry.mapping if entry else MappingProxyType({})

    def normalize(self, v: Any) -> str:
        """Normalize and recover the canonical casing of a value.

        Unmapped values pass through unchanged; validity is checked
        separately.
        """
        v = self.clean(v)
        if self.value_class is not None and isinstance(v, self.value_class):
            return v.value or ""
        v = super().normalize(v)
        if not v:
            return v
        return self.mapping.get(comparable(v), v)

    def valid(self, v: Any) -> bool:
        return self.normalize(v) in self.values

    def default(self) -> str:
        """The configured default, or the first value."""
        entry = self.entry
        if entry is None:
            return ""
        return entry.default or (entry.values[0] if entry.values else "")

    def is_default(self, v: Any) -> bool:
        return self.normalize(v) == self.default()


class EnumType(ScalarType):
    """Base class for controlled-vocabulary scalar types.

    A concrete subclass supplies its vocabulary in one of three ways::

        class Rights(EnumType, values={"publicDomain": "Public domain"}): ...

        class Rights(EnumType):
            VALUE_MAP = {"publicDomain": "Public domain"}

        class Rights(EnumType): ...
        Rights.define_enumeration({"publicDomain": "Public domain"})

    or relies on an entry registered under its class name beforehand (see
    ``pubvalues.vocab``).
    """

    registry: ClassVar[EnumRegistry] = ENUMERATIONS
    rules: ClassVar[EnumRules]

    def __init_subclass__(cls, values: Any = None, **kwargs: Any) -> None:
        cls.rules = EnumRules(cls.__name__, cls.registry)
        super().__init_subclass__(**kwargs)
        values = values if values is not None else cls.__dict__.get("VALUE_MAP")
        if values is not None:
            cls.define_enumeration(values)

    @classmethod
    def define_enumeration(
        cls,
        values: Any = None,
        builder: Callable[[], Mapping[str, Any]] | None = None,
    ) -> Enumeration | None:
        """Register the vocabulary for this class.

        Parameters
        ----------
        values : Any, optional
            Mapping of value to label, or a list of values.
        builder : Callable[[], Mapping[str, Any]] | None, optional
            Produces a base mapping; *values* entries override it.

        Returns
        -------
        Enumeration | None
            The registered entry (None if rejected in non-strict mode).
        """
        if builder is not None:
            base = dict(builder() or {})
            if isinstance(values, Mapping):
                base.update(values)
            elif values:
                base.update({str(v): str(v) for v in values})
            values = base
        return cls.registry.register(cls.__name__, values or {})

    # ------------------------------------------------------------------
    # Vocabulary accessors
    # ------------------------------------------------------------------

    @classmethod
    def type(cls) -> str:
        """The name of the represented enumeration type."""
        return cls.__name__

    @classmethod
    def values(cls) -> tuple[str, ...]:
        """The enumeration values associated with the subclass."""
        return cls.rules.values

    @classmethod
    def pairs(cls) -> Mapping[str, str]:
        """The value/label pairs associated with the subclass."""
        return cls.rules.pairs

    @classmethod
    def mapping(cls) -> Mapping[str, str]:
        """Comparable forms mapped to enumeration values."""
        return cls.rules.mapping

    @classmethod
    def options(cls) -> list[tuple[str, str]]:
        """Ordered (value, label) pairs for selection menus."""
        return list(cls.rules.pairs.items())

    @classmethod
    def default(cls) -> str:
        """The configured default or the first value."""
        return cls.rules.default()

    @staticmethod
    def valid_range(range_: Any, *, exception: bool = False) -> bool:
        """Indicate whether *range_* is an enumeration class.

        Parameters
        ----------
        range_ : Any
            Candidate class.
        exception : bool, optional
            If True, raise instead of returning False.

        Returns
        -------
        bool
            True if *range_* is a subclass of EnumType.

        Raises
        ------
        TypeError
            If *range_* is not an EnumType subclass and *exception* is True.
        """
        valid = isinstance(range_, type) and issubclass(range_, EnumType) and range_ is not EnumType
        if not valid and exception:
            raise TypeError(f"range: {range_!r}: not a subclass of EnumType")
        return valid

    # ------------------------------------------------------------------
    # ScalarType overrides
    # ------------------------------------------------------------------

    def set(self, v: Any, *, warn: bool = True, **opt: Any) -> str | None:
        """Assign a new value; invalid values are logged by default."""
        return super().set(v, warn=warn, **opt)

    @property
    def label(self) -> str:
        """The display label for the current value."""
        value = self.value or ""
        return self.rules.pairs.get(value, value)
