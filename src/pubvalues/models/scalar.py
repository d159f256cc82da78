"""Base scalar value type.

A scalar type wraps exactly one logical string value. The work is split
between two layers:

- ``ScalarRules``: stateless cleaning, normalization and validation.
- ``ScalarType``: the value wrapper, which holds the normalized value and
  delegates to the ``rules`` object selected by its class.

Data-quality problems never raise: invalid input yields an empty (or
explicitly echoed) value plus an optional log entry.
"""

from __future__ import annotations

import functools
import json
import logging
from typing import Any, ClassVar, TypeVar

from pubvalues.config import get_config

__all__ = ["ScalarRules", "ScalarType"]

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="ScalarType")


def is_empty_sentinel(v: Any) -> bool:
    """Indicate whether *v* is the configured empty-field placeholder."""
    return isinstance(v, str) and v == get_config().empty_value


class ScalarRules:
    """Normalization and validation strategy for plain scalar values.

    Rules objects are stateless; subclasses override the hooks for their
    own value domain.
    """

    # The wrapper class served by this rules object; bound by ScalarType.
    value_class: type[ScalarType] | None = None

    def clean(self, v: Any) -> Any:
        """Resolve an item into its primitive value.

        Parameters
        ----------
        v : Any
            Raw input, a wrapped value, or a list of either.

        Returns
        -------
        Any
            The unwrapped value; the placeholder becomes None and lists lose
            their None/placeholder entries.
        """
        owner = self.value_class
        if isinstance(v, ScalarType) and (owner is None or not isinstance(v, owner)):
            v = v.value
        if is_empty_sentinel(v):
            return None
        if isinstance(v, (list, tuple)):
            return [self.clean(item) for item in v if item is not None and not is_empty_sentinel(item)]
        return v

    def normalize(self, v: Any) -> str:
        """Transform *v* into its canonical string form.

        Parameters
        ----------
        v : Any
            Value to normalize.

        Returns
        -------
        str
            Stripped string; empty if there is no value.
        """
        v = self.clean(v)
        if isinstance(v, list):
            v = v[0] if v else None
        if isinstance(v, ScalarType):
            v = v.value
        if v is None:
            return ""
        return v.strip() if isinstance(v, str) else str(v)

    def valid(self, v: Any) -> bool:
        """Indicate whether *v* would be a valid value."""
        return v is not None

    def default(self) -> str:
        """Default value for items of this type."""
        return ""

    def is_default(self, v: Any) -> bool:
        """Indicate whether *v* matches the default value."""
        return False


@functools.total_ordering
class ScalarType:
    """Base class for custom scalar types.

    Attributes
    ----------
    value : str | None
        The normalized value held by this instance.
    """

    rules: ClassVar[ScalarRules] = ScalarRules()

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        # A rules object inherited unchanged still serves the parent class.
        if "rules" in cls.__dict__:
            cls.rules.value_class = cls

    def __init__(self, v: Any = None, **opt: Any) -> None:
        """Initialize a new instance.

        Parameters
        ----------
        v : Any, optional
            Initial value.
        **opt : Any
            Options passed to set().
        """
        self.value: str | None = None
        self.set(v, **opt)

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    @classmethod
    def normalize(cls, v: Any) -> str:
        """Transform *v* into the canonical form for this type."""
        return cls.rules.normalize(v)

    @classmethod
    def cast(cls: type[T], v: Any, **opt: Any) -> T | None:
        """Type-cast an object to an instance of this type.

        Parameters
        ----------
        v : Any
            Value to use or transform.
        **opt : Any
            Options passed to create().

        Returns
        -------
        ScalarType | None
            *v* itself if it is already an instance of this type.
        """
        return v if isinstance(v, cls) else cls.create(v, **opt)

    @classmethod
    def create(cls: type[T], v: Any, **opt: Any) -> T | None:
        """Create a new instance of this type.

        Parameters
        ----------
        v : Any
            Value to use or transform.
        **opt : Any
            Options passed to the constructor.

        Returns
        -------
        ScalarType | None
            None if *v* normalizes to an empty string.
        """
        if isinstance(v, cls):
            return v.copy()
        normalized = cls.rules.normalize(v)
        if not normalized:
            return None
        return cls(normalized, **opt)

    @classmethod
    def deserialize(cls: type[T], data: Any) -> T | None:
        """Rebuild an instance from its serialized (bare string) form."""
        return cls.cast(data)

    # ------------------------------------------------------------------
    # Value access
    # ------------------------------------------------------------------

    def set(
        self,
        v: Any,
        *,
        invalid: bool = False,
        allow_nil: bool = True,
        warn: bool = False,
    ) -> str | None:
        """Assign a new value to the instance.

        Parameters
        ----------
        v : Any
            New value.
        invalid : bool, optional
            If True, keep the raw value when it fails validation.
        allow_nil : bool, optional
            If False, fall back to the type default when there is no value.
        warn : bool, optional
            If True, log a warning when the value fails validation.

        Returns
        -------
        str | None
            The stored value.
        """
        rules = self.rules
        if is_empty_sentinel(v):
            v = None

        value: str | None = None
        if v is not None:
            value = rules.normalize(v) or None
            if value is not None and not rules.valid(value):
                value = None
            if value is None and warn:
                logger.warning("%s: %r: not a valid value", type(self).__name__, v)

        if value is None and invalid and v is not None:
            value = v if isinstance(v, str) else str(v)
        if value is None and not allow_nil:
            value = rules.default()
        self.value = value
        return value

    def is_valid(self, v: Any = None) -> bool:
        """Indicate whether the instance (or *v*) is valid."""
        if v is None:
            v = self.value
        return self.rules.valid(v)

    def is_default(self) -> bool:
        """Indicate whether the instance holds the type default."""
        return self.rules.is_default(self.value)

    def is_blank(self) -> bool:
        """Indicate whether the instance has no value."""
        return not self.value

    @property
    def label(self) -> str:
        """The natural language presentation of the value."""
        return str(self)

    def copy(self: T) -> T:
        """Return a shallow copy holding the same value."""
        dup = object.__new__(type(self))
        dup.__dict__.update(self.__dict__)
        return dup

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def serialize(self) -> str | None:
        """Return the bare value for embedding in a larger record."""
        return self.value

    def to_json(self) -> str:
        """Return the JSON representation of the string form."""
        return json.dumps(str(self), ensure_ascii=False)

    # ------------------------------------------------------------------
    # Object protocol
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return self.value or ""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self)!r})"

    def __bool__(self) -> bool:
        return not self.is_blank()

    def __hash__(self) -> int:
        return hash(str(self))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, (ScalarType, str)):
            return str(self) == str(other)
        return NotImplemented

    def __lt__(self, other: object) -> bool:
        if isinstance(other, (ScalarType, str)):
            return str(self) < str(other)
        return NotImplemented


ScalarType.rules.value_class = ScalarType
