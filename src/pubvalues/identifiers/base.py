"""Standard identifiers for published works.

A publication identifier is written as ``scheme:number`` (for example
``isbn:9780306406157``). Each concrete scheme pairs an ``IdentifierRules``
strategy (prefix stripping, candidate detection, validation) with a
``PublicationIdentifier`` subclass.

``PublicationIdentifier.create`` infers the scheme of unprefixed input by
trying every registered scheme in priority order.
"""

from __future__ import annotations

import re
from typing import Any, ClassVar, TypeVar

from pubvalues.models.scalar import ScalarRules, ScalarType, is_empty_sentinel

__all__ = [
    "SEPARATOR",
    "IdentifierRules",
    "PublicationIdentifier",
    "digits_only",
    "prefer_year_lccn",
]

# A space or ASCII/dash punctuation between groups of identifier digits.
SEPARATOR = r"[\s!-/:-@\[-`{-~‐-―]"

SEPARATOR_RE = re.compile(SEPARATOR)

# Any "scheme:" or "scheme " lead-in.
GENERIC_PREFIX_RE = re.compile(r"^\s*[a-z]+[\x20:]\s*", re.IGNORECASE)

# A lead-in that names some scheme explicitly ("issn:...").
SCHEME_LABEL_RE = re.compile(r"^\s*[a-z]+\s*:", re.IGNORECASE)

SPLIT_RE = re.compile(r" *[,;|\t\n] *")

T = TypeVar("T", bound="PublicationIdentifier")


def digits_only(v: str, keep: str = "") -> str:
    """Keep only decimal digits (plus any characters in *keep*)."""
    return "".join(c for c in v if c.isdigit() or c in keep)


class IdentifierRules(ScalarRules):
    """Generic identifier rules; concrete schemes override the prefix hooks."""

    PREFIX_RE: ClassVar[re.Pattern[str]] = GENERIC_PREFIX_RE

    def normalize(self, v: Any) -> str:
        return self.remove_prefix(v).rstrip()

    def valid(self, v: Any) -> bool:
        return bool(self.normalize(v))

    def remove_prefix(self, v: Any) -> str:
        """Strip the characteristic prefix of the scheme."""
        return self.PREFIX_RE.sub("", _as_text(v), count=1)

    def has_prefix(self, v: Any) -> bool:
        """Indicate whether the value has the characteristic prefix."""
        text = _as_text(v)
        return text != self.remove_prefix(text)

    def identifier(self, v: Any) -> str | None:
        """Extract the base identifier of a possible identifier value."""
        return self.remove_prefix(v).rstrip() or None

    def candidate(self, v: Any) -> bool:
        """Indicate whether a value could be used as this kind of identifier.

        A candidate recognizably has the shape of the scheme even if its
        check digit is wrong.
        """
        return self.identifier(v) is not None

    def parts(self, v: Any) -> tuple[str, str]:
        """Split a value into a type prefix and a number.

        Parameters
        ----------
        v : Any
            Raw identifier string.

        Returns
        -------
        tuple[str, str]
            (prefix, number); the prefix is empty if none was stripped.
        """
        s = _as_text(v).strip()
        n = self.remove_prefix(s)
        if not n or n == s:
            return "", n
        prefix = s[: len(s) - len(n)] if s.endswith(n) else ""
        return re.sub(r":?\s*$", "", prefix), n


def _as_text(v: Any) -> str:
    if v is None or is_empty_sentinel(v):
        return ""
    if isinstance(v, ScalarType):
        return v.value or ""
    return str(v)


def prefer_year_lccn(candidates: list[PublicationIdentifier], prefixed: bool) -> PublicationIdentifier | None:
    """Resolve an unprefixed number that could be either an OCLC or an LCCN.

    Both schemes accept bare digit strings. When the input had no scheme
    prefix, both schemes produced candidates, and the LCCN candidate is a
    valid 10-digit number whose leading digits could be a 4-digit year
    ("1..." or "20..."), the LCCN is chosen.

    Parameters
    ----------
    candidates : list[PublicationIdentifier]
        Instances built for every candidate scheme, in priority order.
    prefixed : bool
        Whether the original input carried a scheme prefix.

    Returns
    -------
    PublicationIdentifier | None
        The LCCN instance if the rule applies, otherwise None.
    """
    if prefixed:
        return None
    types = {c.TYPE for c in candidates}
    if not {"oclc", "lccn"} <= types:
        return None
    for candidate in candidates:
        if candidate.TYPE == "lccn" and candidate.is_valid():
            n = candidate.value or ""
            if len(n) == 10 and (n.startswith("1") or n.startswith("20")):
                return candidate
            return None
    return None


class PublicationIdentifier(ScalarType):
    """A generic standard identifier for a published work.

    Also the base class of the specific schemes. Subclasses declare
    ``PREFIX``, ``TYPE`` and ``PRIORITY``; declaring them is enough to take
    part in scheme inference.
    """

    PREFIX: ClassVar[str] = "???"
    TYPE: ClassVar[str] = "unknown"
    PRIORITY: ClassVar[int | None] = None

    rules: ClassVar[IdentifierRules] = IdentifierRules()

    _registered: ClassVar[list[type[PublicationIdentifier]]] = []

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if cls.__dict__.get("PRIORITY") is not None:
            PublicationIdentifier._registered.append(cls)

    # ------------------------------------------------------------------
    # Scheme registry
    # ------------------------------------------------------------------

    @staticmethod
    def identifier_classes() -> list[type[PublicationIdentifier]]:
        """Identifier subclasses in inference priority order."""
        return sorted(PublicationIdentifier._registered, key=lambda c: c.PRIORITY or 0)

    @staticmethod
    def identifier_types() -> list[str]:
        """Identifier type names in priority order."""
        return [c.TYPE for c in PublicationIdentifier.identifier_classes()]

    @staticmethod
    def subclass_map() -> dict[str, type[PublicationIdentifier]]:
        """Table of identifier subclasses keyed by type name."""
        return {c.TYPE: c for c in PublicationIdentifier.identifier_classes()}

    @staticmethod
    def subclass(type_: Any = None) -> type[PublicationIdentifier] | None:
        """Retrieve the matching identifier subclass.

        Parameters
        ----------
        type_ : str | type | None
            Type name (case-insensitive) or a subclass.

        Returns
        -------
        type[PublicationIdentifier] | None
            The subclass, or None if there is no match.
        """
        if isinstance(type_, str):
            return PublicationIdentifier.subclass_map().get(type_.strip().lower())
        if isinstance(type_, type) and issubclass(type_, PublicationIdentifier):
            return None if type_ is PublicationIdentifier else type_
        return None

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    @classmethod
    def create(cls: type[T], v: Any, type_: Any = None, **opt: Any) -> T | None:
        """Create a new (possibly invalid) identifier.

        On PublicationIdentifier itself the scheme is inferred from *v*
        unless *type_* is given. On a concrete subclass an instance of that
        subclass is built.

        Parameters
        ----------
        v : Any
            Identifier string (with or without a scheme prefix).
        type_ : str | type | None, optional
            Scheme to use instead of inferring one.
        **opt : Any
            Ignored; accepted for interface compatibility.

        Returns
        -------
        PublicationIdentifier | None
            None if *v* is not any kind of identifier.
        """
        if isinstance(v, PublicationIdentifier) and (type_ is None or v.TYPE == _type_name(type_)):
            if cls is PublicationIdentifier or isinstance(v, cls):
                return v.copy()
            v = str(v)

        if type_ is not None:
            subclass = PublicationIdentifier.subclass(type_)
            if subclass is None or not (cls is PublicationIdentifier or issubclass(subclass, cls)):
                return None
            return subclass._build(v)

        if cls is not PublicationIdentifier:
            return cls._build(v)

        return cls._infer(v)

    @classmethod
    def _build(cls: type[T], v: Any) -> T | None:
        text = _as_text(v).strip()
        if not text:
            return None
        return cls(text)

    @classmethod
    def _infer(cls, v: Any) -> PublicationIdentifier | None:
        prefix, number = cls.rules.parts(v)
        if not number.strip():
            return None
        value = f"{prefix}:{number}" if prefix else number

        candidates = [c(value) for c in cls.identifier_classes() if c.rules.candidate(value)]
        if not candidates:
            return None

        preferred = prefer_year_lccn(candidates, prefixed=bool(prefix))
        if preferred is not None:
            return preferred
        for candidate in candidates:
            if candidate.is_valid():
                return candidate
        return candidates[0]

    @classmethod
    def cast(cls: type[T], v: Any, invalid: bool = False, **opt: Any) -> T | None:
        """Type-cast a value to an identifier.

        Parameters
        ----------
        v : Any
            Value to use or transform.
        invalid : bool, optional
            If True, an invalid identifier is returned instead of None.

        Returns
        -------
        PublicationIdentifier | None
            None if *v* is not an identifier, or is invalid and *invalid*
            is False.
        """
        result = v if isinstance(v, cls) else cls.create(v, **opt)
        if result is not None and (invalid or result.is_valid()):
            return result
        return None

    @classmethod
    def deserialize(cls: type[T], data: Any) -> T | None:
        """Rebuild an identifier from its stored form, keeping invalid values."""
        return cls.cast(data, invalid=True)

    @staticmethod
    def split(value: Any) -> list[str]:
        """Create a list of identifier candidate strings.

        Parameters
        ----------
        value : str | PublicationIdentifier | list | None
            One or more identifiers, possibly delimited by
            comma/semicolon/pipe/tab/newline.

        Returns
        -------
        list[str]
            Non-blank candidate strings.
        """
        if value is None:
            return []
        items = value if isinstance(value, (list, tuple, set)) else [value]
        joined = "\n".join(str(item) for item in items if item is not None)
        return [part for part in SPLIT_RE.split(joined) if part.strip()]

    @classmethod
    def objects(cls, value: Any, invalid: bool = True) -> list[PublicationIdentifier | None]:
        """Create identifier instances from candidate string(s).

        With *invalid* False, unrecognized and invalid entries are dropped;
        otherwise they appear as invalid instances (or None).
        """
        result = [cls.cast(item, invalid=invalid) for item in cls.split(value)]
        return result if invalid else [item for item in result if item is not None]

    @classmethod
    def object_map(cls, value: Any, invalid: bool = True) -> dict[str, PublicationIdentifier | None]:
        """Map each candidate string to its identifier instance."""
        result = {item: cls.cast(item, invalid=invalid) for item in cls.split(value)}
        if invalid:
            return result
        return {k: v for k, v in result.items() if v is not None}

    # ------------------------------------------------------------------
    # Instance
    # ------------------------------------------------------------------

    def set(self, v: Any, **opt: Any) -> str:
        """Assign a new value, allowing for an invalid identifier.

        If *v* carries the prefix of a different scheme the result is blank
        (and therefore invalid).
        """
        text = _as_text(v)
        if not text.strip():
            self.value = ""
        elif not self.rules.has_prefix(text) and SCHEME_LABEL_RE.match(text):
            self.value = ""
        else:
            self.value = self.rules.normalize(text)
        return self.value

    @property
    def prefix(self) -> str:
        """The identifier type portion of the value."""
        return self.PREFIX

    @property
    def type(self) -> str:
        """The name of the represented identifier type."""
        return self.TYPE

    @property
    def number(self) -> str:
        """The identifier number portion of the value."""
        return self.value or ""

    def parts(self) -> tuple[str, str]:
        """(prefix, number) of this identifier."""
        return self.prefix, self.number

    def serialize(self) -> str | None:
        """Return the prefixed form so the scheme survives a round trip."""
        return str(self) or None

    def __str__(self) -> str:
        return ":".join(self.parts()) if self.value else ""


def _type_name(type_: Any) -> str | None:
    if isinstance(type_, str):
        return type_.strip().lower()
    return getattr(type_, "TYPE", None)

