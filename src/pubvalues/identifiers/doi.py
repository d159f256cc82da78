"""Digital Object Identifiers.

A DOI is ``10.<registrant>[.<sub>]/<suffix>``. It has no check digit, and
the suffix is kept exactly as given (DOIs are case-insensitive but are
displayed as registered).
"""

from __future__ import annotations

import re
from typing import Any, ClassVar
from urllib.parse import quote, unquote

from pubvalues.identifiers.base import IdentifierRules, PublicationIdentifier

__all__ = ["Doi", "DoiRules"]

DOI_RESOLVER = "https://doi.org/"

DOI_PREFIX_RE = re.compile(
    r"^\s*(?:(?:https?:)?(?://)?(?:dx\.)?doi\.org/|doi:\s*|doi\s+)",
    re.IGNORECASE,
)

DOI_IDENTIFIER_RE = re.compile(r"^10\.\d{4,}(?:\.\d+)*/\S+$")

DOI_CANDIDATE_RE = re.compile(r"^10\.\d{2,}")

# Punctuation that belongs to the surrounding citation, not the DOI.
TRAILING_PUNCT_RE = re.compile(r"[.,;]+$")


class DoiRules(IdentifierRules):
    """Prefix stripping and validation rules for DOIs."""

    PREFIX_RE = DOI_PREFIX_RE

    def normalize(self, v: Any) -> str:
        text = unquote(self.remove_prefix(v).strip())
        return TRAILING_PUNCT_RE.sub("", text)

    def valid(self, v: Any) -> bool:
        return self.identifier(v) is not None

    def candidate(self, v: Any) -> bool:
        text = str(v or "").strip()
        stripped = DOI_PREFIX_RE.sub("", text, count=1)
        if stripped != text and stripped.strip():
            return True
        return DOI_CANDIDATE_RE.match(text) is not None

    def identifier(self, v: Any) -> str | None:
        text = self.normalize(v)
        return text if DOI_IDENTIFIER_RE.match(text) else None


class Doi(PublicationIdentifier):
    """DOI identifier (e.g. ``doi:10.1000/182``)."""

    PREFIX: ClassVar[str] = "doi"
    TYPE: ClassVar[str] = "doi"
    PRIORITY: ClassVar[int | None] = 10

    rules: ClassVar[DoiRules] = DoiRules()

    @property
    def url(self) -> str:
        """Resolver link for the DOI."""
        return DOI_RESOLVER + quote(self.number, safe="/:;()._-") if self.value else ""
