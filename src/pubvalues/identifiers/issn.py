"""ISSN identifiers for serials (e.g. ``issn:03785955``)."""

from __future__ import annotations

import logging
import re
from typing import Any, ClassVar

from pubvalues.identifiers.base import SEPARATOR, IdentifierRules, PublicationIdentifier, digits_only

__all__ = ["Issn", "IssnRules"]

logger = logging.getLogger(__name__)

ISSN_DIGITS = 8

ISSN_PREFIX_RE = re.compile(r"^\s*ISSN(?::\s*|\s+)", re.IGNORECASE)

ISSN_IDENTIFIER_RE = re.compile(
    rf"^(?:\d{SEPARATOR}*){{{ISSN_DIGITS - 1}}}[\dX]{SEPARATOR}*$",
    re.IGNORECASE,
)

# 7 to 9 digits.
ISSN_CANDIDATE_RE = re.compile(
    rf"^(?:\d{SEPARATOR}*){{{ISSN_DIGITS - 2},{ISSN_DIGITS}}}[\dX]{SEPARATOR}*$",
    re.IGNORECASE,
)

SEPARATOR_RE = re.compile(SEPARATOR)


def issn_checksum(digits: str) -> str:
    """Check digit for the first 7 digits of an ISSN (weights 8..2)."""
    total = sum(int(d) * (ISSN_DIGITS - i) for i, d in enumerate(digits[: ISSN_DIGITS - 1]))
    remainder = 11 - total % 11
    if remainder == 10:
        return "X"
    return "0" if remainder == 11 else str(remainder)


class IssnRules(IdentifierRules):
    """Validation rules for ISSNs."""

    PREFIX_RE = ISSN_PREFIX_RE

    def normalize(self, v: Any) -> str:
        return SEPARATOR_RE.sub("", self.remove_prefix(v)).upper()

    def valid(self, v: Any) -> bool:
        return self.is_issn(v)

    def candidate(self, v: Any) -> bool:
        text = str(v or "").strip()
        stripped = ISSN_PREFIX_RE.sub("", text, count=1)
        if stripped != text and stripped.strip():
            return True
        return ISSN_CANDIDATE_RE.match(text) is not None

    def identifier(self, v: Any) -> str | None:
        text = self.remove_prefix(v).rstrip()
        return text if ISSN_IDENTIFIER_RE.match(text) else None

    def is_issn(self, v: Any) -> bool:
        """Indicate whether *v* is a valid ISSN."""
        return bool(self.to_issn(v, log=False, validate=True))

    def to_issn(self, v: Any, log: bool = True, validate: bool = False) -> str | None:
        """Produce the eight-character ISSN with a recalculated check digit.

        Parameters
        ----------
        v : Any
            Value to convert.
        log : bool, optional
            Log an INFO message when *v* cannot be converted.
        validate : bool, optional
            If True, an ISSN with the wrong check digit yields None.

        Returns
        -------
        str | None
            The ISSN, or None if *v* is not convertible.
        """
        issn = self.identifier(v)
        if issn is None:
            if log:
                logger.info("to_issn: %r is not a valid ISSN", v)
            return None
        digits = digits_only(issn.upper(), keep="X")
        final = digits[-1]
        check = issn_checksum(digits[:-1])
        if not validate or check == final:
            return digits[:-1] + check
        if log:
            logger.info("to_issn: %r: check digit should be %s", v, check)
        return None


class Issn(PublicationIdentifier):
    """ISSN identifier."""

    PREFIX: ClassVar[str] = "issn"
    TYPE: ClassVar[str] = "issn"
    PRIORITY: ClassVar[int | None] = 30

    rules: ClassVar[IssnRules] = IssnRules()

    def to_issn(self, log: bool = True, validate: bool = False) -> str | None:
        return self.rules.to_issn(self.value, log=log, validate=validate)
