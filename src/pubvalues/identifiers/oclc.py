"""OCLC control numbers (WorldCat OCN).

The prefix of an OCN determines its digit count: "ocn" numbers have 8
digits, "ocm" 9, and "on" 10 or more. Numbers with a generic prefix (or
none) have at least 8 digits. Shorter numbers are zero-filled on the left.
There is no check digit.
"""

from __future__ import annotations

import logging
import re
from typing import Any, ClassVar

from pubvalues.identifiers.base import IdentifierRules, PublicationIdentifier, digits_only

__all__ = ["OCLC_FORMAT", "Oclc", "OclcRules"]

logger = logging.getLogger(__name__)

# Prefix to (minimum, maximum) digit count; None means no maximum.
OCLC_FORMAT: dict[str, tuple[int, int | None]] = {
    "ocn": (8, 8),
    "ocm": (9, 9),
    "on": (10, None),
    "OCLC": (8, None),
    "OCoLC": (8, None),
    "(OCoLC)": (8, None),
}

OCLC_MIN_DIGITS = 8
OCLC_MAX_DIGITS = 10

CANDIDATE_MIN = 3
CANDIDATE_MAX = OCLC_MAX_DIGITS + 1

OCLC_PREFIX_RE = re.compile(
    r"^\s*(" + "|".join(re.escape(p) for p in OCLC_FORMAT) + r"):?\s*",
    re.IGNORECASE,
)

OCLC_IDENTIFIER_RE = re.compile(
    rf"^(?:\d{{{OCLC_MIN_DIGITS},{OCLC_MAX_DIGITS}}}"
    rf"|[1-9]\d{{{CANDIDATE_MIN - 1},{OCLC_MIN_DIGITS - 1}}})$"
)

OCLC_CANDIDATE_RE = re.compile(rf"^\d{{{CANDIDATE_MIN},{CANDIDATE_MAX}}}$")


def digit_range(prefix: str | None) -> tuple[int, int | None]:
    """Digit count limits for an OCN with the given prefix."""
    if prefix:
        for key, limits in OCLC_FORMAT.items():
            if key.casefold() == prefix.casefold():
                return limits
    return OCLC_MIN_DIGITS, None


class OclcRules(IdentifierRules):
    """Validation and zero-fill rules for OCLC numbers."""

    PREFIX_RE = OCLC_PREFIX_RE

    def normalize(self, v: Any) -> str:
        return self.to_oclc(v, log=False) or digits_only(self.remove_prefix(v))

    def valid(self, v: Any) -> bool:
        return self.is_oclc(v)

    def candidate(self, v: Any) -> bool:
        text = OCLC_PREFIX_RE.sub("", str(v or "").strip(), count=1)
        return OCLC_CANDIDATE_RE.match(text) is not None

    def identifier(self, v: Any) -> str | None:
        text = self.remove_prefix(v).rstrip()
        return text if OCLC_IDENTIFIER_RE.match(text) else None

    def is_oclc(self, v: Any) -> bool:
        """Indicate whether *v* is a valid OCN."""
        return bool(self.to_oclc(v, log=False))

    def to_oclc(self, v: Any, log: bool = True) -> str | None:
        """Produce the digits of an OCN, zero-filled to the width of its prefix.

        Parameters
        ----------
        v : Any
            Value to convert (with or without an OCLC prefix).
        log : bool, optional
            Log an INFO message when *v* is not a valid OCN.

        Returns
        -------
        str | None
            The digits, or None if they are out of range for the prefix.
        """
        text = str(v or "").strip()
        match = OCLC_PREFIX_RE.match(text)
        low, high = digit_range(match.group(1) if match else None)

        digits = digits_only(self.identifier(text) or "")
        if digits:
            digits = digits.rjust(low, "0")
            if low <= len(digits) and (high is None or len(digits) <= high):
                return digits
        if log:
            logger.info("to_oclc: %r is not a valid OCN", v)
        return None


class Oclc(PublicationIdentifier):
    """OCLC number identifier (e.g. ``oclc:01234567``)."""

    PREFIX: ClassVar[str] = "oclc"
    TYPE: ClassVar[str] = "oclc"
    PRIORITY: ClassVar[int | None] = 50

    rules: ClassVar[OclcRules] = OclcRules()

    def to_oclc(self, log: bool = True) -> str | None:
        return self.rules.to_oclc(self.value, log=log)
