"""Library of Congress Control Numbers.

Values are normalized as described at https://www.loc.gov/marc/lccn-namespace.html:
blanks are removed, anything after a "/" is dropped, and a hyphenated
serial number is zero-padded to six digits ("n79-1234" becomes
"n79001234"). An alphabetic prefix of up to three letters is kept in lower
case. There is no check digit.
"""

from __future__ import annotations

import logging
import re
from typing import Any, ClassVar

from pubvalues.identifiers.base import IdentifierRules, PublicationIdentifier, digits_only

__all__ = ["Lccn", "LccnRules"]

logger = logging.getLogger(__name__)

SERIAL_DIGITS = 6

# "LCCN:", "LCCN " or a permalink ("https://lccn.loc.gov/").
LCCN_PREFIX_RE = re.compile(
    r"^\s*(?:LCCN(?::\s*|\s+)|(?:https?:)?(?://)?lccn\.loc\.gov/)",
    re.IGNORECASE,
)

LCCN_IDENTIFIER_RE = re.compile(r"^[a-z]{0,3}\d{8,10}$")

LCCN_CANDIDATE_RE = re.compile(r"^[A-Za-z]{0,3}\s*\d{2,4}(?:-\d{1,6}|\d{4,8})?\s*(?:/\S*)?$")

CANDIDATE_MIN = 6
CANDIDATE_MAX = 12


class LccnRules(IdentifierRules):
    """Normalization and validation rules for LCCNs."""

    PREFIX_RE = LCCN_PREFIX_RE

    def normalize(self, v: Any) -> str:
        return self.to_lccn(v, log=False) or ""

    def valid(self, v: Any) -> bool:
        return self.is_lccn(v)

    def candidate(self, v: Any) -> bool:
        text = str(v or "").strip()
        stripped = LCCN_PREFIX_RE.sub("", text, count=1)
        if stripped != text and stripped.strip():
            return True
        if not LCCN_CANDIDATE_RE.match(text):
            return False
        count = len(digits_only(text.split("/", 1)[0]))
        return CANDIDATE_MIN <= count <= CANDIDATE_MAX

    def identifier(self, v: Any) -> str | None:
        normalized = self.to_lccn(v, log=False)
        return normalized if normalized and LCCN_IDENTIFIER_RE.match(normalized) else None

    def is_lccn(self, v: Any) -> bool:
        """Indicate whether *v* is a valid LCCN."""
        return self.identifier(v) is not None

    def to_lccn(self, v: Any, log: bool = True) -> str | None:
        """Apply Library of Congress normalization.

        Parameters
        ----------
        v : Any
            Value to normalize (with or without a prefix).
        log : bool, optional
            Log an INFO message when the result is not a valid LCCN.

        Returns
        -------
        str | None
            Normalized value (possibly invalid), or None if nothing remains.
        """
        text = re.sub(r"\s+", "", self.remove_prefix(v))
        text = text.split("/", 1)[0]
        if "-" in text:
            head, _, serial = text.partition("-")
            if serial.isdigit() and len(serial) < SERIAL_DIGITS:
                serial = serial.rjust(SERIAL_DIGITS, "0")
            text = head + serial
        text = re.sub(r"^[A-Za-z]+", lambda m: m.group(0).lower(), text)
        if log and not LCCN_IDENTIFIER_RE.match(text):
            logger.info("to_lccn: %r is not a valid LCCN", v)
        return text or None


class Lccn(PublicationIdentifier):
    """LCCN identifier (e.g. ``lccn:n79001234``)."""

    PREFIX: ClassVar[str] = "lccn"
    TYPE: ClassVar[str] = "lccn"
    PRIORITY: ClassVar[int | None] = 60

    rules: ClassVar[LccnRules] = LccnRules()

    @property
    def url(self) -> str:
        """Permalink for the LCCN."""
        return f"https://lccn.loc.gov/{self.number}" if self.value else ""
