"""UPC-A product codes (e.g. ``upc:036000291452``).

A UPC may carry a 2- or 5-digit supplemental code after the check digit.
"""

from __future__ import annotations

import logging
import re
from typing import Any, ClassVar

from pubvalues.identifiers.base import SEPARATOR, IdentifierRules, PublicationIdentifier, digits_only

__all__ = ["Upc", "UpcRules"]

logger = logging.getLogger(__name__)

UPC_DIGITS = 12

UPC_PREFIX_RE = re.compile(r"^\s*UPC(?::\s*|\s+)", re.IGNORECASE)

UPC_IDENTIFIER_RE = re.compile(rf"^(?:\d{SEPARATOR}*){{{UPC_DIGITS}}}(?:(?:\d{SEPARATOR}*){{2}}|(?:\d{SEPARATOR}*){{5}})?$")

UPC_CANDIDATE_RE = re.compile(rf"^(?:\d{SEPARATOR}*){{{UPC_DIGITS - 1},{UPC_DIGITS + 1}}}$")

SEPARATOR_RE = re.compile(SEPARATOR)


def upc_checksum(digits: str) -> str:
    """Check digit for the first 11 digits of a UPC (weights 3, 1)."""
    total = sum(int(d) * (3 if i % 2 == 0 else 1) for i, d in enumerate(digits[: UPC_DIGITS - 1]))
    return str((10 - total % 10) % 10)


class UpcRules(IdentifierRules):
    """Validation rules for UPC-A codes."""

    PREFIX_RE = UPC_PREFIX_RE

    def normalize(self, v: Any) -> str:
        return SEPARATOR_RE.sub("", self.remove_prefix(v))

    def valid(self, v: Any) -> bool:
        return self.is_upc(v)

    def candidate(self, v: Any) -> bool:
        text = str(v or "").strip()
        stripped = UPC_PREFIX_RE.sub("", text, count=1)
        if stripped != text and stripped.strip():
            return True
        return UPC_CANDIDATE_RE.match(text) is not None

    def identifier(self, v: Any) -> str | None:
        text = self.remove_prefix(v).rstrip()
        return text if UPC_IDENTIFIER_RE.match(text) else None

    def is_upc(self, v: Any) -> bool:
        """Indicate whether *v* is a valid UPC."""
        return bool(self.to_upc(v, log=False, validate=True))

    def to_upc(self, v: Any, log: bool = True, validate: bool = False) -> str | None:
        """Produce the UPC digits with a recalculated check digit.

        Any supplemental digits are kept after the check digit.

        Parameters
        ----------
        v : Any
            Value to convert.
        log : bool, optional
            Log an INFO message when *v* cannot be converted.
        validate : bool, optional
            If True, a UPC with the wrong check digit yields None.

        Returns
        -------
        str | None
            The UPC, or None if *v* is not convertible.
        """
        upc = digits_only(self.identifier(v) or "")
        if len(upc) < UPC_DIGITS:
            if log:
                logger.info("to_upc: %r: not a valid UPC", v)
            return None
        last = UPC_DIGITS - 1
        digits, final, added = upc[:last], upc[last], upc[last + 1 :]
        check = upc_checksum(digits)
        if not validate or check == final:
            return f"{digits}{check}{added}"
        if log:
            logger.info("to_upc: %r: check digit should be %s", v, check)
        return None


class Upc(PublicationIdentifier):
    """UPC identifier."""

    PREFIX: ClassVar[str] = "upc"
    TYPE: ClassVar[str] = "upc"
    PRIORITY: ClassVar[int | None] = 40

    rules: ClassVar[UpcRules] = UpcRules()

    def to_upc(self, log: bool = True, validate: bool = False) -> str | None:
        return self.rules.to_upc(self.value, log=log, validate=validate)
