"""ISBN identifiers (ISBN-10 and ISBN-13).

See https://www.isbn-international.org/content/what-isbn
"""

from __future__ import annotations

import logging
import re
from typing import Any, ClassVar

from pubvalues.identifiers.base import SEPARATOR, IdentifierRules, PublicationIdentifier, digits_only

__all__ = ["Isbn", "IsbnRules"]

logger = logging.getLogger(__name__)

ISBN_10_DIGITS = 10
ISBN_13_DIGITS = 13

# Digits in a candidate, allowing a missing or one extra digit.
CANDIDATE_MIN = ISBN_10_DIGITS - 1
CANDIDATE_MAX = ISBN_13_DIGITS + 1

ISBN_PREFIX_RE = re.compile(r"^\s*ISBN(?::\s*|\s+)", re.IGNORECASE)

ISBN_IDENTIFIER_RE = re.compile(
    rf"^(?:(?:\d{SEPARATOR}*){{{ISBN_10_DIGITS - 1}}}[\dX]{SEPARATOR}*"
    rf"|(?:\d{SEPARATOR}*){{{ISBN_13_DIGITS}}})$",
    re.IGNORECASE,
)

ISBN_CANDIDATE_RE = re.compile(
    rf"^(?:\d{SEPARATOR}*){{{CANDIDATE_MIN - 1},{CANDIDATE_MAX - 1}}}[\dX]{SEPARATOR}*$",
    re.IGNORECASE,
)

SEPARATOR_RE = re.compile(SEPARATOR)


def isbn13_checksum(digits: str) -> str:
    """Check digit for the first 12 digits of an ISBN-13 (weights 1, 3)."""
    total = sum(int(d) * (1 if i % 2 == 0 else 3) for i, d in enumerate(digits[: ISBN_13_DIGITS - 1]))
    return str((10 - total % 10) % 10)


def isbn10_checksum(digits: str) -> str:
    """Check digit for the first 9 digits of an ISBN-10 (weights 1..9)."""
    total = sum(int(d) * (i + 1) for i, d in enumerate(digits[: ISBN_10_DIGITS - 1]))
    remainder = total % 11
    return "X" if remainder == 10 else str(remainder)


class IsbnRules(IdentifierRules):
    """Validation and conversion rules for ISBNs."""

    PREFIX_RE = ISBN_PREFIX_RE

    def normalize(self, v: Any) -> str:
        return SEPARATOR_RE.sub("", self.remove_prefix(v)).upper()

    def valid(self, v: Any) -> bool:
        return self.is_isbn(v)

    def candidate(self, v: Any) -> bool:
        text = str(v or "").strip()
        stripped = ISBN_PREFIX_RE.sub("", text, count=1)
        if stripped != text and stripped.strip():
            return True
        return ISBN_CANDIDATE_RE.match(text) is not None

    def identifier(self, v: Any) -> str | None:
        text = self.remove_prefix(v).rstrip()
        return text if ISBN_IDENTIFIER_RE.match(text) else None

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def is_isbn(self, v: Any) -> bool:
        """Indicate whether *v* is a valid ISBN-10 or ISBN-13."""
        isbn = self.identifier(v)
        if isbn is None:
            return False
        digits = digits_only(isbn.upper(), keep="X")
        return bool(digits) and self.checksum(digits) == digits[-1]

    def is_isbn13(self, v: Any) -> bool:
        """Indicate whether *v* is a valid ISBN-13."""
        isbn = self.identifier(v)
        if isbn is None:
            return False
        digits = digits_only(isbn)
        return len(digits) == ISBN_13_DIGITS and isbn13_checksum(digits) == digits[-1]

    def is_isbn10(self, v: Any) -> bool:
        """Indicate whether *v* is a valid ISBN-10."""
        isbn = self.identifier(v)
        if isbn is None:
            return False
        digits = digits_only(isbn.upper(), keep="X")
        return len(digits) == ISBN_10_DIGITS and isbn10_checksum(digits) == digits[-1]

    def checksum(self, isbn: str, validate: bool = False) -> str | None:
        """Calculate the check digit for an ISBN-10 or ISBN-13.

        Parameters
        ----------
        isbn : str
            Full identifier, or its digits without the check digit.
        validate : bool, optional
            If True, raise when the check digit is wrong.

        Returns
        -------
        str | None
            The expected check digit, or None if the length is wrong.

        Raises
        ------
        ValueError
            If *validate* is True and *isbn* is malformed or has the wrong
            check digit.
        """
        digits = digits_only(isbn.upper(), keep="X")
        final = digits[-1] if digits else ""
        check: str | None
        if len(digits) == ISBN_13_DIGITS:
            check = isbn13_checksum(digits[:-1])
            fail = check != final
        elif len(digits) == ISBN_13_DIGITS - 1:
            check = isbn13_checksum(digits)
            fail = False
        elif len(digits) == ISBN_10_DIGITS:
            check = isbn10_checksum(digits[:-1])
            fail = check != final
        elif len(digits) == ISBN_10_DIGITS - 1:
            check = isbn10_checksum(digits)
            fail = False
        else:
            check = None
            fail = True

        if validate:
            if check is None:
                raise ValueError(f"{isbn!r}: invalid ISBN-10 or ISBN-13")
            if fail:
                raise ValueError(f"{isbn!r}: check digit should be {check}")
        return check

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    def to_isbn(self, v: Any, log: bool = True) -> str | None:
        """Convert to the canonical (ISBN-13) form."""
        return self.to_isbn13(v, log=log)

    def to_isbn13(self, v: Any, log: bool = True) -> str | None:
        """Convert an ISBN-10 to ISBN-13; an ISBN-13 is returned as-is.

        Returns
        -------
        str | None
            13 digits, or None if *v* is not a valid ISBN.
        """
        isbn = self.identifier(v)
        digits = digits_only(isbn.upper(), keep="X") if isbn else ""
        if digits and self.checksum(digits) == digits[-1]:
            if len(digits) == ISBN_10_DIGITS:
                body = "978" + digits[:-1]
                return body + isbn13_checksum(body)
            return digits
        if log:
            kind = "ISBN-10" if len(digits) == ISBN_10_DIGITS else "ISBN-13"
            logger.info("to_isbn13: %r is not a valid %s", v, kind)
        return None

    def to_isbn10(self, v: Any, log: bool = True) -> str | None:
        """Convert an ISBN-13 to ISBN-10; only "978" ISBNs are convertible.

        Returns
        -------
        str | None
            10 characters, or None if *v* cannot be converted.
        """
        isbn = self.identifier(v)
        digits = digits_only(isbn.upper(), keep="X") if isbn else ""
        valid = bool(digits) and self.checksum(digits) == digits[-1]
        is_13 = len(digits) == ISBN_13_DIGITS
        if valid and is_13 and digits.startswith("978"):
            body = digits[3:-1]
            return body + isbn10_checksum(body)
        if valid and not is_13:
            return digits
        if log:
            if valid:
                logger.info("to_isbn10: cannot convert %r", v)
            else:
                logger.info("to_isbn10: %r is not a valid %s", v, "ISBN-13" if is_13 else "ISBN-10")
        return None


class Isbn(PublicationIdentifier):
    """ISBN identifier (e.g. ``isbn:9780306406157``)."""

    PREFIX: ClassVar[str] = "isbn"
    TYPE: ClassVar[str] = "isbn"
    PRIORITY: ClassVar[int | None] = 20

    rules: ClassVar[IsbnRules] = IsbnRules()

    def is_isbn13(self, v: Any = None) -> bool:
        return self.rules.is_isbn13(self.value if v is None else v)

    def is_isbn10(self, v: Any = None) -> bool:
        return self.rules.is_isbn10(self.value if v is None else v)

    def to_isbn13(self, log: bool = True) -> str | None:
        return self.rules.to_isbn13(self.value, log=log)

    def to_isbn10(self, log: bool = True) -> str | None:
        return self.rules.to_isbn10(self.value, log=log)

    def to_isbn(self, log: bool = True) -> str | None:
        return self.rules.to_isbn(self.value, log=log)
