"""ISO-8601 calendar values.

``IsoDate`` holds either a complete date-time (``2020-05-06T10:00:00Z``) or
a day (``2020-05-06``); ``IsoDay`` always coarsens to a day and ``IsoYear``
to a four-digit year. Input may be a string in many common shapes, a
``datetime.date``/``datetime.datetime``, a number (taken as a year) or
another value of the family.
"""

from __future__ import annotations

import datetime as dt
import math
import re
from typing import Any, ClassVar

from pubvalues.config import get_config
from pubvalues.models.scalar import ScalarRules, ScalarType

__all__ = [
    "IsoDate",
    "IsoDateRules",
    "IsoDay",
    "IsoDayRules",
    "IsoYear",
    "IsoYearRules",
]

YEAR = r"\d{4}"
MONTH = r"\d\d"
DAY = r"\d\d"
DATE = rf"({YEAR})-({MONTH})-({DAY})"
TIME = r"(\d\d):(\d\d)(?::(\d\d)(\.\d+)?)?"
ZULU = "Z"
ZONE = rf"{ZULU}|[+-]\d\d?(?::\d\d?)?"

# Prefix-anchored shapes; group 1 is the whole recognized value and groups
# 2-4 are year, month and day where present. For "complete", groups 5-8 are
# hour, minute, second and fraction and group 9 is the zone.
START_PATTERN: dict[str, re.Pattern[str]] = {
    "complete": re.compile(rf"^\s*({DATE}[T\s]+{TIME}\s*({ZONE})?)"),
    "day": re.compile(rf"^\s*({DATE})\s*"),
    "year": re.compile(rf"^\s*({YEAR})(?![\d/.:-])\s*"),
}

MATCH_PATTERN: dict[str, re.Pattern[str]] = {
    key: re.compile(pattern.pattern + "$") for key, pattern in START_PATTERN.items()
}

UTC_OFFSET_RE = re.compile(r"[+-]00?(?::00?)?$")
FRACTIONAL_SECONDS_RE = re.compile(r"\d+\.\d+")
DATE_TIME_GAP_RE = re.compile(r"^(\d{4}-\d\d-\d\d)\s+(?=\d)")

LEADING_COPYRIGHT_RE = re.compile(r"^\s*[cC]\.?\s*(?=\d)")
COPYRIGHT_MARK_RE = re.compile(r"[(\[][cC©]\.?[)\]]|©")

AMERICAN_DATE_RE = re.compile(r"^\s*(\d{1,2})([/.-])(\d{1,2})\2(\d{4}|\d{2})(?!\d)")

ASN_1_DATETIME_RE = re.compile(
    r"(?P<year>\d{4})"
    r"(?:(?P<month>\d\d)(?:(?P<day>\d\d)(?:(?P<hour>\d\d)(?:(?P<minute>\d\d)(?P<second>\d\d)?)?)?)?)?"
)
ASN_1_TIMEZONE_RE = re.compile(r"Z$|([+-])(\d\d?)[':]?(?:(\d\d?)[':]?)?$", re.IGNORECASE)

TRAILING_ZONE_RE = re.compile(r"\s+(Z|[+-]\d\d?(?::\d\d?)?)$", re.IGNORECASE)

# Layouts tried by the general parser: (format, includes a time of day).
PARSE_FORMATS: tuple[tuple[str, bool], ...] = (
    ("%Y/%m/%d %H:%M:%S", True),
    ("%Y/%m/%d %H:%M", True),
    ("%Y/%m/%d", False),
    ("%Y/%m", False),
    ("%Y-%m", False),
    ("%B %d, %Y", False),
    ("%b %d, %Y", False),
    ("%B %d %Y", False),
    ("%b %d %Y", False),
    ("%d %B %Y", False),
    ("%d %b %Y", False),
    ("%B %Y", False),
    ("%b %Y", False),
    ("%a, %d %b %Y %H:%M:%S", True),
)


def reference_year() -> int:
    """Year used to expand two-digit years."""
    return get_config().reference_year or dt.date.today().year


def _calendar_day(year: str, month: str, day: str) -> str | None:
    try:
        return dt.date(int(year), int(month), int(day)).isoformat()
    except ValueError:
        return None


def _parse_zone(zone: str) -> dt.tzinfo | None:
    """Timezone for "Z" or "+hh[:mm]"; None if the offset is out of range."""
    if zone.upper() == ZULU:
        return dt.timezone.utc
    sign = -1 if zone[0] == "-" else 1
    hours, _, minutes = zone[1:].partition(":")
    if int(minutes or 0) > 59:
        return None
    offset = dt.timedelta(hours=int(hours), minutes=int(minutes or 0))
    try:
        return dt.timezone(sign * offset)
    except ValueError:
        return None


def _complete_datetime(match: re.Match[str]) -> dt.datetime | None:
    """Build the datetime for a "complete" match; naive values are taken as UTC."""
    year, month, day, hour, minute, second, fraction, zone = match.group(2, 3, 4, 5, 6, 7, 8, 9)
    seconds = int(second or 0)
    if fraction:
        seconds = min(math.floor(seconds + float(fraction) + 0.5), 59)
    tzinfo = _parse_zone(zone) if zone else dt.timezone.utc
    if tzinfo is None:
        return None
    try:
        return dt.datetime(int(year), int(month), int(day), int(hour), int(minute), seconds, tzinfo=tzinfo)
    except ValueError:
        return None


def _general_parse(value: str) -> tuple[dt.datetime, bool] | None:
    """Parse *value* with the known layouts; returns (datetime, has_time)."""
    text = value.strip()
    zone = None
    match = TRAILING_ZONE_RE.search(text)
    if match:
        zone = _parse_zone(match.group(1))
        if zone is None:
            return None
        text = text[: match.start()]
    for layout, has_time in PARSE_FORMATS:
        try:
            parsed = dt.datetime.strptime(text, layout)
        except ValueError:
            continue
        if zone is not None:
            parsed = parsed.replace(tzinfo=zone)
        return parsed, has_time
    return None


def _datetime_text(value: dt.datetime) -> str:
    text = value.isoformat()
    return text if value.tzinfo is not None else text + ZULU


class IsoDateRules(ScalarRules):
    """Conversion rules shared by the ISO-8601 calendar types."""

    def normalize(self, v: Any) -> str:
        v = self.clean(v)
        if isinstance(v, list):
            v = v[0] if v else None
        if isinstance(v, ScalarType):
            if type(v) is self.value_class:
                return v.value or ""
            v = v.value
        if isinstance(v, str):
            v = self.strip_copyright(v)
        return self.convert(v) or ""

    def convert(self, v: Any) -> str | None:
        """Produce the canonical form for this precision."""
        return self.datetime_convert(v)

    def valid(self, v: Any) -> bool:
        return bool(self.normalize(v))

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    def datetime_convert(self, v: Any) -> str | None:
        """Transform a value into an ISO-8601 date-time or day.

        Parameters
        ----------
        v : Any
            String, date, datetime, number (year) or calendar value.

        Returns
        -------
        str | None
            ``YYYY-MM-DDThh:mm:ss[zone]`` if a time of day was given,
            ``YYYY-MM-DD`` otherwise; None if *v* is not a date.
        """
        if v is None or isinstance(v, bool) or v == 0:
            return None
        if isinstance(v, (int, float)) or isinstance(v, (IsoYear, IsoDay)):
            return self.day_convert(v)
        if isinstance(v, IsoDate):
            return str(v) or None
        if isinstance(v, dt.datetime):
            return self.datetime_clean(_datetime_text(v))
        if isinstance(v, dt.date):
            return v.isoformat()
        text = str(v)
        if match := START_PATTERN["complete"].match(text):
            parsed = _complete_datetime(match)
            return self.datetime_clean(_datetime_text(parsed)) if parsed else None
        if match := START_PATTERN["day"].match(text):
            return _calendar_day(match.group(2), match.group(3), match.group(4))
        if START_PATTERN["year"].match(text):
            return self.day_convert(text)
        return self.datetime_parse(text)

    def day_convert(self, v: Any) -> str | None:
        """Transform a value into an ISO-8601 day (``YYYY-MM-DD``)."""
        if v is None or isinstance(v, bool) or v == 0:
            return None
        if isinstance(v, (int, float)):
            return self.day_convert(self.year_convert(v))
        if isinstance(v, ScalarType):
            return self.day_convert(v.value)
        if isinstance(v, dt.datetime):
            return v.date().isoformat()
        if isinstance(v, dt.date):
            return v.isoformat()
        text = str(v)
        if match := START_PATTERN["complete"].match(text):
            return _calendar_day(match.group(2), match.group(3), match.group(4))
        if match := START_PATTERN["day"].match(text):
            return _calendar_day(match.group(2), match.group(3), match.group(4))
        if match := START_PATTERN["year"].match(text):
            return f"{match.group(1)}-01-01"
        parsed = self.date_parse(text)
        return self.day_convert(parsed) if parsed else None

    def year_convert(self, v: Any) -> str | None:
        """Transform a value into a four-digit year."""
        if v is None or isinstance(v, bool) or v == 0:
            return None
        if isinstance(v, (int, float)):
            return str(int(v))
        if isinstance(v, ScalarType):
            return self.year_convert(v.value)
        if isinstance(v, dt.date):
            return f"{v.year:04d}"
        text = str(v)
        if match := START_PATTERN["complete"].match(text):
            return match.group(2)
        if match := START_PATTERN["day"].match(text):
            return match.group(2)
        if match := START_PATTERN["year"].match(text):
            return match.group(1)
        parsed = self.date_parse(text)
        return self.year_convert(parsed) if parsed else None

    # ------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------

    def datetime_parse(self, value: Any) -> str | None:
        """Interpret a date string that is not already in ISO-8601 form.

        Returns
        -------
        str | None
            A date-time if the input had a time of day, a day otherwise;
            None if the string cannot be interpreted.
        """
        translated = self.translate(value)
        if not isinstance(translated, str):
            return None
        if translated != value and any(p.match(translated) for p in START_PATTERN.values()):
            return self.datetime_convert(translated)
        result = _general_parse(translated)
        if result is None:
            return None
        parsed, has_time = result
        if has_time:
            return self.datetime_clean(_datetime_text(parsed))
        return parsed.date().isoformat()

    def date_parse(self, value: Any) -> str | None:
        """Interpret a date string as an ISO-8601 day."""
        translated = self.translate(value)
        if not isinstance(translated, str):
            return None
        if translated != value and any(p.match(translated) for p in START_PATTERN.values()):
            return self.day_convert(translated)
        result = _general_parse(translated)
        return result[0].date().isoformat() if result else None

    def translate(self, value: Any) -> Any:
        """Rewrite PDF or American date forms into parseable ones."""
        if not isinstance(value, str):
            return value
        result = self.pdf_date_translate(value)
        if result == value:
            result = self.american_date_translate(value)
        return result

    def datetime_clean(self, value: Any) -> str:
        """Canonicalize a date-time string.

        A UTC offset of zero becomes "Z", a space between date and time
        becomes "T", and fractional seconds are rounded (but never past 59).
        """
        text = str(value).strip()
        text = DATE_TIME_GAP_RE.sub(r"\1T", text)
        text = UTC_OFFSET_RE.sub(ZULU, text)
        return FRACTIONAL_SECONDS_RE.sub(lambda m: "%02d" % min(math.floor(float(m.group(0)) + 0.5), 59), text)

    # ------------------------------------------------------------------
    # Translations
    # ------------------------------------------------------------------

    def strip_copyright(self, v: Any) -> Any:
        """Remove copyright markers ("c.2015", "(c) 2015", "©2015")."""
        if not isinstance(v, str):
            return v
        return COPYRIGHT_MARK_RE.sub("", LEADING_COPYRIGHT_RE.sub("", v)).strip()

    def american_date_translate(self, value: Any) -> str:
        """Rewrite a leading "M/D/Y" (or "M-D-Y", "M.D.Y") date as "YYYY-MM-DD".

        A two-digit year is placed in the century of the reference year.
        """
        text = str(value).strip()
        match = AMERICAN_DATE_RE.match(text)
        if not match:
            return text
        month, day, year = int(match.group(1)), int(match.group(3)), match.group(4)
        full_year = (reference_year() // 100) * 100 + int(year) if len(year) == 2 else int(year)
        return f"{full_year:04d}-{month:02d}-{day:02d}" + text[match.end() :]

    def pdf_date_translate(self, value: Any) -> Any:
        """Rewrite an ASN.1 date string (as found in PDF metadata).

        "D:20200506101500+05'30'" becomes "2020/05/06 10:15:00 +05:30"; a
        bare year becomes "YYYY/01". Other values are returned unchanged.
        """
        original = value
        text = str(value).strip().upper()
        text = text[2:] if text.startswith("D:") else text
        if re.fullmatch(YEAR, text):
            return f"{text}/01"
        if not re.match(r"^\d{5}", text):
            return original

        zone = None
        if match := ASN_1_TIMEZONE_RE.search(text):
            if match.group(0).upper() == ZULU:
                zone = ZULU
            else:
                zone = match.group(1) + ":".join(p for p in (match.group(2), match.group(3)) if p)
            text = text[: match.start()]

        match = ASN_1_DATETIME_RE.search(text)
        if not match:
            return original
        parts = match.groupdict()
        if parts["hour"] and not parts["minute"]:
            parts["minute"] = "00"
        date_part = "/".join(p for p in (parts["year"], parts["month"], parts["day"]) if p)
        time_part = ":".join(p for p in (parts["hour"], parts["minute"], parts["second"]) if p)
        return " ".join(p for p in (date_part, time_part, zone) if p)

    # ------------------------------------------------------------------
    # Predicates
    # ------------------------------------------------------------------

    def is_year(self, v: Any) -> bool:
        """Indicate whether *v* normalizes to a bare year."""
        return MATCH_PATTERN["year"].match(self.normalize(v)) is not None

    def is_day(self, v: Any) -> bool:
        """Indicate whether *v* normalizes to a day."""
        return MATCH_PATTERN["day"].match(self.normalize(v)) is not None

    def is_complete(self, v: Any) -> bool:
        """Indicate whether *v* normalizes to a complete date-time."""
        return MATCH_PATTERN["complete"].match(self.normalize(v)) is not None


class IsoDayRules(IsoDateRules):
    """Rules coarsening every value to a day."""

    def convert(self, v: Any) -> str | None:
        return self.day_convert(v)

    def valid(self, v: Any) -> bool:
        return self.is_day(v)


class IsoYearRules(IsoDateRules):
    """Rules coarsening every value to a year."""

    def convert(self, v: Any) -> str | None:
        year = self.year_convert(v)
        return year if year and MATCH_PATTERN["year"].match(year) else None

    def valid(self, v: Any) -> bool:
        return self.is_year(v)


class IsoDate(ScalarType):
    """ISO-8601 date-time or day."""

    rules: ClassVar[IsoDateRules] = IsoDateRules()

    def is_year(self, v: Any = None) -> bool:
        return self.rules.is_year(self.value if v is None else v)

    def is_day(self, v: Any = None) -> bool:
        return self.rules.is_day(self.value if v is None else v)

    def is_complete(self, v: Any = None) -> bool:
        return self.rules.is_complete(self.value if v is None else v)


class IsoDay(IsoDate):
    """ISO-8601 day (``YYYY-MM-DD``)."""

    rules: ClassVar[IsoDateRules] = IsoDayRules()


class IsoYear(IsoDate):
    """ISO-8601 year (``YYYY``)."""

    rules: ClassVar[IsoDateRules] = IsoYearRules()
