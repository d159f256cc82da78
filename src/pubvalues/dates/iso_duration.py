"""ISO-8601 durations (``P1Y2M10DT2H30M``).

A duration is given either as a string already in ISO-8601 form or as
structured parts (``Duration``, a mapping of the same field names, or a
``datetime.timedelta``), which are converted to the canonical string.
"""

from __future__ import annotations

import datetime as dt
import math
import re
from collections.abc import Mapping
from dataclasses import asdict, dataclass, fields
from typing import Any, ClassVar

from pubvalues.models.scalar import ScalarRules, ScalarType

__all__ = ["Duration", "IsoDuration", "IsoDurationRules"]

Number = int | float

# Fractions closer than this to a whole number snap to it.
EPSILON = 0.001

NUM = r"\d+(?:[.,]\d+)?"

START_PATTERN: dict[str, re.Pattern[str]] = {
    "complete": re.compile(r"^(P(\d+Y)?(\d+M)?(\d+D)?(T(\d+H)?(\d+M)?(" + NUM + r"S)?)?)"),
    "weeks": re.compile(r"^(P" + NUM + r"W)"),
    "seconds": re.compile(r"^(P(\d+Y)?(\d+M)?(\d+D)?T(\d+H)?(\d+M)?" + NUM + r"S)"),
    "minutes": re.compile(r"^(P(\d+Y)?(\d+M)?(\d+D)?T(\d+H)?" + NUM + r"M)"),
    "hours": re.compile(r"^(P(\d+Y)?(\d+M)?(\d+D)?T" + NUM + r"H)"),
    "days": re.compile(r"^(P(\d+Y)?(\d+M)?" + NUM + r"D)"),
    "months": re.compile(r"^(P(\d+Y)?" + NUM + r"M)"),
    "years": re.compile(r"^(P" + NUM + r"Y)"),
}

MATCH_PATTERN: dict[str, re.Pattern[str]] = {
    key: re.compile(pattern.pattern + "$") for key, pattern in START_PATTERN.items()
}


@dataclass(frozen=True)
class Duration:
    """Structured duration parts; any part may be fractional.

    Attributes
    ----------
    years, months, weeks, days, hours, minutes, seconds : int | float | None
        Amount of each unit; None (or zero) when absent.
    """

    years: Number | None = None
    months: Number | None = None
    weeks: Number | None = None
    days: Number | None = None
    hours: Number | None = None
    minutes: Number | None = None
    seconds: Number | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Duration:
        """Build from a mapping, ignoring keys that are not duration parts."""
        names = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in names})

    @classmethod
    def from_timedelta(cls, delta: dt.timedelta) -> Duration:
        """Split a timedelta into days, hours, minutes and seconds."""
        hours, rest = divmod(delta.seconds, 3600)
        minutes, seconds = divmod(rest, 60)
        secs: Number = seconds + delta.microseconds / 1_000_000 if delta.microseconds else seconds
        return cls(days=delta.days, hours=hours, minutes=minutes, seconds=secs)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary, omitting absent parts."""
        return {k: v for k, v in asdict(self).items() if v is not None}


def fractional(value1: Number, value2: Number | None, multiplier: int) -> tuple[int, Number | None]:
    """Split *value1* into its whole part and carry the fraction into *value2*.

    Parameters
    ----------
    value1 : int | float
        Amount of the coarser unit.
    value2 : int | float | None
        Amount of the next finer unit.
    multiplier : int
        Number of finer units in one coarser unit.

    Returns
    -------
    tuple[int, int | float | None]
        (whole coarser amount, finer amount including the carried fraction).
    """
    whole = math.floor(value1)
    fraction = value1 - whole
    if 1 - fraction < EPSILON:
        whole += 1
        fraction = 0
    elif fraction < EPSILON:
        fraction = 0
    if fraction > 0:
        value2 = (value2 or 0) + fraction * multiplier
    return whole, value2


def _number(value: Number) -> str:
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return f"{value:.3f}".rstrip("0").rstrip(".")
    return str(value)


def _absent(value: Number | None) -> Number | None:
    return None if not value else value


class IsoDurationRules(ScalarRules):
    """Validation and conversion rules for ISO-8601 durations."""

    def normalize(self, v: Any) -> str:
        v = self.clean(v)
        if isinstance(v, list):
            v = v[0] if v else None
        if isinstance(v, ScalarType):
            v = v.value
        if isinstance(v, str):
            return self.string_normalize(v)
        if isinstance(v, dt.timedelta):
            v = Duration.from_timedelta(v) if v >= dt.timedelta(0) else None
        elif isinstance(v, Mapping):
            v = Duration.from_mapping(v)
        if isinstance(v, Duration):
            return self.from_duration(v)
        return ""

    def valid(self, v: Any) -> bool:
        return bool(self.normalize(v))

    def string_normalize(self, v: str) -> str:
        """Return the duration string if it is in ISO-8601 form, else ""."""
        text = v.strip().upper()
        if text in ("P", "PT") or text.endswith("T"):
            return ""
        if any(pattern.match(text) for pattern in MATCH_PATTERN.values()):
            return text
        return ""

    def from_duration(self, duration: Duration) -> str:
        """Produce the ISO-8601 string for structured duration parts.

        Parameters
        ----------
        duration : Duration
            Parts to convert; negative or non-finite parts make the duration
            invalid.

        Returns
        -------
        str
            Canonical duration (``P0D`` when every part is absent), or ""
            if a part is negative, infinite, NaN or not a number.
        """
        parts = list(asdict(duration).values())
        for part in parts:
            if part is None:
                continue
            if isinstance(part, bool) or not isinstance(part, (int, float)):
                return ""
            if part < 0 or not math.isfinite(part):
                return ""

        years, months, weeks, days, hours, mins, secs = (_absent(p) for p in parts)

        if isinstance(weeks, float):
            weeks, days = fractional(weeks, days, 7)
            weeks = _absent(weeks)
        others = (years, months, days, hours, mins, secs)
        if weeks and any(others):
            days = (days or 0) + weeks * 7
            weeks = None

        if isinstance(years, float):
            years, months = fractional(years, months, 12)
        if isinstance(months, float):
            months, days = fractional(months, days, 30)
        if isinstance(days, float):
            days, hours = fractional(days, hours, 24)
        if isinstance(hours, float):
            hours, mins = fractional(hours, mins, 60)
        if isinstance(mins, float):
            mins, secs = fractional(mins, secs, 60)
        if isinstance(secs, float):
            whole, rest = fractional(secs, 0, 1)
            if not rest:
                secs = whole

        years, months, days, hours, mins, secs = (_absent(p) for p in (years, months, days, hours, mins, secs))

        date_part = [f"{_number(n)}{unit}" for n, unit in ((years, "Y"), (months, "M"), (weeks, "W"), (days, "D")) if n]
        time_part = [f"{_number(n)}{unit}" for n, unit in ((hours, "H"), (mins, "M"), (secs, "S")) if n]
        if not date_part and not time_part:
            return "P0D"
        return "P" + "".join(date_part) + ("T" + "".join(time_part) if time_part else "")


class IsoDuration(ScalarType):
    """ISO-8601 duration."""

    rules: ClassVar[IsoDurationRules] = IsoDurationRules()

    @classmethod
    def from_duration(cls, duration: Duration | Mapping[str, Any] | dt.timedelta) -> str:
        """Canonical string for structured duration parts."""
        return cls.rules.normalize(duration)
