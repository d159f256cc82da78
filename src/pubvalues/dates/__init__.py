"""ISO-8601 dates, days, years and durations."""

from pubvalues.dates.iso_date import IsoDate, IsoDateRules, IsoDay, IsoDayRules, IsoYear, IsoYearRules
from pubvalues.dates.iso_duration import Duration, IsoDuration, IsoDurationRules

__all__ = [
    "Duration",
    "IsoDate",
    "IsoDateRules",
    "IsoDay",
    "IsoDayRules",
    "IsoDuration",
    "IsoDurationRules",
    "IsoYear",
    "IsoYearRules",
]
