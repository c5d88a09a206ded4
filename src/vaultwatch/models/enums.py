"""Enumerations for vaultwatch models."""

from datetime import timedelta
from enum import Enum


class AgeBracket(str, Enum):
    """Lifecycle stage of a vault as announced in its logfile."""

    UNKNOWN = "Unknown"
    INFANT = "Infant"
    ADULT = "Adult"
    ELDER = "Elder"


class Granularity(str, Enum):
    """Bucket duration of one BucketSet within a TimelineSet."""

    MINUTE = "1 minute"
    HOUR = "1 hour"
    DAY = "1 day"
    TWELFTH_YEAR = "1 twelfth year"
    YEAR = "1 year"

    @property
    def duration(self) -> timedelta:
        return _DURATIONS[self]


_DURATIONS: dict[Granularity, timedelta] = {
    Granularity.MINUTE: timedelta(minutes=1),
    Granularity.HOUR: timedelta(hours=1),
    Granularity.DAY: timedelta(days=1),
    Granularity.TWELFTH_YEAR: timedelta(days=365 // 12),
    Granularity.YEAR: timedelta(days=365),
}


class TimelineName(str, Enum):
    """The timelines kept by every MetricsStore."""

    PUTS = "PUTS"
    GETS = "GETS"
    ERRORS = "ERRORS"


class ClassificationKind(str, Enum):
    """What the activity classifier recognized in a log record."""

    ACTIVITY = "activity"
    ELDERS = "elders"
    ADULTS = "adults"
    AGE_BRACKET = "age_bracket"
    FAILED = "failed"
    NONE = "none"
