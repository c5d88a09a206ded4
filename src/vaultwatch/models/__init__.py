"""vaultwatch data models."""

from vaultwatch.models.enums import (
    AgeBracket,
    ClassificationKind,
    Granularity,
    TimelineName,
)
from vaultwatch.models.runtime import ActivityRecord, Classification, LogRecord

__all__ = [
    "AgeBracket",
    "ClassificationKind",
    "Granularity",
    "TimelineName",
    "LogRecord",
    "ActivityRecord",
    "Classification",
]
