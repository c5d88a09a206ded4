"""Frozen dataclass models for decoded log data."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from vaultwatch.models.enums import AgeBracket, ClassificationKind


@dataclass(frozen=True, slots=True)
class LogRecord:
    """A single decoded logfile line."""

    raw_text: str
    category: str  # "INFO", "WARN" etc, or "START"
    timestamp: datetime | None = None
    nanosecond: int = 0  # full sub-second fraction, timestamp holds microseconds
    time_text: str = ""  # timestamp exactly as written in the line
    source_tag: str = ""
    message: str = ""
    diagnostic_text: str = ""
    version: str | None = None  # only set on START records


@dataclass(frozen=True, slots=True)
class ActivityRecord:
    """A vault data-handler response extracted from a LogRecord."""

    activity_label: str
    raw_text: str
    category: str
    timestamp: datetime | None = None
    source_tag: str = ""

    @classmethod
    def from_record(cls, record: LogRecord, label: str) -> ActivityRecord:
        return cls(
            activity_label=label,
            raw_text=record.raw_text,
            category=record.category,
            timestamp=record.timestamp,
            source_tag=record.source_tag,
        )


@dataclass(frozen=True, slots=True)
class Classification:
    """Outcome of scanning one record for activity and state patterns."""

    kind: ClassificationKind
    diagnostic_text: str
    activity: ActivityRecord | None = None
    count: int | None = None  # ELDERS / ADULTS
    age_bracket: AgeBracket | None = None

    @property
    def recognized(self) -> bool:
        return self.kind != ClassificationKind.NONE
