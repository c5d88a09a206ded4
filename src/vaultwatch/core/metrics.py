"""Per-logfile metrics gathered from decoded vault log lines."""

from __future__ import annotations

import dataclasses
import logging
from collections import Counter, deque
from datetime import datetime
from pathlib import Path

from vaultwatch.config import HistoryConfig, ParserConfig, TimelineConfig
from vaultwatch.core.classifier import ActivityClassifier, route_activity
from vaultwatch.core.parser import START_CATEGORY, LineDecoder
from vaultwatch.core.timeline import TimelineSet
from vaultwatch.models.enums import AgeBracket, ClassificationKind, TimelineName
from vaultwatch.models.runtime import ActivityRecord, Classification, LogRecord

logger = logging.getLogger("vaultwatch.metrics")


class MetricsStore:
    """Counters, lifecycle state and timelines for one vault logfile.

    Lines are fed one at a time through ``ingest``. The store is owned by a
    single monitor and is not safe to share between threads.
    """

    def __init__(
        self,
        timeline_config: TimelineConfig | None = None,
        history_config: HistoryConfig | None = None,
        parser_config: ParserConfig | None = None,
        debug_path: Path | str | None = None,
    ) -> None:
        timeline_config = timeline_config or TimelineConfig()
        history_config = history_config or HistoryConfig()
        parser_config = parser_config or ParserConfig()

        self._decoder = LineDecoder(parser_config.app_name)
        self._classifier = ActivityClassifier()
        self.debug_path = Path(debug_path) if debug_path else None

        # Start
        self.started_at: datetime | None = None
        self.running_message: str | None = None
        self.version_string: str | None = None

        # Logfile entries
        self.log_history: deque[LogRecord] = deque(
            maxlen=history_config.log_history_max
        )
        self.activity_history: deque[ActivityRecord] = deque(
            maxlen=history_config.activity_history_max
        )
        self.most_recent: datetime | None = None
        self.most_recent_nanosecond = 0

        # Timelines
        self.timelines: dict[TimelineName, TimelineSet] = {
            name: TimelineSet.standard(name.value, timeline_config.steps)
            for name in TimelineName
        }

        # Counts
        self.category_counts: Counter[str] = Counter()
        self.gets = 0
        self.puts = 0
        self.errors = 0
        self.other = 0

        # Vault and network state
        self.age_bracket = AgeBracket.INFANT
        self.adults = 0
        self.elders = 0

        self.diagnostic_text = "-"

    @property
    def puts_timeline(self) -> TimelineSet:
        return self.timelines[TimelineName.PUTS]

    @property
    def gets_timeline(self) -> TimelineSet:
        return self.timelines[TimelineName.GETS]

    @property
    def errors_timeline(self) -> TimelineSet:
        return self.timelines[TimelineName.ERRORS]

    def timeline(self, name: TimelineName) -> TimelineSet:
        return self.timelines[name]

    def age_bracket_string(self) -> str:
        return self.age_bracket.value

    def reset_metrics(self) -> None:
        """Clear counters and vault state after the vault restarts."""
        self.age_bracket = AgeBracket.INFANT
        self.adults = 0
        self.elders = 0
        self.gets = 0
        self.puts = 0
        self.errors = 0
        self.other = 0

    def ingest(self, line: str) -> str:
        """Process one logfile line and return the parser diagnostic for it.

        Lines that cannot be decoded are ignored apart from the diagnostic.
        Raises OSError if the debug file cannot be written.
        """
        record = self._decoder.decode(line)
        if record is None:
            self.diagnostic_text = self._decoder.describe_failure(line)
            self._write_debug(self.diagnostic_text)
            return self.diagnostic_text

        if record.timestamp is None:
            record = dataclasses.replace(
                record,
                timestamp=self.most_recent,
                nanosecond=self.most_recent_nanosecond,
            )
        else:
            self.most_recent = record.timestamp
            self.most_recent_nanosecond = record.nanosecond

        if self.most_recent is not None:
            for timeline in self.timelines.values():
                timeline.advance_all(self.most_recent)

        classification = self._classifier.classify(record)
        self._apply(classification)
        self.diagnostic_text = classification.diagnostic_text

        self.category_counts[record.category] += 1
        self.log_history.append(record)

        # Reset after the line is fully processed so it applies to later lines
        if record.category == START_CATEGORY:
            started = record.timestamp.isoformat() if record.timestamp else "None"
            if not classification.recognized:
                self.diagnostic_text = f"{record.diagnostic_text} at {started}"
            self.started_at = record.timestamp
            self.running_message = record.raw_text
            self.version_string = record.version
            logger.info("Vault %s started at %s", record.version, record.timestamp)
            self.reset_metrics()

        self._write_debug(self.diagnostic_text)
        return self.diagnostic_text

    def count_get(self) -> None:
        self.gets += 1
        self.gets_timeline.increment_all()

    def count_put(self) -> None:
        self.puts += 1
        self.puts_timeline.increment_all()

    def count_error(self) -> None:
        self.errors += 1
        self.errors_timeline.increment_all()

    def count_activity(self, activity: ActivityRecord) -> None:
        """Count an activity as a get, a put or other."""
        route = route_activity(activity.activity_label)
        if route == TimelineName.GETS:
            self.count_get()
        elif route == TimelineName.PUTS:
            self.count_put()
        else:
            self.other += 1

    def _apply(self, classification: Classification) -> None:
        kind = classification.kind
        if kind == ClassificationKind.ACTIVITY and classification.activity:
            self.count_activity(classification.activity)
            self.activity_history.append(classification.activity)
        elif kind == ClassificationKind.ELDERS:
            self.elders = classification.count
        elif kind == ClassificationKind.ADULTS:
            self.adults = classification.count
        elif kind == ClassificationKind.AGE_BRACKET:
            self.age_bracket = classification.age_bracket
        elif kind == ClassificationKind.FAILED:
            logger.debug("Parser: %s", classification.diagnostic_text)

    def _write_debug(self, text: str) -> None:
        if self.debug_path is None:
            return
        with open(self.debug_path, "a", encoding="utf-8") as f:
            f.write(text + "\n")
