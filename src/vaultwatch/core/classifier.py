"""Recognition of vault activity and state announcements in log records."""

from __future__ import annotations

import logging
import re

from vaultwatch.models.enums import AgeBracket, ClassificationKind, TimelineName
from vaultwatch.models.runtime import ActivityRecord, Classification, LogRecord

logger = logging.getLogger("vaultwatch.classifier")

DATA_RESPONSE_MARKER = (
    "Responded to our data handlers with: Response { response: Response::"
)
ELDERS_PREFIX = "No. of Elders:"
ADULTS_PREFIX = "No. of Adults:"
AGE_BRACKET_PREFIXES = ("Vault promoted to ", "Initializing new Vault as ")

_UINT_RE = re.compile(r"\s*(\d+)(?![\w.])")

_AGE_BRACKETS: dict[str, AgeBracket] = {
    "Infant": AgeBracket.INFANT,
    "Adult": AgeBracket.ADULT,
    "Elder": AgeBracket.ELDER,
}

# Activity label prefix -> timeline; labels matching none count as "other"
_ACTIVITY_ROUTES: tuple[tuple[str, TimelineName], ...] = (
    ("Get", TimelineName.GETS),
    ("Mut", TimelineName.PUTS),
)


def route_activity(label: str) -> TimelineName | None:
    """Return the timeline an activity label is counted on, if any."""
    for prefix, timeline in _ACTIVITY_ROUTES:
        if label.startswith(prefix):
            return timeline
    return None


class ActivityClassifier:
    """Scans decoded records for the patterns the dashboard tracks.

    Patterns are tried in priority order and the first one found decides the
    outcome, including when its payload fails to parse.
    """

    def classify(self, record: LogRecord) -> Classification:
        text = record.raw_text
        return (
            self._parse_data_response(record)
            or self._parse_count(text, ELDERS_PREFIX, ClassificationKind.ELDERS)
            or self._parse_count(text, ADULTS_PREFIX, ClassificationKind.ADULTS)
            or self._parse_age_bracket(text)
            or Classification(
                kind=ClassificationKind.NONE,
                diagnostic_text=record.diagnostic_text,
            )
        )

    def _parse_data_response(self, record: LogRecord) -> Classification | None:
        text = record.raw_text
        start = text.find(DATA_RESPONSE_MARKER)
        if start < 0:
            return None

        start += len(DATA_RESPONSE_MARKER)
        end = text.find(",", start)
        label = text[start:end].strip() if end >= 0 else ""
        if not label:
            logger.debug("Empty data response label in: %s", text)
            return _failed(f"failed to parse data response: {text}")

        return Classification(
            kind=ClassificationKind.ACTIVITY,
            diagnostic_text=f"vault activity: {label}",
            activity=ActivityRecord.from_record(record, label),
        )

    def _parse_count(
        self, text: str, prefix: str, kind: ClassificationKind
    ) -> Classification | None:
        position = text.find(prefix)
        if position < 0:
            return None

        m = _UINT_RE.match(text, position + len(prefix))
        if not m:
            logger.debug("Invalid count after %r in: %s", prefix, text)
            return _failed(f"failed to parse count from: '{text}'")

        count = int(m.group(1))
        return Classification(
            kind=kind,
            diagnostic_text=f"{kind.value.upper()}: {count}",
            count=count,
        )

    def _parse_age_bracket(self, text: str) -> Classification | None:
        for prefix in AGE_BRACKET_PREFIXES:
            position = text.find(prefix)
            if position >= 0:
                break
        else:
            return None

        words = text[position + len(prefix):].split(maxsplit=1)
        if not words:
            return _failed(f"failed to parse word at: '{text[position:]}'")

        word = words[0].rstrip(".,;:")
        bracket = _AGE_BRACKETS.get(word)
        if bracket is None:
            logger.debug("Unknown vault age bracket %r", word)
            return Classification(
                kind=ClassificationKind.AGE_BRACKET,
                diagnostic_text=f"unknown vault age bracket '{word}'",
                age_bracket=AgeBracket.UNKNOWN,
            )

        return Classification(
            kind=ClassificationKind.AGE_BRACKET,
            diagnostic_text=f"vault age bracket: {word}",
            age_bracket=bracket,
        )


def _failed(diagnostic: str) -> Classification:
    return Classification(kind=ClassificationKind.FAILED, diagnostic_text=diagnostic)
