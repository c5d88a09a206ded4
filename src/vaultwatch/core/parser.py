"""Decoding of vault logfile lines into LogRecords."""

from __future__ import annotations

import re
from datetime import datetime

from vaultwatch.models.runtime import LogRecord

START_CATEGORY = "START"

# INFO 2020-07-08T19:58:26.841778689+01:00 [src/bin/safe_vault.rs:114] message
_LOG_LINE_RE = re.compile(
    r"^(?P<category>[A-Z]{4}) "
    r"(?P<time>\S{35}) "
    r"(?P<source>\[[^\]]*\])"
    r"(?: (?P<message>.*))?$"
)

_RFC3339_RE = re.compile(
    r"^(?P<base>\d{4}-\d{2}-\d{2}[Tt ]\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<frac>\d+))?"
    r"(?P<offset>[Zz]|[+-]\d{2}:\d{2})$"
)


def parse_rfc3339(value: str) -> datetime | None:
    """Parse an RFC 3339 offset datetime, or return None."""
    parsed = parse_rfc3339_ns(value)
    return parsed[0] if parsed else None


def parse_rfc3339_ns(value: str) -> tuple[datetime, int] | None:
    """Parse an RFC 3339 offset datetime, keeping the fraction in nanoseconds.

    The datetime only holds microseconds, so the full sub-second fraction is
    returned alongside it. Digits past the ninth are dropped.
    """
    m = _RFC3339_RE.match(value)
    if not m:
        return None

    frac = m.group("frac") or ""
    offset = m.group("offset")
    if offset in ("Z", "z"):
        offset = "+00:00"
    text = m.group("base").replace("t", "T").replace(" ", "T")
    if frac:
        text += "." + frac[:6].ljust(6, "0")

    try:
        timestamp = datetime.fromisoformat(text + offset)
    except ValueError:
        return None
    return timestamp, int(frac[:9].ljust(9, "0"))


class LineDecoder:
    """Decodes logfile lines using the vault line grammar.

    Lines that do not match the primary grammar may still be accepted as a
    process start marker (``Running <app_name> <version>``).
    """

    def __init__(self, app_name: str = "safe-vault") -> None:
        self._app_name = app_name
        self._start_prefix = f"Running {app_name} "

    @property
    def app_name(self) -> str:
        return self._app_name

    def decode(self, line: str) -> LogRecord | None:
        """Decode a line, returning None when neither grammar matches."""
        line = line.rstrip("\r\n")
        if not line:
            return None
        return self._decode_log_line(line) or self._decode_start(line)

    def describe_failure(self, line: str) -> str:
        """Diagnostic text for a line that neither grammar accepts."""
        line = line.rstrip("\r\n")
        return f"decode failed on: {line}"

    def _decode_log_line(self, line: str) -> LogRecord | None:
        m = _LOG_LINE_RE.match(line)
        if not m:
            return None

        time_text = m.group("time")
        parsed = parse_rfc3339_ns(time_text)
        if parsed is None:
            return None

        timestamp, nanosecond = parsed
        category = m.group("category")
        source = m.group("source")
        message = m.group("message") or ""
        return LogRecord(
            raw_text=line,
            category=category,
            timestamp=timestamp,
            nanosecond=nanosecond,
            time_text=time_text,
            source_tag=source,
            message=message,
            diagnostic_text=(
                f"c: {category}, t: {time_text}, s: {source}, m: {message}"
            ),
        )

    def _decode_start(self, line: str) -> LogRecord | None:
        if not line.startswith(self._start_prefix):
            return None

        version = line[len(self._start_prefix):].strip()
        return LogRecord(
            raw_text=line,
            category=START_CATEGORY,
            diagnostic_text=f"{START_CATEGORY} {version}",
            version=version,
        )
