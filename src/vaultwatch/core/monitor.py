"""Per-logfile monitors and the registry that owns them."""

from __future__ import annotations

import itertools
import logging
from collections import deque
from collections.abc import Iterator
from pathlib import Path

from vaultwatch.config import VaultwatchConfig
from vaultwatch.core.metrics import MetricsStore

logger = logging.getLogger("vaultwatch.monitor")

_NEXT_INDEX = itertools.count()


class LogMonitor:
    """A monitored logfile: its most recent lines plus the metrics they produced."""

    def __init__(
        self,
        logfile: Path | str,
        config: VaultwatchConfig | None = None,
        debug_path: Path | str | None = None,
    ) -> None:
        config = config or VaultwatchConfig()
        self.index = next(_NEXT_INDEX)
        self.logfile = str(logfile)
        self.max_line_length = config.ingestion.max_line_length
        self.content: deque[str] = deque(maxlen=config.ingestion.lines_max)
        self.metrics = MetricsStore(
            timeline_config=config.timeline,
            history_config=config.history,
            parser_config=config.parser,
            debug_path=debug_path,
        )

    def load_logfile(self) -> int:
        """Process the existing content of the logfile, returning the line count.

        A logfile that does not exist yet is not an error.
        """
        path = Path(self.logfile)
        if not path.is_file():
            logger.debug("Logfile %s does not exist yet", path)
            return 0

        count = 0
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            for line in f:
                self.append_line(line)
                count += 1
        logger.debug("Loaded %d lines from %s", count, path)
        return count

    def append_line(self, text: str) -> None:
        """Feed a line to the metrics and keep it for display."""
        text = text.rstrip("\r\n")[: self.max_line_length]
        if self._line_filter(text):
            self.metrics.ingest(text)
            self.content.append(text)

    def _line_filter(self, text: str) -> bool:
        # Hook for dropping lines too numerous to be worth processing
        return True


class MonitorRegistry:
    """Independent monitors keyed by logfile path, in the order they were added."""

    def __init__(
        self,
        config: VaultwatchConfig | None = None,
        debug_path: Path | str | None = None,
    ) -> None:
        self._config = config or VaultwatchConfig()
        self._debug_path = debug_path
        self._monitors: dict[str, LogMonitor] = {}

    def __len__(self) -> int:
        return len(self._monitors)

    def __iter__(self) -> Iterator[LogMonitor]:
        return iter(self._monitors.values())

    def __contains__(self, logfile: object) -> bool:
        return str(logfile) in self._monitors

    @property
    def names(self) -> list[str]:
        return list(self._monitors)

    def add(self, logfile: Path | str) -> LogMonitor:
        """Add a monitor for logfile, returning the existing one if present.

        Only the first monitor added writes parser diagnostics.
        """
        key = str(logfile)
        if key in self._monitors:
            return self._monitors[key]

        debug_path = self._debug_path if not self._monitors else None
        monitor = LogMonitor(key, self._config, debug_path=debug_path)
        self._monitors[key] = monitor
        return monitor

    def get(self, logfile: Path | str) -> LogMonitor | None:
        return self._monitors.get(str(logfile))
