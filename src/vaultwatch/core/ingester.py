"""Loading and following of monitored logfiles."""

from __future__ import annotations

import logging
from collections.abc import Callable, Generator
from dataclasses import dataclass
from pathlib import Path

from vaultwatch.core.monitor import LogMonitor, MonitorRegistry

logger = logging.getLogger("vaultwatch.ingester")


@dataclass(slots=True)
class FollowState:
    """Read position in a followed logfile."""

    position: int = 0
    partial: str = ""  # text after the last newline seen so far


def load_all(
    registry: MonitorRegistry,
    ignore_existing: bool = False,
    on_loaded: Callable[[LogMonitor, int], None] | None = None,
) -> int:
    """Load existing logfile content into every monitor. Returns total lines.

    ``on_loaded`` is called with each monitor and its line count. OSError from
    an unreadable logfile propagates.
    """
    if ignore_existing:
        return 0

    total = 0
    for monitor in registry:
        count = monitor.load_logfile()
        if on_loaded is not None:
            on_loaded(monitor, count)
        total += count
    return total


def _file_size(path: Path) -> int:
    try:
        return path.stat().st_size
    except FileNotFoundError:
        return 0


def read_new_lines(path: Path, state: FollowState) -> list[str]:
    """Return complete lines appended to path since the last call.

    A file that shrank is assumed to have been truncated or rotated and is
    read again from the start.
    """
    size = _file_size(path)
    if size < state.position:
        logger.info("Logfile %s was truncated, reading from start", path)
        state.position = 0
        state.partial = ""
    if size == state.position:
        return []

    with open(path, "rb") as f:
        f.seek(state.position)
        data = f.read()
    state.position += len(data)

    text = state.partial + data.decode("utf-8", errors="replace")
    lines = text.split("\n")
    state.partial = lines.pop()
    return lines


def _apply_lines(monitor: LogMonitor, lines: list[str]) -> int:
    for line in lines:
        monitor.append_line(line)
    return len(lines)


def follow(
    registry: MonitorRegistry,
) -> Generator[tuple[str, int], None, None]:
    """Watch monitored logfiles and feed appended lines to their monitors.

    Yields ``(logfile, line_count)`` for each batch of new lines. A logfile may
    not exist yet, but its parent directory must. Requires watchfiles.
    """
    try:
        from watchfiles import watch
    except ImportError:
        raise ImportError(
            "watchfiles is required for follow mode. Install with: pip install vaultwatch[watch]"
        )

    states: dict[Path, FollowState] = {}
    monitors: dict[Path, LogMonitor] = {}
    for monitor in registry:
        path = Path(monitor.logfile).resolve()
        monitors[path] = monitor
        states[path] = FollowState(position=_file_size(path))

    if not monitors:
        return

    dirs = {p.parent for p in monitors}
    for changes in watch(*dirs):
        for _change_type, changed_path in changes:
            changed = Path(changed_path).resolve()
            if changed not in monitors:
                continue

            try:
                lines = read_new_lines(changed, states[changed])
            except OSError as exc:
                logger.warning("Cannot read %s: %s", changed, exc)
                continue

            if lines:
                monitor = monitors[changed]
                yield monitor.logfile, _apply_lines(monitor, lines)
