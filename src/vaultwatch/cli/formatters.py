"""Text rendering of monitor metrics for the CLI."""

from __future__ import annotations

from rich.markup import escape
from rich.table import Table

from vaultwatch.core.metrics import MetricsStore
from vaultwatch.core.monitor import LogMonitor
from vaultwatch.models.enums import Granularity, TimelineName

_SPARK_CHARS = " ▁▂▃▄▅▆▇█"


def sparkline(values: list[int]) -> str:
    """Render bucket values as a row of block characters scaled to the max."""
    if not values:
        return ""
    peak = max(values)
    if peak == 0:
        return _SPARK_CHARS[0] * len(values)
    top = len(_SPARK_CHARS) - 1
    # Any non-zero bucket gets at least the lowest visible block
    return "".join(
        _SPARK_CHARS[max(1, round(v * top / peak))] if v else _SPARK_CHARS[0]
        for v in values
    )


def format_started(metrics: MetricsStore) -> str:
    if metrics.version_string is None:
        return "not seen"
    when = metrics.started_at.isoformat() if metrics.started_at else "unknown time"
    return escape(f"{metrics.version_string} at {when}")


def summary_table(monitor: LogMonitor) -> Table:
    """Counters and vault state for one monitor."""
    m = monitor.metrics
    table = Table(title=escape(monitor.logfile), show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")

    table.add_row("Vault", format_started(m))
    table.add_row("Age bracket", m.age_bracket_string())
    table.add_row("Adults", str(m.adults))
    table.add_row("Elders", str(m.elders))
    table.add_row("GETs", str(m.gets))
    table.add_row("PUTs", str(m.puts))
    table.add_row("Errors", str(m.errors))
    table.add_row("Other", str(m.other))
    categories = ", ".join(
        f"{name}: {count}" for name, count in sorted(m.category_counts.items())
    )
    table.add_row("Categories", categories or "-")
    table.add_row(
        "Most recent", m.most_recent.isoformat() if m.most_recent else "-"
    )
    return table


def timeline_table(monitor: LogMonitor, granularity: Granularity) -> Table:
    """One sparkline row per timeline at the given granularity."""
    table = Table(title=f"Timelines ({granularity.value} buckets)")
    table.add_column("Timeline", style="bold")
    table.add_column("Activity")
    table.add_column("Now", justify="right")
    table.add_column("Window", justify="right")

    for name in TimelineName:
        buckets = monitor.metrics.timeline(name).buckets(granularity)
        table.add_row(
            name.value,
            sparkline(buckets),
            str(buckets[-1]) if buckets else "0",
            str(sum(buckets)),
        )
    return table


def format_follow_update(monitor: LogMonitor, count: int) -> str:
    m = monitor.metrics
    return (
        f"{escape(monitor.logfile)}: +{count} lines  "
        f"GETs={m.gets} PUTs={m.puts} other={m.other}  "
        f"{m.age_bracket_string()} adults={m.adults} elders={m.elders}  "
        f"[dim]{escape(m.diagnostic_text)}[/dim]"
    )
