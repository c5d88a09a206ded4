"""Typer CLI for watching SAFE vault logfiles."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markup import escape

from vaultwatch.config import ConfigError, TimelineConfig, VaultwatchConfig
from vaultwatch.core.ingester import load_all
from vaultwatch.core.monitor import LogMonitor, MonitorRegistry
from vaultwatch.logging_setup import setup_logging
from vaultwatch.models.enums import Granularity

app = typer.Typer(
    name="vaultwatch",
    help="Activity metrics and timelines from SAFE vault logfiles.",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)

FilesArg = Annotated[list[Path], typer.Argument(help="Vault logfiles to monitor")]

_GRANULARITIES: dict[str, Granularity] = {
    "minute": Granularity.MINUTE,
    "hour": Granularity.HOUR,
    "day": Granularity.DAY,
    "twelfth-year": Granularity.TWELFTH_YEAR,
    "year": Granularity.YEAR,
}

StepsOpt = Annotated[
    Optional[int],
    typer.Option("--steps", help="Buckets kept per timeline granularity"),
]


def _config(steps: int | None = None) -> VaultwatchConfig:
    try:
        config = VaultwatchConfig.load()
        if steps is not None:
            config = VaultwatchConfig(
                project_path=config.project_path,
                timeline=TimelineConfig(steps=steps),
                ingestion=config.ingestion,
                history=config.history,
                parser=config.parser,
            )
    except ConfigError as exc:
        err_console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(1)
    return config


def _build_registry(
    files: list[Path], config: VaultwatchConfig, debug_path: Path | None = None
) -> MonitorRegistry:
    registry = MonitorRegistry(config, debug_path=debug_path)
    for f in files:
        registry.add(f)
    return registry


def _report_loaded(monitor: LogMonitor, count: int) -> None:
    err_console.print(f"[dim]Loaded {count} lines from {escape(monitor.logfile)}[/dim]")


def _load(registry: MonitorRegistry, ignore_existing: bool = False) -> None:
    try:
        load_all(registry, ignore_existing, on_loaded=_report_loaded)
    except OSError as exc:
        err_console.print(f"[red]Cannot load logfiles:[/red] {escape(str(exc))}")
        raise typer.Exit(1)


@app.command()
def summary(
    files: FilesArg,
    granularity: Annotated[
        str,
        typer.Option(
            "--granularity", "-g",
            help="Timeline bucket duration: minute, hour, day, twelfth-year or year",
        ),
    ] = "minute",
    steps: StepsOpt = None,
) -> None:
    """Load logfiles and print counters, vault state and timelines."""
    from vaultwatch.cli.formatters import summary_table, timeline_table

    bucket = _GRANULARITIES.get(granularity.lower())
    if bucket is None:
        err_console.print(f"[red]Unknown granularity:[/red] {escape(granularity)}")
        raise typer.Exit(1)

    config = _config(steps)
    registry = _build_registry(files, config)
    _load(registry)

    for monitor in registry:
        console.print(summary_table(monitor))
        console.print(timeline_table(monitor, bucket))


@app.command()
def parse(
    logfile: Annotated[Path, typer.Argument(help="Vault logfile to decode")],
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Also append parser results to this file"),
    ] = None,
) -> None:
    """Show what the parser made of every line of a logfile."""
    if not logfile.is_file():
        err_console.print(f"[yellow]Logfile not found:[/yellow] {escape(str(logfile))}")
        raise typer.Exit(1)

    monitor = LogMonitor(logfile, _config(), debug_path=output)

    try:
        with open(logfile, "r", encoding="utf-8", errors="replace") as f:
            for line in f:
                monitor.append_line(line)
                console.print(escape(monitor.metrics.diagnostic_text), soft_wrap=True)
    except OSError as exc:
        err_console.print(f"[red]Parser output failed:[/red] {escape(str(exc))}")
        raise typer.Exit(1)


@app.command()
def follow(
    files: FilesArg,
    steps: StepsOpt = None,
    debug_parser: Annotated[
        Optional[Path],
        typer.Option("--debug-parser", help="Append parser results for the first logfile here"),
    ] = None,
) -> None:
    """Load logfiles, then watch them and report metrics as lines arrive."""
    from vaultwatch.cli.formatters import format_follow_update
    from vaultwatch.core.ingester import follow as follow_logfiles

    config = _config(steps)
    registry = _build_registry(files, config, debug_path=debug_parser)
    _load(registry, config.ingestion.ignore_existing)

    console.print("[dim]Watching logfiles... (Ctrl+C to stop)[/dim]")
    try:
        for logfile, count in follow_logfiles(registry):
            monitor = registry.get(logfile)
            if monitor is not None:
                console.print(format_follow_update(monitor, count))
    except KeyboardInterrupt:
        console.print("\n[dim]Stopped.[/dim]")
    except ImportError as exc:
        err_console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(1)


@app.callback()
def _main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging")] = False,
    log_file: Annotated[
        Optional[Path],
        typer.Option("--log-file", help="Write vaultwatch's own log here instead of stderr"),
    ] = None,
) -> None:
    setup_logging(logging.DEBUG if verbose else logging.WARNING, log_file=log_file)


def main() -> None:
    """Entry point for the vaultwatch CLI."""
    app()


if __name__ == "__main__":
    main()
