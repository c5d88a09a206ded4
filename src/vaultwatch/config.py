"""Layered configuration: .vaultwatch/config.toml -> VAULTWATCH_* env vars -> defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

try:
    import tomllib  # 3.11+
except ModuleNotFoundError:
    import tomli as tomllib  # type: ignore[no-redef]

MIN_TIMELINE_STEPS = 10

_TRUE_VALUES = ("1", "true", "yes", "on")


class ConfigError(ValueError):
    """Raised when a configuration value is out of range."""


@dataclass(frozen=True, slots=True)
class TimelineConfig:
    """Sparkline timeline settings."""

    steps: int = 30

    def __post_init__(self) -> None:
        if self.steps < MIN_TIMELINE_STEPS:
            raise ConfigError(
                f"Timeline steps number is too small, minimum is {MIN_TIMELINE_STEPS}"
            )


@dataclass(frozen=True, slots=True)
class IngestionConfig:
    """Logfile loading settings."""

    lines_max: int = 100
    max_line_length: int = 8192
    ignore_existing: bool = False


@dataclass(frozen=True, slots=True)
class HistoryConfig:
    """Bounds for the decoded record histories kept per logfile."""

    log_history_max: int = 1000
    activity_history_max: int = 1000


@dataclass(frozen=True, slots=True)
class ParserConfig:
    """Line decoder settings."""

    app_name: str = "safe-vault"


@dataclass(frozen=True, slots=True)
class VaultwatchConfig:
    """Top-level configuration container."""

    project_path: Path = field(default_factory=Path.cwd)
    timeline: TimelineConfig = field(default_factory=TimelineConfig)
    ingestion: IngestionConfig = field(default_factory=IngestionConfig)
    history: HistoryConfig = field(default_factory=HistoryConfig)
    parser: ParserConfig = field(default_factory=ParserConfig)

    @property
    def vaultwatch_dir(self) -> Path:
        return self.project_path / ".vaultwatch"

    @property
    def config_path(self) -> Path:
        return self.vaultwatch_dir / "config.toml"

    @classmethod
    def load(cls, project_path: Path | None = None) -> VaultwatchConfig:
        """Load config with layering: TOML file -> env vars -> defaults."""
        project = Path(project_path) if project_path else Path.cwd()
        toml_path = project / ".vaultwatch" / "config.toml"

        toml_data: dict = {}
        if toml_path.is_file():
            with open(toml_path, "rb") as f:
                toml_data = tomllib.load(f)

        timeline_data = toml_data.get("timeline", {})
        ingestion_data = toml_data.get("ingestion", {})
        history_data = toml_data.get("history", {})
        parser_data = toml_data.get("parser", {})

        # Use literal defaults (slots=True prevents class-level attribute access)
        _timeline_defaults = TimelineConfig()
        _ingest_defaults = IngestionConfig()
        _history_defaults = HistoryConfig()
        _parser_defaults = ParserConfig()

        timeline = TimelineConfig(
            steps=int(
                os.environ.get(
                    "VAULTWATCH_TIMELINE_STEPS",
                    timeline_data.get("steps", _timeline_defaults.steps),
                )
            ),
        )

        ingestion = IngestionConfig(
            lines_max=int(
                os.environ.get(
                    "VAULTWATCH_LINES_MAX",
                    ingestion_data.get("lines_max", _ingest_defaults.lines_max),
                )
            ),
            max_line_length=int(
                os.environ.get(
                    "VAULTWATCH_MAX_LINE_LENGTH",
                    ingestion_data.get(
                        "max_line_length", _ingest_defaults.max_line_length
                    ),
                )
            ),
            ignore_existing=_as_bool(
                os.environ.get(
                    "VAULTWATCH_IGNORE_EXISTING",
                    ingestion_data.get(
                        "ignore_existing", _ingest_defaults.ignore_existing
                    ),
                )
            ),
        )

        history = HistoryConfig(
            log_history_max=int(
                os.environ.get(
                    "VAULTWATCH_LOG_HISTORY_MAX",
                    history_data.get(
                        "log_history_max", _history_defaults.log_history_max
                    ),
                )
            ),
            activity_history_max=int(
                os.environ.get(
                    "VAULTWATCH_ACTIVITY_HISTORY_MAX",
                    history_data.get(
                        "activity_history_max",
                        _history_defaults.activity_history_max,
                    ),
                )
            ),
        )

        parser = ParserConfig(
            app_name=os.environ.get(
                "VAULTWATCH_APP_NAME",
                parser_data.get("app_name", _parser_defaults.app_name),
            ),
        )

        return cls(
            project_path=project,
            timeline=timeline,
            ingestion=ingestion,
            history=history,
            parser=parser,
        )


def _as_bool(value: object) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_VALUES
    return bool(value)
