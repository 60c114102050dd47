"""Configuration helpers for the youth_scores site generator."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, Optional, Sequence

import yaml

from .data import CONFIG_URL

DEFAULT_OUTPUT_DIRECTORY = Path("docs")
DEFAULT_INDEX_NAME = "index.html"


@dataclass(slots=True)
class SourceConfig:
    """Where the league dataset is fetched from."""

    config_url: str = CONFIG_URL
    retries: int = 3
    delay_seconds: float = 2.0


@dataclass(slots=True)
class OutputConfig:
    directory: Path = DEFAULT_OUTPUT_DIRECTORY
    index_name: str = DEFAULT_INDEX_NAME


@dataclass(slots=True)
class CompetitionSelector:
    """One competition page to render."""

    season: str
    competition: str
    age: str
    title: Optional[str] = None


@dataclass(slots=True)
class AppConfig:
    """Root configuration model."""

    source: SourceConfig = field(default_factory=SourceConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    competitions: Sequence[CompetitionSelector] = field(default_factory=tuple)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, object]) -> "AppConfig":
        source = SourceConfig()
        source_section = mapping.get("source")
        if isinstance(source_section, Mapping):
            config_url = str(source_section.get("config_url") or "").strip()
            source = SourceConfig(
                config_url=config_url or CONFIG_URL,
                retries=_coerce_int(source_section.get("retries"), 3, minimum=1),
                delay_seconds=_coerce_float(source_section.get("delay_seconds"), 2.0),
            )

        output = OutputConfig()
        output_section = mapping.get("output")
        if isinstance(output_section, Mapping):
            directory = str(output_section.get("directory") or "").strip()
            index_name = str(output_section.get("index_name") or "").strip()
            output = OutputConfig(
                directory=Path(directory) if directory else DEFAULT_OUTPUT_DIRECTORY,
                index_name=index_name or DEFAULT_INDEX_NAME,
            )

        selectors: List[CompetitionSelector] = []
        raw_competitions = mapping.get("competitions")
        if isinstance(raw_competitions, Sequence) and not isinstance(raw_competitions, (str, bytes)):
            for item in raw_competitions:
                if not isinstance(item, Mapping):
                    continue
                season = str(item.get("season", "")).strip()
                competition = str(item.get("competition", "")).strip()
                age = str(item.get("age", "")).strip()
                if not season or not competition or not age:
                    continue
                title = str(item.get("title") or "").strip() or None
                selectors.append(
                    CompetitionSelector(season=season, competition=competition, age=age, title=title)
                )

        return cls(source=source, output=output, competitions=tuple(selectors))


def _coerce_int(value: object, default: int, *, minimum: int = 0) -> int:
    try:
        number = int(value) if value is not None else default
    except (TypeError, ValueError):
        return default
    return number if number >= minimum else default


def _coerce_float(value: object, default: float) -> float:
    try:
        number = float(value) if value is not None else default
    except (TypeError, ValueError):
        return default
    return number if number >= 0 else default


def load_config(path: Path) -> AppConfig:
    """Load a configuration file from YAML."""

    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, Mapping):
        raise ValueError("Configuration file must contain a mapping at the root.")
    return AppConfig.from_mapping(data)
