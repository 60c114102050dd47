from __future__ import annotations

import argparse
import logging
import re
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import requests

from .config import AppConfig, CompetitionSelector, load_config
from .data import (
    AgeGroup,
    Competition,
    DatasetError,
    LeagueData,
    Season,
    fetch_main_data,
    find_competition,
    iter_competitions,
    load_competition_matches,
    load_league_data_from_file,
    load_matches_from_file,
    load_sector_matches,
    sector_sources,
)
from .report import build_competition_html, build_index_html

LOGGER = logging.getLogger(__name__)

_UNSAFE_FILENAME = re.compile(r"[\\/:*?\"<>|\s]+")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate youth league standings pages")
    parser.add_argument(
        "--config",
        type=Path,
        help="YAML configuration file with source, output and competition settings.",
    )
    parser.add_argument(
        "--config-url",
        help="URL of the data service config document (overrides the configuration file).",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        help="Directory for the generated HTML files (default: docs).",
    )
    parser.add_argument(
        "--dataset",
        type=Path,
        help="Local league JSON file used instead of downloading the latest dataset.",
    )
    parser.add_argument(
        "--matches",
        type=Path,
        help="Local matches JSON file rendered as a single competition page.",
    )
    parser.add_argument("--season", help="Season to render, e.g. 2024-2025.")
    parser.add_argument("--competition", help="Competition name to render.")
    parser.add_argument("--age", help="Age group to render.")
    parser.add_argument(
        "--sector",
        help="Render only this sector of sectored age groups (one page per competition).",
    )
    parser.add_argument(
        "--venue",
        help="Only list venues whose name contains this text on the index page.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    return parser


def page_filename(season: str, competition: str, age: str) -> str:
    cleaned = (_UNSAFE_FILENAME.sub("-", part.strip()).strip("-") for part in (season, competition, age))
    stem = "_".join(part for part in cleaned if part)
    return f"{stem or 'competition'}.html"


def _select(
    args: argparse.Namespace, config: AppConfig, league: LeagueData
) -> List[Tuple[Season, Competition, AgeGroup, Optional[str]]]:
    if args.season or args.competition or args.age:
        selectors: Sequence[CompetitionSelector] = (
            CompetitionSelector(
                season=args.season or "", competition=args.competition or "", age=args.age or ""
            ),
        )
    else:
        selectors = config.competitions
    if not selectors:
        return [(season, competition, age, None) for season, competition, age in iter_competitions(league)]

    selected: List[Tuple[Season, Competition, AgeGroup, Optional[str]]] = []
    for selector in selectors:
        found = find_competition(league, selector.season, selector.competition, selector.age)
        if found is None:
            print(
                f"Warning: competition not found: {selector.season} / "
                f"{selector.competition} / {selector.age}",
                file=sys.stderr,
            )
            continue
        selected.append((*found, selector.title))
    return selected


def _sector_url(age_group: AgeGroup, name: str) -> Optional[str]:
    if not age_group.has_sectors:
        return None
    return dict(sector_sources(age_group)).get(name)


def _render_local_matches(args: argparse.Namespace, output_dir: Path, generated_at: datetime) -> Path:
    matches = load_matches_from_file(
        args.matches, competition=args.competition, age=args.age, season=args.season
    )
    parts = [part for part in (args.competition, args.age) if part]
    title = " - ".join(parts) if parts else args.matches.stem
    target = output_dir / page_filename(args.season or "", args.competition or args.matches.stem, args.age or "")
    target.write_text(build_competition_html(title, matches, generated_at), encoding="utf-8")
    return target


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config) if args.config else AppConfig()
    source = config.source
    output_dir = args.output_dir or config.output.directory
    output_dir.mkdir(parents=True, exist_ok=True)
    generated_at = datetime.now()

    if args.matches:
        target = _render_local_matches(args, output_dir, generated_at)
        LOGGER.info("Wrote %s", target)
        if not args.dataset:
            return 0

    try:
        if args.dataset:
            league = load_league_data_from_file(args.dataset)
        else:
            league = fetch_main_data(
                args.config_url or source.config_url,
                retries=source.retries,
                delay_seconds=source.delay_seconds,
            )
    except (requests.RequestException, DatasetError) as exc:
        print(f"Error: league data could not be loaded: {exc}", file=sys.stderr)
        return 1

    index_path = output_dir / config.output.index_name
    index_path.write_text(build_index_html(league, generated_at, venue_search=args.venue), encoding="utf-8")
    LOGGER.info("Wrote %s", index_path)

    if args.matches:
        return 0

    for season, competition, age_group, title in _select(args, config, league):
        label = age_group.age
        try:
            if args.sector:
                source_url = _sector_url(age_group, args.sector)
                if source_url is None:
                    print(
                        f"Warning: sector {args.sector} not found in {competition.name} {age_group.age}",
                        file=sys.stderr,
                    )
                    continue
                label = f"{age_group.age} {args.sector}"
                matches = load_sector_matches(
                    competition,
                    age_group,
                    season,
                    args.sector,
                    source_url,
                    retries=source.retries,
                    delay_seconds=source.delay_seconds,
                )
            else:
                matches = load_competition_matches(
                    competition,
                    age_group,
                    season,
                    retries=source.retries,
                    delay_seconds=source.delay_seconds,
                )
        except (requests.RequestException, DatasetError) as exc:
            print(
                f"Warning: matches for {competition.name} {label} could not be loaded: {exc}",
                file=sys.stderr,
            )
            continue
        page_title = title or f"{competition.name} - {label}"
        target = output_dir / page_filename(season.name, competition.name, label)
        target.write_text(
            build_competition_html(page_title, matches, generated_at, venues=league.venues),
            encoding="utf-8",
        )
        LOGGER.info("Wrote %s (%d matches)", target, len(matches))

    return 0


if __name__ == "__main__":  # pragma: no cover - manual execution helper
    raise SystemExit(main())
