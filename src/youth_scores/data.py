"""Fetch and parse the league dataset published by the data service."""
from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List, Mapping, Optional, Sequence, Tuple

import requests
from dateutil import parser as date_parser

from .models import Match, match_from_payload, teams_from_payload

LOGGER = logging.getLogger(__name__)

CONFIG_URL = "https://youth-scores-data.vercel.app/api/config"
REQUEST_HEADERS = {
    "User-Agent": "Mozilla/5.0 (compatible; youth-scores/1.0)",
    "Accept": "application/json",
}
REQUEST_TIMEOUT = 30
DEFAULT_SECTOR_TEMPLATE = "مجموعة {index}"


class DatasetError(ValueError):
    """Raised when a payload lacks the structure the site relies on."""


@dataclass(frozen=True)
class AgeGroup:
    age: str
    matches_urls: Tuple[str, ...]
    sectors: Optional[Tuple[str, ...]] = None

    @property
    def has_sectors(self) -> bool:
        return self.sectors is not None


@dataclass(frozen=True)
class Competition:
    name: str
    ages: Tuple[AgeGroup, ...]


@dataclass(frozen=True)
class Season:
    name: str
    competitions: Tuple[Competition, ...]


@dataclass(frozen=True)
class NewsItem:
    title: Optional[str]
    details: Optional[str]
    image: Optional[str]
    date_label: Optional[str]
    published: Optional[datetime]


@dataclass(frozen=True)
class Venue:
    venue_id: Optional[str]
    name: str
    url: Optional[str]


@dataclass(frozen=True)
class LeagueData:
    seasons: Tuple[Season, ...]
    news: Tuple[NewsItem, ...] = ()
    venues: Tuple[Venue, ...] = ()


def _http_get(
    url: str,
    *,
    retries: int = 3,
    delay_seconds: float = 2.0,
) -> requests.Response:
    last_error: Optional[Exception] = None
    for attempt in range(retries):
        try:
            response = requests.get(url, timeout=REQUEST_TIMEOUT, headers=REQUEST_HEADERS)
            response.raise_for_status()
            return response
        except requests.RequestException as exc:  # pragma: no cover - network errors
            last_error = exc
            if attempt == retries - 1:
                raise
            backoff = delay_seconds * (2 ** attempt)
            LOGGER.debug("Request to %s failed (%s); retrying in %.1fs", url, exc, backoff)
            time.sleep(backoff)
    if last_error:
        raise last_error
    raise RuntimeError(f"No request attempted for {url}.")


def fetch_json(url: str, *, retries: int = 3, delay_seconds: float = 2.0) -> Any:
    response = _http_get(url, retries=retries, delay_seconds=delay_seconds)
    try:
        return response.json()
    except ValueError as exc:
        raise DatasetError(f"Invalid JSON received from {url}.") from exc


def fetch_config(url: str = CONFIG_URL, **kwargs: Any) -> Mapping[str, Any]:
    payload = fetch_json(url, **kwargs)
    if not isinstance(payload, Mapping):
        raise DatasetError("Config response must be a JSON object.")
    return payload


def fetch_main_data(config_url: str = CONFIG_URL, **kwargs: Any) -> LeagueData:
    config = fetch_config(config_url, **kwargs)
    data_url = str(config.get("latestDataUrl") or "").strip()
    if not data_url:
        raise DatasetError("No latestDataUrl found in config.")
    LOGGER.info("Loading league data from %s", data_url)
    return parse_league_data(fetch_json(data_url, **kwargs))


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _localized(value: Any) -> str:
    if isinstance(value, Mapping):
        return _text(value.get("ar")) or _text(value.get("en")) or ""
    return _text(value) or ""


def _url_tuple(value: Any) -> Tuple[str, ...]:
    if isinstance(value, str):
        return (value,) if value.strip() else ()
    if isinstance(value, Sequence):
        return tuple(str(item).strip() for item in value if item and str(item).strip())
    return ()


def _parse_age_group(payload: Mapping[str, Any]) -> Optional[AgeGroup]:
    age = _text(payload.get("age"))
    urls = _url_tuple(payload.get("matchesurl"))
    if not age or not urls:
        return None
    sectors_raw = payload.get("sector")
    sectors: Optional[Tuple[str, ...]] = None
    if sectors_raw is not None:
        if isinstance(sectors_raw, Mapping):
            sectors_raw = sectors_raw.get("ar", ())
        if isinstance(sectors_raw, str):
            sectors = (sectors_raw,)
        elif isinstance(sectors_raw, Sequence):
            sectors = tuple(str(item) for item in sectors_raw)
        else:
            sectors = ()
    return AgeGroup(age=age, matches_urls=urls, sectors=sectors)


def _parse_competition(payload: Mapping[str, Any]) -> Competition:
    ages: List[AgeGroup] = []
    for entry in payload.get("ages") or ():
        if isinstance(entry, Mapping):
            age_group = _parse_age_group(entry)
            if age_group:
                ages.append(age_group)
    return Competition(name=_localized(payload.get("name")), ages=tuple(ages))


def _parse_news_item(payload: Mapping[str, Any]) -> NewsItem:
    date_label = _text(payload.get("date"))
    published: Optional[datetime] = None
    if date_label:
        try:
            published = date_parser.parse(date_label)
        except (ValueError, OverflowError):
            LOGGER.debug("Could not parse news date: %s", date_label)
    return NewsItem(
        title=_text(payload.get("title")),
        details=_text(payload.get("details")),
        image=_text(payload.get("image")),
        date_label=date_label,
        published=published,
    )


def parse_league_data(payload: Any) -> LeagueData:
    if not isinstance(payload, Mapping):
        raise DatasetError("League data must be a JSON object.")
    seasons: List[Season] = []
    for entry in payload.get("seasons") or ():
        if not isinstance(entry, Mapping):
            continue
        competitions = tuple(
            _parse_competition(item)
            for item in entry.get("competitions") or ()
            if isinstance(item, Mapping)
        )
        seasons.append(Season(name=_text(entry.get("season")) or "", competitions=competitions))
    if not seasons:
        raise DatasetError("No seasons found in data.")

    news = tuple(
        _parse_news_item(item) for item in payload.get("news") or () if isinstance(item, Mapping)
    )
    venues: List[Venue] = []
    for item in payload.get("venues") or ():
        if not isinstance(item, Mapping):
            continue
        name = _text(item.get("name"))
        if not name:
            continue
        venues.append(
            Venue(venue_id=_text(item.get("venue_id")), name=name, url=_text(item.get("url")))
        )
    return LeagueData(seasons=tuple(seasons), news=news, venues=tuple(venues))


def parse_matches_payload(
    payload: Any,
    *,
    competition: Optional[str] = None,
    age: Optional[str] = None,
    season: Optional[str] = None,
    sector: Optional[str] = None,
    keep_group_sector: bool = False,
) -> List[Match]:
    """Turn one matches file into match records sharing the file's roster.

    With ``keep_group_sector`` the sector is only assigned to matches without
    an explicit group.
    """

    if not isinstance(payload, Mapping):
        raise DatasetError("Matches payload must be a JSON object.")
    teams = teams_from_payload(payload.get("teams"))
    matches: List[Match] = []
    for entry in payload.get("matches") or ():
        if not isinstance(entry, Mapping):
            continue
        match_sector = sector
        if keep_group_sector and entry.get("group"):
            match_sector = None
        matches.append(
            match_from_payload(
                entry,
                teams=teams,
                competition=competition,
                age=age,
                season=season,
                sector=match_sector,
            )
        )
    return matches


def sector_sources(age_group: AgeGroup) -> List[Tuple[str, str]]:
    """Pair each matches URL of a sectored age group with its display name.

    Missing or blank sector names fall back to ``"مجموعة <n>"``.
    """

    sectors = age_group.sectors or ()
    sources: List[Tuple[str, str]] = []
    for index, url in enumerate(age_group.matches_urls):
        name = sectors[index] if index < len(sectors) and sectors[index] else None
        sources.append((name or DEFAULT_SECTOR_TEMPLATE.format(index=index + 1), url))
    return sources


def load_competition_matches(
    competition: Competition,
    age_group: AgeGroup,
    season: Season,
    *,
    retries: int = 3,
    delay_seconds: float = 2.0,
) -> List[Match]:
    """Load every match of one competition age group.

    Sectored age groups are fetched URL by URL; unreachable sectors are skipped
    and matches without an explicit group are tagged with the sector name.
    """

    if not age_group.has_sectors:
        payload = fetch_json(
            age_group.matches_urls[0], retries=retries, delay_seconds=delay_seconds
        )
        return parse_matches_payload(
            payload, competition=competition.name, age=age_group.age, season=season.name
        )

    matches: List[Match] = []
    for sector_name, url in sector_sources(age_group):
        try:
            matches.extend(
                load_sector_matches(
                    competition,
                    age_group,
                    season,
                    sector_name,
                    url,
                    retries=retries,
                    delay_seconds=delay_seconds,
                )
            )
        except (requests.RequestException, DatasetError) as exc:
            LOGGER.warning("Skipping sector %s (%s): %s", sector_name, url, exc)
    return matches


def load_sector_matches(
    competition: Competition,
    age_group: AgeGroup,
    season: Season,
    sector_name: str,
    sector_url: str,
    *,
    retries: int = 3,
    delay_seconds: float = 2.0,
) -> List[Match]:
    payload = fetch_json(sector_url, retries=retries, delay_seconds=delay_seconds)
    return parse_matches_payload(
        payload,
        competition=competition.name,
        age=age_group.age,
        season=season.name,
        sector=sector_name,
        keep_group_sector=True,
    )


def load_league_data_from_file(path: Path) -> LeagueData:
    return parse_league_data(json.loads(path.read_text(encoding="utf-8")))


def load_matches_from_file(path: Path, **context: Optional[str]) -> List[Match]:
    return parse_matches_payload(json.loads(path.read_text(encoding="utf-8")), **context)


def find_competition(
    league: LeagueData,
    season_name: str,
    competition_name: str,
    age: str,
) -> Optional[Tuple[Season, Competition, AgeGroup]]:
    for season in league.seasons:
        if season.name != season_name:
            continue
        for competition in season.competitions:
            if competition.name != competition_name:
                continue
            for age_group in competition.ages:
                if age_group.age == age:
                    return season, competition, age_group
    return None


def filter_venues(venues: Sequence[Venue], term: Optional[str]) -> List[Venue]:
    needle = (term or "").strip().lower()
    if not needle:
        return list(venues)
    return [venue for venue in venues if needle in venue.name.lower()]


def sort_news(items: Sequence[NewsItem]) -> List[NewsItem]:
    """Newest first; undated items keep their order at the end."""

    dated = [item for item in items if item.published is not None]
    undated = [item for item in items if item.published is None]
    dated.sort(key=lambda item: _sortable_timestamp(item.published), reverse=True)
    return dated + undated


def _sortable_timestamp(value: Optional[datetime]) -> datetime:
    if value is None:
        return datetime.min
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def iter_competitions(league: LeagueData) -> List[Tuple[Season, Competition, AgeGroup]]:
    return [
        (season, competition, age_group)
        for season in league.seasons
        for competition in season.competitions
        for age_group in competition.ages
    ]


__all__ = [
    "AgeGroup",
    "CONFIG_URL",
    "Competition",
    "DatasetError",
    "LeagueData",
    "NewsItem",
    "Season",
    "Venue",
    "fetch_config",
    "fetch_json",
    "fetch_main_data",
    "filter_venues",
    "find_competition",
    "iter_competitions",
    "load_competition_matches",
    "load_league_data_from_file",
    "load_matches_from_file",
    "load_sector_matches",
    "parse_league_data",
    "parse_matches_payload",
    "sector_sources",
    "sort_news",
]
