"""Domain records for league datasets and their JSON coercion helpers."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from dateutil import parser as date_parser

LOGGER = logging.getLogger(__name__)

TeamId = Union[str, int]

ASSIST_MARKER = "صناعة الاهداف"
ENGLISH_ASSIST_MARKER = "Assists"
ASSIST_MARKERS = frozenset({ASSIST_MARKER, ENGLISH_ASSIST_MARKER})
NO_DATA_ENTRY = "لا يوجد بيانات"
UNKNOWN_TEAM_NAME = "فريق غير معروف"
UNKNOWN_LABEL = "غير محدد"

_EMPTY_GROUP_VALUES = {"", "null", "none"}


class MatchStatus(Enum):
    COMPLETED = "completed"
    POSTPONED = "postponed"
    UPCOMING = "upcoming"
    LIVE = "live"
    UNKNOWN = "unknown"

    @classmethod
    def from_raw(cls, value: Any) -> "MatchStatus":
        if value is None:
            return cls.UNKNOWN
        text = str(value).strip().lower()
        return _STATUS_ALIASES.get(text, cls.UNKNOWN)


_STATUS_ALIASES: Dict[str, MatchStatus] = {
    "completed": MatchStatus.COMPLETED,
    "finished": MatchStatus.COMPLETED,
    "delayed": MatchStatus.POSTPONED,
    "postponed": MatchStatus.POSTPONED,
    "upcoming": MatchStatus.UPCOMING,
    "scheduled": MatchStatus.UPCOMING,
    "live": MatchStatus.LIVE,
    "in_progress": MatchStatus.LIVE,
}


@dataclass(frozen=True)
class Team:
    team_id: TeamId
    name: str
    logo: Optional[str] = None
    group: Optional[str] = None
    players: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)
    city: Optional[str] = None
    home_field: Optional[str] = None
    field_url: Optional[str] = None
    information: Optional[str] = None


@dataclass(frozen=True)
class Match:
    home_team_id: Optional[TeamId]
    away_team_id: Optional[TeamId]
    status: MatchStatus
    home_score: Optional[int] = None
    away_score: Optional[int] = None
    penalty_winner_team_id: Optional[TeamId] = None
    stage: Optional[str] = None
    group: Optional[str] = None
    sector: Optional[str] = None
    home_scorers: Tuple[str, ...] = ()
    away_scorers: Tuple[str, ...] = ()
    home_yellow_cards: Tuple[str, ...] = ()
    away_yellow_cards: Tuple[str, ...] = ()
    home_red_cards: Tuple[str, ...] = ()
    away_red_cards: Tuple[str, ...] = ()
    teams: Tuple[Team, ...] = field(default=(), repr=False, compare=False)
    date: Optional[date] = None
    date_label: Optional[str] = None
    time: Optional[str] = None
    week: Optional[str] = None
    venue: Optional[str] = None
    note: Optional[str] = None
    competition: Optional[str] = None
    age: Optional[str] = None
    season: Optional[str] = None
    match_id: Optional[str] = None

    @property
    def is_completed(self) -> bool:
        return self.status is MatchStatus.COMPLETED

    @property
    def is_knockout(self) -> bool:
        return bool(self.stage) and self.stage.strip().lower() == "knockout"

    @property
    def counts_for_standings(self) -> bool:
        return self.is_completed and not self.is_knockout

    @property
    def home_goals(self) -> int:
        return self.home_score or 0

    @property
    def away_goals(self) -> int:
        return self.away_score or 0

    def involves(self, team_id: TeamId) -> bool:
        return team_id == self.home_team_id or team_id == self.away_team_id


def find_team(teams: Iterable[Team], team_id: Optional[TeamId]) -> Optional[Team]:
    if team_id is None:
        return None
    for team in teams:
        if team.team_id == team_id:
            return team
    return None


def collect_teams(matches: Iterable[Match]) -> List[Team]:
    """Merge the rosters attached to ``matches``; the first entry per id wins."""

    seen: Dict[TeamId, Team] = {}
    for match in matches:
        for team in match.teams:
            seen.setdefault(team.team_id, team)
    return list(seen.values())


def team_name(teams: Iterable[Team], team_id: Optional[TeamId]) -> str:
    team = find_team(teams, team_id)
    if team is None or not team.name:
        return UNKNOWN_TEAM_NAME
    return team.name


def normalize_group(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    if text.lower() in _EMPTY_GROUP_VALUES:
        return None
    return text


def _coerce_optional_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return int(value)
    text = str(value).strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        LOGGER.debug("Ignoring non-numeric score value: %r", value)
        return None


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _text_tuple(value: Any) -> Tuple[str, ...]:
    if not isinstance(value, Sequence) or isinstance(value, (str, bytes)):
        return ()
    return tuple(str(item) for item in value if item is not None)


def _first_present(payload: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = payload.get(key)
        if value is not None:
            return value
    return None


def _parse_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return date_parser.parse(value).date()
    except (ValueError, OverflowError):
        LOGGER.debug("Could not parse match date: %s", value)
        return None


def team_from_payload(payload: Mapping[str, Any]) -> Optional[Team]:
    team_id = _first_present(payload, "team_id", "teamId", "id")
    if team_id is None:
        return None
    name = _optional_text(_first_present(payload, "name", "teamName", "team_name"))
    players_raw = payload.get("players")
    players: Dict[str, Tuple[str, ...]] = {}
    if isinstance(players_raw, Mapping):
        for position, names in players_raw.items():
            entries = _text_tuple(names)
            if entries:
                players[str(position)] = entries
    return Team(
        team_id=team_id,
        name=name or UNKNOWN_TEAM_NAME,
        logo=_optional_text(payload.get("logo")),
        group=normalize_group(payload.get("group")),
        players=players,
        city=_optional_text(payload.get("city")),
        home_field=_optional_text(payload.get("field")),
        field_url=_optional_text(payload.get("fieldurl") or payload.get("field_url")),
        information=_optional_text(payload.get("information")),
    )


def teams_from_payload(payload: Any) -> Tuple[Team, ...]:
    if not isinstance(payload, Sequence) or isinstance(payload, (str, bytes)):
        return ()
    teams: List[Team] = []
    for entry in payload:
        if not isinstance(entry, Mapping):
            continue
        team = team_from_payload(entry)
        if team is not None:
            teams.append(team)
    return tuple(teams)


def match_from_payload(
    payload: Mapping[str, Any],
    *,
    teams: Tuple[Team, ...] = (),
    competition: Optional[str] = None,
    age: Optional[str] = None,
    season: Optional[str] = None,
    sector: Optional[str] = None,
) -> Match:
    date_label = _optional_text(_first_present(payload, "date", "matchDate"))
    week = _first_present(payload, "week")
    return Match(
        home_team_id=_first_present(payload, "home_team_id", "homeTeamId"),
        away_team_id=_first_present(payload, "away_team_id", "awayTeamId"),
        status=MatchStatus.from_raw(payload.get("status")),
        home_score=_coerce_optional_int(_first_present(payload, "home_score", "homeScore")),
        away_score=_coerce_optional_int(_first_present(payload, "away_score", "awayScore")),
        penalty_winner_team_id=_first_present(
            payload, "penalty_winner_team_id", "penaltyWinnerTeamId"
        ),
        stage=_optional_text(payload.get("stage")),
        group=normalize_group(payload.get("group")),
        sector=_optional_text(sector if sector is not None else payload.get("sector")),
        home_scorers=_text_tuple(_first_present(payload, "home_scorers", "homeScorers")),
        away_scorers=_text_tuple(_first_present(payload, "away_scorers", "awayScorers")),
        home_yellow_cards=_text_tuple(_first_present(payload, "home_yc", "homeYC")),
        away_yellow_cards=_text_tuple(_first_present(payload, "away_yc", "awayYC")),
        home_red_cards=_text_tuple(_first_present(payload, "home_rc", "homeRC")),
        away_red_cards=_text_tuple(_first_present(payload, "away_rc", "awayRC")),
        teams=teams,
        date=_parse_date(date_label),
        date_label=date_label,
        time=_optional_text(_first_present(payload, "time", "matchTime")),
        week=_optional_text(week),
        venue=_optional_text(payload.get("venue")),
        note=_optional_text(payload.get("note")),
        competition=competition or _optional_text(payload.get("competition")),
        age=age or _optional_text(payload.get("age")),
        season=season or _optional_text(payload.get("season")),
        match_id=_optional_text(_first_present(payload, "match_id", "matchId", "id")),
    )


__all__ = [
    "ASSIST_MARKER",
    "ASSIST_MARKERS",
    "Match",
    "MatchStatus",
    "NO_DATA_ENTRY",
    "Team",
    "TeamId",
    "UNKNOWN_LABEL",
    "UNKNOWN_TEAM_NAME",
    "collect_teams",
    "find_team",
    "match_from_payload",
    "normalize_group",
    "team_from_payload",
    "team_name",
    "teams_from_payload",
]
