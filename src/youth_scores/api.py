"""FastAPI application exposing standings and statistics for one competition."""
from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List, Mapping, Optional, Sequence

import requests
from fastapi import FastAPI, HTTPException, Query

from .bucketing import BucketKey
from .data import (
    DatasetError,
    LeagueData,
    fetch_main_data,
    filter_venues,
    find_competition,
    load_competition_matches,
    load_sector_matches,
    sector_sources,
)
from .models import Match, Team, TeamId, collect_teams, team_name
from .standings import StandingsRow, list_stages, standings_by_stage, standings_by_team_group
from .statistics import (
    LeaderboardEntry,
    analyze_by_stage,
    assists_by_bucket,
    clean_sheets_by_bucket,
    scorers_by_bucket,
    team_assists,
    team_scorers,
)

app = FastAPI(title="Youth league scores API")

LEADERBOARDS = {
    "scorers": scorers_by_bucket,
    "assists": assists_by_bucket,
    "cleansheets": clean_sheets_by_bucket,
}
STATISTIC_KINDS = (*LEADERBOARDS, "analysis")


def _load_league() -> LeagueData:
    try:
        return fetch_main_data()
    except (requests.RequestException, DatasetError) as exc:
        raise HTTPException(status_code=502, detail=f"League data unavailable: {exc}") from exc


def _load_matches(
    season: str, competition: str, age: str, sector: Optional[str] = None
) -> List[Match]:
    league = _load_league()
    selection = find_competition(league, season, competition, age)
    if selection is None:
        raise HTTPException(status_code=404, detail="Competition not found.")
    season_entry, competition_entry, age_group = selection
    sector_url = None
    if sector:
        if age_group.has_sectors:
            sector_url = dict(sector_sources(age_group)).get(sector)
        if sector_url is None:
            raise HTTPException(status_code=404, detail="Sector not found.")
    try:
        if sector_url:
            return load_sector_matches(competition_entry, age_group, season_entry, sector, sector_url)
        return load_competition_matches(competition_entry, age_group, season_entry)
    except (requests.RequestException, DatasetError) as exc:
        raise HTTPException(status_code=502, detail=f"Match data unavailable: {exc}") from exc


def _row_payload(row: StandingsRow, teams: Sequence[Team]) -> Dict[str, Any]:
    payload = row.as_dict()
    payload["team_name"] = team_name(teams, row.team_id)
    return payload


def _tables_payload(
    tables: Mapping[BucketKey, Sequence[StandingsRow]], teams: Sequence[Team]
) -> List[Dict[str, Any]]:
    return [
        {"bucket": key, "rows": [_row_payload(row, teams) for row in rows]}
        for key, rows in tables.items()
    ]


def _leaderboard_payload(entries: Sequence[LeaderboardEntry]) -> List[Dict[str, Any]]:
    return [asdict(entry) for entry in entries]


def _coerce_team_id(raw: str, teams: Sequence[Team]) -> TeamId:
    """Path parameters are strings; match them against numeric ids as well."""

    for team in teams:
        if str(team.team_id) == raw:
            return team.team_id
    return raw


@app.get("/seasons")
def get_seasons() -> List[Dict[str, Any]]:
    """Return the available seasons with their competitions and age groups."""

    league = _load_league()
    return [
        {
            "season": season.name,
            "competitions": [
                {"name": competition.name, "ages": [age.age for age in competition.ages]}
                for competition in season.competitions
            ],
        }
        for season in league.seasons
    ]


@app.get("/venues")
def get_venues(
    search: Optional[str] = Query(None, description="Case-insensitive text contained in the venue name"),
) -> List[Dict[str, Any]]:
    league = _load_league()
    return [asdict(venue) for venue in filter_venues(league.venues, search)]


@app.get("/standings")
def get_standings(
    season: str = Query(..., description="Season name, e.g. 2024-2025"),
    competition: str = Query(..., description="Competition name in Arabic"),
    age: str = Query(..., description="Age group label"),
    sector: Optional[str] = Query(None, description="Restrict to one sector of the age group"),
):
    matches = _load_matches(season, competition, age, sector)
    teams = collect_teams(matches)
    return _tables_payload(standings_by_team_group(matches, teams), teams)


@app.get("/standings/stages")
def get_stage_standings(
    season: str = Query(...),
    competition: str = Query(...),
    age: str = Query(...),
    sector: Optional[str] = Query(None),
    stage: Optional[str] = Query(None, description="Restrict to one stage"),
):
    matches = _load_matches(season, competition, age, sector)
    teams = collect_teams(matches)
    stages = [stage] if stage else list_stages(matches)
    return {
        name: _tables_payload(standings_by_stage(matches, name), teams) for name in stages
    }


@app.get("/statistics/{kind}")
def get_statistics(
    kind: str,
    season: str = Query(...),
    competition: str = Query(...),
    age: str = Query(...),
    sector: Optional[str] = Query(None),
):
    if kind not in STATISTIC_KINDS:
        raise HTTPException(
            status_code=400,
            detail=f"Unknown statistic '{kind}'. Use one of: {', '.join(STATISTIC_KINDS)}.",
        )
    matches = _load_matches(season, competition, age, sector)
    if kind == "analysis":
        return {
            label: asdict(analysis)
            for label, analysis in analyze_by_stage(matches, collect_teams(matches) or None).items()
        }
    boards = LEADERBOARDS[kind](matches)
    return [
        {"bucket": key, "entries": _leaderboard_payload(entries)} for key, entries in boards.items()
    ]


@app.get("/teams/{team_id}/scorers")
def get_team_scorers(
    team_id: str,
    season: str = Query(...),
    competition: str = Query(...),
    age: str = Query(...),
    sector: Optional[str] = Query(None),
) -> List[Dict[str, Any]]:
    matches = _load_matches(season, competition, age, sector)
    resolved = _coerce_team_id(team_id, collect_teams(matches))
    return _leaderboard_payload(team_scorers(matches, resolved))


@app.get("/teams/{team_id}/assists")
def get_team_assists(
    team_id: str,
    season: str = Query(...),
    competition: str = Query(...),
    age: str = Query(...),
    sector: Optional[str] = Query(None),
) -> List[Dict[str, Any]]:
    matches = _load_matches(season, competition, age, sector)
    resolved = _coerce_team_id(team_id, collect_teams(matches))
    return _leaderboard_payload(team_assists(matches, resolved))
