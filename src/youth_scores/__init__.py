"""Standings, leaderboards and schedule pages for youth football competitions."""

from .data import (
    CONFIG_URL,
    DatasetError,
    LeagueData,
    fetch_main_data,
    load_competition_matches,
    parse_league_data,
    parse_matches_payload,
)
from .models import Match, MatchStatus, Team
from .report import build_competition_html, build_index_html
from .standings import StandingsRow, calculate_standings, head_to_head
from .statistics import aggregate_assists, aggregate_clean_sheets, aggregate_scorers, analyze_bucket

__all__ = [
    "CONFIG_URL",
    "DatasetError",
    "LeagueData",
    "Match",
    "MatchStatus",
    "StandingsRow",
    "Team",
    "aggregate_assists",
    "aggregate_clean_sheets",
    "aggregate_scorers",
    "analyze_bucket",
    "build_competition_html",
    "build_index_html",
    "calculate_standings",
    "fetch_main_data",
    "head_to_head",
    "load_competition_matches",
    "parse_league_data",
    "parse_matches_payload",
]
