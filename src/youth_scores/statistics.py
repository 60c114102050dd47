"""Player leaderboards and per-stage match analysis."""
from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from .bucketing import BucketKey, bucket_by_sector_or_group, bucket_by_team_stage
from .events import ScorerSplit, parse_player_events, split_scorer_entries
from .models import ASSIST_MARKERS, Match, Team, TeamId, team_name

PLACEHOLDER = "-"


@dataclass(frozen=True)
class LeaderboardEntry:
    name: str
    team_id: Optional[TeamId]
    value: int


@dataclass(frozen=True)
class BucketAnalysis:
    total_matches: int
    total_goals: int
    goal_rate: str
    decisive_matches: int
    decisive_percentage: str
    drawn_matches: int
    drawn_percentage: str
    strongest_attack: str
    weakest_attack: str
    strongest_defense: str
    weakest_defense: str

    @property
    def decisive(self) -> str:
        return f"{self.decisive_matches} ({self.decisive_percentage}%)"

    @property
    def draws(self) -> str:
        return f"{self.drawn_matches} ({self.drawn_percentage}%)"


EntrySelector = Callable[[ScorerSplit], Tuple[str, ...]]


def _goals(split: ScorerSplit) -> Tuple[str, ...]:
    return split.goals


def _assists(split: ScorerSplit) -> Tuple[str, ...]:
    return split.assists


def _rank(entries: Iterable[LeaderboardEntry]) -> List[LeaderboardEntry]:
    return sorted((entry for entry in entries if entry.value > 0), key=lambda entry: -entry.value)


def _aggregate_player_events(
    matches: Iterable[Match], selector: EntrySelector
) -> List[LeaderboardEntry]:
    totals: Dict[Tuple[str, Optional[TeamId]], int] = {}
    for match in matches:
        if not match.is_completed:
            continue
        sides = (
            (match.home_team_id, match.home_scorers),
            (match.away_team_id, match.away_scorers),
        )
        for team_id, entries in sides:
            for event in parse_player_events(selector(split_scorer_entries(entries))):
                key = (event.name, team_id)
                totals[key] = totals.get(key, 0) + event.count
    return _rank(
        LeaderboardEntry(name=name, team_id=team_id, value=value)
        for (name, team_id), value in totals.items()
    )


def aggregate_scorers(matches: Iterable[Match]) -> List[LeaderboardEntry]:
    """Goals per (player, team) over completed matches, highest first."""

    return _aggregate_player_events(matches, _goals)


def aggregate_assists(matches: Iterable[Match]) -> List[LeaderboardEntry]:
    return _aggregate_player_events(matches, _assists)


def aggregate_clean_sheets(matches: Iterable[Match]) -> List[LeaderboardEntry]:
    """Count completed matches in which each team's opponent scored exactly 0."""

    totals: Dict[Optional[TeamId], LeaderboardEntry] = {}

    def _credit(match: Match, team_id: Optional[TeamId]) -> None:
        current = totals.get(team_id)
        if current is None:
            totals[team_id] = LeaderboardEntry(
                name=team_name(match.teams, team_id), team_id=team_id, value=1
            )
        else:
            totals[team_id] = LeaderboardEntry(
                name=current.name, team_id=team_id, value=current.value + 1
            )

    for match in matches:
        if not match.is_completed:
            continue
        if match.away_score == 0:
            _credit(match, match.home_team_id)
        if match.home_score == 0:
            _credit(match, match.away_team_id)
    return _rank(totals.values())


def _by_bucket(
    matches: Sequence[Match],
    aggregate: Callable[[Iterable[Match]], List[LeaderboardEntry]],
) -> Dict[BucketKey, List[LeaderboardEntry]]:
    leaderboards: Dict[BucketKey, List[LeaderboardEntry]] = {}
    for key, bucket in bucket_by_sector_or_group(matches).items():
        entries = aggregate(bucket)
        if entries:
            leaderboards[key] = entries
    return leaderboards


def scorers_by_bucket(matches: Sequence[Match]) -> Dict[BucketKey, List[LeaderboardEntry]]:
    return _by_bucket(matches, aggregate_scorers)


def assists_by_bucket(matches: Sequence[Match]) -> Dict[BucketKey, List[LeaderboardEntry]]:
    return _by_bucket(matches, aggregate_assists)


def clean_sheets_by_bucket(matches: Sequence[Match]) -> Dict[BucketKey, List[LeaderboardEntry]]:
    return _by_bucket(matches, aggregate_clean_sheets)


def _team_player_events(
    matches: Iterable[Match], team_id: TeamId, selector: EntrySelector
) -> List[LeaderboardEntry]:
    totals: Dict[str, int] = {}
    for match in matches:
        if not match.is_completed:
            continue
        if match.home_team_id == team_id:
            entries = match.home_scorers
        elif match.away_team_id == team_id:
            entries = match.away_scorers
        else:
            continue
        for event in parse_player_events(selector(split_scorer_entries(entries, ASSIST_MARKERS))):
            totals[event.name] = totals.get(event.name, 0) + event.count
    return _rank(
        LeaderboardEntry(name=name, team_id=team_id, value=value)
        for name, value in totals.items()
    )


def team_scorers(matches: Iterable[Match], team_id: TeamId) -> List[LeaderboardEntry]:
    return _team_player_events(matches, team_id, _goals)


def team_assists(matches: Iterable[Match], team_id: TeamId) -> List[LeaderboardEntry]:
    return _team_player_events(matches, team_id, _assists)


def _to_fixed(value: float, places: int) -> str:
    quantum = Decimal(1).scaleb(-places)
    return str(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def _describe_extreme(
    totals: Dict[Optional[TeamId], int],
    names: Dict[Optional[TeamId], str],
    *,
    highest: bool,
) -> str:
    if not totals:
        return PLACEHOLDER
    target = max(totals.values()) if highest else min(totals.values())
    labels = [names[team_id] for team_id, value in totals.items() if value == target]
    labels = [label for label in labels if label]
    if not labels:
        return PLACEHOLDER
    return f"{', '.join(labels)} ({target})"


def analyze_bucket(matches: Sequence[Match]) -> BucketAnalysis:
    """Summarise one bucket of completed matches.

    Strongest attack is the most goals scored, strongest defense the fewest
    conceded; tied teams are listed together. Empty buckets yield ``"0.00"``
    rates and ``"-"`` extremes.
    """

    completed = [match for match in matches if match.is_completed]
    total_matches = len(completed)
    total_goals = 0
    decisive = 0
    drawn = 0
    goals_for: Dict[Optional[TeamId], int] = {}
    goals_against: Dict[Optional[TeamId], int] = {}
    names: Dict[Optional[TeamId], str] = {}

    for match in completed:
        home_goals = match.home_goals
        away_goals = match.away_goals
        total_goals += home_goals + away_goals
        if home_goals != away_goals:
            decisive += 1
        else:
            drawn += 1
        for team_id, scored, conceded in (
            (match.home_team_id, home_goals, away_goals),
            (match.away_team_id, away_goals, home_goals),
        ):
            if team_id not in names:
                names[team_id] = team_name(match.teams, team_id)
            goals_for[team_id] = goals_for.get(team_id, 0) + scored
            goals_against[team_id] = goals_against.get(team_id, 0) + conceded

    if total_matches:
        goal_rate = _to_fixed(total_goals / total_matches, 2)
        decisive_pct = _to_fixed(decisive / total_matches * 100, 1)
        drawn_pct = _to_fixed(drawn / total_matches * 100, 1)
    else:
        goal_rate, decisive_pct, drawn_pct = "0.00", "0.0", "0.0"

    return BucketAnalysis(
        total_matches=total_matches,
        total_goals=total_goals,
        goal_rate=goal_rate,
        decisive_matches=decisive,
        decisive_percentage=decisive_pct,
        drawn_matches=drawn,
        drawn_percentage=drawn_pct,
        strongest_attack=_describe_extreme(goals_for, names, highest=True),
        weakest_attack=_describe_extreme(goals_for, names, highest=False),
        strongest_defense=_describe_extreme(goals_against, names, highest=False),
        weakest_defense=_describe_extreme(goals_against, names, highest=True),
    )


def analyze_by_stage(
    matches: Sequence[Match], team_roster: Optional[Sequence[Team]] = None
) -> Dict[str, BucketAnalysis]:
    return {
        label: analyze_bucket(bucket)
        for label, bucket in bucket_by_team_stage(matches, team_roster).items()
    }
