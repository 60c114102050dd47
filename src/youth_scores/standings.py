"""League table computation with head-to-head tie-breaking."""
from __future__ import annotations

from dataclasses import dataclass
from functools import cmp_to_key
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from .bucketing import BucketKey, team_ids_by_bucket
from .collation import compare_names
from .models import Match, Team, TeamId, find_team

HEAD_TO_HEAD_MIN_MATCHES = 2


@dataclass
class StandingsRow:
    team_id: TeamId
    played: int = 0
    won: int = 0
    drawn: int = 0
    lost: int = 0
    goals_for: int = 0
    goals_against: int = 0
    points: int = 0
    penalty_points: int = 0
    group: Optional[str] = None

    @property
    def goal_diff(self) -> int:
        return self.goals_for - self.goals_against

    def record(self, scored: int, conceded: int, *, penalty_bonus: bool = False) -> None:
        self.played += 1
        self.goals_for += scored
        self.goals_against += conceded
        if scored > conceded:
            self.won += 1
            self.points += 3
        elif scored < conceded:
            self.lost += 1
        else:
            self.drawn += 1
            self.points += 1
            if penalty_bonus:
                self.points += 1
                self.penalty_points += 1

    def as_dict(self) -> Dict[str, Any]:
        return {
            "team_id": self.team_id,
            "played": self.played,
            "won": self.won,
            "drawn": self.drawn,
            "lost": self.lost,
            "goals_for": self.goals_for,
            "goals_against": self.goals_against,
            "goal_diff": self.goal_diff,
            "points": self.points,
            "penalty_points": self.penalty_points,
            "group": self.group,
        }


def _roster_for(matches: Sequence[Match], teams: Optional[Sequence[Team]]) -> Sequence[Team]:
    if teams is not None:
        return teams
    return matches[0].teams if matches else ()


def _name_for(team_id: TeamId, roster: Sequence[Team]) -> str:
    team = find_team(roster, team_id)
    return team.name if team else ""


def head_to_head(team_a: TeamId, team_b: TeamId, matches: Iterable[Match]) -> int:
    """Compare two teams on their direct meetings only.

    Returns a comparator-style value: negative when ``team_a`` ranks ahead,
    positive when ``team_b`` does, ``0`` when fewer than two meetings exist or
    the meetings are level on points and goal difference. The magnitude is the
    points gap, or the goal-difference gap when points are level.
    """

    a_points = 0
    b_points = 0
    a_goal_diff = 0
    meetings = 0
    for match in matches:
        if not match.counts_for_standings:
            continue
        if match.home_team_id == team_a and match.away_team_id == team_b:
            scored, conceded = match.home_goals, match.away_goals
        elif match.home_team_id == team_b and match.away_team_id == team_a:
            scored, conceded = match.away_goals, match.home_goals
        else:
            continue
        meetings += 1
        a_goal_diff += scored - conceded
        if scored > conceded:
            a_points += 3
        elif scored < conceded:
            b_points += 3
        else:
            a_points += 1
            b_points += 1

    if meetings < HEAD_TO_HEAD_MIN_MATCHES:
        return 0
    if a_points != b_points:
        return b_points - a_points
    b_goal_diff = -a_goal_diff
    if a_goal_diff != b_goal_diff:
        return b_goal_diff - a_goal_diff
    return 0


def calculate_standings(
    team_ids: Iterable[TeamId],
    team_group_map: Optional[Mapping[TeamId, Optional[str]]],
    matches: Sequence[Match],
    *,
    teams: Optional[Sequence[Team]] = None,
) -> List[StandingsRow]:
    """Build the ranked table for ``team_ids`` from completed league matches.

    Each side of a match is credited only when it belongs to ``team_ids``, so a
    cross-group fixture updates every table that contains one of its teams.
    Knockout matches never count.

    Ordering: points, then (for tied teams with points) the pairwise
    head-to-head result, goal difference, goals scored and finally the team
    name in locale collation order. The head-to-head step is evaluated per
    pair inside the sort and is not transitive for three or more tied teams.
    """

    group_map = team_group_map or {}
    rows: Dict[TeamId, StandingsRow] = {}
    for team_id in team_ids:
        if team_id not in rows:
            rows[team_id] = StandingsRow(team_id=team_id, group=group_map.get(team_id))

    for match in matches:
        if not match.counts_for_standings:
            continue
        home_row = rows.get(match.home_team_id)
        away_row = rows.get(match.away_team_id)
        if home_row is None and away_row is None:
            continue
        penalty_winner = match.penalty_winner_team_id
        if home_row is not None:
            home_row.record(
                match.home_goals,
                match.away_goals,
                penalty_bonus=penalty_winner is not None and penalty_winner == match.home_team_id,
            )
        if away_row is not None:
            away_row.record(
                match.away_goals,
                match.home_goals,
                penalty_bonus=penalty_winner is not None and penalty_winner == match.away_team_id,
            )

    roster = _roster_for(matches, teams)

    def _compare(a: StandingsRow, b: StandingsRow) -> int:
        if a.points != b.points:
            return b.points - a.points
        if a.points > 0:
            result = head_to_head(a.team_id, b.team_id, matches)
            if result != 0:
                return result
        if a.goal_diff != b.goal_diff:
            return b.goal_diff - a.goal_diff
        if a.goals_for != b.goals_for:
            return b.goals_for - a.goals_for
        return compare_names(_name_for(a.team_id, roster), _name_for(b.team_id, roster))

    return sorted(rows.values(), key=cmp_to_key(_compare))


def calculate_stage_standings(
    team_ids: Iterable[TeamId], matches: Sequence[Match]
) -> List[StandingsRow]:
    """Simplified table for an already stage-filtered match list.

    Only matches between two listed teams count. No knockout exclusion,
    penalty bonus or head-to-head step is applied.
    """

    rows: Dict[TeamId, StandingsRow] = {}
    for team_id in team_ids:
        rows.setdefault(team_id, StandingsRow(team_id=team_id))

    for match in matches:
        if not match.is_completed:
            continue
        home_row = rows.get(match.home_team_id)
        away_row = rows.get(match.away_team_id)
        if home_row is None or away_row is None:
            continue
        home_row.record(match.home_goals, match.away_goals)
        away_row.record(match.away_goals, match.home_goals)

    return sorted(
        rows.values(),
        key=lambda row: (-row.points, -row.goal_diff, -row.goals_for),
    )


def standings_by_team_group(
    matches: Sequence[Match], teams: Optional[Sequence[Team]] = None
) -> Dict[BucketKey, List[StandingsRow]]:
    """One table per team-level group; a single ``None`` table without groups."""

    roster = _roster_for(matches, teams)
    if not roster:
        return {}
    group_map: Dict[TeamId, Optional[str]] = {team.team_id: team.group for team in roster}
    has_groups = any(group_map.values())

    partitions: Dict[BucketKey, List[TeamId]] = {}
    for team in roster:
        key = team.group if has_groups and team.group else None
        partitions.setdefault(key, []).append(team.team_id)

    tables: Dict[BucketKey, List[StandingsRow]] = {}
    for key in sorted(partitions, key=lambda key: key or ""):
        tables[key] = calculate_standings(partitions[key], group_map, matches, teams=roster)
    return tables


def list_stages(matches: Iterable[Match]) -> List[str]:
    return sorted({match.stage for match in matches if match.stage})


def standings_by_stage(
    matches: Sequence[Match], stage: Optional[str] = None
) -> Dict[BucketKey, List[StandingsRow]]:
    """Reduced tables per sector/group bucket for one stage (``None`` = all)."""

    if stage is None:
        filtered = list(matches)
    else:
        filtered = [match for match in matches if match.stage == stage]
    return {
        key: calculate_stage_standings(team_ids, filtered)
        for key, team_ids in team_ids_by_bucket(filtered).items()
    }
