"""Partition match collections into groups, sectors and stages."""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .collation import collation_key
from .models import Match, Team, TeamId, find_team

GROUP_LABEL_TEMPLATE = "المجموعة {group}"
NO_GROUP_LABEL = "بدون مجموعة"
PRELIMINARY_STAGE_LABEL = "المرحلة الاولي"
GENERAL_STATS_LABEL = "إحصائيات عامة"

BucketKey = Optional[str]


def has_sector_or_group(matches: Iterable[Match]) -> bool:
    return any(match.group or match.sector for match in matches)


def sector_or_group_label(match: Match) -> str:
    if match.group:
        return GROUP_LABEL_TEMPLATE.format(group=match.group)
    if match.sector:
        return match.sector
    return NO_GROUP_LABEL


def _sorted_buckets(buckets: Dict[BucketKey, list]) -> Dict[BucketKey, list]:
    return {key: buckets[key] for key in sorted(buckets, key=lambda key: key or "")}


def bucket_by_sector_or_group(matches: Sequence[Match]) -> Dict[BucketKey, List[Match]]:
    """Bucket matches by match-level group, then sector.

    When no match carries a group or sector the whole collection is returned
    under the single key ``None``, which callers render without a heading.
    """

    if not has_sector_or_group(matches):
        return {None: list(matches)} if matches else {}
    buckets: Dict[BucketKey, List[Match]] = {}
    for match in matches:
        buckets.setdefault(sector_or_group_label(match), []).append(match)
    return _sorted_buckets(buckets)


def team_ids_by_bucket(matches: Sequence[Match]) -> Dict[BucketKey, List[TeamId]]:
    grouped = has_sector_or_group(matches)
    buckets: Dict[BucketKey, List[TeamId]] = {}
    for match in matches:
        key = sector_or_group_label(match) if grouped else None
        members = buckets.setdefault(key, [])
        for team_id in (match.home_team_id, match.away_team_id):
            if team_id is not None and team_id not in members:
                members.append(team_id)
    return _sorted_buckets(buckets)


def _resolve_team_group(
    match: Match, team_id: Optional[TeamId], roster: Optional[Sequence[Team]]
) -> Optional[str]:
    team = find_team(roster if roster is not None else match.teams, team_id)
    return team.group if team else None


def build_team_group_map(
    matches: Iterable[Match], team_roster: Optional[Sequence[Team]] = None
) -> Dict[TeamId, Optional[str]]:
    """Map each participating team id to its team-level group.

    The first non-empty group seen for a team wins; later occurrences never
    replace it, so inconsistent rosters resolve by iteration order.
    """

    groups: Dict[TeamId, Optional[str]] = {}
    for match in matches:
        for team_id in (match.home_team_id, match.away_team_id):
            if team_id is None or groups.get(team_id):
                continue
            groups[team_id] = _resolve_team_group(match, team_id, team_roster)
    return groups


def team_stage_label(home_group: Optional[str], away_group: Optional[str]) -> str:
    if home_group and away_group:
        if home_group == away_group:
            return home_group
        return PRELIMINARY_STAGE_LABEL
    if home_group:
        return home_group
    if away_group:
        return away_group
    return GENERAL_STATS_LABEL


def stage_bucket_sort_key(name: str) -> Tuple[int, Tuple[int, ...]]:
    if name == PRELIMINARY_STAGE_LABEL:
        return (0, ())
    if name == GENERAL_STATS_LABEL:
        return (1, ())
    return (2, collation_key(name))


def bucket_by_team_stage(
    matches: Sequence[Match], team_roster: Optional[Sequence[Team]] = None
) -> Dict[str, List[Match]]:
    """Bucket completed matches by the team-level groups of both sides."""

    group_map = build_team_group_map(matches, team_roster)
    buckets: Dict[str, List[Match]] = {}
    for match in matches:
        if not match.is_completed:
            continue
        label = team_stage_label(
            group_map.get(match.home_team_id), group_map.get(match.away_team_id)
        )
        buckets.setdefault(label, []).append(match)
    return {key: buckets[key] for key in sorted(buckets, key=stage_bucket_sort_key)}
