"""Arrange fixtures by match day and week for the schedule view."""
from __future__ import annotations

from datetime import date, datetime, time
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from dateutil import parser as date_parser

from .models import UNKNOWN_LABEL, Match, MatchStatus, TeamId

DEFAULT_KICKOFF = "00:00"
WEEK_LABEL_TEMPLATE = "الأسبوع {week}"

WeekSchedule = Dict[str, List[Match]]


def _date_key(match: Match) -> str:
    return match.date_label or UNKNOWN_LABEL


def _week_key(match: Match) -> str:
    return match.week or UNKNOWN_LABEL


def _date_sort_key(label: str, parsed: Dict[str, Optional[date]]) -> Tuple[int, date, str]:
    if label == UNKNOWN_LABEL:
        return (2, date.min, label)
    value = parsed.get(label)
    if value is None:
        return (1, date.min, label)
    return (0, value, label)


def week_sort_key(week: str) -> Tuple[int, int, str]:
    if week == UNKNOWN_LABEL:
        return (2, 0, week)
    digits = ""
    for char in week.strip():
        if not char.isdigit():
            break
        digits += char
    if not digits:
        return (1, 0, week)
    return (0, int(digits), week)


def week_label(week: str) -> str:
    return week if week == UNKNOWN_LABEL else WEEK_LABEL_TEMPLATE.format(week=week)


def group_matches_by_week(matches: Iterable[Match]) -> Dict[str, WeekSchedule]:
    """Group matches by date label, then by week.

    Dates are ordered chronologically with unparseable labels after real dates
    and the unknown date last. Inside a week, matches are ordered by kick-off
    time with missing times treated as midnight.
    """

    groups: Dict[str, WeekSchedule] = {}
    parsed: Dict[str, Optional[date]] = {}
    for match in matches:
        date_key = _date_key(match)
        parsed.setdefault(date_key, match.date)
        groups.setdefault(date_key, {}).setdefault(_week_key(match), []).append(match)

    ordered: Dict[str, WeekSchedule] = {}
    for date_key in sorted(groups, key=lambda label: _date_sort_key(label, parsed)):
        weeks = groups[date_key]
        ordered[date_key] = {
            week: sorted(entries, key=lambda match: match.time or DEFAULT_KICKOFF)
            for week, entries in weeks.items()
        }
    return ordered


def sorted_weeks(matches: Iterable[Match]) -> List[str]:
    return sorted({_week_key(match) for match in matches}, key=week_sort_key)


def matches_for_team(matches: Iterable[Match], team_id: TeamId) -> List[Match]:
    return [match for match in matches if match.involves(team_id)]


def kickoff(match: Match) -> Optional[datetime]:
    if match.date is None:
        return None
    try:
        clock = date_parser.parse(match.time).time() if match.time else time()
    except (ValueError, OverflowError):
        clock = time()
    return datetime.combine(match.date, clock)


def find_nearest_upcoming(
    matches: Sequence[Match], reference: Optional[datetime] = None
) -> Optional[Match]:
    """Return the upcoming match with the earliest kick-off not before ``reference``."""

    now = reference or datetime.now()
    nearest: Optional[Match] = None
    nearest_kickoff: Optional[datetime] = None
    for match in matches:
        if match.status is not MatchStatus.UPCOMING:
            continue
        start = kickoff(match)
        if start is None or start < now:
            continue
        if nearest_kickoff is None or start < nearest_kickoff:
            nearest, nearest_kickoff = match, start
    return nearest


__all__ = [
    "find_nearest_upcoming",
    "group_matches_by_week",
    "kickoff",
    "matches_for_team",
    "sorted_weeks",
    "week_label",
    "week_sort_key",
]
