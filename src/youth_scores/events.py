"""Parsing of scorer and assist entries attached to match records."""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import AbstractSet, Iterable, List, Optional, Sequence, Tuple

from .models import ASSIST_MARKER, NO_DATA_ENTRY

PLAYER_EVENT_PATTERN = re.compile(r"^(?P<name>.*?)\s*\((?P<count>[0-9]+)\)\Z", re.DOTALL)


@dataclass(frozen=True)
class PlayerEvent:
    name: str
    count: int


@dataclass(frozen=True)
class ScorerSplit:
    goals: Tuple[str, ...]
    assists: Tuple[str, ...]


def parse_player_event(raw: str) -> PlayerEvent:
    """Parse ``"Name (3)"`` into a name and a count.

    Entries without a trailing count are a single event. Any string is
    accepted.
    """

    text = raw if isinstance(raw, str) else str(raw)
    match = PLAYER_EVENT_PATTERN.match(text)
    if match:
        return PlayerEvent(name=match.group("name").strip(), count=int(match.group("count")))
    return PlayerEvent(name=text.strip(), count=1)


def _marker_index(entries: Sequence[str], markers: AbstractSet[str]) -> Optional[int]:
    for index, entry in enumerate(entries):
        if entry in markers:
            return index
    return None


def _is_countable(entry: str) -> bool:
    return bool(entry) and bool(entry.strip()) and entry != NO_DATA_ENTRY


def split_scorer_entries(
    entries: Sequence[str], markers: AbstractSet[str] = frozenset({ASSIST_MARKER})
) -> ScorerSplit:
    """Split a combined scorer list into goal and assist entries.

    Everything before the assist marker is a goal; assists exist only when the
    marker is present and is not the last entry. League-wide views recognise
    only the Arabic marker; the single-team views pass ``ASSIST_MARKERS`` so
    the English ``"Assists"`` marker splits there as well.
    """

    if not entries:
        return ScorerSplit(goals=(), assists=())
    index = _marker_index(entries, markers)
    if index is None:
        goals = entries
        assists: Sequence[str] = ()
    else:
        goals = entries[:index]
        assists = entries[index + 1 :]
    return ScorerSplit(
        goals=tuple(entry for entry in goals if _is_countable(entry)),
        assists=tuple(entry for entry in assists if _is_countable(entry)),
    )


def parse_player_events(entries: Iterable[str]) -> List[PlayerEvent]:
    return [parse_player_event(entry) for entry in entries]
