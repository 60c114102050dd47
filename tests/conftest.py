from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Callable, Tuple

import pytest


def pytest_configure() -> None:
    root = Path(__file__).resolve().parents[1]
    src_path = root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


@pytest.fixture
def roster() -> Tuple[Any, ...]:
    from youth_scores.models import Team

    return (
        Team(team_id="a", name="Alpha", group="A"),
        Team(team_id="b", name="Beta", group="A"),
        Team(team_id="c", name="Gamma", group="B"),
        Team(team_id="d", name="Delta", group="B"),
    )


@pytest.fixture
def make_match(roster: Tuple[Any, ...]) -> Callable[..., Any]:
    from youth_scores.models import Match, MatchStatus

    def _make(
        home: Any,
        away: Any,
        home_score: Any = None,
        away_score: Any = None,
        *,
        status: MatchStatus = MatchStatus.COMPLETED,
        teams: Any = None,
        **extra: Any,
    ) -> Match:
        return Match(
            home_team_id=home,
            away_team_id=away,
            status=status,
            home_score=home_score,
            away_score=away_score,
            teams=tuple(roster if teams is None else teams),
            **extra,
        )

    return _make
