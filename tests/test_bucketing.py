from __future__ import annotations

from youth_scores.bucketing import (
    GENERAL_STATS_LABEL,
    NO_GROUP_LABEL,
    PRELIMINARY_STAGE_LABEL,
    bucket_by_sector_or_group,
    bucket_by_team_stage,
    build_team_group_map,
    team_ids_by_bucket,
    team_stage_label,
)
from youth_scores.models import MatchStatus, Team


def test_bucket_without_groups_returns_single_implicit_bucket(make_match) -> None:
    matches = [make_match("a", "b", 1, 0), make_match("c", "d", 2, 2)]
    buckets = bucket_by_sector_or_group(matches)
    assert list(buckets) == [None]
    assert buckets[None] == matches


def test_bucket_empty_input_is_empty() -> None:
    assert bucket_by_sector_or_group([]) == {}


def test_bucket_prefers_group_over_sector(make_match) -> None:
    grouped = make_match("a", "b", 1, 0, group="A", sector="North")
    sectored = make_match("c", "d", 0, 0, sector="North")
    loose = make_match("a", "c", 0, 1)
    buckets = bucket_by_sector_or_group([grouped, sectored, loose])
    assert buckets["المجموعة A"] == [grouped]
    assert buckets["North"] == [sectored]
    assert buckets[NO_GROUP_LABEL] == [loose]


def test_team_ids_by_bucket_collects_each_team_once(make_match) -> None:
    matches = [
        make_match("a", "b", group="A", status=MatchStatus.UPCOMING),
        make_match("b", "a", group="A"),
        make_match("c", "d", group="B"),
    ]
    buckets = team_ids_by_bucket(matches)
    assert buckets["المجموعة A"] == ["a", "b"]
    assert buckets["المجموعة B"] == ["c", "d"]


def test_team_stage_label_rules() -> None:
    assert team_stage_label("A", "A") == "A"
    assert team_stage_label("A", "B") == PRELIMINARY_STAGE_LABEL
    assert team_stage_label("A", None) == "A"
    assert team_stage_label(None, "B") == "B"
    assert team_stage_label(None, None) == GENERAL_STATS_LABEL


def test_build_team_group_map_keeps_first_non_empty_group(make_match) -> None:
    first_roster = (Team(team_id="a", name="Alpha"), Team(team_id="b", name="Beta", group="A"))
    second_roster = (Team(team_id="a", name="Alpha", group="X"), Team(team_id="b", name="Beta", group="Z"))
    matches = [
        make_match("a", "b", 1, 0, teams=first_roster),
        make_match("a", "b", 0, 0, teams=second_roster),
    ]
    groups = build_team_group_map(matches)
    assert groups == {"a": "X", "b": "A"}


def test_bucket_by_team_stage_orders_special_buckets_first(make_match) -> None:
    matches = [
        make_match("c", "d", 1, 0),
        make_match("a", "b", 2, 1),
        make_match("a", "c", 0, 0),
        make_match("a", "x", 3, 0, teams=(Team(team_id="x", name="X"),)),
        make_match("a", "b", status=MatchStatus.UPCOMING),
    ]
    buckets = bucket_by_team_stage(matches)
    assert list(buckets)[0] == PRELIMINARY_STAGE_LABEL
    assert buckets[PRELIMINARY_STAGE_LABEL] == [matches[2]]
    assert buckets["A"] == [matches[1], matches[3]]
    assert buckets["B"] == [matches[0]]
    assert sum(len(bucket) for bucket in buckets.values()) == 4


def test_bucket_by_team_stage_uses_explicit_roster(make_match) -> None:
    roster = (Team(team_id="a", name="Alpha"), Team(team_id="b", name="Beta"))
    buckets = bucket_by_team_stage([make_match("a", "b", 1, 1)], roster)
    assert list(buckets) == [GENERAL_STATS_LABEL]
