from __future__ import annotations

from datetime import date, datetime

from youth_scores.data import parse_league_data
from youth_scores.models import MatchStatus, Team
from youth_scores.report import (
    build_competition_html,
    build_index_html,
    format_analysis_card,
    format_leaderboard,
    format_standings_table,
    format_team_fixtures,
    format_team_info,
    news_plain_text,
)
from youth_scores.standings import calculate_standings
from youth_scores.statistics import aggregate_scorers, analyze_bucket

GENERATED = datetime(2024, 5, 3, 14, 30)


def test_news_plain_text_strips_markup() -> None:
    assert news_plain_text("<p>Hello <b>world</b></p>\n<p>again</p>") == "Hello world again"
    assert news_plain_text(None) == ""


def test_index_lists_seasons_news_and_venues() -> None:
    league = parse_league_data(
        {
            "seasons": [
                {
                    "season": "2024-2025",
                    "competitions": [{"name": {"ar": "الدوري"}, "ages": [{"age": "U15", "matchesurl": "x"}]}],
                }
            ],
            "news": [{"title": "<Breaking>", "details": "<p>Text</p>", "date": "2024-05-01"}],
            "venues": [{"venue_id": "v1", "name": "Stadium", "url": "https://maps.test"}],
        }
    )
    html = build_index_html(league, GENERATED)
    assert html.startswith("<!DOCTYPE html>")
    assert 'dir="rtl"' in html
    assert "2024-2025" in html
    assert "الدوري: U15" in html
    assert "&lt;Breaking&gt;" in html
    assert "<p>Text</p>" in html
    assert 'href="https://maps.test"' in html
    assert "3 مايو 2024 - 14:30" in html


def test_standings_table_renders_rows(roster, make_match) -> None:
    rows = calculate_standings(["a", "b"], None, [make_match("a", "b", 2, 0)], teams=roster)
    html = format_standings_table(rows, roster)
    assert html.index("Alpha") < html.index("Beta")
    assert "<td>+2</td>" in html
    assert "<td>3</td>" in html


def test_empty_sections_use_placeholder(roster) -> None:
    assert "لا توجد بيانات" in format_standings_table([], roster)
    assert "لا توجد بيانات" in format_leaderboard([], roster, value_label="أهداف")


def test_leaderboard_shows_team_for_players(roster, make_match) -> None:
    entries = aggregate_scorers([make_match("a", "b", 1, 0, home_scorers=("Ali",))])
    html = format_leaderboard(entries, roster, value_label="أهداف")
    assert "Ali" in html
    assert "Alpha" in html


def test_analysis_card_contains_values(make_match) -> None:
    html = format_analysis_card("A", analyze_bucket([make_match("a", "b", 3, 1)]))
    assert "<h3>A</h3>" in html
    assert "4.00" in html
    assert "Alpha (3)" in html


def test_team_info_escapes_and_breaks_lines() -> None:
    team = Team(team_id=1, name="X", city="<Giza>", information="line one\\nline two", home_field="Field", field_url="https://f.test")
    html = format_team_info(team)
    assert "&lt;Giza&gt;" in html
    assert "line one<br>line two" in html
    assert '<a href="https://f.test">Field</a>' in html


def test_competition_page_sections(make_match) -> None:
    roster = (
        Team(team_id="a", name="Alpha <A>", group="A", players={"goalkeepers": ("Keeper",)}),
        Team(team_id="b", name="Beta", group="A"),
    )
    matches = [
        make_match("a", "b", 2, 0, teams=roster, date=date(2024, 5, 1), date_label="2024-05-01", week="1", home_scorers=("Ali (2)",)),
        make_match(
            "b",
            "a",
            status=MatchStatus.UPCOMING,
            teams=roster,
            date=date(2024, 5, 8),
            date_label="2024-05-08",
            week="2",
            time="17:00",
            venue="v1",
        ),
    ]
    html = build_competition_html("Cup <U15>", matches, GENERATED)
    assert "<title>Cup &lt;U15&gt;</title>" in html
    assert "Alpha &lt;A&gt;" in html
    assert "Alpha <A>" not in html
    assert "الأسبوع 1" in html
    assert "الأسبوع 2" in html
    assert "match-card nearest" in html
    assert "Keeper" in html
    assert "حراس المرمى" in html
    standings = html.split('<section class="standings">')[1].split("</section>")[0]
    assert "<h3>A</h3>" in standings
    assert "المجموعة A" not in standings
    assert "Ali" in html
    assert '<a href="#week-1">الأسبوع 1</a>' in html
    assert '<h3 id="week-2">الأسبوع 2' in html
    teams_html = html.split('<section class="teams">')[1]
    assert teams_html.count('class="match-card"') == 4


def test_competition_page_without_matches() -> None:
    html = build_competition_html("Empty", [], GENERATED)
    assert html.count("لا توجد بيانات") >= 5


def test_team_fixtures_list_only_that_team(make_match) -> None:
    matches = [make_match("a", "b", 1, 0), make_match("c", "d", 2, 2), make_match("d", "a", status=MatchStatus.UPCOMING, venue="v1")]
    html = format_team_fixtures(matches, "a", {"v1": "Cairo Stadium"})
    assert html.count('class="match-card"') == 2
    assert "Gamma" not in html
    assert "Cairo Stadium" in html
    assert "لا توجد مباريات" in format_team_fixtures(matches, "zz")


def test_week_index_is_ordered_numerically(make_match) -> None:
    matches = [make_match("a", "b", week=week, date_label=f"day {week}") for week in ("10", "2")]
    html = build_competition_html("Cup", matches)
    assert html.index('href="#week-1">الأسبوع 2') < html.index('href="#week-2">الأسبوع 10')


def test_index_venue_search() -> None:
    league = parse_league_data(
        {
            "seasons": [],
            "venues": [{"venue_id": "v1", "name": "Cairo Stadium"}, {"venue_id": "v2", "name": "Alex Field"}],
        }
    )
    html = build_index_html(league, venue_search="alex")
    assert "Alex Field" in html
    assert "Cairo Stadium" not in html
