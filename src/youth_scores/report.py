"""Static HTML rendering for the league index and competition pages."""
from __future__ import annotations

from datetime import datetime
from html import escape
from typing import List, Mapping, Optional, Sequence

from bs4 import BeautifulSoup

from .bucketing import BucketKey
from .data import LeagueData, NewsItem, Venue, filter_venues, sort_news
from .models import (
    UNKNOWN_LABEL,
    Match,
    MatchStatus,
    Team,
    TeamId,
    collect_teams,
    team_name,
)
from .schedule import (
    find_nearest_upcoming,
    group_matches_by_week,
    matches_for_team,
    sorted_weeks,
    week_label,
)
from .standings import StandingsRow, list_stages, standings_by_stage, standings_by_team_group
from .statistics import (
    BucketAnalysis,
    LeaderboardEntry,
    analyze_by_stage,
    assists_by_bucket,
    clean_sheets_by_bucket,
    scorers_by_bucket,
    team_assists,
    team_scorers,
)

NO_DATA = "لا توجد بيانات"
GROUP_HEADING_TEMPLATE = "المجموعة {group}"
ARABIC_MONTHS = {
    1: "يناير",
    2: "فبراير",
    3: "مارس",
    4: "أبريل",
    5: "مايو",
    6: "يونيو",
    7: "يوليو",
    8: "أغسطس",
    9: "سبتمبر",
    10: "أكتوبر",
    11: "نوفمبر",
    12: "ديسمبر",
}
STATUS_LABELS = {
    MatchStatus.POSTPONED: "تأجلت",
    MatchStatus.LIVE: "جارية",
    MatchStatus.UPCOMING: "لم تبدأ",
}
FINISHED_LABEL = "انتهت"
PLAYER_POSITIONS = (
    ("coach", "الجهاز الفني"),
    ("goalkeepers", "حراس المرمى"),
    ("defenders", "المدافعون"),
    ("midfielders", "لاعبو الوسط"),
    ("attackers", "المهاجمون"),
)
STANDINGS_COLUMNS = ("#", "الفريق", "لعب", "فاز", "تعادل", "خسر", "له", "عليه", "الفارق", "النقاط")
PAGE_STYLE = """
    body { font-family: "Tajawal", "Segoe UI", sans-serif; margin: 0; padding: 1rem; background: #f5f5f5; color: #1c1c1c; }
    h1, h2, h3 { color: #7e0000; }
    section { background: #fff; border-radius: 12px; padding: 1rem; margin-bottom: 1.5rem; }
    table { width: 100%; border-collapse: collapse; }
    th, td { padding: 0.4rem; border-bottom: 1px solid #ddd; text-align: center; }
    .no-data { color: #777; }
    .match-card { border: 1px solid #eee; border-radius: 8px; padding: 0.5rem; margin: 0.5rem 0; }
    .match-card.nearest { border-color: #7e0000; }
    .analysis-card dl { display: grid; grid-template-columns: auto 1fr; gap: 0.25rem 1rem; }
"""


def format_generation_timestamp(value: datetime) -> str:
    month = ARABIC_MONTHS.get(value.month, value.strftime("%B"))
    return f"{value.day} {month} {value.year} - {value.strftime('%H:%M')}"


def _no_data(message: str = NO_DATA) -> str:
    return f'<p class="no-data">{escape(message)}</p>'


def _page(title: str, body: Sequence[str], generated_at: Optional[datetime]) -> str:
    stamp = ""
    if generated_at is not None:
        stamp = f'<footer>آخر تحديث: {escape(format_generation_timestamp(generated_at))}</footer>'
    lines = [
        "<!DOCTYPE html>",
        '<html lang="ar" dir="rtl">',
        "<head>",
        '  <meta charset="utf-8">',
        '  <meta name="viewport" content="width=device-width, initial-scale=1">',
        f"  <title>{escape(title)}</title>",
        f"  <style>{PAGE_STYLE}  </style>",
        "</head>",
        "<body>",
        f"  <h1>{escape(title)}</h1>",
        *body,
        stamp,
        "</body>",
        "</html>",
    ]
    return "\n".join(line for line in lines if line) + "\n"


def news_plain_text(details: Optional[str]) -> str:
    if not details:
        return ""
    text = BeautifulSoup(details, "html.parser").get_text(" ", strip=True)
    return " ".join(text.split())


def format_news_list(items: Sequence[NewsItem]) -> str:
    if not items:
        return _no_data("لا توجد أخبار")
    rendered: List[str] = ["<ul class=\"news-list\">"]
    for item in sort_news(items):
        title = escape(item.title or "")
        date_html = f' <span class="news-date">{escape(item.date_label)}</span>' if item.date_label else ""
        summary = news_plain_text(item.details)
        summary_html = f"<p>{escape(summary)}</p>" if summary else ""
        rendered.append(f"<li><strong>{title}</strong>{date_html}{summary_html}</li>")
    rendered.append("</ul>")
    return "\n".join(rendered)


def format_venue_list(venues: Sequence[Venue]) -> str:
    if not venues:
        return _no_data()
    rendered = ["<ul class=\"venue-list\">"]
    for venue in venues:
        name = escape(venue.name)
        if venue.url:
            rendered.append(f'<li><a href="{escape(venue.url)}">{name}</a></li>')
        else:
            rendered.append(f"<li>{name}</li>")
    rendered.append("</ul>")
    return "\n".join(rendered)


def build_index_html(
    league: LeagueData,
    generated_at: Optional[datetime] = None,
    *,
    venue_search: Optional[str] = None,
) -> str:
    body: List[str] = ['<section class="seasons">', "<h2>البطولات</h2>"]
    for season in league.seasons:
        body.append(f"<h3>{escape(season.name)}</h3>")
        if not season.competitions:
            body.append(_no_data())
            continue
        body.append("<ul>")
        for competition in season.competitions:
            ages = "، ".join(escape(age_group.age) for age_group in competition.ages)
            body.append(f"<li>{escape(competition.name)}: {ages or escape(NO_DATA)}</li>")
        body.append("</ul>")
    body.append("</section>")
    body.extend(['<section class="news">', "<h2>الأخبار</h2>", format_news_list(league.news), "</section>"])
    venues = filter_venues(league.venues, venue_search)
    body.extend(['<section class="venues">', "<h2>الملاعب</h2>", format_venue_list(venues), "</section>"])
    return _page("دوري الناشئين", body, generated_at)


def _status_text(match: Match, venue: Optional[str] = None) -> str:
    if match.is_completed:
        return match.note or FINISHED_LABEL
    if match.status is MatchStatus.UPCOMING:
        return venue or STATUS_LABELS[MatchStatus.UPCOMING]
    return STATUS_LABELS.get(match.status, UNKNOWN_LABEL)


def format_match_card(
    match: Match,
    *,
    venues: Optional[Mapping[str, str]] = None,
    nearest: bool = False,
) -> str:
    home = escape(team_name(match.teams, match.home_team_id))
    away = escape(team_name(match.teams, match.away_team_id))
    if match.is_completed or match.status is MatchStatus.LIVE:
        home_score = "-" if match.home_score is None else str(match.home_score)
        away_score = "-" if match.away_score is None else str(match.away_score)
        center = f"{home_score} - {away_score}"
    else:
        center = match.time or UNKNOWN_LABEL
    venue = match.venue
    if venue and venues:
        venue = venues.get(venue, venue)
    meta = escape(_status_text(match, venue))
    classes = "match-card nearest" if nearest else "match-card"
    return (
        f'<div class="{classes}"><span class="home">{home}</span> '
        f'<span class="center">{escape(center)}</span> '
        f'<span class="away">{away}</span>'
        f'<div class="match-meta">{meta}</div></div>'
    )


def _schedule_section(
    matches: Sequence[Match],
    *,
    venues: Optional[Mapping[str, str]],
    reference: Optional[datetime],
) -> List[str]:
    lines = ['<section class="schedule">', "<h2>المباريات</h2>"]
    if not matches:
        lines.extend([_no_data(), "</section>"])
        return lines
    anchors = {
        week: f"week-{position}" for position, week in enumerate(sorted_weeks(matches), start=1)
    }
    links = "".join(
        f'<li><a href="#{anchor}">{escape(week_label(week))}</a></li>' for week, anchor in anchors.items()
    )
    lines.append(f'<nav class="weeks"><ul>{links}</ul></nav>')
    nearest = find_nearest_upcoming(matches, reference)
    for date_label, weeks in group_matches_by_week(matches).items():
        for week, entries in weeks.items():
            anchor = anchors.pop(week, None)
            id_attr = f' id="{anchor}"' if anchor else ""
            lines.append(
                f"<h3{id_attr}>{escape(week_label(week))} <small>{escape(date_label)}</small></h3>"
            )
            sector: Optional[str] = None
            for match in entries:
                heading = match.sector or (
                    GROUP_HEADING_TEMPLATE.format(group=match.group) if match.group else None
                )
                if heading and heading != sector:
                    lines.append(f"<h4>{escape(heading)}</h4>")
                    sector = heading
                lines.append(format_match_card(match, venues=venues, nearest=match is nearest))
    lines.append("</section>")
    return lines


def format_standings_table(rows: Sequence[StandingsRow], teams: Sequence[Team]) -> str:
    if not rows:
        return _no_data()
    header = "".join(f"<th>{escape(column)}</th>" for column in STANDINGS_COLUMNS)
    lines = ['<table class="standings">', f"<thead><tr>{header}</tr></thead>", "<tbody>"]
    for position, row in enumerate(rows, start=1):
        cells = (
            str(position),
            team_name(teams, row.team_id),
            str(row.played),
            str(row.won),
            str(row.drawn),
            str(row.lost),
            str(row.goals_for),
            str(row.goals_against),
            f"{row.goal_diff:+d}" if row.goal_diff else "0",
            str(row.points),
        )
        lines.append("<tr>" + "".join(f"<td>{escape(cell)}</td>" for cell in cells) + "</tr>")
    lines.extend(["</tbody>", "</table>"])
    return "\n".join(lines)


def _bucket_heading(key: BucketKey) -> str:
    return f"<h3>{escape(key)}</h3>" if key else ""


def _standings_section(matches: Sequence[Match], teams: Sequence[Team]) -> List[str]:
    lines = ['<section class="standings">', "<h2>الترتيب</h2>"]
    tables = standings_by_team_group(matches, teams)
    if not tables:
        lines.append(_no_data())
    for key, rows in tables.items():
        lines.append(_bucket_heading(key))
        lines.append(format_standings_table(rows, teams))
    stages = list_stages(matches)
    for stage in stages:
        lines.append(f"<h3>{escape(stage)}</h3>")
        for key, rows in standings_by_stage(matches, stage).items():
            if key:
                lines.append(f"<h4>{escape(key)}</h4>")
            lines.append(format_standings_table(rows, teams))
    lines.append("</section>")
    return [line for line in lines if line]


def format_leaderboard(
    entries: Sequence[LeaderboardEntry],
    teams: Sequence[Team],
    *,
    value_label: str,
    show_team: bool = True,
) -> str:
    if not entries:
        return _no_data()
    lines = ['<ol class="leaderboard">']
    for entry in entries:
        team_html = ""
        if show_team and entry.team_id is not None and entry.name != team_name(teams, entry.team_id):
            team_html = f' <span class="team">{escape(team_name(teams, entry.team_id))}</span>'
        lines.append(
            f"<li>{escape(entry.name)}{team_html} "
            f'<span class="value">{entry.value} {escape(value_label)}</span></li>'
        )
    lines.append("</ol>")
    return "\n".join(lines)


def _leaderboard_section(
    title: str,
    boards: Mapping[BucketKey, Sequence[LeaderboardEntry]],
    teams: Sequence[Team],
    value_label: str,
) -> List[str]:
    lines = ['<section class="leaderboards">', f"<h2>{escape(title)}</h2>"]
    if not boards:
        lines.append(_no_data())
    for key, entries in boards.items():
        lines.append(_bucket_heading(key))
        lines.append(format_leaderboard(entries, teams, value_label=value_label))
    lines.append("</section>")
    return [line for line in lines if line]


def format_analysis_card(label: str, analysis: BucketAnalysis) -> str:
    rows = (
        ("عدد المباريات", str(analysis.total_matches)),
        ("عدد الأهداف", str(analysis.total_goals)),
        ("معدل الأهداف", analysis.goal_rate),
        ("مباريات حاسمة", analysis.decisive),
        ("تعادلات", analysis.draws),
        ("أقوى هجوم", analysis.strongest_attack),
        ("أضعف هجوم", analysis.weakest_attack),
        ("أقوى دفاع", analysis.strongest_defense),
        ("أضعف دفاع", analysis.weakest_defense),
    )
    lines = ['<div class="analysis-card">', f"<h3>{escape(label)}</h3>", "<dl>"]
    for term, value in rows:
        lines.append(f"<dt>{escape(term)}</dt><dd>{escape(value)}</dd>")
    lines.extend(["</dl>", "</div>"])
    return "\n".join(lines)


def _analysis_section(matches: Sequence[Match], teams: Sequence[Team]) -> List[str]:
    lines = ['<section class="analysis">', "<h2>التحليل الشامل</h2>"]
    analyses = analyze_by_stage(matches, teams or None)
    if not analyses:
        lines.append(_no_data())
    for label, analysis in analyses.items():
        lines.append(format_analysis_card(label, analysis))
    lines.append("</section>")
    return lines


def format_team_info(team: Team) -> str:
    rows: List[str] = []
    if team.city:
        rows.append(f"<dt>المدينة</dt><dd>{escape(team.city)}</dd>")
    if team.home_field:
        field_html = escape(team.home_field)
        if team.field_url:
            field_html = f'<a href="{escape(team.field_url)}">{field_html}</a>'
        rows.append(f"<dt>الملعب</dt><dd>{field_html}</dd>")
    if team.information:
        info = "<br>".join(
            escape(line) for line in team.information.replace("\\n", "\n").split("\n")
        )
        rows.append(f"<dt>معلومات</dt><dd>{info}</dd>")
    if team.group:
        rows.append(f"<dt>المجموعة</dt><dd>{escape(team.group)}</dd>")
    if not rows:
        return _no_data("لا توجد معلومات عن الفريق")
    return "<dl class=\"team-info\">" + "".join(rows) + "</dl>"


def format_team_players(team: Team) -> str:
    lines: List[str] = []
    for key, label in PLAYER_POSITIONS:
        names = team.players.get(key)
        if not names:
            continue
        items = "".join(f"<li>{escape(name)}</li>" for name in names)
        lines.append(f"<h4>{escape(label)}</h4><ul>{items}</ul>")
    if not lines:
        return _no_data("لا توجد بيانات اللاعبين")
    return "\n".join(lines)


def format_team_fixtures(
    matches: Sequence[Match], team_id: TeamId, venues: Optional[Mapping[str, str]] = None
) -> str:
    fixtures = matches_for_team(matches, team_id)
    if not fixtures:
        return _no_data("لا توجد مباريات")
    return "\n".join(format_match_card(match, venues=venues) for match in fixtures)


def _teams_section(
    matches: Sequence[Match],
    teams: Sequence[Team],
    venues: Optional[Mapping[str, str]] = None,
) -> List[str]:
    lines = ['<section class="teams">', "<h2>الفرق</h2>"]
    if not teams:
        lines.append(_no_data())
    for team in teams:
        lines.append(f'<article class="team" id="team-{escape(str(team.team_id))}">')
        lines.append(f"<h3>{escape(team.name)}</h3>")
        lines.append(format_team_info(team))
        lines.append(format_team_players(team))
        lines.append("<h4>المباريات</h4>")
        lines.append(format_team_fixtures(matches, team.team_id, venues))
        lines.append("<h4>الهدافون</h4>")
        lines.append(
            format_leaderboard(team_scorers(matches, team.team_id), teams, value_label="أهداف", show_team=False)
        )
        lines.append("<h4>صناعة الأهداف</h4>")
        lines.append(
            format_leaderboard(team_assists(matches, team.team_id), teams, value_label="تمريرات", show_team=False)
        )
        lines.append("</article>")
    lines.append("</section>")
    return lines


def build_competition_html(
    title: str,
    matches: Sequence[Match],
    generated_at: Optional[datetime] = None,
    *,
    venues: Optional[Sequence[Venue]] = None,
    reference: Optional[datetime] = None,
) -> str:
    teams = collect_teams(matches)
    venue_names = {venue.venue_id: venue.name for venue in venues or () if venue.venue_id}
    body: List[str] = []
    body.extend(_schedule_section(matches, venues=venue_names, reference=reference or generated_at))
    body.extend(_standings_section(matches, teams))
    body.extend(_leaderboard_section("الهدافون", scorers_by_bucket(matches), teams, "أهداف"))
    body.extend(_leaderboard_section("صناعة الأهداف", assists_by_bucket(matches), teams, "تمريرات"))
    body.extend(_leaderboard_section("شباك نظيفة", clean_sheets_by_bucket(matches), teams, "مباريات"))
    body.extend(_analysis_section(matches, teams))
    body.extend(_teams_section(matches, teams, venue_names))
    return _page(title, body, generated_at)
