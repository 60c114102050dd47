from __future__ import annotations

import json

from youth_scores import __main__ as cli_main
from youth_scores.__main__ import build_parser, main, page_filename
from youth_scores.data import parse_matches_payload

LEAGUE = {
    "seasons": [
        {
            "season": "2024-2025",
            "competitions": [
                {
                    "name": {"ar": "الدوري"},
                    "ages": [
                        {"age": "U15", "matchesurl": "https://example.test/u15.json"},
                        {"age": "U17", "matchesurl": "https://example.test/u17.json"},
                    ],
                }
            ],
        }
    ]
}
MATCHES = {
    "teams": [{"team_id": 1, "name": "Alpha"}, {"team_id": 2, "name": "Beta"}],
    "matches": [{"home_team_id": 1, "away_team_id": 2, "home_score": 1, "away_score": 0, "status": "completed"}],
}


def test_parser_defaults() -> None:
    args = build_parser().parse_args([])
    assert args.config is None
    assert args.verbose is False


def test_page_filename_is_filesystem_safe() -> None:
    assert page_filename("2024/2025", "الدوري الممتاز", "U15") == "2024-2025_الدوري-الممتاز_U15.html"
    assert page_filename("", "", "") == "competition.html"


def test_main_renders_selected_competition(tmp_path, monkeypatch) -> None:
    dataset = tmp_path / "league.json"
    dataset.write_text(json.dumps(LEAGUE, ensure_ascii=False), encoding="utf-8")
    requested = []

    def fake_load(competition, age_group, season, **kwargs):
        requested.append(age_group.age)
        return parse_matches_payload(MATCHES)

    monkeypatch.setattr(cli_main, "load_competition_matches", fake_load)
    out = tmp_path / "site"
    exit_code = main(
        ["--dataset", str(dataset), "--output-dir", str(out), "--season", "2024-2025", "--competition", "الدوري", "--age", "U17"]
    )
    assert exit_code == 0
    assert requested == ["U17"]
    assert (out / "index.html").exists()
    page = (out / "2024-2025_الدوري_U17.html").read_text(encoding="utf-8")
    assert "Alpha" in page


def test_main_reports_missing_competition(tmp_path, monkeypatch, capsys) -> None:
    dataset = tmp_path / "league.json"
    dataset.write_text(json.dumps(LEAGUE, ensure_ascii=False), encoding="utf-8")
    monkeypatch.setattr(cli_main, "load_competition_matches", lambda *args, **kwargs: [])
    exit_code = main(["--dataset", str(dataset), "--output-dir", str(tmp_path), "--age", "U99"])
    assert exit_code == 0
    assert "competition not found" in capsys.readouterr().err


def test_main_renders_local_matches_file(tmp_path) -> None:
    matches = tmp_path / "cup.json"
    matches.write_text(json.dumps(MATCHES), encoding="utf-8")
    exit_code = main(["--matches", str(matches), "--output-dir", str(tmp_path / "out")])
    assert exit_code == 0
    page = (tmp_path / "out" / "cup.html").read_text(encoding="utf-8")
    assert "<title>cup</title>" in page


SECTORED_LEAGUE = {
    "seasons": [
        {
            "season": "2024-2025",
            "competitions": [
                {
                    "name": {"ar": "الدوري"},
                    "ages": [
                        {
                            "age": "U17",
                            "matchesurl": ["https://example.test/north.json", "https://example.test/south.json"],
                            "sector": ["North", "South"],
                        },
                    ],
                }
            ],
        }
    ],
    "venues": [
        {"venue_id": "v1", "name": "Cairo Stadium"},
        {"venue_id": "v2", "name": "Alex Field"},
    ],
}


def test_main_renders_single_sector(tmp_path, monkeypatch) -> None:
    dataset = tmp_path / "league.json"
    dataset.write_text(json.dumps(SECTORED_LEAGUE, ensure_ascii=False), encoding="utf-8")
    requested = []

    def fake_sector(competition, age_group, season, sector_name, sector_url, **kwargs):
        requested.append((sector_name, sector_url))
        return parse_matches_payload(MATCHES, sector=sector_name)

    monkeypatch.setattr(cli_main, "load_sector_matches", fake_sector)
    out = tmp_path / "site"
    exit_code = main(["--dataset", str(dataset), "--output-dir", str(out), "--age", "U17", "--season", "2024-2025", "--competition", "الدوري", "--sector", "South"])
    assert exit_code == 0
    assert requested == [("South", "https://example.test/south.json")]
    page = (out / "2024-2025_الدوري_U17-South.html").read_text(encoding="utf-8")
    assert "<title>الدوري - U17 South</title>" in page


def test_main_warns_about_unknown_sector(tmp_path, monkeypatch, capsys) -> None:
    dataset = tmp_path / "league.json"
    dataset.write_text(json.dumps(SECTORED_LEAGUE, ensure_ascii=False), encoding="utf-8")
    monkeypatch.setattr(cli_main, "load_sector_matches", lambda *args, **kwargs: [])
    exit_code = main(["--dataset", str(dataset), "--output-dir", str(tmp_path), "--sector", "East"])
    assert exit_code == 0
    assert "sector East not found" in capsys.readouterr().err


def test_main_filters_index_venues(tmp_path) -> None:
    dataset = tmp_path / "league.json"
    dataset.write_text(json.dumps(SECTORED_LEAGUE, ensure_ascii=False), encoding="utf-8")
    out = tmp_path / "site"
    exit_code = main(["--dataset", str(dataset), "--output-dir", str(out), "--venue", "cairo", "--age", "U99"])
    assert exit_code == 0
    index = (out / "index.html").read_text(encoding="utf-8")
    assert "Cairo Stadium" in index
    assert "Alex Field" not in index
