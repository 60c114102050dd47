from __future__ import annotations

from pathlib import Path

import pytest

from youth_scores.config import AppConfig, load_config
from youth_scores.data import CONFIG_URL


def test_load_config_reads_all_sections(tmp_path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text(
        """
source:
  config_url: https://mirror.test/config
  retries: 5
  delay_seconds: 0.5
output:
  directory: public
  index_name: home.html
competitions:
  - season: "2024-2025"
    competition: دوري الناشئين
    age: U15
    title: Youth U15
  - season: "2024-2025"
    competition: missing age
  - just a string
""",
        encoding="utf-8",
    )
    config = load_config(path)
    assert config.source.config_url == "https://mirror.test/config"
    assert config.source.retries == 5
    assert config.source.delay_seconds == 0.5
    assert config.output.directory == Path("public")
    assert config.output.index_name == "home.html"
    assert len(config.competitions) == 1
    selector = config.competitions[0]
    assert (selector.season, selector.competition, selector.age, selector.title) == (
        "2024-2025",
        "دوري الناشئين",
        "U15",
        "Youth U15",
    )


def test_invalid_numbers_fall_back_to_defaults() -> None:
    config = AppConfig.from_mapping({"source": {"retries": "many", "delay_seconds": -1}})
    assert config.source.retries == 3
    assert config.source.delay_seconds == 2.0
    assert config.source.config_url == CONFIG_URL


def test_empty_file_gives_defaults(tmp_path) -> None:
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    config = load_config(path)
    assert config.output.directory == Path("docs")
    assert config.competitions == ()


def test_non_mapping_root_is_rejected(tmp_path) -> None:
    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(path)
