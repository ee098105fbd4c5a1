"""tests for region tables, search domain loading and the default config factory."""

import json
from unittest.mock import patch

from langchain_openai import ChatOpenAI

from skitour_scout.config import (
    get_search_domains,
    domain_matches,
    get_region_locations,
    get_elevation_pairs,
    get_default_scout_config,
    get_fast_scout_config,
)


# ===== regions =====

def test_known_region_locations():
    tatry = get_region_locations("Tatry")
    assert "Kasprowy Wierch" in tatry
    assert tatry["Kasprowy Wierch"].altitude == 1987


def test_unknown_region_falls_back_to_beskid_slaski():
    assert get_region_locations("Alps") == get_region_locations("Beskid Śląski")
    assert get_elevation_pairs("Alps") == get_elevation_pairs("Beskid Śląski")


def test_elevation_pairs_have_valley_below_summit():
    for region in ("Tatry", "Beskid Śląski", "Beskid Żywiecki"):
        for pair in get_elevation_pairs(region):
            assert pair.valley.altitude < pair.summit.altitude


# ===== search domains =====

def test_bundled_search_domains_load():
    domains = get_search_domains()
    assert "topr.pl" in domains.trusted
    assert "booking.com" in domains.denied


def test_missing_file_fails_open(tmp_path):
    domains = get_search_domains(tmp_path / "nope.json")
    assert domains.trusted == [] and domains.denied == []


def test_broken_json_fails_open(tmp_path):
    path = tmp_path / "search_domains.json"
    path.write_text("{not json", encoding="utf-8")
    domains = get_search_domains(path)
    assert domains.trusted == [] and domains.denied == []


def test_unexpected_structure_fails_open(tmp_path):
    path = tmp_path / "search_domains.json"
    path.write_text(json.dumps(["a.com"]), encoding="utf-8")
    assert get_search_domains(path).trusted == []


def test_domain_matches_subdomains():
    assert domain_matches("forum.skitury.pl", ["skitury.pl"])
    assert domain_matches("SKITURY.PL", ["skitury.pl"])
    assert not domain_matches("notskitury.pl", ["skitury.pl"])


# ===== default config =====

def test_default_config_without_key_has_no_llm():
    with patch.dict("os.environ", {}, clear=True):
        config = get_default_scout_config()
    assert config.llm_config is None
    assert config.timeout_config.weather_timeout == 15.0
    assert config.timeout_config.health_check_timeout == 5.0


def test_default_config_with_key_builds_openrouter_model():
    with patch.dict("os.environ", {"OPENROUTER_API_KEY": "test-key"}):
        config = get_default_scout_config()
    assert config.llm_config is not None
    assert isinstance(config.llm_config.llm, ChatOpenAI)


def test_fast_config_uses_single_query():
    config = get_fast_scout_config()
    assert config.search_config.max_queries == 1
    assert config.llm_config is None
