import pytest
from pydantic import ValidationError

from gig_match.config import MatchSettings, get_settings


def test_defaults():
    s = MatchSettings()

    assert s.max_distance_km == 30
    assert s.max_results == 5
    assert s.oracle_max_candidates == 20
    assert s.oracle_url == "http://localhost:3000/api/match"
    assert s.excluded_bonus_locations == ["Colombia", "Ethiopia"]


def test_reads_prefixed_environment(monkeypatch):
    monkeypatch.setenv("MATCH_DIRECTORY_URL", "http://directory:9000")
    monkeypatch.setenv("MATCH_ORACLE_ENABLED", "false")
    monkeypatch.setenv("MATCH_ORACLE_BASE_URL", "http://oracle:3000/")
    monkeypatch.setenv("MATCH_ORACLE_TIMEOUT_SECONDS", "7.5")
    monkeypatch.setenv("MATCH_MAX_DISTANCE_KM", "12.5")
    monkeypatch.setenv("MATCH_EXCLUDED_BONUS_LOCATIONS", " Narnia , ,Atlantis")

    s = MatchSettings()

    assert s.directory_url == "http://directory:9000"
    assert s.oracle_enabled is False
    assert s.oracle_url == "http://oracle:3000/api/match"
    assert s.oracle_timeout_seconds == 7.5
    assert s.max_distance_km == 12.5
    assert s.excluded_bonus_locations == ["Narnia", "Atlantis"]


def test_unprefixed_variables_ignored(monkeypatch):
    monkeypatch.delenv("MATCH_MAX_RESULTS", raising=False)
    monkeypatch.setenv("MAX_RESULTS", "9")

    assert MatchSettings().max_results == 5


def test_explicit_values_win_over_environment(monkeypatch):
    monkeypatch.setenv("MATCH_MAX_RESULTS", "9")

    assert MatchSettings(max_results=3).max_results == 3


def test_rejects_non_positive_radius():
    with pytest.raises(ValidationError):
        MatchSettings(max_distance_km=0)


def test_rejects_bad_environment_value(monkeypatch):
    monkeypatch.setenv("MATCH_HTTP_TIMEOUT_SECONDS", "-1")

    with pytest.raises(ValidationError):
        MatchSettings()


def test_get_settings_is_cached():
    get_settings.cache_clear()
    try:
        assert get_settings() is get_settings()
    finally:
        get_settings.cache_clear()
