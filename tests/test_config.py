from pathlib import Path

from la_jurisdictions.config import (
    DEFAULT_GEOCODER_URL,
    get_settings,
    reset_settings_cache,
    source_for,
)


def test_defaults(monkeypatch):
    for name in ("LAJ_FETCH_TIMEOUT", "LAJ_GEOCODER_URL", "LAJ_SEARCH_ZOOM", "LAJ_GEOCODE_CACHE"):
        monkeypatch.delenv(name, raising=False)
    reset_settings_cache()
    s = get_settings()
    assert s.fetch_timeout == 15.0
    assert s.geocoder_url == DEFAULT_GEOCODER_URL
    assert s.search_zoom == 14
    assert s.geocode_cache is True


def test_env_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("LAJ_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("LAJ_FETCH_TIMEOUT", "2.5")
    monkeypatch.setenv("LAJ_SEARCH_ZOOM", "16")
    monkeypatch.setenv("LAJ_GEOCODE_CACHE", "off")
    reset_settings_cache()
    s = get_settings()
    assert s.data_dir == tmp_path
    assert s.fetch_timeout == 2.5
    assert s.search_zoom == 16
    assert s.geocode_cache is False


def test_bad_numbers_fall_back_to_defaults(monkeypatch):
    monkeypatch.setenv("LAJ_FETCH_TIMEOUT", "soon")
    monkeypatch.setenv("LAJ_SEARCH_ZOOM", "")
    reset_settings_cache()
    s = get_settings()
    assert s.fetch_timeout == 15.0
    assert s.search_zoom == 14


def test_settings_are_cached_until_reset(monkeypatch):
    first = get_settings()
    monkeypatch.setenv("LAJ_SEARCH_ZOOM", "12")
    assert get_settings() is first
    reset_settings_cache()
    assert get_settings().search_zoom == 12


def test_source_for_joins_data_dir_and_passes_urls(fixture_data_dir):
    path = source_for("la_city_council_districts.geojson")
    assert Path(path) == fixture_data_dir / "la_city_council_districts.geojson"
    url = "https://example.org/layer.geojson"
    assert source_for(url) == url
