from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional


DEFAULT_GEOCODER_URL = "https://nominatim.openstreetmap.org/search"
DEFAULT_USER_AGENT = "LAJurisdictionsMap/0.1 (+https://github.com/la-jurisdictions)"


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    v = str(raw).strip().lower()
    if v in {"1", "true", "t", "yes", "y", "on"}:
        return True
    if v in {"0", "false", "f", "no", "n", "off"}:
        return False
    return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not str(raw).strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not str(raw).strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _default_data_dir() -> Path:
    env = os.getenv("LAJ_DATA_DIR")
    if env:
        return Path(env)

    repo_root = Path(__file__).resolve().parents[2]
    data_dir = repo_root / "data" / "districts"
    if data_dir.exists():
        return data_dir

    # Dev/test fallback.
    return repo_root / "tests" / "fixtures" / "districts"


@dataclass(frozen=True)
class Settings:
    """Runtime settings read from the environment.

    Defaults reproduce the public deployment: OpenStreetMap tiles,
    Nominatim geocoding and the district GeoJSON files under ``data_dir``.
    """

    data_dir: Path
    fetch_timeout: float
    geocoder_url: str
    user_agent: str
    search_zoom: int
    geocode_cache: bool

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            data_dir=_default_data_dir(),
            fetch_timeout=_env_float("LAJ_FETCH_TIMEOUT", 15.0),
            geocoder_url=os.getenv("LAJ_GEOCODER_URL") or DEFAULT_GEOCODER_URL,
            user_agent=os.getenv("LAJ_HTTP_USER_AGENT") or DEFAULT_USER_AGENT,
            search_zoom=_env_int("LAJ_SEARCH_ZOOM", 14),
            geocode_cache=_env_bool("LAJ_GEOCODE_CACHE", True),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()


def reset_settings_cache() -> None:
    """Test helper to force env re-read."""

    get_settings.cache_clear()


def source_for(file_name: str, settings: Optional[Settings] = None) -> str:
    """Resolve a layer's source file name against the configured data dir.

    Absolute URLs are returned unchanged.
    """

    if file_name.startswith(("http://", "https://")):
        return file_name
    settings = settings or get_settings()
    return str(settings.data_dir / file_name)
