from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Protocol

import httpx

from la_jurisdictions.cache import TTLCache
from la_jurisdictions.config import Settings, get_settings


logger = logging.getLogger("laj.geocoder")


class GeocoderError(RuntimeError):
    """The geocoding service could not be reached or answered garbage."""


@dataclass(frozen=True)
class GeocodeResult:
    lat: float
    lon: float
    display_name: str = ""


class Geocoder(Protocol):
    def geocode(self, query: str, limit: int = 5) -> List[GeocodeResult]: ...


class NominatimGeocoder:
    """Free-text address search against an OpenStreetMap Nominatim endpoint.

    Results come back ranked by the service; callers use the first one.
    """

    def __init__(
        self,
        url: str,
        user_agent: str,
        timeout: float = 10.0,
        cache: Optional[TTLCache] = None,
        client: Optional[httpx.Client] = None,
    ):
        self.url = url
        self.user_agent = user_agent
        self.timeout = timeout
        self.cache = cache
        self._client = client

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "NominatimGeocoder":
        settings = settings or get_settings()
        return cls(
            url=settings.geocoder_url,
            user_agent=settings.user_agent,
            timeout=settings.fetch_timeout,
            cache=TTLCache() if settings.geocode_cache else None,
        )

    def _get(self, params: dict) -> httpx.Response:
        headers = {"User-Agent": self.user_agent, "Accept": "application/json"}
        if self._client is not None:
            return self._client.get(self.url, params=params, headers=headers, timeout=self.timeout)
        return httpx.get(
            self.url, params=params, headers=headers, timeout=self.timeout, follow_redirects=True
        )

    def geocode(self, query: str, limit: int = 5) -> List[GeocodeResult]:
        q = (query or "").strip()
        if not q:
            return []

        cache_key = ("geocode", self.url, q.lower(), int(limit))
        if self.cache is not None:
            cached = self.cache.get(cache_key)
            if cached is not None:
                return cached

        params = {"q": q, "format": "json", "limit": int(limit)}
        try:
            resp = self._get(params)
        except httpx.HTTPError as e:
            raise GeocoderError(f"geocoder request failed: {e}") from e
        if resp.status_code >= 400:
            raise GeocoderError(f"geocoder returned HTTP {resp.status_code}")
        try:
            payload = resp.json()
        except ValueError as e:
            raise GeocoderError("geocoder returned invalid JSON") from e
        if not isinstance(payload, list):
            raise GeocoderError("geocoder returned an unexpected payload")

        results: List[GeocodeResult] = []
        for row in payload:
            if not isinstance(row, dict):
                continue
            try:
                lat = float(row["lat"])
                lon = float(row["lon"])
            except (KeyError, TypeError, ValueError):
                continue
            if not (math.isfinite(lat) and math.isfinite(lon)):
                continue
            results.append(GeocodeResult(lat=lat, lon=lon, display_name=str(row.get("display_name") or "")))

        logger.info("geocoded query to %d result(s)", len(results))
        if self.cache is not None:
            self.cache.set(cache_key, results)
        return results
