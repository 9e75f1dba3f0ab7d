from __future__ import annotations

from functools import lru_cache

from la_jurisdictions.config import get_settings
from la_jurisdictions.geocoder import Geocoder, NominatimGeocoder
from la_jurisdictions.geometry_store import GeometryStore
from la_jurisdictions.resolver import PointResolver
from la_jurisdictions.search import SearchIntegration


@lru_cache(maxsize=1)
def get_store() -> GeometryStore:
    """Process-wide geometry store.

    Layers start out ``loading``; the web app schedules the loads on
    startup and the CLI loads them before answering.
    """

    return GeometryStore(settings=get_settings())


@lru_cache(maxsize=1)
def get_geocoder() -> Geocoder:
    return NominatimGeocoder.from_settings(get_settings())


def get_resolver() -> PointResolver:
    return PointResolver(get_store())


def get_search() -> SearchIntegration:
    return SearchIntegration(get_geocoder(), get_resolver())


def reset_registry() -> None:
    """Test helper: drop the cached store and geocoder."""

    get_store.cache_clear()
    get_geocoder.cache_clear()
