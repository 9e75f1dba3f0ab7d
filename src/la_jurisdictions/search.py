from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from la_jurisdictions.events import SearchCompleted
from la_jurisdictions.geocoder import Geocoder, GeocodeResult, GeocoderError
from la_jurisdictions.resolver import PointResolver, ResolveResult
from la_jurisdictions.session import MapSession


logger = logging.getLogger("laj.search")

MIN_QUERY_LENGTH = 4


@dataclass(frozen=True)
class SearchOutcome:
    status: str
    query: str
    location: Optional[GeocodeResult] = None
    result: Optional[ResolveResult] = None
    error: Optional[str] = None

    def to_dict(self) -> dict:
        out = {
            "status": self.status,
            "query": self.query,
            "location": None,
            "layers": [],
            "error": self.error,
        }
        if self.location is not None:
            out["location"] = {
                "lat": self.location.lat,
                "lon": self.location.lon,
                "display_name": self.location.display_name,
            }
        if self.result is not None:
            out["layers"] = [
                {
                    "kind": r.kind.value,
                    "label": r.label,
                    "status": r.status.value,
                    "properties": dict(r.feature.properties) if r.feature else None,
                }
                for r in self.result
            ]
        return out


class SearchIntegration:
    """Address box -> geocoder -> recenter -> resolve all layers.

    The first ranked geocoder hit is used. No hit, a too-short query or a
    geocoder failure leaves the session untouched.
    """

    def __init__(self, geocoder: Geocoder, resolver: PointResolver):
        self.geocoder = geocoder
        self.resolver = resolver

    def search(self, query: str, session: Optional[MapSession] = None) -> SearchOutcome:
        q = (query or "").strip()
        if len(q) < MIN_QUERY_LENGTH:
            return SearchOutcome(status="too_short", query=q)

        try:
            hits = self.geocoder.geocode(q)
        except GeocoderError as e:
            logger.warning("geocoder failed: %s", e)
            return SearchOutcome(status="geocoder_error", query=q, error=str(e))

        if not hits:
            logger.info("no geocoder results")
            return SearchOutcome(status="no_results", query=q)

        hit = hits[0]
        try:
            result = self.resolver.resolve(hit.lat, hit.lon)
        except ValueError as e:
            logger.warning("geocoder returned an unusable location: %s", e)
            return SearchOutcome(status="geocoder_error", query=q, error=str(e))
        if session is not None:
            session.dispatch(
                SearchCompleted(
                    lat=hit.lat,
                    lon=hit.lon,
                    result=result,
                    display_name=hit.display_name,
                )
            )
        return SearchOutcome(status="found", query=q, location=hit, result=result)
