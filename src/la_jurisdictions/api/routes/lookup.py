from __future__ import annotations

from typing import Iterable, List

from fastapi import APIRouter, HTTPException

from la_jurisdictions.api.schemas import LayerResolutionOut, LocationOut, ResolveOut, SearchOut
from la_jurisdictions.info_panel import render_resolution
from la_jurisdictions.registry import get_resolver, get_search
from la_jurisdictions.resolver import LayerResolution


router = APIRouter(tags=["lookup"])


def _layers_out(resolutions: Iterable[LayerResolution]) -> List[LayerResolutionOut]:
    return [
        LayerResolutionOut(
            kind=r.kind.value,
            label=r.label,
            status=r.status.value,
            properties=dict(r.feature.properties) if r.feature is not None else None,
            html=render_resolution(r),
        )
        for r in resolutions
    ]


@router.get("/resolve", response_model=ResolveOut)
def resolve(lat: float, lon: float):
    try:
        result = get_resolver().resolve(lat, lon)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return ResolveOut(lat=result.lat, lon=result.lon, layers=_layers_out(result))


@router.get("/search", response_model=SearchOut)
def search(q: str = ""):
    outcome = get_search().search(q)
    location = None
    if outcome.location is not None:
        location = LocationOut(
            lat=outcome.location.lat,
            lon=outcome.location.lon,
            display_name=outcome.location.display_name,
        )
    layers = _layers_out(outcome.result) if outcome.result is not None else []
    return SearchOut(
        status=outcome.status,
        query=outcome.query,
        location=location,
        layers=layers,
        error=outcome.error,
    )
