from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class LayerStatusOut(BaseModel):
    kind: str
    label: str
    state: str
    feature_count: int = 0
    error: Optional[str] = None


class LayersOut(BaseModel):
    default_layer: str
    layers: List[LayerStatusOut] = Field(default_factory=list)


class LayerResolutionOut(BaseModel):
    """One layer's answer for a point.

    ``status`` is one of found / not_found / loading / unavailable;
    ``properties`` is null unless found. ``html`` is the text for the
    layer's contacts region.
    """

    kind: str
    label: str
    status: str
    properties: Optional[Dict[str, Any]] = None
    html: str = ""


class ResolveOut(BaseModel):
    lat: float
    lon: float
    layers: List[LayerResolutionOut] = Field(default_factory=list)


class LocationOut(BaseModel):
    lat: float
    lon: float
    display_name: str = ""


class SearchOut(BaseModel):
    status: str
    query: str
    location: Optional[LocationOut] = None
    layers: List[LayerResolutionOut] = Field(default_factory=list)
    error: Optional[str] = None
