"""UI events consumed by ``MapSession.dispatch``."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from la_jurisdictions.features import DistrictFeature
from la_jurisdictions.resolver import ResolveResult


@dataclass(frozen=True)
class LayerSwitched:
    label: str


@dataclass(frozen=True)
class FeatureHovered:
    feature: DistrictFeature


@dataclass(frozen=True)
class FeatureUnhovered:
    feature: DistrictFeature


@dataclass(frozen=True)
class FeatureClicked:
    feature: DistrictFeature
    lat: float
    lon: float


@dataclass(frozen=True)
class SearchCompleted:
    lat: float
    lon: float
    result: ResolveResult
    display_name: Optional[str] = None


Event = Union[LayerSwitched, FeatureHovered, FeatureUnhovered, FeatureClicked, SearchCompleted]
