"""Point-in-polygon resolution across all district layers."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple

from la_jurisdictions.features import DistrictFeature
from la_jurisdictions.geometry_store import GeometryStore, LayerState, check_coordinate
from la_jurisdictions.layers import LayerKind


logger = logging.getLogger("laj.resolver")


class ResolutionStatus(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    LOADING = "loading"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class LayerResolution:
    kind: LayerKind
    label: str
    status: ResolutionStatus
    feature: Optional[DistrictFeature] = None

    @property
    def found(self) -> bool:
        return self.status is ResolutionStatus.FOUND


@dataclass(frozen=True)
class ResolveResult:
    lat: float
    lon: float
    layers: Tuple[LayerResolution, ...]

    def __iter__(self) -> Iterator[LayerResolution]:
        return iter(self.layers)

    def __getitem__(self, label: str) -> LayerResolution:
        for res in self.layers:
            if res.label == label:
                return res
        raise KeyError(label)

    def for_kind(self, kind: LayerKind) -> LayerResolution:
        for res in self.layers:
            if res.kind is kind:
                return res
        raise KeyError(kind)

    def found(self) -> Dict[str, DistrictFeature]:
        return {r.label: r.feature for r in self.layers if r.found and r.feature is not None}

    def labels_found(self) -> List[str]:
        return [r.label for r in self.layers if r.found]


class PointResolver:
    """Answers "which district of each layer contains this point?".

    Each layer is checked on its own. A layer still loading or whose load
    failed reports that state rather than raising or waiting.
    """

    def __init__(self, store: GeometryStore):
        self.store = store

    def resolve(self, lat: float, lon: float) -> ResolveResult:
        lat = float(lat)
        lon = float(lon)
        check_coordinate(lat, lon)

        out: List[LayerResolution] = []
        for layer_store in self.store:
            label = layer_store.layer.label
            if layer_store.state is LayerState.LOADING:
                out.append(LayerResolution(layer_store.kind, label, ResolutionStatus.LOADING))
                continue
            if layer_store.state is LayerState.FAILED:
                out.append(LayerResolution(layer_store.kind, label, ResolutionStatus.UNAVAILABLE))
                continue
            feature = layer_store.locate(lon, lat)
            if feature is None:
                out.append(LayerResolution(layer_store.kind, label, ResolutionStatus.NOT_FOUND))
            else:
                out.append(
                    LayerResolution(layer_store.kind, label, ResolutionStatus.FOUND, feature)
                )

        logger.debug(
            "resolved (%.6f, %.6f): %s",
            lat,
            lon,
            ", ".join(f"{r.kind.value}={r.status.value}" for r in out),
        )
        return ResolveResult(lat=lat, lon=lon, layers=tuple(out))
