from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from la_jurisdictions.layers import DistrictLayer, LayerKind, layer_for_kind


BBox = Tuple[float, float, float, float]


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


@dataclass(frozen=True)
class DistrictFeature:
    """One district polygon tagged with the layer it was loaded from.

    ``kind`` is set at load time; formatting dispatches on it instead of on
    which attribute keys happen to be present.
    """

    kind: LayerKind
    index: int
    geometry: Dict[str, Any]
    properties: Dict[str, Any] = field(default_factory=dict)

    @property
    def layer(self) -> DistrictLayer:
        return layer_for_kind(self.kind)

    @property
    def feature_id(self) -> str:
        return f"{self.kind.value}:{self.index}"

    def attr(self, key: Optional[str]) -> str:
        if not key:
            return ""
        return _as_text(self.properties.get(key))

    @property
    def name(self) -> str:
        return self.attr(self.layer.schema.name_field)

    @property
    def district(self) -> str:
        return self.attr(self.layer.schema.district_field)

    @property
    def website(self) -> str:
        return self.attr(self.layer.schema.website_field)

    @property
    def representative(self) -> str:
        return self.attr(self.layer.schema.representative_field)

    @property
    def certified(self) -> Optional[str]:
        if self.kind is not LayerKind.NEIGHBORHOOD_COUNCIL:
            return None
        if self.properties.get("CERTIFIED") is None:
            return None
        return self.attr("CERTIFIED")

    def to_geojson_feature(self, extra: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        props = dict(self.properties)
        props["layer_kind"] = self.kind.value
        if extra:
            props.update(extra)
        return {
            "type": "Feature",
            "id": self.feature_id,
            "geometry": self.geometry,
            "properties": props,
        }


def _walk_coords(obj: Any) -> Iterable[Tuple[float, float]]:
    if isinstance(obj, (list, tuple)) and len(obj) >= 2 and all(
        isinstance(x, (int, float)) for x in obj
    ):
        yield float(obj[0]), float(obj[1])
        return
    if isinstance(obj, (list, tuple)):
        for it in obj:
            yield from _walk_coords(it)


def geometry_bbox(geometry: Dict[str, Any]) -> Optional[BBox]:
    coords = (geometry or {}).get("coordinates")
    if coords is None:
        return None
    xs: List[float] = []
    ys: List[float] = []
    for x, y in _walk_coords(coords):
        xs.append(x)
        ys.append(y)
    if not xs or not ys:
        return None
    return (min(xs), min(ys), max(xs), max(ys))


def features_from_collection(kind: LayerKind, raw: Any) -> List[DistrictFeature]:
    """Turn a parsed FeatureCollection into tagged features.

    Entries without a polygonal geometry are skipped. Attributes are kept
    as-is; missing keys surface later as empty text.
    """

    if not isinstance(raw, dict) or raw.get("type") != "FeatureCollection":
        raise ValueError("expected a GeoJSON FeatureCollection")
    feats = raw.get("features")
    if not isinstance(feats, list):
        raise ValueError("FeatureCollection has no features list")

    out: List[DistrictFeature] = []
    for feat in feats:
        if not isinstance(feat, dict):
            continue
        geom = feat.get("geometry")
        if not isinstance(geom, dict):
            continue
        if geom.get("type") not in ("Polygon", "MultiPolygon"):
            continue
        props = feat.get("properties") if isinstance(feat.get("properties"), dict) else {}
        out.append(
            DistrictFeature(kind=kind, index=len(out), geometry=geom, properties=dict(props))
        )
    return out
