from __future__ import annotations

from fastapi import APIRouter, HTTPException

from la_jurisdictions.api.schemas import LayersOut, LayerStatusOut
from la_jurisdictions.layers import default_layer, parse_kind
from la_jurisdictions.registry import get_store
from la_jurisdictions.snippets import snippet_for
from la_jurisdictions.styles import StyleResolver


router = APIRouter(tags=["layers"])

_styles = StyleResolver()


@router.get("/layers", response_model=LayersOut)
def list_layers():
    store = get_store()
    return LayersOut(
        default_layer=default_layer().label,
        layers=[LayerStatusOut(**s.to_dict()) for s in store.statuses()],
    )


@router.get("/layers/{kind}")
def layer_geojson(kind: str):
    """Return one layer as a GeoJSON FeatureCollection.

    Each feature carries ``layer_kind``, a freshly drawn ``style`` and the
    rendered ``snippet``. The collection's ``state`` says whether the layer
    is still loading or failed, so an empty list is never ambiguous.
    """

    layer_kind = parse_kind(kind)
    if layer_kind is None:
        raise HTTPException(status_code=404, detail=f"unknown layer: {kind}")

    layer_store = get_store().get(layer_kind)
    status = layer_store.status()
    features = [
        f.to_geojson_feature(
            {
                "style": _styles.style_for_kind(f.kind).to_leaflet(),
                "snippet": snippet_for(f),
            }
        )
        for f in layer_store.features
    ]
    return {
        "type": "FeatureCollection",
        "label": status.label,
        "state": status.state.value,
        "error": status.error,
        "features": features,
    }
