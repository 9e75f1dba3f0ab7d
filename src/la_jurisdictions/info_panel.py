from __future__ import annotations

import html
from typing import Dict, Optional

from la_jurisdictions.features import DistrictFeature
from la_jurisdictions.layers import LAYERS, LayerKind, layer_for_kind
from la_jurisdictions.resolver import LayerResolution, ResolutionStatus, ResolveResult
from la_jurisdictions.snippets import snippet_for


PLACEHOLDER = "Hover over a district"
LOADING_TEXT = "{label} are still loading"
UNAVAILABLE_TEXT = "{label} could not be loaded"
NOT_FOUND_TEXT = "Not within any of the {label}"


class InfoPanel:
    """The shared hover panel: a header naming the active layer over either
    the hovered district's snippet or a placeholder prompt."""

    def __init__(self, header: str):
        self.header = header
        self.body = PLACEHOLDER

    @property
    def html(self) -> str:
        return f"<h4>{html.escape(self.header)}</h4>{self.body}"

    def set_header(self, label: str) -> None:
        self.header = label

    def update(self, feature: Optional[DistrictFeature] = None) -> None:
        if feature is None:
            self.body = PLACEHOLDER
            return
        self.body = snippet_for(feature)

    def show_loading(self, label: str) -> None:
        self.body = LOADING_TEXT.format(label=html.escape(label))

    def show_unavailable(self, label: str) -> None:
        self.body = UNAVAILABLE_TEXT.format(label=html.escape(label))


def region_id(kind: LayerKind) -> str:
    return f"contacts_{kind.value}"


def render_resolution(res: LayerResolution) -> str:
    label = html.escape(res.label)
    if res.status is ResolutionStatus.FOUND and res.feature is not None:
        return snippet_for(res.feature)
    if res.status is ResolutionStatus.LOADING:
        return LOADING_TEXT.format(label=label)
    if res.status is ResolutionStatus.UNAVAILABLE:
        return UNAVAILABLE_TEXT.format(label=label)
    return NOT_FOUND_TEXT.format(label=label)


class ContactRegions:
    """One display region per layer, filled from an address search."""

    def __init__(self):
        self.regions: Dict[str, str] = {region_id(layer.kind): "" for layer in LAYERS}

    def clear(self) -> None:
        for key in self.regions:
            self.regions[key] = ""

    def fill(self, result: ResolveResult) -> None:
        for res in result:
            self.regions[region_id(res.kind)] = render_resolution(res)

    def get(self, kind: LayerKind) -> str:
        return self.regions[region_id(LayerKind(kind))]

    def heading(self, kind: LayerKind) -> str:
        return layer_for_kind(kind).label
