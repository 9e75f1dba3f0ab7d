from __future__ import annotations

import random
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Optional

from la_jurisdictions.layers import LayerKind, get_layer


@dataclass(frozen=True)
class LayerStyle:
    color: str
    weight: int
    dash_array: str
    fill_color: str
    opacity: float = 1.0
    fill_opacity: float = 0.7
    bring_to_front: bool = False

    def to_leaflet(self) -> Dict[str, Any]:
        return {
            "color": self.color,
            "weight": self.weight,
            "opacity": self.opacity,
            "dashArray": self.dash_array,
            "fillOpacity": self.fill_opacity,
            "fillColor": self.fill_color,
        }


# Stroke palette per jurisdiction type: (color, weight, dash).
PALETTE: Dict[LayerKind, tuple] = {
    LayerKind.NEIGHBORHOOD_COUNCIL: ("grey", 1, "3"),
    LayerKind.CITY_COUNCIL: ("blue", 1, "3"),
    LayerKind.COUNTY_SUPERVISOR: ("green", 1, "1"),
    LayerKind.ASSEMBLY: ("green", 1, "1"),
    LayerKind.SENATE: ("green", 1, "1"),
}

HIGHLIGHT_COLOR = "#666"
HIGHLIGHT_WEIGHT = 5


def random_color(rng: Optional[random.Random] = None) -> str:
    """Uniform pick from the full 24-bit RGB space, always ``#rrggbb``."""

    rng = rng or random
    return "#{:06x}".format(rng.randint(0, 0xFFFFFF))


class StyleResolver:
    """Maps a layer to its rendering style.

    Stroke settings are fixed per layer; the fill color is drawn again on
    every call, so it carries no meaning and differs between renders.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or random.Random()

    def style_for_kind(self, kind: LayerKind) -> LayerStyle:
        color, weight, dash = PALETTE[LayerKind(kind)]
        return LayerStyle(
            color=color,
            weight=weight,
            dash_array=dash,
            fill_color=random_color(self._rng),
        )

    def style_for(self, label: str) -> LayerStyle:
        layer = get_layer(label)
        if layer is None:
            raise KeyError(f"unknown layer: {label}")
        return self.style_for_kind(layer.kind)

    def style_function(self, kind: LayerKind) -> Callable[[Any], Dict[str, Any]]:
        """Leaflet-style callback; a fresh fill per feature."""

        return lambda _feature: self.style_for_kind(kind).to_leaflet()


def highlight(base: LayerStyle) -> LayerStyle:
    return replace(
        base,
        color=HIGHLIGHT_COLOR,
        weight=HIGHLIGHT_WEIGHT,
        dash_array="",
        fill_opacity=0.7,
        bring_to_front=True,
    )
