import random
import re

import pytest

from la_jurisdictions.layers import LayerKind, labels
from la_jurisdictions.styles import (
    HIGHLIGHT_COLOR,
    HIGHLIGHT_WEIGHT,
    StyleResolver,
    highlight,
    random_color,
)


HEX = re.compile(r"^#[0-9a-f]{6}$")


def test_stroke_settings_are_stable_per_layer():
    styles = StyleResolver()
    for label in labels():
        a = styles.style_for(label)
        b = styles.style_for(label)
        assert (a.color, a.weight, a.dash_array) == (b.color, b.weight, b.dash_array)


def test_palette_per_layer():
    styles = StyleResolver()
    nc = styles.style_for_kind(LayerKind.NEIGHBORHOOD_COUNCIL)
    cc = styles.style_for_kind(LayerKind.CITY_COUNCIL)
    sup = styles.style_for_kind(LayerKind.COUNTY_SUPERVISOR)
    assert (nc.color, nc.weight, nc.dash_array) == ("grey", 1, "3")
    assert (cc.color, cc.weight, cc.dash_array) == ("blue", 1, "3")
    assert (sup.color, sup.weight, sup.dash_array) == ("green", 1, "1")
    for kind in (LayerKind.ASSEMBLY, LayerKind.SENATE):
        style = styles.style_for_kind(kind)
        assert (style.color, style.dash_array) == ("green", "1")


def test_fill_color_is_zero_padded_hex():
    rng = random.Random(7)
    colors = [random_color(rng) for _ in range(500)]
    assert all(HEX.match(c) for c in colors)
    assert random_color(random.Random(0)).startswith("#")


def test_small_values_keep_six_digits():
    class Zero:
        def randint(self, a, b):
            return 0x0000AB

    assert random_color(Zero()) == "#0000ab"


def test_fill_color_varies_between_calls():
    styles = StyleResolver(rng=random.Random(1))
    fills = {styles.style_for("LA City Councils").fill_color for _ in range(20)}
    assert len(fills) > 1


def test_unknown_label_raises_key_error():
    with pytest.raises(KeyError):
        StyleResolver().style_for("Coastal Commission")


def test_to_leaflet_keys():
    style = StyleResolver(rng=random.Random(3)).style_for_kind(LayerKind.CITY_COUNCIL)
    out = style.to_leaflet()
    assert set(out) == {"color", "weight", "opacity", "dashArray", "fillOpacity", "fillColor"}
    assert out["fillOpacity"] == 0.7
    assert out["opacity"] == 1.0


def test_highlight_keeps_fill_and_changes_stroke():
    base = StyleResolver(rng=random.Random(5)).style_for_kind(LayerKind.NEIGHBORHOOD_COUNCIL)
    hot = highlight(base)
    assert hot.color == HIGHLIGHT_COLOR
    assert hot.weight == HIGHLIGHT_WEIGHT
    assert hot.dash_array == ""
    assert hot.fill_color == base.fill_color
    assert hot.bring_to_front is True
    assert base.bring_to_front is False


def test_style_function_returns_leaflet_dicts():
    fn = StyleResolver().style_function(LayerKind.SENATE)
    out = fn({"type": "Feature", "properties": {}})
    assert out["color"] == "green"
    assert HEX.match(out["fillColor"])
