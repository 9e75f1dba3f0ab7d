"""Leaflet page composed with folium.

One GeoJson layer per jurisdiction, registered as base layers so the layer
switcher shows exactly one at a time. A small control keeps the info panel
header, popups and hover text in step with the active layer and tells the
user when the active layer is still loading or could not be loaded.

The address box recenters the map on the first geocoder hit. Served pages
ask the resolve endpoint for every layer; a static page resolves the hit
against the embedded polygons with leaflet-pip.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import folium
from branca.element import MacroElement
from folium.elements import JSCSSMixin
from folium.plugins import Geocoder
from jinja2 import Template

from la_jurisdictions.geometry_store import GeometryStore, LayerState
from la_jurisdictions.info_panel import (
    LOADING_TEXT,
    NOT_FOUND_TEXT,
    PLACEHOLDER,
    UNAVAILABLE_TEXT,
    region_id,
)
from la_jurisdictions.search import MIN_QUERY_LENGTH
from la_jurisdictions.session import MapSession
from la_jurisdictions.snippets import snippet_for
from la_jurisdictions.styles import highlight


logger = logging.getLogger("laj.map")

TILE_URL = "https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png"
TILE_ATTRIBUTION = '&copy; <a href="https://openstreetmap.org/copyright">OpenStreetMap contributors</a>'
EXTRA_ATTRIBUTION = 'Population data &copy; <a href="http://census.gov/">US Census Bureau</a>'
MAX_ZOOM = 18
LEAFLET_PIP_JS = "https://unpkg.com/@mapbox/leaflet-pip@1.1.0/leaflet-pip.js"
POLL_MS = 2000


class JurisdictionSync(MacroElement):
    """Info panel, contacts regions and per-layer load state for the page.

    ``entries`` holds one dict per layer: the folium ``layer``, its ``kind``
    value, ``label`` and load ``state``. With ``layers_url`` set, layers
    that were still loading when the page was rendered are fetched from
    ``<layers_url>/<kind>`` until they are ready or failed.
    """

    _template = Template(
        """
        {% macro html(this, kwargs) %}
        <div id="contacts" class="contacts">
        {% for entry in this.entries %}
          <div id="{{ entry.region }}" class="contacts-region">
            <h5>{{ entry.label }}</h5><div class="body"></div>
          </div>
        {% endfor %}
        </div>
        {% endmacro %}

        {% macro script(this, kwargs) %}
        var {{ this.get_name() }} = L.control({position: 'topright'});
        {{ this.get_name() }}._header = {{ this.header|tojson }};
        {{ this.get_name() }}._stateText = {{ this.state_text|tojson }};
        {{ this.get_name() }}.onAdd = function (map) {
            this._div = L.DomUtil.create('div', 'info');
            this.update();
            return this._div;
        };
        {{ this.get_name() }}.update = function (snippet) {
            this._div.innerHTML = '<h4>' + this._header + '</h4>' +
                (snippet || this._stateText[this._header] || {{ this.placeholder|tojson }});
        };
        {{ this.get_name() }}.addTo({{ this._parent.get_name() }});
        {{ this._parent.get_name() }}.attributionControl.addAttribution({{ this.extra_attribution|tojson }});

        {{ this._parent.get_name() }}.on('baselayerchange', function (e) {
            {{ this._parent.get_name() }}.closePopup();
            {{ this.get_name() }}._header = e.name;
            {{ this.get_name() }}.update();
        });

        {% for entry in this.entries %}
        {{ entry.layer.get_name() }}.on('mouseover', function (e) {
            {{ this.get_name() }}.update(e.layer.feature.properties.snippet);
        });
        {{ entry.layer.get_name() }}.on('mouseout', function (e) {
            {{ this.get_name() }}.update();
        });
        {% if this.layers_url and entry.state == 'loading' %}
        (function poll() {
            fetch({{ this.layers_url|tojson }} + '/' + {{ entry.kind|tojson }})
                .then(function (r) { return r.json(); })
                .then(function (data) {
                    var label = {{ entry.label|tojson }};
                    if (data.state === 'loading') {
                        setTimeout(poll, {{ this.poll_ms }});
                        return;
                    }
                    if (data.state === 'ready') {
                        {{ entry.layer.get_name() }}.addData(data);
                        {{ entry.layer.get_name() }}.setStyle(function (f) { return f.properties.style; });
                        {{ entry.layer.get_name() }}.eachLayer(function (l) {
                            if (!l.getPopup()) { l.bindPopup(l.feature.properties.snippet); }
                        });
                        delete {{ this.get_name() }}._stateText[label];
                    } else {
                        {{ this.get_name() }}._stateText[label] = {{ this.unavailable_text|tojson }}[label];
                    }
                    if ({{ this.get_name() }}._header === label) {
                        {{ this.get_name() }}.update();
                    }
                });
        })();
        {% endif %}
        {% endfor %}
        {% endmacro %}
        """
    )

    def __init__(
        self,
        header: str,
        entries: List[Dict[str, Any]],
        layers_url: Optional[str] = None,
        poll_ms: int = POLL_MS,
    ):
        super().__init__()
        self._name = "JurisdictionSync"
        self.header = header
        self.entries = entries
        self.layers_url = layers_url
        self.poll_ms = int(poll_ms)
        self.placeholder = PLACEHOLDER
        self.extra_attribution = EXTRA_ATTRIBUTION
        self.state_text = {
            e["label"]: _state_text(e["label"], e["state"])
            for e in entries
            if e["state"] != LayerState.READY.value
        }
        self.unavailable_text = {
            e["label"]: UNAVAILABLE_TEXT.format(label=e["label"]) for e in entries
        }


class AddressSearch(JSCSSMixin, MacroElement):
    """Nominatim search box that recenters the map on the first hit.

    With a ``resolve_url`` the hit is sent to the resolve endpoint. Without
    one, each layer is tested in the browser with leaflet-pip. Either way
    every layer's answer is written into its contacts region.
    """

    _template = Template(
        """
        {% macro script(this, kwargs) %}
        var {{ this.get_name() }} = L.Control.geocoder({
            collapsed: {{ this.collapsed|tojson }},
            position: {{ this.position|tojson }},
            placeholder: {{ this.placeholder|tojson }},
            suggestMinLength: {{ this.min_length }},
            defaultMarkGeocode: false,
            geocoder: L.Control.Geocoder.nominatim()
        }).on('markgeocode', function (e) {
            var c = e.geocode.center;
            {{ this._parent.get_name() }}.setView(c, {{ this.zoom }});
            L.marker(c).addTo({{ this._parent.get_name() }});
            {% if this.resolve_url %}
            fetch({{ this.resolve_url|tojson }} + '?lat=' + c.lat + '&lon=' + c.lng)
                .then(function (r) { return r.json(); })
                .then(function (data) {
                    data.layers.forEach(function (layer) {
                        var el = document.querySelector('#contacts_' + layer.kind + ' .body');
                        if (el) { el.innerHTML = layer.html; }
                    });
                });
            {% else %}
            {% for entry in this.entries %}
            (function () {
                var el = document.querySelector('#{{ entry.region }} .body');
                if (!el) { return; }
                var hits = leafletPip.pointInLayer(c, {{ entry.layer.get_name() }}, true);
                el.innerHTML = hits.length ? hits[0].feature.properties.snippet
                                           : {{ this.empty_text[entry.kind]|tojson }};
            })();
            {% endfor %}
            {% endif %}
        }).addTo({{ this._parent.get_name() }});
        {% endmacro %}
        """
    )

    default_js = list(Geocoder.default_js) + [("leaflet_pip_js", LEAFLET_PIP_JS)]
    default_css = Geocoder.default_css

    def __init__(
        self,
        entries: Optional[List[Dict[str, Any]]] = None,
        zoom: int = 14,
        resolve_url: Optional[str] = None,
        position: str = "topleft",
        collapsed: bool = False,
        placeholder: str = "Search for an address",
    ):
        super().__init__()
        self._name = "AddressSearch"
        self.entries = list(entries or [])
        self.zoom = zoom
        self.resolve_url = resolve_url
        self.position = position
        self.collapsed = collapsed
        self.placeholder = placeholder
        self.min_length = MIN_QUERY_LENGTH
        # What a region shows when the hit lies in none of the layer's polygons.
        self.empty_text = {
            e["kind"]: _state_text(e["label"], e["state"]) or NOT_FOUND_TEXT.format(label=e["label"])
            for e in self.entries
        }


def _state_text(label: str, state: str) -> str:
    if state == LayerState.LOADING.value:
        return LOADING_TEXT.format(label=label)
    if state == LayerState.FAILED.value:
        return UNAVAILABLE_TEXT.format(label=label)
    return ""


def _layer_collection(features) -> Dict[str, Any]:
    return {
        "type": "FeatureCollection",
        "features": [
            f.to_geojson_feature({"snippet": snippet_for(f)}) for f in features
        ],
    }


def build_map(
    session: MapSession,
    store: GeometryStore,
    resolve_url: Optional[str] = None,
    layers_url: Optional[str] = None,
) -> folium.Map:
    view = session.view
    m = folium.Map(
        location=[view.lat, view.lon],
        zoom_start=view.zoom,
        tiles=None,
        control_scale=True,
    )
    folium.TileLayer(
        tiles=TILE_URL,
        attr=TILE_ATTRIBUTION,
        name="OpenStreetMap",
        max_zoom=MAX_ZOOM,
        control=False,
    ).add_to(m)

    entries: List[Dict[str, Any]] = []
    active_kind = session.active_layer.kind

    for layer_store in store:
        layer = layer_store.layer
        features = layer_store.features
        base_styles = {f.feature_id: session.style_of(f) for f in features}
        fallback = session.styles.style_for_kind(layer.kind)

        def style_fn(feat, styles=base_styles, fallback=fallback):
            return styles.get(feat.get("id"), fallback).to_leaflet()

        def highlight_fn(feat, styles=base_styles, fallback=fallback):
            return highlight(styles.get(feat.get("id"), fallback)).to_leaflet()

        kwargs: Dict[str, Any] = {}
        if features:
            # folium validates callbacks and popup fields against the first
            # feature, so a layer that is loading or failed gets none.
            kwargs["style_function"] = style_fn
            kwargs["highlight_function"] = highlight_fn
            kwargs["popup"] = folium.GeoJsonPopup(fields=["snippet"], labels=False)

        gj = folium.GeoJson(
            _layer_collection(features),
            name=layer.label,
            overlay=False,
            show=layer.kind is active_kind,
            zoom_on_click=True,
            **kwargs,
        )
        gj.add_to(m)
        entries.append(
            {
                "layer": gj,
                "kind": layer.kind.value,
                "label": layer.label,
                "region": region_id(layer.kind),
                "state": layer_store.state.value,
            }
        )
        logger.debug(
            "added %s (%s) with %d features", layer.label, layer_store.state.value, len(features)
        )

    folium.LayerControl(collapsed=False).add_to(m)

    AddressSearch(entries=entries, zoom=session.search_zoom, resolve_url=resolve_url).add_to(m)

    JurisdictionSync(
        header=session.get_active(),
        entries=entries,
        layers_url=layers_url,
    ).add_to(m)
    return m


def render_html(
    session: MapSession,
    store: GeometryStore,
    resolve_url: Optional[str] = None,
    layers_url: Optional[str] = None,
) -> str:
    return build_map(session, store, resolve_url=resolve_url, layers_url=layers_url).get_root().render()
