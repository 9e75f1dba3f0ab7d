from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from la_jurisdictions.events import (
    Event,
    FeatureClicked,
    FeatureHovered,
    FeatureUnhovered,
    LayerSwitched,
    SearchCompleted,
)
from la_jurisdictions.features import DistrictFeature, geometry_bbox
from la_jurisdictions.geometry_store import GeometryStore, LayerState
from la_jurisdictions.info_panel import ContactRegions, InfoPanel
from la_jurisdictions.layers import DistrictLayer, default_layer, get_layer
from la_jurisdictions.snippets import snippet_for
from la_jurisdictions.styles import LayerStyle, StyleResolver, highlight


logger = logging.getLogger("laj.session")

LA_CENTER = (33.988744, -118.255603)
DEFAULT_ZOOM = 10
SEARCH_ZOOM = 14


@dataclass
class MapView:
    lat: float = LA_CENTER[0]
    lon: float = LA_CENTER[1]
    zoom: int = DEFAULT_ZOOM
    # (min_lon, min_lat, max_lon, max_lat) after a fit-to-feature, else None.
    bounds: Optional[Tuple[float, float, float, float]] = None


@dataclass
class Popup:
    layer_label: str
    lat: float
    lon: float
    html: str


@dataclass
class HoverState:
    feature: DistrictFeature
    base_style: LayerStyle


class MapSession:
    """State for one map instance.

    Holds the active layer, the single hovered feature, the open popup,
    the info panel and the search result regions. Every mutation goes
    through ``dispatch`` so handlers can be exercised without a browser.
    """

    def __init__(
        self,
        store: Optional[GeometryStore] = None,
        styles: Optional[StyleResolver] = None,
        initial: Optional[DistrictLayer] = None,
        search_zoom: int = SEARCH_ZOOM,
    ):
        self.store = store
        self.styles = styles or StyleResolver()
        self._active = initial or default_layer()
        self.search_zoom = search_zoom
        self.view = MapView()
        self.hover: Optional[HoverState] = None
        self.popup: Optional[Popup] = None
        self.info = InfoPanel(header=self._active.label)
        self.contacts = ContactRegions()
        self.last_search: Optional[str] = None
        self._base_styles: Dict[str, LayerStyle] = {}
        self._current_styles: Dict[str, LayerStyle] = {}

    # ---------------------------------------------------------
    # Active layer
    # ---------------------------------------------------------

    def get_active(self) -> str:
        return self._active.label

    @property
    def active_layer(self) -> DistrictLayer:
        return self._active

    def set_active(self, label: str) -> bool:
        """Switch the active layer. Returns False when nothing changed."""

        layer = get_layer(label)
        if layer is None:
            logger.debug("ignoring switch to unknown layer %r", label)
            return False
        if layer is self._active:
            return False

        self.close_popup()
        self._clear_hover()
        self._active = layer
        self.info.set_header(layer.label)
        self._refresh_info_for_state()
        logger.debug("active layer is now %s", layer.label)
        return True

    def _refresh_info_for_state(self) -> None:
        if self.store is None:
            self.info.update(None)
            return
        state = self.store.get(self._active.kind).state
        if state is LayerState.LOADING:
            self.info.show_loading(self._active.label)
        elif state is LayerState.FAILED:
            self.info.show_unavailable(self._active.label)
        else:
            self.info.update(None)

    # ---------------------------------------------------------
    # Styling and hover
    # ---------------------------------------------------------

    def style_of(self, feature: DistrictFeature) -> LayerStyle:
        """Current style of a feature, assigning its base style on first use."""

        fid = feature.feature_id
        if fid not in self._base_styles:
            base = self.styles.style_for_kind(feature.kind)
            self._base_styles[fid] = base
            self._current_styles[fid] = base
        return self._current_styles[fid]

    def _clear_hover(self) -> None:
        if self.hover is None:
            return
        fid = self.hover.feature.feature_id
        self._current_styles[fid] = self.hover.base_style
        self.hover = None

    def highlight_feature(self, feature: DistrictFeature) -> None:
        if feature.kind is not self._active.kind:
            return
        self._clear_hover()
        base = self.style_of(feature)
        self.hover = HoverState(feature=feature, base_style=base)
        self._current_styles[feature.feature_id] = highlight(base)
        self.info.update(feature)

    def reset_highlight(self, feature: Optional[DistrictFeature] = None) -> None:
        """Undo the hover highlight; a stale mouse-out for another feature is ignored."""

        if self.hover is not None:
            if feature is not None and feature.feature_id != self.hover.feature.feature_id:
                return
            self._clear_hover()
        self.info.update(None)

    # ---------------------------------------------------------
    # Popups and view
    # ---------------------------------------------------------

    def open_popup(self, feature: DistrictFeature, lat: float, lon: float) -> Optional[Popup]:
        if feature.kind is not self._active.kind:
            return None
        self.popup = Popup(
            layer_label=self._active.label,
            lat=lat,
            lon=lon,
            html=snippet_for(feature),
        )
        return self.popup

    def close_popup(self) -> None:
        self.popup = None

    def zoom_to_feature(self, feature: DistrictFeature) -> None:
        bbox = geometry_bbox(feature.geometry)
        if bbox is None:
            return
        self.view.bounds = bbox
        self.view.lon = (bbox[0] + bbox[2]) / 2.0
        self.view.lat = (bbox[1] + bbox[3]) / 2.0

    def recenter(self, lat: float, lon: float, zoom: Optional[int] = None) -> None:
        self.view.lat = lat
        self.view.lon = lon
        self.view.zoom = self.search_zoom if zoom is None else zoom
        self.view.bounds = None

    # ---------------------------------------------------------
    # Dispatcher
    # ---------------------------------------------------------

    def dispatch(self, event: Event) -> None:
        if isinstance(event, LayerSwitched):
            self.set_active(event.label)
        elif isinstance(event, FeatureHovered):
            self.highlight_feature(event.feature)
        elif isinstance(event, FeatureUnhovered):
            self.reset_highlight(event.feature)
        elif isinstance(event, FeatureClicked):
            self.zoom_to_feature(event.feature)
            self.open_popup(event.feature, event.lat, event.lon)
        elif isinstance(event, SearchCompleted):
            self.recenter(event.lat, event.lon)
            self.last_search = event.display_name
            self.contacts.fill(event.result)
        else:
            raise TypeError(f"unsupported event: {event!r}")
