from __future__ import annotations

import asyncio
import json
import logging
import math
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import httpx
from shapely.geometry import Point
from shapely.geometry import shape as s_shape
from shapely.strtree import STRtree

from la_jurisdictions.config import Settings, get_settings, source_for
from la_jurisdictions.features import DistrictFeature, features_from_collection
from la_jurisdictions.layers import LAYERS, DistrictLayer, LayerKind, get_layer


logger = logging.getLogger("laj.store")


class LayerState(str, Enum):
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


class LayerLoadError(RuntimeError):
    """Raised when a layer's GeoJSON cannot be fetched or parsed."""


@dataclass(frozen=True)
class LayerStatus:
    kind: LayerKind
    label: str
    state: LayerState
    feature_count: int = 0
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "label": self.label,
            "state": self.state.value,
            "feature_count": self.feature_count,
            "error": self.error,
        }


class DistrictLayerStore:
    """Polygons of one jurisdiction layer plus an STRtree over them.

    The store starts out ``loading`` and holds no features until a load
    completes. Queries made before then simply find nothing; callers read
    ``state`` to tell that apart from a genuine miss.
    """

    def __init__(self, layer: DistrictLayer, source: str, timeout: float = 15.0, user_agent: str = ""):
        self.layer = layer
        self.source = source
        self.timeout = timeout
        self.user_agent = user_agent
        self.state = LayerState.LOADING
        self.error: Optional[str] = None
        self._features: List[DistrictFeature] = []
        self._geoms: List[Any] = []
        self._tree: Optional[STRtree] = None

    @property
    def kind(self) -> LayerKind:
        return self.layer.kind

    @property
    def features(self) -> List[DistrictFeature]:
        return list(self._features)

    def status(self) -> LayerStatus:
        return LayerStatus(
            kind=self.kind,
            label=self.layer.label,
            state=self.state,
            feature_count=len(self._features),
            error=self.error,
        )

    async def _fetch_text(self) -> str:
        if self.source.startswith(("http://", "https://")):
            headers = {"User-Agent": self.user_agent} if self.user_agent else {}
            async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
                resp = await client.get(self.source, headers=headers)
            if resp.status_code >= 400:
                raise LayerLoadError(f"HTTP {resp.status_code} for {self.source}")
            return resp.text
        path = Path(self.source)
        if not path.exists():
            raise LayerLoadError(f"no such file: {path}")
        return await asyncio.to_thread(path.read_text, encoding="utf-8")

    def populate(self, raw: Any) -> None:
        """Index a parsed FeatureCollection and mark the layer ready."""

        try:
            features = features_from_collection(self.kind, raw)
            geoms = [s_shape(f.geometry) for f in features]
        except (ValueError, TypeError, KeyError, AttributeError) as e:
            raise LayerLoadError(f"invalid GeoJSON for {self.layer.label}: {e}") from e

        self._features = features
        self._geoms = geoms
        self._tree = STRtree(geoms) if geoms else None
        self.state = LayerState.READY
        self.error = None

    def mark_failed(self, message: str) -> None:
        self._features = []
        self._geoms = []
        self._tree = None
        self.state = LayerState.FAILED
        self.error = message

    async def load(self) -> LayerStatus:
        """Fetch and index the layer, bounded by ``timeout`` seconds.

        Never raises for fetch or parse problems; they are recorded on the
        store as ``failed`` with the error message.
        """

        self.state = LayerState.LOADING
        self.error = None
        try:
            text = await asyncio.wait_for(self._fetch_text(), timeout=self.timeout)
            try:
                raw = json.loads(text)
            except json.JSONDecodeError as e:
                raise LayerLoadError(f"invalid JSON for {self.layer.label}: {e}") from e
            self.populate(raw)
        except asyncio.TimeoutError:
            self.mark_failed(f"timed out after {self.timeout:g}s")
        except UnicodeDecodeError as e:
            self.mark_failed(f"{self.layer.label} is not valid UTF-8: {e}")
        except (LayerLoadError, httpx.HTTPError, OSError, ValueError) as e:
            self.mark_failed(str(e))
        finally:
            # A finished attempt never leaves the layer "loading".
            if self.state is LayerState.LOADING:
                self.mark_failed(f"load of {self.layer.label} did not complete")

        status = self.status()
        if status.state is LayerState.FAILED:
            logger.warning("layer %s failed to load: %s", self.layer.label, status.error)
        else:
            logger.info("layer %s ready with %d features", self.layer.label, status.feature_count)
        return status

    def locate(self, lon: float, lat: float) -> Optional[DistrictFeature]:
        """First feature (in file order) whose polygon covers the point."""

        if self.state is not LayerState.READY or self._tree is None:
            return None
        pt = Point(lon, lat)
        candidates = self._tree.query(pt, predicate="intersects")
        if len(candidates) == 0:
            return None
        return self._features[int(min(candidates))]

    def locate_all(self, lon: float, lat: float) -> List[DistrictFeature]:
        if self.state is not LayerState.READY or self._tree is None:
            return []
        pt = Point(lon, lat)
        candidates = sorted(int(i) for i in self._tree.query(pt, predicate="intersects"))
        return [self._features[i] for i in candidates]


class GeometryStore:
    """The five layer stores, loaded concurrently and independently."""

    def __init__(self, layers: Iterable[DistrictLayer] = LAYERS, settings: Optional[Settings] = None):
        settings = settings or get_settings()
        self.settings = settings
        self._stores: Dict[LayerKind, DistrictLayerStore] = {}
        for layer in layers:
            self._stores[layer.kind] = DistrictLayerStore(
                layer,
                source=source_for(layer.file_name, settings),
                timeout=settings.fetch_timeout,
                user_agent=settings.user_agent,
            )
        self._tasks: List[asyncio.Task] = []

    def __iter__(self):
        return iter(self._stores.values())

    def __len__(self) -> int:
        return len(self._stores)

    def get(self, kind: LayerKind) -> DistrictLayerStore:
        return self._stores[LayerKind(kind)]

    def by_label(self, label: str) -> Optional[DistrictLayerStore]:
        layer = get_layer(label)
        if layer is None:
            return None
        return self._stores.get(layer.kind)

    def statuses(self) -> List[LayerStatus]:
        return [s.status() for s in self._stores.values()]

    def start_loading(self) -> List[asyncio.Task]:
        """Schedule every layer load on the running loop without waiting."""

        loop = asyncio.get_running_loop()
        self._tasks = [loop.create_task(s.load()) for s in self._stores.values()]
        for task in self._tasks:
            task.add_done_callback(_log_load_error)
        return list(self._tasks)

    async def load_all(self) -> List[LayerStatus]:
        results = await asyncio.gather(
            *(s.load() for s in self._stores.values()), return_exceptions=True
        )
        for err in results:
            if isinstance(err, BaseException):
                logger.error("layer load raised: %r", err)
        return self.statuses()

    def load_all_blocking(self) -> List[LayerStatus]:
        return asyncio.run(self.load_all())


def _log_load_error(task: asyncio.Task) -> None:
    if task.cancelled():
        return
    err = task.exception()
    if err is not None:
        logger.error("layer load raised: %r", err)


def check_coordinate(lat: float, lon: float) -> None:
    if not (math.isfinite(lat) and math.isfinite(lon)):
        raise ValueError("lat/lon must be finite numbers")
