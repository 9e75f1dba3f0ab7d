"""Package initializer for `la_jurisdictions`."""

from .geometry_store import GeometryStore
from .resolver import PointResolver, ResolveResult
from .session import MapSession

__all__ = ["GeometryStore", "MapSession", "PointResolver", "ResolveResult"]
