from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Mapping

from pyproj import Geod
from pyproj.exceptions import GeodError
from shapely.errors import ShapelyError
from shapely.geometry import mapping, shape
from shapely.ops import unary_union

# Exceptions shapely/pyproj raise for malformed GeoJSON coordinates.
GEOMETRY_ERRORS: tuple[type[BaseException], ...] = (
    ValueError,
    TypeError,
    IndexError,
    KeyError,
    AttributeError,
    ShapelyError,
    GeodError,
)

_GEOD = Geod(ellps="WGS84")
_UNSAFE_FILENAME_RE = re.compile(r"[^a-z0-9]", flags=re.IGNORECASE)


def _to_shape(obj: Mapping[str, Any]):
    geo_type = obj.get("type")
    if geo_type == "FeatureCollection":
        geoms = [
            shape(feat["geometry"])
            for feat in obj.get("features", [])
            if isinstance(feat, Mapping) and feat.get("geometry")
        ]
        if not geoms:
            raise ValueError("GeoJSON FeatureCollection has no geometries")
        return unary_union(geoms)
    if geo_type == "Feature":
        geometry = obj.get("geometry")
        if not geometry:
            raise ValueError("GeoJSON Feature has no geometry")
        return shape(geometry)
    if geo_type:
        return shape(obj)
    raise ValueError("Unsupported GeoJSON object")


def geodesic_area_m2(obj: Mapping[str, Any]) -> float:
    """Geodesic area on the WGS84 ellipsoid, in square meters.

    Accepts a GeoJSON geometry, Feature or FeatureCollection (features are
    unioned first). Non-areal geometries yield 0.
    """

    geom = _to_shape(obj)
    # Geod.geometry_area_perimeter returns a signed area (ring orientation).
    area_m2, _ = _GEOD.geometry_area_perimeter(geom)
    return abs(float(area_m2))


def geodesic_area_ha(obj: Mapping[str, Any]) -> float:
    return geodesic_area_m2(obj) / 10_000.0


def boundary_centroid(obj: Mapping[str, Any]) -> tuple[float, float]:
    """Return the (lon, lat) centroid of a boundary geometry."""

    centroid = _to_shape(obj).centroid
    if centroid.is_empty:
        raise ValueError("Boundary geometry is empty")
    return float(centroid.x), float(centroid.y)


def boundary_feature_collection(geometry: Mapping[str, Any]) -> dict[str, Any]:
    return {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "properties": {},
                "geometry": dict(geometry),
            }
        ],
    }


def boundary_upload_filename(farm_name: str, farm_id: str) -> str:
    safe_name = _UNSAFE_FILENAME_RE.sub("_", farm_name).lower()
    return f"{safe_name}-{farm_id}.geojson"


def load_boundary_geometry(path: Path) -> dict[str, Any]:
    """Load a boundary GeoJSON file as a single geometry mapping.

    A bare geometry is returned as-is; a Feature yields its geometry; a
    FeatureCollection yields the union of its features' geometries.
    """

    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, Mapping):
        raise ValueError("Unsupported boundary GeoJSON")
    geo_type = data.get("type")
    if geo_type == "Feature" and isinstance(data.get("geometry"), Mapping):
        return dict(data["geometry"])
    if geo_type not in ("Feature", "FeatureCollection") and "coordinates" in data:
        return dict(data)
    return dict(mapping(_to_shape(data)))
