from __future__ import annotations

import json
from pathlib import Path

import pytest
from pyproj import Geod

from farm_eligibility.geo import (
    boundary_centroid,
    boundary_feature_collection,
    boundary_upload_filename,
    geodesic_area_ha,
    geodesic_area_m2,
    load_boundary_geometry,
)

SQUARE = {
    "type": "Polygon",
    "coordinates": [[[24.0, 59.0], [24.02, 59.0], [24.02, 59.02], [24.0, 59.02], [24.0, 59.0]]],
}


def _expected_square_m2() -> float:
    geod = Geod(ellps="WGS84")
    area, _ = geod.polygon_area_perimeter([24.0, 24.02, 24.02, 24.0], [59.0, 59.0, 59.02, 59.02])
    return abs(area)


def test_geodesic_area_matches_pyproj() -> None:
    assert geodesic_area_m2(SQUARE) == pytest.approx(_expected_square_m2())
    assert geodesic_area_ha(SQUARE) == pytest.approx(_expected_square_m2() / 10_000.0)


def test_geodesic_area_ignores_ring_orientation() -> None:
    clockwise = {"type": "Polygon", "coordinates": [list(reversed(SQUARE["coordinates"][0]))]}

    assert geodesic_area_m2(clockwise) == pytest.approx(geodesic_area_m2(SQUARE))


def test_geodesic_area_accepts_feature_and_collection() -> None:
    feature = {"type": "Feature", "properties": {}, "geometry": SQUARE}

    assert geodesic_area_ha(feature) == pytest.approx(geodesic_area_ha(SQUARE))
    assert geodesic_area_ha(boundary_feature_collection(SQUARE)) == pytest.approx(geodesic_area_ha(SQUARE))


def test_point_has_zero_area() -> None:
    assert geodesic_area_m2({"type": "Point", "coordinates": [1.0, 2.0]}) == 0.0


def test_unsupported_geojson_raises() -> None:
    with pytest.raises(ValueError):
        geodesic_area_m2({"coordinates": []})
    with pytest.raises(ValueError):
        geodesic_area_m2({"type": "FeatureCollection", "features": []})


def test_boundary_centroid() -> None:
    lon, lat = boundary_centroid(SQUARE)

    assert lon == pytest.approx(24.01)
    assert lat == pytest.approx(59.01)


def test_boundary_feature_collection_has_single_feature() -> None:
    fc = boundary_feature_collection(SQUARE)

    assert fc["type"] == "FeatureCollection"
    assert fc["features"] == [{"type": "Feature", "properties": {}, "geometry": SQUARE}]


def test_boundary_upload_filename_is_sanitized() -> None:
    assert boundary_upload_filename("La Estancia #2", "f-1") == "la_estancia__2-f-1.geojson"
    assert boundary_upload_filename("Campo Ñandú", "7") == "campo__and_-7.geojson"


def test_load_boundary_geometry(tmp_path: Path) -> None:
    as_geometry = tmp_path / "geometry.geojson"
    as_feature = tmp_path / "feature.geojson"
    as_collection = tmp_path / "collection.geojson"
    as_geometry.write_text(json.dumps(SQUARE), encoding="utf-8")
    as_feature.write_text(json.dumps({"type": "Feature", "geometry": SQUARE}), encoding="utf-8")
    as_collection.write_text(json.dumps(boundary_feature_collection(SQUARE)), encoding="utf-8")

    assert load_boundary_geometry(as_geometry) == SQUARE
    assert load_boundary_geometry(as_feature) == SQUARE
    loaded = load_boundary_geometry(as_collection)
    assert loaded["type"] == "Polygon"
    assert geodesic_area_m2(loaded) == pytest.approx(geodesic_area_m2(SQUARE))
