from __future__ import annotations

import logging
from typing import Any

from pyproj import Geod

from farm_eligibility.eligibility import (
    Category,
    GeographicFeature,
    parse_deforestation_year,
    parse_feature_collection,
    resolve_category_area,
)


def _square(lon: float, lat: float, size_deg: float) -> dict[str, Any]:
    return {
        "type": "Polygon",
        "coordinates": [
            [
                [lon, lat],
                [lon + size_deg, lat],
                [lon + size_deg, lat + size_deg],
                [lon, lat + size_deg],
                [lon, lat],
            ]
        ],
    }


def _feature(index: int, name: str | None, **kwargs: Any) -> GeographicFeature:
    return GeographicFeature(index=index, name=name, geometry=kwargs.pop("geometry", None), **kwargs)


def _square_area_ha(lon: float, lat: float, size_deg: float) -> float:
    geod = Geod(ellps="WGS84")
    lons = [lon, lon + size_deg, lon + size_deg, lon]
    lats = [lat, lat, lat + size_deg, lat + size_deg]
    area, _ = geod.polygon_area_perimeter(lons, lats)
    return abs(area) / 10_000.0


def test_area_property_is_authoritative_and_geometry_ignored() -> None:
    features = [
        _feature(0, "ForestUnion", area_ha=10.5, geometry=_square(0.0, 0.0, 1.0)),
        _feature(1, "forestunion_part2", area_ha=4.5),
        _feature(2, "WetlandsUnion", area_ha=100.0),
    ]

    result = resolve_category_area(features, "forestunion")

    assert result.area_ha == 15.0
    assert result.years == ()
    assert result.diagnostics == ()


def test_zero_area_property_is_used_as_is() -> None:
    features = [_feature(0, "eligibleAreaFeature", area_ha=0.0, geometry=_square(0.0, 0.0, 0.01))]

    assert resolve_category_area(features, Category.ELIGIBLE_AREA).area_ha == 0.0


def test_geometry_fallback_uses_geodesic_area() -> None:
    features = [_feature(0, "eligibleareafeature", geometry=_square(-58.0, -34.0, 0.01))]

    result = resolve_category_area(features, Category.ELIGIBLE_AREA)

    expected = _square_area_ha(-58.0, -34.0, 0.01)
    assert abs(result.area_ha - expected) < 1e-6
    assert result.area_ha > 100.0


def test_negative_area_property_falls_back_to_geometry() -> None:
    features = [_feature(0, "forestunion", area_ha=-1.0, geometry=_square(10.0, 10.0, 0.01))]

    result = resolve_category_area(features, Category.FOREST)

    assert abs(result.area_ha - _square_area_ha(10.0, 10.0, 0.01)) < 1e-6


def test_degenerate_geometry_contributes_zero_with_diagnostic(caplog) -> None:
    degenerate = {
        "type": "Polygon",
        "coordinates": [[[1.0, 1.0], [1.0, 1.0], [1.0, 1.0], [1.0, 1.0]]],
    }
    features = [
        _feature(0, "wetlandsunion", geometry=degenerate),
        _feature(1, "wetlandsunion", area_ha=2.0),
    ]

    with caplog.at_level(logging.WARNING):
        result = resolve_category_area(features, Category.WETLANDS)

    assert result.area_ha == 2.0
    assert len(result.diagnostics) == 1
    assert result.diagnostics[0].feature_index == 0
    assert result.diagnostics[0].category == "wetlandsunion"
    assert "zero or negative" in caplog.text


def test_missing_area_and_geometry_contributes_zero() -> None:
    features = [_feature(0, "forestunion")]

    result = resolve_category_area(features, Category.FOREST)

    assert result.area_ha == 0.0
    assert "No area_ha property and no geometry" in result.diagnostics[0].message


def test_malformed_geometry_does_not_abort_scan() -> None:
    broken = {"type": "Polygon", "coordinates": [[["a", "b"]]]}
    features = [
        _feature(0, "forestunion", geometry=broken),
        _feature(1, "forestunion", area_ha=3.0),
    ]

    result = resolve_category_area(features, Category.FOREST)

    assert result.area_ha == 3.0
    assert result.diagnostics[0].message.startswith("Area calculation failed")


def test_category_matching_is_case_insensitive_substring() -> None:
    features = [
        _feature(0, "Deforestedareas_2020", area_ha=1.0),
        _feature(1, "DEFORESTEDAREAS", area_ha=2.0),
        _feature(2, "deforested", area_ha=50.0),
        _feature(3, None, area_ha=70.0),
        _feature(4, "", area_ha=80.0),
    ]

    assert resolve_category_area(features, "DeforestedAreas").area_ha == 3.0


def test_deforestation_years_are_normalized_sorted_and_distinct() -> None:
    features = [
        _feature(0, "deforestedareas", area_ha=1.0, year=19),
        _feature(1, "deforestedareas", area_ha=1.0, year="2015"),
        _feature(2, "deforestedareas", area_ha=1.0, year="abc"),
        _feature(3, "deforestedareas", area_ha=1.0, year=2019),
        _feature(4, "deforestedareas", area_ha=1.0, year=" 21 "),
        _feature(5, "deforestedareas", area_ha=1.0),
    ]

    result = resolve_category_area(features, Category.DEFORESTATION)

    assert result.years == (2015, 2019, 2021)
    assert result.area_ha == 6.0
    assert [d.feature_index for d in result.diagnostics] == [2]


def test_years_only_collected_for_deforestation() -> None:
    features = [_feature(0, "forestunion", area_ha=1.0, year=2018)]

    assert resolve_category_area(features, Category.FOREST).years == ()


def test_parse_deforestation_year_rules() -> None:
    assert parse_deforestation_year(19) == 2019
    assert parse_deforestation_year(99) == 2099
    assert parse_deforestation_year("2015") == 2015
    assert parse_deforestation_year("07") == 2007
    assert parse_deforestation_year(2020.0) == 2020
    assert parse_deforestation_year("") is None
    assert parse_deforestation_year("   ") is None
    assert parse_deforestation_year("abc") is None
    assert parse_deforestation_year(float("nan")) is None
    assert parse_deforestation_year(True) is None
    assert parse_deforestation_year(None) is None


def test_resolve_is_idempotent_over_parsed_collection() -> None:
    collection = parse_feature_collection(
        {
            "type": "FeatureCollection",
            "features": [
                {
                    "type": "Feature",
                    "properties": {"name": "deforestedareas", "year": 20},
                    "geometry": _square(-60.0, -30.0, 0.005),
                },
                {
                    "type": "Feature",
                    "properties": {"name": "deforestedareas", "area_ha": 1.25, "year": "2018"},
                    "geometry": None,
                },
            ],
        }
    )
    assert collection is not None

    first = resolve_category_area(collection.features, Category.DEFORESTATION)
    second = resolve_category_area(collection.features, Category.DEFORESTATION)

    assert first == second
    assert first.years == (2018, 2020)
