from __future__ import annotations

import logging
import math
from typing import Any, Iterable

from farm_eligibility.geo.area import GEOMETRY_ERRORS, geodesic_area_ha

from .formatting import parse_leading_int
from .types import Category, CategoryAreaResult, FeatureDiagnostic, GeographicFeature

LOGGER = logging.getLogger(__name__)


def parse_deforestation_year(value: Any) -> int | None:
    """Parse the `year` of a deforestation feature.

    Two-digit (any value below 100) years are shifted into the 2000s. This is
    not the same rule as the report formatter's 50-year pivot.
    """

    parsed: int | None = None
    if isinstance(value, bool):
        parsed = None
    elif isinstance(value, (int, float)):
        if math.isfinite(value):
            parsed = int(value)
    elif isinstance(value, str) and value.strip():
        parsed = parse_leading_int(value)

    if parsed is None:
        return None
    if parsed < 100:
        parsed += 2000
    return parsed


def _feature_area_ha(
    feature: GeographicFeature,
    category_key: str,
    diagnostics: list[FeatureDiagnostic],
) -> float:
    def warn(message: str) -> float:
        LOGGER.warning("%s for feature %s (%s)", message, feature.name, category_key)
        diagnostics.append(
            FeatureDiagnostic(
                feature_index=feature.index,
                feature_name=feature.name,
                category=category_key,
                message=message,
            )
        )
        return 0.0

    if feature.area_ha is not None and feature.area_ha >= 0:
        return feature.area_ha

    if feature.geometry is None:
        return warn("No area_ha property and no geometry")

    try:
        area_ha = geodesic_area_ha(feature.geometry)
    except GEOMETRY_ERRORS as exc:
        return warn(f"Area calculation failed: {exc}")

    if not area_ha > 0:
        return warn("Calculated zero or negative area")
    return area_ha


def resolve_category_area(
    features: Iterable[GeographicFeature],
    category_key: str | Category,
) -> CategoryAreaResult:
    """Sum the area (ha) of every feature whose name contains `category_key`.

    A non-negative `area_ha` property is authoritative; otherwise the
    geodesic area of the geometry is used. Features that yield no usable
    area contribute zero and are reported in `diagnostics`. Deforestation
    years are collected only for the deforestation category.
    """

    key = category_key.value if isinstance(category_key, Category) else str(category_key)
    collect_years = key == Category.DEFORESTATION.value

    total_area = 0.0
    years: set[int] = set()
    diagnostics: list[FeatureDiagnostic] = []

    for feature in features:
        if not feature.matches(key):
            continue

        total_area += _feature_area_ha(feature, key, diagnostics)

        if collect_years:
            year = parse_deforestation_year(feature.year)
            if year is not None:
                years.add(year)
            elif feature.year is not None:
                LOGGER.warning("Unparseable year %r for feature %s", feature.year, feature.name)
                diagnostics.append(
                    FeatureDiagnostic(
                        feature_index=feature.index,
                        feature_name=feature.name,
                        category=key,
                        message=f"Unparseable year {feature.year!r}",
                    )
                )

    return CategoryAreaResult(
        area_ha=total_area,
        years=tuple(sorted(years)),
        diagnostics=tuple(diagnostics),
    )
