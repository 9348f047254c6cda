"""Eligibility interpretation engine.

Turns the classified features returned by the eligibility analysis API into
per-category overlap areas and a localized explanation. Everything in this
package is pure: no network access, no shared state, and no exceptions for
data-quality problems (those become diagnostics).
"""

from .formatting import format_area_display, format_area_ha, format_year
from .interpreter import interpret_eligibility
from .parse import parse_feature_collection
from .resolver import parse_deforestation_year, resolve_category_area
from .types import (
    Category,
    CategoryAreaResult,
    CheckStatus,
    EligibilityDerivedResult,
    FeatureCollection,
    FeatureDiagnostic,
    GeographicFeature,
)

__all__ = [
    "Category",
    "CategoryAreaResult",
    "CheckStatus",
    "EligibilityDerivedResult",
    "FeatureCollection",
    "FeatureDiagnostic",
    "GeographicFeature",
    "format_area_display",
    "format_area_ha",
    "format_year",
    "interpret_eligibility",
    "parse_deforestation_year",
    "parse_feature_collection",
    "resolve_category_area",
]
