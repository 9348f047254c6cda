from __future__ import annotations

from typing import Any

from .formatting import format_area_ha
from .messages import Translator
from .parse import parse_feature_collection
from .resolver import resolve_category_area
from .types import Category, EligibilityDerivedResult

# Deforestation below this (ha) is treated as geometry noise, not a cause.
DEFORESTATION_THRESHOLD_HA = 0.01
WETLANDS_CAUSE_FRACTION = 0.8
LOW_FOREST_CAUSE_FRACTION = 0.1


def _compose_message(
    t: Translator,
    *,
    total_uploaded_area_ha: float,
    deforestation_area_ha: float,
    forest_area_ha: float,
    wetlands_area_ha: float,
    eligible_area_ha: float,
) -> str:
    locale = t.locale

    if eligible_area_ha > 0:
        return t("eligibility_success", area=format_area_ha(eligible_area_ha, locale))

    if not total_uploaded_area_ha > 0:
        return t("analysis_incomplete")

    message = t("eligibility_failure")
    if deforestation_area_ha > DEFORESTATION_THRESHOLD_HA:
        reason = t("deforestation_reason", area=format_area_ha(deforestation_area_ha, locale))
    elif wetlands_area_ha > total_uploaded_area_ha * WETLANDS_CAUSE_FRACTION:
        reason = t("wetlands_reason", area=format_area_ha(wetlands_area_ha, locale))
    elif forest_area_ha < total_uploaded_area_ha * LOW_FOREST_CAUSE_FRACTION:
        reason = t("low_forest_reason", area=format_area_ha(forest_area_ha, locale))
    else:
        reason = None

    if reason:
        message += "\n" + reason
    return message


def interpret_eligibility(
    feature_collection: Any,
    total_uploaded_area_ha: float | None,
    *,
    locale: str | None = None,
) -> EligibilityDerivedResult | None:
    """Derive per-category areas and a user-facing eligibility message.

    `feature_collection` is the analysis API response, either raw (mapping or
    JSON text) or already parsed. Returns None when there is no features
    array or no boundary area to compare against.
    """

    collection = parse_feature_collection(feature_collection)
    if collection is None or not total_uploaded_area_ha:
        return None

    features = collection.features
    deforestation = resolve_category_area(features, Category.DEFORESTATION)
    forest = resolve_category_area(features, Category.FOREST)
    wetlands = resolve_category_area(features, Category.WETLANDS)
    eligible = resolve_category_area(features, Category.ELIGIBLE_AREA)

    total = float(total_uploaded_area_ha)
    message = _compose_message(
        Translator(locale),
        total_uploaded_area_ha=total,
        deforestation_area_ha=deforestation.area_ha,
        forest_area_ha=forest.area_ha,
        wetlands_area_ha=wetlands.area_ha,
        eligible_area_ha=eligible.area_ha,
    )

    return EligibilityDerivedResult(
        message=message,
        total_uploaded_area_ha=total,
        deforestation_area_ha=deforestation.area_ha,
        forest_area_ha=forest.area_ha,
        wetlands_area_ha=wetlands.area_ha,
        eligible_area_ha=eligible.area_ha,
        deforestation_years=deforestation.years,
        diagnostics=(
            collection.diagnostics
            + deforestation.diagnostics
            + forest.diagnostics
            + wetlands.diagnostics
            + eligible.diagnostics
        ),
    )
