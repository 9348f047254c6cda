from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping


class Category(str, Enum):
    """Category keys used to bucket features returned by the analysis API.

    Matching is a case-insensitive substring test against the feature name,
    so the values must stay lowercase and stable.
    """

    DEFORESTATION = "deforestedareas"
    FOREST = "forestunion"
    WETLANDS = "wetlandsunion"
    ELIGIBLE_AREA = "eligibleareafeature"


class CheckStatus(str, Enum):
    IDLE = "idle"
    CHECKING = "checking"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class FeatureDiagnostic:
    """A data-quality issue found in one feature.

    Diagnostics never change the user-facing result beyond the feature
    contributing zero area (or no year).
    """

    feature_index: int
    feature_name: str | None
    category: str | None
    message: str


@dataclass(frozen=True)
class GeographicFeature:
    index: int
    name: str | None
    geometry: Mapping[str, Any] | None
    area_ha: float | None = None
    year: Any = None
    properties: Mapping[str, Any] = field(default_factory=dict)

    def matches(self, category_key: str) -> bool:
        if not self.name:
            return False
        return category_key.lower() in self.name.lower()

    def to_geojson(self) -> dict[str, Any]:
        return {
            "type": "Feature",
            "properties": dict(self.properties),
            "geometry": dict(self.geometry) if self.geometry is not None else None,
        }


@dataclass(frozen=True)
class FeatureCollection:
    features: tuple[GeographicFeature, ...]
    diagnostics: tuple[FeatureDiagnostic, ...] = ()


@dataclass(frozen=True)
class CategoryAreaResult:
    area_ha: float
    years: tuple[int, ...] = ()
    diagnostics: tuple[FeatureDiagnostic, ...] = ()


@dataclass(frozen=True)
class EligibilityDerivedResult:
    message: str
    total_uploaded_area_ha: float
    deforestation_area_ha: float
    forest_area_ha: float
    wetlands_area_ha: float
    eligible_area_ha: float
    deforestation_years: tuple[int, ...]
    diagnostics: tuple[FeatureDiagnostic, ...] = ()

    def to_json(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "total_uploaded_area_ha": self.total_uploaded_area_ha,
            "deforestation_area_ha": self.deforestation_area_ha,
            "forest_area_ha": self.forest_area_ha,
            "wetlands_area_ha": self.wetlands_area_ha,
            "eligible_area_ha": self.eligible_area_ha,
            "deforestation_years": list(self.deforestation_years),
            "diagnostics": [
                {
                    "feature_index": d.feature_index,
                    "feature_name": d.feature_name,
                    "category": d.category,
                    "message": d.message,
                }
                for d in self.diagnostics
            ],
        }
