from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Mapping

from farm_eligibility.config import DEFAULT_AREA_LIMIT_HA, Settings
from farm_eligibility.eligibility import CheckStatus, EligibilityDerivedResult, interpret_eligibility
from farm_eligibility.eligibility.formatting import format_number
from farm_eligibility.errors import (
    AreaLimitExceededError,
    BoundaryGeometryError,
    CheckInProgressError,
    CountryNotResolvedError,
    EligibilityError,
)
from farm_eligibility.geo.area import (
    GEOMETRY_ERRORS,
    boundary_centroid,
    boundary_feature_collection,
    boundary_upload_filename,
)
from farm_eligibility.services import (
    EligibilityAnalysisProvider,
    EligibilityApiClient,
    GeocodingProvider,
    MapboxGeocodingProvider,
)
from farm_eligibility.state import Farm, FarmStore

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class BoundaryUpload:
    filename: str
    content: bytes


@dataclass(frozen=True)
class CheckOutcome:
    status: CheckStatus
    result: EligibilityDerivedResult | None
    error_message: str | None = None
    country: str | None = None


def validate_boundary_geometry(geometry: Any) -> Mapping[str, Any]:
    if (
        not isinstance(geometry, Mapping)
        or not geometry.get("type")
        or not geometry.get("coordinates")
    ):
        raise BoundaryGeometryError("Farm map data is missing or invalid. Cannot run check.")
    return geometry


def ensure_within_area_limit(size_ha: float, limit_ha: float, *, locale: str | None = None) -> None:
    if size_ha > limit_ha:
        message = (
            f"Area limit exceeded: {format_number(size_ha, locale)} ha, "
            f"max. {format_number(limit_ha, locale)} ha"
        )
        LOGGER.warning("%s", message)
        raise AreaLimitExceededError(message, area_ha=size_ha, limit_ha=limit_ha)


def build_boundary_upload(farm: Farm, geometry: Mapping[str, Any]) -> BoundaryUpload:
    """Serialize the boundary as a single-feature GeoJSON FeatureCollection."""

    try:
        content = json.dumps(boundary_feature_collection(geometry)).encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise BoundaryGeometryError("Preparing geometry data failed.") from exc
    return BoundaryUpload(filename=boundary_upload_filename(farm.name, farm.farm_id), content=content)


class EligibilityCheck:
    """One farm's eligibility check and its status.

    Status moves idle -> checking -> success | failed. At most one check is in
    flight; a failure clears the previous response and derived result.
    """

    def __init__(
        self,
        *,
        geocoder: GeocodingProvider,
        analysis: EligibilityAnalysisProvider,
        area_limit_ha: float = DEFAULT_AREA_LIMIT_HA,
        locale: str | None = None,
    ) -> None:
        self._geocoder = geocoder
        self._analysis = analysis
        self._area_limit_ha = area_limit_ha
        self._locale = locale
        self.reset()

    @classmethod
    def from_settings(cls, settings: Settings) -> "EligibilityCheck":
        return cls(
            geocoder=MapboxGeocodingProvider.from_settings(settings),
            analysis=EligibilityApiClient.from_settings(settings),
            area_limit_ha=settings.area_limit_ha,
            locale=settings.locale,
        )

    def attach(self, store: FarmStore) -> None:
        """Discard this check's status and result whenever the store's selection changes."""

        store.on_selection_change(self.reset)

    def reset(self, _farm: Farm | None = None) -> None:
        self.status = CheckStatus.IDLE
        self.response: Any = None
        self.result: EligibilityDerivedResult | None = None
        self.error_message: str | None = None

    def _resolve_country(self, geometry: Mapping[str, Any]) -> str:
        try:
            lon, lat = boundary_centroid(geometry)
        except GEOMETRY_ERRORS as exc:
            raise BoundaryGeometryError("Farm map data is missing or invalid. Cannot run check.") from exc
        country = self._geocoder.country_for(lon, lat)
        if not country:
            raise CountryNotResolvedError("Could not determine country for eligibility check.")
        return country

    def _fail(self, message: str, country: str | None) -> CheckOutcome:
        self.status = CheckStatus.FAILED
        self.response = None
        self.result = None
        self.error_message = message
        return CheckOutcome(status=self.status, result=None, error_message=message, country=country)

    def run(self, farm: Farm, boundary_geometry: Any) -> CheckOutcome:
        if self.status == CheckStatus.CHECKING:
            raise CheckInProgressError("An eligibility check is already in progress for this farm.")

        country: str | None = None
        try:
            geometry = validate_boundary_geometry(boundary_geometry)
            ensure_within_area_limit(farm.size_ha, self._area_limit_ha, locale=self._locale)
            upload = build_boundary_upload(farm, geometry)
            country = self._resolve_country(geometry)

            self.status = CheckStatus.CHECKING
            self.response = None
            self.result = None
            self.error_message = None

            response = self._analysis.check(
                file_bytes=upload.content,
                filename=upload.filename,
                country=country,
                farm_name=farm.name,
            )
            result = interpret_eligibility(response, farm.size_ha, locale=self._locale)
        except EligibilityError as exc:
            LOGGER.error("Eligibility check failed for farm %s: %s", farm.farm_id, exc)
            return self._fail(str(exc) or "Eligibility check failed.", country)
        except Exception as exc:
            LOGGER.exception("Unexpected error during eligibility check for farm %s", farm.farm_id)
            return self._fail(f"Eligibility check failed: {exc}", country)

        self.response = response
        self.result = result
        self.status = CheckStatus.SUCCESS
        return CheckOutcome(status=self.status, result=self.result, country=country)
