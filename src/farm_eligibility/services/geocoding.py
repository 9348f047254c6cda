from __future__ import annotations

import json
import logging
from typing import Any, Mapping

import requests

from farm_eligibility.config import DEFAULT_GEOCODING_URL, Settings
from farm_eligibility.errors import ConfigurationError, GeocodingError

LOGGER = logging.getLogger(__name__)


class GeocodingProvider:
    def country_for(self, lon: float, lat: float) -> str | None:
        raise NotImplementedError


def country_from_response(data: Mapping[str, Any]) -> str | None:
    """Pick the country name out of a reverse-geocoding response.

    Uses the first feature's `context` entry whose id contains "country".
    """

    features = data.get("features")
    if not isinstance(features, list) or not features:
        return None
    place = features[0] if isinstance(features[0], Mapping) else {}
    for entry in place.get("context") or []:
        if not isinstance(entry, Mapping):
            continue
        if "country" in str(entry.get("id", "")):
            text = entry.get("text")
            return text if isinstance(text, str) and text else None
    return None


class MapboxGeocodingProvider(GeocodingProvider):
    def __init__(
        self,
        token: str | None,
        *,
        base_url: str = DEFAULT_GEOCODING_URL,
        timeout_seconds: float = 30.0,
    ) -> None:
        self._token = token
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout_seconds

    @classmethod
    def from_settings(cls, settings: Settings) -> "MapboxGeocodingProvider":
        return cls(
            settings.mapbox_token,
            base_url=settings.geocoding_url,
            timeout_seconds=settings.geocoding_timeout_seconds,
        )

    def _url(self, lon: float, lat: float) -> str:
        return f"{self._base_url}/{lon},{lat}.json"

    def country_for(self, lon: float, lat: float) -> str | None:
        if not self._token:
            raise ConfigurationError("Geocoding token is missing. Cannot determine country.")

        url = self._url(lon, lat)
        LOGGER.info("Reverse geocoding request: %s", url)
        try:
            resp = requests.get(
                url,
                params={"access_token": self._token, "language": "en"},
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            raise GeocodingError(f"Error determining country for the farm: {exc}") from exc
        if not resp.ok:
            raise GeocodingError(f"Geocoding API error: {resp.status_code} {resp.reason}")

        try:
            data = json.loads(resp.content.decode("utf-8"))
        except ValueError as exc:
            raise GeocodingError("Geocoding API returned invalid JSON") from exc
        if not isinstance(data, Mapping):
            return None
        return country_from_response(data)
