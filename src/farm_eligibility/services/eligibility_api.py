from __future__ import annotations

import json
import logging
from typing import Any

import requests

from farm_eligibility.config import DEFAULT_API_TIMEOUT_SECONDS, Settings
from farm_eligibility.errors import ConfigurationError, EligibilityApiError

LOGGER = logging.getLogger(__name__)

GEOJSON_CONTENT_TYPE = "application/geo+json"


class EligibilityAnalysisProvider:
    """Submits a boundary file for eligibility analysis.

    Implementations return the decoded feature collection response.
    """

    def check(
        self,
        *,
        file_bytes: bytes,
        filename: str,
        country: str,
        farm_name: str,
    ) -> Any:
        raise NotImplementedError


class EligibilityApiClient(EligibilityAnalysisProvider):
    def __init__(
        self,
        base_url: str | None,
        token: str | None,
        *,
        timeout_seconds: float = DEFAULT_API_TIMEOUT_SECONDS,
    ) -> None:
        self._base_url = (base_url or "").rstrip("/")
        self._token = token
        self._timeout = timeout_seconds

    @classmethod
    def from_settings(cls, settings: Settings) -> "EligibilityApiClient":
        return cls(settings.api_url, settings.api_token, timeout_seconds=settings.api_timeout_seconds)

    @property
    def endpoint(self) -> str:
        return f"{self._base_url}/eligibility"

    def check(
        self,
        *,
        file_bytes: bytes,
        filename: str,
        country: str,
        farm_name: str,
    ) -> Any:
        if not self._token:
            LOGGER.error("Eligibility API token is missing")
            raise ConfigurationError("Authentication token is missing. Cannot check eligibility.")
        if not self._base_url:
            raise ConfigurationError("Eligibility API URL is not configured.")
        if not file_bytes:
            raise ConfigurationError("File object is missing. Cannot check eligibility.")

        LOGGER.info("Eligibility API request: POST %s (%s, %d bytes)", self.endpoint, filename, len(file_bytes))
        try:
            resp = requests.post(
                self.endpoint,
                files={"file": (filename, file_bytes, GEOJSON_CONTENT_TYPE)},
                data={"country": country, "farmName": farm_name},
                headers={"Authorization": f"Bearer {self._token}"},
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            raise EligibilityApiError(f"Eligibility check failed: {exc}") from exc

        if not resp.ok:
            detail = resp.content.decode("utf-8", errors="replace") or resp.reason
            LOGGER.error("Error in API response: %s", detail)
            raise EligibilityApiError(
                f"Eligibility check failed: API request failed: {detail}", status=resp.status_code
            )

        # UnicodeDecodeError is a ValueError
        try:
            return json.loads(resp.content.decode("utf-8"))
        except ValueError as exc:
            raise EligibilityApiError("Eligibility check failed: response is not valid JSON") from exc
