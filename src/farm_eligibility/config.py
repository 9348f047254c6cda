from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any


API_URL_ENV = "FARM_ELIGIBILITY_API_URL"
API_TOKEN_ENV = "FARM_ELIGIBILITY_API_TOKEN"
API_TIMEOUT_ENV = "FARM_ELIGIBILITY_API_TIMEOUT"
MAPBOX_TOKEN_ENV = "MAPBOX_TOKEN"
GEOCODING_URL_ENV = "FARM_ELIGIBILITY_GEOCODING_URL"
GEOCODING_TIMEOUT_ENV = "FARM_ELIGIBILITY_GEOCODING_TIMEOUT"
AREA_LIMIT_ENV = "FARM_ELIGIBILITY_AREA_LIMIT_HA"
LOCALE_ENV = "FARM_ELIGIBILITY_LOCALE"
REPORT_ROOT_ENV = "FARM_ELIGIBILITY_REPORT_ROOT"

DEFAULT_API_TIMEOUT_SECONDS = 120.0
DEFAULT_GEOCODING_URL = "https://api.mapbox.com/geocoding/v5/mapbox.places"
DEFAULT_GEOCODING_TIMEOUT_SECONDS = 30.0
DEFAULT_AREA_LIMIT_HA = 50_000.0
DEFAULT_LOCALE = "en-US"
DEFAULT_REPORT_ROOT = Path("reports_out")


def _env_str(name: str) -> str | None:
    value = os.environ.get(name, "").strip()
    return value or None


def _env_float(name: str, default: float) -> float:
    value = os.environ.get(name, "").strip()
    if not value:
        return default
    try:
        parsed = float(value)
    except ValueError:
        print(f"WARNING: invalid {name}='{value}' (ignored)", flush=True)
        return default
    if parsed <= 0:
        print(f"WARNING: non-positive {name}='{value}' (ignored)", flush=True)
        return default
    return parsed


def resolve_report_root(explicit: str | os.PathLike[str] | None = None) -> Path:
    """Resolve the directory report bundles are written under.

    Layout: <root>/<YYYY-MM-DD>/<bundle_id>/

    An explicit value wins, then `FARM_ELIGIBILITY_REPORT_ROOT`, then the
    repo-relative `reports_out/` folder.
    """

    if explicit is not None:
        return Path(explicit)

    env_value = os.environ.get(REPORT_ROOT_ENV)
    if env_value:
        return Path(env_value)

    return DEFAULT_REPORT_ROOT


@dataclass(frozen=True)
class Settings:
    api_url: str | None = None
    api_token: str | None = None
    api_timeout_seconds: float = DEFAULT_API_TIMEOUT_SECONDS
    mapbox_token: str | None = None
    geocoding_url: str = DEFAULT_GEOCODING_URL
    geocoding_timeout_seconds: float = DEFAULT_GEOCODING_TIMEOUT_SECONDS
    area_limit_ha: float = DEFAULT_AREA_LIMIT_HA
    locale: str = DEFAULT_LOCALE
    report_root: Path = DEFAULT_REPORT_ROOT

    @classmethod
    def from_env(cls, **overrides: Any) -> "Settings":
        """Build settings from the environment.

        Keyword overrides that are not None take precedence over the
        environment, which takes precedence over the defaults.
        """

        settings = cls(
            api_url=_env_str(API_URL_ENV),
            api_token=_env_str(API_TOKEN_ENV),
            api_timeout_seconds=_env_float(API_TIMEOUT_ENV, DEFAULT_API_TIMEOUT_SECONDS),
            mapbox_token=_env_str(MAPBOX_TOKEN_ENV),
            geocoding_url=_env_str(GEOCODING_URL_ENV) or DEFAULT_GEOCODING_URL,
            geocoding_timeout_seconds=_env_float(
                GEOCODING_TIMEOUT_ENV, DEFAULT_GEOCODING_TIMEOUT_SECONDS
            ),
            area_limit_ha=_env_float(AREA_LIMIT_ENV, DEFAULT_AREA_LIMIT_HA),
            locale=_env_str(LOCALE_ENV) or DEFAULT_LOCALE,
            report_root=resolve_report_root(),
        )
        explicit = {k: v for k, v in overrides.items() if v is not None}
        if "report_root" in explicit:
            explicit["report_root"] = resolve_report_root(explicit["report_root"])
        return replace(settings, **explicit) if explicit else settings
