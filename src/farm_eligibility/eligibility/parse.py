from __future__ import annotations

import json
import logging
import math
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping

from jsonschema import Draft202012Validator

from .types import FeatureCollection, FeatureDiagnostic, GeographicFeature

LOGGER = logging.getLogger(__name__)

FEATURE_SCHEMA_FILENAME = "analysis_feature_v1.schema.json"


def _schema_dir() -> Path:
    return Path(__file__).resolve().parents[1] / "schemas"


@lru_cache(maxsize=None)
def _feature_validator() -> Draft202012Validator:
    schema_path = _schema_dir() / FEATURE_SCHEMA_FILENAME
    schema = json.loads(schema_path.read_text(encoding="utf-8"))
    Draft202012Validator.check_schema(schema)
    return Draft202012Validator(schema)


def _decode_payload(payload: Any) -> Any:
    if isinstance(payload, (bytes, bytearray)):
        payload = payload.decode("utf-8", errors="replace")
    if isinstance(payload, str):
        try:
            return json.loads(payload)
        except ValueError:
            LOGGER.warning("Analysis response is not valid JSON; ignoring it")
            return None
    return payload


def _invalid_fields(feature: Mapping[str, Any]) -> tuple[set[str], list[str]]:
    """Map schema violations to the top-level field that must be dropped.

    Returns (dropped_fields, messages). Field names are "properties",
    "geometry", or "properties.<key>".
    """

    dropped: set[str] = set()
    messages: list[str] = []
    errors = sorted(
        _feature_validator().iter_errors(feature),
        key=lambda e: [str(p) for p in e.absolute_path],
    )
    for error in errors:
        path = [str(p) for p in error.absolute_path]
        if not path:
            dropped.add("*")
        elif path[0] == "properties" and len(path) >= 2:
            dropped.add(f"properties.{path[1]}")
        else:
            dropped.add(path[0])
        where = ".".join(path) or "<feature>"
        messages.append(f"{where}: {error.message}")
    return dropped, messages


def _parse_area_ha(value: Any) -> float | None:
    if value is None or isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    as_float = float(value)
    if math.isnan(as_float):
        return None
    return as_float


def parse_feature(raw: Any, index: int) -> tuple[GeographicFeature | None, list[FeatureDiagnostic]]:
    """Parse a single raw GeoJSON feature.

    Never raises: malformed fields are dropped and reported as diagnostics so
    that downstream aggregation can treat them as absent.
    """

    diagnostics: list[FeatureDiagnostic] = []
    if not isinstance(raw, Mapping):
        diagnostics.append(
            FeatureDiagnostic(
                feature_index=index,
                feature_name=None,
                category=None,
                message=f"feature is not an object ({type(raw).__name__}); skipped",
            )
        )
        return None, diagnostics

    dropped, messages = _invalid_fields(raw)

    props_raw = raw.get("properties")
    props: Mapping[str, Any] = props_raw if isinstance(props_raw, Mapping) else {}
    if "properties" in dropped:
        props = {}

    name = props.get("name")
    if "properties.name" in dropped or not isinstance(name, str):
        name = None

    for message in messages:
        diagnostics.append(
            FeatureDiagnostic(feature_index=index, feature_name=name, category=None, message=message)
        )

    if "*" in dropped:
        return None, diagnostics

    geometry = raw.get("geometry")
    if "geometry" in dropped or not isinstance(geometry, Mapping):
        geometry = None

    area_ha = None if "properties.area_ha" in dropped else _parse_area_ha(props.get("area_ha"))
    year = None if "properties.year" in dropped else props.get("year")

    feature = GeographicFeature(
        index=index,
        name=name,
        geometry=geometry,
        area_ha=area_ha,
        year=year,
        properties=dict(props),
    )
    return feature, diagnostics


def parse_feature_collection(payload: Any) -> FeatureCollection | None:
    """Validate and parse an analysis API response.

    Returns None when there is no usable `features` array. An empty array is
    a valid, empty collection.
    """

    if isinstance(payload, FeatureCollection):
        return payload

    data = _decode_payload(payload)
    if not isinstance(data, Mapping):
        return None

    raw_features = data.get("features")
    if not isinstance(raw_features, list):
        return None

    features: list[GeographicFeature] = []
    diagnostics: list[FeatureDiagnostic] = []
    for index, raw in enumerate(raw_features):
        feature, feature_diagnostics = parse_feature(raw, index)
        for diagnostic in feature_diagnostics:
            LOGGER.warning(
                "Feature %d (%s) failed validation: %s",
                diagnostic.feature_index,
                diagnostic.feature_name,
                diagnostic.message,
            )
        diagnostics.extend(feature_diagnostics)
        if feature is not None:
            features.append(feature)

    return FeatureCollection(features=tuple(features), diagnostics=tuple(diagnostics))
