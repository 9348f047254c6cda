from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping

import jsonschema
from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError


def _default_schema_path() -> Path:
    return Path(__file__).resolve().parents[1] / "schemas" / "eligibility_report_v1.schema.json"


def load_schema(schema_path: str | Path | None = None) -> dict[str, Any]:
    path = Path(schema_path) if schema_path is not None else _default_schema_path()
    return json.loads(path.read_text(encoding="utf-8"))


def validate_eligibility_report(
    report: Mapping[str, Any],
    *,
    schema_path: str | Path | None = None,
) -> None:
    """Validate an eligibility report JSON object against the v1 schema.

    Raises:
      jsonschema.exceptions.ValidationError if invalid.
    """

    schema = load_schema(schema_path)
    validator = Draft202012Validator(schema, format_checker=jsonschema.FormatChecker())
    validator.validate(dict(report))

    _validate_consistency(dict(report))


def _validate_consistency(report: Mapping[str, Any]) -> None:
    years = report.get("deforestation_years", [])
    if list(years) != sorted(years):
        raise ValidationError(f"deforestation_years must be ascending: {years}")

    if years and not report.get("deforestation_years_display"):
        raise ValidationError("deforestation_years_display is empty but years are present")

    areas = report.get("areas", {})
    eligible = areas.get("eligible_ha")
    if eligible is None and report.get("eligible_area_display") != "Not Calculated":
        raise ValidationError("eligible_area_display must be 'Not Calculated' when eligible_ha is null")


def validate_eligibility_report_file(path: str | Path) -> None:
    report = json.loads(Path(path).read_text(encoding="utf-8"))
    validate_eligibility_report(report)
