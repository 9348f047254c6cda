from __future__ import annotations

import html
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from farm_eligibility.eligibility import (
    EligibilityDerivedResult,
    format_area_display,
    format_area_ha,
    format_year,
)
from farm_eligibility.eligibility.messages import Translator
from farm_eligibility.state import Farm

from .bundle import bundle_dir as compute_bundle_dir
from .bundle import sanitize_id, write_manifest
from .determinism import utc_now_iso, write_json, write_text

REPORT_VERSION = "eligibility_report_v1"
REPORT_TITLE = "Eligibility Analysis Report"
# Deforestation below this (ha) is reported as "None Detected".
REPORT_DEFORESTATION_THRESHOLD_HA = 0.001
ELIGIBLE_AREA_NOTE = "(Boundary Area minus overlapping Deforestation, Forest, and Wetlands)"
DISCLAIMER = (
    "Disclaimer: This report is based on automated analysis of remotely sensed data "
    "and is not a certified determination of program eligibility."
)


@dataclass(frozen=True)
class ReportBundle:
    bundle_dir: Path
    json_path: Path
    html_path: Path
    text_path: Path
    manifest_path: Path


def _area_or_zero(value: float | None) -> float:
    return float(value) if value is not None else 0.0


def build_eligibility_report(
    farm: Farm,
    derived: EligibilityDerivedResult | None,
    *,
    locale: str | None = None,
    generated_at_utc: str | None = None,
) -> dict[str, Any]:
    """Build the JSON report for a farm's derived eligibility result."""

    if derived is None:
        raise ValueError("Cannot generate report: Missing required data.")

    deforestation_ha = _area_or_zero(derived.deforestation_area_ha)
    years = list(derived.deforestation_years or ())
    years_display = ", ".join(format_year(y) for y in years) if years else "None Detected"
    eligible_ha = derived.eligible_area_ha

    return {
        "report_version": REPORT_VERSION,
        "title": REPORT_TITLE,
        "generated_at_utc": generated_at_utc or utc_now_iso(),
        "locale": locale or "en-US",
        "farm": {"farm_id": farm.farm_id, "name": farm.name},
        "boundary": {"total_area_ha": float(farm.size_ha)},
        "areas": {
            "deforestation_ha": deforestation_ha,
            "forest_ha": _area_or_zero(derived.forest_area_ha),
            "wetlands_ha": _area_or_zero(derived.wetlands_area_ha),
            "eligible_ha": float(eligible_ha) if eligible_ha is not None else None,
        },
        "deforestation_detected": deforestation_ha > REPORT_DEFORESTATION_THRESHOLD_HA,
        "deforestation_years": years,
        "deforestation_years_display": years_display,
        "eligible_area_display": (
            format_area_ha(eligible_ha, locale) if eligible_ha is not None else "Not Calculated"
        ),
        "message": derived.message,
        "disclaimer": DISCLAIMER,
        "diagnostics_count": len(derived.diagnostics),
    }


def _summary_rows(report: Mapping[str, Any]) -> list[tuple[str, str]]:
    locale = report.get("locale")
    areas = report["areas"]
    deforestation = format_area_ha(areas["deforestation_ha"], locale)
    if report.get("deforestation_detected"):
        deforestation += f" (Years: {report['deforestation_years_display']})"
    else:
        deforestation += " (None Detected)"

    return [
        ("Total Area", format_area_ha(report["boundary"]["total_area_ha"], locale)),
        ("Deforestation", deforestation),
        ("Forest Cover", format_area_ha(areas["forest_ha"], locale)),
        ("Wetlands", format_area_ha(areas["wetlands_ha"], locale)),
    ]


def render_text_report(report: Mapping[str, Any]) -> str:
    rows = _summary_rows(report)
    farm = report["farm"]
    lines = [
        report["title"],
        f"Report Generated: {report['generated_at_utc']}",
        f"Farm: {farm['name']} ({farm['farm_id']})",
        "",
        "Project Boundary",
        f"- {rows[0][0]}: {rows[0][1]}",
        "",
        "Area Analysis (Overlaps within Boundary)",
        *(f"- {label}: {value}" for label, value in rows[1:]),
        "",
        f"Calculated Eligible Area: {report['eligible_area_display']}",
        f"  {ELIGIBLE_AREA_NOTE}",
        "",
        *report["message"].splitlines(),
        "",
        report["disclaimer"],
    ]
    return "\n".join(lines) + "\n"


def render_html_report(report: Mapping[str, Any]) -> str:
    def row(k: str, v: str) -> str:
        return f"<tr><th>{html.escape(k)}</th><td>{html.escape(v)}</td></tr>"

    rows = _summary_rows(report)
    farm = report["farm"]
    boundary_table = row(*rows[0])
    overlap_table = "\n".join(row(label, value) for label, value in rows[1:])
    message_html = "<br>".join(html.escape(line) for line in report["message"].splitlines())
    title = html.escape(report["title"])

    return f"""<!doctype html>
<html lang="{html.escape(str(report.get('locale') or 'en-US'))}">
<head>
<meta charset="utf-8">
<title>{title}</title>
</head>
<body>
<h1>{title}</h1>
<p>Report Generated: {html.escape(report['generated_at_utc'])}</p>
<p>Farm: {html.escape(farm['name'])} ({html.escape(farm['farm_id'])})</p>
<h2>Project Boundary</h2>
<table>
{boundary_table}
</table>
<h2>Area Analysis (Overlaps within Boundary)</h2>
<table>
{overlap_table}
</table>
<h2>Calculated Eligible Area: {html.escape(report['eligible_area_display'])}</h2>
<p><small>{html.escape(ELIGIBLE_AREA_NOTE)}</small></p>
<p>{message_html}</p>
<p><small>{html.escape(report['disclaimer'])}</small></p>
</body>
</html>
"""


def write_report_bundle(
    report: Mapping[str, Any],
    *,
    bundle_id: str,
    bundle_date: str | None = None,
    report_root: str | Path | None = None,
) -> ReportBundle:
    """Write the JSON, HTML and text renditions plus a manifest."""

    bdir = compute_bundle_dir(
        bundle_id=sanitize_id(bundle_id),
        bundle_date=bundle_date,
        report_root=report_root,
    )
    json_path = bdir / "eligibility_report.json"
    html_path = bdir / "eligibility_report.html"
    text_path = bdir / "eligibility_report.txt"

    write_json(json_path, dict(report))
    write_text(html_path, render_html_report(report))
    write_text(text_path, render_text_report(report))
    write_manifest(bdir, [json_path, html_path, text_path])

    return ReportBundle(
        bundle_dir=bdir,
        json_path=json_path,
        html_path=html_path,
        text_path=text_path,
        manifest_path=bdir / "manifest.json",
    )


def render_summary(result: EligibilityDerivedResult | None, *, locale: str | None = None) -> str:
    """Per-category area rows followed by the message, for inline display."""

    if result is None:
        return Translator(locale)("analysis_pending")

    rows = [
        ("Boundary", result.total_uploaded_area_ha),
        ("Deforestation", result.deforestation_area_ha),
        ("Forest cover", result.forest_area_ha),
        ("Wetlands", result.wetlands_area_ha),
        ("Eligible area", result.eligible_area_ha),
    ]
    width = max(len(label) for label, _ in rows)
    lines = [f"{label.ljust(width)}  {format_area_display(value, locale)}" for label, value in rows]
    return "\n".join([*lines, "", result.message])
