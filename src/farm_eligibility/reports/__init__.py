"""Deterministic, inspectable eligibility report bundles.

A bundle is written under <root>/<YYYY-MM-DD>/<bundle_id>/ and contains the
JSON report, HTML and plain-text renditions, and a manifest with checksums.
"""

from .bundle import bundle_dir, sanitize_id, write_manifest
from .report import (
    ReportBundle,
    build_eligibility_report,
    render_html_report,
    render_summary,
    render_text_report,
    write_report_bundle,
)
from .validate import validate_eligibility_report, validate_eligibility_report_file

__all__ = [
    "ReportBundle",
    "build_eligibility_report",
    "bundle_dir",
    "render_html_report",
    "render_summary",
    "render_text_report",
    "sanitize_id",
    "validate_eligibility_report",
    "validate_eligibility_report_file",
    "write_manifest",
    "write_report_bundle",
]
