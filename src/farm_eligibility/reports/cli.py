from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from farm_eligibility.config import Settings
from farm_eligibility.eligibility import CheckStatus, interpret_eligibility
from farm_eligibility.geo.area import GEOMETRY_ERRORS, geodesic_area_ha, load_boundary_geometry
from farm_eligibility.state import Farm
from farm_eligibility.workflow import EligibilityCheck

from .bundle import sanitize_id
from .report import build_eligibility_report, render_summary, write_report_bundle
from .validate import validate_eligibility_report


def _utc_now_compact() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).strftime("%Y%m%dT%H%M%SZ")


def _read_response(path: str) -> Any:
    return json.loads(Path(path).read_text(encoding="utf-8"))


def _print_result(result: Any, *, as_json: bool, locale: str) -> None:
    if as_json:
        print(json.dumps(result.to_json(), indent=2, sort_keys=True, ensure_ascii=False), flush=True)
    else:
        print(render_summary(result, locale=locale), flush=True)


def _write_report(
    *,
    farm: Farm,
    result: Any,
    locale: str,
    bundle_id: str | None,
    report_root: str | None,
) -> int:
    report = build_eligibility_report(farm, result, locale=locale)
    validate_eligibility_report(report)
    bundle = write_report_bundle(
        report,
        bundle_id=bundle_id or f"{sanitize_id(farm.farm_id)}-{_utc_now_compact()}",
        report_root=report_root,
    )
    print(f"Wrote report bundle: {bundle.bundle_dir}", flush=True)
    return 0


def _cmd_interpret(args: argparse.Namespace, settings: Settings) -> int:
    result = interpret_eligibility(
        _read_response(args.response), args.total_area_ha, locale=settings.locale
    )
    if result is None:
        print("Cannot determine eligibility: no features or no boundary area.", file=sys.stderr)
        return 2
    _print_result(result, as_json=args.json, locale=settings.locale)
    return 0


def _cmd_report(args: argparse.Namespace, settings: Settings) -> int:
    result = interpret_eligibility(
        _read_response(args.response), args.total_area_ha, locale=settings.locale
    )
    if result is None:
        print("Cannot generate report: Missing required data.", file=sys.stderr)
        return 2
    farm = Farm(farm_id=args.farm_id, name=args.farm_name, size_ha=args.total_area_ha)
    return _write_report(
        farm=farm,
        result=result,
        locale=settings.locale,
        bundle_id=args.bundle_id,
        report_root=args.report_root,
    )


def _cmd_check(args: argparse.Namespace, settings: Settings) -> int:
    boundary_path = Path(args.boundary)
    try:
        geometry = load_boundary_geometry(boundary_path)
        size_ha = args.size_ha if args.size_ha is not None else geodesic_area_ha(geometry)
    except (OSError, *GEOMETRY_ERRORS) as exc:
        print(f"ERROR: could not read boundary {boundary_path}: {exc}", file=sys.stderr)
        return 1

    farm = Farm(farm_id=args.farm_id, name=args.farm_name, size_ha=size_ha)
    print(f"Checking eligibility for {farm.name} ({size_ha:.2f} ha)", flush=True)

    outcome = EligibilityCheck.from_settings(settings).run(farm, geometry)
    if outcome.status != CheckStatus.SUCCESS:
        print(f"ERROR: {outcome.error_message}", file=sys.stderr)
        return 1
    if outcome.result is None:
        print(render_summary(None, locale=settings.locale), file=sys.stderr)
        return 2

    _print_result(outcome.result, as_json=args.json, locale=settings.locale)
    if args.write_report:
        return _write_report(
            farm=farm,
            result=outcome.result,
            locale=settings.locale,
            bundle_id=args.bundle_id,
            report_root=args.report_root,
        )
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="farm-eligibility",
        description="Interpret regenerative-program eligibility analyses for farm boundaries.",
    )
    p.add_argument(
        "--locale",
        help="Message and number locale, e.g. en-US or es-AR (defaults to FARM_ELIGIBILITY_LOCALE).",
    )
    p.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING).",
    )

    sub = p.add_subparsers(dest="command", required=True)

    interpret = sub.add_parser("interpret", help="Interpret a saved analysis API response.")
    interpret.add_argument("--response", required=True, help="Path to the analysis response JSON")
    interpret.add_argument("--total-area-ha", required=True, type=float, help="Boundary area (ha)")
    interpret.add_argument("--json", action="store_true", help="Print the full derived result as JSON.")
    interpret.set_defaults(handler=_cmd_interpret)

    report = sub.add_parser("report", help="Write a report bundle for a saved analysis response.")
    report.add_argument("--response", required=True, help="Path to the analysis response JSON")
    report.add_argument("--total-area-ha", required=True, type=float, help="Boundary area (ha)")
    report.add_argument("--farm-name", required=True)
    report.add_argument("--farm-id", required=True)
    report.add_argument("--bundle-id", help="Bundle id (default: <farm-id>-<UTC timestamp>).")
    report.add_argument(
        "--report-root",
        help="Bundle root directory (defaults to FARM_ELIGIBILITY_REPORT_ROOT or reports_out/).",
    )
    report.set_defaults(handler=_cmd_report)

    check = sub.add_parser("check", help="Run a full eligibility check against the configured services.")
    check.add_argument("--boundary", required=True, help="Path to the farm boundary GeoJSON")
    check.add_argument("--farm-name", required=True)
    check.add_argument("--farm-id", required=True)
    check.add_argument(
        "--size-ha",
        type=float,
        help="Farm size in ha (default: geodesic area of the boundary).",
    )
    check.add_argument("--json", action="store_true", help="Print the full derived result as JSON.")
    check.add_argument("--write-report", action="store_true", help="Also write a report bundle.")
    check.add_argument("--bundle-id")
    check.add_argument("--report-root")
    check.set_defaults(handler=_cmd_check)

    return p


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")
    settings = Settings.from_env(locale=args.locale)
    return args.handler(args, settings)


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
