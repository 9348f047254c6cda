from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path

import requests

from farm_eligibility.reports.cli import main

RESPONSE = {
    "type": "FeatureCollection",
    "features": [
        {"type": "Feature", "properties": {"name": "wetlandsUnion", "area_ha": 90.0}, "geometry": None},
        {"type": "Feature", "properties": {"name": "deforestedAreas", "area_ha": 0.0, "year": 22}, "geometry": None},
    ],
}


def _write_response(tmp_path: Path, data: object = RESPONSE) -> Path:
    path = tmp_path / "response.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_cli_help() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    env = os.environ.copy()
    src_path = str(repo_root / "src")
    env["PYTHONPATH"] = src_path + (":" + env["PYTHONPATH"] if env.get("PYTHONPATH") else "")
    proc = subprocess.run(
        [sys.executable, "-m", "farm_eligibility.reports.cli", "--help"],
        check=False,
        text=True,
        capture_output=True,
        env=env,
    )
    assert proc.returncode == 0
    assert "Interpret regenerative-program eligibility analyses" in proc.stdout


def test_cli_interpret_prints_message(tmp_path: Path, capsys) -> None:
    rc = main(["interpret", "--response", str(_write_response(tmp_path)), "--total-area-ha", "100"])

    out = capsys.readouterr().out
    assert rc == 0
    assert "Most likely cause: high proportion of wetlands (90.00 ha)." in out


def test_cli_interpret_json(tmp_path: Path, capsys) -> None:
    rc = main(
        [
            "--locale",
            "es-AR",
            "interpret",
            "--response",
            str(_write_response(tmp_path)),
            "--total-area-ha",
            "100",
            "--json",
        ]
    )

    data = json.loads(capsys.readouterr().out)
    assert rc == 0
    assert data["wetlands_area_ha"] == 90.0
    assert data["deforestation_years"] == [2022]
    assert "humedales (90,00 ha)" in data["message"]


def test_cli_interpret_without_features_exits_2(tmp_path: Path) -> None:
    rc = main(["interpret", "--response", str(_write_response(tmp_path, {})), "--total-area-ha", "100"])

    assert rc == 2


def test_cli_report_writes_bundle(tmp_path: Path) -> None:
    report_root = tmp_path / "out"
    rc = main(
        [
            "report",
            "--response",
            str(_write_response(tmp_path)),
            "--total-area-ha",
            "100",
            "--farm-name",
            "Test Farm",
            "--farm-id",
            "farm-1",
            "--bundle-id",
            "bundle-001",
            "--report-root",
            str(report_root),
        ]
    )

    assert rc == 0
    bundles = list(report_root.glob("*/bundle-001"))
    assert len(bundles) == 1
    assert (bundles[0] / "eligibility_report.json").is_file()
    assert (bundles[0] / "manifest.json").is_file()


def test_cli_check_reports_failure_without_configuration(tmp_path: Path, monkeypatch, capsys) -> None:
    monkeypatch.setenv("FARM_ELIGIBILITY_AREA_LIMIT_HA", "1")
    boundary = tmp_path / "boundary.geojson"
    boundary.write_text(
        json.dumps(
            {
                "type": "Polygon",
                "coordinates": [[[0.0, 0.0], [0.1, 0.0], [0.1, 0.1], [0.0, 0.1], [0.0, 0.0]]],
            }
        ),
        encoding="utf-8",
    )

    rc = main(["check", "--boundary", str(boundary), "--farm-name", "F", "--farm-id", "1"])

    assert rc == 1
    assert "Area limit exceeded" in capsys.readouterr().err


def test_cli_check_without_features_reports_pending_analysis(tmp_path: Path, monkeypatch, capsys) -> None:
    monkeypatch.setenv("MAPBOX_TOKEN", "geo-token")
    monkeypatch.setenv("FARM_ELIGIBILITY_API_URL", "https://api.example")
    monkeypatch.setenv("FARM_ELIGIBILITY_API_TOKEN", "api-token")
    monkeypatch.delenv("FARM_ELIGIBILITY_AREA_LIMIT_HA", raising=False)

    def _json_response(body: object) -> requests.Response:
        resp = requests.Response()
        resp.status_code = 200
        resp._content = json.dumps(body).encode("utf-8")
        return resp

    monkeypatch.setattr(
        requests,
        "get",
        lambda url, **kw: _json_response({"features": [{"context": [{"id": "country.1", "text": "Chile"}]}]}),
    )
    monkeypatch.setattr(requests, "post", lambda url, **kw: _json_response({"status": "queued"}))
    boundary = tmp_path / "boundary.geojson"
    boundary.write_text(
        json.dumps(
            {
                "type": "Polygon",
                "coordinates": [[[-71.0, -35.0], [-70.99, -35.0], [-70.99, -34.99], [-71.0, -34.99], [-71.0, -35.0]]],
            }
        ),
        encoding="utf-8",
    )

    rc = main(
        ["--locale", "es-AR", "check", "--boundary", str(boundary), "--farm-name", "F", "--farm-id", "1"]
    )

    assert rc == 2
    assert "Análisis pendiente." in capsys.readouterr().err
