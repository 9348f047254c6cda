from __future__ import annotations

from pathlib import Path

from farm_eligibility.config import DEFAULT_AREA_LIMIT_HA, Settings, resolve_report_root


def test_settings_from_env(monkeypatch) -> None:
    monkeypatch.setenv("FARM_ELIGIBILITY_API_URL", "https://api.example")
    monkeypatch.setenv("FARM_ELIGIBILITY_API_TOKEN", "tok")
    monkeypatch.setenv("FARM_ELIGIBILITY_AREA_LIMIT_HA", "1000")
    monkeypatch.setenv("FARM_ELIGIBILITY_LOCALE", "es-AR")
    monkeypatch.setenv("FARM_ELIGIBILITY_REPORT_ROOT", "/tmp/reports")

    settings = Settings.from_env()

    assert settings.api_url == "https://api.example"
    assert settings.api_token == "tok"
    assert settings.area_limit_ha == 1000.0
    assert settings.locale == "es-AR"
    assert settings.report_root == Path("/tmp/reports")


def test_invalid_numbers_fall_back_to_defaults(monkeypatch) -> None:
    monkeypatch.setenv("FARM_ELIGIBILITY_AREA_LIMIT_HA", "lots")
    monkeypatch.setenv("FARM_ELIGIBILITY_API_TIMEOUT", "-5")

    settings = Settings.from_env()

    assert settings.area_limit_ha == DEFAULT_AREA_LIMIT_HA
    assert settings.api_timeout_seconds == 120.0


def test_explicit_overrides_win(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("FARM_ELIGIBILITY_LOCALE", "es-AR")

    settings = Settings.from_env(locale="en-US", report_root=str(tmp_path), api_token=None)

    assert settings.locale == "en-US"
    assert settings.report_root == tmp_path


def test_resolve_report_root_default(monkeypatch) -> None:
    monkeypatch.delenv("FARM_ELIGIBILITY_REPORT_ROOT", raising=False)

    assert resolve_report_root() == Path("reports_out")
