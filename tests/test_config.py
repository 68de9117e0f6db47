"""Tests for settings parsing."""

from __future__ import annotations

from solar_dashboard.config import (
    SECRETS_ENV_VAR,
    Settings as DashboardSettings,
    load_secrets_file,
    secrets_paths,
)
from solar_relay.config import Settings as RelaySettings


def test_relay_defaults(monkeypatch) -> None:
    for name in ("NODE_ENV", "ENVIRONMENT", "PORT", "FRONTEND_URL"):
        monkeypatch.delenv(name, raising=False)

    settings = RelaySettings(_env_file=None)

    assert settings.environment == "development"
    assert settings.port == 3001
    assert settings.fusionsolar_base_url == "https://intl.fusionsolar.huawei.com/thirdData"
    assert not settings.is_production
    assert "http://localhost:3000" in settings.allowed_origins


def test_relay_production_from_node_env(monkeypatch) -> None:
    monkeypatch.setenv("NODE_ENV", "production")
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("FRONTEND_URL", "https://solar.example.com")

    settings = RelaySettings(_env_file=None)

    assert settings.is_production
    assert settings.port == 8080
    assert settings.allowed_origins == ["https://solar.example.com"]


def test_dashboard_station_codes(monkeypatch) -> None:
    monkeypatch.setenv("STATION_CODES", " NE=1, ,NE=2 ")
    monkeypatch.setenv("POLL_INTERVAL", "900")

    settings = DashboardSettings(_env_file=None)

    assert settings.station_codes == ["NE=1", "NE=2"]
    assert settings.poll_interval == 900


def test_load_secrets_file(tmp_path, monkeypatch) -> None:
    secrets = tmp_path / ".secrets"
    secrets.write_text(
        "# comment\n\nFUSIONSOLAR_USERNAME=api-user\nFUSIONSOLAR_SYSTEM_CODE = a=b\n"
        "OTHER_TOKEN=ignored\n"
    )
    monkeypatch.delenv(SECRETS_ENV_VAR, raising=False)
    monkeypatch.chdir(tmp_path)

    assert load_secrets_file() == {
        "FUSIONSOLAR_USERNAME": "api-user",
        "FUSIONSOLAR_SYSTEM_CODE": "a=b",
    }


def test_secrets_path_from_environment(tmp_path, monkeypatch) -> None:
    secrets = tmp_path / "dashboard.secrets"
    secrets.write_text("FUSIONSOLAR_USERNAME=\"quoted user\"\nFUSIONSOLAR_SYSTEM_CODE='code'\n")
    monkeypatch.setenv(SECRETS_ENV_VAR, str(secrets))

    assert secrets_paths() == [secrets]
    assert load_secrets_file() == {
        "FUSIONSOLAR_USERNAME": "quoted user",
        "FUSIONSOLAR_SYSTEM_CODE": "code",
    }


def test_missing_secrets_file(tmp_path) -> None:
    assert load_secrets_file(str(tmp_path / "absent")) == {}
