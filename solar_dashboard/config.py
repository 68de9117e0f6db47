"""Configuration management for the dashboard poller."""

from pydantic_settings import BaseSettings
from pydantic import AliasChoices, Field
from typing import Dict, List, Optional
from pathlib import Path
import os


SECRETS_ENV_VAR = "SOLAR_DASHBOARD_SECRETS"
SECRET_PREFIX = "FUSIONSOLAR_"


def secrets_paths(secrets_path: Optional[str] = None) -> List[Path]:
    """Candidate secrets files, most specific first."""
    explicit = secrets_path or os.environ.get(SECRETS_ENV_VAR)
    if explicit:
        return [Path(explicit)]
    return [
        Path(".secrets"),
        Path.home() / ".config" / "solar-dashboard" / "secrets",
        Path("/app/.secrets"),  # Docker container path
    ]


def load_secrets_file(secrets_path: Optional[str] = None) -> Dict[str, str]:
    """Read FusionSolar credentials from the first secrets file found.

    Same KEY=value format as .env; only FUSIONSOLAR_* keys are returned and
    surrounding quotes are stripped from values.
    """
    for path in secrets_paths(secrets_path):
        if not path.is_file():
            continue
        secrets = {}
        for line in path.read_text().splitlines():
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, value = (part.strip() for part in line.split("=", 1))
            if key.startswith(SECRET_PREFIX):
                secrets[key] = value.strip("\"'")
        return secrets
    return {}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Relay
    relay_url: str = Field(default="http://localhost:3001", alias="RELAY_URL")
    relay_timeout: int = Field(default=30, alias="RELAY_TIMEOUT")
    relay_port: int = Field(default=3001, alias="RELAY_PORT")

    # FusionSolar credentials (normally from .secrets)
    fusionsolar_username: Optional[str] = Field(default=None, alias="FUSIONSOLAR_USERNAME")
    fusionsolar_system_code: Optional[str] = Field(default=None, alias="FUSIONSOLAR_SYSTEM_CODE")

    # Polling interval (seconds)
    # FusionSolar rate-limits getStationRealKpi aggressively, keep this at 10 min or more
    poll_interval: int = Field(default=600, alias="POLL_INTERVAL")

    # Plant selection - format: "NE=123,NE=456". Empty selects every plant.
    station_codes_raw: str = Field(default="", alias="STATION_CODES")

    environment: str = Field(
        default="development",
        validation_alias=AliasChoices("ENVIRONMENT", "NODE_ENV"),
    )

    class Config:
        env_file = ".env"
        extra = "ignore"
        populate_by_name = True

    @property
    def station_codes(self) -> List[str]:
        """Parse the plant selection into a list of station codes."""
        return [code.strip() for code in self.station_codes_raw.split(",") if code.strip()]

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


def create_settings() -> Settings:
    """Create settings instance, loading credentials from the secrets file."""
    # The secrets file is authoritative for credentials
    for key, value in load_secrets_file().items():
        os.environ[key] = value

    return Settings()


# Global settings instance
settings = create_settings()
