"""Configuration management for the FusionSolar relay."""

from pydantic_settings import BaseSettings
from pydantic import AliasChoices, Field
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Runtime
    environment: str = Field(
        default="development",
        validation_alias=AliasChoices("NODE_ENV", "ENVIRONMENT"),
    )
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=3001, alias="PORT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # FusionSolar northbound API
    fusionsolar_base_url: str = Field(
        default="https://intl.fusionsolar.huawei.com/thirdData",
        alias="FUSIONSOLAR_BASE_URL",
    )
    fusionsolar_timeout: int = Field(default=30, alias="FUSIONSOLAR_TIMEOUT")

    # Frontend
    # Railway sets FRONTEND_URL for the deployed app
    frontend_url: Optional[str] = Field(default=None, alias="FRONTEND_URL")
    static_dir: str = Field(default="build", alias="STATIC_DIR")

    # API Settings
    api_title: str = "FusionSolar Relay"
    api_version: str = "1.0.0"

    class Config:
        env_file = ".env"
        extra = "ignore"
        populate_by_name = True

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def allowed_origins(self) -> list[str]:
        """Explicit CORS origins for the current environment."""
        if self.is_production:
            return [self.frontend_url] if self.frontend_url else []
        return ["http://localhost:3000", "http://localhost:3001"]


# Global settings instance
settings = Settings()
