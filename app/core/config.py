from urllib.parse import urlparse

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    database_url: str = Field(alias="DATABASE_URL")

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Trailing window used by the maintenance summary's "recent" flag
    recent_maintenance_months: int = Field(
        default=6, ge=0, alias="RECENT_MAINTENANCE_MONTHS"
    )

    # Comma-separated URLs of the dashboards allowed to call the API
    cors_origins: str = Field(default="", alias="CORS_ORIGINS")

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.strip().upper() if isinstance(v, str) else v

    @property
    def cors_origin_list(self) -> list[str]:
        """Origins (scheme://host[:port]) parsed from CORS_ORIGINS; paths are dropped."""
        origins = []
        for url in self.cors_origins.split(","):
            parsed = urlparse(url.strip())
            if parsed.scheme and parsed.netloc:
                origins.append(f"{parsed.scheme}://{parsed.netloc}")
        return origins

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()
