"""Application configuration with comprehensive validation."""
from typing import Optional, Literal
from functools import lru_cache
from pydantic import Field, field_validator, model_validator, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with production-grade validation."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "Project Evaluation Platform"
    APP_VERSION: str = "1.0.0"
    APP_ENV: Literal["development", "staging", "production"] = "development"
    DEBUG: bool = False
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    LOG_FORMAT: Literal["json", "console"] = "json"

    # API
    API_V1_PREFIX: str = "/api/v1"

    # PocketBase document store
    POCKETBASE_URL: str = "http://127.0.0.1:8090"
    POCKETBASE_TOKEN: Optional[SecretStr] = None
    POCKETBASE_EVALUATIONS_COLLECTION: str = "evaluations"
    POCKETBASE_TIMEOUT_SECONDS: float = Field(default=10.0, gt=0, le=120)

    # Listing
    EVALUATIONS_PAGE_SIZE: int = Field(default=50, ge=1, le=500)

    # Redis
    REDIS_URL: str = "redis://localhost:6379/0"
    CACHE_ENABLED: bool = True
    CACHE_TTL_EVALUATION: int = Field(default=120, ge=1)       # 2 minutes
    CACHE_TTL_EVALUATION_LIST: int = Field(default=60, ge=1)   # 1 minute

    @field_validator("POCKETBASE_URL")
    @classmethod
    def validate_pocketbase_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("POCKETBASE_URL must start with http:// or https://")
        return v.rstrip("/")

    @model_validator(mode="after")
    def validate_production_settings(self):
        """Ensure production has required security settings."""
        if self.APP_ENV == "production":
            if self.DEBUG:
                raise ValueError("DEBUG must be False in production")
            if self.POCKETBASE_TOKEN is None:
                raise ValueError("POCKETBASE_TOKEN is required in production")
        return self


@lru_cache
def get_settings() -> Settings:
    return Settings()

settings = get_settings()
