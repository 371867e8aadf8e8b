from functools import lru_cache
from typing import Literal, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Global application settings."""

    # Application
    ENVIRONMENT: Literal["local", "development", "production", "test"] = "local"
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str
    DB_POOL_SIZE: int = 20
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800

    # Auth
    # Placeholder secret keeps local/test runs from failing. Real deployments
    # must override via env.
    JWT_SECRET: str = "test-jwt-secret"
    JWT_ALGORITHM: str = "HS256"

    # Gateway
    GATEWAY_URL: str = "http://localhost:8000"
    REDIS_URL: str = "memory://"
    RATE_LIMIT_DEFAULT: str = "100/minute"
    CORS_ORIGINS: list[str] = ["http://localhost:3000"]

    # Microservices URLs
    CLUBS_SERVICE_URL: str = "http://clubs-service:8001"
    MEMBERS_SERVICE_URL: str = "http://members-service:8002"
    EQUIPMENT_SERVICE_URL: str = "http://equipment-service:8003"

    # Directory defaults
    DEFAULT_RADIUS_KM: float = 50
    NEARBY_MAX_RADIUS_KM: float = 500
    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 100

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @field_validator("DATABASE_URL")
    @classmethod
    def assemble_db_connection(cls, v: Optional[str]) -> str:
        if isinstance(v, str):
            if v.startswith("postgresql://"):
                return v.replace("postgresql://", "postgresql+psycopg://", 1)
        return v


@lru_cache
def get_settings() -> Settings:
    """
    Return the global settings instance, cached.
    """
    return Settings()
