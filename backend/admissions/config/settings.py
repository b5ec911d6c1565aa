"""Application Settings - Central Configuration"""
from functools import lru_cache
from typing import List, Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # MongoDB
    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db: str = "admissions_dev"
    mongo_timeout_ms: int = 5000  # Server selection / connect timeout
    mongo_socket_timeout_ms: int = 10000

    # Workflow
    transition_max_retries: int = Field(default=2, ge=0)  # Bounded retry after a lost status race
    sign_in_area: str = "/auth"
    area_registry_path: Optional[str] = None  # JSON file overriding the built-in areas

    # Server
    api_host: str = "127.0.0.1"
    api_port: int = 8000

    # Logging
    logs_path: str = "./logs"
    log_level: str = "INFO"

    # CORS
    cors_origins: str = "*"

    # Environment
    environment: str = "development"
    debug: bool = True

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins string to list"""
        return [origin.strip() for origin in self.cors_origins.split(",")]


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
