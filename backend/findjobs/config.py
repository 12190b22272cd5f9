"""Configuration settings for the Find Jobs backend."""

from functools import lru_cache
from urllib.parse import quote_plus

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # MongoDB
    db_user: str | None = None
    db_password: str | None = None
    db_cluster: str = "cluster0.5pbosvq.mongodb.net"
    db_name: str = "find-jobs"
    mongodb_uri: str | None = None  # Optional - overrides the assembled Atlas URI

    # JWT
    jwt_secret_key: str = Field(validation_alias="ACCESS_TOKEN")  # Required - no default for security
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 60 * 24  # 1 day

    # App
    port: int = 5000
    environment: str = "development"
    log_level: str = "INFO"
    # CORS: Allowed origins for cross-origin requests
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:5174",
        "https://findjob-22996.web.app",
    ]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"  # Ignore extra env vars not in model

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def database_uri(self) -> str:
        """Connection string for the job board cluster."""
        if self.mongodb_uri:
            return self.mongodb_uri
        if not self.db_user or not self.db_password:
            raise ValueError("Either MONGODB_URI or DB_USER and DB_PASSWORD must be set")
        return (
            f"mongodb+srv://{quote_plus(self.db_user)}:{quote_plus(self.db_password)}"
            f"@{self.db_cluster}/?retryWrites=true&w=majority&appName=Cluster0"
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
