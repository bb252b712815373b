"""
Configuration settings for the item catalog service.

Loads environment variables from .env file and provides typed configuration.
"""

from typing import List
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # HTTP Configuration
    HOST: str = Field(default="0.0.0.0", description="Interface to bind")
    PORT: int = Field(default=9000, description="Port to listen on")
    FRONT_URL: str = Field(
        default="http://localhost:3000", description="Frontend origin allowed by CORS"
    )
    CORS_ORIGINS: List[str] = Field(
        default=[], description="Additional allowed CORS origins"
    )

    # Database Configuration
    DATABASE_URL: str = Field(
        default="sqlite:///./db/catalog.sqlite3", description="SQLite database URL"
    )
    DATABASE_ECHO: bool = Field(
        default=False, description="Echo SQL queries (for debugging)"
    )
    DATABASE_TIMEOUT: float = Field(
        default=5.0, description="Seconds a storage call waits on a locked database"
    )
    REQUEST_TIMEOUT: float = Field(
        default=5.0, description="Per-request budget in seconds for each storage call"
    )

    # Image Store Configuration
    IMAGE_DIR: str = Field(
        default="./images", description="Directory for content-addressed images"
    )
    IMAGE_EXTENSION: str = Field(
        default=".jpg", description="Extension appended to image content hashes"
    )
    DEFAULT_IMAGE: str = Field(
        default="default.jpg", description="Image served when a reference is unknown"
    )
    MAX_UPLOAD_SIZE: int = Field(
        default=10 * 1024 * 1024,  # 10 MB
        description="Maximum image upload size in bytes",
    )

    # Logging Configuration
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False

    @property
    def allowed_origins(self) -> List[str]:
        return [self.FRONT_URL, *[o for o in self.CORS_ORIGINS if o != self.FRONT_URL]]


# Global settings instance
settings = Settings()
