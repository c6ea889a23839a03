"""
Application configuration using Pydantic settings.

Configuration is loaded from environment variables with sensible defaults.
Using Pydantic's BaseSettings means we get:
- Type validation at startup (fail fast if config is wrong)
- Documentation of what's required vs optional
- Easy testing with different configurations

Mock modes enable local development without a Firebase project or a
Cloudinary account.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    """

    # API Configuration
    api_title: str = "Joe Learn API"
    api_version: str = "v1"
    port: int = Field(
        default=8000,
        description="Port the HTTP server listens on (PORT)."
    )

    # Firebase / Firestore
    firebase_service_account_path: str = Field(
        default="serviceAccountKey.json",
        description="Path to the Firebase service account key (JSON)."
    )
    firebase_app_name: str = Field(
        default="joe-learn",
        description="Name of the firebase_admin app instance owned by this process."
    )
    firestore_mock_mode: bool = Field(
        default=False,
        description="Use an in-memory document store instead of Firestore."
    )

    # Cloudinary
    cloudinary_cloud_name: str = Field(
        default="",
        description="Cloudinary cloud name. Public; returned to clients with each signature."
    )
    cloudinary_api_key: str = Field(
        default="",
        description="Cloudinary API key. Public; returned to clients with each signature."
    )
    cloudinary_api_secret: str = Field(
        default="",
        description="Cloudinary API secret. Never leaves the server."
    )
    storage_mock_mode: bool = Field(
        default=False,
        description="Use in-memory storage instead of Cloudinary. Signing still works."
    )

    # Upload destinations for the raw-file upload path
    video_folder: str = "joe-learn-videos"
    assessment_folder: str = "joe-learn-assessments"

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    # CORS
    cors_origins: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins. Any origin by default."
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse comma-separated CORS origins into a list."""
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    def validate_required_fields(self) -> list[str]:
        """
        Validate that required fields are set based on mock mode settings.

        Returns list of missing required fields. The Firebase key file is
        checked separately when it is loaded, since a path is always set.
        """
        missing = []

        if not self.storage_mock_mode:
            if not self.cloudinary_cloud_name:
                missing.append("CLOUDINARY_CLOUD_NAME")
            if not self.cloudinary_api_key:
                missing.append("CLOUDINARY_API_KEY")
            if not self.cloudinary_api_secret:
                missing.append("CLOUDINARY_API_SECRET")

        return missing


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache means we only load settings once per process.
    For tests, you can call get_settings.cache_clear() to reset.
    """
    return Settings()
