"""Application configuration using Pydantic Settings.

All configuration is loaded from environment variables.
No secrets are hardcoded.
"""

from enum import Enum
from functools import lru_cache

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class S3VectorSettings(BaseSettings):
    """Amazon S3 Vectors connection configuration.

    Explicit credentials are optional; when they are not set the default
    AWS credential chain (environment, shared config, instance role) applies.
    """

    model_config = SettingsConfigDict(env_prefix="S3VECTORS_")

    region: str | None = Field(
        default=None,
        description="AWS region of the vector bucket (required)",
    )
    vector_bucket_name: str | None = Field(
        default=None,
        description="Name of the S3 vector bucket",
    )
    access_key_id: str | None = Field(
        default=None,
        description="AWS access key ID",
    )
    secret_access_key: SecretStr | None = Field(
        default=None,
        description="AWS secret access key",
    )
    session_token: SecretStr | None = Field(
        default=None,
        description="AWS session token (temporary credentials only)",
    )
    endpoint_url: str | None = Field(
        default=None,
        description="Custom endpoint URL (alternate deployments or testing)",
    )
    batch_size: int = Field(
        default=10,
        gt=0,
        description="Vectors per PutVectors request",
    )
    validate_dimensions: bool = Field(
        default=False,
        description="Check embedding lengths against the index before writing",
    )


class Settings(BaseSettings):
    """Main application settings.

    Aggregates all configuration sections.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application settings
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )

    # Nested settings
    s3vectors: S3VectorSettings = Field(default_factory=S3VectorSettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Settings instance loaded from environment.
    """
    return Settings()
