"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set all values explicitly.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database connection settings.

    Environment variables:
        WIT_DB_HOST: Database host (default: localhost)
        WIT_DB_PORT: Database port (default: 5432)
        WIT_DB_DATABASE: Database name (default: wit)
        WIT_DB_USERNAME: Database user (default: wit)
        WIT_DB_PASSWORD: Database password (required in production)
        WIT_DB_POOL_MIN_CONNECTIONS: Minimum connections in pool (default: 2)
        WIT_DB_POOL_MAX_CONNECTIONS: Maximum connections in pool (default: 10)
        WIT_DB_URL: Full SQLAlchemy async URL, overrides the fields above
    """

    model_config = SettingsConfigDict(
        env_prefix="WIT_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    database: str = Field(default="wit", description="Database name")
    username: str = Field(default="wit", description="Database username")
    password: SecretStr = Field(
        default=SecretStr(""),
        description="Database password",
    )
    pool_min_connections: int = Field(
        default=2,
        description="Minimum connections in pool",
        ge=1,
        le=100,
    )
    pool_max_connections: int = Field(
        default=10,
        description="Maximum connections in pool",
        ge=1,
        le=100,
    )
    url: str | None = Field(
        default=None,
        description="Full async database URL (e.g. sqlite+aiosqlite:///./wit.db)",
    )

    @model_validator(mode="after")
    def validate_pool_settings(self) -> "DatabaseSettings":
        """Validate pool max >= min."""
        if self.pool_max_connections < self.pool_min_connections:
            raise ValueError(
                f"pool_max_connections ({self.pool_max_connections}) must be >= "
                f"pool_min_connections ({self.pool_min_connections})"
            )
        return self

    @property
    def connection_string(self) -> str:
        """Generate a connection string (without password for logging)."""
        return f"postgresql://{self.username}@{self.host}:{self.port}/{self.database}"


class AuthSettings(BaseSettings):
    """Token manager key settings.

    Keys may be given inline (PEM) or as paths to PEM files. Inline values
    take precedence over paths. A configured private key switches the token
    manager to sign-and-verify mode.

    Environment variables:
        WIT_AUTH_PUBLIC_KEY: RSA public key (PEM)
        WIT_AUTH_PUBLIC_KEY_PATH: Path to the RSA public key (PEM)
        WIT_AUTH_PRIVATE_KEY: RSA private key (PEM)
        WIT_AUTH_PRIVATE_KEY_PATH: Path to the RSA private key (PEM)
    """

    model_config = SettingsConfigDict(
        env_prefix="WIT_AUTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    public_key: SecretStr | None = Field(default=None, description="Public key PEM")
    public_key_path: Path | None = Field(
        default=None, description="Path to public key PEM"
    )
    private_key: SecretStr | None = Field(
        default=None, description="Private key PEM"
    )
    private_key_path: Path | None = Field(
        default=None, description="Path to private key PEM"
    )

    def resolve_public_key_pem(self) -> str | None:
        """Return the public key PEM, reading the file if needed."""
        if self.public_key is not None:
            return self.public_key.get_secret_value()
        if self.public_key_path is not None:
            return self.public_key_path.read_text(encoding="utf-8")
        return None

    def resolve_private_key_pem(self) -> str | None:
        """Return the private key PEM, reading the file if needed."""
        if self.private_key is not None:
            return self.private_key.get_secret_value()
        if self.private_key_path is not None:
            return self.private_key_path.read_text(encoding="utf-8")
        return None


class Settings(BaseSettings):
    """Main application settings.

    Environment variables:
        WIT_APP_NAME: Application name
        WIT_DEBUG: Debug mode
        WIT_API_BASE_URL: Public base URL used to build JSON-API links
        WIT_NUMBER_ALLOCATION_MAX_ATTEMPTS: Retry budget for work item numbers
        WIT_CACHE_CONTROL_MAX_AGE: max-age for Cache-Control on GET responses
    """

    model_config = SettingsConfigDict(
        env_prefix="WIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = Field(default="WIT API", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")
    api_base_url: str = Field(
        default="http://localhost:8080",
        description="Public API base URL used in JSON-API links",
    )
    number_allocation_max_attempts: int = Field(
        default=5,
        description="Attempts before work item number allocation gives up",
        ge=1,
        le=50,
    )
    cache_control_max_age: int = Field(
        default=300,
        description="max-age (seconds) sent in Cache-Control headers",
        ge=0,
    )

    @field_validator("api_base_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        """Links are built as f"{base}/api/...", so drop a trailing slash."""
        return value.rstrip("/")

    @property
    def database(self) -> DatabaseSettings:
        """Get database settings."""
        return get_database_settings()

    @property
    def auth(self) -> AuthSettings:
        """Get auth settings."""
        return get_auth_settings()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


@lru_cache
def get_database_settings() -> DatabaseSettings:
    """Get cached database settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return DatabaseSettings()


@lru_cache
def get_auth_settings() -> AuthSettings:
    """Get cached auth settings."""
    return AuthSettings()
