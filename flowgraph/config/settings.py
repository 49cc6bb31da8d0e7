"""
Environment-aware configuration settings for the workflow engine.

Supports dev, test, and prod environments with appropriate defaults.
"""

from enum import Enum
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Supported deployment environments."""

    DEV = "dev"
    TEST = "test"
    PROD = "prod"


class PostgresSettings(BaseSettings):
    """PostgreSQL connection settings."""

    model_config = SettingsConfigDict(env_prefix="POSTGRES_")

    host: str = Field(default="localhost", description="PostgreSQL server hostname")
    port: int = Field(default=5432, description="PostgreSQL server port")
    database: str = Field(default="flowgraph", description="Database name")
    user: str = Field(default="postgres", description="Database user")
    password: str = Field(default="postgres", description="Database password")
    pool_size: int = Field(default=10, description="Connection pool size")
    max_overflow: int = Field(default=20, description="Max overflow connections")
    pool_timeout: float = Field(default=10.0, description="Pool timeout in seconds (fail fast)")

    @property
    def url(self) -> str:
        """Generate PostgreSQL connection URL."""
        return (
            f"postgresql+asyncpg://{self.user}:{self.password}"
            f"@{self.host}:{self.port}/{self.database}"
        )


class WeatherSettings(BaseSettings):
    """Outbound weather API client settings."""

    model_config = SettingsConfigDict(env_prefix="WEATHER_")

    timeout: float = Field(default=10.0, gt=0, description="Request timeout (seconds)")
    default_temperature_path: str = Field(
        default="current_weather.temperature",
        description="Dotted path of the temperature field in the API response",
    )


class MailerSettings(BaseSettings):
    """Outbound mail settings."""

    model_config = SettingsConfigDict(env_prefix="MAILER_")

    from_address: str = Field(
        default="weather-alerts@checkbox.com",
        description="Sender address for alert emails",
    )


class EngineSettings(BaseSettings):
    """Execution engine behaviour."""

    model_config = SettingsConfigDict(env_prefix="ENGINE_")

    max_steps: Optional[int] = Field(
        default=None,
        ge=1,
        description="Abort a run after this many steps. Unset means no limit (cyclic graphs loop forever)",
    )
    strict_node_validation: bool = Field(
        default=False,
        description="Call validate() on every node instance before traversal",
    )
    persist_inline_workflows: bool = Field(
        default=True,
        description="Store workflow definitions supplied inline with an execution request",
    )


class ApiSettings(BaseSettings):
    """HTTP API settings."""

    model_config = SettingsConfigDict(env_prefix="API_")

    prefix: str = Field(default="/api/v1", description="Route prefix")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3003"],
        description="Allowed CORS origins",
    )


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        case_sensitive=False,  # POSTGRES_HOST and postgres_host both work
        extra="ignore",        # Ignore unknown environment variables
    )

    # Application
    app_name: str = Field(default="Flowgraph Workflow Engine")
    environment: Environment = Field(default=Environment.DEV)
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")

    # Sub-settings
    postgres: PostgresSettings = Field(default_factory=PostgresSettings)
    weather: WeatherSettings = Field(default_factory=WeatherSettings)
    mailer: MailerSettings = Field(default_factory=MailerSettings)
    engine: EngineSettings = Field(default_factory=EngineSettings)
    api: ApiSettings = Field(default_factory=ApiSettings)

    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v: str | Environment) -> Environment:
        """Validate and convert environment string to enum."""
        if isinstance(v, Environment):
            return v
        return Environment(v.lower())

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == Environment.DEV


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
