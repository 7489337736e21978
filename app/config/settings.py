from typing import Optional
from urllib.parse import quote_plus

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseConfig(BaseSettings):
    """Database configuration"""

    host: str = "localhost"
    port: int = 5432
    username: str = "postgres"
    password: SecretStr = Field(default=SecretStr("postgres"))
    database: str = "airport_management_system"
    schema_name: Optional[str] = None
    url_override: Optional[str] = Field(
        default=None,
        validation_alias="DB_URL",
        description="Full SQLAlchemy URL; takes precedence over the discrete fields.",
    )
    serverless: bool = Field(
        default=False,
        description="If true, disable connection pooling so serverless DBs can pause.",
    )

    @property
    def url(self) -> str:
        """Get database URL"""
        if self.url_override:
            return self.url_override
        username = quote_plus(self.username)
        password = quote_plus(self.password.get_secret_value())
        return (
            "postgresql+asyncpg://"
            f"{username}:{password}"
            f"@{self.host}:{self.port}/{self.database}"
        )

    model_config = SettingsConfigDict(
        env_prefix="DB_",
        env_file=".env",
        secrets_dir=".secrets",
        case_sensitive=False,
        extra="ignore",
    )


class AuthConfig(BaseSettings):
    """Registration and credential policy."""

    default_role: str = "passenger"
    password_min_length: int = Field(default=6, ge=1)

    model_config = SettingsConfigDict(
        env_prefix="AUTH_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class OperationsConfig(BaseSettings):
    """Constants driving crew availability and route analytics."""

    rest_hours: float = Field(default=12.0, ge=0)
    active_window_hours: float = Field(
        default=2.0,
        ge=0,
        description="Flights departing earlier than now minus this window no longer block a crew member.",
    )
    flight_hours_lookback: float = Field(default=24.0, gt=0)
    on_time_tolerance_minutes: int = Field(default=15, ge=0)
    seat_capacity: int = Field(default=150, ge=1)
    popularity_flight_weight: float = Field(default=0.4, ge=0)
    popularity_passenger_weight: float = Field(default=0.6, ge=0)

    model_config = SettingsConfigDict(
        env_prefix="OPS_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class Settings(BaseSettings):
    """Application settings"""

    app_name: str = "Airport Operations Backend"
    app_version: str = "1.0.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000
    log_file: str = "logs/app.log"

    # Database
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)

    # Auth
    auth: AuthConfig = Field(default_factory=AuthConfig)

    # Operations
    operations: OperationsConfig = Field(default_factory=OperationsConfig)

    # CORS
    cors_origins: list[str] = ["*"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instance
settings = Settings()
