"""
Application configuration.
All values come from environment variables (or `.env`).
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class RedisConfig(BaseSettings):
    """Redis connection used by the rate limiter."""

    model_config = SettingsConfigDict(env_prefix="REDIS_", env_file=".env", extra="ignore")

    host: str = "localhost"
    port: int = 6379
    password: str = ""
    db: int = 0

    @property
    def url(self) -> str:
        """Redis connection URL."""
        auth = f":{self.password}@" if self.password else ""
        return f"redis://{auth}{self.host}:{self.port}/{self.db}"


class RateLimitConfig(BaseSettings):
    """Default sliding window for rate limited handlers."""

    model_config = SettingsConfigDict(env_prefix="RATE_LIMIT_", env_file=".env", extra="ignore")

    default_limit: int = 60
    default_window_seconds: int = 60


class LoggingConfig(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="LOG_", env_file=".env", extra="ignore")

    level: str = "INFO"
    # "json" for production, anything else for colored console output
    format: str = "console"


class MetricsConfig(BaseSettings):
    """Prometheus metrics configuration."""

    model_config = SettingsConfigDict(env_prefix="METRICS_", env_file=".env", extra="ignore")

    enabled: bool = True
    namespace: str = "faultline"


class GatewayConfig(BaseSettings):
    """WebSocket gateway configuration."""

    model_config = SettingsConfigDict(env_prefix="GATEWAY_", env_file=".env", extra="ignore")

    path: str = "/socket"


class AppConfig(BaseSettings):
    """General application configuration."""

    model_config = SettingsConfigDict(env_prefix="APP_", env_file=".env", extra="ignore")

    name: str = "Faultline"
    debug: bool = False
    cors_origins: str = "http://localhost:3000,http://localhost:5173"

    @property
    def cors_origins_list(self) -> list[str]:
        """CORS origins as a list."""
        return [o.strip() for o in self.cors_origins.split(",")]


class Settings:
    """Aggregates every configuration group."""

    def __init__(self) -> None:
        self.redis = RedisConfig()
        self.rate_limit = RateLimitConfig()
        self.logging = LoggingConfig()
        self.metrics = MetricsConfig()
        self.gateway = GatewayConfig()
        self.app = AppConfig()


@lru_cache
def get_settings() -> Settings:
    """Return the cached settings singleton."""
    return Settings()


settings = get_settings()
