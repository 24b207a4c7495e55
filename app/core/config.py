"""
Application configuration.

Loads settings from environment variables and .env file.
All configuration is centralized here, no scattered magic strings.
"""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["development", "production", "test"]


class Settings(BaseSettings):
    """Application settings loaded from environment.

    Attributes:
        project_name: Display name for the API.
        version: Current API version string.
        environment: Runtime mode. Only "development" exposes stack traces
            in error responses.
        debug: Enable debug mode (serves the docs). Must be False in production.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        host: Interface the server binds to.
        port: Port the server listens on.
        rate_limit_enabled: Switch rate limiting on or off.
        rate_limit_default: Default rate limit for all endpoints.
        rate_limit_heavy: Rate limit for compute-heavy endpoints.
        api_keys: Keys accepted for regular users (read, write).
        admin_api_keys: Keys granted the admin role (read, write, delete).
        error_rate_threshold: Errors per minute over the last hour above
            which the service reports itself as degraded.
        recent_errors_limit: How many recent errors the metrics snapshot lists.
        seed_demo_products: Start the catalog with the demo products.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    project_name: str = "Catalog API"
    version: str = "0.1.0"
    environment: Environment = "development"
    debug: bool = False
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000
    rate_limit_enabled: bool = True
    rate_limit_default: str = "60/minute"
    rate_limit_heavy: str = "10/minute"

    api_keys: list[str] = ["dev-key-12345", "test-key-67890"]
    admin_api_keys: list[str] = ["admin-key-abcdef"]

    error_rate_threshold: float = 2.0
    recent_errors_limit: int = 10
    seed_demo_products: bool = True


settings = Settings()
