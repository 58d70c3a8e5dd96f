"""
Configuration settings for the resilient client.

All settings are loaded from environment variables with sensible defaults.
Use .env file for local development.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Application ===
    APP_NAME: str = "Resilient Client"
    APP_VERSION: str = "0.1.0"
    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = "development"  # "production" switches logs to JSON

    # === Target Service ===
    BASE_URL: str = "http://localhost:4502"
    HTTP_USER: str | None = None  # No user means no authentication
    HTTP_PASSWORD: str | None = None
    HTTP_TIMEOUT: float = 30.0  # seconds, per request
    FOLLOW_REDIRECTS: bool = True

    # === Retry Schedule (read path) ===
    RETRY_POLL_DELAY_MS: int = 0
    RETRY_POLL_INTERVAL_MS: int = 1000
    RETRY_MULTIPLIER: float = 2.0
    RETRY_TIMEOUT_MS: int = 30000
    RETRY_ON: list[str] = ["client", "io"]  # ErrorKind values treated as transient

    # === Verification Schedule (write path) ===
    VERIFY_POLL_DELAY_MS: int = 2000  # Propagation latency before the first check
    VERIFY_POLL_INTERVAL_MS: int = 1000
    VERIFY_MULTIPLIER: float = 2.0
    VERIFY_TIMEOUT_MS: int = 30000
    VERIFY_RETRY_ON: list[str] = ["client", "io"]

    # === HTTP Logging ===
    HTTP_LOGGING_ENABLED: bool = True
    HTTP_LOG_REQUEST_HEADERS: bool = False
    HTTP_LOG_REQUEST_ENTITY: bool = False
    HTTP_LOG_RESPONSE_HEADERS: bool = False
    HTTP_LOG_RESPONSE_ENTITY: bool = False
    HTTP_LOG_EXCLUDED_HEADERS: list[str] = ["Cookie"]

    # === Monitoring ===
    PROMETHEUS_ENABLED: bool = True


# Global settings instance
settings = Settings()
