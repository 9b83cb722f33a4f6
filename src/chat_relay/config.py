"""
Configuration settings for Chat Relay.

All settings are loaded from environment variables with sensible defaults.
Use .env file for local development (see .env.example).

Settings are read once when the application is created and are immutable
afterwards.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )
    
    # === Application ===
    APP_NAME: str = "Chat Relay"
    APP_VERSION: str = "0.1.0"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    HOST: str = "0.0.0.0"
    PORT: int = 5001
    
    # === Upstream (Gemini) ===
    GEMINI_API_KEY: Optional[str] = None
    GEMINI_MODEL: str = "gemini-1.5-flash"
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta"
    UPSTREAM_TIMEOUT: float = 30.0  # seconds
    
    # === Retry ===
    RETRY_MAX_ATTEMPTS: int = 3
    RETRY_BASE_DELAY_MS: int = 600  # delay = base * attempt_index
    
    # === HTTP ===
    CLIENT_ORIGIN: str = "http://localhost:5173"  # Comma-separated allow-list
    MAX_BODY_BYTES: int = 1024 * 1024
    
    # === Monitoring ===
    PROMETHEUS_ENABLED: bool = True
    
    @property
    def allowed_origins(self) -> list[str]:
        """Origins accepted for cross-origin requests (exact match)."""
        return [origin.strip() for origin in self.CLIENT_ORIGIN.split(",") if origin.strip()]
    
    @property
    def has_api_key(self) -> bool:
        return bool(self.GEMINI_API_KEY)
