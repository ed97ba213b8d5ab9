"""
Centralized configuration for idsync.

All settings are loaded from environment variables with sensible defaults.
Collaborator settings are namespaced (e.g., SUPABASE_*, CLERK_*).
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_RESERVED_USERNAMES = [
    "admin",
    "administrator",
    "root",
    "system",
    "support",
    "help",
    "api",
    "null",
    "undefined",
]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "idsync"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False
    cors_origins: list[str] = ["http://localhost:8081", "http://localhost:19006"]

    # Supabase
    supabase_url: str = ""
    supabase_anon_key: str = ""
    supabase_service_role_key: str = ""
    users_table: str = "users"

    # Clerk
    clerk_frontend_api: str = ""
    clerk_client_token: str = ""
    credential_template: str = "supabase"
    credential_refresh_seconds: float = 50.0  # must stay below the token lifetime

    # Username validation
    username_debounce_seconds: float = 0.5
    username_min_length: int = 3
    username_max_length: int = 30
    reserved_usernames: list[str] = DEFAULT_RESERVED_USERNAMES


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
