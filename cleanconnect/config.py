"""Application settings loaded from the environment."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_JWT_SECRET = "dev_secret_key_change_me"


class Settings(BaseSettings):
    """Runtime configuration for the marketplace API.

    Values come from environment variables (case-insensitive) or a local
    ``.env`` file.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: str = "sqlite+aiosqlite:///./cleanconnect.db"
    database_pool_size: int = 20
    database_max_overflow: int = 10

    jwt_secret: str = DEFAULT_JWT_SECRET
    jwt_algorithm: str = "HS256"
    jwt_expires_days: int = 30
    bcrypt_rounds: int = 10

    log_level: str = "INFO"
    log_format: str = "json"
    cors_allowed_origins: str = "*"

    smtp_host: str | None = None
    smtp_port: int = 587
    smtp_user: str | None = None
    smtp_password: str | None = None
    smtp_use_tls: bool = True
    from_name: str = "CleanConnect"
    from_email: str = "no-reply@cleanconnect.ng"
    frontend_url: str = "http://localhost:5173"
    password_reset_ttl_minutes: int = 60

    assistant_config_file: str | None = None
    assistant_base_url: str | None = None
    assistant_model: str = "gemini-2.5-flash"
    assistant_api_key: str | None = None

    allow_admin_seeding: bool = False

    @property
    def allowed_origins(self) -> list[str]:
        """CORS origins as a list."""
        return [origin.strip() for origin in self.cors_allowed_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
