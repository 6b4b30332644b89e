"""
Application configuration using Pydantic BaseSettings
"""

from typing import List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Application settings
    app_name: str = "Showdown Vote"
    app_env: str = "development"
    debug: bool = False

    # Database settings (no default: the service refuses to run without a store)
    database_url: str
    db_pool_size: int = 10
    db_max_overflow: int = 20
    run_migrations_on_startup: bool = True

    # Relay settings
    relay_key: Optional[str] = None
    max_snapshot_bytes: int = 50 * 1024

    # Upstream identifier shape accepted on the HTTP surface
    external_id_pattern: str = r"^[A-Za-z0-9]{15,18}$"

    # CORS settings
    cors_origins: str = ""

    # Error reporting
    sentry_dsn: Optional[str] = None

    class Config:
        env_file = ".env"
        case_sensitive = False

    @property
    def cors_origin_list(self) -> List[str]:
        """Configured CORS origins, empty when any origin is allowed"""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def is_production(self) -> bool:
        return self.app_env.lower() == "production"


# Global settings instance
settings = Settings()
