"""
Application settings loaded from environment variables.
"""

from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings
from sqlalchemy.engine import URL


class Settings(BaseSettings):
    environment: str = "development"

    # ── Database ─────────────────────────────────────────────────────────
    database_url: str = ""              # full SQLAlchemy URL, wins over DB_* parts
    db_driver: str = "postgresql+asyncpg"
    db_host: str = "localhost"
    db_port: Optional[int] = None
    db_user: str = ""
    db_password: str = ""
    db_name: str = "games"
    db_pool_size: int = 10
    db_max_overflow: int = 0
    db_pool_timeout: int = 30           # seconds a request waits for a free connection
    db_create_tables: bool = False

    # ── Security Secrets ──────────────────────────────────────────────────
    jwt_secret: str = ""
    jwt_expiry_seconds: int = 3600      # 1 hour
    bcrypt_rounds: int = 10

    # ── RAWG upstream ────────────────────────────────────────────────────
    rawg_api_key: str = ""
    rawg_base_url: str = "https://api.rawg.io/api"
    upstream_timeout_seconds: float = 30

    # ── Server ───────────────────────────────────────────────────────────
    port: int = 3001
    host: str = "0.0.0.0"
    debug: bool = False
    frontend_url: str = "http://localhost:5173"
    cors_origins: List[str] = ["http://localhost:5173", "http://127.0.0.1:5173"]

    model_config = {
        "env_file": ".env",
        "case_sensitive": False,
        "extra": "ignore",
    }

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def allowed_origins(self) -> List[str]:
        """Production serves a single frontend; development allows the Vite dev hosts."""
        if self.is_production:
            return [self.frontend_url]
        return list(self.cors_origins)

    @property
    def sqlalchemy_url(self) -> str:
        if self.database_url:
            return self.database_url
        url = URL.create(
            self.db_driver,
            username=self.db_user or None,
            password=self.db_password or None,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
        )
        return url.render_as_string(hide_password=False)


@lru_cache
def get_settings() -> Settings:
    """Settings for the running process, read once."""
    return Settings()
