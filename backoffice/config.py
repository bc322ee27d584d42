# backoffice/config.py
"""
Application configuration using Pydantic-Settings.
All settings can be overridden via environment variables or .env file.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    # ── Deployment ────────────────────────────────────────────────────────
    DEPLOYMENT: str = "cars"    # cars | students

    # ── Database ──────────────────────────────────────────────────────────
    DATABASE_PATH: str = "database.sqlite"
    SNAPSHOT_FALLBACK_PATHS: list[str] = ["data/database.sqlite"]
    SNAPSHOT_URL: Optional[str] = None            # Remote snapshot used when no local file exists
    SNAPSHOT_FETCH_TIMEOUT: Optional[float] = None

    # ── Hosting ───────────────────────────────────────────────────────────
    EPHEMERAL_STORAGE: bool = False   # Memory-only store, no snapshot read/write
    VERCEL: Optional[str] = None      # "1" on Vercel, implies ephemeral storage

    # ── Security ──────────────────────────────────────────────────────────
    SECRET_KEY: str = "super-secret-key-change-in-production"
    SESSION_MAX_AGE: int = 24 * 60 * 60
    BCRYPT_ROUNDS: int = 10

    # ── Default account (seeded when the users table is empty) ────────────
    DEFAULT_ADMIN_NAME: str = "Admin"
    DEFAULT_ADMIN_EMAIL: str = "admin@school.com"
    DEFAULT_ADMIN_PASSWORD: str = "admin123"

    # ── Network ───────────────────────────────────────────────────────────
    CORS_ORIGINS: list[str] = ["http://localhost:3000"]

    # ── Logging ───────────────────────────────────────────────────────────
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"

    @property
    def is_ephemeral(self) -> bool:
        return self.EPHEMERAL_STORAGE or self.VERCEL == "1"

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
