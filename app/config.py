# app/config.py
"""
Application configuration using Pydantic-Settings.
All settings can be overridden via environment variables or .env file.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    # ── Database (local action audit log) ─────────────────────────────────
    DATABASE_URL: str = "sqlite:///./visitor_portal.db"

    # ── Network ───────────────────────────────────────────────────────────
    BACKEND_IP: str = "127.0.0.1"
    BACKEND_PORT: int = 8080

    # ── Security ──────────────────────────────────────────────────────────
    API_KEY: Optional[str] = None   # Set in .env to enable auth on API endpoints

    # ── Upstream pass-request API ─────────────────────────────────────────
    PASS_API_BASE_URL: str = "http://127.0.0.1:9000"
    PASS_API_TOKEN: Optional[str] = None
    PASS_API_TIMEOUT_SECONDS: float = 30.0
    PASS_REQUEST_FETCH_LIMIT: int = 10000

    # ── Listing ───────────────────────────────────────────────────────────
    LIST_PAGE_SIZE: int = 20          # "Load more" step for visitor lists

    # ── Logging ───────────────────────────────────────────────────────────
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = None     # Defaults to <repo>/logs

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
