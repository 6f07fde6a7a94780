"""Application configuration settings."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Final

BASE_DIR: Final[Path] = Path(__file__).resolve().parent.parent
DATA_DIR: Final[Path] = BASE_DIR / "data"

DEFAULT_DATABASE_URL: Final[str] = f"sqlite:///{(DATA_DIR / 'planner.db').as_posix()}"
DATABASE_URL: Final[str] = os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)
SQLALCHEMY_ECHO: Final[bool] = os.getenv("SQLALCHEMY_ECHO") == "1"

# Signed-cookie session settings
SESSION_SECRET: Final[str] = os.getenv("SESSION_SECRET", "weekly-scheduler-secret")
SESSION_MAX_AGE: Final[int] = int(os.getenv("SESSION_MAX_AGE", 86400))
SESSION_HTTPS_ONLY: Final[bool] = os.getenv("SESSION_HTTPS_ONLY") == "1"

SEED_DEMO_DATA: Final[bool] = os.getenv("SEED_DEMO_DATA", "1") == "1"
SCHOOL_NAME: Final[str] = os.getenv("SCHOOL_NAME", "Royal American School")
LOG_LEVEL: Final[str] = os.getenv("LOG_LEVEL", "INFO").upper()
CORS_ORIGINS: Final[list[str]] = [
    origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()
]

# The default SQLite file lives under DATA_DIR.
if DATABASE_URL == DEFAULT_DATABASE_URL:
    DATA_DIR.mkdir(parents=True, exist_ok=True)
