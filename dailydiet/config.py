from __future__ import annotations

import os
from pathlib import Path
from typing import Any, List


def _env_bool(name: str) -> bool:
    return (os.environ.get(name) or "").strip() in {"1", "true", "True", "yes"}


class Settings:
    """Centralized configuration for the daily diet backend.

    Values come from ``DAILYDIET_*`` environment variables; keyword overrides win,
    which is how tests point an app at a throwaway database.
    """

    def __init__(self, **overrides: Any) -> None:
        base_dir = Path(__file__).resolve().parent
        repo_root = base_dir.parent
        data_root_default = repo_root / "data"

        self.data_root: Path = Path(
            os.environ.get("DAILYDIET_DATA_ROOT") or data_root_default
        ).expanduser()
        self.db_path: Path = Path(
            os.environ.get("DAILYDIET_DB_PATH") or (self.data_root / "dailydiet.db")
        ).expanduser()
        # In production you MUST set DAILYDIET_JWT_SECRET.
        self.jwt_secret: str = os.environ.get("DAILYDIET_JWT_SECRET") or "dev-secret-change-me"
        self.token_ttl_seconds: int = int(os.environ.get("DAILYDIET_TOKEN_TTL_SECONDS") or "86400")
        self.cookie_secure: bool = _env_bool("DAILYDIET_COOKIE_SECURE")
        self.password_iterations: int = int(os.environ.get("DAILYDIET_PASSWORD_ITERATIONS") or "200000")
        self.log_level: str = (os.environ.get("DAILYDIET_LOG_LEVEL") or "INFO").upper()
        self.host: str = os.environ.get("DAILYDIET_HOST") or "127.0.0.1"
        self.port: int = int(os.environ.get("DAILYDIET_PORT") or "8000")

        cors = os.environ.get("DAILYDIET_CORS_ORIGINS", "*")
        if cors.strip() == "*":
            self.cors_origins: List[str] = ["*"]
        else:
            self.cors_origins = [
                origin.strip() for origin in cors.split(",") if origin.strip()
            ]

        for key, value in overrides.items():
            if not hasattr(self, key):
                raise TypeError(f"Unknown setting: {key}")
            if key in {"data_root", "db_path"}:
                value = Path(value).expanduser()
            setattr(self, key, value)
