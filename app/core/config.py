from __future__ import annotations

import os
from functools import lru_cache
from dotenv import load_dotenv, find_dotenv

_env_path = find_dotenv(".env") or ".env"
load_dotenv(_env_path, override=True)


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


def _float_env(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except ValueError:
        return default


class Settings:
    """Central configuration (env driven)."""

    def __init__(self) -> None:
        # Supabase
        raw_url = os.getenv("SUPABASE_URL", "")
        self.supabase_url: str = raw_url.rstrip("/")
        self.supabase_anon_key: str = os.getenv("SUPABASE_ANON_KEY") or os.getenv("SUPABASE_KEY", "")
        self.supabase_service_role_key: str = (
            os.getenv("SUPABASE_SERVICE_ROLE_KEY")
            or os.getenv("SUPABASE_SERVICE_KEY")
            or ""
        )
        # Server-side writes bypass RLS when a service role key is configured
        self.supabase_key: str = self.supabase_service_role_key or self.supabase_anon_key
        # Database (migrations only)
        self.database_url: str = os.getenv("DATABASE_URL", "")
        # Code execution (Piston compatible)
        self.piston_base_url: str = os.getenv("PISTON_BASE_URL", "https://emkc.org/api/v2/piston").rstrip("/")
        self.execution_timeout_s: float = _float_env("EXECUTION_TIMEOUT_SECONDS", 10.0)
        self.execution_max_retries: int = max(1, _int_env("EXECUTION_MAX_RETRIES", 3))
        # Scoring
        self.leaderboard_size: int = max(1, _int_env("LEADERBOARD_SIZE", 50))
        # Auth
        self.auth_timeout_s: float = _float_env("AUTH_WHOAMI_TIMEOUT", 5.0)
        # App meta
        self.app_name: str = "Learnpath Scoring Engine"
        self.debug: bool = os.getenv("DEBUG", "False").lower() == "true"
        self.log_level: str = os.getenv("LOG_LEVEL", "DEBUG" if self.debug else "INFO").upper()
        self.allow_origins: list[str] = [
            o.strip().rstrip("/")
            for o in os.getenv("ALLOW_ORIGINS", "http://localhost:5173,http://localhost:3000").split(",")
            if o.strip()
        ]

    def get_database_url(self) -> str:
        return self.database_url


@lru_cache()
def get_settings() -> Settings:
    return Settings()
