from __future__ import annotations

import os
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv, find_dotenv

_env_path = find_dotenv(".env") or ".env"
load_dotenv(_env_path, override=False)


def _optional_int(name: str) -> Optional[int]:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return None
    value = int(raw)
    return value if value > 0 else None


class Settings:
    """Central configuration (env driven)."""

    def __init__(self) -> None:
        # Judge0 / external
        self.judge0_api_url: str = os.getenv("JUDGE0_URI") or os.getenv("JUDGE0_BASE_URL", "")
        self.judge0_api_key: str = os.getenv("JUDGE0_KEY", "")
        self.judge0_host: str = os.getenv("JUDGE0_HOST", "")
        self.judge0_timeout_s: float = float(os.getenv("JUDGE0_TIMEOUT_S", "10"))
        # Polling: fixed back-off, unbounded unless a max attempt count is configured
        self.judge0_poll_interval_s: float = float(os.getenv("JUDGE0_POLL_INTERVAL_S", "1.0"))
        self.judge0_poll_max_attempts: Optional[int] = _optional_int("JUDGE0_POLL_MAX_ATTEMPTS")
        # App meta
        self.app_name: str = "Code Runner"
        self.debug: bool = os.getenv("DEBUG", "False").lower() == "true"
        self.log_level: str = os.getenv("LOG_LEVEL", "DEBUG" if self.debug else "INFO").upper()
        self.allow_origins: str = os.getenv(
            "ALLOW_ORIGINS",
            "http://localhost:3000,http://127.0.0.1:3000",
        )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
