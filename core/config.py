"""
Runtime configuration.

Read from environment variables (a .env file is loaded by the entry points).

    K1_MAIL_DIR       Directory of exported .eml files (default ./mail)
    K1_MAIL_LIMIT     Most recent messages to load (default 50)
    K1_CENTURY_BASE   Added to two-digit subject years (default 2000)
    K1_CORS_ORIGINS   Comma-separated origins for the web client
    PORT              HTTP port (default 8000)
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from core.messages import DEFAULT_LIMIT
from core.subject import DEFAULT_CENTURY_BASE

DEFAULT_MAIL_DIR = "./mail"
DEFAULT_CORS_ORIGINS = ("http://localhost:3000",)
DEFAULT_PORT = 8000


def _env_int(env: dict, key: str, default: int) -> int:
    value = env.get(key)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{key} must be an integer, got {value!r}") from None


@dataclass(frozen=True)
class Settings:
    mail_dir: Path = Path(DEFAULT_MAIL_DIR)
    mail_limit: int = DEFAULT_LIMIT
    century_base: int = DEFAULT_CENTURY_BASE
    cors_origins: tuple[str, ...] = field(default=DEFAULT_CORS_ORIGINS)
    port: int = DEFAULT_PORT

    @classmethod
    def from_env(cls, env: Optional[dict] = None) -> "Settings":
        """
        Build settings from environment variables.

        Raises:
            ValueError: If an integer setting isn't an integer
        """
        env = os.environ if env is None else env

        origins = env.get("K1_CORS_ORIGINS")
        cors_origins = (
            tuple(o.strip() for o in origins.split(",") if o.strip())
            if origins
            else DEFAULT_CORS_ORIGINS
        )

        return cls(
            mail_dir=Path(env.get("K1_MAIL_DIR") or DEFAULT_MAIL_DIR),
            mail_limit=_env_int(env, "K1_MAIL_LIMIT", DEFAULT_LIMIT),
            century_base=_env_int(env, "K1_CENTURY_BASE", DEFAULT_CENTURY_BASE),
            cors_origins=cors_origins,
            port=_env_int(env, "PORT", DEFAULT_PORT),
        )
