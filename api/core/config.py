"""
Environment-driven settings.

Every getter reads the environment on call so tests can monkeypatch values
without reloading modules.
"""

from __future__ import annotations

import os
from pathlib import Path

DEFAULT_MAX_IMAGE_BYTES = 2 * 1024 * 1024  # 2 MiB


def env_str(name: str, default: str) -> str:
    return os.environ.get(name, default).strip() or default


def env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def env_bool(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name, "").strip().lower()
    if not raw:
        return default
    return raw in {"1", "true", "yes", "on"}


def app_name() -> str:
    return env_str("APP_NAME", "Storefront Admin")


def app_url() -> str:
    return env_str("APP_URL", "http://localhost:8000").rstrip("/")


def frontend_url() -> str:
    return env_str("FRONTEND_URL", "http://localhost:3000").rstrip("/")


def cors_origins() -> list[str]:
    raw = os.environ.get("CORS_ORIGINS", "").strip()
    if not raw:
        return [
            "http://localhost:3000",
            "http://127.0.0.1:3000",
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ]
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def storage_root() -> Path:
    return Path(env_str("STORAGE_ROOT", "storage/public"))


def max_image_bytes() -> int:
    value = env_int("MAX_IMAGE_BYTES", DEFAULT_MAX_IMAGE_BYTES)
    return value if value > 0 else DEFAULT_MAX_IMAGE_BYTES
