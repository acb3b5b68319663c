"""Runtime configuration helpers for asset engines."""
from __future__ import annotations

import os
from typing import List, Optional

SHEET_BACKENDS = {"memory", "filesystem", "firestore"}
NOTIFY_BACKENDS = {"memory", "smtp"}


def _get_env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(name, default)


def get_env() -> Optional[str]:
    return _get_env("ENV") or _get_env("APP_ENV")


def get_sheet_backend() -> str:
    backend = (_get_env("ASSET_SHEET_BACKEND") or "memory").lower()
    if backend not in SHEET_BACKENDS:
        raise RuntimeError(
            f"Unsupported ASSET_SHEET_BACKEND='{backend}'. Use one of {sorted(SHEET_BACKENDS)}."
        )
    return backend


def get_sheet_dir() -> str:
    return _get_env("ASSET_SHEET_DIR") or os.path.join(os.getcwd(), "var", "asset_sheets")


def get_sheet_url() -> str:
    return (_get_env("ASSET_SHEET_URL") or "").rstrip("/")


def get_firestore_project() -> Optional[str]:
    return _get_env("GCP_PROJECT") or _get_env("PROJECT_ID")


def get_notify_backend() -> str:
    backend = (_get_env("ASSET_NOTIFY_BACKEND") or "memory").lower()
    if backend not in NOTIFY_BACKENDS:
        raise RuntimeError(
            f"Unsupported ASSET_NOTIFY_BACKEND='{backend}'. Use one of {sorted(NOTIFY_BACKENDS)}."
        )
    return backend


def get_notify_recipients() -> List[str]:
    raw = _get_env("ASSET_NOTIFY_RECIPIENTS") or ""
    return [r.strip() for r in raw.split(",") if r.strip()]


def get_notify_sender() -> Optional[str]:
    return _get_env("ASSET_NOTIFY_SENDER") or _get_env("SMTP_USER")


def get_smtp_settings() -> dict:
    return {
        "host": _get_env("SMTP_HOST"),
        "port": int(_get_env("SMTP_PORT") or 587),
        "user": _get_env("SMTP_USER"),
        "password": _get_env("SMTP_PASSWORD"),
    }
