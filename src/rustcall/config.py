"""Environment configuration for the rustcall runtime."""

from __future__ import annotations

import os
from pathlib import Path


def _raw_getenv(key: str, default: str = "") -> str:
    return os.getenv(key, default)


def library_path() -> Path | None:
    raw = _raw_getenv("RUSTCALL_LIB").strip()
    if not raw:
        return None
    path = Path(raw)
    if path.exists():
        return path
    return None


def library_dir() -> Path | None:
    raw = _raw_getenv("RUSTCALL_LIB_DIR").strip()
    if not raw:
        return None
    path = Path(raw)
    if path.is_dir():
        return path
    return None


def preferred_wire() -> str | None:
    raw = _raw_getenv("RUSTCALL_WIRE").strip().lower()
    return raw or None
