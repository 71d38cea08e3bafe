"""Small operating-system helpers."""

from __future__ import annotations

import os


def get_env(key: str, fallback: str) -> str:
    """Return the environment variable ``key``, or ``fallback`` when unset."""
    return os.environ.get(key, fallback)


def get_host_proc() -> str:
    """Return the proc filesystem root, honouring a non-empty HOST_PROC."""
    return os.environ.get("HOST_PROC") or "/proc"