from __future__ import annotations

import os


def database_url() -> str:
    url = os.getenv("DATABASE_URL")

    if not url:
        raise RuntimeError("DATABASE_URL environment variable is not set")

    return url


def pool_size() -> int:
    raw = os.getenv("DB_POOL_SIZE", "10")

    try:
        size = int(raw)
    except ValueError:
        raise RuntimeError(f"DB_POOL_SIZE must be an integer, got '{raw}'") from None

    if size <= 0:
        raise RuntimeError("DB_POOL_SIZE must be > 0")

    return size
