"""
api/cache.py – Lightweight TTL in-memory cache for summary responses
=====================================================================
Usage:
    from api.cache import get_cached, set_cached, invalidate_prefix

    set_cached("txn_summary:all", data, ttl=60)
    data = get_cached("txn_summary:all")      # None if expired/missing
    invalidate_prefix("txn_summary:")         # after any transaction write
"""
from __future__ import annotations

import threading
import time
from typing import Any, Optional

TRANSACTION_SUMMARY_PREFIX = "txn_summary:"
ACCOUNT_SUMMARY_PREFIX = "account_summary:"

_store: dict[str, tuple[float, Any]] = {}   # key → (expires_at, value)
_lock  = threading.Lock()


def get_cached(key: str) -> Optional[Any]:
    """Return cached value or None if missing/expired."""
    with _lock:
        entry = _store.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if time.monotonic() > expires_at:
            del _store[key]
            return None
        return value


def set_cached(key: str, value: Any, ttl: int = 60) -> None:
    """Store a value with a TTL (seconds). A TTL of 0 stores nothing."""
    if ttl <= 0:
        return
    with _lock:
        _store[key] = (time.monotonic() + ttl, value)


def invalidate(key: str) -> None:
    with _lock:
        _store.pop(key, None)


def invalidate_prefix(prefix: str) -> None:
    """Remove all keys that start with prefix."""
    with _lock:
        for k in list(_store):
            if k.startswith(prefix):
                del _store[k]


def clear() -> None:
    with _lock:
        _store.clear()
