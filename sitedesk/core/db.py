"""
sitedesk/core/db.py — SQLite Database Layer

Backs the workspace blob stores. Each workspace (one per browser profile
in the old client-only app) is a namespace in a single `blobs` table, so
several gunicorn workers can share the same data file.

TABLES:
  blobs — (namespace, key) → JSON text, with a per-key revision counter.
          Removed keys keep a tombstone row (value NULL) so revisions
          never go backwards.
"""

import os
import sqlite3
import logging
import threading
from contextlib import contextmanager

from sitedesk.core import paths

log = logging.getLogger("sitedesk.db")

_db_lock = threading.Lock()
_initialized = set()


# ── Connection factory ────────────────────────────────────────────────────────
@contextmanager
def get_db(db_path: str = None):
    """Thread-safe SQLite connection with WAL mode for multi-worker gunicorn."""
    path = db_path or paths.db_path()
    with _db_lock:
        conn = sqlite3.connect(path, timeout=30, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode=WAL")
        conn.execute("PRAGMA synchronous=NORMAL")
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()


# ── Schema ────────────────────────────────────────────────────────────────────
SCHEMA = """
CREATE TABLE IF NOT EXISTS blobs (
    namespace   TEXT NOT NULL,
    key         TEXT NOT NULL,
    value       TEXT,               -- NULL = removed (tombstone)
    revision    INTEGER NOT NULL DEFAULT 0,
    updated_at  TEXT NOT NULL,
    PRIMARY KEY (namespace, key)
);

CREATE INDEX IF NOT EXISTS idx_blobs_ns ON blobs(namespace);
"""


def init_db(db_path: str = None) -> str:
    """Create tables if missing. Safe to call repeatedly."""
    path = db_path or paths.db_path()
    if path in _initialized and os.path.exists(path):
        return path
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with get_db(path) as conn:
        conn.executescript(SCHEMA)
    _initialized.add(path)
    log.info("DB ready: %s", path)
    return path


def get_stats(db_path: str = None) -> dict:
    """Row counts for the health endpoint."""
    path = init_db(db_path)
    with get_db(path) as conn:
        row = conn.execute(
            "SELECT COUNT(DISTINCT namespace) AS workspaces, "
            "SUM(CASE WHEN value IS NOT NULL THEN 1 ELSE 0 END) AS live_keys, "
            "COALESCE(SUM(LENGTH(value)), 0) AS bytes FROM blobs"
        ).fetchone()
    return {
        "db_path": path,
        "workspaces": row["workspaces"] or 0,
        "keys": row["live_keys"] or 0,
        "bytes": row["bytes"] or 0,
    }


def startup(db_path: str = None) -> dict:
    """Initialize the database and return stats for the boot log."""
    path = init_db(db_path)
    return {"db_path": path, "stats": get_stats(path)}
