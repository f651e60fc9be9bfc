"""
blob_store.py — Per-workspace key-value blob storage

The server-side stand-in for the browser's local storage: string keys,
string (JSON) values, a byte quota per workspace, and a revision counter
per key so pollers can tell whether anything changed.

Usage:
    from sitedesk.core.blob_store import open_blob_store

    blobs = open_blob_store("default")
    blobs.set_item("projects", json.dumps([...]))
    raw = blobs.get_item("projects")        # str or None
    blobs.remove_item("projects")
    blobs.revision("projects")              # bumps on every set/remove
"""

import threading
import logging
from datetime import datetime

from sitedesk.core import db
from sitedesk.core.errors import StorageQuotaError
from sitedesk.core.settings import get_int, get_setting

log = logging.getLogger("sitedesk.blob_store")


def _size(key: str, value: str) -> int:
    return len(key.encode("utf-8")) + len(value.encode("utf-8"))


class BlobStore:
    """Interface shared by the SQLite and in-memory stores."""

    def __init__(self, namespace: str, quota_bytes: int = 0):
        self.namespace = namespace
        self.quota_bytes = quota_bytes

    def get_item(self, key: str):
        raise NotImplementedError

    def set_item(self, key: str, value: str):
        raise NotImplementedError

    def remove_item(self, key: str):
        raise NotImplementedError

    def keys(self) -> list:
        raise NotImplementedError

    def revision(self, key: str) -> int:
        raise NotImplementedError

    def usage_bytes(self) -> int:
        return sum(_size(k, self.get_item(k) or "") for k in self.keys())

    def _check_quota(self, key: str, value: str):
        if not self.quota_bytes:
            return
        current = self.get_item(key)
        used = self.usage_bytes() - (_size(key, current) if current is not None else 0)
        needed = used + _size(key, value)
        if needed > self.quota_bytes:
            raise StorageQuotaError(
                f"Storage quota exceeded for '{key}': {needed} > {self.quota_bytes} bytes")


class MemoryBlobStore(BlobStore):
    """Process-local store. Used in tests and single-process dev runs."""

    def __init__(self, namespace: str, quota_bytes: int = 0):
        super().__init__(namespace, quota_bytes)
        self._data = {}
        self._revs = {}
        self._lock = threading.Lock()

    def get_item(self, key):
        with self._lock:
            return self._data.get(key)

    def set_item(self, key, value):
        self._check_quota(key, value)
        with self._lock:
            self._data[key] = value
            self._revs[key] = self._revs.get(key, 0) + 1

    def remove_item(self, key):
        with self._lock:
            if key in self._data:
                del self._data[key]
                self._revs[key] = self._revs.get(key, 0) + 1

    def keys(self):
        with self._lock:
            return list(self._data)

    def revision(self, key):
        with self._lock:
            return self._revs.get(key, 0)


class SqliteBlobStore(BlobStore):
    """Blob store backed by the shared `blobs` table."""

    def __init__(self, namespace: str, quota_bytes: int = 0, db_path: str = None):
        super().__init__(namespace, quota_bytes)
        self.db_path = db.init_db(db_path)

    def get_item(self, key):
        with db.get_db(self.db_path) as conn:
            row = conn.execute(
                "SELECT value FROM blobs WHERE namespace=? AND key=?",
                (self.namespace, key)).fetchone()
        return row["value"] if row else None

    def set_item(self, key, value):
        self._check_quota(key, value)
        now = datetime.now().isoformat()
        with db.get_db(self.db_path) as conn:
            conn.execute("""
                INSERT INTO blobs (namespace, key, value, revision, updated_at)
                VALUES (?, ?, ?, 1, ?)
                ON CONFLICT(namespace, key) DO UPDATE SET
                    value=excluded.value,
                    revision=blobs.revision + 1,
                    updated_at=excluded.updated_at
            """, (self.namespace, key, value, now))

    def remove_item(self, key):
        now = datetime.now().isoformat()
        with db.get_db(self.db_path) as conn:
            conn.execute("""
                UPDATE blobs SET value=NULL, revision=revision + 1, updated_at=?
                WHERE namespace=? AND key=? AND value IS NOT NULL
            """, (now, self.namespace, key))

    def keys(self):
        with db.get_db(self.db_path) as conn:
            rows = conn.execute(
                "SELECT key FROM blobs WHERE namespace=? AND value IS NOT NULL ORDER BY key",
                (self.namespace,)).fetchall()
        return [r["key"] for r in rows]

    def revision(self, key):
        with db.get_db(self.db_path) as conn:
            row = conn.execute(
                "SELECT revision FROM blobs WHERE namespace=? AND key=?",
                (self.namespace, key)).fetchone()
        return row["revision"] if row else 0

    def usage_bytes(self):
        with db.get_db(self.db_path) as conn:
            row = conn.execute(
                "SELECT COALESCE(SUM(LENGTH(CAST(key AS BLOB)) + LENGTH(CAST(value AS BLOB))), 0) AS n "
                "FROM blobs WHERE namespace=? AND value IS NOT NULL",
                (self.namespace,)).fetchone()
        return row["n"]


def open_blob_store(namespace: str, backend: str = None, quota_bytes: int = None) -> BlobStore:
    """Build the configured blob store for a workspace namespace."""
    backend = backend or get_setting("storage_backend")
    if quota_bytes is None:
        quota_bytes = get_int("storage_quota_bytes")
    if backend == "memory":
        return MemoryBlobStore(namespace, quota_bytes)
    if backend != "sqlite":
        log.warning("Unknown storage backend %r, falling back to sqlite", backend)
    return SqliteBlobStore(namespace, quota_bytes)
