"""
entity_store.py — Named record collections over a workspace blob store

Each entity type (projects, roles, ...) lives under one fixed storage key
as a JSON array. Seed rows are code-defined and never written to storage:
they are merged back in at read time, so the persisted array is always
exactly the user-created rows.

Writes go through append/update/remove, which take the workspace write
lock, re-read the latest array and save the result. Two services mutating
the same key therefore never lose each other's change.

Error handling:
  - unparseable stored JSON → treated as "no user data" (logged, not surfaced)
  - quota exceeded on save  → warning toast, write dropped; save() returns False,
                              append/extend/update/remove raise StorageQuotaError
  - edit/delete of a seed   → ProtectedRecordError
"""

import json
import time
import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Callable, List

from sitedesk.core.errors import ProtectedRecordError, RecordNotFound, StorageQuotaError
from sitedesk.core.events import signal_for
from sitedesk.core.merge import by_name, merge_records

log = logging.getLogger("sitedesk.entity_store")

QUOTA_WARNING = ("Storage limit exceeded. Some data may not be saved. "
                 "Please clear old records or use smaller images.")

_id_lock = threading.Lock()
_last_id = 0


def new_id() -> str:
    """Millisecond timestamp id, strictly increasing within the process."""
    global _last_id
    with _id_lock:
        candidate = int(time.time() * 1000)
        if candidate <= _last_id:
            candidate = _last_id + 1
        _last_id = candidate
        return str(candidate)


@dataclass
class StoreSpec:
    key: str
    label: str
    seeds: List[dict] = field(default_factory=list)
    natural_key: Callable = by_name
    protected_edit_msg: str = ""
    protected_delete_msg: str = ""

    @property
    def signal(self) -> str:
        return signal_for(self.key)

    @property
    def seed_ids(self) -> frozenset:
        return frozenset(str(s["id"]) for s in self.seeds)


class EntityStore:

    def __init__(self, spec: StoreSpec, blobs, bus, toasts, lock=None):
        self.spec = spec
        self.blobs = blobs
        self.bus = bus
        self.toasts = toasts
        self._lock = lock or threading.RLock()

    @property
    def key(self) -> str:
        return self.spec.key

    @contextmanager
    def locked(self):
        """Hold the workspace write lock across a validate-then-write sequence."""
        with self._lock:
            yield self

    # ── Reads ────────────────────────────────────────────────────────────────

    def load(self) -> list:
        """User rows from storage; [] when missing or unparseable."""
        raw = self.blobs.get_item(self.key)
        if raw is None:
            return []
        try:
            parsed = json.loads(raw)
        except (TypeError, ValueError) as e:
            log.warning("Ignoring unparseable '%s' blob (%d bytes): %s", self.key, len(raw), e)
            return []
        if not isinstance(parsed, list):
            log.warning("Ignoring '%s' blob: expected a list, got %s", self.key, type(parsed).__name__)
            return []
        return [r for r in parsed if isinstance(r, dict)]

    def all(self) -> list:
        """Seeds first, user rows after, de-duplicated on the natural key."""
        seeds = [dict(s) for s in self.spec.seeds]
        return merge_records(seeds, self.load(), key=self.spec.natural_key)

    def get(self, record_id):
        record_id = str(record_id)
        for record in self.all():
            if str(record.get("id")) == record_id:
                return record
        return None

    def is_seed(self, record_id) -> bool:
        return str(record_id) in self.spec.seed_ids

    def revision(self) -> int:
        return self.blobs.revision(self.key)

    # ── Writes ───────────────────────────────────────────────────────────────

    def _write(self, records: list, origin_tab: str):
        """Persist the non-seed subset and publish. Raises StorageQuotaError
        (warning toast already pushed) when the write was dropped."""
        user_rows = [r for r in records if str(r.get("id")) not in self.spec.seed_ids]
        with self._lock:
            try:
                if user_rows:
                    self.blobs.set_item(self.key, json.dumps(user_rows, default=str))
                else:
                    self.blobs.remove_item(self.key)
            except StorageQuotaError as e:
                log.warning("Dropped write to '%s': %s", self.key, e)
                self.toasts.warning(QUOTA_WARNING)
                raise StorageQuotaError(QUOTA_WARNING, toasted=True) from e
            revision = self.blobs.revision(self.key)
        self.bus.publish(self.key, origin_tab=origin_tab, revision=revision)

    def save(self, records: list, origin_tab: str = "default") -> bool:
        """Persist the non-seed subset, replacing the stored array.

        An empty subset removes the key instead of storing "[]".
        Returns False when the write was dropped for quota reasons.
        """
        try:
            self._write(records, origin_tab)
        except StorageQuotaError:
            return False
        return True

    # append/extend/update/remove raise StorageQuotaError on a dropped write,
    # so callers never report a record that was not stored.

    def append(self, record: dict, origin_tab: str = "default") -> dict:
        record.setdefault("id", new_id())
        with self._lock:
            rows = self.load()
            rows.append(record)
            self._write(rows, origin_tab)
        return record

    def extend(self, records: list, origin_tab: str = "default") -> list:
        with self._lock:
            rows = self.load()
            for record in records:
                record.setdefault("id", new_id())
                rows.append(record)
            self._write(rows, origin_tab)
        return records

    def update(self, record_id, changes: dict, origin_tab: str = "default") -> dict:
        """Apply `changes` to one user row. Returns the updated record."""
        record_id = str(record_id)
        if self.is_seed(record_id):
            raise ProtectedRecordError(self.spec.protected_edit_msg or f"Cannot edit default {self.spec.label}")
        with self._lock:
            rows = self.load()
            for row in rows:
                if str(row.get("id")) == record_id:
                    row.update({k: v for k, v in changes.items() if k != "id"})
                    updated = row
                    break
            else:
                raise RecordNotFound(f"{self.spec.label.capitalize()} not found")
            self._write(rows, origin_tab)
        return updated

    def remove(self, record_id, origin_tab: str = "default") -> dict:
        """Delete one user row. Returns the removed record."""
        record_id = str(record_id)
        if self.is_seed(record_id):
            raise ProtectedRecordError(self.spec.protected_delete_msg or f"Cannot delete default {self.spec.label}")
        with self._lock:
            rows = self.load()
            kept = [r for r in rows if str(r.get("id")) != record_id]
            if len(kept) == len(rows):
                raise RecordNotFound(f"{self.spec.label.capitalize()} not found")
            removed = next(r for r in rows if str(r.get("id")) == record_id)
            self._write(kept, origin_tab)
        return removed

    def clear(self, origin_tab: str = "default") -> bool:
        """Drop every user row (seeds reappear on the next read)."""
        return self.save([], origin_tab)
