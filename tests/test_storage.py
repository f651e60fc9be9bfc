"""
tests/test_storage.py — Blob stores, entity stores and the seed/user merge
Run: python -m pytest tests/test_storage.py -v
"""
import json

import pytest

from sitedesk.core.blob_store import MemoryBlobStore, SqliteBlobStore, open_blob_store
from sitedesk.core.entity_store import EntityStore, QUOTA_WARNING, StoreSpec, new_id
from sitedesk.core.errors import ProtectedRecordError, RecordNotFound, StorageQuotaError
from sitedesk.core.events import ChangeBus
from sitedesk.core.merge import by_id, by_name, merge_records, name_exists, unique_names
from sitedesk.core.toasts import ToastLog
from sitedesk.core.workspace import PROJECTS, ROLES, get_workspace


@pytest.fixture(params=["memory", "sqlite"])
def blobs(request):
    if request.param == "memory":
        return MemoryBlobStore("t")
    return SqliteBlobStore("t")


SEEDS = [{"id": "1", "name": "Alpha"}, {"id": "2", "name": "Beta"}]


@pytest.fixture
def store(blobs):
    spec = StoreSpec(key="things", label="thing", seeds=SEEDS,
                     protected_delete_msg="Cannot delete default thing")
    return EntityStore(spec, blobs, ChangeBus(), ToastLog())


# ─── Blob Store ─────────────────────────────────────────────────────────────

class TestBlobStore:

    def test_missing_key_is_none(self, blobs):
        assert blobs.get_item("nope") is None
        assert blobs.revision("nope") == 0

    def test_set_get_remove(self, blobs):
        blobs.set_item("k", "v1")
        assert blobs.get_item("k") == "v1"
        assert blobs.keys() == ["k"]
        blobs.remove_item("k")
        assert blobs.get_item("k") is None
        assert blobs.keys() == []

    def test_revision_bumps_on_every_write(self, blobs):
        blobs.set_item("k", "a")
        blobs.set_item("k", "b")
        assert blobs.revision("k") == 2
        blobs.remove_item("k")
        assert blobs.revision("k") == 3
        blobs.set_item("k", "c")
        assert blobs.revision("k") == 4

    def test_namespaces_are_isolated(self, blobs):
        other = type(blobs)("other")
        blobs.set_item("k", "mine")
        assert other.get_item("k") is None

    def test_usage_bytes(self, blobs):
        blobs.set_item("ab", "cdef")
        assert blobs.usage_bytes() == 6

    def test_quota_rejects_and_keeps_old_value(self):
        small = MemoryBlobStore("q", quota_bytes=20)
        small.set_item("k", "x" * 10)
        with pytest.raises(StorageQuotaError):
            small.set_item("k", "y" * 30)
        assert small.get_item("k") == "x" * 10

    def test_quota_counts_replacement_not_sum(self):
        small = MemoryBlobStore("q", quota_bytes=20)
        small.set_item("k", "x" * 15)
        small.set_item("k", "y" * 15)  # replaces, still 16 bytes total
        assert small.get_item("k") == "y" * 15

    def test_open_blob_store_backend(self, monkeypatch):
        monkeypatch.setenv("SITEDESK_STORAGE_BACKEND", "memory")
        assert isinstance(open_blob_store("a"), MemoryBlobStore)
        monkeypatch.setenv("SITEDESK_STORAGE_BACKEND", "sqlite")
        assert isinstance(open_blob_store("a"), SqliteBlobStore)

    def test_sqlite_shared_between_instances(self):
        # Two stores on the same namespace see each other's writes (multi-process case)
        a, b = SqliteBlobStore("shared"), SqliteBlobStore("shared")
        a.set_item("k", "from-a")
        assert b.get_item("k") == "from-a"
        assert b.revision("k") == 1


# ─── Merge ──────────────────────────────────────────────────────────────────

class TestMerge:

    def test_seeds_first_then_user_rows(self):
        merged = merge_records(SEEDS, [{"id": "9", "name": "Gamma"}])
        assert [r["name"] for r in merged] == ["Alpha", "Beta", "Gamma"]

    def test_case_insensitive_collision_keeps_seed(self):
        merged = merge_records(SEEDS, [{"id": "9", "name": "  alpha "}])
        assert [r["id"] for r in merged] == ["1", "2"]

    def test_by_id_keeps_same_names(self):
        merged = merge_records(SEEDS, [{"id": "9", "name": "Alpha"}], key=by_id)
        assert len(merged) == 3

    def test_by_name(self):
        assert by_name({"name": " Site Engineer "}) == "site engineer"

    def test_unique_names_preserves_order(self):
        assert unique_names(["b", "a"], ["a", "", "c"]) == ["b", "a", "c"]

    def test_name_exists_excludes_id(self):
        rows = [{"id": "5", "name": "Roof"}]
        assert name_exists(rows, "ROOF")
        assert not name_exists(rows, "roof", exclude_id="5")


# ─── Entity Store ───────────────────────────────────────────────────────────

class TestEntityStore:

    def test_empty_store_shows_seeds(self, store):
        assert store.load() == []
        assert [r["id"] for r in store.all()] == ["1", "2"]

    def test_append_persists_only_user_rows(self, store):
        store.append({"name": "Gamma"})
        stored = json.loads(store.blobs.get_item("things"))
        assert [r["name"] for r in stored] == ["Gamma"]
        assert [r["name"] for r in store.all()] == ["Alpha", "Beta", "Gamma"]

    def test_save_filters_seed_rows(self, store):
        store.save(store.all() + [{"id": "77", "name": "Delta"}])
        assert [r["id"] for r in store.load()] == ["77"]

    def test_create_delete_sequence_round_trips(self, store):
        ids = []
        for name in ("a", "b", "c", "d"):
            record = {"name": name}
            store.append(record)
            ids.append(record["id"])
        store.remove(ids[1])
        store.remove(ids[3])
        persisted = json.loads(store.blobs.get_item("things"))
        assert [r["name"] for r in persisted] == ["a", "c"]
        assert store.load() == persisted

    def test_removing_last_row_removes_key(self, store):
        record = {"name": "Solo"}
        store.append(record)
        store.remove(record["id"])
        assert store.blobs.get_item("things") is None
        assert "things" not in store.blobs.keys()

    def test_malformed_json_treated_as_empty(self, store):
        store.blobs.set_item("things", "{not json")
        assert store.load() == []
        assert [r["id"] for r in store.all()] == ["1", "2"]

    def test_non_list_json_treated_as_empty(self, store):
        store.blobs.set_item("things", json.dumps({"id": "x"}))
        assert store.load() == []

    def test_seed_delete_protected(self, store):
        with pytest.raises(ProtectedRecordError, match="Cannot delete default thing"):
            store.remove("1")

    def test_seed_update_protected(self, store):
        with pytest.raises(ProtectedRecordError, match="Cannot edit default thing"):
            store.update("2", {"name": "x"})

    def test_update_and_missing(self, store):
        record = {"name": "Old"}
        store.append(record)
        updated = store.update(record["id"], {"name": "New", "id": "hijack"})
        assert updated["name"] == "New"
        assert updated["id"] == record["id"]
        with pytest.raises(RecordNotFound):
            store.update("does-not-exist", {"name": "x"})
        with pytest.raises(RecordNotFound):
            store.remove("does-not-exist")

    def test_structured_writes_do_not_lose_updates(self, blobs):
        # Two store objects over the same blobs: each append re-reads first
        spec = StoreSpec(key="things", label="thing")
        a = EntityStore(spec, blobs, ChangeBus(), ToastLog())
        b = EntityStore(spec, blobs, ChangeBus(), ToastLog())
        a.append({"name": "from-a"})
        b.append({"name": "from-b"})
        assert sorted(r["name"] for r in a.load()) == ["from-a", "from-b"]

    def test_save_publishes_change(self, store):
        events = []
        store.bus.subscribe("things", events.append, tab_id="tab-1")
        store.append({"name": "Gamma"}, origin_tab="tab-1")
        assert len(events) == 1
        assert events[0].signal == "thingsUpdated"
        assert events[0].revision == store.revision()

    def _small_store(self, toasts, bus=None):
        spec = StoreSpec(key="things", label="thing")
        return EntityStore(spec, MemoryBlobStore("q", quota_bytes=80), bus or ChangeBus(), toasts)

    def test_quota_exceeded_save_returns_false_and_warns(self):
        toasts = ToastLog()
        small = self._small_store(toasts)
        assert small.save([{"id": "9", "name": "ok"}]) is True
        assert small.save([{"id": "9", "name": "x" * 100}]) is False
        assert small.load() == [{"id": "9", "name": "ok"}]
        last = toasts.recent()[-1]
        assert last["type"] == "warning"
        assert last["message"] == QUOTA_WARNING

    def test_quota_exceeded_append_raises_after_one_toast(self):
        toasts, bus = ToastLog(), ChangeBus()
        small = self._small_store(toasts, bus)
        small.append({"name": "ok"})
        before = small.load()
        events = []
        bus.subscribe("things", events.append)
        with pytest.raises(StorageQuotaError) as exc:
            small.append({"name": "x" * 100})
        assert exc.value.toasted is True
        assert exc.value.status_code == 507
        assert exc.value.message == QUOTA_WARNING
        assert small.load() == before
        assert events == []
        assert [t["message"] for t in toasts.recent()] == [QUOTA_WARNING]

    def test_quota_exceeded_update_raises(self):
        small = self._small_store(ToastLog())
        row = small.append({"name": "ok"})
        with pytest.raises(StorageQuotaError):
            small.update(row["id"], {"name": "x" * 100})
        assert small.get(row["id"])["name"] == "ok"

    def test_ids_strictly_increase(self):
        ids = [int(new_id()) for _ in range(50)]
        assert ids == sorted(set(ids))


# ─── Workspace stores ───────────────────────────────────────────────────────

class TestWorkspaceStores:

    def test_workspace_has_every_entity_store(self, ws):
        assert set(ws.stores) == {"projects", "subprojects", "userRoles",
                                  "projectPermissions", "companies", "manageTeamsUsers"}

    def test_same_id_same_workspace(self):
        assert get_workspace("abc") is get_workspace("abc")
        assert get_workspace("abc") is not get_workspace("xyz")

    def test_bad_workspace_id_falls_back_to_default(self):
        assert get_workspace("../../etc").id == "default"

    def test_role_seed_names_are_protected(self, ws):
        with pytest.raises(ProtectedRecordError, match="Cannot delete system role"):
            ws.store(ROLES).remove("1")

    def test_revisions_cover_entity_keys(self, ws):
        ws.store(PROJECTS).append({"name": "Lakeshire"})
        revs = ws.revisions()
        assert revs["projects"] == 1
        assert revs["userRoles"] == 0
