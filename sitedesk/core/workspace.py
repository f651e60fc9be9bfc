"""
workspace.py — One workspace per browser profile

A workspace bundles everything the old client kept per browser: the blob
store namespace, the change bus its tabs share, the toast surface, and an
EntityStore per entity type. HTTP clients pick theirs with X-Workspace-Id
and name their tab with X-Tab-Id.
"""

import re
import logging
import threading

from sitedesk.core.blob_store import open_blob_store
from sitedesk.core.entity_store import EntityStore, StoreSpec
from sitedesk.core.events import ChangeBus
from sitedesk.core.merge import by_id, by_name
from sitedesk.core.toasts import ToastLog
from sitedesk.seed_data import (
    DEFAULT_COMPANIES, DEFAULT_PERMISSIONS, DEFAULT_PROJECTS, DEFAULT_ROLES,
    DEFAULT_SUBPROJECTS, DEFAULT_TEAM_USERS,
)

log = logging.getLogger("sitedesk.workspace")

# ── Storage keys ─────────────────────────────────────────────────────────────
PROJECTS = "projects"
SUBPROJECTS = "subprojects"
ROLES = "userRoles"
PERMISSIONS = "projectPermissions"
COMPANIES = "companies"
TEAM_USERS = "manageTeamsUsers"
IS_AUTHENTICATED = "isAuthenticated"
USER_EMAIL = "userEmail"
SELECTED_PLAN = "selectedPlan"

STORE_SPECS = {
    PROJECTS: StoreSpec(
        key=PROJECTS, label="project", seeds=DEFAULT_PROJECTS, natural_key=by_name),
    # Sub-project names repeat across projects ("A wing"), so de-dup on id.
    SUBPROJECTS: StoreSpec(
        key=SUBPROJECTS, label="subproject", seeds=DEFAULT_SUBPROJECTS, natural_key=by_id),
    ROLES: StoreSpec(
        key=ROLES, label="role", seeds=DEFAULT_ROLES, natural_key=by_name,
        protected_edit_msg="Cannot edit system role",
        protected_delete_msg="Cannot delete system role"),
    PERMISSIONS: StoreSpec(
        key=PERMISSIONS, label="permission", seeds=DEFAULT_PERMISSIONS, natural_key=by_id,
        protected_delete_msg="Cannot delete default permission"),
    COMPANIES: StoreSpec(
        key=COMPANIES, label="company", seeds=DEFAULT_COMPANIES, natural_key=by_name),
    TEAM_USERS: StoreSpec(
        key=TEAM_USERS, label="user", seeds=DEFAULT_TEAM_USERS, natural_key=by_name,
        protected_edit_msg="Cannot edit default user",
        protected_delete_msg="Cannot delete default user"),
}

_ID_RE = re.compile(r"^[A-Za-z0-9_.-]{1,64}$")


class Workspace:

    def __init__(self, workspace_id: str, blobs=None):
        self.id = workspace_id
        self.blobs = blobs or open_blob_store(workspace_id)
        self.bus = ChangeBus()
        self.toasts = ToastLog()
        self.write_lock = threading.RLock()
        self.stores = {
            key: EntityStore(spec, self.blobs, self.bus, self.toasts, self.write_lock)
            for key, spec in STORE_SPECS.items()
        }
        # Chat sessions are page state, not persisted (see agents.chat_agent)
        self.agent_panel = None

    def store(self, key: str) -> EntityStore:
        return self.stores[key]

    def revisions(self) -> dict:
        return {key: self.blobs.revision(key) for key in STORE_SPECS}


# ── Registry ─────────────────────────────────────────────────────────────────
_registry = {}
_registry_lock = threading.Lock()


def normalize_id(raw: str) -> str:
    raw = (raw or "").strip()
    return raw if _ID_RE.match(raw) else "default"


def get_workspace(workspace_id: str = "default") -> Workspace:
    """Return the workspace for an id, creating it on first use."""
    workspace_id = normalize_id(workspace_id)
    with _registry_lock:
        ws = _registry.get(workspace_id)
        if ws is None:
            ws = Workspace(workspace_id)
            _registry[workspace_id] = ws
            log.info("Workspace opened: %s", workspace_id)
        return ws


def reset_workspaces():
    """Forget every open workspace (tests, storage backend switches)."""
    with _registry_lock:
        _registry.clear()


def open_workspaces() -> list:
    with _registry_lock:
        return sorted(_registry)
