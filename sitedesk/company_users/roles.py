"""User roles. The five seeded roles are always present and cannot be changed."""

import logging

from sitedesk.core.csv_export import build_csv, export_filename
from sitedesk.core.errors import ProtectedRecordError, ValidationError
from sitedesk.core.merge import name_exists
from sitedesk.core.table import TableState
from sitedesk.core.workspace import ROLES

log = logging.getLogger("sitedesk.company_users.roles")

SEARCH_FIELDS = ("name",)


def all_roles(ws) -> list:
    return ws.store(ROLES).all()


def role_names(ws) -> list:
    return [r["name"] for r in all_roles(ws)]


def list_roles(ws, state: TableState = None) -> dict:
    state = state or TableState()
    return state.apply(all_roles(ws), SEARCH_FIELDS).to_dict()


def _clean_name(name) -> str:
    name = str(name or "").strip()
    if not name:
        raise ValidationError("Please enter a role name")
    return name


def create_role(ws, name: str, origin_tab: str = "default") -> dict:
    name = _clean_name(name)
    store = ws.store(ROLES)
    with store.locked():
        if name_exists(store.all(), name):
            raise ValidationError("A role with this name already exists")
        role = {"name": name, "isSystemRole": False}
        store.append(role, origin_tab)
    log.info("Role created: %s ws=%s", name, ws.id)
    ws.toasts.success("Role created successfully")
    return role


def rename_role(ws, role_id, name: str, origin_tab: str = "default") -> dict:
    name = _clean_name(name)
    store = ws.store(ROLES)
    with store.locked():
        if store.is_seed(role_id):
            raise ProtectedRecordError(store.spec.protected_edit_msg)
        if name_exists(store.all(), name, exclude_id=role_id):
            raise ValidationError("A role with this name already exists")
        role = store.update(role_id, {"name": name}, origin_tab)
    ws.toasts.success("Role updated successfully")
    return role


def delete_role(ws, role_id, origin_tab: str = "default") -> dict:
    removed = ws.store(ROLES).remove(role_id, origin_tab)
    log.info("Role deleted: %s ws=%s", removed.get("name"), ws.id)
    ws.toasts.success("Role deleted successfully")
    return removed


def export_roles_csv(ws, state: TableState = None):
    state = state or TableState()
    rows = state.sort(state.filter(all_roles(ws), SEARCH_FIELDS))
    body = build_csv(["#", "Name"], [[i, r["name"]] for i, r in enumerate(rows, 1)])
    return export_filename("user-roles"), body
