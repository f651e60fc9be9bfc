"""
teams.py — Manage Teams (company users)

Form fields: name, email, mobileNo, assignRole (required), password +
confirmPassword (must match when given), designation, reportingTo,
profilePhoto (data URL). Passwords are checked, never stored.
"""

import logging

from sitedesk.core.errors import ProtectedRecordError, RecordNotFound, ValidationError
from sitedesk.core.media import avatar_url, validate_image
from sitedesk.core.merge import name_exists
from sitedesk.core.table import TableState
from sitedesk.core.views import View
from sitedesk.core.workspace import ROLES, TEAM_USERS
from sitedesk.company_users.roles import role_names

log = logging.getLogger("sitedesk.company_users.teams")

SEARCH_FIELDS = ("name", "email", "contactNumber", "roleType", "reportingPersonName")


def all_users(ws) -> list:
    return ws.store(TEAM_USERS).all()


def user_names(ws) -> list:
    return [u["name"] for u in all_users(ws)]


def _row(user: dict) -> dict:
    # Flattened reporting person so the table can search/sort on it
    return dict(user, reportingPersonName=(user.get("reportingPerson") or {}).get("name", ""))


def list_users(ws, state: TableState = None) -> dict:
    state = state or TableState()
    return state.apply([_row(u) for u in all_users(ws)], SEARCH_FIELDS).to_dict()


def _validate(ws, form: dict):
    if not all(str(form.get(k) or "").strip() for k in ("name", "email", "mobileNo", "assignRole")):
        raise ValidationError("Please fill in all required fields")
    if form.get("password") and form.get("password") != form.get("confirmPassword"):
        raise ValidationError("Passwords do not match")
    if str(form["assignRole"]).strip() not in role_names(ws):
        raise ValidationError(f"Unknown role: {form['assignRole']}")


def _fields(form: dict) -> dict:
    return {
        "name": str(form["name"]).strip(),
        "email": str(form["email"]).strip(),
        "contactNumber": str(form["mobileNo"]).strip(),
        "roleType": str(form["assignRole"]).strip(),
        "reportingPerson": {
            "name": str(form.get("reportingTo") or "N/A"),
            "role": str(form.get("designation") or "N/A"),
        },
    }


def _check_unique(store, name: str, exclude_id=None):
    # Permissions refer to users by name, and listings merge on it
    if name_exists(store.all(), name, exclude_id=exclude_id):
        raise ValidationError("A user with this name already exists")


def create_user(ws, form: dict, origin_tab: str = "default") -> dict:
    _validate(ws, form)
    user = _fields(form)
    photo = form.get("profilePhoto")
    user["profilePhoto"] = validate_image(photo) if photo else avatar_url(user["name"], bg="6B8E23")
    user["status"] = True
    store = ws.store(TEAM_USERS)
    with store.locked():
        _check_unique(store, user["name"])
        store.append(user, origin_tab)
    log.info("Team user created: %s (%s) ws=%s", user["name"], user["roleType"], ws.id)
    ws.toasts.success("User created successfully")
    return user


def update_user(ws, user_id, form: dict, origin_tab: str = "default") -> dict:
    store = ws.store(TEAM_USERS)
    # Seed check first: a default user can't be edited even with a valid form
    if store.is_seed(user_id):
        raise ProtectedRecordError(store.spec.protected_edit_msg)
    _validate(ws, form)
    changes = _fields(form)
    if form.get("profilePhoto"):
        changes["profilePhoto"] = validate_image(form["profilePhoto"])
    with store.locked():
        _check_unique(store, changes["name"], exclude_id=user_id)
        user = store.update(user_id, changes, origin_tab)
    ws.toasts.success("User updated successfully")
    return user


def delete_user(ws, user_id, origin_tab: str = "default") -> dict:
    removed = ws.store(TEAM_USERS).remove(user_id, origin_tab)
    log.info("Team user deleted: %s ws=%s", removed.get("name"), ws.id)
    ws.toasts.success("User deleted successfully")
    return removed


def toggle_status(ws, user_id, origin_tab: str = "default") -> dict:
    store = ws.store(TEAM_USERS)
    with store.locked():
        user = store.get(user_id)
        if user is None:
            raise RecordNotFound("User not found")
        return store.update(user_id, {"status": not user.get("status", True)}, origin_tab)


class TeamsView(View):
    """Team table plus the role dropdown, which follows role edits live."""

    watches = (TEAM_USERS, ROLES)

    def read(self) -> dict:
        return {"users": all_users(self.workspace), "roles": role_names(self.workspace)}
