"""
permissions.py — Project × user assignments

One submission assigns several users to one project. The (project, user)
pair is unique across seeds and user rows. Rows reference both sides by
name; when the project is deleted the row stays and is listed with
`orphaned: true` rather than being cascaded away.
"""

import logging

from sitedesk.core.errors import ValidationError
from sitedesk.core.entity_store import new_id
from sitedesk.core.table import TableState
from sitedesk.core.views import View
from sitedesk.core.workspace import PERMISSIONS, PROJECTS, TEAM_USERS
from sitedesk.company_users.teams import all_users
from sitedesk.masters.projects import project_names

log = logging.getLogger("sitedesk.company_users.permissions")

SEARCH_FIELDS = ("project", "assignedUser", "designation")


def assignable_users(ws) -> list:
    """[{name, designation}] for the user dropdown; designation = role."""
    return [{"name": u["name"], "designation": u.get("roleType", "")} for u in all_users(ws)]


def _mark_orphans(rows: list, projects) -> list:
    projects = set(projects)
    return [dict(r, orphaned=r.get("project") not in projects) for r in rows]


def list_permissions(ws, state: TableState = None) -> dict:
    state = state or TableState()
    rows = _mark_orphans(ws.store(PERMISSIONS).all(), project_names(ws))
    return state.apply(rows, SEARCH_FIELDS).to_dict()


def create_permissions(ws, project: str, users: list, origin_tab: str = "default") -> list:
    """Assign `users` ([{assignedUser, designation}]) to `project`.

    A missing designation is filled from the user's role. Returns the new rows.
    """
    project = str(project or "").strip()
    if not project:
        raise ValidationError("Please select a project")
    if project not in project_names(ws):
        raise ValidationError(f"Project not found: {project}")
    if not isinstance(users, list) or not all(isinstance(u, dict) for u in users):
        raise ValidationError("Please add at least one user with designation")

    designations = {u["name"]: u["designation"] for u in assignable_users(ws)}
    valid = []
    for entry in users:
        name = str(entry.get("assignedUser") or "").strip()
        designation = str(entry.get("designation") or "").strip() or designations.get(name, "")
        if name and designation:
            valid.append({"assignedUser": name, "designation": designation})
    if not valid:
        raise ValidationError("Please add at least one user with designation")

    names = [u["assignedUser"] for u in valid]
    if len(set(names)) != len(names):
        raise ValidationError("Duplicate users found. Please remove duplicates.")

    store = ws.store(PERMISSIONS)
    with store.locked():
        taken = {p.get("assignedUser") for p in store.all() if p.get("project") == project}
        clashes = [n for n in names if n in taken]
        if clashes:
            raise ValidationError(
                f"The following users are already assigned to this project: {', '.join(clashes)}")
        rows = [{"id": new_id(), "project": project, **u} for u in valid]
        store.extend(rows, origin_tab)

    log.info("Assigned %d user(s) to %s ws=%s", len(rows), project, ws.id)
    ws.toasts.success("Permissions added successfully")
    return rows


def delete_permission(ws, permission_id, origin_tab: str = "default") -> dict:
    removed = ws.store(PERMISSIONS).remove(permission_id, origin_tab)
    ws.toasts.success("Permission deleted successfully")
    return removed


class PermissionsView(View):
    """Permission table with project and user dropdowns.

    Follows projects and team users as well as permissions, so a project
    created on another page shows up in the dropdown without a remount.
    """

    watches = (PERMISSIONS, PROJECTS, TEAM_USERS)

    def read(self) -> dict:
        ws = self.workspace
        projects = project_names(ws)
        return {
            "projects": projects,
            "users": assignable_users(ws),
            "permissions": _mark_orphans(ws.store(PERMISSIONS).all(), projects),
        }
