"""Sub-project master. A sub-project points at its project by name only."""

import logging

from dateutil.parser import parse as _dp

from sitedesk.core.errors import ValidationError
from sitedesk.core.media import make_code
from sitedesk.core.table import order_by_created
from sitedesk.core.workspace import SUBPROJECTS
from sitedesk.masters.projects import now_iso, project_names

log = logging.getLogger("sitedesk.masters.subprojects")

REQUIRED_FIELDS = [
    ("project", "Select Project"),
    ("subprojectName", "Subproject Name"),
    ("plannedStartDate", "Planned Start Date"),
    ("plannedEndDate", "Planned End Date"),
]


def _validate(ws, form: dict):
    missing = [label for key, label in REQUIRED_FIELDS if not str(form.get(key) or "").strip()]
    if missing:
        raise ValidationError(f"Please fill in the following required fields: {', '.join(missing)}")
    try:
        start, end = _dp(form["plannedStartDate"]), _dp(form["plannedEndDate"])
    except (TypeError, ValueError, OverflowError):
        raise ValidationError("Please enter valid planned dates")
    if end < start:
        raise ValidationError("Please enter appropriate end date. "
                              "End date must be greater than or equal to start date.")
    if str(form["project"]).strip() not in project_names(ws):
        raise ValidationError(f"Project not found: {form['project']}")


def list_subprojects(ws, project: str = "", search: str = "", order: str = "none") -> dict:
    """Sub-projects, optionally for one project, each flagged `orphaned` when
    its project name no longer resolves."""
    names = set(project_names(ws))
    rows = []
    for sub in ws.store(SUBPROJECTS).all():
        if project and sub.get("project") != project:
            continue
        rows.append(dict(sub, orphaned=sub.get("project") not in names))
    query = (search or "").strip().lower()
    if query:
        rows = [s for s in rows if query in s.get("name", "").lower()]
    rows = order_by_created(rows, order)
    return {
        "subprojects": rows,
        "total": len(rows),
        "active": sum(1 for s in rows if s.get("status") in ("Active", "In Progress")),
    }


def subproject_names(ws, project: str = "") -> list:
    return [s["name"] for s in ws.store(SUBPROJECTS).all()
            if not project or s.get("project") == project]


def create_subproject(ws, form: dict, origin_tab: str = "default") -> dict:
    _validate(ws, form)
    store = ws.store(SUBPROJECTS)
    name = str(form["subprojectName"]).strip()
    with store.locked():
        sub = {
            "name": name,
            "code": make_code(name, len(store.all()) + 1),
            "project": str(form["project"]).strip(),
            "status": "Pending",
            "progress": 0,
            "startDate": str(form["plannedStartDate"]),
            "endDate": str(form["plannedEndDate"]),
            "createdAt": now_iso(),
        }
        store.append(sub, origin_tab)
    log.info("Subproject created: %s under %s ws=%s", name, sub["project"], ws.id)
    ws.toasts.success("Subproject created successfully!")
    return sub


def update_subproject(ws, subproject_id, form: dict, origin_tab: str = "default") -> dict:
    _validate(ws, form)
    updated = ws.store(SUBPROJECTS).update(subproject_id, {
        "name": str(form["subprojectName"]).strip(),
        "project": str(form["project"]).strip(),
        "startDate": str(form["plannedStartDate"]),
        "endDate": str(form["plannedEndDate"]),
    }, origin_tab)
    ws.toasts.success("Subproject updated successfully")
    return updated


def delete_subproject(ws, subproject_id, origin_tab: str = "default") -> dict:
    removed = ws.store(SUBPROJECTS).remove(subproject_id, origin_tab)
    ws.toasts.success("Subproject deleted successfully")
    return removed
