"""
projects.py — Project master

Projects are the root of every other dropdown in the dashboard: sub-projects,
permissions and purchase requests all refer to a project by its name.
Deleting a project never touches those rows; listings flag them as
orphaned instead (see company_users.permissions.list_permissions).

Form fields follow the create-project modal: projectName, address,
isContractor ("yes"/"no"), plannedStartDate, plannedEndDate, company,
projectManager, and the client* block when isContractor is "yes".
"""

import logging
from datetime import datetime, timezone

from sitedesk.core.csv_export import build_csv, export_filename
from sitedesk.core.errors import ValidationError
from sitedesk.core.media import avatar_url, make_code, validate_image
from sitedesk.core.merge import name_exists
from sitedesk.core.table import order_by_created
from sitedesk.core.workspace import COMPANIES, PROJECTS

log = logging.getLogger("sitedesk.masters.projects")

REQUIRED_FIELDS = [
    ("projectName", "Project Name"),
    ("address", "Address"),
    ("isContractor", "Are you contractor for this project?"),
    ("plannedStartDate", "Planned Start Date"),
    ("plannedEndDate", "Planned End Date"),
    ("company", "Tag Company"),
    ("projectManager", "Tag Project Manager"),
]

CLIENT_FIELDS = [
    ("clientName", "Client Name"),
    ("clientAddress", "Client Address"),
    ("clientContactName", "Client Point of Contact - Name"),
    ("clientContactEmail", "Client Point of Contact - Email"),
    ("clientContactMobile", "Client Point of Contact - Mobile Number"),
    ("clientContactDesignation", "Client Point of Contact - Designation"),
    ("clientContactPhone", "Client Point of Contact - Phone Number"),
]

CSV_HEADERS = ["Project Name", "Code", "Company", "Address", "Is Contractor",
               "Planned Start Date", "Planned End Date", "Project Manager", "Status"]


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _missing(form: dict, fields) -> list:
    return [label for key, label in fields if not str(form.get(key) or "").strip()]


# ═══════════════════════════════════════════════════════════════════════
# Reads
# ═══════════════════════════════════════════════════════════════════════

def all_projects(ws) -> list:
    return ws.store(PROJECTS).all()


def project_names(ws) -> list:
    return [p["name"] for p in all_projects(ws)]


def list_projects(ws, search: str = "", order: str = "none") -> dict:
    """Card listing: name search + recent/oldest ordering, with the header stats."""
    rows = all_projects(ws)
    query = (search or "").strip().lower()
    if query:
        rows = [p for p in rows if query in p.get("name", "").lower()]
    rows = order_by_created(rows, order)
    return {
        "projects": rows,
        "total": len(rows),
        "active": sum(1 for p in rows if p.get("status") == "In Progress"),
    }


# ═══════════════════════════════════════════════════════════════════════
# Mutations
# ═══════════════════════════════════════════════════════════════════════

def create_project(ws, form: dict, origin_tab: str = "default") -> dict:
    missing = _missing(form, REQUIRED_FIELDS)
    if form.get("isContractor") == "yes":
        missing += _missing(form, CLIENT_FIELDS)
    if missing:
        raise ValidationError(f"Please fill in the following required fields: {', '.join(missing)}")

    name = str(form["projectName"]).strip()
    company_name = str(form["company"]).strip()
    store = ws.store(PROJECTS)
    with store.locked():
        existing = store.all()
        if name_exists(existing, name):
            raise ValidationError("A project with this name already exists")

        logo = form.get("logo")
        logo = validate_image(logo) if logo else avatar_url(name, bg="C2D642", size=128)
        company = next((c for c in ws.store(COMPANIES).all() if c["name"] == company_name), None)
        company_logo = (company or {}).get("logo") or avatar_url(company_name, bg="C2D642", size=64)

        project = {
            "name": name,
            "code": make_code(name, len(existing) + 1),
            "company": company_name,
            "companyLogo": company_logo,
            "startDate": str(form["plannedStartDate"]),
            "endDate": str(form["plannedEndDate"]),
            "status": "Planning",
            "progress": 0,
            "location": str(form["address"]).strip(),
            "logo": logo,
            "isContractor": form.get("isContractor") == "yes",
            "projectManager": str(form["projectManager"]).strip(),
            "createdAt": now_iso(),
        }
        if project["isContractor"]:
            for key, _label in CLIENT_FIELDS:
                project[key] = str(form[key]).strip()
        store.append(project, origin_tab)

    log.info("Project created: %s (%s) ws=%s", project["name"], project["code"], ws.id)
    ws.toasts.success("Project created successfully!")
    return project


def delete_project(ws, project_id, origin_tab: str = "default") -> dict:
    """Remove a user project. Rows that reference it by name are left in place."""
    removed = ws.store(PROJECTS).remove(project_id, origin_tab)
    log.info("Project deleted: %s ws=%s", removed.get("name"), ws.id)
    ws.toasts.success("Project deleted successfully")
    return removed


# ═══════════════════════════════════════════════════════════════════════
# Export
# ═══════════════════════════════════════════════════════════════════════

def export_projects_csv(ws, search: str = "", order: str = "none"):
    """Returns (filename, csv text) for the filtered listing."""
    rows = [
        [p.get("name"), p.get("code"), p.get("company"), p.get("location") or "-",
         "Yes" if p.get("isContractor") else "No", p.get("startDate") or "-",
         p.get("endDate") or "-", p.get("projectManager") or "-", p.get("status")]
        for p in list_projects(ws, search, order)["projects"]
    ]
    return export_filename("projects"), build_csv(CSV_HEADERS, rows)
