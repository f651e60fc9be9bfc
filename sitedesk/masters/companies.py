"""
companies.py — Company master

The `projects` column is never trusted from storage: listings count the
projects currently tagged with the company, and CompaniesView recomputes
it whenever projects change in any tab.
"""

import logging
from collections import Counter

from sitedesk.core.errors import ValidationError
from sitedesk.core.media import avatar_url, make_code, validate_image
from sitedesk.core.merge import name_exists
from sitedesk.core.views import View
from sitedesk.core.workspace import COMPANIES, PROJECTS
from sitedesk.masters.projects import now_iso

log = logging.getLogger("sitedesk.masters.companies")

REQUIRED_FIELDS = [
    ("registrationName", "Registration Name"),
    ("registeredAddress", "Registered Address"),
    ("companyRegistrationNo", "Company Registration No"),
]

STATUSES = ("Active", "Inactive")


def _require(form: dict):
    missing = [label for key, label in REQUIRED_FIELDS if not str(form.get(key) or "").strip()]
    if missing:
        raise ValidationError(f"Please fill in the following required fields: {', '.join(missing)}")


def list_companies(ws, search: str = "") -> list:
    counts = Counter(p.get("company") for p in ws.store(PROJECTS).all())
    rows = [dict(c, projects=counts.get(c["name"], 0)) for c in ws.store(COMPANIES).all()]
    query = (search or "").strip().lower()
    if query:
        rows = [c for c in rows
                if query in c.get("name", "").lower() or query in c.get("code", "").lower()]
    return rows


def company_names(ws) -> list:
    return [c["name"] for c in ws.store(COMPANIES).all()]


def create_company(ws, form: dict, origin_tab: str = "default") -> dict:
    _require(form)
    name = str(form["registrationName"]).strip()
    store = ws.store(COMPANIES)
    with store.locked():
        existing = store.all()
        if name_exists(existing, name):
            raise ValidationError("A company with this name already exists")
        logo = form.get("logo")
        company = {
            "name": name,
            "code": make_code(name, len(existing) + 1),
            "address": str(form["registeredAddress"]).strip(),
            "registrationNo": str(form["companyRegistrationNo"]).strip(),
            "logo": validate_image(logo) if logo else avatar_url(name, bg="C2D642", size=64),
            "status": "Active",
            "projects": 0,
            "employees": 0,
            "createdAt": now_iso(),
        }
        store.append(company, origin_tab)
    log.info("Company created: %s ws=%s", name, ws.id)
    ws.toasts.success("Company created successfully!")
    return company


def update_company(ws, company_id, form: dict, origin_tab: str = "default") -> dict:
    _require(form)
    name = str(form["registrationName"]).strip()
    store = ws.store(COMPANIES)
    with store.locked():
        if name_exists(store.all(), name, exclude_id=company_id):
            raise ValidationError("A company with this name already exists")
        changes = {
            "name": name,
            "address": str(form["registeredAddress"]).strip(),
            "registrationNo": str(form["companyRegistrationNo"]).strip(),
        }
        if form.get("logo"):
            changes["logo"] = validate_image(form["logo"])
        if form.get("status"):
            if form["status"] not in STATUSES:
                raise ValidationError(f"Invalid status: {form['status']}")
            changes["status"] = form["status"]
        updated = store.update(company_id, changes, origin_tab)
    ws.toasts.success("Company updated successfully!")
    return updated


def delete_company(ws, company_id, origin_tab: str = "default") -> dict:
    removed = ws.store(COMPANIES).remove(company_id, origin_tab)
    ws.toasts.success("Company deleted successfully!")
    return removed


class CompaniesView(View):
    watches = (COMPANIES, PROJECTS)

    def read(self) -> dict:
        return {"companies": list_companies(self.workspace)}
