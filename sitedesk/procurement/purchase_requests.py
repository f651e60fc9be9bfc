"""
purchase_requests.py — PR table

The requests themselves are read-only seed rows. The project and
sub-project filters are built from the live masters, so a project created
in another tab appears in the filter dropdown on the next reload.
"""

import logging

from sitedesk.core.csv_export import build_csv, export_filename
from sitedesk.core.merge import unique_names
from sitedesk.core.table import TableState
from sitedesk.core.views import View
from sitedesk.core.workspace import PROJECTS, SUBPROJECTS
from sitedesk.masters.projects import project_names
from sitedesk.masters.subprojects import subproject_names
from sitedesk.seed_data import DEFAULT_PURCHASE_REQUESTS

log = logging.getLogger("sitedesk.procurement")

SEARCH_FIELDS = ("requestNo", "userName", "project", "subProject", "date")
DATE_FIELDS = ("date",)
CSV_HEADERS = ["#", "Request No", "User Name", "Project", "Sub-Project", "Date", "Status"]


def all_requests() -> list:
    return [dict(pr) for pr in DEFAULT_PURCHASE_REQUESTS]


def _filtered(project: str = "", sub_project: str = "") -> list:
    rows = all_requests()
    if project:
        rows = [pr for pr in rows if pr["project"] == project]
    if sub_project:
        rows = [pr for pr in rows if pr["subProject"] == sub_project]
    return rows


def list_requests(state: TableState = None, project: str = "", sub_project: str = "") -> dict:
    state = state or TableState()
    return state.apply(_filtered(project, sub_project), SEARCH_FIELDS, DATE_FIELDS).to_dict()


def filter_options(ws, project: str = "") -> dict:
    """Dropdown values: every known project, and the sub-projects of `project`."""
    prs = all_requests()
    projects = unique_names(project_names(ws), (pr["project"] for pr in prs))
    subs = unique_names(
        subproject_names(ws, project),
        (pr["subProject"] for pr in prs if not project or pr["project"] == project),
    )
    return {"projects": projects, "subProjects": subs}


def export_requests_csv(state: TableState = None, project: str = "", sub_project: str = ""):
    state = state or TableState()
    rows = state.sort(state.filter(_filtered(project, sub_project), SEARCH_FIELDS), DATE_FIELDS)
    body = build_csv(CSV_HEADERS, [
        [i, pr["requestNo"], pr["userName"], pr["project"], pr["subProject"] or "-",
         pr["date"], pr["status"]]
        for i, pr in enumerate(rows, 1)
    ])
    return export_filename("purchase-requests"), body


class PurchaseRequestsView(View):
    watches = (PROJECTS, SUBPROJECTS)

    def __init__(self, workspace, tab_id: str = "default", project: str = "", **kw):
        super().__init__(workspace, tab_id, **kw)
        self.project = project

    def read(self) -> dict:
        return filter_options(self.workspace, self.project)
