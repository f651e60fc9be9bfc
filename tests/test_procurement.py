"""
tests/test_procurement.py — Purchase request table, filters and export
Run: python -m pytest tests/test_procurement.py -v
"""
from sitedesk.core.csv_export import BOM
from sitedesk.core.table import TableState
from sitedesk.masters.projects import create_project
from sitedesk.masters.subprojects import create_subproject
from sitedesk.procurement.purchase_requests import (
    all_requests, export_requests_csv, filter_options, list_requests,
)


class TestPurchaseRequestTable:

    def test_seed_rows(self):
        rows = all_requests()
        assert len(rows) == 17
        assert rows[0]["requestNo"] == "PR-2025-001"
        assert {r["status"] for r in rows} == {"Approved"}

    def test_default_page(self):
        page = list_requests()
        assert page["total"] == 17
        assert page["page_count"] == 2
        assert len(page["rows"]) == 10

    def test_project_filter(self):
        assert list_requests(project="Commercial Tower B")["total"] == 5
        assert list_requests(project="Highway Infrastructure Project",
                             sub_project="Road Construction")["total"] == 3
        assert list_requests(project="Residential Complex A",
                             sub_project="HVAC System")["total"] == 0

    def test_search_any_column(self):
        state = TableState()
        state.set_search("hvac")
        assert list_requests(state)["total"] == 5
        state.set_search("2025-09")
        assert list_requests(state)["total"] == 8

    def test_date_sort_descending(self):
        state = TableState(sort_key="date", sort_dir="desc")
        rows = list_requests(state)["rows"]
        assert rows[0]["requestNo"] == "PR-2025-017"
        assert rows[-1]["date"] == "2025-09-15"

    def test_filter_options_follow_masters(self, ws, project_form):
        options = filter_options(ws)
        assert options["projects"] == ["Residential Complex A", "Commercial Tower B",
                                       "Highway Infrastructure Project",
                                       "Shopping Mall Development"]
        create_project(ws, project_form("Lakeshire"))
        create_subproject(ws, {"project": "Lakeshire", "subprojectName": "Jetty",
                               "plannedStartDate": "2025-01-01", "plannedEndDate": "2025-02-01"})
        options = filter_options(ws, "Lakeshire")
        assert "Lakeshire" in options["projects"]
        assert options["subProjects"] == ["Jetty"]

    def test_sub_project_options_per_project(self, ws):
        subs = filter_options(ws, "Commercial Tower B")["subProjects"]
        assert subs == ["Electrical Installation", "HVAC System", "Interior Finishing"]

    def test_export(self):
        state = TableState()
        state.set_search("Residential")
        filename, body = export_requests_csv(state)
        assert filename.startswith("purchase-requests_") and filename.endswith(".csv")
        lines = body[len(BOM):].split("\n")
        assert lines[0] == "#,Request No,User Name,Project,Sub-Project,Date,Status"
        assert len(lines) == 1 + 9
        assert lines[1] == ('"1","PR-2025-001","Niharika","Residential Complex A",'
                            '"-","2025-08-31","Approved"')
