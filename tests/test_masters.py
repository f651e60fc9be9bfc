"""
tests/test_masters.py — Projects, sub-projects and companies
Run: python -m pytest tests/test_masters.py -v
"""
import base64
import json

import pytest

from sitedesk.core.csv_export import BOM
from sitedesk.core.entity_store import QUOTA_WARNING
from sitedesk.core.errors import (
    ProtectedRecordError, RecordNotFound, StorageQuotaError, ValidationError,
)
from sitedesk.core.media import make_code, validate_image
from sitedesk.core.workspace import PROJECTS, get_workspace, reset_workspaces
from sitedesk.masters.companies import (
    company_names, create_company, delete_company, list_companies, update_company,
)
from sitedesk.masters.projects import (
    create_project, delete_project, export_projects_csv, list_projects, project_names,
)
from sitedesk.masters.subprojects import (
    create_subproject, delete_subproject, list_subprojects, subproject_names, update_subproject,
)

CLIENT = {
    "clientName": "Lake Estates", "clientAddress": "1 Shore Rd",
    "clientContactName": "Asha", "clientContactEmail": "asha@example.com",
    "clientContactMobile": "9000000000", "clientContactDesignation": "Owner",
    "clientContactPhone": "020-1234",
}


def _sub_form(**overrides):
    form = {"project": "Residential Complex A", "subprojectName": "A wing",
            "plannedStartDate": "2025-01-01", "plannedEndDate": "2025-03-01"}
    form.update(overrides)
    return form


def _company_form(**overrides):
    form = {"registrationName": "Lake Infra Pvt Ltd", "registeredAddress": "7 Dam Road",
            "companyRegistrationNo": "U45200MH2020PTC000001"}
    form.update(overrides)
    return form


# ─── Media helpers ──────────────────────────────────────────────────────────

class TestMedia:

    def test_make_code(self):
        assert make_code("Residential Complex A", 1) == "RCA001"
        assert make_code("a b c d e f g h", 12) == "ABCDEF012"

    def test_valid_image_passes_through(self, tiny_png):
        assert validate_image(tiny_png) == tiny_png

    def test_not_an_image(self):
        with pytest.raises(ValidationError, match="Error processing image"):
            validate_image("data:text/plain;base64,aGk=")

    def test_broken_base64(self):
        with pytest.raises(ValidationError, match="Error processing image"):
            validate_image("data:image/png;base64,***")

    def test_too_large(self):
        big = "data:image/png;base64," + base64.b64encode(b"\0" * (5 * 1024 * 1024 + 1)).decode()
        with pytest.raises(ValidationError, match="less than 5MB"):
            validate_image(big)


# ─── Projects ───────────────────────────────────────────────────────────────

class TestProjects:

    def test_seeds_listed(self, ws):
        listing = list_projects(ws)
        assert listing["total"] == 4
        assert listing["active"] == 3

    def test_create(self, ws, project_form):
        project = create_project(ws, project_form("Lakeshire"))
        assert project["code"] == "L005"
        assert project["status"] == "Planning"
        assert project["progress"] == 0
        assert project["isContractor"] is False
        assert project["companyLogo"].startswith("https://ui-avatars.com/api/?name=ABC+Construction")
        assert project["logo"].startswith("https://ui-avatars.com/api/?name=Lakeshire")
        stored = json.loads(ws.blobs.get_item("projects"))
        assert [p["name"] for p in stored] == ["Lakeshire"]
        assert ws.toasts.recent()[-1]["message"] == "Project created successfully!"

    def test_missing_fields_listed_by_label(self, ws, project_form):
        with pytest.raises(ValidationError) as exc:
            create_project(ws, project_form("", address=" "))
        assert exc.value.message == ("Please fill in the following required fields: "
                                     "Project Name, Address")

    def test_contractor_needs_client_block(self, ws, project_form):
        with pytest.raises(ValidationError, match="Client Name"):
            create_project(ws, project_form("Lakeshire", isContractor="yes"))
        project = create_project(ws, project_form("Lakeshire", isContractor="yes", **CLIENT))
        assert project["isContractor"] is True
        assert project["clientName"] == "Lake Estates"

    def test_dropped_write_reports_no_success(self, monkeypatch, project_form):
        monkeypatch.setenv("SITEDESK_STORAGE_QUOTA_BYTES", "200")
        reset_workspaces()
        ws = get_workspace("default")
        with pytest.raises(StorageQuotaError) as exc:
            create_project(ws, project_form("Lakeshire"))
        assert exc.value.toasted is True
        assert "Lakeshire" not in project_names(ws)
        assert [(t["type"], t["message"]) for t in ws.toasts.recent()] == [
            ("warning", QUOTA_WARNING)]

    def test_non_string_values_coerced(self, ws, project_form):
        project = create_project(ws, project_form(2025, address=17))
        assert project["name"] == "2025"
        assert project["location"] == "17"

    def test_duplicate_name_case_insensitive(self, ws, project_form):
        with pytest.raises(ValidationError, match="already exists"):
            create_project(ws, project_form("commercial tower b"))

    def test_uploaded_logo_kept(self, ws, project_form, tiny_png):
        assert create_project(ws, project_form("Lakeshire", logo=tiny_png))["logo"] == tiny_png

    def test_search_and_order(self, ws, project_form):
        create_project(ws, project_form("Lakeshire"))
        assert [p["name"] for p in list_projects(ws, search="LAKE")["projects"]] == ["Lakeshire"]
        assert list_projects(ws, order="recent")["projects"][0]["name"] == "Lakeshire"
        assert list_projects(ws, order="oldest")["projects"][0]["name"] == "Shopping Mall Development"

    def test_delete(self, ws, project_form):
        project = create_project(ws, project_form("Lakeshire"))
        delete_project(ws, project["id"])
        assert "Lakeshire" not in project_names(ws)
        assert ws.blobs.get_item("projects") is None

    def test_seed_delete_protected(self, ws):
        with pytest.raises(ProtectedRecordError):
            delete_project(ws, "1")

    def test_delete_missing(self, ws):
        with pytest.raises(RecordNotFound):
            delete_project(ws, "123")

    def test_export(self, ws):
        filename, body = export_projects_csv(ws, search="tower")
        assert filename.startswith("projects_") and filename.endswith(".csv")
        lines = body[len(BOM):].split("\n")
        assert lines[0].startswith("Project Name,Code,Company")
        assert len(lines) == 2
        assert '"Commercial Tower B"' in lines[1]


# ─── Sub-projects ───────────────────────────────────────────────────────────

class TestSubprojects:

    def test_seeds_per_project(self, ws):
        assert len(list_subprojects(ws)["subprojects"]) == 12
        assert subproject_names(ws, "Commercial Tower B") == [
            "Electrical Installation", "HVAC System", "Interior Finishing"]

    def test_create_and_update(self, ws):
        sub = create_subproject(ws, _sub_form())
        assert sub["status"] == "Pending"
        updated = update_subproject(ws, sub["id"], _sub_form(subprojectName="B wing"))
        assert updated["name"] == "B wing"

    def test_end_before_start(self, ws):
        with pytest.raises(ValidationError, match="End date must be greater"):
            create_subproject(ws, _sub_form(plannedEndDate="2024-12-31"))

    def test_same_day_allowed(self, ws):
        create_subproject(ws, _sub_form(plannedEndDate="2025-01-01"))

    def test_non_string_dates_rejected(self, ws):
        with pytest.raises(ValidationError, match="Please enter valid planned dates"):
            create_subproject(ws, _sub_form(plannedStartDate=20250101))

    def test_unknown_project(self, ws):
        with pytest.raises(ValidationError, match="Project not found"):
            create_subproject(ws, _sub_form(project="Nowhere"))

    def test_missing_fields(self, ws):
        with pytest.raises(ValidationError, match="Subproject Name"):
            create_subproject(ws, _sub_form(subprojectName=""))

    def test_orphaned_after_project_delete(self, ws, project_form):
        project = create_project(ws, project_form("Lakeshire"))
        sub = create_subproject(ws, _sub_form(project="Lakeshire"))
        delete_project(ws, project["id"])
        rows = list_subprojects(ws, project="Lakeshire")["subprojects"]
        assert [r["id"] for r in rows] == [sub["id"]]
        assert rows[0]["orphaned"] is True

    def test_seed_edit_protected(self, ws):
        with pytest.raises(ProtectedRecordError):
            update_subproject(ws, "1", _sub_form())

    def test_delete(self, ws):
        sub = create_subproject(ws, _sub_form())
        delete_subproject(ws, sub["id"])
        assert ws.blobs.get_item("subprojects") is None


# ─── Companies ──────────────────────────────────────────────────────────────

class TestCompanies:

    def test_project_counts_are_live(self, ws, project_form):
        counts = {c["name"]: c["projects"] for c in list_companies(ws)}
        assert counts == {"ABC Construction Ltd": 2, "XYZ Builders Inc": 2}
        create_project(ws, project_form("Lakeshire", company="XYZ Builders Inc"))
        counts = {c["name"]: c["projects"] for c in list_companies(ws)}
        assert counts["XYZ Builders Inc"] == 3

    def test_create(self, ws):
        company = create_company(ws, _company_form())
        assert company["code"] == "LIPL003"
        assert company["status"] == "Active"
        assert "Lake Infra Pvt Ltd" in company_names(ws)

    def test_duplicate(self, ws):
        with pytest.raises(ValidationError, match="already exists"):
            create_company(ws, _company_form(registrationName="abc construction ltd"))

    def test_missing(self, ws):
        with pytest.raises(ValidationError, match="Registered Address"):
            create_company(ws, _company_form(registeredAddress=""))

    def test_update_status(self, ws):
        company = create_company(ws, _company_form())
        updated = update_company(ws, company["id"], _company_form(status="Inactive"))
        assert updated["status"] == "Inactive"
        with pytest.raises(ValidationError, match="Invalid status"):
            update_company(ws, company["id"], _company_form(status="Sleeping"))

    def test_search(self, ws):
        assert [c["name"] for c in list_companies(ws, search="xbi")] == ["XYZ Builders Inc"]

    def test_delete(self, ws):
        company = create_company(ws, _company_form())
        delete_company(ws, company["id"])
        assert "Lake Infra Pvt Ltd" not in company_names(ws)
        with pytest.raises(ProtectedRecordError):
            delete_company(ws, "1")

    def test_stored_projects_field_ignored(self, ws):
        ws.store(PROJECTS).append({"name": "Side Job", "company": "Lake Infra Pvt Ltd"})
        company = create_company(ws, _company_form())
        assert company["projects"] == 0
        listed = next(c for c in list_companies(ws) if c["name"] == "Lake Infra Pvt Ltd")
        assert listed["projects"] == 1
