# routes_masters.py
# Projects, sub-projects, companies
# Loaded by dashboard.py via load_modules()

from flask import jsonify, request

from sitedesk.api.dashboard import (auth_required, bp, csv_response, current_tab,
                                    current_workspace, json_body)
from sitedesk.masters import companies, projects, subprojects

# ═══════════════════════════════════════════════════════════════════════
# Projects
# ═══════════════════════════════════════════════════════════════════════

@bp.route("/api/projects")
@auth_required
def api_projects_list():
    result = projects.list_projects(current_workspace(), request.args.get("search", ""),
                                    request.args.get("order", "none"))
    return jsonify({"ok": True, **result})


@bp.route("/api/projects", methods=["POST"])
@auth_required
def api_projects_create():
    project = projects.create_project(current_workspace(), json_body(), current_tab())
    return jsonify({"ok": True, "project": project}), 201


@bp.route("/api/projects/<project_id>", methods=["DELETE"])
@auth_required
def api_projects_delete(project_id):
    removed = projects.delete_project(current_workspace(), project_id, current_tab())
    return jsonify({"ok": True, "removed": removed})


@bp.route("/api/projects/export.csv")
@auth_required
def api_projects_export():
    return csv_response(*projects.export_projects_csv(
        current_workspace(), request.args.get("search", ""), request.args.get("order", "none")))


# ═══════════════════════════════════════════════════════════════════════
# Sub-projects
# ═══════════════════════════════════════════════════════════════════════

@bp.route("/api/subprojects")
@auth_required
def api_subprojects_list():
    result = subprojects.list_subprojects(
        current_workspace(), project=request.args.get("project", ""),
        search=request.args.get("search", ""), order=request.args.get("order", "none"))
    return jsonify({"ok": True, **result})


@bp.route("/api/subprojects", methods=["POST"])
@auth_required
def api_subprojects_create():
    sub = subprojects.create_subproject(current_workspace(), json_body(), current_tab())
    return jsonify({"ok": True, "subproject": sub}), 201


@bp.route("/api/subprojects/<subproject_id>", methods=["PUT"])
@auth_required
def api_subprojects_update(subproject_id):
    sub = subprojects.update_subproject(current_workspace(), subproject_id, json_body(),
                                        current_tab())
    return jsonify({"ok": True, "subproject": sub})


@bp.route("/api/subprojects/<subproject_id>", methods=["DELETE"])
@auth_required
def api_subprojects_delete(subproject_id):
    removed = subprojects.delete_subproject(current_workspace(), subproject_id, current_tab())
    return jsonify({"ok": True, "removed": removed})


# ═══════════════════════════════════════════════════════════════════════
# Companies
# ═══════════════════════════════════════════════════════════════════════

@bp.route("/api/companies")
@auth_required
def api_companies_list():
    rows = companies.list_companies(current_workspace(), request.args.get("search", ""))
    return jsonify({"ok": True, "companies": rows, "total": len(rows)})


@bp.route("/api/companies", methods=["POST"])
@auth_required
def api_companies_create():
    company = companies.create_company(current_workspace(), json_body(), current_tab())
    return jsonify({"ok": True, "company": company}), 201


@bp.route("/api/companies/<company_id>", methods=["PUT"])
@auth_required
def api_companies_update(company_id):
    company = companies.update_company(current_workspace(), company_id, json_body(),
                                       current_tab())
    return jsonify({"ok": True, "company": company})


@bp.route("/api/companies/<company_id>", methods=["DELETE"])
@auth_required
def api_companies_delete(company_id):
    removed = companies.delete_company(current_workspace(), company_id, current_tab())
    return jsonify({"ok": True, "removed": removed})
