# routes_users.py
# Roles, team users, project permissions
# Loaded by dashboard.py via load_modules()

from flask import jsonify, request

from sitedesk.api.dashboard import (auth_required, bp, csv_response, current_tab,
                                    current_workspace, json_body)
from sitedesk.company_users import permissions, roles, teams
from sitedesk.core.table import TableState

# ═══════════════════════════════════════════════════════════════════════
# Roles
# ═══════════════════════════════════════════════════════════════════════

@bp.route("/api/roles")
@auth_required
def api_roles_list():
    page = roles.list_roles(current_workspace(), TableState.from_args(request.args))
    return jsonify({"ok": True, **page})


@bp.route("/api/roles", methods=["POST"])
@auth_required
def api_roles_create():
    role = roles.create_role(current_workspace(), json_body().get("name"), current_tab())
    return jsonify({"ok": True, "role": role}), 201


@bp.route("/api/roles/<role_id>", methods=["PUT"])
@auth_required
def api_roles_rename(role_id):
    role = roles.rename_role(current_workspace(), role_id, json_body().get("name"),
                             current_tab())
    return jsonify({"ok": True, "role": role})


@bp.route("/api/roles/<role_id>", methods=["DELETE"])
@auth_required
def api_roles_delete(role_id):
    removed = roles.delete_role(current_workspace(), role_id, current_tab())
    return jsonify({"ok": True, "removed": removed})


@bp.route("/api/roles/export.csv")
@auth_required
def api_roles_export():
    return csv_response(*roles.export_roles_csv(current_workspace(),
                                                TableState.from_args(request.args)))


# ═══════════════════════════════════════════════════════════════════════
# Team users
# ═══════════════════════════════════════════════════════════════════════

@bp.route("/api/team-users")
@auth_required
def api_team_users_list():
    page = teams.list_users(current_workspace(), TableState.from_args(request.args))
    return jsonify({"ok": True, **page})


@bp.route("/api/team-users", methods=["POST"])
@auth_required
def api_team_users_create():
    user = teams.create_user(current_workspace(), json_body(), current_tab())
    return jsonify({"ok": True, "user": user}), 201


@bp.route("/api/team-users/<user_id>", methods=["PUT"])
@auth_required
def api_team_users_update(user_id):
    user = teams.update_user(current_workspace(), user_id, json_body(), current_tab())
    return jsonify({"ok": True, "user": user})


@bp.route("/api/team-users/<user_id>/toggle", methods=["POST"])
@auth_required
def api_team_users_toggle(user_id):
    user = teams.toggle_status(current_workspace(), user_id, current_tab())
    return jsonify({"ok": True, "user": user})


@bp.route("/api/team-users/<user_id>", methods=["DELETE"])
@auth_required
def api_team_users_delete(user_id):
    removed = teams.delete_user(current_workspace(), user_id, current_tab())
    return jsonify({"ok": True, "removed": removed})


# ═══════════════════════════════════════════════════════════════════════
# Project permissions
# ═══════════════════════════════════════════════════════════════════════

@bp.route("/api/permissions")
@auth_required
def api_permissions_list():
    page = permissions.list_permissions(current_workspace(), TableState.from_args(request.args))
    return jsonify({"ok": True, **page})


@bp.route("/api/permissions/options")
@auth_required
def api_permissions_options():
    """Project and user dropdown values for the add-permission form."""
    from sitedesk.masters.projects import project_names
    ws = current_workspace()
    return jsonify({"ok": True, "projects": project_names(ws),
                    "users": permissions.assignable_users(ws)})


@bp.route("/api/permissions", methods=["POST"])
@auth_required
def api_permissions_create():
    data = json_body()
    rows = permissions.create_permissions(current_workspace(), data.get("project"),
                                          data.get("users"), current_tab())
    return jsonify({"ok": True, "permissions": rows}), 201


@bp.route("/api/permissions/<permission_id>", methods=["DELETE"])
@auth_required
def api_permissions_delete(permission_id):
    removed = permissions.delete_permission(current_workspace(), permission_id, current_tab())
    return jsonify({"ok": True, "removed": removed})
