# routes_procurement.py
# Purchase requisition table
# Loaded by dashboard.py via load_modules()

from flask import jsonify, request

from sitedesk.api.dashboard import auth_required, bp, csv_response, current_workspace
from sitedesk.core.table import TableState
from sitedesk.procurement import purchase_requests


@bp.route("/api/purchase-requests")
@auth_required
def api_purchase_requests_list():
    page = purchase_requests.list_requests(
        TableState.from_args(request.args),
        project=request.args.get("project", ""),
        sub_project=request.args.get("subProject", ""))
    return jsonify({"ok": True, **page})


@bp.route("/api/purchase-requests/options")
@auth_required
def api_purchase_requests_options():
    opts = purchase_requests.filter_options(current_workspace(), request.args.get("project", ""))
    return jsonify({"ok": True, **opts})


@bp.route("/api/purchase-requests/export.csv")
@auth_required
def api_purchase_requests_export():
    filename, body = purchase_requests.export_requests_csv(
        TableState.from_args(request.args),
        project=request.args.get("project", ""),
        sub_project=request.args.get("subProject", ""))
    current_workspace().toasts.success("Excel file downloaded successfully")
    return csv_response(filename, body)
