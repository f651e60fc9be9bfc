# routes_billing.py
# Subscription plans
# Loaded by dashboard.py via load_modules()

from flask import jsonify, request

from sitedesk.api.dashboard import auth_required, bp, current_workspace, json_body
from sitedesk.billing import subscription


@bp.route("/api/subscription/plans")
@auth_required
def api_subscription_plans():
    result = subscription.list_plans(request.args.get("period", "monthly"))
    result["selected"] = subscription.selected_plan(current_workspace())
    return jsonify({"ok": True, **result})


@bp.route("/api/subscription/select", methods=["POST"])
@auth_required
def api_subscription_select():
    data = json_body()
    result = subscription.select_plan(current_workspace(), data.get("plan"),
                                      data.get("period", "monthly"))
    return jsonify({"ok": True, **result})
