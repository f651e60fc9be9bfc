# routes_agents.py
# Chat-style agent panel
# Loaded by dashboard.py via load_modules()

from flask import jsonify

from sitedesk.agents.chat_agent import panel_for
from sitedesk.api.dashboard import auth_required, bp, current_workspace, json_body


@bp.route("/api/agent")
@auth_required
def api_agent_state():
    return jsonify({"ok": True, **panel_for(current_workspace()).to_dict()})


@bp.route("/api/agent/sessions", methods=["POST"])
@auth_required
def api_agent_new_session():
    session = panel_for(current_workspace()).new_session()
    return jsonify({"ok": True, "session": session}), 201


@bp.route("/api/agent/sessions/<session_id>/select", methods=["POST"])
@auth_required
def api_agent_switch_session(session_id):
    panel = panel_for(current_workspace())
    panel.switch_session(session_id)
    return jsonify({"ok": True, **panel.to_dict()})


@bp.route("/api/agent/workspace", methods=["POST"])
@auth_required
def api_agent_workspace():
    name = panel_for(current_workspace()).set_agent_workspace(json_body().get("workspace"))
    return jsonify({"ok": True, "workspace": name})


@bp.route("/api/agent/messages", methods=["POST"])
@auth_required
def api_agent_send():
    data = json_body()
    result = panel_for(current_workspace()).send(data.get("text", ""), data.get("attachments"))
    return jsonify({"ok": True, **result})
