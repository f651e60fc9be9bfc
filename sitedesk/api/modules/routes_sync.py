# routes_sync.py
# Health, session flags, revisions, change-event stream, toasts
# Loaded by dashboard.py via load_modules()

import json
import logging

from flask import Response, jsonify, request, stream_with_context

from sitedesk import __version__
from sitedesk.api.dashboard import (auth_required, bp, current_tab, current_workspace,
                                    json_body)
from sitedesk.core import session
from sitedesk.core.db import get_stats
from sitedesk.core.settings import get_setting
from sitedesk.core.views import EventStreamView
from sitedesk.core.workspace import open_workspaces

log = logging.getLogger("sitedesk.sync")


@bp.route("/api/health")
def api_health():
    """Unauthenticated liveness probe."""
    info = {"ok": True, "version": __version__, "backend": get_setting("storage_backend"),
            "workspaces": len(open_workspaces())}
    if info["backend"] == "sqlite":
        try:
            info["db"] = get_stats()
        except Exception as e:
            log.warning("Health DB stats failed: %s", e)
            info["db"] = {"error": str(e)}
    return jsonify(info)


# ═══════════════════════════════════════════════════════════════════════
# Session flags
# ═══════════════════════════════════════════════════════════════════════

@bp.route("/api/session")
@auth_required
def api_session_status():
    return jsonify({"ok": True, **session.status(current_workspace())})


@bp.route("/api/session/login", methods=["POST"])
@auth_required
def api_session_login():
    data = json_body()
    state = session.login(current_workspace(), data.get("email"), data.get("password"))
    return jsonify({"ok": True, **state})


@bp.route("/api/session/logout", methods=["POST"])
@auth_required
def api_session_logout():
    return jsonify({"ok": True, **session.logout(current_workspace())})


# ═══════════════════════════════════════════════════════════════════════
# Sync
# ═══════════════════════════════════════════════════════════════════════

@bp.route("/api/sync/revisions")
@auth_required
def api_sync_revisions():
    """Revision per storage key. Clients poll this instead of re-fetching lists."""
    return jsonify({"ok": True, "revisions": current_workspace().revisions()})


@bp.route("/api/events")
@auth_required
def api_events():
    """Server-sent events: one `event:` per change on any entity key.

    Same-tab writes arrive as the signal name (e.g. projectsUpdated),
    writes from other tabs as `storage`. `?once=1` ends the stream after
    the first event or keep-alive (used by tests and simple clients).
    """
    ws = current_workspace()
    tab = current_tab()
    once = request.args.get("once") in ("1", "true")
    timeout = 1.0 if once else 15.0
    view = EventStreamView(ws, tab_id=tab)
    view.mount()

    def generate():
        try:
            yield ": connected\n\n"
            while True:
                event = view.next_event(timeout=timeout)
                if event is None:
                    yield ": keep-alive\n\n"
                else:
                    yield f"event: {event.kind}\ndata: {json.dumps(event.to_dict())}\n\n"
                if once:
                    break
        finally:
            view.unmount()
            log.debug("Event stream closed ws=%s tab=%s", ws.id, tab)

    return Response(stream_with_context(generate()), mimetype="text/event-stream",
                    headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"})


@bp.route("/api/toasts")
@auth_required
def api_toasts():
    """Pending toasts for the workspace; reading clears them."""
    return jsonify({"ok": True, "toasts": current_workspace().toasts.drain()})
