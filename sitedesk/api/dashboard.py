"""
SiteDesk Dashboard API
Blueprint shared by every route module: auth, request logging, workspace
resolution and the JSON error envelope. Routes live in api/modules/ and
are attached by load_modules().
"""
import functools
import importlib
import logging
import time

from flask import Blueprint, Response, g, jsonify, request

from sitedesk.core.errors import ProtectedRecordError, SiteDeskError, StorageQuotaError
from sitedesk.core.settings import get_setting
from sitedesk.core.workspace import get_workspace, normalize_id

log = logging.getLogger("sitedesk.dashboard")

bp = Blueprint("dashboard", __name__)

ROUTE_MODULES = [
    "routes_sync",
    "routes_masters",
    "routes_users",
    "routes_procurement",
    "routes_billing",
    "routes_agents",
]

# ═══════════════════════════════════════════════════════════════════════
# Password Protection
# ═══════════════════════════════════════════════════════════════════════

def check_auth(username, password):
    return username == get_setting("dash_user") and password == get_setting("dash_pass")


def auth_required(f):
    @functools.wraps(f)
    def decorated(*args, **kwargs):
        auth = request.authorization
        if not auth or not check_auth(auth.username, auth.password):
            return Response(
                "🔒 SiteDesk Dashboard — Login Required",
                401, {"WWW-Authenticate": 'Basic realm="SiteDesk Dashboard"'})
        return f(*args, **kwargs)
    return decorated


# ── Request-level structured logging ────────────────────────────────────────

@bp.before_app_request
def _log_request_start():
    g.start_time = time.time()


@bp.after_app_request
def _log_request_end(response):
    if hasattr(g, "start_time"):
        duration_ms = round((time.time() - g.start_time) * 1000, 1)
        # Skip health spam
        if request.path not in ("/api/health",) and not request.path.startswith("/static"):
            log.info("%s %s → %d (%.0fms)",
                     request.method, request.path, response.status_code, duration_ms,
                     extra={"route": request.path, "method": request.method,
                            "status": response.status_code, "duration_ms": duration_ms,
                            "workspace": request.headers.get("X-Workspace-Id", "default")})
    return response


# ═══════════════════════════════════════════════════════════════════════
# Workspace / tab resolution
# ═══════════════════════════════════════════════════════════════════════

def current_workspace():
    """Workspace named by X-Workspace-Id (falls back to "default")."""
    return get_workspace(request.headers.get("X-Workspace-Id", "default"))


def current_tab() -> str:
    return normalize_id(request.headers.get("X-Tab-Id", "default"))


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def csv_response(filename: str, body: str) -> Response:
    return Response(
        body.encode("utf-8"), 200,
        {"Content-Type": "text/csv; charset=utf-8",
         "Content-Disposition": f'attachment; filename="{filename}"'})


# ═══════════════════════════════════════════════════════════════════════
# Errors
# ═══════════════════════════════════════════════════════════════════════

@bp.app_errorhandler(SiteDeskError)
def _handle_sitedesk_error(e):
    if isinstance(e, ProtectedRecordError) or (
            isinstance(e, StorageQuotaError) and not e.toasted):
        current_workspace().toasts.warning(e.message)
    log.info("%s %s rejected: %s", request.method, request.path, e.message,
             extra={"route": request.path, "method": request.method, "status": e.status_code})
    return jsonify(e.to_dict()), e.status_code


# ═══════════════════════════════════════════════════════════════════════
# Route modules
# ═══════════════════════════════════════════════════════════════════════

_loaded = []


def load_modules():
    """Import every route module so its @bp.route handlers attach to bp.

    Must run before the blueprint is registered on an app.
    """
    for name in ROUTE_MODULES:
        if name in _loaded:
            continue
        importlib.import_module(f"sitedesk.api.modules.{name}")
        _loaded.append(name)
        log.debug("Route module loaded: %s", name)
    return list(_loaded)
