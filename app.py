#!/usr/bin/env python3
"""
SiteDesk — Application Entry Point
Creates Flask app and registers the dashboard Blueprint.
"""

import os
import logging
from flask import Flask

from logging_config import setup_logging

log = logging.getLogger("sitedesk")


def create_app():
    """Application factory."""
    from sitedesk.core.settings import get_setting, startup_check

    app = Flask(__name__)
    app.secret_key = get_setting("secret_key") or "sitedesk-dev"

    startup_check()

    # ── Persistent database init ──────────────────────────────────────────────
    if get_setting("storage_backend") == "sqlite":
        try:
            from sitedesk.core.db import startup as db_startup
            result = db_startup()
            log.info("DB: %s | workspaces=%d keys=%d bytes=%d",
                     result["db_path"],
                     result["stats"].get("workspaces", 0),
                     result["stats"].get("keys", 0),
                     result["stats"].get("bytes", 0))
        except Exception as e:
            log.warning("DB init skipped: %s", e)

    # Register the dashboard blueprint (all routes)
    from sitedesk.api.dashboard import bp, load_modules
    load_modules()
    app.register_blueprint(bp)

    # ── Runtime self-test: catches path/route/storage bugs at boot ────────────
    try:
        from sitedesk.core.startup_checks import run_startup_checks
        with app.app_context():
            checks = run_startup_checks(app)
            if checks["failed"] > 0:
                log.error("STARTUP: %d checks FAILED — review logs", checks["failed"])
    except Exception as e:
        log.warning("Startup checks skipped: %s", e)

    return app


# For gunicorn: gunicorn app:app
setup_logging()
app = create_app()

if __name__ == "__main__":
    port = int(os.environ.get("PORT", 5000))
    app.run(host="0.0.0.0", port=port, debug=False, threaded=True)
