"""
sitedesk/core/paths.py — Centralized Path Configuration

Single source of truth for directory paths. Every module imports from
here instead of computing its own DATA_DIR.
"""

import os
import logging

from sitedesk.core.settings import get_setting

log = logging.getLogger("sitedesk.paths")

# ── Project Root ──────────────────────────────────────────────────────────────
_THIS_FILE = os.path.abspath(__file__)
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.dirname(_THIS_FILE)))


# ── Resolve persistent DATA_DIR ─────────────────────────────────────────────
# Priority: SITEDESK_DATA_DIR env → project data/
def _resolve_data_dir() -> str:
    """Find the persistent data directory."""
    env_dir = get_setting("data_dir")
    if env_dir:
        return env_dir
    return os.path.join(PROJECT_ROOT, "data")


DATA_DIR = _resolve_data_dir()
LOG_DIR = os.path.join(DATA_DIR, "logs")
DB_PATH = os.path.join(DATA_DIR, "sitedesk.db")

os.makedirs(DATA_DIR, exist_ok=True)


def db_path() -> str:
    """Current database path (tests repoint DATA_DIR at a tmp dir)."""
    return os.path.join(DATA_DIR, "sitedesk.db")


def validate_paths() -> dict:
    """Runtime validation — call at app startup to catch path issues early.

    Returns:
        {"ok": bool, "errors": [str], "warnings": [str], "resolved": {name: path}}
    """
    result = {"ok": True, "errors": [], "warnings": [], "resolved": {}}
    result["resolved"]["PROJECT_ROOT"] = PROJECT_ROOT
    result["resolved"]["DATA_DIR"] = DATA_DIR
    result["resolved"]["DB_PATH"] = db_path()

    if not os.path.isdir(DATA_DIR):
        result["errors"].append(f"DATA_DIR not found: {DATA_DIR}")
        result["ok"] = False
        return result

    test_file = os.path.join(DATA_DIR, ".write_test")
    try:
        with open(test_file, "w") as f:
            f.write("ok")
        os.remove(test_file)
    except OSError as e:
        result["errors"].append(f"DATA_DIR not writable: {e}")
        result["ok"] = False

    if not get_setting("data_dir"):
        result["warnings"].append(f"SITEDESK_DATA_DIR not set, using {DATA_DIR}")
    return result
