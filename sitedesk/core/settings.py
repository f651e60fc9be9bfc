"""
settings.py — Centralized Configuration for SiteDesk

Single source of truth for every environment-driven setting.
Each entry documents its env var, default and purpose so the health
endpoint can report what is configured without leaking values.

Env vars:
  SECRET_KEY                    — Flask session signing key
  DASH_USER / DASH_PASS         — Basic auth credentials for the API
  SITEDESK_DATA_DIR             — Where sitedesk.db and logs live
  SITEDESK_STORAGE_BACKEND      — sqlite | memory
  SITEDESK_STORAGE_QUOTA_BYTES  — Per-workspace storage quota
  SITEDESK_POLL_INTERVAL_MS     — Poll fallback interval (0 disables)
  LOG_LEVEL                     — Root log level
  SITEDESK_JSON_LOGS            — Force JSON console logs

Security:
  - Sensitive values are never logged in full (masked to first 4 chars)
  - validate_all() reports set/default status, not values
"""

import os
import logging

log = logging.getLogger("sitedesk.settings")

# ─── Setting Definitions ────────────────────────────────────────────────────

_REGISTRY = {
    "secret_key": {
        "env": "SECRET_KEY",
        "default": "sitedesk-dev-key",
        "desc": "Flask session signing key",
        "sensitive": True,
    },
    "dash_user": {
        "env": "DASH_USER",
        "default": "sitedesk",
        "desc": "Dashboard Basic auth user",
    },
    "dash_pass": {
        "env": "DASH_PASS",
        "default": "changeme",
        "desc": "Dashboard Basic auth password",
        "sensitive": True,
    },
    "data_dir": {
        "env": "SITEDESK_DATA_DIR",
        "default": "",
        "desc": "Persistent data directory (defaults to <project>/data)",
    },
    "storage_backend": {
        "env": "SITEDESK_STORAGE_BACKEND",
        "default": "sqlite",
        "desc": "Blob store backend: sqlite or memory",
        "choices": ("sqlite", "memory"),
    },
    "storage_quota_bytes": {
        "env": "SITEDESK_STORAGE_QUOTA_BYTES",
        "default": "5000000",
        "desc": "Maximum stored bytes per workspace",
        "type": int,
    },
    "poll_interval_ms": {
        "env": "SITEDESK_POLL_INTERVAL_MS",
        "default": "500",
        "desc": "Poll fallback interval for mounted views (0 disables)",
        "type": int,
    },
    "log_level": {
        "env": "LOG_LEVEL",
        "default": "INFO",
        "desc": "Root log level",
    },
    "json_logs": {
        "env": "SITEDESK_JSON_LOGS",
        "default": "",
        "desc": "Emit JSON console logs when 'true'",
    },
}


# ─── Access ─────────────────────────────────────────────────────────────────

def get_setting(name: str) -> str:
    """Return the value for a registered setting (env first, then default).

    Unknown names return an empty string rather than raising, matching how
    callers treat optional configuration.
    """
    entry = _REGISTRY.get(name)
    if not entry:
        return ""
    return os.environ.get(entry["env"], "") or entry.get("default", "")


def get_int(name: str) -> int:
    raw = get_setting(name)
    try:
        return int(raw)
    except (TypeError, ValueError):
        default = int(_REGISTRY[name].get("default") or 0)
        log.warning("Setting %s=%r is not an integer, using %d", name, raw, default)
        return default


def get_bool(name: str) -> bool:
    return get_setting(name).strip().lower() in ("1", "true", "yes", "on")


def mask(value: str) -> str:
    """Mask a secret for display: first 4 chars + ****."""
    if not value:
        return "(not set)"
    if len(value) <= 8:
        return "****"
    return value[:4] + "****"


# ─── Validation ─────────────────────────────────────────────────────────────

def validate_all() -> dict:
    """Report every setting's source without exposing sensitive values.

    Returns:
        {"settings": {name: {...}}, "total": int, "set": int,
         "defaulted": int, "warnings": [str]}
    """
    report = {"settings": {}, "total": 0, "set": 0, "defaulted": 0, "warnings": []}
    for name, entry in _REGISTRY.items():
        env_value = os.environ.get(entry["env"], "")
        value = get_setting(name)
        shown = mask(value) if entry.get("sensitive") else value
        report["settings"][name] = {
            "env": entry["env"],
            "source": "env" if env_value else "default",
            "value": shown,
            "desc": entry["desc"],
        }
        report["total"] += 1
        if env_value:
            report["set"] += 1
        else:
            report["defaulted"] += 1

        choices = entry.get("choices")
        if choices and value not in choices:
            report["warnings"].append(f"{entry['env']}={value!r} not in {list(choices)}")
        if entry.get("type") is int:
            try:
                int(value)
            except ValueError:
                report["warnings"].append(f"{entry['env']}={value!r} is not an integer")

    if not os.environ.get("DASH_PASS"):
        report["warnings"].append("DASH_PASS not set — using the development password")
    return report


def startup_check() -> dict:
    """Log the configuration report once at boot."""
    report = validate_all()
    log.info("Settings: %d/%d from environment", report["set"], report["total"])
    for warning in report["warnings"]:
        log.warning("Settings: %s", warning)
    return report
