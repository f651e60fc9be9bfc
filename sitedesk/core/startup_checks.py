"""
sitedesk/core/startup_checks.py — Runtime Self-Test on App Boot

Runs once from create_app(). Checks the things that only fail at runtime:

  1. Path resolution — DATA_DIR exists and is writable
  2. Settings — every registered setting resolves, defaults flagged
  3. Storage — the blob store opens and round-trips a value
  4. Seeds — seed ids are unique per entity type and never collide
  5. Route integrity — no duplicate endpoints on the app
"""

import logging

log = logging.getLogger("sitedesk.startup")


def run_startup_checks(app=None) -> dict:
    """Run all startup validation checks. Call from app.py after blueprint registration.

    Returns:
        {"passed": int, "failed": int, "warnings": int, "details": [...]}
    """
    results = {"passed": 0, "failed": 0, "warnings": 0, "details": []}

    def _pass(msg):
        results["passed"] += 1
        results["details"].append(("PASS", msg))
        log.info("✅ %s", msg)

    def _fail(msg):
        results["failed"] += 1
        results["details"].append(("FAIL", msg))
        log.error("❌ STARTUP CHECK FAILED: %s", msg)

    def _warn(msg):
        results["warnings"] += 1
        results["details"].append(("WARN", msg))
        log.warning("⚠️  %s", msg)

    # ── 1. Path Validation ────────────────────────────────────────────────────
    try:
        from sitedesk.core.paths import validate_paths, DATA_DIR
        path_result = validate_paths()
        if path_result["ok"]:
            _pass(f"All paths valid (DATA_DIR={DATA_DIR})")
        else:
            for err in path_result["errors"]:
                _fail(err)
        for warn in path_result.get("warnings", []):
            _warn(warn)
    except Exception as e:
        _fail(f"Path validation error: {e}")

    # ── 2. Settings ───────────────────────────────────────────────────────────
    try:
        from sitedesk.core.settings import validate_all
        report = validate_all()
        _pass(f"Settings resolved ({report['set']}/{report['total']} from environment)")
        for warn in report["warnings"]:
            _warn(warn)
    except Exception as e:
        _fail(f"Settings check error: {e}")

    # ── 3. Storage Round-Trip ─────────────────────────────────────────────────
    try:
        from sitedesk.core.blob_store import open_blob_store
        probe = open_blob_store("__startup__")
        probe.set_item("probe", "ok")
        value = probe.get_item("probe")
        probe.remove_item("probe")
        if value == "ok":
            _pass(f"Blob store round-trip ok ({type(probe).__name__})")
        else:
            _fail(f"Blob store returned {value!r} for a value just written")
    except Exception as e:
        _fail(f"Blob store unavailable: {e}")

    # ── 4. Seed Integrity ─────────────────────────────────────────────────────
    try:
        from sitedesk.core.workspace import STORE_SPECS
        bad = []
        for key, spec in STORE_SPECS.items():
            ids = [str(s["id"]) for s in spec.seeds]
            if len(ids) != len(set(ids)):
                bad.append(key)
        if bad:
            _fail(f"Duplicate seed ids in: {', '.join(bad)}")
        else:
            _pass(f"Seed data consistent ({len(STORE_SPECS)} entity types)")
    except Exception as e:
        _warn(f"Seed check skipped: {e}")

    # ── 5. Route Integrity (if app provided) ──────────────────────────────────
    if app:
        try:
            rules = [r for r in app.url_map.iter_rules()
                     if r.endpoint and not r.endpoint.startswith("static")]
            _pass(f"Flask routes registered: {len(rules)}")
            seen = {}
            for r in rules:
                for method in r.methods - {"HEAD", "OPTIONS"}:
                    sig = (r.rule, method)
                    if sig in seen and seen[sig] != r.endpoint:
                        _fail(f"Route {method} {r.rule} claimed by {seen[sig]} and {r.endpoint}")
                    seen[sig] = r.endpoint
        except Exception as e:
            _warn(f"Route check skipped: {e}")

    # ── Summary ──────────────────────────────────────────────────────────────
    total = results["passed"] + results["failed"] + results["warnings"]
    if results["failed"] > 0:
        log.error("STARTUP: %d/%d checks FAILED — app may not work correctly",
                  results["failed"], total)
    else:
        log.info("STARTUP: All %d checks passed (%d warnings)",
                 results["passed"], results["warnings"])

    return results
