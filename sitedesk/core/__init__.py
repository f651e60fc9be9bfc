"""Shared storage, synchronization, configuration and query helpers.

Modules:
    settings       — Environment-driven configuration registry
    paths          — Data directory resolution
    db             — SQLite connection factory
    blob_store     — Per-workspace key-value blob storage with quota
    events         — Per-key change bus (same-tab signals + cross-tab events)
    poller         — Poll fallback thread
    entity_store   — Named record collections with seed handling
    merge          — Default/override merge helpers
    table          — Search / sort / paginate
    csv_export     — CSV downloads with BOM
    toasts         — User-visible notification log
    workspace      — Workspace registry (one per browser profile)
    views          — Mounted consumers that reload on change
    media          — Image data-URL checks, avatar URLs, record codes
    session        — isAuthenticated / userEmail flags
    startup_checks — Runtime self-test on boot
"""
