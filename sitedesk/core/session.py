"""
session.py — isAuthenticated / userEmail flags

The dashboard's login gate is a pair of storage keys, not a credential
check: login writes them, logout removes them, status reads them back.
Real credential checking happens at the HTTP layer (Basic auth).
"""

import logging

from sitedesk.core.errors import ValidationError
from sitedesk.core.workspace import IS_AUTHENTICATED, USER_EMAIL

log = logging.getLogger("sitedesk.session")


def status(ws) -> dict:
    return {
        "isAuthenticated": ws.blobs.get_item(IS_AUTHENTICATED) == "true",
        "isChecking": False,
        "userEmail": ws.blobs.get_item(USER_EMAIL) or "",
    }


def login(ws, email: str, password: str) -> dict:
    email = str(email or "").strip()
    if not email or not password:
        raise ValidationError("Please enter email and password")
    ws.blobs.set_item(IS_AUTHENTICATED, "true")
    ws.blobs.set_item(USER_EMAIL, email)
    log.info("Workspace %s signed in as %s", ws.id, email)
    return status(ws)


def logout(ws) -> dict:
    ws.blobs.remove_item(IS_AUTHENTICATED)
    ws.blobs.remove_item(USER_EMAIL)
    log.info("Workspace %s signed out", ws.id)
    return status(ws)
