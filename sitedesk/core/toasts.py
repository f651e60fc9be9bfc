"""
toasts.py — User-visible notification log

Services call success/error/warning/info; the client drains the log via
GET /api/toasts and renders them. Keeps the last 50 per workspace.
"""

import threading
import uuid
import logging
from collections import deque
from datetime import datetime

log = logging.getLogger("sitedesk.toasts")

TOAST_TYPES = ("success", "error", "warning", "info")


class ToastLog:

    def __init__(self, maxlen: int = 50):
        self._items = deque(maxlen=maxlen)
        self._lock = threading.Lock()

    def push(self, toast_type: str, message: str) -> dict:
        if toast_type not in TOAST_TYPES:
            toast_type = "info"
        toast = {
            "id": f"t_{uuid.uuid4().hex[:8]}",
            "type": toast_type,
            "message": message,
            "ts": datetime.now().isoformat(),
        }
        with self._lock:
            self._items.append(toast)
        log.debug("toast %s: %s", toast_type, message)
        return toast

    def success(self, message: str) -> dict:
        return self.push("success", message)

    def error(self, message: str) -> dict:
        return self.push("error", message)

    def warning(self, message: str) -> dict:
        return self.push("warning", message)

    def info(self, message: str) -> dict:
        return self.push("info", message)

    def recent(self, limit: int = 50) -> list:
        with self._lock:
            return list(self._items)[-limit:]

    def drain(self) -> list:
        """Return every pending toast and clear the log."""
        with self._lock:
            items = list(self._items)
            self._items.clear()
        return items
