"""
poller.py — Poll fallback for mounted views

Writes made by another server process go straight to the shared SQLite
file and never reach this process's ChangeBus. Mounted views therefore
re-check storage on a fixed interval (SITEDESK_POLL_INTERVAL_MS, 500 ms
by default, 0 disables) and reload when a watched revision moved.
"""

import logging
import threading
from typing import Callable

from sitedesk.core.settings import get_int

log = logging.getLogger("sitedesk.poller")


def configured_interval() -> float:
    """Poll interval in seconds from settings (0.0 = disabled)."""
    return max(0, get_int("poll_interval_ms")) / 1000.0


class PollFallback:
    """Background thread that calls `callback` every `interval` seconds."""

    def __init__(self, interval: float, callback: Callable, name: str = "poll-fallback"):
        self.interval = interval
        self.callback = callback
        self.name = name
        self._thread = None
        self._stop_event = threading.Event()
        self._running = False
        self.ticks = 0

    @property
    def running(self) -> bool:
        return self._running

    def start(self):
        """Start the background loop."""
        if self._running:
            log.warning("%s already running", self.name)
            return
        if self.interval <= 0:
            log.debug("%s disabled (interval=0)", self.name)
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run_loop, daemon=True, name=self.name)
        self._running = True
        self._thread.start()

    def stop(self):
        """Stop the loop and wait for the thread to exit."""
        if not self._running:
            return
        self._stop_event.set()
        if self._thread and self._thread is not threading.current_thread():
            self._thread.join(timeout=5)
        self._running = False
        self._thread = None

    def _run_loop(self):
        while not self._stop_event.wait(self.interval):
            try:
                self.callback()
                self.ticks += 1
            except Exception as e:
                log.error("%s tick failed: %s", self.name, e)
