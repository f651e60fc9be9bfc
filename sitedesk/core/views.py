"""
views.py — Mounted consumers of entity stores

A View is the server-side stand-in for a page component that keeps its own
render state in sync with one or more storage keys:

    with PermissionsView(ws, tab_id="tab-a").mounted() as view:
        ...  # view.state follows writes from any tab

mount() does one reload, subscribes to every watched key on the workspace
ChangeBus and starts the poll fallback; unmount() cancels all of it. The
poll only reloads when a watched key's revision moved since the last
reload, so an idle view costs one revision lookup per key per tick.
"""

import logging
import queue
import threading
from contextlib import contextmanager
from typing import Tuple

from sitedesk.core.poller import PollFallback, configured_interval

log = logging.getLogger("sitedesk.views")


class View:
    watches: Tuple[str, ...] = ()

    def __init__(self, workspace, tab_id: str = "default", poll_interval: float = None):
        self.workspace = workspace
        self.tab_id = tab_id
        self.poll_interval = configured_interval() if poll_interval is None else poll_interval
        self.state = {}
        self.reloads = 0
        self._seen = {}
        self._subs = []
        self._poller = None
        self._lock = threading.RLock()

    # ── Render state ─────────────────────────────────────────────────────────

    def read(self) -> dict:
        """Build fresh render state from storage. Subclasses override."""
        return {}

    def reload(self):
        """Read-and-replace of render state. Safe to call from any trigger."""
        with self._lock:
            seen = {key: self.workspace.blobs.revision(key) for key in self.watches}
            self.state = self.read()
            self._seen = seen
            self.reloads += 1
        return self.state

    def stale(self) -> bool:
        return any(self.workspace.blobs.revision(key) != self._seen.get(key)
                   for key in self.watches)

    # ── Triggers ─────────────────────────────────────────────────────────────

    def on_change(self, event):
        self.reload()

    def _poll(self):
        if self.stale():
            log.debug("%s poll picked up a change (tab=%s)", type(self).__name__, self.tab_id)
            self.reload()

    # ── Lifecycle ────────────────────────────────────────────────────────────

    @property
    def is_mounted(self) -> bool:
        return bool(self._subs) or (self._poller is not None and self._poller.running)

    def mount(self):
        if self.is_mounted:
            return self
        self.reload()
        bus = self.workspace.bus
        self._subs = [bus.subscribe(key, self.on_change, tab_id=self.tab_id) for key in self.watches]
        self._poller = PollFallback(self.poll_interval, self._poll,
                                    name=f"poll-{type(self).__name__}-{self.tab_id}")
        self._poller.start()
        return self

    def unmount(self):
        for sub in self._subs:
            sub.cancel()
        self._subs = []
        if self._poller is not None:
            self._poller.stop()
            self._poller = None

    @contextmanager
    def mounted(self):
        self.mount()
        try:
            yield self
        finally:
            self.unmount()


class EventStreamView(View):
    """Queues every change event for a server-sent-events response."""

    def __init__(self, workspace, tab_id: str = "default", watches=None):
        # The bus delivers pushes; no need to poll for a stream
        super().__init__(workspace, tab_id, poll_interval=0)
        self.watches = tuple(watches) if watches is not None else tuple(workspace.stores)
        self.queue = queue.Queue()

    def on_change(self, event):
        self.queue.put(event)

    def next_event(self, timeout: float = 15.0):
        """Next ChangeEvent, or None after `timeout` seconds (keep-alive)."""
        try:
            return self.queue.get(timeout=timeout)
        except queue.Empty:
            return None
