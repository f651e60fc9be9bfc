"""
events.py — Per-key change bus

One channel per storage key. A write publishes once; every subscriber of
that key gets a ChangeEvent. Subscribers in the writer's tab see it as the
same-document signal (e.g. "projectsUpdated"); subscribers in other tabs
see it as a cross-tab storage event. Receivers always re-read storage, the
event carries no payload beyond the key and revision.

Usage:
    sub = bus.subscribe("projects", on_change, tab_id="tab-a")
    bus.publish("projects", origin_tab="tab-b", revision=3)
    sub.cancel()
"""

import logging
import threading
from dataclasses import dataclass
from typing import Callable

log = logging.getLogger("sitedesk.events")

# Storage key → same-document signal name
SIGNALS = {
    "projects": "projectsUpdated",
    "subprojects": "subprojectsUpdated",
    "userRoles": "rolesUpdated",
    "manageTeamsUsers": "usersUpdated",
    "companies": "companiesUpdated",
    "projectPermissions": "permissionsUpdated",
}


def signal_for(key: str) -> str:
    return SIGNALS.get(key, f"{key}Updated")


@dataclass(frozen=True)
class ChangeEvent:
    key: str
    signal: str
    origin_tab: str
    revision: int
    cross_tab: bool

    @property
    def kind(self) -> str:
        """'storage' for other tabs, the signal name for the writer's tab."""
        return "storage" if self.cross_tab else self.signal

    def to_dict(self) -> dict:
        return {"key": self.key, "signal": self.signal, "kind": self.kind,
                "origin_tab": self.origin_tab, "revision": self.revision}


class Subscription:
    """Handle returned by ChangeBus.subscribe(). cancel() is idempotent."""

    def __init__(self, bus, key: str, callback: Callable, tab_id: str):
        self._bus = bus
        self.key = key
        self.callback = callback
        self.tab_id = tab_id
        self.active = True

    def cancel(self):
        if self.active:
            self.active = False
            self._bus._remove(self)


class ChangeBus:
    """In-process pub/sub, one channel per storage key."""

    def __init__(self):
        self._subs = {}
        self._lock = threading.Lock()
        self.published = 0

    def subscribe(self, key: str, callback: Callable, tab_id: str = "default") -> Subscription:
        sub = Subscription(self, key, callback, tab_id)
        with self._lock:
            self._subs.setdefault(key, []).append(sub)
        return sub

    def _remove(self, sub: Subscription):
        with self._lock:
            subs = self._subs.get(sub.key, [])
            if sub in subs:
                subs.remove(sub)
            if not subs:
                self._subs.pop(sub.key, None)

    def subscriber_count(self, key: str = None) -> int:
        with self._lock:
            if key is not None:
                return len(self._subs.get(key, []))
            return sum(len(v) for v in self._subs.values())

    def publish(self, key: str, origin_tab: str = "default", revision: int = 0) -> int:
        """Deliver a change to every subscriber of `key`. Returns delivery count.

        Delivery is synchronous. A subscriber that raises is logged and
        skipped; the remaining subscribers still receive the event.
        """
        with self._lock:
            targets = list(self._subs.get(key, []))
            self.published += 1
        delivered = 0
        for sub in targets:
            if not sub.active:
                continue
            event = ChangeEvent(key=key, signal=signal_for(key), origin_tab=origin_tab,
                                revision=revision, cross_tab=sub.tab_id != origin_tab)
            try:
                sub.callback(event)
                delivered += 1
            except Exception as e:
                log.error("Subscriber for %s (tab=%s) failed: %s", key, sub.tab_id, e,
                          exc_info=True)
        return delivered
