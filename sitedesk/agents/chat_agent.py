"""
chat_agent.py — Chat-style agent panel

Simulated responder: replies are composed locally from the user's message,
nothing leaves the process. One AgentPanel per workspace holds the chat
sessions (newest first) and which session / agent workspace is current.

State machine:
    ready → thinking → ready   (reply appended)
                     → error   (no reply; next send starts over)
"""

import random
import logging
import threading
from datetime import datetime

from sitedesk.core.entity_store import new_id
from sitedesk.core.errors import RecordNotFound, ValidationError
from sitedesk.seed_data import AGENT_GREETING

log = logging.getLogger("sitedesk.agents")

AGENT_WORKSPACES = ("DPR", "Inventory")
PREVIEW_LEN = 20
ERROR_RATE = 0.1


def clock() -> str:
    """'01:44 AM' style timestamp used on messages and sessions."""
    return datetime.now().strftime("%I:%M %p")


def preview_of(text: str) -> str:
    if not text:
        return "New session"
    return text[:PREVIEW_LEN] + "..." if len(text) > PREVIEW_LEN else text


def _message(role: str, content: str, ts: str) -> dict:
    return {"id": new_id(), "role": role, "content": content, "timestamp": ts}


def _file_line(att: dict) -> str:
    try:
        size_kb = float(att.get("size") or 0) / 1024
    except (TypeError, ValueError):
        size_kb = 0.0
    return f"📎 {att.get('name', 'file')} ({size_kb:.2f} KB)"


def compose_reply(text: str, attachments: list) -> str:
    if text:
        extra = " I can see you've also attached some files." if attachments else ""
        return f'I understand you\'re asking about "{text}".{extra} Let me help you with that.'
    return f"I can see you've attached {len(attachments)} file(s). How can I help you with these files?"


class AgentPanel:

    def __init__(self, rng: random.Random = None, error_rate: float = ERROR_RATE):
        self.rng = rng or random.Random()
        self.error_rate = error_rate
        self.state = "ready"
        self.agent_workspace = AGENT_WORKSPACES[0]
        self._lock = threading.Lock()
        ts = clock()
        first = {
            "id": "1", "preview": "hello...", "time": ts,
            "messages": [
                {"id": "1", "role": "user", "content": "hello", "timestamp": ts},
                {"id": "2", "role": "assistant", "content": AGENT_GREETING, "timestamp": ts},
            ],
        }
        self.sessions = [first]
        self.current_id = first["id"]

    # ── Sessions ─────────────────────────────────────────────────────────────

    def _session(self, session_id: str) -> dict:
        for s in self.sessions:
            if s["id"] == str(session_id):
                return s
        raise RecordNotFound("Session not found")

    @property
    def current(self) -> dict:
        return self._session(self.current_id)

    def new_session(self) -> dict:
        with self._lock:
            session = {"id": new_id(), "preview": "New session", "time": clock(), "messages": []}
            self.sessions.insert(0, session)
            self.current_id = session["id"]
            self.state = "ready"
        return session

    def switch_session(self, session_id: str) -> dict:
        with self._lock:
            session = self._session(session_id)
            self.current_id = session["id"]
        return session

    def set_agent_workspace(self, name: str) -> str:
        if name not in AGENT_WORKSPACES:
            raise ValidationError(f"Unknown agent workspace: {name}")
        self.agent_workspace = name
        return name

    # ── Messages ─────────────────────────────────────────────────────────────

    def send(self, text: str = "", attachments: list = None) -> dict:
        """Append the user's message and, unless the responder fails, a reply.

        Returns {"message", "reply" (or None), "state"}.
        """
        text = str(text or "").strip()
        attachments = attachments or []
        if not isinstance(attachments, list) or not all(isinstance(a, dict) for a in attachments):
            raise ValidationError("Invalid attachment")
        if not text and not attachments:
            raise ValidationError("Please enter a message or attach a file")

        with self._lock:
            session = self.current
            ts = clock()
            content = text
            if attachments:
                files = "\n".join(_file_line(a) for a in attachments)
                content = f"{text}\n\n{files}" if text else f"Files attached:\n{files}"
            message = _message("user", content, ts)
            session["messages"].append(message)
            session["preview"] = preview_of(text or f"{len(attachments)} file(s) attached")
            session["time"] = ts

            self.state = "thinking"
            reply = None
            if self.rng.random() < self.error_rate:
                self.state = "error"
                log.warning("Agent responder failed (session=%s)", session["id"])
            else:
                reply = _message("assistant", compose_reply(text, attachments), clock())
                session["messages"].append(reply)
                self.state = "ready"
        return {"message": message, "reply": reply, "state": self.state}

    def to_dict(self) -> dict:
        return {
            "state": self.state,
            "workspace": self.agent_workspace,
            "workspaces": list(AGENT_WORKSPACES),
            "currentSessionId": self.current_id,
            "sessions": [{"id": s["id"], "preview": s["preview"], "time": s["time"]}
                         for s in self.sessions],
            "messages": list(self.current["messages"]),
        }


_panel_lock = threading.Lock()


def panel_for(ws) -> AgentPanel:
    """The workspace's panel, created on first use."""
    with _panel_lock:
        if ws.agent_panel is None:
            ws.agent_panel = AgentPanel()
        return ws.agent_panel
