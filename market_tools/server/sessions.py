"""
Session Registry

Tracks the MCP sessions opened over the HTTP transport. The registry belongs
to one application instance (``app.state.sessions``); nothing here is global.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional

from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger(__name__)

SESSION_HEADER = "mcp-session-id"


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class SessionInfo:
    session_id: str
    created_at: datetime = field(default_factory=_now)
    last_seen: datetime = field(default_factory=_now)
    requests: int = 1


class SessionRegistry:
    """In-memory map of session id -> SessionInfo."""

    def __init__(self):
        self._sessions: Dict[str, SessionInfo] = {}

    def open(self, session_id: str) -> SessionInfo:
        """Register a session, or touch it when already known."""
        info = self._sessions.get(session_id)
        if info is not None:
            return self.touch(session_id)
        info = SessionInfo(session_id=session_id)
        self._sessions[session_id] = info
        logger.info(f"Session opened: {session_id}")
        return info

    def touch(self, session_id: str) -> Optional[SessionInfo]:
        info = self._sessions.get(session_id)
        if info is None:
            return None
        info.last_seen = _now()
        info.requests += 1
        return info

    def close(self, session_id: str) -> bool:
        """Forget a session. Returns False when it was not registered."""
        info = self._sessions.pop(session_id, None)
        if info is None:
            return False
        logger.info(f"Session closed: {session_id} after {info.requests} requests")
        return True

    def get(self, session_id: str) -> Optional[SessionInfo]:
        return self._sessions.get(session_id)

    def active(self) -> List[str]:
        return list(self._sessions)

    def clear(self) -> None:
        if self._sessions:
            logger.info(f"Closing {len(self._sessions)} remaining sessions")
        self._sessions.clear()

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)


def _header(headers, name: str) -> Optional[str]:
    target = name.encode("latin-1")
    for key, value in headers:
        if key.lower() == target:
            return value.decode("latin-1")
    return None


class SessionTrackingMiddleware:
    """
    ASGI middleware keeping a SessionRegistry in step with the transport.

    - 2xx response carrying a session header: open (or touch) that session
    - DELETE with a session header: close it
    - 404 for a request that named a session: the transport no longer knows
      it, so close it here too
    """

    def __init__(self, app: ASGIApp, registry: SessionRegistry):
        self.app = app
        self.registry = registry

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        method = scope.get("method", "GET")
        requested = _header(scope.get("headers") or [], SESSION_HEADER)

        async def send_wrapper(message: Message) -> None:
            if message["type"] == "http.response.start":
                self._observe(method, requested, message)
            await send(message)

        await self.app(scope, receive, send_wrapper)

    def _observe(self, method: str, requested: Optional[str], message: Message) -> None:
        status = message.get("status", 500)
        returned = _header(message.get("headers") or [], SESSION_HEADER)

        if method == "DELETE" and requested:
            if status < 400 or status == 404:
                self.registry.close(requested)
            return

        if status == 404 and requested:
            self.registry.close(requested)
            return

        if 200 <= status < 300:
            session_id = returned or requested
            if session_id:
                self.registry.open(session_id)
