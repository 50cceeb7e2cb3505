"""In-process session storage keyed by a session-id cookie."""

from __future__ import annotations

import copy
import logging
import secrets
import threading
from typing import Any

from starlette.requests import cookie_parser
from starlette.responses import Response

from passgate.session.protocol import Session

logger = logging.getLogger(__name__)


class MemorySession:
    """Session record backed by a plain dict."""

    def __init__(self, session_id: str, data: dict[str, Any] | None = None) -> None:
        self._id = session_id
        self._data: dict[str, Any] = dict(data or {})

    @property
    def id(self) -> str:
        return self._id

    @property
    def data(self) -> dict[str, Any]:
        return self._data

    def has(self, key: str) -> bool:
        return key in self._data

    def get(self, key: str) -> Any:
        return self._data.get(key)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def unset(self, key: str) -> None:
        self._data.pop(key, None)

    def __repr__(self) -> str:
        return f"MemorySession(id={self._id!r}, keys={sorted(self._data)})"


class MemorySessionStorage:
    """Keeps session data in a dict for the lifetime of the process.

    Suitable for tests and single-process deployments. Sessions are looked up
    by the id stored in the ``cookie_name`` cookie; each ``get_session`` call
    returns an independent copy, so changes only become visible to other
    requests after :meth:`commit_session`.

    Args:
        cookie_name: Name of the cookie that carries the session id.
        max_age: Cookie ``Max-Age`` in seconds, or None for a browser session.
        path: Cookie path.
        secure: Set the ``Secure`` cookie attribute.
        same_site: ``SameSite`` attribute (``lax``, ``strict`` or ``none``).
    """

    def __init__(
        self,
        *,
        cookie_name: str = "__session",
        max_age: int | None = None,
        path: str = "/",
        secure: bool = False,
        same_site: str = "lax",
    ) -> None:
        if not cookie_name:
            raise ValueError("cookie_name must not be empty")
        if max_age is not None and max_age < 0:
            raise ValueError(f"max_age must be non-negative: {max_age}")
        if same_site.lower() not in {"lax", "strict", "none"}:
            raise ValueError(f"Unknown same_site value: {same_site!r}. Expected 'lax', 'strict', or 'none'.")
        self._cookie_name = cookie_name
        self._max_age = max_age
        self._path = path
        self._secure = secure
        self._same_site = same_site.lower()
        self._sessions: dict[str, dict[str, Any]] = {}
        self._lock = threading.Lock()

    @property
    def cookie_name(self) -> str:
        return self._cookie_name

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    async def get_session(self, cookie_header: str | None = None) -> MemorySession:
        session_id = cookie_parser(cookie_header).get(self._cookie_name) if cookie_header else None
        if session_id:
            with self._lock:
                stored = self._sessions.get(session_id)
            if stored is not None:
                return MemorySession(session_id, copy.deepcopy(stored))
            logger.debug("Unknown session id in %s cookie, starting a new session", self._cookie_name)
        return MemorySession(secrets.token_urlsafe(32))

    async def commit_session(self, session: Session) -> str:
        with self._lock:
            self._sessions[session.id] = copy.deepcopy(dict(session.data))
        response = Response()
        response.set_cookie(
            self._cookie_name,
            session.id,
            max_age=self._max_age,
            path=self._path,
            secure=self._secure,
            httponly=True,
            samesite=self._same_site,
        )
        return response.headers["set-cookie"]

    async def destroy_session(self, session: Session) -> str:
        with self._lock:
            self._sessions.pop(session.id, None)
        response = Response()
        response.delete_cookie(
            self._cookie_name,
            path=self._path,
            secure=self._secure,
            httponly=True,
            samesite=self._same_site,
        )
        return response.headers["set-cookie"]
