"""Shared test fixtures for passgate tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import pytest
from starlette.requests import Request

from passgate import Authenticator, AuthorizationError, MemorySessionStorage, RedirectSignal, StrategyOptions
from passgate.session.protocol import SessionStorage

# ---------------------------------------------------------------------------
# Lightweight strategies implementing the Strategy protocol.
# ---------------------------------------------------------------------------


@dataclass
class StaticStrategy:
    """Returns a fixed principal and records every call."""

    name: str
    principal: Any = None
    calls: list[tuple[Request, SessionStorage, StrategyOptions]] = field(default_factory=list)

    async def authenticate(self, request: Request, session_storage: SessionStorage, options: StrategyOptions) -> Any:
        self.calls.append((request, session_storage, options))
        return self.principal


@dataclass
class FailingStrategy:
    """Always raises AuthorizationError with ``message``."""

    name: str
    message: str = "invalid credentials"

    async def authenticate(self, request: Request, session_storage: SessionStorage, options: StrategyOptions) -> Any:
        raise AuthorizationError(self.message)


@dataclass
class BodyReadingStrategy:
    """Reads the request body and returns it as the principal."""

    name: str = "body"

    async def authenticate(self, request: Request, session_storage: SessionStorage, options: StrategyOptions) -> Any:
        return {"body": (await request.body()).decode()}


@dataclass
class SessionWritingStrategy:
    """Persists ``principal`` in the session and honours the redirect options."""

    name: str
    principal: Any

    async def authenticate(self, request: Request, session_storage: SessionStorage, options: StrategyOptions) -> Any:
        session = await session_storage.get_session(request.headers.get("cookie"))
        session.set(options.session_key, self.principal)
        cookie = await session_storage.commit_session(session)
        if options.success_redirect:
            raise RedirectSignal(options.success_redirect, {"set-cookie": cookie})
        return self.principal


# ---------------------------------------------------------------------------
# Request helpers
# ---------------------------------------------------------------------------


def build_request(
    *,
    method: str = "POST",
    path: str = "/login",
    body: bytes = b"",
    headers: dict[str, str] | None = None,
) -> Request:
    """Build a Starlette Request whose body is delivered by a one-shot receive()."""
    raw_headers = [(k.lower().encode("latin-1"), v.encode("latin-1")) for k, v in (headers or {}).items()]
    scope: dict[str, Any] = {
        "type": "http",
        "method": method,
        "path": path,
        "raw_path": path.encode(),
        "query_string": b"",
        "root_path": "",
        "scheme": "http",
        "server": ("testserver", 80),
        "headers": raw_headers,
    }
    delivered = False

    async def receive() -> dict[str, Any]:
        nonlocal delivered
        if delivered:
            return {"type": "http.disconnect"}
        delivered = True
        return {"type": "http.request", "body": body, "more_body": False}

    return Request(scope, receive)


async def seed_session(storage: MemorySessionStorage, data: dict[str, Any]) -> str:
    """Store ``data`` as a committed session and return the matching Cookie header."""
    session = await storage.get_session(None)
    for key, value in data.items():
        session.set(key, value)
    await storage.commit_session(session)
    return f"{storage.cookie_name}={session.id}"


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def storage() -> MemorySessionStorage:
    return MemorySessionStorage()


@pytest.fixture
def authenticator(storage: MemorySessionStorage) -> Authenticator[Any]:
    return Authenticator(storage)
