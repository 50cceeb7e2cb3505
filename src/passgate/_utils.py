"""Internal request helpers for passgate."""

from __future__ import annotations

from starlette.requests import Request
from starlette.types import Message


async def clone_request(request: Request) -> Request:
    """Return an independent copy of ``request`` whose body can be read again.

    Starlette caches the body on the original after the first read, so the
    caller keeps access to it; the clone replays the same bytes from its own
    ``receive`` channel.
    """
    body = await request.body()
    sent = False

    async def receive() -> Message:
        nonlocal sent
        if sent:
            return {"type": "http.disconnect"}
        sent = True
        return {"type": "http.request", "body": body, "more_body": False}

    scope = dict(request.scope)
    # Starlette memoises parsed state on the scope; give the clone its own
    scope["state"] = dict(request.scope.get("state", {}))
    return Request(scope, receive)


def session_header(request: Request) -> str | None:
    """Return the header that identifies the request's session."""
    return request.headers.get("cookie")
