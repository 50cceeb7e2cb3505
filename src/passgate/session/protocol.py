"""Session store contract consumed by the Authenticator and strategies."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Session(Protocol):
    """A single client's session record."""

    @property
    def id(self) -> str: ...

    @property
    def data(self) -> dict[str, Any]: ...

    def has(self, key: str) -> bool: ...

    def get(self, key: str) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...

    def unset(self, key: str) -> None: ...


@runtime_checkable
class SessionStorage(Protocol):
    """Protocol for session storage engines.

    Implementations look sessions up by the request's ``Cookie`` header and
    must keep concurrent access to different sessions independent.
    """

    async def get_session(self, cookie_header: str | None = None) -> Session:
        """Return the session identified by the cookie header, or a new empty one."""
        ...

    async def commit_session(self, session: Session) -> str:
        """Persist the session and return a ``Set-Cookie`` header value."""
        ...

    async def destroy_session(self, session: Session) -> str:
        """Drop the session and return a ``Set-Cookie`` header value that clears it."""
        ...
