"""Strategy protocol for pluggable authentication methods."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, TypeVar, runtime_checkable

from starlette.requests import Request

if TYPE_CHECKING:
    from passgate.session.protocol import SessionStorage

User = TypeVar("User")
User_co = TypeVar("User_co", covariant=True)


@dataclass(frozen=True)
class StrategyOptions:
    """Options the Authenticator hands to a strategy on every call.

    Attributes:
        session_key: Key under which the principal lives in the session.
        success_redirect: Where to redirect once authentication succeeds.
        failure_redirect: Where to redirect when authentication fails.
    """

    session_key: str
    success_redirect: str | None = None
    failure_redirect: str | None = None


@runtime_checkable
class Strategy(Protocol[User_co]):
    """Protocol for authentication strategies.

    A strategy owns its whole authentication flow. It either returns the
    principal, raises :class:`~passgate.errors.AuthorizationError`, or raises
    :class:`~passgate.errors.RedirectSignal`. A strategy that redirects on
    success persists the principal through ``session_storage`` under
    ``options.session_key`` before raising the signal.
    """

    name: str

    async def authenticate(
        self,
        request: Request,
        session_storage: SessionStorage,
        options: StrategyOptions,
    ) -> User_co:
        """Authenticate a request.

        Args:
            request: A private copy of the inbound request; its body may be read.
            session_storage: The only write path for persisting the principal.
            options: Session key and the caller's redirect targets.

        Returns:
            The authenticated principal.
        """
        ...
