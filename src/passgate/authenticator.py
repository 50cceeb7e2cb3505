"""Authenticator: dispatches requests to strategies and reads the session principal."""

from __future__ import annotations

import logging
from typing import Generic

from starlette.requests import Request

from passgate._utils import clone_request, session_header
from passgate.errors import AuthorizationError, RedirectSignal, StrategyNotFoundError
from passgate.outcome import Authenticated, Failed, Outcome, Redirect, RedirectOptions
from passgate.registry import StrategyRegistry
from passgate.session.protocol import SessionStorage
from passgate.strategy import Strategy, StrategyOptions, User

logger = logging.getLogger(__name__)

DEFAULT_SESSION_KEY = "user"


class Authenticator(Generic[User]):
    """Runs named authentication strategies against a shared session storage.

    Build one instance at startup, register strategies, and pass it to the
    code that handles requests.

    Args:
        session_storage: Storage used to read and persist the principal.
        session_key: Session slot holding the principal. Fixed for the
            lifetime of the authenticator.

    Example::

        authenticator = Authenticator(MemorySessionStorage())
        authenticator.use(FormStrategy()).use(FormStrategy(), "admin-form")

        user = await authenticator.authenticate("form", request, failure_redirect="/login")
    """

    def __init__(
        self,
        session_storage: SessionStorage,
        *,
        session_key: str = DEFAULT_SESSION_KEY,
    ) -> None:
        if session_storage is None:
            raise TypeError("session_storage is required")
        if not session_key:
            raise ValueError("session_key must not be empty")
        self._session_storage = session_storage
        self._session_key = session_key
        self._registry: StrategyRegistry[User] = StrategyRegistry()

    @property
    def session_key(self) -> str:
        return self._session_key

    @property
    def session_storage(self) -> SessionStorage:
        return self._session_storage

    @property
    def strategies(self) -> list[str]:
        """Names of the registered strategies, sorted."""
        return self._registry.names()

    def use(self, strategy: Strategy[User], name: str | None = None) -> Authenticator[User]:
        """Register ``strategy`` under ``name`` (default: ``strategy.name``).

        A strategy already registered under the same name is replaced.
        Returns the authenticator for chaining.
        """
        self._registry.register(strategy, name)
        return self

    def unuse(self, name: str) -> Authenticator[User]:
        """Remove the strategy registered under ``name``; unknown names are ignored."""
        self._registry.deregister(name)
        return self

    register = use
    deregister = unuse

    async def authenticate(
        self,
        name: str,
        request: Request,
        options: RedirectOptions | None = None,
        *,
        success_redirect: str | None = None,
        failure_redirect: str | None = None,
    ) -> User:
        """Authenticate ``request`` with the strategy registered as ``name``.

        The strategy receives its own copy of the request, so the caller can
        still read the original body afterwards.

        Returns:
            Whatever the strategy resolves to.

        Raises:
            StrategyNotFoundError: No strategy is registered under ``name``.
            ValueError: Both redirect targets were supplied.
            AuthorizationError: Raised by the strategy, passed through as is.
            RedirectSignal: Raised by the strategy, passed through as is.
        """
        redirects = RedirectOptions.resolve(
            options,
            success_redirect=success_redirect,
            failure_redirect=failure_redirect,
        )
        strategy = self._registry.get(name)
        if strategy is None:
            logger.warning("Strategy not found: %s", name)
            raise StrategyNotFoundError(name)

        strategy_options = StrategyOptions(
            session_key=self._session_key,
            success_redirect=redirects.success_redirect,
            failure_redirect=redirects.failure_redirect,
        )
        logger.debug("Authenticating %s %s with strategy %s", request.method, request.url.path, name)
        return await strategy.authenticate(await clone_request(request), self._session_storage, strategy_options)

    async def is_authenticated(
        self,
        request: Request,
        options: RedirectOptions | None = None,
        *,
        success_redirect: str | None = None,
        failure_redirect: str | None = None,
    ) -> User | None:
        """Return the principal stored in the request's session, or None.

        No strategy runs. With ``success_redirect`` an authenticated request
        raises :class:`RedirectSignal` instead of returning (the principal
        stays in the session); with ``failure_redirect`` an unauthenticated
        request raises :class:`RedirectSignal`.
        """
        redirects = RedirectOptions.resolve(
            options,
            success_redirect=success_redirect,
            failure_redirect=failure_redirect,
        )
        session = await self._session_storage.get_session(session_header(request))
        user: User | None = session.get(self._session_key)

        if user is not None:
            if redirects.success_redirect is not None:
                logger.debug("Authenticated request, redirecting to %s", redirects.success_redirect)
                raise RedirectSignal(redirects.success_redirect)
            return user

        if redirects.failure_redirect is not None:
            logger.debug("Unauthenticated request, redirecting to %s", redirects.failure_redirect)
            raise RedirectSignal(redirects.failure_redirect)
        return None

    async def attempt(
        self,
        name: str,
        request: Request,
        options: RedirectOptions | None = None,
    ) -> Outcome:
        """Like :meth:`authenticate`, but report the result as an :data:`Outcome`.

        ``StrategyNotFoundError`` and ``AuthorizationError`` become
        :class:`Failed`; a redirect becomes :class:`Redirect`. Other
        exceptions propagate.
        """
        try:
            user = await self.authenticate(name, request, options)
        except RedirectSignal as signal:
            return Redirect.from_signal(signal)
        except (StrategyNotFoundError, AuthorizationError) as exc:
            return Failed(reason=exc.message, error=exc)
        return Authenticated(user)

    async def check(
        self,
        request: Request,
        options: RedirectOptions | None = None,
    ) -> Outcome:
        """Like :meth:`is_authenticated`, but report the result as an :data:`Outcome`."""
        try:
            user = await self.is_authenticated(request, options)
        except RedirectSignal as signal:
            return Redirect.from_signal(signal)
        if user is None:
            return Failed(reason="not authenticated")
        return Authenticated(user)
