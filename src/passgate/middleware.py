"""ASGI middleware that exposes the session principal through a ContextVar."""

from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import Any

from starlette.requests import Request
from starlette.types import ASGIApp, Receive, Scope, Send

from passgate.authenticator import Authenticator
from passgate.errors import ErrorMapper, PassgateError, RedirectSignal

logger = logging.getLogger(__name__)

# Principal of the request being handled, None when unauthenticated
principal_var: ContextVar[Any] = ContextVar("passgate_principal", default=None)


class AuthMiddleware:
    """ASGI middleware that checks the session before calling the app.

    Passgate conditions raised by the wrapped app (``RedirectSignal``,
    ``AuthorizationError``, ``StrategyNotFoundError``) are turned into
    responses, so route handlers can simply let them propagate.

    Args:
        app: The ASGI application to wrap.
        authenticator: The application's ``Authenticator``.
        exempt_paths: Exact paths that bypass the session check.
        exempt_prefixes: Path prefixes that bypass the session check.
        require_auth: If True, unauthenticated requests are rejected.
            If False, requests proceed with ``principal_var`` set to None.
        failure_redirect: Redirect unauthenticated requests here instead of
            answering 401. Only used when ``require_auth`` is True.
    """

    def __init__(
        self,
        app: ASGIApp,
        authenticator: Authenticator[Any],
        *,
        exempt_paths: set[str] | None = None,
        exempt_prefixes: set[str] | None = None,
        require_auth: bool = True,
        failure_redirect: str | None = None,
    ) -> None:
        self._app = app
        self._authenticator = authenticator
        self._exempt_paths = exempt_paths or set()
        self._exempt_prefixes = exempt_prefixes or set()
        self._require_auth = require_auth
        self._failure_redirect = failure_redirect or None
        self._error_mapper = ErrorMapper()

    def _is_exempt(self, path: str) -> bool:
        if path in self._exempt_paths:
            return True
        return any(path.startswith(prefix) for prefix in self._exempt_prefixes)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self._app(scope, receive, send)
            return

        path = scope.get("path", "")
        if self._is_exempt(path):
            await self._run_app(scope, receive, send)
            return

        request = Request(scope, receive)
        if self._require_auth and self._failure_redirect is not None:
            try:
                principal = await self._authenticator.is_authenticated(
                    request, failure_redirect=self._failure_redirect
                )
            except RedirectSignal as signal:
                await signal.to_response()(scope, receive, send)
                return
        else:
            principal = await self._authenticator.is_authenticated(request)

        if principal is None and self._require_auth:
            logger.warning("Rejected unauthenticated request to %s", path)
            await self._error_mapper.to_response(PassgateError("Authentication required"))(scope, receive, send)
            return

        token = principal_var.set(principal)
        try:
            await self._run_app(scope, receive, send)
        finally:
            principal_var.reset(token)

    async def _run_app(self, scope: Scope, receive: Receive, send: Send) -> None:
        response_started = False

        async def tracking_send(message: dict[str, Any]) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self._app(scope, receive, tracking_send)
        except (RedirectSignal, PassgateError) as exc:
            if response_started:
                raise
            logger.debug("Converting %s raised by the application", type(exc).__name__)
            await self._error_mapper.to_response(exc)(scope, receive, send)
