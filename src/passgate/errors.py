"""Error types and the ErrorMapper that turns them into HTTP responses."""

from __future__ import annotations

import logging
from typing import Any

from starlette.responses import JSONResponse, RedirectResponse, Response

logger = logging.getLogger(__name__)


class PassgateError(Exception):
    """Base class for authentication failures raised by passgate."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


class AuthorizationError(PassgateError):
    """Raised by a strategy when authentication fails.

    The message is strategy-defined and reaches the caller unmodified.
    """

    def __init__(self, message: str = "", *, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class StrategyNotFoundError(PassgateError, LookupError):
    """Raised when ``authenticate`` is called with an unregistered strategy name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Strategy {name} not found.")
        self.name = name


class RedirectSignal(Exception):
    """Short-circuit normal processing and answer with a redirect instead.

    Not a failure: callers should turn it into a redirect response, for
    instance with :meth:`to_response` or :class:`ErrorMapper`.

    Args:
        url: Redirect target.
        headers: Extra response headers, typically a ``Set-Cookie`` that
            commits the session.
        status_code: HTTP status of the redirect response.
    """

    def __init__(self, url: str, headers: dict[str, str] | None = None, *, status_code: int = 302) -> None:
        super().__init__(url)
        self.url = url
        self.headers: dict[str, str] = dict(headers or {})
        self.status_code = status_code

    def __repr__(self) -> str:
        return f"RedirectSignal(url={self.url!r}, status_code={self.status_code})"

    def to_response(self) -> RedirectResponse:
        return RedirectResponse(self.url, status_code=self.status_code, headers=self.headers)


class ErrorMapper:
    """Maps passgate exceptions to Starlette responses."""

    # Shown instead of the message for errors that would leak configuration
    _GENERIC_DETAIL = "Authentication failed"

    def to_response(self, error: Exception) -> Response:
        """Convert a redirect signal or passgate error into a response.

        Returns:
            A ``RedirectResponse`` for :class:`RedirectSignal`, or a 401 JSON
            response for :class:`PassgateError` subclasses.

        Raises:
            Exception: ``error`` itself when it is not a passgate condition.
        """
        if isinstance(error, RedirectSignal):
            return error.to_response()

        if isinstance(error, StrategyNotFoundError):
            # The strategy name is server configuration, keep it out of the body
            logger.warning("Authentication attempted with unknown strategy %r", error.name)
            return self._unauthorized(self._GENERIC_DETAIL)

        if isinstance(error, PassgateError):
            return self._unauthorized(error.message or self._GENERIC_DETAIL)

        raise error

    @staticmethod
    def _unauthorized(detail: str) -> JSONResponse:
        body: dict[str, Any] = {"error": "Unauthorized", "detail": detail}
        return JSONResponse(body, status_code=401)
