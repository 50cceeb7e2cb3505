"""Redirect options and tagged authentication outcomes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, Union

from starlette.responses import RedirectResponse

from passgate.errors import PassgateError, RedirectSignal
from passgate.strategy import User


@dataclass(frozen=True)
class RedirectOptions:
    """Per-call redirect behaviour.

    At most one of ``success_redirect`` and ``failure_redirect`` may be set.
    Empty strings count as unset.
    """

    success_redirect: str | None = None
    failure_redirect: str | None = None

    def __post_init__(self) -> None:
        # Normalise "" to None so callers can pass form values straight through
        if not self.success_redirect:
            object.__setattr__(self, "success_redirect", None)
        if not self.failure_redirect:
            object.__setattr__(self, "failure_redirect", None)
        if self.success_redirect is not None and self.failure_redirect is not None:
            raise ValueError(
                "success_redirect and failure_redirect are mutually exclusive: "
                f"got {self.success_redirect!r} and {self.failure_redirect!r}"
            )

    @classmethod
    def none(cls) -> RedirectOptions:
        return cls()

    @classmethod
    def on_success(cls, url: str) -> RedirectOptions:
        if not url:
            raise ValueError("success redirect URL must not be empty")
        return cls(success_redirect=url)

    @classmethod
    def on_failure(cls, url: str) -> RedirectOptions:
        if not url:
            raise ValueError("failure redirect URL must not be empty")
        return cls(failure_redirect=url)

    @classmethod
    def resolve(
        cls,
        options: RedirectOptions | None = None,
        *,
        success_redirect: str | None = None,
        failure_redirect: str | None = None,
    ) -> RedirectOptions:
        """Build options from either an instance or keyword arguments, not both."""
        if options is None:
            return cls(success_redirect=success_redirect, failure_redirect=failure_redirect)
        if success_redirect or failure_redirect:
            raise ValueError("Pass either a RedirectOptions instance or redirect keywords, not both")
        return options


@dataclass(frozen=True)
class Authenticated(Generic[User]):
    """The request is authenticated as ``principal``."""

    principal: User


@dataclass(frozen=True)
class Redirect:
    """The caller should answer with a redirect."""

    url: str
    headers: dict[str, str] = field(default_factory=dict)
    status_code: int = 302

    @classmethod
    def from_signal(cls, signal: RedirectSignal) -> Redirect:
        return cls(url=signal.url, headers=dict(signal.headers), status_code=signal.status_code)

    def to_response(self) -> RedirectResponse:
        return RedirectResponse(self.url, status_code=self.status_code, headers=self.headers)


@dataclass(frozen=True)
class Failed:
    """Authentication failed; ``error`` is the exception behind it, if any."""

    reason: str
    error: PassgateError | None = None


Outcome = Union[Authenticated[Any], Redirect, Failed]
