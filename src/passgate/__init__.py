"""passgate: strategy-based authentication orchestration for Starlette apps."""

from __future__ import annotations

import logging

from passgate.authenticator import DEFAULT_SESSION_KEY, Authenticator
from passgate.errors import (
    AuthorizationError,
    ErrorMapper,
    PassgateError,
    RedirectSignal,
    StrategyNotFoundError,
)
from passgate.middleware import AuthMiddleware, principal_var
from passgate.outcome import Authenticated, Failed, Outcome, Redirect, RedirectOptions
from passgate.registry import StrategyRegistry
from passgate.session import MemorySession, MemorySessionStorage, Session, SessionStorage
from passgate.strategy import Strategy, StrategyOptions

__all__ = [
    # Orchestration
    "Authenticator",
    "StrategyRegistry",
    "DEFAULT_SESSION_KEY",
    # Strategy contract
    "Strategy",
    "StrategyOptions",
    # Session contract
    "Session",
    "SessionStorage",
    "MemorySession",
    "MemorySessionStorage",
    # Errors and signals
    "PassgateError",
    "AuthorizationError",
    "StrategyNotFoundError",
    "RedirectSignal",
    "ErrorMapper",
    # Outcomes
    "RedirectOptions",
    "Authenticated",
    "Redirect",
    "Failed",
    "Outcome",
    # ASGI
    "AuthMiddleware",
    "principal_var",
    "configure_logging",
]

__version__ = "0.1.0"

logger = logging.getLogger(__name__)

_VALID_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def configure_logging(level: str) -> None:
    """Set the log level of the ``passgate`` logger (e.g. "DEBUG", "INFO")."""
    if level.upper() not in _VALID_LEVELS:
        raise ValueError(f"Unknown log level: {level!r}. Valid: {sorted(_VALID_LEVELS)}")
    logging.getLogger("passgate").setLevel(getattr(logging, level.upper()))
