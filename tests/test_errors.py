"""Tests for passgate error types and ErrorMapper."""

from __future__ import annotations

import json
import logging

import pytest
from starlette.responses import JSONResponse, RedirectResponse

from passgate import AuthorizationError, ErrorMapper, PassgateError, RedirectSignal, StrategyNotFoundError


@pytest.fixture
def mapper() -> ErrorMapper:
    return ErrorMapper()


class TestErrorTypes:
    def test_strategy_not_found_carries_name(self):
        error = StrategyNotFoundError("github")
        assert error.name == "github"
        assert error.message == "Strategy github not found."

    def test_strategy_not_found_is_lookup_error(self):
        assert isinstance(StrategyNotFoundError("x"), LookupError)
        assert isinstance(StrategyNotFoundError("x"), PassgateError)

    def test_authorization_error_keeps_cause(self):
        cause = TimeoutError("idp timeout")
        error = AuthorizationError("provider rejected", cause=cause)
        assert error.message == "provider rejected"
        assert error.cause is cause

    def test_redirect_signal_is_not_a_failure(self):
        assert not isinstance(RedirectSignal("/"), PassgateError)

    def test_redirect_signal_copies_headers(self):
        headers = {"set-cookie": "a=b"}
        signal = RedirectSignal("/home", headers)
        headers["x"] = "y"
        assert signal.headers == {"set-cookie": "a=b"}

    def test_redirect_signal_response(self):
        response = RedirectSignal("/home", {"set-cookie": "__session=abc; Path=/"}).to_response()
        assert isinstance(response, RedirectResponse)
        assert response.status_code == 302
        assert response.headers["location"] == "/home"
        assert response.headers["set-cookie"] == "__session=abc; Path=/"


class TestErrorMapper:
    def test_redirect(self, mapper: ErrorMapper):
        response = mapper.to_response(RedirectSignal("/login", status_code=303))
        assert response.status_code == 303
        assert response.headers["location"] == "/login"

    def test_authorization_error(self, mapper: ErrorMapper):
        response = mapper.to_response(AuthorizationError("invalid code"))
        assert isinstance(response, JSONResponse)
        assert response.status_code == 401
        assert json.loads(response.body) == {"error": "Unauthorized", "detail": "invalid code"}

    def test_authorization_error_without_message(self, mapper: ErrorMapper):
        response = mapper.to_response(AuthorizationError())
        assert json.loads(response.body)["detail"] == "Authentication failed"

    def test_strategy_not_found_hides_name(self, mapper: ErrorMapper, caplog: pytest.LogCaptureFixture):
        with caplog.at_level(logging.WARNING, logger="passgate.errors"):
            response = mapper.to_response(StrategyNotFoundError("internal-sso"))
        assert response.status_code == 401
        assert b"internal-sso" not in response.body
        assert "internal-sso" in caplog.text

    def test_unknown_exception_reraised(self, mapper: ErrorMapper):
        with pytest.raises(KeyError):
            mapper.to_response(KeyError("boom"))
