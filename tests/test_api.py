"""Tests for the passgate public API surface."""

from __future__ import annotations

import passgate


class TestExports:
    def test_all_names_resolve(self):
        for name in passgate.__all__:
            assert hasattr(passgate, name), name

    def test_version(self):
        assert passgate.__version__ == "0.1.0"

    def test_default_session_key(self):
        assert passgate.DEFAULT_SESSION_KEY == "user"
