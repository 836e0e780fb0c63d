"""Tests for the built-in constraint functions."""

from __future__ import annotations

import math

import pytest

from envcheck.core.types import ConstraintKind
from envcheck.validation.constraints import (
    CONSTRAINTS,
    validate_boolean,
    validate_contains,
    validate_email,
    validate_enum,
    validate_equals,
    validate_length_range,
    validate_max_length,
    validate_numeric,
    validate_presence,
    validate_url,
)


class TestRegistry:
    def test_every_kind_registered(self):
        assert set(CONSTRAINTS) == set(ConstraintKind)


class TestPresence:
    def test_empty(self):
        assert validate_presence(None) is not None
        assert validate_presence("") is not None
        assert validate_presence("   ") is not None

    def test_ok(self):
        assert validate_presence("hello") is None
        assert validate_presence(0) is None
        assert validate_presence(False) is None


class TestLengthRange:
    @pytest.mark.parametrize("size", [32, 48, 64])
    def test_within_bounds(self, size):
        assert validate_length_range("x" * size, min_bytes=32, max_bytes=64) is None

    @pytest.mark.parametrize("size", [31, 65])
    def test_outside_bounds(self, size):
        assert validate_length_range("x" * size, min_bytes=32, max_bytes=64) is not None

    def test_measured_in_bytes(self):
        # 16 two-byte characters are 32 bytes
        assert validate_length_range("é" * 16, min_bytes=32, max_bytes=64) is None
        assert validate_length_range("e" * 16, min_bytes=32, max_bytes=64) is not None

    def test_absent_value_fails(self):
        assert validate_length_range(None, min_bytes=1, max_bytes=2) is not None


class TestUrl:
    def test_valid(self):
        assert validate_url("https://example.com") is None
        assert validate_url("https://example.com:8443/path?q=1") is None
        assert validate_url("example.com") is None

    def test_protocol_allow_list(self):
        assert validate_url("postgres://u:p@host/db", protocols=["postgres"], require_tld=False) is None
        assert validate_url("mysql://u:p@host/db", protocols=["postgres"], require_tld=False) is not None

    def test_require_tld(self):
        assert validate_url("http://localhost:3000") is not None
        assert validate_url("http://localhost:3000", require_tld=False) is None

    def test_require_protocol(self):
        assert validate_url("example.com", require_protocol=True) is not None

    def test_ip_host(self):
        assert validate_url("http://127.0.0.1:8080") is None
        assert validate_url("http://[::1]:8080") is None

    def test_invalid(self):
        assert validate_url("not a url") is not None
        assert validate_url("http://") is not None
        assert validate_url("http://exa_mple.com") is not None
        assert validate_url("") is not None
        assert validate_url(None) is not None


class TestNumeric:
    def test_valid(self):
        assert validate_numeric(42) is None
        assert validate_numeric(0) is None
        assert validate_numeric("-7") is None

    def test_invalid(self):
        assert validate_numeric(math.nan) is not None
        assert validate_numeric("12abc") is not None
        assert validate_numeric("3.5") is not None
        assert validate_numeric(True) is not None
        assert validate_numeric(None) is not None

    def test_non_ascii_digits(self):
        assert validate_numeric("\u0663\u0660\u0660\u0660") is not None
        assert validate_numeric("\uff13\uff10") is not None


class TestEnum:
    def test_member(self):
        assert validate_enum("staging", values=["production", "staging"]) is None

    def test_case_sensitive(self):
        assert validate_enum("Staging", values=["production", "staging"]) is not None

    def test_not_member(self):
        err = validate_enum("qa", values=["production", "staging"])
        assert err is not None
        assert "production" in err


class TestBoolean:
    def test_bool(self):
        assert validate_boolean(True) is None
        assert validate_boolean(False) is None

    def test_not_bool(self):
        assert validate_boolean("true") is not None
        assert validate_boolean(None) is not None


class TestEmail:
    def test_valid(self):
        assert validate_email("user@example.com") is None
        assert validate_email("first.last+tag@mail.example.co") is None

    def test_invalid(self):
        assert validate_email("not-an-email") is not None
        assert validate_email("@no-local.com") is not None
        assert validate_email("user@localhost") is not None

    def test_display_name(self):
        assert validate_email("Outline <hello@example.com>") is not None
        assert validate_email("Outline <hello@example.com>", allow_display_name=True) is None

    def test_ip_domain(self):
        assert validate_email("user@[127.0.0.1]") is not None
        assert validate_email("user@[127.0.0.1]", allow_ip_domain=True) is None


class TestSimpleConstraints:
    def test_contains(self):
        assert validate_contains("UA-12345-1", needle="UA-") is None
        assert validate_contains("G-12345", needle="UA-") is not None

    def test_max_length(self):
        assert validate_max_length("x" * 50, limit=50) is None
        assert validate_max_length("x" * 51, limit=50) is not None

    def test_equals(self):
        assert validate_equals("hosted", expected="hosted") is None
        assert validate_equals("self", expected="hosted") is not None
