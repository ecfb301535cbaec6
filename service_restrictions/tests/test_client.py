"""
Unit tests for client address resolution.
"""

import pytest

from service_restrictions.app.client import (
    resolve_client_ip, extract_forwarded_ip, get_header
)
from shared.errors import UnresolvedAddressError


class TestExtractForwardedIP:
    """Test cases for X-Forwarded-For parsing."""

    def test_single_address(self):
        assert extract_forwarded_ip("203.0.113.9") == "203.0.113.9"

    def test_first_hop_wins(self):
        assert extract_forwarded_ip("203.0.113.9, 10.0.0.1, 10.0.0.2") == "203.0.113.9"

    def test_whitespace_is_trimmed(self):
        assert extract_forwarded_ip("  203.0.113.9  ,10.0.0.1") == "203.0.113.9"

    @pytest.mark.parametrize("value", [None, "", "   ", ", 10.0.0.1"])
    def test_nothing_to_extract(self, value):
        assert extract_forwarded_ip(value) is None


class TestGetHeader:
    """Test cases for header lookup."""

    def test_exact_name(self):
        assert get_header({"X-Forwarded-For": "1.2.3.4"}, "X-Forwarded-For") == "1.2.3.4"

    def test_case_insensitive(self):
        assert get_header({"x-forwarded-for": "1.2.3.4"}, "X-Forwarded-For") == "1.2.3.4"

    def test_missing(self):
        assert get_header({"Host": "example.com"}, "X-Forwarded-For") is None
        assert get_header(None, "X-Forwarded-For") is None


class TestResolveClientIP:
    """Test cases for resolve_client_ip."""

    def test_prefers_forwarded_header(self):
        headers = {"X-Forwarded-For": "203.0.113.9, 10.0.0.1"}

        assert resolve_client_ip("10.0.0.1", headers) == "203.0.113.9"

    def test_falls_back_to_remote_address(self):
        assert resolve_client_ip("198.51.100.4", {}) == "198.51.100.4"

    def test_empty_header_falls_back(self):
        assert resolve_client_ip("198.51.100.4", {"X-Forwarded-For": " "}) == "198.51.100.4"

    def test_header_ignored_when_disabled(self):
        headers = {"X-Forwarded-For": "203.0.113.9"}

        assert resolve_client_ip("10.0.0.1", headers, check_x_forwarded_for=False) == "10.0.0.1"

    def test_header_only(self):
        assert resolve_client_ip(None, {"X-Forwarded-For": "203.0.113.9"}) == "203.0.113.9"

    @pytest.mark.parametrize("remote_addr", [None, ""])
    def test_unresolved(self, remote_addr):
        with pytest.raises(UnresolvedAddressError) as exc_info:
            resolve_client_ip(remote_addr, {})

        assert exc_info.value.code == "UNRESOLVED_ADDRESS"

    def test_unresolved_when_header_disabled(self):
        with pytest.raises(UnresolvedAddressError):
            resolve_client_ip(None, {"X-Forwarded-For": "203.0.113.9"}, check_x_forwarded_for=False)
