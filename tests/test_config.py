# ============================================================================
# CONFIGURATION TESTS
# ============================================================================
# EPOCH: 1 - REQUEST AGGREGATION
# STATUS: Tests - Defaults and environment overrides
# PURPOSE: Verify from_env parsing and the cached defaults instance
# CREATED: 19 OCT 2026
# ============================================================================
"""
Configuration Tests

Run with:
    pytest tests/test_config.py -v
"""

import pytest

from core.config import (
    DEFAULT_FORWARDED_HEADERS,
    AggregationDefaults,
    TransportDefaults,
    get_defaults,
    reset_defaults,
)


@pytest.fixture(autouse=True)
def fresh_defaults():
    reset_defaults()
    yield
    reset_defaults()


class TestTransportDefaults:

    def test_builtin_values(self):
        defaults = TransportDefaults()
        assert defaults.timeout_seconds == 10.0
        assert defaults.max_redirects == 5
        assert defaults.base_url == ""

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("AGG_HTTP_TIMEOUT", "2.5")
        monkeypatch.setenv("AGG_HTTP_MAX_REDIRECTS", "1")
        monkeypatch.setenv("AGG_UPSTREAM_BASE_URL", "http://gateway:8080")
        defaults = TransportDefaults.from_env()
        assert defaults.timeout_seconds == 2.5
        assert defaults.max_redirects == 1
        assert defaults.base_url == "http://gateway:8080"

    def test_frozen(self):
        with pytest.raises(AttributeError):
            TransportDefaults().timeout_seconds = 1


class TestAggregationDefaults:

    def test_default_forwarded_headers(self, monkeypatch):
        monkeypatch.delenv("AGG_FORWARDED_HEADERS", raising=False)
        defaults = AggregationDefaults.from_env()
        assert defaults.forwarded_headers == DEFAULT_FORWARDED_HEADERS
        assert "authorization" in defaults.forwarded_headers
        assert defaults.business_success_code == 200

    def test_forwarded_headers_from_env(self, monkeypatch):
        monkeypatch.setenv("AGG_FORWARDED_HEADERS", " Authorization, X-Tenant ,,")
        defaults = AggregationDefaults.from_env()
        assert defaults.forwarded_headers == ("authorization", "x-tenant")

    def test_blank_header_list_falls_back(self, monkeypatch):
        monkeypatch.setenv("AGG_FORWARDED_HEADERS", " , ")
        assert AggregationDefaults.from_env().forwarded_headers == DEFAULT_FORWARDED_HEADERS

    def test_success_code_from_env(self, monkeypatch):
        monkeypatch.setenv("AGG_BUSINESS_SUCCESS_CODE", "0")
        assert AggregationDefaults.from_env().business_success_code == 0


class TestGlobalDefaults:

    def test_cached_until_reset(self, monkeypatch):
        first = get_defaults()
        assert get_defaults() is first

        monkeypatch.setenv("AGG_HTTP_TIMEOUT", "3")
        assert get_defaults().transport.timeout_seconds == first.transport.timeout_seconds

        reset_defaults()
        assert get_defaults().transport.timeout_seconds == 3.0
