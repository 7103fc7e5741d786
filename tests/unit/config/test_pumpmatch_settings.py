"""Unit tests for Pump Match settings and logging setup."""

import logging
import os

import pytest
import structlog
from pydantic import SecretStr, ValidationError

from pumpmatch.config.logging import (
    TRANSPORT_LOGGERS,
    configure_logging,
    ensure_logging_configured,
    shorten_addresses,
)
from pumpmatch.config.settings import Settings, get_settings


def _settings(**overrides) -> Settings:
    values = {"supabase_url": "http://localhost:54321", "supabase_key": "test-key"}
    values.update(overrides)
    return Settings(_env_file=None, **values)  # type: ignore[call-arg]


class TestSettingsDefaults:
    """Tests for default values."""

    def test_defaults_match_documented_values(self, monkeypatch) -> None:
        for name in (
            "DEBUG",
            "LOG_LEVEL",
            "ANALYSIS_CACHE_TTL_SECONDS",
            "MATCH_SNAPSHOT_TTL_SECONDS",
            "CANDIDATE_POOL_LIMIT",
            "TX_PAGE_LIMIT",
            "POSTGRES_SCHEMA",
        ):
            monkeypatch.delenv(name, raising=False)

        settings = _settings()

        assert settings.debug is False
        assert settings.log_level == "INFO"
        assert settings.postgres_schema == "public"
        assert settings.provider_timeout_seconds == 10.0
        assert settings.analysis_cache_ttl_seconds == 900
        assert settings.match_snapshot_ttl_seconds == 300
        assert settings.candidate_pool_limit == 20
        assert settings.tx_page_limit == 100
        assert settings.asset_page_limit == 1000
        assert settings.signature_page_limit == 1000

    def test_keys_are_secret(self) -> None:
        settings = _settings(helius_api_key="hel-secret")

        assert isinstance(settings.supabase_key, SecretStr)
        assert isinstance(settings.helius_api_key, SecretStr)
        assert settings.helius_api_key.get_secret_value() == "hel-secret"
        assert "hel-secret" not in repr(settings)


class TestSettingsValidation:
    """Tests for Settings validation."""

    def test_log_level_must_be_valid(self) -> None:
        for level in ["DEBUG", "INFO", "WARNING", "ERROR"]:
            assert _settings(log_level=level).log_level == level

        with pytest.raises(ValidationError):
            _settings(log_level="VERBOSE")

    def test_supabase_url_validation(self) -> None:
        _settings(supabase_url="https://myproject.supabase.co")

        with pytest.raises(ValidationError) as exc_info:
            _settings(supabase_url="postgres://localhost:5432")
        assert "Supabase URL must start with" in str(exc_info.value)

    def test_helius_urls_drop_trailing_slash(self) -> None:
        settings = _settings(
            helius_api_url="https://api.helius.xyz/",
            helius_rpc_url="https://mainnet.helius-rpc.com//",
        )

        assert settings.helius_api_url == "https://api.helius.xyz"
        assert settings.helius_rpc_url == "https://mainnet.helius-rpc.com"

    def test_helius_url_requires_http_scheme(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            _settings(helius_rpc_url="wss://mainnet.helius-rpc.com")
        assert "Helius URL must start with" in str(exc_info.value)

    @pytest.mark.parametrize("limit", [0, 101])
    def test_tx_page_limit_bounds(self, limit: int) -> None:
        with pytest.raises(ValidationError):
            _settings(tx_page_limit=limit)

    def test_timeout_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            _settings(provider_timeout_seconds=0)


class TestGetSettings:
    """Tests for the cached accessor."""

    def test_reads_environment(self, monkeypatch) -> None:
        monkeypatch.setenv("CANDIDATE_POOL_LIMIT", "7")

        assert get_settings().candidate_pool_limit == 7

    def test_returns_cached_instance(self) -> None:
        assert get_settings() is get_settings()

    def test_cache_clear_rereads_environment(self, monkeypatch) -> None:
        monkeypatch.setenv("MATCH_SNAPSHOT_TTL_SECONDS", "60")
        first = get_settings()

        monkeypatch.setenv("MATCH_SNAPSHOT_TTL_SECONDS", "120")
        get_settings.cache_clear()

        assert first.match_snapshot_ttl_seconds == 60
        assert get_settings().match_snapshot_ttl_seconds == 120
        assert os.environ["MATCH_SNAPSHOT_TTL_SECONDS"] == "120"


class TestConfigureLogging:
    """Tests for structlog configuration."""

    @pytest.fixture(autouse=True)
    def _reset_structlog(self):
        levels = {name: logging.getLogger(name).level for name in TRANSPORT_LOGGERS}
        structlog.reset_defaults()
        yield
        structlog.reset_defaults()
        structlog.contextvars.clear_contextvars()
        for name, level in levels.items():
            logging.getLogger(name).setLevel(level)

    def test_production_uses_json_renderer(self, monkeypatch) -> None:
        monkeypatch.setenv("DEBUG", "false")
        monkeypatch.setenv("LOG_LEVEL", "WARNING")

        configure_logging()

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)

    def test_debug_uses_console_renderer(self, monkeypatch) -> None:
        monkeypatch.setenv("DEBUG", "true")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")

        configure_logging()

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)

    def test_binds_service_context(self) -> None:
        configure_logging(_settings(app_version="2.1.0"))

        assert structlog.contextvars.get_contextvars() == {
            "service": "pumpmatch",
            "version": "2.1.0",
        }

    def test_transport_loggers_held_at_warning(self) -> None:
        configure_logging(_settings(debug=False, log_level="INFO"))

        for name in TRANSPORT_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING

    def test_debug_lets_transport_loggers_through(self) -> None:
        configure_logging(_settings(debug=True, log_level="DEBUG"))

        assert logging.getLogger("httpx").level == logging.DEBUG
        assert logging.getLogger("supabase").level == logging.DEBUG

    def test_error_level_is_not_lowered_for_transport(self) -> None:
        configure_logging(_settings(debug=False, log_level="ERROR"))

        assert logging.getLogger("httpx").level == logging.ERROR

    def test_ensure_configures_once(self) -> None:
        assert not structlog.is_configured()

        ensure_logging_configured(_settings(debug=False))

        assert structlog.is_configured()
        assert structlog.contextvars.get_contextvars()["service"] == "pumpmatch"

    def test_ensure_keeps_host_configuration(self) -> None:
        renderer = structlog.processors.KeyValueRenderer()
        structlog.configure(processors=[renderer])

        ensure_logging_configured(_settings(debug=False))

        assert structlog.get_config()["processors"] == [renderer]


class TestShortenAddresses:
    """Tests for the address-truncating processor."""

    def test_full_address_is_truncated(self) -> None:
        event = {"event": "x", "wallet_address": "7xKXtg2CW87d97TXJSDpbD5jBkheTqA83TZRuJosgAsU"}

        assert shorten_addresses(None, "info", event)["wallet_address"] == "7xKXtg2C..."

    def test_already_short_values_are_kept(self) -> None:
        event = {"event": "x", "address": "7xKXtg2C...", "candidate": 42}

        assert shorten_addresses(None, "info", dict(event)) == event

    def test_unrelated_keys_are_untouched(self) -> None:
        signature = "5" * 88
        event = {"event": "x", "signature": signature}

        assert shorten_addresses(None, "info", event)["signature"] == signature
