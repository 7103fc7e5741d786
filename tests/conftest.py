"""Shared pytest fixtures for Pump Match tests.

This module provides:
- Test environment variables (Supabase, Helius)
- A Settings instance wired to test endpoints
- Factory fixtures for members and wallet analyses
- A mocked Supabase client chain

Usage:
    def test_something(member_factory):
        member = member_factory(trust_score=80)
        assert member.is_opted_in
"""

import os
from collections.abc import Generator
from unittest.mock import MagicMock

import pytest

from pumpmatch.config.settings import Settings, get_settings
from tests.factories.analysis import WalletAnalysisFactory
from tests.factories.member import MemberProfileFactory

HELIUS_API_URL = "https://api.helius.test"
HELIUS_RPC_URL = "https://rpc.helius.test"


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment() -> Generator[None, None, None]:
    """Set up test environment variables.

    Loads .env file first, then sets defaults for any missing variables.
    """
    from dotenv import load_dotenv

    original_env = os.environ.copy()
    load_dotenv()

    os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
    os.environ.setdefault("SUPABASE_KEY", "test-key")
    os.environ.setdefault("HELIUS_API_KEY", "test-helius-key")

    yield

    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    """Settings pointing at fake Helius hosts with fast paging limits."""
    return Settings(
        supabase_url="http://localhost:54321",
        supabase_key="test-key",
        helius_api_key="test-helius-key",
        helius_api_url=HELIUS_API_URL,
        helius_rpc_url=HELIUS_RPC_URL,
        provider_timeout_seconds=2.0,
        circuit_breaker_threshold=5,
        circuit_breaker_cooldown=30,
        tx_history_max_pages=3,
        tx_page_limit=2,
        signature_page_limit=2,
        wallet_age_max_pages=3,
    )


@pytest.fixture
def member_factory() -> type[MemberProfileFactory]:
    """Provide member profile factory."""
    return MemberProfileFactory


@pytest.fixture
def analysis_factory() -> type[WalletAnalysisFactory]:
    """Provide wallet analysis factory."""
    return WalletAnalysisFactory


@pytest.fixture
def mock_supabase_client() -> MagicMock:
    """SupabaseClient double whose `.client` chain is a MagicMock.

    Configure `execute` per test, e.g.:
        mock_supabase_client.client.table.return_value.select.return_value...
    """
    client = MagicMock()
    client.client = MagicMock()
    return client
