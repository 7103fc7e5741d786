"""Tests for the Supabase profile store client."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from supabase.lib.client_options import AsyncClientOptions
from tenacity import wait_none

import pumpmatch.data.supabase.client as client_module
from pumpmatch.core.exceptions import DatabaseConnectionError
from pumpmatch.data.supabase.client import (
    SupabaseClient,
    close_supabase_client,
    get_supabase_client,
)


@pytest.fixture
def mock_settings() -> MagicMock:
    """Create mock settings."""
    settings = MagicMock()
    settings.supabase_url = "https://test.supabase.co"
    settings.supabase_key.get_secret_value.return_value = "test-api-key"
    settings.postgres_schema = "public"
    return settings


@pytest.fixture
def supabase_client(mock_settings) -> SupabaseClient:
    return SupabaseClient(mock_settings)


class TestSupabaseClient:
    """Tests for SupabaseClient class."""

    def test_init_sets_client_to_none(self, supabase_client) -> None:
        assert supabase_client._client is None
        assert not supabase_client.is_connected

    def test_client_property_requires_connection(self, supabase_client) -> None:
        with pytest.raises(DatabaseConnectionError, match="not connected"):
            _ = supabase_client.client

    @pytest.mark.asyncio
    async def test_connect_creates_client(self, supabase_client, mock_settings) -> None:
        """
        Given: SupabaseClient not connected
        When: connect() is called
        Then: Async client is created with credentials and the configured schema
        """
        mock_async_client = AsyncMock()

        with patch(
            "pumpmatch.data.supabase.client.create_async_client",
            new_callable=AsyncMock,
            return_value=mock_async_client,
        ) as mock_create:
            await supabase_client.connect()

        call_args = mock_create.call_args
        assert call_args[0][0] == "https://test.supabase.co"
        assert call_args[0][1] == "test-api-key"
        options = call_args[1]["options"]
        assert isinstance(options, AsyncClientOptions)
        assert options.schema == "public"
        assert supabase_client.client is mock_async_client

    @pytest.mark.asyncio
    async def test_connect_idempotent(self, supabase_client) -> None:
        supabase_client._client = MagicMock()

        with patch(
            "pumpmatch.data.supabase.client.create_async_client", new_callable=AsyncMock
        ) as mock_create:
            await supabase_client.connect()

        mock_create.assert_not_called()

    @pytest.mark.asyncio
    async def test_connect_retries_then_raises(self, supabase_client) -> None:
        """
        Given: Supabase refuses connections
        When: connect() is called
        Then: Three attempts are made before DatabaseConnectionError
        """
        connect_now = SupabaseClient.connect.retry_with(wait=wait_none())

        with patch(
            "pumpmatch.data.supabase.client.create_async_client",
            new_callable=AsyncMock,
            side_effect=Exception("Connection refused"),
        ) as mock_create, pytest.raises(DatabaseConnectionError, match="Supabase"):
            await connect_now(supabase_client)

        assert mock_create.await_count == 3

    @pytest.mark.asyncio
    async def test_disconnect_clears_client(self, supabase_client) -> None:
        supabase_client._client = MagicMock()

        await supabase_client.disconnect()

        assert supabase_client._client is None

    @pytest.mark.asyncio
    async def test_health_check_disconnected(self, supabase_client) -> None:
        result = await supabase_client.health_check()

        assert result == {"status": "disconnected", "healthy": False}

    @pytest.mark.asyncio
    async def test_health_check_probes_users_table(self, supabase_client) -> None:
        mock_client = MagicMock()
        chain = mock_client.table.return_value.select.return_value.limit.return_value
        chain.execute = AsyncMock(return_value=MagicMock(data=[]))
        supabase_client._client = mock_client

        result = await supabase_client.health_check()

        assert result["healthy"] is True
        mock_client.table.assert_called_once_with("users")

    @pytest.mark.asyncio
    async def test_health_check_error(self, supabase_client) -> None:
        mock_client = MagicMock()
        chain = mock_client.table.return_value.select.return_value.limit.return_value
        chain.execute = AsyncMock(side_effect=Exception("relation does not exist"))
        supabase_client._client = mock_client

        result = await supabase_client.health_check()

        assert result["status"] == "error"
        assert "relation does not exist" in result["error"]


class TestSupabaseSingleton:
    """Tests for Supabase singleton pattern."""

    @pytest.fixture(autouse=True)
    def reset_singleton(self) -> None:
        client_module._supabase_client = None

    @pytest.mark.asyncio
    async def test_get_and_close(self, mock_settings) -> None:
        with (
            patch("pumpmatch.data.supabase.client.get_settings", return_value=mock_settings),
            patch(
                "pumpmatch.data.supabase.client.create_async_client",
                new_callable=AsyncMock,
                return_value=MagicMock(),
            ) as mock_create,
        ):
            first = await get_supabase_client()
            second = await get_supabase_client()

        assert first is second
        assert first.is_connected
        mock_create.assert_awaited_once()

        await close_supabase_client()

        assert client_module._supabase_client is None
        assert not first.is_connected
