"""Supabase async client with connection management."""

from typing import Any

import structlog
from supabase._async.client import AsyncClient
from supabase._async.client import create_client as create_async_client
from supabase.lib.client_options import AsyncClientOptions
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from pumpmatch.config.logging import ensure_logging_configured
from pumpmatch.config.settings import Settings, get_settings
from pumpmatch.core.exceptions import DatabaseConnectionError

log = structlog.get_logger(__name__)


class SupabaseClient:
    """Async Supabase client wrapper for the profile store.

    Example:
        client = SupabaseClient()
        await client.connect()
        rows = await client.client.table("users").select("*").limit(1).execute()
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self._client: AsyncClient | None = None
        self._settings = settings or get_settings()

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=4),
        retry=retry_if_exception_type(DatabaseConnectionError),
        reraise=True,
    )
    async def connect(self) -> None:
        """Establish connection to Supabase.

        Raises:
            DatabaseConnectionError: If connection fails after retries.
        """
        if self._client is not None:
            return

        try:
            options = AsyncClientOptions(schema=self._settings.postgres_schema)
            self._client = await create_async_client(
                self._settings.supabase_url,
                self._settings.supabase_key.get_secret_value(),
                options=options,
            )
            log.info("supabase_connected", schema=self._settings.postgres_schema)
        except Exception as e:
            log.error("supabase_connection_failed", error=str(e))
            raise DatabaseConnectionError(f"Supabase: {e}") from e

    async def disconnect(self) -> None:
        if self._client is not None:
            self._client = None
            log.info("supabase_disconnected")

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    @property
    def client(self) -> AsyncClient:
        """Get the underlying Supabase client.

        Raises:
            DatabaseConnectionError: If not connected.
        """
        if self._client is None:
            raise DatabaseConnectionError("Supabase: Client not connected")
        return self._client

    async def health_check(self) -> dict[str, Any]:
        """Probe the users table with a single-row read."""
        if self._client is None:
            return {"status": "disconnected", "healthy": False}

        try:
            await self._client.table("users").select("wallet_address").limit(1).execute()
            return {"status": "connected", "healthy": True}
        except Exception as e:
            log.error("supabase_health_check_failed", error=str(e))
            return {"status": "error", "healthy": False, "error": str(e)}


_supabase_client: SupabaseClient | None = None


async def get_supabase_client() -> SupabaseClient:
    """Get or create the connected Supabase client singleton."""
    global _supabase_client
    if _supabase_client is None:
        ensure_logging_configured()
        client = SupabaseClient()
        await client.connect()
        _supabase_client = client
    return _supabase_client


async def close_supabase_client() -> None:
    global _supabase_client
    if _supabase_client is not None:
        await _supabase_client.disconnect()
        _supabase_client = None
