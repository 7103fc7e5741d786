"""Helius Enhanced Transactions REST client.

Fetches parsed transaction history (token transfers, instruction program
ids, source tags) used by position-lifecycle extraction.
"""

from typing import Any

import structlog

from pumpmatch.config.settings import Settings, get_settings
from pumpmatch.core.exceptions import ExternalServiceError
from pumpmatch.models.transaction import EnhancedTransaction
from pumpmatch.services.base import BaseAPIClient

log = structlog.get_logger(__name__)

SERVICE_NAME = "Helius API"


class HeliusClient(BaseAPIClient):
    """Async client for the Helius enhanced transactions API.

    Example:
        client = HeliusClient()
        transactions = await client.get_transaction_history(
            "9xQeWvG816bUx9EPjHmaT23yvVM2ZWbrrpZb9PusVFin", max_pages=5
        )
        await client.close()
    """

    def __init__(self, settings: Settings | None = None) -> None:
        settings = settings or get_settings()
        self.api_key = settings.helius_api_key.get_secret_value()
        self.page_limit = settings.tx_page_limit
        self.max_pages = settings.tx_history_max_pages
        super().__init__(
            service_name=SERVICE_NAME,
            base_url=settings.helius_api_url,
            timeout=settings.provider_timeout_seconds,
            headers={"Content-Type": "application/json"},
            circuit_breaker_threshold=settings.circuit_breaker_threshold,
            circuit_breaker_cooldown=settings.circuit_breaker_cooldown,
        )

    async def get_transaction_page(
        self,
        wallet_address: str,
        limit: int | None = None,
        before: str | None = None,
    ) -> list[dict[str, Any]]:
        """Fetch one newest-first page of raw enhanced transactions.

        Args:
            wallet_address: Wallet to fetch history for.
            limit: Page size (1-100); defaults to the configured page size.
            before: Signature cursor; only older transactions are returned.

        Raises:
            ValueError: If limit is out of range.
            ExternalServiceError: If the API request fails after retries.
        """
        limit = limit or self.page_limit
        if limit < 1 or limit > 100:
            raise ValueError(f"Limit must be between 1 and 100, got {limit}")

        params = {"api-key": self.api_key, "limit": str(limit)}
        if before:
            params["before"] = before

        response = await self.get(f"/v0/addresses/{wallet_address}/transactions", params=params)
        transactions = self.decode_json(response)

        if not isinstance(transactions, list):
            log.error(
                "unexpected_helius_response_format",
                wallet_address=wallet_address[:8] + "...",
                response_type=type(transactions).__name__,
            )
            raise ExternalServiceError(SERVICE_NAME, "Expected a list of transactions")

        return [tx for tx in transactions if isinstance(tx, dict)]

    async def get_transaction_history(
        self, wallet_address: str, max_pages: int | None = None
    ) -> list[EnhancedTransaction]:
        """Fetch up to `max_pages` pages, newest first.

        Paging stops early on a short or empty page. A failure on a later
        page keeps what was already fetched; a failure on the first page
        propagates.
        """
        max_pages = max_pages or self.max_pages
        transactions: list[EnhancedTransaction] = []
        before: str | None = None

        for page in range(max_pages):
            try:
                raw_page = await self.get_transaction_page(wallet_address, before=before)
            except ExternalServiceError:
                if page == 0:
                    raise
                log.warning(
                    "helius_history_truncated",
                    wallet_address=wallet_address[:8] + "...",
                    pages_fetched=page,
                )
                break

            parsed = [EnhancedTransaction.from_helius(raw) for raw in raw_page]
            transactions.extend(parsed)

            last_signature = parsed[-1].signature if parsed else None
            if len(raw_page) < self.page_limit or not last_signature:
                break
            before = last_signature

        log.debug(
            "helius_history_fetched",
            wallet_address=wallet_address[:8] + "...",
            transaction_count=len(transactions),
        )
        return transactions
