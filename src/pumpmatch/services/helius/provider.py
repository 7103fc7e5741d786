"""Fail-closed facade over the Helius clients.

Every call is bounded by `provider_timeout_seconds` and never raises for
upstream trouble: failures and timeouts substitute a safe default and
log a warning. Defaults:

    balance            -> 0.0
    owned assets       -> []
    asset totals       -> 0
    signature activity -> SignatureActivity() (-1 count, empty WalletAge)
    transactions       -> []
"""

import asyncio
import time
from collections.abc import Awaitable
from dataclasses import dataclass, field
from typing import Any, TypeVar

import structlog

from pumpmatch.config.logging import ensure_logging_configured
from pumpmatch.config.settings import Settings, get_settings
from pumpmatch.constants.scoring import TX_COUNT_UNAVAILABLE
from pumpmatch.core.exceptions import CircuitBreakerOpenError, ExternalServiceError
from pumpmatch.models.transaction import EnhancedTransaction
from pumpmatch.services.helius.client import HeliusClient
from pumpmatch.services.helius.rpc_client import HeliusRpcClient

log = structlog.get_logger(__name__)

T = TypeVar("T")

SECONDS_PER_DAY = 86400

DIVERSITY_INTERFACES = frozenset({"FungibleToken", "FungibleAsset", "V1_NFT"})
FUNGIBLE_INTERFACES = frozenset({"FungibleToken", "FungibleAsset"})

_UPSTREAM_ERRORS = (ExternalServiceError, CircuitBreakerOpenError, TimeoutError)


@dataclass(frozen=True)
class WalletAge:
    """Oldest detectable activity of a wallet."""

    first_signature: str | None = None
    first_block_time: int | None = None
    approx_age_days: int | None = None


@dataclass(frozen=True)
class SignatureActivity:
    """Result of one backwards walk over a wallet's signatures."""

    transaction_count: int = TX_COUNT_UNAVAILABLE
    wallet_age: WalletAge = field(default_factory=WalletAge)


def _wallet_age_from(oldest: dict[str, Any] | None, now: float | None) -> WalletAge:
    if oldest is None:
        return WalletAge()

    signature = oldest.get("signature")
    block_time = oldest.get("blockTime")
    if isinstance(block_time, bool) or not isinstance(block_time, int):
        block_time = None

    approx_days = None
    if block_time is not None and block_time > 0:
        current = time.time() if now is None else now
        approx_days = max(0, int((current - block_time) // SECONDS_PER_DAY))

    return WalletAge(
        first_signature=signature if isinstance(signature, str) and signature else None,
        first_block_time=block_time,
        approx_age_days=approx_days,
    )


def count_token_diversity(items: list[dict[str, Any]]) -> int:
    """Distinct token ids across fungible and V1 NFT items.

    Falls back to the fungible-item count when no item carries an id.
    """
    unique_ids: set[str] = set()
    for item in items:
        item_id = item.get("id")
        if item.get("interface") in DIVERSITY_INTERFACES and isinstance(item_id, str) and item_id:
            unique_ids.add(item_id)
    if unique_ids:
        return len(unique_ids)
    return sum(1 for item in items if item.get("interface") in FUNGIBLE_INTERFACES)


def find_funder(account_keys: list[Any], address: str) -> str | None:
    """First signer in a parsed account-key list that is not the wallet itself."""
    for key in account_keys:
        if isinstance(key, str):
            if key != address:
                return key
        elif isinstance(key, dict) and key.get("signer"):
            pubkey = key.get("pubkey")
            if isinstance(pubkey, str) and pubkey != address:
                return pubkey
    return None


class OnChainDataProvider:
    """Read-only on-chain signals for wallet analysis.

    Example:
        provider = OnChainDataProvider()
        balance, activity = await asyncio.gather(
            provider.get_sol_balance(address),
            provider.get_signature_activity(address),
        )
        await provider.close()
    """

    def __init__(
        self,
        rpc_client: HeliusRpcClient | None = None,
        tx_client: HeliusClient | None = None,
        settings: Settings | None = None,
    ) -> None:
        settings = settings or get_settings()
        self._settings = settings
        self._rpc = rpc_client or HeliusRpcClient(settings)
        self._tx = tx_client or HeliusClient(settings)
        self._timeout = settings.provider_timeout_seconds

    async def _guarded(self, operation: str, address: str, call: Awaitable[T], default: T) -> T:
        try:
            return await asyncio.wait_for(call, timeout=self._timeout)
        except _UPSTREAM_ERRORS as e:
            log.warning(
                "provider_call_failed",
                operation=operation,
                wallet_address=address[:8] + "...",
                error=str(e) or type(e).__name__,
            )
            return default

    async def get_sol_balance(self, address: str) -> float:
        return await self._guarded("get_balance", address, self._rpc.get_balance(address), 0.0)

    async def get_owned_assets(self, address: str) -> list[dict[str, Any]]:
        return await self._guarded(
            "get_assets_by_owner",
            address,
            self._rpc.get_assets_by_owner(address, limit=self._settings.asset_page_limit),
            [],
        )

    async def get_fungible_count(self, address: str) -> int:
        return await self._guarded(
            "search_assets_fungible",
            address,
            self._rpc.search_asset_total(address, "fungible"),
            0,
        )

    async def get_nft_count(self, address: str) -> int:
        return await self._guarded(
            "search_assets_non_fungible",
            address,
            self._rpc.search_asset_total(address, "nonFungible"),
            0,
        )

    async def get_signature_activity(
        self, address: str, now: float | None = None
    ) -> SignatureActivity:
        """Transaction count and first activity from one signature walk.

        Pages of `signature_page_limit` signatures are walked backwards for
        at most `wallet_age_max_pages` pages, so very busy wallets report a
        lower bound. A failure on the first page yields the -1 sentinel.
        """
        activity = await self._guarded(
            "get_signatures_for_address",
            address,
            self._walk_signatures(address, now),
            SignatureActivity(),
        )
        if activity.wallet_age.first_signature:
            await self._guarded(
                "get_funding_source",
                address,
                self._log_funding_source(address, activity.wallet_age.first_signature),
                None,
            )
        return activity

    async def get_transactions(self, address: str) -> list[EnhancedTransaction]:
        return await self._guarded(
            "get_transaction_history",
            address,
            self._tx.get_transaction_history(address),
            [],
        )

    async def _walk_signatures(self, address: str, now: float | None) -> SignatureActivity:
        page_limit = self._settings.signature_page_limit
        count = 0
        oldest: dict[str, Any] | None = None
        before: str | None = None

        for page_number in range(self._settings.wallet_age_max_pages):
            try:
                page = await self._rpc.get_signatures(address, limit=page_limit, before=before)
            except (ExternalServiceError, CircuitBreakerOpenError):
                if page_number == 0:
                    raise
                log.warning(
                    "signature_walk_truncated",
                    wallet_address=address[:8] + "...",
                    pages_fetched=page_number,
                    signatures_counted=count,
                )
                break
            if not page:
                break
            count += len(page)
            oldest = page[-1]
            cursor = oldest.get("signature")
            before = cursor if isinstance(cursor, str) and cursor else None
            if len(page) < page_limit or before is None:
                break

        return SignatureActivity(
            transaction_count=count,
            wallet_age=_wallet_age_from(oldest, now),
        )

    async def _log_funding_source(self, address: str, signature: str) -> None:
        tx = await self._rpc.get_transaction(signature)
        transaction = tx.get("transaction")
        message = transaction.get("message") if isinstance(transaction, dict) else None
        account_keys = message.get("accountKeys") if isinstance(message, dict) else None
        if not isinstance(account_keys, list) or not account_keys:
            return
        funder = find_funder(account_keys, address)
        if funder:
            log.info(
                "funding_source_detected",
                wallet_address=address[:8] + "...",
                funder=funder[:8] + "...",
                signature=signature[:8] + "...",
            )
        else:
            log.info(
                "funding_source_undetectable",
                wallet_address=address[:8] + "...",
                signature=signature[:8] + "...",
            )

    async def close(self) -> None:
        await self._rpc.close()
        await self._tx.close()


_provider: OnChainDataProvider | None = None


async def get_data_provider() -> OnChainDataProvider:
    """Get or create the global OnChainDataProvider instance."""
    global _provider
    if _provider is None:
        ensure_logging_configured()
        _provider = OnChainDataProvider()
        log.debug("global_data_provider_created")
    return _provider


async def close_data_provider() -> None:
    global _provider
    if _provider is not None:
        await _provider.close()
        _provider = None
        log.debug("global_data_provider_closed")
