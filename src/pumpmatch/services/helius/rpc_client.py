"""Helius JSON-RPC client (balances, DAS assets, signatures).

Every method raises on failure; falling back to defaults is the
provider facade's job, not the transport's.
"""

import math
from typing import Any

import structlog

from pumpmatch.config.settings import Settings, get_settings
from pumpmatch.core.exceptions import ExternalServiceError
from pumpmatch.services.base import BaseAPIClient

log = structlog.get_logger(__name__)

LAMPORTS_PER_SOL = 1_000_000_000

SERVICE_NAME = "Helius RPC"


class HeliusRpcClient(BaseAPIClient):
    """Client for Helius JSON-RPC and DAS methods.

    Example:
        client = HeliusRpcClient()
        balance = await client.get_balance("9WzDXwBbmkg8ZTbNMqUxvQRAyrZzDsGYdLVL9zYtAWWM")
        await client.close()
    """

    def __init__(self, settings: Settings | None = None) -> None:
        settings = settings or get_settings()
        self.api_key = settings.helius_api_key.get_secret_value()
        super().__init__(
            service_name=SERVICE_NAME,
            base_url=settings.helius_rpc_url,
            timeout=settings.provider_timeout_seconds,
            headers={"Content-Type": "application/json"},
            circuit_breaker_threshold=settings.circuit_breaker_threshold,
            circuit_breaker_cooldown=settings.circuit_breaker_cooldown,
        )

    async def call(self, method: str, params: Any) -> Any:
        """Invoke a JSON-RPC method and return its `result`.

        Raises:
            ExternalServiceError: On transport failure, an RPC `error`
                object, or a missing `result`.
        """
        payload = {"jsonrpc": "2.0", "id": method, "method": method, "params": params}
        response = await self.post("", json=payload, params={"api-key": self.api_key})
        data = self.decode_json(response)

        if not isinstance(data, dict):
            raise ExternalServiceError(SERVICE_NAME, f"Malformed response for {method}")

        error = data.get("error")
        if error:
            message = error.get("message", str(error)) if isinstance(error, dict) else str(error)
            log.warning("helius_rpc_error", method=method, error=message)
            raise ExternalServiceError(SERVICE_NAME, f"{method}: {message}")

        result = data.get("result")
        if result is None:
            raise ExternalServiceError(SERVICE_NAME, f"Missing result for {method}")
        return result

    async def get_balance(self, address: str) -> float:
        """SOL balance; non-finite or negative values read as 0."""
        result = await self.call("getBalance", [address])
        lamports = result.get("value", 0) if isinstance(result, dict) else 0
        try:
            sol = float(lamports) / LAMPORTS_PER_SOL
        except (TypeError, ValueError):
            return 0.0
        return sol if math.isfinite(sol) and sol >= 0 else 0.0

    async def get_assets_by_owner(
        self, address: str, limit: int = 1000, page: int = 1
    ) -> list[dict[str, Any]]:
        result = await self.call(
            "getAssetsByOwner", {"ownerAddress": address, "page": page, "limit": limit}
        )
        items = result.get("items", []) if isinstance(result, dict) else []
        return [item for item in items if isinstance(item, dict)]

    async def search_asset_total(self, address: str, token_type: str) -> int:
        """Total asset count of a DAS token type ("fungible" / "nonFungible").

        Fetches a single item; only the reported total is used.
        """
        result = await self.call(
            "searchAssets", {"ownerAddress": address, "tokenType": token_type, "limit": 1}
        )
        if not isinstance(result, dict):
            return 0
        assets = result.get("assets")
        total = assets.get("total") if isinstance(assets, dict) else None
        if total is None:
            total = result.get("total")
        if isinstance(total, bool) or not isinstance(total, int) or total < 0:
            return 0
        return total

    async def get_signatures(
        self, address: str, limit: int = 1000, before: str | None = None
    ) -> list[dict[str, Any]]:
        """One newest-first page of getSignaturesForAddress."""
        options: dict[str, Any] = {"limit": limit}
        if before:
            options["before"] = before
        result = await self.call("getSignaturesForAddress", [address, options])
        if not isinstance(result, list):
            return []
        return [entry for entry in result if isinstance(entry, dict)]

    async def get_transaction(self, signature: str) -> dict[str, Any]:
        result = await self.call(
            "getTransaction",
            [signature, {"encoding": "jsonParsed", "maxSupportedTransactionVersion": 0}],
        )
        return result if isinstance(result, dict) else {}
