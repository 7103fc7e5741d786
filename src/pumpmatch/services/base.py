"""Resilient HTTP base for on-chain data providers.

Every provider client shares:
- a circuit breaker (CLOSED -> OPEN after N consecutive failures,
  HALF_OPEN after a cooldown, one probe request allowed)
- bounded retries with exponential backoff for 429/5xx/transport errors
- immediate failure for other 4xx responses
- a lazily created httpx.AsyncClient
"""

import asyncio
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Any

import httpx
import structlog

from pumpmatch.core.exceptions import CircuitBreakerOpenError, ExternalServiceError

log = structlog.get_logger(__name__)

MAX_BACKOFF_SECONDS = 4


class CircuitState(Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


@dataclass
class CircuitBreaker:
    """Consecutive-failure circuit breaker.

    Attributes:
        name: Service the breaker protects (used in logs and errors).
        failure_threshold: Consecutive failures before opening.
        cooldown_seconds: Seconds in OPEN before a half-open probe.
    """

    name: str = "provider"
    failure_threshold: int = 5
    cooldown_seconds: int = 30
    failure_count: int = field(default=0, init=False)
    last_failure_time: datetime | None = field(default=None, init=False)
    state: CircuitState = field(default=CircuitState.CLOSED, init=False)

    def record_success(self) -> None:
        if self.state != CircuitState.CLOSED:
            log.info("circuit_breaker_closed", service=self.name)
        self.failure_count = 0
        self.state = CircuitState.CLOSED

    def record_failure(self) -> None:
        self.failure_count += 1
        self.last_failure_time = datetime.now(UTC)

        if self.state == CircuitState.HALF_OPEN:
            self.state = CircuitState.OPEN
            log.warning(
                "circuit_breaker_reopened",
                service=self.name,
                failure_count=self.failure_count,
            )
        elif self.failure_count >= self.failure_threshold:
            if self.state != CircuitState.OPEN:
                log.warning(
                    "circuit_breaker_opened",
                    service=self.name,
                    failure_count=self.failure_count,
                    threshold=self.failure_threshold,
                )
            self.state = CircuitState.OPEN

    def can_execute(self) -> bool:
        """True when a request may go out; moves OPEN to HALF_OPEN after cooldown."""
        if self.state != CircuitState.OPEN:
            return True

        if self.last_failure_time is None:
            return False

        elapsed = datetime.now(UTC) - self.last_failure_time
        if elapsed > timedelta(seconds=self.cooldown_seconds):
            self.state = CircuitState.HALF_OPEN
            log.info("circuit_breaker_half_open", service=self.name)
            return True
        return False

    def raise_if_open(self) -> None:
        if not self.can_execute():
            raise CircuitBreakerOpenError(
                f"Circuit breaker for {self.name} is open. Next probe in "
                f"{self.seconds_until_half_open():.1f} seconds."
            )

    def seconds_until_half_open(self) -> float:
        if self.last_failure_time is None:
            return 0.0
        elapsed = datetime.now(UTC) - self.last_failure_time
        return max(0.0, self.cooldown_seconds - elapsed.total_seconds())


class BaseAPIClient:
    """HTTP client with retry and circuit breaker support.

    Example:
        client = BaseAPIClient("Helius RPC", base_url="https://mainnet.helius-rpc.com")
        response = await client.post("", json=payload)
        await client.close()
    """

    def __init__(
        self,
        service_name: str,
        base_url: str,
        timeout: float = 30.0,
        headers: dict[str, str] | None = None,
        max_retries: int = 3,
        circuit_breaker_threshold: int = 5,
        circuit_breaker_cooldown: int = 30,
    ) -> None:
        self.service_name = service_name
        self.base_url = base_url
        self.timeout = timeout
        self.headers = headers or {}
        self.max_retries = max_retries
        self._client: httpx.AsyncClient | None = None
        self._circuit_breaker = CircuitBreaker(
            name=service_name,
            failure_threshold=circuit_breaker_threshold,
            cooldown_seconds=circuit_breaker_cooldown,
        )

    @property
    def circuit_breaker(self) -> CircuitBreaker:
        return self._circuit_breaker

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=self.headers,
            )
            log.debug("httpx_client_created", service=self.service_name)
        return self._client

    async def close(self) -> None:
        """Close the httpx client and release resources."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            log.debug("httpx_client_closed", service=self.service_name)

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Send a request with retry and circuit breaker.

        Raises:
            CircuitBreakerOpenError: If the circuit is open.
            ExternalServiceError: On a non-retryable 4xx, or once retries
                are exhausted.
        """
        self._circuit_breaker.raise_if_open()

        client = await self._get_client()
        last_error: Exception | None = None

        for attempt in range(self.max_retries):
            try:
                response = await client.request(method, path, **kwargs)
                response.raise_for_status()
                self._circuit_breaker.record_success()
                return response

            except httpx.HTTPStatusError as e:
                status_code = e.response.status_code

                # 4xx other than 429 is a caller error; do not retry or trip the breaker
                if 400 <= status_code < 500 and status_code != 429:
                    log.warning(
                        "request_client_error",
                        service=self.service_name,
                        method=method,
                        status_code=status_code,
                    )
                    raise ExternalServiceError(
                        service=self.service_name,
                        message=str(e),
                        status_code=status_code,
                    ) from e

                self._circuit_breaker.record_failure()
                last_error = e
                log.warning(
                    "request_server_error",
                    service=self.service_name,
                    method=method,
                    status_code=status_code,
                    attempt=attempt + 1,
                )

            except httpx.RequestError as e:
                self._circuit_breaker.record_failure()
                last_error = e
                log.warning(
                    "request_connection_error",
                    service=self.service_name,
                    method=method,
                    error=str(e),
                    attempt=attempt + 1,
                )

            if self._circuit_breaker.state == CircuitState.OPEN:
                break

            if attempt < self.max_retries - 1:
                await asyncio.sleep(min(2**attempt, MAX_BACKOFF_SECONDS))

        log.error(
            "request_retries_exhausted",
            service=self.service_name,
            method=method,
            max_retries=self.max_retries,
        )
        raise ExternalServiceError(
            service=self.service_name,
            message=f"Request failed after retries: {last_error}",
        )

    def decode_json(self, response: httpx.Response) -> Any:
        """Decode a response body, treating non-JSON payloads as upstream failures.

        Raises:
            ExternalServiceError: If the body is not valid JSON.
        """
        try:
            return response.json()
        except ValueError as e:
            log.warning(
                "response_not_json",
                service=self.service_name,
                status_code=response.status_code,
                content_type=response.headers.get("content-type"),
            )
            raise ExternalServiceError(
                service=self.service_name,
                message=f"Invalid JSON response: {e}",
                status_code=response.status_code,
            ) from e

    async def get(self, path: str, **kwargs: Any) -> httpx.Response:
        return await self._request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> httpx.Response:
        return await self._request("POST", path, **kwargs)
