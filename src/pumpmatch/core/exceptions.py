"""Pump Match exception hierarchy.

This module defines the base exception class and specialized exceptions
for different error categories across the engine.
"""


class PumpMatchError(Exception):
    """Base exception for all Pump Match errors.

    All custom exceptions in Pump Match should inherit from this class
    to enable consistent error handling and logging.
    """

    pass


class DatabaseConnectionError(PumpMatchError):
    """Raised when the profile store connection fails.

    Example:
        raise DatabaseConnectionError("Supabase: Client not connected")
    """

    pass


class ConfigurationError(PumpMatchError):
    """Raised when configuration is invalid or missing.

    Example:
        raise ConfigurationError("Missing required env var: HELIUS_API_KEY")
    """

    pass


class ValidationError(PumpMatchError):
    """Raised when caller-supplied input is malformed.

    Example:
        raise ValidationError("Invalid Solana address")
    """

    pass


class ExternalServiceError(PumpMatchError):
    """Raised when an external service call fails.

    Use this for errors from Helius RPC, the Helius REST API or Supabase.

    Attributes:
        service: Name of the external service that failed.
        status_code: HTTP status code if available, None otherwise.

    Example:
        raise ExternalServiceError(service="Helius", message="Rate limited", status_code=429)
    """

    def __init__(
        self,
        service: str,
        message: str,
        status_code: int | None = None,
    ) -> None:
        self.service = service
        self.status_code = status_code
        super().__init__(f"{service}: {message}")


class CircuitBreakerOpenError(PumpMatchError):
    """Raised when an API client's circuit breaker is open.

    Example:
        raise CircuitBreakerOpenError("Circuit is open for Helius RPC")
    """

    pass
