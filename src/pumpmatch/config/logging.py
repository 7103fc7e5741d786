"""structlog setup for Pump Match.

Every event carries `service` and `version` context. Wallet addresses are
truncated before rendering, so a full address never reaches the logs even
when a caller forgets to shorten it. Chatty transport loggers (httpx,
httpcore, hpack, supabase) are held at WARNING unless `debug` is on.
"""

import logging
import sys
from collections.abc import MutableMapping
from typing import Any

import structlog

from pumpmatch.config.settings import Settings, get_settings

ADDRESS_KEYS = frozenset({"wallet_address", "address", "candidate", "funder"})
ADDRESS_PREFIX_LENGTH = 8

TRANSPORT_LOGGERS = ("httpx", "httpcore", "hpack", "supabase", "postgrest")


def shorten_addresses(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Truncate wallet-address fields to their first 8 characters."""
    for key in ADDRESS_KEYS.intersection(event_dict):
        value = event_dict[key]
        if isinstance(value, str) and len(value) > ADDRESS_PREFIX_LENGTH + 3:
            event_dict[key] = value[:ADDRESS_PREFIX_LENGTH] + "..."
    return event_dict


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structlog and stdlib logging from settings."""
    settings = settings or get_settings()
    log_level = getattr(logging, settings.log_level)

    renderer: structlog.types.Processor = (
        structlog.dev.ConsoleRenderer() if settings.debug else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            shorten_addresses,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        service=settings.app_name.lower(),
        version=settings.app_version,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)
    transport_level = log_level if settings.debug else max(log_level, logging.WARNING)
    for name in TRANSPORT_LOGGERS:
        logging.getLogger(name).setLevel(transport_level)


def ensure_logging_configured(settings: Settings | None = None) -> None:
    """Configure logging unless the host application already has."""
    if not structlog.is_configured():
        configure_logging(settings)
