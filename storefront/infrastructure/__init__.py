"""Infrastructure layer - HTTP client, wire schemas, config, session store, notifier."""

from storefront.infrastructure.api_client import APIError, APIResponse, StorefrontAPIClient
from storefront.infrastructure.config import Settings, settings
from storefront.infrastructure.logging_config import configure_logging
from storefront.infrastructure.notifier import (
    InMemoryNotifier,
    LoggingNotifier,
    Notification,
    Notifier,
    Severity,
)
from storefront.infrastructure.session_store import (
    InMemorySessionStore,
    SessionStore,
    clear_session,
    load_session,
    persist_session,
    save_balance,
)

__all__ = [
    "APIError",
    "APIResponse",
    "StorefrontAPIClient",
    "Settings",
    "settings",
    "configure_logging",
    "InMemoryNotifier",
    "LoggingNotifier",
    "Notification",
    "Notifier",
    "Severity",
    "InMemorySessionStore",
    "SessionStore",
    "clear_session",
    "load_session",
    "persist_session",
    "save_balance",
]
