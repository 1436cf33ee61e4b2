"""Portal API clients (mock and live) and the conversation poller"""

from typing import Optional

from membership_portal.client.facade import PortalApi
from membership_portal.client.http import HttpPortalApi
from membership_portal.client.local import LocalPortalApi
from membership_portal.client.poller import ConversationPoller
from membership_portal.config import Settings, settings as default_settings
from membership_portal.services.database_service import DatabaseService, db_service
from membership_portal.services.session_service import SessionService


def create_portal_api(
    settings: Optional[Settings] = None,
    store: Optional[DatabaseService] = None,
) -> PortalApi:
    """Build the facade selected by ``api_mode`` ("mock" or "live")"""
    config = settings or default_settings
    store = store or db_service
    session = SessionService(store, max_bytes=config.session_max_bytes)

    mode = config.api_mode.lower()
    if mode == "live":
        return HttpPortalApi(config.api_base_url, session, timeout=config.http_timeout_seconds)
    if mode == "mock":
        return LocalPortalApi(store, latency_ms=config.mock_latency_ms, session=session)
    raise ValueError(f"Unknown api_mode: {config.api_mode}")


__all__ = [
    "PortalApi",
    "LocalPortalApi",
    "HttpPortalApi",
    "ConversationPoller",
    "create_portal_api",
]
