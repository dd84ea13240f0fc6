"""Permission gate — decides whether a caller may touch saved queries."""

from __future__ import annotations

import logging

from query_manager.config import settings

logger = logging.getLogger(__name__)

ACTIONS = ("read", "create", "update", "delete", "execute")


def is_authorized(caller: str, action: str, resource: str = "sql_queries") -> bool:
    """An empty ``authorized_users`` setting leaves the gate open."""
    if action not in ACTIONS:
        return False
    if not settings.authorized_users:
        return True
    allowed = caller in settings.authorized_users
    if not allowed:
        logger.warning("Denied %s on %s for caller '%s'", action, resource, caller)
    return allowed
