"""API routers."""

from ictirc.routers import (
    archive,
    audit_logs,
    auth,
    health,
    invites,
    papers,
    submissions,
    users,
)

__all__ = [
    "archive",
    "audit_logs",
    "auth",
    "health",
    "invites",
    "papers",
    "submissions",
    "users",
]
