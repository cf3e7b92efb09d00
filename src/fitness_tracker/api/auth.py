"""Request identity resolution for user-facing endpoints."""

import logging

from fastapi import Header, HTTPException, Request, status

from fitness_tracker.domain.models import UserRecord

_logger = logging.getLogger(__name__)


async def require_user(
    request: Request,
    x_clerk_user_id: str | None = Header(default=None),
    x_user_email: str | None = Header(default=None),
) -> UserRecord:
    """Resolve the calling user from identity headers, creating it on first use.

    The headers are set by the identity provider integration in front of the
    API; token verification happens there.
    """
    if not x_clerk_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized - No user ID provided",
        )
    container = request.app.state.container
    try:
        return container.user_service.ensure_user(x_clerk_user_id, x_user_email)
    except Exception as exc:
        _logger.exception("Failed to resolve user %s", x_clerk_user_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Authentication failed",
        ) from exc
