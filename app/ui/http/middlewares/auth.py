from __future__ import annotations

import logging
from typing import Optional

from fastapi import Request

from app.domain.auth.tokens import TokenService
from app.domain.common.errors import AuthenticationError

logger = logging.getLogger(__name__)

BEARER_PREFIX = "bearer "


class AccessGuard:
    """
    Per-request authentication gate.

    Turns an Authorization header into a user id, or raises AuthenticationError
    before any manager sees the request.
    """

    def __init__(self, tokens: TokenService) -> None:
        self._tokens = tokens

    def authenticate(self, authorization: Optional[str]) -> str:
        if not authorization or not authorization.lower().startswith(BEARER_PREFIX):
            raise AuthenticationError("Not authorized, no token")
        token = authorization[len(BEARER_PREFIX):].strip()
        if not token:
            raise AuthenticationError("Not authorized, no token")
        try:
            return self._tokens.verify(token)
        except AuthenticationError as e:
            logger.info("Rejected token: %s", type(e).__name__)
            raise


def current_user_id(request: Request) -> str:
    """FastAPI dependency: authenticated user id, also stored on request.state."""
    guard: AccessGuard = request.app.state.services.guard
    user_id = guard.authenticate(request.headers.get("authorization"))
    request.state.user_id = user_id
    return user_id
