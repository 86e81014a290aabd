from __future__ import annotations

from datetime import timedelta

import jwt

from app.domain.common.errors import (
    InvalidSignatureError,
    MalformedTokenError,
    TokenExpiredError,
)
from app.domain.common.ports import Clock

ALGORITHM = "HS256"
DEFAULT_TTL = timedelta(days=7)


class TokenService:
    """
    Issues and verifies HS256 bearer tokens carrying {sub, iat, exp}.

    The secret is fixed at construction. There is no revocation: a token that
    verifies stays valid until `exp`.
    """

    def __init__(self, secret: str, clock: Clock, ttl: timedelta = DEFAULT_TTL) -> None:
        if not secret:
            raise ValueError("token secret must not be empty")
        self._secret = secret
        self._clock = clock
        self._ttl = ttl

    def issue(self, user_id: str) -> str:
        now = self._clock.now()
        payload = {
            "sub": user_id,
            "iat": int(now.timestamp()),
            "exp": int((now + self._ttl).timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=ALGORITHM)

    def verify(self, token: str) -> str:
        if not token or not token.strip():
            raise MalformedTokenError("Not authorized, token missing")
        try:
            # time claims are checked against the injected clock below
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={
                    "require": ["sub", "iat", "exp"],
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
        # InvalidSignatureError subclasses DecodeError, so it goes first
        except jwt.InvalidSignatureError as e:
            raise InvalidSignatureError("Not authorized, token failed") from e
        except jwt.InvalidTokenError as e:
            raise MalformedTokenError("Not authorized, token malformed") from e

        exp = claims.get("exp")
        if not isinstance(exp, (int, float)) or isinstance(exp, bool):
            raise MalformedTokenError("Not authorized, token malformed")
        if exp <= int(self._clock.now().timestamp()):
            raise TokenExpiredError("Not authorized, token expired")

        subject = claims.get("sub")
        if not isinstance(subject, str) or not subject:
            raise MalformedTokenError("Not authorized, token malformed")
        return subject
