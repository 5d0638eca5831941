"""Bearer token issuing and verification (HS256 JWT)."""

from __future__ import annotations

import time
from typing import Any, Dict

import jwt

from ..core.errors import Unauthorized
from ..models import Account

ALGO = "HS256"


class TokenIssuer:
    def __init__(self, secret: str, ttl_sec: int) -> None:
        if not secret:
            raise ValueError("token secret must not be empty")
        self._secret = secret
        self.ttl_sec = ttl_sec

    def issue(self, account: Account, *, include_profile: bool = False) -> str:
        now = int(time.time())
        payload: Dict[str, Any] = {
            "sub": str(account.id),
            "userId": account.id,
            "username": account.username,
            "iat": now,
            "exp": now + self.ttl_sec,
        }
        if include_profile:
            payload["email"] = account.email
            payload["provider"] = account.provider
        return jwt.encode(payload, self._secret, algorithm=ALGO)

    def verify(self, token: str) -> Dict[str, Any]:
        """Return the token claims.

        Expiry, bad signatures and malformed tokens all raise the same
        ``Unauthorized``.
        """

        try:
            return jwt.decode(
                token,
                self._secret,
                algorithms=[ALGO],
                options={"require": ["exp", "sub"]},
            )
        except jwt.PyJWTError as exc:
            raise Unauthorized() from exc


__all__ = ["TokenIssuer"]
