"""FastAPI dependencies resolving services from ``app.state``."""

from __future__ import annotations

from typing import Optional

from fastapi import Header, Request

from ..models import Account
from ..services import AuthService, SSORegistry


def get_auth(request: Request) -> AuthService:
    return request.app.state.auth


def get_sso(request: Request) -> SSORegistry:
    return request.app.state.sso


def require_account(
    request: Request, authorization: Optional[str] = Header(None)
) -> Account:
    """Resolve the ``Authorization: Bearer`` header to an account (401 otherwise)."""

    token = None
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization.split(" ", 1)[1].strip()
    return get_auth(request).authenticate(token)


__all__ = ["get_auth", "get_sso", "require_account"]
