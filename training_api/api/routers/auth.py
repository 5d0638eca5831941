"""Local username/password authentication routes."""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends

from ...models import Account, account_public_dict
from ...services import AuthService
from ..deps import get_auth, require_account

router = APIRouter(prefix="/api", tags=["auth"])


@router.post("/login")
def login(
    body: Optional[Dict[str, Any]] = Body(default=None),
    auth: AuthService = Depends(get_auth),
):
    """Verify credentials and issue a 24 hour bearer token."""

    body = body or {}
    result = auth.login(body.get("username"), body.get("password"))
    return {
        "success": True,
        "message": "Login successful",
        "token": result.token,
        "user": account_public_dict(result.account),
    }


@router.post("/create-account", status_code=201)
def create_account(
    body: Optional[Dict[str, Any]] = Body(default=None),
    auth: AuthService = Depends(get_auth),
):
    body = body or {}
    account = auth.create_account(body.get("username"), body.get("password"))
    return {
        "success": True,
        "message": "Account created successfully",
        "user": account_public_dict(account),
    }


@router.post("/forgot-password")
def forgot_password(
    body: Optional[Dict[str, Any]] = Body(default=None),
    auth: AuthService = Depends(get_auth),
):
    """Reset the password and return the new one. It is not stored in plaintext."""

    body = body or {}
    new_password = auth.forgot_password(body.get("username"))
    return {
        "success": True,
        "message": "Password reset successfully",
        "newPassword": new_password,
    }


@router.get("/me")
def me(account: Account = Depends(require_account)):
    return {"success": True, "user": account_public_dict(account, full=True)}


__all__ = ["router"]
