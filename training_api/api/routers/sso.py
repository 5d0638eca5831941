"""Google and GitHub single sign-on routes."""

from __future__ import annotations

import json
import logging
from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.exc import SQLAlchemyError

from ...core import FRONTEND_ORIGIN
from ...core.errors import (
    AuthError,
    ProviderExchangeError,
    Unauthorized,
    UnknownProvider,
)
from ...models import account_public_dict
from ...services import AuthService, SSORegistry
from ..deps import get_auth, get_sso

log = logging.getLogger(__name__)

router = APIRouter(tags=["sso"])

_HANDOFF_KEY = "sso_handoff"
_RUNNING = {"status": "OK", "message": "Training Sessions API is running"}


def _login_redirect(params: dict) -> RedirectResponse:
    return RedirectResponse(f"{FRONTEND_ORIGIN}/login?{urlencode(params)}", status_code=302)


def _error_redirect(message: str) -> RedirectResponse:
    return _login_redirect({"sso": "error", "message": message})


async def _complete_sign_in(
    request: Request, name: str, auth: AuthService, sso: SSORegistry
) -> RedirectResponse:
    try:
        provider = sso.get(name)
        if not request.query_params.get("code") and not request.query_params.get("error"):
            raise ProviderExchangeError("No authorization code received")
        claims = await sso.fetch_claims(request, name)
        result = auth.complete_sso(claims, provider.strategy)
    except AuthError as exc:
        log.warning("%s sign-in failed: %s", name, exc.message)
        return _error_redirect(exc.message)
    except SQLAlchemyError:
        log.exception("%s sign-in failed while storing the account", name)
        return _error_redirect("Sign-in failed, please try again")

    user = account_public_dict(result.account, full=True)
    if request.app.state.token_delivery == "query":
        return _login_redirect(
            {"sso": "success", "token": result.token, "user": json.dumps(user)}
        )

    request.session[_HANDOFF_KEY] = {"token": result.token, "user": user}
    return _login_redirect({"sso": "success"})


@router.get("/")
async def root(
    request: Request,
    code: Optional[str] = None,
    auth: AuthService = Depends(get_auth),
    sso: SSORegistry = Depends(get_sso),
):
    """Status probe, and the redirect URI registered with Google."""

    if not code and not request.query_params.get("error"):
        return _RUNNING
    return await _complete_sign_in(request, "google", auth, sso)


@router.post("/auth/sso/session")
def claim_sso_session(request: Request):
    """Hand the token from the last SSO callback to the frontend, once."""

    handoff = request.session.pop(_HANDOFF_KEY, None)
    if not handoff:
        raise Unauthorized("No pending sign-in")
    return {"success": True, "token": handoff["token"], "user": handoff["user"]}


@router.get("/auth/{provider}")
async def sso_start(
    provider: str, request: Request, sso: SSORegistry = Depends(get_sso)
):
    if provider not in sso.providers:
        raise UnknownProvider()
    return await sso.authorize_redirect(request, provider)


@router.get("/auth/{provider}/callback")
async def sso_callback(
    provider: str,
    request: Request,
    auth: AuthService = Depends(get_auth),
    sso: SSORegistry = Depends(get_sso),
):
    if provider not in sso.providers:
        raise UnknownProvider()
    return await _complete_sign_in(request, provider, auth, sso)


__all__ = ["router"]
