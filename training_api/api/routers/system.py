"""System-level API endpoints."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Request

router = APIRouter(tags=["system"])


@router.get("/health")
def health() -> Dict[str, str]:
    """Simple readiness probe."""

    return {"status": "OK", "message": "Training Sessions API is running"}


@router.get("/config")
def get_config(request: Request) -> Dict[str, Any]:
    """Expose which sign-in options the frontend should offer."""

    sso = request.app.state.sso
    return {
        "sso_providers": [
            name for name, provider in sso.providers.items() if provider.configured
        ],
        "sso_token_delivery": request.app.state.token_delivery,
    }


__all__ = ["router"]
