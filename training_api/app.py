"""FastAPI application factory and configuration."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Iterable, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware

from .api import register_routes
from .core import (
    ALLOWED_CORS_ORIGINS,
    COOKIE_DOMAIN,
    COOKIE_SAMESITE,
    COOKIE_SECURE,
    DB_RESET,
    JWT_SECRET,
    SECRET_KEY,
    SSO_TOKEN_DELIVERY,
    TOKEN_TTL_SEC,
    make_engine,
    setup_logging,
)
from .services import (
    AuthService,
    CredentialStore,
    ProviderConfig,
    SSORegistry,
    TokenIssuer,
    default_providers,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.store.create_schema(reset=DB_RESET)
    yield


def create_app(
    store: Optional[CredentialStore] = None,
    providers: Optional[Iterable[ProviderConfig]] = None,
    token_delivery: str = SSO_TOKEN_DELIVERY,
) -> FastAPI:
    setup_logging()

    app = FastAPI(title="Training Sessions API", version="1.0.0", lifespan=lifespan)

    store = store or CredentialStore(make_engine())
    app.state.store = store
    app.state.auth = AuthService(store, TokenIssuer(JWT_SECRET, TOKEN_TTL_SEC))
    app.state.sso = SSORegistry(default_providers() if providers is None else providers)
    app.state.token_delivery = token_delivery

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )
    app.add_middleware(
        SessionMiddleware,
        secret_key=SECRET_KEY,
        session_cookie="sid",
        https_only=COOKIE_SECURE,
        same_site=COOKIE_SAMESITE,
        domain=COOKIE_DOMAIN,
    )

    register_routes(app)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("training_api.app:app", host="127.0.0.1", port=3001, reload=True)
