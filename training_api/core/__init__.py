"""Core configuration and infrastructure helpers."""

from .config import (
    ALLOWED_CORS_ORIGINS,
    COOKIE_DOMAIN,
    COOKIE_SAMESITE,
    COOKIE_SECURE,
    DATABASE_URL,
    DB_RESET,
    FRONTEND_ORIGIN,
    FRONTEND_ORIGINS,
    GITHUB_CLIENT_ID,
    GITHUB_CLIENT_SECRET,
    GITHUB_REDIRECT_URI,
    GOOGLE_CLIENT_ID,
    GOOGLE_CLIENT_SECRET,
    GOOGLE_REDIRECT_URI,
    JWT_SECRET,
    OAUTH_TIMEOUT_SEC,
    SECRET_KEY,
    SSO_TOKEN_DELIVERY,
    TOKEN_TTL_SEC,
)
from .database import make_engine
from .logging import setup_logging
from .time import utcnow

__all__ = [
    "ALLOWED_CORS_ORIGINS",
    "COOKIE_DOMAIN",
    "COOKIE_SAMESITE",
    "COOKIE_SECURE",
    "DATABASE_URL",
    "DB_RESET",
    "FRONTEND_ORIGIN",
    "FRONTEND_ORIGINS",
    "GITHUB_CLIENT_ID",
    "GITHUB_CLIENT_SECRET",
    "GITHUB_REDIRECT_URI",
    "GOOGLE_CLIENT_ID",
    "GOOGLE_CLIENT_SECRET",
    "GOOGLE_REDIRECT_URI",
    "JWT_SECRET",
    "OAUTH_TIMEOUT_SEC",
    "SECRET_KEY",
    "SSO_TOKEN_DELIVERY",
    "TOKEN_TTL_SEC",
    "make_engine",
    "setup_logging",
    "utcnow",
]
