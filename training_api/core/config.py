"""Application settings and environment helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, List

from dotenv import load_dotenv

load_dotenv(override=False)


def _require_env(name: str) -> str:
    """Return a required environment variable or raise an error."""

    value = os.getenv(name)
    if not value:
        raise RuntimeError(f"Missing required environment variable: {name}")
    return value


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be a number") from exc


def _split_csv(raw: str | None) -> List[str]:
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


def _unique(values: Iterable[str]) -> List[str]:
    seen = set()
    ordered: List[str] = []
    for value in values:
        if value not in seen:
            seen.add(value)
            ordered.append(value)
    return ordered


# Application security -------------------------------------------------------
SECRET_KEY = _require_env("SECRET_KEY")

# Bearer tokens may be signed with a dedicated secret; the session cookie
# always uses SECRET_KEY.
JWT_SECRET = os.getenv("JWT_SECRET") or SECRET_KEY
TOKEN_TTL_SEC = 24 * 60 * 60

# FRONTEND_ORIGIN can contain a comma-separated list for multi-domain deploys.
_frontend_origins = _split_csv(os.getenv("FRONTEND_ORIGIN", "http://localhost:5173"))
_additional_origins = _split_csv(os.getenv("ADDITIONAL_ALLOWED_ORIGINS"))

_local_dev_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3001",
    "http://127.0.0.1:3001",
]

ALLOWED_CORS_ORIGINS = _unique(
    [
        *_frontend_origins,
        *_additional_origins,
        *_local_dev_origins,
    ]
)

FRONTEND_ORIGINS = _frontend_origins
FRONTEND_ORIGIN = FRONTEND_ORIGINS[0] if FRONTEND_ORIGINS else "http://localhost:5173"


# SSO providers --------------------------------------------------------------
GOOGLE_CLIENT_ID = os.getenv("GOOGLE_CLIENT_ID") or None
GOOGLE_CLIENT_SECRET = os.getenv("GOOGLE_CLIENT_SECRET") or None
# The Google app is registered with the API root as its redirect URI.
GOOGLE_REDIRECT_URI = os.getenv("GOOGLE_REDIRECT_URI", "http://localhost:3001")

GITHUB_CLIENT_ID = os.getenv("GITHUB_CLIENT_ID") or None
GITHUB_CLIENT_SECRET = os.getenv("GITHUB_CLIENT_SECRET") or None
GITHUB_REDIRECT_URI = os.getenv(
    "GITHUB_REDIRECT_URI", "http://localhost:3001/auth/github/callback"
)

OAUTH_TIMEOUT_SEC = _env_float("OAUTH_TIMEOUT_SEC", 10.0)

# "cookie" hands the token over through the session cookie, "query" appends
# it to the frontend redirect URL.
SSO_TOKEN_DELIVERY = os.getenv("SSO_TOKEN_DELIVERY", "cookie").strip().lower()
if SSO_TOKEN_DELIVERY not in {"cookie", "query"}:
    raise RuntimeError("SSO_TOKEN_DELIVERY must be 'cookie' or 'query'")


# Runtime behaviour ----------------------------------------------------------
_PROJECT_ROOT = Path(__file__).resolve().parents[2]
DATA_DIR = Path(os.getenv("DATA_DIR", str(_PROJECT_ROOT / "data")))
DATABASE_URL = os.getenv("DATABASE_URL") or f"sqlite:///{DATA_DIR / 'training.db'}"

COOKIE_DOMAIN = os.getenv("COOKIE_DOMAIN") or None
COOKIE_SECURE = _env_bool("COOKIE_SECURE", False)
COOKIE_SAMESITE = os.getenv("COOKIE_SAMESITE", "lax")

DB_RESET = _env_bool("DB_RESET", False)
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


__all__ = [
    "ALLOWED_CORS_ORIGINS",
    "COOKIE_DOMAIN",
    "COOKIE_SAMESITE",
    "COOKIE_SECURE",
    "DATABASE_URL",
    "DATA_DIR",
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
    "LOG_LEVEL",
    "OAUTH_TIMEOUT_SEC",
    "SECRET_KEY",
    "SSO_TOKEN_DELIVERY",
    "TOKEN_TTL_SEC",
]
