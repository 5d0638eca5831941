"""Database model for user accounts."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import Index
from sqlmodel import Field as ORMField, SQLModel

from ..core.time import utcnow

PROVIDERS = ("local", "google", "github")


class Account(SQLModel, table=True):
    """Identity record shared by local and SSO-created users."""

    __tablename__ = "account"
    __table_args__ = (
        Index("ix_account_provider_external_id", "provider", "external_id"),
    )

    id: Optional[int] = ORMField(default=None, primary_key=True)
    username: str = ORMField(index=True, unique=True, nullable=False)
    email: Optional[str] = ORMField(default=None, unique=True)
    password_hash: Optional[str] = None
    provider: str = ORMField(default="local")
    external_id: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: datetime = ORMField(default_factory=utcnow)
    updated_at: datetime = ORMField(default_factory=utcnow)


def account_public_dict(account: Account, *, full: bool = False) -> Dict[str, Any]:
    """Serialise an account for API responses. Never includes the hash."""

    payload: Dict[str, Any] = {"id": account.id, "username": account.username}
    if full:
        payload.update(
            {
                "email": account.email,
                "provider": account.provider,
                "avatar_url": account.avatar_url,
            }
        )
    return payload


__all__ = ["Account", "PROVIDERS", "account_public_dict"]
