"""Resolve credentials and provider claims to exactly one account.

Matching order for SSO logins depends on the provider's ``MatchStrategy``:

* ``BY_EXTERNAL_ID_THEN_EMAIL``: the provider's stable user id is tried
  first so a user who changes their email keeps the same account, then the
  email.
* ``BY_EMAIL_ONLY``: only the email is matched.

A miss creates a new account. A hit with an empty avatar is enriched from
the claims; an existing avatar is never replaced.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Optional

from ..core.errors import (
    DuplicateUsername,
    InvalidCredentials,
    UserNotFound,
    ValidationError,
)
from ..models import Account
from .credentials import CredentialStore
from .passwords import generate_reset_password, hash_password, verify_password

log = logging.getLogger(__name__)

MAX_PASSWORD_BYTES = 72


class MatchStrategy(str, enum.Enum):
    BY_EXTERNAL_ID_THEN_EMAIL = "by_external_id_then_email"
    BY_EMAIL_ONLY = "by_email_only"


@dataclass(frozen=True)
class SSOClaims:
    """Profile attributes returned by an identity provider."""

    provider: str
    external_id: str
    username: str
    email: Optional[str] = None
    avatar_url: Optional[str] = None
    # Stored when the provider hides the user's email; never used for matching.
    fallback_email: Optional[str] = None


class IdentityReconciler:
    def __init__(self, store: CredentialStore) -> None:
        self.store = store

    # Local accounts ----------------------------------------------------------
    def register_local(self, username: str, password: str) -> Account:
        _check_password_length(password)
        if self.store.find_by_username(username) is not None:
            raise DuplicateUsername()
        account = self.store.insert_local(username, hash_password(password))
        log.info("account created id=%s provider=local", account.id)
        return account

    def verify_local(self, username: str, password: str) -> Account:
        account = self.store.find_by_username(username)
        if (
            account is None
            or not account.password_hash
            or not verify_password(password, account.password_hash)
        ):
            log.info("local login rejected username=%s", username)
            raise InvalidCredentials()
        return account

    def reset_password(self, username: str) -> str:
        """Replace the stored hash and return the new plaintext once."""

        account = self.store.find_by_username(username)
        if account is None:
            raise UserNotFound()
        new_password = generate_reset_password()
        self.store.update_password_hash(account.id, hash_password(new_password))
        log.info("password reset for account id=%s", account.id)
        return new_password

    def set_password(self, username: str, password: str) -> Account:
        _check_password_length(password)
        account = self.store.find_by_username(username)
        if account is None:
            raise UserNotFound()
        self.store.update_password_hash(account.id, hash_password(password))
        return account

    # SSO accounts ------------------------------------------------------------
    def resolve_sso(self, claims: SSOClaims, strategy: MatchStrategy) -> Account:
        account = self._match(claims, strategy)
        if account is None:
            account = self.store.insert_sso(
                username=self._available_username(claims),
                email=claims.email or claims.fallback_email,
                provider=claims.provider,
                external_id=claims.external_id,
                avatar_url=claims.avatar_url,
            )
            log.info("account created id=%s provider=%s", account.id, claims.provider)
            return account

        if not account.avatar_url and claims.avatar_url:
            self.store.update_avatar(account.id, claims.avatar_url)
            account.avatar_url = claims.avatar_url
            log.info("avatar backfilled for account id=%s", account.id)
        log.info(
            "sso login matched account id=%s provider=%s", account.id, claims.provider
        )
        return account

    def _match(self, claims: SSOClaims, strategy: MatchStrategy) -> Optional[Account]:
        if strategy is MatchStrategy.BY_EXTERNAL_ID_THEN_EMAIL:
            account = self.store.find_by_external_id(claims.provider, claims.external_id)
            if account is not None:
                return account
        if claims.email:
            return self.store.find_by_email(claims.email)
        return None

    def _available_username(self, claims: SSOClaims) -> str:
        """Return the synthesized username, suffixed with the external id when taken.

        If the suffixed name is taken as well a counter is appended. The unique
        constraint still decides a race between two concurrent sign-ins.
        """

        if self.store.find_by_username(claims.username) is None:
            return claims.username
        base = f"{claims.username}_{claims.external_id}"
        candidate = base
        counter = 1
        while self.store.find_by_username(candidate) is not None:
            counter += 1
            candidate = f"{base}_{counter}"
        log.info(
            "username %s taken, using %s for provider=%s",
            claims.username,
            candidate,
            claims.provider,
        )
        return candidate


def _check_password_length(password: str) -> None:
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")


__all__ = ["IdentityReconciler", "MatchStrategy", "SSOClaims"]
