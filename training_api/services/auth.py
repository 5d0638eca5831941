"""Authentication entry points shared by the HTTP routers and the CLI."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from ..core.errors import Unauthorized, ValidationError
from ..models import Account
from .credentials import CredentialStore
from .identity import IdentityReconciler, MatchStrategy, SSOClaims
from .tokens import TokenIssuer


@dataclass(frozen=True)
class SignIn:
    """A resolved account together with its freshly issued bearer token."""

    account: Account
    token: str


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


class AuthService:
    def __init__(self, store: CredentialStore, tokens: TokenIssuer) -> None:
        self.store = store
        self.tokens = tokens
        self.identity = IdentityReconciler(store)

    def login(self, username: Any, password: Any) -> SignIn:
        username, password = _text(username), _text(password)
        if not username or not password:
            raise ValidationError("Username and password are required")
        account = self.identity.verify_local(username, password)
        return SignIn(account=account, token=self.tokens.issue(account))

    def create_account(self, username: Any, password: Any) -> Account:
        username, password = _text(username).strip(), _text(password)
        if not username or not password:
            raise ValidationError("Username and password are required")
        return self.identity.register_local(username, password)

    def forgot_password(self, username: Any) -> str:
        username = _text(username).strip()
        if not username:
            raise ValidationError("Username is required")
        return self.identity.reset_password(username)

    def complete_sso(self, claims: SSOClaims, strategy: MatchStrategy) -> SignIn:
        account = self.identity.resolve_sso(claims, strategy)
        token = self.tokens.issue(account, include_profile=True)
        return SignIn(account=account, token=token)

    def authenticate(self, token: Optional[str]) -> Account:
        """Resolve a bearer token to its account."""

        if not token:
            raise Unauthorized("Missing token")
        claims = self.tokens.verify(token)
        try:
            account_id = int(claims["sub"])
        except (KeyError, TypeError, ValueError) as exc:
            raise Unauthorized() from exc
        account = self.store.get(account_id)
        if account is None:
            raise Unauthorized()
        return account


__all__ = ["AuthService", "SignIn"]
