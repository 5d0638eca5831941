"""Service layer helpers."""

from .auth import AuthService, SignIn
from .credentials import CredentialStore
from .identity import IdentityReconciler, MatchStrategy, SSOClaims
from .sso import ProviderConfig, SSORegistry, default_providers
from .tokens import TokenIssuer

__all__ = [
    "AuthService",
    "CredentialStore",
    "IdentityReconciler",
    "MatchStrategy",
    "ProviderConfig",
    "SSOClaims",
    "SSORegistry",
    "SignIn",
    "TokenIssuer",
    "default_providers",
]
