"""Google and GitHub sign-in through authlib.

Each provider is described by a ``ProviderConfig``: its OAuth endpoints,
the profile endpoint, the claims parser and the account ``MatchStrategy``.
Only providers with a client id are registered with authlib; asking for an
unconfigured provider raises ``ProviderConfigError``.

The OAuth ``state`` is generated by authlib on redirect and kept in the
signed session cookie; the callback rejects any state it did not issue.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional

import httpx
from authlib.integrations.base_client import MismatchingStateError, OAuthError
from authlib.integrations.starlette_client import OAuth
from fastapi import Request

from ..core import config
from ..core.errors import ProviderConfigError, ProviderExchangeError
from .identity import MatchStrategy, SSOClaims

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProviderConfig:
    name: str
    display_name: str
    client_id: Optional[str]
    client_secret: Optional[str]
    redirect_uri: str
    authorize_url: str
    access_token_url: str
    api_base_url: str
    profile_path: str
    scope: str
    strategy: MatchStrategy
    parse_claims: Callable[[Dict[str, Any]], SSOClaims]

    @property
    def configured(self) -> bool:
        return bool(self.client_id)


def github_claims(profile: Dict[str, Any]) -> SSOClaims:
    external_id = profile.get("id")
    login = profile.get("login")
    if not external_id or not login:
        raise ProviderExchangeError("Failed to fetch GitHub user data")
    external_id = str(external_id)
    return SSOClaims(
        provider="github",
        external_id=external_id,
        username=f"github_{login}_{external_id}",
        email=profile.get("email") or None,
        avatar_url=profile.get("avatar_url") or None,
        fallback_email=f"{login}@github.local",
    )


def google_claims(profile: Dict[str, Any]) -> SSOClaims:
    email = profile.get("email")
    external_id = profile.get("id") or profile.get("sub")
    if not email or not external_id:
        raise ProviderExchangeError("Failed to get user info from Google")
    return SSOClaims(
        provider="google",
        external_id=str(external_id),
        username=email.split("@")[0],
        email=email,
        avatar_url=profile.get("picture") or None,
    )


def google_provider(
    client_id: Optional[str] = config.GOOGLE_CLIENT_ID,
    client_secret: Optional[str] = config.GOOGLE_CLIENT_SECRET,
    redirect_uri: str = config.GOOGLE_REDIRECT_URI,
) -> ProviderConfig:
    return ProviderConfig(
        name="google",
        display_name="Google",
        client_id=client_id,
        client_secret=client_secret,
        redirect_uri=redirect_uri,
        authorize_url="https://accounts.google.com/o/oauth2/v2/auth",
        access_token_url="https://oauth2.googleapis.com/token",
        api_base_url="https://www.googleapis.com/oauth2/v2/",
        profile_path="userinfo",
        scope="email profile",
        strategy=MatchStrategy.BY_EMAIL_ONLY,
        parse_claims=google_claims,
    )


def github_provider(
    client_id: Optional[str] = config.GITHUB_CLIENT_ID,
    client_secret: Optional[str] = config.GITHUB_CLIENT_SECRET,
    redirect_uri: str = config.GITHUB_REDIRECT_URI,
) -> ProviderConfig:
    return ProviderConfig(
        name="github",
        display_name="GitHub",
        client_id=client_id,
        client_secret=client_secret,
        redirect_uri=redirect_uri,
        authorize_url="https://github.com/login/oauth/authorize",
        access_token_url="https://github.com/login/oauth/access_token",
        api_base_url="https://api.github.com/",
        profile_path="user",
        scope="user:email",
        strategy=MatchStrategy.BY_EXTERNAL_ID_THEN_EMAIL,
        parse_claims=github_claims,
    )


def default_providers() -> List[ProviderConfig]:
    return [google_provider(), github_provider()]


class SSORegistry:
    """Registered OAuth clients keyed by provider name."""

    def __init__(
        self,
        providers: Iterable[ProviderConfig],
        timeout: float = config.OAUTH_TIMEOUT_SEC,
    ) -> None:
        self.oauth = OAuth()
        self.providers: Dict[str, ProviderConfig] = {p.name: p for p in providers}
        for provider in self.providers.values():
            if not provider.configured:
                log.warning("%s OAuth not configured", provider.display_name)
                continue
            self.oauth.register(
                name=provider.name,
                client_id=provider.client_id,
                client_secret=provider.client_secret,
                authorize_url=provider.authorize_url,
                access_token_url=provider.access_token_url,
                api_base_url=provider.api_base_url,
                client_kwargs={
                    "scope": provider.scope,
                    "token_endpoint_auth_method": "client_secret_post",
                    "timeout": timeout,
                },
            )

    def get(self, name: str) -> ProviderConfig:
        provider = self.providers.get(name)
        if provider is None:
            raise ProviderConfigError(f"Unknown OAuth provider: {name}")
        if not provider.configured:
            raise ProviderConfigError(f"{provider.display_name} OAuth not configured")
        return provider

    async def authorize_redirect(self, request: Request, name: str):
        provider = self.get(name)
        client = self.oauth.create_client(provider.name)
        return await client.authorize_redirect(request, provider.redirect_uri)

    async def fetch_claims(self, request: Request, name: str) -> SSOClaims:
        """Exchange the callback's code for a token and read the user's profile."""

        provider = self.get(name)
        client = self.oauth.create_client(provider.name)
        label = provider.display_name
        try:
            token = await client.authorize_access_token(request)
            response = await client.get(provider.profile_path, token=token)
            response.raise_for_status()
            profile = response.json()
        except MismatchingStateError as exc:
            log.warning("%s callback with unknown OAuth state", label)
            raise ProviderExchangeError("Invalid OAuth state") from exc
        except OAuthError as exc:
            log.warning("%s token exchange failed: %s", label, exc.error)
            detail = exc.description or exc.error
            raise ProviderExchangeError(f"{label} token error: {detail}") from exc
        except (httpx.HTTPError, ValueError) as exc:
            log.warning("%s profile request failed: %s", label, exc)
            raise ProviderExchangeError(f"Failed to fetch {label} user data") from exc
        return provider.parse_claims(profile)


__all__ = [
    "ProviderConfig",
    "SSORegistry",
    "default_providers",
    "github_claims",
    "github_provider",
    "google_claims",
    "google_provider",
]
