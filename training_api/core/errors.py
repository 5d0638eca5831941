"""Authentication error taxonomy.

Each error carries the HTTP status and the message that may be shown to
clients. Internal details (SQL, stack traces) never go into ``message``.
"""

from __future__ import annotations


class AuthError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AuthError):
    status_code = 400
    default_message = "Invalid request"


class InvalidCredentials(AuthError):
    status_code = 401
    default_message = "Invalid credentials"


class Unauthorized(AuthError):
    status_code = 401
    default_message = "Invalid or expired token"


class UserNotFound(AuthError):
    status_code = 404
    default_message = "User not found"


class UnknownProvider(AuthError):
    status_code = 404
    default_message = "Unknown OAuth provider"


class DuplicateUsername(AuthError):
    status_code = 409
    default_message = "Username already exists"


class DuplicateEmail(AuthError):
    status_code = 409
    default_message = "Email already registered to another account"


class ProviderConfigError(AuthError):
    status_code = 500
    default_message = "OAuth provider not configured"


class ProviderExchangeError(AuthError):
    status_code = 502
    default_message = "Sign-in with the identity provider failed"


__all__ = [
    "AuthError",
    "DuplicateEmail",
    "DuplicateUsername",
    "InvalidCredentials",
    "ProviderConfigError",
    "ProviderExchangeError",
    "Unauthorized",
    "UnknownProvider",
    "UserNotFound",
    "ValidationError",
]
