"""Database model exports."""

from .account import PROVIDERS, Account, account_public_dict

__all__ = [
    "Account",
    "PROVIDERS",
    "account_public_dict",
]
