"""Persistent access to account rows.

The store holds no business rules: it looks rows up, inserts them and
updates single columns. Uniqueness is left to the database constraints so
concurrent inserts race safely; the losing writer gets ``DuplicateUsername``
or ``DuplicateEmail`` translated from the ``IntegrityError``.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, SQLModel, select

from ..core.errors import DuplicateEmail, DuplicateUsername, UserNotFound
from ..core.time import utcnow
from ..models import Account


class CredentialStore:
    """Single-row reads and writes against the ``account`` table."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    def create_schema(self, *, reset: bool = False) -> None:
        if reset:
            SQLModel.metadata.drop_all(self.engine)
        SQLModel.metadata.create_all(self.engine)

    # Lookups -----------------------------------------------------------------
    def get(self, account_id: int) -> Optional[Account]:
        with Session(self.engine) as session:
            return session.get(Account, account_id)

    def find_by_username(self, username: str) -> Optional[Account]:
        with Session(self.engine) as session:
            return session.exec(
                select(Account).where(Account.username == username)
            ).first()

    def find_by_email(self, email: str) -> Optional[Account]:
        with Session(self.engine) as session:
            return session.exec(select(Account).where(Account.email == email)).first()

    def find_by_external_id(self, provider: str, external_id: str) -> Optional[Account]:
        with Session(self.engine) as session:
            return session.exec(
                select(Account)
                .where(Account.provider == provider)
                .where(Account.external_id == external_id)
            ).first()

    def list_all(self) -> List[Account]:
        with Session(self.engine) as session:
            return list(session.exec(select(Account).order_by(Account.id)).all())

    # Writes ------------------------------------------------------------------
    def insert_local(self, username: str, password_hash: str) -> Account:
        return self._insert(
            Account(username=username, password_hash=password_hash, provider="local")
        )

    def insert_sso(
        self,
        username: str,
        email: Optional[str],
        provider: str,
        external_id: Optional[str],
        avatar_url: Optional[str],
    ) -> Account:
        return self._insert(
            Account(
                username=username,
                email=email,
                provider=provider,
                external_id=external_id,
                avatar_url=avatar_url,
            )
        )

    def update_password_hash(self, account_id: int, new_hash: str) -> None:
        self._update(account_id, password_hash=new_hash)

    def update_avatar(self, account_id: int, avatar_url: str) -> None:
        self._update(account_id, avatar_url=avatar_url)

    def _insert(self, account: Account) -> Account:
        with Session(self.engine) as session:
            session.add(account)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                if "email" in str(exc.orig).lower():
                    raise DuplicateEmail() from exc
                raise DuplicateUsername() from exc
            session.refresh(account)
            return account

    def _update(self, account_id: int, **values: str) -> None:
        with Session(self.engine) as session:
            account = session.get(Account, account_id)
            if account is None:
                raise UserNotFound()
            for key, value in values.items():
                setattr(account, key, value)
            account.updated_at = utcnow()
            session.add(account)
            session.commit()


__all__ = ["CredentialStore"]
