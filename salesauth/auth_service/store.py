"""
SQLAlchemy-backed credential store.

Records are returned as detached `UserRecord` snapshots so callers never hold
a live session. The password hash is only loaded by
`find_by_email_with_secret`.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from .errors import DuplicateKey, StoreUnavailable
from .models import User

logger = logging.getLogger(__name__)

_PUBLIC_COLUMNS = (User.id, User.name, User.email, User.role, User.created_at, User.updated_at)


@dataclass(frozen=True)
class UserRecord:
    id: str
    name: str
    email: str
    role: str
    created_at: datetime
    updated_at: datetime
    password_hash: Optional[str] = None


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserStore:
    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def find_by_email(self, email: str) -> Optional[UserRecord]:
        """Look up a user by normalized email, without the password hash."""
        return self._find_public(User.email == normalize_email(email))

    def find_by_id(self, user_id: str) -> Optional[UserRecord]:
        return self._find_public(User.id == user_id)

    def find_by_email_with_secret(self, email: str) -> Optional[UserRecord]:
        """Same lookup as `find_by_email` but includes the password hash (login only)."""
        try:
            with self._session_factory() as db:
                user = db.query(User).filter(User.email == normalize_email(email)).first()
                if user is None:
                    return None
                return UserRecord(
                    id=user.id,
                    name=user.name,
                    email=user.email,
                    role=user.role,
                    created_at=user.created_at,
                    updated_at=user.updated_at,
                    password_hash=user.password_hash,
                )
        except SQLAlchemyError as exc:
            logger.exception("Credential store lookup failed")
            raise StoreUnavailable() from exc

    def create(self, name: str, email: str, password_hash: str, role: str) -> UserRecord:
        """
        Insert a new user.

        Raises:
            DuplicateKey: the unique email index rejected the row
            StoreUnavailable: any other database failure
        """
        email = normalize_email(email)
        try:
            with self._session_factory() as db:
                user = User(name=name, email=email, password_hash=password_hash, role=role)
                db.add(user)
                try:
                    db.commit()
                except IntegrityError as exc:
                    db.rollback()
                    raise DuplicateKey(email) from exc
                db.refresh(user)
                return UserRecord(
                    id=user.id,
                    name=user.name,
                    email=user.email,
                    role=user.role,
                    created_at=user.created_at,
                    updated_at=user.updated_at,
                )
        except SQLAlchemyError as exc:
            logger.exception("Credential store insert failed")
            raise StoreUnavailable() from exc

    def _find_public(self, criterion) -> Optional[UserRecord]:
        try:
            with self._session_factory() as db:
                row = db.query(*_PUBLIC_COLUMNS).filter(criterion).first()
        except SQLAlchemyError as exc:
            logger.exception("Credential store lookup failed")
            raise StoreUnavailable() from exc
        if row is None:
            return None
        return UserRecord(
            id=row.id,
            name=row.name,
            email=row.email,
            role=row.role,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )
