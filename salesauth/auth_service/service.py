"""Authentication service for user registration, login and token refresh."""
from dataclasses import dataclass
from datetime import timedelta
from typing import Iterable, Optional
import logging
import re

from passlib.utils import MAX_PASSWORD_SIZE

from .auth import PasswordHasher, TokenIssuer
from .config import Settings
from .errors import (
    DuplicateIdentity,
    DuplicateKey,
    Forbidden,
    InvalidCredentials,
    TokenError,
    Unauthorized,
    ValidationError,
)
from .models import ROLE_EMPLOYEE, ROLES
from .store import UserRecord, UserStore, normalize_email
from .utils.event_logger import log_auth_event

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[A-Za-z]{2,}$")
MIN_PASSWORD_LENGTH = 6
# passlib refuses longer secrets
MAX_PASSWORD_BYTES = MAX_PASSWORD_SIZE


@dataclass(frozen=True)
class UserView:
    """The part of a user record that may be returned to a caller."""

    id: str
    name: str
    email: str
    role: str

    @classmethod
    def from_record(cls, record: UserRecord) -> "UserView":
        return cls(id=record.id, name=record.name, email=record.email, role=record.role)


@dataclass(frozen=True)
class AuthResult:
    access_token: str
    refresh_token: str
    user: UserView


def _is_blank(value) -> bool:
    return not isinstance(value, str) or not value.strip()


def _is_missing(value) -> bool:
    return not isinstance(value, str) or value == ""


class AuthenticationService:
    """
    Orchestrates the credential store, password hasher and token issuer.

    Holds no per-request state; one instance is shared by all requests.
    """

    def __init__(self, store: UserStore, hasher: PasswordHasher, tokens: TokenIssuer):
        self._store = store
        self._hasher = hasher
        self._tokens = tokens

    @classmethod
    def from_settings(cls, settings: Settings, store: UserStore) -> "AuthenticationService":
        tokens = TokenIssuer(
            access_secret=settings.ACCESS_TOKEN_SECRET,
            refresh_secret=settings.REFRESH_TOKEN_SECRET,
            access_lifetime=timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS),
            refresh_lifetime=timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
        )
        return cls(store=store, hasher=PasswordHasher(), tokens=tokens)

    def register(self, name: str, email: str, password: str, role: Optional[str] = None) -> AuthResult:
        if _is_blank(name) or _is_blank(email) or _is_missing(password):
            raise ValidationError("Please provide name, email and password")
        email = normalize_email(email)
        if not EMAIL_PATTERN.match(email):
            raise ValidationError("Please provide a valid email address")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValidationError(f"Password cannot exceed {MAX_PASSWORD_BYTES} bytes")
        if role is None or role == "":
            role = ROLE_EMPLOYEE
        if role not in ROLES:
            raise ValidationError(f"Role must be one of: {', '.join(ROLES)}")

        if self._store.find_by_email(email) is not None:
            log_auth_event("register_conflict", email=email)
            raise DuplicateIdentity()

        password_hash = self._hasher.hash(password)
        try:
            record = self._store.create(name.strip(), email, password_hash, role)
        except DuplicateKey as exc:
            # Lost a race with a concurrent registration for the same email
            log_auth_event("register_conflict", email=email)
            raise DuplicateIdentity() from exc

        log_auth_event("register_success", user_id=record.id, email=email, role=role)
        return self._issue_pair(record)

    def login(self, email: str, password: str) -> AuthResult:
        if _is_blank(email) or _is_missing(password):
            raise ValidationError("Please provide email and password")
        email = normalize_email(email)

        record = self._store.find_by_email_with_secret(email)
        if record is None:
            self._hasher.dummy_verify()
            log_auth_event("login_failure", email=email)
            raise InvalidCredentials()

        if not self._hasher.verify(password, record.password_hash):
            log_auth_event("login_failure", user_id=record.id, email=email)
            raise InvalidCredentials()

        log_auth_event("login_success", user_id=record.id, email=email)
        return self._issue_pair(record)

    def refresh(self, refresh_token: str) -> str:
        """Exchange a valid refresh token for a new access token. The refresh token is not rotated."""
        if _is_blank(refresh_token):
            raise ValidationError("Refresh token is required")
        try:
            user_id = self._tokens.verify_refresh(refresh_token)
        except TokenError as exc:
            log_auth_event("token_rejected", token_type="refresh", reason=type(exc).__name__)
            raise Unauthorized("Invalid or expired refresh token") from exc

        log_auth_event("token_refresh", user_id=user_id)
        return self._tokens.issue_access(user_id)

    def authenticate(self, access_token: str) -> UserView:
        """Resolve an access token to the current user, re-reading the role from the store."""
        if _is_blank(access_token):
            raise Unauthorized("Not authenticated")
        try:
            user_id = self._tokens.verify_access(access_token)
        except TokenError as exc:
            log_auth_event("token_rejected", token_type="access", reason=type(exc).__name__)
            raise Unauthorized() from exc

        record = self._store.find_by_id(user_id)
        if record is None:
            raise Unauthorized("User not found")
        return UserView.from_record(record)

    def authorize(self, access_token: str, roles: Iterable[str]) -> UserView:
        roles = tuple(roles)
        user = self.authenticate(access_token)
        if user.role not in roles:
            logger.info("Role %s denied, requires one of %s (user_id=%s)", user.role, list(roles), user.id)
            raise Forbidden()
        return user

    def _issue_pair(self, record: UserRecord) -> AuthResult:
        return AuthResult(
            access_token=self._tokens.issue_access(record.id),
            refresh_token=self._tokens.issue_refresh(record.id),
            user=UserView.from_record(record),
        )
