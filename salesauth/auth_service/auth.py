from passlib.context import CryptContext
from passlib.exc import PasswordSizeError
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional
import jwt

from .errors import (
    HashFormatError,
    TokenClassMismatch,
    TokenExpired,
    TokenInvalidSignature,
    TokenMalformed,
)

ACCESS_TOKEN = "access"
REFRESH_TOKEN = "refresh"

# Use pbkdf2_sha256 to avoid external bcrypt backend issues in some environments
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


class PasswordHasher:
    """Salted one-way password hashing with constant-time verification."""

    def __init__(self, context: CryptContext = pwd_context):
        self._context = context

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, password: str, password_hash: str) -> bool:
        """
        Check a plaintext password against a stored hash.

        Raises:
            HashFormatError: the stored hash is empty or cannot be parsed
        """
        if not password_hash:
            raise HashFormatError()
        try:
            return self._context.verify(password, password_hash)
        except PasswordSizeError:
            # Oversized input can never match; keep the timing of a normal miss
            return self.dummy_verify()
        except (ValueError, TypeError) as exc:
            raise HashFormatError() from exc

    def dummy_verify(self) -> bool:
        """Spend the same work as a real verify when there is no stored hash."""
        self._context.dummy_verify()
        return False


class TokenIssuer:
    """
    Issues and verifies access and refresh JWTs.

    Each class has its own secret and lifetime and carries a `type` claim,
    so a token of one class is never accepted as the other.
    """

    ALGORITHM = "HS256"
    REQUIRED_CLAIMS = ["sub", "type", "iat", "exp"]

    def __init__(
        self,
        access_secret: str,
        refresh_secret: str,
        access_lifetime: timedelta = timedelta(days=7),
        refresh_lifetime: timedelta = timedelta(days=30),
        clock: Optional[Callable[[], datetime]] = None,
    ):
        if not access_secret or not refresh_secret:
            raise ValueError("Token secrets cannot be empty")
        if access_secret == refresh_secret:
            raise ValueError("Access and refresh secrets must differ")

        self._secrets = {ACCESS_TOKEN: access_secret, REFRESH_TOKEN: refresh_secret}
        self._lifetimes = {ACCESS_TOKEN: access_lifetime, REFRESH_TOKEN: refresh_lifetime}
        self._clock = clock or (lambda: datetime.now(tz=timezone.utc))

    def issue_access(self, user_id: str) -> str:
        return self._issue(user_id, ACCESS_TOKEN)

    def issue_refresh(self, user_id: str) -> str:
        return self._issue(user_id, REFRESH_TOKEN)

    def verify_access(self, token: str) -> str:
        return self._verify(token, ACCESS_TOKEN)

    def verify_refresh(self, token: str) -> str:
        return self._verify(token, REFRESH_TOKEN)

    def _issue(self, user_id: str, token_type: str) -> str:
        now = self._clock()
        payload = {
            "sub": str(user_id),
            "type": token_type,
            "iat": now,
            "exp": now + self._lifetimes[token_type],
        }
        return jwt.encode(payload, self._secrets[token_type], algorithm=self.ALGORITHM)

    def _verify(self, token: str, token_type: str) -> str:
        # jwt.decode checks the signature before any claim is looked at
        try:
            payload = jwt.decode(
                token,
                self._secrets[token_type],
                algorithms=[self.ALGORITHM],
                options={"require": self.REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError as exc:
            raise TokenExpired() from exc
        except jwt.InvalidSignatureError as exc:
            raise TokenInvalidSignature() from exc
        except jwt.InvalidTokenError as exc:
            raise TokenMalformed() from exc

        if payload["type"] != token_type:
            raise TokenClassMismatch()
        if not payload["sub"]:
            raise TokenMalformed()
        return payload["sub"]
