"""
Error taxonomy for the authentication service.

Every error carries a message that is safe to show to a caller. Internal
details (hashes, secrets, driver errors) are logged, never put in `message`.
"""


class AuthServiceError(Exception):
    """Base exception for all authentication service errors."""

    default_message = "Authentication error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AuthServiceError):
    """Missing or malformed input."""

    default_message = "Invalid request"


class DuplicateIdentity(AuthServiceError):
    """An account already exists for the normalized email."""

    default_message = "User already exists with this email"


class InvalidCredentials(AuthServiceError):
    """Email or password is wrong. Deliberately does not say which."""

    default_message = "Invalid email or password"


class Unauthorized(AuthServiceError):
    """Bearer token is missing, invalid, expired or of the wrong class."""

    default_message = "Invalid or expired token"


class Forbidden(AuthServiceError):
    """Authenticated user lacks the required role."""

    default_message = "Not allowed to access this resource"


class StoreUnavailable(AuthServiceError):
    """The credential store could not be reached or failed mid-operation."""

    default_message = "Internal server error"


class HashFormatError(AuthServiceError):
    """A stored password hash is corrupted or in an unknown format."""

    default_message = "Internal server error"


class DuplicateKey(Exception):
    """Raised by the store when the unique email index rejects an insert."""

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"duplicate key for email {email!r}")


class TokenError(Exception):
    """Base exception for token verification failures."""

    default_message = "Invalid token"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class TokenExpired(TokenError):
    default_message = "Token has expired"


class TokenInvalidSignature(TokenError):
    default_message = "Token signature is invalid"


class TokenMalformed(TokenError):
    default_message = "Token is malformed"


class TokenClassMismatch(TokenError):
    """A correctly signed token was presented where the other class was expected."""

    default_message = "Token is of the wrong type"
