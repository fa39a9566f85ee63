from enum import Enum


class ErrorCode(Enum):
    """Standard error codes for the bearer auth domain"""

    # Token errors
    INVALID_TTL = "TOKEN_001"
    MALFORMED_TOKEN = "TOKEN_002"
    SIGNATURE_INVALID = "TOKEN_003"
    UNSUPPORTED_ALGORITHM = "TOKEN_004"
    TOKEN_EXPIRED = "TOKEN_005"

    # Authentication errors
    INVALID_CREDENTIALS = "AUTH_001"
    UNAUTHENTICATED = "AUTH_002"
    INSUFFICIENT_PERMISSIONS = "AUTH_003"

    # Revocation store errors
    KEY_NOT_FOUND = "STORE_001"
    STORE_UNAVAILABLE = "STORE_002"
    STORE_CLOSED = "STORE_003"
    STORE_ERROR = "STORE_004"

    # Crypto errors
    HASH_FAILURE = "CRYPTO_001"


class AuthDomainError(Exception):
    """Base exception for bearer auth domain errors"""

    def __init__(self, message: str, error_code: ErrorCode | None = None, details: dict | None = None):
        super().__init__(message)
        self.error_code = error_code
        self.details = details or {}
        self.message = message

    def __str__(self) -> str:
        if self.error_code:
            return f"[{self.error_code.value}] {self.message}"
        return self.message


# Validation Errors
class InvalidTTLError(AuthDomainError):
    """Raised when a token or store TTL is negative or not a whole number of minutes"""

    def __init__(self, message: str = "TTL must be a non-negative integer", details: dict | None = None):
        super().__init__(message, ErrorCode.INVALID_TTL, details)


# Token Errors
class TokenError(AuthDomainError):
    """Base class for token parsing and verification errors"""

    pass


class MalformedTokenError(TokenError):
    """Raised when a token is not a well-formed signed token"""

    def __init__(self, message: str = "Malformed token", details: dict | None = None):
        super().__init__(message, ErrorCode.MALFORMED_TOKEN, details)


class InvalidClaimsError(MalformedTokenError):
    """Raised when a claim has the wrong shape (e.g. permissions is not a list of strings)"""

    def __init__(self, message: str = "Invalid token claims", details: dict | None = None):
        super().__init__(message, details)


class SignatureInvalidError(TokenError):
    """Raised when the token signature does not verify with the engine secret"""

    def __init__(self, message: str = "Token signature is invalid", details: dict | None = None):
        super().__init__(message, ErrorCode.SIGNATURE_INVALID, details)


class UnsupportedAlgorithmError(TokenError):
    """Raised when the token header declares a signing algorithm other than HS256"""

    def __init__(self, message: str = "Unsupported signing algorithm", details: dict | None = None):
        super().__init__(message, ErrorCode.UNSUPPORTED_ALGORITHM, details)


class TokenExpiredError(TokenError):
    """Raised when token has expired"""

    def __init__(self, message: str = "Token has expired", details: dict | None = None):
        super().__init__(message, ErrorCode.TOKEN_EXPIRED, details)


# Authentication Errors
class AuthenticationError(AuthDomainError):
    """Base class for authentication-related errors"""

    pass


class InvalidCredentialsError(AuthenticationError):
    """Raised when credentials are invalid"""

    def __init__(self, message: str = "Invalid username or password", details: dict | None = None):
        super().__init__(message, ErrorCode.INVALID_CREDENTIALS, details)


class UnauthenticatedError(AuthenticationError):
    """Raised for any token that cannot be trusted; the reason is never exposed"""

    def __init__(self, message: str = "Unauthenticated", details: dict | None = None):
        super().__init__(message, ErrorCode.UNAUTHENTICATED, details)


class InsufficientPermissionsError(AuthenticationError):
    """Raised when a token lacks required permissions"""

    def __init__(self, message: str = "Insufficient permissions", details: dict | None = None):
        super().__init__(message, ErrorCode.INSUFFICIENT_PERMISSIONS, details)


# Revocation Store Errors
class RevocationStoreError(AuthDomainError):
    """Base class for revocation store errors"""

    def __init__(self, message: str = "Revocation store operation failed", details: dict | None = None):
        super().__init__(message, ErrorCode.STORE_ERROR, details)


class KeyNotFoundError(RevocationStoreError):
    """Raised when a key (or hash field) is absent or expired"""

    def __init__(self, message: str = "Key not found", details: dict | None = None):
        super().__init__(message, details)
        self.error_code = ErrorCode.KEY_NOT_FOUND


class StoreUnavailableError(RevocationStoreError):
    """Raised when the backing store cannot be reached or times out"""

    def __init__(self, message: str = "Revocation store unavailable", details: dict | None = None):
        super().__init__(message, details)
        self.error_code = ErrorCode.STORE_UNAVAILABLE


class StoreClosedError(RevocationStoreError):
    """Raised when an operation is issued after the store was closed"""

    def __init__(self, message: str = "Revocation store is closed", details: dict | None = None):
        super().__init__(message, details)
        self.error_code = ErrorCode.STORE_CLOSED


# Crypto Errors
class HashFailure(Exception):
    """
    Raised when the password hash primitive itself fails.

    Not an AuthDomainError: a broken hash primitive invalidates every later
    authentication, so callers must let it terminate the process instead of
    mapping it to a login failure.
    """

    error_code = ErrorCode.HASH_FAILURE

    def __str__(self) -> str:
        return f"[{self.error_code.value}] {super().__str__()}"
