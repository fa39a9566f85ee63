import time
import uuid
from typing import Any, Callable, Mapping

import jwt
import structlog

from bearer_auth.application.ports.token_engine import TokenEngine
from bearer_auth.domain.errors import (
    InvalidTTLError,
    MalformedTokenError,
    SignatureInvalidError,
    TokenExpiredError,
    UnsupportedAlgorithmError,
)
from bearer_auth.domain.value_objects.claims import Claims, ParsedToken, normalize_permissions

logger = structlog.get_logger(__name__)

ALGORITHM = "HS256"
DEFAULT_ISSUER = "bpt-bearer-auth"
DEFAULT_REFRESH_TTL_MINUTES = 15

# Regenerated on every reissue, never copied over from older claims
_MINTED_CLAIMS = ("iat", "jti", "iss")


class ClaimsTokenEngine(TokenEngine):
    """HS256 token engine bound to a single secret"""

    def __init__(
        self,
        secret: str | bytes,
        issuer: str = DEFAULT_ISSUER,
        clock: Callable[[], float] = time.time,
        leeway_seconds: int = 0,
    ):
        """
        Initialize the token engine

        Args:
            secret: Shared HMAC secret; rotate it by building a new engine
            issuer: Value of the iss claim on minted tokens
            clock: Returns the current time in epoch seconds
            leeway_seconds: Grace period applied when checking exp
        """
        if not secret:
            raise ValueError("Token secret must not be empty")

        self._secret = secret.encode() if isinstance(secret, str) else bytes(secret)
        self.issuer = issuer
        self.leeway_seconds = leeway_seconds
        self._clock = clock

        logger.info("Token engine initialized", issuer=issuer, algorithm=ALGORITHM)

    def __repr__(self) -> str:
        return f"ClaimsTokenEngine(issuer={self.issuer!r}, algorithm={ALGORITHM!r})"

    def mint(self, ttl_minutes: int, custom_claims: Mapping[str, Any] | None = None) -> str:
        """
        Mint a signed token

        Args:
            ttl_minutes: Minutes until expiry; zero yields an already expired token
            custom_claims: Claims merged over the standard ones, last write wins

        Returns:
            Signed token string
        """
        if isinstance(ttl_minutes, bool) or not isinstance(ttl_minutes, int):
            raise InvalidTTLError("ttl_minutes must be an integer", details={"ttl_minutes": repr(ttl_minutes)})
        if ttl_minutes < 0:
            raise InvalidTTLError("ttl_minutes is negative", details={"ttl_minutes": ttl_minutes})

        now = int(self._clock())
        payload: dict[str, Any] = {
            "exp": now + ttl_minutes * 60,
            "iss": self.issuer,
            "iat": now,
            "jti": str(uuid.uuid4()),
        }

        for key, value in (custom_claims or {}).items():
            payload[key] = value

        if "permissions" in payload:
            payload["permissions"] = normalize_permissions(payload["permissions"])

        try:
            token = jwt.encode(payload, self._secret, algorithm=ALGORITHM)
        except Exception as e:
            logger.error("Token minting failed", error=str(e))
            raise

        logger.debug("Token minted", jti=payload.get("jti"), sub=payload.get("sub"), exp=payload["exp"])
        return token

    def mint_refresh(self, custom_claims: Mapping[str, Any] | None = None, ttl_minutes: int | None = None) -> str:
        """Same as mint with a default TTL of 15 minutes"""
        if ttl_minutes is None:
            ttl_minutes = DEFAULT_REFRESH_TTL_MINUTES

        return self.mint(ttl_minutes, custom_claims)

    def reissue(self, claims: Claims, ttl_minutes: int | None = None) -> str:
        """
        Mint a new token from (possibly mutated) claims with fresh iat and jti

        Args:
            claims: Claims to carry over
            ttl_minutes: New lifetime; None keeps the exp of claims so the new
                token never outlives the one it replaces
        """
        regenerated = _MINTED_CLAIMS if ttl_minutes is None else _MINTED_CLAIMS + ("exp",)
        custom_claims = {key: value for key, value in claims.to_dict().items() if key not in regenerated}
        return self.mint(0 if ttl_minutes is None else ttl_minutes, custom_claims)

    def parse(self, token: str) -> ParsedToken:
        """
        Verify a token and return its claims

        Raises:
            MalformedTokenError: Not a well-formed token or claims
            UnsupportedAlgorithmError: Header declares anything but HS256
            SignatureInvalidError: Signature missing or made with another secret
            TokenExpiredError: exp has passed
        """
        if not isinstance(token, str) or not token:
            raise MalformedTokenError("Token must be a non-empty string")

        try:
            header = jwt.get_unverified_header(token)
        except jwt.DecodeError as e:
            raise MalformedTokenError(f"Invalid token header: {e}") from e

        algorithm = header.get("alg")
        if algorithm != ALGORITHM:
            raise UnsupportedAlgorithmError(
                f"Unexpected signing method: {algorithm}", details={"alg": algorithm}
            )

        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={
                    "require": ["exp", "iat"],
                    "verify_signature": True,
                    # exp is checked below against the engine clock
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_aud": False,
                    "verify_iss": False,
                    # Claim shapes are validated by Claims.from_dict
                    "verify_nbf": False,
                    "verify_sub": False,
                    "verify_jti": False,
                },
            )
        except jwt.InvalidSignatureError as e:
            raise SignatureInvalidError() from e
        except jwt.InvalidAlgorithmError as e:
            raise UnsupportedAlgorithmError(str(e), details={"alg": algorithm}) from e
        except jwt.InvalidTokenError as e:
            raise MalformedTokenError(f"Invalid token: {e}") from e

        claims = Claims.from_dict(payload)

        if claims.exp <= self._clock() - self.leeway_seconds:
            raise TokenExpiredError(details={"exp": claims.exp})

        return ParsedToken(token=token, header=header, _claims=claims)

    def get_claims(self, parsed: ParsedToken) -> Claims:
        """Return a copy of every claim of a parsed token"""
        return parsed.claims

    def seconds_until_expiry(self, parsed: ParsedToken) -> float:
        """Seconds left before exp, negative once expired"""
        return parsed.exp - self._clock()

    def is_expiring_within(self, parsed: ParsedToken, minutes: float) -> bool:
        """True when the token expires in the next `minutes` minutes (inclusive)"""
        minutes_left = self.seconds_until_expiry(parsed) / 60
        return minutes_left <= minutes
