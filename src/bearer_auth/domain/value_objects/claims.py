import copy
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Mapping

from bearer_auth.domain.errors import InvalidClaimsError, MalformedTokenError

RESERVED_CLAIMS = ("exp", "iat", "iss", "permissions")


def normalize_permissions(value: Any) -> list[str]:
    """Validate a permissions claim and drop repeated names, keeping first-seen order"""
    if not isinstance(value, (list, tuple)):
        raise InvalidClaimsError(
            "permissions claim must be a list of strings", details={"type": type(value).__name__}
        )

    permissions: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise InvalidClaimsError(
                "permissions claim must be a list of strings", details={"item_type": type(item).__name__}
            )
        if item not in permissions:
            permissions.append(item)
    return permissions


def _is_numeric(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass
class Claims:
    """
    Typed view over the claims of a signed token.

    Mutating a Claims value never changes an already signed token; re-mint
    it with ClaimsTokenEngine.reissue to get a token carrying the change.
    """

    # Standard claims
    exp: int | float  # Expiration time
    iat: int | float  # Issued at
    iss: str | None = None  # Issuer

    # None means the claim is absent, which reads as no permissions
    permissions: list[str] | None = None

    # Caller supplied claims (sub, sid, jti, token_use, ...)
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Claims":
        """Build claims from a decoded payload, rejecting malformed reserved claims"""
        for name in ("exp", "iat"):
            if name not in data:
                raise MalformedTokenError(f"Token is missing the '{name}' claim")
            if not _is_numeric(data[name]):
                raise MalformedTokenError(f"Claim '{name}' must be numeric")

        permissions = None
        if "permissions" in data:
            permissions = normalize_permissions(data["permissions"])

        return cls(
            exp=data["exp"],
            iat=data["iat"],
            iss=data.get("iss"),
            permissions=permissions,
            extra={key: copy.deepcopy(value) for key, value in data.items() if key not in RESERVED_CLAIMS},
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JWT encoding"""
        result = copy.deepcopy(self.extra)
        result["exp"] = self.exp
        result["iat"] = self.iat
        if self.iss is not None:
            result["iss"] = self.iss
        if self.permissions is not None:
            result["permissions"] = list(self.permissions)
        return result

    def get(self, key: str, default: Any = None) -> Any:
        """Read any claim by name"""
        return self.to_dict().get(key, default)

    def __getitem__(self, key: str) -> Any:
        data = self.to_dict()
        if key not in data:
            raise KeyError(key)
        return data[key]

    def __contains__(self, key: object) -> bool:
        return key in self.to_dict()

    @property
    def jti(self) -> str | None:
        return self.extra.get("jti")

    @property
    def subject(self) -> str | None:
        return self.extra.get("sub")

    @property
    def session_id(self) -> str | None:
        return self.extra.get("sid")

    @property
    def token_use(self) -> str | None:
        return self.extra.get("token_use")

    @property
    def expires_at(self) -> datetime:
        return datetime.fromtimestamp(self.exp, tz=timezone.utc)

    @property
    def issued_at(self) -> datetime:
        return datetime.fromtimestamp(self.iat, tz=timezone.utc)


@dataclass(frozen=True)
class ParsedToken:
    """A verified token; claims are only handed out as copies"""

    token: str
    header: dict[str, Any] = field(repr=False)
    _claims: Claims = field(repr=False)

    @property
    def claims(self) -> Claims:
        return copy.deepcopy(self._claims)

    @property
    def exp(self) -> int | float:
        return self._claims.exp

    @property
    def jti(self) -> str | None:
        return self._claims.jti

    @property
    def algorithm(self) -> str | None:
        return self.header.get("alg")
