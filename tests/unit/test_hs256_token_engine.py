# Assumptions:
# - Using pytest for testing framework
# - Testing HS256 minting, parsing and expiry queries
# - RS256 tokens are forged with a throwaway RSA key

import base64
import json

import jwt
import pytest
from cryptography.hazmat.primitives.asymmetric import rsa

from bearer_auth.domain.errors import (
    InvalidClaimsError,
    InvalidTTLError,
    MalformedTokenError,
    SignatureInvalidError,
    TokenExpiredError,
    UnsupportedAlgorithmError,
)
from bearer_auth.infrastructure.crypto.hs256_token_engine import (
    DEFAULT_ISSUER,
    DEFAULT_REFRESH_TTL_MINUTES,
    ClaimsTokenEngine,
)


def _b64(data: dict) -> str:
    return base64.urlsafe_b64encode(json.dumps(data).encode()).decode().rstrip("=")


@pytest.fixture
def rsa_private_key():
    """Generate test RSA private key"""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


class TestMint:
    """Test cases for minting tokens"""

    def test_mint_without_custom_claims(self, engine):
        """Test minting a token with only the standard claims"""
        token = engine.mint(1)

        assert isinstance(token, str)
        assert token.count(".") == 2

        decoded = jwt.decode(token, options={"verify_signature": False})
        assert decoded["iss"] == DEFAULT_ISSUER
        assert decoded["exp"] - decoded["iat"] == 60
        assert "jti" in decoded

    def test_mint_header_declares_hs256(self, engine):
        """Test the header is fixed to HS256"""
        header = jwt.get_unverified_header(engine.mint(1))

        assert header["alg"] == "HS256"
        assert header["typ"] == "JWT"

    def test_mint_with_custom_claims(self, engine):
        """Test custom claims are carried in the token"""
        token = engine.mint(1, {"teste": True, "sub": "user-123"})

        decoded = jwt.decode(token, options={"verify_signature": False})
        assert decoded["teste"] is True
        assert decoded["sub"] == "user-123"

    def test_custom_claims_overwrite_standard_claims(self, engine):
        """Test custom claims win over iss, last write wins"""
        token = engine.mint(1, {"iss": "someone-else"})

        decoded = jwt.decode(token, options={"verify_signature": False})
        assert decoded["iss"] == "someone-else"

    def test_mint_negative_ttl(self, engine):
        """Test negative TTL is rejected"""
        with pytest.raises(InvalidTTLError):
            engine.mint(-1)

    @pytest.mark.parametrize("ttl", [1.5, "5", None, True])
    def test_mint_non_integer_ttl(self, engine, ttl):
        """Test TTL must be an integer number of minutes"""
        with pytest.raises(InvalidTTLError):
            engine.mint(ttl)

    def test_mint_zero_ttl(self, clocked_engine):
        """Test zero TTL mints a token that is already expired"""
        token = clocked_engine.mint(0)

        decoded = jwt.decode(token, options={"verify_signature": False})
        assert decoded["exp"] == decoded["iat"]

        with pytest.raises(TokenExpiredError):
            clocked_engine.parse(token)

    def test_mint_deduplicates_permissions(self, engine):
        """Test repeated permissions do not accumulate"""
        token = engine.mint(1, {"permissions": ["read", "write", "read"]})

        decoded = jwt.decode(token, options={"verify_signature": False})
        assert decoded["permissions"] == ["read", "write"]

    def test_mint_rejects_non_list_permissions(self, engine):
        """Test permissions must be a list of strings"""
        with pytest.raises(InvalidClaimsError):
            engine.mint(1, {"permissions": "admin"})

    def test_empty_secret_rejected(self):
        """Test the engine cannot be built without a secret"""
        with pytest.raises(ValueError):
            ClaimsTokenEngine(secret="")

    def test_repr_hides_secret(self, engine, secret):
        """Test the secret never shows up in repr"""
        assert secret not in repr(engine)


class TestMintRefresh:
    """Test cases for refresh tokens"""

    def test_default_ttl(self, clocked_engine):
        """Test refresh tokens default to 15 minutes"""
        parsed = clocked_engine.parse(clocked_engine.mint_refresh({}))
        claims = clocked_engine.get_claims(parsed)

        assert claims.exp - claims.iat == DEFAULT_REFRESH_TTL_MINUTES * 60

    def test_ttl_override(self, engine):
        """Test the provided TTL is used and reported by is_expiring_within"""
        parsed = engine.parse(engine.mint_refresh({}, 5))

        assert engine.is_expiring_within(parsed, 5) is True

    def test_negative_ttl_override(self, engine):
        """Test refresh tokens inherit TTL validation"""
        with pytest.raises(InvalidTTLError):
            engine.mint_refresh({}, -5)


class TestParse:
    """Test cases for parsing and verification"""

    @pytest.mark.parametrize("ttl", [0, 1, 5, 60, 1440])
    def test_exp_derived_from_iat(self, clock, secret, ttl):
        """Test exp equals iat plus ttl minutes"""
        minting = ClaimsTokenEngine(secret=secret, clock=clock)
        token = minting.mint(ttl, {"scope": "x"})

        # Parse a moment before iat so zero-TTL tokens are still valid
        clock.advance(-1)
        claims = minting.get_claims(minting.parse(token))

        assert claims.exp == claims.iat + ttl * 60
        assert claims.get("scope") == "x"

    def test_parse_valid_token(self, engine):
        """Test parsing a freshly minted token"""
        parsed = engine.parse(engine.mint(1, {"teste": "teste"}))

        assert parsed.algorithm == "HS256"
        assert engine.get_claims(parsed)["teste"] == "teste"

    @pytest.mark.parametrize(
        "custom_claims", [{"sub": 42}, {"jti": 7}, {"sub": {"tenant": "acme", "id": 1}}, {"nbf": 9999999999}]
    )
    def test_parse_non_string_standard_claims(self, engine, custom_claims):
        """Test any custom claims that mint accepts also parse"""
        parsed = engine.parse(engine.mint(5, custom_claims))

        claims = engine.get_claims(parsed)
        for key, value in custom_claims.items():
            assert claims[key] == value

    def test_parse_invalid_string(self, engine):
        """Test syntactically invalid input is malformed"""
        with pytest.raises(MalformedTokenError):
            engine.parse("invalidToken")

    @pytest.mark.parametrize("value", ["", "a.b.c", "...", None])
    def test_parse_garbage(self, engine, value):
        """Test assorted garbage is malformed"""
        with pytest.raises(MalformedTokenError):
            engine.parse(value)

    def test_parse_wrong_secret(self, engine, other_secret):
        """Test token signed with another secret"""
        other = ClaimsTokenEngine(secret=other_secret)

        with pytest.raises(SignatureInvalidError):
            engine.parse(other.mint(1))

    def test_parse_tampered_claims(self, engine):
        """Test changing claims invalidates the signature"""
        header, _, signature = engine.mint(1, {"role": "user"}).split(".")
        decoded = jwt.decode(engine.mint(1, {"role": "admin"}), options={"verify_signature": False})
        forged = f"{header}.{_b64(decoded)}.{signature}"

        with pytest.raises(SignatureInvalidError):
            engine.parse(forged)

    def test_parse_missing_signature(self, engine):
        """Test token with stripped signature"""
        header, payload, _ = engine.mint(1).split(".")

        with pytest.raises(SignatureInvalidError):
            engine.parse(f"{header}.{payload}.")

    def test_parse_rs256_token(self, engine, rsa_private_key):
        """Test token signed with RS256 is rejected"""
        token = jwt.encode({"sub": "audrey", "iat": 1676691225, "exp": 1676691825}, rsa_private_key, algorithm="RS256")

        with pytest.raises(UnsupportedAlgorithmError):
            engine.parse(token)

    def test_parse_alg_none(self, engine):
        """Test unsigned tokens are rejected before verification"""
        token = f"{_b64({'alg': 'none', 'typ': 'JWT'})}.{_b64({'exp': 9999999999, 'iat': 0})}."

        with pytest.raises(UnsupportedAlgorithmError):
            engine.parse(token)

    def test_parse_expired_token(self, clock, clocked_engine):
        """Test token parsed after its expiry"""
        token = clocked_engine.mint(1)
        clock.advance(61)

        with pytest.raises(TokenExpiredError):
            clocked_engine.parse(token)

    def test_parse_just_before_expiry(self, clock, clocked_engine):
        """Test token is valid up to its last second"""
        token = clocked_engine.mint(1)
        clock.advance(59)

        assert clocked_engine.parse(token).exp == clock.now + 1

    def test_parse_expired_with_leeway(self, clock, secret):
        """Test leeway extends acceptance past exp"""
        lenient = ClaimsTokenEngine(secret=secret, clock=clock, leeway_seconds=30)
        token = lenient.mint(1)
        clock.advance(75)

        assert lenient.parse(token) is not None

    def test_parse_checks_signature_before_expiry(self, clock, secret, other_secret):
        """Test an expired token from another secret reports the signature"""
        other = ClaimsTokenEngine(secret=other_secret, clock=clock)
        mine = ClaimsTokenEngine(secret=secret, clock=clock)
        token = other.mint(1)
        clock.advance(3600)

        with pytest.raises(SignatureInvalidError):
            mine.parse(token)

    def test_parse_missing_exp(self, engine, secret):
        """Test token without exp signed with the right secret"""
        token = jwt.encode({"iat": 1}, secret, algorithm="HS256")

        with pytest.raises(MalformedTokenError):
            engine.parse(token)

    def test_parse_non_list_permissions(self, engine, secret):
        """Test signed token carrying a scalar permissions claim"""
        token = jwt.encode(
            {"iat": 1, "exp": 9999999999, "permissions": "admin"}, secret, algorithm="HS256"
        )

        with pytest.raises(InvalidClaimsError):
            engine.parse(token)


class TestClaimsAccess:
    """Test cases for claim access and expiry queries"""

    def test_get_claims_is_a_copy(self, engine):
        """Test mutating returned claims leaves the parsed token untouched"""
        parsed = engine.parse(engine.mint(1, {"permissions": ["read"], "meta": {"a": 1}}))

        claims = engine.get_claims(parsed)
        claims.permissions.append("write")
        claims.extra["meta"]["a"] = 2
        claims.extra["new"] = "value"

        again = engine.get_claims(parsed)
        assert again.permissions == ["read"]
        assert again["meta"] == {"a": 1}
        assert "new" not in again

    def test_is_expiring_within(self, engine):
        """Test token minted for one minute is expiring within one minute"""
        parsed = engine.parse(engine.mint(1, {"teste": True}))

        assert engine.is_expiring_within(parsed, 1) is True

    def test_is_expiring_within_boundary(self, clock, clocked_engine):
        """Test the boundary is inclusive"""
        parsed = clocked_engine.parse(clocked_engine.mint(10))
        clock.advance(120)

        assert clocked_engine.is_expiring_within(parsed, 8) is True
        assert clocked_engine.is_expiring_within(parsed, 7.99) is False

    def test_is_expiring_within_fractional(self, clock, clocked_engine):
        """Test fractional minutes"""
        parsed = clocked_engine.parse(clocked_engine.mint(1))
        clock.advance(30)

        assert clocked_engine.is_expiring_within(parsed, 0.5) is True
        assert clocked_engine.is_expiring_within(parsed, 0.25) is False

    def test_seconds_until_expiry(self, clock, clocked_engine):
        """Test remaining lifetime"""
        parsed = clocked_engine.parse(clocked_engine.mint(2))
        clock.advance(20)

        assert clocked_engine.seconds_until_expiry(parsed) == 100


class TestReissue:
    """Test cases for re-minting edited claims"""

    def test_reissue_carries_edited_claims(self, clock, clocked_engine):
        """Test a reissued token carries edits and fresh timestamps"""
        parsed = clocked_engine.parse(clocked_engine.mint(5, {"sub": "user-1", "permissions": ["read"]}))
        claims = clocked_engine.get_claims(parsed)
        claims.permissions.append("write")
        clock.advance(60)

        reissued = clocked_engine.get_claims(clocked_engine.parse(clocked_engine.reissue(claims, 5)))

        assert reissued.permissions == ["read", "write"]
        assert reissued.subject == "user-1"
        assert reissued.iat == claims.iat + 60
        assert reissued.exp == reissued.iat + 300
        assert reissued.jti != claims.jti

    def test_reissue_without_ttl_keeps_exp(self, clock, clocked_engine):
        """Test a reissued token expires with the token it replaces"""
        parsed = clocked_engine.parse(clocked_engine.mint(5, {"permissions": ["read"]}))
        claims = clocked_engine.get_claims(parsed)
        claims.permissions.append("write")
        clock.advance(90)

        reissued = clocked_engine.get_claims(clocked_engine.parse(clocked_engine.reissue(claims)))

        assert reissued.exp == claims.exp
        assert reissued.iat == claims.iat + 90
        assert reissued.permissions == ["read", "write"]
        assert reissued.jti != claims.jti

    def test_original_token_unchanged(self, engine):
        """Test editing claims does not alter the original token"""
        token = engine.mint(5, {"permissions": ["read"]})
        claims = engine.get_claims(engine.parse(token))
        claims.permissions.append("write")

        assert engine.get_claims(engine.parse(token)).permissions == ["read"]
