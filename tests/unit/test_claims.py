# Assumptions:
# - Using pytest for testing framework
# - Testing the Claims value object independently of signing

from datetime import datetime, timezone

import pytest

from bearer_auth.domain.errors import ErrorCode, InvalidClaimsError, MalformedTokenError
from bearer_auth.domain.value_objects.claims import Claims, normalize_permissions


class TestClaimsFromDict:
    """Test cases for building claims from a decoded payload"""

    def test_reserved_and_extra_claims(self):
        """Test reserved claims are typed and the rest kept as extra"""
        claims = Claims.from_dict(
            {
                "exp": 1_700_000_060,
                "iat": 1_700_000_000,
                "iss": "issuer",
                "permissions": ["read"],
                "sub": "user-1",
                "sid": "session-1",
                "jti": "token-1",
                "token_use": "access",
            }
        )

        assert claims.exp == 1_700_000_060
        assert claims.iss == "issuer"
        assert claims.permissions == ["read"]
        assert claims.subject == "user-1"
        assert claims.session_id == "session-1"
        assert claims.jti == "token-1"
        assert claims.token_use == "access"
        assert "permissions" not in claims.extra

    def test_absent_permissions_stays_none(self):
        """Test absence and emptiness are kept apart"""
        assert Claims.from_dict({"exp": 2, "iat": 1}).permissions is None
        assert Claims.from_dict({"exp": 2, "iat": 1, "permissions": []}).permissions == []

    @pytest.mark.parametrize("payload", [{"iat": 1}, {"exp": 1}, {"exp": "soon", "iat": 1}, {"exp": True, "iat": 1}])
    def test_bad_timestamps(self, payload):
        """Test missing or non-numeric exp and iat"""
        with pytest.raises(MalformedTokenError):
            Claims.from_dict(payload)

    def test_extra_is_deep_copied(self):
        """Test nested values are detached from the payload"""
        payload = {"exp": 2, "iat": 1, "meta": {"a": [1]}}

        claims = Claims.from_dict(payload)
        payload["meta"]["a"].append(2)

        assert claims["meta"] == {"a": [1]}


class TestClaimsAccess:
    """Test cases for reading claims"""

    def test_round_trip_to_dict(self):
        """Test to_dict includes typed and extra claims"""
        claims = Claims(exp=2, iat=1, iss="issuer", permissions=["read"], extra={"sub": "user-1"})

        assert claims.to_dict() == {"exp": 2, "iat": 1, "iss": "issuer", "permissions": ["read"], "sub": "user-1"}

    def test_to_dict_omits_absent_optional_claims(self):
        """Test iss and permissions are left out when absent"""
        assert Claims(exp=2, iat=1).to_dict() == {"exp": 2, "iat": 1}

    def test_item_access(self):
        """Test mapping style access"""
        claims = Claims(exp=2, iat=1, extra={"teste": True})

        assert claims["teste"] is True
        assert claims["exp"] == 2
        assert "teste" in claims
        assert claims.get("missing", "default") == "default"
        with pytest.raises(KeyError):
            claims["missing"]

    def test_datetime_properties(self):
        """Test exp and iat as aware datetimes"""
        claims = Claims(exp=60, iat=0)

        assert claims.issued_at == datetime(1970, 1, 1, tzinfo=timezone.utc)
        assert claims.expires_at == datetime(1970, 1, 1, 0, 1, tzinfo=timezone.utc)


class TestNormalizePermissions:
    """Test cases for permission claim validation"""

    def test_keeps_first_seen_order(self):
        """Test duplicates collapse in order"""
        assert normalize_permissions(("b", "a", "b")) == ["b", "a"]

    @pytest.mark.parametrize("value", ["admin", {"admin": True}, None, ["read", 1]])
    def test_rejects_non_string_lists(self, value):
        """Test anything but a list of strings is rejected"""
        with pytest.raises(InvalidClaimsError) as exc_info:
            normalize_permissions(value)

        assert exc_info.value.error_code == ErrorCode.MALFORMED_TOKEN
