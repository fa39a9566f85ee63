import uuid
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping

import structlog

from bearer_auth.application.ports.credential_hasher import CredentialHasher
from bearer_auth.application.ports.token_engine import TokenEngine
from bearer_auth.application.services.session_registry import SessionRegistry
from bearer_auth.application.use_cases.base import ACCESS_TOKEN_USE, REFRESH_TOKEN_USE
from bearer_auth.domain.entities.session import Session
from bearer_auth.domain.errors import InvalidCredentialsError, InvalidTTLError
from bearer_auth.domain.responses import TokenPair

logger = structlog.get_logger(__name__)


class IssueTokensUseCase:
    """Use case for authenticating a principal and issuing an access/refresh token pair"""

    def __init__(
        self,
        token_engine: TokenEngine,
        credential_hasher: CredentialHasher,
        session_registry: SessionRegistry,
        access_token_ttl_minutes: int = 5,
        refresh_token_ttl_minutes: int = 15,
    ):
        if refresh_token_ttl_minutes <= 0:
            raise InvalidTTLError("refresh_token_ttl_minutes must be positive")

        self.token_engine = token_engine
        self.credential_hasher = credential_hasher
        self.session_registry = session_registry
        self.access_token_ttl_minutes = access_token_ttl_minutes
        self.refresh_token_ttl_minutes = refresh_token_ttl_minutes

    async def execute(
        self,
        subject: str,
        password: str,
        password_hash: str,
        permissions: Iterable[str] | None = None,
        custom_claims: Mapping[str, Any] | None = None,
        device: str | None = None,
    ) -> TokenPair:
        """
        Authenticate a principal and issue tokens bound to a new session

        Args:
            subject: Principal identifier, stored in the sub claim
            password: Plain text password presented by the principal
            password_hash: Stored hash loaded by the caller from its user store
            permissions: Initial permissions carried by both tokens
            custom_claims: Extra claims carried by both tokens
            device: Device label recorded on the session

        Returns:
            TokenPair for the new session

        Raises:
            InvalidCredentialsError: Missing subject or password mismatch
        """
        try:
            if not subject:
                raise InvalidCredentialsError("Subject is required")

            if not self.credential_hasher.verify(password, password_hash):
                raise InvalidCredentialsError()

            sid = str(uuid.uuid4())
            claims = dict(custom_claims or {})
            claims["sub"] = subject
            claims["sid"] = sid
            if permissions is not None:
                claims["permissions"] = list(permissions)

            access_token = self.token_engine.mint(
                self.access_token_ttl_minutes, {**claims, "token_use": ACCESS_TOKEN_USE}
            )
            refresh_token = self.token_engine.mint_refresh(
                {**claims, "token_use": REFRESH_TOKEN_USE}, self.refresh_token_ttl_minutes
            )

            session = Session(
                sid=sid,
                subject=subject,
                issued_at=datetime.now(timezone.utc),
                device=device or "default",
            )
            await self.session_registry.register_session(session, self.refresh_token_ttl_minutes)

            logger.info("Tokens issued", sub=subject, sid=sid)

            return TokenPair(
                access_token=access_token,
                refresh_token=refresh_token,
                session_id=sid,
                expires_in=self.access_token_ttl_minutes * 60,
                refresh_expires_in=self.refresh_token_ttl_minutes * 60,
            )

        except InvalidCredentialsError as e:
            logger.warning("Authentication failed", sub=subject, error=str(e))
            raise
        except Exception as e:
            logger.error("Token issuance failed", sub=subject, error=str(e))
            raise
