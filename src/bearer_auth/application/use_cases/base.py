import structlog

from bearer_auth.application.ports.token_engine import TokenEngine
from bearer_auth.application.services.session_registry import SessionRegistry
from bearer_auth.domain.entities.session import Session
from bearer_auth.domain.errors import TokenError, UnauthenticatedError
from bearer_auth.domain.value_objects.claims import Claims, ParsedToken

logger = structlog.get_logger(__name__)

ACCESS_TOKEN_USE = "access"
REFRESH_TOKEN_USE = "refresh"


class TokenCheckingUseCase:
    """Shared token checks for use cases that accept a presented token"""

    def __init__(self, token_engine: TokenEngine, session_registry: SessionRegistry):
        self.token_engine = token_engine
        self.session_registry = session_registry

    def _parse(self, token: str) -> tuple[ParsedToken, Claims]:
        """
        Parse a presented token.

        Every parse failure surfaces as the same UnauthenticatedError so the
        caller cannot learn which check failed; the reason is only logged.
        """
        try:
            parsed = self.token_engine.parse(token)
        except TokenError as e:
            logger.warning("Token rejected", reason=e.error_code.value if e.error_code else None)
            raise UnauthenticatedError() from None

        return parsed, self.token_engine.get_claims(parsed)

    async def _check_not_revoked(self, claims: Claims) -> None:
        if claims.jti and await self.session_registry.is_token_revoked(claims.jti):
            logger.warning("Revoked token presented", jti=claims.jti)
            raise UnauthenticatedError()

    async def _require_session(self, claims: Claims) -> Session:
        sid = claims.session_id
        session = await self.session_registry.get_session(sid) if sid else None
        if not session or session.subject != claims.subject:
            logger.warning("Token without active session presented", sid=sid, sub=claims.subject)
            raise UnauthenticatedError()
        return session

    @staticmethod
    def _require_use(claims: Claims, expected: str) -> None:
        token_use = claims.token_use or ACCESS_TOKEN_USE
        if token_use != expected:
            logger.warning("Token presented for the wrong use", token_use=token_use, expected=expected)
            raise UnauthenticatedError()
