import math

import structlog

from bearer_auth.application.ports.token_engine import TokenEngine
from bearer_auth.application.services.session_registry import SessionRegistry
from bearer_auth.application.use_cases.base import ACCESS_TOKEN_USE, REFRESH_TOKEN_USE, TokenCheckingUseCase
from bearer_auth.domain.responses import TokenPair

logger = structlog.get_logger(__name__)


class RefreshTokensUseCase(TokenCheckingUseCase):
    """Use case for minting a new access token from a refresh token"""

    def __init__(
        self,
        token_engine: TokenEngine,
        session_registry: SessionRegistry,
        access_token_ttl_minutes: int = 5,
    ):
        super().__init__(token_engine, session_registry)
        self.access_token_ttl_minutes = access_token_ttl_minutes

    async def execute(self, refresh_token: str) -> TokenPair:
        """
        Refresh the access token of a session

        Args:
            refresh_token: Refresh token issued with the session

        Returns:
            TokenPair with a new access token and the same refresh token

        Raises:
            UnauthenticatedError: Refresh token unusable or session gone
        """
        parsed, claims = self._parse(refresh_token)
        self._require_use(claims, REFRESH_TOKEN_USE)
        await self._check_not_revoked(claims)
        session = await self._require_session(claims)

        claims.extra["token_use"] = ACCESS_TOKEN_USE
        access_token = self.token_engine.reissue(claims, self.access_token_ttl_minutes)

        # Keep the whitelist entry from outliving the refresh token
        remaining_seconds = self.token_engine.seconds_until_expiry(parsed)
        await self.session_registry.touch_session(session, max(1, math.ceil(remaining_seconds / 60)))

        logger.info("Access token refreshed", sub=claims.subject, sid=session.sid)

        return TokenPair(
            access_token=access_token,
            refresh_token=refresh_token,
            session_id=session.sid,
            expires_in=self.access_token_ttl_minutes * 60,
            refresh_expires_in=max(0, int(remaining_seconds)),
        )
