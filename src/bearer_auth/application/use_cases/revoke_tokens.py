import structlog

from bearer_auth.application.use_cases.base import TokenCheckingUseCase
from bearer_auth.domain.responses import LogoutResponse

logger = structlog.get_logger(__name__)


class RevokeTokensUseCase(TokenCheckingUseCase):
    """Use case for revoking tokens and logging sessions out"""

    async def revoke_token(self, token: str) -> bool:
        """Blacklist a single token until its natural expiry"""
        parsed, claims = self._parse(token)
        if not claims.jti:
            logger.warning("Token without jti cannot be revoked individually", sub=claims.subject)
            return False

        return await self.session_registry.revoke_token(
            claims.jti, self.token_engine.seconds_until_expiry(parsed)
        )

    async def logout(self, token: str) -> LogoutResponse:
        """
        Logout the session a token belongs to

        Args:
            token: Access or refresh token of the session

        Returns:
            LogoutResponse with the number of sessions terminated
        """
        try:
            parsed, claims = self._parse(token)
            logger.info("Logging out session", sid=claims.session_id, sub=claims.subject)

            sessions_terminated = 0
            if claims.session_id and await self.session_registry.remove_session(claims.session_id):
                sessions_terminated = 1
            else:
                logger.warning("Session not found for logout", sid=claims.session_id)

            if claims.jti:
                await self.session_registry.revoke_token(claims.jti, self.token_engine.seconds_until_expiry(parsed))

            return LogoutResponse(
                success=True, message="Logged out successfully", sessions_terminated=sessions_terminated
            )

        except Exception as e:
            logger.error("Logout failed", error=str(e))
            raise

    async def logout_all(self, subject: str) -> LogoutResponse:
        """Logout every session of a subject"""
        try:
            count = await self.session_registry.remove_all_sessions(subject)
            return LogoutResponse(success=True, message="Logged out from all sessions", sessions_terminated=count)

        except Exception as e:
            logger.error("Global logout failed", sub=subject, error=str(e))
            raise
