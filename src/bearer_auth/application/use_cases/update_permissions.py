from typing import Iterable

import structlog

from bearer_auth.application.use_cases.base import ACCESS_TOKEN_USE, TokenCheckingUseCase
from bearer_auth.domain.services.permission_service import PermissionService

logger = structlog.get_logger(__name__)


class UpdatePermissionsUseCase(TokenCheckingUseCase):
    """
    Use case for changing the permissions of an access token.

    A signed token cannot change, so the claims are edited, a new token is
    minted with the same exp and the old token is revoked.
    """

    async def execute(self, token: str, grant: Iterable[str] = (), revoke: Iterable[str] = ()) -> str:
        """
        Re-mint an access token with updated permissions

        Args:
            token: Current access token
            grant: Permissions to add
            revoke: Permissions to remove

        Returns:
            Newly minted access token; the old one is revoked
        """
        parsed, claims = self._parse(token)
        self._require_use(claims, ACCESS_TOKEN_USE)
        await self._check_not_revoked(claims)
        await self._require_session(claims)

        for name in grant:
            PermissionService.grant(claims, name)
        for name in revoke:
            PermissionService.revoke(claims, name)

        remaining_seconds = self.token_engine.seconds_until_expiry(parsed)
        # The replacement keeps the exp of the old token
        new_token = self.token_engine.reissue(claims)

        if claims.jti:
            await self.session_registry.revoke_token(claims.jti, remaining_seconds)

        logger.info(
            "Token permissions updated",
            sub=claims.subject,
            old_jti=claims.jti,
            permissions=PermissionService.list_permissions(claims),
        )
        return new_token
