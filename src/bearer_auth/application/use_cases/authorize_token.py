from typing import Iterable

import structlog

from bearer_auth.application.ports.token_engine import TokenEngine
from bearer_auth.application.services.session_registry import SessionRegistry
from bearer_auth.application.use_cases.base import ACCESS_TOKEN_USE, TokenCheckingUseCase
from bearer_auth.domain.errors import InsufficientPermissionsError
from bearer_auth.domain.services.permission_service import PermissionService
from bearer_auth.domain.value_objects.claims import Claims

logger = structlog.get_logger(__name__)


class AuthorizeTokenUseCase(TokenCheckingUseCase):
    """Use case for trusting a presented access token and checking its permissions"""

    def __init__(self, token_engine: TokenEngine, session_registry: SessionRegistry, require_session: bool = True):
        super().__init__(token_engine, session_registry)
        self.require_session = require_session

    async def execute(self, token: str, required_permissions: Iterable[str] = ()) -> Claims:
        """
        Authorize a bearer token

        Args:
            token: Raw token (without Bearer)
            required_permissions: Permissions the token must all carry

        Returns:
            Copy of the token claims

        Raises:
            UnauthenticatedError: Token unusable for any reason
            InsufficientPermissionsError: Token lacks a required permission
            StoreUnavailableError: Revocation state could not be checked
        """
        _, claims = self._parse(token)
        self._require_use(claims, ACCESS_TOKEN_USE)

        await self._check_not_revoked(claims)
        if self.require_session:
            await self._require_session(claims)

        missing = [name for name in required_permissions if not PermissionService.has_permission(claims, name)]
        if missing:
            logger.warning("Permission check failed", sub=claims.subject, missing=missing)
            raise InsufficientPermissionsError(details={"missing": missing})

        logger.debug("Token authorized", sub=claims.subject, jti=claims.jti)
        return claims
