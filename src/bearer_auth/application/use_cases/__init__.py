"""Session flows built on the token engine and the revocation store."""

from .authorize_token import AuthorizeTokenUseCase
from .issue_tokens import IssueTokensUseCase
from .refresh_tokens import RefreshTokensUseCase
from .revoke_tokens import RevokeTokensUseCase
from .update_permissions import UpdatePermissionsUseCase

__all__ = [
    "IssueTokensUseCase",
    "AuthorizeTokenUseCase",
    "RefreshTokensUseCase",
    "RevokeTokensUseCase",
    "UpdatePermissionsUseCase",
]
