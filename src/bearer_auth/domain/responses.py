"""Use case response DTOs for bearer auth"""

from dataclasses import dataclass


@dataclass(frozen=True)
class TokenPair:
    """Access and refresh tokens issued for one session"""

    access_token: str
    refresh_token: str
    session_id: str
    expires_in: int  # seconds until the access token expires
    refresh_expires_in: int
    token_type: str = "Bearer"


@dataclass(frozen=True)
class LogoutResponse:
    """Response for logout"""

    success: bool
    message: str
    sessions_terminated: int = 0
