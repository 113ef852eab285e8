"""Authentication dependencies for FastAPI."""

import hmac
import logging
from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from academy.core.config import get_settings
from academy.core.schemas_participants import Participant
from academy.db.participants import get_participant_by_email

logger = logging.getLogger(__name__)

# HTTP Bearer scheme for Authorization header
security = HTTPBearer(auto_error=False)


class AuthContext:
    """Context object containing the authenticated user and participant row."""

    def __init__(self, user_id: str, email: str, token: str, participant: Optional[Participant]):
        self.user_id = user_id
        self.email = email
        self.token = token
        self.participant = participant

    @property
    def is_admin(self) -> bool:
        return bool(self.participant and self.participant.is_admin)

    @property
    def participant_id(self) -> Optional[str]:
        return self.participant.id if self.participant else None

    @property
    def task_force(self) -> Optional[str]:
        return self.participant.task_force if self.participant else None


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[AuthContext]:
    """
    Resolve the Supabase user behind a Bearer token.

    Returns None if no valid auth is present (for optional auth endpoints).
    """
    if not credentials:
        return None

    token = credentials.credentials

    try:
        from academy.db.supabase_client import get_supabase

        client = get_supabase()

        # Validates the JWT signature and expiration
        auth_response = client.auth.get_user(token)
        if not auth_response or not auth_response.user:
            return None

        email = (auth_response.user.email or "").lower()
        participant = get_participant_by_email(email) if email else None

        return AuthContext(
            user_id=auth_response.user.id,
            email=email,
            token=token,
            participant=participant,
        )

    except Exception as e:
        logger.warning(f"Auth error: {e}")
        return None


async def require_auth(
    auth: Optional[AuthContext] = Depends(get_current_user),
) -> AuthContext:
    """Require authentication. Raises 401 if not authenticated."""
    if not auth:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return auth


async def require_participant(
    auth: AuthContext = Depends(require_auth),
) -> AuthContext:
    """Require an onboarded participant behind the auth user."""
    if not auth.participant:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Participant profile required",
        )
    return auth


async def require_admin(
    auth: AuthContext = Depends(require_participant),
) -> AuthContext:
    """Require an instructor/admin participant."""
    if not auth.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Instructor access required",
        )
    return auth


async def optional_auth(
    auth: Optional[AuthContext] = Depends(get_current_user),
) -> Optional[AuthContext]:
    """Optional authentication - returns None if not authenticated."""
    return auth


async def verify_cron_secret(
    authorization: Optional[str] = Header(None),
) -> None:
    """
    Check the shared cron secret.

    Open when CRON_SECRET is unset, matching local development setups.
    """
    secret = get_settings().CRON_SECRET
    if not secret:
        return

    expected = f"Bearer {secret}"
    if not authorization or not hmac.compare_digest(authorization.encode(), expected.encode()):
        logger.warning("Rejected cron request with invalid secret")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )
