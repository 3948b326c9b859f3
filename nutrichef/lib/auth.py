"""
Authentication utilities.
Uses Supabase Auth - the web app sends the user's access token.
"""

import logging
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from ..core.errors import Unauthenticated
from ..db import get_admin_client


logger = logging.getLogger(__name__)

# auto_error=False so a missing header is a 401, not FastAPI's 403
security = HTTPBearer(auto_error=False)


def authenticate(token: Optional[str], client=None) -> dict:
    """
    Resolve an access token to the Supabase user.

    Raises:
        Unauthenticated: Token missing, expired or unknown
    """
    if not token:
        raise Unauthenticated("Missing Authorization header")

    client = client or get_admin_client()

    try:
        response = client.auth.get_user(token)
    except Exception as e:
        logger.info(f"Token rejected by Supabase Auth: {e}")
        raise Unauthenticated("Not authenticated") from e

    if not response or not response.user:
        raise Unauthenticated("Not authenticated")

    return {
        "id": response.user.id,
        "email": response.user.email,
    }


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> dict:
    """Validate the bearer token and return the current user."""
    token = credentials.credentials if credentials else None

    try:
        return authenticate(token)
    except Unauthenticated as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )
