import secrets

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from skycast.config.config import config

security = HTTPBearer(auto_error=False)


async def verify_token(credentials: HTTPAuthorizationCredentials = Depends(security)):
    """
    Check the Bearer token on /api/v1 routes when SKYCAST_API_TOKEN is set.

    The relay never goes through this dependency: browsers call it with the
    Weatherstack key and nothing else.

    Returns:
        True if the token matches or no token is configured

    Raises:
        HTTPException: 401 if the token is missing or wrong
    """
    if not config.api_token:
        return True

    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required. Please provide a valid Bearer token.",
        )

    if not secrets.compare_digest(credentials.credentials, config.api_token):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid authentication token.")

    return True
