"""Shared dependencies for API routers."""

import logging
import secrets
from typing import AsyncGenerator, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.core.config import settings
from src.dashboard.client import XanoClient, XanoError

logger = logging.getLogger(__name__)

bearer = HTTPBearer(auto_error=False)


# --- Auth ---

def get_auth_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
) -> str:
    """User's Xano token, from the auth cookie or an ``Authorization: Bearer`` header."""
    token = request.cookies.get(settings.auth_cookie_name)
    if not token and credentials is not None:
        token = credentials.credentials
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return token


def verify_cron_secret(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
) -> None:
    """Guard for the warm trigger. No-op when CRON_SECRET is unset."""
    if not settings.cron_secret:
        return
    supplied = credentials.credentials if credentials is not None else ""
    if not secrets.compare_digest(supplied.encode("utf8"), settings.cron_secret.encode("utf8")):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")


# --- Upstream ---

async def get_xano_client(token: str = Depends(get_auth_token)) -> AsyncGenerator[XanoClient, None]:
    async with XanoClient(token=token) as client:
        yield client


def upstream_http_error(error: XanoError) -> HTTPException:
    """Map an upstream failure onto the status our API returns."""
    if error.is_auth_error:
        return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Upstream rejected credentials")
    if error.is_not_found:
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")
    logger.error(f"Upstream failure: {error}")
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=f"Upstream error ({error.status_code})")
