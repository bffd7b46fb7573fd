"""FastAPI dependency injection: bearer-token auth."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from asset_files.config import settings
from asset_files.services import get_token_store
from asset_files.services.auth_gate import InvalidCredentialError, MissingCredentialError, authorize
from asset_files.services.token_store import TokenStore

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


async def require_identity(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    tokens: TokenStore = Depends(get_token_store),
) -> Optional[str]:
    """Run the auth gate; the resolved name lands on ``request.state.identity``."""
    token = credentials.credentials if credentials else None
    try:
        identity = authorize(tokens, request.method, token, public_reads=settings.public_reads)
    except MissingCredentialError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No authentication token provided",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except InvalidCredentialError as exc:
        logger.info("Rejected %s %s: %s", request.method, request.url.path, exc)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    request.state.identity = identity
    return identity
