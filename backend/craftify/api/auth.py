"""Bearer-token guard for the catalog endpoints."""
from __future__ import annotations
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt

from craftify.core import config

_bearer = HTTPBearer(auto_error=False)

ANONYMOUS = {"sub": "anonymous", "scope": ""}


# ------------------------------------------------------------------
# JWT helpers
# ------------------------------------------------------------------
def _decode_token(token: str) -> dict:
    try:
        return jwt.decode(
            token,
            config.JWT_SECRET_KEY,
            algorithms=[config.JWT_ALGORITHM],
            issuer=config.JWT_ISSUER or None,
            options={"verify_aud": False},
        )
    except JWTError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid token: {e}",
            headers={"WWW-Authenticate": "Bearer"},
        )


# ------------------------------------------------------------------
# Dependency: resolve the calling principal
# ------------------------------------------------------------------
def require_principal(credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer)) -> dict:
    if config.SECURITY_DISABLED:
        return ANONYMOUS
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return _decode_token(credentials.credentials)
