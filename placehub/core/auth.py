"""
Authentication Utility - JWT verification for the moderation queue.

The anonymous Q&A itself has no login. Admin tokens are issued by the main
PlaceHub backend (HS256, shared secret); this service only verifies them.

Provides:
- JWT token creation (scripts and tests) / verification
- FastAPI dependency for admin-only routes
"""

from datetime import datetime, timedelta
from typing import Optional
from jose import JWTError, jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from placehub.core.config import get_settings

settings = get_settings()

# Bearer token extractor (auto_error=False so a missing header is a 401, not 403)
bearer_scheme = HTTPBearer(auto_error=False)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token."""
    to_encode = data.copy()
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Optional[dict]:
    """Decode and verify JWT token."""
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


async def get_current_user(credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)) -> dict:
    """
    FastAPI dependency - Get current authenticated user from the token claims.

    The main backend puts the user id in "userId" (or "id", or "sub").
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired token",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if credentials is None:
        raise credentials_exception

    payload = decode_token(credentials.credentials)
    if not payload:
        raise credentials_exception

    user_id = payload.get("userId") or payload.get("id") or payload.get("sub")
    if not user_id:
        raise credentials_exception

    return {"user_id": str(user_id), "role": payload.get("role")}


async def get_current_admin(user: dict = Depends(get_current_user)) -> dict:
    """Dependency - Require admin role."""
    if user["role"] != "admin":
        raise HTTPException(status_code=403, detail="Admin access required")
    return user
