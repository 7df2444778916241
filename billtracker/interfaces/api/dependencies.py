"""FastAPI dependency utilities."""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer

from billtracker.infrastructure.notifications import SseConnectionRegistry
from billtracker.infrastructure.security import decode_access_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/users/login", auto_error=False)


@dataclass(frozen=True)
class AuthenticatedUser:
    """Identity carried by a token issued by the user service."""

    id: int
    username: str | None = None


def resolve_token(token: str | None) -> AuthenticatedUser:
    """Return the identity in ``token`` or raise the matching HTTP error."""

    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication token required.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        payload = decode_access_token(token)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid or expired token.",
        ) from exc

    user_id = payload.get("id")
    if isinstance(user_id, bool) or not isinstance(user_id, (int, str)):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid or expired token.",
        )
    try:
        user_id = int(user_id)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid or expired token.",
        ) from exc

    username = payload.get("username")
    return AuthenticatedUser(id=user_id, username=username if isinstance(username, str) else None)


def get_current_user(token: str | None = Depends(oauth2_scheme)) -> AuthenticatedUser:
    """Return the authenticated caller from the bearer header."""

    return resolve_token(token)


def get_sse_registry(request: Request) -> SseConnectionRegistry:
    """Return the stream registry owned by the running application."""

    return request.app.state.sse_registry


__all__ = [
    "AuthenticatedUser",
    "get_current_user",
    "get_sse_registry",
    "oauth2_scheme",
    "resolve_token",
]
