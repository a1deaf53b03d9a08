"""Bearer-token authentication for back-office routes.

Tokens are HS256 JWTs carrying the user's ``id``; the user must still
exist, be active and hold a store-managing role when the token is used.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt
from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from backoffice.domain.model.user import User
from backoffice.infrastructure.config import Settings

security = HTTPBearer(auto_error=False)


def create_token(user: User, settings: Settings, now: datetime | None = None) -> str:
    now = now or datetime.now(timezone.utc)
    payload = {
        "id": user.id,
        "email": user.email,
        "role": user.role.value,
        "iat": now,
        "exp": now + timedelta(days=settings.jwt_ttl_days),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str, settings: Settings) -> dict:
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid token")


def require_admin(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> User:
    if credentials is None:
        raise HTTPException(status_code=401, detail="Not authorized, no token")

    payload = decode_token(credentials.credentials, request.app.state.settings)
    user_id = payload.get("id")
    if not user_id:
        raise HTTPException(status_code=401, detail="Invalid token payload")

    user = request.app.state.repositories.users.get_by_id(user_id)
    if user is None:
        raise HTTPException(status_code=401, detail="User not found")
    if not user.can_manage_store:
        raise HTTPException(status_code=403, detail="Admin access required")
    return user
