"""Authentication helpers and FastAPI security dependencies.

This module provides utilities to decode JWT tokens, a FastAPI
dependency `get_current_user` that validates the bearer token and
returns the corresponding `User` model instance from the database, and
`require_admin` for endpoints that modify institution records.

Token verification raises HTTPExceptions on failure so these can be
used directly inside route dependencies.
"""

from fastapi import Depends, HTTPException, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
import jwt
from sqlmodel import Session
from typing import Optional
from .config import settings
from .database import get_session
from . import models, repositories

# missing credentials are reported as 401 by `get_current_user`
bearer_scheme = HTTPBearer(auto_error=False)


def decode_token(token: str):
    """Decode and verify a JWT token.

    Returns the decoded payload on success or raises an HTTPException
    with status 401 on failure.
    """
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail='token expired')
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail='invalid token')


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme),
    db: Session = Depends(get_session),
) -> models.User:
    """FastAPI dependency that returns the authenticated user.

    The function extracts the bearer token from the request, decodes it
    and performs a database lookup to return the `User` object. It raises
    an HTTPException(401) for any authentication issue, including a
    missing token or a disabled account.
    """
    if credentials is None:
        raise HTTPException(status_code=401, detail='not authenticated',
                            headers={'WWW-Authenticate': 'Bearer'})
    payload = decode_token(credentials.credentials)
    user_id = payload.get('user_id')
    if not user_id:
        raise HTTPException(status_code=401, detail='invalid token payload')
    user = repositories.UserRepository(db).get(user_id)
    if not user:
        raise HTTPException(status_code=401, detail='user not found')
    if user.status != models.UserStatus.enabled:
        raise HTTPException(status_code=401, detail='account disabled')
    return user


def require_admin(user: models.User = Depends(get_current_user)) -> models.User:
    """Reject authenticated users that are not administrators (403)."""
    if user.role != 'admin':
        raise HTTPException(status_code=403, detail='admin role required')
    return user
