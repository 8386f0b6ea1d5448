"""FastAPI dependency — bearer-token session gate."""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from stocksence.application.services.auth_service import current_session
from stocksence.core.exceptions import UnauthorizedException
from stocksence.domain.models.user import User
from stocksence.infrastructure.database import get_db

security = HTTPBearer(auto_error=False)


def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> str:
    if credentials is None:
        raise UnauthorizedException("Sign in required")
    return credentials.credentials


def get_current_user(
    token: str = Depends(get_bearer_token),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the signed-in user or fail with 401."""
    user = current_session(db, token)
    if user is None:
        raise UnauthorizedException("Invalid or expired session")
    return user
