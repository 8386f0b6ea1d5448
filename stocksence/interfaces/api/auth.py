"""Auth API routes — register, login, logout, me."""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from stocksence.application.services.auth_service import sign_in, sign_out, sign_up
from stocksence.domain.models.user import User
from stocksence.domain.schemas.auth import LoginRequest, TokenResponse, UserCreate, UserRead
from stocksence.infrastructure.database import get_db
from stocksence.interfaces.api.deps import get_bearer_token, get_current_user

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def register(body: UserCreate, db: Session = Depends(get_db)):
    user = sign_up(db, email=body.email, password=body.password, full_name=body.full_name)
    return UserRead.model_validate(user)


@router.post("/login", response_model=TokenResponse)
def login(body: LoginRequest, db: Session = Depends(get_db)):
    result = sign_in(db, body.email, body.password)
    return TokenResponse(
        access_token=result.access_token,
        expires_at=result.expires_at,
        user=UserRead.model_validate(result.user),
    )


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(token: str = Depends(get_bearer_token), db: Session = Depends(get_db)):
    sign_out(db, token)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/me", response_model=UserRead)
def get_me(user: User = Depends(get_current_user)):
    return UserRead.model_validate(user)
