"""Auth service — session gate: sign-up, sign-in, sign-out and session lookup.

Access tokens are JWTs whose ``jti`` names a row in ``auth_sessions``;
signing out revokes that row, so a token stops working before it expires.
"""

import re
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional

import structlog
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from stocksence.config import get_settings
from stocksence.core.exceptions import (
    DuplicateRegistrationException,
    UnauthorizedException,
    ValidationException,
)
from stocksence.domain.models.auth_session import AuthSession
from stocksence.domain.models.timestamps import as_utc, utcnow
from stocksence.domain.models.user import User
from stocksence.infrastructure.database import store_errors

settings = get_settings()
logger = structlog.get_logger(__name__)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 6

SIGNED_IN = "SIGNED_IN"
SIGNED_OUT = "SIGNED_OUT"
TOKEN_EXPIRED = "TOKEN_EXPIRED"


@dataclass(frozen=True)
class SessionChange:
    event: str
    user_id: Optional[str]


@dataclass(frozen=True)
class SignedIn:
    access_token: str
    expires_at: datetime
    user: User


SessionListener = Callable[[SessionChange], None]
_listeners: List[SessionListener] = []


def on_session_change(listener: SessionListener) -> Callable[[], None]:
    """Subscribe to sign-in/sign-out/expiry events. Returns an unsubscribe callable."""
    _listeners.append(listener)

    def unsubscribe() -> None:
        if listener in _listeners:
            _listeners.remove(listener)

    return unsubscribe


def _emit(event: str, user_id: Optional[str]) -> None:
    change = SessionChange(event, user_id)
    for listener in list(_listeners):
        try:
            listener(change)
        except Exception:
            logger.exception("Session listener failed", session_event=event)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.JWT_EXPIRATION_MINUTES)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str, verify_exp: bool = True) -> Optional[dict]:
    try:
        return jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
            options={"verify_exp": verify_exp},
        )
    except JWTError:
        return None


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email.strip().lower()).first()


def _validate_credentials(email: str, password: str) -> None:
    if not email.strip() or not password.strip():
        raise ValidationException("Please fill in all required fields")
    if not EMAIL_PATTERN.match(email.strip()):
        raise ValidationException("Please enter a valid email address")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationException(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
        )


def sign_up(db: Session, email: str, password: str, full_name: str) -> User:
    """Register credentials and provision the user's profile row."""
    _validate_credentials(email, password)
    if not full_name.strip():
        raise ValidationException("Please enter your full name")

    email = email.strip().lower()
    if get_user_by_email(db, email):
        raise DuplicateRegistrationException(details={"email": email})

    user = User(
        email=email,
        full_name=full_name.strip(),
        password_hash=hash_password(password),
    )
    with store_errors(db, "create the account"):
        try:
            db.add(user)
            db.commit()
        except IntegrityError as exc:
            # Lost a race with another sign-up for the same email
            db.rollback()
            raise DuplicateRegistrationException(details={"email": email}) from exc
        db.refresh(user)

    logger.info("User registered", user_id=user.id)
    return user


def sign_in(db: Session, email: str, password: str) -> SignedIn:
    if not email.strip() or not password:
        raise ValidationException("Please fill in all required fields")

    user = get_user_by_email(db, email)
    if not user or not verify_password(password, user.password_hash):
        logger.info("Sign-in rejected")
        raise UnauthorizedException("Invalid login credentials")

    expires_at = utcnow() + timedelta(minutes=settings.JWT_EXPIRATION_MINUTES)
    session = AuthSession(id=str(uuid.uuid4()), user_id=user.id, expires_at=expires_at)
    with store_errors(db, "sign in"):
        db.add(session)
        db.commit()

    token = create_access_token(
        {"sub": user.id, "jti": session.id},
        expires_delta=expires_at - utcnow(),
    )
    logger.info("User signed in", user_id=user.id)
    _emit(SIGNED_IN, user.id)
    return SignedIn(access_token=token, expires_at=expires_at, user=user)


def current_session(db: Session, token: str) -> Optional[User]:
    """The signed-in user for a token, or None if it is invalid, expired or revoked."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except ExpiredSignatureError:
        claims = decode_access_token(token, verify_exp=False) or {}
        _emit(TOKEN_EXPIRED, claims.get("sub"))
        return None
    except JWTError:
        return None

    session = db.get(AuthSession, payload.get("jti") or "")
    if session is None or session.is_revoked or session.user_id != payload.get("sub"):
        return None
    if as_utc(session.expires_at) <= utcnow():
        _emit(TOKEN_EXPIRED, session.user_id)
        return None
    return db.get(User, session.user_id)


def sign_out(db: Session, token: str) -> None:
    """Revoke the token's session. Unknown or already revoked tokens are a no-op."""
    claims = decode_access_token(token, verify_exp=False)
    if not claims:
        return
    session = db.get(AuthSession, claims.get("jti") or "")
    if session is None or session.is_revoked:
        return

    with store_errors(db, "sign out"):
        session.revoked_at = utcnow()
        db.commit()

    logger.info("User signed out", user_id=session.user_id)
    _emit(SIGNED_OUT, session.user_id)


def require_session(user: Optional[User]) -> User:
    """Gate for every write operation."""
    if user is None:
        raise UnauthorizedException("Sign in required")
    return user
