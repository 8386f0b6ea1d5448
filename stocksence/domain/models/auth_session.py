"""Issued access tokens — lets sign-out revoke a token before it expires."""

from sqlalchemy import Column, String, DateTime

from stocksence.domain.models.timestamps import utcnow
from stocksence.infrastructure.database import Base


class AuthSession(Base):
    __tablename__ = "auth_sessions"

    id = Column(String(36), primary_key=True)  # token "jti"
    user_id = Column(String(36), nullable=False, index=True)
    created_at = Column("createdAt", DateTime(timezone=True), default=utcnow)
    expires_at = Column("expiresAt", DateTime(timezone=True), nullable=False)
    revoked_at = Column("revokedAt", DateTime(timezone=True), nullable=True)

    @property
    def is_revoked(self) -> bool:
        return self.revoked_at is not None

    def __repr__(self):
        return f"<AuthSession {self.id} user={self.user_id}>"
