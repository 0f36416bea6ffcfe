"""
RefreshToken model: one row per login session.
Fields:
- token (primary key): 64 lowercase hex chars, the lookup key
- user_id (String(36)) - FK to users.id
- expires_at: issuance + REFRESH_TOKEN_EXPIRES
- revoked_at: set once on revoke, never cleared
- created_at, updated_at

A row is usable iff revoked_at IS NULL AND expires_at > now.
"""
from sqlalchemy import Column, String, DateTime, ForeignKey

from models.base_model import Base, utcnow


class RefreshToken(Base):
    __tablename__ = "refresh_tokens"

    token = Column(String(64), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    revoked_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    def __repr__(self):
        # never print the token value itself
        return f"<RefreshToken user_id={self.user_id} revoked={self.revoked_at is not None}>"
