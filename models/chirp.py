from sqlalchemy import Column, String, ForeignKey, CheckConstraint, Index
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base

MAX_CHIRP_LENGTH = 140


class Chirp(BaseModel, Base):
    __tablename__ = "chirps"

    # Stored already cleaned by utils.profanity
    body = Column(String(MAX_CHIRP_LENGTH), nullable=False)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    user = relationship("User", back_populates="chirps")

    __table_args__ = (
        CheckConstraint(f"length(body) <= {MAX_CHIRP_LENGTH}", name="ck_chirps_body_length"),
        Index("ix_chirps_created_at", "created_at"),
    )
