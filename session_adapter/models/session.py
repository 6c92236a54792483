"""Session model for user authentication."""

from sqlalchemy import Column, String, ForeignKey
from sqlalchemy.orm import relationship

from session_adapter.database import Base
from session_adapter.models.types import UTCDateTime


class Session(Base):
    """Server-side login session, valid while expires_at is in the future."""

    __tablename__ = "sessions"

    id = Column(String(255), primary_key=True)
    user_id = Column(
        String(255),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    expires_at = Column(UTCDateTime(), nullable=False, index=True)
    user_agent = Column(String(512), nullable=True)
    ip_address = Column(String(45), nullable=True)

    # Relationships
    user = relationship("User", back_populates="sessions")
