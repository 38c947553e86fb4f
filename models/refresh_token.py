"""
RefreshToken model: the per-user secret that signs refresh tokens.
Fields:
- user_id (Integer) - FK to users.id
- token (String(64)) - the signing secret itself, never sent to clients
- type - always "refresh_token"
- is_revoked (bool) - a revoked row is retired for good; the next issue creates a new one

A partial unique index allows at most one non-revoked row per user, so two
concurrent first logins cannot both insert an active secret.
"""
from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, Index, text
from sqlalchemy.orm import relationship
from models.base_model import BaseModel, Base

REFRESH_TOKEN_TYPE = "refresh_token"


class RefreshToken(BaseModel, Base):
    __tablename__ = "tokens"

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    token = Column(String(64), nullable=False, index=True)
    type = Column(String(32), nullable=False, default=REFRESH_TOKEN_TYPE, index=True)
    is_revoked = Column(Boolean, nullable=False, default=False, index=True)

    user = relationship("User", back_populates="refresh_tokens")

    __table_args__ = (
        Index(
            "uq_tokens_active_user",
            "user_id",
            unique=True,
            sqlite_where=text("is_revoked = 0"),
            postgresql_where=text("is_revoked = false"),
        ),
    )

    def __repr__(self):
        return f"<RefreshToken id={self.id} user_id={self.user_id} revoked={self.is_revoked}>"
