"""ORM model for revoked access tokens."""

from sqlalchemy import Column, DateTime, String, func

from tokengate.models.base import Base


class RevokedToken(Base):
    """
    A token invalidated at logout, keyed by the SHA-256 hex digest of the raw token.

    expires_at is the token's own exp; once it passes the row can be pruned.
    """

    __tablename__ = "revoked_tokens"

    token_hash = Column(String(64), primary_key=True)
    expires_at = Column(DateTime(timezone=True), nullable=True, index=True)
    revoked_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
