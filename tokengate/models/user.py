"""ORM model for registered users."""

from sqlalchemy import Column, DateTime, Integer, String, func

from tokengate.models.base import Base


class User(Base):
    """
    Registered account.

    username holds the folded form (see fold_username); the unique index on it
    is what makes registration case-insensitive and race-free.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    email = Column(String(320), nullable=False)
    role = Column(String(32), nullable=False, default="user", server_default="user")
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
