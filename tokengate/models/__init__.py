"""SQLAlchemy ORM models."""

from tokengate.models.base import Base
from tokengate.models.revoked_token import RevokedToken
from tokengate.models.user import User

__all__ = ["Base", "RevokedToken", "User"]
