"""Persistence of user credentials with case-insensitive username uniqueness."""

import logging
import unicodedata
from typing import Protocol

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tokengate.models import User
from tokengate.services.exceptions import DuplicateUserError

logger = logging.getLogger(__name__)

DEFAULT_ROLE = "user"


def fold_username(username: str) -> str:
    """
    Return the comparison key for a username.

    Case and width are ignored, accents are kept: "Alice", "ALICE" and the
    fullwidth "Ａlice" fold together, "José" and "Jose" do not.
    """
    return unicodedata.normalize("NFKC", unicodedata.normalize("NFKC", username).casefold())


class CredentialStore(Protocol):
    def find_by_username(self, username: str) -> User | None: ...

    def create(
        self, username: str, password_hash: str, email: str, role: str = DEFAULT_ROLE
    ) -> User: ...


class SqlCredentialStore:
    """Credential store over a SQLAlchemy session (one per request)."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def find_by_username(self, username: str) -> User | None:
        key = fold_username(username)
        return self.session.query(User).filter(User.username == key).first()

    def get_by_id(self, user_id: int) -> User | None:
        return self.session.get(User, user_id)

    def create(
        self, username: str, password_hash: str, email: str, role: str = DEFAULT_ROLE
    ) -> User:
        """
        Insert and commit a new user.

        The unique index on the folded username rejects duplicates atomically,
        including a concurrent insert that raced past any earlier lookup.
        Raises DuplicateUserError in that case.
        """
        user = User(
            username=fold_username(username),
            password_hash=password_hash,
            email=email,
            role=role,
        )
        self.session.add(user)
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            logger.info("Duplicate username rejected by unique index: %s", user.username)
            raise DuplicateUserError() from e
        self.session.refresh(user)
        return user
