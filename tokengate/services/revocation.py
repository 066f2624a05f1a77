"""Revocation registry: tokens invalidated at logout, checked on every protected request."""

import hashlib
import logging
import threading
from datetime import UTC, datetime
from typing import Protocol

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from tokengate.core.database import check_table_reachable
from tokengate.models import RevokedToken

logger = logging.getLogger(__name__)


def token_key(token: str) -> str:
    """SHA-256 hex digest of the raw token; raw bearer tokens are never stored."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def _as_utc(value: datetime) -> datetime:
    # SQLite returns naive datetimes even for timezone-aware columns.
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class RevocationRegistry(Protocol):
    def contains(self, token: str) -> bool: ...

    def add(self, token: str, expires_at: datetime | None = None) -> None: ...

    def prune(self, now: datetime | None = None) -> int: ...

    def ping(self) -> bool: ...


class InMemoryRevocationRegistry:
    """Process-local registry guarded by a lock. Lost on restart."""

    def __init__(self) -> None:
        self._entries: dict[str, datetime | None] = {}
        self._lock = threading.Lock()

    def contains(self, token: str) -> bool:
        key = token_key(token)
        with self._lock:
            return key in self._entries

    def add(self, token: str, expires_at: datetime | None = None) -> None:
        key = token_key(token)
        with self._lock:
            self._entries[key] = _as_utc(expires_at) if expires_at else None

    def prune(self, now: datetime | None = None) -> int:
        """Drop entries whose token has expired. Returns the number removed."""
        cutoff = now or datetime.now(UTC)
        with self._lock:
            expired = [
                k for k, exp in self._entries.items() if exp is not None and exp <= cutoff
            ]
            for k in expired:
                del self._entries[k]
        return len(expired)

    def ping(self) -> bool:
        return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class DatabaseRevocationRegistry:
    """
    Registry persisted in the revoked_tokens table.

    Each call opens its own short-lived session and commits before returning,
    so a token added by one request is visible to every later check.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def contains(self, token: str) -> bool:
        key = token_key(token)
        with self._session_factory() as session:
            return session.get(RevokedToken, key) is not None

    def add(self, token: str, expires_at: datetime | None = None) -> None:
        key = token_key(token)
        with self._session_factory() as session:
            session.add(RevokedToken(token_hash=key, expires_at=expires_at))
            try:
                session.commit()
            except IntegrityError:
                # Concurrent logout with the same token already inserted the row.
                session.rollback()
                logger.debug("Token already revoked: %s", key[:12])

    def prune(self, now: datetime | None = None) -> int:
        """Delete rows whose token has expired. Idempotent: safe to run repeatedly."""
        cutoff = now or datetime.now(UTC)
        with self._session_factory() as session:
            deleted = (
                session.query(RevokedToken)
                .filter(RevokedToken.expires_at.is_not(None))
                .filter(RevokedToken.expires_at <= cutoff)
                .delete(synchronize_session=False)
            )
            session.commit()
        if deleted > 0:
            logger.info(
                "Revocation prune: cutoff=%s, entries_deleted=%s",
                cutoff.isoformat(),
                deleted,
            )
        return deleted

    def ping(self) -> bool:
        """True when the revoked_tokens table can be read."""
        with self._session_factory() as session:
            return check_table_reachable(session, RevokedToken)
