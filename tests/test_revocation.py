"""Tests for tokengate.services.revocation: in-memory and database-backed registries."""

import threading
import unittest
from datetime import UTC, datetime, timedelta

from tokengate.core.config import Settings
from tokengate.core.database import build_engine, build_session_factory
from tokengate.models import Base, RevokedToken
from tokengate.services.revocation import (
    DatabaseRevocationRegistry,
    InMemoryRevocationRegistry,
    token_key,
)


class TestTokenKey(unittest.TestCase):
    def test_key_is_sha256_hex(self) -> None:
        key = token_key("abc")
        self.assertEqual(len(key), 64)
        self.assertEqual(key, token_key("abc"))
        self.assertNotEqual(key, token_key("abd"))


class TestInMemoryRevocationRegistry(unittest.TestCase):
    """Entries stay until pruned after their expiry."""

    def test_add_then_contains(self) -> None:
        registry = InMemoryRevocationRegistry()
        self.assertFalse(registry.contains("token-a"))
        registry.add("token-a")
        self.assertTrue(registry.contains("token-a"))
        self.assertFalse(registry.contains("token-b"))

    def test_add_is_idempotent(self) -> None:
        registry = InMemoryRevocationRegistry()
        registry.add("token-a")
        registry.add("token-a")
        self.assertEqual(len(registry), 1)

    def test_prune_drops_only_expired_entries(self) -> None:
        registry = InMemoryRevocationRegistry()
        now = datetime.now(UTC)
        registry.add("expired", expires_at=now - timedelta(minutes=1))
        registry.add("live", expires_at=now + timedelta(minutes=30))
        registry.add("no-expiry")
        self.assertEqual(registry.prune(now), 1)
        self.assertFalse(registry.contains("expired"))
        self.assertTrue(registry.contains("live"))
        self.assertTrue(registry.contains("no-expiry"))

    def test_concurrent_adds_are_all_visible(self) -> None:
        registry = InMemoryRevocationRegistry()
        tokens = [f"token-{i}" for i in range(200)]

        def worker(chunk: list[str]) -> None:
            for t in chunk:
                registry.add(t)

        threads = [threading.Thread(target=worker, args=(tokens[i::8],)) for i in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        self.assertEqual(len(registry), 200)
        self.assertTrue(all(registry.contains(t) for t in tokens))


class TestDatabaseRevocationRegistry(unittest.TestCase):
    """Rows in revoked_tokens; raw tokens are never stored."""

    def setUp(self) -> None:
        settings = Settings(_env_file=None, DATABASE_URL="sqlite://")
        self.engine = build_engine(settings)
        Base.metadata.create_all(self.engine)
        self.session_factory = build_session_factory(self.engine)
        self.registry = DatabaseRevocationRegistry(self.session_factory)

    def tearDown(self) -> None:
        self.engine.dispose()

    def test_add_then_contains(self) -> None:
        self.assertFalse(self.registry.contains("token-a"))
        self.registry.add("token-a", expires_at=datetime.now(UTC) + timedelta(hours=1))
        self.assertTrue(self.registry.contains("token-a"))
        self.assertFalse(self.registry.contains("token-b"))

    def test_stores_hash_not_raw_token(self) -> None:
        self.registry.add("raw-token-value")
        with self.session_factory() as session:
            row = session.query(RevokedToken).one()
        self.assertEqual(row.token_hash, token_key("raw-token-value"))
        self.assertIsNone(row.expires_at)

    def test_duplicate_add_is_ignored(self) -> None:
        self.registry.add("token-a")
        self.registry.add("token-a")
        with self.session_factory() as session:
            self.assertEqual(session.query(RevokedToken).count(), 1)
        self.assertTrue(self.registry.contains("token-a"))

    def test_prune_deletes_expired_rows(self) -> None:
        now = datetime.now(UTC)
        self.registry.add("expired", expires_at=now - timedelta(minutes=5))
        self.registry.add("live", expires_at=now + timedelta(minutes=55))
        self.registry.add("no-expiry")
        self.assertEqual(self.registry.prune(now), 1)
        self.assertFalse(self.registry.contains("expired"))
        self.assertTrue(self.registry.contains("live"))
        self.assertTrue(self.registry.contains("no-expiry"))
        self.assertEqual(self.registry.prune(now), 0)

    def test_entries_survive_a_new_registry_instance(self) -> None:
        self.registry.add("token-a")
        fresh = DatabaseRevocationRegistry(self.session_factory)
        self.assertTrue(fresh.contains("token-a"))
