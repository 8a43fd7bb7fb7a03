"""Tests for the persistence coordinator."""

import threading
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from registry_sync.config import SeedConfig
from registry_sync.exceptions import LocalPersistenceError
from registry_sync.generators.seed import build_seed
from registry_sync.ingest.builder import build_entities
from registry_sync.sinks.local import LocalStore
from registry_sync.sinks.serialization import to_dict
from registry_sync.store.coordinator import ACCOUNTS_KEY, MEMBERS_KEY, PersistenceCoordinator
from registry_sync.store.reconcile import ImportMode, reconcile
from registry_sync.store.registry import Registry


def _seed_factory() -> Registry:
    return build_seed(SeedConfig(seed=7, num_members=2, transactions_per_account=3))


@pytest.fixture
def imported(sample_export: str) -> Registry:
    """Registry holding the sample export."""
    registry = Registry()
    reconcile(registry, build_entities(sample_export), ImportMode.DESTRUCTIVE)
    return registry


class TestHydrate:
    """Tests for boot-time hydration."""

    def test_empty_store_uses_seed(self, local_store: LocalStore) -> None:
        coordinator = PersistenceCoordinator(local_store, seed_factory=_seed_factory)
        registry = Registry()

        assert coordinator.hydrate(registry) is None
        assert registry == _seed_factory()
        # Seed is written through so the next boot reads it locally
        assert len(local_store.get(MEMBERS_KEY)) == len(registry.members)

    def test_local_snapshot_wins_over_seed(self, local_store: LocalStore, imported: Registry) -> None:
        PersistenceCoordinator(local_store).persist(imported)

        registry = Registry()
        PersistenceCoordinator(local_store, seed_factory=_seed_factory).hydrate(registry)

        assert registry == imported

    def test_seed_fallback_per_collection(self, local_store: LocalStore, imported: Registry) -> None:
        local_store.put(MEMBERS_KEY, [to_dict(m) for m in imported.members.values()])

        registry = Registry()
        PersistenceCoordinator(local_store, seed_factory=_seed_factory).hydrate(registry)

        assert registry.members == imported.members
        assert registry.accounts == _seed_factory().accounts

    def test_remote_refresh_overwrites(self, local_store: LocalStore, mirror, imported: Registry) -> None:
        mirror.upsert(MEMBERS_KEY, [to_dict(m) for m in imported.members.values()])
        mirror.upsert(ACCOUNTS_KEY, [to_dict(a) for a in imported.accounts.values()])

        coordinator = PersistenceCoordinator(local_store, mirror, seed_factory=_seed_factory)
        registry = Registry()
        future = coordinator.hydrate(registry)

        assert future.result(timeout=5) is True
        assert registry == imported
        # Refreshed state is cached locally
        assert len(local_store.get(ACCOUNTS_KEY)) == 1
        coordinator.close()

    def test_empty_remote_keeps_local(self, local_store: LocalStore, mirror, imported: Registry) -> None:
        PersistenceCoordinator(local_store).persist(imported)

        coordinator = PersistenceCoordinator(local_store, mirror)
        registry = Registry()
        assert coordinator.hydrate(registry).result(timeout=5) is False
        assert registry == imported
        coordinator.close()

    def test_unreachable_remote_keeps_local(self, local_store: LocalStore, failing_mirror, imported: Registry) -> None:
        PersistenceCoordinator(local_store).persist(imported)

        coordinator = PersistenceCoordinator(local_store, failing_mirror)
        registry = Registry()
        assert coordinator.hydrate(registry).result(timeout=5) is False
        assert registry == imported
        assert isinstance(coordinator.last_remote_error, ConnectionError)
        coordinator.close()

    def test_refresh_skipped_after_local_mutation(self, local_store: LocalStore, imported: Registry) -> None:
        release = threading.Event()
        remote = MagicMock()

        def slow_select(collection: str) -> list:
            release.wait(5)
            return [{"member_id": "member-9", "identity_number": "9"}]

        remote.select_all.side_effect = slow_select
        coordinator = PersistenceCoordinator(local_store, remote, seed_factory=Registry)
        registry = Registry()
        future = coordinator.hydrate(registry)

        registry.replace_members(imported.members.values())
        coordinator.persist(registry)
        release.set()

        assert future.result(timeout=5) is False
        assert registry.members == imported.members
        coordinator.close()


class TestPersist:
    """Tests for write-time dual persistence."""

    def test_local_only(self, local_store: LocalStore, imported: Registry) -> None:
        coordinator = PersistenceCoordinator(local_store)

        assert coordinator.persist(imported) is None
        assert local_store.get(ACCOUNTS_KEY)[0]["payments_received"] == "1500"
        assert coordinator.is_syncing is False

    def test_remote_mirrored(self, local_store: LocalStore, mirror, imported: Registry) -> None:
        coordinator = PersistenceCoordinator(local_store, mirror)

        assert coordinator.persist(imported).result(timeout=5) is True
        assert set(mirror.tables[ACCOUNTS_KEY]) == {"P-001"}
        assert set(mirror.tables[MEMBERS_KEY]) == {"member-1234567890123"}
        assert coordinator.wait_for_remote(timeout=5)
        assert coordinator.is_syncing is False
        coordinator.close()

    def test_remote_failure_keeps_local(self, local_store: LocalStore, failing_mirror, imported: Registry) -> None:
        coordinator = PersistenceCoordinator(local_store, failing_mirror)

        assert coordinator.persist(imported).result(timeout=5) is False
        assert isinstance(coordinator.last_remote_error, ConnectionError)
        assert local_store.get(ACCOUNTS_KEY)[0]["account_code"] == "P-001"
        assert imported.accounts["P-001"].balance == Decimal("300")
        coordinator.close()

    def test_remote_error_cleared_on_success(self, local_store: LocalStore, mirror, imported: Registry) -> None:
        coordinator = PersistenceCoordinator(local_store, mirror)
        coordinator.last_remote_error = ConnectionError("earlier")

        coordinator.persist(imported).result(timeout=5)

        assert coordinator.last_remote_error is None
        coordinator.close()

    def test_local_failure_raises(self, imported: Registry) -> None:
        local = MagicMock()
        local.put.side_effect = LocalPersistenceError("disk full")
        remote = MagicMock()
        coordinator = PersistenceCoordinator(local, remote)

        with pytest.raises(LocalPersistenceError):
            coordinator.persist(imported)

        remote.upsert.assert_not_called()
        assert "P-001" in imported.accounts
        coordinator.close()


class TestReset:
    """Tests for reset."""

    def test_reset_reseeds(self, local_store: LocalStore, imported: Registry) -> None:
        coordinator = PersistenceCoordinator(local_store, seed_factory=_seed_factory)
        coordinator.persist(imported)

        registry = imported
        coordinator.reset(registry)

        assert registry == _seed_factory()
        assert "P-001" not in registry.accounts

    def test_reset_prefers_remote(self, local_store: LocalStore, mirror, imported: Registry) -> None:
        coordinator = PersistenceCoordinator(local_store, mirror, seed_factory=_seed_factory)
        coordinator.persist(imported).result(timeout=5)

        registry = Registry()
        coordinator.reset(registry).result(timeout=5)

        assert registry == imported
        coordinator.close()
