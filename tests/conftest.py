"""Pytest configuration and fixtures."""

from typing import Any

import pytest

from registry_sync.config import RegistryConfig, SeedConfig
from registry_sync.sinks.local import LocalStore

SAMPLE_EXPORT = (
    "OCNIC,OName,ItemCode,DocTotal,ReconSum,BalDueDeb\n"
    "12345-6789012-3,Ali Khan,P-001,5000000,1000,200\n"
    "12345-6789012-3,Ali Khan,P-001,5000000,500,100\n"
)


class InMemoryMirror:
    """Remote mirror double keeping rows per collection."""

    KEYS = {"members": "member_id", "accounts": "account_code"}

    def __init__(self) -> None:
        self.tables: dict[str, dict[str, dict]] = {"members": {}, "accounts": {}}
        self.upserts: list[tuple[str, int]] = []

    def select_all(self, collection: str) -> list[dict[str, Any]]:
        return list(self.tables[collection].values())

    def upsert(self, collection: str, rows: list[dict[str, Any]]) -> int:
        key = self.KEYS[collection]
        for row in rows:
            self.tables[collection][row[key]] = row
        self.upserts.append((collection, len(rows)))
        return len(rows)


class FailingMirror(InMemoryMirror):
    """Remote mirror double that is unreachable."""

    def __init__(self) -> None:
        super().__init__()
        self.calls = 0

    def select_all(self, collection: str) -> list[dict[str, Any]]:
        self.calls += 1
        raise ConnectionError("mirror unreachable")

    def upsert(self, collection: str, rows: list[dict[str, Any]]) -> int:
        self.calls += 1
        raise ConnectionError("mirror unreachable")


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def sample_export() -> str:
    """Two rows for one member and one account."""
    return SAMPLE_EXPORT


@pytest.fixture
def local_store(tmp_path) -> LocalStore:
    """Local store in a temporary directory."""
    return LocalStore(tmp_path / "registry")


@pytest.fixture
def config(tmp_path, seed: int) -> RegistryConfig:
    """Config with a temporary data dir and a small seed registry."""
    config = RegistryConfig(seed=SeedConfig(seed=seed, num_members=3, transactions_per_account=4))
    config.local.data_dir = tmp_path / "registry"
    return config


@pytest.fixture
def mirror() -> InMemoryMirror:
    """Reachable remote mirror."""
    return InMemoryMirror()


@pytest.fixture
def failing_mirror() -> FailingMirror:
    """Unreachable remote mirror."""
    return FailingMirror()
