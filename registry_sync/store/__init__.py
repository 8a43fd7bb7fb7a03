"""Live registry state, reconciliation and persistence coordination."""

from registry_sync.store.coordinator import PersistenceCoordinator
from registry_sync.store.reconcile import ImportMode, ReconcileResult, claim_identity, reconcile
from registry_sync.store.registry import Registry

__all__ = [
    "ImportMode",
    "PersistenceCoordinator",
    "ReconcileResult",
    "Registry",
    "claim_identity",
    "reconcile",
]
