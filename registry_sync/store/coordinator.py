"""Dual-tier persistence for the registry.

The local store is the primary of record and is written synchronously.
The remote mirror is optional and best-effort: its reads and writes run
on a single background worker, failures are logged and recorded in
``last_remote_error`` and never reach the caller.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Any, Protocol

from registry_sync.exceptions import LocalPersistenceError
from registry_sync.sinks.serialization import account_from_dict, member_from_dict, to_dict
from registry_sync.store.registry import Registry

logger = logging.getLogger(__name__)

MEMBERS_KEY = "members"
ACCOUNTS_KEY = "accounts"


class KeyValueStore(Protocol):
    """Durable local store contract."""

    def get(self, key: str) -> Any | None: ...

    def put(self, key: str, snapshot: Any) -> None: ...

    def clear(self) -> None: ...


class RemoteMirror(Protocol):
    """Remote mirror contract."""

    def select_all(self, collection: str) -> list[dict[str, Any]]: ...

    def upsert(self, collection: str, rows: list[dict[str, Any]]) -> Any: ...


class PersistenceCoordinator:
    """Keep the registry in the local store and, when configured, the mirror.

    Parameters
    ----------
    local : KeyValueStore
        Durable local store.
    remote : RemoteMirror | None
        Optional remote mirror.
    seed_factory : Callable[[], Registry]
        Builds the demo registry used when a local snapshot is missing.
    lock : threading.RLock | None
        Lock guarding the registry; share the service's lock so background
        refreshes are serialized with mutations.
    """

    def __init__(
        self,
        local: KeyValueStore,
        remote: RemoteMirror | None = None,
        seed_factory: Callable[[], Registry] | None = None,
        lock: threading.RLock | None = None,
    ) -> None:
        self.local = local
        self.remote = remote
        self.seed_factory = seed_factory or Registry
        self.lock = lock or threading.RLock()
        self.last_remote_error: Exception | None = None
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="registry-remote") if remote else None
        self._pending: set[Future] = set()
        self._pending_lock = threading.Lock()
        self._generation = 0

    @property
    def remote_enabled(self) -> bool:
        return self.remote is not None

    @property
    def is_syncing(self) -> bool:
        """Whether remote work is queued or running."""
        with self._pending_lock:
            return any(not f.done() for f in self._pending)

    # Boot
    def hydrate(self, registry: Registry, refresh_remote: bool = True) -> Future | None:
        """Load the registry from the local store, then refresh from the mirror.

        Each collection falls back to the seed registry when it has no
        local snapshot. The remote refresh runs in the background; the
        returned future completes when it has been applied or skipped.
        """
        with self.lock:
            members = self.local.get(MEMBERS_KEY)
            accounts = self.local.get(ACCOUNTS_KEY)
            seed = self.seed_factory() if members is None or accounts is None else None

            if members is None:
                registry.replace_members(seed.members.values())
            else:
                registry.replace_members(member_from_dict(m) for m in members)

            if accounts is None:
                registry.replace_accounts(seed.accounts.values())
            else:
                registry.replace_accounts(account_from_dict(a) for a in accounts)

            logger.info(
                "Hydrated registry from %s: %d members, %d accounts",
                "seed data" if seed is not None else "local store",
                len(registry.members),
                len(registry.accounts),
            )

            if seed is not None:
                self._write_local(registry)

            if not (refresh_remote and self.remote_enabled):
                return None
            generation = self._generation

        return self._submit(self._refresh_from_remote, registry, generation)

    def _refresh_from_remote(self, registry: Registry, generation: int) -> bool:
        remote_members = self.remote.select_all(MEMBERS_KEY)
        remote_accounts = self.remote.select_all(ACCOUNTS_KEY)

        with self.lock:
            if generation != self._generation:
                logger.info("Skipping remote refresh: registry changed while it was running")
                return False
            if not remote_members and not remote_accounts:
                logger.info("Remote mirror is empty; keeping local registry")
                return False

            if remote_members:
                registry.replace_members(member_from_dict(m) for m in remote_members)
            if remote_accounts:
                registry.replace_accounts(account_from_dict(a) for a in remote_accounts)
            logger.info(
                "Refreshed registry from remote mirror: %d members, %d accounts",
                len(remote_members),
                len(remote_accounts),
            )
            self._write_local(registry)
        return True

    # Mutation
    def persist(self, registry: Registry) -> Future | None:
        """Write the registry locally, then queue a remote upsert.

        Raises
        ------
        LocalPersistenceError
            If the local write fails. The in-memory registry is left as is.
        """
        with self.lock:
            self._generation += 1
            self._write_local(registry)
            if not self.remote_enabled:
                return None
            members = [to_dict(m) for m in registry.members.values()]
            accounts = [to_dict(a) for a in registry.accounts.values()]

        return self._submit(self._push_to_remote, members, accounts)

    def _push_to_remote(self, members: list[dict], accounts: list[dict]) -> bool:
        self.remote.upsert(MEMBERS_KEY, members)
        self.remote.upsert(ACCOUNTS_KEY, accounts)
        logger.info("Mirrored %d members, %d accounts to remote", len(members), len(accounts))
        return True

    def _write_local(self, registry: Registry) -> None:
        try:
            self.local.put(MEMBERS_KEY, [to_dict(m) for m in registry.members.values()])
            self.local.put(ACCOUNTS_KEY, [to_dict(a) for a in registry.accounts.values()])
        except LocalPersistenceError:
            logger.exception("Local registry write failed")
            raise

    def _submit(self, fn: Callable[..., bool], *args: Any) -> Future:
        future = self._executor.submit(self._run_remote, fn, *args)
        with self._pending_lock:
            self._pending = {f for f in self._pending if not f.done()}
            self._pending.add(future)
        return future

    def _run_remote(self, fn: Callable[..., bool], *args: Any) -> bool:
        try:
            result = fn(*args)
        except Exception as e:
            # Remote failures must never undo or block local state
            self.last_remote_error = e
            logger.warning("Remote mirror operation failed: %s", e, exc_info=True)
            return False
        self.last_remote_error = None
        return result

    def wait_for_remote(self, timeout: float | None = None) -> bool:
        """Block until queued remote work finishes. Returns False on timeout."""
        with self._pending_lock:
            pending = set(self._pending)
        if not pending:
            return True
        _, not_done = wait(pending, timeout=timeout)
        return not not_done

    # Maintenance
    def reset(self, registry: Registry) -> Future | None:
        """Purge the local store and hydrate again from the mirror or seed data."""
        with self.lock:
            self.local.clear()
            self._generation += 1
            logger.warning("Local registry store purged")
            return self.hydrate(registry)

    def close(self, wait_remote: bool = True) -> None:
        """Shut down the remote worker."""
        if self._executor is not None:
            self._executor.shutdown(wait=wait_remote)
