"""Registry service: the single serialized entry point for mutations."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from pathlib import Path

from registry_sync.config import RegistryConfig
from registry_sync.exceptions import FormatError
from registry_sync.generators.seed import build_seed
from registry_sync.ingest.builder import build_entities
from registry_sync.ingest.normalize import normalize_identity
from registry_sync.ingest.parser import decode_bytes
from registry_sync.models import Member, MemberRole, MemberStatus, PropertyAccount, member_id_for
from registry_sync.sinks.local import LocalStore
from registry_sync.store.coordinator import PersistenceCoordinator, RemoteMirror
from registry_sync.store.reconcile import ImportMode, claim_identity, reconcile
from registry_sync.store.registry import Registry

logger = logging.getLogger(__name__)


@dataclass
class ImportReport:
    """Outcome of a successful import."""

    mode: ImportMode
    accounts_registered: int
    members_registered: int
    rows_processed: int
    rows_skipped: int

    @property
    def message(self) -> str:
        return f"Registry sync successful: {self.accounts_registered} accounts registered."

    def as_log_fields(self) -> dict[str, int | str]:
        """Structured fields attached to the import log record."""
        return {
            "import_mode": self.mode.value,
            "accounts_registered": self.accounts_registered,
            "members_registered": self.members_registered,
            "rows_processed": self.rows_processed,
            "rows_skipped": self.rows_skipped,
        }


class RegistryService:
    """Owns the live registry and funnels every mutation through one lock.

    Imports are parsed and built before the lock is taken; a malformed
    file raises ``FormatError`` and the registry is left untouched.
    After each mutation the registry is written to the local store and
    a remote upsert is queued when a mirror is configured.
    """

    def __init__(
        self,
        config: RegistryConfig | None = None,
        local: LocalStore | None = None,
        remote: RemoteMirror | None = None,
    ) -> None:
        self.config = config or RegistryConfig()
        self.registry = Registry()
        self._lock = threading.RLock()

        if local is None:
            local = LocalStore(self.config.local.data_dir, pretty=self.config.local.pretty_json)
        if remote is None and self.config.remote.enabled:
            from registry_sync.sinks.postgres import PostgresMirror

            remote = PostgresMirror(self.config.remote.connection_string)

        self.coordinator = PersistenceCoordinator(
            local=local,
            remote=remote,
            seed_factory=lambda: build_seed(self.config.seed),
            lock=self._lock,
        )

    @property
    def is_syncing(self) -> bool:
        return self.coordinator.is_syncing

    def boot(self, refresh_remote: bool = True) -> None:
        """Hydrate the registry; the remote refresh continues in the background."""
        self.coordinator.hydrate(self.registry, refresh_remote=refresh_remote)

    # Imports
    def import_text(self, text: str, mode: ImportMode | str | None = None) -> ImportReport:
        """Import export text into the registry.

        Parameters
        ----------
        text : str
            File contents, header first.
        mode : ImportMode | str | None
            ``destructive`` or ``additive`` (default from config).

        Raises
        ------
        FormatError
            If the file is structurally invalid; nothing is changed.
        LocalPersistenceError
            If the registry changed but could not be written locally.
        """
        mode = ImportMode(mode or self.config.imports.default_mode)
        batch = build_entities(text, self.config.imports)

        with self._lock:
            result = reconcile(self.registry, batch, mode)
            self.coordinator.persist(self.registry)

        removed = result.members_removed + result.accounts_removed
        if removed and self.coordinator.remote_enabled:
            # The mirror only upserts; removed keys return on the next refresh
            logger.warning(
                "Destructive import removed %d members and %d accounts locally; "
                "the remote mirror still holds them",
                result.members_removed,
                result.accounts_removed,
            )

        report = ImportReport(
            mode=mode,
            accounts_registered=len(batch.accounts),
            members_registered=len(batch.members),
            rows_processed=batch.rows_processed,
            rows_skipped=batch.rows_skipped,
        )
        logger.info(report.message, extra={"extra": report.as_log_fields()})
        return report

    def import_file(self, path: str | Path, mode: ImportMode | str | None = None) -> ImportReport:
        """Read an export file from disk and import it."""
        try:
            raw = Path(path).read_bytes()
        except OSError as e:
            raise FormatError(f"Cannot read import file {path}: {e}") from e
        return self.import_text(decode_bytes(raw), mode)

    # Members and accounts
    def register_member(
        self,
        identity_number: str,
        name: str,
        password: str,
        email: str | None = None,
        phone: str = "-",
    ) -> tuple[Member, bool]:
        """Register a portal login, claiming an imported member when one matches.

        Returns
        -------
        tuple[Member, bool]
            The member and whether an existing record was claimed.

        Raises
        ------
        IdentityAlreadyClaimedError
            If the identity already belongs to a member with a login.
        """
        if not normalize_identity(identity_number):
            raise ValueError(f"Identity number {identity_number!r} has no digits")

        candidate = Member(
            member_id=member_id_for(identity_number),
            identity_number=identity_number,
            name=name,
            email=email or f"{normalize_identity(identity_number)}@{self.config.imports.member_email_domain}",
            phone=phone,
            role=MemberRole.CLIENT,
            status=MemberStatus.ACTIVE,
            password=password,
        )
        with self._lock:
            member, claimed = claim_identity(self.registry, candidate)
            self.coordinator.persist(self.registry)
        return member, claimed

    def update_member(self, member: Member) -> None:
        """Store an edited member, keyed by its normalized identity."""
        with self._lock:
            self.registry.add_member(member)
            self.coordinator.persist(self.registry)

    def update_account(self, account: PropertyAccount) -> None:
        """Store an edited property account."""
        with self._lock:
            self.registry.add_account(account)
            self.coordinator.persist(self.registry)

    # Queries
    def accounts_for_member(self, identity_number: str) -> list[PropertyAccount]:
        with self._lock:
            return self.registry.accounts_for_member(identity_number)

    def summary(self) -> dict:
        with self._lock:
            return self.registry.summary()

    def snapshot(self) -> Registry:
        """Return a deep copy of the live registry."""
        with self._lock:
            return self.registry.copy()

    # Maintenance
    def reset(self) -> None:
        """Purge local storage and reload from the mirror or seed data."""
        with self._lock:
            self.coordinator.reset(self.registry)

    def wait_for_remote(self, timeout: float | None = None) -> bool:
        return self.coordinator.wait_for_remote(timeout)

    def close(self) -> None:
        self.coordinator.close()
