"""Reconciliation of imported entity sets into the live registry.

All member comparisons go through the normalized identity, so raw
formatting differences never produce duplicate members.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from registry_sync.exceptions import IdentityAlreadyClaimedError
from registry_sync.ingest.builder import ImportBatch
from registry_sync.models import Member, MemberStatus
from registry_sync.store.registry import Registry

logger = logging.getLogger(__name__)


class ImportMode(str, Enum):
    DESTRUCTIVE = "destructive"  # Imported set replaces the registry
    ADDITIVE = "additive"  # Imported set overlays the registry


@dataclass
class ReconcileResult:
    """Counts describing what a reconciliation changed."""

    mode: ImportMode
    members_added: int = 0
    members_updated: int = 0
    members_removed: int = 0
    accounts_added: int = 0
    accounts_updated: int = 0
    accounts_removed: int = 0


def replace_all(registry: Registry, batch: ImportBatch) -> ReconcileResult:
    """Replace both registry collections with the imported ones."""
    result = ReconcileResult(mode=ImportMode.DESTRUCTIVE)

    incoming_members = {m.normalized_identity: m for m in batch.members.values()}
    result.members_added = len(incoming_members.keys() - registry.members.keys())
    result.members_updated = len(incoming_members.keys() & registry.members.keys())
    result.members_removed = len(registry.members.keys() - incoming_members.keys())

    result.accounts_added = len(batch.accounts.keys() - registry.accounts.keys())
    result.accounts_updated = len(batch.accounts.keys() & registry.accounts.keys())
    result.accounts_removed = len(registry.accounts.keys() - batch.accounts.keys())

    registry.replace_members(incoming_members.values())
    registry.replace_accounts(batch.accounts.values())
    return result


def merge_additive(registry: Registry, batch: ImportBatch) -> ReconcileResult:
    """Overlay imported entities onto the registry.

    Keys present on both sides take the incoming entity whole, including
    an account's transaction history. Keys only in the registry are kept.
    """
    result = ReconcileResult(mode=ImportMode.ADDITIVE)

    for member in batch.members.values():
        if member.normalized_identity in registry.members:
            result.members_updated += 1
        else:
            result.members_added += 1
        registry.add_member(member)

    for account in batch.accounts.values():
        if account.account_code in registry.accounts:
            result.accounts_updated += 1
        else:
            result.accounts_added += 1
        registry.add_account(account)

    return result


def reconcile(registry: Registry, batch: ImportBatch, mode: ImportMode | str) -> ReconcileResult:
    """Apply an imported batch to the registry in the given mode."""
    mode = ImportMode(mode)
    if mode is ImportMode.DESTRUCTIVE:
        result = replace_all(registry, batch)
    else:
        result = merge_additive(registry, batch)

    logger.info(
        "Reconciled (%s): members +%d ~%d -%d, accounts +%d ~%d -%d",
        mode.value,
        result.members_added,
        result.members_updated,
        result.members_removed,
        result.accounts_added,
        result.accounts_updated,
        result.accounts_removed,
    )
    return result


def claim_identity(registry: Registry, candidate: Member) -> tuple[Member, bool]:
    """Attach a portal login to a member, creating one if needed.

    When an unclaimed member with the same normalized identity exists,
    only the credential and activation status are taken from
    ``candidate``; every imported field of the existing record is kept.

    Returns
    -------
    tuple[Member, bool]
        The registered member and whether an existing record was claimed.

    Raises
    ------
    IdentityAlreadyClaimedError
        If the matching member already has a login. It is left unchanged.
    """
    existing = registry.find_member(candidate.identity_number)
    if existing is not None:
        if existing.is_claimed:
            raise IdentityAlreadyClaimedError(f"Member {existing.member_id} already has a login")
        existing.password = candidate.password
        existing.status = MemberStatus.ACTIVE
        logger.info("Member %s claimed existing record", existing.member_id)
        return existing, True

    candidate.status = MemberStatus.ACTIVE
    registry.add_member(candidate)
    logger.info("Member %s registered", candidate.member_id)
    return candidate, False
