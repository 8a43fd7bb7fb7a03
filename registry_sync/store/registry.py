"""Live registry of members and property accounts."""

import copy
from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import Decimal

from registry_sync.exceptions import EntityNotFoundError
from registry_sync.ingest.normalize import normalize_identity
from registry_sync.models import Member, PropertyAccount


@dataclass
class Registry:
    """In-memory registry keyed by normalized identity and account code.

    Holds the process-wide state. It is mutated in place by the
    reconciliation functions and persisted by the coordinator.
    """

    members: dict[str, Member] = field(default_factory=dict)
    accounts: dict[str, PropertyAccount] = field(default_factory=dict)

    def add_member(self, member: Member) -> None:
        """Add or overwrite a member under its normalized identity."""
        self.members[member.normalized_identity] = member

    def add_account(self, account: PropertyAccount) -> None:
        """Add or overwrite an account under its account code."""
        self.accounts[account.account_code] = account

    def replace_members(self, members: Iterable[Member]) -> None:
        """Replace the whole member collection."""
        self.members = {m.normalized_identity: m for m in members}

    def replace_accounts(self, accounts: Iterable[PropertyAccount]) -> None:
        """Replace the whole account collection."""
        self.accounts = {a.account_code: a for a in accounts}

    # Query methods
    def find_member(self, identity_number: str) -> Member | None:
        """Look up a member by any raw form of its identity number."""
        return self.members.get(normalize_identity(identity_number))

    def get_member(self, identity_number: str) -> Member:
        """Like ``find_member`` but raise when the member is unknown."""
        member = self.find_member(identity_number)
        if member is None:
            raise EntityNotFoundError(f"Member {identity_number} not found")
        return member

    def get_account(self, account_code: str) -> PropertyAccount:
        """Get an account by code."""
        try:
            return self.accounts[account_code]
        except KeyError:
            raise EntityNotFoundError(f"Account {account_code} not found") from None

    def accounts_for_member(self, identity_number: str) -> list[PropertyAccount]:
        """Get all accounts owned by a member."""
        identity = normalize_identity(identity_number)
        if not identity:
            return []
        return [a for a in self.accounts.values() if a.normalized_owner_identity == identity]

    def copy(self) -> "Registry":
        """Return a deep snapshot of the registry."""
        return Registry(
            members=copy.deepcopy(self.members),
            accounts=copy.deepcopy(self.accounts),
        )

    def summary(self) -> dict[str, int | Decimal]:
        """Return entity counts and collection totals."""
        collected = sum(
            (t.amount_paid for a in self.accounts.values() for t in a.transactions),
            Decimal("0"),
        )
        outstanding = sum((a.balance for a in self.accounts.values()), Decimal("0"))
        return {
            "members": len(self.members),
            "accounts": len(self.accounts),
            "transactions": sum(len(a.transactions) for a in self.accounts.values()),
            "collected": collected,
            "outstanding": outstanding,
        }
