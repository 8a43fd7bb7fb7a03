"""Domain models for the member and property registry."""

from registry_sync.models.account import PropertyAccount
from registry_sync.models.enums import MemberRole, MemberStatus, TransactionStatus
from registry_sync.models.member import Member, member_id_for
from registry_sync.models.transaction import Transaction

__all__ = [
    "Member",
    "MemberRole",
    "MemberStatus",
    "PropertyAccount",
    "Transaction",
    "TransactionStatus",
    "member_id_for",
]
