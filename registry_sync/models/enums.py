"""Enumeration types for registry entities."""

from enum import Enum


class MemberRole(str, Enum):
    ADMIN = "ADMIN"
    CLIENT = "CLIENT"


class MemberStatus(str, Enum):
    ACTIVE = "ACTIVE"
    PENDING = "PENDING"  # Imported, not yet claimed through the portal
    INACTIVE = "INACTIVE"


class TransactionStatus(str, Enum):
    SYNCED = "SYNCED"  # Arrived through a registry import
    MANUAL = "MANUAL"
