"""Shared serialization utilities for persistence tiers."""

from dataclasses import asdict, is_dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

from registry_sync.models import (
    Member,
    MemberRole,
    MemberStatus,
    PropertyAccount,
    Transaction,
    TransactionStatus,
)


def to_dict(obj: Any) -> dict:
    """Convert object to dictionary."""
    if is_dataclass(obj):
        return dataclass_to_dict(obj)
    elif isinstance(obj, dict):
        return obj
    else:
        return {"value": str(obj)}


def dataclass_to_dict(obj: Any) -> dict:
    """Convert dataclass to dict with proper serialization."""
    result = {}
    for key, value in asdict(obj).items():
        result[key] = serialize_value(value)
    return result


def serialize_value(value: Any) -> Any:
    """Serialize a value for JSON output."""
    if isinstance(value, Decimal):
        return str(value)
    elif isinstance(value, Enum):
        return value.value
    elif isinstance(value, datetime):
        return value.isoformat()
    elif isinstance(value, date):
        return value.isoformat()
    elif isinstance(value, dict):
        return {k: serialize_value(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [serialize_value(v) for v in value]
    return value


def _decimal(value: Any) -> Decimal:
    if value is None or value == "":
        return Decimal("0")
    try:
        return Decimal(str(value))
    except InvalidOperation:
        return Decimal("0")


def member_from_dict(data: dict[str, Any]) -> Member:
    """Rebuild a member from its serialized form."""
    return Member(
        member_id=data["member_id"],
        identity_number=data["identity_number"],
        name=data.get("name", ""),
        email=data.get("email", ""),
        phone=data.get("phone", "-"),
        role=MemberRole(data.get("role", MemberRole.CLIENT.value)),
        status=MemberStatus(data.get("status", MemberStatus.PENDING.value)),
        password=data.get("password"),
    )


def transaction_from_dict(data: dict[str, Any]) -> Transaction:
    """Rebuild a transaction from its serialized form."""
    return Transaction(
        transaction_id=data["transaction_id"],
        account_code=data["account_code"],
        seq=int(data.get("seq", 0)),
        due_date=data.get("due_date", "-"),
        receivable=_decimal(data.get("receivable")),
        amount_paid=_decimal(data.get("amount_paid")),
        surcharge=_decimal(data.get("surcharge")),
        balance_due=_decimal(data.get("balance_due")),
        running_balance=_decimal(data.get("running_balance")),
        installment_no=_decimal(data.get("installment_no")),
        installment_name=data.get("installment_name", "INSTALLMENT"),
        transaction_type=data.get("transaction_type", "13"),
        plot_type=data.get("plot_type", "Res"),
        currency=data.get("currency", "PKR"),
        mode=data.get("mode"),
        receipt_date=data.get("receipt_date"),
        doc_total=_decimal(data.get("doc_total")),
        status=TransactionStatus(data.get("status", TransactionStatus.SYNCED.value)),
    )


def account_from_dict(data: dict[str, Any]) -> PropertyAccount:
    """Rebuild a property account without re-running its aggregates.

    Stored aggregates are taken as-is; transactions are attached directly
    instead of through ``add_transaction``.
    """
    text_fields = (
        "currency_no", "plot_size", "father_name", "cell_no", "reg_date", "address",
        "plot_no", "block", "park", "corner", "main_boulevard",
    )
    amount_fields = ("plot_value", "payments_received", "balance", "total_receivable", "surcharge", "overdue")

    account = PropertyAccount(
        account_code=data["account_code"],
        owner_identity=data.get("owner_identity", ""),
        owner_name=data.get("owner_name", ""),
        **{name: data[name] for name in text_fields if data.get(name) is not None},
        **{name: _decimal(data.get(name)) for name in amount_fields},
    )
    account.transactions = [transaction_from_dict(t) for t in data.get("transactions", [])]
    return account
