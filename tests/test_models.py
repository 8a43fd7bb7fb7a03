"""Tests for registry models."""

from decimal import Decimal

from registry_sync.models import (
    Member,
    MemberStatus,
    PropertyAccount,
    Transaction,
    TransactionStatus,
    member_id_for,
)


def _txn(seq: int, paid: str, due: str) -> Transaction:
    return Transaction(
        transaction_id=f"P-001:{seq}",
        account_code="P-001",
        seq=seq,
        due_date="-",
        receivable=Decimal("0"),
        amount_paid=Decimal(paid),
        surcharge=Decimal("0"),
        balance_due=Decimal(due),
    )


class TestMember:
    """Tests for Member."""

    def test_member_id_is_normalized(self) -> None:
        assert member_id_for("12345-6789012-3") == "member-1234567890123"
        assert member_id_for(" 12345 6789012 x ") == "member-123456789012X"

    def test_defaults(self) -> None:
        member = Member("member-1", "1", "Ali", "1@x", "-")

        assert member.status == MemberStatus.PENDING
        assert member.is_claimed is False

    def test_normalized_identity(self) -> None:
        member = Member("m", "12345-6789012-3", "Ali", "a@x", "-", password="pw")

        assert member.normalized_identity == "1234567890123"
        assert member.is_claimed is True


class TestPropertyAccount:
    """Tests for PropertyAccount."""

    def test_defaults(self) -> None:
        account = PropertyAccount("P-001", "12345-6789012-3", "Ali", Decimal("100"))

        assert account.block == "-"
        assert account.plot_size == "Plot"
        assert account.balance == Decimal("0")
        assert account.normalized_owner_identity == "1234567890123"

    def test_add_transaction_running_balance(self) -> None:
        account = PropertyAccount("P-001", "1", "Ali", Decimal("0"))

        account.add_transaction(_txn(0, "1000", "200"))
        account.add_transaction(_txn(1, "500", "100"))

        assert account.payments_received == Decimal("1500")
        assert account.balance == Decimal("300")
        assert [t.running_balance for t in account.transactions] == [Decimal("200"), Decimal("300")]
        assert account.transactions[0].status == TransactionStatus.SYNCED
