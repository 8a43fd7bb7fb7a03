"""Transaction model for property accounts."""

from dataclasses import dataclass
from decimal import Decimal

from registry_sync.models.enums import TransactionStatus


@dataclass
class Transaction:
    """One installment row of a property account ledger."""

    transaction_id: str
    account_code: str
    seq: int  # Row position within the import pass
    due_date: str
    receivable: Decimal
    amount_paid: Decimal
    surcharge: Decimal
    balance_due: Decimal
    running_balance: Decimal = Decimal("0")  # Account balance after this row
    installment_no: Decimal = Decimal("0")
    installment_name: str = "INSTALLMENT"
    transaction_type: str = "13"
    plot_type: str = "Res"
    currency: str = "PKR"
    mode: str | None = None
    receipt_date: str | None = None
    doc_total: Decimal = Decimal("0")
    status: TransactionStatus = TransactionStatus.SYNCED
