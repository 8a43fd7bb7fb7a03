"""Property account model."""

from dataclasses import dataclass, field
from decimal import Decimal

from registry_sync.ingest.normalize import normalize_identity
from registry_sync.models.transaction import Transaction


@dataclass
class PropertyAccount:
    """Property file owned by a member.

    Aggregates are adjusted incrementally by ``add_transaction`` and are
    only rebuilt when the whole account is rebuilt by an import.
    """

    account_code: str
    owner_identity: str
    owner_name: str
    plot_value: Decimal = Decimal("0")
    currency_no: str = "-"
    plot_size: str = "Plot"
    father_name: str = "-"
    cell_no: str = "-"
    reg_date: str = "-"
    address: str = "-"
    plot_no: str = "-"
    block: str = "-"
    park: str = "-"
    corner: str = "-"
    main_boulevard: str = "-"

    # Running aggregates
    payments_received: Decimal = Decimal("0")
    balance: Decimal = Decimal("0")
    total_receivable: Decimal = Decimal("0")
    surcharge: Decimal = Decimal("0")
    overdue: Decimal = Decimal("0")

    transactions: list[Transaction] = field(default_factory=list)

    @property
    def normalized_owner_identity(self) -> str:
        """Owner identity reduced to digits and the check character."""
        return normalize_identity(self.owner_identity)

    def add_transaction(self, transaction: Transaction) -> None:
        """Append a transaction and fold its amounts into the aggregates."""
        self.payments_received += transaction.amount_paid
        self.balance += transaction.balance_due
        self.total_receivable += transaction.receivable
        self.surcharge += transaction.surcharge
        transaction.running_balance = self.balance
        self.transactions.append(transaction)
