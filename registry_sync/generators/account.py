"""Property account generator for seed data."""

from __future__ import annotations

import random
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterator

from registry_sync.generators.base import BaseGenerator
from registry_sync.models import Member, PropertyAccount, Transaction, TransactionStatus


class PropertyAccountGenerator(BaseGenerator):
    """Generate property accounts with installment ledgers."""

    PLOT_SIZES = ["5 Marla", "7 Marla", "10 Marla", "1 Kanal", "2 Kanal"]
    PLOT_SIZE_WEIGHTS = [0.30, 0.25, 0.25, 0.15, 0.05]

    # Plot value range by size (thousands)
    VALUE_RANGES = {
        "5 Marla": (2500, 4000),
        "7 Marla": (3500, 5500),
        "10 Marla": (5000, 8000),
        "1 Kanal": (9000, 15000),
        "2 Kanal": (17000, 28000),
    }

    BLOCKS = ["A", "B", "C", "D", "E"]

    def __init__(self, seed: int | None = None, locale: str = "en_US") -> None:
        super().__init__(seed, locale)
        self._counter = 0

    def generate(self, owner: Member, num_transactions: int = 6) -> PropertyAccount:
        """Generate an account owned by ``owner``.

        Parameters
        ----------
        owner : Member
            Owning member; name and identity are copied onto the account.
        num_transactions : int
            Number of installment rows in the ledger.

        Returns
        -------
        PropertyAccount
            Generated account with aggregates built from its ledger.
        """
        self._counter += 1
        plot_size = random.choices(self.PLOT_SIZES, weights=self.PLOT_SIZE_WEIGHTS, k=1)[0]
        low, high = self.VALUE_RANGES[plot_size]
        plot_value = Decimal(random.randint(low, high) * 1000)
        block = random.choice(self.BLOCKS)

        account = PropertyAccount(
            account_code=f"{block}-{self._counter:04d}",
            owner_identity=owner.identity_number,
            owner_name=owner.name,
            plot_value=plot_value,
            currency_no=f"{random.randint(100000, 999999)}",
            plot_size=plot_size,
            father_name=self.fake.name_male(),
            cell_no=owner.phone,
            reg_date=self.fake.date_between(start_date="-5y", end_date="-1y").isoformat(),
            address=self.fake.street_address(),
            plot_no=str(random.randint(1, 500)),
            block=block,
            park=random.choice(["Yes", "No"]),
            corner=random.choice(["Yes", "No"]),
            main_boulevard=random.choice(["Yes", "No"]),
        )

        for txn in self._generate_ledger(account, num_transactions):
            account.add_transaction(txn)
        return account

    def generate_for_member(
        self,
        owner: Member,
        count: int,
        num_transactions: int = 6,
    ) -> Iterator[PropertyAccount]:
        """Generate ``count`` accounts for one member."""
        for _ in range(count):
            yield self.generate(owner, num_transactions)

    def _generate_ledger(self, account: PropertyAccount, num_transactions: int) -> Iterator[Transaction]:
        """Generate installment rows; later installments are less likely paid."""
        if num_transactions <= 0:
            return
        installment = (account.plot_value / num_transactions).quantize(Decimal("1"))
        first_due = date.today().replace(day=1) - timedelta(days=30 * (num_transactions - 1))

        for seq in range(num_transactions):
            paid_ratio = 1.0 if random.random() > seq / (num_transactions + 1) else random.choice([0.0, 0.5])
            paid = (installment * Decimal(str(paid_ratio))).quantize(Decimal("1"))
            surcharge = Decimal("0") if paid_ratio == 1.0 else (installment * Decimal("0.02")).quantize(Decimal("1"))
            yield Transaction(
                transaction_id=f"{account.account_code}:{seq}",
                account_code=account.account_code,
                seq=seq,
                due_date=(first_due + timedelta(days=30 * seq)).isoformat(),
                receivable=installment,
                amount_paid=paid,
                surcharge=surcharge,
                balance_due=installment - paid,
                installment_no=Decimal(seq + 1),
                installment_name="INSTALLMENT",
                mode="Bank" if paid else None,
                receipt_date=(first_due + timedelta(days=30 * seq + 5)).isoformat() if paid else None,
                doc_total=account.plot_value,
                status=TransactionStatus.SYNCED,
            )
