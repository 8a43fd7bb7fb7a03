"""Entity builder folding export rows into members and property accounts."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from registry_sync.config import ImportConfig
from registry_sync.exceptions import FormatError
from registry_sync.ingest.columns import ColumnMap, ImportField, resolve_columns
from registry_sync.ingest.normalize import normalize_identity, parse_amount, text_or
from registry_sync.ingest.parser import parse_line, split_records
from registry_sync.models import (
    Member,
    MemberRole,
    MemberStatus,
    PropertyAccount,
    Transaction,
    TransactionStatus,
    member_id_for,
)

logger = logging.getLogger(__name__)

DEFAULT_MEMBER_NAME = "Registry Member"
DEFAULT_PLOT_SIZE = "Plot"
DEFAULT_INSTALLMENT_NAME = "INSTALLMENT"


@dataclass
class ImportBatch:
    """Candidate entity set produced by one import pass."""

    members: dict[str, Member] = field(default_factory=dict)  # by normalized identity
    accounts: dict[str, PropertyAccount] = field(default_factory=dict)  # by account code
    rows_processed: int = 0
    rows_skipped: int = 0

    @property
    def transaction_count(self) -> int:
        return sum(len(a.transactions) for a in self.accounts.values())


class EntityBuilder:
    """Fold parsed rows into one member per identity and one account per code.

    Parameters
    ----------
    columns : ColumnMap
        Column mapping resolved from the file header.
    config : ImportConfig | None
        Import settings (email domain for synthesized member addresses).
    """

    def __init__(self, columns: ColumnMap, config: ImportConfig | None = None) -> None:
        self.columns = columns
        self.config = config or ImportConfig()
        self.batch = ImportBatch()

    def add_row(self, row: Sequence[str], seq: int) -> bool:
        """Fold one data row into the batch.

        Parameters
        ----------
        row : Sequence[str]
            Parsed fields of the row.
        seq : int
            Position of the row among the data rows of the file.

        Returns
        -------
        bool
            False if the row lacked an identity or account code and was skipped.
        """
        col = self.columns.get
        raw_identity = col(row, ImportField.IDENTITY) or ""
        identity = normalize_identity(raw_identity)
        account_code = col(row, ImportField.ACCOUNT_CODE) or ""

        if not identity or not account_code:
            self.batch.rows_skipped += 1
            logger.debug("Skipping row %d: missing identity or account code", seq)
            return False

        member = self.batch.members.get(identity)
        if member is None:
            member = self._build_member(row, raw_identity, identity)
            self.batch.members[identity] = member

        account = self.batch.accounts.get(account_code)
        if account is None:
            account = self._build_account(row, account_code, member)
            self.batch.accounts[account_code] = account

        account.add_transaction(self._build_transaction(row, account, seq))
        self.batch.rows_processed += 1
        return True

    def _build_member(self, row: Sequence[str], raw_identity: str, identity: str) -> Member:
        col = self.columns.get
        return Member(
            member_id=member_id_for(raw_identity),
            identity_number=raw_identity,
            name=text_or(col(row, ImportField.OWNER_NAME), DEFAULT_MEMBER_NAME),
            email=f"{identity}@{self.config.member_email_domain}",
            phone=text_or(col(row, ImportField.PHONE)),
            role=MemberRole.CLIENT,
            status=MemberStatus.PENDING,
        )

    def _build_account(self, row: Sequence[str], account_code: str, owner: Member) -> PropertyAccount:
        col = self.columns.get
        return PropertyAccount(
            account_code=account_code,
            owner_identity=owner.identity_number,
            owner_name=owner.name,
            plot_value=parse_amount(col(row, ImportField.VALUATION)),
            currency_no=text_or(col(row, ImportField.CURRENCY_NO)),
            plot_size=text_or(col(row, ImportField.DESCRIPTION), DEFAULT_PLOT_SIZE),
            father_name=text_or(col(row, ImportField.FATHER_NAME)),
            cell_no=text_or(col(row, ImportField.CELL_NO)),
            reg_date=text_or(col(row, ImportField.REG_DATE)),
            address=text_or(col(row, ImportField.ADDRESS)),
            plot_no=text_or(col(row, ImportField.PLOT_NO)),
            block=text_or(col(row, ImportField.BLOCK)),
            park=text_or(col(row, ImportField.PARK)),
            corner=text_or(col(row, ImportField.CORNER)),
            main_boulevard=text_or(col(row, ImportField.MAIN_BOULEVARD)),
        )

    def _build_transaction(self, row: Sequence[str], account: PropertyAccount, seq: int) -> Transaction:
        col = self.columns.get
        return Transaction(
            transaction_id=f"{account.account_code}:{seq}",
            account_code=account.account_code,
            seq=seq,
            due_date=text_or(col(row, ImportField.DUE_DATE)),
            receivable=parse_amount(col(row, ImportField.RECEIVABLE)),
            amount_paid=parse_amount(col(row, ImportField.PAID)),
            surcharge=parse_amount(col(row, ImportField.SURCHARGE)),
            balance_due=parse_amount(col(row, ImportField.BALANCE_DUE)),
            installment_no=parse_amount(col(row, ImportField.INSTALLMENT_NO)),
            installment_name=text_or(col(row, ImportField.INSTALLMENT_NAME), DEFAULT_INSTALLMENT_NAME),
            mode=col(row, ImportField.MODE) or None,
            receipt_date=col(row, ImportField.RECEIPT_DATE) or None,
            doc_total=account.plot_value,
            status=TransactionStatus.SYNCED,
        )


def build_entities(text: str, config: ImportConfig | None = None) -> ImportBatch:
    """Parse export text into a candidate entity set.

    Parameters
    ----------
    text : str
        Full file contents, header first.
    config : ImportConfig | None
        Import settings (delimiter, email domain).

    Returns
    -------
    ImportBatch
        Members and accounts built from the file.

    Raises
    ------
    FormatError
        If the file has fewer than two non-empty lines or its header
        lacks a required column. Nothing is built in that case.
    """
    config = config or ImportConfig()
    lines = split_records(text)
    if len(lines) < 2:
        raise FormatError("Import file needs a header row and at least one data row")

    columns = resolve_columns(parse_line(lines[0], config.delimiter))
    builder = EntityBuilder(columns, config)

    for seq, line in enumerate(lines[1:]):
        builder.add_row(parse_line(line, config.delimiter), seq)

    batch = builder.batch
    logger.info(
        "Built %d members, %d accounts, %d transactions (%d rows skipped)",
        len(batch.members),
        len(batch.accounts),
        batch.transaction_count,
        batch.rows_skipped,
    )
    return batch
