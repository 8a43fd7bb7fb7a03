"""Header alias resolution for registry export files.

Export revisions rename columns freely, so each logical field accepts a
priority-ordered list of aliases. The header is resolved once per file
into a ``ColumnMap`` and data rows are then indexed positionally.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum

from registry_sync.exceptions import FormatError


class ImportField(str, Enum):
    IDENTITY = "identity"
    ACCOUNT_CODE = "account_code"
    OWNER_NAME = "owner_name"
    PHONE = "phone"
    CELL_NO = "cell_no"
    CURRENCY_NO = "currency_no"
    DESCRIPTION = "description"
    VALUATION = "valuation"
    PAID = "paid"
    BALANCE_DUE = "balance_due"
    DUE_DATE = "due_date"
    RECEIVABLE = "receivable"
    INSTALLMENT_NO = "installment_no"
    INSTALLMENT_NAME = "installment_name"
    MODE = "mode"
    RECEIPT_DATE = "receipt_date"
    SURCHARGE = "surcharge"
    FATHER_NAME = "father_name"
    REG_DATE = "reg_date"
    ADDRESS = "address"
    PLOT_NO = "plot_no"
    BLOCK = "block"
    PARK = "park"
    CORNER = "corner"
    MAIN_BOULEVARD = "main_boulevard"


_PHONE_ALIASES = ("ocell", "cellno")

FIELD_ALIASES: dict[ImportField, tuple[str, ...]] = {
    ImportField.IDENTITY: ("ocnic", "cnic", "u_ocnic"),
    ImportField.ACCOUNT_CODE: ("itemcode", "item_code", "u_itemcode"),
    ImportField.OWNER_NAME: ("oname", "ownername", "name"),
    # Member phone and account cell number read the same column
    ImportField.PHONE: _PHONE_ALIASES,
    ImportField.CELL_NO: _PHONE_ALIASES,
    ImportField.CURRENCY_NO: ("currencyno", "currency"),
    ImportField.DESCRIPTION: ("dscription", "description", "size"),
    ImportField.VALUATION: ("doctotal",),
    ImportField.PAID: ("reconsum", "paid"),
    ImportField.BALANCE_DUE: ("balduedeb", "balance"),
    ImportField.DUE_DATE: ("duedate",),
    ImportField.RECEIVABLE: ("receivable",),
    ImportField.INSTALLMENT_NO: ("u_intno",),
    ImportField.INSTALLMENT_NAME: ("u_intname",),
    ImportField.MODE: ("mode",),
    ImportField.RECEIPT_DATE: ("refdate",),
    ImportField.SURCHARGE: ("markup", "surcharge"),
    ImportField.FATHER_NAME: ("ofatname", "fathername"),
    ImportField.REG_DATE: ("otrfdate", "regdate"),
    ImportField.ADDRESS: ("opraddress", "address"),
    ImportField.PLOT_NO: ("plot", "plotno", "u_plotno"),
    ImportField.BLOCK: ("block", "u_block"),
    ImportField.PARK: ("park", "u_park"),
    ImportField.CORNER: ("corner", "u_corner"),
    ImportField.MAIN_BOULEVARD: ("mb", "mainboulevard", "u_mainbu"),
}

REQUIRED_FIELDS: tuple[ImportField, ...] = (ImportField.IDENTITY, ImportField.ACCOUNT_CODE)


def _normalize_header(name: str) -> str:
    return name.strip().lower()


def find_column(header: Sequence[str], aliases: Sequence[str]) -> int | None:
    """Return the index of the first alias present in the header.

    Aliases are tried in priority order; matching ignores case and
    surrounding whitespace.
    """
    normalized = [_normalize_header(h) for h in header]
    for alias in aliases:
        target = _normalize_header(alias)
        if target in normalized:
            return normalized.index(target)
    return None


@dataclass(frozen=True)
class ColumnMap:
    """Fixed mapping from logical field to column index."""

    indexes: Mapping[ImportField, int] = field(default_factory=dict)

    def __contains__(self, import_field: object) -> bool:
        return import_field in self.indexes

    def get(self, row: Sequence[str], import_field: ImportField) -> str | None:
        """Return the trimmed cell for a field, or ``None`` if absent."""
        idx = self.indexes.get(import_field)
        if idx is None or idx >= len(row):
            return None
        return row[idx].strip()


def resolve_columns(
    header: Sequence[str],
    aliases: Mapping[ImportField, Sequence[str]] | None = None,
    required: Sequence[ImportField] = REQUIRED_FIELDS,
) -> ColumnMap:
    """Resolve a parsed header row into a ``ColumnMap``.

    Parameters
    ----------
    header : Sequence[str]
        Header fields as returned by ``parse_line``.
    aliases : Mapping[ImportField, Sequence[str]] | None
        Alias table (default: ``FIELD_ALIASES``).
    required : Sequence[ImportField]
        Fields that must resolve for the file to be accepted.

    Raises
    ------
    FormatError
        If any required field matches none of its aliases.
    """
    aliases = FIELD_ALIASES if aliases is None else aliases

    indexes: dict[ImportField, int] = {}
    for import_field, names in aliases.items():
        idx = find_column(header, names)
        if idx is not None:
            indexes[import_field] = idx

    missing = [f.value for f in required if f not in indexes]
    if missing:
        raise FormatError(f"Header is missing required columns: {', '.join(missing)}")

    return ColumnMap(indexes=indexes)
