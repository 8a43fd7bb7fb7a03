"""Value normalization for raw export fields.

Numeric coercion never raises: anything that cannot be read as a number
degrades to zero so one bad cell cannot abort an import.

Sign convention: a parenthesized amount such as ``(500)`` is negative,
following the accounting notation used by the export.
"""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation

ZERO = Decimal("0")

# Textual placeholders the export uses for "no value"
NULL_PLACEHOLDERS = frozenset({"", "NULL", "-", "N/A", "NONE"})

IDENTITY_CHECK_CHARACTER = "X"

# Magnitudes outside 1E-18..1E+18 are treated as malformed
MAX_AMOUNT_EXPONENT = 18

_CURRENCY_PREFIX = re.compile(r"^(PKR|RS\.?|\$)\s*", re.IGNORECASE)
_NON_IDENTITY = re.compile(rf"[^0-9{IDENTITY_CHECK_CHARACTER}]")


def parse_amount(raw: str | None) -> Decimal:
    """Coerce a raw export amount to a ``Decimal``.

    Parameters
    ----------
    raw : str | None
        Raw cell text, e.g. ``"1,234.56"``, ``"(500)"`` or ``"NULL"``.

    Returns
    -------
    Decimal
        Parsed amount, or zero for placeholders, malformed text and
        out-of-range magnitudes.
    """
    if raw is None:
        return ZERO

    text = raw.strip()
    if text.upper() in NULL_PLACEHOLDERS:
        return ZERO

    negative = False
    if text.startswith("(") and text.endswith(")"):
        negative = True
        text = text[1:-1].strip()

    text = _CURRENCY_PREFIX.sub("", text)
    text = text.replace(",", "").replace(" ", "")
    # Stray parentheses left after the sign check carry no meaning
    text = text.replace("(", "").replace(")", "")

    try:
        value = Decimal(text)
    except InvalidOperation:
        return ZERO

    if not value.is_finite() or abs(value.adjusted()) > MAX_AMOUNT_EXPONENT:
        return ZERO

    return -value if negative else value


def normalize_identity(raw: str | None) -> str:
    """Reduce an identity number to its canonical merge key.

    Keeps decimal digits and the check character in their original
    order; dashes, spaces and every other symbol are dropped.

    >>> normalize_identity("12345-6789012-3")
    '1234567890123'
    """
    if not raw:
        return ""
    return _NON_IDENTITY.sub("", raw.upper())


def text_or(value: str | None, placeholder: str = "-") -> str:
    """Return stripped text, or the placeholder when the cell is empty."""
    if value is None:
        return placeholder
    value = value.strip()
    return value if value else placeholder
