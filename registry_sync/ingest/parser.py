"""Delimited text tokenizer for registry export files."""

from __future__ import annotations

import re

from registry_sync.exceptions import FormatError

BOM = "\ufeff"
QUOTE = '"'

_LINE_BREAK = re.compile(r"\r?\n")


def parse_line(line: str, delimiter: str = ",") -> list[str]:
    """Split one line into trimmed fields.

    A double quote toggles quoted mode, in which the delimiter is kept as
    part of the field. Quote characters themselves are not emitted.
    Trailing empty fields are preserved, so the result always has one
    more entry than there are delimiters outside quotes.

    Parameters
    ----------
    line : str
        A single record without its line terminator.
    delimiter : str
        Single-character field separator.

    Returns
    -------
    list[str]
        Field values in column order.
    """
    if len(delimiter) != 1:
        raise ValueError(f"Delimiter must be a single character, got {delimiter!r}")

    fields: list[str] = []
    current: list[str] = []
    in_quotes = False

    for char in line:
        if char == QUOTE:
            in_quotes = not in_quotes
        elif char == delimiter and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(char)

    fields.append("".join(current).strip())
    return fields


def split_records(text: str) -> list[str]:
    """Split file text into non-blank lines, dropping a leading BOM."""
    if text.startswith(BOM):
        text = text[len(BOM):]
    return [line for line in _LINE_BREAK.split(text) if line.strip()]


def decode_bytes(raw: bytes) -> str:
    """Decode raw file bytes as UTF-8, tolerating a byte-order mark.

    Raises
    ------
    FormatError
        If the bytes are not valid UTF-8.
    """
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise FormatError(f"Import file is not valid UTF-8: {e}") from e
