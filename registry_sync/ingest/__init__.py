"""Import pipeline for registry export files.

``registry_sync.ingest.builder`` depends on the models and is imported
directly rather than re-exported here.
"""

from registry_sync.ingest.columns import FIELD_ALIASES, ColumnMap, ImportField, resolve_columns
from registry_sync.ingest.normalize import normalize_identity, parse_amount
from registry_sync.ingest.parser import decode_bytes, parse_line, split_records

__all__ = [
    "FIELD_ALIASES",
    "ColumnMap",
    "ImportField",
    "decode_bytes",
    "normalize_identity",
    "parse_amount",
    "parse_line",
    "resolve_columns",
    "split_records",
]
