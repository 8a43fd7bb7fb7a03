"""PostgreSQL remote mirror for registry collections."""

import json
import logging
from typing import Any

from registry_sync.exceptions import RemotePersistenceError

logger = logging.getLogger(__name__)


class PostgresMirror:
    """Remote mirror exposing read-all and upsert per collection.

    Each collection is a table of ``(key, payload JSONB, updated_at)``
    rows. A connection is opened per call so the mirror can be used from
    a background worker thread.
    """

    # Collection -> (table, key field in the serialized row)
    TABLES: dict[str, tuple[str, str]] = {
        "members": ("registry_members", "member_id"),
        "accounts": ("registry_property_accounts", "account_code"),
    }

    def __init__(self, connection_string: str) -> None:
        """Initialize the mirror.

        Parameters
        ----------
        connection_string : str
            PostgreSQL connection string.
        """
        import psycopg

        self._psycopg = psycopg
        self.connection_string = connection_string

    def _table(self, collection: str) -> tuple[str, str]:
        try:
            return self.TABLES[collection]
        except KeyError:
            raise RemotePersistenceError(f"Unknown collection: {collection}") from None

    def create_tables(self) -> None:
        """Create mirror tables if they do not exist."""
        ddl = "\n".join(
            f"""
            CREATE TABLE IF NOT EXISTS {table} (
                key TEXT PRIMARY KEY,
                payload JSONB NOT NULL,
                updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
            );"""
            for table, _ in self.TABLES.values()
        )
        try:
            with self._psycopg.connect(self.connection_string) as conn:
                with conn.cursor() as cur:
                    cur.execute(ddl)
                conn.commit()
        except self._psycopg.Error as e:
            raise RemotePersistenceError(f"Failed to create mirror tables: {e}") from e
        logger.info("Mirror tables ready")

    def select_all(self, collection: str) -> list[dict[str, Any]]:
        """Return every row of a collection."""
        table, _ = self._table(collection)
        try:
            with self._psycopg.connect(self.connection_string) as conn:
                with conn.cursor() as cur:
                    cur.execute(f"SELECT payload FROM {table} ORDER BY key")  # noqa: S608
                    rows = cur.fetchall()
        except self._psycopg.Error as e:
            raise RemotePersistenceError(f"Failed to read {collection}: {e}") from e

        # jsonb is decoded by psycopg; plain text payloads are not
        return [json.loads(p) if isinstance(p, str) else p for (p,) in rows]

    def upsert(self, collection: str, rows: list[dict[str, Any]]) -> int:
        """Insert or overwrite rows by key. Returns the number of rows sent."""
        if not rows:
            return 0

        table, key_field = self._table(collection)
        sql = (
            f"INSERT INTO {table} (key, payload, updated_at) "  # noqa: S608
            "VALUES (%s, %s::jsonb, now()) "
            "ON CONFLICT (key) DO UPDATE SET payload = EXCLUDED.payload, updated_at = EXCLUDED.updated_at"
        )
        params = [(str(row[key_field]), json.dumps(row, default=str)) for row in rows]

        try:
            with self._psycopg.connect(self.connection_string) as conn:
                with conn.cursor() as cur:
                    cur.executemany(sql, params)
                conn.commit()
        except self._psycopg.Error as e:
            raise RemotePersistenceError(f"Failed to upsert {collection}: {e}") from e

        logger.debug("Upserted %d rows into %s", len(params), table)
        return len(params)
