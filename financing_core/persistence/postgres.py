"""PostgreSQL financing store backed by a JSONB key-value table."""

import json
import logging
import re
from typing import Any

from financing_core.config import DEFAULT_NAMESPACE
from financing_core.exceptions import ConfigurationError, PersistenceError
from financing_core.models.financing import Financing
from financing_core.persistence.serialization import dump_financings, load_financings

logger = logging.getLogger(__name__)

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class PostgresFinancingStore:
    """Store each namespace's financing collection as one JSONB row."""

    def __init__(
        self,
        connection_string: str,
        namespace: str = DEFAULT_NAMESPACE,
        table: str = "financing_store",
    ) -> None:
        """Connect and make sure the backing table exists.

        Parameters
        ----------
        connection_string : str
            libpq connection string or URL.
        namespace : str
            Row key under which this store reads and writes.
        table : str
            Backing table name (plain identifier).
        """
        try:
            import psycopg
        except ImportError as e:
            raise ImportError(
                "psycopg is required for PostgresFinancingStore. "
                "Install with: pip install 'psycopg[binary]'"
            ) from e

        if not _IDENTIFIER.match(table):
            raise ConfigurationError(f"Invalid table name: {table!r}")

        self._psycopg = psycopg
        self.namespace = namespace
        self.table = table

        try:
            self.conn = psycopg.connect(connection_string)
        except psycopg.Error as e:
            raise PersistenceError(f"Failed to connect to PostgreSQL: {e}") from e

        self._ensure_table()

    def _ensure_table(self) -> None:
        self._execute(
            f"CREATE TABLE IF NOT EXISTS {self.table} ("  # noqa: S608
            "namespace TEXT PRIMARY KEY, "
            "payload JSONB NOT NULL, "
            "updated_at TIMESTAMPTZ NOT NULL DEFAULT now())"
        )

    def _execute(self, query: str, params: tuple = (), fetch: bool = False) -> Any:
        try:
            with self.conn.cursor() as cur:
                cur.execute(query, params)
                row = cur.fetchone() if fetch else None
            self.conn.commit()
            return row
        except self._psycopg.Error as e:
            self.conn.rollback()
            logger.error("PostgreSQL error on %s: %s", self.table, e)
            raise PersistenceError(f"PostgreSQL operation failed: {e}") from e

    def load(self) -> list[Financing]:
        """Load the financings stored under this namespace."""
        row = self._execute(
            f"SELECT payload FROM {self.table} WHERE namespace = %s",  # noqa: S608
            (self.namespace,),
            fetch=True,
        )
        if row is None:
            return []
        payload = row[0]
        if isinstance(payload, (str, bytes)):
            payload = json.loads(payload)
        return load_financings(payload)

    def save(self, financings: list[Financing]) -> None:
        """Upsert the financings stored under this namespace."""
        payload = json.dumps(dump_financings(financings), ensure_ascii=False)
        self._execute(
            f"INSERT INTO {self.table} (namespace, payload, updated_at) "  # noqa: S608
            "VALUES (%s, %s::jsonb, now()) "
            "ON CONFLICT (namespace) DO UPDATE "
            "SET payload = EXCLUDED.payload, updated_at = EXCLUDED.updated_at",
            (self.namespace, payload),
        )
        logger.debug("Saved %d financings to %s[%s]", len(financings), self.table, self.namespace)

    def close(self) -> None:
        """Close the connection."""
        self.conn.close()
