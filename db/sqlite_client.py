# db/sqlite_client.py
import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional, Sequence

from errors import ConfigurationError, SchemaError, StorageError
from models import ColumnInfo
from sql_validator import quote_identifier

LOG = logging.getLogger(__name__)

CONNECT_TIMEOUT = 10  # seconds to wait on a locked database


class SQLiteClient:
    """
    Read-only access to a single SQLite file.

    A connection is opened per query and closed when the query is done, so the client
    itself holds no handle and can be shared by every request thread.
    """

    def __init__(self, db_path: str, timeout: float = CONNECT_TIMEOUT):
        self.db_path = str(Path(db_path).expanduser().resolve())
        self.timeout = timeout

    def _connect(self) -> sqlite3.Connection:
        # mode=ro: never create the file, never write to it
        uri = Path(self.db_path).as_uri() + "?mode=ro"
        return sqlite3.connect(uri, uri=True, timeout=self.timeout, check_same_thread=False)

    def check_connection(self) -> None:
        """Open and close a connection once; raises ConfigurationError when the file is unusable."""
        try:
            conn = self._connect()
            try:
                conn.execute("SELECT 1 FROM sqlite_master LIMIT 1").fetchall()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise ConfigurationError(f"Error opening database '{self.db_path}': {e}") from e

    @contextmanager
    def query(self, sql: str, params: Optional[Sequence] = None) -> Iterator[sqlite3.Cursor]:
        """Execute `sql` and yield the open cursor; driver errors (including while fetching) become StorageError."""
        conn = None
        cur = None
        try:
            conn = self._connect()
            cur = conn.execute(sql, tuple(params or ()))
            yield cur
        except sqlite3.Error as e:
            raise StorageError(str(e)) from e
        finally:
            if cur is not None:
                cur.close()
            if conn is not None:
                conn.close()

    def table_exists(self, table: str) -> bool:
        with self.query("SELECT name FROM sqlite_master WHERE type='table' AND name=?", [table]) as cur:
            return cur.fetchone() is not None

    def fetch_table_schema(self, table: str) -> List[ColumnInfo]:
        """
        Return the columns of `table` in declaration order (PRAGMA table_info).
        Raises SchemaError if the table is missing or the metadata query fails.
        """
        try:
            with self.query(f"PRAGMA table_info({quote_identifier(table)})") as cur:
                rows = cur.fetchall()
        except StorageError as e:
            raise SchemaError(f"error getting table info: {e.message}") from e

        if not rows:
            raise SchemaError(f"Table '{table}' not found in database '{self.db_path}'")

        # cid, name, type, notnull, dflt_value, pk
        columns = []
        for cid, name, col_type, not_null, default, pk in rows:
            columns.append(ColumnInfo(
                ordinal=cid,
                name=name,
                declared_type=col_type or "",
                not_null=bool(not_null),
                default_value=None if default is None else str(default),
                is_primary_key=bool(pk),
            ))
        LOG.debug("Schema for '%s': %s", table, [c.name for c in columns])
        return columns
