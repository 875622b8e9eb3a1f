# schema_cache.py
import logging
import time
from typing import Dict, List, Optional, Tuple

from models import ColumnInfo

LOG = logging.getLogger(__name__)


class SchemaCache:
    """
    Column introspection for the exposed table.

    With ttl <= 0 (the default) every call re-reads the schema, so a column added or
    dropped between requests is picked up immediately. With ttl > 0 results are kept
    per table for `ttl` seconds or until invalidate() is called.
    """

    def __init__(self, client, ttl: float = 0):
        self.client = client
        self.ttl = ttl
        # { table_name: (timestamp_seconds, [ColumnInfo]) }
        self._cache: Dict[str, Tuple[float, List[ColumnInfo]]] = {}

    def get_table_columns(self, table: str) -> List[ColumnInfo]:
        if self.ttl <= 0:
            return self.client.fetch_table_schema(table)

        now = time.monotonic()
        cached = self._cache.get(table)
        if cached and (now - cached[0]) < self.ttl:
            return cached[1]

        LOG.info("Fetching schema for table '%s' (cache expired or not set)", table)
        columns = self.client.fetch_table_schema(table)
        self._cache[table] = (now, columns)
        return columns

    def set_table_schema(self, table: str, columns: List[ColumnInfo]) -> None:
        """Manual cache setter (useful for tests)."""
        self._cache[table] = (time.monotonic(), columns)

    def invalidate(self, table: Optional[str] = None) -> None:
        if table is None:
            self._cache.clear()
        else:
            self._cache.pop(table, None)
