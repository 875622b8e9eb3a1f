# row_mapper.py
from typing import Any, List, Sequence

from errors import StorageError
from models import ResultRow, RowValue


def normalize_value(value: Any) -> RowValue:
    """Map a driver value to a JSON-safe scalar; bytes decode as UTF-8, unknown types are stringified."""
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)


def map_rows(cursor, columns: Sequence[str]) -> List[ResultRow]:
    """
    Read every row of a DB-API cursor into dicts keyed by `columns`.
    Row order is whatever the cursor yields; nothing is re-sorted here.
    """
    if cursor.description is not None and len(cursor.description) != len(columns):
        raise StorageError(
            f"error scanning row: expected {len(columns)} columns, got {len(cursor.description)}"
        )
    results = []
    for row in cursor:
        results.append({col: normalize_value(val) for col, val in zip(columns, row)})
    return results
