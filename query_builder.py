# query_builder.py
# Turns the whitelisted columns plus request parameters into a parameterized SELECT.
# Column/table names come only from introspection output; filter values are always bound.
import re
from typing import List, Optional, Sequence, Tuple

from errors import InvalidLimit, InvalidSortColumn, NoColumnsAvailable
from models import ColumnInfo, QuerySpec, SortDirection
from sql_validator import contains_identifier, find_identifier, quote_identifier

# URL parameters that are never treated as column filters
RESERVED_PARAMS = ("sort", "order", "limit")

LIMIT_RE = re.compile(r"[+-]?[0-9]+")
# largest value SQLite accepts in a LIMIT clause (signed 64-bit)
MAX_LIMIT = 2**63 - 1


def filter_columns(columns: Sequence[ColumnInfo], exclude: Sequence[str]) -> List[str]:
    """
    Return the names of `columns` not listed in `exclude` (case-insensitive), in introspection order.
    Raises NoColumnsAvailable when nothing is left.
    """
    result = [col.name for col in columns if not contains_identifier(exclude, col.name)]
    if not result:
        raise NoColumnsAvailable("No columns available after filtering")
    return result


def parse_limit(raw: str) -> int:
    value = raw or ""
    if not LIMIT_RE.fullmatch(value):
        raise InvalidLimit("Invalid limit value. Must be an integer.")
    try:
        limit = int(value)
    except ValueError:
        # more digits than int() will convert
        raise InvalidLimit("Invalid limit value. Must be an integer.") from None
    if limit < 0:
        raise InvalidLimit("Invalid limit value. Must not be negative.")
    if limit > MAX_LIMIT:
        raise InvalidLimit(f"Invalid limit value. Must not exceed {MAX_LIMIT}.")
    return limit


def build_query(table: str, spec: QuerySpec) -> Tuple[str, List[str]]:
    """
    Build (sql, args) for `spec` against `table`.

    - every filter key matching an allowed column with a non-empty value adds `col LIKE ?` bound to %value%
    - unknown filter keys and empty values are ignored; an unknown sort column is an error
    - ORDER BY only when a sort column is set, LIMIT only for a positive limit
    """
    if not spec.columns:
        raise NoColumnsAvailable("No columns available after filtering")

    order_frag = ""
    if spec.sort_column:
        sort_column = find_identifier(spec.columns, spec.sort_column)
        if sort_column is None:
            raise InvalidSortColumn(f"Invalid sort column: {spec.sort_column}")
        direction = SortDirection.parse(spec.sort_direction)
        order_frag = f"ORDER BY {quote_identifier(sort_column)} {direction.value.upper()}"
    else:
        # still reject a bad direction even when there is nothing to sort by
        SortDirection.parse(spec.sort_direction)

    where_fragments = []
    args = []
    for key, value in spec.filters.items():
        if key in RESERVED_PARAMS:
            continue
        column = find_identifier(spec.columns, key)
        if column is None or not value:
            continue
        where_fragments.append(f"{quote_identifier(column)} LIKE ?")
        args.append(f"%{value}%")

    select_clause = ", ".join(quote_identifier(c) for c in spec.columns)
    sql_parts = [f"SELECT {select_clause}", f"FROM {quote_identifier(table)}"]
    if where_fragments:
        sql_parts.append("WHERE " + " AND ".join(where_fragments))
    if order_frag:
        sql_parts.append(order_frag)
    if spec.limit is not None and spec.limit > MAX_LIMIT:
        raise InvalidLimit(f"Invalid limit value. Must not exceed {MAX_LIMIT}.")
    if spec.limit is not None and spec.limit > 0:
        sql_parts.append(f"LIMIT {int(spec.limit)}")

    return " ".join(sql_parts), args


def effective_limit(url_value: Optional[str], default: int) -> int:
    """URL value wins when present and non-empty; 0 means no limit."""
    if url_value:
        return parse_limit(url_value)
    return default
