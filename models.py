# models.py
# Plain containers passed between the introspector, the query builder and the row mapper.
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Mapping, Optional, Union

from errors import InvalidSortDirection

# JSON-safe scalar produced by the row mapper
RowValue = Union[str, int, float, bool, None]
ResultRow = Dict[str, RowValue]


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def parse(cls, value: str) -> "SortDirection":
        """Accept asc/desc in any letter case."""
        try:
            return cls((value or "").lower())
        except ValueError:
            raise InvalidSortDirection("Sorting direction must be 'asc' or 'desc'") from None


@dataclass(frozen=True)
class ColumnInfo:
    ordinal: int
    name: str
    declared_type: str
    not_null: bool
    default_value: Optional[str]
    is_primary_key: bool


@dataclass
class QuerySpec:
    columns: List[str]
    # raw request pairs; the builder decides which ones are real column filters
    filters: Mapping[str, str] = field(default_factory=dict)
    sort_column: Optional[str] = None
    sort_direction: str = SortDirection.ASC.value
    limit: Optional[int] = None
