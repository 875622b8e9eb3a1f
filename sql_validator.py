# sql_validator.py
# Identifier handling shared by every component that compares or emits table/column names.
# Column matching is case-insensitive everywhere (exclusions, filters, sort); keep it in one place.
import re
from typing import Iterable, List, Optional

# identifiers that are safe to emit unquoted
IDENT_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# SQLite keywords; a column called e.g. "order" or "limit" must be quoted to parse
SQLITE_KEYWORDS = frozenset("""
ABORT ACTION ADD AFTER ALL ALTER ALWAYS ANALYZE AND AS ASC ATTACH AUTOINCREMENT BEFORE BEGIN
BETWEEN BY CASCADE CASE CAST CHECK COLLATE COLUMN COMMIT CONFLICT CONSTRAINT CREATE CROSS
CURRENT CURRENT_DATE CURRENT_TIME CURRENT_TIMESTAMP DATABASE DEFAULT DEFERRABLE DEFERRED
DELETE DESC DETACH DISTINCT DO DROP EACH ELSE END ESCAPE EXCEPT EXCLUDE EXCLUSIVE EXISTS
EXPLAIN FAIL FILTER FIRST FOLLOWING FOR FOREIGN FROM FULL GENERATED GLOB GROUP GROUPS HAVING
IF IGNORE IMMEDIATE IN INDEX INDEXED INITIALLY INNER INSERT INSTEAD INTERSECT INTO IS ISNULL
JOIN KEY LAST LEFT LIKE LIMIT MATCH MATERIALIZED NATURAL NO NOT NOTHING NOTNULL NULL NULLS OF
OFFSET ON OR ORDER OTHERS OUTER OVER PARTITION PLAN PRAGMA PRECEDING PRIMARY QUERY RAISE RANGE
RECURSIVE REFERENCES REGEXP REINDEX RELEASE RENAME REPLACE RESTRICT RETURNING RIGHT ROLLBACK
ROW ROWS SAVEPOINT SELECT SET TABLE TEMP TEMPORARY THEN TIES TO TRANSACTION TRIGGER UNBOUNDED
UNION UNIQUE UPDATE USING VACUUM VALUES VIEW VIRTUAL WHEN WHERE WINDOW WITH WITHOUT
""".split())


def same_identifier(a: str, b: str) -> bool:
    return a.casefold() == b.casefold()


def find_identifier(names: Iterable[str], candidate: str) -> Optional[str]:
    """
    Return the entry of `names` that matches `candidate` ignoring case, or None.
    The returned value is the canonical spelling (as introspected), not the candidate.
    """
    if not candidate:
        return None
    for name in names:
        if same_identifier(name, candidate):
            return name
    return None


def contains_identifier(names: Iterable[str], candidate: str) -> bool:
    return find_identifier(names, candidate) is not None


def split_identifiers(text: Optional[str]) -> List[str]:
    """Split a comma-separated list of names; items are trimmed and empty items dropped."""
    if not text:
        return []
    return [part.strip() for part in text.split(",") if part.strip()]


def quote_identifier(name: str) -> str:
    # plain names go in bare (e.g. SELECT name, price FROM products); anything else gets quoted
    if not name:
        raise ValueError("empty identifier")
    if IDENT_RE.match(name) and name.upper() not in SQLITE_KEYWORDS:
        return name
    return '"' + name.replace('"', '""') + '"'
