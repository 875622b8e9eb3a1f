# config.py
# Process-level settings. Env vars set the defaults, command-line flags override them.
import argparse
import os
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from errors import ConfigurationError
from query_builder import MAX_LIMIT
from sql_validator import split_identifiers

DEFAULT_DB_PATH = os.getenv("SQLITE_QUERY_API_DB", "./data.db")
DEFAULT_HOST = os.getenv("SQLITE_QUERY_API_HOST", "0.0.0.0")
DEFAULT_PORT = int(os.getenv("SQLITE_QUERY_API_PORT", "8080"))
DEFAULT_LOG_LEVEL = os.getenv("SQLITE_QUERY_API_LOG_LEVEL", "INFO")
# Schema cache TTL (seconds); 0 re-reads the table schema on every request
DEFAULT_SCHEMA_TTL = float(os.getenv("SQLITE_QUERY_API_SCHEMA_TTL", "0"))

DEFAULT_ORDER = "asc"
DEFAULT_LIMIT = 0  # 0 = all rows
MAX_PORT = 65535

PROG = "sqlite-query-api"

EXAMPLES = f"""\
Examples:
  {PROG} -t clients -s name -o desc -l 20
  {PROG} --table products --exclude id,stock --sort price --limit 50

URL access:
  http://localhost:8080/clients?name=Pamela
  http://localhost:8080/products?limit=10&sort=price&order=desc
"""


@dataclass(frozen=True)
class ServerConfig:
    table: str
    db_path: str = DEFAULT_DB_PATH
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    exclude: Tuple[str, ...] = ()
    sort: Optional[str] = None
    order: str = DEFAULT_ORDER
    limit: int = DEFAULT_LIMIT
    schema_cache_ttl: float = DEFAULT_SCHEMA_TTL
    log_level: str = DEFAULT_LOG_LEVEL

    def __post_init__(self):
        if not 0 <= self.limit <= MAX_LIMIT:
            raise ConfigurationError(f"Default limit must be between 0 and {MAX_LIMIT}, got {self.limit}")
        if not 0 <= self.port <= MAX_PORT:
            raise ConfigurationError(f"Port must be between 0 and {MAX_PORT}, got {self.port}")
        if self.order not in ("asc", "desc"):
            raise ConfigurationError(f"Sorting direction must be 'asc' or 'desc', got {self.order!r}")

    @property
    def route(self) -> str:
        return "/" + self.table


def _bounded_int(maximum: int):
    """argparse type accepting integers in 0..maximum."""

    def _parse(value: str) -> int:
        try:
            n = int(value)
        except ValueError:
            raise argparse.ArgumentTypeError(f"invalid integer: {value!r}")
        if n < 0:
            raise argparse.ArgumentTypeError(f"must not be negative: {value!r}")
        if n > maximum:
            raise argparse.ArgumentTypeError(f"must not exceed {maximum}: {value!r}")
        return n

    return _parse


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="API for secure querying of SQLite databases",
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-d", "--db", default=DEFAULT_DB_PATH, metavar="PATH",
                        help="Path to the SQLite database file (default: %(default)s)")
    parser.add_argument("-p", "--port", type=_bounded_int(MAX_PORT), default=DEFAULT_PORT, metavar="PORT",
                        help="Port for the HTTP server (default: %(default)s)")
    parser.add_argument("-t", "--table", default="", metavar="TABLE",
                        help="Name of the table to query (required)")
    parser.add_argument("-e", "--exclude", default="", metavar="COLS",
                        help="Columns to exclude (comma-separated)")
    parser.add_argument("-s", "--sort", default="", metavar="COL",
                        help="Column for sorting")
    parser.add_argument("-o", "--order", type=str.lower, choices=("asc", "desc"), default=DEFAULT_ORDER,
                        metavar="DIR", help="Sorting direction (asc|desc, default: %(default)s)")
    parser.add_argument("-l", "--limit", type=_bounded_int(MAX_LIMIT), default=DEFAULT_LIMIT, metavar="N",
                        help="Default number of results to return (0 for all, default: %(default)s)")
    parser.add_argument("--host", default=DEFAULT_HOST,
                        help="Interface to listen on (default: %(default)s)")
    parser.add_argument("--log-level", default=DEFAULT_LOG_LEVEL, type=str.upper,
                        choices=("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"),
                        help="Logging level (default: %(default)s)")
    parser.add_argument("--schema-ttl", type=float, default=DEFAULT_SCHEMA_TTL, metavar="SECONDS",
                        help="Cache the table schema for this many seconds (default: %(default)s, always re-read)")
    return parser


def config_from_args(args: argparse.Namespace) -> ServerConfig:
    if not args.table:
        raise ConfigurationError("The table name must be specified (use --table or -t)")
    return ServerConfig(
        table=args.table,
        db_path=args.db,
        host=args.host,
        port=args.port,
        exclude=tuple(split_identifiers(args.exclude)),
        sort=args.sort or None,
        order=args.order,
        limit=args.limit,
        schema_cache_ttl=args.schema_ttl,
        log_level=args.log_level,
    )


def load_config(argv: Optional[Sequence[str]] = None) -> ServerConfig:
    return config_from_args(build_arg_parser().parse_args(argv))
