# main.py
import logging
import sys
from typing import Mapping, Optional, Sequence, Tuple

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

import config
from config import ServerConfig
from db.sqlite_client import SQLiteClient
from errors import ConfigurationError, MethodNotAllowed, QueryApiError, SerializationError
from models import QuerySpec, ResultRow
from query_builder import build_query, effective_limit, filter_columns
from row_mapper import map_rows
from schema_cache import SchemaCache

LOG = logging.getLogger(__name__)

# every verb is routed to the handler so non-GET requests get our own 405 body
ROUTE_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def resolve_query_spec(args: Mapping[str, str], columns, cfg: ServerConfig) -> QuerySpec:
    """Merge URL parameters with the process defaults; a non-empty URL value always wins."""
    return QuerySpec(
        columns=list(columns),
        filters=args,
        sort_column=args.get("sort") or cfg.sort,
        sort_direction=args.get("order") or cfg.order,
        limit=effective_limit(args.get("limit"), cfg.limit) or None,
    )


def serialize_rows(app: Flask, rows: Sequence[ResultRow]) -> str:
    try:
        return app.json.dumps(list(rows), allow_nan=False)
    except (TypeError, ValueError) as e:
        raise SerializationError(f"error encoding response: {e}") from e


def create_app(cfg: ServerConfig, client: SQLiteClient, schema: Optional[SchemaCache] = None) -> Flask:
    app = Flask(__name__)
    # keep row keys in column order
    app.json.sort_keys = False
    schema = schema or SchemaCache(client, ttl=cfg.schema_cache_ttl)

    def handle_data_request():
        if request.method != "GET":
            raise MethodNotAllowed("Method not allowed")

        column_info = schema.get_table_columns(cfg.table)
        columns = filter_columns(column_info, cfg.exclude)
        spec = resolve_query_spec(request.args, columns, cfg)
        sql, params = build_query(cfg.table, spec)

        LOG.debug("Executing SQL: %s with params: %s", sql, params)
        with client.query(sql, params) as cur:
            rows = map_rows(cur, columns)

        body = serialize_rows(app, rows)
        LOG.info("GET %s -> %d rows", request.full_path, len(rows))
        return app.response_class(body, status=200, mimetype="application/json")

    app.add_url_rule(cfg.route, "table_rows", handle_data_request,
                     methods=ROUTE_METHODS, provide_automatic_options=False)

    @app.errorhandler(QueryApiError)
    def handle_api_error(e: QueryApiError):
        if e.status_code >= 500:
            LOG.error("%s %s failed: %s", request.method, request.full_path, e.message)
        else:
            LOG.warning("%s %s rejected: %s", request.method, request.full_path, e.message)
        resp = jsonify({"error": e.message})
        resp.status_code = e.status_code
        if isinstance(e, MethodNotAllowed):
            resp.headers["Allow"] = "GET"
        return resp

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return jsonify({"error": e.description}), e.code

    return app


def bootstrap(cfg: ServerConfig) -> Tuple[Flask, SQLiteClient]:
    """Open the database, check the table is there and build the app. Raises ConfigurationError."""
    client = SQLiteClient(cfg.db_path)
    client.check_connection()
    if not client.table_exists(cfg.table):
        raise ConfigurationError(f"Table '{cfg.table}' not found in database '{client.db_path}'")
    LOG.info("Using database %s", client.db_path)
    return create_app(cfg, client), client


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = config.build_arg_parser()
    args = parser.parse_args(argv)
    try:
        cfg = config.config_from_args(args)
    except ConfigurationError as e:
        print(f"Error: {e.message}\n", file=sys.stderr)
        parser.print_help(sys.stderr)
        return 1

    logging.basicConfig(
        level=cfg.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        app, _ = bootstrap(cfg)
    except ConfigurationError as e:
        LOG.critical(e.message)
        return 1

    LOG.info("Server started on port %s", cfg.port)
    LOG.info("Access at: http://localhost:%s%s", cfg.port, cfg.route)
    try:
        app.run(host=cfg.host, port=cfg.port, threaded=True)
    except (OSError, OverflowError) as e:
        LOG.critical("Could not start listener on %s:%s: %s", cfg.host, cfg.port, e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
