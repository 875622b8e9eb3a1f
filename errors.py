# errors.py
# Exception hierarchy shared by the query builder, the storage client and the Flask handlers.
# Each error carries the HTTP status used when it escapes a request.


class QueryApiError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(QueryApiError):
    """Bad startup configuration (missing table, unreadable db path). Fatal before serving."""


# -------------------------
# per-request client errors (4xx)
# -------------------------
class ClientRequestError(QueryApiError):
    status_code = 400


class MethodNotAllowed(ClientRequestError):
    status_code = 405


class InvalidSortColumn(ClientRequestError):
    pass


class InvalidSortDirection(ClientRequestError):
    pass


class InvalidLimit(ClientRequestError):
    pass


class NoColumnsAvailable(ClientRequestError):
    pass


# -------------------------
# per-request server errors (5xx)
# -------------------------
class StorageError(QueryApiError):
    status_code = 500


class SchemaError(StorageError):
    pass


class SerializationError(QueryApiError):
    status_code = 500
