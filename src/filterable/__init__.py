"""Fluent query builder and client for Filterable REST APIs."""

__version__ = "0.1.0"

from filterable.errors import (  # noqa: E402
    DuplicateVariableError,
    FilterableError,
    TransportError,
    UnknownVariableError,
)
from filterable.models import Model, ModelCollection, Ordering, Resource  # noqa: E402
from filterable.query import QueryBuilder, parse_query_string  # noqa: E402
from filterable.transport import RequestsTransport  # noqa: E402

__all__ = [
    "__version__",
    "DuplicateVariableError",
    "FilterableError",
    "TransportError",
    "UnknownVariableError",
    "Model",
    "ModelCollection",
    "Ordering",
    "Resource",
    "QueryBuilder",
    "parse_query_string",
    "RequestsTransport",
]
