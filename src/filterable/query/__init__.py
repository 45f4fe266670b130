"""Query state and serialization for Filterable APIs."""

from .builder import QueryBuilder
from .constraints import Constraint, ConstraintStore
from .encoding import ParsedQuery, encode_form, parse_query_string
from .parameters import DEFAULT_LIMIT, DEFAULT_PAGE, Parameter, ParameterStore

__all__ = [
    "QueryBuilder",
    "Constraint",
    "ConstraintStore",
    "Parameter",
    "ParameterStore",
    "DEFAULT_LIMIT",
    "DEFAULT_PAGE",
    "ParsedQuery",
    "encode_form",
    "parse_query_string",
]
