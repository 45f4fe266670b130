"""Fluent query builder for a Filterable API resource."""

from concurrent.futures import Future
from copy import deepcopy
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterable, List, Mapping, Optional

from filterable.query.constraints import ConstraintStore
from filterable.query.encoding import constraint_pairs, encode_form, parameter_pairs
from filterable.query.parameters import ParameterStore
from filterable.transport import StatusHandler, get_default_transport
from filterable.utils.logging import get_logger

if TYPE_CHECKING:
    from filterable.models import Model, ModelCollection, ModelDescriptor

logger = get_logger(__name__)

ORDER_VARIABLE = "order"
ERROR_STATUS_CODES = (422, 500)

SuccessCallback = Callable[..., Any]
ErrorCallback = Callable[[Any, int], Any]


def _is_composite(value: Any) -> bool:
    return isinstance(value, (list, tuple, dict, set, frozenset))


class QueryBuilder:
    """
    Builds query strings for a Filterable API and executes them.

    Constraints are rendered first as filters[<name>][]=<value>, followed by
    the appended parameters (limit, page, order, extras) in insertion order.
    """

    def __init__(self, model: "ModelDescriptor", transport=None):
        """
        Initialize builder.

        Args:
            model: Model descriptor providing the resource url and model/collection factories
            transport: Optional transport; defaults to the descriptor's transport, then
                to the shared default transport.
        """
        self.model = model
        self.transport = transport if transport is not None else getattr(model, "transport", None)
        self._constraints = ConstraintStore()
        self.appends = ParameterStore()

    # Constraints

    def get_constraint_value(self, filter_name: str) -> Any:
        """
        Get the value of a constraint applied to the query.

        Composite values are deep-copied so callers cannot mutate the query
        through the returned reference.

        Returns:
            The constraint value, or None if the filter is not set
        """
        constraint = self._constraints.get(filter_name)
        if constraint is None:
            return None
        return deepcopy(constraint.value) if _is_composite(constraint.value) else constraint.value

    def has_constraint(self, filter_name: str) -> bool:
        return self._constraints.has(filter_name)

    def where(self, filter_name: str, value: Any) -> "QueryBuilder":
        """Add a where condition, replacing the value of an existing one."""
        self._constraints.upsert(filter_name, value)
        return self

    # Ordering and pagination

    def order_by(self, *orderings: Any) -> "QueryBuilder":
        """
        Set the orderings applied to the query, replacing any previous ones.

        Args:
            *orderings: Ordering descriptors, e.g. {"attribute": "name", "direction": "asc"}
                or Ordering models. They are passed through untouched.
        """
        if self.has_variable(ORDER_VARIABLE):
            self.update_variable(ORDER_VARIABLE, list(orderings))
        else:
            self.append(ORDER_VARIABLE, list(orderings))
        return self

    def ordering_by(self) -> Optional[List[Any]]:
        """Get a copy of the current orderings, or None if the query is unordered."""
        if not self.has_variable(ORDER_VARIABLE):
            return None
        return deepcopy(self.get_variable(ORDER_VARIABLE))

    def get_limit(self) -> int:
        return self.get_variable("limit") if self.has_variable("limit") else -1

    def set_limit(self, value: int) -> "QueryBuilder":
        if self.has_variable("limit"):
            self.update_variable("limit", value)
        else:
            self.append("limit", value)
        return self

    def current_page(self) -> int:
        return self.appends.get("page").value

    def set_page(self, page: int) -> "QueryBuilder":
        self.appends.get("page").value = page
        return self

    def increment_page(self) -> "QueryBuilder":
        return self.set_page(self.current_page() + 1)

    def decrement_page(self) -> "QueryBuilder":
        return self.set_page(self.current_page() - 1)

    # Query variables

    def append(self, name: str, value: Any) -> "QueryBuilder":
        """
        Append a variable to the query string.

        Raises:
            DuplicateVariableError: If the variable has already been appended
        """
        self.appends.append(name, value)
        return self

    def has_variable(self, name: str) -> bool:
        return self.appends.has(name)

    def get_variable(self, name: str, default: Any = None) -> Any:
        parameter = self.appends.get(name)
        return parameter.value if parameter is not None else default

    def update_variable(self, name: str, value: Any) -> "QueryBuilder":
        """
        Update a previously appended variable.

        Raises:
            UnknownVariableError: If the variable was never appended
        """
        self.appends.update(name, value)
        return self

    # Serialization

    def to_query_string(self) -> str:
        """
        Generate the query string, including the leading "?".

        Returns:
            Query string such as "?filters[status][]=active&limit=15&page=1",
            or "" when there is nothing to send
        """
        query_string = ""
        first = True

        for constraint in self._constraints:
            for key, value in constraint_pairs(constraint.filter, constraint.value):
                query_string += "?" if first else "&"
                query_string += f"{key}={value}"
                first = False

        for parameter in self.appends:
            for key, value in parameter_pairs(parameter.name, parameter.value):
                query_string += "?" if first else "&"
                query_string += f"{key}={value}"
                first = False

        return query_string

    def to_url(self, suffix: str = "", with_query: bool = True) -> str:
        """Resource url plus an optional path suffix and the query string."""
        url = self.model.url + suffix
        return url + self.to_query_string() if with_query else url

    # Record wrapping

    def new_model(self, record: Any) -> "Model":
        return self.model.new_model(record)

    def encapsulate_data(self, records: Iterable[Any]) -> List["Model"]:
        """Wrap raw records as models marked as existing on the server."""
        models = []
        for record in records:
            model = self.new_model(record)
            model.exists = True
            models.append(model)
        return models

    def _collect_data(self, models: List["Model"]) -> "ModelCollection":
        collection = self.model.new_collection(models)
        collection.set_query(self)
        return collection

    # Requests

    def get(
        self,
        success: Optional[SuccessCallback] = None,
        error: Optional[ErrorCallback] = None,
    ) -> Future:
        """
        Execute the query.

        Args:
            success: Called with (collection, payload) on 200
            error: Called with (response_body, status_code) on 422 or 500

        Returns:
            Future resolving to the collection, or None on an error status
        """
        def on_success(payload: Dict[str, Any]) -> "ModelCollection":
            collection = self._collect_data(self.encapsulate_data(payload["data"]))
            if success is not None:
                success(collection, payload)
            return collection

        return self._send("GET", self.to_url(), on_success, error)

    def update(
        self,
        attributes: Mapping[str, Any],
        success: Optional[SuccessCallback] = None,
        error: Optional[ErrorCallback] = None,
    ) -> Future:
        """
        Update every record matched by the query with the given attributes.

        Args:
            attributes: Attributes to set, sent as form fields
            success: Called with (collection, payload) on 200
            error: Called with (response_body, status_code) on 422 or 500
        """
        def on_success(payload: Dict[str, Any]) -> "ModelCollection":
            collection = self._collect_data(self.encapsulate_data(payload["data"]))
            if success is not None:
                success(collection, payload)
            return collection

        return self._send("POST", self.to_url("/update"), on_success, error, data=encode_form(attributes))

    def insert(
        self,
        attributes: Mapping[str, Any],
        success: Optional[SuccessCallback] = None,
        error: Optional[ErrorCallback] = None,
    ) -> Future:
        """
        Insert a record; the query string is not sent.

        Args:
            attributes: Attributes of the new record, sent as form fields
            success: Called with the created model on 200
            error: Called with (response_body, status_code) on 422 or 500
        """
        def on_success(payload: Any) -> "Model":
            model = self.encapsulate_data([payload])[0]
            if success is not None:
                success(model)
            return model

        return self._send(
            "POST",
            self.to_url("/store", with_query=False),
            on_success,
            error,
            data=encode_form(attributes),
        )

    def delete_results(
        self,
        success: Optional[SuccessCallback] = None,
        error: Optional[ErrorCallback] = None,
    ) -> Future:
        """
        Delete every record matched by the query.

        Args:
            success: Called with the collection of deleted records on 200
            error: Called with (response_body, status_code) on 422 or 500,
                and with (None, 403) when the delete is forbidden
        """
        def on_success(payload: Any) -> "ModelCollection":
            records = payload.get("data", []) if isinstance(payload, Mapping) else payload
            collection = self._collect_data(self.encapsulate_data(records or []))
            if success is not None:
                success(collection)
            return collection

        def on_forbidden(_body: Any) -> None:
            if error is not None:
                error(None, 403)
            return None

        return self._send(
            "POST",
            self.to_url("/delete"),
            on_success,
            error,
            extra_handlers={403: on_forbidden},
        )

    def _send(
        self,
        method: str,
        url: str,
        on_success: StatusHandler,
        error: Optional[ErrorCallback],
        *,
        data: Any = None,
        extra_handlers: Optional[Dict[int, StatusHandler]] = None,
    ) -> Future:
        handlers: Dict[int, StatusHandler] = {200: on_success}
        for status_code in ERROR_STATUS_CODES:
            handlers[status_code] = _error_handler(error, status_code)
        if extra_handlers:
            handlers.update(extra_handlers)

        if self.transport is None:
            self.transport = get_default_transport()

        logger.debug(f"Issuing {method} {url}")
        return self.transport.request(
            method,
            url,
            handlers=handlers,
            headers={"Accept": "application/json"},
            data=data,
        )


def _error_handler(error: Optional[ErrorCallback], status_code: int) -> StatusHandler:
    def handle(body: Any) -> None:
        if error is not None:
            error(body, status_code)
        return None

    return handle
