"""Models, collections and the resource descriptor a query builder works against."""

from concurrent.futures import Future
from typing import Any, Dict, Iterator, List, Literal, Optional, Protocol, Sequence, Type

from pydantic import BaseModel

from filterable.query.builder import ErrorCallback, QueryBuilder, SuccessCallback

SortDirection = Literal["asc", "desc"]


class Ordering(BaseModel):
    """One ordering descriptor for QueryBuilder.order_by()."""

    attribute: str
    direction: SortDirection = "asc"


class Model:
    """A record returned by a Filterable API."""

    def __init__(self, attributes: Optional[Dict[str, Any]] = None):
        self.attributes: Dict[str, Any] = dict(attributes or {})
        self.exists = False  # True once the record is known to be persisted

    def get(self, key: str, default: Any = None) -> Any:
        return self.attributes.get(key, default)

    def __getitem__(self, key: str) -> Any:
        return self.attributes[key]

    def __contains__(self, key: str) -> bool:
        return key in self.attributes

    def to_dict(self) -> Dict[str, Any]:
        return dict(self.attributes)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Model):
            return NotImplemented
        return type(self) is type(other) and self.attributes == other.attributes and self.exists == other.exists

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.attributes!r}, exists={self.exists})"


class ModelCollection:
    """
    A page of models bound to the query that produced it.

    The back-reference lets the collection re-issue the same query for
    neighbouring pages.
    """

    def __init__(self, models: Optional[Sequence[Model]] = None):
        self.models: List[Model] = list(models or [])
        self._query: Optional[QueryBuilder] = None

    def set_query(self, query: QueryBuilder) -> "ModelCollection":
        self._query = query
        return self

    @property
    def query(self) -> Optional[QueryBuilder]:
        return self._query

    def _require_query(self) -> QueryBuilder:
        if self._query is None:
            raise RuntimeError("Collection is not bound to a query")
        return self._query

    def next_page(
        self,
        success: Optional[SuccessCallback] = None,
        error: Optional[ErrorCallback] = None,
    ) -> Future:
        """Advance the bound query one page and fetch it."""
        return self._require_query().increment_page().get(success, error)

    def previous_page(
        self,
        success: Optional[SuccessCallback] = None,
        error: Optional[ErrorCallback] = None,
    ) -> Future:
        """Step the bound query back one page and fetch it."""
        return self._require_query().decrement_page().get(success, error)

    def to_list(self) -> List[Dict[str, Any]]:
        return [model.to_dict() for model in self.models]

    def __iter__(self) -> Iterator[Model]:
        return iter(self.models)

    def __len__(self) -> int:
        return len(self.models)

    def __getitem__(self, index: int) -> Model:
        return self.models[index]


class ModelDescriptor(Protocol):
    """What a QueryBuilder needs from the resource it queries."""

    url: str

    def new_model(self, record: Any) -> Model:
        ...

    def new_collection(self, models: List[Model]) -> ModelCollection:
        ...


class Resource:
    """
    A remote resource collection, e.g. https://api.example.com/users.

    Acts as the model descriptor for the builders it creates.
    """

    def __init__(
        self,
        url: str,
        model_class: Type[Model] = Model,
        collection_class: Type[ModelCollection] = ModelCollection,
        transport=None,
    ):
        self.url = url.rstrip("/")
        self.model_class = model_class
        self.collection_class = collection_class
        self.transport = transport

    def new_model(self, record: Any) -> Model:
        return self.model_class(record)

    def new_collection(self, models: List[Model]) -> ModelCollection:
        return self.collection_class(models)

    def query(self) -> QueryBuilder:
        """Start a new query against this resource."""
        return QueryBuilder(self, transport=self.transport)

    def __repr__(self) -> str:
        return f"Resource({self.url!r})"
