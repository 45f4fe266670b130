"""Appended query parameters (pagination, ordering, arbitrary extras)."""

from typing import Any, Callable, Dict, Iterator, Optional

from pydantic import BaseModel

from filterable.errors import DuplicateVariableError, UnknownVariableError

DEFAULT_LIMIT = 15
DEFAULT_PAGE = 1


class Parameter(BaseModel):
    """A named query parameter."""

    name: str
    value: Any = None


class ParameterStore:
    """
    Ordered, key-unique collection of query parameters.

    Unlike constraints, parameters distinguish appending from updating:
    appending an existing name and updating a missing one are both errors.
    The store starts with limit and page so pagination is always present.
    """

    def __init__(self, limit: int = DEFAULT_LIMIT, page: int = DEFAULT_PAGE):
        self._parameters: Dict[str, Parameter] = {}
        self.append("limit", limit)
        self.append("page", page)

    def get(self, name: str) -> Optional[Parameter]:
        return self._parameters.get(str(name))

    def has(self, name: str) -> bool:
        return str(name) in self._parameters

    def append(self, name: str, value: Any) -> Parameter:
        """
        Add a new parameter.

        Raises:
            DuplicateVariableError: If a parameter with this name already exists
        """
        name = str(name)
        if name in self._parameters:
            raise DuplicateVariableError(name)
        parameter = Parameter(name=name, value=value)
        self._parameters[name] = parameter
        return parameter

    def update(self, name: str, value: Any) -> Parameter:
        """
        Replace the value of an existing parameter.

        Raises:
            UnknownVariableError: If no parameter with this name exists
        """
        parameter = self._parameters.get(str(name))
        if parameter is None:
            raise UnknownVariableError(name)
        parameter.value = value
        return parameter

    def for_each(self, visit: Callable[[Parameter], None]) -> None:
        for parameter in self:
            visit(parameter)

    def __iter__(self) -> Iterator[Parameter]:
        return iter(list(self._parameters.values()))

    def __len__(self) -> int:
        return len(self._parameters)
