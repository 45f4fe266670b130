"""Exceptions raised by the query builder."""


class FilterableError(Exception):
    """Base class for programming errors raised by filterable."""


class DuplicateVariableError(FilterableError, KeyError):
    """Raised when appending a query variable that already exists."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f'Variable "{name}" has already been appended!')

    def __str__(self) -> str:
        return self.args[0]


class UnknownVariableError(FilterableError, KeyError):
    """Raised when updating a query variable that was never appended."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f'Cannot update unknown variable with name "{name}"!')

    def __str__(self) -> str:
        return self.args[0]


class TransportError(FilterableError):
    """A request never produced an HTTP response (connection error, timeout)."""

    def __init__(self, method: str, url: str, cause: Exception):
        self.method = method
        self.url = url
        super().__init__(f"{method} {url} failed: {cause}")
