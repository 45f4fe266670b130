"""Filter constraints applied to a query."""

from typing import Any, Callable, Dict, Iterator, Optional

from pydantic import BaseModel


class Constraint(BaseModel):
    """A single filter condition; at most one per filter name."""

    filter: str
    value: Any = None


class ConstraintStore:
    """Ordered, key-unique collection of constraints keyed by filter name."""

    def __init__(self):
        self._constraints: Dict[str, Constraint] = {}

    def get(self, filter_name: str) -> Optional[Constraint]:
        return self._constraints.get(str(filter_name))

    def has(self, filter_name: str) -> bool:
        return str(filter_name) in self._constraints

    def upsert(self, filter_name: str, value: Any) -> Constraint:
        """Insert a constraint, or overwrite the value of the existing one in place."""
        filter_name = str(filter_name)
        constraint = self._constraints.get(filter_name)
        if constraint is None:
            constraint = Constraint(filter=filter_name, value=value)
            self._constraints[filter_name] = constraint
        else:
            constraint.value = value
        return constraint

    def for_each(self, visit: Callable[[Constraint], None]) -> None:
        for constraint in self:
            visit(constraint)

    def __iter__(self) -> Iterator[Constraint]:
        return iter(list(self._constraints.values()))

    def __len__(self) -> int:
        return len(self._constraints)
