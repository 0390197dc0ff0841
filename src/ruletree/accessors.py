from __future__ import annotations

import functools
import operator
from collections.abc import Callable, Container
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

from .conditions import Condition
from .errors import RuleDefinitionError, RuleEvaluationError
from .utils import deep_get

T = TypeVar("T")
V = TypeVar("V")


def _contains(value: Any, collection: Container[Any]) -> bool:
    return value in collection


# op name -> (description symbol, comparison). The projected value is always
# the left operand.
_OPERATORS: dict[str, tuple[str, Callable[[Any, Any], bool]]] = {
    "eq": ("=", operator.eq),
    "ne": ("!=", operator.ne),
    "lt": ("<", operator.lt),
    "le": ("<=", operator.le),
    "gt": (">", operator.gt),
    "ge": (">=", operator.ge),
    "in": (" in ", _contains),
}


@dataclass(frozen=True)
class Constant:
    """Operand holding a fixed value."""

    value: Any

    def resolve(self, data: Any) -> Any:
        return self.value

    def describe(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Projection:
    """Operand read from the same input record through another accessor."""

    accessor: Accessor[Any, Any]

    def resolve(self, data: Any) -> Any:
        return self.accessor.get_value(data)

    def describe(self) -> str:
        return self.accessor.name


Operand = Union[Constant, Projection]


def as_operand(other: Any) -> Operand:
    """Wrap a comparison argument: accessors become projections, anything
    else is a constant."""
    if isinstance(other, Accessor):
        return Projection(other)
    return Constant(other)


@dataclass(frozen=True)
class Comparison(Condition[T]):
    """Compares an accessor's value with an operand using a named operator.

    Supported operators:
        - eq: Equal to
        - ne: Not equal to
        - gt: Greater than
        - ge: Greater than or equal to
        - lt: Less than
        - le: Less than or equal to
        - in: Projected value is a member of the operand

    Both sides are computed on every ``validate()`` call; nothing is
    cached between inputs.

    Attributes:
        accessor: Accessor producing the left-hand value.
        op: Operator name, one of the keys above.
        operand: ``Constant`` or ``Projection`` for the right-hand value.
    """

    accessor: Accessor[T, Any]
    op: str
    operand: Operand
    description: str = ""

    def __post_init__(self) -> None:
        if self.op not in _OPERATORS:
            raise RuleDefinitionError(f"Unknown comparison op '{self.op}'")
        if not self.description:
            symbol = _OPERATORS[self.op][0]
            object.__setattr__(
                self, "description", f"{self.accessor.name}{symbol}{self.operand.describe()}"
            )

    def validate(self, data: T) -> bool:
        compare = _OPERATORS[self.op][1]
        left = self.accessor.get_value(data)
        right = self.operand.resolve(data)
        try:
            return bool(compare(left, right))
        except TypeError as exc:
            raise RuleEvaluationError(f"cannot evaluate '{self.description}': {exc}") from exc


@dataclass(frozen=True)
class ValueTest(Condition[T]):
    """Applies an arbitrary predicate to an accessor's value."""

    accessor: Accessor[T, Any]
    predicate: Callable[[Any], bool]
    description: str = "TEST"

    def validate(self, data: T) -> bool:
        return bool(self.predicate(self.accessor.get_value(data)))


def _is_none(value: Any) -> bool:
    return value is None


def _is_not_none(value: Any) -> bool:
    return value is not None


@dataclass(frozen=True)
class Accessor(Generic[T, V]):
    """A named, read-only projection from an input record to a value.

    Accessors are the source of comparison conditions. Every builder takes
    either a constant or another ``Accessor``; in the latter case both
    accessors are read from the same input when the condition validates.

    Attributes:
        name: Symbolic name used in condition descriptions.
        getter: Callable projecting the input record to a value.

    Example:
        >>> age = Accessor("age", lambda s: s["age"])
        >>> age.gt(11).validate({"age": 12})
        True
        >>> age.gt(11).description
        'age>11'
    """

    name: str
    getter: Callable[[T], V]

    @classmethod
    def path(cls, path: str, name: str | None = None) -> Accessor[Any, Any]:
        """Build an accessor that reads a dot-separated path with ``deep_get()``.

        Args:
            path: Path such as ``"user.age"`` or ``"items.0.id"``.
            name: Symbolic name. Defaults to the path itself.
        """
        return cls(name or path, functools.partial(deep_get, path=path))

    def get_value(self, data: T) -> V:
        return self.getter(data)

    def _compare(self, op: str, other: Any) -> Comparison[T]:
        return Comparison(self, op, as_operand(other))

    def eq(self, other: Any) -> Comparison[T]:
        return self._compare("eq", other)

    def ne(self, other: Any) -> Comparison[T]:
        return self._compare("ne", other)

    def lt(self, other: Any) -> Comparison[T]:
        return self._compare("lt", other)

    def le(self, other: Any) -> Comparison[T]:
        return self._compare("le", other)

    def gt(self, other: Any) -> Comparison[T]:
        return self._compare("gt", other)

    def ge(self, other: Any) -> Comparison[T]:
        return self._compare("ge", other)

    def in_(self, other: Any) -> Comparison[T]:
        """True if the value is a member of ``other`` (a collection, or an
        accessor projecting one)."""
        return self._compare("in", other)

    def test(self, predicate: Callable[[V], bool], description: str | None = None) -> ValueTest[T]:
        return ValueTest(self, predicate, description or "TEST")

    def is_null(self) -> ValueTest[T]:
        return ValueTest(self, _is_none, f"{self.name} is null")

    def is_not_null(self) -> ValueTest[T]:
        return ValueTest(self, _is_not_none, f"{self.name} is not null")


def accessor(name: str, getter: Callable[[T], V]) -> Accessor[T, V]:
    return Accessor(name, getter)
