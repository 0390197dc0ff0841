from __future__ import annotations

import dataclasses
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from .errors import RuleDefinitionError

T = TypeVar("T")


class Condition(Generic[T]):
    """Base class for all conditions.

    A condition is a stateless predicate over an input record. Conditions
    are immutable; the description is fixed when the condition is built.

    Subclasses must implement ``validate()``. Only ``Else`` overrides
    ``is_always_true()``; the tree compiler uses it to route an entry to
    the fallback slot instead of the ordered branch list.

    Attributes:
        description: Human-readable text used in tree renderings.
    """

    description: str = ""

    def validate(self, data: T) -> bool:
        """Return True if ``data`` satisfies this condition.

        Raises:
            NotImplementedError: If not overridden by a subclass.
        """
        raise NotImplementedError

    def is_always_true(self) -> bool:
        return False

    def described_as(self, description: str) -> Condition[T]:
        """Return a copy of this condition with an explicit description."""
        return dataclasses.replace(self, description=description)

    def __and__(self, other: Condition[T]) -> Condition[T]:
        return and_(self, other)

    def __or__(self, other: Condition[T]) -> Condition[T]:
        return or_(self, other)

    def __invert__(self) -> Condition[T]:
        return not_(self)

    def __str__(self) -> str:
        return self.description


def _check_composable(conditions: tuple[Any, ...], combinator: str) -> None:
    for cond in conditions:
        if not isinstance(cond, Condition):
            raise RuleDefinitionError(f"{combinator} expects conditions, got {type(cond).__name__}")
        if cond.is_always_true():
            raise RuleDefinitionError(f"ELSE cannot be composed with {combinator}")


@dataclass(frozen=True)
class And(Condition[T]):
    """Logical AND of nested conditions.

    Evaluates nested conditions in order and short-circuits on the first
    False. True for an empty list.
    """

    conditions: tuple[Condition[T], ...]
    description: str = ""

    def __post_init__(self) -> None:
        _check_composable(self.conditions, "AND")
        if not self.description:
            inner = ",".join(c.description for c in self.conditions)
            object.__setattr__(self, "description", f"AND({inner})")

    def validate(self, data: T) -> bool:
        for cond in self.conditions:
            if not cond.validate(data):
                return False
        return True


@dataclass(frozen=True)
class Or(Condition[T]):
    """Logical OR of nested conditions.

    Evaluates nested conditions in order and short-circuits on the first
    True. False for an empty list.
    """

    conditions: tuple[Condition[T], ...]
    description: str = ""

    def __post_init__(self) -> None:
        _check_composable(self.conditions, "OR")
        if not self.description:
            inner = ",".join(c.description for c in self.conditions)
            object.__setattr__(self, "description", f"OR({inner})")

    def validate(self, data: T) -> bool:
        for cond in self.conditions:
            if cond.validate(data):
                return True
        return False


@dataclass(frozen=True)
class Not(Condition[T]):
    condition: Condition[T]
    description: str = ""

    def __post_init__(self) -> None:
        _check_composable((self.condition,), "NOT")
        if not self.description:
            object.__setattr__(self, "description", f"NOT({self.condition.description})")

    def validate(self, data: T) -> bool:
        return not self.condition.validate(data)


@dataclass(frozen=True)
class Else(Condition[Any]):
    """The fallback marker.

    Always true. Only meaningful as the condition of an ``if_()`` entry,
    where it makes the target the node's fallback runner.
    """

    description: str = "ELSE"

    def validate(self, data: Any) -> bool:
        return True

    def is_always_true(self) -> bool:
        return True


@dataclass(frozen=True)
class Predicate(Condition[T]):
    """Condition built from an arbitrary ``data -> bool`` callable."""

    fn: Callable[[T], bool]
    description: str = ""

    def __post_init__(self) -> None:
        if not self.description:
            name = getattr(self.fn, "__name__", None) or type(self).__name__
            object.__setattr__(self, "description", name)

    def validate(self, data: T) -> bool:
        return bool(self.fn(data))


ELSE = Else()


def and_(*conditions: Condition[T]) -> And[T]:
    return And(tuple(conditions))


def or_(*conditions: Condition[T]) -> Or[T]:
    return Or(tuple(conditions))


def not_(condition: Condition[T]) -> Not[T]:
    return Not(condition)


def condition(fn: Callable[[T], bool], description: str | None = None) -> Predicate[T]:
    """Wrap a plain predicate function into a ``Condition``.

    Args:
        fn: Callable taking the input record and returning a bool.
        description: Text for tree renderings. Defaults to the function's
            ``__name__``.
    """
    return Predicate(fn, description or "")
