from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from .conditions import Condition
from .errors import NoMatchError, RuleAssertionError
from .outcome import MATCHED, NoMatch, Outcome, unwrap

if TYPE_CHECKING:
    from .nodes import If

logger = logging.getLogger(__name__)

T = TypeVar("T")

ErrorHandler = Callable[[Any, Exception], None]
"""Callback receiving the input record and the captured exception."""


class Runner(Generic[T]):
    """Base class for everything that can be executed against an input.

    A runner either performs its side effects and returns normally, or
    reports that no branch applied, or raises. There are two ways to
    drive it:

    - ``run(data)`` returns ``None`` on success and raises
      ``NoMatchError`` when nothing applied.
    - ``attempt(data)`` returns an ``Outcome`` instead: ``Matched`` on
      success, ``NoMatch`` when nothing applied. Policies use this form so
      that "declined" travels as a value rather than an exception.

    Subclasses override one of the two; the base class derives the other.
    Any exception other than ``NoMatchError`` propagates from both.

    Attributes:
        description: Human-readable text used in tree renderings.
    """

    description: str = ""

    def run(self, data: T) -> None:
        """Run against ``data``, raising ``NoMatchError`` if nothing applied.

        Raises:
            NotImplementedError: If the subclass overrides neither ``run()``
                nor ``attempt()``.
        """
        if type(self).attempt is Runner.attempt:
            raise NotImplementedError(f"{type(self).__name__} must override run() or attempt()")
        unwrap(self.attempt(data))

    def attempt(self, data: T) -> Outcome:
        try:
            self.run(data)
        except NoMatchError as exc:
            return NoMatch.from_error(exc)
        return MATCHED

    def then(self, *steps: Runner[T] | If) -> Chain[T]:
        """Chain this runner with what follows.

        ``then(runner)`` builds ``Chain(self, runner)``. ``then(if_(...), ...)``
        compiles the entries into a tree and chains it after this runner.
        """
        from .nodes import If, node
        from .tree import compile_tree

        if any(isinstance(s, If) for s in steps):
            return Chain((self, compile_tree(node(*steps))))
        return Chain((self, *steps))

    def capture(
        self,
        on_rejected: Runner[T] | None = None,
        handler: ErrorHandler | None = None,
    ) -> Capture[T]:
        return Capture(self, on_rejected, handler)

    def __str__(self) -> str:
        return self.description


@dataclass(frozen=True)
class Action(Runner[T]):
    """Leaf runner wrapping a side-effecting callable ``data -> None``.

    The callable may raise ``NoMatchError`` to decline the input; any other
    exception is a domain error and propagates untouched.
    """

    fn: Callable[[T], Any]
    description: str = ""

    def __post_init__(self) -> None:
        if not self.description:
            name = getattr(self.fn, "__name__", None) or type(self).__name__
            object.__setattr__(self, "description", name)

    def run(self, data: T) -> None:
        self.fn(data)


@dataclass(frozen=True)
class Chain(Runner[T]):
    """Runs runners strictly in order.

    The first runner that raises, or reports no match, stops the chain;
    the remaining runners never execute.
    """

    runners: tuple[Runner[T], ...]
    description: str = ""

    def __post_init__(self) -> None:
        if not self.description:
            object.__setattr__(self, "description", "==>".join(r.description for r in self.runners))

    def attempt(self, data: T) -> Outcome:
        for runner in self.runners:
            outcome = runner.attempt(data)
            if isinstance(outcome, NoMatch):
                return outcome
        return MATCHED


@dataclass(frozen=True)
class Capture(Runner[T]):
    """Error-recovery wrapper around another runner.

    When ``inner`` raises (a no-match counts as ``NoMatchError``):

    1. ``on_rejected`` runs with the same input, if set. Its own errors
       are not caught, and a no-match from it becomes the outcome.
    2. If ``handler`` is set it is called with ``(data, error)`` and the
       error is suppressed; otherwise the original error is re-raised.

    Attributes:
        inner: The runner being guarded.
        on_rejected: Optional runner executed after a failure.
        handler: Optional callback that absorbs the failure.
    """

    inner: Runner[T]
    on_rejected: Runner[T] | None = None
    handler: ErrorHandler | None = None
    description: str = ""

    def __post_init__(self) -> None:
        if not self.description:
            text = "CAPTURE"
            if self.on_rejected is not None:
                text += "->" + self.on_rejected.description
            text += "->THROW" if self.handler is None else "->HANDLE"
            object.__setattr__(self, "description", text)

    def attempt(self, data: T) -> Outcome:
        try:
            outcome = self.inner.attempt(data)
            if isinstance(outcome, NoMatch):
                raise outcome.to_error()
            return outcome
        except Exception as exc:
            logger.debug("captured %s from %s", type(exc).__name__, self.inner.description)
            if self.on_rejected is not None:
                rejected = self.on_rejected.attempt(data)
                if isinstance(rejected, NoMatch):
                    return rejected
            if self.handler is None:
                if isinstance(exc, NoMatchError):
                    return NoMatch.from_error(exc)
                raise
            self.handler(data, exc)
            return MATCHED


@dataclass(frozen=True)
class Assert(Runner[T]):
    """Action raising ``RuleAssertionError`` when its condition is false."""

    condition: Condition[T]
    description: str = ""

    def __post_init__(self) -> None:
        if not self.description:
            object.__setattr__(self, "description", f"assert {self.condition.description}")

    def run(self, data: T) -> None:
        if not self.condition.validate(data):
            raise RuleAssertionError(self.description)


def _pass(data: Any) -> None:
    return None


PASS: Action[Any] = Action(_pass, "PASS")


def action(fn: Callable[[T], Any], description: str | None = None) -> Action[T]:
    """Wrap a side-effecting callable into an ``Action``.

    Args:
        fn: Callable taking the input record. Its return value is ignored.
        description: Text for tree renderings. Defaults to the callable's
            ``__name__``.
    """
    return Action(fn, description or "")


def assert_condition(condition: Condition[T]) -> Assert[T]:
    return Assert(condition)
