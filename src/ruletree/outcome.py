from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from .errors import NoMatchError


@dataclass(frozen=True)
class Matched:
    """A runner accepted the input and finished its work."""

    value: Any = None


@dataclass(frozen=True)
class NoMatch:
    """A runner found no applicable branch for the input.

    Attributes:
        reason: Human-readable explanation, used as the message of the
            ``NoMatchError`` raised by ``unwrap()``.
        error: The ``NoMatchError`` an action raised, if the no-match came
            from one. ``unwrap()`` re-raises it as-is.
    """

    reason: str = "no branch matched"
    error: NoMatchError | None = None

    @classmethod
    def from_error(cls, error: NoMatchError) -> NoMatch:
        return cls(reason=str(error) or cls.reason, error=error)

    def to_error(self) -> NoMatchError:
        if self.error is not None:
            return self.error
        return NoMatchError(self.reason)


Outcome = Union[Matched, NoMatch]

MATCHED = Matched()


def unwrap(outcome: Outcome) -> Any:
    """Return the value of a ``Matched`` outcome.

    Raises:
        NoMatchError: If ``outcome`` is a ``NoMatch``.
    """
    if isinstance(outcome, NoMatch):
        raise outcome.to_error()
    return outcome.value
