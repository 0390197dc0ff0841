from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .errors import NoMatchError
from .outcome import NoMatch, Outcome

if TYPE_CHECKING:
    from .conditions import Condition
    from .runners import Runner
    from .tree import Tree

logger = logging.getLogger(__name__)


class Policy:
    """Branch-selection strategy of a compiled tree node.

    A policy scans the node's branches in declaration order, dispatches to
    the runner of a matching branch, and decides what a ``NoMatch`` from
    that runner means. Policies are stateless; the module singletons
    ``ONCE`` and ``REPEAT`` are shared by every tree.

    Attributes:
        name: Identifier shown in logs and reprs.
    """

    name: str = "policy"

    def select(self, tree: Tree, data: Any) -> Outcome:
        """Evaluate ``tree`` against ``data``.

        Raises:
            NotImplementedError: If not overridden by a subclass.
        """
        raise NotImplementedError

    def _try_branch(self, condition: Condition[Any], runner: Runner[Any], data: Any) -> Outcome | None:
        """Validate one branch and dispatch to its runner.

        Returns ``None`` when the condition does not hold. A ``NoMatchError``
        raised by the condition or the runner becomes a ``NoMatch`` outcome.
        """
        try:
            if not condition.validate(data):
                return None
            return runner.attempt(data)
        except NoMatchError as exc:
            return NoMatch.from_error(exc)

    def _fall_back(self, tree: Tree, data: Any) -> Outcome:
        fallback = tree.fallback
        if fallback is not None:
            logger.debug("no branch matched at depth %d, running fallback %s", tree.depth, fallback.description)
            try:
                return fallback.attempt(data)
            except NoMatchError as exc:
                return NoMatch.from_error(exc)
        return NoMatch(f"no branch matched at depth {tree.depth}")

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


class OncePolicy(Policy):
    """Fail-fast selection.

    The first branch whose condition validates is dispatched and its
    outcome is final, no-match included. With no matching branch the
    fallback runs, or the tree reports ``NoMatch``.
    """

    name = "once"

    def select(self, tree: Tree, data: Any) -> Outcome:
        for condition, runner in tree.branches:
            outcome = self._try_branch(condition, runner, data)
            if outcome is not None:
                return outcome
        return self._fall_back(tree, data)


class RepeatPolicy(Policy):
    """Skip-and-retry selection.

    Like ``OncePolicy``, except that a no-match from a branch counts as the
    branch declining: scanning continues with the next branch. This covers
    a ``NoMatch`` outcome as well as a ``NoMatchError`` raised by the
    branch's condition or runner. Other exceptions still abort immediately.

    Note:
        Side effects a declining runner performed before reporting
        ``NoMatch`` are kept; nothing is rolled back.
    """

    name = "repeat"

    def select(self, tree: Tree, data: Any) -> Outcome:
        for condition, runner in tree.branches:
            outcome = self._try_branch(condition, runner, data)
            if outcome is None:
                continue
            if isinstance(outcome, NoMatch):
                logger.debug("branch %s declined (%s), trying next", condition.description, outcome.reason)
                continue
            return outcome
        return self._fall_back(tree, data)


ONCE = OncePolicy()
REPEAT = RepeatPolicy()
DEFAULT_POLICY = ONCE
