from __future__ import annotations

import dataclasses
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Union

from .conditions import Condition
from .errors import RuleDefinitionError
from .runners import Action, Runner

if TYPE_CHECKING:
    from .policies import Policy


@dataclass(frozen=True)
class If:
    """One entry of a node: a condition and what to do when it holds.

    Attributes:
        condition: The guard. ``ELSE`` marks the node's fallback.
        target: A nested ``Node`` (compiled into a sub-tree) or a ``Runner``.
    """

    condition: Condition[Any]
    target: Union[Node, Runner[Any]]

    def __post_init__(self) -> None:
        if not isinstance(self.condition, Condition):
            raise RuleDefinitionError(
                f"if_() condition must be a Condition, got {type(self.condition).__name__}"
            )
        if not isinstance(self.target, (Node, Runner)):
            raise RuleDefinitionError(
                f"if_() target must be a Node or Runner, got {type(self.target).__name__}"
            )

    @property
    def is_else(self) -> bool:
        return self.condition.is_always_true()


@dataclass(frozen=True)
class Node:
    """A declarative, not yet compiled, rule node.

    Nodes exist only while rules are authored. ``compile_tree()`` turns a
    node graph into a ``Tree`` that can be run.

    Attributes:
        entries: Ordered ``If`` entries; order is matching priority.
        policy: Optional policy override for this node. ``None`` inherits
            the parent's policy at compile time.
    """

    entries: tuple[If, ...]
    policy: Policy | None = None

    def __post_init__(self) -> None:
        for entry in self.entries:
            if not isinstance(entry, If):
                raise RuleDefinitionError(f"node() expects if_() entries, got {type(entry).__name__}")

    def with_policy(self, policy: Policy) -> Node:
        return dataclasses.replace(self, policy=policy)


def node(*entries: If, policy: Policy | None = None) -> Node:
    return Node(tuple(entries), policy)


def if_(condition: Condition[Any], target: Node | Runner[Any] | Callable[[Any], Any]) -> If:
    """Build one node entry.

    Plain callables are wrapped into an ``Action`` named after the callable.
    """
    if not isinstance(target, (Node, Runner)) and callable(target):
        target = Action(target)
    return If(condition, target)
