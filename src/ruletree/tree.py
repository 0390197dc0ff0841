from __future__ import annotations

import itertools
import logging
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, Union

from .conditions import ELSE, Condition
from .errors import RuleDefinitionError
from .nodes import Node
from .outcome import Outcome
from .policies import DEFAULT_POLICY, Policy
from .runners import Runner
from .utils import indent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubtreeRef:
    """Points at another node of the same arena by index."""

    index: int


Target = Union[Runner[Any], SubtreeRef]


@dataclass(frozen=True)
class Branch:
    condition: Condition[Any]
    target: Target


@dataclass(frozen=True)
class TreeNode:
    """One compiled node, stored flat in a ``TreeArena``.

    Attributes:
        index: Position of this node in the arena. The root is 0.
        parent: Arena index of the parent node, ``None`` for the root.
        branches: Ordered non-else branches; order is matching priority.
        fallback: Target of the ``ELSE`` entry, if any.
        policy: Effective policy, fixed at compile time.
    """

    index: int
    parent: int | None
    branches: tuple[Branch, ...]
    fallback: Target | None
    policy: Policy


@dataclass(frozen=True, eq=False)
class TreeArena:
    """Flat storage of every node produced by one compilation."""

    nodes: tuple[TreeNode, ...]

    def tree(self, index: int) -> Tree:
        return Tree(self, index)

    def resolve(self, target: Target) -> Runner[Any]:
        if isinstance(target, SubtreeRef):
            return Tree(self, target.index)
        return target


@dataclass(frozen=True, eq=False)
class Tree(Runner[Any]):
    """A compiled decision tree, or one sub-tree of it.

    ``Tree`` is a lightweight handle on a node of a ``TreeArena``. Running
    it delegates to the node's policy, which scans the branches in order
    and recurses into nested trees. Trees never change after compilation,
    so one instance can be run any number of times, from any thread, for
    independent inputs.

    Example:
        >>> tree = compile_tree(node(if_(age.gt(11), give_gift)))
        >>> tree.run(student)
        >>> print(tree.describe())
    """

    arena: TreeArena
    index: int = 0
    description: str = "TREE"

    @property
    def node(self) -> TreeNode:
        return self.arena.nodes[self.index]

    @property
    def policy(self) -> Policy:
        return self.node.policy

    @property
    def branches(self) -> tuple[tuple[Condition[Any], Runner[Any]], ...]:
        """``(condition, runner)`` pairs in matching order, with nested
        trees resolved to ``Tree`` handles."""
        return tuple((b.condition, self.arena.resolve(b.target)) for b in self.node.branches)

    @property
    def fallback(self) -> Runner[Any] | None:
        target = self.node.fallback
        if target is None:
            return None
        return self.arena.resolve(target)

    @property
    def parent(self) -> Tree | None:
        if self.node.parent is None:
            return None
        return self.arena.tree(self.node.parent)

    @property
    def depth(self) -> int:
        depth = 0
        parent = self.node.parent
        while parent is not None:
            depth += 1
            parent = self.arena.nodes[parent].parent
        return depth

    def subtrees(self) -> Iterator[Tree]:
        for _, runner in self.branches:
            if isinstance(runner, Tree):
                yield runner
        fallback = self.fallback
        if isinstance(fallback, Tree):
            yield fallback

    def attempt(self, data: Any) -> Outcome:
        return self.policy.select(self, data)

    def describe(self) -> str:
        """Render the tree as text, one line per branch.

        Sub-trees are marked ``+++`` and followed by their own branches one
        level deeper; leaf runners are marked ``---`` and shown as
        ``condition --> runner``. The fallback is listed last as ``ELSE``.
        """
        depth = self.depth
        lines: list[str] = []
        if depth == 0:
            lines.append("+++root:")
        self._render(lines, depth)
        return "".join(line + "\n" for line in lines)

    def _render(self, lines: list[str], depth: int) -> None:
        items = list(self.branches)
        fallback = self.fallback
        if fallback is not None:
            items.append((ELSE, fallback))
        prefix = indent(depth + 1)
        for cond, runner in items:
            if isinstance(runner, Tree):
                lines.append(f"{prefix}+++{cond.description}:")
                runner._render(lines, depth + 1)
            else:
                lines.append(f"{prefix}---{cond.description} --> {runner.description}")

    def __str__(self) -> str:
        return self.describe()

    def __repr__(self) -> str:
        return f"Tree(index={self.index}, depth={self.depth}, policy={self.policy.name})"


class TreeCompiler:
    """Compiles ``Node`` graphs into ``Tree`` runners.

    Attributes:
        default_policy: Policy of a root node that declares none. Nested
            nodes without an override inherit their parent's policy.
        allow_duplicate_else: If ``False`` (the default) a node with more
            than one ``ELSE`` entry is rejected; if ``True`` the last one
            wins.
    """

    def __init__(self, *, default_policy: Policy = DEFAULT_POLICY, allow_duplicate_else: bool = False) -> None:
        self.default_policy = default_policy
        self.allow_duplicate_else = allow_duplicate_else

    def compile(self, root: Node) -> Tree:
        """Compile ``root`` and every nested node into one arena.

        Returns:
            The ``Tree`` handle of the root node.

        Raises:
            RuleDefinitionError: If ``root`` is not a ``Node`` or a node
                declares more than one ``ELSE`` entry.
        """
        if not isinstance(root, Node):
            raise RuleDefinitionError(f"compile expects a Node, got {type(root).__name__}")
        compiled: list[TreeNode] = []
        self._compile_node(root, None, self.default_policy, itertools.count(), compiled)
        arena = TreeArena(tuple(sorted(compiled, key=lambda n: n.index)))
        logger.debug("compiled rule tree with %d node(s)", len(arena.nodes))
        return arena.tree(0)

    def _compile_node(
        self,
        spec: Node,
        parent: int | None,
        inherited: Policy,
        indices: Iterator[int],
        compiled: list[TreeNode],
    ) -> int:
        index = next(indices)
        policy = spec.policy if spec.policy is not None else inherited

        branches: list[Branch] = []
        fallback: Target | None = None
        for entry in spec.entries:
            target: Target
            if isinstance(entry.target, Node):
                target = SubtreeRef(self._compile_node(entry.target, index, policy, indices, compiled))
            else:
                target = entry.target
            if entry.is_else:
                if fallback is not None and not self.allow_duplicate_else:
                    raise RuleDefinitionError("node declares more than one ELSE entry")
                fallback = target
            else:
                branches.append(Branch(entry.condition, target))

        compiled.append(TreeNode(index=index, parent=parent, branches=tuple(branches), fallback=fallback, policy=policy))
        return index


_default_compiler: TreeCompiler | None = None


def get_default_compiler() -> TreeCompiler:
    """Return the shared compiler using ``ONCE`` as the root policy.

    Lazily created on first access and cached afterwards.
    """
    global _default_compiler
    if _default_compiler is None:
        _default_compiler = TreeCompiler()
    return _default_compiler


def compile_tree(root: Node, compiler: TreeCompiler | None = None) -> Tree:
    return (compiler or get_default_compiler()).compile(root)
