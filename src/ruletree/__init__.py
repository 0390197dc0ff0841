"""ruletree - an embeddable decision-tree rule engine.

ruletree selects and runs side-effecting actions by walking a statically
declared tree of conditions. Branching business policy is written as data
and compiled once into a tree that is reused for every input record.

Quick Start:
    >>> from ruletree import Accessor, and_, compile_tree, if_, node
    >>> age = Accessor("age", lambda s: s["age"])
    >>> gender = Accessor("gender", lambda s: s["gender"])
    >>> is_girl = gender.eq("girl")
    >>> rule = compile_tree(node(
    ...     if_(is_girl, give_girl_gift),
    ...     if_(and_(is_girl, age.gt(11)), give_big_gift),
    ... ))
    >>> rule.run({"age": 12, "gender": "girl"})   # runs give_girl_gift only

Main Components:
    - Accessor: named projection from an input record, builds comparisons
    - and_(), or_(), not_(), condition(), ELSE: condition algebra
    - action(), assert_condition(), PASS, Chain, Capture: runners
    - node(), if_(): declarative rule nodes
    - compile_tree(), TreeCompiler, Tree: compilation and evaluation
    - ONCE, REPEAT: branch-selection policies

Exceptions:
    - NoMatchError: No branch applied to the input
    - RuleAssertionError: An assert_condition() action failed
    - RuleDefinitionError: A rule was authored incorrectly
    - RuleEvaluationError: A condition failed while validating
"""

from .accessors import Accessor, Comparison, Constant, Projection, ValueTest, accessor
from .conditions import ELSE, And, Condition, Else, Not, Or, Predicate, and_, condition, not_, or_
from .errors import (
    NoMatchError,
    RuleAssertionError,
    RuleDefinitionError,
    RuleEvaluationError,
    RuleTreeError,
)
from .nodes import If, Node, if_, node
from .outcome import Matched, NoMatch, Outcome, unwrap
from .policies import DEFAULT_POLICY, ONCE, REPEAT, OncePolicy, Policy, RepeatPolicy
from .runners import PASS, Action, Assert, Capture, Chain, Runner, action, assert_condition
from .tree import Tree, TreeCompiler, compile_tree, get_default_compiler

__all__ = [
    "Accessor",
    "Action",
    "And",
    "Assert",
    "Capture",
    "Chain",
    "Comparison",
    "Condition",
    "Constant",
    "DEFAULT_POLICY",
    "ELSE",
    "Else",
    "If",
    "Matched",
    "NoMatch",
    "NoMatchError",
    "Node",
    "Not",
    "ONCE",
    "OncePolicy",
    "Or",
    "Outcome",
    "PASS",
    "Policy",
    "Predicate",
    "Projection",
    "REPEAT",
    "RepeatPolicy",
    "RuleAssertionError",
    "RuleDefinitionError",
    "RuleEvaluationError",
    "RuleTreeError",
    "Runner",
    "Tree",
    "TreeCompiler",
    "ValueTest",
    "accessor",
    "action",
    "and_",
    "assert_condition",
    "compile_tree",
    "condition",
    "get_default_compiler",
    "if_",
    "node",
    "not_",
    "or_",
    "unwrap",
]
