import pytest

from ruletree import (
    ELSE,
    REPEAT,
    NoMatch,
    NoMatchError,
    RuleAssertionError,
    accessor,
    action,
    assert_condition,
    compile_tree,
    condition,
    if_,
    node,
)

age = accessor("age", lambda s: s["age"])


def _step(log, name, exc=None):
    def run(data):
        log.append(name)
        if exc is not None:
            raise exc

    return action(run, name)


def _counting(log, name, result=True):
    def check(data):
        log.append(f"check {name}")
        return result

    return condition(check, name)


def test_once_does_not_evaluate_later_conditions():
    log = []
    tree = compile_tree(node(if_(_counting(log, "c1"), _step(log, "r1")), if_(_counting(log, "c2"), _step(log, "r2"))))
    tree.run({})
    assert log == ["check c1", "r1"]


def test_once_keeps_no_match_of_matched_branch():
    log = []
    tree = compile_tree(
        node(
            if_(_counting(log, "c1"), _step(log, "r1", NoMatchError("declined"))),
            if_(_counting(log, "c2"), _step(log, "r2")),
            if_(ELSE, _step(log, "fallback")),
        )
    )
    with pytest.raises(NoMatchError, match="declined"):
        tree.run({})
    assert log == ["check c1", "r1"]


def test_repeat_skips_declining_branch():
    log = []
    tree = compile_tree(
        node(
            if_(_counting(log, "c1"), _step(log, "r1", NoMatchError())),
            if_(_counting(log, "c2"), _step(log, "r2")),
            if_(_counting(log, "c3"), _step(log, "r3")),
            policy=REPEAT,
        )
    )
    tree.run({})
    assert log == ["check c1", "r1", "check c2", "r2"]


def test_repeat_skips_declining_subtree():
    log = []
    tree = compile_tree(
        node(
            if_(age.gt(5), node(if_(age.gt(10), _step(log, "teen")))),
            if_(age.gt(1), _step(log, "child")),
            policy=REPEAT,
        )
    )
    tree.run({"age": 7})
    assert log == ["child"]


def test_repeat_aborts_on_other_errors():
    log = []
    tree = compile_tree(
        node(
            if_(_counting(log, "c1"), _step(log, "r1", ValueError("boom"))),
            if_(_counting(log, "c2"), _step(log, "r2")),
            policy=REPEAT,
        )
    )
    with pytest.raises(ValueError):
        tree.run({})
    assert log == ["check c1", "r1"]


def test_repeat_does_not_absorb_assertion_failures():
    tree = compile_tree(
        node(
            if_(age.gt(1), assert_condition(age.gt(100))),
            if_(age.gt(0), _step([], "r2")),
            policy=REPEAT,
        )
    )
    with pytest.raises(RuleAssertionError):
        tree.run({"age": 5})


def test_repeat_falls_back_when_every_branch_declines():
    log = []
    tree = compile_tree(
        node(
            if_(_counting(log, "c1"), _step(log, "r1", NoMatchError())),
            if_(_counting(log, "c2", result=False), _step(log, "r2")),
            if_(ELSE, _step(log, "fallback")),
            policy=REPEAT,
        )
    )
    tree.run({})
    assert log == ["check c1", "r1", "check c2", "fallback"]


def test_repeat_reports_no_match_without_fallback():
    log = []
    tree = compile_tree(node(if_(_counting(log, "c1"), _step(log, "r1", NoMatchError())), policy=REPEAT))
    assert isinstance(tree.attempt({}), NoMatch)
    with pytest.raises(NoMatchError):
        tree.run({})


def test_repeat_keeps_side_effects_of_declined_branch():
    effects = []

    def half_done(data):
        effects.append("partial")
        raise NoMatchError()

    tree = compile_tree(
        node(if_(age.gt(0), action(half_done)), if_(age.gt(0), action(effects.append, "record")), policy=REPEAT)
    )
    tree.run({"age": 1})
    assert effects == ["partial", {"age": 1}]


def _decline(data):
    raise NoMatchError("declines")


def test_repeat_skips_branch_whose_condition_declines():
    log = []
    tree = compile_tree(
        node(
            if_(condition(_decline, "undecided"), _step(log, "r1")),
            if_(_counting(log, "c2"), _step(log, "r2")),
            policy=REPEAT,
        )
    )
    tree.run({})
    assert log == ["check c2", "r2"]


def test_once_reports_declining_condition_as_no_match():
    log = []
    tree = compile_tree(node(if_(condition(_decline, "undecided"), _step(log, "r1")), if_(ELSE, _step(log, "else"))))
    assert isinstance(tree.attempt({}), NoMatch)
    assert log == []


def test_repeat_sees_decline_through_capture_without_handler():
    log = []
    tree = compile_tree(
        node(
            if_(_counting(log, "c1"), _step(log, "r1", NoMatchError()).capture(_step(log, "rejected"))),
            if_(_counting(log, "c2"), _step(log, "r2")),
            policy=REPEAT,
        )
    )
    tree.run({})
    assert log == ["check c1", "r1", "rejected", "check c2", "r2"]


def test_repeat_skips_branch_whose_capture_handler_declines():
    seen = []
    failing = _step([], "boom", ValueError("boom")).capture(handler=lambda data, exc: _decline(data))
    tree = compile_tree(
        node(
            if_(condition(lambda d: True, "always"), failing),
            if_(condition(lambda d: True, "always"), action(seen.append, "record")),
            policy=REPEAT,
        )
    )
    tree.run("x")
    assert seen == ["x"]


def test_repeat_skips_declining_fallback_of_subtree():
    log = []
    tree = compile_tree(
        node(
            if_(age.gt(0), node(if_(ELSE, action(_decline, "decline")))),
            if_(age.gt(0), _step(log, "next")),
            policy=REPEAT,
        )
    )
    tree.run({"age": 3})
    assert log == ["next"]
