import textwrap

import pytest

from ruletree.cli import main

RULES = textwrap.dedent(
    """
    from ruletree import ELSE, Accessor, action, assert_condition, compile_tree, if_, node

    age = Accessor.path("age")
    gender = Accessor.path("gender")
    seen = []

    gift_rule = node(
        if_(gender.eq("girl"), action(seen.append, "give_girl_gift")),
    )
    guarded = compile_tree(node(if_(ELSE, assert_condition(age.gt(11)))))
    not_a_rule = 42
    """
)


@pytest.fixture
def rules_module(tmp_path, monkeypatch):
    (tmp_path / "cli_rules.py").write_text(RULES, encoding="utf-8")
    monkeypatch.syspath_prepend(str(tmp_path))
    return "cli_rules"


def test_describe_prints_tree(rules_module, capsys):
    assert main(["describe", f"{rules_module}:gift_rule"]) == 0
    out = capsys.readouterr().out
    assert out == "+++root:\n|      ---gender=girl --> give_girl_gift\n"


def test_run_success(rules_module, capsys):
    assert main(["run", f"{rules_module}:gift_rule", "--input", '{"gender": "girl", "age": 12}']) == 0
    assert capsys.readouterr().out.strip() == "ok"


def test_run_no_match_exit_code(rules_module):
    assert main(["run", f"{rules_module}:gift_rule", "--input", '{"gender": "boy"}']) == 3


def test_run_assertion_exit_code(rules_module):
    assert main(["run", f"{rules_module}:guarded", "--input", '{"age": 3}']) == 4
    assert main(["run", f"{rules_module}:guarded", "--input", '{"age": 30}']) == 0


def test_bad_targets(rules_module):
    assert main(["describe", f"{rules_module}:not_a_rule"]) == 2
    assert main(["describe", f"{rules_module}:missing"]) == 2
    assert main(["describe", "no_colon"]) == 2


def test_unknown_command():
    assert main(["frobnicate"]) == 2


def test_help():
    assert main([]) == 0


def test_repeat_flag_rejected_for_compiled_tree(rules_module):
    assert main(["run", f"{rules_module}:guarded", "--input", '{"age": 30}', "--repeat"]) == 2
    assert main(["run", f"{rules_module}:gift_rule", "--input", '{"gender": "girl"}', "--repeat"]) == 0
