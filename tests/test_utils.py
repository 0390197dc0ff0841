from types import SimpleNamespace

from ruletree.utils import deep_get, indent


def test_deep_get_mappings_and_sequences():
    data = {"user": {"name": "Alice", "tags": ["a", "b"]}}
    assert deep_get(data, "user.name") == "Alice"
    assert deep_get(data, "user.tags.-1") == "b"
    assert deep_get(data, "user.tags.5", default="none") == "none"
    assert deep_get(data, "user.tags.x") is None


def test_deep_get_attributes():
    record = SimpleNamespace(address=SimpleNamespace(city="Oslo"))
    assert deep_get(record, "address.city") == "Oslo"
    assert deep_get(record, "address.zip", default=0) == 0
    assert deep_get({"a": None}, "a.b", default="x") == "x"


def test_indent():
    assert indent(0) == ""
    assert indent(2) == "|      |      "


def test_deep_get_ignores_methods_and_private_names():
    record = SimpleNamespace(name="Ada", _secret=1)
    assert deep_get(record, "name.upper", default="none") == "none"
    assert deep_get(record, "_secret") is None
    assert deep_get(record, "name") == "Ada"
