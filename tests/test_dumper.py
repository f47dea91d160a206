from __future__ import annotations

import datetime
import logging

import pytest
import yaml

import yamldump
from yamldump import (
    ConfigurationError,
    Dumper,
    Tagged,
    Type,
    UnsupportedValueError,
    dump,
)

LOREM_IPSUM = (
    "Lorem ipsum dolor sit amet consectetur adipiscing elit sed do eiusmod"
    " tempor incididunt ut labore et dolore magna aliqua"
)

NESTED = """\
name: yamldump
versions:
  - 1
  - 2.5
  - null
options:
  flag: true
  nested:
    - - a
      - b
    - key: value
      other: 'yes'
"""


def roundtrip(v, **kwargs):
    return yaml.safe_load(dump(v, **kwargs))


def test_nested():
    v = {
        "name": "yamldump",
        "versions": [1, 2.5, None],
        "options": {
            "flag": True,
            "nested": [["a", "b"], {"key": "value", "other": "yes"}],
        },
    }
    assert dump(v) == NESTED
    assert yaml.safe_load(NESTED) == v


@pytest.mark.parametrize(
    "v,expected",
    [
        ("hello", "hello\n"),
        ("", "''\n"),
        (None, "null\n"),
        (True, "true\n"),
        (12, "12\n"),
        ([], "[]\n"),
        ({}, "{}\n"),
        ((), "[]\n"),
        ([[]], "- []\n"),
        ({"a": {}}, "a: {}\n"),
    ],
)
def test_simple(v, expected):
    assert dump(v) == expected


def test_ends_with_a_single_newline():
    assert dump("a\nb\n") == "|\n  a\n  b\n"
    assert dump({"a": "b\n\n"}) == "a: |+\n  b\n\n"


@pytest.mark.parametrize(
    "v",
    [
        "plain text",
        "true",
        "0x1F",
        "2001-12-14",
        "01.5",
        "00.5e3",
        "line 1\nline 2\n",
        "trailing\n\n",
        "  leading spaces\nx",
        LOREM_IPSUM + "\n" + LOREM_IPSUM,
        "\x07bell",
        "\U0001F600 smile",
        {"key: with colon": "- dash", "#": "[flow]"},
        {"a": ["x", {"b": ["y\nz\n", LOREM_IPSUM]}]},
        [1, -2, 3.25, 1e100, None, False, "", ["nested", []], {}],
        {1: "int key", None: "null key", 2.5: "float key"},
    ],
)
def test_roundtrip(v):
    assert roundtrip(v) == v
    assert roundtrip(v, flow_level=1) == v
    assert roundtrip(v, flow_level=0) == v
    assert roundtrip(v, indent=4) == v
    assert roundtrip(v, line_width=20) == v
    assert roundtrip(v, array_indent=False) == v


def test_compat_mode():
    assert dump("yes") == "'yes'\n"
    assert dump(["on", "Off"], compat_mode=False) == "- on\n- Off\n"


def test_anchors():
    shared = {"k": "v"}
    assert dump({"x": shared, "y": shared}) == (
        "x: &ref_0\n  k: v\ny: *ref_0\n"
    )
    assert dump({"x": shared, "y": shared}, use_anchors=False) == (
        "x:\n  k: v\ny:\n  k: v\n"
    )


def test_anchors_in_sequences():
    shared = [1, 2]
    assert dump([shared, shared]) == "- &ref_0\n  - 1\n  - 2\n- *ref_0\n"
    assert dump([shared, shared], flow_level=0) == (
        "[&ref_0 [1, 2], *ref_0]\n"
    )
    assert yaml.safe_load(dump([shared, shared])) == [shared, shared]


def test_anchor_numbering():
    a = ["a"]
    b = ["b"]
    res = dump({"first": b, "second": a, "third": a, "fourth": b})
    # b is discovered as a duplicate after a
    assert res == (
        "first: &ref_1\n  - b\n"
        "second: &ref_0\n  - a\n"
        "third: *ref_0\n"
        "fourth: *ref_1\n"
    )


def test_recursive():
    v = ["a"]
    v.append(v)
    assert dump(v) == "&ref_0\n- a\n- *ref_0\n"
    loaded = yaml.safe_load(dump(v))
    assert loaded[0] == "a"
    assert loaded[1] is loaded


def test_anchors_reset_between_calls():
    shared = [1]
    dumper = Dumper()
    first = dumper.stringify([shared, shared])
    assert dumper.stringify([shared, shared]) == first
    assert dumper.stringify(shared) == "- 1\n"


def test_sort_keys():
    assert dump({"b": 1, "a": 2}, sort_keys=True) == "a: 2\nb: 1\n"
    assert dump({"b": 1, "a": 2}) == "b: 1\na: 2\n"

    def reverse(a, b):
        return (a < b) - (a > b)

    assert dump({"a": 1, "c": 3, "b": 2}, sort_keys=reverse) == (
        "c: 3\nb: 2\na: 1\n"
    )


def test_invalid_sort_keys():
    with pytest.raises(ConfigurationError, match="sort_keys"):
        Dumper(sort_keys="yes")


def test_line_width():
    line = " ".join(["word"] * 200)
    assert dump(line, line_width=-1) == line + "\n"
    folded = dump(LOREM_IPSUM, line_width=40)
    assert folded.startswith(">-\n")
    assert all(len(line) <= 42 for line in folded.splitlines())
    assert yaml.safe_load(folded) == LOREM_IPSUM


def test_flow_level():
    v = {"a": [1, {"b": "c"}], "d": {}}
    assert dump(v, flow_level=0) == "{a: [1, {b: c}], d: {}}\n"
    assert dump(v, flow_level=1) == "a: [1, {b: c}]\nd: {}\n"
    assert dump(v, flow_level=2) == "a:\n  - 1\n  - {b: c}\nd: {}\n"


def test_flow_scalars_are_single_line():
    assert dump(["a\nb"], flow_level=0) == '["a\\nb"]\n'


def test_condense_flow():
    v = {"a": [1, 2], "b c": "d"}
    assert dump(v, flow_level=0, condense_flow=True) == (
        '{"a":[1,2],"b c":d}\n'
    )
    assert roundtrip(v, flow_level=0, condense_flow=True) == v
    # Only string keys are quoted, other keys keep their type
    v = {1: "a", None: "b", "c": 2.5}
    assert dump(v, flow_level=0, condense_flow=True) == (
        '{1: a,null: b,"c":2.5}\n'
    )
    assert roundtrip(v, flow_level=0, condense_flow=True) == v


def test_indent():
    v = {"a": {"b": [1, 2]}}
    assert dump(v, indent=4) == "a:\n    b:\n        - 1\n        - 2\n"
    assert roundtrip(v, indent=4) == v
    assert dump(v, indent=0) == dump(v, indent=1)


def test_array_indent():
    v = {"a": ["x", "y"]}
    assert dump(v) == "a:\n  - x\n  - y\n"
    assert dump(v, array_indent=False) == "a:\n- x\n- y\n"


def test_array_indent_in_flow():
    v = {"a": ["x\ny", "z"]}
    assert dump(v, flow_level=1, array_indent=False) == (
        'a: ["x\\ny", z]\n'
    )
    assert roundtrip(v, flow_level=1, array_indent=False) == v
    v = {"a": {"b": ["x\ny"]}}
    assert dump(v, flow_level=2, array_indent=False) == (
        'a:\n  b: ["x\\ny"]\n'
    )
    assert roundtrip(v, flow_level=2, array_indent=False) == v


def test_long_keys():
    key = "k" * 1100
    res = dump({key: "v"})
    assert res == f"? {key}\n: v\n"
    assert yaml.safe_load(res) == {key: "v"}
    assert dump({key: "v"}, flow_level=0) == f"{{? {key}: v}}\n"


def test_complex_keys():
    assert dump({(1, 2): "a"}) == "[1, 2]: a\n"
    assert dump({"a\nb": 1}) == '"a\\nb": 1\n'


def test_types():
    v = {
        "date": datetime.date(2001, 12, 14),
        "binary": b"\x00\x01\x02",
        "set": {"b", "a"},
        "float": float("inf"),
    }
    assert dump(v) == (
        "date: 2001-12-14\n"
        "binary: !<tag:yaml.org,2002:binary> AAEC\n"
        "set: !<tag:yaml.org,2002:set>\n"
        "  ? a\n"
        "  : null\n"
        "  ? b\n"
        "  : null\n"
        "float: .inf\n"
    )
    assert yaml.safe_load(dump(v)) == v


def test_styles():
    v = [255, None, True]
    styles = {"!!int": "hexadecimal", "!!null": "canonical"}
    assert dump(v, styles=styles) == "- 0xFF\n- ~\n- true\n"
    assert dump(
        v, styles={"tag:yaml.org,2002:bool": "uppercase"}
    ) == "- 255\n- null\n- TRUE\n"


def test_unknown_style():
    with pytest.raises(ConfigurationError, match="decimall"):
        dump(1, styles={"!!int": "decimall"})


def test_tagged():
    assert dump(Tagged("!custom", "text")) == "!<!custom> text\n"
    assert dump(Tagged("!!str", 5)) == "!<tag:yaml.org,2002:str> '5'\n"
    assert dump({"a": Tagged("!point", {"x": 1})}) == (
        "a: !<!point>\n  ? x\n  : 1\n"
    )
    assert dump([Tagged("!seq", ["x"])]) == "- !<!seq>\n  - x\n"


def test_custom_type():
    class Point:
        def __init__(self, x, y):
            self.x = x
            self.y = y

    point = Type(
        "!point",
        "sequence",
        predicate=lambda v: isinstance(v, Point),
        represent=lambda v, style: [v.x, v.y],
    )
    schema = yamldump.DEFAULT_SCHEMA.extend(explicit=[point])
    assert dump({"p": Point(1, 2)}, schema=schema, flow_level=1) == (
        "p: !<!point> [1, 2]\n"
    )


def test_custom_implicit_type():
    # Implicit types write their text as is, and make matching strings quoted.
    ellipsis = Type(
        "!ellipsis",
        predicate=lambda v: v is Ellipsis,
        resolve=lambda s: s == "...",
        represent=lambda v, style: "...",
    )
    schema = yamldump.CORE_SCHEMA.extend(implicit=[ellipsis])
    assert dump([..., "..."], schema=schema) == "- ...\n- '...'\n"
    assert dump(["..."]) == "- ...\n"


def test_unsupported():
    v = {"a": 1, "b": object(), "c": 3}
    with pytest.raises(UnsupportedValueError, match="object"):
        dump(v)
    assert dump(v, skip_invalid=True) == "a: 1\nc: 3\n"


def test_skip_invalid():
    def f():
        pass

    assert dump([f, 1, f], skip_invalid=True) == "- 1\n"
    assert dump([f, 1, f], skip_invalid=True, flow_level=0) == "[1]\n"
    assert dump({f: 1}, skip_invalid=True) == "{}\n"
    assert dump({"a": f}, skip_invalid=True, flow_level=0) == "{}\n"
    assert dump(f, skip_invalid=True) == ""


def test_skip_invalid_logs(caplog):
    with caplog.at_level(logging.DEBUG, logger="yamldump.dumper"):
        dump([object()], skip_invalid=True)
    assert "Skipping value of type object" in caplog.text


def test_version():
    assert isinstance(yamldump.__version__, str)
