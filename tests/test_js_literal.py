from __future__ import annotations

import json

import pytest

from storydocs.extractors.js_literal import (
    JsLiteralError,
    RawExpression,
    decode_js_literal,
    parse_js_value,
    to_js_literal,
)


def test_plain_data_object() -> None:
    value = parse_js_value("""{
        label: 'Click me',
        "size": "large",
        count: 3,
        ratio: -0.5,
        hex: 0xff,
        big: 1_000,
        primary: true,
        disabled: false,
        icon: null,
        extra: undefined,
        tags: ['a', `b`,], // trailing comma
        /* nested */ style: { color: 'red' },
    }""")

    assert value == {
        "label": "Click me",
        "size": "large",
        "count": 3,
        "ratio": -0.5,
        "hex": 255,
        "big": 1000,
        "primary": True,
        "disabled": False,
        "icon": None,
        "extra": None,
        "tags": ["a", "b"],
        "style": {"color": "red"},
    }
    assert list(value) == [
        "label", "size", "count", "ratio", "hex", "big",
        "primary", "disabled", "icon", "extra", "tags", "style",
    ]


def test_string_escapes() -> None:
    assert parse_js_value(r"'it\'s A \x42\n'") == "it's A B\n"


def test_expressions_are_kept_as_raw_source() -> None:
    value = parse_js_value("{ onClick: fn(), render: () => { return 1; }, user: currentUser, title: `Hi ${name}` }")

    assert isinstance(value["onClick"], RawExpression)
    assert value["onClick"] == "fn()"
    assert value["render"] == "() => { return 1; }"
    assert value["user"] == "currentUser"
    assert isinstance(value["title"], RawExpression)
    # Raw expressions stay JSON serializable
    assert json.loads(json.dumps(value))["onClick"] == "fn()"


def test_spread_and_shorthand_members() -> None:
    value = parse_js_value("{ ...Primary.args, label }")

    assert value == {"...Primary.args": "...Primary.args", "label": "label"}
    assert all(isinstance(item, RawExpression) for item in value.values())


def test_data_followed_by_operator_is_raw() -> None:
    value = parse_js_value("{ label: 'a' + suffix }")

    assert isinstance(value["label"], RawExpression)
    assert value["label"] == "'a' + suffix"


def test_decode_returns_none_on_failure() -> None:
    assert decode_js_literal("{ label: 'unterminated") is None
    assert decode_js_literal(None) is None
    with pytest.raises(JsLiteralError):
        parse_js_value("{ label: 'unterminated")


def test_to_js_literal_is_compact_and_deterministic() -> None:
    value = {"label": "it's", "size": 2, "on": True, "items": [1, None], "data-id": "x", "fn": RawExpression("fn()")}

    rendered = to_js_literal(value)

    assert rendered == "{ label: 'it\\'s', size: 2, on: true, items: [1, null], 'data-id': 'x', fn: fn() }"
    assert to_js_literal(value) == rendered
    assert to_js_literal({}) == "{}"
