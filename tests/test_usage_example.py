from __future__ import annotations

import pytest

from storydocs.extractors.js_literal import RawExpression
from storydocs.generators.usage_example import (
    UsageExampleGenerator,
    generate_usage_example,
    is_function_like,
)
from storydocs.schemas import Framework


def test_angular_uses_property_and_event_bindings() -> None:
    example = generate_usage_example(
        "app-button",
        {"primary": True, "label": "Click me"},
        "Primary",
        Framework.ANGULAR,
    )
    handler = generate_usage_example("app-button", {"onClick": RawExpression("fn()")}, "Clicked", Framework.ANGULAR)

    assert example == '<!-- Primary -->\n<app-button [primary]="true" label="Click me"></app-button>'
    assert handler == '<!-- Clicked -->\n<app-button (click)="onClick($event)"></app-button>'


def test_angular_escapes_quotes_in_bound_literals() -> None:
    example = generate_usage_example("app-list", {"items": ["a", 'say "hi"']}, "Items", "angular")

    assert "[items]=\"['a', 'say &quot;hi&quot;']\"" in example


def test_react_renders_jsx_expressions_and_children() -> None:
    example = generate_usage_example(
        "Button",
        {"onClick": RawExpression("fn()"), "primary": True, "label": "Button"},
        "Primary",
        Framework.REACT,
    )
    with_children = generate_usage_example("Button", {"children": "Save"}, "WithText", Framework.REACT)

    assert example == '// Primary\n<Button onClick={fn()} primary={true} label="Button" />'
    assert with_children == "// WithText\n<Button>Save</Button>"


def test_react_wraps_strings_containing_quotes() -> None:
    example = generate_usage_example("Alert", {"message": 'a "quoted" word'}, "Quoted", Framework.REACT)

    assert "message={'a \"quoted\" word'}" in example


def test_vue_uses_bound_props_and_event_listeners() -> None:
    example = generate_usage_example(
        "MyButton",
        {"label": "Button", "primary": True, "onClick": RawExpression("fn()")},
        "Primary",
        Framework.VUE,
    )

    assert example == '<!-- Primary -->\n<MyButton label="Button" :primary="true" @click="onClick" />'


def test_web_components_use_plain_html_attributes() -> None:
    example = generate_usage_example(
        "my-button",
        {
            "label": "Hello",
            "primary": True,
            "disabled": False,
            "onClick": RawExpression("fn()"),
        },
        "Primary",
        Framework.WEB_COMPONENTS,
    )

    assert example == '<!-- Primary -->\n<my-button label="Hello" primary></my-button>'


def test_web_components_serialize_numbers_and_structures() -> None:
    example = generate_usage_example(
        "x-chart",
        {"max": 5, "points": [1, 2], "config": {"fn": RawExpression("() => 1")}},
        "Chart",
        Framework.WEB_COMPONENTS,
    )

    assert example == "<!-- Chart -->\n<x-chart max=\"5\" points='[1, 2]'></x-chart>"


def test_many_attributes_switch_to_one_per_line() -> None:
    args = {"a": "1", "b": "2", "c": "3", "d": "4"}

    angular = generate_usage_example("x-el", args, "Many", Framework.ANGULAR)
    react = generate_usage_example("Widget", args, "Many", Framework.REACT)

    assert angular == '<!-- Many -->\n<x-el\n  a="1"\n  b="2"\n  c="3"\n  d="4"\n></x-el>'
    assert react == '// Many\n<Widget\n  a="1"\n  b="2"\n  c="3"\n  d="4"\n/>'


def test_long_lines_switch_to_one_per_line() -> None:
    args = {"title": "x" * 60, "subtitle": "y" * 30}

    example = generate_usage_example("app-card", args, "Long", Framework.ANGULAR)

    assert example.splitlines()[1] == "<app-card"
    assert example.splitlines()[-1] == "></app-card>"


def test_empty_args_render_bare_invocation() -> None:
    assert generate_usage_example("Button", {}, "Empty", Framework.REACT) == "// Empty\n<Button />"
    assert generate_usage_example("app-button", None, "Empty", Framework.ANGULAR) == (
        "<!-- Empty -->\n<app-button></app-button>"
    )


def test_output_is_deterministic() -> None:
    generator = UsageExampleGenerator(Framework.VUE)
    args = {"size": "large", "count": 3, "tags": ["a", "b"]}

    first = generator.generate("TagList", args, "Default")
    second = generator.generate("TagList", dict(args), "Default")

    assert first == second


def test_unknown_framework_infers_style_from_identity() -> None:
    generator = UsageExampleGenerator(Framework.UNKNOWN)

    assert generator.generate("my-el", {"open": True}, "Open") == "<!-- Open -->\n<my-el open></my-el>"
    assert generator.generate("Card", {"open": True}, "Open") == "// Open\n<Card open={true} />"


def test_empty_identity_is_rejected() -> None:
    with pytest.raises(ValueError):
        generate_usage_example("", {"label": "x"}, "Primary", Framework.REACT)


@pytest.mark.parametrize(
    "value, expected",
    [
        (RawExpression("fn()"), True),
        (RawExpression("action('clicked')"), True),
        (RawExpression("() => {}"), True),
        (RawExpression("function () {}"), True),
        (RawExpression("ICONS.star"), False),
        ("fn()", False),
    ],
)
def test_is_function_like(value, expected) -> None:
    assert is_function_like(value) is expected


def test_unresolved_spreads_stay_well_formed() -> None:
    args = {"...themeArgs": RawExpression("...themeArgs"), "label": "Hi"}

    react = generate_usage_example("Button", args, "Themed", Framework.REACT)
    angular = generate_usage_example("app-button", args, "Themed", Framework.ANGULAR)
    vue = generate_usage_example("MyButton", args, "Themed", Framework.VUE)
    html = generate_usage_example("my-button", args, "Themed", Framework.WEB_COMPONENTS)

    assert react == '// Themed\n<Button {...themeArgs} label="Hi" />'
    assert angular == '<!-- Themed -->\n<app-button label="Hi"></app-button>'
    assert vue == '<!-- Themed -->\n<MyButton label="Hi" />'
    assert html == '<!-- Themed -->\n<my-button label="Hi"></my-button>'


def test_svelte_component_file_uses_svelte_bindings() -> None:
    example = generate_usage_example(
        "Button",
        {"primary": True, "label": "Hi", "onClick": RawExpression("fn()")},
        "Primary",
        Framework.VUE,
        component_file="src/lib/Button.svelte",
    )
    vue = generate_usage_example("Button", {"primary": True}, "Primary", Framework.VUE, "src/Button.vue")

    assert example == '<!-- Primary -->\n<Button primary={true} label="Hi" on:click={onClick} />'
    assert vue == '<!-- Primary -->\n<Button :primary="true" />'
