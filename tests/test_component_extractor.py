from __future__ import annotations

from pathlib import Path

from storydocs.extractors.component_extractor import extract_component_docs, parse_type_members
from storydocs.schemas import Framework

from tests._fixtures.projects import ANGULAR_PROJECT


def _props(doc):
    return {prop.name: prop for prop in doc.properties}


def test_angular_component(make_project) -> None:
    root = make_project(ANGULAR_PROJECT)
    path = root / "src/app/button/button.component.ts"
    source = path.read_text()

    doc = extract_component_docs(path, Framework.ANGULAR)

    assert doc.framework == Framework.ANGULAR
    assert doc.selector == "app-button"
    assert doc.component_name == "ButtonComponent"
    assert doc.identity == "app-button"
    assert doc.template == '<button type="button" (click)="onClick.emit($event)">{{ label }}</button>'
    assert doc.description == "Primary UI component for user interaction"
    assert doc.component_code.startswith("@Component({")
    assert doc.component_code.endswith("}")

    props = _props(doc)
    assert list(props) == ["primary", "label", "size", "onClick"]
    assert props["primary"].default == "false"
    assert props["primary"].description == "Is this the principal call to action on the page?"
    assert props["label"].required is True
    assert props["label"].type == "string"
    assert props["size"].type == "'small' | 'medium' | 'large'"
    assert props["size"].default == "'medium'"
    assert props["size"].description is None
    assert props["onClick"].kind == "output"
    assert props["onClick"].type == "EventEmitter<Event>"

    # Every extracted value is text found in the source
    for value in (doc.selector, doc.template, doc.component_code, doc.component_name):
        assert value in source


def test_angular_template_url_and_signal_inputs(make_project) -> None:
    root = make_project({
        "src/card/card.component.ts": """
            import { Component, input, output } from '@angular/core';

            @Component({
              selector: 'app-card',
              templateUrl: './card.component.html',
            })
            export class CardComponent {
              /** Card heading */
              title = input.required<string>();
              elevation = input<number>(1);
              closed = output<void>();
            }
        """,
        "src/card/card.component.html": "<article><h2>{{ title() }}</h2></article>\n",
    })

    doc = extract_component_docs(root / "src/card/card.component.ts", Framework.ANGULAR)

    assert doc.selector == "app-card"
    assert doc.template == "<article><h2>{{ title() }}</h2></article>"
    props = _props(doc)
    assert props["title"].required is True
    assert props["title"].type == "string"
    assert props["title"].description == "Card heading"
    assert props["elevation"].default == "1"
    assert props["closed"].kind == "output"


REACT_BUTTON = """
    import React from 'react';

    export interface ButtonProps {
      /** Is this the principal call to action on the page? */
      primary?: boolean;
      /** How large should the button be? */
      size?: 'small' | 'medium' | 'large';
      /** Button contents */
      label: string;
      /** Optional click handler */
      onClick?: () => void;
    }

    /** Primary UI component for user interaction */
    export const Button = ({ primary = false, size = 'medium', label, ...props }: ButtonProps) => {
      const mode = primary ? 'storybook-button--primary' : 'storybook-button--secondary';
      return (
        <button type="button" className={['storybook-button', mode].join(' ')} {...props}>
          {label}
        </button>
      );
    };
"""


def test_react_component(make_project) -> None:
    root = make_project({"src/Button.tsx": REACT_BUTTON})

    doc = extract_component_docs(root / "src/Button.tsx", Framework.REACT)

    assert doc.component_name == "Button"
    assert doc.selector is None
    assert doc.identity == "Button"
    assert doc.template is None
    assert doc.description == "Primary UI component for user interaction"
    assert doc.component_code.startswith("export const Button = ")
    assert doc.component_code.endswith("};")

    props = _props(doc)
    assert list(props) == ["primary", "size", "label", "onClick"]
    assert props["primary"].required is False
    assert props["primary"].default == "false"
    assert props["size"].default == "'medium'"
    assert props["label"].required is True
    assert props["label"].description == "Button contents"
    assert props["onClick"].type == "() => void"


def test_react_prop_types_and_component_hint(make_project) -> None:
    root = make_project({
        "src/Badge.jsx": """
            import PropTypes from 'prop-types';

            export function Dot() {
              return <span className="dot" />;
            }

            export function Badge({ text, tone }) {
              return <span className={tone}>{text}</span>;
            }

            Badge.propTypes = {
              text: PropTypes.string.isRequired,
              tone: PropTypes.oneOf(['info', 'warn']),
            };

            Badge.defaultProps = {
              tone: 'info',
            };
        """,
    })

    doc = extract_component_docs(root / "src/Badge.jsx", Framework.REACT, component_name="Badge")

    assert doc.component_name == "Badge"
    props = _props(doc)
    assert props["text"].type == "string"
    assert props["text"].required is True
    assert props["tone"].default == "'info'"


VUE_BUTTON = """
    <!-- A button with three sizes -->
    <template>
      <button type="button" :class="classes" @click="onClick">{{ label }}</button>
    </template>

    <script setup lang="ts">
    import { computed } from 'vue';

    const props = withDefaults(defineProps<{
      /** The label of the button */
      label: string;
      primary?: boolean;
      size?: 'small' | 'medium' | 'large';
    }>(), { primary: false, size: 'medium' });

    const classes = computed(() => ({ primary: props.primary }));
    </script>
"""


def test_vue_single_file_component(make_project) -> None:
    root = make_project({"src/MyButton.vue": VUE_BUTTON})

    doc = extract_component_docs(root / "src/MyButton.vue", Framework.VUE)

    assert doc.framework == Framework.VUE
    assert doc.template == '  <button type="button" :class="classes" @click="onClick">{{ label }}</button>'
    assert doc.component_code.startswith("import { computed } from 'vue';")
    assert doc.description == "A button with three sizes"
    assert doc.selector is None

    props = _props(doc)
    assert list(props) == ["label", "primary", "size"]
    assert props["label"].required is True
    assert props["label"].description == "The label of the button"
    assert props["primary"].default == "false"
    assert props["size"].default == "'medium'"


def test_vue_options_api_runtime_props(make_project) -> None:
    root = make_project({
        "src/Tag.vue": """
            <template>
              <span class="tag">{{ text }}</span>
            </template>

            <script>
            export default {
              name: 'ui-tag',
              props: {
                text: { type: String, required: true },
                color: { type: String, default: 'gray' },
                count: Number,
              },
            };
            </script>
        """,
    })

    doc = extract_component_docs(root / "src/Tag.vue", Framework.VUE)

    assert doc.selector == "ui-tag"
    props = _props(doc)
    assert props["text"].type == "String"
    assert props["text"].required is True
    assert props["color"].default == "'gray'"
    assert props["count"].type == "Number"


def test_svelte_component(make_project) -> None:
    root = make_project({
        "src/Counter.svelte": """
            <script lang="ts">
              /** Starting value */
              export let start: number = 0;
              export let label: string;
            </script>

            <button on:click>{label}: {start}</button>

            <style>
              button { color: red; }
            </style>
        """,
    })

    doc = extract_component_docs(root / "src/Counter.svelte", Framework.VUE)

    assert doc.template == "<button on:click>{label}: {start}</button>"
    props = _props(doc)
    assert props["start"].type == "number"
    assert props["start"].default == "0"
    assert props["start"].description == "Starting value"
    assert props["label"].required is True


LIT_BUTTON = """
    import { LitElement, html } from 'lit';
    import { customElement, property } from 'lit/decorators.js';

    /**
     * A simple button element.
     */
    @customElement('my-button')
    export class MyButton extends LitElement {
      /** Button label */
      @property({ type: String }) label = 'Button';

      @property({ type: Boolean }) primary = false;

      render() {
        return html`<button class=${this.primary ? 'primary' : ''}>${this.label}</button>`;
      }
    }
"""


def test_lit_web_component(make_project) -> None:
    root = make_project({"src/my-button.ts": LIT_BUTTON})

    doc = extract_component_docs(root / "src/my-button.ts", Framework.WEB_COMPONENTS)

    assert doc.selector == "my-button"
    assert doc.component_name == "MyButton"
    assert doc.description == "A simple button element."
    assert doc.template == "<button class=${this.primary ? 'primary' : ''}>${this.label}</button>"
    props = _props(doc)
    assert props["label"].type == "String"
    assert props["label"].default == "'Button'"
    assert props["label"].description == "Button label"
    assert props["primary"].type == "Boolean"


def test_vanilla_custom_element(make_project) -> None:
    root = make_project({
        "src/x-rating.js": """
            class XRating extends HTMLElement {
              static get observedAttributes() {
                return ['value', 'max'];
              }

              constructor() {
                super();
                this.value = 0;
              }

              connectedCallback() {
                this.innerHTML = `<span class="stars"></span>`;
              }
            }

            customElements.define('x-rating', XRating);
        """,
    })

    doc = extract_component_docs(root / "src/x-rating.js", Framework.WEB_COMPONENTS)

    assert doc.selector == "x-rating"
    assert doc.component_name == "XRating"
    assert doc.template == '<span class="stars"></span>'
    props = _props(doc)
    assert list(props) == ["value", "max"]
    assert props["value"].kind == "attribute"
    assert props["value"].default == "0"


def test_framework_inferred_when_unknown(make_project) -> None:
    root = make_project({
        "src/Button.tsx": REACT_BUTTON,
        "src/MyButton.vue": VUE_BUTTON,
        "src/my-button.ts": LIT_BUTTON,
        "src/app/button/button.component.ts": ANGULAR_PROJECT["src/app/button/button.component.ts"],
    })

    assert extract_component_docs(root / "src/Button.tsx").framework == Framework.REACT
    assert extract_component_docs(root / "src/MyButton.vue", Framework.UNKNOWN).framework == Framework.VUE
    assert extract_component_docs(root / "src/my-button.ts").framework == Framework.WEB_COMPONENTS
    assert extract_component_docs(root / "src/app/button/button.component.ts").framework == Framework.ANGULAR


def test_missing_or_unrecognised_files(tmp_path: Path) -> None:
    plain = tmp_path / "helpers.ts"
    plain.write_text("export const add = (a: number, b: number) => a + b;\n", encoding="utf-8")

    assert extract_component_docs(tmp_path / "Missing.tsx", Framework.REACT) is None
    assert extract_component_docs(plain, Framework.ANGULAR) is None
    assert extract_component_docs(plain) is None


def test_parse_type_members_multiline_union_and_methods() -> None:
    props = parse_type_members("""
      variant:
        | 'solid'
        | 'outline';
      readonly id: string
      onSelect?(value: string): void;
      [key: string]: unknown;
    """)

    assert [prop.name for prop in props] == ["variant", "id", "onSelect"]
    assert props[0].type.replace("\n", " ").split() == ["|", "'solid'", "|", "'outline'"]
    assert props[2].required is False


def test_angular_component_hint_picks_matching_class(make_project) -> None:
    root = make_project({
        "src/app/button.component.ts": """
            import { Component, Input } from '@angular/core';

            @Component({ selector: 'app-icon', template: '<i></i>' })
            export class IconComponent {
              @Input() name = 'star';
            }

            @Component({ selector: 'app-button', template: '<button><ng-content></ng-content></button>' })
            export class ButtonComponent {
              @Input() label = 'Button';
            }
        """,
    })
    path = root / "src/app/button.component.ts"

    button = extract_component_docs(path, Framework.ANGULAR, component_name="ButtonComponent")
    first = extract_component_docs(path, Framework.ANGULAR)

    assert button.selector == "app-button"
    assert button.component_name == "ButtonComponent"
    assert button.template == "<button><ng-content></ng-content></button>"
    assert list(_props(button)) == ["label"]
    assert button.component_code.startswith("@Component({ selector: 'app-button'")
    assert first.selector == "app-icon"
    assert list(_props(first)) == ["name"]
