from __future__ import annotations

from storydocs.extractors.import_resolver import ImportResolver, find_component_import, resolve_component_path


def test_probes_extensions_in_order(make_project) -> None:
    root = make_project({
        "src/Button.stories.tsx": "",
        "src/Button.tsx": "export const Button = () => null;",
        "src/Button.js": "module.exports = {};",
    })

    resolved = resolve_component_path(root / "src/Button.stories.tsx", "./Button")

    assert resolved == (root / "src/Button.tsx").resolve()


def test_exact_match_beats_added_extension(make_project) -> None:
    root = make_project({
        "src/stories/Button.stories.ts": "",
        "src/MyButton.vue": "<template><button /></template>",
        "src/MyButton.vue.ts": "",
    })

    resolved = resolve_component_path(root / "src/stories/Button.stories.ts", "../MyButton.vue")

    assert resolved == (root / "src/MyButton.vue").resolve()


def test_directory_index_after_extensions(make_project) -> None:
    root = make_project({
        "src/Button.stories.ts": "",
        "src/button/index.ts": "export * from './button.component';",
    })

    resolved = resolve_component_path(root / "src/Button.stories.ts", "./button")

    assert resolved == (root / "src/button/index.ts").resolve()


def test_unresolvable_and_bare_specifiers(make_project) -> None:
    root = make_project({"src/Button.stories.ts": ""})
    story = root / "src/Button.stories.ts"

    assert resolve_component_path(story, "./Missing") is None
    assert resolve_component_path(story, "@acme/ui") is None


def test_find_named_renamed_and_default_imports() -> None:
    source = (
        "import type { Meta } from '@storybook/react';\n"
        "import { Card as Panel, Badge } from '../components/card';\n"
        "import MyButton from './MyButton.vue';\n"
    )

    assert find_component_import(source, "Panel") == "../components/card"
    assert find_component_import(source, "Badge") == "../components/card"
    assert find_component_import(source, "MyButton") == "./MyButton.vue"
    assert find_component_import(source, "Missing") is None


def test_resolve_component_combines_lookup_and_probe(make_project) -> None:
    root = make_project({
        "src/button.stories.ts": "import { ButtonComponent } from './button.component';\n",
        "src/button.component.ts": "export class ButtonComponent {}",
    })
    story = root / "src/button.stories.ts"

    resolved = ImportResolver().resolve_component(story, story.read_text(), "ButtonComponent")

    assert resolved == (root / "src/button.component.ts").resolve()
