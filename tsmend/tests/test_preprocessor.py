"""Tests for the text preprocessor (fence stripping, client directive)."""

import os

from tsmend.core.preprocess import (
    TextPreprocessor,
    add_client_directive,
    needs_client_directive,
    strip_markdown_fences,
)


# ── Tests: Fence stripping ───────────────────────────────────────────────


class TestStripMarkdownFences:
    def test_keeps_lines_between_first_and_last_fence(self):
        content = "```tsx\nline two\nline three\nline four\n```"
        stripped, changed = strip_markdown_fences(content)
        assert changed
        assert stripped == "line two\nline three\nline four"

    def test_drops_surrounding_prose(self):
        content = "Here is the file:\n```tsx\nexport const a = 1;\n```\nHope this helps!"
        stripped, changed = strip_markdown_fences(content)
        assert changed
        assert stripped == "export const a = 1;"

    def test_indented_fence_markers(self):
        stripped, changed = strip_markdown_fences("  ```ts\nconst a = 1;\n  ```\n")
        assert changed
        assert stripped == "const a = 1;"

    def test_single_fence_is_untouched(self):
        content = "```tsx\nexport const a = 1;\n"
        assert strip_markdown_fences(content) == (content, False)

    def test_no_fences(self):
        content = "export const a = 1;\n"
        assert strip_markdown_fences(content) == (content, False)


# ── Tests: Client directive ──────────────────────────────────────────────


class TestClientDirective:
    def test_hooks_trigger_directive(self):
        assert needs_client_directive("const [a, setA] = useState(0);")
        assert needs_client_directive("useEffect(() => {}, []);")
        assert needs_client_directive("<button onClick={go}>Go</button>")

    def test_client_module_triggers_directive(self):
        assert needs_client_directive('import { toast } from "sonner";')
        assert needs_client_directive("import { DndContext } from '@dnd-kit/core';")

    def test_module_name_must_be_a_specifier(self):
        assert not needs_client_directive('const label = "sonnet";')
        assert not needs_client_directive("// recharts would be nice here")

    def test_configurable_module_list(self):
        content = 'import { motion } from "framer-motion";'
        assert not needs_client_directive(content)
        assert needs_client_directive(content, client_modules=["framer-motion"])

    def test_existing_directive_is_respected(self):
        assert not needs_client_directive('"use client";\nuseState(0);')
        assert not needs_client_directive("'use client'\nuseState(0);")

    def test_server_module_needs_nothing(self):
        assert not needs_client_directive("export default function Page() { return null; }")

    def test_directive_goes_first(self):
        assert add_client_directive("import a from 'a';") == "\"use client\";\nimport a from 'a';"

    def test_directive_after_hash_bang(self):
        content = "#!/usr/bin/env node\nuseState(0);"
        assert add_client_directive(content) == '#!/usr/bin/env node\n"use client";\nuseState(0);'


# ── Tests: File processing ───────────────────────────────────────────────


class TestTextPreprocessor:
    def test_preprocess_text_applies_both_steps_in_order(self):
        preprocessor = TextPreprocessor()
        content, applied = preprocessor.preprocess_text("```tsx\nconst [a] = useState(0);\n```")
        assert applied == ["strip_fences", "client_directive"]
        assert content == '"use client";\nconst [a] = useState(0);'

    def test_preprocess_file_rewrites_only_when_changed(self, tmp_path):
        changed_path = tmp_path / "counter.tsx"
        changed_path.write_text("useState(0);\n", encoding="utf-8")
        clean_path = tmp_path / "page.tsx"
        clean_path.write_text("export const a = 1;\n", encoding="utf-8")
        mtime = os.path.getmtime(clean_path)

        preprocessor = TextPreprocessor()
        assert preprocessor.preprocess_file(str(changed_path))
        assert not preprocessor.preprocess_file(str(clean_path))

        assert changed_path.read_text(encoding="utf-8") == '"use client";\nuseState(0);\n'
        assert os.path.getmtime(clean_path) == mtime

    def test_preprocess_is_idempotent(self, tmp_path):
        path = tmp_path / "counter.tsx"
        path.write_text("```tsx\nuseState(0);\n```\n", encoding="utf-8")

        preprocessor = TextPreprocessor()
        assert preprocessor.preprocess_file(str(path))
        first = path.read_text(encoding="utf-8")
        assert not preprocessor.preprocess_file(str(path))
        assert path.read_text(encoding="utf-8") == first

    def test_missing_file_is_reported_as_unchanged(self, tmp_path):
        assert not TextPreprocessor().preprocess_file(str(tmp_path / "missing.tsx"))

    def test_preprocess_files_bounded_fan_out(self, tmp_path):
        paths = []
        for i in range(6):
            path = tmp_path / f"c{i}.tsx"
            path.write_text("useEffect(() => {});\n" if i % 2 else "export {};\n", encoding="utf-8")
            paths.append(str(path))

        changed = TextPreprocessor(max_workers=2).preprocess_files(paths)
        assert changed == [paths[1], paths[3], paths[5]]

    def test_preprocess_files_empty(self):
        assert TextPreprocessor().preprocess_files([]) == []
