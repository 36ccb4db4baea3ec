"""Tests for the diagnostic fix translator."""

from tsmend.core.config import FixerSettings, SpecialImport
from tsmend.core.diagnostics import Diagnostic, DiagnosticFixTranslator, fix_diagnostics
from tsmend.core.exports import build_export_surface
from tsmend.core.stats import RunStats


def _translator(project, **kwargs):
    stats = RunStats()
    translator = DiagnosticFixTranslator(project, build_export_surface(project), stats=stats, **kwargs)
    return translator, stats


def _no_default(name, specifier):
    return Diagnostic(
        2613,
        f"Module '\"{specifier}\"' has no default export. "
        f"Did you mean to use 'import {{ {name} }} from \"{specifier}\"' instead?",
    )


def _no_member(name, specifier):
    return Diagnostic(
        2614,
        f"Module '\"{specifier}\"' has no exported member '{name}'. "
        f"Did you mean to use 'import {name} from \"{specifier}\"' instead?",
    )


NAMED_HEADER = "export function Header() { return null; }\n"
DEFAULT_HEADER = "export default function Header() { return null; }\n"


# ── Tests: Default import on named export (TS2613) ───────────────────────


class TestDefaultImportOnNamedExport:
    def test_rewrites_default_import(self, load_project):
        project = load_project({
            "src/components/header.tsx": NAMED_HEADER,
            "src/app/page.tsx": 'import Header from "@/components/header";\n',
        })
        translator, stats = _translator(project)
        page = project.get_source_file("src/app/page.tsx")

        actions = translator.fix_source_file(page, [_no_default("Header", "@/components/header")])

        assert page.text == 'import { Header } from "@/components/header";\n'
        assert len(actions) == 1
        assert actions[0].code == 2613
        assert stats.diagnostics_resolved == 1
        assert stats.imports_fixed == 1

    def test_falls_back_to_path_match(self, load_project):
        project = load_project({
            "src/components/header.tsx": NAMED_HEADER,
            "src/app/page.tsx": "import Header from '../components/header';\n",
        })
        translator, _ = _translator(project)
        page = project.get_source_file("src/app/page.tsx")

        translator.fix_source_file(page, [_no_default("Header", "@/components/header")])
        assert page.text == "import { Header } from '../components/header';\n"

    def test_namespace_binding_is_split_into_its_own_import(self, load_project):
        project = load_project({
            "src/lib/foo.ts": "export function Foo() {}\nexport const bar = 1;\n",
            "src/app/page.tsx": 'import Foo, * as ns from "@/lib/foo";\n\nexport const x = [Foo, ns.bar];\n',
        })
        translator, stats = _translator(project)
        page = project.get_source_file("src/app/page.tsx")

        translator.fix_source_file(page, [_no_default("Foo", "@/lib/foo")])

        assert page.text == (
            'import * as ns from "@/lib/foo";\n'
            'import { Foo } from "@/lib/foo";\n'
            "\n"
            "export const x = [Foo, ns.bar];\n"
        )
        assert not page.syntax.has_errors
        assert stats.diagnostics_resolved == 1

    def test_no_matching_import(self, load_project):
        project = load_project({
            "src/components/header.tsx": NAMED_HEADER,
            "src/app/page.tsx": 'import { Header } from "@/components/header";\n',
        })
        translator, stats = _translator(project)
        page = project.get_source_file("src/app/page.tsx")

        assert translator.fix_source_file(page, [_no_default("Header", "@/components/header")]) == []
        assert not page.is_modified
        assert stats.diagnostics_resolved == 0


# ── Tests: Named import on default export (TS2614) ───────────────────────


class TestNamedImportOnDefaultExport:
    def test_rewrites_named_import(self, load_project):
        project = load_project({
            "src/components/header.tsx": DEFAULT_HEADER,
            "src/app/page.tsx": 'import { Header } from "@/components/header";\n',
        })
        translator, _ = _translator(project)
        page = project.get_source_file("src/app/page.tsx")

        translator.fix_source_file(page, [_no_member("Header", "@/components/header")])
        assert page.text == 'import Header from "@/components/header";\n'

    def test_stale_diagnostic_is_ignored(self, load_project):
        project = load_project({
            "src/components/header.tsx": NAMED_HEADER,
            "src/app/page.tsx": 'import { Header } from "@/components/header";\n',
        })
        translator, _ = _translator(project)
        page = project.get_source_file("src/app/page.tsx")

        assert translator.fix_source_file(page, [_no_member("Header", "@/components/header")]) == []
        assert not page.is_modified


# ── Tests: Unresolved identifiers (TS2304 / TS2552) ──────────────────────


class TestUnresolvedIdentifier:
    def test_special_import_for_cn(self, load_project):
        project = load_project({
            "src/components/button.tsx": 'export function Button() {\n  return <button className={cn("btn")} />;\n}\n',
        })
        translator, stats = _translator(project)
        button = project.get_source_file("src/components/button.tsx")

        translator.fix_source_file(button, [Diagnostic(2304, "Cannot find name 'cn'.")])
        assert button.text == (
            'import { cn } from "@/lib/utils";\n'
            'export function Button() {\n  return <button className={cn("btn")} />;\n}\n'
        )
        assert stats.imports_fixed == 1
        assert translator.special_imports == FixerSettings().special_imports

    def test_configured_special_imports(self, load_project):
        project = load_project({"src/app/page.tsx": "export const x = clsx('a');\n"})
        translator, _ = _translator(project, special_imports={"clsx": SpecialImport(specifier="clsx", is_default=True)})
        page = project.get_source_file("src/app/page.tsx")

        translator.fix_source_file(page, [Diagnostic(2304, "Cannot find name 'clsx'.")])
        assert page.text == 'import clsx from "clsx";\nexport const x = clsx(\'a\');\n'

    def test_default_export_from_surface(self, load_project):
        project = load_project({
            "src/components/header.tsx": DEFAULT_HEADER,
            "src/app/page.tsx": 'import { Nav } from "@/components/nav";\n\nexport const x = [Header, Nav];\n',
        })
        translator, _ = _translator(project)
        page = project.get_source_file("src/app/page.tsx")

        translator.fix_source_file(page, [Diagnostic(2304, "Cannot find name 'Header'.")])
        assert page.text == (
            'import { Nav } from "@/components/nav";\n'
            'import Header from "@/components/header";\n'
            "\nexport const x = [Header, Nav];\n"
        )

    def test_named_export_from_surface(self, load_project):
        project = load_project({
            "src/lib/format.ts": "export function formatDate() {}\n",
            "src/app/page.tsx": "export const x = formatDate();\n",
        })
        translator, _ = _translator(project)
        page = project.get_source_file("src/app/page.tsx")

        translator.fix_source_file(page, [Diagnostic(2304, "Cannot find name 'formatDate'.")])
        assert page.text == 'import { formatDate } from "@/lib/format";\nexport const x = formatDate();\n'

    def test_already_imported_is_skipped(self, load_project):
        project = load_project({
            "src/lib/utils.ts": "export function cn() {}\n",
            "src/app/page.tsx": 'import { cn } from "@/lib/utils";\n',
        })
        translator, _ = _translator(project)
        page = project.get_source_file("src/app/page.tsx")

        assert translator.fix_source_file(page, [Diagnostic(2304, "Cannot find name 'cn'.")]) == []
        assert not page.is_modified

    def test_unknown_name_is_left_alone(self, load_project):
        project = load_project({"src/app/page.tsx": "export const x = Missing;\n"})
        translator, _ = _translator(project)
        page = project.get_source_file("src/app/page.tsx")

        assert translator.fix_source_file(page, [Diagnostic(2304, "Cannot find name 'Missing'.")]) == []
        assert not page.is_modified

    def test_no_self_import(self, load_project):
        project = load_project({"src/lib/format.ts": "export function formatDate() {}\nformatDate();\n"})
        translator, _ = _translator(project)
        module = project.get_source_file("src/lib/format.ts")

        assert translator.fix_source_file(module, [Diagnostic(2304, "Cannot find name 'formatDate'.")]) == []


# ── Tests: Unresolvable module paths (TS2307) ────────────────────────────


class TestUnresolvableModulePath:
    def test_collapses_alias_traversal(self, load_project):
        project = load_project({
            "src/app/page.tsx": 'import { cn } from "@/../lib/utils";\nimport type { X } from "@/../lib/utils";\n',
        })
        translator, _ = _translator(project)
        page = project.get_source_file("src/app/page.tsx")

        message = "Cannot find module '@/../lib/utils' or its corresponding type declarations."
        translator.fix_source_file(page, [Diagnostic(2307, message)])
        assert page.text == 'import { cn } from "@/lib/utils";\nimport type { X } from "@/lib/utils";\n'

    def test_other_missing_modules_are_left_alone(self, load_project):
        project = load_project({"src/app/page.tsx": 'import { x } from "left-pad";\n'})
        translator, _ = _translator(project)
        page = project.get_source_file("src/app/page.tsx")

        message = "Cannot find module 'left-pad' or its corresponding type declarations."
        assert translator.fix_source_file(page, [Diagnostic(2307, message)]) == []


# ── Tests: Batching and caps ─────────────────────────────────────────────


class TestTranslatorBatch:
    def test_per_file_cap(self, load_project):
        project = load_project({
            "src/lib/a.ts": "export const a = 1;\n",
            "src/lib/b.ts": "export const b = 1;\n",
            "src/app/page.tsx": "export const x = [a, b];\n",
        })
        translator, stats = _translator(project, max_diagnostics_per_file=1)
        page = project.get_source_file("src/app/page.tsx")

        translator.fix_source_file(page, [
            Diagnostic(2304, "Cannot find name 'a'."),
            Diagnostic(2304, "Cannot find name 'b'."),
        ])
        assert page.text == 'import { a } from "@/lib/a";\nexport const x = [a, b];\n'
        assert stats.diagnostics_resolved == 1

    def test_unrecognized_codes_are_ignored(self, load_project):
        project = load_project({"src/app/page.tsx": "export const x: number = 'a';\n"})
        translator, _ = _translator(project)
        page = project.get_source_file("src/app/page.tsx")

        diagnostic = Diagnostic(2322, "Type 'string' is not assignable to type 'number'.")
        assert translator.fix_source_file(page, [diagnostic]) == []

    def test_fix_diagnostics_returns_changed_modules(self, load_project):
        project = load_project({
            "src/lib/utils.ts": "export function cn() {}\n",
            "src/app/page.tsx": "export const x = cn();\n",
            "src/app/about.tsx": "export const y = 1;\n",
        })
        translator, _ = _translator(project)
        page = project.get_source_file("src/app/page.tsx")
        about = project.get_source_file("src/app/about.tsx")

        changed = fix_diagnostics(
            translator,
            [page, about],
            {page.file_path: [Diagnostic(2304, "Cannot find name 'cn'.")]},
        )
        assert changed == [page]
        assert len(translator.actions) == 1
