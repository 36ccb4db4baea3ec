"""Tests for the named-export normalizer."""

from tsmend.core.exports import NamedExportNormalizer
from tsmend.core.stats import RunStats


HEADER = '''function Header() {
  return <header>Site</header>;
}

export default Header;
'''


class TestNamedExportNormalizer:
    def test_converts_module_and_importers(self, load_project):
        project = load_project({
            "src/components/header.tsx": HEADER,
            "src/app/page.tsx": 'import Header from "@/components/header";\n\nexport const p = Header;\n',
            "src/app/about/page.tsx": "import Header, { Nav } from '../../components/header';\n",
        })
        stats = RunStats()
        touched = NamedExportNormalizer(project, stats).normalize(["src/components/header.tsx"])

        header = project.get_source_file("src/components/header.tsx")
        page = project.get_source_file("src/app/page.tsx")
        about = project.get_source_file("src/app/about/page.tsx")

        assert header.text == "export function Header() {\n  return <header>Site</header>;\n}\n"
        assert page.text == 'import { Header } from "@/components/header";\n\nexport const p = Header;\n'
        assert about.text == "import { Header, Nav } from '../../components/header';\n"
        assert touched == {header.file_path, page.file_path, about.file_path}
        assert stats.exports_refactored == 1
        assert stats.imports_fixed == 2

    def test_importer_with_different_local_name_is_left_alone(self, load_project):
        project = load_project({
            "src/components/header.tsx": HEADER,
            "src/app/page.tsx": 'import SiteHeader from "@/components/header";\n',
        })
        NamedExportNormalizer(project).normalize(["src/components/header.tsx"])
        assert not project.get_source_file("src/app/page.tsx").is_modified

    def test_importer_of_other_module_is_left_alone(self, load_project):
        project = load_project({
            "src/components/header.tsx": HEADER,
            "src/legacy/header.tsx": HEADER,
            "src/app/page.tsx": 'import Header from "@/legacy/header";\n',
        })
        NamedExportNormalizer(project).normalize(["src/components/header.tsx"])
        assert not project.get_source_file("src/app/page.tsx").is_modified
        assert not project.get_source_file("src/legacy/header.tsx").is_modified

    def test_declaration_default_is_untouched(self, load_project):
        project = load_project({
            "src/components/header.tsx": "export default function Header() { return null; }\n",
        })
        stats = RunStats()
        assert NamedExportNormalizer(project, stats).normalize(["src/components/header.tsx"]) == set()
        assert stats.exports_refactored == 0

    def test_imported_identifier_is_untouched(self, load_project):
        project = load_project({
            "src/components/header.tsx": 'import { Header } from "./base";\nexport default Header;\n',
        })
        assert NamedExportNormalizer(project).normalize(["src/components/header.tsx"]) == set()

    def test_unknown_module_is_skipped(self, load_project, caplog):
        project = load_project({"src/a.ts": "export const a = 1;\n"})
        assert NamedExportNormalizer(project).normalize(["src/missing.tsx"]) == set()
        assert "not in project" in caplog.text

    def test_already_exported_declaration(self, load_project):
        project = load_project({
            "src/lib/format.ts": "export function format() {}\nexport default format;\n",
        })
        NamedExportNormalizer(project).normalize(["src/lib/format.ts"])
        assert project.get_source_file("src/lib/format.ts").text == "export function format() {}\n"
