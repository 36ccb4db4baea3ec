"""Tests for the command-line entry point."""

import io
import os

import pytest

from tsmend.__main__ import build_parser, main


@pytest.fixture(autouse=True)
def no_compiler(monkeypatch):
    monkeypatch.setenv("TSMEND_TSC_ENABLED", "false")


TSC_OUTPUT = (
    "src/app/page.tsx(1,8): error TS2613: Module '\"@/components/header\"' has no default export. "
    "Did you mean to use 'import { Header } from \"@/components/header\"' instead?\n"
)


class TestArgumentParsing:
    def test_project_is_required(self):
        with pytest.raises(SystemExit) as exc:
            build_parser().parse_args([])
        assert exc.value.code == 2

    def test_build_log_without_path_reads_stdin(self):
        args = build_parser().parse_args(["proj", "--build-log"])
        assert args.build_log == "-"
        assert args.files == []

    def test_index_mode_flags(self):
        assert build_parser().parse_args(["proj", "--targeted"]).index_mode == "targeted"
        assert build_parser().parse_args(["proj", "--full"]).index_mode == "full"
        assert build_parser().parse_args(["proj"]).index_mode is None


class TestMain:
    def test_fixes_project_and_prints_summary(self, write_project, capsys):
        root = write_project({
            "src/components/header.tsx": "export function Header() { return null; }\n",
            "src/app/page.tsx": 'import Header from "@/components/header";\n',
            "tsc.log": TSC_OUTPUT,
        })

        code = main([root, "--diagnostics-file", os.path.join(root, "tsc.log")])

        assert code == 0
        with open(os.path.join(root, "src/app/page.tsx"), encoding="utf-8") as f:
            assert f.read() == 'import { Header } from "@/components/header";\n'
        out = capsys.readouterr().out
        assert "Files processed:      2" in out
        assert "Diagnostics resolved: 1" in out

    def test_build_log_from_stdin(self, write_project, monkeypatch):
        root = write_project({
            "src/components/bar.tsx": "export default function Bar() { return null; }\n",
            "src/app/page.tsx": 'import { Bar } from "@/components/bar";\n',
        })
        monkeypatch.setattr("sys.stdin", io.StringIO("'Bar' is not exported from '@/components/bar'"))

        assert main([root, "--build-log"]) == 0
        with open(os.path.join(root, "src/app/page.tsx"), encoding="utf-8") as f:
            assert f.read() == 'import Bar from "@/components/bar";\n'

    def test_missing_project(self, tmp_path):
        assert main([str(tmp_path / "missing")]) == 1

    def test_missing_config(self, write_project, tmp_path):
        root = write_project({"src/a.ts": "export const a = 1;\n"})
        assert main([root, "--config", str(tmp_path / "nope.yaml")]) == 1
