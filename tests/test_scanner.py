"""End-to-end tests for scanning and analysis runs."""

import pytest

from tsgraph.errors import FetchError
from tsgraph.graph import import_adjacency
from tsgraph.ignore import load_exclusions
from tsgraph.scanner import PROGRESS_COMPLETE, analyze_project, scan_tree
from tsgraph.sources import LocalTreeProvider, SourceEntry


class TestAnalyzeProject:
    def test_two_file_project(self, write_project):
        root = write_project({
            "a.ts": 'import { b } from "./b";\nfunction run() { b(); helper(); }\n',
            "b.ts": "export function b() {}\n",
        })

        result = analyze_project(LocalTreeProvider(root))

        assert import_adjacency(result.tree) == {"a.ts": ["b.ts"], "b.ts": []}
        edges = [(e.caller_name, e.callee_name, e.resolution, e.import_source) for e in result.call_edges]
        assert edges == [
            ("run", "b", "imported", "./b"),
            ("run", "helper", "unknown", None),
        ]
        assert result.errors == []

    def test_progress_order(self, write_project):
        root = write_project({
            "a.ts": "",
            "lib/x.ts": "",
            "z.md": "# notes",
        })
        seen = []

        analyze_project(LocalTreeProvider(root), on_progress=seen.append)

        assert seen == ["a.ts", "x.ts", "z.md", PROGRESS_COMPLETE]

    def test_non_source_files_not_parsed(self, write_project):
        root = write_project({"style.css": "body {}", "a.js": "const a = 1;"})
        scan = scan_tree(LocalTreeProvider(root))
        by_name = {node.name: node for node in scan.tree.iter_files()}
        assert by_name["style.css"].raw_text is None
        assert by_name["style.css"].syntax_tree is None
        assert by_name["a.js"].raw_text == "const a = 1;"
        assert by_name["a.js"].syntax_tree is not None

    def test_parse_failure_is_file_scoped(self, write_project):
        root = write_project({
            "bad.ts": "function broken( {\n",
            "good.ts": 'import "./bad";\nfunction ok() { work(); }\n',
        })

        result = analyze_project(LocalTreeProvider(root))

        assert [e.path for e in result.errors] == ["bad.ts"]
        assert result.errors[0].line is not None
        bad = next(f for f in result.tree.iter_files() if f.path == "bad.ts")
        assert bad.syntax_tree is None
        assert bad.raw_text == "function broken( {\n"
        assert import_adjacency(result.tree) == {"good.ts": []}
        assert [(e.caller_name, e.callee_name) for e in result.call_edges] == [("ok", "work")]

    def test_cross_file_dependencies(self, write_project):
        root = write_project({
            "main.js": "setup();\n",
            "lib/setup.js": "function setup() {}\n",
        })
        result = analyze_project(LocalTreeProvider(root))
        assert [d.to_dict() for d in result.dependencies] == [
            {"caller": "setup", "callee": "setup", "file": "main.js"},
        ]

    def test_cyclic_imports_terminate(self, write_project):
        root = write_project({
            "a.ts": 'import { b } from "./b";\nexport const a = 1;\n',
            "b.ts": 'import { a } from "./a";\nexport const b = 2;\n',
        })
        result = analyze_project(LocalTreeProvider(root))
        assert import_adjacency(result.tree) == {"a.ts": ["b.ts"], "b.ts": ["a.ts"]}

    def test_runs_are_isolated(self, write_project):
        root = write_project({"a.ts": "function f() { g(); }\n"})
        provider = LocalTreeProvider(root)

        first = analyze_project(provider)
        second = analyze_project(provider)

        assert len(first.call_edges) == len(second.call_edges) == 1
        assert first.call_edges is not second.call_edges

    def test_to_dict(self, write_project):
        root = write_project({"src/a.ts": "function f() { g(); }\n"})
        data = analyze_project(LocalTreeProvider(root)).to_dict()

        src = data["tree"]["contents"][0]
        assert src["path"] == "src"
        assert src["contents"][0]["path"] == "src/a.ts"
        assert src["contents"][0]["parsed"] is True
        assert data["call_edges"][0] == {
            "name": "g",
            "caller": "f",
            "location": {"line": 1, "column": 15},
            "resolved": "unknown",
        }


class TestScanTree:
    def test_exclusions(self, write_project):
        root = write_project({
            "package.json": "{}",
            "node_modules/dep/index.js": "function dep() {}",
            "dist/bundle.js": "x();",
            "src/a.ts": "",
        })

        scan = scan_tree(LocalTreeProvider(root), exclusions=load_exclusions(root))

        assert [node.path for node in scan.tree.iter_nodes()] == ["", "src", "src/a.ts"]

    def test_default_template_applies(self, write_project):
        root = write_project({
            "package.json": "{}",
            "node_modules/dep/index.js": "function dep() {}",
            "src/a.ts": "",
        })
        scan = scan_tree(LocalTreeProvider(root))
        assert [node.path for node in scan.tree.iter_files()] == ["src/a.ts"]

    def test_analyze_project_skips_dependencies(self, write_project):
        root = write_project({
            "node_modules/dep/index.js": "function setup() {}\n",
            "main.js": "setup();\n",
        })
        result = analyze_project(LocalTreeProvider(root))
        assert [f.path for f in result.tree.iter_files()] == ["main.js"]
        assert result.dependencies == []

    def test_respect_ignore_false_keeps_everything(self, write_project):
        root = write_project({"package.json": "{}", "src/a.ts": ""})
        scan = scan_tree(LocalTreeProvider(root), respect_ignore=False)
        assert [node.path for node in scan.tree.iter_files()] == ["package.json", "src/a.ts"]

    def test_start_path(self, write_project):
        root = write_project({"src/a.ts": "", "other/b.ts": ""})
        scan = scan_tree(LocalTreeProvider(root), "src")
        assert scan.tree.path == "src"
        assert scan.tree.name == "src"
        assert [node.path for node in scan.tree.iter_files()] == ["src/a.ts"]

    def test_oversize_file_recorded(self, write_project):
        root = write_project({"big.ts": "const value = 1234567890;\n"})
        scan = scan_tree(LocalTreeProvider(root), max_file_size=10)
        assert scan.errors[0].path == "big.ts"
        assert scan.tree.children[0].syntax_tree is None

    def test_missing_root_is_fatal(self, tmp_path):
        with pytest.raises(FetchError):
            scan_tree(LocalTreeProvider(tmp_path / "missing"))

    def test_fetch_error_propagates(self):
        class BrokenProvider:
            def list_entries(self, path):
                return [SourceEntry(kind="file", name="a.ts", path="a.ts", content_ref="a.ts")]

            def fetch_content(self, content_ref):
                raise FetchError(content_ref, "gone")

        with pytest.raises(FetchError):
            analyze_project(BrokenProvider())
