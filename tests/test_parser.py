"""Tests for the tree-sitter parsing layer."""

import pytest

from tsgraph.errors import ParseError
from tsgraph.parser import dialect_for_path, is_source_file, parse, parse_file_text


class TestDialects:
    @pytest.mark.parametrize("name,dialect", [
        ("a.ts", "typescript"),
        ("a.tsx", "tsx"),
        ("a.js", "javascript"),
        ("a.jsx", "javascript"),
        ("src/deep/A.TSX", "tsx"),
    ])
    def test_dialect_for_path(self, name, dialect):
        assert dialect_for_path(name) == dialect

    @pytest.mark.parametrize("name", ["README.md", "style.css", "Makefile", "data.json"])
    def test_non_source(self, name):
        assert dialect_for_path(name) is None
        assert not is_source_file(name)

    def test_unknown_dialect(self):
        with pytest.raises(ValueError):
            parse("const a = 1;", "python")


class TestParse:
    def test_body_lists_top_level_statements(self):
        tree = parse('import { a } from "./a";\nfunction f() {}\nf();\n', "typescript")
        assert [node.type for node in tree.body()] == [
            "import_statement",
            "function_declaration",
            "expression_statement",
        ]

    def test_jsx_in_tsx(self):
        tree = parse("function App() { return <div>{render()}</div>; }", "tsx")
        assert tree.root.type == "program"

    def test_jsx_in_javascript(self):
        tree = parse("const App = () => <span>hi</span>;", "javascript")
        assert not tree.root.has_error

    def test_syntax_error_has_location(self):
        with pytest.raises(ParseError) as exc_info:
            parse("const a = 1;\nconst b = ;\n", "typescript", path="src/bad.ts")
        err = exc_info.value
        assert err.path == "src/bad.ts"
        assert err.line == 2
        assert err.column >= 0
        assert "src/bad.ts:2:" in str(err)

    def test_syntax_error_points_past_line_start(self):
        with pytest.raises(ParseError) as exc_info:
            parse("function broken( {\n", "typescript", path="bad.ts")
        err = exc_info.value
        assert err.line == 1
        assert err.column > 0

    def test_location_counts_utf16_units(self):
        source = "const s = '😀'; go();"
        tree = parse(source, "typescript")
        call = tree.body()[1].named_children[0]
        assert call.type == "call_expression"
        assert call.start_point[1] == 18
        assert tree.location_of(call) == (1, 16)

    def test_parse_file_text_uses_extension(self):
        tree = parse_file_text("let x: number = 1;", "src/x.ts")
        assert tree.dialect == "typescript"

    def test_parse_file_text_rejects_non_source(self):
        with pytest.raises(ValueError):
            parse_file_text("# hi", "README.md")
