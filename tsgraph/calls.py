"""Per-file function call analysis.

Two passes over one syntax tree:

1. Symbol collection: names of declared functions, variables bound to
   function/arrow expressions, and import bindings (local name -> module).
2. Call-site collection: every call inside a named function body, tagged
   as local, imported or unknown. Program-level calls are ignored.

Only plain identifiers (``foo()``) and member access on two identifiers
(``obj.method()``) produce a callee name; other callee shapes are skipped.
"""

import logging
from typing import Iterator

from .models import IMPORTED, LOCAL, UNKNOWN, FunctionCallEdge
from .parser import SyntaxTree, parse

logger = logging.getLogger(__name__)

ANONYMOUS = "<anonymous>"

FUNCTION_DECLARATIONS = {"function_declaration", "generator_function_declaration"}
FUNCTION_EXPRESSIONS = {"function_expression", "function", "generator_function", "arrow_function"}

# Platform/runtime names never reported as call targets. A member call is
# also skipped when its object is listed (console.log, Math.max, ...).
BUILTINS = frozenset({
    "console",
    "Math",
    "JSON",
    "Date",
    "Promise",
    "setTimeout",
    "setInterval",
    "clearTimeout",
    "clearInterval",
    "window",
    "document",
    "globalThis",
    "Array",
    "Object",
    "Number",
    "String",
    "Boolean",
    "Symbol",
    "BigInt",
    "isNaN",
    "eval",
    "alert",
    "prompt",
    "fetch",
    "XMLHttpRequest",
    "requestAnimationFrame",
    "cancelAnimationFrame",
    "localStorage",
    "sessionStorage",
    "indexedDB",
    "Headers",
    "Request",
    "Response",
    "WebSocket",
    "Worker",
    "MessageChannel",
    "MessagePort",
    "MessageEvent",
    "Notification",
    "dispatch",
    "useContext",
    "createContext",
    "createRoot",
    "document.getElementById",
    "useReducer",
    "parseFloat",
    "num.toString",
    "num.toExponential",
    "isFinite",
    "value.includes",
})


def is_builtin(name: str) -> bool:
    if name in BUILTINS:
        return True
    obj, sep, _ = name.partition(".")
    return bool(sep) and obj in BUILTINS


def _walk(node) -> Iterator:
    """Yield ``node`` and its descendants in pre-order."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def _unwrap_parens(node):
    while node is not None and node.type == "parenthesized_expression":
        inner = [c for c in node.named_children if c.type != "comment"]
        if len(inner) != 1:
            return node
        node = inner[0]
    return node


def _bound_function(declarator):
    """Return (name node, function node) for ``name = <function>`` declarators."""
    name_node = declarator.child_by_field_name("name")
    value = _unwrap_parens(declarator.child_by_field_name("value"))
    if name_node is None or name_node.type != "identifier":
        return None
    if value is None or not value.is_named or value.type not in FUNCTION_EXPRESSIONS:
        return None
    return name_node, value


def _is_default_export(node) -> bool:
    return any(child.type == "default" for child in node.children)


class CallAnalyzer:
    """Collects call edges from one parsed file."""

    def __init__(self, syntax_tree: SyntaxTree):
        self.tree = syntax_tree
        self.local_functions: set[str] = set()
        self.imported_functions: dict[str, str] = {}

    def collect_symbols(self) -> None:
        """First pass: declared functions and import bindings."""
        for node in _walk(self.tree.root):
            if node.type in FUNCTION_DECLARATIONS:
                name_node = node.child_by_field_name("name")
                if name_node is not None:
                    self.local_functions.add(self.tree.text_of(name_node))

            elif node.type == "variable_declarator":
                bound = _bound_function(node)
                if bound:
                    self.local_functions.add(self.tree.text_of(bound[0]))

            elif node.type == "import_statement":
                self._collect_import(node)

    def _collect_import(self, node) -> None:
        source_node = node.child_by_field_name("source")
        if source_node is None:
            return
        module = self.tree.text_of(source_node)[1:-1]

        for clause in node.children:
            if clause.type != "import_clause":
                continue
            for child in clause.children:
                if child.type == "identifier":
                    # import Foo from "module"
                    self.imported_functions[self.tree.text_of(child)] = module
                elif child.type == "named_imports":
                    # import { foo, bar as baz } from "module"
                    for spec in child.named_children:
                        if spec.type != "import_specifier":
                            continue
                        local = spec.child_by_field_name("alias") or spec.child_by_field_name("name")
                        if local is not None and local.type == "identifier":
                            self.imported_functions[self.tree.text_of(local)] = module

    def named_functions(self) -> list[tuple[str, object]]:
        """(caller name, function node) for every analyzable function, pre-order."""
        functions = []
        for node in _walk(self.tree.root):
            if node.type in FUNCTION_DECLARATIONS:
                name_node = node.child_by_field_name("name")
                name = self.tree.text_of(name_node) if name_node is not None else ANONYMOUS
                functions.append((name, node))

            elif node.type == "variable_declarator":
                bound = _bound_function(node)
                if bound:
                    functions.append((self.tree.text_of(bound[0]), bound[1]))

            elif node.type == "export_statement" and _is_default_export(node):
                # export default function () {}
                value = node.child_by_field_name("value")
                if value is not None and value.type in ("function_expression", "function", "generator_function"):
                    functions.append((ANONYMOUS, value))
        return functions

    def callee_name(self, call) -> str | None:
        """Textual call target, or None for shapes that are not tracked."""
        if any(child.type == "optional_chain" for child in call.children):
            return None
        arguments = call.child_by_field_name("arguments")
        if arguments is not None and arguments.type == "template_string":
            # tagged template, not a call
            return None

        callee = call.child_by_field_name("function")
        if callee is None:
            return None

        if callee.type == "identifier":
            return self.tree.text_of(callee)

        if callee.type == "member_expression":
            if any(child.type == "optional_chain" for child in callee.children):
                return None
            obj = callee.child_by_field_name("object")
            prop = callee.child_by_field_name("property")
            if obj is not None and prop is not None and obj.type == "identifier" and prop.type == "property_identifier":
                return f"{self.tree.text_of(obj)}.{self.tree.text_of(prop)}"

        return None

    def resolve(self, name: str) -> tuple[str, str | None]:
        if name in self.local_functions:
            return LOCAL, None
        if name in self.imported_functions:
            return IMPORTED, self.imported_functions[name]
        return UNKNOWN, None

    def collect_calls(self) -> list[FunctionCallEdge]:
        """Second pass: call sites inside named functions, de-duplicated."""
        edges = []
        seen: set[tuple[str, str]] = set()

        for caller, func_node in self.named_functions():
            for node in _walk(func_node):
                if node.type != "call_expression":
                    continue
                name = self.callee_name(node)
                if not name or is_builtin(name):
                    continue

                key = (caller, name)
                if key in seen:
                    continue
                seen.add(key)

                resolution, source = self.resolve(name)
                line, column = self.tree.location_of(node)
                edges.append(FunctionCallEdge(
                    callee_name=name,
                    caller_name=caller,
                    line=line,
                    column=column,
                    resolution=resolution,
                    import_source=source,
                ))
        return edges


def analyze_tree(syntax_tree: SyntaxTree) -> list[FunctionCallEdge]:
    """Run both passes over an already parsed file."""
    analyzer = CallAnalyzer(syntax_tree)
    analyzer.collect_symbols()
    return analyzer.collect_calls()


def analyze(source_text: str, dialect: str = "tsx", path: str = "<string>") -> list[FunctionCallEdge]:
    """Parse one file's source and return its call edges.

    Raises:
        ParseError: If the source does not parse
    """
    return analyze_tree(parse(source_text, dialect, path=path))
