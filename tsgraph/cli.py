"""Command line interface.

    tsgraph analyze TARGET       full run (tree, call edges, dependencies, errors)
    tsgraph imports TARGET       import graph as {file: [imported paths]}
    tsgraph calls FILE           call edges of one local file
    tsgraph resolve SPEC FILE    resolve a relative import specifier

TARGET is a local directory or a https://github.com/<owner>/<repo>/<path> URL.
Results are printed as JSON.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from .calls import analyze_tree
from .errors import FetchError, InvalidUrlFormat, NonRelativeImport, ParseError
from .graph import import_adjacency
from .ignore import load_exclusions
from .parser import parse_file_text
from .resolver import resolve_import
from .scanner import analyze_project
from .sources import provider_for


def _run_analysis(args):
    project_dir = args.target if not args.target.startswith(("http://", "https://")) else None
    exclusions = load_exclusions(project_dir, extra=args.exclude)
    provider, start = provider_for(args.target)

    def report(name: str):
        print(name, file=sys.stderr)

    try:
        return analyze_project(
            provider,
            start,
            on_progress=report if args.progress else None,
            exclusions=exclusions,
        )
    finally:
        provider.close()


def cmd_analyze(args) -> object:
    return _run_analysis(args).to_dict()


def cmd_imports(args) -> object:
    return import_adjacency(_run_analysis(args).tree)


def cmd_calls(args) -> object:
    path = Path(args.file)
    edges = analyze_tree(parse_file_text(path.read_text(encoding="utf-8"), str(path)))
    return [edge.to_dict() for edge in edges]


def cmd_resolve(args) -> object:
    return resolve_import(args.specifier, args.file)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tsgraph",
        description="Import and call graphs for JavaScript/TypeScript projects",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    for name, func, help_text in (
        ("analyze", cmd_analyze, "Run a full analysis"),
        ("imports", cmd_imports, "Print the import graph"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("target", help="Local directory or GitHub URL")
        p.add_argument("--exclude", action="append", default=[], metavar="PATTERN",
                       help="Extra exclusion pattern (gitignore syntax, repeatable)")
        p.add_argument("--progress", action="store_true", help="Print each file name to stderr")
        p.set_defaults(func=func)

    p = sub.add_parser("calls", help="Print call edges of one file")
    p.add_argument("file")
    p.set_defaults(func=cmd_calls)

    p = sub.add_parser("resolve", help="Resolve a relative import specifier")
    p.add_argument("specifier")
    p.add_argument("file", help="Project-relative path of the importing file")
    p.set_defaults(func=cmd_resolve)

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        result = args.func(args)
    except (FetchError, InvalidUrlFormat, ParseError, NonRelativeImport, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if isinstance(result, str):
        print(result)
    else:
        print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
