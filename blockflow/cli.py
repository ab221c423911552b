"""
blockflow — command line front end
==================================
Compile saved diagrams, diff sketches and import sketches back into
diagrams without the editor.

Usage
-----
    blockflow compile <flow.json> [--out FILE] [--print] [--strict]
    blockflow diff    <old.ino> <new.ino>
    blockflow import  <sketch.ino> [--out FILE]
    blockflow validate <flow.json> [--strict]

Options
-------
    --strict   Reject flow files that fail schema validation, including
               unknown block types (default: compile whatever can be read).
    -v         Verbose logging (DEBUG).

Examples
--------
    # Print the sketch for a saved diagram:
    blockflow compile lessons/blink.json --print

    # Compare a learner's sketch with the reference solution:
    blockflow diff submission.ino solution.ino
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from . import compile_flow
from .diff import diff_lines, format_diff, has_changes
from .importer import parse_source_to_flow
from .schema import SchemaError, load_file, validate, validate_file

logger = logging.getLogger("blockflow.cli")


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="blockflow",
        description="Compile visual block diagrams to Arduino sketches.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    p.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    sub = p.add_subparsers(dest="command", required=True)

    c = sub.add_parser("compile", help="Compile a flow JSON file to an Arduino sketch.")
    c.add_argument("flow_json", metavar="flow.json", help="Path to the flow JSON file.")
    c.add_argument(
        "--out",
        metavar="FILE",
        help="Output .ino file (default: next to the input, same stem).",
    )
    c.add_argument(
        "--print",
        dest="print_only",
        action="store_true",
        help="Print generated source to stdout instead of writing a file.",
    )
    c.add_argument(
        "--strict",
        action="store_true",
        help="Validate the flow file first and fail on any problem.",
    )

    d = sub.add_parser("diff", help="Line diff of two source files.")
    d.add_argument("old", help="Old file (e.g. your code).")
    d.add_argument("new", help="New file (e.g. the solution).")

    i = sub.add_parser("import", help="Parse an Arduino sketch into flow JSON.")
    i.add_argument("sketch", help="Path to the .ino source file.")
    i.add_argument("--out", metavar="FILE", help="Write the flow JSON here instead of stdout.")

    v = sub.add_parser("validate", help="Validate a flow JSON file.")
    v.add_argument("flow_json", metavar="flow.json", help="Path to the flow JSON file.")
    v.add_argument(
        "--strict",
        action="store_true",
        help="Treat unknown block types as errors rather than warnings.",
    )
    return p


def _error(message: str) -> int:
    print(f"[error] {message}", file=sys.stderr)
    return 1


def _read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8")


# ── Subcommands ───────────────────────────────────────────────────────────────

def _cmd_compile(args: argparse.Namespace) -> int:
    json_path = Path(args.flow_json)
    if not json_path.exists():
        return _error(f"File not found: {json_path}")

    try:
        if args.strict:
            data = validate_file(json_path, strict=True)
        else:
            data = load_file(json_path)
    except json.JSONDecodeError as exc:
        return _error(f"Invalid JSON in {json_path}: {exc}")
    except SchemaError as exc:
        return _error(f"Schema validation failed: {exc}")

    source = compile_flow(data)

    if args.print_only:
        sys.stdout.write(source)
        return 0

    out_path = Path(args.out) if args.out else json_path.with_suffix(".ino")
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(source, encoding="utf-8")
    print(f"[blockflow] wrote  : {out_path}")
    return 0


def _cmd_diff(args: argparse.Namespace) -> int:
    old_path, new_path = Path(args.old), Path(args.new)
    for path in (old_path, new_path):
        if not path.exists():
            return _error(f"File not found: {path}")

    ops = diff_lines(_read_text(old_path), _read_text(new_path))
    sys.stdout.write(format_diff(ops, old_label=str(old_path), new_label=str(new_path)))
    return 1 if has_changes(ops) else 0


def _cmd_import(args: argparse.Namespace) -> int:
    sketch = Path(args.sketch)
    if not sketch.exists():
        return _error(f"File not found: {sketch}")

    state = parse_source_to_flow(_read_text(sketch))
    payload = json.dumps(state.to_dict(), indent=2) + "\n"
    if args.out:
        Path(args.out).write_text(payload, encoding="utf-8")
        print(f"[blockflow] nodes  : {len(state.nodes)}")
        print(f"[blockflow] wrote  : {args.out}")
    else:
        sys.stdout.write(payload)
    return 0


def _cmd_validate(args: argparse.Namespace) -> int:
    json_path = Path(args.flow_json)
    if not json_path.exists():
        return _error(f"File not found: {json_path}")
    try:
        data = load_file(json_path)
        validate(data, strict=args.strict)
    except json.JSONDecodeError as exc:
        return _error(f"Invalid JSON in {json_path}: {exc}")
    except SchemaError as exc:
        return _error(f"Schema validation failed: {exc}")

    print(f"[blockflow] ok     : {json_path} "
          f"({len(data['nodes'])} nodes, {len(data['edges'])} edges)")
    return 0


_COMMANDS = {
    "compile": _cmd_compile,
    "diff": _cmd_diff,
    "import": _cmd_import,
    "validate": _cmd_validate,
}


def main(argv: Optional[list] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.debug("running %s", args.command)
    return _COMMANDS[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
