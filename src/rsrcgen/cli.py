"""Command line interface for rsrcgen."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .api import CompileOptions, compile_script, describe_types, inspect_binary
from .errors import RsrcError
from .logging import configure_logging
from .reporting import (
    JsonLinesReporter,
    PlainReporter,
    RichReporter,
    SilentReporter,
    get_reporter,
    set_reporter,
    set_verbosity,
)


def _read_source(err: RsrcError) -> str | None:
    pos = err.position
    if pos is None or not pos.path:
        return None
    try:
        return Path(pos.path).read_text(encoding="utf-8")
    except OSError:
        return None


def _build_cmd(args: argparse.Namespace) -> int:
    opts = CompileOptions(
        script=args.script,
        types_path=args.types,
        type_name=args.type,
        source_root=args.source_root,
        output_dir=args.output,
        manifest_path=args.emit_manifest,
        encoding=args.encoding,
    )
    result = compile_script(opts)
    if args.json:
        print(
            json.dumps(
                [
                    {
                        "id": r.resource_id,
                        "name": r.name,
                        "type": r.type_code,
                        "data": r.data.hex(),
                    }
                    for r in result.resources
                ],
                indent=2,
            )
        )
    return 0


def _inspect_cmd(args: argparse.Namespace) -> int:
    info = inspect_binary(args.resource, args.types, args.type)
    rep = get_reporter()
    rep.section(f"{info['type']} ({info['code']})")
    for entry in info["entries"]:
        rep.status(f"{entry['offset']:>6}  {entry['name']} = {entry['value']}")
    for issue in info["issues"]:
        rep.warning(issue)
    rep.status(
        f"Inspect summary: size={info['size']} issues={len(info['issues'])}"
    )
    if args.json:
        print(json.dumps(info, indent=2, sort_keys=True))
    return 1 if info["issues"] else 0


def _types_cmd(args: argparse.Namespace) -> int:
    types = describe_types(args.types)
    if args.json:
        print(json.dumps(types, indent=2, sort_keys=True))
        return 0
    rep = get_reporter()
    for t in types:
        rep.section(f"{t['name']} ({t['code']})")
        for name, f in t["fields"].items():
            directive = f["directive"] or "-"
            rep.status(f"{name}: {directive} {', '.join(f['values'])}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="rsrcgen", description="Resource script compiler"
    )
    p.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (repeatable)",
    )
    p.add_argument(
        "-r",
        "--reporter",
        choices=["plain", "rich", "json", "silent"],
        default="plain",
        help="Select reporter backend: plain (default), rich, json (JSONL events), silent",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    b = sub.add_parser("build", help="Encode the resources of a script")
    b.add_argument("script", type=Path)
    b.add_argument(
        "-t", "--types", type=Path, required=True, help="Type template file"
    )
    b.add_argument(
        "--type",
        help="Resource type to compile against (optional if only one)",
    )
    b.add_argument(
        "--source-root",
        dest="source_root",
        type=Path,
        help="Root for import paths (default: script directory)",
    )
    b.add_argument(
        "-o", "--output", type=Path, help="Directory for encoded resources"
    )
    b.add_argument(
        "--emit-manifest",
        dest="emit_manifest",
        type=Path,
        help="Optional path to write manifest JSON",
    )
    b.add_argument(
        "--encoding", help="Text encoding for string literals (mac_roman)"
    )
    b.add_argument(
        "--json", action="store_true", help="Emit encoded data as JSON"
    )
    b.set_defaults(func=_build_cmd)

    i = sub.add_parser("inspect", help="Decode an encoded resource")
    i.add_argument("resource", type=Path)
    i.add_argument("-t", "--types", type=Path, required=True)
    i.add_argument("--type")
    i.add_argument("--json", action="store_true")
    i.set_defaults(func=_inspect_cmd)

    t = sub.add_parser("types", help="List the types of a template file")
    t.add_argument("types", type=Path)
    t.add_argument("--json", action="store_true")
    t.set_defaults(func=_types_cmd)

    return p


def main(argv: list[str] | None = None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    parser = build_parser()
    args = parser.parse_args(argv)
    requested = args.reporter
    if requested == "json":
        set_reporter(JsonLinesReporter(stream=sys.stderr))
    elif requested == "silent":
        set_reporter(SilentReporter())
    elif requested == "rich" and sys.stderr.isatty():
        set_reporter(RichReporter())
    else:
        set_reporter(PlainReporter())
    set_verbosity(args.verbose)
    configure_logging(args.verbose)
    try:
        return args.func(args)
    except RsrcError as e:
        get_reporter().diagnostic(e, _read_source(e))
        return 1
    except FileNotFoundError as e:
        get_reporter().error(f"File not found: {e.filename or e}")
        return 1
    finally:
        get_reporter().flush()


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
