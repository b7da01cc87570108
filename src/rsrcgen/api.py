"""High-level API for rsrcgen.

``compile_source`` encodes the declarations of an in-memory script against a
registry; ``compile_script`` is the file based entry point used by the CLI
(load templates, tokenize, encode, collect, optionally write outputs and a
manifest).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from .collector import ResourceCollector
from .encoding.declaration import parse_script
from .encoding.directives import FieldDirectiveResolver
from .encoding.encoder import EncodedResource
from .encoding.inspector import inspect_resource, validate_resource
from .lexer.cursor import TokenCursor
from .lexer.lexer import tokenize
from .logging import get_logger
from .manifest import build_manifest
from .reporting import get_reporter, task
from .types.loader import load_registry, load_types
from .types.registry import TypeTemplateRegistry
from .utils.io import FileLoader
from .utils.paths import SourceRootResolver

__all__ = [
    "CompileOptions",
    "CompileResult",
    "compile_source",
    "compile_script",
    "describe_types",
    "inspect_binary",
]


@dataclass(slots=True)
class CompileOptions:
    script: Path
    types_path: Path
    type_name: Optional[str] = None
    # Root for `import "..."` paths; defaults to the script's directory
    source_root: Optional[Path] = None
    # When set, each resource is written to <output_dir>/<code>/<id>.bin
    output_dir: Optional[Path] = None
    manifest_path: Optional[Path] = None
    encoding: Optional[str] = None


@dataclass(slots=True)
class CompileResult:
    resources: List[EncodedResource]
    files: List[Path] = field(default_factory=list)
    manifest_path: Optional[Path] = None

    @property
    def bytes_encoded(self) -> int:
        return sum(len(r.data) for r in self.resources)


def compile_source(
    source: str,
    registry: TypeTemplateRegistry,
    *,
    path: str | None = None,
    source_root: Path | None = None,
    loader: FileLoader | None = None,
    encoding: str | None = None,
) -> List[EncodedResource]:
    cursor = TokenCursor(tokenize(source, path))
    resolver = FieldDirectiveResolver(
        registry,
        SourceRootResolver(source_root or Path.cwd()),
        loader,
        encoding=encoding,
    )
    return parse_script(cursor, registry, resolver)


def compile_script(options: CompileOptions) -> CompileResult:
    logger = get_logger()
    rep = get_reporter()
    registry = load_registry(options.types_path, options.type_name)
    tmpl = registry.active
    rep.status(
        f"Types summary: file={options.types_path.name} type={tmpl.name} "
        f"code={tmpl.code} fields={len(tmpl.fields)}"
    )

    source = options.script.read_text(encoding="utf-8")
    logger.debug(
        "compiling %s (%d chars) against %s",
        options.script,
        len(source),
        tmpl.name,
    )
    collector = ResourceCollector()
    with task("compile.encode", "Encode resources"):
        for res in compile_source(
            source,
            registry,
            path=str(options.script),
            source_root=options.source_root or options.script.parent,
            encoding=options.encoding,
        ):
            collector.collect(res)
            rep.advance(
                "compile.encode",
                current_item=f"#{res.resource_id} {res.name}".rstrip(),
                resources=len(collector),
                bytes=collector.total_bytes,
            )
    rep.status(
        f"Compile summary: resources={len(collector)} "
        f"bytes={collector.total_bytes}"
    )

    result = CompileResult(resources=collector.resources)
    if options.output_dir is not None:
        with task(
            "compile.write",
            "Write resources",
            total=len(collector),
            bytes=collector.total_bytes,
        ):
            for path in collector.write_all(options.output_dir):
                result.files.append(path)
                rep.advance("compile.write", current_item=path.name)
        rep.status(
            f"Write summary: files={len(result.files)} "
            f"dir={options.output_dir}"
        )
    if options.manifest_path is not None:
        result.manifest_path = build_manifest(
            collector,
            options.manifest_path,
            script=options.script,
            type_name=tmpl.name,
            output_dir=options.output_dir,
        )
        rep.status(f"Manifest summary: path={result.manifest_path}")
    return result


def describe_types(types_path: Path) -> List[Dict[str, Any]]:
    out: List[Dict[str, Any]] = []
    for t in load_types(types_path):
        out.append(
            {
                "name": t.name,
                "code": t.code,
                "template": [
                    {"name": e.name, "type": str(e.type)} for e in t.template
                ],
                "fields": {
                    name: {
                        "directive": (
                            None
                            if f.explicit_type is None
                            else (
                                "Reference"
                                if f.explicit_type.is_reference
                                else f.explicit_type.tag
                            )
                        ),
                        "values": [v.name for v in f.values],
                    }
                    for name, f in t.fields.items()
                },
            }
        )
    return out


def inspect_binary(
    path: Path, types_path: Path, type_name: str | None = None
) -> Dict[str, Any]:
    registry = load_registry(types_path, type_name)
    info = inspect_resource(path, registry.active)
    info["issues"] = validate_resource(info)
    return info
