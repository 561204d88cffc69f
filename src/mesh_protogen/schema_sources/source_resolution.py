"""Schema source set validation against the include path set."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from importlib import resources
from pathlib import Path

from mesh_protogen.schema_compiler.compiler_errors import (
    SchemaResolutionError,
    SchemaSourceError,
)

from .source_models import SchemaImport, SchemaSource

_LOGGER = logging.getLogger(__name__)
_LOGGER.addHandler(logging.NullHandler())

_IMPORT_PATTERN = re.compile(r'^\s*import\s+(?:public\s+|weak\s+)?"(?P<path>[^"]+)"\s*;')


def well_known_include_path() -> Path:
    """Directory holding the google/protobuf/*.proto files bundled with grpcio-tools."""
    return Path(str(resources.files("grpc_tools") / "_proto"))


def effective_include_paths(include_paths: Sequence[Path]) -> tuple[Path, ...]:
    """Configured include paths followed by the bundled well-known types."""
    resolved = [Path(path).resolve() for path in include_paths]
    well_known = well_known_include_path().resolve()
    if well_known not in resolved:
        resolved.append(well_known)
    return tuple(resolved)


def resolve_schema_sources(
    sources: Sequence[Path], include_paths: Sequence[Path]
) -> tuple[SchemaSource, ...]:
    """Validate every source and its imports, keeping the configured order.

    Every import must name another file of the source set or a well-known type
    bundled with the compiler, since bindings are only generated for the source set.

    Raises:
      SchemaSourceError: A source is missing or not valid UTF-8 text.
      SchemaResolutionError: A source lies outside every include directory, or
        one of its imports is not found under any include directory or is not
        part of the source set.
    """
    search_paths = effective_include_paths(include_paths)
    resolved: list[SchemaSource] = []
    for raw_source in sources:
        source_path = Path(raw_source).resolve()
        text = _read_schema_text(source_path)
        include_root = _find_include_root(source_path, search_paths)
        imports = parse_imports(text)
        for schema_import in imports:
            if not any((root / schema_import.path).is_file() for root in search_paths):
                raise SchemaResolutionError(
                    f"{source_path}:{schema_import.line}: import \"{schema_import.path}\" "
                    "was not found in any include path",
                    source_file=source_path,
                    import_path=schema_import.path,
                    line=schema_import.line,
                )
        resolved.append(SchemaSource(path=source_path, include_root=include_root, imports=imports))
        _LOGGER.debug("resolved schema %s under %s", source_path, include_root)

    names = [source.proto_name for source in resolved]
    duplicates = sorted({name for name in names if names.count(name) > 1})
    if duplicates:
        raise SchemaSourceError(
            f"Schema files listed more than once: {', '.join(duplicates)}",
            source_file=duplicates[0],
        )
    _require_imports_within_source_set(resolved)
    return tuple(resolved)


def parse_imports(text: str) -> tuple[SchemaImport, ...]:
    imports = []
    for line_number, line in enumerate(text.splitlines(), start=1):
        match = _IMPORT_PATTERN.match(line)
        if match:
            imports.append(SchemaImport(path=match.group("path"), line=line_number))
    return tuple(imports)


def _read_schema_text(source_path: Path) -> str:
    if not source_path.is_file():
        raise SchemaSourceError(f"Schema file not found: {source_path}", source_file=source_path)
    try:
        return source_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise SchemaSourceError(
            f"Schema file is not valid UTF-8: {source_path}", source_file=source_path
        ) from exc
    except OSError as exc:
        raise SchemaSourceError(
            f"Schema file cannot be read: {source_path}: {exc}", source_file=source_path
        ) from exc


def _find_include_root(source_path: Path, search_paths: Sequence[Path]) -> Path:
    for root in search_paths:
        if source_path.is_relative_to(root):
            return root
    raise SchemaResolutionError(
        f"Schema file {source_path} does not reside in any include path "
        f"({', '.join(str(path) for path in search_paths)})",
        source_file=source_path,
    )


def _require_imports_within_source_set(sources: Sequence[SchemaSource]) -> None:
    known = {source.proto_name for source in sources}
    well_known = well_known_include_path()
    for source in sources:
        for schema_import in source.imports:
            if schema_import.path in known or (well_known / schema_import.path).is_file():
                continue
            raise SchemaResolutionError(
                f"{source.path}:{schema_import.line}: import \"{schema_import.path}\" "
                "is not part of the schema source set, so its bindings would be missing",
                source_file=source.path,
                import_path=schema_import.path,
                line=schema_import.line,
            )
