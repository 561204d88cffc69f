"""Parsing and classification of protoc diagnostic output."""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from .compiler_errors import SchemaCompilationError, SchemaResolutionError, SchemaSyntaxError


class DiagnosticKind(str, Enum):
    RESOLUTION = "resolution"
    SYNTAX = "syntax"


@dataclass(frozen=True)
class CompilerDiagnostic:
    """One error line reported by the schema compiler."""

    source_file: str
    message: str
    kind: DiagnosticKind
    line: int | None = None
    column: int | None = None
    type_name: str | None = None
    import_path: str | None = None

    def render(self) -> str:
        location = self.source_file
        if self.line is not None:
            location = f"{location}:{self.line}"
            if self.column is not None:
                location = f"{location}:{self.column}"
        return f"{location}: {self.message}"


_LOCATED_LINE = re.compile(r"^(?P<file>.+?):(?P<line>\d+):(?P<column>\d+): (?P<message>.+)$")
_FILE_LINE = re.compile(r"^(?P<file>[^:]+\.proto): (?P<message>.+)$")

_UNDEFINED_TYPE = re.compile(r'^"(?P<name>[^"]+)" is not defined\.')
_DUPLICATE_TYPE = re.compile(r'^"(?P<name>[^"]+)" is already defined')
_MISSING_IMPORT = re.compile(r'^Import "(?P<path>[^"]+)" was not found or had errors\.')
_RESOLUTION_MESSAGES = (
    "File not found.",
    "File does not reside within any path specified using --proto_path",
)


def parse_protoc_diagnostics(output: str) -> tuple[CompilerDiagnostic, ...]:
    """Return every error diagnostic in protoc's stderr, warnings excluded."""
    diagnostics: list[CompilerDiagnostic] = []
    for raw_line in output.splitlines():
        line = raw_line.strip()
        if not line:
            continue
        diagnostic = _parse_line(line)
        if diagnostic is not None:
            diagnostics.append(diagnostic)
    return tuple(diagnostics)


def diagnostics_to_error(output: str) -> SchemaCompilationError:
    """Build the most specific error for a failed compiler run.

    Syntax problems win over resolution problems: a file that fails to parse
    makes every file importing it report the import and its types as missing.
    """
    diagnostics = parse_protoc_diagnostics(output)
    if not diagnostics:
        detail = output.strip() or "no diagnostic output"
        return SchemaCompilationError(
            f"Schema compiler failed: {detail}", compiler_output=output
        )

    syntax = [item for item in diagnostics if item.kind is DiagnosticKind.SYNTAX]
    if syntax:
        primary = syntax[0]
        return SchemaSyntaxError(
            _summarize(primary, diagnostics),
            source_file=primary.source_file,
            line=primary.line,
            column=primary.column,
            compiler_output=output,
        )

    primary = _pick_primary_resolution(diagnostics)
    return SchemaResolutionError(
        _summarize(primary, diagnostics),
        source_file=primary.source_file,
        type_name=primary.type_name,
        import_path=primary.import_path,
        line=primary.line,
        compiler_output=output,
    )


def _parse_line(line: str) -> CompilerDiagnostic | None:
    located = _LOCATED_LINE.match(line)
    if located:
        message = located.group("message")
        if message.startswith("warning:"):
            return None
        return _classify(
            located.group("file"),
            message,
            line=int(located.group("line")),
            column=int(located.group("column")),
        )
    file_only = _FILE_LINE.match(line)
    if file_only:
        return _classify(file_only.group("file"), file_only.group("message"))
    return None


def _classify(
    source_file: str, message: str, *, line: int | None = None, column: int | None = None
) -> CompilerDiagnostic:
    kind = DiagnosticKind.SYNTAX
    type_name = None
    import_path = None
    if match := _UNDEFINED_TYPE.match(message):
        kind, type_name = DiagnosticKind.RESOLUTION, match.group("name")
    elif match := _DUPLICATE_TYPE.match(message):
        kind, type_name = DiagnosticKind.RESOLUTION, match.group("name")
    elif match := _MISSING_IMPORT.match(message):
        kind, import_path = DiagnosticKind.RESOLUTION, match.group("path")
    elif message.startswith(_RESOLUTION_MESSAGES):
        kind = DiagnosticKind.RESOLUTION
    return CompilerDiagnostic(
        source_file=source_file,
        message=message,
        kind=kind,
        line=line,
        column=column,
        type_name=type_name,
        import_path=import_path,
    )


def _pick_primary_resolution(resolution: Sequence[CompilerDiagnostic]) -> CompilerDiagnostic:
    for diagnostic in resolution:
        if diagnostic.type_name is not None:
            return diagnostic
    return resolution[0]


def _summarize(primary: CompilerDiagnostic, diagnostics: Sequence[CompilerDiagnostic]) -> str:
    lines = [primary.render()]
    lines.extend(item.render() for item in diagnostics if item is not primary)
    return "\n".join(lines)
