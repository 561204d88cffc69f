"""Schema compiler exports."""

from .compiler_errors import (
    SchemaCompilationError,
    SchemaResolutionError,
    SchemaSourceError,
    SchemaSyntaxError,
)
from .compiler_port import CompiledArtifacts, SchemaCompiler, collect_written_files
from .diagnostics import (
    CompilerDiagnostic,
    DiagnosticKind,
    diagnostics_to_error,
    parse_protoc_diagnostics,
)
from .protoc_compiler import CommandResult, CommandRunner, GrpcToolsCompiler

__all__ = [
    "SchemaCompilationError",
    "SchemaResolutionError",
    "SchemaSourceError",
    "SchemaSyntaxError",
    "CompiledArtifacts",
    "SchemaCompiler",
    "collect_written_files",
    "CompilerDiagnostic",
    "DiagnosticKind",
    "diagnostics_to_error",
    "parse_protoc_diagnostics",
    "CommandResult",
    "CommandRunner",
    "GrpcToolsCompiler",
]
