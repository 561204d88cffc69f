"""Schema compilation error taxonomy."""

from __future__ import annotations

from pathlib import Path


class SchemaCompilationError(Exception):
    """Raised when the schema set cannot be compiled."""

    def __init__(self, message: str, *, compiler_output: str = "") -> None:
        super().__init__(message)
        self.compiler_output = compiler_output


class SchemaSourceError(SchemaCompilationError):
    """Raised when a schema source file is missing or unreadable."""

    def __init__(self, message: str, *, source_file: Path | str) -> None:
        super().__init__(message)
        self.source_file = str(source_file)


class SchemaResolutionError(SchemaCompilationError):
    """Raised when a referenced type or import cannot be resolved."""

    def __init__(
        self,
        message: str,
        *,
        source_file: Path | str,
        type_name: str | None = None,
        import_path: str | None = None,
        line: int | None = None,
        compiler_output: str = "",
    ) -> None:
        super().__init__(message, compiler_output=compiler_output)
        self.source_file = str(source_file)
        self.type_name = type_name
        self.import_path = import_path
        self.line = line


class SchemaSyntaxError(SchemaCompilationError):
    """Raised for malformed schema text."""

    def __init__(
        self,
        message: str,
        *,
        source_file: Path | str,
        line: int | None = None,
        column: int | None = None,
        compiler_output: str = "",
    ) -> None:
        super().__init__(message, compiler_output=compiler_output)
        self.source_file = str(source_file)
        self.line = line
        self.column = column
