"""Compilation domain exports."""

from .artifact_commit import MANIFEST_FILENAME, ArtifactWriteError, read_manifest
from .compile_contracts import CompileOutcome
from .schema_compile_use_case import compile_schemas

__all__ = [
    "MANIFEST_FILENAME",
    "ArtifactWriteError",
    "CompileOutcome",
    "compile_schemas",
    "read_manifest",
]
