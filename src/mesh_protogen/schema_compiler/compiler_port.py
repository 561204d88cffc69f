"""Narrow interface between the compile driver and a schema compiler."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from mesh_protogen.configuration.runtime_settings import ArtifactConfig
from mesh_protogen.schema_sources.source_models import SchemaSource


@dataclass(frozen=True)
class CompiledArtifacts:
    """Files a compiler wrote into its destination directory."""

    destination: Path
    descriptor_path: Path
    files: tuple[str, ...]


class SchemaCompiler(Protocol):
    """Compiles a schema source set into bindings and a descriptor set."""

    def compile(
        self,
        sources: Sequence[SchemaSource],
        include_paths: Sequence[Path],
        config: ArtifactConfig,
        destination: Path,
    ) -> CompiledArtifacts:
        """Write all artifacts under `destination` or raise a SchemaCompilationError."""
        ...  # pylint: disable=unnecessary-ellipsis


def collect_written_files(destination: Path) -> tuple[str, ...]:
    """Return every file under `destination` as sorted relative POSIX paths."""
    return tuple(
        sorted(
            path.relative_to(destination).as_posix()
            for path in destination.rglob("*")
            if path.is_file()
        )
    )
