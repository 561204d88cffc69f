"""Configuration domain entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

DEFAULT_DESCRIPTOR_FILENAME = "mesh_descriptor.bin"
OUTPUT_LOCATION_ENV_VAR = "OUT_DIR"


@dataclass(frozen=True)
class ArtifactConfig:
    """Toggles selecting which generated artifact kinds are produced."""

    build_client: bool = True
    build_server: bool = True
    descriptor_filename: str = DEFAULT_DESCRIPTOR_FILENAME
    include_imports: bool = False
    include_source_info: bool = True
    type_stubs: bool = True

    @property
    def builds_any_role(self) -> bool:
        return self.build_client or self.build_server


@dataclass(frozen=True)
class OutputLocation:
    """Build-scoped directory receiving every generated artifact."""

    path: Path


@dataclass(frozen=True)
class CompileSettings:
    """Top-level configuration aggregate for one compilation pass."""

    sources: tuple[Path, ...]
    include_paths: tuple[Path, ...]
    artifacts: ArtifactConfig
    output: OutputLocation
    config_path: Path | None = None

    @property
    def descriptor_path(self) -> Path:
        return self.output.path / self.artifacts.descriptor_filename
