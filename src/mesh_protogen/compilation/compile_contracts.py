"""Compilation entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from mesh_protogen.descriptor_catalog.catalog_models import DescriptorCatalog


@dataclass(frozen=True)
class CompileOutcome:
    """Output contract for one completed compilation pass."""

    output_dir: Path
    descriptor_path: Path
    artifacts: tuple[str, ...]
    removed_stale: tuple[str, ...]
    catalog: DescriptorCatalog
