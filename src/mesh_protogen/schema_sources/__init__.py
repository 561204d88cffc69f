"""Schema source exports."""

from .source_models import SchemaImport, SchemaSource
from .source_resolution import (
    effective_include_paths,
    parse_imports,
    resolve_schema_sources,
    well_known_include_path,
)

__all__ = [
    "SchemaImport",
    "SchemaSource",
    "effective_include_paths",
    "parse_imports",
    "resolve_schema_sources",
    "well_known_include_path",
]
