"""Configuration scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_FILENAME = "protogen.yaml"

_CONFIG_SCAFFOLD_TEMPLATE = """# Schema compilation settings for mesh-protogen.
# Relative paths resolve against the directory holding this file.
# The output directory is not configured here; the build supplies it through OUT_DIR.

# Schema files compiled together in one pass, in this order.
# Type names must be unique across all of them.
sources:
  - proto/mesh/v1/data.proto
  - proto/mesh/v1/control.proto

# Directories searched for imported schema files.
# Every source must live under one of them.
include_paths:
  - proto

artifacts:
  # Client-role bindings (stubs used to call the services).
  build_client: true
  # Server-role bindings (servicer base classes and registration helpers).
  build_server: true
  # File name of the serialized descriptor set written to OUT_DIR.
  descriptor_filename: mesh_descriptor.bin
  # Embed imported files outside the source list in the descriptor set.
  include_imports: false
  # Keep comments and source locations in the descriptor set.
  include_source_info: true
  # Emit .pyi stubs next to the generated message modules.
  type_stubs: true
"""


def build_placeholder_configuration() -> str:
    """Build the YAML compile configuration template with inline guidance."""
    return _CONFIG_SCAFFOLD_TEMPLATE


def write_placeholder_configuration(output_path: Path | str) -> Path:
    """Write the compile configuration template to the requested output path.

    Args:
      output_path: Destination file path for the scaffold.

    Returns:
      The resolved destination path.

    Raises:
      FileExistsError: If the destination file already exists.
      OSError: If writing the scaffold fails.
    """
    destination = Path(output_path)
    if destination.exists():
        raise FileExistsError(f"Configuration file already exists: {destination.resolve()}")
    destination.write_text(build_placeholder_configuration(), encoding="utf-8")
    return destination.resolve()
