"""Configuration loader service."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path, PurePath
from typing import Any

import yaml

from .runtime_settings import (
    DEFAULT_DESCRIPTOR_FILENAME,
    OUTPUT_LOCATION_ENV_VAR,
    ArtifactConfig,
    CompileSettings,
    OutputLocation,
)

DEFAULT_SOURCES = (
    "proto/mesh/v1/data.proto",
    "proto/mesh/v1/control.proto",
)
DEFAULT_INCLUDE_PATHS = ("proto",)

_ARTIFACT_FLAGS = (
    "build_client",
    "build_server",
    "include_imports",
    "include_source_info",
    "type_stubs",
)


class ConfigurationError(Exception):
    """Raised when the compile configuration is invalid."""


def resolve_output_location(value: Path | str | None) -> OutputLocation:
    """Turn the build-supplied output directory into an output location."""
    if value is None or not str(value).strip():
        raise ConfigurationError(
            f"{OUTPUT_LOCATION_ENV_VAR} is not set; the build must supply an output directory."
        )
    return OutputLocation(path=Path(value).expanduser().resolve())


def default_compile_settings(
    project_root: Path | str, *, output_dir: Path | str | None
) -> CompileSettings:
    """Return the built-in data-plane/control-plane configuration."""
    root = Path(project_root).resolve()
    return CompileSettings(
        sources=tuple(root / source for source in DEFAULT_SOURCES),
        include_paths=tuple(root / include for include in DEFAULT_INCLUDE_PATHS),
        artifacts=ArtifactConfig(),
        output=resolve_output_location(output_dir),
    )


def load_configuration(
    config_path: Path | str, *, output_dir: Path | str | None
) -> CompileSettings:
    """Load and validate the configuration file."""
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Failed to parse configuration file: {exc}") from exc

    if parsed is None:
        parsed = {}

    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Configuration root must be a mapping.")

    base_path = path.resolve().parent
    sources = _parse_path_list(parsed.get("sources"), "sources", base_path)
    include_paths = _parse_path_list(parsed.get("include_paths"), "include_paths", base_path)
    artifacts = _parse_artifacts_section(parsed.get("artifacts"))
    output = resolve_output_location(output_dir)

    return CompileSettings(
        sources=sources,
        include_paths=include_paths,
        artifacts=artifacts,
        output=output,
        config_path=path.resolve(),
    )


def _parse_path_list(value: Any, field_name: str, base_path: Path) -> tuple[Path, ...]:
    if value is None:
        raise ConfigurationError(f"{field_name} is required.")
    if isinstance(value, str) or not isinstance(value, Sequence):
        raise ConfigurationError(f"{field_name} must be a list of paths.")
    paths: list[Path] = []
    for item in value:
        raw = _require_non_empty_string(item, f"{field_name} entries")
        resolved = _resolve_path(base_path, raw)
        if resolved in paths:
            raise ConfigurationError(f"{field_name} contains a duplicate entry: {raw}")
        paths.append(resolved)
    if not paths:
        raise ConfigurationError(f"{field_name} must contain at least one path.")
    return tuple(paths)


def _parse_artifacts_section(value: Any) -> ArtifactConfig:
    if value is None:
        return ArtifactConfig()
    if not isinstance(value, Mapping):
        raise ConfigurationError("Configuration section 'artifacts' must be a mapping.")

    unknown = sorted(set(value) - {*_ARTIFACT_FLAGS, "descriptor_filename"})
    if unknown:
        raise ConfigurationError(f"Unknown artifacts settings: {', '.join(unknown)}")

    defaults = ArtifactConfig()
    flags = {
        name: _require_bool(value.get(name, getattr(defaults, name)), f"artifacts.{name}")
        for name in _ARTIFACT_FLAGS
    }
    descriptor_filename = _require_file_name(
        value.get("descriptor_filename", DEFAULT_DESCRIPTOR_FILENAME),
        "artifacts.descriptor_filename",
    )
    return ArtifactConfig(descriptor_filename=descriptor_filename, **flags)


def _resolve_path(base_path: Path, raw_path: str) -> Path:
    candidate = Path(raw_path)
    if not candidate.is_absolute():
        return (base_path / candidate).resolve()
    return candidate


def _require_non_empty_string(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    if not stripped:
        raise ConfigurationError(f"{field_name} must not be empty.")
    return stripped


def _require_bool(value: Any, field_name: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigurationError(f"{field_name} must be true or false.")
    return value


def _require_file_name(value: Any, field_name: str) -> str:
    name = _require_non_empty_string(value, field_name)
    if PurePath(name).name != name or name in {".", ".."}:
        raise ConfigurationError(f"{field_name} must be a bare file name, got '{name}'.")
    return name
