"""Configuration domain exports."""

from .config_scaffold_builder import (
    DEFAULT_CONFIG_FILENAME,
    build_placeholder_configuration,
    write_placeholder_configuration,
)
from .loader import (
    ConfigurationError,
    default_compile_settings,
    load_configuration,
    resolve_output_location,
)
from .runtime_settings import (
    DEFAULT_DESCRIPTOR_FILENAME,
    OUTPUT_LOCATION_ENV_VAR,
    ArtifactConfig,
    CompileSettings,
    OutputLocation,
)

__all__ = [
    "ArtifactConfig",
    "CompileSettings",
    "OutputLocation",
    "DEFAULT_DESCRIPTOR_FILENAME",
    "OUTPUT_LOCATION_ENV_VAR",
    "ConfigurationError",
    "default_compile_settings",
    "load_configuration",
    "resolve_output_location",
    "DEFAULT_CONFIG_FILENAME",
    "build_placeholder_configuration",
    "write_placeholder_configuration",
]
