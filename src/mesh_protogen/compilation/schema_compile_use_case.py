"""Schema compile use-case service."""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from pathlib import Path

from mesh_protogen.binding_roles import RoleFilterError, filter_binding_roles
from mesh_protogen.configuration import (
    ArtifactConfig,
    CompileSettings,
    ConfigurationError,
    OutputLocation,
)
from mesh_protogen.descriptor_catalog import (
    DescriptorCatalog,
    DescriptorError,
    read_descriptor_catalog,
)
from mesh_protogen.schema_compiler import (
    CompiledArtifacts,
    GrpcToolsCompiler,
    SchemaCompilationError,
    SchemaCompiler,
)
from mesh_protogen.schema_sources import (
    SchemaSource,
    effective_include_paths,
    resolve_schema_sources,
)

from .artifact_commit import (
    ArtifactWriteError,
    commit_artifacts,
    create_staging_dir,
    discard_staging_dir,
)
from .compile_contracts import CompileOutcome

_LOGGER = logging.getLogger(__name__)
_LOGGER.addHandler(logging.NullHandler())


def compile_schemas(
    settings: CompileSettings, *, compiler: SchemaCompiler | None = None
) -> CompileOutcome:
    """Run one compilation pass and commit its artifacts to the output location.

    The compiler writes into a staging directory; nothing reaches the output
    location unless compilation and verification both succeed.

    Raises:
      ConfigurationError: The output location is unusable. The compiler is not invoked.
      SchemaCompilationError: A source is missing, a reference does not resolve,
        or the schema text is malformed.
      ArtifactWriteError: Artifacts cannot be written to the output location.
    """
    resolved_compiler = compiler or GrpcToolsCompiler()
    output_dir = _prepare_output_location(settings.output)
    sources = resolve_schema_sources(settings.sources, settings.include_paths)
    include_paths = effective_include_paths(settings.include_paths)

    staging_dir = create_staging_dir(output_dir)
    try:
        compiled = resolved_compiler.compile(
            sources, include_paths, settings.artifacts, staging_dir
        )
        catalog = _read_staged_catalog(compiled)
        _verify_descriptor_union(catalog, sources, settings.artifacts)
        _apply_role_selection(compiled, catalog, sources, settings.artifacts)
        _verify_completeness(compiled, sources, settings.artifacts)
        removed_stale = commit_artifacts(staging_dir, output_dir, compiled.files)
    finally:
        discard_staging_dir(staging_dir)

    _LOGGER.info(
        "compiled %d schema files into %d artifacts under %s",
        len(sources),
        len(compiled.files),
        output_dir,
    )
    return CompileOutcome(
        output_dir=output_dir,
        descriptor_path=output_dir / settings.artifacts.descriptor_filename,
        artifacts=compiled.files,
        removed_stale=removed_stale,
        catalog=catalog,
    )


def _prepare_output_location(output: OutputLocation) -> Path:
    path = output.path
    if path.exists() and not path.is_dir():
        raise ConfigurationError(f"Output location is not a directory: {path}")
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ConfigurationError(f"Output location cannot be created: {path}: {exc}") from exc
    if not os.access(path, os.W_OK | os.X_OK):
        raise ConfigurationError(f"Output location is not writable: {path}")
    return path


def _read_staged_catalog(compiled: CompiledArtifacts) -> DescriptorCatalog:
    try:
        return read_descriptor_catalog(compiled.descriptor_path)
    except DescriptorError as exc:
        raise SchemaCompilationError(
            f"Compiler produced an unusable descriptor set: {exc}"
        ) from exc


def _verify_descriptor_union(
    catalog: DescriptorCatalog, sources: Sequence[SchemaSource], config: ArtifactConfig
) -> None:
    expected = {source.proto_name for source in sources}
    declared = set(catalog.file_names)
    missing = sorted(expected - declared)
    if missing:
        raise SchemaCompilationError(
            f"Descriptor set is missing schema files: {', '.join(missing)}"
        )
    unexpected = sorted(declared - expected)
    if unexpected and not config.include_imports:
        raise SchemaCompilationError(
            f"Descriptor set declares files outside the schema source set: {', '.join(unexpected)}"
        )


def _apply_role_selection(
    compiled: CompiledArtifacts,
    catalog: DescriptorCatalog,
    sources: Sequence[SchemaSource],
    config: ArtifactConfig,
) -> None:
    if not config.builds_any_role or (config.build_client and config.build_server):
        return
    for source in sources:
        module_path = compiled.destination / source.grpc_module_name
        if not module_path.is_file():
            continue
        file_entry = catalog.file(source.proto_name)
        services = [service.name for service in file_entry.services] if file_entry else []
        try:
            module_path.write_text(
                filter_binding_roles(
                    module_path.read_text(encoding="utf-8"),
                    services,
                    keep_client=config.build_client,
                    keep_server=config.build_server,
                ),
                encoding="utf-8",
            )
        except RoleFilterError as exc:
            raise SchemaCompilationError(f"{source.grpc_module_name}: {exc}") from exc
        except OSError as exc:
            raise ArtifactWriteError(f"Cannot rewrite {module_path}: {exc}") from exc


def _verify_completeness(
    compiled: CompiledArtifacts, sources: Sequence[SchemaSource], config: ArtifactConfig
) -> None:
    written = set(compiled.files)
    for source in sources:
        expected = [source.message_module_name]
        if config.builds_any_role:
            expected.append(source.grpc_module_name)
        missing = [name for name in expected if name not in written]
        if missing:
            raise SchemaCompilationError(
                f"Compiler did not produce bindings for {source.proto_name}: {', '.join(missing)}"
            )
