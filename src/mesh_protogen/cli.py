"""Command line interface entry point."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from mesh_protogen.compilation import ArtifactWriteError, compile_schemas
from mesh_protogen.configuration import (
    DEFAULT_CONFIG_FILENAME,
    OUTPUT_LOCATION_ENV_VAR,
    CompileSettings,
    ConfigurationError,
    default_compile_settings,
    load_configuration,
    write_placeholder_configuration,
)
from mesh_protogen.descriptor_catalog import (
    DescriptorCatalog,
    DescriptorError,
    MethodEntry,
    read_descriptor_catalog,
)
from mesh_protogen.schema_compiler import (
    SchemaCompilationError,
    SchemaResolutionError,
    SchemaSourceError,
    SchemaSyntaxError,
)


class CliError(Exception):
    """Custom CLI error."""


class _ClickEchoHandler(logging.Handler):
    """Writes log records to whatever stderr click currently targets."""

    def emit(self, record: logging.LogRecord) -> None:
        click.echo(self.format(record), err=True)


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="mesh-protogen")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log debug details.")
def cli(verbose: bool) -> None:
    """Build-time protobuf/gRPC code generation for the mesh data and control planes."""
    _configure_logging(verbose)


@cli.command(name="compile")
@click.option(
    "--config",
    "config_path",
    required=False,
    type=click.Path(path_type=str),
    help=f"Path to the YAML compile configuration [default: {DEFAULT_CONFIG_FILENAME} "
    "when present, otherwise the built-in mesh schema set]",
)
@click.option(
    "--out-dir",
    "output_dir",
    required=False,
    envvar=OUTPUT_LOCATION_ENV_VAR,
    show_envvar=True,
    type=click.Path(path_type=str),
    help="Build-scoped directory receiving generated bindings and the descriptor set",
)
def compile_command(config_path: str | None, output_dir: str | None) -> None:
    """Generate client/server bindings and the descriptor set for every schema file."""
    try:
        settings = _load_settings(config_path, output_dir)
        outcome = compile_schemas(settings)
    except ConfigurationError as exc:
        raise CliError(f"configuration error: {exc}") from exc
    except SchemaCompilationError as exc:
        raise CliError(f"{_schema_error_category(exc)} error: {exc}") from exc
    except ArtifactWriteError as exc:
        raise CliError(f"i/o error: {exc}") from exc
    click.echo(str(outcome.descriptor_path))


@cli.command(name="describe")
@click.option(
    "--descriptor",
    "descriptor_path",
    required=False,
    type=click.Path(path_type=str),
    help="Path to a serialized descriptor set",
)
@click.option(
    "--config",
    "config_path",
    required=False,
    type=click.Path(path_type=str),
    help=f"Compile configuration naming the descriptor file [default: {DEFAULT_CONFIG_FILENAME} "
    "when present], used without --descriptor",
)
@click.option(
    "--out-dir",
    "output_dir",
    required=False,
    envvar=OUTPUT_LOCATION_ENV_VAR,
    show_envvar=True,
    type=click.Path(path_type=str),
    help="Output directory holding the compiled descriptor set, used without --descriptor",
)
def describe(descriptor_path: str | None, config_path: str | None, output_dir: str | None) -> None:
    """List every file, type and service in a compiled descriptor set."""
    try:
        path = (
            Path(descriptor_path)
            if descriptor_path
            else _load_settings(config_path, output_dir).descriptor_path
        )
        catalog = read_descriptor_catalog(path)
    except ConfigurationError as exc:
        raise CliError(f"configuration error: {exc}") from exc
    except DescriptorError as exc:
        raise CliError(str(exc)) from exc
    for line in _render_catalog(catalog):
        click.echo(line)


@cli.command(name="generate-config")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML compile configuration to write",
)
def generate_config(output_path: str) -> None:
    """Generate a compile configuration pre-filled with the mesh schema set."""
    try:
        resolved_output = write_placeholder_configuration(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


def _load_settings(config_path: str | None, output_dir: str | None) -> CompileSettings:
    if config_path is not None:
        return load_configuration(config_path, output_dir=output_dir)
    default_path = Path(DEFAULT_CONFIG_FILENAME)
    if default_path.exists():
        return load_configuration(default_path, output_dir=output_dir)
    return default_compile_settings(Path.cwd(), output_dir=output_dir)


def _schema_error_category(exc: SchemaCompilationError) -> str:
    if isinstance(exc, SchemaResolutionError):
        return "resolution"
    if isinstance(exc, SchemaSyntaxError):
        return "syntax"
    if isinstance(exc, SchemaSourceError):
        return "source"
    return "schema"


def _render_catalog(catalog: DescriptorCatalog) -> list[str]:
    lines: list[str] = []
    for entry in catalog.files:
        package = f" (package {entry.package})" if entry.package else ""
        lines.append(f"file {entry.name}{package}")
        lines.extend(f"  message {name}" for name in entry.messages)
        lines.extend(f"  enum {name}" for name in entry.enums)
        for service in entry.services:
            lines.append(f"  service {service.full_name}")
            lines.extend(f"    rpc {_render_method(method)}" for method in service.methods)
    return lines


def _render_method(method: MethodEntry) -> str:
    request = f"stream {method.input_type}" if method.client_streaming else method.input_type
    response = f"stream {method.output_type}" if method.server_streaming else method.output_type
    return f"{method.name}({request}) returns ({response})"


def _configure_logging(verbose: bool) -> None:
    logger = logging.getLogger("mesh_protogen")
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    if not any(isinstance(handler, _ClickEchoHandler) for handler in logger.handlers):
        handler = _ClickEchoHandler()
        handler.setFormatter(logging.Formatter("mesh-protogen: %(message)s"))
        logger.addHandler(handler)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=list(argv), standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
