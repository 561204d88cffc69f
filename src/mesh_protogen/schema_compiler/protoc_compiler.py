"""Schema compiler adapter backed by grpcio-tools' bundled protoc."""

from __future__ import annotations

import logging
import shlex
import subprocess
import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

from mesh_protogen.configuration.loader import ConfigurationError
from mesh_protogen.configuration.runtime_settings import ArtifactConfig
from mesh_protogen.schema_sources.source_models import SchemaSource

from .compiler_errors import SchemaCompilationError
from .compiler_port import CompiledArtifacts, collect_written_files
from .diagnostics import diagnostics_to_error

_LOGGER = logging.getLogger(__name__)
_LOGGER.addHandler(logging.NullHandler())


@dataclass(frozen=True)
class CommandResult:
    """Exit status and captured output of one compiler process."""

    returncode: int
    stdout: str
    stderr: str


CommandRunner = Callable[[tuple[str, ...], Path], CommandResult]


class GrpcToolsCompiler:
    """Runs `python -m grpc_tools.protoc` once per compile call.

    Include paths are passed through as given; callers wanting the bundled
    google/protobuf types resolvable should use
    `schema_sources.effective_include_paths`.
    """

    def __init__(
        self, *, run_command: CommandRunner | None = None, python_executable: str | None = None
    ) -> None:
        self._run_command = run_command or _run_captured_command
        self._python = python_executable or sys.executable

    def compile(
        self,
        sources: Sequence[SchemaSource],
        include_paths: Sequence[Path],
        config: ArtifactConfig,
        destination: Path,
    ) -> CompiledArtifacts:
        if not sources:
            raise SchemaCompilationError("No schema sources to compile.")
        descriptor_path = destination / config.descriptor_filename
        command = self.build_command(sources, include_paths, config, destination)
        _LOGGER.info("running schema compiler: %s", shlex.join(command))

        result = self._run_command(command, destination)
        if result.returncode != 0:
            raise diagnostics_to_error(result.stderr or result.stdout)
        if result.stderr.strip():
            _LOGGER.warning("schema compiler reported:\n%s", result.stderr.strip())
        if not descriptor_path.is_file():
            raise SchemaCompilationError(
                f"Schema compiler exited cleanly but wrote no descriptor set at {descriptor_path}",
                compiler_output=result.stderr,
            )
        return CompiledArtifacts(
            destination=destination,
            descriptor_path=descriptor_path,
            files=collect_written_files(destination),
        )

    def build_command(
        self,
        sources: Sequence[SchemaSource],
        include_paths: Sequence[Path],
        config: ArtifactConfig,
        destination: Path,
    ) -> tuple[str, ...]:
        command = [self._python, "-m", "grpc_tools.protoc"]
        command.extend(f"--proto_path={path}" for path in include_paths)
        command.append(f"--python_out={destination}")
        if config.type_stubs:
            command.append(f"--pyi_out={destination}")
        if config.builds_any_role:
            command.append(f"--grpc_python_out={destination}")
        command.append(f"--descriptor_set_out={destination / config.descriptor_filename}")
        if config.include_imports:
            command.append("--include_imports")
        if config.include_source_info:
            command.append("--include_source_info")
        command.extend(str(source.path) for source in sources)
        return tuple(command)


def _run_captured_command(command: tuple[str, ...], cwd: Path) -> CommandResult:
    """Run the compiler and translate a missing interpreter/tool into a configuration error."""
    try:
        completed = subprocess.run(
            list(command), cwd=cwd, check=False, capture_output=True, text=True
        )
    except FileNotFoundError as exc:
        raise ConfigurationError(
            f"Schema compiler command not found: {shlex.join(command)}"
        ) from exc
    if completed.returncode != 0 and "No module named grpc_tools" in completed.stderr:
        raise ConfigurationError(
            "grpcio-tools is not installed for "
            f"{command[0]}; install the mesh-protogen dependencies first."
        )
    return CommandResult(
        returncode=completed.returncode, stdout=completed.stdout, stderr=completed.stderr
    )
