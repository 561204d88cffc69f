"""Tests for the grpcio-tools compiler adapter with a fake command runner."""

from __future__ import annotations

from pathlib import Path

import pytest
from mesh_protogen.configuration.runtime_settings import ArtifactConfig
from mesh_protogen.schema_compiler import (
    CommandResult,
    GrpcToolsCompiler,
    SchemaCompilationError,
    SchemaResolutionError,
    SchemaSyntaxError,
)
from mesh_protogen.schema_sources.source_models import SchemaSource


def _sources(root: Path) -> list[SchemaSource]:
    return [
        SchemaSource(path=root / "mesh/v1/data.proto", include_root=root),
        SchemaSource(path=root / "mesh/v1/control.proto", include_root=root),
    ]


def test_build_command_requests_every_artifact_kind(tmp_path: Path) -> None:
    compiler = GrpcToolsCompiler(python_executable="python3")
    include_root = tmp_path / "proto"

    command = compiler.build_command(
        _sources(include_root), [include_root], ArtifactConfig(), tmp_path / "out"
    )

    assert command[:3] == ("python3", "-m", "grpc_tools.protoc")
    assert f"--proto_path={include_root}" in command
    assert f"--python_out={tmp_path / 'out'}" in command
    assert f"--pyi_out={tmp_path / 'out'}" in command
    assert f"--grpc_python_out={tmp_path / 'out'}" in command
    assert f"--descriptor_set_out={tmp_path / 'out' / 'mesh_descriptor.bin'}" in command
    assert "--include_source_info" in command
    assert "--include_imports" not in command
    assert command[-2:] == (
        str(include_root / "mesh/v1/data.proto"),
        str(include_root / "mesh/v1/control.proto"),
    )


def test_build_command_respects_artifact_toggles(tmp_path: Path) -> None:
    compiler = GrpcToolsCompiler(python_executable="python3")
    config = ArtifactConfig(
        build_client=False,
        build_server=False,
        include_imports=True,
        include_source_info=False,
        type_stubs=False,
        descriptor_filename="api.bin",
    )

    command = compiler.build_command(_sources(tmp_path), [tmp_path], config, tmp_path / "out")

    assert not any(part.startswith("--grpc_python_out") for part in command)
    assert not any(part.startswith("--pyi_out") for part in command)
    assert "--include_imports" in command
    assert "--include_source_info" not in command
    assert f"--descriptor_set_out={tmp_path / 'out' / 'api.bin'}" in command


def test_compile_returns_written_files_in_sorted_order(tmp_path: Path) -> None:
    destination = tmp_path / "stage"
    destination.mkdir()
    captured: list[tuple[tuple[str, ...], Path]] = []

    def _fake_run(command: tuple[str, ...], cwd: Path) -> CommandResult:
        captured.append((command, cwd))
        (destination / "mesh" / "v1").mkdir(parents=True)
        (destination / "mesh" / "v1" / "data_pb2_grpc.py").write_text("", encoding="utf-8")
        (destination / "mesh" / "v1" / "data_pb2.py").write_text("", encoding="utf-8")
        (destination / "mesh_descriptor.bin").write_bytes(b"")
        return CommandResult(returncode=0, stdout="", stderr="")

    compiled = GrpcToolsCompiler(run_command=_fake_run).compile(
        _sources(tmp_path), [tmp_path], ArtifactConfig(), destination
    )

    assert len(captured) == 1
    assert captured[0][1] == destination
    assert compiled.descriptor_path == destination / "mesh_descriptor.bin"
    assert compiled.files == (
        "mesh/v1/data_pb2.py",
        "mesh/v1/data_pb2_grpc.py",
        "mesh_descriptor.bin",
    )


def test_compile_raises_resolution_error_from_compiler_output(tmp_path: Path) -> None:
    def _fake_run(command: tuple[str, ...], cwd: Path) -> CommandResult:
        return CommandResult(
            returncode=1,
            stdout="",
            stderr='mesh/v1/control.proto:9:3: "Labels" is not defined.\n',
        )

    with pytest.raises(SchemaResolutionError) as exc_info:
        GrpcToolsCompiler(run_command=_fake_run).compile(
            _sources(tmp_path), [tmp_path], ArtifactConfig(), tmp_path
        )

    assert exc_info.value.type_name == "Labels"
    assert exc_info.value.source_file == "mesh/v1/control.proto"


def test_compile_raises_syntax_error_from_compiler_output(tmp_path: Path) -> None:
    def _fake_run(command: tuple[str, ...], cwd: Path) -> CommandResult:
        return CommandResult(
            returncode=1, stdout="", stderr='mesh/v1/data.proto:4:10: Expected ";".\n'
        )

    with pytest.raises(SchemaSyntaxError) as exc_info:
        GrpcToolsCompiler(run_command=_fake_run).compile(
            _sources(tmp_path), [tmp_path], ArtifactConfig(), tmp_path
        )

    assert exc_info.value.line == 4
    assert exc_info.value.column == 10


def test_compile_fails_when_descriptor_is_not_written(tmp_path: Path) -> None:
    def _fake_run(command: tuple[str, ...], cwd: Path) -> CommandResult:
        return CommandResult(returncode=0, stdout="", stderr="")

    with pytest.raises(SchemaCompilationError, match="wrote no descriptor set"):
        GrpcToolsCompiler(run_command=_fake_run).compile(
            _sources(tmp_path), [tmp_path], ArtifactConfig(), tmp_path
        )


def test_compile_rejects_empty_source_set(tmp_path: Path) -> None:
    def _fake_run(command: tuple[str, ...], cwd: Path) -> CommandResult:
        raise AssertionError("compiler must not run")

    with pytest.raises(SchemaCompilationError, match="No schema sources"):
        GrpcToolsCompiler(run_command=_fake_run).compile([], [tmp_path], ArtifactConfig(), tmp_path)
