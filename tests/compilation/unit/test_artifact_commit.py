"""Tests for committing staged artifacts into the output location."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from mesh_protogen.compilation.artifact_commit import (
    MANIFEST_FILENAME,
    STAGING_PREFIX,
    ArtifactWriteError,
    commit_artifacts,
    create_staging_dir,
    discard_staging_dir,
    read_manifest,
)


def _stage(staging_dir: Path, files: dict[str, str]) -> list[str]:
    for relative, text in files.items():
        path = staging_dir / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    return sorted(files)


def test_staging_directory_lives_inside_output_location(tmp_path: Path) -> None:
    staging_dir = create_staging_dir(tmp_path)

    assert staging_dir.parent == tmp_path
    assert staging_dir.name.startswith(STAGING_PREFIX)

    discard_staging_dir(staging_dir)
    assert not staging_dir.exists()


def test_leftover_staging_directories_are_removed(tmp_path: Path) -> None:
    leftover = tmp_path / f"{STAGING_PREFIX}interrupted"
    (leftover / "mesh").mkdir(parents=True)
    (leftover / "mesh" / "data_pb2.py").write_text("partial", encoding="utf-8")
    unrelated = tmp_path / "notes"
    unrelated.mkdir()

    staging_dir = create_staging_dir(tmp_path)

    assert not leftover.exists()
    assert unrelated.is_dir()
    assert [path.name for path in tmp_path.glob(f"{STAGING_PREFIX}*")] == [staging_dir.name]


def test_commit_moves_files_and_prunes_empty_directories(tmp_path: Path) -> None:
    output_dir = tmp_path / "out"
    output_dir.mkdir()
    first_stage = create_staging_dir(output_dir)
    first = _stage(first_stage, {"a/b/old_pb2.py": "old", "keep_pb2.py": "v1"})
    commit_artifacts(first_stage, output_dir, first)
    discard_staging_dir(first_stage)

    second_stage = create_staging_dir(output_dir)
    second = _stage(second_stage, {"keep_pb2.py": "v2"})
    removed = commit_artifacts(second_stage, output_dir, second)
    discard_staging_dir(second_stage)

    assert removed == ("a/b/old_pb2.py",)
    assert not (output_dir / "a").exists()
    assert (output_dir / "keep_pb2.py").read_text(encoding="utf-8") == "v2"
    assert read_manifest(output_dir) == ("keep_pb2.py",)


def test_read_manifest_without_previous_run(tmp_path: Path) -> None:
    assert read_manifest(tmp_path) == ()


def test_malformed_manifest_is_rejected(tmp_path: Path) -> None:
    (tmp_path / MANIFEST_FILENAME).write_text(json.dumps({"artifacts": [1]}), encoding="utf-8")

    with pytest.raises(ArtifactWriteError, match="malformed"):
        read_manifest(tmp_path)


def test_manifest_entries_outside_output_location_fail_before_any_move(tmp_path: Path) -> None:
    output_dir = tmp_path / "out"
    output_dir.mkdir()
    outside = tmp_path / "precious.txt"
    outside.write_text("keep", encoding="utf-8")
    (output_dir / MANIFEST_FILENAME).write_text(
        json.dumps({"artifacts": ["../precious.txt"]}), encoding="utf-8"
    )
    staging_dir = create_staging_dir(output_dir)
    files = _stage(staging_dir, {"new_pb2.py": "new"})

    with pytest.raises(ArtifactWriteError, match="outside"):
        commit_artifacts(staging_dir, output_dir, files)

    assert outside.read_text(encoding="utf-8") == "keep"
    assert not (output_dir / "new_pb2.py").exists()
    assert (staging_dir / "new_pb2.py").is_file()


def test_missing_staged_file_is_an_io_error(tmp_path: Path) -> None:
    staging_dir = create_staging_dir(tmp_path)

    with pytest.raises(ArtifactWriteError, match="Cannot write artifacts"):
        commit_artifacts(staging_dir, tmp_path, ["never_written_pb2.py"])


@pytest.mark.parametrize("entry", ["../precious.txt", "/etc/hosts", "."])
def test_manifest_rejects_entries_that_escape_output_location(tmp_path: Path, entry: str) -> None:
    (tmp_path / MANIFEST_FILENAME).write_text(
        json.dumps({"artifacts": ["mesh/v1/data_pb2.py", entry]}), encoding="utf-8"
    )

    with pytest.raises(ArtifactWriteError, match="outside"):
        read_manifest(tmp_path)
