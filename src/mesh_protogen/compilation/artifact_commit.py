"""Moving staged artifacts into the output location."""

from __future__ import annotations

import json
import logging
import os
import shutil
import tempfile
from collections.abc import Sequence
from pathlib import Path

MANIFEST_FILENAME = ".mesh-protogen-manifest.json"
STAGING_PREFIX = ".mesh-protogen-staging-"

_LOGGER = logging.getLogger(__name__)
_LOGGER.addHandler(logging.NullHandler())


class ArtifactWriteError(Exception):
    """Raised when generated artifacts cannot be written to the output location."""


def create_staging_dir(output_dir: Path) -> Path:
    """Create a fresh staging directory, removing any left by an interrupted run."""
    for leftover in sorted(output_dir.glob(f"{STAGING_PREFIX}*")):
        if leftover.is_dir():
            _LOGGER.info("removing leftover staging directory %s", leftover.name)
            shutil.rmtree(leftover, ignore_errors=True)
    try:
        return Path(tempfile.mkdtemp(prefix=STAGING_PREFIX, dir=output_dir))
    except OSError as exc:
        raise ArtifactWriteError(
            f"Cannot create staging directory in {output_dir}: {exc}"
        ) from exc


def discard_staging_dir(staging_dir: Path) -> None:
    shutil.rmtree(staging_dir, ignore_errors=True)


def read_manifest(output_dir: Path) -> tuple[str, ...]:
    """Return artifacts committed by the previous successful run, if any."""
    manifest_path = output_dir / MANIFEST_FILENAME
    if not manifest_path.exists():
        return ()
    try:
        payload = json.loads(manifest_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ArtifactWriteError(
            f"Artifact manifest is unreadable: {manifest_path}: {exc}"
        ) from exc
    artifacts = payload.get("artifacts") if isinstance(payload, dict) else None
    if not isinstance(artifacts, list) or not all(isinstance(item, str) for item in artifacts):
        raise ArtifactWriteError(f"Artifact manifest is malformed: {manifest_path}")
    root = output_dir.resolve()
    escaping = [item for item in artifacts if not _is_inside(root, item)]
    if escaping:
        raise ArtifactWriteError(
            f"Artifact manifest {manifest_path} lists paths outside {output_dir}: "
            f"{', '.join(escaping)}"
        )
    return tuple(artifacts)


def commit_artifacts(
    staging_dir: Path, output_dir: Path, files: Sequence[str]
) -> tuple[str, ...]:
    """Move staged files into place and delete artifacts left over from the previous run.

    Returns:
      The stale artifact paths that were removed.
    """
    previous = read_manifest(output_dir)
    try:
        for relative in files:
            target = output_dir / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            os.replace(staging_dir / relative, target)

        stale = tuple(sorted(set(previous) - set(files)))
        for relative in stale:
            _remove_artifact(output_dir, relative)

        _write_manifest(output_dir, files)
    except OSError as exc:
        raise ArtifactWriteError(f"Cannot write artifacts to {output_dir}: {exc}") from exc

    for relative in stale:
        _LOGGER.info("removed stale artifact %s", relative)
    return stale


def _is_inside(root: Path, relative: str) -> bool:
    target = (root / relative).resolve()
    return target != root and target.is_relative_to(root)


def _remove_artifact(output_dir: Path, relative: str) -> None:
    target = (output_dir / relative).resolve()
    target.unlink(missing_ok=True)
    parent = target.parent
    while parent != output_dir.resolve() and parent.is_dir() and not any(parent.iterdir()):
        parent.rmdir()
        parent = parent.parent


def _write_manifest(output_dir: Path, files: Sequence[str]) -> None:
    manifest_path = output_dir / MANIFEST_FILENAME
    temporary_path = manifest_path.with_suffix(".tmp")
    payload = {"artifacts": sorted(files)}
    temporary_path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
    os.replace(temporary_path, manifest_path)
