"""Schema source entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class SchemaImport:
    """One `import "...";` statement found in a schema file."""

    path: str
    line: int


@dataclass(frozen=True)
class SchemaSource:
    """A schema file located under one include directory."""

    path: Path
    include_root: Path
    imports: tuple[SchemaImport, ...] = ()

    @property
    def proto_name(self) -> str:
        """Path relative to its include root, as the compiler names the file."""
        return self.path.relative_to(self.include_root).as_posix()

    @property
    def module_stem(self) -> str:
        # protoc maps dashes to underscores in generated Python module names.
        return self.proto_name.removesuffix(".proto").replace("-", "_")

    @property
    def grpc_module_name(self) -> str:
        return f"{self.module_stem}_pb2_grpc.py"

    @property
    def message_module_name(self) -> str:
        return f"{self.module_stem}_pb2.py"
