"""Descriptor catalog entities."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class MethodEntry:
    """One RPC method signature."""

    name: str
    input_type: str
    output_type: str
    client_streaming: bool = False
    server_streaming: bool = False


@dataclass(frozen=True)
class ServiceEntry:
    """A service and its methods, with a fully-qualified name."""

    full_name: str
    methods: tuple[MethodEntry, ...]

    @property
    def name(self) -> str:
        return self.full_name.rsplit(".", 1)[-1]


@dataclass(frozen=True)
class FileEntry:
    """Types and services declared by one schema file."""

    name: str
    package: str
    dependencies: tuple[str, ...]
    messages: tuple[str, ...]
    enums: tuple[str, ...]
    services: tuple[ServiceEntry, ...]


@dataclass(frozen=True)
class DescriptorCatalog:
    """Flattened view over a serialized descriptor set."""

    files: tuple[FileEntry, ...]

    @property
    def file_names(self) -> tuple[str, ...]:
        return tuple(entry.name for entry in self.files)

    @property
    def message_names(self) -> tuple[str, ...]:
        return tuple(name for entry in self.files for name in entry.messages)

    @property
    def enum_names(self) -> tuple[str, ...]:
        return tuple(name for entry in self.files for name in entry.enums)

    @property
    def services(self) -> tuple[ServiceEntry, ...]:
        return tuple(service for entry in self.files for service in entry.services)

    @property
    def service_names(self) -> tuple[str, ...]:
        return tuple(service.full_name for service in self.services)

    def file(self, name: str) -> FileEntry | None:
        for entry in self.files:
            if entry.name == name:
                return entry
        return None
