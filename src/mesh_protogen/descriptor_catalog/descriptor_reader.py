"""Descriptor set parsing service."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

from google.protobuf import descriptor_pb2
from google.protobuf.message import DecodeError

from .catalog_models import DescriptorCatalog, FileEntry, MethodEntry, ServiceEntry


class DescriptorError(Exception):
    """Raised when a descriptor set cannot be read or parsed."""


def read_descriptor_catalog(path: Path | str) -> DescriptorCatalog:
    """Read a serialized FileDescriptorSet from disk."""
    descriptor_path = Path(path)
    try:
        data = descriptor_path.read_bytes()
    except OSError as exc:
        raise DescriptorError(f"Descriptor set cannot be read: {descriptor_path}: {exc}") from exc
    return parse_descriptor_catalog(data)


def parse_descriptor_catalog(data: bytes) -> DescriptorCatalog:
    """Parse FileDescriptorSet bytes into a catalog preserving declaration order."""
    descriptor_set = descriptor_pb2.FileDescriptorSet()
    try:
        descriptor_set.ParseFromString(data)
    except DecodeError as exc:
        raise DescriptorError(f"Invalid descriptor set: {exc}") from exc
    return DescriptorCatalog(files=tuple(_file_entry(proto) for proto in descriptor_set.file))


def _file_entry(proto: descriptor_pb2.FileDescriptorProto) -> FileEntry:
    prefix = f".{proto.package}" if proto.package else ""
    messages: list[str] = []
    enums: list[str] = [_qualify(prefix, enum.name) for enum in proto.enum_type]
    for message in proto.message_type:
        for message_name, enum_names in _walk_message(prefix, message):
            messages.append(message_name)
            enums.extend(enum_names)
    services = tuple(
        ServiceEntry(
            full_name=_qualify(prefix, service.name),
            methods=tuple(
                MethodEntry(
                    name=method.name,
                    input_type=method.input_type.lstrip("."),
                    output_type=method.output_type.lstrip("."),
                    client_streaming=method.client_streaming,
                    server_streaming=method.server_streaming,
                )
                for method in service.method
            ),
        )
        for service in proto.service
    )
    return FileEntry(
        name=proto.name,
        package=proto.package,
        dependencies=tuple(proto.dependency),
        messages=tuple(messages),
        enums=tuple(enums),
        services=services,
    )


def _walk_message(
    prefix: str, message: descriptor_pb2.DescriptorProto
) -> Iterator[tuple[str, list[str]]]:
    qualified = f"{prefix}.{message.name}"
    # Synthetic map entry messages are not declared by the schema author.
    if message.options.map_entry:
        return
    yield qualified.lstrip("."), [
        f"{qualified}.{enum.name}".lstrip(".") for enum in message.enum_type
    ]
    for nested in message.nested_type:
        yield from _walk_message(qualified, nested)


def _qualify(prefix: str, name: str) -> str:
    return f"{prefix}.{name}".lstrip(".")
