"""Descriptor catalog exports."""

from .catalog_models import DescriptorCatalog, FileEntry, MethodEntry, ServiceEntry
from .descriptor_reader import DescriptorError, parse_descriptor_catalog, read_descriptor_catalog

__all__ = [
    "DescriptorCatalog",
    "FileEntry",
    "MethodEntry",
    "ServiceEntry",
    "DescriptorError",
    "parse_descriptor_catalog",
    "read_descriptor_catalog",
]
