"""Tests for library logger wiring."""

from __future__ import annotations

import importlib
import logging

import pytest


@pytest.mark.parametrize(
    "module_name",
    [
        "mesh_protogen.schema_sources.source_resolution",
        "mesh_protogen.schema_compiler.protoc_compiler",
        "mesh_protogen.compilation.artifact_commit",
        "mesh_protogen.compilation.schema_compile_use_case",
    ],
)
def test_module_loggers_carry_null_handler(module_name: str) -> None:
    importlib.import_module(module_name)

    logger = logging.getLogger(module_name)

    assert any(isinstance(handler, logging.NullHandler) for handler in logger.handlers)
    assert logger.propagate is True
