"""Client/server role selection for generated gRPC modules."""

from __future__ import annotations

import ast
import re
from collections.abc import Iterable
from enum import Enum


class BindingRole(str, Enum):
    CLIENT = "client"
    SERVER = "server"


class RoleFilterError(Exception):
    """Raised when a generated module cannot be parsed for role filtering."""


_EXCESS_BLANK_LINES = re.compile(r"\n{4,}")


def role_definition_names(service_name: str, role: BindingRole) -> frozenset[str]:
    """Top-level names the gRPC plugin emits for one service and role."""
    if role is BindingRole.CLIENT:
        return frozenset({f"{service_name}Stub", service_name})
    return frozenset({f"{service_name}Servicer", f"add_{service_name}Servicer_to_server"})


def filter_binding_roles(
    source_text: str,
    services: Iterable[str],
    *,
    keep_client: bool,
    keep_server: bool,
) -> str:
    """Drop the top-level definitions belonging to roles that were not requested.

    Text outside the removed definitions is kept unchanged.
    """
    dropped_roles = [
        role
        for role, keep in ((BindingRole.CLIENT, keep_client), (BindingRole.SERVER, keep_server))
        if not keep
    ]
    if not dropped_roles:
        return source_text

    names: set[str] = set()
    for service_name in services:
        for role in dropped_roles:
            names |= role_definition_names(service_name, role)
    if not names:
        return source_text

    try:
        module = ast.parse(source_text)
    except SyntaxError as exc:
        raise RoleFilterError(f"Generated module is not valid Python: {exc}") from exc

    lines = source_text.splitlines(keepends=True)
    removed: set[int] = set()
    for node in module.body:
        if not isinstance(node, (ast.ClassDef, ast.FunctionDef)) or node.name not in names:
            continue
        start = min([node.lineno, *(decorator.lineno for decorator in node.decorator_list)])
        start = _extend_over_leading_comments(lines, start)
        end = node.end_lineno or node.lineno
        removed.update(range(start, end + 1))

    kept = "".join(line for number, line in enumerate(lines, start=1) if number not in removed)
    return _EXCESS_BLANK_LINES.sub("\n\n\n", kept)


def _extend_over_leading_comments(lines: list[str], start: int) -> int:
    while start > 1 and lines[start - 2].lstrip().startswith("#"):
        start -= 1
    return start
