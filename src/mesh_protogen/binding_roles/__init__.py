"""Binding role exports."""

from .role_filter import BindingRole, RoleFilterError, filter_binding_roles, role_definition_names

__all__ = ["BindingRole", "RoleFilterError", "filter_binding_roles", "role_definition_names"]
