"""Data type registry package for profcopy.

This package exposes the static catalog of copyable data files and helpers for
building per-session selection records from it.
"""

from .data_types import (
    GROUP_OTHER,
    GROUP_PRICE_LABOR,
    GROUP_PRIMARY,
    GROUP_SECONDARY,
    check_available_data_types,
    create_selections,
    find_descriptor,
    get_all_descriptors,
    get_descriptor,
    suggest_descriptor,
)

__all__ = [
    "GROUP_OTHER",
    "GROUP_PRICE_LABOR",
    "GROUP_PRIMARY",
    "GROUP_SECONDARY",
    "check_available_data_types",
    "create_selections",
    "find_descriptor",
    "get_all_descriptors",
    "get_descriptor",
    "suggest_descriptor",
]
