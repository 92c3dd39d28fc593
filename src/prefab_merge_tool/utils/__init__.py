"""Utility functions."""

from prefab_merge_tool.utils.log_handler import (
    CapturedRecord,
    MemoryLogHandler,
    setup_logging,
)
from prefab_merge_tool.utils.naming import (
    COMPONENT_DISPLAY_NAMES,
    format_value,
    get_component_display_name,
    nicify_property_path,
    nicify_variable_name,
)

__all__ = [
    "CapturedRecord",
    "MemoryLogHandler",
    "setup_logging",
    "COMPONENT_DISPLAY_NAMES",
    "format_value",
    "get_component_display_name",
    "nicify_property_path",
    "nicify_variable_name",
]
