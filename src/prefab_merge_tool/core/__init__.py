"""Core logic for detecting and resolving merge differences."""

from prefab_merge_tool.core.unity_model import (
    ConflictResolution,
    UnityComponent,
    UnityDocument,
    UnityGameObject,
    UnityProperty,
)
from prefab_merge_tool.core.settings import DEFAULT_SETTINGS, MergeSettings
from prefab_merge_tool.core.property_cursor import (
    MISSING,
    PropertyCursor,
    PropertySnapshot,
    aligned_cursors,
    property_layout,
)
from prefab_merge_tool.core.identity import build_identifier_map, component_identifiers
from prefab_merge_tool.core.field_differ import iter_property_differences
from prefab_merge_tool.core.merge_actions import (
    ChangePropertyAction,
    DeleteComponentAction,
    DeleteGameObjectAction,
    MergeAction,
    MergeActionKind,
    NewComponentAction,
    NewGameObjectAction,
)
from prefab_merge_tool.core.node_merge import GameObjectMergeUnit, find_ours_reference
from prefab_merge_tool.core.loader import UnityFileLoader, load_unity_file

__all__ = [
    "ConflictResolution",
    "UnityComponent",
    "UnityDocument",
    "UnityGameObject",
    "UnityProperty",
    "DEFAULT_SETTINGS",
    "MergeSettings",
    "MISSING",
    "PropertyCursor",
    "PropertySnapshot",
    "aligned_cursors",
    "property_layout",
    "build_identifier_map",
    "component_identifiers",
    "iter_property_differences",
    "ChangePropertyAction",
    "DeleteComponentAction",
    "DeleteGameObjectAction",
    "MergeAction",
    "MergeActionKind",
    "NewComponentAction",
    "NewGameObjectAction",
    "GameObjectMergeUnit",
    "find_ours_reference",
    "UnityFileLoader",
    "load_unity_file",
]
