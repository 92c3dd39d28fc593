"""
prefab-merge-tool: conflict detection and resolution for Unity GameObjects.
"""

__version__ = "0.1.0"
__author__ = "TrueCyan"

from prefab_merge_tool.core.loader import load_unity_file
from prefab_merge_tool.core.merge_actions import MergeAction, MergeActionKind
from prefab_merge_tool.core.node_merge import GameObjectMergeUnit
from prefab_merge_tool.core.settings import MergeSettings
from prefab_merge_tool.core.unity_model import (
    ConflictResolution,
    UnityComponent,
    UnityDocument,
    UnityGameObject,
    UnityProperty,
)
from prefab_merge_tool.utils.log_handler import setup_logging

__all__ = [
    "ConflictResolution",
    "GameObjectMergeUnit",
    "MergeAction",
    "MergeActionKind",
    "MergeSettings",
    "UnityProperty",
    "UnityComponent",
    "UnityGameObject",
    "UnityDocument",
    "load_unity_file",
    "setup_logging",
]
