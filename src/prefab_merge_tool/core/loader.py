"""
Unity file loader using unityflow.

Converts a Unity YAML file into the UnityDocument model the merge units
work on: GameObjects with their components, components with their
top-level properties.
"""

import logging
import re
from pathlib import Path
from typing import Any, Optional

from unityflow import UnityYAMLDocument

from prefab_merge_tool.core.settings import DEFAULT_SETTINGS, MergeSettings
from prefab_merge_tool.core.unity_model import (
    UnityComponent,
    UnityDocument,
    UnityGameObject,
    UnityProperty,
)

logger = logging.getLogger(__name__)


# Class IDs unityflow reports as "Unknown(ID)"
# Reference: https://docs.unity3d.com/Manual/ClassIDReference.html
ADDITIONAL_CLASS_IDS = {
    50: "Rigidbody2D",
    57: "Joint2D",
    218: "Terrain",
    328: "VideoPlayer",
    1101: "PrefabInstance",
    1102: "PrefabModification",
}

UNKNOWN_PATTERN = re.compile(r"Unknown\((\d+)\)")


def resolve_class_name(class_name: str) -> str:
    """Resolve class name, handling Unknown(ID) format."""
    match = UNKNOWN_PATTERN.match(class_name)
    if match:
        return ADDITIONAL_CLASS_IDS.get(int(match.group(1)), class_name)
    return class_name


class UnityFileLoader:
    """Loads Unity YAML files into UnityDocument models."""

    # Entries that are neither GameObjects nor components attached to one
    SKIP_TYPES = frozenset({"Prefab", "PrefabInstance", "PrefabModification"})

    def __init__(self, settings: Optional[MergeSettings] = None):
        self._settings = settings or DEFAULT_SETTINGS
        self._raw_doc: Optional[UnityYAMLDocument] = None
        self._data_by_id: dict[str, dict] = {}

    @staticmethod
    def _get_entry_data(entry: Any) -> dict:
        """Get the inner data dictionary of a unityflow object."""
        if hasattr(entry, "get_content"):
            return entry.get_content() or {}
        data = getattr(entry, "data", None) or {}
        # data is like {"GameObject": {...}}
        if len(data) == 1:
            return next(iter(data.values())) or {}
        return data

    def load(self, file_path: Path) -> UnityDocument:
        """
        Load a Unity YAML file.

        Args:
            file_path: Path to the Unity file (.prefab, .unity, .asset, etc.)

        Returns:
            UnityDocument with parsed hierarchy
        """
        self._raw_doc = UnityYAMLDocument.load(str(file_path))
        self._data_by_id = {}

        doc = UnityDocument(file_path=str(file_path))
        game_objects: dict[str, UnityGameObject] = {}
        components: dict[str, UnityComponent] = {}

        for entry in self._raw_doc.objects:
            file_id = str(getattr(entry, "file_id", "") or "")
            if not file_id:
                logger.debug("Skipping entry without fileID in %s", file_path)
                continue
            data = self._get_entry_data(entry)
            self._data_by_id[file_id] = data

            class_name = resolve_class_name(getattr(entry, "class_name", "Unknown"))
            if class_name == "GameObject":
                game_objects[file_id] = self._parse_game_object(data, file_id)
            elif class_name not in self.SKIP_TYPES:
                components[file_id] = self._parse_component(data, file_id, class_name)

        self._build_hierarchy(game_objects, components)

        doc.all_objects.update(game_objects)
        for go in game_objects.values():
            for comp in go.components:
                doc.register_component(comp)
            if go.parent is None:
                doc.root_objects.append(go)
        doc.root_objects.sort(key=lambda x: x.name)

        logger.debug(
            "Loaded %s: %d objects, %d components",
            file_path, doc.object_count, doc.component_count,
        )
        return doc

    def _parse_game_object(self, data: dict, file_id: str) -> UnityGameObject:
        return UnityGameObject(
            file_id=file_id,
            name=data.get("m_Name", "Unnamed"),
            layer=data.get("m_Layer", 0),
            tag=data.get("m_TagString", "Untagged"),
            is_active=bool(data.get("m_IsActive", 1)),
        )

    def _parse_component(self, data: dict, file_id: str, class_name: str) -> UnityComponent:
        comp = UnityComponent(file_id=file_id, type_name=class_name)

        if class_name == "MonoBehaviour":
            script_ref = data.get("m_Script")
            if isinstance(script_ref, dict):
                comp.script_guid = script_ref.get("guid")
            for attr in ("m_Name", "m_ClassName", "m_ScriptName"):
                name = data.get(attr)
                if name and isinstance(name, str):
                    comp.script_name = name
                    break

        hidden = self._settings.hidden_properties
        comp.properties = [
            UnityProperty(
                name=key,
                value=value if isinstance(value, (str, int, float, bool, dict, list, type(None))) else str(value),
                path=key,
                visible=key not in hidden,
            )
            for key, value in data.items()
        ]
        return comp

    def _build_hierarchy(
        self,
        game_objects: dict[str, UnityGameObject],
        components: dict[str, UnityComponent],
    ) -> None:
        """Attach components to their GameObjects and link parents via m_Father."""
        for comp_id, comp in components.items():
            go_ref = self._data_by_id[comp_id].get("m_GameObject")
            if isinstance(go_ref, dict):
                go = game_objects.get(str(go_ref.get("fileID", "")))
                if go is not None:
                    go.components.append(comp)

        transform_to_go: dict[str, UnityGameObject] = {}
        for go in game_objects.values():
            transform = go.get_transform()
            if transform:
                transform_to_go[transform.file_id] = go

        for transform_id, go in transform_to_go.items():
            father_ref = self._data_by_id[transform_id].get("m_Father")
            if not isinstance(father_ref, dict):
                continue
            father_id = str(father_ref.get("fileID", ""))
            if father_id and father_id != "0":
                parent_go = transform_to_go.get(father_id)
                if parent_go is not None and go not in parent_go.children:
                    go.parent = parent_go
                    parent_go.children.append(go)

        for go in game_objects.values():
            go.children.sort(key=lambda x: x.name)


def load_unity_file(file_path: Path, settings: Optional[MergeSettings] = None) -> UnityDocument:
    """
    Convenience function to load a Unity file.

    Args:
        file_path: Path to the Unity file
        settings: Merge options (which properties are hidden)

    Returns:
        UnityDocument with parsed hierarchy
    """
    loader = UnityFileLoader(settings)
    return loader.load(file_path)
