"""
Unity data models for representing prefab/scene structure.

GameObjects are the nodes being merged, components are their
sub-elements and properties are the comparable fields inside a
component. The mutation helpers at the bottom of each class are the
primitives merge actions use to apply a resolution to "our" document.
"""

import copy
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, Optional


# Matches list element segments like "data[3]" in property paths
_ARRAY_ELEMENT = re.compile(r"data\[(\d+)\]")


class ConflictResolution(Enum):
    """How a merge action was resolved."""
    UNRESOLVED = "unresolved"
    USE_OURS = "ours"
    USE_THEIRS = "theirs"


@dataclass
class UnityProperty:
    """A single top-level property within a component."""
    name: str
    value: Any
    path: str  # Full path like "m_LocalPosition"
    visible: bool = True  # False for serializer bookkeeping entries

    def __repr__(self) -> str:
        return f"UnityProperty({self.name}={self.value!r})"


@dataclass
class UnityComponent:
    """A Unity component (Transform, Rigidbody, MonoBehaviour, etc.)."""
    file_id: str
    type_name: str  # "Transform", "MonoBehaviour", etc.
    properties: list[UnityProperty] = field(default_factory=list)
    script_name: Optional[str] = None  # For MonoBehaviour, the script name
    script_guid: Optional[str] = None  # Script GUID reference

    def get_property(self, path: str) -> Optional[UnityProperty]:
        """Get property by path."""
        for prop in self.properties:
            if prop.path == path:
                return prop
        return None

    def set_property_value(self, path: str, value: Any) -> bool:
        """
        Write a value at a (possibly nested) property path.

        Nested segments follow the traversal naming used by the property
        cursor: dict keys are joined with ".", list items are written as
        "Array.data[i]".

        Returns:
            False if the top-level property does not exist
        """
        parts = path.split(".")
        prop = self.get_property(parts[0])
        if prop is None:
            return False

        if len(parts) == 1:
            prop.value = value
            return True

        keys = [_path_key(part) for part in parts[1:] if part != "Array"]
        container = prop.value
        for key in keys[:-1]:
            container = container[key]
        container[keys[-1]] = value
        return True

    def add_property(self, prop: UnityProperty, index: Optional[int] = None) -> None:
        if index is None or index > len(self.properties):
            self.properties.append(prop)
        else:
            self.properties.insert(index, prop)

    def remove_property(self, path: str) -> int:
        """Remove a top-level property. Returns its former index or -1."""
        for index, prop in enumerate(self.properties):
            if prop.path == path:
                del self.properties[index]
                return index
        return -1

    def clone(self) -> "UnityComponent":
        """Deep copy, used when a component is carried over from "theirs"."""
        return copy.deepcopy(self)

    def __repr__(self) -> str:
        name = self.script_name or self.type_name
        return f"UnityComponent({name}, fileID={self.file_id})"


def _path_key(segment: str):
    match = _ARRAY_ELEMENT.fullmatch(segment)
    if match:
        return int(match.group(1))
    return segment


@dataclass(eq=False)
class UnityGameObject:
    """A Unity GameObject with its components and children."""
    file_id: str
    name: str
    components: list[UnityComponent] = field(default_factory=list)
    children: list["UnityGameObject"] = field(default_factory=list)
    parent: Optional["UnityGameObject"] = field(default=None, repr=False)

    # Additional metadata
    layer: int = 0
    tag: str = "Untagged"
    is_active: bool = True

    def get_component(self, type_name: str) -> Optional[UnityComponent]:
        """Get first component of given type."""
        for comp in self.components:
            if comp.type_name == type_name:
                return comp
        return None

    def get_transform(self) -> Optional[UnityComponent]:
        """Get Transform or RectTransform component."""
        return self.get_component("Transform") or self.get_component("RectTransform")

    def get_path(self) -> str:
        """Get full hierarchy path like 'Parent/Child/GrandChild'."""
        parts = [self.name]
        obj = self.parent
        while obj:
            parts.insert(0, obj.name)
            obj = obj.parent
        return "/".join(parts)

    def iter_descendants(self) -> Iterator["UnityGameObject"]:
        """Iterate over all descendants (depth-first)."""
        for child in self.children:
            yield child
            yield from child.iter_descendants()

    def clone_detached(self) -> "UnityGameObject":
        """
        Copy this object and its components, without parent or children.

        Children are merged as nodes of their own, so only the object
        itself is carried over.
        """
        return UnityGameObject(
            file_id=self.file_id,
            name=self.name,
            components=[comp.clone() for comp in self.components],
            layer=self.layer,
            tag=self.tag,
            is_active=self.is_active,
        )

    def add_component(self, component: UnityComponent, index: Optional[int] = None) -> None:
        if index is None or index > len(self.components):
            self.components.append(component)
        else:
            self.components.insert(index, component)

    def remove_component(self, component: UnityComponent) -> int:
        """Remove a component by identity. Returns its former index or -1."""
        for index, comp in enumerate(self.components):
            if comp is component:
                del self.components[index]
                return index
        return -1

    def add_child(self, child: "UnityGameObject", index: Optional[int] = None) -> None:
        child.parent = self
        if index is None or index > len(self.children):
            self.children.append(child)
        else:
            self.children.insert(index, child)

    def remove_child(self, child: "UnityGameObject") -> int:
        """Unlink a child by identity. Returns its former index or -1."""
        for index, obj in enumerate(self.children):
            if obj is child:
                del self.children[index]
                child.parent = None
                return index
        return -1

    def __repr__(self) -> str:
        return f"UnityGameObject({self.name!r}, fileID={self.file_id})"


@dataclass
class UnityDocument:
    """Represents an entire Unity file (prefab, scene, asset)."""
    file_path: str
    root_objects: list[UnityGameObject] = field(default_factory=list)
    all_objects: dict[str, UnityGameObject] = field(default_factory=dict)
    all_components: dict[str, UnityComponent] = field(default_factory=dict)

    # Metadata
    unity_version: Optional[str] = None

    def get_object(self, file_id: str) -> Optional[UnityGameObject]:
        """Get GameObject by fileID."""
        return self.all_objects.get(file_id)

    def get_component(self, file_id: str) -> Optional[UnityComponent]:
        """Get component by fileID."""
        return self.all_components.get(file_id)

    def iter_all_objects(self) -> Iterator[UnityGameObject]:
        """Iterate over all GameObjects in the document."""
        for root in self.root_objects:
            yield root
            yield from root.iter_descendants()

    @property
    def object_count(self) -> int:
        return len(self.all_objects)

    @property
    def component_count(self) -> int:
        return len(self.all_components)

    # === Mutation primitives used when applying merge actions ===

    def register_component(self, component: UnityComponent) -> None:
        if component.file_id:
            self.all_components[component.file_id] = component

    def unregister_component(self, component: UnityComponent) -> None:
        if self.all_components.get(component.file_id) is component:
            del self.all_components[component.file_id]

    def attach_object(
        self,
        go: UnityGameObject,
        parent: Optional[UnityGameObject] = None,
        index: Optional[int] = None,
    ) -> None:
        """
        Insert a GameObject (and its subtree) into the hierarchy and indices.

        Args:
            go: Object to insert; must not currently have a parent
            parent: New parent, or None to insert as a root object
            index: Position among the siblings, appended if None
        """
        siblings = parent.children if parent is not None else self.root_objects
        go.parent = parent
        if index is None or index > len(siblings):
            siblings.append(go)
        else:
            siblings.insert(index, go)

        for obj in [go, *go.iter_descendants()]:
            self.all_objects[obj.file_id] = obj
            for comp in obj.components:
                self.register_component(comp)

    def detach_object(self, go: UnityGameObject) -> tuple[Optional[UnityGameObject], int]:
        """
        Remove a GameObject (and its subtree) from the hierarchy and indices.

        Returns:
            Tuple of (former parent, former sibling index) so the object
            can be re-attached at the same place; index is -1 if the
            object was not part of the hierarchy
        """
        parent = go.parent
        siblings = parent.children if parent is not None else self.root_objects
        index = -1
        for i, sibling in enumerate(siblings):
            if sibling is go:
                index = i
                del siblings[i]
                break
        go.parent = None

        for obj in [go, *go.iter_descendants()]:
            if self.all_objects.get(obj.file_id) is obj:
                del self.all_objects[obj.file_id]
            for comp in obj.components:
                self.unregister_component(comp)

        return parent, index

    def __repr__(self) -> str:
        return f"UnityDocument({self.file_path!r}, objects={self.object_count})"
