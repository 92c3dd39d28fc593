"""
Cursor over the serialized properties of a component.

Mirrors the way Unity's serialized property iterator walks an object:
the traversal is a pre-order, depth-first flattening of every property
and of the values nested inside it. The first ``next(True)`` lands on a
hidden header entry standing for the component itself; from there
``next_visible(False)`` steps over the visible top-level properties.
"""

import copy
from dataclasses import dataclass
from typing import Any, Optional

from prefab_merge_tool.core.unity_model import UnityComponent, UnityProperty


HEADER_PATH = "Base"


class _Missing:
    """Value of a property the component does not serialize."""

    def __copy__(self) -> "_Missing":
        return self

    def __deepcopy__(self, memo) -> "_Missing":
        return self

    def __repr__(self) -> str:
        return "(missing)"


MISSING = _Missing()


@dataclass(frozen=True)
class PropertyEntry:
    """One position of the traversal."""
    path: str
    name: str
    depth: int
    visible: bool
    value: Any


@dataclass(frozen=True)
class PropertySnapshot:
    """Frozen copy of a cursor position, kept by merge actions."""
    path: str
    name: str
    value: Any


def property_layout(*components: UnityComponent) -> list[UnityProperty]:
    """
    Top-level property sequence shared by several components.

    Starts from the first component's order; properties only the later
    components have are inserted right after the property they follow
    there. Returns the first property seen for each path.
    """
    layout: list[UnityProperty] = []
    known: dict[str, int] = {}
    for component in components:
        insert_at = 0
        for prop in component.properties:
            if prop.path in known:
                insert_at = known[prop.path] + 1
                continue
            layout.insert(insert_at, prop)
            insert_at += 1
            known = {p.path: i for i, p in enumerate(layout)}
    return layout


def flatten_properties(
    component: UnityComponent,
    layout: Optional[list[UnityProperty]] = None,
) -> list[PropertyEntry]:
    """
    Flatten a component's properties in traversal order.

    Args:
        component: Component to walk
        layout: Top-level properties to walk, in order; a property the
            component lacks becomes a single MISSING entry. Defaults to
            the component's own properties.
    """
    entries = [PropertyEntry(HEADER_PATH, HEADER_PATH, 0, False, None)]
    for template in component.properties if layout is None else layout:
        prop = component.get_property(template.path)
        if prop is None:
            entries.append(
                PropertyEntry(template.path, template.name, 0, template.visible, MISSING)
            )
        else:
            _flatten_value(entries, prop.name, prop.path, prop.value, 0, prop.visible)
    return entries


def _flatten_value(
    entries: list[PropertyEntry],
    name: str,
    path: str,
    value: Any,
    depth: int,
    visible: bool,
) -> None:
    entries.append(PropertyEntry(path, name, depth, visible, value))
    if isinstance(value, dict):
        for key, child in value.items():
            _flatten_value(entries, str(key), f"{path}.{key}", child, depth + 1, visible)
    elif isinstance(value, list):
        for i, child in enumerate(value):
            item = f"data[{i}]"
            _flatten_value(entries, item, f"{path}.Array.{item}", child, depth + 1, visible)


class PropertyCursor:
    """Resettable cursor over a component's flattened properties."""

    def __init__(
        self,
        component: UnityComponent,
        layout: Optional[list[UnityProperty]] = None,
    ):
        self._entries = flatten_properties(component, layout)
        self._index = -1

    def reset(self) -> None:
        """Move back before the first entry."""
        self._index = -1

    def next(self, enter_children: bool) -> bool:
        """
        Advance to the next entry.

        Args:
            enter_children: If False, skip the entries nested below the
                current one

        Returns:
            True while the cursor points at an entry
        """
        if self._index >= len(self._entries):
            return False
        if self._index < 0 or enter_children:
            self._index += 1
        else:
            depth = self._entries[self._index].depth
            self._index += 1
            while (
                self._index < len(self._entries)
                and self._entries[self._index].depth > depth
            ):
                self._index += 1
        return self._index < len(self._entries)

    def next_visible(self, enter_children: bool) -> bool:
        """Advance like ``next`` but skip hidden entries."""
        while self.next(enter_children):
            if self._entries[self._index].visible:
                return True
            # Hidden entries are stepped over together with their children
            enter_children = False
        return False

    @property
    def current(self) -> Optional[PropertyEntry]:
        if 0 <= self._index < len(self._entries):
            return self._entries[self._index]
        return None

    @property
    def path(self) -> Optional[str]:
        entry = self.current
        return entry.path if entry else None

    @property
    def value(self) -> Any:
        entry = self.current
        return entry.value if entry else None

    def copy(self) -> "PropertyCursor":
        """Duplicate the cursor state; moving the copy leaves this one alone."""
        duplicate = PropertyCursor.__new__(PropertyCursor)
        duplicate._entries = self._entries
        duplicate._index = self._index
        return duplicate

    def snapshot(self) -> PropertySnapshot:
        """Freeze the current position into an immutable snapshot."""
        entry = self.current
        if entry is None:
            raise RuntimeError("cursor is not positioned on an entry")
        return PropertySnapshot(entry.path, entry.name, copy.deepcopy(entry.value))


def aligned_cursors(
    ours: UnityComponent,
    theirs: UnityComponent,
) -> tuple[PropertyCursor, PropertyCursor]:
    """
    Cursors over two components that visit the same top-level properties.

    Serialized field sets of one component type can differ between
    versions (a script gained or lost a field). Both cursors walk the
    union of the two, so position i names the same property on both
    sides and a field only one side has shows up as MISSING on the other.
    """
    layout = property_layout(ours, theirs)
    return PropertyCursor(ours, layout), PropertyCursor(theirs, layout)
