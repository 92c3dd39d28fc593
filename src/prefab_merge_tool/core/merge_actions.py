"""
Merge actions: one resolvable difference between "ours" and "theirs" each.

Every action starts UNRESOLVED (unless constructed with a default) and is
resolved once, to either side. Resolving applies the chosen side to the
"ours" objects; ``reset()`` puts "ours" back to how it was before the
merge so the action can be decided again.
"""

import copy
import logging
from enum import Enum
from typing import Optional

from prefab_merge_tool.core.property_cursor import MISSING, PropertySnapshot
from prefab_merge_tool.core.unity_model import (
    ConflictResolution,
    UnityComponent,
    UnityDocument,
    UnityGameObject,
    UnityProperty,
)
from prefab_merge_tool.utils.naming import (
    format_value,
    get_component_display_name,
    nicify_property_path,
)

logger = logging.getLogger(__name__)


class MergeActionKind(Enum):
    """The kind of difference an action represents."""
    NEW_GAME_OBJECT = "new_game_object"
    DELETE_GAME_OBJECT = "delete_game_object"
    NEW_COMPONENT = "new_component"
    DELETE_COMPONENT = "delete_component"
    CHANGE_PROPERTY = "change_property"


class MergeAction:
    """
    Base class for merge actions.

    Subclasses implement ``_apply_ours`` and ``_apply_theirs``; the state
    transitions live here.
    """

    kind: MergeActionKind

    def __init__(self, ours: Optional[UnityGameObject]):
        self._ours = ours
        self.resolution = ConflictResolution.UNRESOLVED

    @property
    def ours(self) -> Optional[UnityGameObject]:
        """The "our" GameObject this action applies to, if it exists."""
        return self._ours

    @property
    def merged(self) -> bool:
        return self.resolution != ConflictResolution.UNRESOLVED

    @property
    def description(self) -> str:
        raise NotImplementedError

    def resolve(self, resolution: ConflictResolution) -> bool:
        """
        Resolve to one side.

        Returns:
            True if the state changed, False if already resolved that way

        Raises:
            RuntimeError: if already resolved to the other side
        """
        if resolution == ConflictResolution.UNRESOLVED:
            return self.reset()
        if self.resolution == resolution:
            return False
        if self.merged:
            raise RuntimeError(
                f"{self.description}: already resolved to "
                f"{self.resolution.value}, reset() before choosing again"
            )

        if resolution == ConflictResolution.USE_THEIRS:
            self._apply_theirs()
        else:
            self._apply_ours()
        self.resolution = resolution
        logger.debug("Resolved %s -> %s", self.description, resolution.value)
        return True

    def use_theirs(self) -> bool:
        return self.resolve(ConflictResolution.USE_THEIRS)

    def use_ours(self) -> bool:
        """Force "keep ours", from any state."""
        if self.resolution == ConflictResolution.USE_OURS:
            return False
        self._apply_ours()
        self.resolution = ConflictResolution.USE_OURS
        return True

    def reset(self) -> bool:
        """Undo any applied resolution and go back to UNRESOLVED."""
        if not self.merged:
            return False
        if self.resolution == ConflictResolution.USE_THEIRS:
            self._apply_ours()
        self.resolution = ConflictResolution.UNRESOLVED
        return True

    def _apply_ours(self) -> None:
        raise NotImplementedError

    def _apply_theirs(self) -> None:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.description!r}, {self.resolution.value})"


class NewGameObjectAction(MergeAction):
    """The GameObject exists only in "theirs"."""

    kind = MergeActionKind.NEW_GAME_OBJECT

    def __init__(
        self,
        theirs: UnityGameObject,
        document: Optional[UnityDocument] = None,
    ):
        super().__init__(None)
        self.theirs = theirs
        self.document = document

    @property
    def description(self) -> str:
        return f"Add GameObject {self.theirs.get_path()}"

    def _apply_theirs(self) -> None:
        created = self.theirs.clone_detached()
        if self.document is not None:
            parent = None
            if self.theirs.parent is not None:
                parent = self.document.get_object(self.theirs.parent.file_id)
            self.document.attach_object(created, parent)

            # Children resolved before their parent were placed at the root
            for child in self.theirs.children:
                existing = self.document.get_object(child.file_id)
                if existing is not None and existing.parent is None:
                    self.document.detach_object(existing)
                    self.document.attach_object(existing, created)
        self._ours = created

    def _apply_ours(self) -> None:
        if self._ours is None:
            return
        if self.document is not None:
            # Children keep their own resolution and go back to the root
            for child in list(self._ours.children):
                self.document.detach_object(child)
                self.document.attach_object(child)
            self.document.detach_object(self._ours)
        self._ours = None


class DeleteGameObjectAction(MergeAction):
    """The GameObject exists only in "ours"; "theirs" deleted it."""

    kind = MergeActionKind.DELETE_GAME_OBJECT

    def __init__(
        self,
        ours: UnityGameObject,
        document: Optional[UnityDocument] = None,
    ):
        super().__init__(ours)
        self.document = document
        self._location: Optional[tuple[Optional[UnityGameObject], int]] = None

    @property
    def description(self) -> str:
        return f"Delete GameObject {self._ours.get_path()}"

    def _apply_theirs(self) -> None:
        if self.document is not None:
            self._location = self.document.detach_object(self._ours)
            return
        parent = self._ours.parent
        index = parent.remove_child(self._ours) if parent is not None else -1
        self._location = (parent, index)

    def _apply_ours(self) -> None:
        if self._location is None:
            return
        parent, index = self._location
        position = index if index >= 0 else None
        if self.document is not None:
            self.document.attach_object(self._ours, parent, position)
        elif parent is not None:
            parent.add_child(self._ours, position)
        self._location = None


class NewComponentAction(MergeAction):
    """The component exists only in "theirs"."""

    kind = MergeActionKind.NEW_COMPONENT

    def __init__(
        self,
        ours: UnityGameObject,
        theirs_component: UnityComponent,
        document: Optional[UnityDocument] = None,
    ):
        super().__init__(ours)
        self.theirs_component = theirs_component
        self.document = document
        self._added: Optional[UnityComponent] = None

    @property
    def description(self) -> str:
        comp = self.theirs_component
        return f"Add component {get_component_display_name(comp.type_name, comp.script_name)}"

    def _apply_theirs(self) -> None:
        self._added = self.theirs_component.clone()
        self._ours.add_component(self._added)
        if self.document is not None:
            self.document.register_component(self._added)

    def _apply_ours(self) -> None:
        if self._added is None:
            return
        self._ours.remove_component(self._added)
        if self.document is not None:
            self.document.unregister_component(self._added)
        self._added = None


class DeleteComponentAction(MergeAction):
    """The component exists only in "ours"; "theirs" removed it."""

    kind = MergeActionKind.DELETE_COMPONENT

    def __init__(
        self,
        ours: UnityGameObject,
        ours_component: UnityComponent,
        document: Optional[UnityDocument] = None,
    ):
        super().__init__(ours)
        self.ours_component = ours_component
        self.document = document
        self._removed_index: Optional[int] = None

    @property
    def description(self) -> str:
        comp = self.ours_component
        return f"Delete component {get_component_display_name(comp.type_name, comp.script_name)}"

    def _apply_theirs(self) -> None:
        index = self._ours.remove_component(self.ours_component)
        if index < 0:
            return
        self._removed_index = index
        if self.document is not None:
            self.document.unregister_component(self.ours_component)

    def _apply_ours(self) -> None:
        if self._removed_index is None:
            return
        self._ours.add_component(self.ours_component, self._removed_index)
        if self.document is not None:
            self.document.register_component(self.ours_component)
        self._removed_index = None


class ChangePropertyAction(MergeAction):
    """A property of a matched component differs between the versions."""

    kind = MergeActionKind.CHANGE_PROPERTY

    def __init__(
        self,
        ours: UnityGameObject,
        ours_component: UnityComponent,
        our_property: PropertySnapshot,
        their_property: PropertySnapshot,
    ):
        super().__init__(ours)
        self.ours_component = ours_component
        self.our_property = our_property
        self.their_property = their_property
        self._removed_index: Optional[int] = None

    @property
    def path(self) -> str:
        return self.our_property.path

    @property
    def description(self) -> str:
        comp = self.ours_component
        return (
            f"{get_component_display_name(comp.type_name, comp.script_name)}."
            f"{nicify_property_path(self.path)}: "
            f"{format_value(self.our_property.value)} -> "
            f"{format_value(self.their_property.value)}"
        )

    def _write(self, snapshot: PropertySnapshot) -> None:
        comp = self.ours_component
        if snapshot.value is MISSING:
            index = comp.remove_property(self.path)
            if index >= 0:
                self._removed_index = index
            return
        # Snapshots stay frozen; "ours" gets its own copy
        value = copy.deepcopy(snapshot.value)
        if comp.set_property_value(self.path, value):
            return
        if "." not in self.path:
            comp.add_property(
                UnityProperty(snapshot.name, value, self.path), self._removed_index
            )
            self._removed_index = None
        else:
            logger.warning("Property %s missing on %r", self.path, comp)

    def _apply_theirs(self) -> None:
        self._write(self.their_property)

    def _apply_ours(self) -> None:
        self._write(self.our_property)
