"""
Merge state of a single GameObject.

A GameObjectMergeUnit holds every merge action that applies to one
GameObject or its components, and counts as merged once all of them are.
"""

import logging
from typing import Iterable, Optional

from prefab_merge_tool.core.field_differ import iter_property_differences
from prefab_merge_tool.core.identity import build_identifier_map, component_identifiers
from prefab_merge_tool.core.merge_actions import (
    ChangePropertyAction,
    DeleteComponentAction,
    DeleteGameObjectAction,
    MergeAction,
    NewComponentAction,
    NewGameObjectAction,
)
from prefab_merge_tool.core.settings import DEFAULT_SETTINGS, MergeSettings
from prefab_merge_tool.core.unity_model import (
    ConflictResolution,
    UnityComponent,
    UnityDocument,
    UnityGameObject,
)

logger = logging.getLogger(__name__)


def find_ours_reference(actions: Iterable[MergeAction]) -> Optional[UnityGameObject]:
    """Return the first "our" GameObject any action currently refers to."""
    for action in actions:
        if action.ours is not None:
            return action.ours
    return None


class GameObjectMergeUnit:
    """
    All merge actions for one pair of "our" and "their" GameObject.

    Args:
        ours: "Our" version of the object, None if only "theirs" has it
        theirs: "Their" version of the object, None if only "ours" has it
        ours_document: Document "ours" belongs to; objects and components
            created or deleted by resolutions are kept in sync with it
        settings: Merge options

    Raises:
        ValueError: if both versions are None
    """

    def __init__(
        self,
        ours: Optional[UnityGameObject],
        theirs: Optional[UnityGameObject],
        ours_document: Optional[UnityDocument] = None,
        settings: Optional[MergeSettings] = None,
    ):
        if ours is None and theirs is None:
            raise ValueError("GameObjectMergeUnit needs at least one GameObject")

        self._ours = ours
        self.theirs = theirs
        self._document = ours_document
        self._settings = settings or DEFAULT_SETTINGS
        self._actions: list[MergeAction] = []
        self.label = self._generate_label()

        if ours is None:
            self._add_action(NewGameObjectAction(theirs, ours_document))
        elif theirs is None:
            self._add_action(DeleteGameObjectAction(ours, ours_document))
        else:
            self._find_component_differences()

        # Defaults may already have resolved everything
        self._was_merged = self.merged
        logger.debug("%s: %d action(s), merged=%s", self.label, len(self._actions), self._was_merged)

    @property
    def ours(self) -> Optional[UnityGameObject]:
        """
        "Our" GameObject.

        If the object did not exist in "ours", this is whatever the
        creating action has materialised so far, which may still be None.
        """
        if self._ours is not None:
            return self._ours
        return find_ours_reference(self._actions)

    @property
    def actions(self) -> tuple[MergeAction, ...]:
        return tuple(self._actions)

    @property
    def has_actions(self) -> bool:
        return bool(self._actions)

    @property
    def merged(self) -> bool:
        return all(action.merged for action in self._actions)

    def is_merged(self) -> bool:
        return self.merged

    def recompute_after_resolution(self) -> bool:
        """Re-check the merged state after an action was resolved. Returns it."""
        merged = self.merged
        if merged != self._was_merged:
            logger.debug("%s: merged=%s", self.label, merged)
            self._was_merged = merged
        return merged

    def resolve(self, action: MergeAction, resolution: ConflictResolution) -> bool:
        """
        Resolve one of this unit's actions.

        Returns:
            True if the action's state changed
        """
        if not any(a is action for a in self._actions):
            raise ValueError(f"{action!r} does not belong to {self.label}")
        changed = action.resolve(resolution)
        if changed:
            self.recompute_after_resolution()
        return changed

    def use_ours(self) -> None:
        """Keep "our" version for every action, e.g. when the merge is aborted."""
        for action in self._actions:
            action.use_ours()
        self.recompute_after_resolution()
        logger.info("%s: kept ours for %d action(s)", self.label, len(self._actions))

    def _add_action(self, action: MergeAction) -> None:
        if self._settings.automerge:
            if isinstance(action, (NewGameObjectAction, NewComponentAction)):
                action.use_theirs()
            elif isinstance(action, (DeleteGameObjectAction, DeleteComponentAction)):
                action.use_ours()
        self._actions.append(action)

    def _generate_label(self) -> str:
        parts = []
        if self._ours is not None:
            parts.append(f"Your[{self._ours.get_path()}]")
        if self.theirs is not None:
            parts.append(f"Their[{self.theirs.get_path()}]")
        return " vs. ".join(parts)

    def _find_component_differences(self) -> None:
        """Pair components by identifier and record what differs."""
        their_components = build_identifier_map(self.theirs.components)

        for identifier, our_component in component_identifiers(self._ours.components):
            their_component = their_components.pop(identifier, None)
            if their_component is not None:
                self._find_property_differences(our_component, their_component)
            else:
                self._add_action(
                    DeleteComponentAction(self._ours, our_component, self._document)
                )

        # Whatever is left only exists in "theirs"
        for their_component in their_components.values():
            self._add_action(
                NewComponentAction(self._ours, their_component, self._document)
            )

    def _find_property_differences(
        self,
        our_component: UnityComponent,
        their_component: UnityComponent,
    ) -> None:
        for our_property, their_property in iter_property_differences(
            our_component, their_component
        ):
            self._add_action(
                ChangePropertyAction(self._ours, our_component, our_property, their_property)
            )

    def __repr__(self) -> str:
        return f"GameObjectMergeUnit({self.label!r}, actions={len(self._actions)}, merged={self.merged})"
