"""
Property-by-property comparison of two matched components.
"""

import logging
from typing import Iterator

from prefab_merge_tool.core.property_cursor import PropertySnapshot, aligned_cursors
from prefab_merge_tool.core.unity_model import UnityComponent

logger = logging.getLogger(__name__)


def iter_property_differences(
    ours: UnityComponent,
    theirs: UnityComponent,
) -> Iterator[tuple[PropertySnapshot, PropertySnapshot]]:
    """
    Walk both components' visible properties in lockstep.

    Position i of "our" traversal is compared with position i of "their"
    traversal. Both traversals follow the same property layout, so a
    property only one side serializes is compared against MISSING.

    Yields:
        (our snapshot, their snapshot) for every position whose values differ
    """
    our_cursor, their_cursor = aligned_cursors(ours, theirs)

    if not our_cursor.next(True):
        return
    their_cursor.next(True)

    while our_cursor.next_visible(False):
        if not their_cursor.next_visible(False):
            logger.warning(
                "Property traversal of %r ended before %r at %s",
                theirs, ours, our_cursor.path,
            )
            return
        if our_cursor.path != their_cursor.path:
            logger.warning(
                "Property traversals of %r and %r diverge: %s vs %s",
                ours, theirs, our_cursor.path, their_cursor.path,
            )
            return
        if our_cursor.value != their_cursor.value:
            yield our_cursor.snapshot(), their_cursor.snapshot()

    if their_cursor.next_visible(False):
        logger.warning(
            "Property traversal of %r ended before %r at %s",
            ours, theirs, their_cursor.path,
        )
