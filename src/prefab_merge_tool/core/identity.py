"""
Stable identifiers for pairing components across "ours" and "theirs".

Unity keeps a component's fileID when a prefab is edited, so the fileID
is the identifier. Components without one (hand-built or stripped
entries) fall back to type, script and position among same-type
siblings, which is stable as long as their relative order is.
"""

import logging
from collections import Counter
from typing import Iterable

from prefab_merge_tool.core.unity_model import UnityComponent

logger = logging.getLogger(__name__)


def component_identifiers(
    components: Iterable[UnityComponent],
) -> list[tuple[str, UnityComponent]]:
    """
    Assign an identifier to every component, in enumeration order.

    Returns:
        List of (identifier, component) pairs
    """
    seen: Counter[str] = Counter()
    result = []
    for comp in components:
        if comp.file_id and comp.file_id != "0":
            identifier = comp.file_id
        else:
            kind = f"{comp.type_name}:{comp.script_guid or ''}"
            identifier = f"{kind}#{seen[kind]}"
            seen[kind] += 1
        result.append((identifier, comp))
    return result


def build_identifier_map(
    components: Iterable[UnityComponent],
) -> dict[str, UnityComponent]:
    """
    Map identifier -> component.

    Duplicate identifiers are not an error: the later component
    replaces the earlier one, which then never gets matched.
    """
    mapping: dict[str, UnityComponent] = {}
    for identifier, comp in component_identifiers(components):
        if identifier in mapping:
            logger.warning(
                "Duplicate component identifier %s: %r masks %r",
                identifier, comp, mapping[identifier],
            )
        mapping[identifier] = comp
    return mapping
