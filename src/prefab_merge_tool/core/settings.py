"""
Merge configuration.
"""

from dataclasses import dataclass, field

# Serializer bookkeeping entries Unity never shows in the inspector
HIDDEN_PROPERTIES = frozenset({
    "m_ObjectHideFlags",
    "m_CorrespondingSourceObject",
    "m_PrefabInstance",
    "m_PrefabAsset",
    "m_GameObject",
    "serializedVersion",
})


@dataclass(frozen=True)
class MergeSettings:
    """
    Options shared by the loader and the merge units.

    Attributes:
        automerge: Construct new objects/components already resolved to
            "theirs" and deletions already resolved to "ours". Property
            changes always wait for a decision.
        hidden_properties: Property names the loader marks as internal;
            hidden properties are skipped when comparing components.
    """
    automerge: bool = False
    hidden_properties: frozenset[str] = field(default=HIDDEN_PROPERTIES)


DEFAULT_SETTINGS = MergeSettings()
