"""
Unity-style naming utilities.

Turns serialized property and component names into the display names
Unity shows in the inspector, for merge action descriptions.
"""

import re
from functools import lru_cache
from typing import Any, Optional

# Word boundaries: "localPosition" -> "local|Position", "XMLParser" -> "XML|Parser"
_WORD_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")

_PREFIXES = ("m_", "k_", "s_", "_")


@lru_cache(maxsize=1024)
def nicify_variable_name(name: str) -> str:
    """
    Convert a serialized variable name to a display name.

    Examples:
        m_LocalPosition -> Local Position
        isKinematic -> Is Kinematic
        m_UIScale -> UI Scale
        m_ID -> ID
    """
    if not name:
        return ""

    stripped = name
    for prefix in _PREFIXES:
        if stripped.startswith(prefix):
            stripped = stripped[len(prefix):]
            break
    if not stripped:
        return name

    words = _WORD_BOUNDARY.split(stripped)
    result = " ".join(words)
    return result[0].upper() + result[1:]


def nicify_property_path(path: str) -> str:
    """
    Convert a property path to a display string.

    Examples:
        "m_LocalPosition.x" -> "Local Position > X"
        "m_Children.Array.data[0]" -> "Children > Element 0"
    """
    parts = []
    for part in path.split("."):
        if part == "Array":
            continue
        if part.startswith("data[") and part.endswith("]"):
            parts.append(f"Element {part[5:-1]}")
        else:
            parts.append(nicify_variable_name(part))
    return " > ".join(parts)


# Component types whose display name is not the nicified type name
COMPONENT_DISPLAY_NAMES = {
    "MonoBehaviour": "Script",
    "Rigidbody2D": "Rigidbody 2D",
    "BoxCollider2D": "Box Collider 2D",
    "CircleCollider2D": "Circle Collider 2D",
    "PolygonCollider2D": "Polygon Collider 2D",
    "TextMeshPro": "TextMeshPro",
    "TextMeshProUGUI": "TextMeshPro - Text (UI)",
    "RectMask2D": "Rect Mask 2D",
}


def get_component_display_name(type_name: str, script_name: Optional[str] = None) -> str:
    """
    Get display name for a component type.

    Args:
        type_name: The component type name (e.g., "MonoBehaviour")
        script_name: Optional script name for MonoBehaviour components
    """
    if type_name == "MonoBehaviour" and script_name:
        return nicify_variable_name(script_name)
    return COMPONENT_DISPLAY_NAMES.get(type_name, nicify_variable_name(type_name))


def format_value(value: Any) -> str:
    """Format a property value for a one-line description."""
    if isinstance(value, dict):
        if "fileID" in value:
            return f"ref({value['fileID']})"
        if all(axis in value for axis in ("x", "y")):
            axes = [str(value[a]) for a in ("x", "y", "z", "w") if a in value]
            return f"({', '.join(axes)})"
        if all(channel in value for channel in ("r", "g", "b")):
            return f"rgba({value['r']}, {value['g']}, {value['b']}, {value.get('a', 1)})"
        return str(value)
    if isinstance(value, list):
        return f"[{len(value)} items]"
    if isinstance(value, str) and len(value) > 30:
        return f'"{value[:27]}..."'
    return str(value)
