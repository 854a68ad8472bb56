"""
Vertex labels for the graph trace engine.

Vertices are single uppercase letters drawn from a contiguous range
A .. A+count-1. A vertex has no identity beyond its label.
"""

from typing import List, Optional

MIN_VERTICES = 1
MAX_VERTICES = 26

_FIRST = ord("A")


def vertex_label(index: int) -> str:
    """Label of the vertex at position index (0 -> 'A')."""
    return chr(_FIRST + index)


def vertex_labels(count: int) -> List[str]:
    """
    All labels for a graph with count vertices, in label order.

    Raises ValueError when count is outside MIN_VERTICES..MAX_VERTICES.
    """
    if not MIN_VERTICES <= count <= MAX_VERTICES:
        raise ValueError(
            f"vertex count must be between {MIN_VERTICES} and {MAX_VERTICES}, got {count}"
        )
    return [vertex_label(i) for i in range(count)]


def normalise_label(raw: Optional[str]) -> Optional[str]:
    if raw is None:
        return None
    label = raw.strip().upper()
    return label or None


def is_valid_vertex(label: Optional[str], count: int) -> bool:
    """True when label names one of the first count vertices."""
    if label is None or len(label) != 1:
        return False
    offset = ord(label) - _FIRST
    return 0 <= offset < count
