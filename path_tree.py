"""
Path-tree tracker.

Holds the edges of the currently believed predecessor tree during a run.
Edges are keyed by their head, so a vertex never has more than one incoming
tree edge: linking a new predecessor replaces the old one.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True)
class TreeEdge:
    tail: str
    head: str
    directed: bool


@dataclass(frozen=True)
class PathTreeSnapshot:
    """
    Tree edges right after one link.

    seq is the trace sequence number of the event that reported the link,
    or None when the link was made outside a traced run.
    """

    seq: Optional[int]
    edges: Tuple[TreeEdge, ...]


class PathTreeTracker:
    """
    Mutable tree-edge set with a snapshot taken after every mutation.
    """

    def __init__(self) -> None:
        self._by_head: Dict[str, TreeEdge] = {}
        self._snapshots: List[PathTreeSnapshot] = []

    def link(self, tail: str, head: str, directed: bool, seq: Optional[int] = None) -> Optional[TreeEdge]:
        """
        Make tail the tree predecessor of head.

        Any existing incoming tree edge of head is removed first and returned.
        The new edge goes to the end of the edge order. The snapshot taken
        afterwards is stamped with seq.
        """
        replaced = self._by_head.pop(head, None)
        self._by_head[head] = TreeEdge(tail, head, directed)
        self._snapshots.append(PathTreeSnapshot(seq, self.edges()))
        return replaced

    def incoming(self, head: str) -> Optional[TreeEdge]:
        return self._by_head.get(head)

    def edges(self) -> Tuple[TreeEdge, ...]:
        return tuple(self._by_head.values())

    @property
    def snapshots(self) -> Tuple[PathTreeSnapshot, ...]:
        return tuple(self._snapshots)

    def clear(self) -> None:
        self._by_head.clear()
        self._snapshots.clear()

    def __len__(self) -> int:
        return len(self._by_head)

    def __contains__(self, edge: object) -> bool:
        return isinstance(edge, TreeEdge) and self._by_head.get(edge.head) == edge
