"""
Per-run state and results.

A RunContext is created fresh for every run and owned by exactly one engine
while it runs: distance and predecessor tables, the visit order, the
path-tree tracker and the trace recorder. RunResult is the frozen outcome
handed back to callers.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Mapping, Optional, Tuple
import math

from path_tree import PathTreeTracker, TreeEdge
from trace_recorder import TraceRecorder

# Distance sentinel for "not reached". Never the result of arithmetic:
# engines only add weights to finite distances.
INFINITY = math.inf


class Algorithm(Enum):
    DIJKSTRA = "dijkstra"
    GREEDY = "greedy"


def format_distance(distance: Optional[float]) -> str:
    if distance is None:
        return ""
    if distance == INFINITY:
        return "∞"
    return str(int(distance))


@dataclass
class RunContext:
    source: str
    target: Optional[str] = None
    trace: TraceRecorder = field(default_factory=TraceRecorder)
    tree: PathTreeTracker = field(default_factory=PathTreeTracker)
    dist: Dict[str, float] = field(default_factory=dict)
    pred: Dict[str, Optional[str]] = field(default_factory=dict)
    visited: List[str] = field(default_factory=list)

    def is_visited(self, vertex: str) -> bool:
        return vertex in self.visited


@dataclass(frozen=True)
class VertexSummary:
    vertex: str
    distance: float
    predecessor: Optional[str]
    is_source: bool
    is_target: bool


@dataclass(frozen=True)
class RunResult:
    """
    Final tables of one run.

    For Dijkstra, path is the source -> target vertex sequence and
    total_distance its length; both reflect an unreachable target as
    path=None and total_distance=INFINITY. Greedy runs leave distances
    empty and carry the traversal tree in predecessors.
    """

    algorithm: Algorithm
    source: str
    target: Optional[str]
    distances: Mapping[str, float]
    predecessors: Mapping[str, Optional[str]]
    visit_order: Tuple[str, ...]
    tree: Tuple[TreeEdge, ...]
    path: Optional[Tuple[str, ...]] = None
    path_edges: Tuple[TreeEdge, ...] = ()
    total_distance: Optional[float] = None

    @property
    def reachable(self) -> bool:
        return self.path is not None

    def summary(self) -> List[VertexSummary]:
        """Per-vertex distance/predecessor rows, in label order."""
        rows: List[VertexSummary] = []
        for vertex in sorted(self.distances):
            rows.append(
                VertexSummary(
                    vertex=vertex,
                    distance=self.distances[vertex],
                    predecessor=self.predecessors.get(vertex),
                    is_source=vertex == self.source,
                    is_target=vertex == self.target,
                )
            )
        return rows
