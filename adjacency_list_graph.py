"""
Concrete edge-list graph with a derived adjacency map.

The edge list is the source of truth; the adjacency map is rebuilt from it
whenever edges change and handed out as defensive copies.
"""

from typing import Dict, Iterable, List, Mapping, Sequence, Tuple

from graph import Edge, Graph, Neighbour
from vertices import vertex_labels


def build_adjacency(edges: Iterable[Edge], vertex_count: int) -> Dict[str, Tuple[Neighbour, ...]]:
    """
    Build the adjacency map for vertices A .. A+vertex_count-1.

    Every vertex appears, even with no neighbours. For each edge, `to` is
    appended to `from`'s list, and `from` to `to`'s list when the edge is
    undirected. Endpoints outside the vertex range get no entry of their own.
    """
    adj: Dict[str, List[Neighbour]] = {v: [] for v in vertex_labels(vertex_count)}

    for e in edges:
        if e.from_vertex in adj:
            adj[e.from_vertex].append(Neighbour(e.to_vertex, e.weight, e.directed))
        if not e.directed and e.to_vertex in adj:
            adj[e.to_vertex].append(Neighbour(e.from_vertex, e.weight, e.directed))

    return {v: tuple(ns) for v, ns in adj.items()}


class AdjacencyListGraph(Graph):
    """
    Ordered edge list over a fixed vertex range, with its adjacency view.
    """

    def __init__(self, vertex_count: int, edges: Iterable[Edge] = ()) -> None:
        self._vertices = vertex_labels(vertex_count)
        self._vertex_count = vertex_count
        self._edges: List[Edge] = []
        self._adj: Dict[str, Tuple[Neighbour, ...]] = {}
        self.extend(edges)

    # --- Mutation API --------------------------------------------------------

    def add_edge(self, edge: Edge) -> None:
        """Append one edge and refresh the adjacency map."""
        self.extend((edge,))

    def extend(self, edges: Iterable[Edge]) -> None:
        self._edges.extend(edges)
        self._adj = build_adjacency(self._edges, self._vertex_count)

    # --- Graph interface -----------------------------------------------------

    @property
    def vertex_count(self) -> int:
        return self._vertex_count

    def vertices(self) -> Sequence[str]:
        return list(self._vertices)

    def edges(self) -> Sequence[Edge]:
        return list(self._edges)

    def neighbours(self, vertex: str) -> Tuple[Neighbour, ...]:
        return self._adj.get(vertex, ())

    def adjacency(self) -> Mapping[str, Tuple[Neighbour, ...]]:
        return dict(self._adj)  # defensive copy
