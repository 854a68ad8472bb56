"""
Weighted graph abstraction for the trace engine.

Vertices are single-letter labels. Edges carry an integer weight and a
directed flag; an undirected edge is stored once and traversed both ways.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple


@dataclass(frozen=True)
class Edge:
    """
    One parsed edge record.

    weight is always >= 1. Parallel edges between the same pair are
    independent records.
    """

    from_vertex: str
    to_vertex: str
    weight: int
    directed: bool


@dataclass(frozen=True)
class Neighbour:
    """
    Adjacency entry: a vertex reachable in one traversal, with the weight
    and directed flag of the edge used.
    """

    node: str
    weight: int
    directed: bool


class Graph(ABC):
    """Weighted graph over single-letter vertices."""

    @abstractmethod
    def vertices(self) -> Sequence[str]:
        """Return all vertices in label order."""
        raise NotImplementedError

    @abstractmethod
    def edges(self) -> Sequence[Edge]:
        """Return the edge records in input order."""
        raise NotImplementedError

    @abstractmethod
    def neighbours(self, vertex: str) -> Tuple[Neighbour, ...]:
        """
        Neighbours reachable from vertex via one edge traversal.

        Outgoing ends of directed edges plus both ends of undirected edges,
        in edge order. Unknown vertices have no neighbours.
        """
        raise NotImplementedError

    def is_empty(self) -> bool:
        return not self.edges()


def find_edge(edges: Iterable[Edge], tail: str, head: str) -> Optional[Edge]:
    """
    First edge that can be traversed from tail to head, or None.
    """
    for e in edges:
        if e.from_vertex == tail and e.to_vertex == head:
            return e
        if not e.directed and e.from_vertex == head and e.to_vertex == tail:
            return e
    return None
