"""
Step-driven, tracing Dijkstra engine.

Computes single-source shortest distances and predecessors over any Graph
and records every decision in the run's trace. The run is an explicit state
machine so it can be advanced one transition at a time or driven to the end;
both produce the same trace.
"""

from enum import Enum
from typing import Mapping, Optional, Tuple

from algorithms import SearchEngine
from graph import Graph, find_edge
from path_tree import TreeEdge
from run_context import INFINITY, Algorithm, RunContext, RunResult
from trace_recorder import EventKind


class DijkstraState(Enum):
    INIT = "init"
    SELECTING = "selecting"
    RELAXING = "relaxing"
    FINALIZING = "finalizing"
    TERMINATED = "terminated"


def reconstruct_path(
    pred: Mapping[str, Optional[str]], source: str, target: str
) -> Optional[Tuple[str, ...]]:
    """
    Walk predecessors back from target to source.

    Returns the source -> target vertex sequence, or None if the chain breaks
    before reaching source.
    """
    path = [target]
    node = target
    while node != source:
        parent = pred.get(node)
        if parent is None or parent in path:
            return None
        path.append(parent)
        node = parent
    path.reverse()
    return tuple(path)


class DijkstraRun:
    """
    One Dijkstra execution over graph, owning nothing but a reference to ctx.

    Selection scans unvisited vertices in label order and keeps the first
    strictly smaller distance, so ties go to the earliest label.
    """

    def __init__(self, graph: Graph, ctx: RunContext) -> None:
        if ctx.target is None:
            raise ValueError("Dijkstra run needs a target vertex")
        self._graph = graph
        self._ctx = ctx
        self._vertices = list(graph.vertices())
        self._current: Optional[str] = None
        self.state = DijkstraState.INIT
        self.result: Optional[RunResult] = None
        # Instrumentation
        self.edges_examined = 0
        self.relaxed = 0

    @property
    def done(self) -> bool:
        return self.state is DijkstraState.TERMINATED

    @property
    def current(self) -> Optional[str]:
        return self._current

    def step(self) -> DijkstraState:
        """Perform one state transition and return the new state."""
        if self.state is DijkstraState.INIT:
            self._init()
        elif self.state is DijkstraState.SELECTING:
            self._select()
        elif self.state is DijkstraState.RELAXING:
            self._relax()
        elif self.state is DijkstraState.FINALIZING:
            self._finalize()
        return self.state

    # --- Transitions ---------------------------------------------------------

    def _init(self) -> None:
        ctx = self._ctx
        for v in self._vertices:
            ctx.dist[v] = INFINITY
            ctx.pred[v] = None
        ctx.dist[ctx.source] = 0
        ctx.visited.clear()
        ctx.trace.emit(EventKind.RUN_STARTED, vertex=ctx.source, neighbour=ctx.target, distance=0)
        self.state = DijkstraState.SELECTING

    def _select(self) -> None:
        ctx = self._ctx
        unvisited = [v for v in self._vertices if not ctx.is_visited(v)]
        if not unvisited:
            self._terminate()
            return

        current = unvisited[0]
        for v in unvisited[1:]:
            if ctx.dist[v] < ctx.dist[current]:
                current = v

        if ctx.dist[current] == INFINITY:
            ctx.trace.emit(EventKind.NO_MORE_REACHABLE, vertex=ctx.source)
            self._terminate()
            return

        ctx.visited.append(current)
        self._current = current
        ctx.trace.emit(EventKind.VERTEX_SELECTED, vertex=current, distance=ctx.dist[current])
        self.state = DijkstraState.RELAXING

    def _relax(self) -> None:
        ctx = self._ctx
        current = self._current
        assert current is not None

        for n in self._graph.neighbours(current):
            # Endpoints outside the vertex range never enter the tables.
            if n.node not in ctx.dist:
                continue
            # Finalized vertices are never re-relaxed.
            if ctx.is_visited(n.node):
                continue

            self.edges_examined += 1
            candidate = ctx.dist[current] + n.weight
            previous = ctx.dist[n.node]
            if candidate < previous:
                ctx.dist[n.node] = candidate
                ctx.pred[n.node] = current
                ctx.tree.link(current, n.node, n.directed, seq=ctx.trace.next_seq)
                self.relaxed += 1
                kind = EventKind.EDGE_RELAXED
            else:
                kind = EventKind.EDGE_NOT_SHORTER
            ctx.trace.emit(
                kind,
                vertex=current,
                neighbour=n.node,
                weight=n.weight,
                directed=n.directed,
                distance=candidate,
                previous=previous,
            )

        self.state = DijkstraState.FINALIZING

    def _finalize(self) -> None:
        ctx = self._ctx
        current = self._current
        ctx.trace.emit(EventKind.VERTEX_FINALIZED, vertex=current, distance=ctx.dist[current])
        if current == ctx.target:
            ctx.trace.emit(EventKind.TARGET_REACHED, vertex=current, distance=ctx.dist[current])
            self._terminate()
            return
        self.state = DijkstraState.SELECTING

    def _terminate(self) -> None:
        ctx = self._ctx
        target = ctx.target
        assert target is not None

        path: Optional[Tuple[str, ...]] = None
        if ctx.dist.get(target, INFINITY) != INFINITY:
            path = reconstruct_path(ctx.pred, ctx.source, target)

        path_edges: Tuple[TreeEdge, ...] = ()
        if path is None:
            total = INFINITY
            ctx.trace.emit(EventKind.TARGET_UNREACHABLE, vertex=target, neighbour=ctx.source, distance=INFINITY)
        else:
            total = ctx.dist[target]
            path_edges = self._path_edges(path)
            ctx.trace.emit(EventKind.PATH_RECONSTRUCTED, vertex=target, path=path, distance=total)

        for v in self._vertices:
            ctx.trace.emit(
                EventKind.VERTEX_SUMMARY,
                vertex=v,
                distance=ctx.dist[v],
                predecessor=ctx.pred[v],
                is_source=v == ctx.source,
                is_target=v == target,
            )

        self.result = RunResult(
            algorithm=Algorithm.DIJKSTRA,
            source=ctx.source,
            target=target,
            distances=dict(ctx.dist),
            predecessors=dict(ctx.pred),
            visit_order=tuple(ctx.visited),
            tree=ctx.tree.edges(),
            path=path,
            path_edges=path_edges,
            total_distance=total,
        )
        self.state = DijkstraState.TERMINATED

    def _path_edges(self, path: Tuple[str, ...]) -> Tuple[TreeEdge, ...]:
        edges = self._graph.edges()
        out = []
        for tail, head in zip(path, path[1:]):
            edge = find_edge(edges, tail, head)
            out.append(TreeEdge(tail, head, edge.directed if edge else False))
        return tuple(out)


class TracingDijkstraEngine(SearchEngine):
    """
    Single-source Dijkstra using a linear unvisited scan.

    Complexity:
        O(V^2 + E) over at most 26 vertices.
    """

    algorithm = Algorithm.DIJKSTRA

    def __init__(self) -> None:
        self.last_edges_examined = 0
        self.last_relaxed = 0

    def start(self, graph: Graph, ctx: RunContext) -> DijkstraRun:
        """Create a run in the INIT state, to be advanced with step()."""
        return DijkstraRun(graph, ctx)

    def run(self, graph: Graph, ctx: RunContext) -> RunResult:
        dijkstra_run = self.start(graph, ctx)
        while not dijkstra_run.done:
            dijkstra_run.step()

        self.last_edges_examined = dijkstra_run.edges_examined
        self.last_relaxed = dijkstra_run.relaxed
        assert dijkstra_run.result is not None
        return dijkstra_run.result
