"""
Greedy breadth-first traversal.

Explores everything reachable from the source with a FIFO frontier. The
neighbours of each expanded vertex are taken in ascending edge weight, a
purely local choice: no distances are tracked and no path is optimal.
"""

from collections import deque
from typing import Deque, Dict, List, Optional

from algorithms import SearchEngine
from graph import Graph, Neighbour
from run_context import Algorithm, RunContext, RunResult
from trace_recorder import EventKind


class GreedyTraversalEngine(SearchEngine):
    """
    Weight-ordered BFS that visits each reachable vertex exactly once.
    """

    algorithm = Algorithm.GREEDY

    def run(self, graph: Graph, ctx: RunContext) -> RunResult:
        known = set(graph.vertices())
        source = ctx.source
        ctx.visited[:] = [source]
        pred: Dict[str, Optional[str]] = {source: None}
        frontier: Deque[str] = deque([source])
        ctx.trace.emit(EventKind.RUN_STARTED, vertex=source)

        while frontier:
            current = frontier.popleft()
            candidates = self._unvisited_neighbours(graph, ctx, current, known)

            if not candidates:
                ctx.trace.emit(EventKind.DEAD_END, vertex=current)

            for n in candidates:
                # Parallel edges can list the same vertex twice; the lighter one won.
                if ctx.is_visited(n.node):
                    continue
                ctx.visited.append(n.node)
                frontier.append(n.node)
                pred[n.node] = current
                ctx.tree.link(current, n.node, n.directed, seq=ctx.trace.next_seq)
                ctx.trace.emit(
                    EventKind.NEIGHBOUR_SELECTED,
                    vertex=current,
                    neighbour=n.node,
                    weight=n.weight,
                    directed=n.directed,
                )

        ctx.trace.emit(EventKind.TRAVERSAL_COMPLETE, vertex=source)
        ctx.pred.update(pred)

        return RunResult(
            algorithm=Algorithm.GREEDY,
            source=source,
            target=ctx.target,
            distances={},
            predecessors=dict(pred),
            visit_order=tuple(ctx.visited),
            tree=ctx.tree.edges(),
        )

    @staticmethod
    def _unvisited_neighbours(
        graph: Graph, ctx: RunContext, current: str, known: set
    ) -> List[Neighbour]:
        found = [
            n for n in graph.neighbours(current)
            if n.node in known and not ctx.is_visited(n.node)
        ]
        # sorted() is stable: equal weights keep edge order.
        return sorted(found, key=lambda n: n.weight)
