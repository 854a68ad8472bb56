"""
Run orchestration for a single-user, single-graph session.

Loads a graph from edge text, validates run requests, builds a fresh
RunContext per run and drives the chosen engine to completion. Conflicts and
invalid input come back as Signal values, never as exceptions.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Mapping, Optional, Tuple, Union

from adjacency_list_graph import AdjacencyListGraph
from algorithms import SearchEngine
from dijkstra_engine import TracingDijkstraEngine
from edge_parser import GraphMode, parse_edge_token, split_tokens
from graph import Edge, Neighbour
from greedy_engine import GreedyTraversalEngine
from path_tree import PathTreeSnapshot
from run_context import Algorithm, RunContext, RunResult
from trace_recorder import EventKind, TraceEvent, TraceListener, TraceRecorder
from vertices import is_valid_vertex, normalise_label


class Signal(Enum):
    """
    Discrete outcomes reported to the caller instead of raising.

    TARGET_UNREACHABLE accompanies a normal result; the others mean nothing
    was started and no state changed.
    """

    INVALID_START_VERTEX = "invalid-start-vertex"
    INVALID_TARGET_VERTEX = "invalid-target-vertex"
    NO_EDGES = "no-edges"
    RUN_ALREADY_IN_PROGRESS = "run-already-in-progress"
    TARGET_UNREACHABLE = "target-unreachable"


@dataclass(frozen=True)
class LoadOutcome:
    signal: Optional[Signal]
    edges: Tuple[Edge, ...] = ()
    dropped: Tuple[str, ...] = ()
    trace: Tuple[TraceEvent, ...] = ()


@dataclass(frozen=True)
class RunOutcome:
    """
    What one run request produced.

    snapshots holds the path tree after each mutation, in order.
    """

    signal: Optional[Signal]
    result: Optional[RunResult] = None
    trace: Tuple[TraceEvent, ...] = ()
    snapshots: Tuple[PathTreeSnapshot, ...] = ()

    @property
    def started(self) -> bool:
        return self.result is not None


def default_engines() -> Dict[Algorithm, SearchEngine]:
    return {
        Algorithm.DIJKSTRA: TracingDijkstraEngine(),
        Algorithm.GREEDY: GreedyTraversalEngine(),
    }


class RunOrchestrator:
    """
    Owns the current graph and guards runs with a cooperative busy flag.

    Runs are synchronous; the flag only matters when a trace listener calls
    back into the orchestrator during a load or run. Such calls are rejected,
    not queued.
    """

    def __init__(self, engines: Optional[Mapping[Algorithm, SearchEngine]] = None) -> None:
        self._engines: Dict[Algorithm, SearchEngine] = dict(engines or default_engines())
        self._listeners: List[TraceListener] = []
        self._graph: Optional[AdjacencyListGraph] = None
        self._mode: Optional[GraphMode] = None
        self._busy = False
        self._last_outcome: Optional[RunOutcome] = None

    # --- Properties ----------------------------------------------------------

    @property
    def busy(self) -> bool:
        return self._busy

    @property
    def graph(self) -> Optional[AdjacencyListGraph]:
        return self._graph

    @property
    def mode(self) -> Optional[GraphMode]:
        return self._mode

    @property
    def last_outcome(self) -> Optional[RunOutcome]:
        return self._last_outcome

    def adjacency(self) -> Mapping[str, Tuple[Neighbour, ...]]:
        if self._graph is None:
            return {}
        return self._graph.adjacency()

    def subscribe(self, listener: TraceListener) -> None:
        """Receive every trace event of subsequent loads and runs as it happens."""
        self._listeners.append(listener)

    # --- Operations ----------------------------------------------------------

    def load(self, vertex_count: int, mode: Union[GraphMode, str], text: str) -> LoadOutcome:
        """
        Parse edge text and replace the current graph.

        Malformed tokens are dropped and listed in the outcome. Listeners
        see the EDGE_ADDED events under the busy flag, so calls back into the
        orchestrator are rejected and the old graph stays in place. Raises
        ValueError for a vertex count outside 1..26 or an unknown mode.
        """
        if self._busy:
            return LoadOutcome(Signal.RUN_ALREADY_IN_PROGRESS)

        mode = GraphMode(mode)
        accepted: List[Edge] = []
        dropped: List[str] = []
        for token in split_tokens(text):
            edge = parse_edge_token(token, mode)
            if edge is None:
                dropped.append(token)
            else:
                accepted.append(edge)

        # One adjacency build for the whole batch.
        graph = AdjacencyListGraph(vertex_count, accepted)
        recorder = TraceRecorder(tuple(self._listeners))

        self._busy = True
        try:
            for edge in accepted:
                recorder.emit(
                    EventKind.EDGE_ADDED,
                    vertex=edge.from_vertex,
                    neighbour=edge.to_vertex,
                    weight=edge.weight,
                    directed=edge.directed,
                )
        finally:
            self._busy = False

        self._graph = graph
        self._mode = mode
        self._last_outcome = None
        return LoadOutcome(None, tuple(graph.edges()), tuple(dropped), recorder.events)

    def run(
        self,
        algorithm: Union[Algorithm, str],
        source: Optional[str],
        target: Optional[str] = None,
    ) -> RunOutcome:
        """
        Validate the request, then run the engine for algorithm to completion.

        Dijkstra needs a target; greedy validates one only if given.
        """
        if self._busy:
            return RunOutcome(Signal.RUN_ALREADY_IN_PROGRESS)

        algorithm = Algorithm(algorithm)
        graph = self._graph
        if graph is None or graph.is_empty():
            return RunOutcome(Signal.NO_EDGES)

        source = normalise_label(source)
        target = normalise_label(target)
        if not is_valid_vertex(source, graph.vertex_count):
            return RunOutcome(Signal.INVALID_START_VERTEX)
        if algorithm is Algorithm.DIJKSTRA or target is not None:
            if not is_valid_vertex(target, graph.vertex_count):
                return RunOutcome(Signal.INVALID_TARGET_VERTEX)
        assert source is not None

        engine = self._engines[algorithm]
        ctx = RunContext(source=source, target=target, trace=TraceRecorder(tuple(self._listeners)))

        self._busy = True
        self._last_outcome = None
        try:
            result = engine.run(graph, ctx)
        finally:
            self._busy = False

        signal = None
        if algorithm is Algorithm.DIJKSTRA and not result.reachable:
            signal = Signal.TARGET_UNREACHABLE

        outcome = RunOutcome(signal, result, ctx.trace.events, ctx.tree.snapshots)
        self._last_outcome = outcome
        return outcome

    def reset(self) -> Optional[Signal]:
        """Forget the graph and the last outcome. Refused while a load or run is active."""
        if self._busy:
            return Signal.RUN_ALREADY_IN_PROGRESS
        self._graph = None
        self._mode = None
        self._last_outcome = None
        return None
