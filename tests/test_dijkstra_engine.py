"""
Unit tests for TracingDijkstraEngine using AdjacencyListGraph.
"""

import random
from typing import Optional

import pytest

from adjacency_list_graph import AdjacencyListGraph
from dijkstra_engine import DijkstraState, TracingDijkstraEngine, reconstruct_path
from edge_parser import GraphMode, parse_edges
from graph import Edge, Graph
from path_tree import TreeEdge
from run_context import INFINITY, RunContext
from trace_recorder import EventKind

DEMO_EDGES = "A->B=4, B->C=2, C->D=3, D->A=5, A->E=10"


def make_graph(text: str, count: int, mode: GraphMode = GraphMode.DIRECTED) -> AdjacencyListGraph:
    return AdjacencyListGraph(count, parse_edges(text, mode))


def run(graph: Graph, source: str, target: str):
    ctx = RunContext(source=source, target=target)
    result = TracingDijkstraEngine().run(graph, ctx)
    return result, ctx


def brute_force_shortest(graph: Graph, source: str, target: str) -> float:
    """Minimum weight over all simple source -> target paths."""
    best = INFINITY
    known = set(graph.vertices())

    def walk(node: str, cost: int, seen: set) -> None:
        nonlocal best
        if node == target:
            best = min(best, cost)
            return
        for n in graph.neighbours(node):
            if n.node in known and n.node not in seen:
                walk(n.node, cost + n.weight, seen | {n.node})

    walk(source, 0, {source})
    return best


def random_graph(seed: int, count: int) -> AdjacencyListGraph:
    rng = random.Random(seed)
    labels = [chr(ord("A") + i) for i in range(count)]
    edges = []
    for _ in range(rng.randint(count, count * 3)):
        edges.append(
            Edge(rng.choice(labels), rng.choice(labels), rng.randint(1, 9), rng.random() < 0.5)
        )
    return AdjacencyListGraph(count, edges)


def test_demo_graph_target_e():
    """A..E demo graph: the direct edge A->E (10) is the shortest route to E."""
    result, _ = run(make_graph(DEMO_EDGES, 5), "A", "E")

    assert result.total_distance == 10
    assert result.path == ("A", "E")
    assert result.path_edges == (TreeEdge("A", "E", True),)


def test_demo_graph_target_d():
    result, _ = run(make_graph(DEMO_EDGES, 5), "A", "D")

    assert result.total_distance == 9
    assert result.path == ("A", "B", "C", "D")
    assert result.distances["C"] == 6
    assert result.predecessors["D"] == "C"


def test_demo_trace_sequence():
    _, ctx = run(make_graph(DEMO_EDGES, 5), "A", "D")
    kinds = [e.kind for e in ctx.trace.events]

    assert kinds == [
        EventKind.RUN_STARTED,
        EventKind.VERTEX_SELECTED,   # A
        EventKind.EDGE_RELAXED,      # A->B
        EventKind.EDGE_RELAXED,      # A->E
        EventKind.VERTEX_FINALIZED,
        EventKind.VERTEX_SELECTED,   # B
        EventKind.EDGE_RELAXED,      # B->C
        EventKind.VERTEX_FINALIZED,
        EventKind.VERTEX_SELECTED,   # C
        EventKind.EDGE_RELAXED,      # C->D
        EventKind.VERTEX_FINALIZED,
        EventKind.VERTEX_SELECTED,   # D; D->A skipped, A is finalized
        EventKind.VERTEX_FINALIZED,
        EventKind.TARGET_REACHED,
        EventKind.PATH_RECONSTRUCTED,
    ] + [EventKind.VERTEX_SUMMARY] * 5

    selected = [e.vertex for e in ctx.trace.of_kind(EventKind.VERTEX_SELECTED)]
    assert selected == ["A", "B", "C", "D"]
    path_event = ctx.trace.of_kind(EventKind.PATH_RECONSTRUCTED)[0]
    assert path_event.path == ("A", "B", "C", "D")
    assert path_event.distance == 9


def test_summary_covers_every_vertex():
    _, ctx = run(make_graph(DEMO_EDGES, 5), "A", "D")
    summary = {e.vertex: e for e in ctx.trace.of_kind(EventKind.VERTEX_SUMMARY)}

    assert list(summary) == ["A", "B", "C", "D", "E"]
    assert summary["A"].is_source and summary["A"].predecessor is None
    assert summary["D"].is_target and summary["D"].distance == 9
    # E was relaxed but never finalized before the early exit.
    assert summary["E"].distance == 10


def test_not_shorter_event_and_label_order_tie_break():
    """B and C tie at 1; B is selected first and its edge to C is not shorter."""
    result, ctx = run(make_graph("A->C=1, A->B=1, B->C=5", 3), "A", "C")

    selected = [e.vertex for e in ctx.trace.of_kind(EventKind.VERTEX_SELECTED)]
    assert selected == ["A", "B", "C"]

    not_shorter = ctx.trace.of_kind(EventKind.EDGE_NOT_SHORTER)
    assert len(not_shorter) == 1
    assert (not_shorter[0].vertex, not_shorter[0].neighbour) == ("B", "C")
    assert not_shorter[0].distance == 6
    assert not_shorter[0].previous == 1
    assert result.total_distance == 1


def test_relaxation_replaces_tree_edge():
    result, ctx = run(make_graph("A->B=1, A->C=5, B->C=1", 3), "A", "C")

    assert result.total_distance == 2
    assert ctx.tree.incoming("C") == TreeEdge("B", "C", True)
    assert ctx.tree.snapshots[-1].edges == (TreeEdge("A", "B", True), TreeEdge("B", "C", True))
    assert result.tree == ctx.tree.edges()


def test_undirected_edges_traverse_both_ways():
    graph = make_graph("A-B=2, B-C=3", 3, GraphMode.UNDIRECTED)
    result, _ = run(graph, "C", "A")

    assert result.path == ("C", "B", "A")
    assert result.total_distance == 5
    assert all(not e.directed for e in result.path_edges)


def test_mixed_directed_and_undirected():
    graph = make_graph("A->B=1, C-B=1, C->A=1", 3, GraphMode.UNDIRECTED)
    result, _ = run(graph, "B", "A")

    # B reaches C through the undirected edge, then C->A.
    assert result.path == ("B", "C", "A")
    assert result.total_distance == 2


def test_unreachable_target_reports_infinity():
    """Target with no incoming edges: infinite distance, no path, no crash."""
    result, ctx = run(make_graph("B->A=1, B->C=2", 3), "A", "B")

    assert result.path is None
    assert not result.reachable
    assert result.total_distance == INFINITY
    kinds = [e.kind for e in ctx.trace.events]
    assert EventKind.NO_MORE_REACHABLE in kinds
    assert EventKind.TARGET_UNREACHABLE in kinds
    assert EventKind.PATH_RECONSTRUCTED not in kinds
    assert kinds.count(EventKind.VERTEX_SUMMARY) == 3


def test_source_equals_target():
    result, _ = run(make_graph(DEMO_EDGES, 5), "C", "C")
    assert result.path == ("C",)
    assert result.total_distance == 0
    assert result.path_edges == ()


def test_out_of_range_endpoints_are_skipped():
    graph = AdjacencyListGraph(3, [Edge("A", "Z", 1, True), Edge("A", "B", 2, True)])
    result, ctx = run(graph, "A", "B")

    assert result.total_distance == 2
    assert "Z" not in result.distances
    heads = [e.neighbour for e in ctx.trace.events if e.kind is EventKind.EDGE_RELAXED]
    assert heads == ["B"]


def test_parallel_edges_are_checked_independently():
    result, ctx = run(make_graph("A->B=5, A->B=2, A->B=3", 2), "A", "B")

    checks = (EventKind.EDGE_RELAXED, EventKind.EDGE_NOT_SHORTER)
    kinds = [e.kind for e in ctx.trace.events if e.kind in checks]
    assert kinds == [EventKind.EDGE_RELAXED, EventKind.EDGE_RELAXED, EventKind.EDGE_NOT_SHORTER]
    assert result.total_distance == 2


def test_step_driven_run_matches_run():
    graph = make_graph(DEMO_EDGES, 5)
    engine = TracingDijkstraEngine()

    ctx = RunContext(source="A", target="D")
    stepper = engine.start(graph, ctx)
    assert stepper.current is None
    states = []
    selected = []
    while not stepper.done:
        states.append(stepper.step())
        if states[-1] is DijkstraState.RELAXING:
            selected.append(stepper.current)

    assert states[0] is DijkstraState.SELECTING
    assert states[-1] is DijkstraState.TERMINATED
    assert DijkstraState.RELAXING in states and DijkstraState.FINALIZING in states
    assert selected == [e.vertex for e in ctx.trace.of_kind(EventKind.VERTEX_SELECTED)] == ["A", "B", "C", "D"]

    _, other = run(graph, "A", "D")
    assert ctx.trace.events == other.trace.events
    assert stepper.result == run(graph, "A", "D")[0]


def test_runs_are_deterministic():
    graph = random_graph(7, 6)
    first, ctx1 = run(graph, "A", "F")
    second, ctx2 = run(graph, "A", "F")
    assert first == second
    assert ctx1.trace.events == ctx2.trace.events
    assert ctx1.tree.snapshots == ctx2.tree.snapshots


def test_engine_records_instrumentation():
    engine = TracingDijkstraEngine()
    engine.run(make_graph(DEMO_EDGES, 5), RunContext(source="A", target="D"))
    assert engine.last_edges_examined == 4
    assert engine.last_relaxed == 4


def test_missing_target_raises():
    with pytest.raises(ValueError):
        TracingDijkstraEngine().run(make_graph(DEMO_EDGES, 5), RunContext(source="A"))


def test_reconstruct_path_broken_chain():
    pred: dict = {"A": None, "B": "A", "C": None}
    assert reconstruct_path(pred, "A", "B") == ("A", "B")
    assert reconstruct_path(pred, "A", "C") is None


@pytest.mark.parametrize("seed", range(25))
def test_matches_brute_force_on_random_graphs(seed):
    count = 4 + seed % 3
    graph = random_graph(seed, count)
    for target in graph.vertices():
        result, _ = run(graph, "A", target)
        assert result.total_distance == brute_force_shortest(graph, "A", target)


@pytest.mark.parametrize("seed", range(25))
def test_distances_never_increase_and_never_negative(seed):
    graph = random_graph(100 + seed, 6)
    _, ctx = run(graph, "A", "F")

    latest = {"A": 0}
    for e in ctx.trace.of_kind(EventKind.EDGE_RELAXED):
        assert e.distance >= 0
        assert e.distance < e.previous
        prior: Optional[float] = latest.get(e.neighbour)
        if prior is not None:
            assert e.distance < prior
        latest[e.neighbour] = e.distance


@pytest.mark.parametrize("seed", range(25))
def test_path_tree_has_one_incoming_edge_per_vertex(seed):
    graph = random_graph(200 + seed, 6)
    _, ctx = run(graph, "A", "F")

    for snapshot in ctx.tree.snapshots:
        heads = [edge.head for edge in snapshot.edges]
        assert len(heads) == len(set(heads))


@pytest.mark.parametrize("seed", range(10))
def test_snapshots_point_at_their_relaxation_event(seed):
    graph = random_graph(300 + seed, 6)
    _, ctx = run(graph, "A", "F")
    events = ctx.trace.events

    relaxed = ctx.trace.of_kind(EventKind.EDGE_RELAXED)
    assert [s.seq for s in ctx.tree.snapshots] == [e.seq for e in relaxed]
    for snapshot in ctx.tree.snapshots:
        event = events[snapshot.seq]
        assert event.kind is EventKind.EDGE_RELAXED
        assert snapshot.edges[-1] == TreeEdge(event.vertex, event.neighbour, event.directed)
