"""
CLI to run traced graph algorithms from a session file.

Reads a YAML session (vertex count, graph mode, edge text and a list of
runs), loads the graph through the RunOrchestrator, executes each run and
prints one plain-text line per trace event. Traces and per-vertex summaries
can be written to CSV for downstream analysis.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence
import argparse
import csv

from run_context import Algorithm, format_distance
from run_orchestrator import RunOrchestrator, RunOutcome
from trace_recorder import EventKind, TraceEvent


@dataclass(frozen=True)
class RunSpec:
    algorithm: Algorithm
    source: str
    target: Optional[str] = None


@dataclass(frozen=True)
class SessionConfig:
    vertex_count: int
    mode: str
    edges: str
    runs: Sequence[RunSpec]


def load_config(path: Path) -> SessionConfig:
    import yaml  # type: ignore

    data = yaml.safe_load(path.read_text())
    runs = [
        RunSpec(
            algorithm=Algorithm(str(run["algorithm"]).lower()),
            source=str(run["source"]),
            target=str(run["target"]) if run.get("target") is not None else None,
        )
        for run in data["runs"]
    ]
    edges = data["edges"]
    if isinstance(edges, list):
        edges = ", ".join(str(e) for e in edges)
    return SessionConfig(
        vertex_count=int(data["vertex_count"]),
        mode=str(data.get("mode", "directed")),
        edges=str(edges),
        runs=runs,
    )


def describe_event(event: TraceEvent) -> str:
    """
    One plain-text line for an event. No markup: styling is up to the caller.
    """
    kind = event.kind
    edge = ""
    if event.vertex is not None and event.neighbour is not None and event.directed is not None:
        edge = f"{event.vertex}{'→' if event.directed else '–'}{event.neighbour} (w={event.weight})"

    if kind is EventKind.EDGE_ADDED:
        return f"Added edge {edge}"
    if kind is EventKind.RUN_STARTED:
        if event.neighbour is not None:
            return f"Running from {event.vertex} to {event.neighbour}"
        return f"Starting at vertex {event.vertex}"
    if kind is EventKind.VERTEX_SELECTED:
        return f"SELECT {event.vertex}: smallest known distance ({format_distance(event.distance)})"
    if kind is EventKind.EDGE_RELAXED:
        return (
            f"  RELAXED {edge}: {format_distance(event.distance)} < "
            f"{format_distance(event.previous)}, dist of {event.neighbour} updated"
        )
    if kind is EventKind.EDGE_NOT_SHORTER:
        return (
            f"  checked {edge}: {format_distance(event.distance)} is not shorter than "
            f"{format_distance(event.previous)}"
        )
    if kind is EventKind.VERTEX_FINALIZED:
        return f"  {event.vertex} finalized at {format_distance(event.distance)}"
    if kind is EventKind.NO_MORE_REACHABLE:
        return f"No more reachable vertices from {event.vertex}"
    if kind is EventKind.TARGET_REACHED:
        return f"Reached target {event.vertex}"
    if kind is EventKind.TARGET_UNREACHABLE:
        return f"Cannot reach {event.vertex} from {event.neighbour}"
    if kind is EventKind.PATH_RECONSTRUCTED:
        return f"Shortest path: {' → '.join(event.path)} (distance {format_distance(event.distance)})"
    if kind is EventKind.VERTEX_SUMMARY:
        return (
            f"  {event.vertex}: distance={format_distance(event.distance)} "
            f"predecessor={event.predecessor or 'none'}"
        )
    if kind is EventKind.NEIGHBOUR_SELECTED:
        return f"  from {event.vertex}: greedily selected {event.neighbour} (w={event.weight})"
    if kind is EventKind.DEAD_END:
        return f"  {event.vertex} has no unvisited neighbours"
    if kind is EventKind.TRAVERSAL_COMPLETE:
        return "Greedy traversal complete: all reachable vertices visited"
    return kind.value


def run_session(
    config_path: Path,
    trace_csv: Path | None = None,
    summary_csv: Path | None = None,
    verbose: bool = True,
) -> List[RunOutcome]:
    cfg = load_config(config_path)
    orchestrator = RunOrchestrator()
    if verbose:
        orchestrator.subscribe(lambda event: print(f"[trace] {describe_event(event)}"))

    loaded = orchestrator.load(cfg.vertex_count, cfg.mode, cfg.edges)
    print(
        f"[load] parsed {len(loaded.edges)} edges over {cfg.vertex_count} vertices "
        f"(mode={cfg.mode}, dropped={len(loaded.dropped)})"
    )
    for token in loaded.dropped:
        print(f"[load] dropped malformed token {token!r}")

    outcomes: List[RunOutcome] = []
    rows: List[Dict[str, object]] = []
    summaries: List[Dict[str, object]] = []
    for index, spec in enumerate(cfg.runs):
        outcome = orchestrator.run(spec.algorithm, spec.source, spec.target)
        outcomes.append(outcome)
        if outcome.signal is not None:
            print(f"[run] {spec.algorithm.value} {spec.source}->{spec.target}: {outcome.signal.value}")
        if outcome.result is None:
            continue
        result = outcome.result
        if result.path is not None:
            print(
                f"[run] {spec.algorithm.value} path={' → '.join(result.path)} "
                f"distance={format_distance(result.total_distance)}"
            )
        else:
            print(f"[run] {spec.algorithm.value} visited={' '.join(result.visit_order)}")

        rows.extend(trace_rows(index, spec.algorithm, outcome.trace))
        for row in result.summary():
            summaries.append(
                {
                    "run": index,
                    "algorithm": spec.algorithm.value,
                    "vertex": row.vertex,
                    "distance": format_distance(row.distance),
                    "predecessor": row.predecessor or "",
                    "is_source": row.is_source,
                    "is_target": row.is_target,
                }
            )

    if trace_csv:
        write_trace_csv(rows, trace_csv)
        print(f"[run] wrote {len(rows)} trace rows to {trace_csv}")
    if summary_csv:
        write_summary_csv(summaries, summary_csv)
        print(f"[run] wrote {len(summaries)} summary rows to {summary_csv}")
    return outcomes


def trace_rows(run: int, algorithm: Algorithm, events: Iterable[TraceEvent]) -> List[Dict[str, object]]:
    rows: List[Dict[str, object]] = []
    for e in events:
        rows.append(
            {
                "run": run,
                "algorithm": algorithm.value,
                "seq": e.seq,
                "kind": e.kind.value,
                "vertex": e.vertex or "",
                "neighbour": e.neighbour or "",
                "weight": "" if e.weight is None else e.weight,
                "directed": "" if e.directed is None else e.directed,
                "distance": format_distance(e.distance),
                "previous": format_distance(e.previous),
                "predecessor": e.predecessor or "",
                "path": " ".join(e.path),
            }
        )
    return rows


TRACE_FIELDS = [
    "run",
    "algorithm",
    "seq",
    "kind",
    "vertex",
    "neighbour",
    "weight",
    "directed",
    "distance",
    "previous",
    "predecessor",
    "path",
]

SUMMARY_FIELDS = [
    "run",
    "algorithm",
    "vertex",
    "distance",
    "predecessor",
    "is_source",
    "is_target",
]


def write_trace_csv(rows: Iterable[Dict[str, object]], path: Path) -> None:
    """
    Write trace rows, one per event, to CSV.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=TRACE_FIELDS)
        writer.writeheader()
        for row in rows:
            writer.writerow(row)


def write_summary_csv(rows: Iterable[Dict[str, object]], path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=SUMMARY_FIELDS)
        writer.writeheader()
        for row in rows:
            writer.writerow(row)


def main(argv: Sequence[str] | None = None) -> None:
    default_config = Path(__file__).parent / "sessions" / "example.yml"
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument("config", nargs="?", type=Path, default=default_config)
    parser.add_argument("--trace-csv", type=Path, default=None)
    parser.add_argument("--summary-csv", type=Path, default=None)
    parser.add_argument("--quiet", action="store_true", help="do not print trace lines")
    args = parser.parse_args(argv)

    run_session(args.config, trace_csv=args.trace_csv, summary_csv=args.summary_csv, verbose=not args.quiet)


if __name__ == "__main__":
    main()
