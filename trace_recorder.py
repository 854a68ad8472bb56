"""
Trace events and the append-only recorder.

A trace is the full, ordered record of what an algorithm run decided. Events
are plain immutable data; turning them into text or pictures is the job of
whoever consumes them.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple


class EventKind(Enum):
    EDGE_ADDED = "edge_added"
    RUN_STARTED = "run_started"
    VERTEX_SELECTED = "vertex_selected"
    EDGE_RELAXED = "edge_relaxed"
    EDGE_NOT_SHORTER = "edge_not_shorter"
    VERTEX_FINALIZED = "vertex_finalized"
    NO_MORE_REACHABLE = "no_more_reachable"
    TARGET_REACHED = "target_reached"
    TARGET_UNREACHABLE = "target_unreachable"
    PATH_RECONSTRUCTED = "path_reconstructed"
    VERTEX_SUMMARY = "vertex_summary"
    NEIGHBOUR_SELECTED = "neighbour_selected"
    DEAD_END = "dead_end"
    TRAVERSAL_COMPLETE = "traversal_complete"


@dataclass(frozen=True)
class TraceEvent:
    """
    One semantic occurrence during graph loading or an algorithm run.

    Which fields are populated depends on kind:
      VERTEX_SELECTED: vertex, distance
      EDGE_RELAXED / EDGE_NOT_SHORTER: vertex (tail), neighbour (head),
          weight, directed, distance (candidate), previous (head's prior
          distance)
      PATH_RECONSTRUCTED: path, distance (total)
      VERTEX_SUMMARY: vertex, distance, predecessor, is_source, is_target
      NEIGHBOUR_SELECTED: vertex (current), neighbour, weight, directed
    """

    seq: int
    kind: EventKind
    vertex: Optional[str] = None
    neighbour: Optional[str] = None
    weight: Optional[int] = None
    directed: Optional[bool] = None
    distance: Optional[float] = None
    previous: Optional[float] = None
    predecessor: Optional[str] = None
    path: Tuple[str, ...] = ()
    is_source: bool = False
    is_target: bool = False


TraceListener = Callable[[TraceEvent], None]


class TraceRecorder:
    """
    Append-only event log.

    Listeners are called synchronously with each event as it is appended,
    so a renderer can follow a run progressively without changing it.
    """

    def __init__(self, listeners: Tuple[TraceListener, ...] = ()) -> None:
        self._events: List[TraceEvent] = []
        self._listeners: List[TraceListener] = list(listeners)

    def subscribe(self, listener: TraceListener) -> None:
        self._listeners.append(listener)

    def emit(self, kind: EventKind, **fields) -> TraceEvent:
        """Create the next event in sequence, store it and notify listeners."""
        event = TraceEvent(seq=self.next_seq, kind=kind, **fields)
        self._events.append(event)
        for listener in self._listeners:
            listener(event)
        return event

    @property
    def events(self) -> Tuple[TraceEvent, ...]:
        return tuple(self._events)

    @property
    def next_seq(self) -> int:
        """Sequence number the next emitted event will carry."""
        return len(self._events)

    def of_kind(self, kind: EventKind) -> List[TraceEvent]:
        return [e for e in self._events if e.kind is kind]

    def __len__(self) -> int:
        return len(self._events)
