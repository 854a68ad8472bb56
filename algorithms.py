"""
Algorithm interfaces for traced graph runs.

Keeps the algorithms separate from input parsing and run orchestration.
"""

from abc import ABC, abstractmethod

from graph import Graph
from run_context import Algorithm, RunContext, RunResult


class SearchEngine(ABC):
    """
    Interface for a single-source algorithm that records its own trace.
    """

    algorithm: Algorithm

    @abstractmethod
    def run(self, graph: Graph, ctx: RunContext) -> RunResult:
        """
        Run to completion over graph, mutating only ctx.

        The source (and target, where used) in ctx must already be valid
        vertices of graph; validation belongs to the caller.

        Returns:
            The final RunResult. Every decision taken along the way has been
            appended to ctx.trace, and every path-tree change to ctx.tree.
        """
        raise NotImplementedError
