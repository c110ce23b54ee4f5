"""
Subtour separation for TSP-style relaxations.

Let G(V, E) be an undirected graph and x_e the value of edge e in a
relaxation solution. A tour satisfies, for every S' with 0 < |S'| < |V|,

    sum_{e in delta(S')} x_e >= 2

where delta(S') holds the edges with exactly one endpoint in S'. Whenever a
set S' violates this inequality, the solution contains a subtour within
S'. The separator finds such sets through minimum cuts over the support
graph weighted by x.

The problem graph may be directed, undirected or mixed, complete or
incomplete. Internally it is converted to an undirected simple graph;
multiple edges between i and j (for example the arcs (i, j) and (j, i))
are aggregated into one undirected edge (i, j).

WARNING: if the problem graph is modified (vertices or edges added or
removed) after the separator is created, the behavior is undefined.
Create a new separator instead.
"""

import heapq
import itertools
import logging
from typing import Any, Dict, List, Mapping, Optional

import networkx as nx

from tspbp.separation.cut import SubtourCut
from tspbp.separation.graph import PRECISION, WEIGHT, WeightedCutGraph
from tspbp.separation.mincut import MinCutAlgorithm, PushRelabelMinCut

logger = logging.getLogger(__name__)

# A cut is violated when its value is below this threshold.
VIOLATION_THRESHOLD = 2.0 - PRECISION


class SubtourSeparator:
    """
    Separates violated subtour-elimination constraints.

    Three separation routines are offered:

    - separate_subtour(): the single most violated cut (global min cut)
    - separate_subtours(): up to N violated cuts, no quality guarantee
    - separate_most_violated_subtours(): the N most violated cuts found
      by a full scan

    All of them take a mapping from problem-graph edges to values. Edges
    absent from the mapping are taken to be zero, so it suffices to pass the
    non-zero edges.

    Instances are not thread safe; give each worker its own separator.

    Example:
        graph = nx.complete_graph(5)
        separator = SubtourSeparator(graph)
        cut = separator.separate_subtour({(0, 1): 1.0, (1, 2): 1.0, ...})
        if cut is not None:
            master.add_subtour_constraint(cut.cut_set)
    """

    PRECISION = PRECISION

    def __init__(
        self,
        graph: nx.Graph,
        min_cut_algorithm: Optional[MinCutAlgorithm] = None,
    ):
        """
        Initialize the separator.

        Args:
            graph: The problem graph (any networkx graph type)
            min_cut_algorithm: s-t cut strategy used by the multi-cut
                routines (default: push-relabel)
        """
        self.cut_graph = WeightedCutGraph(graph)
        self.min_cut_algorithm = min_cut_algorithm or PushRelabelMinCut()

    @property
    def graph(self) -> nx.Graph:
        """The problem graph the separator was built from."""
        return self.cut_graph.input_graph

    def separate_subtour(
        self,
        edge_values: Mapping[Any, float],
    ) -> Optional[SubtourCut]:
        """
        Separate the most violated subtour.

        Computes a set S' minimizing sum_{e in delta(S')} x_e with the
        Stoer-Wagner algorithm, O(|V||E| + |V|^2 log |V|).

        Args:
            edge_values: Mapping of edges to their x_e values

        Returns:
            The cut when its value is below 2, otherwise None
        """
        self.cut_graph.refresh(edge_values)
        working = self.cut_graph.graph

        if working.number_of_nodes() < 2:
            return None

        if not nx.is_connected(working):
            # Any component is a cut of value zero.
            component = next(nx.connected_components(working))
            cut_value, cut_set = 0.0, frozenset(component)
        else:
            cut_value, (cut_set, _) = nx.stoer_wagner(working, weight=WEIGHT)
            cut_set = frozenset(cut_set)

        logger.debug("Global min cut: value=%.6g, |S'|=%d", cut_value, len(cut_set))

        if cut_value < VIOLATION_THRESHOLD:
            return SubtourCut(cut_set, cut_value)
        return None

    def separate_subtours(
        self,
        edge_values: Mapping[Any, float],
        max_cuts: int,
    ) -> List[SubtourCut]:
        """
        Separate at most max_cuts violated subtours.

        A source vertex v1 is fixed and every other vertex v2 is tried as a
        sink. For each pair a minimum cut separating v1 from v2 is computed;
        cuts with value below 2 are collected (source side) until max_cuts
        distinct cuts have been found or all sinks have been tried.

        There is no guarantee that the most violated cut is among the
        results, but the result is empty only when no subtour constraint is
        violated.

        Args:
            edge_values: Mapping of edges to their x_e values
            max_cuts: Maximum number of cuts returned

        Returns:
            Distinct violated cuts, in discovery order
        """
        self._check_max_cuts(max_cuts)
        cuts: Dict[SubtourCut, None] = {}
        if max_cuts == 0:
            return []

        for cut in self._scan(edge_values):
            if cut not in cuts:
                cuts[cut] = None
                if len(cuts) >= max_cuts:
                    break

        logger.debug("Separated %d subtour cuts (max %d)", len(cuts), max_cuts)
        return list(cuts)

    def separate_most_violated_subtours(
        self,
        edge_values: Mapping[Any, float],
        max_cuts: int,
    ) -> List[SubtourCut]:
        """
        Separate the most violated subtours.

        Same scan as separate_subtours(), but all sinks are always tried and
        only the max_cuts cuts with the smallest values are kept. Ties are
        resolved in favor of the cut found first.

        If only the single most violated cut is needed, separate_subtour()
        is considerably faster.

        Args:
            edge_values: Mapping of edges to their x_e values
            max_cuts: Maximum number of cuts returned

        Returns:
            Distinct violated cuts sorted by ascending cut value
        """
        self._check_max_cuts(max_cuts)
        if max_cuts == 0:
            return []

        # Max-heap on (value, discovery order): the root is the worst kept cut.
        heap: List[tuple] = []
        kept: set = set()
        counter = itertools.count()

        for cut in self._scan(edge_values):
            if cut in kept:
                continue
            entry = (-cut.cut_value, -next(counter), cut)
            if len(heap) < max_cuts:
                heapq.heappush(heap, entry)
                kept.add(cut)
            elif entry > heap[0]:
                _, _, evicted = heapq.heapreplace(heap, entry)
                kept.discard(evicted)
                kept.add(cut)

        result = [cut for _, _, cut in sorted(heap, reverse=True)]
        logger.debug(
            "Separated %d most violated subtour cuts (max %d)", len(result), max_cuts
        )
        return result

    def _scan(self, edge_values: Mapping[Any, float]):
        """Yield the violated source-side s-t cuts for every candidate sink."""
        self.cut_graph.refresh(edge_values)
        vertices = self.cut_graph.vertices()
        if len(vertices) < 2:
            return

        self.min_cut_algorithm.prepare(self.cut_graph.graph)
        source = vertices[0]
        for sink in vertices[1:]:
            cut_value, source_side = self.min_cut_algorithm.compute_min_cut(source, sink)
            if cut_value < VIOLATION_THRESHOLD:
                yield SubtourCut(source_side, cut_value)

    @staticmethod
    def _check_max_cuts(max_cuts: int) -> None:
        if max_cuts < 0:
            raise ValueError(f"max_cuts must be non-negative, got {max_cuts}")

    def __repr__(self) -> str:
        return (
            f"<SubtourSeparator |V|={self.cut_graph.num_vertices} "
            f"|E|={self.cut_graph.num_edges} {self.min_cut_algorithm.name}>"
        )
