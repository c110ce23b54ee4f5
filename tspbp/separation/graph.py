"""
Undirected weighted graph used for cut computations.

The working graph is derived once from the problem graph. Parallel and
antiparallel edges of the input (e.g. arcs (i, j) and (j, i) of a directed
graph) collapse into a single undirected edge whose weight accumulates
the values of all of them.
"""

import logging
from typing import Any, Hashable, Iterable, Mapping, Tuple

import networkx as nx

logger = logging.getLogger(__name__)

#: Values at or below this threshold are treated as zero.
PRECISION = 1e-6

WEIGHT = "weight"


def edge_endpoints(graph: nx.Graph, edge: Tuple) -> Tuple[Hashable, Hashable]:
    """
    Endpoints of an input-graph edge.

    Edges are identified the networkx way: ``(u, v)`` for simple graphs and
    ``(u, v)`` or ``(u, v, key)`` for multigraphs.
    """
    if len(edge) == 3 and graph.is_multigraph():
        u, v, _ = edge
        return u, v
    u, v = edge
    return u, v


class WeightedCutGraph:
    """
    Simple undirected graph with mutable edge weights.

    WARNING: the input graph is not copied. If vertices or edges are added
    to or removed from it after construction the behavior is undefined;
    create a new instance instead.
    """

    def __init__(self, input_graph: nx.Graph):
        """
        Build the working graph.

        Args:
            input_graph: Directed, undirected or multi graph; complete or not
        """
        self._input_graph = input_graph
        self._graph = nx.Graph()
        self._graph.add_nodes_from(input_graph.nodes)
        for u, v in input_graph.edges():
            if u == v:
                # self-loops never cross a cut
                continue
            self._graph.add_edge(u, v, **{WEIGHT: 0.0})

        logger.debug(
            "Working graph: %d vertices, %d undirected edges (input had %d edges)",
            self._graph.number_of_nodes(),
            self._graph.number_of_edges(),
            input_graph.number_of_edges(),
        )

    @property
    def graph(self) -> nx.Graph:
        """The underlying networkx graph (edge attribute ``weight``)."""
        return self._graph

    @property
    def input_graph(self) -> nx.Graph:
        """The graph this working graph was derived from."""
        return self._input_graph

    def vertices(self) -> list:
        """Vertices in insertion order."""
        return list(self._graph.nodes)

    @property
    def num_vertices(self) -> int:
        return self._graph.number_of_nodes()

    @property
    def num_edges(self) -> int:
        return self._graph.number_of_edges()

    def weight(self, u: Hashable, v: Hashable) -> float:
        """Current weight of the undirected edge {u, v}."""
        return self._graph[u][v][WEIGHT]

    def reset_weights(self) -> None:
        """Set every edge weight to zero."""
        for _, _, data in self._graph.edges(data=True):
            data[WEIGHT] = 0.0

    def add_weight(self, u: Hashable, v: Hashable, value: float) -> None:
        """Add value to the weight of edge {u, v}."""
        self._graph[u][v][WEIGHT] += value

    def refresh(self, edge_values: Mapping[Any, float]) -> None:
        """
        Reset all weights, then accumulate the given edge values.

        Only values strictly greater than PRECISION are used, so callers may
        pass a sparse mapping holding just the non-zero edges.

        Args:
            edge_values: Mapping from input-graph edges to fractional values
        """
        self.reset_weights()
        for edge, value in edge_values.items():
            if value <= PRECISION:
                continue
            u, v = edge_endpoints(self._input_graph, edge)
            if u == v:
                continue
            self.add_weight(u, v, value)

    def is_connected(self) -> bool:
        """Whether the topology (ignoring weights) is connected."""
        return self.num_vertices > 0 and nx.is_connected(self._graph)

    def components(self) -> list:
        """Connected components of the topology, in vertex order."""
        return [set(c) for c in nx.connected_components(self._graph)]

    def cut_weight(self, cut_set: Iterable[Hashable]) -> float:
        """Total weight of the edges with exactly one endpoint in cut_set."""
        return nx.cut_size(self._graph, set(cut_set), weight=WEIGHT)

    def __repr__(self) -> str:
        return f"<WeightedCutGraph |V|={self.num_vertices} |E|={self.num_edges}>"
