"""Tests for SubtourCut and WeightedCutGraph."""

import networkx as nx
import pytest

from tspbp.separation.cut import SubtourCut
from tspbp.separation.graph import WeightedCutGraph, edge_endpoints


class TestSubtourCut:
    """Tests for SubtourCut."""

    def test_equality_ignores_value(self):
        """Cuts with the same set are equal whatever their value."""
        a = SubtourCut({1, 2, 3}, 0.5)
        b = SubtourCut(frozenset({3, 2, 1}), 1.25)

        assert a == b
        assert hash(a) == hash(b)
        assert len({a, b}) == 1

    def test_different_sets(self):
        assert SubtourCut({1, 2}) != SubtourCut({1, 3})

    def test_set_is_frozen(self):
        cut = SubtourCut([4, 5])

        assert isinstance(cut.cut_set, frozenset)
        assert 4 in cut
        assert 6 not in cut
        assert len(cut) == 2

    def test_empty_set_rejected(self):
        with pytest.raises(ValueError):
            SubtourCut(set())

    def test_violation(self):
        assert SubtourCut({1}, 0.5).violation() == pytest.approx(1.5)

    def test_complement(self):
        cut = SubtourCut({1, 2}, 0.3)
        other = cut.complement(range(1, 6))

        assert other.cut_set == frozenset({3, 4, 5})
        assert other.cut_value == 0.3

    def test_repr(self):
        assert repr(SubtourCut({2, 1}, 0.5)) == "SubtourCut(value=0.5, set=[1, 2])"


class TestEdgeEndpoints:
    """Tests for edge_endpoints."""

    def test_simple_graph(self):
        assert edge_endpoints(nx.Graph(), (1, 2)) == (1, 2)

    def test_multigraph_key(self):
        assert edge_endpoints(nx.MultiGraph(), (1, 2, 0)) == (1, 2)


class TestWeightedCutGraph:
    """Tests for WeightedCutGraph."""

    def test_undirected_copy(self):
        graph = nx.cycle_graph(5)
        cut_graph = WeightedCutGraph(graph)

        assert cut_graph.num_vertices == 5
        assert cut_graph.num_edges == 5
        assert cut_graph.vertices() == [0, 1, 2, 3, 4]
        assert cut_graph.input_graph is graph
        assert cut_graph.weight(0, 1) == 0.0

    def test_antiparallel_arcs_collapse(self):
        graph = nx.DiGraph([(0, 1), (1, 0), (1, 2)])
        cut_graph = WeightedCutGraph(graph)

        assert cut_graph.num_edges == 2

        cut_graph.refresh({(0, 1): 0.25, (1, 0): 0.5, (1, 2): 1.0})

        assert cut_graph.weight(0, 1) == pytest.approx(0.75)
        assert cut_graph.weight(2, 1) == pytest.approx(1.0)

    def test_parallel_edges_collapse(self):
        graph = nx.MultiGraph()
        graph.add_edge(0, 1, key="a")
        graph.add_edge(0, 1, key="b")
        cut_graph = WeightedCutGraph(graph)

        cut_graph.refresh({(0, 1, "a"): 0.5, (1, 0, "b"): 0.5})

        assert cut_graph.num_edges == 1
        assert cut_graph.weight(0, 1) == pytest.approx(1.0)

    def test_self_loops_skipped(self):
        graph = nx.Graph([(0, 0), (0, 1)])
        cut_graph = WeightedCutGraph(graph)

        cut_graph.refresh({(0, 0): 1.0, (0, 1): 1.0})

        assert cut_graph.num_edges == 1
        assert cut_graph.weight(0, 1) == 1.0

    def test_refresh_resets_weights(self):
        cut_graph = WeightedCutGraph(nx.complete_graph(3))

        cut_graph.refresh({(0, 1): 1.0})
        cut_graph.refresh({(1, 2): 0.5})

        assert cut_graph.weight(0, 1) == 0.0
        assert cut_graph.weight(1, 2) == 0.5

    def test_tiny_values_ignored(self):
        cut_graph = WeightedCutGraph(nx.complete_graph(3))

        cut_graph.refresh({(0, 1): 1e-9, (1, 2): -0.5})

        assert cut_graph.weight(0, 1) == 0.0
        assert cut_graph.weight(1, 2) == 0.0

    def test_cut_weight(self):
        cut_graph = WeightedCutGraph(nx.complete_graph(4))
        cut_graph.refresh({(0, 1): 1.0, (1, 2): 0.5, (2, 3): 1.0, (0, 3): 0.5})

        assert cut_graph.cut_weight({0, 1}) == pytest.approx(1.0)
        assert cut_graph.cut_weight({0}) == pytest.approx(1.5)

    def test_components(self):
        cut_graph = WeightedCutGraph(nx.Graph([(0, 1), (2, 3)]))

        assert cut_graph.is_connected() is False
        assert cut_graph.components() == [{0, 1}, {2, 3}]

    def test_empty_graph_not_connected(self):
        assert WeightedCutGraph(nx.Graph()).is_connected() is False
