"""Tests for node selection policies."""

import pytest

from tspbp.core.node import BPNode, NodeStatus
from tspbp.core.selection import (
    BestFirstSelector,
    BreadthFirstSelector,
    DepthFirstSelector,
    create_selector,
)


class TestBestFirstSelector:
    """Tests for BestFirstSelector."""

    def test_empty_selector(self):
        """Test empty selector behavior."""
        selector = BestFirstSelector()

        assert selector.empty() is True
        assert selector.size() == 0
        assert selector.select_next() is None
        assert selector.peek_next() is None
        assert selector.best_bound() == float("inf")

    def test_add_single_node(self):
        """Test adding a single node."""
        selector = BestFirstSelector()
        node = BPNode(id=1)
        node.lower_bound = 50.0

        selector.add_node(node)

        assert selector.empty() is False
        assert selector.size() == 1
        assert selector.best_bound() == 50.0

    def test_select_by_bound(self):
        """Test that best-first selects by lowest bound."""
        selector = BestFirstSelector()

        n1 = BPNode(id=1)
        n1.lower_bound = 100.0

        n2 = BPNode(id=2)
        n2.lower_bound = 50.0

        n3 = BPNode(id=3)
        n3.lower_bound = 75.0

        selector.add_nodes([n1, n2, n3])

        # Should select in order: n2 (50), n3 (75), n1 (100)
        assert selector.select_next().id == 2
        assert selector.select_next().id == 3
        assert selector.select_next().id == 1
        assert selector.empty() is True

    def test_ties_in_insertion_order(self):
        """Nodes with equal bounds come out in insertion order."""
        selector = BestFirstSelector()
        nodes = [BPNode(id=i, lower_bound=10.0) for i in (4, 2, 7)]
        selector.add_nodes(nodes)

        assert [selector.select_next().id for _ in nodes] == [4, 2, 7]

    def test_skip_pruned_nodes(self):
        """Test that pruned nodes are skipped."""
        selector = BestFirstSelector()

        n1 = BPNode(id=1)
        n1.lower_bound = 75.0

        n2 = BPNode(id=2)
        n2.lower_bound = 50.0

        selector.add_node(n1)
        selector.add_node(n2)
        n2.status = NodeStatus.PRUNED_BOUND

        assert selector.peek_next().id == 1
        assert selector.select_next().id == 1
        assert selector.select_next() is None

    def test_processed_nodes_not_added(self):
        """Nodes that cannot be explored are ignored."""
        selector = BestFirstSelector()
        node = BPNode(id=1, status=NodeStatus.INTEGER)

        selector.add_node(node)

        assert selector.empty() is True

    def test_prune(self):
        """Test explicit removal of pruned nodes."""
        selector = BestFirstSelector()
        nodes = [BPNode(id=i, lower_bound=float(i)) for i in range(1, 5)]
        selector.add_nodes(nodes)

        nodes[0].status = NodeStatus.PRUNED_BOUND
        nodes[2].status = NodeStatus.PRUNED_BOUND

        assert selector.prune() == 2
        assert selector.size() == 2
        assert sorted(selector.get_open_node_ids()) == [2, 4]

    def test_clear(self):
        """Test clearing the selector."""
        selector = BestFirstSelector()
        selector.add_nodes([BPNode(id=1), BPNode(id=2)])

        selector.clear()

        assert selector.empty() is True


class TestDepthFirstSelector:
    """Tests for DepthFirstSelector."""

    def test_select_deepest_first(self):
        """Test that depth-first selects deepest nodes first."""
        selector = DepthFirstSelector()

        n1 = BPNode(id=1, depth=1)
        n1.lower_bound = 50.0

        n2 = BPNode(id=2, depth=3)
        n2.lower_bound = 100.0

        n3 = BPNode(id=3, depth=2)
        n3.lower_bound = 75.0

        selector.add_nodes([n1, n2, n3])

        assert selector.select_next().id == 2
        assert selector.select_next().id == 3
        assert selector.select_next().id == 1

    def test_bound_breaks_depth_ties(self):
        """Among equally deep nodes the better bound wins."""
        selector = DepthFirstSelector()

        n1 = BPNode(id=1, depth=2, lower_bound=80.0)
        n2 = BPNode(id=2, depth=2, lower_bound=60.0)
        selector.add_nodes([n1, n2])

        assert selector.select_next().id == 2

    def test_best_bound_over_all_nodes(self):
        """best_bound() is the minimum, not the next selected node's bound."""
        selector = DepthFirstSelector()
        selector.add_node(BPNode(id=1, depth=1, lower_bound=50.0))
        selector.add_node(BPNode(id=2, depth=5, lower_bound=90.0))

        assert selector.best_bound() == 50.0


class TestBreadthFirstSelector:
    """Tests for BreadthFirstSelector."""

    def test_select_by_creation_order(self):
        """Nodes come out by ascending id, regardless of insertion order."""
        selector = BreadthFirstSelector()

        n1 = BPNode(id=3, depth=2, lower_bound=1.0)
        n2 = BPNode(id=1, depth=1, lower_bound=9.0)
        n3 = BPNode(id=2, depth=1, lower_bound=5.0)

        selector.add_nodes([n1, n2, n3])

        assert selector.select_next().id == 1
        assert selector.select_next().id == 2
        assert selector.select_next().id == 3


class TestCreateSelector:
    """Tests for selector factory function."""

    def test_create_best_first(self):
        assert isinstance(create_selector("best_first"), BestFirstSelector)
        assert isinstance(create_selector("bestfirst"), BestFirstSelector)
        assert isinstance(create_selector("best_bound"), BestFirstSelector)

    def test_create_depth_first(self):
        assert isinstance(create_selector("depth_first"), DepthFirstSelector)
        assert isinstance(create_selector("dfs"), DepthFirstSelector)

    def test_create_breadth_first(self):
        assert isinstance(create_selector("breadth_first"), BreadthFirstSelector)
        assert isinstance(create_selector("BFS"), BreadthFirstSelector)

    def test_unknown_selector(self):
        with pytest.raises(ValueError):
            create_selector("random")
