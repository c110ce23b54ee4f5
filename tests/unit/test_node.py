"""Tests for BPNode."""

import pytest

from tspbp.branching.edge import FixEdge, RemoveEdge
from tspbp.core.node import BPNode, NodeStatus


class TestBPNode:
    """Tests for BPNode."""

    def test_root_node_creation(self):
        """Test creating a root node."""
        node = BPNode()

        assert node.id == 0
        assert node.parent_id == -1
        assert node.depth == 0
        assert node.root_path == ()
        assert node.branching_decisions == ()
        assert node.is_root is True
        assert node.lower_bound == float("-inf")
        assert node.status == NodeStatus.PENDING

    def test_node_with_id(self):
        """Test creating a node with specific ID."""
        node = BPNode(id=5, parent_id=2, depth=3, root_path=(0, 1, 2))

        assert node.id == 5
        assert node.parent_id == 2
        assert node.depth == 3
        assert node.root_path == (0, 1, 2)
        assert node.is_root is False

    def test_branching_decisions_concatenate(self):
        """Inherited decisions come before local ones."""
        d1 = FixEdge((0, 1))
        d2 = RemoveEdge((1, 2))
        d3 = FixEdge((2, 3))
        node = BPNode(inherited_decisions=(d1, d2), local_decisions=(d3,))

        assert node.branching_decisions == (d1, d2, d3)
        assert node.num_decisions == 3

    def test_nodes_compare_by_identity(self):
        """Two nodes with equal fields are still different nodes."""
        a = BPNode(id=1)
        b = BPNode(id=1)

        assert a != b
        assert a == a
        assert len({a, b}) == 2

    def test_node_gap(self):
        """Test gap calculation."""
        node = BPNode()
        node.lower_bound = 90.0
        node.upper_bound = 100.0

        assert node.gap == pytest.approx(0.1)

    def test_node_gap_infinite(self):
        """Test gap with infinite bounds."""
        assert BPNode().gap == float("inf")

    def test_node_status_transitions(self):
        """Test node status properties."""
        node = BPNode()

        assert node.can_be_explored is True
        assert node.is_processed is False

        node.status = NodeStatus.PROCESSING
        assert node.can_be_explored is False
        assert node.is_processed is False

        node.status = NodeStatus.BRANCHED
        assert node.is_processed is True
        assert node.is_pruned is False

        node.status = NodeStatus.PRUNED_INFEASIBLE
        assert node.is_pruned is True

    def test_prune_by_bound(self):
        """Test pruning by bound."""
        node = BPNode()
        node.lower_bound = 100.0

        assert node.try_prune_by_bound(150.0) is False
        assert node.status == NodeStatus.PENDING

        assert node.try_prune_by_bound(100.0) is True
        assert node.status == NodeStatus.PRUNED_BOUND

    def test_solution_storage(self):
        """Solutions are copied on assignment."""
        node = BPNode()
        assert node.has_solution is False

        values = {(0, 1): 1.0, (1, 2): 1.0}
        node.set_solution(values)
        values[(2, 3)] = 1.0

        assert node.has_solution is True
        assert len(node.solution) == 2

    def test_children(self):
        """Test child node management."""
        node = BPNode()
        assert node.has_children is False

        node.add_child(1)
        node.add_child(2)

        assert node.has_children is True
        assert node.children == [1, 2]
