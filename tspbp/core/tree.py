"""
The branch-and-price search tree.

Nodes live in an arena keyed by node id; a node refers to its parent by id
only, so parent and child never hold references to each other. The
decision path of a node is fixed when BPTree creates it.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional

from tspbp.branching.base import BranchingDecision
from tspbp.core.node import BPNode, NodeStatus

_OPEN = (NodeStatus.PENDING, NodeStatus.PROCESSING)

# Counter bumped in TreeStats when a node reaches the given status.
_STATUS_COUNTERS = {
    NodeStatus.PRUNED_BOUND: "nodes_pruned_bound",
    NodeStatus.PRUNED_INFEASIBLE: "nodes_pruned_infeasible",
    NodeStatus.INTEGER: "nodes_integer",
    NodeStatus.BRANCHED: "nodes_branched",
}


@dataclass
class TreeStats:
    """Counters and global bounds of a search."""
    nodes_created: int = 0
    nodes_processed: int = 0
    nodes_pruned_bound: int = 0
    nodes_pruned_infeasible: int = 0
    nodes_integer: int = 0
    nodes_branched: int = 0
    nodes_open: int = 0
    max_depth: int = 0
    best_lower_bound: float = float("-inf")
    best_upper_bound: float = float("inf")

    def gap(self) -> float:
        """Relative gap between the global bounds (inf while either is unknown)."""
        lb, ub = self.best_lower_bound, self.best_upper_bound
        if ub == float("inf") or lb == float("-inf"):
            return float("inf")
        if abs(ub) < 1e-10:
            return 0.0 if abs(lb) < 1e-10 else float("inf")
        return (ub - lb) / abs(ub)


class BPTree:
    """
    Arena of search nodes, with the incumbent and the global bounds.

    Example:
        tree = BPTree()
        fix, remove = tree.create_children(tree.root(), [FixEdge(e), RemoveEdge(e)])
        tree.mark_processed(remove, NodeStatus.PRUNED_INFEASIBLE)
    """

    def __init__(self):
        self._nodes: dict[int, BPNode] = {}
        self._next_id = 0
        self._incumbent: Optional[BPNode] = None
        self._stats = TreeStats()
        self._root = self._register(BPNode())

    def _register(self, node: BPNode) -> BPNode:
        node.id = self._next_id
        self._next_id += 1
        self._nodes[node.id] = node
        self._stats.nodes_created += 1
        self._stats.nodes_open += 1
        self._stats.max_depth = max(self._stats.max_depth, node.depth)
        return node

    def root(self) -> BPNode:
        return self._root

    def node(self, node_id: int) -> Optional[BPNode]:
        """The node with this id, or None if unknown or discarded."""
        return self._nodes.get(node_id)

    def __contains__(self, node_id: int) -> bool:
        return node_id in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    @property
    def stats(self) -> TreeStats:
        return self._stats

    # ------------------------------------------------------------------
    # Growing the tree
    # ------------------------------------------------------------------

    def create_child(self, parent: BPNode, decision: BranchingDecision) -> BPNode:
        """
        Create a child whose path is the parent's path plus decision.

        The child starts from the parent's bounds; the decision tuples of
        the parent are shared, not copied.
        """
        child = self._register(BPNode(
            parent_id=parent.id,
            depth=parent.depth + 1,
            root_path=parent.root_path + (parent.id,),
            lower_bound=parent.lower_bound,
            upper_bound=parent.upper_bound,
            inherited_decisions=parent.branching_decisions,
            local_decisions=(decision,),
        ))
        parent.add_child(child.id)
        return child

    def create_children(
        self,
        parent: BPNode,
        decisions: Iterable[BranchingDecision],
    ) -> List[BPNode]:
        """One child per decision; the parent becomes BRANCHED."""
        children = [self.create_child(parent, d) for d in decisions]
        self.mark_processed(parent, NodeStatus.BRANCHED)
        return children

    # ------------------------------------------------------------------
    # Closing nodes
    # ------------------------------------------------------------------

    def mark_processed(self, node: BPNode, new_status: NodeStatus) -> None:
        """Give an open node its final status and update the counters."""
        if node.status in _OPEN:
            self._stats.nodes_processed += 1
            self._stats.nodes_open -= 1
        node.status = new_status
        counter = _STATUS_COUNTERS.get(new_status)
        if counter is not None:
            setattr(self._stats, counter, getattr(self._stats, counter) + 1)

    def prune_by_bound(self) -> int:
        """Prune every pending node whose bound reaches the incumbent value."""
        pruned = 0
        for node in self._nodes.values():
            if node.can_be_explored and node.try_prune_by_bound(self.global_upper_bound):
                self._stats.nodes_pruned_bound += 1
                self._stats.nodes_open -= 1
                pruned += 1
        return pruned

    # ------------------------------------------------------------------
    # Bounds and incumbent
    # ------------------------------------------------------------------

    @property
    def global_lower_bound(self) -> float:
        return self._stats.best_lower_bound

    @global_lower_bound.setter
    def global_lower_bound(self, value: float) -> None:
        self._stats.best_lower_bound = value

    @property
    def global_upper_bound(self) -> float:
        return self._stats.best_upper_bound

    @global_upper_bound.setter
    def global_upper_bound(self, value: float) -> None:
        self._stats.best_upper_bound = value

    def gap(self) -> float:
        return self._stats.gap()

    def incumbent(self) -> Optional[BPNode]:
        return self._incumbent

    def set_incumbent(self, node: BPNode) -> None:
        """Make node the incumbent; its LP value becomes the upper bound."""
        self._incumbent = node
        self.global_upper_bound = node.lp_value

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    def get_path_to_root(self, target_id: int) -> List[int]:
        """Node ids from the root down to target (empty if unknown)."""
        node = self._nodes.get(target_id)
        if node is None:
            return []
        return list(node.root_path) + [node.id]

    def common_ancestor(self, first: BPNode, second: BPNode) -> BPNode:
        """Deepest node that is an ancestor of (or equal to) both nodes."""
        ancestor_id = self._root.id
        for a, b in zip(self.get_path_to_root(first.id), self.get_path_to_root(second.id)):
            if a != b:
                break
            ancestor_id = a
        return self._nodes[ancestor_id]

    def discard(self, node: BPNode) -> None:
        """
        Drop a fully explored leaf from the arena.

        Descendants are only reachable through their ids, so a node may be
        discarded once it is processed and has no children left.
        """
        if not node.is_processed or node.children or node is self._root:
            raise ValueError(f"Node {node.id} cannot be discarded")
        del self._nodes[node.id]
        parent = self._nodes.get(node.parent_id)
        if parent is not None:
            parent.children.remove(node.id)
