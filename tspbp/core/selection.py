"""
Node selection policies.

A selector holds the open nodes of the search and decides which one is
solved next. The state manager makes any order correct; the policy only
affects how much state has to be reverted and re-applied between nodes.
"""

import heapq
from abc import ABC, abstractmethod
from typing import Optional

from tspbp.core.node import BPNode


class NodeSelector(ABC):
    """Abstract base class for node selection policies."""

    def __init__(self):
        self._heap: list[tuple] = []
        self._counter = 0

    @abstractmethod
    def _key(self, node: BPNode) -> tuple:
        """Priority key; smaller keys are selected first."""
        pass

    def add_node(self, node: BPNode) -> None:
        """Add a node to the open queue."""
        if node and node.can_be_explored:
            heapq.heappush(self._heap, self._key(node) + (self._counter, node))
            self._counter += 1

    def add_nodes(self, nodes: list[BPNode]) -> None:
        """Add multiple nodes to the open queue."""
        for node in nodes:
            self.add_node(node)

    def select_next(self) -> Optional[BPNode]:
        """Select and remove the next node to explore."""
        while self._heap:
            node = heapq.heappop(self._heap)[-1]
            if node.can_be_explored:
                return node
        return None

    def peek_next(self) -> Optional[BPNode]:
        """Peek at the next node without removing it."""
        while self._heap:
            if self._heap[0][-1].can_be_explored:
                return self._heap[0][-1]
            heapq.heappop(self._heap)
        return None

    def empty(self) -> bool:
        """Check if there are any open nodes."""
        return len(self._heap) == 0

    def size(self) -> int:
        """Get the number of open nodes."""
        return len(self._heap)

    def prune(self) -> int:
        """Remove pruned nodes from the queue."""
        valid = [entry for entry in self._heap if entry[-1].can_be_explored]
        removed = len(self._heap) - len(valid)
        self._heap = valid
        heapq.heapify(self._heap)
        return removed

    def best_bound(self) -> float:
        """Get the best (lowest) bound among open nodes."""
        if not self._heap:
            return float("inf")
        return min(entry[-1].lower_bound for entry in self._heap)

    def get_open_node_ids(self) -> list[int]:
        """Get all open node IDs."""
        return [entry[-1].id for entry in self._heap]

    def clear(self) -> None:
        """Clear all nodes from the selector."""
        self._heap = []


class BestFirstSelector(NodeSelector):
    """Best-first (best-bound) node selection, ties by insertion order."""

    def _key(self, node: BPNode) -> tuple:
        return (node.lower_bound,)

    def best_bound(self) -> float:
        if not self._heap:
            return float("inf")
        return self._heap[0][0]


class DepthFirstSelector(NodeSelector):
    """Depth-first node selection, best bound among equally deep nodes."""

    def _key(self, node: BPNode) -> tuple:
        return (-node.depth, node.lower_bound)


class BreadthFirstSelector(NodeSelector):
    """Breadth-first node selection: nodes are solved in creation order."""

    def _key(self, node: BPNode) -> tuple:
        return (node.id,)


def create_selector(name: str) -> NodeSelector:
    """Create a node selector by name."""
    name_lower = name.lower()
    if name_lower in ("best_first", "bestfirst", "best_bound"):
        return BestFirstSelector()
    elif name_lower in ("depth_first", "depthfirst", "dfs"):
        return DepthFirstSelector()
    elif name_lower in ("breadth_first", "breadthfirst", "bfs"):
        return BreadthFirstSelector()
    raise ValueError(f"Unknown node selection: {name!r}")
