"""
Branch-and-price tree nodes.

A node records where it sits in the tree (its ancestors and the branching
decisions leading to it) and what is known about its relaxation.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, List, Tuple

from tspbp.branching.base import BranchingDecision


class NodeStatus(Enum):
    """Status of a tree node."""
    PENDING = auto()
    PROCESSING = auto()
    BRANCHED = auto()
    PRUNED_BOUND = auto()
    PRUNED_INFEASIBLE = auto()
    INTEGER = auto()
    FATHOMED = auto()


@dataclass(eq=False)
class BPNode:
    """
    A node in the branch-and-price tree.

    root_path lists the ids of the ancestors from the root down to the
    parent (empty for the root). inherited_decisions are the decisions of
    all ancestors in root-to-leaf order; local_decisions are the ones made
    when this node was created. Both are set by BPTree when the node is
    created and are not changed afterwards.
    """
    id: int = 0
    parent_id: int = -1
    depth: int = 0
    root_path: Tuple[int, ...] = ()

    lower_bound: float = float("-inf")
    upper_bound: float = float("inf")
    lp_value: float = float("inf")

    status: NodeStatus = NodeStatus.PENDING
    is_integer: bool = False

    inherited_decisions: Tuple[BranchingDecision, ...] = ()
    local_decisions: Tuple[BranchingDecision, ...] = ()
    children: List[int] = field(default_factory=list)

    solution: Dict[Any, float] = field(default_factory=dict)

    @property
    def branching_decisions(self) -> Tuple[BranchingDecision, ...]:
        """All decisions from the root to this node."""
        return self.inherited_decisions + self.local_decisions

    @property
    def num_decisions(self) -> int:
        """Total number of branching decisions."""
        return len(self.inherited_decisions) + len(self.local_decisions)

    @property
    def is_root(self) -> bool:
        return self.parent_id == -1

    @property
    def gap(self) -> float:
        """Compute optimality gap."""
        if self.upper_bound == float("inf") or self.lower_bound == float("-inf"):
            return float("inf")
        if self.upper_bound == 0.0:
            return 0.0 if self.lower_bound == 0.0 else float("inf")
        return (self.upper_bound - self.lower_bound) / abs(self.upper_bound)

    @property
    def is_processed(self) -> bool:
        """Whether node has been processed."""
        return self.status not in (NodeStatus.PENDING, NodeStatus.PROCESSING)

    @property
    def is_pruned(self) -> bool:
        """Whether node has been pruned."""
        return self.status in (
            NodeStatus.PRUNED_BOUND,
            NodeStatus.PRUNED_INFEASIBLE,
            NodeStatus.FATHOMED,
        )

    @property
    def can_be_explored(self) -> bool:
        """Whether node can still be explored."""
        return self.status == NodeStatus.PENDING

    @property
    def has_children(self) -> bool:
        return len(self.children) > 0

    @property
    def has_solution(self) -> bool:
        return len(self.solution) > 0

    def add_child(self, child_id: int) -> None:
        self.children.append(child_id)

    def try_prune_by_bound(self, global_upper: float, tolerance: float = 1e-6) -> bool:
        """Try to prune by bound."""
        if self.lower_bound >= global_upper - tolerance:
            self.status = NodeStatus.PRUNED_BOUND
            return True
        return False

    def set_solution(self, sol: Dict[Any, float]) -> None:
        self.solution = dict(sol)

    def __repr__(self) -> str:
        return (
            f"BPNode(id={self.id}, depth={self.depth}, "
            f"bound={self.lower_bound:.6g}, status={self.status.name}, "
            f"decisions={list(self.branching_decisions)})"
        )
