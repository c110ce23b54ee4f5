"""
Search-tree data structures.

Nodes, the tree arena, node selection policies and the state manager that
moves branching decisions in and out as the search travels the tree.
"""

from tspbp.core.manipulator import (
    BranchAndPriceStateManager,
    InconsistentStateError,
)
from tspbp.core.node import BPNode, NodeStatus
from tspbp.core.selection import (
    BestFirstSelector,
    BreadthFirstSelector,
    DepthFirstSelector,
    NodeSelector,
    create_selector,
)
from tspbp.core.tree import BPTree, TreeStats

__all__ = [
    "BPNode",
    "NodeStatus",
    "BPTree",
    "TreeStats",
    "BranchAndPriceStateManager",
    "InconsistentStateError",
    "NodeSelector",
    "BestFirstSelector",
    "DepthFirstSelector",
    "BreadthFirstSelector",
    "create_selector",
]
