"""
tspbp: Branch-and-Price Core for TSP-Style Models

Subtour separation through minimum cuts and incremental state management
for branch-and-price search trees, plus the search driver and reference
collaborators (node selection, edge branching) built on top of them.
"""

__version__ = "0.1.0"

# Search tree
from tspbp.core import (
    BestFirstSelector,
    BPNode,
    BPTree,
    BranchAndPriceStateManager,
    BreadthFirstSelector,
    DepthFirstSelector,
    InconsistentStateError,
    NodeSelector,
    NodeStatus,
    TreeStats,
    create_selector,
)

# Branching
from tspbp.branching import (
    BranchingCandidate,
    BranchingConflictError,
    BranchingDecision,
    BranchingDecisionListener,
    BranchingStrategy,
    EdgeBranching,
    EdgeRestrictions,
    FixEdge,
    RemoveEdge,
)

# Separation
from tspbp.separation import (
    PRECISION,
    MinCutAlgorithm,
    SubtourCut,
    SubtourSeparator,
    WeightedCutGraph,
    create_min_cut_algorithm,
)

# Solver
from tspbp.solver import (
    BPConfig,
    BPSolution,
    BPStatus,
    BranchAndPrice,
    RelaxationResult,
    RelaxationSolver,
)

__all__ = [
    # Version
    "__version__",
    # Tree
    "BPNode",
    "BPTree",
    "TreeStats",
    "NodeStatus",
    "BranchAndPriceStateManager",
    "InconsistentStateError",
    # Selection
    "NodeSelector",
    "BestFirstSelector",
    "DepthFirstSelector",
    "BreadthFirstSelector",
    "create_selector",
    # Branching
    "BranchingDecision",
    "BranchingDecisionListener",
    "BranchingStrategy",
    "BranchingCandidate",
    "BranchingConflictError",
    "EdgeBranching",
    "EdgeRestrictions",
    "FixEdge",
    "RemoveEdge",
    # Separation
    "PRECISION",
    "SubtourCut",
    "SubtourSeparator",
    "WeightedCutGraph",
    "MinCutAlgorithm",
    "create_min_cut_algorithm",
    # Solver
    "BranchAndPrice",
    "BPConfig",
    "BPSolution",
    "BPStatus",
    "RelaxationResult",
    "RelaxationSolver",
]
