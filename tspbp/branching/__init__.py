"""
Branching for branch-and-price.

This module provides the decision and listener contracts every branching
rule must honor, and edge branching for routing problems.

Extension Points:
----------------
- Subclass BranchingDecision to define a new reversible decision
- Subclass BranchingDecisionListener to react to decisions
- Subclass BranchingStrategy and implement select_branching_candidates()
"""

from tspbp.branching.base import (
    BranchingCandidate,
    BranchingDecision,
    BranchingDecisionListener,
    BranchingStrategy,
)
from tspbp.branching.edge import (
    BranchingConflictError,
    EdgeBranching,
    EdgeBranchingConfig,
    EdgeRestrictions,
    FixEdge,
    RemoveEdge,
)

__all__ = [
    "BranchingDecision",
    "BranchingDecisionListener",
    "BranchingStrategy",
    "BranchingCandidate",
    "BranchingConflictError",
    "EdgeBranching",
    "EdgeBranchingConfig",
    "EdgeRestrictions",
    "FixEdge",
    "RemoveEdge",
]
