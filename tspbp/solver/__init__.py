"""
Branch-and-price search driver.

This module provides the BranchAndPrice driver that coordinates:
- Tree management and node selection
- State transitions between nodes
- Subtour separation
- Branching strategies
"""

from tspbp.solver.branch_and_price import (
    BranchAndPrice,
    BPConfig,
    BPSolution,
    BPStatus,
)
from tspbp.solver.relaxation import RelaxationResult, RelaxationSolver

__all__ = [
    "BranchAndPrice",
    "BPConfig",
    "BPSolution",
    "BPStatus",
    "RelaxationResult",
    "RelaxationSolver",
]
