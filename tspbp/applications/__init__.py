"""
Application-specific solvers.

Available Applications:
----------------------
- TSP: Symmetric traveling salesman by branch-and-cut
"""

from tspbp.applications.tsp import (
    TSPConfig,
    TSPInstance,
    TSPRelaxation,
    TSPSolution,
    solve_tsp_bp,
)

__all__ = [
    "TSPConfig",
    "TSPInstance",
    "TSPRelaxation",
    "TSPSolution",
    "solve_tsp_bp",
]
