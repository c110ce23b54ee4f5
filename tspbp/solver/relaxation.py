"""
Interface between the search driver and the relaxation being solved.

The relaxation (a master LP with column generation, or a plain LP with
cutting planes) is an external collaborator. The driver only needs to solve
it at the current node, read the edge values of its solution, and hand it
the subtour cuts found by the separator.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List

from tspbp.separation.cut import SubtourCut


@dataclass
class RelaxationResult:
    """Outcome of solving the relaxation at a node."""
    feasible: bool
    objective: float = float("inf")
    edge_values: Dict[Any, float] = field(default_factory=dict)

    def is_integer(self, tolerance: float = 1e-6) -> bool:
        """Whether every edge value is integral."""
        for value in self.edge_values.values():
            frac = value - int(value)
            if tolerance < frac < 1.0 - tolerance:
                return False
        return True


class RelaxationSolver(ABC):
    """
    Relaxation solved at every node of the search.

    The state returned by the state property is the object branching
    decisions act on; the driver hands it to the state manager, so the
    relaxation always sees the decisions of the node being solved.
    """

    @property
    @abstractmethod
    def state(self) -> Any:
        """Mutable handle branching decisions are applied to."""
        pass

    @abstractmethod
    def solve(self) -> RelaxationResult:
        """Solve the relaxation under the current state and cuts."""
        pass

    @abstractmethod
    def add_cuts(self, cuts: List[SubtourCut]) -> int:
        """
        Add subtour-elimination constraints.

        Returns:
            Number of cuts actually added (duplicates may be skipped)
        """
        pass
