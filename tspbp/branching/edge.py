"""
Edge branching for routing problems.

Edge branching selects an edge e with a fractional relaxation value and
creates two children:
- Fix branch: e must be part of the tour (x_e = 1)
- Remove branch: e may not be used (x_e = 0)

Decisions act on an EdgeRestrictions object, which pricing problems or
the master LP read to enforce them.
"""

from dataclasses import dataclass
from typing import Any, FrozenSet, Hashable, List, Mapping, Tuple

from tspbp.branching.base import (
    BranchingCandidate,
    BranchingDecision,
    BranchingStrategy,
)


class BranchingConflictError(ValueError):
    """A decision contradicts (or repeats) one that is already active."""


def edge_key(edge: Tuple) -> FrozenSet[Hashable]:
    """Undirected key for an edge given as (u, v) or (u, v, key)."""
    return frozenset(edge[:2])


class EdgeRestrictions:
    """
    Fixed and forbidden edges of the current search node.

    Every mutator is strict so that a decision applied and reverted in LIFO
    order restores the exact previous state.
    """

    def __init__(self):
        self._fixed: set = set()
        self._forbidden: set = set()

    @property
    def fixed_edges(self) -> FrozenSet[FrozenSet[Hashable]]:
        return frozenset(self._fixed)

    @property
    def forbidden_edges(self) -> FrozenSet[FrozenSet[Hashable]]:
        return frozenset(self._forbidden)

    def is_fixed(self, edge: Tuple) -> bool:
        return edge_key(edge) in self._fixed

    def is_forbidden(self, edge: Tuple) -> bool:
        return edge_key(edge) in self._forbidden

    def bounds(self, edge: Tuple) -> Tuple[float, float]:
        """(lower, upper) bound on x_e implied by the restrictions."""
        key = edge_key(edge)
        if key in self._fixed:
            return 1.0, 1.0
        if key in self._forbidden:
            return 0.0, 0.0
        return 0.0, 1.0

    def fix(self, edge: Tuple) -> None:
        key = edge_key(edge)
        if key in self._fixed or key in self._forbidden:
            raise BranchingConflictError(f"Edge {tuple(edge[:2])} is already restricted")
        self._fixed.add(key)

    def unfix(self, edge: Tuple) -> None:
        key = edge_key(edge)
        if key not in self._fixed:
            raise BranchingConflictError(f"Edge {tuple(edge[:2])} is not fixed")
        self._fixed.remove(key)

    def forbid(self, edge: Tuple) -> None:
        key = edge_key(edge)
        if key in self._fixed or key in self._forbidden:
            raise BranchingConflictError(f"Edge {tuple(edge[:2])} is already restricted")
        self._forbidden.add(key)

    def unforbid(self, edge: Tuple) -> None:
        key = edge_key(edge)
        if key not in self._forbidden:
            raise BranchingConflictError(f"Edge {tuple(edge[:2])} is not forbidden")
        self._forbidden.remove(key)

    def clear(self) -> None:
        self._fixed.clear()
        self._forbidden.clear()

    def __len__(self) -> int:
        return len(self._fixed) + len(self._forbidden)

    def __repr__(self) -> str:
        return f"<EdgeRestrictions fixed={len(self._fixed)} forbidden={len(self._forbidden)}>"


class FixEdge(BranchingDecision):
    """Edge must be used."""

    def __init__(self, edge: Tuple):
        self.edge = tuple(edge)

    def apply(self, state: EdgeRestrictions) -> None:
        state.fix(self.edge)

    def revert(self, state: EdgeRestrictions) -> None:
        state.unfix(self.edge)

    def __repr__(self) -> str:
        return f"FixEdge{self.edge[:2]}"


class RemoveEdge(BranchingDecision):
    """Edge may not be used."""

    def __init__(self, edge: Tuple):
        self.edge = tuple(edge)

    def apply(self, state: EdgeRestrictions) -> None:
        state.forbid(self.edge)

    def revert(self, state: EdgeRestrictions) -> None:
        state.unforbid(self.edge)

    def __repr__(self) -> str:
        return f"RemoveEdge{self.edge[:2]}"


@dataclass
class EdgeBranchingConfig:
    """Configuration for edge branching."""
    # Values within this distance of 0 or 1 are considered integral
    integrality_tolerance: float = 1e-6
    # Maximum number of candidates to return
    max_candidates: int = 20


class EdgeBranching(BranchingStrategy):
    """
    Branch on the edge whose value is closest to 0.5.

    The candidate's decisions are ordered [FixEdge, RemoveEdge], so the
    first child explores the branch that keeps the edge.
    """

    def __init__(
        self,
        integrality_tolerance: float = 1e-6,
        max_candidates: int = 20,
    ):
        super().__init__("EdgeBranching")
        self.config = EdgeBranchingConfig(
            integrality_tolerance=integrality_tolerance,
            max_candidates=max_candidates,
        )

    def select_branching_candidates(
        self,
        node,  # BPNode
        edge_values: Mapping[Any, float],
    ) -> List[BranchingCandidate]:
        """
        Find edges with fractional values.

        Args:
            node: Current node
            edge_values: Relaxation values indexed by edge

        Returns:
            List of branching candidates sorted by score
        """
        tol = self.config.integrality_tolerance
        candidates = []
        for edge, value in edge_values.items():
            frac = value - int(value)
            if frac <= tol or frac >= 1.0 - tol:
                continue

            # Score: prefer values close to 0.5
            score = 1.0 - abs(frac - 0.5) * 2

            candidates.append(BranchingCandidate(
                score=score,
                decisions=[FixEdge(edge), RemoveEdge(edge)],
                description=f"edge {tuple(edge[:2])}: value={value:.3f}",
                metadata={"edge": edge, "value": value},
            ))

        # sort is stable: equal scores keep the mapping's order
        candidates.sort(key=lambda c: c.score, reverse=True)
        return candidates[: self.config.max_candidates]
