"""
Subtour cut certificates.

A subtour cut is a vertex set S' with 0 < |S'| < |V| whose boundary carries
less than 2 units of fractional edge weight.
"""

from dataclasses import dataclass, field
from typing import FrozenSet, Hashable


@dataclass(frozen=True)
class SubtourCut:
    """
    A violated (or candidate) subtour-elimination constraint.

    Two cuts are equal when they have the same cut set, regardless of the
    cut value or of the algorithm that found them.

    Attributes:
        cut_set: The vertex set S'
        cut_value: Sum of the edge values crossing S'
    """
    cut_set: FrozenSet[Hashable]
    cut_value: float = field(default=0.0, compare=False)

    def __post_init__(self):
        if not isinstance(self.cut_set, frozenset):
            object.__setattr__(self, "cut_set", frozenset(self.cut_set))
        if not self.cut_set:
            raise ValueError("A subtour cut needs a non-empty cut set")

    def __len__(self) -> int:
        return len(self.cut_set)

    def __contains__(self, vertex: Hashable) -> bool:
        return vertex in self.cut_set

    def violation(self) -> float:
        """How far the cut value falls short of 2."""
        return 2.0 - self.cut_value

    def complement(self, vertices) -> "SubtourCut":
        """The same cut described by the other side of the partition."""
        return SubtourCut(frozenset(vertices) - self.cut_set, self.cut_value)

    def __repr__(self) -> str:
        members = sorted(self.cut_set, key=repr)
        return f"SubtourCut(value={self.cut_value:.6g}, set={members})"
