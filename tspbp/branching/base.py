"""
Abstract base classes for branching.

This module defines the two contracts every branching rule must honor:

- BranchingDecision: a reversible mutation, applied when the search enters
  a subtree and reverted when it backtracks out of it
- BranchingStrategy: selects how to split a node into children

and the listener interface through which collaborators (pricing graphs,
master constraints) are told about decisions being performed or reversed.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from tspbp.core.node import BPNode


class BranchingDecision(ABC):
    """
    A reversible branching decision.

    apply() and revert() receive an explicit state handle (whatever the
    search driver passes to the state manager) and must be exact inverses
    when called in LIFO order: for any state s, apply(s) followed by
    revert(s) leaves s unchanged.

    Decisions are compared by identity: two decision objects with the same
    content on different branches of the tree are different decisions.
    """

    @abstractmethod
    def apply(self, state: Any) -> None:
        """Perform the decision on state."""
        pass

    @abstractmethod
    def revert(self, state: Any) -> None:
        """Undo the decision on state."""
        pass

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}>"


class BranchingDecisionListener(ABC):
    """
    Observer of branching decisions.

    Listeners are registered with the state manager and called
    synchronously, in registration order, right after a decision has been
    applied to or reverted from the state.
    """

    @abstractmethod
    def branching_decision_performed(self, decision: BranchingDecision) -> None:
        """Called after a decision has been applied."""
        pass

    @abstractmethod
    def branching_decision_reversed(self, decision: BranchingDecision) -> None:
        """Called after a decision has been reverted due to backtracking."""
        pass


@dataclass
class BranchingCandidate:
    """
    A candidate for branching.

    Represents a potential branching choice with associated score
    and the decisions that would result from branching.

    Attributes:
        score: Priority score (higher = more likely to be selected)
        decisions: List of branching decisions (one per child)
        description: Human-readable description of the branching
        metadata: Additional strategy-specific information
    """
    score: float
    decisions: List[BranchingDecision]
    description: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)


class BranchingStrategy(ABC):
    """
    Abstract base class for branching strategies.

    A branching strategy determines how to split a node into children. It
    analyzes the relaxation solution and selects branching decisions that:
    1. Exclude the current fractional solution
    2. Partition the solution space
    3. Ideally improve bounds quickly

    Subclasses must implement:
    - select_branching_candidates(): Find branching opportunities

    Strategies with options keep them in a config dataclass stored as
    self.config; configure() updates its fields by name.
    """

    def __init__(self, name: str = ""):
        """
        Initialize the branching strategy.

        Args:
            name: Human-readable name for logging
        """
        self.name = name or self.__class__.__name__

    @abstractmethod
    def select_branching_candidates(
        self,
        node: "BPNode",
        edge_values: Mapping[Any, float],
    ) -> List[BranchingCandidate]:
        """
        Find branching candidates for a node.

        Args:
            node: The node to branch on
            edge_values: Relaxation values indexed by edge

        Returns:
            List of branching candidates, sorted by score (descending)
        """
        pass

    def select_best_candidate(
        self,
        node: "BPNode",
        edge_values: Mapping[Any, float],
    ) -> Optional[BranchingCandidate]:
        """
        Select the best branching candidate.

        Returns:
            The best candidate, or None if no valid candidates exist
        """
        candidates = self.select_branching_candidates(node, edge_values)
        if not candidates:
            return None
        return max(candidates, key=lambda c: c.score)

    def configure(self, **kwargs: Any) -> None:
        """Set fields of self.config by name."""
        config = getattr(self, "config", None)
        for key, value in kwargs.items():
            if config is None or not hasattr(config, key):
                raise ValueError(f"Unknown {self.name} option: {key}")
            setattr(config, key, value)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}>"
