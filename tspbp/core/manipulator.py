"""
Incremental state management for the search tree.

Branching decisions modify the master problem and/or the pricing problems.
BranchAndPriceStateManager performs these modifications when the search
moves to another node and reverts them when it backtracks, so that the
applied decisions always equal the decision path of the node being solved.

Moving from node A to node B only touches what differs between them: the
decisions below their nearest common ancestor are reverted (most recent
first), then the decisions leading down to B are applied (root first).
"""

import logging
from typing import Any, List, Tuple

from tspbp.branching.base import BranchingDecision, BranchingDecisionListener
from tspbp.core.node import BPNode

logger = logging.getLogger(__name__)


class InconsistentStateError(RuntimeError):
    """A decision failed to apply or revert; the applied state is unknown."""


def common_prefix_length(
    first: Tuple[BranchingDecision, ...],
    second: Tuple[BranchingDecision, ...],
) -> int:
    """Number of leading decisions shared by two decision paths."""
    length = 0
    for a, b in zip(first, second):
        if a is not b:
            break
        length += 1
    return length


class BranchAndPriceStateManager:
    """
    Applies and reverts branching decisions as the search moves between nodes.

    The change history is a stack holding the decisions currently applied to
    the state; it always equals current_node.branching_decisions.

    If a decision or a listener raises, the exception propagates and the
    manager refuses any further transition: subsequent decisions may rely
    on the failed one, so the search has to be aborted.

    Not thread safe; parallel searches need one manager (and one state) per
    worker.

    Example:
        restrictions = EdgeRestrictions()
        manager = BranchAndPriceStateManager(tree.root(), restrictions)
        manager.add_listener(pricing_problem)

        while not selector.empty():
            node = selector.select_next()
            manager.transition(node)
            ...  # solve the relaxation of node

        manager.restore()
    """

    def __init__(self, root_node: BPNode, state: Any = None):
        """
        Initialize the manager at the root node.

        Args:
            root_node: Root of the search tree; nothing is applied yet
            state: Handle passed to BranchingDecision.apply()/revert()
        """
        if root_node is None:
            raise ValueError("root_node is required")
        self._root_node = root_node
        self._current_node = root_node
        self._state = state
        self._change_history: List[BranchingDecision] = []
        self._listeners: List[BranchingDecisionListener] = []
        self._consistent = True

    @property
    def current_node(self) -> BPNode:
        """The node whose decisions are currently applied."""
        return self._current_node

    @property
    def state(self) -> Any:
        return self._state

    @property
    def history(self) -> Tuple[BranchingDecision, ...]:
        """Applied decisions, root first."""
        return tuple(self._change_history)

    @property
    def depth(self) -> int:
        """Number of applied decisions."""
        return len(self._change_history)

    @property
    def is_consistent(self) -> bool:
        """False once a decision or listener has failed."""
        return self._consistent

    @property
    def listeners(self) -> Tuple[BranchingDecisionListener, ...]:
        return tuple(self._listeners)

    def add_listener(self, listener: BranchingDecisionListener) -> None:
        """
        Register a listener.

        Listeners are called in registration order. Registering the same
        listener twice makes it receive every notification twice.
        """
        self._listeners.append(listener)

    def remove_listener(self, listener: BranchingDecisionListener) -> None:
        """Unregister a listener (its first registration); unknown listeners are ignored."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    def transition(self, next_node: BPNode) -> None:
        """
        Prepare the state for solving next_node.

        Args:
            next_node: Node of the same tree as the current node
        """
        self._check_consistent()
        current = self._current_node
        target = next_node.branching_decisions

        mutual = common_prefix_length(current.branching_decisions, target)
        logger.debug(
            "Transition %d -> %d: %d applied, %d shared, %d to apply",
            current.id, next_node.id, len(self._change_history), mutual,
            len(target) - mutual,
        )

        # 1. Revert down to the nearest common ancestor.
        while len(self._change_history) > mutual:
            self._revert(self._change_history.pop())

        # 2. Apply the decisions leading from there to next_node.
        for decision in target[len(self._change_history):]:
            self._change_history.append(decision)
            self._apply(decision)

        self._current_node = next_node

    def restore(self) -> None:
        """Revert every applied decision, returning to the root state."""
        self._check_consistent()
        logger.debug("Restoring root state: reverting %d decisions", len(self._change_history))
        while self._change_history:
            self._revert(self._change_history.pop())
        self._current_node = self._root_node

    def _apply(self, decision: BranchingDecision) -> None:
        logger.debug("Performing branching decision %r", decision)
        try:
            decision.apply(self._state)
            for listener in self._listeners:
                listener.branching_decision_performed(decision)
        except Exception:
            self._consistent = False
            raise

    def _revert(self, decision: BranchingDecision) -> None:
        logger.debug("Reverting branching decision %r", decision)
        try:
            decision.revert(self._state)
            for listener in self._listeners:
                listener.branching_decision_reversed(decision)
        except Exception:
            self._consistent = False
            raise

    def _check_consistent(self) -> None:
        if not self._consistent:
            raise InconsistentStateError(
                "A branching decision failed earlier; the search state is "
                "inconsistent and the search must be aborted"
            )

    def __repr__(self) -> str:
        return (
            f"<BranchAndPriceStateManager node={self._current_node.id} "
            f"depth={len(self._change_history)} listeners={len(self._listeners)}>"
        )
