"""
Branch-and-price search driver.

This module provides the BranchAndPrice driver that coordinates:
- Tree management (BPTree)
- Node selection (NodeSelector)
- State transitions between nodes (BranchAndPriceStateManager)
- Subtour separation (SubtourSeparator)
- Branching strategies (BranchingStrategy)
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable, Dict, List, Optional

from tspbp.branching.base import BranchingDecisionListener, BranchingStrategy
from tspbp.branching.edge import EdgeBranching
from tspbp.core.manipulator import BranchAndPriceStateManager
from tspbp.core.node import BPNode, NodeStatus
from tspbp.core.selection import NodeSelector, create_selector
from tspbp.core.tree import BPTree
from tspbp.separation.cut import SubtourCut
from tspbp.separation.separator import SubtourSeparator
from tspbp.solver.relaxation import RelaxationResult, RelaxationSolver

logger = logging.getLogger(__name__)

CUT_MODES = ("single", "any", "most_violated")


class BPStatus(Enum):
    """Status of the search."""
    OPTIMAL = auto()
    FEASIBLE = auto()  # Limit reached with incumbent
    INFEASIBLE = auto()
    TIME_LIMIT = auto()
    NODE_LIMIT = auto()
    NOT_SOLVED = auto()


@dataclass
class BPConfig:
    """Configuration for the branch-and-price driver."""
    # Termination criteria
    max_time: float = 3600.0  # seconds
    max_nodes: int = 0  # 0 = unlimited
    gap_tolerance: float = 1e-6

    # Node selection
    node_selection: str = "best_first"  # best_first, depth_first, breadth_first

    # Separation at each node
    cut_mode: str = "most_violated"  # single, any, most_violated
    max_cuts_per_round: int = 10
    max_cut_rounds: int = 100  # per node, while the solution is fractional

    # Numerics
    integrality_tolerance: float = 1e-6

    # Logging
    verbose: bool = False
    log_frequency: int = 10  # Log every N nodes

    # Callbacks
    node_callback: Optional[Callable[["BPNode", "BranchAndPrice"], None]] = None

    def __post_init__(self):
        if self.cut_mode not in CUT_MODES:
            raise ValueError(f"cut_mode must be one of {CUT_MODES}, got {self.cut_mode!r}")
        if self.max_cuts_per_round < 1:
            raise ValueError("max_cuts_per_round must be at least 1")


@dataclass
class BPSolution:
    """Result of a branch-and-price search."""
    status: BPStatus
    objective: float = float("inf")
    gap: float = float("inf")
    edge_values: Dict[Any, float] = field(default_factory=dict)

    # Statistics
    nodes_explored: int = 0
    nodes_pruned: int = 0
    cuts_added: int = 0
    total_time: float = 0.0
    time_in_relaxation: float = 0.0
    time_in_separation: float = 0.0

    # Best bounds
    lower_bound: float = float("-inf")
    upper_bound: float = float("inf")

    # Tree info
    max_depth: int = 0

    def is_optimal(self) -> bool:
        """Check if solution is proven optimal."""
        return self.status == BPStatus.OPTIMAL

    def is_feasible(self) -> bool:
        """Check if a feasible solution was found."""
        return bool(self.edge_values) and self.status in (
            BPStatus.OPTIMAL,
            BPStatus.FEASIBLE,
            BPStatus.TIME_LIMIT,
            BPStatus.NODE_LIMIT,
        )


class BranchAndPrice:
    """
    Branch-and-price driver for TSP-style models.

    At every node the driver moves the relaxation state to the node,
    solves the relaxation, separates violated subtour cuts and either
    adds them (and re-solves), accepts an integral tour, or branches.

    Example:
        relaxation = TSPRelaxation(instance)
        solver = BranchAndPrice(
            relaxation,
            SubtourSeparator(instance.graph),
            branching_strategy=EdgeBranching(),
        )
        solution = solver.solve(time_limit=60)
        print(f"Optimal: {solution.objective}, Nodes: {solution.nodes_explored}")
    """

    def __init__(
        self,
        relaxation: RelaxationSolver,
        separator: SubtourSeparator,
        branching_strategy: Optional[BranchingStrategy] = None,
        node_selection: Optional[NodeSelector] = None,
        config: Optional[BPConfig] = None,
        listeners: Optional[List[BranchingDecisionListener]] = None,
    ):
        """
        Initialize the driver.

        Args:
            relaxation: Relaxation solved at each node
            separator: Subtour separator over the problem graph
            branching_strategy: Strategy for selecting branching decisions
            node_selection: Node selection policy (default: from config)
            config: Driver configuration
            listeners: Notified of every decision performed or reversed
        """
        self.relaxation = relaxation
        self.listeners = list(listeners or [])
        self.separator = separator
        self.config = config or BPConfig()
        self.branching_strategy = branching_strategy or EdgeBranching(
            integrality_tolerance=self.config.integrality_tolerance
        )

        if node_selection is not None:
            self.node_selector = node_selection
        else:
            self.node_selector = create_selector(self.config.node_selection)

        # State
        self._tree: Optional[BPTree] = None
        self._state_manager: Optional[BranchAndPriceStateManager] = None
        self._incumbent_values: Dict[Any, float] = {}
        self._solution: Optional[BPSolution] = None
        self._start_time: float = 0.0
        self._relaxation_time: float = 0.0
        self._separation_time: float = 0.0
        self._cuts_added = 0

    def solve(
        self,
        time_limit: Optional[float] = None,
        node_limit: Optional[int] = None,
    ) -> BPSolution:
        """
        Run the search.

        Args:
            time_limit: Maximum solving time (seconds)
            node_limit: Maximum number of nodes to explore

        Returns:
            BPSolution with status, objective, and statistics
        """
        if time_limit is not None:
            self.config.max_time = time_limit
        if node_limit is not None:
            self.config.max_nodes = node_limit

        self._start_time = time.time()
        self._relaxation_time = 0.0
        self._separation_time = 0.0
        self._cuts_added = 0
        self._incumbent_values = {}

        self._tree = BPTree()
        root = self._tree.root()
        self._state_manager = BranchAndPriceStateManager(root, self.relaxation.state)
        for listener in self.listeners:
            self._state_manager.add_listener(listener)
        self.node_selector.clear()
        self.node_selector.add_node(root)

        nodes_explored = 0
        try:
            while not self.node_selector.empty():
                if self._check_termination(nodes_explored):
                    break

                node = self.node_selector.select_next()
                if node is None:
                    break

                nodes_explored += 1
                node.status = NodeStatus.PROCESSING

                if self.config.verbose and nodes_explored % self.config.log_frequency == 0:
                    self._log_progress(nodes_explored, node)

                self._state_manager.transition(node)
                self._process_node(node)

                if self.config.node_callback:
                    self.config.node_callback(node, self)

            # Anything still open bounds the optimum from below.
            self._tree.global_lower_bound = min(
                self.node_selector.best_bound(), self._tree.global_upper_bound
            )
        finally:
            if self._state_manager.is_consistent:
                self._state_manager.restore()

        self._solution = self._build_solution(nodes_explored)
        return self._solution

    def _check_termination(self, nodes_explored: int) -> bool:
        """Check if we should terminate."""
        elapsed = time.time() - self._start_time
        if elapsed >= self.config.max_time:
            return True

        if self.config.max_nodes > 0 and nodes_explored >= self.config.max_nodes:
            return True

        return False

    def _process_node(self, node: BPNode) -> None:
        """Solve a node: cutting-plane loop, then accept, prune or branch."""
        result = self._solve_with_cuts(node)

        if not result.feasible:
            self._tree.mark_processed(node, NodeStatus.PRUNED_INFEASIBLE)
            return

        node.lp_value = result.objective
        node.lower_bound = max(node.lower_bound, result.objective)

        if node.lower_bound >= self._tree.global_upper_bound - self.config.gap_tolerance:
            self._tree.mark_processed(node, NodeStatus.PRUNED_BOUND)
            return

        if result.is_integer(self.config.integrality_tolerance):
            node.is_integer = True
            node.set_solution(result.edge_values)
            self._tree.mark_processed(node, NodeStatus.INTEGER)

            self._tree.set_incumbent(node)
            self._incumbent_values = dict(result.edge_values)
            logger.debug("New incumbent %.6g at node %d", node.lp_value, node.id)

            self._tree.prune_by_bound()
            self.node_selector.prune()
            return

        candidate = self.branching_strategy.select_best_candidate(node, result.edge_values)
        if candidate is None:
            # Fractional but nothing to branch on: the strategy cannot split it.
            logger.warning("No branching candidate at fractional node %d", node.id)
            self._tree.mark_processed(node, NodeStatus.FATHOMED)
            return

        logger.debug("Branching node %d on %s", node.id, candidate.description)
        children = self._tree.create_children(node, candidate.decisions)
        self.node_selector.add_nodes(children)

    def _solve_with_cuts(self, node: BPNode) -> RelaxationResult:
        """Alternate between solving the relaxation and adding violated cuts."""
        rounds = 0
        while True:
            start = time.time()
            result = self.relaxation.solve()
            self._relaxation_time += time.time() - start

            if not result.feasible:
                return result
            if result.objective >= self._tree.global_upper_bound - self.config.gap_tolerance:
                return result

            start = time.time()
            cuts = self._separate(result.edge_values)
            self._separation_time += time.time() - start
            if not cuts:
                return result

            # An integral solution with a subtour cannot be branched on, so
            # integral solutions are always cut off.
            integral = result.is_integer(self.config.integrality_tolerance)
            if rounds >= self.config.max_cut_rounds and not integral:
                return result

            added = self.relaxation.add_cuts(cuts)
            self._cuts_added += added
            rounds += 1
            logger.debug("Node %d round %d: added %d cuts", node.id, rounds, added)
            if added == 0:
                raise RuntimeError(
                    f"Relaxation rejected all {len(cuts)} violated cuts at node {node.id}"
                )

    def _separate(self, edge_values: Dict[Any, float]) -> List[SubtourCut]:
        mode = self.config.cut_mode
        if mode == "single":
            cut = self.separator.separate_subtour(edge_values)
            return [cut] if cut is not None else []
        elif mode == "any":
            return self.separator.separate_subtours(edge_values, self.config.max_cuts_per_round)
        return self.separator.separate_most_violated_subtours(
            edge_values, self.config.max_cuts_per_round
        )

    def _log_progress(self, nodes: int, node: BPNode) -> None:
        """Log solving progress."""
        elapsed = time.time() - self._start_time
        ub = self._tree.global_upper_bound
        lb = min(self.node_selector.best_bound(), ub, node.lower_bound)
        open_nodes = self.node_selector.size()

        print(
            f"Node {nodes:6d} | "
            f"Depth {node.depth:4d} | "
            f"LB {lb:12.4f} | "
            f"UB {ub:12.4f} | "
            f"Cuts {self._cuts_added:6d} | "
            f"Open {open_nodes:5d} | "
            f"Time {elapsed:8.1f}s"
        )

    def _build_solution(self, nodes_explored: int) -> BPSolution:
        """Build the final solution."""
        elapsed = time.time() - self._start_time
        incumbent = self._tree.incumbent()

        if self.node_selector.empty() or self._tree.gap() <= self.config.gap_tolerance:
            status = BPStatus.OPTIMAL if incumbent is not None else BPStatus.INFEASIBLE
        elif elapsed >= self.config.max_time:
            status = BPStatus.TIME_LIMIT
        elif self.config.max_nodes > 0 and nodes_explored >= self.config.max_nodes:
            status = BPStatus.NODE_LIMIT
        else:
            status = BPStatus.FEASIBLE if incumbent is not None else BPStatus.NOT_SOLVED

        stats = self._tree.stats
        return BPSolution(
            status=status,
            objective=incumbent.lp_value if incumbent else float("inf"),
            gap=self._tree.gap(),
            edge_values=dict(self._incumbent_values),
            nodes_explored=nodes_explored,
            nodes_pruned=stats.nodes_pruned_bound + stats.nodes_pruned_infeasible,
            cuts_added=self._cuts_added,
            total_time=elapsed,
            time_in_relaxation=self._relaxation_time,
            time_in_separation=self._separation_time,
            lower_bound=self._tree.global_lower_bound,
            upper_bound=self._tree.global_upper_bound,
            max_depth=stats.max_depth,
        )

    @property
    def tree(self) -> Optional[BPTree]:
        """Get the search tree."""
        return self._tree

    @property
    def state_manager(self) -> Optional[BranchAndPriceStateManager]:
        """The state manager of the current (or last) search."""
        return self._state_manager

    @property
    def solution(self) -> Optional[BPSolution]:
        """Get the current solution."""
        return self._solution
