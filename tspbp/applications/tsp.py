"""
Branch-and-cut solver for the symmetric Traveling Salesman Problem (TSP).

For the TSP, we use:
- Relaxation: Degree-2 LP over the complete graph, x_e in [0, 1]
- Cuts: Subtour-elimination constraints from SubtourSeparator
- Branching: Edge branching (fix / remove the most fractional edge)

Branching decisions act on the EdgeRestrictions of the relaxation; the LP
reads its column bounds from them, so moving between search nodes never
rebuilds anything but the bounds.
"""

import itertools
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

import networkx as nx

from tspbp.branching.base import BranchingDecision, BranchingDecisionListener
from tspbp.branching.edge import EdgeBranching, EdgeRestrictions
from tspbp.core.selection import create_selector
from tspbp.separation.cut import SubtourCut
from tspbp.separation.mincut import create_min_cut_algorithm
from tspbp.separation.separator import SubtourSeparator
from tspbp.solver import BPConfig, BPSolution, BPStatus, BranchAndPrice
from tspbp.solver.relaxation import RelaxationResult, RelaxationSolver

Edge = Tuple[int, int]


@dataclass
class TSPInstance:
    """A symmetric TSP instance given by its cost matrix."""
    costs: List[List[float]]
    name: str = "tsp"

    def __post_init__(self):
        n = len(self.costs)
        if n < 3:
            raise ValueError(f"A tour needs at least 3 cities, got {n}")
        if any(len(row) != n for row in self.costs):
            raise ValueError("Cost matrix must be square")

    @classmethod
    def from_coordinates(
        cls,
        points: Sequence[Tuple[float, float]],
        name: str = "tsp",
    ) -> "TSPInstance":
        """Euclidean instance from 2D points."""
        costs = [[math.dist(p, q) for q in points] for p in points]
        return cls(costs=costs, name=name)

    @property
    def num_cities(self) -> int:
        return len(self.costs)

    def edges(self) -> List[Edge]:
        """All edges (i, j) with i < j."""
        return list(itertools.combinations(range(self.num_cities), 2))

    def cost(self, edge: Edge) -> float:
        i, j = edge
        return self.costs[i][j]

    def graph(self) -> nx.Graph:
        """Complete graph with edge attribute ``cost``."""
        graph = nx.Graph()
        graph.add_nodes_from(range(self.num_cities))
        for edge in self.edges():
            graph.add_edge(*edge, cost=self.cost(edge))
        return graph

    def tour_cost(self, tour: Sequence[int]) -> float:
        """Length of a closed tour given as a city sequence."""
        return sum(
            self.costs[tour[k]][tour[(k + 1) % len(tour)]] for k in range(len(tour))
        )


class TSPRelaxation(RelaxationSolver, BranchingDecisionListener):
    """
    Degree-2 LP relaxation with subtour cuts, solved with HiGHS.

    min  sum_e c_e x_e
    s.t. sum_{e in delta(v)} x_e  = 2   for every city v
         sum_{e in delta(S)} x_e >= 2   for every separated cut S
         l_e <= x_e <= u_e              bounds from the branching decisions
    """

    def __init__(self, instance: TSPInstance, restrictions: Optional[EdgeRestrictions] = None):
        self.instance = instance
        self._edges = instance.edges()
        self._restrictions = restrictions or EdgeRestrictions()
        self._cuts: List[SubtourCut] = []
        self._bounds: Optional[List[Tuple[float, float]]] = None
        self.num_solves = 0

    @property
    def state(self) -> EdgeRestrictions:
        return self._restrictions

    @property
    def cuts(self) -> List[SubtourCut]:
        return list(self._cuts)

    def branching_decision_performed(self, decision: BranchingDecision) -> None:
        self._bounds = None

    def branching_decision_reversed(self, decision: BranchingDecision) -> None:
        self._bounds = None

    def add_cuts(self, cuts: List[SubtourCut]) -> int:
        """Add cuts not yet in the LP; a cut and its complement are the same row."""
        n = self.instance.num_cities
        known = set()
        for cut in self._cuts:
            known.add(cut.cut_set)
            known.add(frozenset(range(n)) - cut.cut_set)

        added = 0
        for cut in cuts:
            if cut.cut_set in known:
                continue
            self._cuts.append(cut)
            known.add(cut.cut_set)
            known.add(frozenset(range(n)) - cut.cut_set)
            added += 1
        return added

    def _column_bounds(self) -> List[Tuple[float, float]]:
        if self._bounds is None:
            self._bounds = [self._restrictions.bounds(edge) for edge in self._edges]
        return self._bounds

    def solve(self) -> RelaxationResult:
        """Build and solve the LP under the current restrictions and cuts."""
        try:
            import highspy
        except ImportError:
            raise ImportError("HiGHS is required. Install with: pip install highspy")

        n = self.instance.num_cities
        self.num_solves += 1

        highs = highspy.Highs()
        highs.setOptionValue('output_flag', False)
        highs.setOptionValue('log_to_console', False)
        highs.changeObjectiveSense(highspy.ObjSense.kMinimize)

        # Row 0 to n-1: degree constraints (= 2)
        for _ in range(n):
            highs.addRow(2.0, 2.0, 0, [], [])

        # Row n to n + n_cuts - 1: subtour cuts (>= 2)
        for _ in self._cuts:
            highs.addRow(2.0, highspy.kHighsInf, 0, [], [])

        bounds = self._column_bounds()
        for col, (i, j) in enumerate(self._edges):
            indices = [i, j]
            values = [1.0, 1.0]
            for cut_idx, cut in enumerate(self._cuts):
                if (i in cut.cut_set) != (j in cut.cut_set):
                    indices.append(n + cut_idx)
                    values.append(1.0)

            lower, upper = bounds[col]
            highs.addCol(
                float(self.instance.cost((i, j))), lower, upper, len(indices), indices, values
            )

        highs.run()
        status = highs.getModelStatus()

        if status != highspy.HighsModelStatus.kOptimal:
            return RelaxationResult(feasible=False)

        info = highs.getInfo()
        sol = highs.getSolution()
        edge_values = {
            edge: sol.col_value[col]
            for col, edge in enumerate(self._edges)
            if sol.col_value[col] > 1e-9
        }
        return RelaxationResult(
            feasible=True,
            objective=info.objective_function_value,
            edge_values=edge_values,
        )


@dataclass
class TSPConfig:
    """Configuration for the TSP solver."""
    # Termination
    max_time: float = 600.0
    max_nodes: int = 0  # 0 = unlimited

    # Search
    node_selection: str = "best_first"

    # Cutting
    cut_mode: str = "most_violated"
    max_cuts_per_round: int = 10
    min_cut_algorithm: str = "push_relabel"

    # Logging
    verbose: bool = False


@dataclass
class TSPSolution:
    """Tour found by the TSP solver."""
    status: BPStatus
    tour: List[int] = field(default_factory=list)
    cost: float = float("inf")
    bp_solution: Optional[BPSolution] = None

    def is_optimal(self) -> bool:
        return self.status == BPStatus.OPTIMAL


def extract_tour(edge_values: Dict[Any, float], num_cities: int) -> List[int]:
    """
    Follow the edges of an integral solution starting at city 0.

    Returns an empty list if the edges do not form a single tour.
    """
    neighbors: Dict[int, List[int]] = {v: [] for v in range(num_cities)}
    for (i, j), value in edge_values.items():
        if value > 0.5:
            neighbors[i].append(j)
            neighbors[j].append(i)
    if any(len(adj) != 2 for adj in neighbors.values()):
        return []

    tour = [0]
    previous, current = None, 0
    while True:
        a, b = neighbors[current]
        following = b if a == previous else a
        if following == 0:
            break
        tour.append(following)
        previous, current = current, following

    return tour if len(tour) == num_cities else []


def solve_tsp_bp(
    instance: TSPInstance,
    config: Optional[TSPConfig] = None,
) -> TSPSolution:
    """
    Solve a TSP instance to optimality by branch-and-cut.

    Args:
        instance: The TSP instance
        config: Solver configuration

    Returns:
        TSPSolution with the best tour found

    Example:
        instance = TSPInstance.from_coordinates([(0, 0), (0, 1), (1, 1), (1, 0)])
        solution = solve_tsp_bp(instance)
        print(f"Tour {solution.tour} of length {solution.cost:.2f}")
    """
    config = config or TSPConfig()

    relaxation = TSPRelaxation(instance)
    separator = SubtourSeparator(
        instance.graph(),
        min_cut_algorithm=create_min_cut_algorithm(config.min_cut_algorithm),
    )
    bp_config = BPConfig(
        max_time=config.max_time,
        max_nodes=config.max_nodes,
        node_selection=config.node_selection,
        cut_mode=config.cut_mode,
        max_cuts_per_round=config.max_cuts_per_round,
        verbose=config.verbose,
    )
    solver = BranchAndPrice(
        relaxation,
        separator,
        branching_strategy=EdgeBranching(),
        node_selection=create_selector(config.node_selection),
        config=bp_config,
        listeners=[relaxation],
    )

    bp_solution = solver.solve()

    tour = extract_tour(bp_solution.edge_values, instance.num_cities)
    if config.verbose:
        print(f"TSP {instance.name}: {bp_solution.status.name}")
        print(f"  Nodes explored: {bp_solution.nodes_explored}")
        print(f"  Cuts added: {bp_solution.cuts_added}")
        if tour:
            print(f"  Tour length: {instance.tour_cost(tour):.4f}")

    return TSPSolution(
        status=bp_solution.status,
        tour=tour,
        cost=instance.tour_cost(tour) if tour else float("inf"),
        bp_solution=bp_solution,
    )
