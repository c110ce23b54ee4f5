"""
Subtour separation.

Finds violated subtour-elimination constraints in fractional solutions
using global (Stoer-Wagner) and s-t (max-flow) minimum cuts.
"""

from tspbp.separation.cut import SubtourCut
from tspbp.separation.graph import PRECISION, WeightedCutGraph
from tspbp.separation.mincut import (
    BoykovKolmogorovMinCut,
    DinitzMinCut,
    EdmondsKarpMinCut,
    FlowMinCut,
    MinCutAlgorithm,
    PushRelabelMinCut,
    ShortestAugmentingPathMinCut,
    create_min_cut_algorithm,
)
from tspbp.separation.separator import SubtourSeparator

__all__ = [
    "PRECISION",
    "SubtourCut",
    "SubtourSeparator",
    "WeightedCutGraph",
    "MinCutAlgorithm",
    "FlowMinCut",
    "PushRelabelMinCut",
    "EdmondsKarpMinCut",
    "ShortestAugmentingPathMinCut",
    "DinitzMinCut",
    "BoykovKolmogorovMinCut",
    "create_min_cut_algorithm",
]
