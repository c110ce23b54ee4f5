#!/usr/bin/env python3
"""
Script to run the TSP branch-and-cut solver.

Usage:
    python scripts/run_tsp_bp.py [num_cities] [--seed N] [--points FILE]

Examples:
    python scripts/run_tsp_bp.py                         # 15 random cities
    python scripts/run_tsp_bp.py 30 --seed 7             # 30 random cities
    python scripts/run_tsp_bp.py --points cities.txt     # one "x y" pair per line
    python scripts/run_tsp_bp.py 20 --cut-mode single --debug
"""

import argparse
import logging
import os
import random
import sys
import time
from datetime import datetime

# Add paths for development
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from tspbp.applications.tsp import TSPConfig, TSPInstance, solve_tsp_bp


def print_header(title):
    print()
    print("=" * 70)
    print(f" {title}")
    print("=" * 70)


def print_section(title):
    print()
    print("-" * 50)
    print(f" {title}")
    print("-" * 50)


def load_points(path):
    points = []
    with open(path) as f:
        for line in f:
            parts = line.split()
            if len(parts) >= 2:
                points.append((float(parts[-2]), float(parts[-1])))
    return points


def random_points(num_cities, seed):
    rng = random.Random(seed)
    return [(rng.uniform(0, 1000), rng.uniform(0, 1000)) for _ in range(num_cities)]


def main():
    parser = argparse.ArgumentParser(description="Run TSP branch-and-cut solver")
    parser.add_argument("num_cities", nargs="?", type=int, default=15,
                        help="Number of random cities (default: 15)")
    parser.add_argument("--seed", type=int, default=0,
                        help="Random seed for generated cities (default: 0)")
    parser.add_argument("--points", default=None,
                        help="File with one 'x y' coordinate pair per line")
    parser.add_argument("--max-nodes", type=int, default=0,
                        help="Maximum nodes to explore, 0 for unlimited (default: 0)")
    parser.add_argument("--max-time", type=float, default=300.0,
                        help="Maximum time in seconds (default: 300)")
    parser.add_argument("--node-selection", default="best_first",
                        choices=["best_first", "depth_first", "breadth_first"])
    parser.add_argument("--cut-mode", default="most_violated",
                        choices=["single", "any", "most_violated"])
    parser.add_argument("--max-cuts", type=int, default=10,
                        help="Maximum cuts added per round (default: 10)")
    parser.add_argument("--min-cut", default="push_relabel",
                        help="s-t min-cut algorithm (default: push_relabel)")
    parser.add_argument("--debug", action="store_true",
                        help="Enable debug logging")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    print_header("TSP Branch-and-Cut Solver")
    print(f"Timestamp: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print(f"Python: {sys.version.split()[0]}")

    print_section("Instance")
    if args.points:
        try:
            points = load_points(args.points)
        except OSError as e:
            print(f"ERROR loading points: {e}")
            sys.exit(1)
        name = os.path.basename(args.points)
    else:
        points = random_points(args.num_cities, args.seed)
        name = f"random{args.num_cities}_s{args.seed}"

    instance = TSPInstance.from_coordinates(points, name=name)
    print(f"Instance: {instance.name}")
    print(f"  Cities: {instance.num_cities}")
    print(f"  Edges: {len(instance.edges())}")

    print_section("Branch-and-Cut")
    config = TSPConfig(
        max_time=args.max_time,
        max_nodes=args.max_nodes,
        node_selection=args.node_selection,
        cut_mode=args.cut_mode,
        max_cuts_per_round=args.max_cuts,
        min_cut_algorithm=args.min_cut,
        verbose=True,
    )
    print(f"Config: selection={config.node_selection}, cut_mode={config.cut_mode}, "
          f"min_cut={config.min_cut_algorithm}")
    print()

    start = time.time()
    solution = solve_tsp_bp(instance, config)
    elapsed = time.time() - start

    print_section("Results")
    bp = solution.bp_solution
    print(f"  Status: {solution.status.name}")
    print(f"  Tour length: {solution.cost:.4f}")
    print(f"  Lower bound: {bp.lower_bound:.4f}")
    print(f"  Gap: {bp.gap * 100:.4f}%")
    print(f"  Nodes explored: {bp.nodes_explored}")
    print(f"  Cuts added: {bp.cuts_added}")
    print(f"  Time in LP: {bp.time_in_relaxation:.2f}s")
    print(f"  Time in separation: {bp.time_in_separation:.2f}s")
    print(f"  Total time: {elapsed:.2f}s")
    if solution.tour:
        print(f"\nTour: {solution.tour}")


if __name__ == "__main__":
    main()
