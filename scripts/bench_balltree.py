#!/usr/bin/env python3
"""
Benchmark harness for the online ball tree.

Measures insert, query and removal time, leaf distance counts, and
recall@k against an exact oracle (sklearn's static BallTree while the
tree is full, the brute force index after removals).
"""

import argparse
import json
import logging
import time
from pathlib import Path
import sys

import numpy as np
import pandas as pd
from sklearn.neighbors import BallTree
from tqdm import tqdm
from typing import List

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from online_balltree import OnlineBallTree
from online_balltree.baselines import BruteForceIndex
from online_balltree.logging_config import setup_logging
from online_balltree.utils.profiling import Profiler

logger = logging.getLogger("online_balltree.bench")


def summarize(values: List[float]) -> dict:
    """Return summary statistics for a list of numeric values."""
    arr = np.asarray(values, dtype=np.float64)
    if arr.size == 0:
        return {"mean": 0.0, "p50": 0.0, "p95": 0.0, "min": 0.0, "max": 0.0}
    return {
        "mean": float(np.mean(arr)),
        "p50": float(np.percentile(arr, 50)),
        "p95": float(np.percentile(arr, 95)),
        "min": float(np.min(arr)),
        "max": float(np.max(arr)),
    }


def recall(found: List[int], expected: List[int]) -> float:
    if not expected:
        return 1.0
    return len(set(found) & set(expected)) / len(expected)


def run_queries(tree: OnlineBallTree, queries: np.ndarray, k: int, desc: str):
    """Time k-NN queries; return (results, per-query times, leaf distance counts)."""
    results, times, dist_counts = [], [], []
    for q in tqdm(queries, desc=desc, leave=False):
        before = tree.profiler.get_count("leaf_distance")
        t0 = time.perf_counter()
        results.append(tree.k_nearest_neighbour_query(q, k) or [])
        times.append(time.perf_counter() - t0)
        dist_counts.append(tree.profiler.get_count("leaf_distance") - before)
    return results, times, dist_counts


def main() -> int:
    parser = argparse.ArgumentParser(description="Benchmark the online ball tree")
    parser.add_argument("--n", type=int, default=5000, help="Number of points")
    parser.add_argument("--d", type=int, default=8, help="Dimensionality")
    parser.add_argument("--k", type=int, default=10, help="Number of neighbors")
    parser.add_argument("--n-queries", type=int, default=200, help="Number of queries")
    parser.add_argument(
        "--remove-fraction",
        type=float,
        default=0.5,
        help="Fraction of points removed before the second query round",
    )
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    parser.add_argument("--out", type=str, default=None, help="Optional JSON output path")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args()

    if args.n < 1 or args.d < 1 or args.n_queries < 1 or args.k < 1:
        raise ValueError("--n, --d, --k and --n-queries must be positive")
    if not 0.0 <= args.remove_fraction < 1.0:
        raise ValueError("--remove-fraction must be in [0, 1)")

    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    rng = np.random.default_rng(args.seed)
    X = rng.standard_normal((args.n, args.d))
    queries = rng.standard_normal((args.n_queries, args.d))

    # Profiling is always on here since query stats rely on its counters.
    tree = OnlineBallTree(args.d, profiler=Profiler(enabled=True))
    oracle = BruteForceIndex(args.d)

    insert_times = []
    for i, x in enumerate(tqdm(X, desc="insert")):
        t0 = time.perf_counter()
        tree.insert(x, i)
        insert_times.append(time.perf_counter() - t0)
        oracle.insert(x, i)
    logger.info(f"Inserted {tree.size()} points, height {tree.height()}")

    static_tree = BallTree(X)
    _, expected = static_tree.query(queries, k=min(args.k, args.n))

    full_results, full_times, full_counts = run_queries(tree, queries, args.k, "query")
    full_recalls = [recall(found, list(exp)) for found, exp in zip(full_results, expected)]

    n_remove = int(args.n * args.remove_fraction)
    remove_order = rng.permutation(args.n)[:n_remove]
    remove_times = []
    for i in tqdm(remove_order, desc="remove"):
        t0 = time.perf_counter()
        payload = tree.remove(X[i])
        remove_times.append(time.perf_counter() - t0)
        oracle.remove(X[i])
        if payload != i:
            logger.warning(f"Removing point {i} returned {payload!r}")
    logger.info(f"Removed {n_remove} points, {tree.size()} left, height {tree.height()}")

    after_results, after_times, after_counts = run_queries(
        tree, queries, args.k, "query after removal"
    )
    after_recalls = [
        recall(found, oracle.k_nearest_neighbour_query(q, args.k) or [])
        for found, q in zip(after_results, queries)
    ]

    table = pd.DataFrame(
        [
            {"phase": "insert", **summarize(insert_times)},
            {"phase": "query", **summarize(full_times)},
            {"phase": "remove", **summarize(remove_times)},
            {"phase": "query after removal", **summarize(after_times)},
        ]
    ).set_index("phase")

    result = {
        "config": {
            "n": args.n,
            "d": args.d,
            "k": args.k,
            "n_queries": args.n_queries,
            "remove_fraction": args.remove_fraction,
            "seed": args.seed,
        },
        "metrics": {
            "time_seconds": table.to_dict(orient="index"),
            "recall": summarize(full_recalls),
            "recall_after_removal": summarize(after_recalls),
            "dist_count": summarize(full_counts),
            "dist_count_after_removal": summarize(after_counts),
        },
        "profile": tree.profiler.summary(),
    }

    print("OnlineBallTree benchmark")
    print(f"n={args.n} d={args.d} k={args.k} queries={args.n_queries}")
    print(table.to_string(float_format=lambda v: f"{v:.6f}"))
    print(
        f"recall@{args.k}: mean={result['metrics']['recall']['mean']:.4f} "
        f"after removal={result['metrics']['recall_after_removal']['mean']:.4f}"
    )
    print(
        "dist_count: mean={mean:.1f} min={min:.0f} max={max:.0f}".format(
            **result["metrics"]["dist_count"]
        )
    )

    if args.out:
        out_path = Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        with out_path.open("w", encoding="utf-8") as f:
            json.dump(result, f, indent=2)
        print(f"Wrote results to {out_path}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
