import sys
import os
import time
import argparse

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from maze_stepper.algo.base import COMPLETE, PROGRESS
from maze_stepper.core.session import new_session

# ==========================================
# GLOBAL CONFIGURATION
# Add or remove solver names here to include/exclude them from the race.
# ==========================================
ENABLED_SOLVERS = [
    "frontier",  # Dijkstra, one expansion per step
    "wall",      # Wall Follower (Right)
]


def run_solver(session, name):
    """Runs a solver to completion on the session's maze; returns (status, calls)."""
    if name == "wall":
        return session.solve_with_wall_follower(), 1

    calls = 0
    status = PROGRESS
    while status == PROGRESS:
        status = session.solver_step()
        calls += 1
    return status, calls


def run_benchmark():
    parser = argparse.ArgumentParser(description="Solver Benchmark")
    parser.add_argument("--rows", type=int, default=101, help="Maze Rows")
    parser.add_argument("--cols", type=int, default=101, help="Maze Columns")
    parser.add_argument("--seed", type=int, default=None, help="Random Seed")
    args = parser.parse_args()

    print(f"=== MAZE SOLVER BENCHMARK ===")
    print(f"Size: {args.rows}x{args.cols}")
    print(f"Solvers: {', '.join(ENABLED_SOLVERS)}")
    print("-" * 50)

    # 1. Generate Maze
    print("Generating Maze (Recursive Backtracker)...")
    t0 = time.time()
    session = new_session(args.rows, args.cols, seed=args.seed)
    gen_steps = 0
    while session.generation_step() != COMPLETE:
        gen_steps += 1
    gen_time = time.time() - t0
    gen_metrics = session.metrics_snapshot()
    print(f"Generation Complete in {gen_time:.4f}s ({gen_steps} steps, "
          f"{gen_metrics.main_writes} main / {gen_metrics.aux_writes} aux writes).")
    print("-" * 50)

    # 2. Race Loop
    results = []

    for name in ENABLED_SOLVERS:
        print(f"Running {name.upper()}...", end="", flush=True)
        session.reset_solver()
        before = session.metrics_snapshot()

        t_start = time.time()
        status, calls = run_solver(session, name)
        duration = time.time() - t_start

        after = session.metrics_snapshot()
        path_len = len(session.solution_path())
        print(f" {status} ({duration:.4f}s) | Path: {path_len}")

        results.append({
            "name": name,
            "time": duration,
            "path": path_len,
            "visited": len(session.visited()),
            "calls": calls,
            "aux": after.aux_writes - before.aux_writes,
            "status": status
        })

    # 3. Leaderboard
    print("=" * 72)
    print(f"{'RANK':<5} | {'ALGORITHM':<10} | {'TIME (s)':<10} | {'PATH':<6} | {'VISITED':<8} | {'CALLS':<7} | {'AUX':<7}")
    print("-" * 72)

    results.sort(key=lambda x: x['time'])

    for i, res in enumerate(results):
        print(f"{i+1:<5} | {res['name'].upper():<10} | {res['time']:<10.4f} | {res['path']:<6} | "
              f"{res['visited']:<8} | {res['calls']:<7} | {res['aux']:<7}")
    print("=" * 72)


if __name__ == "__main__":
    run_benchmark()
