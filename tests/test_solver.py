import unittest
import sys
import os
from collections import deque

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from maze_stepper.core.grid import Grid
from maze_stepper.core.metrics import MetricsCounter
from maze_stepper.algo.base import PROGRESS, SOLVED, EXHAUSTED, FAILED
from maze_stepper.algo.dfs import RecursiveBacktracker
from maze_stepper.algo.open_fill import OpenFill
from maze_stepper.algo.solvers import Dijkstra, WallFollower, UNINITIALIZED, SEARCHING


def grid_from_text(lines):
    """'#' wall, anything else path; 'S' and 'E' mark start and end."""
    grid = Grid(len(lines), len(lines[0]))
    for r, line in enumerate(lines):
        for c, ch in enumerate(line):
            grid.put_cell((r, c), Grid.WALL if ch == "#" else Grid.PATH)
            if ch == "S":
                grid.start = (r, c)
            elif ch == "E":
                grid.end = (r, c)
    return grid


def reference_distance(grid, start, end):
    """Plain breadth-first search; number of moves or None."""
    dist = {start: 0}
    queue = deque([start])
    while queue:
        cell = queue.popleft()
        if cell == end:
            return dist[cell]
        for n in grid.get_open_neighbors(cell):
            if n not in dist:
                dist[n] = dist[cell] + 1
                queue.append(n)
    return None


def carved_grid(rows, cols, seed):
    grid = Grid(rows, cols)
    RecursiveBacktracker(grid, seed=seed).run_all()
    return grid


def assert_valid_path(test, grid, path):
    test.assertEqual(path[0], grid.start)
    test.assertEqual(path[-1], grid.end)
    for (r1, c1), (r2, c2) in zip(path, path[1:]):
        test.assertEqual(abs(r1 - r2) + abs(c1 - c2), 1)
        test.assertTrue(grid.is_path((r2, c2)))


CORRIDOR = [
    "#######",
    "#S    #",
    "##### #",
    "#E    #",
    "#######",
]

OPEN_ROOM = [
    "#####",
    "#S  #",
    "#   #",
    "#  E#",
    "#####",
]

WALLED_OFF = [
    "#######",
    "#S    #",
    "#######",
    "#  E  #",
    "#######",
]


class TestDijkstra(unittest.TestCase):
    def test_corridor(self):
        grid = grid_from_text(CORRIDOR)
        solver = Dijkstra(grid)
        self.assertEqual(solver.run_all(), SOLVED)
        self.assertEqual(len(solver.path), 11)
        assert_valid_path(self, grid, solver.path)

    def test_shortest_on_carved_mazes(self):
        for rows, cols in [(5, 5), (9, 9), (11, 17), (21, 21), (14, 19)]:
            for seed in [1, 2, 3]:
                grid = carved_grid(rows, cols, seed)
                solver = Dijkstra(grid)
                self.assertEqual(solver.run_all(), SOLVED)
                assert_valid_path(self, grid, solver.path)
                self.assertEqual(len(solver.path) - 1, reference_distance(grid, grid.start, grid.end))

    def test_shortest_on_open_mazes(self):
        for seed in range(10):
            grid = Grid(15, 15)
            OpenFill(grid, seed=seed).run_all()
            solver = Dijkstra(grid)
            status = solver.run_all()
            expected = reference_distance(grid, grid.start, grid.end)
            if expected is None:
                self.assertEqual(status, EXHAUSTED)
                self.assertEqual(solver.path, [])
            else:
                self.assertEqual(status, SOLVED)
                assert_valid_path(self, grid, solver.path)
                self.assertEqual(len(solver.path) - 1, expected)

    def test_one_expansion_per_step(self):
        grid = carved_grid(11, 11, seed=8)
        solver = Dijkstra(grid)
        self.assertEqual(solver.state, UNINITIALIZED)
        status = PROGRESS
        count = 0
        while status == PROGRESS:
            status = solver.step()
            count += 1
            self.assertEqual(len(solver.visited), count)
            if status == PROGRESS:
                self.assertEqual(solver.state, SEARCHING)
        self.assertEqual(status, SOLVED)
        self.assertEqual(solver.visited[-1], grid.end)

    def test_ties_break_first_in_first_out(self):
        grid = grid_from_text(OPEN_ROOM)
        solver = Dijkstra(grid)
        for _ in range(6):
            solver.step()
        self.assertEqual(solver.visited, [(1, 1), (1, 2), (2, 1), (1, 3), (2, 2), (3, 1)])

    def test_open_and_closed_stay_disjoint(self):
        grid = Grid(12, 12)
        OpenFill(grid, seed=4, wall_probability=0.1).run_all()
        solver = Dijkstra(grid)
        while solver.step() == PROGRESS:
            self.assertFalse(solver.open_set & solver.closed_set)
            self.assertTrue((solver.open_set | solver.closed_set) <= set(solver.g_score))
            frontier = solver.frontier()
            self.assertEqual(set(frontier), solver.open_set)
            costs = [solver.g_score[c] for c in frontier]
            self.assertEqual(costs, sorted(costs))

    def test_unreachable_end(self):
        grid = grid_from_text(WALLED_OFF)
        solver = Dijkstra(grid)
        self.assertEqual(solver.run_all(), EXHAUSTED)
        self.assertEqual(solver.state, EXHAUSTED)
        self.assertEqual(solver.path, [])
        self.assertEqual(solver.open_set, set())
        self.assertEqual(solver.frontier(), [])
        self.assertEqual(len(solver.visited), 5)

        # Terminal until reset
        self.assertEqual(solver.step(), EXHAUSTED)
        self.assertEqual(len(solver.visited), 5)

    def test_reset(self):
        grid = carved_grid(9, 9, seed=6)
        solver = Dijkstra(grid)
        for _ in range(4):
            solver.step()
        solver.reset()

        self.assertEqual(solver.state, UNINITIALIZED)
        self.assertEqual(solver.open_heap, [])
        self.assertEqual(solver.open_set, set())
        self.assertEqual(solver.closed_set, set())
        self.assertEqual(solver.g_score, {})
        self.assertEqual(solver.parents, {})
        self.assertEqual(solver.visited, [])
        self.assertEqual(solver.path, [])

        self.assertEqual(solver.run_all(), SOLVED)
        self.assertEqual(len(solver.path) - 1, reference_distance(grid, grid.start, grid.end))

    def test_metrics(self):
        grid = grid_from_text(CORRIDOR)
        metrics = MetricsCounter()
        solver = Dijkstra(grid, metrics)
        solver.run_all()
        self.assertEqual(metrics.steps, len(solver.visited))
        self.assertEqual(metrics.main_writes, 0)
        self.assertEqual(metrics.aux_writes, metrics.pushes + metrics.pops)


class TestWallFollower(unittest.TestCase):
    def test_corridor(self):
        grid = grid_from_text(CORRIDOR)
        wf = WallFollower(grid)
        self.assertEqual(wf.step(), SOLVED)
        self.assertTrue(wf.solved)
        self.assertEqual(len(wf.path), 11)
        assert_valid_path(self, grid, wf.path)
        self.assertEqual(wf.visited, wf.path)

    def test_matches_frontier_on_carved_mazes(self):
        for rows, cols in [(5, 5), (9, 9), (11, 17), (21, 21), (14, 19)]:
            for seed in [1, 2, 3]:
                grid = carved_grid(rows, cols, seed)
                wf = WallFollower(grid)
                self.assertEqual(wf.step(), SOLVED)

                solver = Dijkstra(grid)
                solver.run_all()
                self.assertEqual(wf.path, solver.path, f"{rows}x{cols} seed {seed}")

                # The trail is a walk of single moves ending at the exit
                self.assertEqual(wf.visited[0], grid.start)
                self.assertEqual(wf.visited[-1], grid.end)
                for (r1, c1), (r2, c2) in zip(wf.visited, wf.visited[1:]):
                    self.assertEqual(abs(r1 - r2) + abs(c1 - c2), 1)

    def test_unreachable_end_fails(self):
        grid = grid_from_text(WALLED_OFF)
        wf = WallFollower(grid)
        self.assertEqual(wf.step(), FAILED)
        self.assertFalse(wf.solved)
        self.assertEqual(wf.path, [])
        self.assertLessEqual(wf.iterations, wf.step_limit())
        self.assertEqual(wf.step_limit(), 5 * 7 * WallFollower.MAX_STEPS_FACTOR)

    def test_enclosed_start_fails(self):
        grid = Grid(5, 5)
        wf = WallFollower(grid, max_steps=50)
        self.assertEqual(wf.step(), FAILED)
        self.assertEqual(wf.iterations, 50)
        self.assertEqual(wf.visited, [grid.start])

    def test_step_cap(self):
        # The corridor needs one turn and ten moves
        grid = grid_from_text(CORRIDOR)
        wf = WallFollower(grid, max_steps=10)
        self.assertEqual(wf.step(), FAILED)
        self.assertEqual(wf.iterations, 10)

        wf = WallFollower(grid, max_steps=11)
        self.assertEqual(wf.step(), SOLVED)

    def test_open_maze_terminates(self):
        for seed in range(10):
            grid = Grid(15, 15)
            OpenFill(grid, seed=seed).run_all()
            wf = WallFollower(grid)
            status = wf.step()
            self.assertIn(status, (SOLVED, FAILED))
            if status == SOLVED:
                assert_valid_path(self, grid, wf.path)

    def test_reset(self):
        grid = carved_grid(9, 9, seed=3)
        wf = WallFollower(grid)
        wf.step()
        path = list(wf.path)
        wf.reset()
        self.assertIsNone(wf.status)
        self.assertEqual(wf.path, [])
        self.assertEqual(wf.visited, [])
        self.assertEqual(wf.step(), SOLVED)
        self.assertEqual(wf.path, path)


if __name__ == '__main__':
    unittest.main()
