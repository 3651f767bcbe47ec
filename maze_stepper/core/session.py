import logging
from typing import List, Tuple

import numpy as np

from maze_stepper.core.grid import Grid, Coord
from maze_stepper.core.metrics import MetricsCounter, MetricsSnapshot
from maze_stepper.algo.base import Generator, COMPLETE, SOLVED, EXHAUSTED, FAILED
from maze_stepper.algo.dfs import RecursiveBacktracker
from maze_stepper.algo.open_fill import OpenFill
from maze_stepper.algo.solvers import Dijkstra, WallFollower

logger = logging.getLogger(__name__)

# Algorithm pairings
TREE_TRAVERSAL = "tree"      # carved maze, wall follower
SHORTEST_PATH = "shortest"   # open maze, frontier solver


class SessionStateError(RuntimeError):
    pass


class MazeSession:
    """
    Owns one grid, its metrics and the live generator/solver state.

    A presentation layer drives it with generation_step() until COMPLETE,
    then solver_step() (or solve_with_wall_follower()), polling the
    inspection methods between calls. Only one algorithm's state is live:
    starting a solver resets the other, and reset_maze() clears everything.
    """

    def __init__(self, rows: int, cols: int, seed: int = None, max_steps: int = None):
        self.seed = seed
        self.max_steps = max_steps
        self.metrics = MetricsCounter()
        self.grid = Grid(rows, cols)
        self.mode = TREE_TRAVERSAL
        self.generator: Generator = RecursiveBacktracker(self.grid, self.metrics, seed=seed)
        self.frontier_solver = Dijkstra(self.grid, self.metrics)
        self.wall_follower = WallFollower(self.grid, self.metrics, max_steps=max_steps)
        self.active_solver = None
        self.cursor = 0
        logger.debug("New %dx%d session (seed=%s)", rows, cols, seed)

    # ----- Generation -----

    @property
    def generation_complete(self) -> bool:
        return self.generator.complete

    def generation_step(self) -> str:
        return self.generator.step()

    def fill_open_maze(self):
        """Replaces the current maze with a single-shot random obstacle field."""
        self.reset_maze()
        self.generator = OpenFill(self.grid, self.metrics, seed=self.seed)
        self.generator.run_all()
        self.mode = SHORTEST_PATH
        logger.debug("Filled open %dx%d maze", self.grid.rows, self.grid.cols)

    # ----- Solving -----

    def _require_generated(self):
        if not self.generator.complete:
            raise SessionStateError("Maze generation has not finished")

    def _activate(self, solver):
        if self.active_solver is not solver:
            if self.active_solver is not None:
                self.active_solver.reset()
            solver.reset()
            self.cursor = 0
            self.active_solver = solver

    def solver_step(self) -> str:
        self._require_generated()
        self._activate(self.frontier_solver)
        return self.frontier_solver.step()

    def solve_with_wall_follower(self, max_steps: int = None) -> str:
        self._require_generated()
        self._activate(self.wall_follower)
        self.wall_follower.reset()
        self.wall_follower.max_steps = self.max_steps if max_steps is None else max_steps
        status = self.wall_follower.step()
        if status == FAILED:
            logger.warning("Wall follower did not reach %s within %d iterations",
                           self.grid.end, self.wall_follower.step_limit())
        return status

    def tick(self) -> str:
        """One unit of work for the active pairing."""
        if not self.generator.complete:
            status = self.generation_step()
            if status != COMPLETE:
                return status

        if self.mode == TREE_TRAVERSAL:
            if self.wall_follower.status in (SOLVED, FAILED):
                return self.wall_follower.status
            return self.solve_with_wall_follower()
        return self.solver_step()

    @property
    def is_solved(self) -> bool:
        return self.active_solver is not None and self.active_solver.solved

    @property
    def is_finished(self) -> bool:
        return self.active_solver is not None and self.active_solver.status in (SOLVED, EXHAUSTED, FAILED)

    # ----- Lifecycle -----

    def reset_solver(self):
        self.frontier_solver.reset()
        if self.active_solver is self.frontier_solver:
            self.cursor = 0

    def reset_maze(self):
        self.grid.reset()
        self.generator = RecursiveBacktracker(self.grid, self.metrics, seed=self.seed)
        self.frontier_solver.reset()
        self.wall_follower.reset()
        self.active_solver = None
        self.cursor = 0
        self.metrics.reset()
        logger.debug("Maze reset")

    def switch_algorithm(self) -> str:
        """
        Toggles between the tree-traversal pairing (carving + wall follower)
        and the shortest-path pairing (open maze + frontier solver).
        """
        if self.mode == TREE_TRAVERSAL:
            self.fill_open_maze()
        else:
            self.reset_maze()
            self.mode = TREE_TRAVERSAL
        logger.info("Switched to %s", " / ".join(self.algorithm_label()))
        return self.mode

    def advance_cursor(self) -> bool:
        """Moves the replay cursor one cell along the solution path."""
        path = self.solution_path()
        if self.cursor < len(path) - 1:
            self.cursor += 1
            self.metrics.record_main_write()
            return True
        return False

    # ----- Inspection -----

    @property
    def start(self) -> Coord:
        return self.grid.start

    @property
    def end(self) -> Coord:
        return self.grid.end

    def algorithm_label(self) -> Tuple[str, str]:
        if self.mode == TREE_TRAVERSAL:
            return RecursiveBacktracker.name, WallFollower.name
        return OpenFill.name, Dijkstra.name

    def grid_snapshot(self) -> np.ndarray:
        return self.grid.to_numpy()

    def generation_steps(self) -> List[Coord]:
        return list(getattr(self.generator, "steps", ()))

    def backtrack_stack(self) -> List[Coord]:
        return list(getattr(self.generator, "stack", ()))

    def visited(self) -> List[Coord]:
        if self.active_solver is None:
            return []
        return list(self.active_solver.visited)

    def frontier(self) -> List[Coord]:
        if self.active_solver is not self.frontier_solver:
            return []
        return self.frontier_solver.frontier()

    def solution_path(self) -> List[Coord]:
        if self.active_solver is None:
            return []
        return list(self.active_solver.path)

    def metrics_snapshot(self) -> MetricsSnapshot:
        return self.metrics.snapshot()

    def render_text(self, show_path: bool = True) -> str:
        return self.grid.render_text(self.solution_path() if show_path else None)


def new_session(rows: int, cols: int, seed: int = None, max_steps: int = None) -> MazeSession:
    return MazeSession(rows, cols, seed=seed, max_steps=max_steps)
