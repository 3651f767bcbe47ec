import logging
import random
from typing import List, Optional
from maze_stepper.core.grid import Grid, Coord
from maze_stepper.core.metrics import MetricsCounter
from maze_stepper.algo.base import Generator, PROGRESS, COMPLETE

logger = logging.getLogger(__name__)


class RecursiveBacktracker(Generator):
    """
    Randomized depth-first carving, one carve or one backtrack per step().

    Cells two apart on the odd lattice are joined by opening the wall cell
    between them, so the border always stays WALL.
    """
    name = "Iterative Backtracking (DFS)"

    def __init__(self, grid: Grid, metrics: Optional[MetricsCounter] = None, seed: int = None):
        super().__init__(grid, metrics, seed)
        self.rng = random.Random(seed)
        self.stack: List[Coord] = []
        self.steps: List[Coord] = []
        self.complete = False
        self.reset()

    def reset(self):
        self.stack = [self.grid.start]
        self.steps = []
        self.complete = False

    def step(self) -> str:
        if not self.stack:
            if not self.complete:
                self._finish()
            return COMPLETE

        r, c = self.stack[-1]

        directions = list(range(4))
        self.rng.shuffle(directions)

        for d in directions:
            dr, dc = Grid.DR[d], Grid.DC[d]
            dest = (r + dr * 2, c + dc * 2)

            if self.grid.is_interior(dest) and self.grid.cell_kind(dest) == Grid.WALL:
                # Carve the wall between, then the destination
                self.grid.set_cell((r + dr, c + dc), Grid.PATH, self.metrics)
                self.grid.set_cell(dest, Grid.PATH, self.metrics)
                self.steps.append(dest)
                self.stack.append(dest)
                self.metrics.record_push()
                self.metrics.record_step()
                return PROGRESS

        # Backtrack
        self.stack.pop()
        self.metrics.record_pop()
        self.metrics.record_step()
        return PROGRESS

    def _finish(self):
        self.complete = True
        provisional = self.grid.end
        if self.steps:
            self.grid.end = self.steps[-1]
        else:
            # Single lattice cell: the maze is just the start
            self.grid.end = self.grid.start
        if provisional != self.grid.end and self.grid.is_border(provisional):
            self.grid.put_cell(provisional, Grid.WALL)
        logger.debug("Carving complete: %d cells carved, end at %s", len(self.steps), self.grid.end)
