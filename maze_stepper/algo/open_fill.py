import random
from typing import Optional
from maze_stepper.core.grid import Grid
from maze_stepper.core.metrics import MetricsCounter
from maze_stepper.algo.base import Generator, COMPLETE


class OpenFill(Generator):
    """
    Scatters obstacles over the whole grid in a single step. Not steppable:
    the first step() does all the work and reports COMPLETE.
    Writes go through put_cell and are not counted.
    """
    name = "Open Maze"

    WALL_PROBABILITY = 0.3

    def __init__(self, grid: Grid, metrics: Optional[MetricsCounter] = None, seed: int = None,
                 wall_probability: float = None):
        super().__init__(grid, metrics, seed)
        self.rng = random.Random(seed)
        self.wall_probability = self.WALL_PROBABILITY if wall_probability is None else wall_probability
        self.complete = False

    def reset(self):
        self.complete = False

    def step(self) -> str:
        if not self.complete:
            self.fill()
        return COMPLETE

    def fill(self):
        for r in range(self.grid.rows):
            for c in range(self.grid.cols):
                kind = Grid.WALL if self.rng.random() < self.wall_probability else Grid.PATH
                self.grid.put_cell((r, c), kind)

        self.grid.put_cell(self.grid.start, Grid.PATH)
        self.grid.put_cell(self.grid.end, Grid.PATH)
        self.complete = True
