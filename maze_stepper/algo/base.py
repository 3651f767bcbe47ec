from abc import ABC, abstractmethod
from typing import Iterator, List, Optional
from maze_stepper.core.grid import Grid, Coord
from maze_stepper.core.metrics import MetricsCounter

# Step statuses
PROGRESS = "Progress"
COMPLETE = "Complete"
SOLVED = "Solved"
EXHAUSTED = "Exhausted"
FAILED = "Failed"

TERMINAL = (COMPLETE, SOLVED, EXHAUSTED, FAILED)


class Generator(ABC):
    name = "Generator"

    def __init__(self, grid: Grid, metrics: Optional[MetricsCounter] = None, seed: int = None):
        self.grid = grid
        self.metrics = metrics if metrics is not None else MetricsCounter()
        self.seed = seed
        self.complete = False

    @abstractmethod
    def step(self) -> str:
        """
        Performs at most one unit of work on self.grid and returns PROGRESS,
        or COMPLETE once there is nothing left to do.
        """
        pass

    @abstractmethod
    def reset(self):
        pass

    def run(self) -> Iterator[str]:
        """Yields the status of every step up to and including COMPLETE."""
        while True:
            status = self.step()
            yield status
            if status == COMPLETE:
                return

    def run_all(self):
        """Helper to run the generator to completion."""
        for _ in self.run():
            pass


class Solver(ABC):
    name = "Solver"

    def __init__(self, grid: Grid, metrics: Optional[MetricsCounter] = None):
        self.grid = grid
        self.metrics = metrics if metrics is not None else MetricsCounter()
        self.path: List[Coord] = []
        # Cells in the order the solver touched them, for animation.
        self.visited: List[Coord] = []
        self.status: Optional[str] = None

    @property
    def solved(self) -> bool:
        return self.status == SOLVED

    @abstractmethod
    def step(self) -> str:
        pass

    def reset(self):
        self.path = []
        self.visited = []
        self.status = None

    def run(self) -> Iterator[str]:
        while True:
            status = self.step()
            yield status
            if status in TERMINAL:
                return

    def run_all(self) -> str:
        status = None
        for status in self.run():
            pass
        return status
