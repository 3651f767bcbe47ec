import heapq
import logging
from typing import Dict, Iterator, List, Optional, Set, Tuple
from maze_stepper.core.grid import Grid, Coord
from maze_stepper.core.metrics import MetricsCounter
from maze_stepper.algo.base import Solver, PROGRESS, SOLVED, EXHAUSTED, FAILED

logger = logging.getLogger(__name__)

# Frontier solver states
UNINITIALIZED = "Uninitialized"
SEARCHING = "Searching"


class Dijkstra(Solver):
    """
    Unit-weight shortest path, one expansion per step().

    The open set is a heap of (cost, arrival, cell); arrival is a running
    counter so equal costs come out first-in first-out. Entries superseded
    by a cheaper cost stay in the heap and are skipped when popped.
    """
    name = "Dijkstra's Shortest Path"

    def __init__(self, grid: Grid, metrics: Optional[MetricsCounter] = None):
        super().__init__(grid, metrics)
        self.reset()

    def reset(self):
        super().reset()
        self.open_heap: List[Tuple[int, int, Coord]] = []
        self.open_set: Set[Coord] = set()
        self.closed_set: Set[Coord] = set()
        self.g_score: Dict[Coord, int] = {}
        self.parents: Dict[Coord, Coord] = {}
        self.arrivals = 0

    @property
    def state(self) -> str:
        if self.status in (SOLVED, EXHAUSTED):
            return self.status
        return SEARCHING if self.g_score else UNINITIALIZED

    def frontier(self) -> List[Coord]:
        """Open cells in the order they will be expanded."""
        live = [entry for entry in self.open_heap
                if entry[2] in self.open_set and entry[0] == self.g_score[entry[2]]]
        return [coord for _, _, coord in sorted(live)]

    def step(self) -> str:
        if self.status in (SOLVED, EXHAUSTED):
            return self.status

        if not self.g_score:
            start = self.grid.start
            self.g_score[start] = 0
            self._push(start, 0)

        current = self._pop_lowest()
        if current is None:
            self.status = EXHAUSTED
            logger.debug("Open set exhausted after %d expansions, no path to %s",
                         len(self.visited), self.grid.end)
            return EXHAUSTED

        self.metrics.record_step()
        self.visited.append(current)

        if current == self.grid.end:
            self.reconstruct_path(current)
            self.status = SOLVED
            logger.debug("Solved in %d expansions, path length %d", len(self.visited), len(self.path))
            return SOLVED

        self.closed_set.add(current)
        curr_g = self.g_score[current]

        for neighbor in self.grid.get_open_neighbors(current):
            if neighbor in self.closed_set:
                continue

            new_g = curr_g + 1
            if neighbor in self.open_set and new_g >= self.g_score[neighbor]:
                continue

            self.parents[neighbor] = current
            self.g_score[neighbor] = new_g
            self._push(neighbor, new_g)

        self.status = PROGRESS
        return PROGRESS

    def _push(self, coord: Coord, cost: int):
        heapq.heappush(self.open_heap, (cost, self.arrivals, coord))
        self.arrivals += 1
        self.open_set.add(coord)
        self.metrics.record_push()

    def _pop_lowest(self) -> Optional[Coord]:
        while self.open_heap:
            cost, _, coord = heapq.heappop(self.open_heap)
            self.metrics.record_pop()
            if coord in self.open_set and cost == self.g_score[coord]:
                self.open_set.remove(coord)
                return coord
        return None

    def reconstruct_path(self, end: Coord):
        path = [end]
        curr = end
        while curr in self.parents:
            curr = self.parents[curr]
            path.append(curr)
        path.reverse()
        self.path = path


class WallFollower(Solver):
    """
    Right-hand rule: prefer turning right, else go straight, else turn left
    on the spot. Runs to completion in one step().

    `visited` is the raw trail of every move. `path` drops the dead-end
    excursions from that trail, so on a perfect maze it is the unique route
    from start to end.
    """
    name = "Tree Traversal"

    MAX_STEPS_FACTOR = 4

    def __init__(self, grid: Grid, metrics: Optional[MetricsCounter] = None, max_steps: int = None):
        super().__init__(grid, metrics)
        self.max_steps = max_steps
        self.iterations = 0

    def reset(self):
        super().reset()
        self.iterations = 0

    def step_limit(self) -> int:
        if self.max_steps is not None:
            return self.max_steps
        return self.grid.rows * self.grid.cols * self.MAX_STEPS_FACTOR

    def trace(self, limit: int) -> Iterator[Coord]:
        """
        Yields every cell moved into, at most `limit` iterations (a turn on
        the spot is an iteration too). Stops after yielding the end cell.
        """
        cell = self.grid.start
        # Indexes into Grid.DR/DC: 0 right, 1 down, 2 left, 3 up, in (row, col)
        # terms; heading "down the rows" first.
        heading = 1
        end = self.grid.end

        for _ in range(limit):
            self.iterations += 1
            r, c = cell

            right = (heading + 1) % 4
            ahead = (r + Grid.DR[heading], c + Grid.DC[heading])
            to_right = (r + Grid.DR[right], c + Grid.DC[right])

            if self.grid.is_path(to_right):
                cell, heading = to_right, right
            elif self.grid.is_path(ahead):
                cell = ahead
            else:
                heading = (heading + 3) % 4
                continue

            yield cell
            if cell == end:
                return

    def step(self) -> str:
        if self.status in (SOLVED, FAILED):
            return self.status

        start = self.grid.start
        self.path = [start]
        self.visited = [start]
        position = {start: 0}

        if start != self.grid.end:
            for cell in self.trace(self.step_limit()):
                self.metrics.record_step()
                self.visited.append(cell)

                if cell in position:
                    # Came back along a dead end
                    keep = position[cell] + 1
                    for dropped in self.path[keep:]:
                        del position[dropped]
                    del self.path[keep:]
                else:
                    position[cell] = len(self.path)
                    self.path.append(cell)

        if self.path[-1] == self.grid.end:
            self.status = SOLVED
            logger.debug("Wall follower reached %s after %d moves", self.grid.end, len(self.visited) - 1)
        else:
            self.status = FAILED
            self.path = []
            logger.info("Wall follower gave up after %d iterations", self.iterations)
        return self.status
