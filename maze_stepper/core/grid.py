from array import array
from typing import Iterator, Tuple

import numpy as np

Coord = Tuple[int, int]  # (row, col)


class InvalidDimensionError(ValueError):
    pass


class Grid:
    # Cell kinds
    PATH = 0
    WALL = 1

    MIN_SIZE = 3

    # Direction Helpers (row, col) deltas: right, down, left, up
    DR = (0, 1, 0, -1)
    DC = (1, 0, -1, 0)

    __slots__ = ('rows', 'cols', 'cells', 'start', 'end')

    def __init__(self, rows: int, cols: int):
        if rows < self.MIN_SIZE or cols < self.MIN_SIZE:
            raise InvalidDimensionError(
                f"Grid {rows}x{cols} is smaller than {self.MIN_SIZE}x{self.MIN_SIZE}"
            )
        self.rows = rows
        self.cols = cols
        # using 'B' (unsigned char) -> 1 byte per cell
        self.cells = array('B', [self.WALL] * (rows * cols))
        self.start: Coord = (1, 1)
        self.end: Coord = (rows - 1, cols - 2)
        self.reset()

    @property
    def width(self) -> int:
        return self.cols

    @property
    def height(self) -> int:
        return self.rows

    def reset(self):
        """
        Refills every cell with WALL and opens the default start and end.
        Nothing is counted: this is bookkeeping, not an algorithm write.
        """
        for i in range(self.rows * self.cols):
            self.cells[i] = self.WALL
        self.start = (1, 1)
        self.end = (self.rows - 1, self.cols - 2)
        self.put_cell(self.start, self.PATH)
        self.put_cell(self.end, self.PATH)

    def get_index(self, coord: Coord) -> int:
        r, c = coord
        if 0 <= r < self.rows and 0 <= c < self.cols:
            return r * self.cols + c
        raise IndexError(f"Coordinate ({r}, {c}) out of bounds")

    def in_bounds(self, coord: Coord) -> bool:
        r, c = coord
        return 0 <= r < self.rows and 0 <= c < self.cols

    def is_border(self, coord: Coord) -> bool:
        r, c = coord
        return r == 0 or c == 0 or r == self.rows - 1 or c == self.cols - 1

    def is_interior(self, coord: Coord) -> bool:
        r, c = coord
        return 0 < r < self.rows - 1 and 0 < c < self.cols - 1

    def cell_kind(self, coord: Coord) -> int:
        return self.cells[self.get_index(coord)]

    def set_cell(self, coord: Coord, kind: int, metrics):
        """Algorithm write: each call is exactly one main-memory write on `metrics`."""
        self.put_cell(coord, kind)
        metrics.record_main_write()

    def put_cell(self, coord: Coord, kind: int):
        """
        Bookkeeping write that is not counted: construction, reset, open fill
        and restoring a provisional end.
        """
        if kind not in (self.WALL, self.PATH):
            raise ValueError(f"Unknown cell kind: {kind}")
        self.cells[self.get_index(coord)] = kind

    def is_path(self, coord: Coord) -> bool:
        """Out-of-bounds coordinates count as wall."""
        r, c = coord
        if 0 <= r < self.rows and 0 <= c < self.cols:
            return self.cells[r * self.cols + c] == self.PATH
        return False

    def get_neighbors(self, coord: Coord) -> Iterator[Coord]:
        """
        Yields the in-bounds orthogonal neighbors in right, down, left, up order.
        Does NOT check cell kind (that's for pathfinding).
        """
        r, c = coord
        for dr, dc in zip(self.DR, self.DC):
            nr, nc = r + dr, c + dc
            if 0 <= nr < self.rows and 0 <= nc < self.cols:
                yield (nr, nc)

    def get_open_neighbors(self, coord: Coord) -> Iterator[Coord]:
        for n in self.get_neighbors(coord):
            if self.cells[n[0] * self.cols + n[1]] == self.PATH:
                yield n

    def path_cells(self) -> Iterator[Coord]:
        for i, val in enumerate(self.cells):
            if val == self.PATH:
                yield (i // self.cols, i % self.cols)

    def to_numpy(self) -> np.ndarray:
        return np.frombuffer(self.cells.tobytes(), dtype=np.uint8).reshape(self.rows, self.cols).copy()

    def render_text(self, marks=None) -> str:
        """
        S = start, E = end, # = wall, ' ' = path.
        `marks` is an optional collection of coordinates drawn as '.'.
        """
        marks = set(marks or ())
        lines = []
        for r in range(self.rows):
            line = []
            for c in range(self.cols):
                if (r, c) == self.start:
                    line.append("S")
                elif (r, c) == self.end:
                    line.append("E")
                elif self.cells[r * self.cols + c] == self.WALL:
                    line.append("#")
                elif (r, c) in marks:
                    line.append(".")
                else:
                    line.append(" ")
            lines.append("".join(line))
        return "\n".join(lines)
