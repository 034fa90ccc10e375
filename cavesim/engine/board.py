from typing import Iterator, Optional, Tuple

import numpy as np

from .model import Coord, Faction, Grid, Tile

WALL = -2
EMPTY = -1

# Up, left, right, down: neighbours come out in reading order.
_OFFSETS: Tuple[Tuple[int, int], ...] = ((-1, 0), (0, -1), (0, 1), (1, 0))


def validate_grid(grid: Grid) -> None:
    """Reject grids the engine cannot simulate.

    A grid must be non-empty, rectangular, made only of `Tile` values and
    contain at least one unit of each faction.
    """
    if not grid or not grid[0]:
        raise ValueError("grid is empty")
    width = len(grid[0])
    seen = set()
    for r, row in enumerate(grid):
        if len(row) != width:
            raise ValueError(f"grid is not rectangular: row {r} has {len(row)} cells, expected {width}")
        for c, tile in enumerate(row):
            if not isinstance(tile, Tile):
                raise ValueError(f"unknown cell {tile!r} at ({r},{c})")
            if tile.faction is not None:
                seen.add(tile.faction)
    missing = [f.name for f in Faction if f not in seen]
    if missing:
        raise ValueError(f"grid has no units of faction {', '.join(missing)}")


class Board:
    """Fixed-size cell grid. Each cell is WALL, EMPTY or an occupying unit id."""

    def __init__(self, rows: int, cols: int):
        self.rows = rows
        self.cols = cols
        self._cells = np.full((rows, cols), EMPTY, dtype=np.int32)

    @classmethod
    def from_grid(cls, grid: Grid) -> "Board":
        """Build the terrain only. Unit cells start EMPTY until placed."""
        board = cls(len(grid), len(grid[0]))
        for r, row in enumerate(grid):
            for c, tile in enumerate(row):
                if tile is Tile.WALL:
                    board._cells[r, c] = WALL
        return board

    def in_bounds(self, coord: Coord) -> bool:
        return 0 <= coord.row < self.rows and 0 <= coord.col < self.cols

    def cell_at(self, coord: Coord) -> int:
        return int(self._cells[coord.row, coord.col])

    def is_empty(self, coord: Coord) -> bool:
        return self.cell_at(coord) == EMPTY

    def occupant(self, coord: Coord) -> Optional[int]:
        cell = self.cell_at(coord)
        return cell if cell >= 0 else None

    def place(self, coord: Coord, unit_id: int) -> None:
        self._cells[coord.row, coord.col] = unit_id

    def clear(self, coord: Coord) -> None:
        self._cells[coord.row, coord.col] = EMPTY

    def neighbors(self, coord: Coord) -> Iterator[Coord]:
        """Yield the in-bounds orthogonal neighbours of coord in reading order."""
        for dr, dc in _OFFSETS:
            n = Coord(coord.row + dr, coord.col + dc)
            if self.in_bounds(n):
                yield n
