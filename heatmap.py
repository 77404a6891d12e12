"""Visit-count heatmap for biasing exploration in the rescue swarm."""

from dataclasses import dataclass, field
from typing import Optional, Tuple

import numpy as np

import config


@dataclass
class Heatmap:
    """
    Coarse 2D grid counting how often drones have been in each cell.

    The grid is indexed [column][row], i.e. grid[ix, iy] with
    ix = int(x / cell_size). Cells are whole: a partial strip at the far
    edge of the region has no cell, and positions falling there are simply
    not counted.
    """
    width: float
    height: float
    cell_size: float = config.HEATMAP_CELL_SIZE
    grid: np.ndarray = field(default=None, repr=False)

    def __post_init__(self):
        """Initialize an all-zero grid unless one was supplied."""
        self.num_cols = max(0, int(self.width / self.cell_size))
        self.num_rows = max(0, int(self.height / self.cell_size))
        if self.grid is None:
            self.grid = np.zeros((self.num_cols, self.num_rows), dtype=float)

    def world_to_grid(self, x: float, y: float) -> Tuple[int, int]:
        """Convert world coordinates to grid indices (truncating, unclamped)."""
        return int(x / self.cell_size), int(y / self.cell_size)

    def in_bounds(self, ix: int, iy: int) -> bool:
        return 0 <= ix < self.num_cols and 0 <= iy < self.num_rows

    def value_at(self, x: float, y: float) -> Optional[float]:
        """Visit count of the cell containing (x, y), or None outside the grid."""
        ix, iy = self.world_to_grid(x, y)
        if not self.in_bounds(ix, iy):
            return None
        return float(self.grid[ix, iy])

    def record_visit(self, x: float, y: float) -> bool:
        """
        Add one visit to the cell containing (x, y).

        Returns:
            True if the position fell inside the grid and was counted
        """
        ix, iy = self.world_to_grid(x, y)
        if not self.in_bounds(ix, iy):
            return False
        self.grid[ix, iy] += 1
        return True

    def total_visits(self) -> float:
        return float(self.grid.sum())

    def visited_fraction(self) -> float:
        """Fraction of cells visited at least once."""
        if self.grid.size == 0:
            return 0.0
        return float(np.count_nonzero(self.grid)) / self.grid.size

    def to_list(self) -> list:
        """Nested lists in [column][row] order for observers."""
        return self.grid.tolist()
