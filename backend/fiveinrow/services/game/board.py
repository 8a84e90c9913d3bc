from typing import List, Optional

EMPTY = None
MARK_A = 'A'
MARK_B = 'B'

DEFAULT_SIZE = 13


class Board:
    """Square grid of cells, row-major. A cell is EMPTY, MARK_A or MARK_B."""

    def __init__(self, size: int = DEFAULT_SIZE):
        self.size = size
        self.cells: List[List[Optional[str]]] = self._empty_cells()

    def _empty_cells(self) -> List[List[Optional[str]]]:
        return [[EMPTY] * self.size for _ in range(self.size)]

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.size and 0 <= col < self.size

    def _check(self, row: int, col: int) -> None:
        # Negative indexes would silently wrap around on a list
        if not self.in_bounds(row, col):
            raise IndexError(f"cell ({row}, {col}) outside {self.size}x{self.size} board")

    def get(self, row: int, col: int) -> Optional[str]:
        self._check(row, col)
        return self.cells[row][col]

    def set(self, row: int, col: int, mark: str) -> bool:
        """Place a mark; returns False and leaves the cell alone if it is taken."""
        self._check(row, col)
        if self.cells[row][col] is not EMPTY:
            return False
        self.cells[row][col] = mark
        return True

    def is_full(self) -> bool:
        return all(cell is not EMPTY for row in self.cells for cell in row)

    def reset(self) -> None:
        self.cells = self._empty_cells()

    def to_list(self) -> List[List[Optional[str]]]:
        return [row[:] for row in self.cells]
