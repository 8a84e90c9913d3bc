from typing import List, Optional, Tuple

from .board import Board

Coord = Tuple[int, int]

WIN_LENGTH = 5

# One step per undirected axis; the opposite direction is the negation
AXES = (
    (0, 1),   # horizontal
    (1, 0),   # vertical
    (1, 1),   # diagonal down-right
    (1, -1),  # diagonal down-left
)


def _walk(board: Board, row: int, col: int, dr: int, dc: int, mark: str) -> List[Coord]:
    run = []
    r, c = row + dr, col + dc
    while board.in_bounds(r, c) and board.get(r, c) == mark:
        run.append((r, c))
        r += dr
        c += dc
    return run


def find_win_line(board: Board, row: int, col: int, mark: str,
                  win_length: int = WIN_LENGTH) -> Optional[List[Coord]]:
    """Return the run of ``mark`` through (row, col) if it is at least
    ``win_length`` long, else None.

    Only lines through the placed cell are examined: a move can't complete
    a line that does not contain it. The run is ordered along the axis,
    starting from the end reached by walking against the step vector, and
    may be longer than ``win_length``.
    """
    for dr, dc in AXES:
        before = _walk(board, row, col, -dr, -dc, mark)
        after = _walk(board, row, col, dr, dc, mark)
        if len(before) + 1 + len(after) >= win_length:
            return list(reversed(before)) + [(row, col)] + after
    return None
