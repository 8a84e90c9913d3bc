"""Game domain: board, win detection, rooms and the room registry.

Pure in-memory logic with no transport or database imports, so the socket
handlers and the tests drive exactly the same rules.
"""

from .board import Board, MARK_A, MARK_B, EMPTY
from .win import find_win_line
from .room import (
    Room, Player, JoinError, MoveOutcome, WAITING, PLAYING, FINISHED,
    MOVE_OUTCOME, WIN_OUTCOME, DRAW_OUTCOME,
)
from .registry import RoomRegistry, generate_room_code

__all__ = [
    'Board', 'MARK_A', 'MARK_B', 'EMPTY',
    'find_win_line',
    'Room', 'Player', 'JoinError', 'MoveOutcome', 'WAITING', 'PLAYING', 'FINISHED',
    'MOVE_OUTCOME', 'WIN_OUTCOME', 'DRAW_OUTCOME',
    'RoomRegistry', 'generate_room_code',
]
