import random
import string
from typing import Callable, Dict, List, Optional, Tuple

from .board import DEFAULT_SIZE
from .room import Room
from .win import WIN_LENGTH

CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_room_code(length: int = 6, rng: Optional[random.Random] = None) -> str:
    """Generate a short, shareable room code."""
    chooser = rng or random
    return ''.join(chooser.choices(CODE_ALPHABET, k=length))


def normalize_code(code: str) -> str:
    return code.strip().upper()


class RoomRegistry:
    """Live rooms keyed by code. One instance per application."""

    def __init__(self, board_size: int = DEFAULT_SIZE, win_length: int = WIN_LENGTH,
                 code_length: int = 6, code_factory: Optional[Callable[[], str]] = None):
        self.board_size = board_size
        self.win_length = win_length
        self.code_length = code_length
        self._code_factory = code_factory or (lambda: generate_room_code(self.code_length))
        self._rooms: Dict[str, Room] = {}

    def _unused_code(self) -> str:
        while True:
            code = normalize_code(self._code_factory())
            if code not in self._rooms:
                return code

    def create(self, creator_id: str) -> Tuple[str, Room]:
        code = self._unused_code()
        room = Room.open(code, creator_id, board_size=self.board_size, win_length=self.win_length)
        self._rooms[code] = room
        return code, room

    def lookup(self, code: str) -> Optional[Room]:
        if not code:
            return None
        return self._rooms.get(normalize_code(code))

    def remove(self, code: str) -> Optional[Room]:
        return self._rooms.pop(normalize_code(code), None)

    def rooms_with(self, player_id: str) -> List[Room]:
        return [room for room in self._rooms.values() if room.has_player(player_id)]

    def __len__(self) -> int:
        return len(self._rooms)

    def __contains__(self, code: str) -> bool:
        return self.lookup(code) is not None
