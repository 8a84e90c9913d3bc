"""Inbound Socket.IO payloads, validated before they reach the game logic."""

from dataclasses import dataclass
from typing import Any


class PayloadError(ValueError):
    pass


def _room_code(data: Any) -> str:
    # Older clients send the bare code instead of {"roomCode": ...}
    if isinstance(data, str):
        code = data
    elif isinstance(data, dict):
        code = data.get('roomCode')
    else:
        raise PayloadError('roomCode is required')
    if not isinstance(code, str) or not code.strip():
        raise PayloadError('roomCode is required')
    return code.strip().upper()


def _coordinate(data: dict, key: str, board_size: int) -> int:
    value = data.get(key)
    # bool is an int subclass; True must not mean row 1
    if isinstance(value, bool) or not isinstance(value, int):
        raise PayloadError(f'{key} must be an integer')
    if not 0 <= value < board_size:
        raise PayloadError(f'{key} out of range')
    return value


@dataclass(frozen=True)
class RoomRequest:
    """joinRoom, signalReadyForRematch, leaveRoom and heartbeat."""
    room_code: str

    @classmethod
    def parse(cls, data: Any) -> 'RoomRequest':
        return cls(room_code=_room_code(data))


@dataclass(frozen=True)
class MoveRequest:
    room_code: str
    row: int
    col: int

    @classmethod
    def parse(cls, data: Any, board_size: int) -> 'MoveRequest':
        if not isinstance(data, dict):
            raise PayloadError('move payload must be an object')
        return cls(
            room_code=_room_code(data),
            row=_coordinate(data, 'row', board_size),
            col=_coordinate(data, 'col', board_size),
        )
