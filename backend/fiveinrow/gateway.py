"""Session gateway: connection identities, room events and liveness.

The gateway only knows the ``Transport`` interface below, so the same
rules run behind Flask-SocketIO in production and behind a recording fake
in unit tests. Every public operation takes the connection id first and
returns the acknowledgement for the requester (or None when the event has
no direct reply).
"""

import logging
import threading
import time
from dataclasses import dataclass
from functools import wraps
from typing import Any, Callable, Dict, List, Optional, Protocol

from .payloads import MoveRequest, PayloadError, RoomRequest
from .services.game import DRAW_OUTCOME, WIN_OUTCOME, JoinError, Room, RoomRegistry

logger = logging.getLogger(__name__)

DEFAULT_IDLE_TIMEOUT_SEC = 300


class Transport(Protocol):
    def emit(self, event: str, payload: Optional[dict] = None, to: Optional[str] = None,
             skip_sid: Optional[str] = None) -> None: ...

    def join(self, sid: str, room_code: str) -> None: ...

    def leave(self, sid: str, room_code: str) -> None: ...

    def disconnect(self, sid: str) -> None: ...


class NullEventLog:
    def record(self, event_type: str, socket_id: str, **fields: Any) -> None:
        pass


@dataclass
class Session:
    sid: str
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    last_seen: float = 0.0


def _serialized(method: Callable) -> Callable:
    @wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)
    return wrapper


def _win_line(coords) -> List[Dict[str, int]]:
    return [{'row': r, 'col': c} for r, c in coords]


class SessionGateway:
    def __init__(self, registry: RoomRegistry, transport: Transport, event_log=None,
                 idle_timeout: float = DEFAULT_IDLE_TIMEOUT_SEC,
                 clock: Callable[[], float] = time.monotonic,
                 wall_clock: Callable[[], float] = time.time):
        self.registry = registry
        self.transport = transport
        self.event_log = event_log or NullEventLog()
        self.idle_timeout = idle_timeout
        self.clock = clock
        self.wall_clock = wall_clock
        self.sessions: Dict[str, Session] = {}
        # Re-entrant: a forced disconnect during a sweep calls back into disconnect()
        self._lock = threading.RLock()

    # ---- connection lifecycle ----

    @_serialized
    def connect(self, sid: str, ip_address: Optional[str] = None,
                user_agent: Optional[str] = None) -> None:
        self.sessions[sid] = Session(sid, ip_address, user_agent, self.clock())
        logger.info(f"[connect] sid={sid} ip={ip_address}")
        self._record('connection', sid)

    @_serialized
    def disconnect(self, sid: str) -> None:
        if sid not in self.sessions:
            return
        for room in self.registry.rooms_with(sid):
            self._depart(sid, room)
        logger.info(f"[disconnect] sid={sid}")
        self._record('disconnect', sid)
        self.sessions.pop(sid, None)

    def _touch(self, sid: str) -> None:
        session = self.sessions.get(sid)
        if session is None:
            session = self.sessions[sid] = Session(sid)
        session.last_seen = self.clock()

    def _record(self, event_type: str, sid: str, room: Optional[Room] = None,
                player_mark: Optional[str] = None, details: Optional[dict] = None) -> None:
        session = self.sessions.get(sid) or Session(sid)
        self.event_log.record(
            event_type,
            sid,
            room_code=room.code if room else None,
            player_mark=player_mark,
            details=details or {},
            ip_address=session.ip_address,
            user_agent=session.user_agent,
        )

    # ---- request/response events ----

    @_serialized
    def create_room(self, sid: str) -> dict:
        self._touch(sid)
        code, room = self.registry.create(sid)
        self.transport.join(sid, code)
        logger.info(f"[room-created] code={code} sid={sid}")
        self._record('room-created', sid, room, player_mark=room.player(sid).mark)
        return {'roomCode': code, 'mark': room.player(sid).mark}

    @_serialized
    def join_room(self, sid: str, data: Any) -> dict:
        self._touch(sid)
        try:
            request = RoomRequest.parse(data)
        except PayloadError as exc:
            logger.debug(f"[join-rejected] sid={sid} reason={exc}")
            return {'error': 'Invalid payload'}

        room = self.registry.lookup(request.room_code)
        if room is None:
            return {'error': 'Room not found'}
        try:
            joiner = room.add_opponent(sid)
        except JoinError as exc:
            logger.debug(f"[join-rejected] code={room.code} sid={sid} reason={exc}")
            return {'error': str(exc)}

        self.transport.join(sid, room.code)
        self.transport.emit('opponentJoined', {
            'opponentId': sid,
            'players': room.players_to_list(),
            'status': room.status,
            'currentTurn': room.current_turn,
        }, to=room.code, skip_sid=sid)
        logger.info(f"[game-started] code={room.code} sid={sid}")
        self._record('game-started', sid, room, player_mark=joiner.mark)
        return {'success': True, 'mark': joiner.mark, **room.to_dict()}

    @_serialized
    def leave_room(self, sid: str, data: Any) -> dict:
        self._touch(sid)
        try:
            request = RoomRequest.parse(data)
        except PayloadError:
            return {'error': 'Invalid payload'}
        room = self.registry.lookup(request.room_code)
        if room is None or not room.has_player(sid):
            return {'left': False, 'roomCode': request.room_code}
        self._depart(sid, room)
        return {'left': True, 'roomCode': room.code}

    @_serialized
    def heartbeat(self, sid: str, data: Any = None) -> dict:
        self._touch(sid)
        ack = {'timestamp': int(self.wall_clock() * 1000)}
        try:
            request = RoomRequest.parse(data)
        except PayloadError:
            return ack
        room = self.registry.lookup(request.room_code)
        ack['roomCode'] = request.room_code
        ack['roomActive'] = bool(room and room.has_player(sid))
        return ack

    # ---- broadcast-only events ----

    @_serialized
    def make_move(self, sid: str, data: Any) -> None:
        self._touch(sid)
        try:
            request = MoveRequest.parse(data, self.registry.board_size)
        except PayloadError as exc:
            logger.debug(f"[move-rejected] sid={sid} reason={exc}")
            return
        room = self.registry.lookup(request.room_code)
        if room is None:
            logger.debug(f"[move-rejected] sid={sid} code={request.room_code} reason=no-room")
            return
        outcome = room.apply_move(sid, request.row, request.col)
        if outcome is None:
            logger.debug(
                f"[move-rejected] code={room.code} sid={sid} row={request.row} col={request.col} "
                f"status={room.status} turn={room.current_turn}"
            )
            return

        last_move = {'row': outcome.row, 'col': outcome.col}
        if outcome.kind == WIN_OUTCOME:
            self.transport.emit('gameOver', {
                'winner': sid,
                'winLine': _win_line(outcome.win_line),
                'players': room.players_to_list(),
                'board': room.board.to_list(),
                'lastMove': last_move,
            }, to=room.code)
            logger.info(f"[game-won] code={room.code} winner={sid} mark={outcome.player.mark}")
            self._record('game-won', sid, room, player_mark=outcome.player.mark,
                         details={'scores': room.scores()})
            return

        if outcome.kind == DRAW_OUTCOME:
            self.transport.emit('gameDraw', {
                'board': room.board.to_list(),
                'players': room.players_to_list(),
                'lastMove': last_move,
            }, to=room.code)
            logger.info(f"[game-draw] code={room.code}")
            self._record('game-draw', sid, room, player_mark=outcome.player.mark,
                         details={'scores': room.scores()})
            return

        self.transport.emit('moveMade', {
            'board': room.board.to_list(),
            'currentTurn': room.current_turn,
            'status': room.status,
            'lastMove': last_move,
        }, to=room.code)

    @_serialized
    def signal_ready(self, sid: str, data: Any) -> None:
        self._touch(sid)
        try:
            request = RoomRequest.parse(data)
        except PayloadError:
            return
        room = self.registry.lookup(request.room_code)
        if room is None:
            return
        result = room.mark_ready(sid)
        if result is None:
            logger.debug(f"[ready-ignored] code={room.code} sid={sid} status={room.status}")
            return
        ready, all_ready = result
        player = room.player(sid)
        self.transport.emit('playerReady', {
            'playerId': sid,
            'mark': player.mark,
            'readySet': ready,
            'allReady': all_ready,
        }, to=room.code)
        if not all_ready:
            return

        room.reset_for_rematch()
        self.transport.emit('gameReset', {
            'board': room.board.to_list(),
            'currentTurn': room.current_turn,
            'status': room.status,
        }, to=room.code)
        logger.info(f"[game-reset] code={room.code} opener={room.current_turn}")
        self._record('game-reset', sid, room, player_mark=player.mark,
                     details={'scores': room.scores()})

    # ---- departure ----

    def _depart(self, sid: str, room: Room) -> None:
        """Destroy the room: the leaver and the remaining player both leave the grouping."""
        player = room.player(sid)
        if player is None:
            return
        self.registry.remove(room.code)
        self.transport.leave(sid, room.code)
        self.transport.emit('opponentLeft', {'roomCode': room.code}, to=room.code)
        for other in room.players:
            if other.id != sid:
                self.transport.leave(other.id, room.code)
        logger.info(f"[room-left] code={room.code} sid={sid} mark={player.mark}")
        self._record('room-left', sid, room, player_mark=player.mark,
                     details={'scores': room.scores()})

    # ---- liveness ----

    @_serialized
    def sweep(self) -> List[str]:
        """Drop every connection idle for longer than the timeout."""
        cutoff = self.clock() - self.idle_timeout
        stale = [s.sid for s in self.sessions.values() if s.last_seen < cutoff]
        for sid in stale:
            logger.info(f"[idle-timeout] sid={sid} timeout={self.idle_timeout}s")
            self._record('idle-timeout', sid)
            self.disconnect(sid)
            self.transport.disconnect(sid)
        return stale

    def stats(self) -> Dict[str, int]:
        return {'rooms': len(self.registry), 'connections': len(self.sessions)}
