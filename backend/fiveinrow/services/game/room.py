from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .board import Board, DEFAULT_SIZE, MARK_A, MARK_B
from .win import WIN_LENGTH, Coord, find_win_line

WAITING = 'waiting'
PLAYING = 'playing'
FINISHED = 'finished'

MOVE_OUTCOME = 'move'
WIN_OUTCOME = 'win'
DRAW_OUTCOME = 'draw'


class JoinError(Exception):
    """A join request that the room refuses; the message goes back to the client."""


@dataclass
class Player:
    id: str
    mark: str
    score: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id, 'mark': self.mark, 'score': self.score}


@dataclass
class MoveOutcome:
    kind: str  # MOVE_OUTCOME, WIN_OUTCOME or DRAW_OUTCOME
    player: Player
    row: int
    col: int
    win_line: Optional[List[Coord]] = None


@dataclass
class Room:
    code: str
    board: Board
    players: List[Player] = field(default_factory=list)
    current_turn: Optional[str] = None
    status: str = WAITING
    last_winner: Optional[str] = None
    ready_to_rematch: List[str] = field(default_factory=list)
    win_length: int = WIN_LENGTH

    @classmethod
    def open(cls, code: str, creator_id: str, board_size: int = DEFAULT_SIZE,
             win_length: int = WIN_LENGTH) -> 'Room':
        """A fresh room holding only its creator, who always plays mark A."""
        room = cls(code=code, board=Board(board_size), win_length=win_length)
        room.players.append(Player(id=creator_id, mark=MARK_A))
        room.current_turn = creator_id
        return room

    def player(self, player_id: str) -> Optional[Player]:
        for p in self.players:
            if p.id == player_id:
                return p
        return None

    def has_player(self, player_id: str) -> bool:
        return self.player(player_id) is not None

    def opponent_of(self, player_id: str) -> Optional[Player]:
        for p in self.players:
            if p.id != player_id:
                return p
        return None

    def player_with_mark(self, mark: str) -> Optional[Player]:
        for p in self.players:
            if p.mark == mark:
                return p
        return None

    def add_opponent(self, player_id: str) -> Player:
        """waiting -> playing. The joiner gets mark B and A opens the game."""
        if self.has_player(player_id):
            raise JoinError('Already in room')
        if len(self.players) >= 2:
            raise JoinError('Room is full')
        creator = self.player_with_mark(MARK_A)
        if self.status != WAITING or creator is None:
            raise JoinError('Invalid room state')

        joiner = Player(id=player_id, mark=MARK_B)
        self.players.append(joiner)
        self.status = PLAYING
        self.current_turn = creator.id
        return joiner

    def apply_move(self, player_id: str, row: int, col: int) -> Optional[MoveOutcome]:
        """Place the mover's mark if the move is legal.

        Returns None, with no state touched, for anything out of turn,
        out of range, on an occupied cell or outside the playing state.
        """
        if self.status != PLAYING or self.current_turn != player_id:
            return None
        mover = self.player(player_id)
        if mover is None or not self.board.in_bounds(row, col):
            return None
        if self.board.get(row, col) is not None:
            return None

        self.board.set(row, col, mover.mark)

        line = find_win_line(self.board, row, col, mover.mark, self.win_length)
        if line:
            self.status = FINISHED
            self.last_winner = mover.id
            mover.score += 1
            return MoveOutcome(WIN_OUTCOME, mover, row, col, win_line=line)

        if self.board.is_full():
            self.status = FINISHED
            return MoveOutcome(DRAW_OUTCOME, mover, row, col)

        self.current_turn = self.opponent_of(mover.id).id
        return MoveOutcome(MOVE_OUTCOME, mover, row, col)

    def mark_ready(self, player_id: str) -> Optional[Tuple[List[str], bool]]:
        """Record a rematch signal; returns (ready ids, all ready) or None if ignored."""
        if self.status != FINISHED or not self.has_player(player_id):
            return None
        if player_id not in self.ready_to_rematch:
            self.ready_to_rematch.append(player_id)
        all_ready = len(self.players) == 2 and all(
            p.id in self.ready_to_rematch for p in self.players
        )
        return list(self.ready_to_rematch), all_ready

    def reset_for_rematch(self) -> None:
        """finished -> playing. The previous winner opens, else the A player."""
        self.board.reset()
        if self.last_winner and self.has_player(self.last_winner):
            self.current_turn = self.last_winner
        else:
            first = self.player_with_mark(MARK_A)
            if first is not None:
                self.current_turn = first.id
        self.status = PLAYING
        self.last_winner = None
        self.ready_to_rematch = []

    def scores(self) -> Dict[str, int]:
        return {p.mark: p.score for p in self.players}

    def players_to_list(self) -> List[Dict[str, Any]]:
        return [p.to_dict() for p in self.players]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'roomCode': self.code,
            'board': self.board.to_list(),
            'players': self.players_to_list(),
            'currentTurn': self.current_turn,
            'status': self.status,
        }
