import pytest

from fiveinrow.services.game import (
    Room, JoinError, MARK_A, MARK_B, WAITING, PLAYING, FINISHED,
    MOVE_OUTCOME, WIN_OUTCOME, DRAW_OUTCOME,
)


def playing_room(size=13):
    room = Room.open('R1', 'p1', board_size=size)
    room.add_opponent('p2')
    return room


def play_win_for_p1(room):
    """p1 fills (6,6)..(6,10) while p2 plays on row 0."""
    for i in range(4):
        assert room.apply_move('p1', 6, 6 + i).kind == MOVE_OUTCOME
        assert room.apply_move('p2', 0, i).kind == MOVE_OUTCOME
    return room.apply_move('p1', 6, 10)


def test_open_room_waits_with_creator_as_a():
    room = Room.open('R1', 'p1')
    assert room.status == WAITING
    assert [p.to_dict() for p in room.players] == [{'id': 'p1', 'mark': MARK_A, 'score': 0}]


def test_second_player_starts_game_and_a_opens():
    room = Room.open('R1', 'p1')
    joiner = room.add_opponent('p2')
    assert joiner.mark == MARK_B
    assert room.status == PLAYING
    assert room.current_turn == 'p1'


def test_join_rejections():
    room = Room.open('R1', 'p1')
    with pytest.raises(JoinError, match='Already in room'):
        room.add_opponent('p1')
    room.add_opponent('p2')
    with pytest.raises(JoinError, match='Room is full'):
        room.add_opponent('p3')


def test_turn_alternates_strictly():
    room = playing_room()
    room.apply_move('p1', 0, 0)
    assert room.current_turn == 'p2'
    room.apply_move('p2', 1, 1)
    assert room.current_turn == 'p1'


@pytest.mark.parametrize('mover,row,col', [
    ('p2', 0, 0),    # out of turn
    ('p3', 0, 0),    # not in the room
    ('p1', 13, 0),   # off the board
    ('p1', -1, 0),
])
def test_invalid_moves_leave_state_untouched(mover, row, col):
    room = playing_room()
    before = room.board.to_list()
    assert room.apply_move(mover, row, col) is None
    assert room.board.to_list() == before
    assert room.current_turn == 'p1'


def test_occupied_cell_is_rejected():
    room = playing_room()
    room.apply_move('p1', 4, 4)
    assert room.apply_move('p2', 4, 4) is None
    assert room.board.get(4, 4) == MARK_A
    assert room.current_turn == 'p2'


def test_no_moves_while_waiting():
    room = Room.open('R1', 'p1')
    assert room.apply_move('p1', 0, 0) is None
    assert room.board.get(0, 0) is None


def test_win_finishes_room_and_scores():
    room = playing_room()
    outcome = play_win_for_p1(room)
    assert outcome.kind == WIN_OUTCOME
    assert outcome.win_line == [(6, c) for c in range(6, 11)]
    assert room.status == FINISHED
    assert room.last_winner == 'p1'
    assert room.player('p1').score == 1
    # board frozen until reset
    assert room.apply_move('p2', 12, 12) is None
    assert room.board.get(12, 12) is None


def test_full_board_without_five_is_a_draw():
    # A 4x4 board can't hold a line of five
    room = playing_room(size=4)
    order = [(r, c) for r in range(4) for c in range(4)]
    outcomes = []
    for i, (r, c) in enumerate(order):
        outcomes.append(room.apply_move('p1' if i % 2 == 0 else 'p2', r, c))
    assert all(o is not None for o in outcomes)
    assert [o.kind for o in outcomes].count(DRAW_OUTCOME) == 1
    assert outcomes[-1].kind == DRAW_OUTCOME
    assert room.status == FINISHED
    assert room.last_winner is None


def test_rematch_needs_both_and_is_idempotent():
    room = playing_room()
    play_win_for_p1(room)
    assert room.mark_ready('p1') == (['p1'], False)
    assert room.mark_ready('p1') == (['p1'], False)
    assert room.mark_ready('p2') == (['p1', 'p2'], True)


def test_rematch_ignored_unless_finished_or_by_outsiders():
    room = playing_room()
    assert room.mark_ready('p1') is None
    play_win_for_p1(room)
    assert room.mark_ready('p9') is None
    assert room.ready_to_rematch == []


def test_reset_gives_winner_the_first_move():
    room = playing_room()
    room.apply_move('p1', 12, 12)
    # p2 wins on row 0 this time
    for i in range(4):
        room.apply_move('p2', 0, i)
        room.apply_move('p1', 12, i)
    assert room.apply_move('p2', 0, 4).kind == WIN_OUTCOME
    room.mark_ready('p1')
    room.mark_ready('p2')
    room.reset_for_rematch()
    assert room.status == PLAYING
    assert room.current_turn == 'p2'
    assert room.last_winner is None
    assert room.ready_to_rematch == []
    assert not any(cell for row in room.board.to_list() for cell in row)
    # scores survive the reset
    assert room.player('p2').score == 1


def test_reset_after_draw_falls_back_to_a():
    room = playing_room(size=4)
    for i, (r, c) in enumerate((r, c) for r in range(4) for c in range(4)):
        room.apply_move('p1' if i % 2 == 0 else 'p2', r, c)
    room.reset_for_rematch()
    assert room.current_turn == 'p1'
