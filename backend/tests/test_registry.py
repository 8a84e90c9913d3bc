import random

from fiveinrow.services.game import RoomRegistry, generate_room_code, WAITING


def test_generated_codes_are_short_upper_alnum():
    code = generate_room_code(6, rng=random.Random(7))
    assert len(code) == 6
    assert code.isalnum() and code.upper() == code


def test_create_lookup_remove():
    registry = RoomRegistry()
    code, room = registry.create('p1')
    assert registry.lookup(code) is room
    assert room.status == WAITING
    assert room.board.size == 13
    assert code in registry
    assert registry.remove(code) is room
    assert registry.lookup(code) is None
    assert len(registry) == 0


def test_lookup_is_case_insensitive():
    registry = RoomRegistry(code_factory=lambda: 'ab12cd')
    code, room = registry.create('p1')
    assert code == 'AB12CD'
    assert registry.lookup(' ab12cd ') is room


def test_collisions_are_regenerated():
    codes = iter(['AAAAAA', 'AAAAAA', 'BBBBBB'])
    registry = RoomRegistry(code_factory=lambda: next(codes))
    first, _ = registry.create('p1')
    second, _ = registry.create('p2')
    assert (first, second) == ('AAAAAA', 'BBBBBB')


def test_freed_code_may_be_reused():
    registry = RoomRegistry(code_factory=lambda: 'SAME01')
    code, _ = registry.create('p1')
    registry.remove(code)
    again, _ = registry.create('p2')
    assert again == code


def test_rooms_with_player():
    registry = RoomRegistry()
    code1, room1 = registry.create('p1')
    code2, room2 = registry.create('p2')
    room2.add_opponent('p1')
    assert {r.code for r in registry.rooms_with('p1')} == {code1, code2}
    assert registry.rooms_with('nobody') == []


def test_isolated_instances():
    a, b = RoomRegistry(), RoomRegistry()
    code, _ = a.create('p1')
    assert b.lookup(code) is None
