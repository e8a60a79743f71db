import pytest

from esper import World

from match3.components.board import Board
from match3.events.bus import EVENT_BOARD_INITIALIZED, EVENT_BOARD_RESET_REQUEST, EventBus
from match3.spawner import UniformSpawner, WeightedSpawner
from match3.systems.board import BoardSystem
from match3.systems.board_ops import (
    get_board,
    find_valid_swaps,
    get_spawner,
)
from match3.world import create_world


def test_default_board_is_eight_by_eight():
    bus = EventBus()
    world = create_world(seed=1)
    board_system = BoardSystem(world, bus)
    assert (board_system.width, board_system.height) == (8, 8)
    assert get_board(world) is board_system.board
    assert isinstance(get_spawner(world), UniformSpawner)
    assert board_system.view.tile_type_count == 6


def test_board_initialized_event_payload():
    bus = EventBus()
    world = create_world(seed=1)
    received = []
    bus.subscribe(EVENT_BOARD_INITIALIZED, lambda sender, **kw: received.append(kw))
    BoardSystem(world, bus, 5, 4, tile_type_count=4)
    assert received == [{"width": 5, "height": 4, "tile_type_count": 4}]


def test_explicit_spawner_sets_tile_type_count():
    bus = EventBus()
    world = create_world(seed=2)
    spawner = WeightedSpawner([1, 1, 1, 0, 1], world.random)
    board_system = BoardSystem(world, bus, 6, 6, spawner=spawner)
    board = board_system.board
    assert board.tile_type_count == 5
    assert get_spawner(world) is spawner
    assert all(board.get_tile(x, y) != 3 for x, y in board.positions())


def test_reset_request_refills_board_keeping_size():
    bus = EventBus()
    world = create_world(seed=4)
    board_system = BoardSystem(world, bus, 6, 5)
    first = board_system.board
    bus.emit(EVENT_BOARD_RESET_REQUEST)
    second = board_system.board
    assert second is not first
    assert (second.width, second.height) == (6, 5)
    assert len(list(world.get_component(Board))) == 1


def test_initialize_can_change_size_and_types():
    bus = EventBus()
    world = create_world(seed=4)
    board_system = BoardSystem(world, bus)
    board = board_system.initialize(4, 3, tile_type_count=3)
    assert (board.width, board.height, board.tile_type_count) == (4, 3, 3)
    assert get_spawner(world).tile_type_count() == 3


def test_get_tile_delegates_with_sentinels():
    bus = EventBus()
    world = create_world(seed=8)
    board_system = BoardSystem(world, bus, 3, 3)
    assert board_system.get_tile(3, 0) == -1
    assert not board_system.get_special_tile(-1, 0).is_special
    assert 0 <= board_system.get_tile(1, 1) < 6
    assert BoardSystem.are_adjacent((1, 1), (1, 2))


def test_lookups_fail_without_board():
    world = World()
    with pytest.raises(RuntimeError):
        get_board(world)
    with pytest.raises(RuntimeError):
        get_spawner(world)


def test_board_without_any_move():
    board = Board(width=3, height=3, tile_type_count=9)
    board.load_rows([[0, 1, 2], [3, 4, 5], [6, 7, 8]])
    assert find_valid_swaps(board) == []


def test_spawner_and_tile_type_count_must_agree():
    bus = EventBus()
    world = create_world(seed=6)
    spawner = UniformSpawner(4, world.random)
    with pytest.raises(ValueError):
        BoardSystem(world, bus, 4, 4, tile_type_count=6, spawner=spawner)
    board_system = BoardSystem(world, bus, 4, 4, tile_type_count=4, spawner=spawner)
    assert board_system.board.tile_type_count == 4
