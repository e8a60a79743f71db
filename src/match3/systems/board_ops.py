from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Tuple

from esper import World

from match3.components.board import Board, BoardInvariantError, Position
from match3.components.special_tile import NO_SPECIAL
from match3.constants import EMPTY, INITIAL_FILL_MAX_ATTEMPTS
from match3.spawner import Spawner
from match3.systems.match import has_any_match, has_line_match

logger = logging.getLogger(__name__)

ValueEntry = Tuple[int, int, int]


@dataclass(slots=True)
class GravityMove:
    source: Position
    target: Position
    value: int


def get_board(world: World) -> Board:
    for _, board in world.get_component(Board):
        return board
    raise RuntimeError("Board component not found")


def get_spawner(world: World) -> Spawner:
    spawner = getattr(world, "spawner", None)
    if spawner is None:
        raise RuntimeError("No spawner attached to world; construct a BoardSystem first")
    return spawner


def would_create_match(board: Board, x: int, y: int, value: int) -> bool:
    """True if value at (x, y) completes a 3-run with the two cells to its left or below."""
    if x >= 2 and value == board.tiles[x - 1][y] and value == board.tiles[x - 2][y]:
        return True
    if y >= 2 and value == board.tiles[x][y - 1] and value == board.tiles[x][y - 2]:
        return True
    return False


def fill_without_matches(
    board: Board,
    spawner: Spawner,
    *,
    max_attempts: int = INITIAL_FILL_MAX_ATTEMPTS,
) -> int:
    """Fill every cell, bottom row first, avoiding runs where the spawner allows it.

    Each cell gets at most max_attempts draws; after that the last draw is kept
    even if it forms a run. Returns how many cells were accepted that way.
    """
    compromises = 0
    for y in range(board.height):
        for x in range(board.width):
            attempts = 0
            while True:
                value = spawner.next_tile_value()
                attempts += 1
                if not would_create_match(board, x, y, value) or attempts >= max(1, max_attempts):
                    break
            if would_create_match(board, x, y, value):
                compromises += 1
            board.tiles[x][y] = value
            board.specials[x][y] = NO_SPECIAL
    if compromises:
        logger.debug("Initial fill accepted %d cell(s) forming runs after %d attempts", compromises, max_attempts)
    return compromises


def clear_positions(board: Board, positions: Iterable[Position]) -> List[ValueEntry]:
    """Empty the given cells (tile and overlay); returns (x, y, value) for cells that held a tile."""
    cleared: List[ValueEntry] = []
    for x, y in sorted(set(positions)):
        if not board.in_bounds(x, y):
            continue
        value = board.tiles[x][y]
        if value == EMPTY:
            continue
        cleared.append((x, y, value))
        board.clear_cell(x, y)
    return cleared


def collapse_columns(board: Board) -> List[GravityMove]:
    """Compact each column toward y = 0, keeping order; moves tile and overlay together."""
    moves: List[GravityMove] = []
    for x in range(board.width):
        tiles = board.tiles[x]
        specials = board.specials[x]
        write = 0
        for y in range(board.height):
            value = tiles[y]
            if value == EMPTY:
                continue
            if write != y:
                tiles[write] = value
                specials[write] = specials[y]
                tiles[y] = EMPTY
                specials[y] = NO_SPECIAL
                moves.append(GravityMove(source=(x, y), target=(x, write), value=value))
            write += 1
    return moves


def refill_empty_cells(board: Board, spawner: Spawner) -> List[Position]:
    """Fill every empty cell from the spawner, column by column from the bottom."""
    spawned: List[Position] = []
    for x in range(board.width):
        for y in range(board.height):
            if board.tiles[x][y] != EMPTY:
                continue
            board.tiles[x][y] = spawner.next_tile_value()
            board.specials[x][y] = NO_SPECIAL
            spawned.append((x, y))
    return spawned


def collapse_and_refill(board: Board, spawner: Spawner) -> Tuple[List[GravityMove], List[Position]]:
    moves = collapse_columns(board)
    spawned = refill_empty_cells(board, spawner)
    board.last_spawned.extend(spawned)
    return moves, spawned


def predict_swap_creates_match(board: Board, src: Position, dst: Position) -> bool:
    """Return True if swapping src/dst would create a match through either cell."""
    if not (board.in_bounds(*src) and board.in_bounds(*dst)):
        return False
    if board.get_tile(*src) == EMPTY or board.get_tile(*dst) == EMPTY:
        return False
    board.swap(src, dst)
    try:
        return has_line_match(board, src) or has_line_match(board, dst)
    finally:
        board.swap(src, dst)


def find_valid_swaps(board: Board) -> List[Tuple[Position, Position]]:
    """Enumerate adjacent swaps (right and up neighbours) that would produce a match."""
    swaps: List[Tuple[Position, Position]] = []
    for y in range(board.height):
        for x in range(board.width):
            pos = (x, y)
            right = (x + 1, y)
            if x + 1 < board.width and predict_swap_creates_match(board, pos, right):
                swaps.append((pos, right))
            up = (x, y + 1)
            if y + 1 < board.height and predict_swap_creates_match(board, pos, up):
                swaps.append((pos, up))
    return swaps


def assert_no_empty_cells(board: Board) -> None:
    empties = board.empty_positions()
    if empties:
        raise BoardInvariantError(f"Board left with empty cells: {empties}")


def assert_board_at_rest(board: Board) -> None:
    board.check_dimensions()
    assert_no_empty_cells(board)
    if has_any_match(board):
        raise BoardInvariantError("Board at rest still contains a match")
