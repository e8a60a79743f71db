from __future__ import annotations

import logging
import random
from typing import NamedTuple, Optional, Tuple

from esper import World

from match3.components.board import Board, BoardView, Position
from match3.components.special_tile import SpecialTile
from match3.constants import GRID_HEIGHT, GRID_WIDTH, INITIAL_FILL_MAX_ATTEMPTS, TILE_TYPE_COUNT
from match3.events.bus import (
    EventBus,
    EVENT_BOARD_INITIALIZED,
    EVENT_BOARD_RESET_REQUEST,
    EVENT_SWAP_RESOLVED,
    EVENT_TILE_SWAP_INVALID,
    EVENT_TILE_SWAP_REQUEST,
    EVENT_TILE_SWAP_VALID,
)
from match3.spawner import Spawner, UniformSpawner
from match3.systems.board_ops import fill_without_matches
from match3.systems.match import has_any_match
from match3.systems.match_resolution import MatchResolutionSystem

logger = logging.getLogger(__name__)


class SwapResult(NamedTuple):
    success: bool
    cleared: int
    chains: int


FAILED_SWAP = SwapResult(False, 0, 0)


class BoardSystem:
    """Owns the board entity: fills it, validates swaps and hands matches to the resolver.

    The board spawner lives on ``world.spawner`` so the resolver and power-ups
    refill from the same source. Without an explicit spawner the board draws
    uniformly over ``[0, tile_type_count)`` using ``world.random``.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        width: int = GRID_WIDTH,
        height: int = GRID_HEIGHT,
        *,
        tile_type_count: Optional[int] = None,
        spawner: Optional[Spawner] = None,
        resolution: Optional[MatchResolutionSystem] = None,
        max_fill_attempts: int = INITIAL_FILL_MAX_ATTEMPTS,
    ):
        self.world = world
        self.event_bus = event_bus
        self.max_fill_attempts = max_fill_attempts
        self.resolution = resolution or MatchResolutionSystem(world, event_bus)
        self.board_entity: Optional[int] = None
        self.event_bus.subscribe(EVENT_TILE_SWAP_REQUEST, self.on_swap_request)
        self.event_bus.subscribe(EVENT_BOARD_RESET_REQUEST, self.on_reset_request)
        self.initialize(width, height, tile_type_count=tile_type_count, spawner=spawner)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def initialize(
        self,
        width: Optional[int] = None,
        height: Optional[int] = None,
        *,
        tile_type_count: Optional[int] = None,
        spawner: Optional[Spawner] = None,
    ) -> Board:
        """(Re)create the board and fill it without immediate matches (best effort)."""
        previous = self._board_or_none()
        width = width if width is not None else (previous.width if previous else GRID_WIDTH)
        height = height if height is not None else (previous.height if previous else GRID_HEIGHT)
        spawner = self._resolve_spawner(spawner, tile_type_count, previous)
        board = Board(width=width, height=height, tile_type_count=spawner.tile_type_count())
        fill_without_matches(board, spawner, max_attempts=self.max_fill_attempts)
        if self.board_entity is None:
            self.board_entity = self.world.create_entity(board)
        else:
            self.world.add_component(self.board_entity, board)
        logger.debug("Board initialized %dx%d with %d tile types", width, height, board.tile_type_count)
        self.event_bus.emit(
            EVENT_BOARD_INITIALIZED,
            width=width,
            height=height,
            tile_type_count=board.tile_type_count,
        )
        return board

    def _resolve_spawner(
        self,
        spawner: Optional[Spawner],
        tile_type_count: Optional[int],
        previous: Optional[Board],
    ) -> Spawner:
        if spawner is not None and tile_type_count is not None and spawner.tile_type_count() != tile_type_count:
            raise ValueError(
                f"tile_type_count={tile_type_count} does not match the spawner's {spawner.tile_type_count()}"
            )
        if spawner is None:
            spawner = getattr(self.world, "spawner", None)
            if spawner is not None and tile_type_count is not None and spawner.tile_type_count() != tile_type_count:
                spawner = None
        if spawner is None:
            count = tile_type_count or (previous.tile_type_count if previous else TILE_TYPE_COUNT)
            rng = getattr(self.world, "random", None)
            if not isinstance(rng, random.Random):
                rng = random.Random()
                setattr(self.world, "random", rng)
            spawner = UniformSpawner(count, rng)
        setattr(self.world, "spawner", spawner)
        return spawner

    def on_reset_request(self, sender, **kwargs):
        self.initialize()

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    def _board_or_none(self) -> Optional[Board]:
        if self.board_entity is None:
            return None
        return self.world.component_for_entity(self.board_entity, Board)

    @property
    def board(self) -> Board:
        board = self._board_or_none()
        if board is None:
            raise RuntimeError("Board has not been initialized")
        return board

    @property
    def view(self) -> BoardView:
        return self.board.view()

    @property
    def width(self) -> int:
        return self.board.width

    @property
    def height(self) -> int:
        return self.board.height

    def get_tile(self, x: int, y: int) -> int:
        return self.board.get_tile(x, y)

    def get_special_tile(self, x: int, y: int) -> SpecialTile:
        return self.board.get_special_tile(x, y)

    @staticmethod
    def are_adjacent(a: Tuple[int, int], b: Tuple[int, int]) -> bool:
        return Board.are_adjacent(a, b)

    # ------------------------------------------------------------------
    # Swaps
    # ------------------------------------------------------------------

    def on_swap_request(self, sender, **kwargs):
        src = kwargs.get('src')
        dst = kwargs.get('dst')
        if not src or not dst:
            return
        self.try_swap_and_resolve(tuple(src), tuple(dst))

    def try_swap_and_resolve(self, a: Position, b: Position) -> SwapResult:
        board = self.board
        board.reset_last_operation()
        if not (board.in_bounds(*a) and board.in_bounds(*b)):
            return self._reject(a, b, "out_of_bounds")
        if not self.are_adjacent(a, b):
            return self._reject(a, b, "not_adjacent")
        board.swap(a, b)
        if not has_any_match(board):
            board.swap(a, b)
            return self._reject(a, b, "no_match")
        self.event_bus.emit(EVENT_TILE_SWAP_VALID, src=a, dst=b)
        cleared, chains = self.resolution.resolve(reason="swap")
        result = SwapResult(True, cleared, chains)
        self.event_bus.emit(EVENT_SWAP_RESOLVED, src=a, dst=b, success=True, cleared=cleared, chains=chains)
        return result

    def _reject(self, a: Position, b: Position, reason: str) -> SwapResult:
        self.event_bus.emit(EVENT_TILE_SWAP_INVALID, src=a, dst=b, reason=reason)
        self.event_bus.emit(EVENT_SWAP_RESOLVED, src=a, dst=b, success=False, cleared=0, chains=0)
        return FAILED_SWAP
