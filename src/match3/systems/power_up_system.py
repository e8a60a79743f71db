from __future__ import annotations

import logging
import random
from typing import List, NamedTuple, Optional

from esper import World

from match3.components.board import Board, Position
from match3.components.power_up import PowerUpKind
from match3.constants import EMPTY, SHUFFLE_MAX_ATTEMPTS
from match3.events.bus import (
    EventBus,
    EVENT_POWER_UP_APPLIED,
    EVENT_POWER_UP_REQUEST,
)
from match3.systems.board_ops import get_board
from match3.systems.match import has_any_match
from match3.systems.match_resolution import MatchResolutionSystem

logger = logging.getLogger(__name__)


class PowerUpResult(NamedTuple):
    applied: bool
    affected: List[Position]
    cleared: int
    chains: int


class PowerUpSystem:
    """Applies board power-ups and resolves the board back to rest afterwards."""

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        resolution: MatchResolutionSystem,
        *,
        shuffle_attempts: int = SHUFFLE_MAX_ATTEMPTS,
    ) -> None:
        self.world = world
        self.event_bus = event_bus
        self.resolution = resolution
        self.shuffle_attempts = shuffle_attempts
        self.event_bus.subscribe(EVENT_POWER_UP_REQUEST, self._on_request)

    def _on_request(self, sender, **payload) -> None:
        kind = payload.get("kind")
        if not isinstance(kind, PowerUpKind):
            return
        self.apply(kind, target=payload.get("target"), value=payload.get("value"))

    def apply(
        self,
        kind: PowerUpKind,
        *,
        target: Optional[Position] = None,
        value: Optional[int] = None,
    ) -> PowerUpResult:
        board = get_board(self.world)
        board.reset_last_operation()
        if kind is PowerUpKind.HAMMER:
            affected = self._hammer_positions(board, target)
        elif kind is PowerUpKind.COLOR_BOMB:
            affected = self._color_positions(board, target, value)
        else:
            return self._shuffle(board)
        if not affected:
            return PowerUpResult(False, [], 0, 0)
        cleared, chains = self.resolution.clear_and_resolve(affected, reason=kind.value)
        return self._finish(kind, affected, cleared, chains)

    def _finish(self, kind: PowerUpKind, affected: List[Position], cleared: int, chains: int) -> PowerUpResult:
        self.event_bus.emit(
            EVENT_POWER_UP_APPLIED,
            kind=kind,
            affected=affected,
            cleared=cleared,
            chains=chains,
        )
        return PowerUpResult(True, affected, cleared, chains)

    @staticmethod
    def _hammer_positions(board: Board, target: Optional[Position]) -> List[Position]:
        if target is None:
            return []
        x, y = target
        if board.get_tile(x, y) == EMPTY:
            return []
        return [(x, y)]

    @staticmethod
    def _color_positions(board: Board, target: Optional[Position], value: Optional[int]) -> List[Position]:
        if value is None and target is not None:
            value = board.get_tile(*target)
        if value is None or value == EMPTY:
            return []
        return [(x, y) for x, y in board.positions() if board.tiles[x][y] == value]

    def _shuffle(self, board: Board) -> PowerUpResult:
        rng = getattr(self.world, "random", None)
        if not isinstance(rng, random.Random):
            rng = random.Random()
        positions = board.positions()
        cells = [(board.tiles[x][y], board.specials[x][y]) for x, y in positions]
        for _ in range(max(1, self.shuffle_attempts)):
            rng.shuffle(cells)
            for (x, y), (value, special) in zip(positions, cells):
                board.tiles[x][y] = value
                board.specials[x][y] = special
            if not has_any_match(board):
                break
        else:
            logger.debug("Shuffle left matches after %d attempts; resolving them", self.shuffle_attempts)
        cleared, chains = self.resolution.resolve(reason=PowerUpKind.SHUFFLE.value)
        return self._finish(PowerUpKind.SHUFFLE, positions, cleared, chains)
