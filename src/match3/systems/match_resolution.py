from __future__ import annotations

import logging
from typing import Iterable, List, Set, Tuple

from esper import World

from match3.components.board import Board, Position
from match3.components.cascade_state import CascadeState
from match3.constants import MAX_CASCADE_PASSES, SPECIAL_TILE_POWER
from match3.events.bus import (
    EventBus,
    EVENT_CASCADE_COMPLETE,
    EVENT_CASCADE_STEP,
    EVENT_GRAVITY_APPLIED,
    EVENT_MATCH_CLEARED,
    EVENT_MATCH_FOUND,
    EVENT_REFILL_COMPLETED,
    EVENT_SPECIAL_TILE_ACTIVATED,
    EVENT_SPECIAL_TILE_CREATED,
)
from match3.systems.board_ops import (
    assert_no_empty_cells,
    clear_positions,
    collapse_and_refill,
    get_board,
    get_spawner,
)
from match3.systems.match import MatchScan, detect_matches
from match3.systems.special_tiles import activation_cells, plan_special_tiles

logger = logging.getLogger(__name__)


def get_or_create_cascade_state(world: World) -> CascadeState:
    """Return the shared CascadeState component, creating it if absent."""
    existing = list(world.get_component(CascadeState))
    if existing:
        return existing[0][1]
    world.create_entity(CascadeState())
    return list(world.get_component(CascadeState))[0][1]


class MatchResolutionSystem:
    """Runs the clear -> activate -> collapse -> refill loop until the board is at rest.

    Everything happens synchronously inside resolve(); the events emitted along
    the way let a presentation layer replay the cascade at its own pace.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        *,
        special_power: int = SPECIAL_TILE_POWER,
        max_passes: int = MAX_CASCADE_PASSES,
    ):
        self.world = world
        self.event_bus = event_bus
        self.special_power = special_power
        self.max_passes = max_passes

    def resolve(self, reason: str = "swap") -> Tuple[int, int]:
        """Resolve every match on the board; returns (cleared, chains)."""
        return self._run(reason, cleared=0)

    def clear_and_resolve(self, positions: Iterable[Position], reason: str) -> Tuple[int, int]:
        """Clear positions directly (no activation), refill, then resolve what follows.

        The direct clear is not counted as a chain; returned cleared includes it.
        """
        board = get_board(self.world)
        typed = clear_positions(board, positions)
        if not typed:
            return 0, 0
        cleared_positions = [(x, y) for x, y, _ in typed]
        board.last_cleared.extend(cleared_positions)
        self.event_bus.emit(
            EVENT_MATCH_CLEARED,
            positions=cleared_positions,
            values=typed,
            depth=0,
            reason=reason,
        )
        self._collapse_and_refill(board, depth=0)
        return self._run(reason, cleared=len(typed))

    def _run(self, reason: str, *, cleared: int) -> Tuple[int, int]:
        board = get_board(self.world)
        state = get_or_create_cascade_state(self.world)
        state.reason = reason
        state.active = True
        state.depth = 0
        state.cleared = cleared
        chains = 0
        while True:
            scan = detect_matches(board)
            if not scan:
                break
            if chains >= self.max_passes:
                logger.warning(
                    "Cascade stopped after %d passes (%s); board still holds matches",
                    chains,
                    reason,
                )
                break
            chains += 1
            cleared += self._resolve_pass(board, scan, depth=chains, reason=reason)
            state.depth = chains
            state.cleared = cleared
        state.active = False
        assert_no_empty_cells(board)
        if chains:
            logger.debug("Resolved %s: cleared=%d chains=%d", reason, cleared, chains)
        self.event_bus.emit(EVENT_CASCADE_COMPLETE, depth=chains, cleared=cleared, reason=reason)
        return cleared, chains

    def _resolve_pass(self, board: Board, scan: MatchScan, *, depth: int, reason: str) -> int:
        matched = sorted(scan.matched, key=lambda pos: (pos[1], pos[0]))
        self.event_bus.emit(EVENT_CASCADE_STEP, depth=depth, positions=matched, reason=reason)
        self.event_bus.emit(EVENT_MATCH_FOUND, positions=matched, size=len(matched), depth=depth)

        to_clear: Set[Position] = set(scan.matched)
        for pos in matched:
            special = board.get_special_tile(*pos)
            if not special.is_special:
                continue
            affected = activation_cells(board, pos)
            to_clear |= affected
            self.event_bus.emit(
                EVENT_SPECIAL_TILE_ACTIVATED,
                position=pos,
                kind=special.kind,
                affected=sorted(affected),
            )

        anchors: Set[Position] = set()
        for placement in plan_special_tiles(scan, power=self.special_power):
            x, y = placement.position
            board.set_tile(x, y, placement.special.base_value)
            board.set_special_tile(x, y, placement.special)
            board.specials_created.append(placement.position)
            anchors.add(placement.position)
            self.event_bus.emit(
                EVENT_SPECIAL_TILE_CREATED,
                position=placement.position,
                kind=placement.special.kind,
                base_value=placement.special.base_value,
            )

        typed = clear_positions(board, to_clear - anchors)
        cleared_positions: List[Position] = [(x, y) for x, y, _ in typed]
        board.last_cleared.extend(cleared_positions)
        self.event_bus.emit(EVENT_MATCH_CLEARED, positions=cleared_positions, values=typed, depth=depth, reason=reason)
        self._collapse_and_refill(board, depth=depth)
        return len(typed)

    def _collapse_and_refill(self, board: Board, *, depth: int) -> None:
        moves, spawned = collapse_and_refill(board, get_spawner(self.world))
        self.event_bus.emit(EVENT_GRAVITY_APPLIED, moves=moves, depth=depth)
        if spawned:
            self.event_bus.emit(EVENT_REFILL_COMPLETED, new_tiles=spawned, depth=depth)
