"""Special tile creation rules and activation effects.

Creation (applied per cascade pass, before clearing):

- run of 4: Bomb when horizontal, Lightning when vertical
- run of 5: Rainbow
- run of 6 or more: Star
- L/T junction: Star for a T, Bomb for an L

Runs that share cells form one group, and a group creates at most one
special. A group with junctions keeps the strongest kind among its shapes
and runs (Star > Rainbow > Lightning > Bomb).
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Set

from match3.components.board import Board, Position
from match3.components.special_tile import SpecialKind, SpecialTile, strongest
from match3.constants import SPECIAL_TILE_POWER
from match3.systems.match import MatchGroup, MatchScan, Run, Shape

ActivationEffect = Callable[[Board, Position, SpecialTile], Set[Position]]


@dataclass(frozen=True, slots=True)
class SpecialPlacement:
    position: Position
    special: SpecialTile


# ---------------------------------------------------------------------------
# Activation
# ---------------------------------------------------------------------------

def bomb_cells(board: Board, pos: Position, special: SpecialTile) -> Set[Position]:
    x, y = pos
    radius = 1 + special.power
    return {
        (tx, ty)
        for tx in range(x - radius, x + radius + 1)
        for ty in range(y - radius, y + radius + 1)
        if board.in_bounds(tx, ty)
    }


def cross_cells(board: Board, pos: Position, special: SpecialTile) -> Set[Position]:
    x, y = pos
    cells = {(tx, y) for tx in range(board.width)}
    cells.update((x, ty) for ty in range(board.height))
    return cells


def rainbow_cells(board: Board, pos: Position, special: SpecialTile) -> Set[Position]:
    return {(x, y) for x, y in board.positions() if board.tiles[x][y] == special.base_value}


ACTIVATION_EFFECTS: Dict[SpecialKind, ActivationEffect] = {
    SpecialKind.BOMB: bomb_cells,
    SpecialKind.LIGHTNING: cross_cells,
    SpecialKind.STAR: cross_cells,
    SpecialKind.RAINBOW: rainbow_cells,
}


def activation_cells(board: Board, pos: Position) -> Set[Position]:
    """Cells the special tile at pos clears when it fires (empty for ordinary tiles)."""
    special = board.get_special_tile(*pos)
    effect = ACTIVATION_EFFECTS.get(special.kind)
    if effect is None:
        return set()
    return effect(board, pos, special)


# ---------------------------------------------------------------------------
# Creation
# ---------------------------------------------------------------------------

def run_kind(run: Run) -> SpecialKind:
    if run.length >= 6:
        return SpecialKind.STAR
    if run.length == 5:
        return SpecialKind.RAINBOW
    if run.length == 4:
        return SpecialKind.BOMB if run.horizontal else SpecialKind.LIGHTNING
    return SpecialKind.NONE


def shape_kind(shape: Shape) -> SpecialKind:
    return SpecialKind.STAR if shape.is_t else SpecialKind.BOMB


def group_placement(group: MatchGroup, *, power: int) -> Optional[SpecialPlacement]:
    """The single special a connected group earns, if any.

    A lone run anchors on its own anchor cell. A group with junctions anchors
    on the lowest junction of its strongest shape and takes the strongest kind
    among its shapes and runs.
    """
    if not group.shapes:
        (run,) = group.runs
        kind = run_kind(run)
        if kind is SpecialKind.NONE:
            return None
        return SpecialPlacement(run.anchor, SpecialTile(base_value=run.value, kind=kind, power=power))
    best_shape = strongest(*(shape_kind(shape) for shape in group.shapes))
    chosen = next(shape for shape in group.shapes if shape_kind(shape) is best_shape)
    kind = strongest(best_shape, *(run_kind(run) for run in group.runs))
    special = SpecialTile(base_value=chosen.horizontal.value, kind=kind, power=power)
    return SpecialPlacement(chosen.junction, special)


def plan_special_tiles(scan: MatchScan, *, power: int = SPECIAL_TILE_POWER) -> List[SpecialPlacement]:
    """Decide which special tiles a pass creates and where; board is not touched.

    Each group keeps at least two cells besides its anchor, so every pass
    clears something.
    """
    placements = []
    for group in scan.groups:
        placement = group_placement(group, power=power)
        if placement is not None:
            placements.append(placement)
    placements.sort(key=lambda placement: (placement.position[1], placement.position[0]))
    return placements
