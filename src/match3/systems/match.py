from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Set, Tuple

from match3.components.board import Board, Position
from match3.constants import EMPTY, MIN_MATCH_LENGTH


@dataclass(frozen=True, slots=True)
class Run:
    """Maximal line of identical values, cells ordered by increasing x (or y)."""

    value: int
    cells: Tuple[Position, ...]
    horizontal: bool

    @property
    def length(self) -> int:
        return len(self.cells)

    @property
    def anchor(self) -> Position:
        # Rightmost cell of a horizontal run, topmost of a vertical one.
        return self.cells[-1]


@dataclass(frozen=True, slots=True)
class Shape:
    """Junction of a horizontal and a vertical run sharing one cell."""

    junction: Position
    horizontal: Run
    vertical: Run

    @property
    def is_t(self) -> bool:
        # A T needs the junction strictly inside the horizontal arm; otherwise it is an L.
        cells = self.horizontal.cells
        return cells[0] != self.junction and cells[-1] != self.junction

    @property
    def cells(self) -> Set[Position]:
        return set(self.horizontal.cells) | set(self.vertical.cells)


@dataclass(frozen=True, slots=True)
class MatchGroup:
    """Runs connected through shared cells; the unit that earns at most one special."""

    runs: Tuple[Run, ...]
    shapes: Tuple[Shape, ...]
    cells: FrozenSet[Position]


@dataclass(slots=True)
class MatchScan:
    runs: List[Run] = field(default_factory=list)
    shapes: List[Shape] = field(default_factory=list)
    groups: List[MatchGroup] = field(default_factory=list)
    matched: Set[Position] = field(default_factory=set)

    def __bool__(self) -> bool:
        return bool(self.matched)


def _scan_line(board: Board, cells: List[Position], horizontal: bool) -> List[Run]:
    runs: List[Run] = []
    run: List[Position] = []
    last_value = EMPTY
    for x, y in cells:
        value = board.tiles[x][y]
        if value != EMPTY and value == last_value:
            run.append((x, y))
            continue
        if len(run) >= MIN_MATCH_LENGTH:
            runs.append(Run(value=last_value, cells=tuple(run), horizontal=horizontal))
        run = [(x, y)] if value != EMPTY else []
        last_value = value
    if len(run) >= MIN_MATCH_LENGTH:
        runs.append(Run(value=last_value, cells=tuple(run), horizontal=horizontal))
    return runs


def find_runs(board: Board) -> List[Run]:
    """All maximal runs of length >= 3: rows bottom to top, then columns left to right."""
    runs: List[Run] = []
    for y in range(board.height):
        runs.extend(_scan_line(board, [(x, y) for x in range(board.width)], horizontal=True))
    for x in range(board.width):
        runs.extend(_scan_line(board, [(x, y) for y in range(board.height)], horizontal=False))
    return runs


def find_shapes(runs: List[Run]) -> List[Shape]:
    horizontal_at: Dict[Position, Run] = {}
    for run in runs:
        if run.horizontal:
            for cell in run.cells:
                horizontal_at[cell] = run
    shapes: List[Shape] = []
    for run in runs:
        if run.horizontal:
            continue
        for cell in run.cells:
            crossing = horizontal_at.get(cell)
            if crossing is not None and crossing.value == run.value:
                shapes.append(Shape(junction=cell, horizontal=crossing, vertical=run))
    shapes.sort(key=lambda shape: (shape.junction[1], shape.junction[0]))
    return shapes


def group_runs(runs: List[Run], shapes: List[Shape]) -> List[MatchGroup]:
    """Merge runs sharing a cell into groups, ordered by their lowest (y, x) cell."""
    owner: Dict[Position, int] = {}
    parent = list(range(len(runs)))

    def _root(index: int) -> int:
        while parent[index] != index:
            parent[index] = parent[parent[index]]
            index = parent[index]
        return index

    for index, run in enumerate(runs):
        for cell in run.cells:
            other = owner.setdefault(cell, index)
            if other != index:
                parent[_root(index)] = _root(other)

    members: Dict[int, List[Run]] = {}
    for index, run in enumerate(runs):
        members.setdefault(_root(index), []).append(run)

    groups: List[MatchGroup] = []
    for linked in members.values():
        cells = frozenset(cell for run in linked for cell in run.cells)
        group_shapes = tuple(shape for shape in shapes if shape.junction in cells)
        groups.append(MatchGroup(runs=tuple(linked), shapes=group_shapes, cells=cells))
    groups.sort(key=lambda group: min((y, x) for x, y in group.cells))
    return groups


def detect_matches(board: Board) -> MatchScan:
    runs = find_runs(board)
    if not runs:
        return MatchScan()
    shapes = find_shapes(runs)
    matched = {cell for run in runs for cell in run.cells}
    return MatchScan(runs=runs, shapes=shapes, groups=group_runs(runs, shapes), matched=matched)


def has_any_match(board: Board) -> bool:
    tiles = board.tiles
    for y in range(board.height):
        for x in range(board.width - 2):
            value = tiles[x][y]
            if value != EMPTY and value == tiles[x + 1][y] and value == tiles[x + 2][y]:
                return True
    for x in range(board.width):
        column = tiles[x]
        for y in range(board.height - 2):
            value = column[y]
            if value != EMPTY and value == column[y + 1] and value == column[y + 2]:
                return True
    return False


def has_line_match(board: Board, pos: Position) -> bool:
    """Return True if a horizontal or vertical run of 3+ passes through pos."""
    x, y = pos
    value = board.get_tile(x, y)
    if value == EMPTY:
        return False
    # Horizontal sweep
    left = x
    while board.get_tile(left - 1, y) == value:
        left -= 1
    right = x
    while board.get_tile(right + 1, y) == value:
        right += 1
    if right - left + 1 >= MIN_MATCH_LENGTH:
        return True
    # Vertical sweep
    down = y
    while board.get_tile(x, down - 1) == value:
        down -= 1
    up = y
    while board.get_tile(x, up + 1) == value:
        up += 1
    return up - down + 1 >= MIN_MATCH_LENGTH
