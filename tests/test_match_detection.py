from match3.components.board import Board
from match3.constants import EMPTY
from match3.systems.match import (
    detect_matches,
    find_runs,
    has_any_match,
    has_line_match,
)
from tests.helpers import pattern_rows


def board_from(rows):
    board = Board(width=len(rows[0]), height=len(rows), tile_type_count=6)
    board.load_rows(rows)
    return board


def test_pattern_layout_has_no_runs():
    board = board_from(pattern_rows())
    assert find_runs(board) == []
    assert not has_any_match(board)
    assert not detect_matches(board)


def test_horizontal_and_vertical_runs_are_maximal():
    board = board_from([
        [0, 1, 2, 3, 4],
        [3, 1, 4, 0, 2],
        [3, 1, 2, 0, 4],
        [3, 2, 2, 2, 2],
    ])
    runs = find_runs(board)
    horizontal = [run for run in runs if run.horizontal]
    vertical = [run for run in runs if not run.horizontal]
    assert [(run.value, run.cells) for run in horizontal] == [(2, ((1, 0), (2, 0), (3, 0), (4, 0)))]
    assert sorted((run.value, run.cells) for run in vertical) == [
        (1, ((1, 1), (1, 2), (1, 3))),
        (3, ((0, 0), (0, 1), (0, 2))),
    ]
    assert horizontal[0].anchor == (4, 0)
    assert vertical[0].anchor[1] == 2


def test_empty_cells_never_match():
    board = Board(width=4, height=1, tile_type_count=3)
    assert not has_any_match(board)
    assert find_runs(board) == []
    board.load_rows([[1, 1, EMPTY, 1]])
    assert not has_any_match(board)


def test_t_shape_detected_at_junction():
    board = board_from([
        [0, 2, 2, 2, 0],
        [1, 3, 2, 4, 1],
        [0, 1, 2, 3, 0],
    ])
    scan = detect_matches(board)
    assert len(scan.shapes) == 1
    shape = scan.shapes[0]
    assert shape.junction == (2, 2)
    assert shape.is_t
    assert shape.cells == {(1, 2), (2, 2), (3, 2), (2, 1), (2, 0)}
    assert scan.matched == shape.cells


def test_l_shape_detected_at_corner():
    board = board_from([
        [2, 0, 1],
        [2, 1, 0],
        [2, 2, 2],
    ])
    scan = detect_matches(board)
    assert len(scan.shapes) == 1
    shape = scan.shapes[0]
    assert shape.junction == (0, 0)
    assert not shape.is_t


def test_junction_inside_vertical_arm_only_is_an_l():
    board = board_from([
        [2, 0, 1],
        [2, 2, 2],
        [2, 1, 0],
    ])
    shape = detect_matches(board).shapes[0]
    assert shape.junction == (0, 1)
    assert not shape.is_t


def test_runs_that_only_touch_do_not_form_a_shape():
    board = board_from([
        [0, 1, 0, 3],
        [4, 0, 4, 3],
        [2, 2, 2, 3],
    ])
    scan = detect_matches(board)
    assert scan.shapes == []
    assert len(scan.runs) == 2
    assert len(scan.matched) == 6


def test_has_line_match_through_position():
    board = board_from([
        [0, 1, 2],
        [0, 2, 1],
        [0, 1, 2],
    ])
    assert has_line_match(board, (0, 1))
    assert not has_line_match(board, (1, 1))
    assert not has_line_match(board, (9, 9))


def test_runs_sharing_cells_form_one_group():
    board = board_from([
        [2, 0, 1, 4, 4],
        [2, 1, 0, 3, 3],
        [2, 2, 2, 0, 1],
        [1, 0, 3, 3, 3],
    ])
    groups = detect_matches(board).groups
    assert [sorted(group.cells) for group in groups] == [
        [(2, 0), (3, 0), (4, 0)],
        [(0, 1), (0, 2), (0, 3), (1, 1), (2, 1)],
    ]
    assert [len(group.runs) for group in groups] == [1, 2]
    assert [shape.junction for shape in groups[1].shapes] == [(0, 1)]
