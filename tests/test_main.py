import logging

from main import build_session, main, play
from match3.systems.board_ops import assert_board_at_rest
from match3.systems.score_system import get_or_create_score


def test_session_plays_automatic_moves():
    session = build_session(seed=12)
    made = play(session, 5)
    score = get_or_create_score(session.world)
    assert score.moves == made
    assert (score.current > 0) == (made > 0)
    assert_board_at_rest(session.board_system.board)


def test_small_board_session():
    session = build_session(seed=3, width=5, height=4, tile_type_count=4)
    board = session.board_system.board
    assert (board.width, board.height, board.tile_type_count) == (5, 4, 4)


def test_main_logs_final_score(caplog):
    with caplog.at_level(logging.INFO, logger="main"):
        assert main(["7", "3"]) == 0
    assert any(message.startswith("Final score") for message in caplog.messages)
