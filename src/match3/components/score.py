from dataclasses import dataclass


@dataclass(slots=True)
class Score:
    """Running score for the session; reset alongside the board, never persisted."""

    current: int = 0
    best_chain: int = 0
    moves: int = 0
