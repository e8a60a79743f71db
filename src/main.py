"""Entry point for a headless match-3 session.

Wires the ECS world, event bus and systems together, then plays automatic
moves (first valid swap each turn) and logs what the cascade did.
"""
import logging
import sys
from dataclasses import dataclass

from esper import World

from match3.events.bus import EventBus, EVENT_CASCADE_COMPLETE, EVENT_SPECIAL_TILE_CREATED
from match3.systems.board import BoardSystem
from match3.systems.board_ops import find_valid_swaps
from match3.systems.match_resolution import MatchResolutionSystem
from match3.systems.power_up_system import PowerUpSystem
from match3.systems.score_system import ScoreSystem, get_or_create_score
from match3.world import create_world

logger = logging.getLogger(__name__)


@dataclass
class Session:
    world: World
    event_bus: EventBus
    board_system: BoardSystem
    score_system: ScoreSystem
    power_up_system: PowerUpSystem


def build_session(seed=None, width=8, height=8, tile_type_count=6) -> Session:
    event_bus = EventBus()
    world = create_world(seed=seed)
    resolution = MatchResolutionSystem(world, event_bus)
    board_system = BoardSystem(
        world,
        event_bus,
        width,
        height,
        tile_type_count=tile_type_count,
        resolution=resolution,
    )
    score_system = ScoreSystem(world, event_bus)
    power_up_system = PowerUpSystem(world, event_bus, resolution)
    return Session(world, event_bus, board_system, score_system, power_up_system)


def play(session: Session, moves: int) -> int:
    """Make up to ``moves`` automatic swaps; returns how many were made."""
    made = 0
    for _ in range(moves):
        swaps = find_valid_swaps(session.board_system.board)
        if not swaps:
            logger.info("No valid moves left after %d swaps", made)
            break
        src, dst = swaps[0]
        result = session.board_system.try_swap_and_resolve(src, dst)
        logger.info("Swap %s<->%s cleared %d tiles in %d chain(s)", src, dst, result.cleared, result.chains)
        made += 1
    return made


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    seed = int(argv[0]) if argv else None
    moves = int(argv[1]) if len(argv) > 1 else 10
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    session = build_session(seed=seed)
    session.event_bus.subscribe(
        EVENT_SPECIAL_TILE_CREATED,
        lambda sender, **kw: logger.info("Special %s created at %s", kw["kind"].value, kw["position"]),
    )
    session.event_bus.subscribe(
        EVENT_CASCADE_COMPLETE,
        lambda sender, **kw: logger.debug("Cascade depth %d", kw["depth"]),
    )
    play(session, moves)
    score = get_or_create_score(session.world)
    logger.info("Final score %d after %d moves (best chain %d)", score.current, score.moves, score.best_chain)
    return 0


if __name__ == "__main__":
    sys.exit(main())
