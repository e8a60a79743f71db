from esper import World

from match3.components.score import Score
from match3.constants import BONUS_PER_CHAIN, SCORE_PER_TILE
from match3.events.bus import (
    EventBus,
    EVENT_BOARD_INITIALIZED,
    EVENT_SCORE_CHANGED,
    EVENT_SWAP_RESOLVED,
)


def get_or_create_score(world: World) -> Score:
    existing = list(world.get_component(Score))
    if existing:
        return existing[0][1]
    world.create_entity(Score())
    return list(world.get_component(Score))[0][1]


class ScoreSystem:
    """Awards points for resolved swaps.

    Logic:
      - On EVENT_SWAP_RESOLVED with success: points = cleared * score_per_tile
        plus bonus_per_chain * cleared for every chain past the first.
      - On EVENT_BOARD_INITIALIZED: the session score starts over.
    """
    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        *,
        score_per_tile: int = SCORE_PER_TILE,
        bonus_per_chain: int = BONUS_PER_CHAIN,
    ):
        self.world = world
        self.event_bus = event_bus
        self.score_per_tile = score_per_tile
        self.bonus_per_chain = bonus_per_chain
        self.event_bus.subscribe(EVENT_SWAP_RESOLVED, self.on_swap_resolved)
        self.event_bus.subscribe(EVENT_BOARD_INITIALIZED, self.on_board_initialized)

    def points_for(self, cleared: int, chains: int) -> int:
        base = cleared * self.score_per_tile
        chain_bonus = max(0, chains - 1) * self.bonus_per_chain * cleared
        return base + chain_bonus

    def on_swap_resolved(self, sender, **kwargs):
        if not kwargs.get('success'):
            return
        cleared = kwargs.get('cleared', 0)
        chains = kwargs.get('chains', 0)
        score = get_or_create_score(self.world)
        delta = self.points_for(cleared, chains)
        score.current += delta
        score.moves += 1
        score.best_chain = max(score.best_chain, chains)
        self.event_bus.emit(EVENT_SCORE_CHANGED, score=score.current, delta=delta)

    def on_board_initialized(self, sender, **kwargs):
        score = get_or_create_score(self.world)
        if score.current == 0 and score.moves == 0:
            return
        score.current = 0
        score.best_chain = 0
        score.moves = 0
        self.event_bus.emit(EVENT_SCORE_CHANGED, score=0, delta=0)
