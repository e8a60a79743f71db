import random

from esper import World

from match3.components.cascade_state import CascadeState
from match3.components.score import Score
from match3.spawner import Spawner


def create_world(
    *,
    rng: random.Random | None = None,
    seed: int | None = None,
    spawner: Spawner | None = None,
) -> World:
    """Create the ECS world with its shared RNG, spawner slot and session singletons.

    Pass ``seed`` (or a seeded ``rng``) for reproducible boards; the board
    entity itself is created by BoardSystem.
    """
    world = World()
    setattr(world, "random", rng or random.Random(seed))
    setattr(world, "spawner", spawner)
    world.create_entity(Score(), CascadeState())
    return world
