from __future__ import annotations

import bisect
import random
from typing import Iterable, List, Optional, Protocol, Sequence


class Spawner(Protocol):
    """Source of tile values for the initial fill and refills."""

    def tile_type_count(self) -> int: ...

    def next_tile_value(self) -> int: ...


class UniformSpawner:
    """Draws uniformly from the spawnable values in ``[0, tile_type_count)``."""

    def __init__(
        self,
        tile_type_count: int,
        rng: random.Random | None = None,
        *,
        spawnable: Iterable[int] | None = None,
    ):
        if tile_type_count < 1:
            raise ValueError(f"tile_type_count must be at least 1, got {tile_type_count}")
        self._count = tile_type_count
        self.rng = rng or random.Random()
        if spawnable is None:
            self._values: List[int] = list(range(tile_type_count))
        else:
            seen: set[int] = set()
            self._values = []
            for value in spawnable:
                if 0 <= value < tile_type_count and value not in seen:
                    self._values.append(value)
                    seen.add(value)
        if not self._values:
            raise ValueError("UniformSpawner needs at least one spawnable value")

    def tile_type_count(self) -> int:
        return self._count

    def spawnable_values(self) -> List[int]:
        return list(self._values)

    def next_tile_value(self) -> int:
        return self.rng.choice(self._values)


class WeightedSpawner:
    """Draws values with probability proportional to their spawn weight.

    weights[i] is the relative weight of value i; values with ``can_spawn[i]``
    False (or a zero weight) never spawn but still count toward tile_type_count.
    """

    def __init__(
        self,
        weights: Sequence[float],
        rng: random.Random | None = None,
        *,
        can_spawn: Optional[Sequence[bool]] = None,
    ):
        if not weights:
            raise ValueError("WeightedSpawner needs at least one weight")
        if can_spawn is not None and len(can_spawn) != len(weights):
            raise ValueError("can_spawn must have one flag per weight")
        if any(weight < 0 for weight in weights):
            raise ValueError("Spawn weights must not be negative")
        self._weights = list(weights)
        self._can_spawn = list(can_spawn) if can_spawn is not None else [True] * len(weights)
        self.rng = rng or random.Random()
        self._cumulative: List[float] = []
        self._recalculate()

    def _recalculate(self) -> None:
        total = 0.0
        cumulative: List[float] = []
        for weight, allowed in zip(self._weights, self._can_spawn):
            if allowed:
                total += weight
            cumulative.append(total)
        if total <= 0:
            raise ValueError("WeightedSpawner needs a positive total weight over spawnable values")
        self._cumulative = cumulative

    def tile_type_count(self) -> int:
        return len(self._weights)

    def set_weight(self, value: int, weight: float, *, can_spawn: bool = True) -> None:
        if not 0 <= value < len(self._weights):
            raise ValueError(f"Unknown tile value {value}")
        if weight < 0:
            raise ValueError("Spawn weights must not be negative")
        previous = (self._weights[value], self._can_spawn[value])
        self._weights[value] = weight
        self._can_spawn[value] = can_spawn
        try:
            self._recalculate()
        except ValueError:
            self._weights[value], self._can_spawn[value] = previous
            self._recalculate()
            raise

    def next_tile_value(self) -> int:
        roll = self.rng.random() * self._cumulative[-1]
        # First value whose cumulative weight strictly exceeds the roll; zero-weight
        # entries share their predecessor's cumulative value and are skipped.
        index = bisect.bisect_right(self._cumulative, roll)
        return min(index, len(self._cumulative) - 1)
