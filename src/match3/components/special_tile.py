from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from match3.constants import EMPTY


class SpecialKind(Enum):
    NONE = "none"
    BOMB = "bomb"
    LIGHTNING = "lightning"
    RAINBOW = "rainbow"
    STAR = "star"


# Higher wins when several creation triggers land on the same cell.
SPECIAL_PRIORITY = {
    SpecialKind.NONE: 0,
    SpecialKind.BOMB: 1,
    SpecialKind.LIGHTNING: 2,
    SpecialKind.RAINBOW: 3,
    SpecialKind.STAR: 4,
}


@dataclass(frozen=True, slots=True)
class SpecialTile:
    """Overlay entry for one cell.

    base_value: tile value the special was created from (Rainbow targets it).
    kind: activation effect; SpecialKind.NONE for ordinary cells.
    power: effect strength, currently only widens the Bomb square.
    """

    base_value: int = EMPTY
    kind: SpecialKind = SpecialKind.NONE
    power: int = 0

    @property
    def is_special(self) -> bool:
        return self.kind is not SpecialKind.NONE


NO_SPECIAL = SpecialTile()


def strongest(*kinds: SpecialKind) -> SpecialKind:
    return max(kinds, key=SPECIAL_PRIORITY.__getitem__, default=SpecialKind.NONE)
