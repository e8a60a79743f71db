from enum import Enum


class PowerUpKind(Enum):
    HAMMER = "hammer"          # clears one cell
    COLOR_BOMB = "color_bomb"  # clears every cell holding one value
    SHUFFLE = "shuffle"        # permutes every tile on the board
