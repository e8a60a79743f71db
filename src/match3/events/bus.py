from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # weak=False keeps bound methods of systems that nobody holds a reference to.
        sig.connect(fn, weak=False)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# BOARD LIFECYCLE
# ============================================================================
EVENT_BOARD_INITIALIZED = "board_initialized"      # payload: width=int, height=int, tile_type_count=int
EVENT_BOARD_RESET_REQUEST = "board_reset_request"  # payload: reason=str|None


# ============================================================================
# SWAPS
# ============================================================================
EVENT_TILE_SWAP_REQUEST = "tile_swap_request"      # payload: src=(x,y), dst=(x,y)
EVENT_TILE_SWAP_VALID = "tile_swap_valid"          # payload: src=(x,y), dst=(x,y)
EVENT_TILE_SWAP_INVALID = "tile_swap_invalid"      # payload: src=(x,y), dst=(x,y), reason=str
EVENT_SWAP_RESOLVED = "swap_resolved"              # payload: src, dst, success=bool, cleared=int, chains=int


# ============================================================================
# MATCHES & CASCADES
# ============================================================================
EVENT_MATCH_FOUND = "match_found"                  # payload: positions=[(x,y),...], size=int, depth=int
EVENT_SPECIAL_TILE_ACTIVATED = "special_tile_activated"  # payload: position=(x,y), kind=SpecialKind, affected=[(x,y),...]
EVENT_SPECIAL_TILE_CREATED = "special_tile_created"      # payload: position=(x,y), kind=SpecialKind, base_value=int
EVENT_MATCH_CLEARED = "match_cleared"              # payload: positions=[(x,y),...], values=[(x,y,value),...], depth=int
EVENT_GRAVITY_APPLIED = "gravity_applied"          # payload: moves=[GravityMove,...], depth=int
EVENT_REFILL_COMPLETED = "refill_completed"        # payload: new_tiles=[(x,y),...], depth=int
EVENT_CASCADE_STEP = "cascade_step"                # payload: depth=int, positions=[(x,y),...], reason=str
EVENT_CASCADE_COMPLETE = "cascade_complete"        # payload: depth=int, cleared=int, reason=str


# ============================================================================
# SCORE & POWER-UPS
# ============================================================================
EVENT_SCORE_CHANGED = "score_changed"              # payload: score=int, delta=int
EVENT_POWER_UP_REQUEST = "power_up_request"        # payload: kind=PowerUpKind, target=(x,y)|None, value=int|None
EVENT_POWER_UP_APPLIED = "power_up_applied"        # payload: kind=PowerUpKind, affected=[(x,y),...], cleared=int, chains=int
