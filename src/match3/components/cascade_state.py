from dataclasses import dataclass
from typing import Optional


@dataclass(slots=True)
class CascadeState:
    """Bookkeeping for the resolve currently running (or the last finished one)."""

    reason: Optional[str] = None
    active: bool = False
    depth: int = 0
    cleared: int = 0
