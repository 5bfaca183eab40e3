# arcade/domain/gesture.py
from __future__ import annotations
from typing import Optional, Sequence

from arcade.domain.types import Direction

SWIPE_THRESHOLD_PX = 30


def decode_swipe(
    start: Sequence[float],
    end: Sequence[float],
    threshold: float = SWIPE_THRESHOLD_PX,
) -> Optional[Direction]:
    """Pointer-down/pointer-up pair to a direction, or None for a tap."""
    dx = end[0] - start[0]
    dy = end[1] - start[1]
    if max(abs(dx), abs(dy)) <= threshold:
        return None
    if abs(dx) > abs(dy):
        return Direction.RIGHT if dx > 0 else Direction.LEFT
    return Direction.DOWN if dy > 0 else Direction.UP
