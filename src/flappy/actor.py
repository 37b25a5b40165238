# src/flappy/actor.py
from __future__ import annotations
import logging
from dataclasses import dataclass
from .config import ACTOR_X, ACTOR_START_Y, ACTOR_SIZE, START_IMPULSE

logger = logging.getLogger(__name__)


@dataclass
class Actor:
    """
    The flying player entity.
    - (x, y) is the centre of a square collision box of side `size`
    - vy < 0 means moving up (screen coordinates)
    """
    x: float
    y: float
    vy: float
    size: float = ACTOR_SIZE

    @classmethod
    def spawn(cls, vy: float = START_IMPULSE, y: float = ACTOR_START_Y) -> "Actor":
        """Actor at its start position, with a small upward kick by default."""
        return cls(x=float(ACTOR_X), y=float(y), vy=float(vy), size=ACTOR_SIZE)

    # --- bounding box ---
    @property
    def half(self) -> float:
        return self.size / 2.0

    @property
    def left(self) -> float:
        return self.x - self.half

    @property
    def right(self) -> float:
        return self.x + self.half

    @property
    def top(self) -> float:
        return self.y - self.half

    @property
    def bottom(self) -> float:
        return self.y + self.half

    def jump(self, impulse: float):
        """Replace whatever velocity gravity accumulated with the jump impulse."""
        self.vy = impulse

    def update_physics(self, gravity: float, floor_y: float) -> bool:
        """
        One Euler step under constant per-tick gravity, then clamp to [0, floor_y].
        Returns True when the actor hit the ground this tick.
        """
        self.vy += gravity
        self.y += self.vy

        if self.y > floor_y:
            self.y = floor_y
            self.vy = 0.0
            logger.debug("actor hit the ground at y=%.1f", floor_y)
            return True
        if self.y < 0.0:
            # ceiling bump, not fatal
            self.y = 0.0
            self.vy = 0.0
        return False
