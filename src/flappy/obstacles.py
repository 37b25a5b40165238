# src/flappy/obstacles.py
from __future__ import annotations
import logging
import random
from dataclasses import dataclass
from typing import List, Optional, Tuple
from .config import (
    WIDTH, HEIGHT, GROUND_MARGIN, OBSTACLE_WIDTH, SPAWN_INTERVAL, MIN_TOP_HEIGHT
)
from .tunables import Tunables, ObstacleKind

logger = logging.getLogger(__name__)


@dataclass
class Obstacle:
    """
    A top/bottom barrier pair with a passable gap.
    gap_size is fixed at spawn time and never resized; gap_bottom derives from it.
    """
    x: float
    gap_top: float      # bottom edge of the top barrier
    gap_size: float
    width: float = OBSTACLE_WIDTH
    kind: ObstacleKind = ObstacleKind.PIPE
    passed: bool = False

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def gap_bottom(self) -> float:
        """Top edge of the bottom barrier."""
        return self.gap_top + self.gap_size

    @property
    def offscreen(self) -> bool:
        return self.right < 0


class ObstacleSpawner:
    """
    Keeps the FIFO of active obstacles (oldest first): scrolls them left,
    drops the ones that left the world, and appends new ones at the right edge
    every `spawn_interval` pixels.
    """
    def __init__(self,
                 seed: Optional[int] = None,
                 rng: Optional[random.Random] = None,
                 world_width: float = WIDTH,
                 world_height: float = HEIGHT,
                 ground_margin: float = GROUND_MARGIN,
                 spawn_interval: float = SPAWN_INTERVAL,
                 min_top_height: float = MIN_TOP_HEIGHT,
                 obstacle_width: float = OBSTACLE_WIDTH):
        if world_width <= 0 or world_height <= 0:
            raise ValueError("world dimensions must be positive")
        if not (0 <= ground_margin < world_height):
            raise ValueError("ground_margin must lie inside the world height")
        if spawn_interval <= 0 or obstacle_width <= 0:
            raise ValueError("spawn_interval and obstacle_width must be positive")

        if rng is None:
            if seed is None:
                seed = random.randrange(0, 2**32 - 1)
            rng = random.Random(seed)
        self.seed = seed
        self.rng = rng

        self.world_width = float(world_width)
        self.world_height = float(world_height)
        self.ground_margin = float(ground_margin)
        self.spawn_interval = float(spawn_interval)
        self.min_top_height = float(min_top_height)
        self.obstacle_width = float(obstacle_width)

        self.obstacles: List[Obstacle] = []
        self.spawned_total = 0
        self.removed_total = 0
        self._warned_degenerate = False

    def reset(self):
        self.obstacles.clear()

    @property
    def newest(self) -> Optional[Obstacle]:
        return self.obstacles[-1] if self.obstacles else None

    def gap_top_bounds(self, gap_size: float) -> Tuple[float, float]:
        """(lo, hi) range for the gap top so the whole gap sits above the ground band."""
        lo = self.min_top_height
        hi = self.world_height - gap_size - self.min_top_height - self.ground_margin
        return lo, hi

    def _sample_gap_top(self, gap_size: float) -> float:
        lo, hi = self.gap_top_bounds(gap_size)
        if hi < lo:
            # gap too large for the world: pin the top barrier at its minimum
            if not self._warned_degenerate:
                logger.warning("gap_size=%.1f leaves no room for random placement; "
                               "using gap top %.1f", gap_size, lo)
                self._warned_degenerate = True
            return lo
        self._warned_degenerate = False
        # whole pixel rows keep gap_bottom - gap_top exact
        return min(hi, max(lo, float(round(self.rng.uniform(lo, hi)))))

    def spawn(self, tunables: Tunables) -> Obstacle:
        """Append a new obstacle at the right edge of the world."""
        gap_top = self._sample_gap_top(tunables.gap_size)
        obstacle = Obstacle(
            x=self.world_width,
            gap_top=gap_top,
            gap_size=tunables.gap_size,
            width=self.obstacle_width,
            kind=tunables.obstacle_kind,
        )
        self.obstacles.append(obstacle)
        self.spawned_total += 1
        logger.debug("spawned obstacle #%d gap_top=%.1f gap=%.1f",
                     self.spawned_total, gap_top, tunables.gap_size)
        return obstacle

    def update(self, tunables: Tunables):
        """Scroll, drop obstacles that fully left the world, spawn when spacing allows."""
        for obstacle in self.obstacles:
            obstacle.x -= tunables.obstacle_speed

        kept = [o for o in self.obstacles if not o.offscreen]
        removed = len(self.obstacles) - len(kept)
        if removed:
            self.removed_total += removed
            logger.debug("removed %d obstacle(s) past the left edge", removed)
        self.obstacles = kept

        newest = self.newest
        if newest is None or newest.x < self.world_width - self.spawn_interval:
            self.spawn(tunables)


