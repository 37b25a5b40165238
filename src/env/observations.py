# src/env/observations.py
from __future__ import annotations
from typing import Optional, Tuple
import numpy as np

from src.flappy.obstacles import Obstacle
from src.flappy.session import Snapshot

OBS_SIZE = 6
MAX_VY_OBS = 20.0   # |vy| mapped to 1.0

# index -> meaning, for overlays and the heuristic policy
OBS_LABELS: Tuple[str, ...] = ("y", "vy", "dx", "gap_top", "gap_bot", "offset")


def _clamp(x: float, lo: float, hi: float) -> float:
    return lo if x < lo else (hi if x > hi else x)


def next_obstacle(snap: Snapshot) -> Optional[Obstacle]:
    """Nearest obstacle the actor has not fully cleared yet (oldest first)."""
    for o in snap.obstacles:
        if o.right >= snap.actor.left:
            return o
    return None


def build_observation(snap: Snapshot) -> np.ndarray:
    """
    Returns a fixed (6,) float32 vector:
      [ y_norm, vy_norm, dx_norm, gap_top_norm, gap_bottom_norm, offset_norm ]
    - y_norm        in [0,1]   actor centre over the floor line
    - vy_norm       in [-1,1]
    - dx_norm       in [0,1]   next obstacle's right edge ahead of the actor's left edge
    - gap_*_norm    in [0,1]   screen-space y of the next gap
    - offset_norm   in [-1,1]  gap centre minus actor y (positive = gap is below)
    Sentinels when nothing is ahead: dx=1, gap_top=0, gap_bottom=1, offset=0.
    """
    a = snap.actor
    floor_y = max(1.0, float(snap.floor_y))
    y_norm = _clamp(a.y / floor_y, 0.0, 1.0)
    vy_norm = _clamp(a.vy / MAX_VY_OBS, -1.0, 1.0)

    o = next_obstacle(snap)
    if o is None:
        feats = [y_norm, vy_norm, 1.0, 0.0, 1.0, 0.0]
    else:
        dx_norm = _clamp((o.right - a.left) / max(1.0, snap.world_width), 0.0, 1.0)
        top_norm = _clamp(o.gap_top / floor_y, 0.0, 1.0)
        bot_norm = _clamp(o.gap_bottom / floor_y, 0.0, 1.0)
        centre = (o.gap_top + o.gap_bottom) / 2.0
        offset = _clamp((centre - a.y) / floor_y, -1.0, 1.0)
        feats = [y_norm, vy_norm, dx_norm, top_norm, bot_norm, offset]

    return np.asarray(feats, dtype=np.float32)
