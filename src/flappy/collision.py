# src/flappy/collision.py
"""Axis-aligned box tests between the actor and gap obstacles, plus pass scoring."""
from __future__ import annotations
from typing import Iterable, Optional, Tuple
from .actor import Actor
from .obstacles import Obstacle

# (left, top, right, bottom)
Box = Tuple[float, float, float, float]


def actor_box(actor: Actor) -> Box:
    return actor.left, actor.top, actor.right, actor.bottom


def barrier_boxes(obstacle: Obstacle, floor_y: float) -> Tuple[Box, Box]:
    """Top barrier (world top -> gap top) and bottom barrier (gap bottom -> floor)."""
    top = (obstacle.x, 0.0, obstacle.right, obstacle.gap_top)
    bottom = (obstacle.x, obstacle.gap_bottom, obstacle.right, floor_y)
    return top, bottom


def boxes_overlap(a: Box, b: Box) -> bool:
    """Strict overlap: touching edges do not count."""
    return a[2] > b[0] and a[0] < b[2] and a[3] > b[1] and a[1] < b[3]


def hits_obstacle(actor: Actor, obstacle: Obstacle) -> bool:
    """True if the actor's box reaches into either barrier of `obstacle`."""
    if not (actor.right > obstacle.x and actor.left < obstacle.right):
        return False
    return actor.top < obstacle.gap_top or actor.bottom > obstacle.gap_bottom


def first_hit(actor: Actor, obstacles: Iterable[Obstacle]) -> Optional[Obstacle]:
    for obstacle in obstacles:
        if hits_obstacle(actor, obstacle):
            return obstacle
    return None


def mark_passed(actor: Actor, obstacles: Iterable[Obstacle]) -> int:
    """
    Flag obstacles whose right edge is behind the actor's x.
    Each obstacle is counted once; returns the number newly passed.
    """
    newly = 0
    for obstacle in obstacles:
        if not obstacle.passed and obstacle.right < actor.x:
            obstacle.passed = True
            newly += 1
    return newly
