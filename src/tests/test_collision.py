# src/tests/test_collision.py
"""
Collision and pass-scoring checks.

Usage (from repo root):
  python -m src.tests.test_collision
"""

from __future__ import annotations

from src.flappy.actor import Actor
from src.flappy.collision import (
    actor_box, barrier_boxes, boxes_overlap, hits_obstacle, first_hit, mark_passed
)
from src.flappy.obstacles import Obstacle

FLOOR_Y = 480.0


def _gap(x=60.0, top=100.0, bottom=300.0) -> Obstacle:
    return Obstacle(x=x, gap_top=top, gap_size=bottom - top, width=60.0)


def test_inside_gap_is_safe():
    actor = Actor(x=80.0, y=200.0, vy=0.0, size=20)
    assert not hits_obstacle(actor, _gap()), "Actor fully inside the gap must not collide"


def test_top_barrier_hit():
    actor = Actor(x=80.0, y=50.0, vy=0.0, size=20)
    assert hits_obstacle(actor, _gap()), "Actor at y=50 overlaps the top barrier"


def test_bottom_barrier_hit():
    actor = Actor(x=80.0, y=295.0, vy=0.0, size=20)
    assert hits_obstacle(actor, _gap()), "Actor bottom past gap_bottom must collide"


def test_no_horizontal_overlap_means_no_hit():
    actor = Actor(x=80.0, y=50.0, vy=0.0, size=20)
    ahead = _gap(x=90.0)            # obstacle.left == actor.right
    behind = _gap(x=10.0)           # obstacle.right == actor.left
    assert not hits_obstacle(actor, ahead), "Touching the left edge is not an overlap"
    assert not hits_obstacle(actor, behind), "Touching the right edge is not an overlap"
    assert hits_obstacle(actor, _gap(x=89.0)), "One pixel of overlap counts"


def test_matches_barrier_box_overlap():
    """Hit iff the actor box overlaps either barrier box."""
    obstacle = _gap()
    for y in range(0, 481, 5):
        for x in range(0, 200, 7):
            actor = Actor(x=float(x), y=float(y), vy=0.0, size=20)
            top, bottom = barrier_boxes(obstacle, FLOOR_Y)
            a = actor_box(actor)
            expected = boxes_overlap(a, top) or boxes_overlap(a, bottom)
            assert hits_obstacle(actor, obstacle) == expected, f"Mismatch at x={x} y={y}"


def test_first_hit_picks_colliding_obstacle():
    actor = Actor(x=80.0, y=200.0, vy=0.0, size=20)
    safe = _gap()
    deadly = _gap(x=70.0, top=250.0, bottom=400.0)
    assert first_hit(actor, [safe, deadly]) is deadly
    assert first_hit(actor, [safe]) is None


def test_mark_passed_counts_once():
    actor = Actor(x=80.0, y=200.0, vy=0.0, size=20)
    behind = _gap(x=10.0)      # right = 70 < 80
    overlapping = _gap(x=60.0)  # right = 120
    obstacles = [behind, overlapping]

    assert mark_passed(actor, obstacles) == 1, "Only the obstacle behind the actor counts"
    assert behind.passed and not overlapping.passed
    assert mark_passed(actor, obstacles) == 0, "An obstacle must never be counted twice"

    overlapping.x = 10.0
    assert mark_passed(actor, obstacles) == 1


def main():
    tests = [
        test_inside_gap_is_safe,
        test_top_barrier_hit,
        test_bottom_barrier_hit,
        test_no_horizontal_overlap_means_no_hit,
        test_matches_barrier_box_overlap,
        test_first_hit_picks_colliding_obstacle,
        test_mark_passed_counts_once,
    ]
    for t in tests:
        t()
        print(f"✓ {t.__name__}")
    print("🎉 collision checks passed")


if __name__ == "__main__":
    main()
