# src/tests/test_session.py
"""
Session state machine, scoring and event checks for FlappySim.

Usage (from repo root):
  python -m src.tests.test_session
"""

from __future__ import annotations

from src.flappy.config import ACTOR_X, ACTOR_START_Y, START_IMPULSE
from src.flappy.events import EventType
from src.flappy.obstacles import Obstacle
from src.flappy.session import FlappySim, SessionState, InputKind, InputEvent
from src.flappy.tunables import Tunables


def _steer(sim: FlappySim):
    """Test autopilot: park the actor in the middle of the next gap."""
    a = sim.actor
    target = next((o for o in sim.obstacles if o.right >= a.left), None)
    a.y = 250.0 if target is None else (target.gap_top + target.gap_bottom) / 2.0
    a.vy = 0.0


def _run_to_end(sim: FlappySim, limit: int = 2000):
    for _ in range(limit):
        sim.tick()
        if sim.state is SessionState.ENDED:
            return
    raise AssertionError("Session never ended")


def _assert_fresh(sim: FlappySim):
    assert sim.state is SessionState.RUNNING
    assert sim.score == 0, "Score must reset to 0"
    assert len(sim.obstacles) == 1, "Exactly one freshly spawned obstacle after a reset"
    assert sim.obstacles[0].x == sim.spawner.world_width and not sim.obstacles[0].passed
    assert sim.actor.x == ACTOR_X and sim.actor.y == ACTOR_START_Y, "Actor must be back at start"
    assert sim.actor.vy == START_IMPULSE, "Actor must start with the small upward kick"


def test_first_jump_starts_session():
    sim = FlappySim(seed=1)
    started = []
    sim.bus.subscribe(EventType.SESSION_STARTED, started.append)
    assert sim.state is SessionState.NOT_STARTED
    assert sim.jump(), "First jump must start the session"
    _assert_fresh(sim)
    assert len(started) == 1


def test_ground_hit_ends_session():
    sim = FlappySim(seed=2)
    sim.start()
    _run_to_end(sim)
    assert sim.session.end_cause == "ground", f"Expected a ground hit, got {sim.session.end_cause}"
    assert sim.actor.y == sim.floor_y


def test_inputs_ignored_in_wrong_state():
    sim = FlappySim(seed=3)
    sim.start()
    assert not sim.start(), "START while running is ignored"
    assert not sim.restart(), "RESTART while running is ignored"
    _run_to_end(sim)

    frozen = sim.snapshot()
    assert not sim.jump(), "Jump while ENDED must be a no-op"
    for _ in range(10):
        sim.tick()
    after = sim.snapshot()
    assert after.state is SessionState.ENDED, "Jump must not restart an ended session"
    assert after.actor == frozen.actor and after.obstacles == frozen.obstacles, \
        "Ended sessions must stay frozen"


def test_restart_resets_everything():
    sim = FlappySim(seed=4)
    sim.start()
    for _ in range(700):
        _steer(sim)
        sim.tick()
    assert sim.score > 0, "Autopilot should have passed a few obstacles"
    _run_to_end(sim)

    assert sim.restart(), "Explicit restart must be accepted while ENDED"
    _assert_fresh(sim)


def test_scoring_exactly_once():
    sim = FlappySim(seed=5)
    scores = []
    sim.bus.subscribe(EventType.SCORE_CHANGED, lambda e: scores.append(e.data["score"]))
    sim.start()
    for _ in range(1200):
        _steer(sim)
        sim.tick()
        assert sim.state is SessionState.RUNNING, "Autopilot must keep the actor alive"

    expected = sim.spawner.removed_total + sum(o.passed for o in sim.obstacles)
    assert sim.score == expected, f"score={sim.score}, obstacles passed={expected}"
    assert sim.score >= 5, "Expected several obstacles passed in 1200 ticks"
    assert scores == list(range(1, sim.score + 1)), "Each pass must add exactly 1"


def test_pass_and_hit_on_same_tick():
    sim = FlappySim(seed=6)
    sim.start()
    speed = sim.tunables.obstacle_speed
    behind = Obstacle(x=0.0 + speed, gap_top=100.0, gap_size=150.0)     # right -> 60 < 80
    deadly = Obstacle(x=70.0 + speed, gap_top=400.0, gap_size=70.0)
    sim.spawner.obstacles = [behind, deadly]
    sim.tick()
    assert sim.score == 1, "Pass on the collision tick still scores"
    assert sim.state is SessionState.ENDED and sim.session.end_cause == "obstacle"
    assert sim.best_score == 1


def test_best_score_and_end_events():
    sim = FlappySim(seed=7, best_score=2)
    ended = []
    sim.bus.subscribe(EventType.SESSION_ENDED, lambda e: ended.append(e.data))
    sim.start()
    for _ in range(900):
        _steer(sim)
        sim.tick()
    _run_to_end(sim)
    first_score = sim.score
    assert first_score > 2
    assert sim.best_score == first_score
    assert ended[-1] == {"score": first_score, "best_score": first_score,
                         "cause": ended[-1]["cause"], "new_best": True}

    sim.restart()
    _run_to_end(sim)
    assert sim.best_score == first_score, "Best score is a running maximum"
    assert ended[-1]["new_best"] is False and ended[-1]["score"] == 0
    assert len(ended) == 2, "One SESSION_ENDED per session"


def test_posted_inputs_apply_on_next_tick():
    sim = FlappySim(seed=8)
    sim.post(InputKind.START)
    assert sim.state is SessionState.NOT_STARTED, "Posted input must wait for the tick"
    sim.tick()
    assert sim.state is SessionState.RUNNING

    sim.post(InputEvent(InputKind.JUMP))
    sim.tick()
    jump = sim.tunables.jump_impulse
    assert sim.actor.vy == jump + sim.tunables.gravity, "Jump applies before the tick's gravity"


def test_handle_rejects_garbage():
    sim = FlappySim(seed=9)
    try:
        sim.handle("jump")
    except TypeError:
        return
    raise AssertionError("Unknown input types must raise TypeError")


def test_auto_restart_after_delay():
    sim = FlappySim(seed=10, auto_restart_ticks=3)
    sim.start()
    _run_to_end(sim)
    sim.tick()
    sim.tick()
    assert sim.state is SessionState.ENDED
    sim.tick()
    _assert_fresh(sim)


def test_tunable_changes_apply_next_tick():
    sim = FlappySim(seed=11)
    sim.start()
    sim.set_tunables(Tunables(gravity=1.0))
    vy0 = sim.actor.vy
    sim.tick()
    assert sim.actor.vy == vy0 + 1.0, "New gravity must be used on the next tick"
    try:
        sim.set_tunables(Tunables(gravity=5.0))
    except ValueError:
        pass
    else:
        raise AssertionError("Out-of-range tunables must be rejected")
    assert sim.tunables.gravity == 1.0


def test_failing_handler_does_not_break_tick():
    sim = FlappySim(seed=12)
    seen = []

    def boom(_event):
        raise RuntimeError("subscriber bug")

    sim.bus.subscribe(EventType.SESSION_STARTED, boom)
    sim.bus.subscribe(EventType.SESSION_STARTED, seen.append)
    sim.start()
    assert sim.state is SessionState.RUNNING and len(seen) == 1


def test_short_world_starts_above_its_floor():
    sim = FlappySim(seed=1, world_height=400, ground_margin=120)
    assert sim.floor_y == 280.0 and sim.start_y == 140.0, "Start halfway down when 300 is below the floor"
    sim.start()
    assert sim.actor.y == 140.0
    for _ in range(10):
        sim.tick()
    assert sim.state is SessionState.RUNNING, f"Ended early by {sim.session.end_cause}"
    assert sim.actor.y == 107.5

    for bad in (280.0, -1.0):
        try:
            FlappySim(seed=1, world_height=400, ground_margin=120, start_y=bad)
        except ValueError:
            continue
        raise AssertionError(f"start_y={bad} must be rejected")


def main():
    tests = [
        test_first_jump_starts_session,
        test_ground_hit_ends_session,
        test_inputs_ignored_in_wrong_state,
        test_restart_resets_everything,
        test_scoring_exactly_once,
        test_pass_and_hit_on_same_tick,
        test_best_score_and_end_events,
        test_posted_inputs_apply_on_next_tick,
        test_handle_rejects_garbage,
        test_auto_restart_after_delay,
        test_tunable_changes_apply_next_tick,
        test_failing_handler_does_not_break_tick,
        test_short_world_starts_above_its_floor,
    ]
    for t in tests:
        t()
        print(f"✓ {t.__name__}")
    print("🎉 session checks passed")


if __name__ == "__main__":
    main()
