# src/tests/test_observations.py
import numpy as np

from src.env.observations import build_observation, next_obstacle, OBS_SIZE
from src.flappy.obstacles import Obstacle
from src.flappy.session import FlappySim, SessionState


def _sim_with(obstacles, y=200.0, vy=0.0) -> FlappySim:
    sim = FlappySim(seed=0)
    sim.start()
    sim.spawner.obstacles = list(obstacles)
    sim.actor.y = y
    sim.actor.vy = vy
    return sim


def test_shape_dtype_and_ranges():
    sim = FlappySim(seed=42)
    sim.start()
    for _ in range(400):
        obs = build_observation(sim.tick())
        assert isinstance(obs, np.ndarray) and obs.dtype == np.float32 and obs.shape == (OBS_SIZE,), \
            "Shape/dtype mismatch"
        assert 0.0 <= obs[0] <= 1.0, "y_norm out of range"
        assert -1.0 <= obs[1] <= 1.0, "vy_norm out of range"
        assert 0.0 <= obs[2] <= 1.0 and 0.0 <= obs[3] <= 1.0 and 0.0 <= obs[4] <= 1.0
        assert -1.0 <= obs[5] <= 1.0, "offset out of range"
        if sim.state is SessionState.ENDED:
            break


def test_next_obstacle_skips_cleared_ones():
    cleared = Obstacle(x=0.0, gap_top=100.0, gap_size=150.0)     # right 60 < actor.left 65
    ahead = Obstacle(x=200.0, gap_top=120.0, gap_size=150.0)
    snap = _sim_with([cleared, ahead]).snapshot()
    assert next_obstacle(snap) == ahead

    obs = build_observation(snap)
    assert np.isclose(obs[2], (260.0 - 65.0) / 400.0), "dx measured from the actor's left edge"
    assert np.isclose(obs[3], 120.0 / 480.0) and np.isclose(obs[4], 270.0 / 480.0)
    assert np.isclose(obs[5], (195.0 - 200.0) / 480.0), "gap centre slightly above the actor"


def test_sentinels_without_obstacles():
    obs = build_observation(_sim_with([], y=480.0, vy=50.0).snapshot())
    assert obs[0] == 1.0 and obs[1] == 1.0, "y and vy clamp to their upper bounds"
    assert list(obs[2:]) == [1.0, 0.0, 1.0, 0.0], "No obstacle ahead -> sentinel values"


def main():
    test_shape_dtype_and_ranges()
    test_next_obstacle_skips_cleared_ones()
    test_sentinels_without_obstacles()
    print("✓ observation sanity passed")


if __name__ == "__main__":
    main()
