# src/env/flappy_env.py
from __future__ import annotations
from typing import Optional, Dict, Any
import numpy as np
import gymnasium as gym
import pygame

from src.flappy.config import WIDTH, HEIGHT, SIM_FPS, FRAME_SKIP_DEFAULT, TIME_LIMIT_S
from src.flappy.render import Renderer
from src.flappy.session import FlappySim, SessionState
from src.flappy.tunables import Tunables
from src.env.observations import build_observation, OBS_SIZE

ALIVE_REWARD = 0.1
PASS_REWARD = 1.0
DEATH_REWARD = -1.0


class FlappyEnv(gym.Env):
    """
    Flappy Gymnasium environment (vector observations).
    - Simulation advances in fixed ticks (60 per simulated second).
    - Agent acts every `frame_skip` ticks (default 2) -> 30 decisions/sec.
    - Actions: 0 = NOOP, 1 = JUMP.
    - Observation: shape (6,), float32 (see observations.build_observation).
    """
    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": SIM_FPS}

    def __init__(self,
                 render_mode: Optional[str] = None,
                 frame_skip: int = FRAME_SKIP_DEFAULT,
                 time_limit_seconds: Optional[float] = TIME_LIMIT_S,
                 tunables: Optional[Tunables] = None):
        super().__init__()
        assert frame_skip >= 1, "frame_skip must be >= 1"
        assert render_mode is None or render_mode in self.metadata["render_modes"], \
            f"Unsupported render_mode {render_mode!r}"
        self.render_mode = render_mode
        self.frame_skip = int(frame_skip)
        self.tunables = tunables if tunables is not None else Tunables()

        self.time_limit_decisions = None
        if time_limit_seconds is not None:
            self.time_limit_decisions = int(SIM_FPS * time_limit_seconds / self.frame_skip)

        # --- Gym spaces ---
        self.action_space = gym.spaces.Discrete(2)
        low = np.array([0.0, -1.0, 0.0, 0.0, 0.0, -1.0], dtype=np.float32)
        high = np.array([1.0, 1.0, 1.0, 1.0, 1.0, 1.0], dtype=np.float32)
        assert low.shape == (OBS_SIZE,)
        self.observation_space = gym.spaces.Box(low=low, high=high, dtype=np.float32)

        # --- Runtime state ---
        self.sim: Optional[FlappySim] = None
        self.timestep: int = 0
        self.current_seed: Optional[int] = None

        # Rendering
        self.screen = None
        self.clock = None
        self.renderer: Optional[Renderer] = None

    # -------------------- Core API --------------------

    def reset(self, *, seed: Optional[int] = None, options: Optional[Dict[str, Any]] = None):
        super().reset(seed=seed)  # initializes self.np_random

        # Explicit seed -> used as-is for the obstacle layout; otherwise drawn
        # from np_random so env-level seeding still reproduces the episode.
        if seed is not None:
            layout_seed = int(seed)
        else:
            layout_seed = int(self.np_random.integers(0, 2**31 - 1))

        self.sim = FlappySim(tunables=self.tunables, seed=layout_seed)
        self.sim.start()
        self.timestep = 0
        self.current_seed = layout_seed

        obs = self._get_obs()
        info = {"seed": self.current_seed, "score": 0}
        return obs, info

    def step(self, action: int):
        assert self.action_space.contains(action), f"Invalid action {action}"
        assert self.sim is not None, "Call reset() before step()"

        if action == 1:
            self.sim.jump()

        score_before = self.sim.score
        for _ in range(self.frame_skip):
            self.sim.tick()
            if self.sim.state is not SessionState.RUNNING:
                break

        alive = self.sim.state is SessionState.RUNNING
        passed = self.sim.score - score_before
        reward = float(ALIVE_REWARD if alive else DEATH_REWARD) + PASS_REWARD * passed

        self.timestep += 1
        terminated = not alive
        truncated = False
        if (self.time_limit_decisions is not None) and (self.timestep >= self.time_limit_decisions):
            truncated = True

        obs = self._get_obs()
        info = {
            "score": self.sim.score,
            "ticks": self.sim.session.ticks,
            "timestep": self.timestep,
            "seed": self.current_seed,
            "death_cause": self.sim.session.end_cause,
        }

        if self.render_mode == "human":
            self.render()

        return obs, reward, terminated, truncated, info

    # -------------------- Helpers --------------------

    def _get_obs(self) -> np.ndarray:
        assert self.sim is not None
        return build_observation(self.sim.snapshot())

    # -------------------- Rendering --------------------

    def render(self):
        if self.render_mode is None or self.sim is None:
            return None

        if self.screen is None:
            pygame.init()
            if self.render_mode == "human":
                self.screen = pygame.display.set_mode((WIDTH, HEIGHT))
                pygame.display.set_caption("Flappy - Gym Env")
            else:
                self.screen = pygame.Surface((WIDTH, HEIGHT))
            self.clock = pygame.time.Clock()
            self.renderer = Renderer(WIDTH, HEIGHT)

        if self.render_mode == "human":
            # Pump the event queue so the OS doesn't think we're hung
            pygame.event.pump()

        self.renderer.draw(self.screen, self.sim.snapshot())

        if self.render_mode == "human":
            pygame.display.flip()
            self.clock.tick(self.metadata["render_fps"])
            return None

        arr = pygame.surfarray.array3d(self.screen)  # (W, H, 3)
        return np.transpose(arr, (1, 0, 2))

    def close(self):
        if self.screen is not None:
            pygame.display.quit()
            pygame.quit()
            self.screen = None
            self.clock = None
            self.renderer = None
