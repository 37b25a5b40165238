# src/tests/test_render.py
"""
Headless drawing checks: rgb_array frames from FlappyEnv and every Renderer
screen (start, running + settings panel, game over).

Usage (from repo root):
  python -m src.tests.test_render
"""

from __future__ import annotations
import os
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import numpy as np
import pygame

from src.env.flappy_env import FlappyEnv
from src.flappy.config import WIDTH, HEIGHT, COLOR_SKY, COLOR_GROUND
from src.flappy.render import Renderer
from src.flappy.session import FlappySim, SessionState
from src.flappy.tunables import Tunables


def test_rgb_array_frames(seed: int = 3) -> None:
    env = FlappyEnv(render_mode="rgb_array", frame_skip=1)
    try:
        env.reset(seed=seed)
        frame = env.render()
        assert isinstance(frame, np.ndarray) and frame.shape == (HEIGHT, WIDTH, 3), \
            f"Unexpected frame shape {getattr(frame, 'shape', None)}"
        assert frame.dtype == np.uint8
        assert tuple(frame[5, 5]) == COLOR_SKY, "Top-left corner should be sky"
        assert tuple(frame[520, 300]) == COLOR_GROUND, "Below the floor line should be ground"

        term = trunc = False
        for _ in range(300):
            _obs, _r, term, trunc, _info = env.step(0)
            if term or trunc:
                break
        assert term, "NOOP episode should end on the ground"
        frame = env.render()
        assert frame.shape == (HEIGHT, WIDTH, 3), "Frames after the session ended keep their shape"
    finally:
        env.close()
    print("✓ rgb_array frames ok")


def test_renderer_draws_every_screen(seed: int = 2) -> None:
    pygame.init()
    try:
        surf = pygame.Surface((WIDTH, HEIGHT))
        renderer = Renderer(WIDTH, HEIGHT)
        sim = FlappySim(seed=seed)

        assert renderer.draw(surf, sim.snapshot()) is None, "Start screen has no Play Again button"

        sim.start()
        sim.tick()
        settings = (Tunables.field_names(), 0)
        assert renderer.draw(surf, sim.snapshot(), settings=settings) is None

        for _ in range(300):
            sim.tick()
            if sim.state is SessionState.ENDED:
                break
        assert sim.state is SessionState.ENDED
        button = renderer.draw(surf, sim.snapshot())
        assert button == renderer.play_again_rect, "Game-over panel must expose the button rect"
        assert surf.get_rect().contains(button)
    finally:
        pygame.quit()
    print("✓ renderer screens ok")


def main():
    test_rgb_array_frames()
    test_renderer_draws_every_screen()
    print("🎉 render checks passed")


if __name__ == "__main__":
    main()
