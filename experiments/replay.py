# experiments/replay.py
"""
Replay tool for FlappyEnv

# Typical usage (run from REPO ROOT so `src/...` imports work)

# Replay a HEURISTIC episode by seed (uses experiments/runs/traces/heuristic/<seed>_actions.npy)
python -m experiments.replay --policy heuristic --seed 105

# Replay by pointing directly to a specific actions file
python -m experiments.replay --trace experiments/runs/traces/random/112_actions.npy --frame-skip 2

# Slow the display to the decision rate for readability
python -m experiments.replay --policy heuristic --seed 105 --slow

# Controls during replay
SPACE = pause/resume
N     = single step (when paused)
R     = restart episode
ESC   = quit

# Notes
- Deterministic: given the same seed, frame_skip, and action sequence, replay matches the original run.
- If you pass --trace, the script does not read meta; supply --frame-skip if it differs from the default.
"""

from __future__ import annotations
import argparse
from pathlib import Path
from typing import Optional, List

import numpy as np
import pygame

from src.env.flappy_env import FlappyEnv
from src.env.observations import OBS_LABELS
from src.flappy.config import FRAME_SKIP_DEFAULT, SIM_FPS

DEFAULT_OUT_DIR = "experiments/runs"


def _find_trace(out_dir: Path, policy: str, seed: int) -> Path:
    p = out_dir / "traces" / policy / f"{seed}_actions.npy"
    if not p.exists():
        raise FileNotFoundError(f"Trace not found: {p}")
    return p

def _read_meta(out_dir: Path, policy: str, seed: int) -> dict:
    meta_path = out_dir / "traces" / policy / f"{seed}_meta.txt"
    meta = {}
    if meta_path.exists():
        for line in meta_path.read_text(encoding="utf-8").splitlines():
            if "=" in line:
                k, v = line.split("=", 1)
                meta[k.strip()] = v.strip()
    return meta

def _draw_overlay(env: FlappyEnv, step_idx: int, action: Optional[int]):
    surf = pygame.display.get_surface()
    if surf is None or env.sim is None:
        return
    font = pygame.font.SysFont("jetbrainsmono", 14)

    obs = env._get_obs()
    lines: List[str] = [
        f"Step={step_idx}  Action={'NOOP' if action == 0 else ('JUMP' if action == 1 else '-')}",
        f"Score={env.sim.score}  Cause={env.sim.session.end_cause or '-'}",
        "  ".join(f"{name}={float(v):.2f}" for name, v in zip(OBS_LABELS[:3], obs[:3])),
        "  ".join(f"{name}={float(v):.2f}" for name, v in zip(OBS_LABELS[3:], obs[3:])),
    ]

    panel_w = 300
    panel_h = 18 * (len(lines) + 1)
    panel = pygame.Surface((panel_w, panel_h), pygame.SRCALPHA)
    panel.fill((10, 20, 35, 160))
    surf.blit(panel, (8, 80))

    for i, txt in enumerate(lines):
        surf.blit(font.render(txt, True, (210, 230, 255)), (14, 86 + i * 18))

    pygame.display.flip()

def replay_episode(seed: int, actions: np.ndarray, frame_skip: int, slow: bool = False):
    """
    Replays an episode deterministically using FlappyEnv with on-screen overlay.
    Controls:
      SPACE: pause/resume   N: single-step when paused
      R: restart episode    ESC: quit
    """
    env = FlappyEnv(render_mode="human", frame_skip=frame_skip, time_limit_seconds=None)
    env.reset(seed=seed)
    env.render()

    paused = False
    single_step = False
    step_idx = 0
    action: Optional[int] = None
    clock = pygame.time.Clock()
    fps = SIM_FPS // frame_skip if slow else SIM_FPS

    try:
        running = True
        while running and step_idx < len(actions):
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key == pygame.K_SPACE:
                        paused = not paused
                    elif event.key == pygame.K_n and paused:
                        single_step = True
                    elif event.key == pygame.K_r:
                        env.reset(seed=seed)
                        step_idx = 0
                        paused = False

            if paused and not single_step:
                env.render()
                _draw_overlay(env, step_idx, action=None)
                clock.tick(30)
                continue
            single_step = False

            action = int(actions[step_idx])
            _obs, _r, term, trunc, _info = env.step(action)
            _draw_overlay(env, step_idx, action)
            step_idx += 1
            clock.tick(fps)

            if term or trunc:
                pygame.time.delay(600)
                break
    finally:
        env.close()

def main(argv=None):
    ap = argparse.ArgumentParser(description="Replay a recorded FlappyEnv episode with overlay.")
    ap.add_argument("--seed", type=int, help="Episode seed")
    ap.add_argument("--policy", type=str, default="random",
                    help="Trace subfolder name, e.g. random / heuristic / rl")
    ap.add_argument("--trace", type=str, default="",
                    help="Optional explicit path to a .npy action file")
    ap.add_argument("--out-dir", type=str, default=DEFAULT_OUT_DIR,
                    help="Base directory where experiments/runs live")
    ap.add_argument("--frame-skip", type=int, default=-1,
                    help="Override frame_skip. If <0, use meta or the env default")
    ap.add_argument("--slow", action="store_true", help="Limit display to the decision rate")
    args = ap.parse_args(argv)

    out_dir = Path(args.out_dir)

    if args.trace:
        trace_path = Path(args.trace)
        if not trace_path.exists():
            raise FileNotFoundError(f"Trace file not found: {trace_path}")
        if args.seed is None:
            stem = trace_path.stem.split("_")[0]
            if not stem.isdigit():
                raise SystemExit("Could not infer the seed from the trace name; pass --seed")
            args.seed = int(stem)
    else:
        if args.seed is None:
            raise SystemExit("Please provide --seed or --trace")
        trace_path = _find_trace(out_dir, args.policy, args.seed)

    actions = np.load(trace_path)
    if actions.ndim != 1:
        raise ValueError(f"Expected 1D action array, got shape {actions.shape}")

    fs = args.frame_skip
    if fs < 0:
        fs = FRAME_SKIP_DEFAULT
        if not args.trace:
            meta = _read_meta(out_dir, args.policy, args.seed)
            if meta.get("frame_skip", "").isdigit():
                fs = int(meta["frame_skip"])

    print(f"Replaying seed={args.seed}  policy={args.policy}  steps={len(actions)}  frame_skip={fs}")
    print("Controls: SPACE pause/resume | N step (when paused) | R restart | ESC quit")

    replay_episode(seed=args.seed, actions=actions, frame_skip=fs, slow=args.slow)

if __name__ == "__main__":
    main()
