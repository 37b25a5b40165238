# src/flappy/game.py
import sys, argparse, logging
import pygame
from pygame import K_SPACE, K_ESCAPE, K_r, K_TAB, K_UP, K_DOWN, K_LEFT, K_RIGHT, K_k
from .config import WIDTH, HEIGHT, FPS, SEED_DEFAULT, SETTINGS_FILE_DEFAULT
from .events import EventType
from .render import Renderer
from .session import FlappySim, InputKind, SessionState
from .storage import SettingsStore
from .tunables import Tunables


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Flappy: tap to fly between the obstacles.")
    p.add_argument("--seed", type=int, default=SEED_DEFAULT,
                   help="Obstacle layout seed. Omit for a random layout.")
    p.add_argument("--settings", type=str, default=SETTINGS_FILE_DEFAULT,
                   help="JSON file holding saved settings and the best score.")
    p.add_argument("--auto-restart", type=int, default=None, metavar="TICKS",
                   help="Restart by itself TICKS frames after game over (default: wait for Play Again).")
    p.add_argument("--log-level", type=str, default="WARNING",
                   choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return p.parse_args(argv)


def run(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    store = SettingsStore(args.settings)
    sim = FlappySim(tunables=store.load_tunables(),
                    seed=args.seed,
                    best_score=store.load_best_score(),
                    auto_restart_ticks=args.auto_restart)
    store.attach(sim)
    sim.bus.subscribe(EventType.SESSION_ENDED,
                      lambda e: print(f"Game over ({e.data['cause']}): score={e.data['score']} "
                                      f"best={e.data['best_score']}"))

    pygame.init()
    pygame.display.set_caption("Flappy")
    screen = pygame.display.set_mode((WIDTH, HEIGHT))
    clock = pygame.time.Clock()
    renderer = Renderer(WIDTH, HEIGHT)

    fields = Tunables.field_names()
    settings_open = False
    selected = 0
    play_again_rect = None

    def apply_settings(tunables: Tunables):
        sim.set_tunables(tunables)
        store.save_tunables(tunables)

    while True:
        clock.tick(FPS)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                pygame.quit(); sys.exit()
            if event.type == pygame.KEYDOWN:
                if event.key == K_ESCAPE:
                    pygame.quit(); sys.exit()
                if event.key == K_TAB:
                    settings_open = not settings_open
                elif settings_open:
                    if event.key == K_UP:
                        selected = (selected - 1) % len(fields)
                    elif event.key == K_DOWN:
                        selected = (selected + 1) % len(fields)
                    elif event.key in (K_LEFT, K_RIGHT):
                        step = 1 if event.key == K_RIGHT else -1
                        apply_settings(sim.tunables.adjusted(fields[selected], step))
                    elif event.key == K_k:
                        apply_settings(sim.tunables.with_next_kind())
                elif event.key == K_SPACE:
                    sim.post(InputKind.JUMP)
                elif event.key == K_r and sim.state is SessionState.ENDED:
                    sim.post(InputKind.RESTART)
            if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1 and not settings_open:
                if sim.state is SessionState.ENDED:
                    if play_again_rect is not None and play_again_rect.collidepoint(event.pos):
                        sim.post(InputKind.RESTART)
                else:
                    sim.post(InputKind.JUMP)

        # Settings panel pauses the world
        snap = sim.snapshot() if settings_open else sim.tick()

        play_again_rect = renderer.draw(screen, snap,
                                        settings=(fields, selected) if settings_open else None)
        pygame.display.flip()


if __name__ == "__main__":
    run()
