# src/flappy/session.py
from __future__ import annotations
import logging
import random
from collections import deque
from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import Deque, Optional, Tuple, Union
from .config import WIDTH, HEIGHT, GROUND_MARGIN, ACTOR_START_Y, START_IMPULSE
from .actor import Actor
from .obstacles import Obstacle, ObstacleSpawner
from .collision import first_hit, mark_passed
from .events import Event, EventBus, EventType
from .tunables import Tunables

logger = logging.getLogger(__name__)


class SessionState(Enum):
    NOT_STARTED = auto()
    RUNNING = auto()
    ENDED = auto()


class InputKind(Enum):
    JUMP = auto()
    START = auto()
    RESTART = auto()


@dataclass(frozen=True)
class InputEvent:
    kind: InputKind


@dataclass
class Session:
    state: SessionState = SessionState.NOT_STARTED
    score: int = 0
    best_score: int = 0
    ticks: int = 0                  # running ticks in the current session
    end_cause: Optional[str] = None  # "ground" | "obstacle" | None


@dataclass(frozen=True)
class Snapshot:
    """Read-only copy of everything a renderer or agent needs after a tick."""
    state: SessionState
    score: int
    best_score: int
    ticks: int
    end_cause: Optional[str]
    actor: Actor
    obstacles: Tuple[Obstacle, ...]
    tunables: Tunables
    world_width: float
    world_height: float
    floor_y: float


class FlappySim:
    """
    Owns the whole game state and advances it one tick at a time.

    Per tick (only while RUNNING): pending inputs -> actor physics ->
    obstacle scroll/recycle/spawn -> collisions and scoring -> end check.
    Rendering happens outside, from `snapshot()`.
    """
    def __init__(self,
                 tunables: Optional[Tunables] = None,
                 seed: Optional[int] = None,
                 rng: Optional[random.Random] = None,
                 best_score: int = 0,
                 bus: Optional[EventBus] = None,
                 auto_restart_ticks: Optional[int] = None,
                 start_impulse: float = START_IMPULSE,
                 world_width: float = WIDTH,
                 world_height: float = HEIGHT,
                 ground_margin: float = GROUND_MARGIN,
                 start_y: Optional[float] = None):
        if auto_restart_ticks is not None and auto_restart_ticks < 1:
            raise ValueError("auto_restart_ticks must be >= 1 (or None to disable)")
        if best_score < 0:
            raise ValueError("best_score must be non-negative")

        self.tunables = tunables if tunables is not None else Tunables()
        self.spawner = ObstacleSpawner(seed=seed, rng=rng,
                                       world_width=world_width,
                                       world_height=world_height,
                                       ground_margin=ground_margin)
        self.bus = bus if bus is not None else EventBus()
        self.auto_restart_ticks = auto_restart_ticks
        self.start_impulse = float(start_impulse)
        self.floor_y = float(world_height - ground_margin)
        if start_y is None:
            # short worlds: start halfway down to the floor
            start_y = ACTOR_START_Y if ACTOR_START_Y < self.floor_y else self.floor_y / 2.0
        if not (0.0 <= start_y < self.floor_y):
            raise ValueError(f"start_y={start_y} must lie in [0, floor_y={self.floor_y})")
        self.start_y = float(start_y)

        self.actor = Actor.spawn(vy=0.0, y=self.start_y)   # idle pose until the first start
        self.session = Session(best_score=int(best_score))
        self._pending: Deque[InputEvent] = deque()
        self._ended_ticks = 0

    # -------------------- Read-only views --------------------

    @property
    def state(self) -> SessionState:
        return self.session.state

    @property
    def score(self) -> int:
        return self.session.score

    @property
    def best_score(self) -> int:
        return self.session.best_score

    @property
    def obstacles(self):
        return self.spawner.obstacles

    @property
    def seed(self) -> Optional[int]:
        return self.spawner.seed

    def snapshot(self) -> Snapshot:
        s = self.session
        return Snapshot(
            state=s.state,
            score=s.score,
            best_score=s.best_score,
            ticks=s.ticks,
            end_cause=s.end_cause,
            actor=replace(self.actor),
            obstacles=tuple(replace(o) for o in self.spawner.obstacles),
            tunables=self.tunables,
            world_width=self.spawner.world_width,
            world_height=self.spawner.world_height,
            floor_y=self.floor_y,
        )

    # -------------------- Inputs --------------------

    def set_tunables(self, tunables: Tunables):
        """Takes effect from the next tick; live obstacles keep their gap."""
        self.tunables = tunables

    def post(self, event: Union[InputEvent, InputKind]):
        """Queue an input; it is applied at the start of the next tick."""
        self._pending.append(_as_event(event))

    def handle(self, event: Union[InputEvent, InputKind]) -> bool:
        """Apply an input now. Returns False when the current state ignores it."""
        kind = _as_event(event).kind
        state = self.session.state

        if kind is InputKind.JUMP:
            if state is SessionState.RUNNING:
                self.actor.jump(self.tunables.jump_impulse)
                self.bus.emit(Event(EventType.JUMPED, {"vy": self.actor.vy}))
                return True
            if state is SessionState.NOT_STARTED:
                self._begin()
                return True
        elif state is not SessionState.RUNNING:
            # START / RESTART
            self._begin()
            return True

        logger.debug("ignored %s while %s", kind.name, state.name)
        return False

    def jump(self) -> bool:
        return self.handle(InputKind.JUMP)

    def start(self) -> bool:
        return self.handle(InputKind.START)

    def restart(self) -> bool:
        return self.handle(InputKind.RESTART)

    # -------------------- Tick --------------------

    def tick(self) -> Snapshot:
        while self._pending:
            self.handle(self._pending.popleft())

        s = self.session
        if s.state is SessionState.ENDED and self.auto_restart_ticks is not None:
            self._ended_ticks += 1
            if self._ended_ticks >= self.auto_restart_ticks:
                self._begin()
            return self.snapshot()
        if s.state is not SessionState.RUNNING:
            return self.snapshot()

        t = self.tunables
        grounded = self.actor.update_physics(t.gravity, self.floor_y)
        self.spawner.update(t)
        hit = first_hit(self.actor, self.spawner.obstacles)
        passed = mark_passed(self.actor, self.spawner.obstacles)
        s.ticks += 1

        if passed:
            s.score += passed
            self.bus.emit(Event(EventType.SCORE_CHANGED, {"score": s.score}))

        if grounded:
            self._end("ground")
        elif hit is not None:
            self._end("obstacle")

        return self.snapshot()

    # -------------------- Transitions --------------------

    def _begin(self):
        s = self.session
        self.actor = Actor.spawn(vy=self.start_impulse, y=self.start_y)
        self.spawner.reset()
        s.score = 0
        s.ticks = 0
        s.end_cause = None
        s.state = SessionState.RUNNING
        self._ended_ticks = 0
        self.spawner.spawn(self.tunables)
        logger.info("session started (best=%d)", s.best_score)
        self.bus.emit(Event(EventType.SESSION_STARTED, {"best_score": s.best_score}))

    def _end(self, cause: str):
        s = self.session
        s.state = SessionState.ENDED
        s.end_cause = cause
        new_best = s.score > s.best_score
        if new_best:
            s.best_score = s.score
        self._ended_ticks = 0
        logger.info("session ended by %s: score=%d best=%d", cause, s.score, s.best_score)
        self.bus.emit(Event(EventType.SESSION_ENDED, {
            "score": s.score,
            "best_score": s.best_score,
            "cause": cause,
            "new_best": new_best,
        }))


def _as_event(event: Union[InputEvent, InputKind]) -> InputEvent:
    if isinstance(event, InputEvent):
        return event
    if isinstance(event, InputKind):
        return InputEvent(event)
    raise TypeError(f"Expected InputEvent or InputKind, got {event!r}")
