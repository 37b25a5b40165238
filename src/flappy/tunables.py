# src/flappy/tunables.py
from __future__ import annotations
from enum import Enum
from typing import Any, Dict, Mapping, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .config import (
    GAP_SIZE, OBSTACLE_SPEED, GRAVITY, JUMP_IMPULSE, OBSTACLE_KIND,
    GAP_RANGE, SPEED_RANGE, GRAVITY_RANGE, JUMP_RANGE,
    GAP_STEP, SPEED_STEP, GRAVITY_STEP, JUMP_STEP
)


class ObstacleKind(str, Enum):
    """Visual style tag for obstacles. Purely cosmetic for the simulation."""
    PIPE = "pipe"
    PILLAR = "pillar"
    LASER = "laser"

    def next(self) -> "ObstacleKind":
        kinds = list(ObstacleKind)
        return kinds[(kinds.index(self) + 1) % len(kinds)]


# field name -> ((lo, hi), slider step)
_SLIDERS: Dict[str, Tuple[Tuple[float, float], float]] = {
    "gap_size": (GAP_RANGE, GAP_STEP),
    "obstacle_speed": (SPEED_RANGE, SPEED_STEP),
    "gravity": (GRAVITY_RANGE, GRAVITY_STEP),
    "jump_impulse": (JUMP_RANGE, JUMP_STEP),
}


class Tunables(BaseModel):
    """
    Runtime-adjustable knobs read by the simulation at the start of every tick.
    - gap_size and obstacle_kind only affect obstacles spawned afterwards
    - gravity must pull down (> 0), jump_impulse must push up (< 0)

    Construction validates every field; invalid values raise
    pydantic.ValidationError (a ValueError subclass).
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    gap_size: float = Field(default=GAP_SIZE, alias="gapSize", strict=True,
                            ge=GAP_RANGE[0], le=GAP_RANGE[1])
    obstacle_speed: float = Field(default=OBSTACLE_SPEED, alias="obstacleSpeed", strict=True,
                                  ge=SPEED_RANGE[0], le=SPEED_RANGE[1])
    gravity: float = Field(default=GRAVITY, alias="gravity", strict=True,
                           ge=GRAVITY_RANGE[0], le=GRAVITY_RANGE[1])
    jump_impulse: float = Field(default=JUMP_IMPULSE, alias="jumpImpulse", strict=True,
                                ge=JUMP_RANGE[0], le=JUMP_RANGE[1])
    obstacle_kind: ObstacleKind = Field(default=ObstacleKind(OBSTACLE_KIND),
                                        alias="obstacleVisualKind")

    def adjusted(self, name: str, steps: int) -> "Tunables":
        """Copy with `name` moved by whole slider steps, clamped into range."""
        if name not in _SLIDERS:
            raise ValueError(f"Unknown tunable: {name}")
        (lo, hi), step = _SLIDERS[name]
        value = getattr(self, name) + steps * step
        value = max(lo, min(hi, round(value, 6)))
        return self.model_copy(update={name: value})

    def with_next_kind(self) -> "Tunables":
        return self.model_copy(update={"obstacle_kind": self.obstacle_kind.next()})

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Tunables":
        """
        Build from a persisted mapping. Missing keys keep defaults, unknown keys
        are ignored. Raises pydantic.ValidationError if a present value is invalid.
        """
        return cls.model_validate(dict(data))

    @staticmethod
    def field_names() -> Tuple[str, ...]:
        return tuple(_SLIDERS)
