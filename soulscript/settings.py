"""Interpreter configuration"""

import os
from typing import Optional

from pydantic import BaseModel, Field


ENV_PREFIX = "SOULSCRIPT_"


class InterpreterSettings(BaseModel):
    """Tunables for one interpreter session"""

    # Fixed simulation step handed to update(dt); 60 ticks per second
    tick_delta: float = Field(default=1.0 / 60.0, gt=0)
    max_log_entries: int = Field(default=100, ge=1, le=1000)
    max_call_depth: int = Field(default=64, ge=1)
    max_callbacks_per_tick: int = Field(default=100, ge=1)
    random_seed: Optional[int] = None

    # Spawn area for entities created without an explicit position
    world_width: float = Field(default=800.0, gt=0)
    world_height: float = Field(default=600.0, gt=0)
    spawn_margin: float = Field(default=100.0, ge=0)

    # Give every instantiated component a backing world entity
    bind_entities: bool = True

    @classmethod
    def from_env(cls, **overrides) -> 'InterpreterSettings':
        """Build settings from SOULSCRIPT_* environment variables"""
        values = {}
        for name in cls.model_fields:
            raw = os.environ.get(ENV_PREFIX + name.upper())
            if raw is not None:
                values[name] = raw
        values.update(overrides)
        return cls(**values)
