"""Arena survival environment package."""

from __future__ import annotations

from .adapter import HeroCommand, action_transform, obs_transform
from .env_core import HERO_ID, ArenaEnv, ArenaEnvConfig

__all__ = [
    "ArenaEnv",
    "ArenaEnvConfig",
    "HERO_ID",
    "HeroCommand",
    "action_transform",
    "obs_transform",
]
