"""Simple configuration for the underwater scene."""
from __future__ import annotations

import math
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping, Optional, Tuple

MOTION_MODES = ("accumulate", "anchored")

_DEFAULT_PUBLIC_DIR = Path(__file__).resolve().parent.parent / "public"


@dataclass
class SceneConfig:
    """Configuration for the actor loop and the asset server."""

    # Actors
    n_sharks: int = 3
    n_small_fish: int = 20

    # Spawn box half-extents (scene units)
    spawn_extent: Tuple[float, float, float] = (20.0, 10.0, 5.0)

    # Pointer -> scene mapping, matches camera framing
    pointer_scale_x: float = 15.0
    pointer_scale_y: float = 10.0

    # Shark/goldfish distance that raises a proximity event
    proximity_threshold: float = 2.0

    # "accumulate" adds a delta every tick, "anchored" oscillates around spawn
    motion_mode: str = "accumulate"

    # Loop
    frame_interval: float = 1.0 / 60.0  # seconds between ticks
    seed: Optional[int] = None

    # Server
    host: str = "0.0.0.0"
    port: int = 3000
    public_dir: Path = _DEFAULT_PUBLIC_DIR

    def validate(self) -> "SceneConfig":
        if self.n_sharks < 0 or self.n_small_fish < 0:
            raise ValueError("Actor counts must be non-negative")
        if not self.proximity_threshold > 0.0:
            raise ValueError("proximity_threshold must be positive")
        if not (self.frame_interval > 0.0 and math.isfinite(self.frame_interval)):
            raise ValueError("frame_interval must be a positive number of seconds")
        if self.motion_mode not in MOTION_MODES:
            raise ValueError(
                f"Unknown motion mode '{self.motion_mode}'. Available: {list(MOTION_MODES)}"
            )
        if not 1 <= self.port <= 65535:
            raise ValueError(f"Port {self.port} is out of range")
        return self

    @classmethod
    def from_env(
        cls, environ: Optional[Mapping[str, str]] = None, base: Optional["SceneConfig"] = None
    ) -> "SceneConfig":
        """Build a config from environment variables on top of ``base``.

        Recognised variables: PORT, REEF_HOST, REEF_SEED, REEF_MOTION_MODE,
        REEF_FRAME_INTERVAL and REEF_PUBLIC_DIR. Unset variables keep the
        value from ``base``.
        """
        env = os.environ if environ is None else environ
        config = base or cls()
        overrides = {}

        if env.get("PORT"):
            overrides["port"] = _parse(env, "PORT", int)
        if env.get("REEF_HOST"):
            overrides["host"] = env["REEF_HOST"]
        if env.get("REEF_SEED"):
            overrides["seed"] = _parse(env, "REEF_SEED", int)
        if env.get("REEF_MOTION_MODE"):
            overrides["motion_mode"] = env["REEF_MOTION_MODE"]
        if env.get("REEF_FRAME_INTERVAL"):
            overrides["frame_interval"] = _parse(env, "REEF_FRAME_INTERVAL", float)
        if env.get("REEF_PUBLIC_DIR"):
            overrides["public_dir"] = Path(env["REEF_PUBLIC_DIR"])

        return replace(config, **overrides).validate()


def _parse(env: Mapping[str, str], name: str, kind):
    raw = env[name]
    try:
        return kind(raw)
    except ValueError:
        raise ValueError(f"Invalid value for {name}: {raw!r}") from None


DEFAULT_CONFIG = SceneConfig()
