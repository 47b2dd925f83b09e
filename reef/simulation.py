"""Actor motion for the underwater scene: goldfish, sharks and small fish."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, List, Optional

import numpy as np

from .config import SceneConfig
from .presets import SHARK, SMALL_FISH, MotionProfile

logger = logging.getLogger(__name__)


# ============================================================================
# Input and event types
# ============================================================================

@dataclass(frozen=True)
class PointerSample:
    """Latest pointer position, normalized to [-1, 1] on both axes."""
    x: float
    y: float

    @classmethod
    def from_normalized(cls, x: float, y: float) -> Optional["PointerSample"]:
        """Clamp a normalized pair into range; ``None`` if either is not finite."""
        if not (math.isfinite(x) and math.isfinite(y)):
            return None
        return cls(x=min(1.0, max(-1.0, float(x))), y=min(1.0, max(-1.0, float(y))))

    @classmethod
    def from_client(
        cls, client_x: float, client_y: float, width: float, height: float
    ) -> Optional["PointerSample"]:
        """Normalize window pixel coordinates (y grows downwards on screen)."""
        if not (width > 0 and height > 0):
            return None
        return cls.from_normalized(
            (client_x / width) * 2.0 - 1.0,
            -(client_y / height) * 2.0 + 1.0,
        )


@dataclass(frozen=True)
class ProximityEvent:
    """A shark came within the proximity threshold of the goldfish."""
    shark_id: str
    distance: float


ProximityHandler = Callable[[ProximityEvent], None]


def log_proximity(event: ProximityEvent) -> None:
    """Default proximity handler: only reports the encounter."""
    logger.warning("Shark attack! %s is %.2f units from the goldfish", event.shark_id, event.distance)


# ============================================================================
# World
# ============================================================================

class World:
    """
    Scene state for one session.

    Owns the single goldfish, the fixed shark and small-fish collections and
    the latest pointer sample. Positions live in numpy arrays: ``goldfish`` has
    shape (3,), ``sharks`` and ``small_fish`` have shape (N, 3).
    """

    def __init__(
        self,
        config: SceneConfig,
        shark_profile: MotionProfile = SHARK,
        fish_profile: MotionProfile = SMALL_FISH,
    ):
        self.config = config
        self.shark_profile = shark_profile
        self.fish_profile = fish_profile
        self.reset()

    @property
    def shark_ids(self) -> List[str]:
        return [f"shark-{i}" for i in range(len(self.sharks))]

    @property
    def fish_ids(self) -> List[str]:
        return [f"fish-{i}" for i in range(len(self.small_fish))]

    def _spawn(self, count: int) -> np.ndarray:
        """Uniform positions inside the spawn box."""
        extent = np.asarray(self.config.spawn_extent, dtype=float)
        return self._rng.uniform(-extent, extent, (count, 3))

    def reset(self) -> None:
        """Respawn every actor; repeatable when the config carries a seed."""
        self._rng = np.random.default_rng(self.config.seed)
        self.goldfish = np.zeros(3)
        self.sharks = self._spawn(self.config.n_sharks)
        self.small_fish = self._spawn(self.config.n_small_fish)
        self.shark_origins = self.sharks.copy()
        self.fish_origins = self.small_fish.copy()
        self.pointer: Optional[PointerSample] = None
        self.tick_count = 0
        self.last_now: Optional[float] = None

    def set_pointer(self, sample: Optional[PointerSample]) -> None:
        """Store the newest pointer sample; ``None`` or non-finite samples are ignored."""
        if sample is not None:
            sample = PointerSample.from_normalized(sample.x, sample.y)
        if sample is not None:
            self.pointer = sample

    def advance(self, now: float, on_proximity: Optional[ProximityHandler] = log_proximity) -> List[ProximityEvent]:
        return advance(self, now, self.pointer, on_proximity)

    def get_state(self) -> dict:
        """Get current state for API/visualization."""
        return {
            "t": self.last_now,
            "tick": self.tick_count,
            "motion_mode": self.config.motion_mode,
            "pointer": None if self.pointer is None else {"x": self.pointer.x, "y": self.pointer.y},
            "goldfish": _xyz(self.goldfish),
            "sharks": [
                dict(id=actor_id, **_xyz(pos)) for actor_id, pos in zip(self.shark_ids, self.sharks)
            ],
            "small_fish": [
                dict(id=actor_id, **_xyz(pos)) for actor_id, pos in zip(self.fish_ids, self.small_fish)
            ],
        }


def _xyz(position: np.ndarray) -> dict:
    return {"x": float(position[0]), "y": float(position[1]), "z": float(position[2])}


# ============================================================================
# Per-tick update
# ============================================================================

def motion_delta(profile: MotionProfile, now: float) -> np.ndarray:
    """Offset contributed by one tick of ``profile`` at time ``now`` (ms)."""
    phase = now * profile.frequency
    return np.array([
        math.sin(phase) * profile.amplitude_x,
        math.cos(phase) * profile.amplitude_y,
        0.0,
    ])


def advance(
    world: World,
    now: float,
    pointer_sample: Optional[PointerSample] = None,
    on_proximity: Optional[ProximityHandler] = log_proximity,
) -> List[ProximityEvent]:
    """
    Advance the world by one tick.

    The pointer sample (if any) places the goldfish, sharks and small fish move
    by their motion profiles, then every shark closer than the proximity
    threshold to the goldfish produces an event.

    In "accumulate" mode each call adds a delta to the current positions, so
    the result depends on every ``now`` seen since the last reset. Callers
    must not repeat a tick; see ``TickScheduler``.

    Args:
        world: Scene state, mutated in place
        now: Timestamp in milliseconds
        pointer_sample: Latest pointer input, or None if there was none yet;
            clamped into range, ignored if not finite
        on_proximity: Called once per event, may be None

    Returns:
        Proximity events raised during this tick
    """
    if not math.isfinite(now):
        logger.warning("Skipping tick with non-finite timestamp %r", now)
        return []

    config = world.config

    if pointer_sample is not None:
        pointer_sample = PointerSample.from_normalized(pointer_sample.x, pointer_sample.y)
    if pointer_sample is not None:
        world.goldfish[0] = pointer_sample.x * config.pointer_scale_x
        world.goldfish[1] = pointer_sample.y * config.pointer_scale_y

    shark_delta = motion_delta(world.shark_profile, now)
    fish_delta = motion_delta(world.fish_profile, now)
    if config.motion_mode == "anchored":
        world.sharks[:] = world.shark_origins + shark_delta
        world.small_fish[:] = world.fish_origins + fish_delta
    else:
        world.sharks += shark_delta
        world.small_fish += fish_delta

    world.tick_count += 1
    world.last_now = now

    events: List[ProximityEvent] = []
    if len(world.sharks) == 0:
        return events

    distances = np.linalg.norm(world.sharks - world.goldfish, axis=1)
    for index in np.flatnonzero(distances < config.proximity_threshold):
        event = ProximityEvent(shark_id=f"shark-{index}", distance=float(distances[index]))
        events.append(event)
        if on_proximity is not None:
            on_proximity(event)

    return events
