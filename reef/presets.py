"""Motion profiles for the autonomous actor categories."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List


@dataclass(frozen=True)
class MotionProfile:
    """Per-category oscillation constants.

    Each tick the actor moves by ``sin(now * frequency) * amplitude_x`` along x
    and ``cos(now * frequency) * amplitude_y`` along y, ``now`` in milliseconds.
    """
    name: str
    description: str
    amplitude_x: float
    amplitude_y: float
    frequency: float  # radians per millisecond


# ============================================================================
# Profile Definitions
# ============================================================================

SHARK = MotionProfile(
    name="shark",
    description="Slow wide sweep for the large predators",
    amplitude_x=0.1,
    amplitude_y=0.05,
    frequency=0.001,
)

SMALL_FISH = MotionProfile(
    name="small_fish",
    description="Faster, tighter wobble for the schooling fish",
    amplitude_x=0.05,
    amplitude_y=0.03,
    frequency=0.002,
)


# ============================================================================
# Profile Registry
# ============================================================================

PROFILES: Dict[str, MotionProfile] = {
    "shark": SHARK,
    "small_fish": SMALL_FISH,
}


def list_profiles() -> List[MotionProfile]:
    """Return list of all available motion profiles."""
    return list(PROFILES.values())


def get_profile(name: str) -> MotionProfile:
    """Get motion profile by name."""
    if name not in PROFILES:
        raise ValueError(f"Unknown motion profile '{name}'. Available: {list(PROFILES.keys())}")
    return PROFILES[name]
