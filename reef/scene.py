"""Static scene description consumed by the browser renderer."""
from __future__ import annotations

import math
from typing import Any, Dict, List

from .config import SceneConfig

COLORS: Dict[str, int] = {
    "water": 0x4499FF,
    "goldfish": 0xFF6600,
    "shark": 0x666666,
    "small_fish": 0x55FF55,
    "sunray": 0xFFFFDD,
    "terrain": 0x225577,
}

CAMERA = {"fov": 75.0, "near": 0.1, "far": 1000.0, "position": [0.0, 5.0, 15.0]}

LIGHTS = [
    {"type": "ambient", "color": 0xFFFFFF, "intensity": 0.6},
    {"type": "directional", "color": 0xFFFFFF, "intensity": 0.8, "position": [0.0, 10.0, 0.0]},
]

BLOOM = {"strength": 1.5, "radius": 0.4, "threshold": 0.85}

# Voxel size and non-uniform scale per actor kind
ACTORS = {
    "goldfish": {"size": 1.0, "scale": [0.5, 0.5, 1.0], "color": COLORS["goldfish"]},
    "shark": {"size": 2.0, "scale": [1.0, 1.0, 1.0], "color": COLORS["shark"]},
    "small_fish": {"size": 0.3, "scale": [1.0, 1.0, 1.0], "color": COLORS["small_fish"]},
}

TERRAIN_X_RANGE = (-20, 20)
TERRAIN_FLOOR = -15
TERRAIN_BLOCK = 2


def column_height(x: float) -> int:
    """Height of the terrain column at ``x``, in scene units."""
    return math.floor(math.sin(x / 5) * 3) + 4


def voxel_terrain() -> List[Dict[str, Any]]:
    """
    Blocks of the seabed strip along z = 0.

    One column every ``TERRAIN_BLOCK`` units over ``TERRAIN_X_RANGE``; each
    column stacks blocks upward from ``TERRAIN_FLOOR`` until its height.
    """
    blocks = []
    start, stop = TERRAIN_X_RANGE
    for x in range(start, stop, TERRAIN_BLOCK):
        top = TERRAIN_FLOOR + column_height(x)
        for y in range(TERRAIN_FLOOR, top, TERRAIN_BLOCK):
            blocks.append({"x": float(x), "y": float(y), "z": 0.0})
    return blocks


def build_scene(config: SceneConfig) -> Dict[str, Any]:
    """Everything the renderer needs besides per-tick actor positions."""
    return {
        "colors": COLORS,
        "camera": CAMERA,
        "lights": LIGHTS,
        "bloom": BLOOM,
        "actors": ACTORS,
        "terrain": {
            "size": float(TERRAIN_BLOCK),
            "color": COLORS["terrain"],
            "blocks": voxel_terrain(),
        },
        "counts": {"sharks": config.n_sharks, "small_fish": config.n_small_fish},
        "proximity_threshold": config.proximity_threshold,
    }
