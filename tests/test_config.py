from pathlib import Path

import pytest

from reef.config import DEFAULT_CONFIG, SceneConfig


def test_defaults():
    assert DEFAULT_CONFIG.port == 3000
    assert DEFAULT_CONFIG.n_sharks == 3
    assert DEFAULT_CONFIG.n_small_fish == 20
    assert DEFAULT_CONFIG.proximity_threshold == 2.0
    assert DEFAULT_CONFIG.motion_mode == "accumulate"


def test_empty_environment_keeps_defaults():
    assert SceneConfig.from_env({}) == SceneConfig()


def test_port_and_scene_overrides_from_environment(tmp_path):
    config = SceneConfig.from_env(
        {
            "PORT": "8080",
            "REEF_SEED": "11",
            "REEF_MOTION_MODE": "anchored",
            "REEF_FRAME_INTERVAL": "0.05",
            "REEF_PUBLIC_DIR": str(tmp_path),
        }
    )
    assert config.port == 8080
    assert config.seed == 11
    assert config.motion_mode == "anchored"
    assert config.frame_interval == 0.05
    assert config.public_dir == Path(tmp_path)


def test_malformed_port_names_the_variable():
    with pytest.raises(ValueError, match="PORT"):
        SceneConfig.from_env({"PORT": "eighty"})


@pytest.mark.parametrize(
    "overrides",
    [
        {"n_sharks": -1},
        {"proximity_threshold": 0.0},
        {"frame_interval": 0.0},
        {"motion_mode": "teleport"},
        {"port": 70000},
    ],
)
def test_validate_rejects_bad_values(overrides):
    with pytest.raises(ValueError):
        SceneConfig(**overrides).validate()
