"""Tests for the game configuration dataclass."""

import json

import pytest

from snake_frenzy.config import GameConfig


class TestGameConfig:
    def test_defaults(self):
        cfg = GameConfig()
        assert cfg.grid_size == 40
        assert cfg.area == 1600
        assert cfg.food_enabled is True
        assert cfg.effective_obstacle_count == 40

    def test_zero_intervals_allowed(self):
        cfg = GameConfig(motion_interval_ms=0, spawn_interval_ms=0)
        assert cfg.motion_interval_ms == 0

    def test_frozen(self):
        cfg = GameConfig()
        with pytest.raises(AttributeError):
            cfg.grid_size = 10

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"grid_size": 3},
            {"motion_interval_ms": -1},
            {"spawn_interval_ms": -5},
            {"grid_size": 4, "random_obstacle_count": 17},
        ],
    )
    def test_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            GameConfig(**kwargs)

    def test_save_and_load(self, tmp_path):
        cfg = GameConfig(grid_size=12, motion_interval_ms=50, seed=9)
        path = tmp_path / "config.json"
        cfg.save(path)
        assert path.exists()
        assert GameConfig.load(path) == cfg

    def test_to_dict_serializable(self):
        serialized = json.dumps(GameConfig().to_dict())
        assert isinstance(serialized, str)
