"""
Tests for configuration loading and validation.
"""

import pytest

from tetris_game.tetris_core.config_loader import load_config, get_config


def write_config(tmp_path, text: str) -> str:
    path = tmp_path / "game_config.yaml"
    path.write_text(text)
    return str(path)


class TestDefaultConfig:
    """Test the shipped game_config.yaml."""

    def test_board(self):
        config = load_config()
        assert (config.board.width, config.board.height) == (10, 20)
        assert config.board_shape == (20, 10)
        assert config.num_cells == 200

    def test_scoring_and_levels(self):
        config = load_config()
        assert config.scoring.line_clear_points == (40, 100, 300, 1200)
        assert config.levels.start_level == 1
        assert config.levels.max_level == 20
        assert config.levels.lines_per_level == 10

    def test_speed(self):
        config = load_config()
        assert config.speed.base_delay_ms == 1000
        assert config.speed.speed_factor == pytest.approx(0.8)
        assert config.speed.min_delay_ms == 75

    def test_cached_config(self):
        """get_config returns the same instance."""
        assert get_config() is get_config()


class TestConfigFiles:
    """Test custom and invalid files."""

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "missing.yaml"))

    def test_partial_file_uses_defaults(self, tmp_path):
        """Only overridden values change."""
        path = write_config(tmp_path, "board:\n  width: 12\n")
        config = load_config(path)
        assert config.board.width == 12
        assert config.board.height == 20
        assert config.levels.lines_per_level == 10

    def test_empty_file(self, tmp_path):
        """An empty file is all defaults."""
        config = load_config(write_config(tmp_path, ""))
        assert config.caps.max_steps == 10000

    def test_points_table_length(self, tmp_path):
        path = write_config(tmp_path, "scoring:\n  line_clear_points: [40, 100, 300]\n")
        with pytest.raises(ValueError):
            load_config(path)

    def test_scalar_points_table(self, tmp_path):
        """A single number instead of a list is a ValueError."""
        path = write_config(tmp_path, "scoring:\n  line_clear_points: 40\n")
        with pytest.raises(ValueError):
            load_config(path)

    @pytest.mark.parametrize("text", [
        "board:\n  width: 3\n",
        "board:\n  spawn_y: 25\n",
        "levels:\n  lines_per_level: 0\n",
        "levels:\n  start_level: 5\n  max_level: 3\n",
        "speed:\n  speed_factor: 1.5\n",
        "speed:\n  min_delay_ms: 2000\n",
        "caps:\n  max_steps: 0\n",
    ])
    def test_invalid_values(self, tmp_path, text):
        with pytest.raises(ValueError):
            load_config(write_config(tmp_path, text))
