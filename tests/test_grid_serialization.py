import json

import pytest

from qgrid.domain.types import ConfigurationError, GridConfig
from qgrid.utils.grid_serialization import (
    GridData, load_grid, load_grid_config, save_grid
)


def test_save_and_load_layout(tmp_path):
    config = GridConfig(size=6, goal=(5, 4), obstacles=((2, 2), (3, 3)), start=(0, 1),
                        max_steps_per_episode=50)
    path = tmp_path / "layouts" / "six.json"

    save_grid(GridData(config, name="six", description="two blocks"), str(path))
    loaded = load_grid(str(path))

    assert loaded.config == config
    assert loaded.name == "six"
    assert loaded.description == "two blocks"
    assert load_grid_config(str(path)) == config


def test_saved_file_holds_layout_only(tmp_path):
    path = tmp_path / "grid.json"
    save_grid(GridData(GridConfig()), str(path))

    data = json.loads(path.read_text())

    assert data["size"] == 5
    assert data["goal"] == [4, 4]
    assert data["obstacles"] == [[1, 1], [2, 2], [3, 1], [1, 3]]
    assert data["version"] == "1.0"
    assert "q_table" not in data


def test_missing_fields_raise_configuration_error():
    with pytest.raises(ConfigurationError):
        GridData.from_dict({"goal": [1, 1]})


def test_malformed_coordinates_raise_configuration_error():
    with pytest.raises(ConfigurationError):
        GridData.from_dict({"size": 5, "goal": [4, 4, 4]})


def test_inconsistent_layout_raises_configuration_error():
    with pytest.raises(ConfigurationError):
        GridData.from_dict({"size": 5, "goal": [1, 1], "obstacles": [[1, 1]]})


def test_optional_fields_default():
    grid = GridData.from_dict({"size": 3, "goal": [2, 2]})
    assert grid.config.start == (0, 0)
    assert grid.config.obstacles == ()
    assert grid.config.max_steps_per_episode == 100
