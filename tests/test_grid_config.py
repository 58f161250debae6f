import json

import pytest

from GridConfig import GridConfig, ConfigError


def test_defaults_are_valid():
    cfg = GridConfig().validate()
    assert cfg.num_particles == 32 * 32
    assert cfg.extent_x == 32 * 22.0


@pytest.mark.parametrize("changes", [
    {"cols": 0},
    {"rows": -1},
    {"spacing": 0.0},
    {"mouse_influence_radius": 0.0},
    {"mouse_active_radius": -3.0},
    {"update_interval": 0},
    {"height_lerp_speed": 0.0},
    {"color_lerp_speed": 1.5},
    {"min_budget": 100},
    {"update_budget": 200},
    {"low_fps": 60.0},
    {"cols": 2.5},
    {"wave_layers": -1},
    {"width": 0},
    {"cols": "4"},
    {"spacing": "22"},
    {"debug": "yes"},
])
def test_invalid_values_rejected(changes):
    with pytest.raises(ConfigError):
        GridConfig(**changes).validate()


def test_config_error_is_value_error():
    assert issubclass(ConfigError, ValueError)


def test_replace_validates():
    cfg = GridConfig()
    assert cfg.replace(cols=4).cols == 4
    assert cfg.cols == 32
    with pytest.raises(ConfigError):
        cfg.replace(rows=0)


def test_from_mapping_rejects_unknown_keys():
    with pytest.raises(ConfigError, match="colz"):
        GridConfig.from_mapping({"colz": 3})


def test_from_json(tmp_path):
    path = tmp_path / "grid.json"
    path.write_text(json.dumps({"cols": 10, "rows": 6, "camera_frustum_cull": False}))
    cfg = GridConfig.from_json(path)
    assert (cfg.cols, cfg.rows, cfg.camera_frustum_cull) == (10, 6, False)

    path.write_text("[1, 2]")
    with pytest.raises(ConfigError):
        GridConfig.from_json(path)


def test_to_dict_round_trips_through_mapping():
    cfg = GridConfig(cols=5)
    assert GridConfig.from_mapping(cfg.to_dict()) == cfg


def test_from_json_bad_input_is_config_error(tmp_path):
    path = tmp_path / "grid.json"
    path.write_text('{"cols": 4,')
    with pytest.raises(ConfigError, match="invalid JSON"):
        GridConfig.from_json(path)

    path.write_text(json.dumps({"cols": "4"}))
    with pytest.raises(ConfigError, match="cols"):
        GridConfig.from_json(path)
