import math

import numpy as np
import pytest

from GridConfig import GridConfig
import WaveField


def half(x, y, z):
    return 0.5


def test_influence_endpoints():
    assert WaveField.pointer_influence(0.0, 150.0) == 1.0
    assert WaveField.pointer_influence(150.0 ** 2, 150.0) == 0.0
    assert WaveField.pointer_influence(151.0 ** 2, 150.0) == 0.0


def test_influence_is_monotone_in_distance():
    d = np.linspace(0.0, 200.0, 401)
    values = [WaveField.pointer_influence(x * x, 150.0) for x in d]
    assert all(a >= b for a, b in zip(values, values[1:]))
    assert all(0.0 <= v <= 1.0 for v in values)


def test_influence_is_linear_inside_radius():
    assert WaveField.pointer_influence(75.0 ** 2, 150.0) == pytest.approx(0.5)


def test_influence_of_bad_distance_is_zero():
    assert WaveField.pointer_influence(float("nan"), 10.0) == 0.0


@pytest.mark.parametrize("x,z,t", [(0.0, 0.0, 0.0), (120.0, -33.0, 0.4), (-350.0, 351.0, 12.0)])
def test_constant_noise_layer_sum(x, z, t):
    cfg = GridConfig()
    wave_time = t * cfg.wave_speed * cfg.wave_time_scale
    expected = 0.5 * cfg.wave_height * sum(1 - w * 0.15 for w in range(cfg.wave_layers))
    got = WaveField.layered_wave_height(x, z, t, wave_time, half, cfg)
    assert got == pytest.approx(expected)
    assert got == pytest.approx(0.5 * 35.0 * 2.55)


def test_layers_use_distinct_offsets():
    seen = []

    def recorder(x, y, z):
        seen.append((x, y))
        return 0.0

    cfg = GridConfig(wave_layers=4)
    WaveField.layered_wave_height(10.0, 20.0, 0.0, 0.0, recorder, cfg)
    assert len(seen) == 4
    assert len(set(seen)) == 4
    assert seen[1][0] - seen[0][0] == pytest.approx(1234.5)


def test_zero_layers_gives_zero():
    cfg = GridConfig(wave_layers=0)
    assert WaveField.layered_wave_height(1.0, 2.0, 3.0, 4.0, half, cfg) == 0.0


def test_out_of_range_noise_is_clamped():
    cfg = GridConfig(wave_layers=1)
    assert WaveField.layered_wave_height(0, 0, 0, 0, lambda *a: 5.0, cfg) == pytest.approx(cfg.wave_height)
    assert WaveField.layered_wave_height(0, 0, 0, 0, lambda *a: float("nan"), cfg) == 0.0


def test_ripple():
    assert WaveField.ripple_height(0.0, 0.0) == 0.0
    z = math.pi / 2 / 0.15
    assert WaveField.ripple_height(z, 0.0) == pytest.approx(2.4)


def test_target_height_without_pointer_is_negated_wave():
    cfg = GridConfig()
    assert WaveField.target_height(12.0, 0.0, cfg) == -12.0


def test_target_height_at_pointer():
    cfg = GridConfig()
    assert WaveField.target_height(12.0, 1.0, cfg) == pytest.approx(-cfg.wave_height * 3)
    # half influence: halfway between -wave and -wave_height*3*0.5
    assert WaveField.target_height(10.0, 0.5, cfg) == pytest.approx(0.5 * -10.0 + 0.5 * -52.5)


def test_color_targets():
    cfg = GridConfig()
    assert WaveField.color_targets(1e9, 0.0, 3.0, cfg) == (
        cfg.base_hue, cfg.min_brightness, cfg.color_lerp_speed)

    hue, bri, rate = WaveField.color_targets(100.0, 1.0, 10.0, cfg)
    assert hue == pytest.approx((10.0 * 50 + 10.0 * 0.5) % 360)
    assert bri == cfg.max_brightness
    assert rate < 1.0

    # any influence aims at full brightness; influence sets the blend rate
    _, bri_half, rate_half = WaveField.color_targets(100.0, 0.5, 0.0, cfg)
    assert bri_half == cfg.max_brightness
    assert rate_half == pytest.approx(0.5)


def test_evaluate_far_from_pointer():
    cfg = GridConfig()
    s = WaveField.evaluate(0.0, 0.0, 1000.0, 1000.0, 0.0, 0.0, half, cfg)
    assert s.influence == 0.0
    assert s.hue == cfg.base_hue
    assert s.brightness == cfg.min_brightness
    assert s.brightness_rate == cfg.color_lerp_speed
    assert s.height == pytest.approx(-0.5 * 35.0 * 2.55)
    assert s.distance_sq == pytest.approx(2e6)


def test_perlin_noise_range_and_determinism():
    pts = [(0.1 * i, 0.37 * i, 0.0) for i in range(50)]
    vals = [WaveField.perlin_noise3(*p) for p in pts]
    assert all(0.0 <= v < 1.0 for v in vals)
    assert vals == [WaveField.perlin_noise3(*p) for p in pts]


def test_map_range():
    assert WaveField.map_range(200, 0, 400, -20, 20) == 0
    assert WaveField.map_range(0, 0, 400, -20, 20) == -20
    assert WaveField.map_range(5, 3, 3, -1, 1) == 0.0
