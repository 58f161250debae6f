"""Procedural wave field and pointer influence.

Everything here is a pure function of its arguments. The noise source is passed
in as a callable ``noise3(x, y, z) -> [0, 1)`` so the host can swap it (tests
use constant or hashed noise).
"""
import math
from dataclasses import dataclass

from noise import pnoise3

LAYER_OFFSET = 1234.5       # decorrelates the noise layers
LAYER_FALLOFF = 0.15        # layer w is weighted 1 - w*LAYER_FALLOFF
FRONT_SPEED = 280.0         # wave front travel along z, per unit of time
FRONT_DRIFT = 3.5           # extra z drift of the noise sample per unit wave_time
RIPPLE_FREQ = 0.15
RIPPLE_SPEED = 4.5
RIPPLE_AMP = 1.2
RIPPLE_GAIN = 2.0
POINTER_DEPTH = 3.0         # pointer pushes down to -wave_height*POINTER_DEPTH
HUE_SPIN = 50.0             # hue degrees per unit of time inside the pointer ring
HUE_RING = 0.5              # hue degrees per world unit of distance
BRIGHTNESS_RATE_CAP = 0.95  # influence-driven brightness blend stays below 1


@dataclass(frozen=True)
class FieldSample:
    height: float
    hue: float
    brightness: float
    influence: float
    distance_sq: float
    brightness_rate: float


def lerp(a, b, t):
    return a + (b - a) * t


def map_range(v, a0, a1, b0, b1):
    """Linear remap of v from [a0, a1] to [b0, b1] (no clamping)."""
    if a1 == a0:
        return 0.5 * (b0 + b1)
    return b0 + (v - a0) * (b1 - b0) / (a1 - a0)


def clamp01(v):
    if not math.isfinite(v):
        return 0.0
    return min(1.0, max(0.0, v))


def perlin_noise3(x, y, z):
    """Perlin noise from the ``noise`` package, remapped to [0, 1)."""
    v = 0.5 * (pnoise3(x, y, z) + 1.0)
    return min(max(v, 0.0), math.nextafter(1.0, 0.0))


def layer_weight(layer):
    return 1.0 - layer * LAYER_FALLOFF


def layered_wave_height(x, z, time, wave_time, noise3, cfg):
    """Sum of ``cfg.wave_layers`` offset noise samples, lower layers dominant."""
    wx = x * cfg.wave_scale
    wz = (z - time * FRONT_SPEED * cfg.wave_front_direction) * cfg.wave_scale
    total = 0.0
    for w in range(cfg.wave_layers):
        offset = w * LAYER_OFFSET
        sample = clamp01(noise3(wx + wave_time + offset, wz - wave_time * FRONT_DRIFT + offset, 0.0))
        total += sample * cfg.wave_height * layer_weight(w)
    return total


def ripple_height(z, wave_time):
    # cheap periodic detail along z, no noise lookup
    return math.sin(z * RIPPLE_FREQ + wave_time * RIPPLE_SPEED) * RIPPLE_AMP * RIPPLE_GAIN


def wave_height(x, z, time, wave_time, noise3, cfg):
    return layered_wave_height(x, z, time, wave_time, noise3, cfg) + ripple_height(z, wave_time)


def pointer_influence(distance_sq, radius):
    """Linear falloff: 1 at the pointer, exactly 0 at/after ``radius``."""
    if not math.isfinite(distance_sq) or distance_sq >= radius * radius:
        return 0.0
    return clamp01(1.0 - math.sqrt(max(distance_sq, 0.0)) / radius)


def target_height(base_wave, influence, cfg):
    # waves render as depressions
    h = -base_wave
    if influence > 0:
        pointer_h = -cfg.wave_height * POINTER_DEPTH * influence
        h = lerp(h, pointer_h, influence)
    return h


def color_targets(distance_sq, influence, time, cfg):
    """Return (hue, brightness, brightness_rate).

    Inside the pointer radius brightness heads for ``max_brightness`` at a rate
    equal to the influence (capped below 1); outside it relaxes toward
    ``min_brightness`` at ``color_lerp_speed``.
    """
    if influence > 0:
        hue = (time * HUE_SPIN + math.sqrt(distance_sq) * HUE_RING) % 360.0
        return hue, cfg.max_brightness, min(influence, BRIGHTNESS_RATE_CAP)
    return cfg.base_hue, cfg.min_brightness, cfg.color_lerp_speed


def evaluate(x, z, mouse_x3d, mouse_z3d, time, wave_time, noise3, cfg):
    """Full field sample for the particle at planar position (x, z)."""
    dx = x - mouse_x3d
    dz = z - mouse_z3d
    d2 = dx * dx + dz * dz
    influence = pointer_influence(d2, cfg.mouse_influence_radius)
    base = wave_height(x, z, time, wave_time, noise3, cfg)
    hue, brightness, brightness_rate = color_targets(d2, influence, time, cfg)
    return FieldSample(
        height=target_height(base, influence, cfg),
        hue=hue,
        brightness=brightness,
        influence=influence,
        distance_sq=d2,
        brightness_rate=brightness_rate,
    )
