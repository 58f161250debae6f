"""Tunables for the wave grid.

All values are plain numbers/booleans supplied once at startup. Distances are
in grid (world) units, brightness/hue in HSB units (hue 0..360, brightness
0..100), rates are per-frame lerp factors.
"""
import dataclasses
import json
from dataclasses import dataclass


class ConfigError(ValueError):
    """Raised when a configuration would produce a degenerate grid."""


@dataclass
class GridConfig:
    # grid layout
    cols: int = 32
    rows: int = 32
    spacing: float = 22.0
    particle_size: float = 5.0

    # pointer
    mouse_influence_radius: float = 150.0
    mouse_active_radius: float = 200.0
    mouse_smoothing_factor: float = 0.5
    update_interval: int = 2            # frames between pointer/wave-time refreshes

    # waves
    wave_layers: int = 3
    wave_scale: float = 0.015
    wave_height: float = 35.0
    wave_speed: float = 3.5
    wave_time_scale: float = 4.0
    wave_front_direction: float = 1.5
    time_scale: float = 0.001

    # colour
    base_hue: float = 200.0
    saturation: float = 85.0
    alpha: float = 0.85
    min_brightness: float = 88.0
    max_brightness: float = 100.0

    # smoothing
    height_lerp_speed: float = 0.12
    color_lerp_speed: float = 0.15

    # adaptive budget
    update_budget: int = 64
    min_budget: int = 32
    max_budget: int = 96
    budget_step: int = 16
    low_fps: float = 30.0
    high_fps: float = 45.0
    fps_window: int = 30
    adjust_every: int = 60

    # toggles
    update_priority: bool = True
    camera_frustum_cull: bool = True
    debug: bool = True
    debug_every: int = 30

    # initial viewport, in pixels
    width: int = 1280
    height: int = 800

    @property
    def num_particles(self):
        return self.cols * self.rows

    @property
    def extent_x(self):
        return self.cols * self.spacing

    @property
    def extent_z(self):
        return self.rows * self.spacing

    def validate(self):
        """Raise ConfigError on the first bad value, return self otherwise."""
        for f in dataclasses.fields(self):
            v = getattr(self, f.name)
            if f.type is bool:
                ok = isinstance(v, bool)
            elif f.type is int:
                ok = isinstance(v, int) and not isinstance(v, bool)
            else:
                ok = isinstance(v, (int, float)) and not isinstance(v, bool)
            if not ok:
                raise ConfigError(f"{f.name} must be {f.type.__name__}, got {v!r}")

        positive = (
            "cols", "rows", "spacing", "particle_size",
            "mouse_influence_radius", "mouse_active_radius",
            "update_interval", "fps_window", "adjust_every", "debug_every",
            "width", "height",
        )
        for name in positive:
            if getattr(self, name) <= 0:
                raise ConfigError(f"{name} must be > 0, got {getattr(self, name)!r}")

        if self.wave_layers < 0:
            raise ConfigError("wave_layers must be >= 0")

        for name in ("mouse_smoothing_factor", "height_lerp_speed", "color_lerp_speed"):
            v = getattr(self, name)
            if not (0.0 < v <= 1.0):
                raise ConfigError(f"{name} must be in (0, 1], got {v!r}")

        if self.min_budget < 0 or self.budget_step < 0:
            raise ConfigError("min_budget and budget_step must be >= 0")
        if self.min_budget > self.max_budget:
            raise ConfigError(
                f"min_budget ({self.min_budget}) exceeds max_budget ({self.max_budget})")
        if not (self.min_budget <= self.update_budget <= self.max_budget):
            raise ConfigError(
                f"update_budget {self.update_budget} outside [{self.min_budget}, {self.max_budget}]")
        if self.low_fps > self.high_fps:
            raise ConfigError("low_fps must not exceed high_fps")
        if self.min_brightness > self.max_brightness:
            raise ConfigError("min_brightness must not exceed max_brightness")
        return self

    def replace(self, **changes):
        return dataclasses.replace(self, **changes).validate()

    @classmethod
    def from_mapping(cls, values):
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")
        return cls(**values).validate()

    @classmethod
    def from_json(cls, path):
        with open(path, "r", encoding="utf-8") as fh:
            try:
                values = json.load(fh)
            except json.JSONDecodeError as e:
                raise ConfigError(f"{path}: invalid JSON ({e})") from e
        if not isinstance(values, dict):
            raise ConfigError(f"{path}: expected a JSON object at top level")
        return cls.from_mapping(values)

    def to_dict(self):
        return dataclasses.asdict(self)
