from dataclasses import dataclass

import numpy as np
from matplotlib.colors import hsv_to_rgb

from WaveField import lerp


def hsb_to_rgb(hue, saturation, brightness):
    """HSB arrays (hue 0..360, sat/bri 0..100) to an (N, 3) RGB array in [0, 1].

    Hue wraps; saturation and brightness are clipped.
    """
    hsv = np.stack((
        np.mod(hue, 360.0) / 360.0,
        np.clip(np.asarray(saturation) / 100.0, 0.0, 1.0),
        np.clip(np.asarray(brightness) / 100.0, 0.0, 1.0),
    ), axis=-1)
    if hsv.shape[0] == 0:
        return np.zeros((0, 3))
    return hsv_to_rgb(hsv)


@dataclass(frozen=True)
class ParticleSnapshot:
    position: tuple
    size: float
    hue: float
    saturation: float
    brightness: float
    alpha: float

    @property
    def color(self):
        return (self.hue, self.saturation, self.brightness, self.alpha)


class ParticleStore:
    """Fixed cols x rows grid of particle state, stored column-wise.

    Index ``i = ix * rows + iz`` is the particle's identity for the whole run.
    ``refresh`` is the only mutating operation; ``snapshot`` and
    ``build_point_vertices`` are read-only views used for drawing.
    """

    def __init__(self, cfg):
        self.cols = int(cfg.cols)
        self.rows = int(cfg.rows)
        n = self.cols * self.rows

        ix = np.repeat(np.arange(self.cols), self.rows)
        iz = np.tile(np.arange(self.rows), self.cols)

        self.positions = np.zeros((n, 3), dtype=np.float64)
        self.positions[:, 0] = ix * cfg.spacing - cfg.extent_x / 2
        self.positions[:, 2] = iz * cfg.spacing - cfg.extent_z / 2

        self.hue = np.full(n, float(cfg.base_hue))
        self.saturation = np.full(n, float(cfg.saturation))
        self.brightness = np.full(n, float(cfg.min_brightness))
        self.alpha = np.full(n, float(cfg.alpha))
        self.size = np.full(n, cfg.particle_size * 1.1)
        self.last_refresh = np.zeros(n, dtype=np.int64)

    def __len__(self):
        return self.positions.shape[0]

    def index_of(self, ix, iz):
        if not (0 <= ix < self.cols and 0 <= iz < self.rows):
            raise IndexError(f"grid cell ({ix}, {iz}) outside {self.cols}x{self.rows}")
        return ix * self.rows + iz

    def planar_positions(self):
        """(N, 2) array of [x, z]; these never change after construction."""
        return self.positions[:, [0, 2]]

    def refresh(self, i, sample, frame, cfg):
        """Blend particle ``i`` toward the targets in ``sample``."""
        self.positions[i, 1] = lerp(self.positions[i, 1], sample.height, cfg.height_lerp_speed)
        self.hue[i] = lerp(self.hue[i], sample.hue, cfg.color_lerp_speed)
        self.brightness[i] = lerp(self.brightness[i], sample.brightness, sample.brightness_rate)
        self.last_refresh[i] = frame

    def snapshot(self, i):
        p = self.positions[i]
        return ParticleSnapshot(
            position=(float(p[0]), float(p[1]), float(p[2])),
            size=float(self.size[i]),
            hue=float(self.hue[i]),
            saturation=float(self.saturation[i]),
            brightness=float(self.brightness[i]),
            alpha=float(self.alpha[i]),
        )

    def rgb(self):
        """(N, 3) RGB in [0, 1] from the stored HSB state."""
        return hsb_to_rgb(self.hue, self.saturation, self.brightness)

    def build_point_vertices(self):
        """
        Returns a float32 array of shape (N, 8):
          [x, y, z, r, g, b, size, alpha]
        """
        verts = np.empty((len(self), 8), dtype=np.float32)
        verts[:, 0:3] = self.positions
        verts[:, 3:6] = self.rgb()
        verts[:, 6] = self.size
        verts[:, 7] = self.alpha
        return verts

    def stats(self):
        """min/max/mean of height and brightness, for debug output."""
        y = self.positions[:, 1]
        return {
            "height": {"min": float(y.min()), "max": float(y.max()), "mean": float(y.mean())},
            "brightness": {
                "min": float(self.brightness.min()),
                "max": float(self.brightness.max()),
                "mean": float(self.brightness.mean()),
            },
            "refreshed": int(np.count_nonzero(self.last_refresh)),
        }
