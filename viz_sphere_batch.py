"""Collects ``draw_sphere`` calls for one frame into a vertex array.

The grid core issues one draw call per particle; the GL side wants a single
buffer upload and one ``glDrawArrays``. This sits in between and does the
HSB -> RGB conversion for the whole frame at once.
"""
import numpy as np

from ParticleStore import hsb_to_rgb


class SphereBatch:
    def __init__(self, capacity=1024):
        capacity = max(1, int(capacity))
        self.verts = np.zeros((capacity, 8), dtype=np.float32)
        self._hsba = np.zeros((capacity, 4), dtype=np.float64)
        self.count = 0

    @property
    def capacity(self):
        return self.verts.shape[0]

    def begin(self):
        self.count = 0

    def _grow(self):
        cap = self.capacity * 2
        verts = np.zeros((cap, 8), dtype=np.float32)
        hsba = np.zeros((cap, 4), dtype=np.float64)
        verts[:self.count] = self.verts[:self.count]
        hsba[:self.count] = self._hsba[:self.count]
        self.verts, self._hsba = verts, hsba

    def draw_sphere(self, position, radius, color):
        """Queue one sphere. ``color`` is (hue 0..360, sat 0..100, bri 0..100, alpha 0..1)."""
        if self.count >= self.capacity:
            self._grow()
        i = self.count
        x, y, z = position
        # the field model treats +y as down (screen convention), GL has +y up
        self.verts[i, 0:3] = (x, -y, z)
        self.verts[i, 6] = radius
        self._hsba[i] = color
        self.count += 1

    def vertices(self):
        """(count, 8) float32 [x, y, z, r, g, b, radius, alpha] for the queued spheres."""
        n = self.count
        hsba = self._hsba[:n]
        out = self.verts[:n]
        out[:, 3:6] = hsb_to_rgb(hsba[:, 0], hsba[:, 1], hsba[:, 2])
        out[:, 7] = np.clip(hsba[:, 3], 0.0, 1.0)
        return out
