import matplotlib

matplotlib.use("Agg")

import pytest

from GridConfig import GridConfig


class FakeHost:
    """In-memory host: fixed inputs, records every draw call."""

    def __init__(self, fps=60.0, pointer=(640.0, 400.0), size=(1280, 800), noise=None):
        self.fps = fps
        self.pointer = pointer
        self.size = size
        self._noise = noise or (lambda x, y, z: 0.5)
        self.drawn = []

    def current_frame_rate(self):
        return self.fps

    def pointer_position(self):
        return self.pointer

    def viewport(self):
        return self.size

    def noise3(self, x, y, z):
        return self._noise(x, y, z)

    def draw_sphere(self, position, radius, color):
        self.drawn.append((position, radius, color))


@pytest.fixture
def host():
    return FakeHost()


@pytest.fixture
def small_cfg():
    return GridConfig(cols=4, rows=4, spacing=10.0, width=400, height=400,
                      update_budget=4, min_budget=1, max_budget=8, budget_step=1,
                      debug=False)
