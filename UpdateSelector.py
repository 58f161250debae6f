"""Chooses which particles get their field model evaluated each frame.

Two passes, no backtracking:
  1. priority: particles near the pointer (and everything that ever was)
  2. fill:     round-robin walk from a persistent cursor, up to the budget

The active set only grows. Once a particle has been within
``mouse_active_radius`` of the pointer it is refreshed every frame for the rest
of the run.
"""
import logging

import numpy as np

logger = logging.getLogger(__name__)


class UpdateSelector:
    def __init__(self, n, planar_positions):
        self.n = int(n)
        pos = np.asarray(planar_positions, dtype=np.float64)
        if pos.shape != (self.n, 2):
            raise ValueError(f"planar_positions must be shaped ({self.n}, 2), got {pos.shape}")
        self.xz = pos
        self.active = np.zeros(self.n, dtype=bool)
        self.cursor = 0

    @property
    def active_count(self):
        return int(np.count_nonzero(self.active))

    def is_active(self, i):
        return bool(self.active[i])

    def reset(self):
        self.active[:] = False
        self.cursor = 0

    def visible_mask(self, mouse_x3d, mouse_z3d, viewport):
        # coarse box around the pointer projection, standing in for the camera frustum
        w, h = viewport
        dx = np.abs(self.xz[:, 0] - mouse_x3d)
        dz = np.abs(self.xz[:, 1] - mouse_z3d)
        return (dx < w / 2) & (dz < h / 2)

    def priority_pass(self, mouse_x3d, mouse_z3d, radius):
        """Mark newly-near particles active; return the full active mask."""
        fresh = ~self.active
        dx = self.xz[fresh, 0] - mouse_x3d
        dz = self.xz[fresh, 1] - mouse_z3d
        near = (dx * dx + dz * dz) < radius * radius
        newly = np.flatnonzero(fresh)[near]
        if newly.size:
            self.active[newly] = True
            logger.debug("%d particles joined the active set (%d total)", newly.size, self.active_count)
        return self.active.copy()

    def fill_pass(self, selected, budget, visible=None):
        """Walk from the cursor adding unselected (visible) indices until the budget is met."""
        remaining = int(budget) - int(np.count_nonzero(selected))
        if remaining <= 0 or self.n == 0:
            return selected

        order = (self.cursor + np.arange(self.n)) % self.n
        ok = ~selected[order]
        if visible is not None:
            ok &= visible[order]
        picks = order[ok][:remaining]
        selected[picks] = True
        if picks.size == remaining:
            self.cursor = int((picks[-1] + 1) % self.n)
        # otherwise the walk went all the way round and stops where it started
        return selected

    def select(self, mouse_x3d, mouse_z3d, budget, viewport, cfg):
        """Return the sorted indices to refresh this frame."""
        if cfg.update_priority:
            selected = self.priority_pass(mouse_x3d, mouse_z3d, cfg.mouse_active_radius)
        else:
            selected = np.zeros(self.n, dtype=bool)

        visible = None
        if cfg.camera_frustum_cull:
            visible = self.visible_mask(mouse_x3d, mouse_z3d, viewport)

        selected = self.fill_pass(selected, budget, visible)
        return np.flatnonzero(selected)
