import logging
import math
from collections import deque

logger = logging.getLogger(__name__)


class RateController:
    """Hysteresis controller for the per-frame refresh budget.

    Keeps the last ``window`` frame-rate samples; every ``cadence`` samples it
    steps the budget down when the mean is below ``low_fps`` and up when it is
    above ``high_fps``. The budget never leaves [min_budget, max_budget].
    """

    def __init__(self, initial, min_budget, max_budget, step, low_fps, high_fps,
                 window=30, cadence=60):
        if min_budget > max_budget:
            raise ValueError("min_budget must not exceed max_budget")
        if window <= 0 or cadence <= 0:
            raise ValueError("window and cadence must be positive")
        self.min_budget = int(min_budget)
        self.max_budget = int(max_budget)
        self.step = int(step)
        self.low_fps = float(low_fps)
        self.high_fps = float(high_fps)
        self.cadence = int(cadence)
        self.budget = self._clamp(int(initial))
        self.history = deque(maxlen=int(window))
        self.samples = 0
        self.mean_fps = 0.0

    @classmethod
    def from_config(cls, cfg):
        return cls(
            cfg.update_budget, cfg.min_budget, cfg.max_budget, cfg.budget_step,
            cfg.low_fps, cfg.high_fps, window=cfg.fps_window, cadence=cfg.adjust_every,
        )

    def _clamp(self, b):
        return max(self.min_budget, min(self.max_budget, b))

    def record(self, fps, frame=None):
        """Feed one frame-rate sample; return the (possibly adjusted) budget.

        ``frame`` is the caller's frame counter; when given, adjustments run on
        frames divisible by ``cadence``, otherwise on every ``cadence``-th sample.
        """
        self.samples += 1
        tick = self.samples if frame is None else int(frame)
        if fps is not None and math.isfinite(fps) and fps >= 0:
            self.history.append(float(fps))
        if self.history:
            self.mean_fps = sum(self.history) / len(self.history)

        if tick % self.cadence == 0 and self.history:
            old = self.budget
            if self.mean_fps < self.low_fps:
                self.budget = self._clamp(self.budget - self.step)
            elif self.mean_fps > self.high_fps:
                self.budget = self._clamp(self.budget + self.step)
            if self.budget != old:
                logger.info("avg fps %.1f: update budget %d -> %d", self.mean_fps, old, self.budget)
        return self.budget
