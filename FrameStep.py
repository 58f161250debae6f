import logging
import math
import time
from dataclasses import dataclass, field
from typing import Optional, Protocol, Tuple

import numpy as np

from GridConfig import GridConfig
from ParticleStore import ParticleStore
from RateController import RateController
from UpdateSelector import UpdateSelector
import WaveField

logger = logging.getLogger(__name__)


class Host(Protocol):
    """What the rendering backend / input source has to provide."""

    def current_frame_rate(self) -> float: ...

    def pointer_position(self) -> Optional[Tuple[float, float]]: ...

    def viewport(self) -> Tuple[int, int]: ...

    def noise3(self, x: float, y: float, z: float) -> float: ...

    def draw_sphere(self, position, radius: float, color) -> None: ...


@dataclass
class FrameContext:
    """All mutable per-frame state, owned by FrameStep."""
    frame: int = 0
    time: float = 0.0
    wave_time: float = 0.0
    smooth_x: Optional[float] = None
    smooth_y: Optional[float] = None
    raw_pointer: Optional[Tuple[float, float]] = None
    mouse_x3d: float = 0.0
    mouse_z3d: float = 0.0
    projected: bool = False
    viewport: Tuple[int, int] = (1280, 800)
    debug: bool = False
    last_fps: float = 0.0


@dataclass
class TickReport:
    frame: int
    selected: np.ndarray
    budget: int
    mean_fps: float
    active: int
    timings: dict = field(default_factory=dict)


class FrameStep:
    """Drives one frame of the wave grid per ``tick()``.

    Only the selected particles get their field model evaluated; every
    particle is handed to ``host.draw_sphere`` every tick from its stored
    (smoothed) state.
    """

    def __init__(self, cfg: GridConfig, host: Host):
        self.cfg = cfg.validate()
        self.host = host

        self.store = ParticleStore(self.cfg)
        self.selector = UpdateSelector(len(self.store), self.store.planar_positions())
        self.rate = RateController.from_config(self.cfg)

        viewport = self._sanitize_viewport(host.viewport()) or (self.cfg.width, self.cfg.height)
        self.ctx = FrameContext(viewport=viewport, debug=bool(self.cfg.debug))

        logger.info("Performance-optimized particle grid initialized with %d particles", len(self.store))

    @property
    def num_particles(self):
        return len(self.store)

    @property
    def budget(self):
        return self.rate.budget

    # -------------------------
    # Host-facing operations

    def toggle_debug(self):
        self.ctx.debug = not self.ctx.debug
        logger.info("Debug mode: %s", self.ctx.debug)
        return self.ctx.debug

    def on_viewport_resized(self, width, height):
        viewport = self._sanitize_viewport((width, height))
        if viewport is None:
            logger.warning("Ignoring invalid viewport size %r x %r", width, height)
            return
        self.ctx.viewport = viewport
        logger.info("Canvas resized to %d x %d", viewport[0], viewport[1])

    def reset(self):
        """Forget the active set and round-robin position (particle state is kept)."""
        self.selector.reset()

    def tick(self, frame_index=None):
        ctx = self.ctx
        cfg = self.cfg
        timings = {}

        ctx.frame = ctx.frame + 1 if frame_index is None else int(frame_index)

        t0 = time.perf_counter()
        ctx.last_fps = self.host.current_frame_rate()
        budget = self.rate.record(ctx.last_fps, frame=ctx.frame)

        self._smooth_pointer(self.host.pointer_position())
        ctx.time += cfg.time_scale
        if not ctx.projected or ctx.frame % cfg.update_interval == 0:
            self._project_pointer()
            ctx.wave_time = ctx.time * cfg.wave_speed * cfg.wave_time_scale
        timings['input'] = time.perf_counter() - t0

        t0 = time.perf_counter()
        selected = self.selector.select(ctx.mouse_x3d, ctx.mouse_z3d, budget, ctx.viewport, cfg)
        timings['select'] = time.perf_counter() - t0

        t0 = time.perf_counter()
        self._refresh(selected)
        timings['refresh'] = time.perf_counter() - t0

        t0 = time.perf_counter()
        self._render()
        timings['render'] = time.perf_counter() - t0

        if ctx.debug and ctx.frame % cfg.debug_every == 0:
            logger.info("FPS: %.1f (avg %.1f, budget %d, active %d)",
                        ctx.last_fps or 0.0, self.rate.mean_fps, budget, self.selector.active_count)
            total = sum(timings.values())
            for name, t in sorted(timings.items(), key=lambda x: -x[1]):
                logger.debug("  %-8s: %6.2f ms (%5.1f%%)", name, t * 1000, t / max(total, 1e-12) * 100)

        return TickReport(
            frame=ctx.frame,
            selected=selected,
            budget=budget,
            mean_fps=self.rate.mean_fps,
            active=self.selector.active_count,
            timings=timings,
        )

    # -------------------------
    # Frame phases

    def _smooth_pointer(self, raw):
        ctx = self.ctx
        if raw is not None:
            x, y = float(raw[0]), float(raw[1])
            if math.isfinite(x) and math.isfinite(y):
                ctx.raw_pointer = (x, y)
        if ctx.raw_pointer is None:
            # no pointer yet: park it in the middle of the viewport
            ctx.raw_pointer = (ctx.viewport[0] / 2, ctx.viewport[1] / 2)

        rx, ry = ctx.raw_pointer
        if ctx.smooth_x is None:
            ctx.smooth_x, ctx.smooth_y = rx, ry
        else:
            k = self.cfg.mouse_smoothing_factor
            ctx.smooth_x = WaveField.lerp(ctx.smooth_x, rx, k)
            ctx.smooth_y = WaveField.lerp(ctx.smooth_y, ry, k)

    def _project_pointer(self):
        ctx = self.ctx
        w, h = ctx.viewport
        half_x = self.cfg.extent_x / 2
        half_z = self.cfg.extent_z / 2
        ctx.mouse_x3d = WaveField.map_range(ctx.smooth_x, 0, w, -half_x, half_x)
        ctx.mouse_z3d = WaveField.map_range(ctx.smooth_y, 0, h, -half_z, half_z)
        ctx.projected = True

    def _refresh(self, selected):
        ctx = self.ctx
        cfg = self.cfg
        pos = self.store.positions
        noise3 = self.host.noise3
        for i in selected:
            sample = WaveField.evaluate(
                pos[i, 0], pos[i, 2], ctx.mouse_x3d, ctx.mouse_z3d,
                ctx.time, ctx.wave_time, noise3, cfg,
            )
            self.store.refresh(i, sample, ctx.frame, cfg)

    def _render(self):
        draw = self.host.draw_sphere
        for i in range(len(self.store)):
            snap = self.store.snapshot(i)
            draw(snap.position, snap.size, snap.color)

    @staticmethod
    def _sanitize_viewport(viewport):
        if viewport is None:
            return None
        w, h = viewport
        if w is None or h is None or w <= 0 or h <= 0:
            return None
        return (int(w), int(h))


def initialize(host, **tunables):
    """Build a FrameStep from keyword tunables (see GridConfig for names)."""
    return FrameStep(GridConfig.from_mapping(tunables), host)
