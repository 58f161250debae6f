"""Drive the wave grid headlessly with a synthetic frame-rate profile and plot
how the update budget reacts.

Usage:
    python plot_rate.py [--profile steady|slow|fast|ramp|dip] [--frames N] [--out rate.png]

No window is opened: a HeadlessHost stands in for the glfw viewer, feeding the
scripted frame rates and a pointer circling the viewport centre. Import
`run_headless(cfg, frame_rates, frames)` to get the raw history instead.
"""
import argparse
import logging
import math

import numpy as np
import matplotlib.pyplot as plt

from GridConfig import GridConfig, ConfigError
from FrameStep import FrameStep
import WaveField

logger = logging.getLogger(__name__)

PROFILES = ("steady", "slow", "fast", "ramp", "dip")


class HeadlessHost:
    """FrameStep host with scripted inputs; draw calls are only counted."""

    def __init__(self, cfg, frame_rates, pointer_path=None, noise3=None):
        self.frame_rates = list(frame_rates) or [60.0]
        self.size = (int(cfg.width), int(cfg.height))
        self.pointer_path = pointer_path or self._circle
        self._noise3 = noise3 or WaveField.perlin_noise3
        self.calls = 0
        self.draws = 0

    def _circle(self, k):
        w, h = self.size
        r = 0.3 * min(w, h)
        a = k * 0.02
        return (w / 2 + r * math.cos(a), h / 2 + r * math.sin(a))

    def current_frame_rate(self):
        fps = self.frame_rates[self.calls % len(self.frame_rates)]
        self.calls += 1
        return fps

    def pointer_position(self):
        return self.pointer_path(self.calls)

    def viewport(self):
        return self.size

    def noise3(self, x, y, z):
        return self._noise3(x, y, z)

    def draw_sphere(self, position, radius, color):
        self.draws += 1


def profile_rates(name, frames):
    """Frame-rate sample per frame for one of the named PROFILES."""
    t = np.arange(frames)
    if name == "steady":
        rates = np.full(frames, 38.0)
    elif name == "slow":
        rates = np.full(frames, 20.0)
    elif name == "fast":
        rates = np.full(frames, 60.0)
    elif name == "ramp":
        rates = np.linspace(15.0, 60.0, frames)
    elif name == "dip":
        rates = np.where((t > frames // 3) & (t < 2 * frames // 3), 18.0, 58.0)
    else:
        raise ValueError(f"Unknown profile: {name}")
    return rates.astype(float).tolist()


def run_headless(cfg, frame_rates, frames, host=None):
    """Tick a fresh FrameStep ``frames`` times; return per-frame history arrays."""
    host = host or HeadlessHost(cfg, frame_rates)
    step = FrameStep(cfg, host)
    history = {"frame": [], "fps": [], "mean_fps": [], "budget": [], "selected": [], "active": []}
    for _ in range(frames):
        report = step.tick()
        history["frame"].append(report.frame)
        history["fps"].append(step.ctx.last_fps)
        history["mean_fps"].append(report.mean_fps)
        history["budget"].append(report.budget)
        history["selected"].append(int(report.selected.size))
        history["active"].append(report.active)
    return {k: np.asarray(v) for k, v in history.items()}


def plot_history(history, cfg, title="", filename=None):
    fig, (ax_fps, ax_b) = plt.subplots(2, 1, figsize=(10, 7), sharex=True)

    ax_fps.plot(history["frame"], history["fps"], lw=0.8, alpha=0.5, label="fps sample")
    ax_fps.plot(history["frame"], history["mean_fps"], lw=1.5, label=f"mean of last {cfg.fps_window}")
    ax_fps.axhline(cfg.low_fps, color="tab:red", ls="--", lw=0.8, label="low threshold")
    ax_fps.axhline(cfg.high_fps, color="tab:green", ls="--", lw=0.8, label="high threshold")
    ax_fps.set_ylabel("fps")
    ax_fps.legend(loc="upper right", fontsize=8)

    ax_b.step(history["frame"], history["budget"], where="post", label="budget")
    ax_b.plot(history["frame"], history["selected"], lw=0.8, alpha=0.7, label="refreshed")
    ax_b.plot(history["frame"], history["active"], lw=0.8, alpha=0.7, label="active set")
    ax_b.axhline(cfg.min_budget, color="grey", ls=":", lw=0.8)
    ax_b.axhline(cfg.max_budget, color="grey", ls=":", lw=0.8)
    ax_b.set_xlabel("frame")
    ax_b.set_ylabel("particles")
    ax_b.legend(loc="upper right", fontsize=8)

    fig.suptitle(title or "Update budget vs frame rate")
    fig.tight_layout()
    if filename:
        fig.savefig(filename, dpi=150)
        print(f"Saved rate plot to {filename}")
        plt.close(fig)
    else:
        plt.show()


def main(argv=None):
    parser = argparse.ArgumentParser(description="Plot the adaptive update budget for a synthetic frame-rate profile")
    parser.add_argument("--profile", choices=PROFILES, default="dip")
    parser.add_argument("--frames", type=int, default=900)
    parser.add_argument("--cols", type=int, default=32)
    parser.add_argument("--rows", type=int, default=32)
    parser.add_argument("--no-priority", action="store_true", help="disable pointer-priority updates")
    parser.add_argument("--out", default=None, help="write PNG instead of showing a window")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    try:
        cfg = GridConfig(cols=args.cols, rows=args.rows, debug=False,
                         update_priority=not args.no_priority).validate()
    except ConfigError as e:
        parser.error(str(e))

    rates = profile_rates(args.profile, args.frames)
    history = run_headless(cfg, rates, args.frames)
    print(f"Final budget {history['budget'][-1]} (range {cfg.min_budget}..{cfg.max_budget}), "
          f"active set {history['active'][-1]}/{cfg.num_particles}")
    plot_history(history, cfg, title=f"profile: {args.profile}", filename=args.out)


if __name__ == "__main__":
    main()
