"""
Top-down 2D snapshots of the wave grid.
Creates a matplotlib image of the x/z plane with each particle drawn in its
current colour, sized by its current height.
"""
import logging

import numpy as np
import matplotlib
import matplotlib.pyplot as plt

logger = logging.getLogger(__name__)

BACKGROUND = '#1a1a1e'


def _style_dark(fig, ax):
    ax.set_facecolor(BACKGROUND)
    fig.patch.set_facecolor(BACKGROUND)
    ax.tick_params(colors='white')
    ax.xaxis.label.set_color('white')
    ax.yaxis.label.set_color('white')
    ax.title.set_color('white')
    for side in ('bottom', 'top', 'left', 'right'):
        ax.spines[side].set_color('white')


def _draw_grid(step, ax):
    verts = step.store.build_point_vertices()  # (N, 8): [x, y, z, r, g, b, size, alpha]
    x, z = verts[:, 0], verts[:, 2]
    heights = verts[:, 1]
    rgba_colors = np.column_stack([verts[:, 3:6], verts[:, 7]])

    # deeper (more negative y) particles come out larger
    depth = -heights
    span = float(depth.max() - depth.min()) if depth.size else 0.0
    scale = 1.0 + (depth - depth.min()) / span if span > 0 else np.ones_like(depth)
    sizes = (verts[:, 6] * scale) ** 2

    ax.scatter(x, z, c=rgba_colors, s=sizes, edgecolors='none')

    ctx = step.ctx
    ax.scatter([ctx.mouse_x3d], [ctx.mouse_z3d], marker='+', c='white', s=120, linewidths=1.0)
    ax.add_patch(plt.Circle((ctx.mouse_x3d, ctx.mouse_z3d), step.cfg.mouse_influence_radius,
                            fill=False, color='white', alpha=0.3, linestyle='--'))

    ax.set_xlabel('X')
    ax.set_ylabel('Z')
    ax.set_aspect('equal')
    ax.invert_yaxis()  # screen orientation: +z towards the bottom
    ax.set_title(f'Wave grid ({step.num_particles} particles, frame {ctx.frame}, '
                 f'budget {step.budget}, active {step.selector.active_count})')
    ax.grid(True, alpha=0.3, linestyle='--', linewidth=0.5)


def save_2d_snapshot(step, filename='wave_grid.png', dpi=150, figsize=(10, 10)):
    """
    Save a top-down snapshot of the grid to an image file.

    Args:
        step: FrameStep instance
        filename: Output filename
        dpi: Image resolution
        figsize: Figure size in inches (width, height)
    """
    if step.num_particles == 0:
        logger.warning("No particles to visualize. Skipping snapshot '%s'", filename)
        return None

    fig, ax = plt.subplots(figsize=figsize, dpi=dpi)
    _draw_grid(step, ax)
    _style_dark(fig, ax)

    fig.tight_layout()
    fig.savefig(filename, dpi=dpi, facecolor=BACKGROUND, edgecolor='none')
    plt.close(fig)
    logger.info("Saved 2D snapshot to %s", filename)
    return filename


def show_2d_live(step):
    """Display the current grid state interactively with matplotlib."""
    fig, ax = plt.subplots(figsize=(10, 10))
    _draw_grid(step, ax)
    _style_dark(fig, ax)
    fig.tight_layout()
    plt.show()


if __name__ == '__main__':
    from GridConfig import GridConfig
    from plot_rate import HeadlessHost
    from FrameStep import FrameStep

    matplotlib.use('Agg')
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    cfg = GridConfig(debug=False)
    step = FrameStep(cfg, HeadlessHost(cfg, frame_rates=[60.0]))
    save_2d_snapshot(step, 'wave_grid_initial.png', dpi=120)

    print("Running 120 frames...")
    for _ in range(120):
        step.tick()
    save_2d_snapshot(step, 'wave_grid_after_120.png', dpi=120)
