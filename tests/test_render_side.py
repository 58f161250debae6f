import numpy as np
import pytest

from FrameStep import FrameStep
from GridConfig import GridConfig
from plot_rate import HeadlessHost, profile_rates, run_headless, plot_history, PROFILES
from viz_2d_snapshot import save_2d_snapshot
from viz_sphere_batch import SphereBatch


def test_sphere_batch_collects_and_converts():
    batch = SphereBatch(capacity=2)
    batch.begin()
    batch.draw_sphere((1.0, 5.0, 2.0), 3.0, (0.0, 100.0, 100.0, 0.5))
    batch.draw_sphere((0.0, -2.0, 0.0), 1.0, (120.0, 100.0, 50.0, 1.0))
    batch.draw_sphere((4.0, 0.0, 4.0), 2.0, (240.0, 0.0, 100.0, 2.0))
    assert batch.capacity >= 3

    verts = batch.vertices()
    assert verts.shape == (3, 8)
    # +y down in the field model becomes -y in GL
    np.testing.assert_allclose(verts[0, 0:3], [1.0, -5.0, 2.0])
    np.testing.assert_allclose(verts[0, 3:6], [1.0, 0.0, 0.0], atol=1e-6)
    np.testing.assert_allclose(verts[1, 3:6], [0.0, 0.5, 0.0], atol=1e-6)
    np.testing.assert_allclose(verts[2, 3:6], [1.0, 1.0, 1.0], atol=1e-6)
    np.testing.assert_allclose(verts[:, 6], [3.0, 1.0, 2.0])
    np.testing.assert_allclose(verts[:, 7], [0.5, 1.0, 1.0])

    batch.begin()
    assert batch.vertices().shape == (0, 8)


def test_frame_step_fills_a_batch():
    cfg = GridConfig(cols=4, rows=3, debug=False)
    batch = SphereBatch(cfg.num_particles)

    class BatchHost(HeadlessHost):
        def draw_sphere(self, position, radius, color):
            batch.draw_sphere(position, radius, color)

    step = FrameStep(cfg, BatchHost(cfg, [60.0]))
    batch.begin()
    step.tick()
    assert batch.count == 12


def test_profiles():
    for name in PROFILES:
        assert len(profile_rates(name, 50)) == 50
    with pytest.raises(ValueError):
        profile_rates("bogus", 10)


def test_headless_run_tracks_budget():
    cfg = GridConfig(cols=6, rows=6, debug=False)
    history = run_headless(cfg, profile_rates("slow", 180), 180)
    assert history["frame"].tolist() == list(range(1, 181))
    assert history["budget"][58] == 64
    assert history["budget"][59] == 48
    assert history["budget"][-1] == 32
    assert np.all((history["budget"] >= cfg.min_budget) & (history["budget"] <= cfg.max_budget))


def test_headless_host_counts_draws():
    cfg = GridConfig(cols=3, rows=3, debug=False)
    host = HeadlessHost(cfg, [30.0, 60.0])
    run_headless(cfg, None, 4, host=host)
    assert host.draws == 4 * 9
    assert host.calls == 4


def test_plot_history_writes_png(tmp_path):
    cfg = GridConfig(cols=3, rows=3, debug=False)
    history = run_headless(cfg, profile_rates("dip", 90), 90)
    out = tmp_path / "rate.png"
    plot_history(history, cfg, title="dip", filename=str(out))
    assert out.exists() and out.stat().st_size > 0


def test_save_snapshot(tmp_path):
    cfg = GridConfig(cols=5, rows=5, debug=False)
    step = FrameStep(cfg, HeadlessHost(cfg, [60.0]))
    for _ in range(3):
        step.tick()
    out = tmp_path / "grid.png"
    assert save_2d_snapshot(step, str(out), dpi=40, figsize=(4, 4)) == str(out)
    assert out.exists()
