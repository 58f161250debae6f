import logging
import os
import time

import glfw
import numpy as np
import OpenGL.GL as gl

from FrameStep import FrameStep
from viz_camera import GridCamera
from viz_gl_helpers import _create_sphere_program, _setup_points, _upload_points
from viz_sphere_batch import SphereBatch
from viz_2d_snapshot import save_2d_snapshot
import WaveField

logger = logging.getLogger(__name__)


class GlfwHost:
    """Input source + rendering backend for FrameStep, backed by a glfw window."""

    def __init__(self, window, batch, noise3=WaveField.perlin_noise3, nominal_fps=60.0):
        self.window = window
        self.batch = batch
        self._noise3 = noise3
        self._fps = float(nominal_fps)
        self._last = None

    def mark_frame(self):
        """Call once per display refresh, before tick()."""
        now = time.perf_counter()
        if self._last is not None:
            dt = now - self._last
            if dt > 0:
                self._fps = 1.0 / dt
        self._last = now

    def current_frame_rate(self):
        return self._fps

    def pointer_position(self):
        if not glfw.get_window_attrib(self.window, glfw.HOVERED):
            return None
        return glfw.get_cursor_pos(self.window)

    def viewport(self):
        return glfw.get_window_size(self.window)

    def noise3(self, x, y, z):
        return self._noise3(x, y, z)

    def draw_sphere(self, position, radius, color):
        self.batch.draw_sphere(position, radius, color)


def run_viewer(cfg, title="Wave Grid (D debug, R reset, S snapshot, SPACE pause)", snapshot_dir="."):
    """Open a window and run the grid until it is closed. Returns the FrameStep."""
    if not glfw.init():
        raise RuntimeError("Failed to init GLFW")

    glfw.window_hint(glfw.CONTEXT_VERSION_MAJOR, 3)
    glfw.window_hint(glfw.CONTEXT_VERSION_MINOR, 3)
    glfw.window_hint(glfw.OPENGL_PROFILE, glfw.OPENGL_CORE_PROFILE)
    glfw.window_hint(glfw.OPENGL_FORWARD_COMPAT, True)

    window = glfw.create_window(int(cfg.width), int(cfg.height), title, None, None)
    if not window:
        glfw.terminate()
        raise RuntimeError("Failed to create window")

    glfw.make_context_current(window)
    glfw.swap_interval(1)

    batch = SphereBatch(cfg.num_particles)
    host = GlfwHost(window, batch)
    step = FrameStep(cfg, host)

    cam = GridCamera()
    cam.frame_viewport(step.ctx.viewport[1])
    glfw.set_mouse_button_callback(window, cam.handle_mouse_button)
    glfw.set_cursor_pos_callback(window, cam.handle_cursor_pos)
    glfw.set_scroll_callback(window, cam.handle_scroll)

    paused = False
    snapshots = 0

    def on_key(win, key, scancode, action, mods):
        nonlocal paused, snapshots
        if action != glfw.PRESS:
            return
        if key == glfw.KEY_ESCAPE:
            glfw.set_window_should_close(window, True)
        elif key == glfw.KEY_SPACE:
            paused = not paused
        elif key == glfw.KEY_D:
            step.toggle_debug()
        elif key == glfw.KEY_R:
            step.reset()
            logger.info("Active set and update cursor reset")
        elif key == glfw.KEY_S:
            snapshots += 1
            save_2d_snapshot(step, os.path.join(snapshot_dir, f"wave_grid_{snapshots:03d}.png"))
        elif key == glfw.KEY_P:
            s = step.store.stats()
            logger.info("height min=%.2f max=%.2f mean=%.2f | brightness mean=%.2f | refreshed %d/%d",
                        s["height"]["min"], s["height"]["max"], s["height"]["mean"],
                        s["brightness"]["mean"], s["refreshed"], step.num_particles)

    def on_resize(win, w, h):
        step.on_viewport_resized(w, h)
        if w > 0 and h > 0:
            cam.frame_viewport(h)

    glfw.set_key_callback(window, on_key)
    glfw.set_window_size_callback(window, on_resize)

    prog = _create_sphere_program()
    vao, vbo, _ = _setup_points(step.num_particles)

    gl.glUseProgram(prog)
    loc_vp = gl.glGetUniformLocation(prog, "uVP")
    loc_vh = gl.glGetUniformLocation(prog, "uViewportH")
    loc_ps = gl.glGetUniformLocation(prog, "uProjScale")
    gl.glUniform1f(gl.glGetUniformLocation(prog, "uAmbient"), 80.0 / 255.0)
    gl.glUniform3f(gl.glGetUniformLocation(prog, "uLightDir"), 0.0, 0.6, 0.8)

    gl.glEnable(gl.GL_DEPTH_TEST)
    gl.glEnable(gl.GL_BLEND)
    gl.glBlendFunc(gl.GL_SRC_ALPHA, gl.GL_ONE_MINUS_SRC_ALPHA)
    gl.glEnable(gl.GL_PROGRAM_POINT_SIZE)

    count = 0
    while not glfw.window_should_close(window):
        glfw.poll_events()
        host.mark_frame()

        if not paused:
            batch.begin()
            step.tick()
            verts = batch.vertices()
            count = verts.shape[0]
            _upload_points(vbo, verts)

        w, h = glfw.get_framebuffer_size(window)
        gl.glViewport(0, 0, w, h)
        gl.glClearColor(0.0, 0.0, 0.0, 1.0)
        gl.glClear(gl.GL_COLOR_BUFFER_BIT | gl.GL_DEPTH_BUFFER_BIT)

        aspect = w / max(1, h)
        vp = cam.get_view_projection(aspect)
        proj_scale = 1.0 / np.tan(np.radians(cam.fov_deg) / 2.0)

        gl.glUseProgram(prog)
        gl.glUniformMatrix4fv(loc_vp, 1, gl.GL_FALSE, vp.astype(np.float32, copy=False))
        gl.glUniform1f(loc_vh, float(h))
        gl.glUniform1f(loc_ps, float(proj_scale))
        gl.glBindVertexArray(vao)
        gl.glDrawArrays(gl.GL_POINTS, 0, count)
        gl.glBindVertexArray(0)

        glfw.swap_buffers(window)

    glfw.terminate()
    return step
