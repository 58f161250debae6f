import math
import numpy as np
import glfw
import pyrr


class GridCamera:
    """Look-at camera framing the grid from above and in front.

    The default pose puts the eye ``height`` units above the grid plane and
    ``(viewport_h / 2) / tan(fov / 2)`` units back, looking at the origin.
    Right-button drag orbits around the target, the wheel zooms. The left
    button is left alone because it belongs to the grid pointer.
    """

    def __init__(self, target=(0.0, 0.0, 0.0), height=300.0, fov_deg=60.0):
        self.target = np.array(target, dtype=np.float32)
        self.height = float(height)
        self.fov_deg = float(fov_deg)
        self.near = 1.0
        self.far = 10000.0

        self.distance = 1.0
        self.yaw = 0.0
        self.pitch = 0.0
        self._dragging = False
        self._last_x = 0.0
        self._last_y = 0.0

        self.rotate_sens = 0.006
        self.pitch_limit = 1.55

    def frame_viewport(self, viewport_h):
        """Reset the orbit to the default pose for a viewport of height ``viewport_h``."""
        back = (viewport_h / 2.0) / math.tan(math.radians(self.fov_deg) / 2.0)
        self.distance = math.hypot(self.height, back)
        self.pitch = math.atan2(self.height, back)
        self.yaw = math.pi / 2

    def get_eye(self):
        x = self.distance * math.cos(self.pitch) * math.cos(self.yaw)
        y = self.distance * math.sin(self.pitch)
        z = self.distance * math.cos(self.pitch) * math.sin(self.yaw)
        return self.target + np.array([x, y, z], dtype=np.float32)

    def get_view_matrix(self):
        eye = self.get_eye()
        up = np.array([0.0, 1.0, 0.0], dtype=np.float32)
        return pyrr.matrix44.create_look_at(eye, self.target, up, dtype=np.float32)

    def get_projection_matrix(self, aspect):
        return pyrr.matrix44.create_perspective_projection(
            self.fov_deg, aspect, self.near, self.far, dtype=np.float32)

    def get_view_projection(self, aspect):
        # pyrr composes row-vector style: view first, then projection
        return self.get_view_matrix() @ self.get_projection_matrix(aspect)

    def handle_mouse_button(self, window, button, action, mods):
        if button != glfw.MOUSE_BUTTON_RIGHT:
            return
        if action == glfw.PRESS:
            self._dragging = True
            self._last_x, self._last_y = glfw.get_cursor_pos(window)
        elif action == glfw.RELEASE:
            self._dragging = False

    def handle_cursor_pos(self, window, xpos, ypos):
        if not self._dragging:
            return
        dx = float(xpos - self._last_x)
        dy = float(ypos - self._last_y)
        self._last_x, self._last_y = float(xpos), float(ypos)

        self.yaw += dx * self.rotate_sens
        self.pitch += dy * self.rotate_sens
        self.pitch = max(-self.pitch_limit, min(self.pitch_limit, self.pitch))

    def handle_scroll(self, window, xoff, yoff):
        self.distance *= math.exp(-float(yoff) * 0.12)
        self.distance = max(10.0, min(self.far * 0.5, self.distance))
