import ctypes
import numpy as np
import OpenGL.GL as gl
from OpenGL.GL.shaders import compileProgram, compileShader

from viz_shaders import SPHERES_VERT, SPHERES_FRAG

VERTEX_FLOATS = 8  # position(3) + color(3) + radius(1) + alpha(1)


def _create_sphere_program():
    return compileProgram(compileShader(SPHERES_VERT, gl.GL_VERTEX_SHADER),
                          compileShader(SPHERES_FRAG, gl.GL_FRAGMENT_SHADER))


def _setup_points(n):
    float_size = np.float32().nbytes
    stride = VERTEX_FLOATS * float_size

    vbo = gl.glGenBuffers(1)
    gl.glBindBuffer(gl.GL_ARRAY_BUFFER, vbo)
    gl.glBufferData(gl.GL_ARRAY_BUFFER, n * stride, None, gl.GL_DYNAMIC_DRAW)

    vao = gl.glGenVertexArrays(1)
    gl.glBindVertexArray(vao)
    gl.glBindBuffer(gl.GL_ARRAY_BUFFER, vbo)

    gl.glEnableVertexAttribArray(0)
    gl.glVertexAttribPointer(0, 3, gl.GL_FLOAT, gl.GL_FALSE, stride, ctypes.c_void_p(0))

    gl.glEnableVertexAttribArray(1)
    gl.glVertexAttribPointer(1, 3, gl.GL_FLOAT, gl.GL_FALSE, stride, ctypes.c_void_p(3 * float_size))

    gl.glEnableVertexAttribArray(2)
    gl.glVertexAttribPointer(2, 1, gl.GL_FLOAT, gl.GL_FALSE, stride, ctypes.c_void_p(6 * float_size))

    gl.glEnableVertexAttribArray(3)
    gl.glVertexAttribPointer(3, 1, gl.GL_FLOAT, gl.GL_FALSE, stride, ctypes.c_void_p(7 * float_size))

    gl.glBindVertexArray(0)
    gl.glBindBuffer(gl.GL_ARRAY_BUFFER, 0)

    return vao, vbo, n


def _upload_points(vbo, verts):
    if verts.ndim != 2 or verts.shape[1] != VERTEX_FLOATS:
        raise RuntimeError(f"sphere vertices must be shaped (N,{VERTEX_FLOATS})")

    pts = verts.astype(np.float32, copy=False)
    if not pts.flags["C_CONTIGUOUS"]:
        pts = np.ascontiguousarray(pts)

    gl.glBindBuffer(gl.GL_ARRAY_BUFFER, vbo)
    gl.glBufferSubData(gl.GL_ARRAY_BUFFER, 0, pts.nbytes, pts)
    gl.glBindBuffer(gl.GL_ARRAY_BUFFER, 0)
