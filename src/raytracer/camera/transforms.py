# camera/transforms.py
"""
4x4 matrix builders for a right-handed camera.

Conventions follow the usual OpenGL ones: column vectors, view space looks
down -Z, clip-space depth in [-1, 1]. All matrices are float64 numpy arrays.
"""
from math import radians, tan
import numpy as np


def perspective(fov_deg: float, aspect: float, z_near: float, z_far: float) -> np.ndarray:
    f = 1.0 / tan(radians(fov_deg) / 2.0)
    m = np.zeros((4, 4), dtype=np.float64)
    m[0, 0] = f / aspect
    m[1, 1] = f
    m[2, 2] = (z_far + z_near) / (z_near - z_far)
    m[2, 3] = (2.0 * z_far * z_near) / (z_near - z_far)
    m[3, 2] = -1.0
    return m


def look_to_rh(eye, direction, up) -> np.ndarray:
    """
    View matrix for a camera at ``eye`` looking along ``direction``.

    When ``direction`` is parallel to ``up`` the side vector is zero and the
    returned matrix is singular; callers detect that through inversion.
    """
    eye = np.asarray(eye, dtype=np.float64)
    f = np.asarray(direction, dtype=np.float64)
    f_norm = np.linalg.norm(f)
    if f_norm > 0.0:
        f = f / f_norm

    s = np.cross(f, np.asarray(up, dtype=np.float64))
    s_norm = np.linalg.norm(s)
    if s_norm > 0.0:
        s = s / s_norm

    u = np.cross(s, f)

    m = np.identity(4, dtype=np.float64)
    m[0, :3] = s
    m[1, :3] = u
    m[2, :3] = -f

    m[0, 3] = -np.dot(s, eye)
    m[1, 3] = -np.dot(u, eye)
    m[2, 3] = np.dot(f, eye)
    return m


def transform_point(m: np.ndarray, point) -> np.ndarray:
    """Apply ``m`` to a 3D point and perform the perspective divide."""
    p = m @ np.array([point[0], point[1], point[2], 1.0], dtype=np.float64)
    return p[:3] / p[3]
