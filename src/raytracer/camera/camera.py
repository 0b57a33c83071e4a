# camera/camera.py
import logging
import math
from typing import Tuple
import numpy as np
from raytracer.core.vector import Vector3
from raytracer.core.ray import Ray
from raytracer.camera.transforms import perspective, look_to_rh, transform_point
from raytracer.errors import CameraError

logger = logging.getLogger(__name__)

DEFAULT_FOV = 45.0
DEFAULT_NEAR = 1.0 / 16.0
DEFAULT_FAR = 1024.0


class Camera:
    """
    Pinhole camera defined by a perspective projection and a right-handed
    view transform.

    The view-projection matrix and its inverse are computed once here; a
    camera whose matrix cannot be inverted is rejected with ``CameraError``
    so ray generation itself never fails. Instances are read-only.
    """

    def __init__(self,
                 position: Vector3 = Vector3(0.0, 0.0, 0.0),
                 direction: Vector3 = Vector3(0.0, 0.0, -1.0),
                 up: Vector3 = Vector3(0.0, 1.0, 0.0),
                 fov: float = DEFAULT_FOV,
                 aspect_ratio: float = 1.0,
                 near: float = DEFAULT_NEAR,
                 far: float = DEFAULT_FAR):
        self._validate(position, direction, up, fov, aspect_ratio, near, far)

        self._position = Vector3(float(position.x), float(position.y), float(position.z))
        self._direction = direction.normalize()
        self._up = up.normalize()
        self._fov = float(fov)
        self._aspect_ratio = float(aspect_ratio)
        self._near = float(near)
        self._far = float(far)

        proj = perspective(self._fov, self._aspect_ratio, self._near, self._far)
        view = look_to_rh(self._position.to_tuple(), self._direction.to_tuple(), self._up.to_tuple())
        self._view_proj = proj @ view

        try:
            inv = np.linalg.inv(self._view_proj)
        except np.linalg.LinAlgError as err:
            raise CameraError("Failed to invert view projection matrix") from err
        if not np.all(np.isfinite(inv)) or not np.allclose(inv @ self._view_proj, np.identity(4), atol=1e-6):
            raise CameraError("Failed to invert view projection matrix: matrix is numerically singular")
        self._inv_view_proj = inv

        self._view_proj.setflags(write=False)
        self._inv_view_proj.setflags(write=False)
        logger.debug("Camera at %s looking along %s (fov=%.1f, aspect=%.3f)",
                     self._position, self._direction, self._fov, self._aspect_ratio)

    @classmethod
    def look_at(cls, position: Vector3, target: Vector3, up: Vector3 = Vector3(0.0, 1.0, 0.0), **kwargs) -> "Camera":
        return cls(position=position, direction=target - position, up=up, **kwargs)

    @staticmethod
    def _validate(position, direction, up, fov, aspect_ratio, near, far):
        if not position.is_finite():
            raise CameraError(f"Camera position must be finite, got {position}")
        if not direction.is_finite() or direction.length() == 0:
            raise CameraError(f"Camera direction must be a finite non-zero vector, got {direction}")
        if not up.is_finite() or up.length() == 0:
            raise CameraError(f"Camera up vector must be a finite non-zero vector, got {up}")
        if not (0.0 < fov < 180.0):
            raise CameraError(f"Field of view must be in (0, 180) degrees, got {fov}")
        if not (math.isfinite(aspect_ratio) and aspect_ratio > 0.0):
            raise CameraError(f"Aspect ratio must be positive, got {aspect_ratio}")
        if not (math.isfinite(far) and 0.0 < near < far):
            raise CameraError(f"Clip planes must satisfy 0 < near < far, got near={near}, far={far}")

    @property
    def position(self) -> Vector3:
        return self._position

    @property
    def direction(self) -> Vector3:
        return self._direction

    @property
    def up(self) -> Vector3:
        return self._up

    @property
    def fov(self) -> float:
        return self._fov

    @property
    def aspect_ratio(self) -> float:
        return self._aspect_ratio

    @property
    def near(self) -> float:
        return self._near

    @property
    def far(self) -> float:
        return self._far

    @property
    def view_projection(self) -> np.ndarray:
        return self._view_proj

    @property
    def inverse_view_projection(self) -> np.ndarray:
        return self._inv_view_proj

    def generate_ray(self, u: float, v: float) -> Ray:
        """
        Ray from the camera position through normalized screen coordinate
        (u, v). ``u`` grows to the right, ``v`` grows downwards (v=0 is the
        top row of the image). The returned direction is unit length.
        """
        ndc_x = 2.0 * u - 1.0
        ndc_y = 1.0 - 2.0 * v
        far_point = transform_point(self._inv_view_proj, (ndc_x, ndc_y, 1.0))
        target = Vector3(float(far_point[0]), float(far_point[1]), float(far_point[2]))
        return Ray(self._position, (target - self._position).normalize())

    def project(self, point: Vector3) -> Tuple[float, float, float]:
        """
        Project a world-space point to (u, v, depth), the inverse of
        ``generate_ray``. ``depth`` is the NDC z in [-1, 1] for points
        between the clip planes.
        """
        ndc = transform_point(self._view_proj, point.to_tuple())
        u = (float(ndc[0]) + 1.0) * 0.5
        v = (1.0 - float(ndc[1])) * 0.5
        return u, v, float(ndc[2])

    def __repr__(self) -> str:
        return (f"Camera(position={self._position!r}, direction={self._direction!r}, "
                f"fov={self._fov}, aspect_ratio={self._aspect_ratio})")
