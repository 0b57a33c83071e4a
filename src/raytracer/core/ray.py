# core/ray.py
from raytracer.core.vector import Vector3


class Ray:
    """
    Represents a ray in 3D space with an origin and direction.

    The direction is not required to be unit length; ``t`` is measured in
    multiples of the direction vector. Rays built by the camera and the
    shader are normalized, so for those ``t`` is a world-space distance.
    """
    __slots__ = ("origin", "direction")

    def __init__(self, origin: Vector3, direction: Vector3):
        self.origin = origin
        self.direction = direction

    def at(self, t: float) -> Vector3:
        """
        Returns the point along the ray at parameter t.
        """
        return self.origin + self.direction * t

    def __repr__(self) -> str:
        return f"Ray(origin={self.origin!r}, direction={self.direction!r})"
