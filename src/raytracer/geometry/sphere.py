# geometry/sphere.py
import math
from typing import Optional
from raytracer.core.vector import Vector3
from raytracer.core.ray import Ray
from raytracer.core.uv import UV
from raytracer.core.aabb import AABB
from raytracer.geometry.hittable import Hittable, HitRecord
from raytracer.errors import DegeneratePrimitiveError


class Sphere(Hittable):
    """
    Represents a sphere defined by its center, radius, and material.
    """
    def __init__(self, center: Vector3, radius: float, material):
        if not center.is_finite():
            raise DegeneratePrimitiveError(f"Sphere center must be finite, got {center}")
        if not (math.isfinite(radius) and radius > 0):
            raise DegeneratePrimitiveError(f"Sphere radius must be positive, got {radius}")
        self.center = center
        self.radius = float(radius)
        self.material = material

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        oc = ray.origin - self.center
        a = ray.direction.dot(ray.direction)
        half_b = oc.dot(ray.direction)
        c = oc.dot(oc) - self.radius * self.radius
        discriminant = half_b * half_b - a * c

        if discriminant < 0:
            return None

        sqrt_disc = math.sqrt(discriminant)
        # Find the nearest root that lies in the acceptable range
        root = (-half_b - sqrt_disc) / a
        if root < t_min or root > t_max:
            root = (-half_b + sqrt_disc) / a
            if root < t_min or root > t_max:
                return None

        rec = self._make_record(ray, root, (ray.at(root) - self.center) / self.radius)
        rec.uv = self.surface_uv((rec.p - self.center) / self.radius)
        return rec

    @staticmethod
    def surface_uv(p: Vector3) -> UV:
        # p is a point on the unit sphere; u wraps around Y, v runs pole to pole.
        theta = math.acos(max(-1.0, min(1.0, -p.y)))
        phi = math.atan2(-p.z, p.x) + math.pi
        return UV(phi / (2 * math.pi), theta / math.pi)

    def bounding_box(self) -> AABB:
        # The bounding box of a sphere is center ± radius
        offset = Vector3(self.radius, self.radius, self.radius)
        return AABB(self.center - offset, self.center + offset)

    def __repr__(self) -> str:
        return f"Sphere(center={self.center!r}, radius={self.radius})"
