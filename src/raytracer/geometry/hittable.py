# geometry/hittable.py
from typing import Optional
from raytracer.core.vector import Vector3
from raytracer.core.ray import Ray
from raytracer.core.uv import UV


class HitRecord:
    """
    Records details of a ray-object intersection.

    ``material`` is a reference into the owning scene's material table and
    ``material_id`` its index there; the record does not own either.
    """
    __slots__ = ("p", "normal", "t", "front_face", "material", "material_id", "uv", "primitive_index")

    def __init__(self, p: Vector3 = None, normal: Vector3 = None,
                 t: float = 0, front_face: bool = True, material=None):
        self.p = p              # Intersection point
        self.normal = normal    # Unit surface normal, facing against the ray
        self.t = t              # Ray parameter at intersection
        self.front_face = front_face  # Whether the hit was on the front side
        self.material = material
        self.material_id = -1
        self.uv = UV(0.0, 0.0)
        self.primitive_index = -1

    def set_face_normal(self, ray: Ray, outward_normal: Vector3):
        """
        Ensures that the normal always points against the ray.
        """
        self.front_face = ray.direction.dot(outward_normal) < 0
        self.normal = outward_normal if self.front_face else outward_normal * -1

    def __repr__(self) -> str:
        return f"HitRecord(t={self.t}, p={self.p!r}, primitive={self.primitive_index})"


class Hittable:
    """
    Abstract class for objects that can be hit by a ray.

    A primitive holds no scene state; the scene stamps its own insertion
    index and material id onto the records it returns, so one primitive can
    be shared between scenes.
    """
    material = None

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        raise NotImplementedError("hit() must be implemented by subclasses.")

    def bounding_box(self):
        raise NotImplementedError("bounding_box() must be implemented by subclasses.")

    def _make_record(self, ray: Ray, t: float, outward_normal: Vector3) -> HitRecord:
        rec = HitRecord()
        rec.t = t
        rec.p = ray.at(t)
        rec.set_face_normal(ray, outward_normal)
        rec.material = self.material
        return rec


def closer(a: Optional[HitRecord], b: Optional[HitRecord]) -> Optional[HitRecord]:
    """Pick the nearer hit; on equal ``t`` the earlier-inserted primitive wins."""
    if a is None:
        return b
    if b is None:
        return a
    if (b.t, b.primitive_index) < (a.t, a.primitive_index):
        return b
    return a
