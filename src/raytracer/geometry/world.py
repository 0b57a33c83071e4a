# geometry/world.py
import logging
import math
from typing import Optional, List
from raytracer.core.ray import Ray
from raytracer.core.vector import Vector3
from raytracer.geometry.hittable import Hittable, HitRecord
from raytracer.geometry.bvh import BVHNode
from raytracer.geometry.mesh import TriangleMesh
from raytracer.geometry.light import PointLight
from raytracer.errors import SceneError

logger = logging.getLogger(__name__)

# Below this many primitives a linear scan beats building a tree.
BVH_MIN_OBJECTS = 8

ZENITH_COLOR = Vector3(0.2, 0.4, 0.8)
HORIZON_COLOR = Vector3(1.0, 0.8, 0.6)


class SceneEntry:
    """
    A primitive as placed in one scene: its insertion index and the index of
    its material in that scene's table, stamped onto every hit it reports.
    """
    __slots__ = ("primitive", "index", "material_id")

    def __init__(self, primitive: Hittable, index: int, material_id: int):
        self.primitive = primitive
        self.index = index
        self.material_id = material_id

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        rec = self.primitive.hit(ray, t_min, t_max)
        if rec is not None:
            rec.primitive_index = self.index
            rec.material_id = self.material_id
        return rec

    def bounding_box(self):
        return self.primitive.bounding_box()

    def __repr__(self) -> str:
        return f"SceneEntry({self.index}, {self.primitive!r})"


class Scene:
    """
    Ordered collection of primitives, the materials they use, point lights
    and the background.

    Insertion order is significant only for ties: when two primitives are hit
    at the same distance the one added first wins. When ``background`` is
    None, rays that miss everything see a zenith/horizon sky gradient.
    """
    def __init__(self, background: Optional[Vector3] = None,
                 ambient: Vector3 = Vector3(0.1, 0.1, 0.1)):
        self.objects: List[Hittable] = []
        self.entries: List[SceneEntry] = []
        self.materials: list = []
        self.lights: List[PointLight] = []
        self.background = background
        self.ambient = ambient
        self.bvh_root: Optional[BVHNode] = None

    def add(self, obj) -> None:
        """Add a primitive, or every triangle of a ``TriangleMesh`` in order."""
        if isinstance(obj, TriangleMesh):
            for triangle in obj.triangles:
                self.add(triangle)
            return
        if not isinstance(obj, Hittable):
            raise SceneError(f"Cannot add {obj!r} to a scene: not a primitive")
        if obj.material is None:
            raise SceneError(f"{obj!r} has no material")
        material_id = self.register_material(obj.material)
        self.entries.append(SceneEntry(obj, len(self.objects), material_id))
        self.objects.append(obj)
        self.bvh_root = None

    def register_material(self, material) -> int:
        """Return the material's index in the table, adding it on first use."""
        for i, existing in enumerate(self.materials):
            if existing is material:
                return i
        self.materials.append(material)
        return len(self.materials) - 1

    def add_light(self, light: PointLight) -> None:
        self.lights.append(light)

    def clear(self) -> None:
        self.objects.clear()
        self.entries.clear()
        self.materials.clear()
        self.lights.clear()
        self.bvh_root = None

    def validate(self) -> None:
        if not self.objects and self.background is None:
            raise SceneError("Scene has no primitives and no background color")

    def build_bvh(self) -> None:
        if len(self.objects) == 0:
            self.bvh_root = None
            return
        self.bvh_root = BVHNode(self.entries)
        logger.debug("Built BVH over %d primitives (depth %d)", len(self.objects), self.bvh_root.depth())

    def prepare(self) -> None:
        """Validate and build acceleration data; call before rendering."""
        self.validate()
        if len(self.objects) >= BVH_MIN_OBJECTS and self.bvh_root is None:
            self.build_bvh()

    @staticmethod
    def _intersect(obj: SceneEntry, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        # A primitive that fails numerically is treated as missed.
        try:
            rec = obj.hit(ray, t_min, t_max)
        except (ArithmeticError, ValueError) as err:
            logger.debug("Intersection with %r failed: %s", obj, err)
            return None
        if rec is not None and not math.isfinite(rec.t):
            logger.debug("Intersection with %r returned non-finite t", obj)
            return None
        return rec

    def nearest_hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        """
        Closest hit with ``t`` in [t_min, t_max]; equal distances resolve to
        the primitive inserted first.
        """
        if self.bvh_root is not None:
            return self.bvh_root.hit(ray, t_min, t_max, self._intersect)

        hit_record = None
        closest_so_far = t_max
        for obj in self.entries:
            rec = self._intersect(obj, ray, t_min, closest_so_far)
            if rec is not None and (hit_record is None or rec.t < hit_record.t):
                closest_so_far = rec.t
                hit_record = rec
        return hit_record

    def any_hit(self, ray: Ray, t_min: float, t_max: float) -> bool:
        """Occlusion query for shadow rays."""
        if self.bvh_root is not None:
            return self.bvh_root.hit(ray, t_min, t_max, self._intersect) is not None
        return any(self._intersect(obj, ray, t_min, t_max) is not None for obj in self.entries)

    def background_color(self, ray: Ray) -> Vector3:
        if self.background is not None:
            return self.background
        unit_direction = ray.direction.normalize()
        t = 0.5 * (unit_direction.y + 1.0)
        return HORIZON_COLOR * (1.0 - t) + ZENITH_COLOR * t

    def __len__(self) -> int:
        return len(self.objects)
