# materials/dielectric.py
import math
from typing import List
from raytracer.core.ray import Ray
from raytracer.core.vector import Vector3
from raytracer.core.utils import reflect, refract, schlick
from raytracer.geometry.hittable import HitRecord
from raytracer.materials.material import Material, Lobe

WHITE = Vector3(1.0, 1.0, 1.0)


class Dielectric(Material):
    """
    Clear refractive material. Both the reflected and refracted rays are
    traced, weighted by Schlick's Fresnel term; total internal reflection
    yields the reflected ray only.
    """
    def __init__(self, ref_idx: float, tint: Vector3 = WHITE):
        super().__init__()
        if ref_idx <= 0:
            raise ValueError(f"Index of refraction must be positive, got {ref_idx}")
        self.ref_idx = ref_idx
        self.tint = tint

    def scatter(self, ray_in: Ray, rec: HitRecord, rng=None) -> List[Lobe]:
        # Determine if we're entering or exiting the material
        eta_ratio = 1.0 / self.ref_idx if rec.front_face else self.ref_idx

        unit_direction = ray_in.direction.normalize()
        cos_theta = min(-unit_direction.dot(rec.normal), 1.0)
        sin_theta = math.sqrt(max(0.0, 1.0 - cos_theta * cos_theta))

        reflected = reflect(unit_direction, rec.normal)
        if eta_ratio * sin_theta > 1.0:
            return [(reflected, self.tint)]

        reflectance = schlick(cos_theta, eta_ratio)
        refracted = refract(unit_direction, rec.normal, eta_ratio).normalize()
        return [
            (reflected, self.tint * reflectance),
            (refracted, self.tint * (1.0 - reflectance)),
        ]
