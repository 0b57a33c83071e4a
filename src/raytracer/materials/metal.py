# materials/metal.py
from typing import List, Union
from raytracer.core.ray import Ray
from raytracer.core.vector import Vector3
from raytracer.core.utils import reflect, random_in_unit_sphere
from raytracer.geometry.hittable import HitRecord
from raytracer.materials.material import Material, Lobe, as_texture
from raytracer.materials.textures import Texture


class Metal(Material):
    """
    Mirror material. ``fuzz`` in [0, 1] perturbs the reflected direction;
    0 is a perfect mirror and needs no random numbers.
    """
    def __init__(self, albedo: Union[Vector3, Texture], fuzz: float = 0.0):
        super().__init__()
        self.texture = as_texture(albedo)
        self.fuzz = max(0.0, min(fuzz, 1.0))

    def scatter(self, ray_in: Ray, rec: HitRecord, rng=None) -> List[Lobe]:
        reflected = reflect(ray_in.direction.normalize(), rec.normal)
        if self.fuzz > 0:
            reflected = (reflected + random_in_unit_sphere(rng) * self.fuzz).normalize()
        if reflected.dot(rec.normal) <= 0:
            # Fuzz pushed the ray below the surface: absorbed.
            return []
        return [(reflected, self.texture.sample(rec.uv))]
