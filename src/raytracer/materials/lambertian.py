# materials/lambertian.py
from typing import Optional, Union
from raytracer.core.vector import Vector3
from raytracer.geometry.hittable import HitRecord
from raytracer.materials.material import Material, as_texture
from raytracer.materials.textures import Texture


class Lambertian(Material):
    """
    Lambertian diffuse material with optional texture support.
    """
    def __init__(self, albedo: Union[Vector3, Texture]):
        super().__init__()
        self.texture = as_texture(albedo)

    def diffuse_color(self, rec: HitRecord) -> Optional[Vector3]:
        return self.texture.sample(rec.uv)
