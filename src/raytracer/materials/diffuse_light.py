# materials/diffuse_light.py
from typing import Union
from raytracer.core.vector import Vector3
from raytracer.geometry.hittable import HitRecord
from raytracer.materials.material import Material, as_texture
from raytracer.materials.textures import Texture


class DiffuseLight(Material):
    """
    Emissive material that provides constant radiance with optional texture support.

    Emitters are seen by camera and secondary rays but are not sampled as
    light sources for shadow rays; use ``PointLight`` for direct lighting.
    """
    def __init__(self, emit: Union[Vector3, Texture]):
        super().__init__()
        self.texture = as_texture(emit)

    def emitted(self, rec: HitRecord) -> Vector3:
        return self.texture.sample(rec.uv)
