# materials/material.py
from typing import List, Tuple, Optional, Union
from raytracer.core.ray import Ray
from raytracer.core.vector import Vector3
from raytracer.geometry.hittable import HitRecord
from raytracer.materials.textures import Texture, SolidTexture

BLACK = Vector3(0.0, 0.0, 0.0)

# A specular lobe: outgoing direction and the color it is weighted by.
Lobe = Tuple[Vector3, Vector3]


def as_texture(value: Union[Vector3, Texture]) -> Texture:
    if isinstance(value, Vector3):
        return SolidTexture(value)
    return value


class Material:
    """
    Abstract material for a Whitted-style shader.

    A material may emit light, may have a diffuse color that receives direct
    lighting, and may spawn specular lobes (reflection/refraction) that the
    shader traces recursively.
    """
    def __init__(self):
        self.texture: Optional[Texture] = None

    def emitted(self, rec: HitRecord) -> Vector3:
        return BLACK

    def diffuse_color(self, rec: HitRecord) -> Optional[Vector3]:
        """Color lit by ambient and direct light, or None for no diffuse response."""
        return None

    def scatter(self, ray_in: Ray, rec: HitRecord, rng=None) -> List[Lobe]:
        """
        Specular lobes leaving the hit point. Directions are unit length;
        the shader offsets the origin and applies the depth limit.
        """
        return []
