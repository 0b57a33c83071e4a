# renderer/shader.py
import logging
import math
from raytracer.core.ray import Ray
from raytracer.core.vector import Vector3
from raytracer.geometry.hittable import HitRecord
from raytracer.errors import RenderConfigError

logger = logging.getLogger(__name__)

# Distance, in scene units, that shadow and secondary ray origins are pushed
# off a surface along its normal. Must exceed the rounding error of a hit
# point for scenes of roughly unit scale and stay below any feature size.
SHADOW_EPSILON = 1e-4

# Smallest accepted hit distance; only positive roots count as hits.
T_MIN = 1e-9


class WhittedShader:
    """
    Whitted-style integrator: emission, ambient plus Lambert direct lighting
    from point lights with hard shadows, and recursive specular lobes
    (mirror reflection, dielectric reflection/refraction).

    ``max_depth`` bounds the number of secondary bounces. A lobe spawned at
    the limit is not traced; it contributes ``attenuation * ambient``.
    """
    def __init__(self, scene, max_depth: int, shadow_epsilon: float = SHADOW_EPSILON):
        if max_depth is None or max_depth < 0:
            raise RenderConfigError(f"max_depth must be a non-negative integer, got {max_depth}")
        self.scene = scene
        self.max_depth = int(max_depth)
        self.shadow_epsilon = shadow_epsilon

    def trace(self, ray: Ray, depth: int = 0, rng=None) -> Vector3:
        """Radiance arriving along ``ray``; ``depth`` counts bounces so far."""
        hit = self.scene.nearest_hit(ray, T_MIN, math.inf)
        if hit is None:
            return self.scene.background_color(ray)
        return self.shade(ray, hit, depth, rng)

    def shade(self, ray: Ray, hit: HitRecord, depth: int, rng=None) -> Vector3:
        material = hit.material
        color = material.emitted(hit)

        albedo = material.diffuse_color(hit)
        if albedo is not None:
            color = color + albedo * self.scene.ambient + self.direct_lighting(hit, albedo)

        for direction, attenuation in material.scatter(ray, hit, rng):
            if depth >= self.max_depth:
                color = color + attenuation * self.scene.ambient
                continue
            secondary = Ray(self.offset_origin(hit.p, hit.normal, direction), direction)
            color = color + attenuation * self.trace(secondary, depth + 1, rng)
        return color

    def direct_lighting(self, hit: HitRecord, albedo: Vector3) -> Vector3:
        total = Vector3(0.0, 0.0, 0.0)
        for light in self.scene.lights:
            to_light = light.position - hit.p
            distance = to_light.length()
            if distance == 0:
                continue
            light_dir = to_light / distance
            n_dot_l = hit.normal.dot(light_dir)
            if n_dot_l <= 0:
                continue
            shadow_ray = Ray(hit.p + hit.normal * self.shadow_epsilon, light_dir)
            if self.scene.any_hit(shadow_ray, T_MIN, distance):
                continue
            total = total + albedo * light.radiance * n_dot_l
        return total

    def offset_origin(self, p: Vector3, normal: Vector3, direction: Vector3) -> Vector3:
        """Push ``p`` off the surface to the side ``direction`` leaves from."""
        if direction.dot(normal) > 0:
            return p + normal * self.shadow_epsilon
        return p - normal * self.shadow_epsilon
