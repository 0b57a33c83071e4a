# scenes.py
"""Built-in scenes used by the CLI when no scene file is given."""
import logging
from raytracer.core.vector import Vector3
from raytracer.camera.camera import Camera
from raytracer.geometry.sphere import Sphere
from raytracer.geometry.mesh import Triangle, TriangleMesh
from raytracer.geometry.light import PointLight
from raytracer.geometry.world import Scene
from raytracer.materials.lambertian import Lambertian
from raytracer.materials import presets

logger = logging.getLogger(__name__)


def create_world() -> Scene:
    """
    Checkerboard ground, a glass, a gold and a matte sphere, a small
    pyramid mesh, one emissive sphere and two point lights.
    """
    world = Scene(ambient=Vector3(0.15, 0.15, 0.15))

    ground_texture = presets.checkerboard(
        presets.WHITE * 0.8,
        presets.DARK * 0.2,
        scale=4000.0,
    )
    world.add(Sphere(Vector3(0, -1000, 0), 1000, Lambertian(ground_texture)))
    world.add(Sphere(Vector3(-2.2, 1, -1), 1.0, presets.dielectric("glass")))
    world.add(Sphere(Vector3(2.2, 1, -1), 1.0, presets.metal("gold")))
    world.add(Sphere(Vector3(0, 1, -2.5), 1.0, presets.matte(presets.RED)))

    apex = Vector3(0, 1.2, 0.8)
    base = [Vector3(-0.6, 0, 0.2), Vector3(0.6, 0, 0.2), Vector3(0.6, 0, 1.4), Vector3(-0.6, 0, 1.4)]
    pyramid = [Triangle(base[i], base[(i + 1) % 4], apex) for i in range(4)]
    world.add(TriangleMesh(pyramid, presets.matte(presets.BLUE)))

    world.add(Sphere(Vector3(0, 5, -1), 0.5, presets.light("warm_light", 4.0)))
    world.add_light(PointLight(Vector3(4, 6, 4), Vector3(1.0, 0.95, 0.9), intensity=0.9))
    world.add_light(PointLight(Vector3(-5, 4, 2), Vector3(0.9, 0.95, 1.0), intensity=0.4))

    logger.info("Created demo world with %d primitives, %d materials, %d lights",
                len(world.objects), len(world.materials), len(world.lights))
    return world


def create_camera(aspect_ratio: float) -> Camera:
    return Camera.look_at(
        position=Vector3(0, 2.5, 8),
        target=Vector3(0, 1, -1),
        fov=40.0,
        aspect_ratio=aspect_ratio,
    )
