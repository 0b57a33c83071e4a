# raytracer/__init__.py
"""
CPU ray tracer: camera, scene, Whitted-style shading and PNG output.
"""
from raytracer.core.vector import Vector3
from raytracer.core.ray import Ray
from raytracer.camera.camera import Camera
from raytracer.geometry.sphere import Sphere
from raytracer.geometry.mesh import Triangle, TriangleMesh, load_obj
from raytracer.geometry.light import PointLight
from raytracer.geometry.world import Scene
from raytracer.renderer.image import ImageBuffer
from raytracer.renderer.raytracer import Renderer, RenderState, RenderStats
from raytracer.renderer.shader import WhittedShader
from raytracer.config import RenderSettings

__version__ = "0.1.0"

__all__ = [
    "Vector3",
    "Ray",
    "Camera",
    "Sphere",
    "Triangle",
    "TriangleMesh",
    "load_obj",
    "PointLight",
    "Scene",
    "ImageBuffer",
    "Renderer",
    "RenderState",
    "RenderStats",
    "WhittedShader",
    "RenderSettings",
]
