"""Tests for the recursive Whitted shader."""

import math

import pytest

from raytracer.core.ray import Ray
from raytracer.core.vector import Vector3
from raytracer.errors import RenderConfigError
from raytracer.geometry.light import PointLight
from raytracer.geometry.sphere import Sphere
from raytracer.geometry.world import Scene
from raytracer.materials.dielectric import Dielectric
from raytracer.materials.diffuse_light import DiffuseLight
from raytracer.materials.lambertian import Lambertian
from raytracer.materials.presets import metal
from raytracer.renderer.shader import WhittedShader

AMBIENT = Vector3(0.2, 0.2, 0.2)


def assert_color(actual, expected):
    assert actual.x == pytest.approx(expected.x)
    assert actual.y == pytest.approx(expected.y)
    assert actual.z == pytest.approx(expected.z)


def counting(shader):
    """Wrap ``shader.trace`` so every call records its depth."""
    depths = []
    original = shader.trace

    def trace(ray, depth=0, rng=None):
        depths.append(depth)
        return original(ray, depth, rng)

    shader.trace = trace
    return depths


def facing_mirrors():
    scene = Scene(background=Vector3(0.0, 0.0, 0.0), ambient=AMBIENT)
    scene.add(Sphere(Vector3(0.0, 0.0, -3.0), 1.0, metal("mirror")))
    scene.add(Sphere(Vector3(0.0, 0.0, 3.0), 1.0, metal("mirror")))
    return scene


FORWARD = Ray(Vector3(0.0, 0.0, 0.0), Vector3(0.0, 0.0, -1.0))


class TestDepthLimit:
    @pytest.mark.parametrize("max_depth", [-1, None])
    def test_invalid_max_depth(self, max_depth):
        with pytest.raises(RenderConfigError):
            WhittedShader(Scene(), max_depth)

    def test_mirror_at_depth_zero_returns_ambient(self):
        shader = WhittedShader(facing_mirrors(), 0)
        depths = counting(shader)
        assert_color(shader.trace(FORWARD), AMBIENT)
        assert depths == [0]

    def test_recursion_stops_at_max_depth(self):
        shader = WhittedShader(facing_mirrors(), 3)
        depths = counting(shader)
        color = shader.trace(FORWARD)
        assert depths == [0, 1, 2, 3]
        # Perfect mirrors pass the ambient term at the limit through unchanged
        assert_color(color, AMBIENT)

    def test_glass_at_depth_zero_returns_ambient(self):
        scene = Scene(background=Vector3(0.0, 0.0, 0.0), ambient=AMBIENT)
        scene.add(Sphere(Vector3(0.0, 0.0, -3.0), 1.0, Dielectric(1.5)))
        shader = WhittedShader(scene, 0)
        # Fresnel-weighted lobes sum to the tint
        assert_color(shader.trace(FORWARD), AMBIENT)

    def test_miss_returns_background(self, sphere_scene):
        shader = WhittedShader(sphere_scene, 2)
        ray = Ray(Vector3(0.0, 0.0, 5.0), Vector3(0.0, 1.0, 0.0))
        assert shader.trace(ray) == Vector3(0.0, 0.0, 0.0)


class TestDirectLighting:
    def lit_sphere(self, occluded):
        scene = Scene(background=Vector3(0.0, 0.0, 0.0), ambient=Vector3(0.1, 0.1, 0.1))
        scene.add(Sphere(Vector3(0.0, 0.0, 0.0), 1.0, Lambertian(Vector3(1.0, 1.0, 1.0))))
        if occluded:
            scene.add(Sphere(Vector3(0.0, 3.5, 0.0), 0.5, Lambertian(Vector3(1.0, 1.0, 1.0))))
        scene.add_light(PointLight(Vector3(0.0, 5.0, 0.0)))
        return scene

    def test_lit_point_has_no_self_shadowing(self):
        shader = WhittedShader(self.lit_sphere(occluded=False), 2)
        color = shader.trace(Ray(Vector3(0.0, 2.0, 0.0), Vector3(0.0, -1.0, 0.0)))
        assert_color(color, Vector3(1.1, 1.1, 1.1))

    def test_occluded_point_gets_ambient_only(self):
        shader = WhittedShader(self.lit_sphere(occluded=True), 2)
        color = shader.trace(Ray(Vector3(0.0, 2.0, 0.0), Vector3(0.0, -1.0, 0.0)))
        assert_color(color, Vector3(0.1, 0.1, 0.1))

    def test_light_behind_surface_contributes_nothing(self):
        scene = self.lit_sphere(occluded=False)
        shader = WhittedShader(scene, 2)
        color = shader.trace(Ray(Vector3(0.0, -2.0, 0.0), Vector3(0.0, 1.0, 0.0)))
        assert_color(color, Vector3(0.1, 0.1, 0.1))

    def test_emission(self):
        scene = Scene(background=Vector3(0.0, 0.0, 0.0), ambient=Vector3(0.0, 0.0, 0.0))
        scene.add(Sphere(Vector3(0.0, 0.0, -3.0), 1.0, DiffuseLight(Vector3(2.0, 1.0, 0.5))))
        shader = WhittedShader(scene, 1)
        assert_color(shader.trace(FORWARD), Vector3(2.0, 1.0, 0.5))


def test_offset_origin_follows_direction():
    shader = WhittedShader(Scene(), 1, shadow_epsilon=0.01)
    p = Vector3(0.0, 1.0, 0.0)
    normal = Vector3(0.0, 1.0, 0.0)
    above = shader.offset_origin(p, normal, Vector3(0.0, 1.0, 0.0))
    below = shader.offset_origin(p, normal, Vector3(0.0, -1.0, 0.0))
    assert above.y == pytest.approx(1.01)
    assert below.y == pytest.approx(0.99)
    assert math.isfinite(above.y)
