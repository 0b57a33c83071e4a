"""Tests for scene assembly, nearest-hit queries and the BVH."""

import math
import random

import pytest

from raytracer.core.aabb import AABB
from raytracer.core.ray import Ray
from raytracer.core.vector import Vector3
from raytracer.errors import SceneError
from raytracer.geometry.bvh import BVHNode
from raytracer.geometry.hittable import Hittable
from raytracer.geometry.mesh import Triangle, TriangleMesh
from raytracer.geometry.sphere import Sphere
from raytracer.geometry.world import Scene
from raytracer.materials.lambertian import Lambertian


class BrokenPrimitive(Hittable):
    """A primitive whose intersection routine always fails numerically."""

    def __init__(self, material):
        self.material = material

    def hit(self, ray, t_min, t_max):
        return 1.0 / 0.0

    def bounding_box(self):
        return AABB(Vector3(-1.0, -1.0, -1.0), Vector3(1.0, 1.0, 1.0))


def toward_origin():
    return Ray(Vector3(0.0, 0.0, 5.0), Vector3(0.0, 0.0, -1.0))


def sphere_grid(material, n=4):
    return [Sphere(Vector3(x * 2.5, y * 2.5, -z * 2.5), 0.8, material)
            for x in range(n) for y in range(n) for z in range(2)]


class TestSceneAssembly:
    def test_empty_scene_without_background_is_invalid(self):
        with pytest.raises(SceneError):
            Scene().prepare()

    def test_empty_scene_with_background_is_valid(self):
        scene = Scene(background=Vector3(0.2, 0.2, 0.2))
        scene.prepare()
        assert scene.nearest_hit(toward_origin(), 1e-9, math.inf) is None

    def test_material_table_is_shared(self, red_material):
        scene = Scene()
        a = Sphere(Vector3(0.0, 0.0, 0.0), 1.0, red_material)
        b = Sphere(Vector3(3.0, 0.0, 0.0), 1.0, red_material)
        scene.add(a)
        scene.add(b)
        assert len(scene.materials) == 1
        assert [e.material_id for e in scene.entries] == [0, 0]
        assert [e.index for e in scene.entries] == [0, 1]

    def test_mesh_is_expanded_in_order(self, red_material):
        triangles = [
            Triangle(Vector3(0.0, 0.0, 0.0), Vector3(1.0, 0.0, 0.0), Vector3(0.0, 1.0, 0.0)),
            Triangle(Vector3(1.0, 0.0, 0.0), Vector3(1.0, 1.0, 0.0), Vector3(0.0, 1.0, 0.0)),
        ]
        scene = Scene()
        scene.add(TriangleMesh(triangles, red_material))
        assert len(scene) == 2
        assert [e.primitive for e in scene.entries] == triangles
        assert [e.index for e in scene.entries] == [0, 1]

    def test_primitive_shared_between_scenes(self, red_material):
        sphere = Sphere(Vector3(0.0, 0.0, 0.0), 1.0, red_material)
        first = Scene()
        first.add(sphere)
        second = Scene()
        second.add(Sphere(Vector3(5.0, 0.0, 0.0), 1.0, Lambertian(Vector3(0.0, 1.0, 0.0))))
        second.add(sphere)

        rec = first.nearest_hit(toward_origin(), 1e-9, math.inf)
        assert (rec.primitive_index, rec.material_id) == (0, 0)
        assert first.materials[rec.material_id] is rec.material

        rec = second.nearest_hit(toward_origin(), 1e-9, math.inf)
        assert (rec.primitive_index, rec.material_id) == (1, 1)
        assert second.materials[rec.material_id] is rec.material

    def test_rejects_non_primitives(self, red_material):
        scene = Scene()
        with pytest.raises(SceneError):
            scene.add("sphere")
        with pytest.raises(SceneError):
            scene.add(Sphere(Vector3(0.0, 0.0, 0.0), 1.0, None))

    def test_clear(self, sphere_scene):
        sphere_scene.build_bvh()
        sphere_scene.clear()
        assert len(sphere_scene) == 0
        assert sphere_scene.materials == [] and sphere_scene.lights == []
        assert sphere_scene.bvh_root is None

    def test_default_background_is_gradient(self):
        scene = Scene()
        up = scene.background_color(Ray(Vector3(0.0, 0.0, 0.0), Vector3(0.0, 1.0, 0.0)))
        down = scene.background_color(Ray(Vector3(0.0, 0.0, 0.0), Vector3(0.0, -1.0, 0.0)))
        assert up != down
        assert up.is_finite() and down.is_finite()


class TestNearestHit:
    def test_equal_distance_prefers_first_inserted(self):
        first = Lambertian(Vector3(1.0, 0.0, 0.0))
        second = Lambertian(Vector3(0.0, 1.0, 0.0))
        scene = Scene()
        scene.add(Sphere(Vector3(0.0, 0.0, 0.0), 1.0, first))
        scene.add(Sphere(Vector3(0.0, 0.0, 0.0), 1.0, second))
        assert scene.nearest_hit(toward_origin(), 1e-9, math.inf).material is first

        reversed_scene = Scene()
        reversed_scene.add(Sphere(Vector3(0.0, 0.0, 0.0), 1.0, second))
        reversed_scene.add(Sphere(Vector3(0.0, 0.0, 0.0), 1.0, first))
        assert reversed_scene.nearest_hit(toward_origin(), 1e-9, math.inf).material is second

    def test_equal_distance_tie_break_survives_bvh(self, red_material):
        winner = Lambertian(Vector3(0.0, 0.0, 1.0))
        scene = Scene()
        for sphere in sphere_grid(red_material):
            scene.add(sphere)
        first_index = len(scene)
        scene.add(Sphere(Vector3(-5.0, 0.0, 0.0), 1.0, winner))
        scene.add(Sphere(Vector3(-5.0, 0.0, 0.0), 1.0, red_material))
        scene.build_bvh()
        ray = Ray(Vector3(-5.0, 0.0, 5.0), Vector3(0.0, 0.0, -1.0))
        rec = scene.nearest_hit(ray, 1e-9, math.inf)
        assert rec.primitive_index == first_index
        assert rec.material is winner

    def test_bvh_matches_linear_scan(self, red_material):
        linear = Scene()
        accelerated = Scene()
        for sphere in sphere_grid(red_material):
            linear.add(sphere)
        for sphere in sphere_grid(red_material):
            accelerated.add(sphere)
        accelerated.build_bvh()
        assert isinstance(accelerated.bvh_root, BVHNode)
        assert not accelerated.bvh_root.is_leaf

        rng = random.Random(3)
        origin = Vector3(3.75, 3.75, 10.0)
        for _ in range(200):
            target = Vector3(rng.uniform(-2.0, 9.0), rng.uniform(-2.0, 9.0), rng.uniform(-4.0, 1.0))
            ray = Ray(origin, (target - origin).normalize())
            a = linear.nearest_hit(ray, 1e-9, math.inf)
            b = accelerated.nearest_hit(ray, 1e-9, math.inf)
            if a is None:
                assert b is None
            else:
                assert b is not None
                assert (a.t, a.primitive_index) == (b.t, b.primitive_index)

    def test_any_hit(self, sphere_scene):
        assert sphere_scene.any_hit(toward_origin(), 1e-9, math.inf)
        assert not sphere_scene.any_hit(toward_origin(), 1e-9, 3.0)

    def test_failing_primitive_is_a_miss(self, red_material):
        scene = Scene(background=Vector3(0.0, 0.0, 0.0))
        scene.add(BrokenPrimitive(red_material))
        scene.add(Sphere(Vector3(0.0, 0.0, 0.0), 1.0, red_material))
        rec = scene.nearest_hit(toward_origin(), 1e-9, math.inf)
        assert rec is not None
        assert rec.primitive_index == 1
        assert rec.t == pytest.approx(4.0)
