"""Pytest configuration and shared fixtures."""

import sys
from pathlib import Path

import pytest

# Make the src/ layout importable without an install
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from raytracer.core.vector import Vector3  # noqa: E402
from raytracer.camera.camera import Camera  # noqa: E402
from raytracer.config import RenderSettings  # noqa: E402
from raytracer.geometry.light import PointLight  # noqa: E402
from raytracer.geometry.sphere import Sphere  # noqa: E402
from raytracer.geometry.world import Scene  # noqa: E402
from raytracer.materials.lambertian import Lambertian  # noqa: E402


@pytest.fixture
def red_material():
    return Lambertian(Vector3(0.8, 0.2, 0.2))


@pytest.fixture
def sphere_scene(red_material):
    """Unit sphere at the origin on a black background, lit from the front."""
    scene = Scene(background=Vector3(0.0, 0.0, 0.0))
    scene.add(Sphere(Vector3(0.0, 0.0, 0.0), 1.0, red_material))
    scene.add_light(PointLight(Vector3(2.0, 2.0, 5.0)))
    return scene


@pytest.fixture
def front_camera():
    """Camera at (0, 0, 5) looking down -Z, square aspect."""
    return Camera(position=Vector3(0.0, 0.0, 5.0), direction=Vector3(0.0, 0.0, -1.0), aspect_ratio=1.0)


@pytest.fixture
def small_settings():
    return RenderSettings(width=3, height=3, samples=1, max_depth=3, workers=2, seed=7)


@pytest.fixture(scope="session")
def examples_dir():
    return project_root / "examples"
