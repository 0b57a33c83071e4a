"""Tests for JSON scene descriptions."""

import json

import pytest

from raytracer.core.vector import Vector3
from raytracer.errors import DegeneratePrimitiveError, SceneFileError
from raytracer.materials.dielectric import Dielectric
from raytracer.materials.lambertian import Lambertian
from raytracer.scene_loader import load_scene, parse_scene


def minimal(**overrides):
    data = {
        "background": [0.1, 0.2, 0.3],
        "materials": {"red": {"type": "lambertian", "albedo": [0.8, 0.2, 0.2]}},
        "objects": [{"type": "sphere", "center": [0, 0, 0], "radius": 1, "material": "red"}],
        "lights": [{"position": [5, 5, 5]}],
    }
    data.update(overrides)
    return data


class TestParseScene:
    def test_minimal(self):
        description = parse_scene(minimal())
        scene = description.scene
        assert len(scene) == 1
        assert isinstance(scene.materials[0], Lambertian)
        assert scene.background == Vector3(0.1, 0.2, 0.3)
        assert len(scene.lights) == 1

    def test_camera_defaults_and_look_at(self):
        description = parse_scene(minimal(camera={"position": [0, 0, 5], "look_at": [0, 0, 0], "fov": 30}))
        camera = description.camera(2.0)
        assert camera.fov == 30.0
        assert camera.aspect_ratio == 2.0
        assert camera.direction.z == pytest.approx(-1.0)

    def test_preset_material(self):
        data = minimal(materials={"red": {"preset": "glass"}})
        assert isinstance(parse_scene(data).scene.materials[0], Dielectric)

    def test_render_options_are_filtered(self, caplog):
        description = parse_scene(minimal(render={"width": 64, "height": 32, "turbo": True}))
        assert description.render_options == {"width": 64, "height": 32}
        assert "turbo" in caplog.text

    @pytest.mark.parametrize("overrides", [
        {"materials": {"red": {"type": "plastic"}}},
        {"materials": {"red": {"preset": "unobtainium"}}},
        {"objects": [{"type": "cone", "material": "red"}]},
        {"objects": [{"type": "sphere", "center": [0, 0], "radius": 1, "material": "red"}]},
        {"objects": [{"type": "sphere", "center": [0, 0, 0], "radius": 1, "material": "blue"}]},
        {"lights": [{"color": [1, 1, 1]}]},
        {"render": [64, 32]},
        {"render": {"width": "64"}},
        {"render": {"samples": 2.5}},
        {"render": {"exposure": "bright"}},
        {"render": {"tone_map": 3}},
        {"camera": "front"},
    ])
    def test_malformed(self, overrides):
        with pytest.raises(SceneFileError):
            parse_scene(minimal(**overrides))

    @pytest.mark.parametrize("field", ["fov", "near", "far"])
    def test_non_numeric_camera_field(self, field):
        description = parse_scene(minimal(camera={"position": [0, 0, 5], field: "wide"}))
        with pytest.raises(SceneFileError, match=f"camera.{field}"):
            description.camera(1.0)

    def test_integer_valued_floats_are_accepted(self):
        description = parse_scene(minimal(render={"exposure": 2, "gamma": 2.2}))
        assert description.render_options == {"exposure": 2.0, "gamma": 2.2}

    def test_degenerate_sphere(self):
        data = minimal(objects=[{"type": "sphere", "center": [0, 0, 0], "radius": 0, "material": "red"}])
        with pytest.raises(DegeneratePrimitiveError):
            parse_scene(data)

    def test_not_an_object(self):
        with pytest.raises(SceneFileError):
            parse_scene([1, 2, 3])


class TestLoadScene:
    def test_mesh_path_is_relative_to_scene_file(self, tmp_path):
        (tmp_path / "tri.obj").write_text("v 0 0 0\nv 1 0 0\nv 0 1 0\nf 1 2 3\n")
        data = minimal(objects=[{"type": "mesh", "path": "tri.obj", "material": "red",
                                 "scale": 2, "translate": [0, 0, -3]}])
        path = tmp_path / "scene.json"
        path.write_text(json.dumps(data))

        scene = load_scene(path).scene
        assert len(scene) == 1
        assert scene.objects[0].v1 == Vector3(2.0, 0.0, -3.0)

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(SceneFileError):
            load_scene(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(SceneFileError):
            load_scene(tmp_path / "absent.json")

    def test_bundled_example(self, examples_dir):
        description = load_scene(examples_dir / "scene.json")
        assert len(description.scene) == 6
        assert description.render_options["samples"] == 4
        description.scene.prepare()
