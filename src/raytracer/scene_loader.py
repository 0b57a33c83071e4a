# scene_loader.py
"""
JSON scene descriptions.

A scene file is a JSON object with the optional sections ``render``,
``camera``, ``background``, ``ambient``, ``textures``, ``materials``,
``objects`` and ``lights``; see ``examples/scene.json``. Relative mesh and
texture paths are resolved against the scene file's directory.
"""
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

from raytracer.core.vector import Vector3
from raytracer.camera.camera import Camera, DEFAULT_FOV, DEFAULT_NEAR, DEFAULT_FAR
from raytracer.geometry.sphere import Sphere
from raytracer.geometry.mesh import Triangle, load_obj
from raytracer.geometry.light import PointLight
from raytracer.geometry.world import Scene
from raytracer.materials.lambertian import Lambertian
from raytracer.materials.metal import Metal
from raytracer.materials.dielectric import Dielectric
from raytracer.materials.diffuse_light import DiffuseLight
from raytracer.materials.textures import SolidTexture, CheckerTexture, ImageTexture
from raytracer.materials.presets import MATERIAL_PRESETS
from raytracer.errors import SceneFileError, DegeneratePrimitiveError

logger = logging.getLogger(__name__)

# Accepted keys of the "render" section and the JSON type each must have.
RENDER_KEYS = {
    "width": int,
    "height": int,
    "samples": int,
    "max_depth": int,
    "workers": int,
    "seed": int,
    "tone_map": str,
    "exposure": float,
    "gamma": float,
}


@dataclass
class SceneDescription:
    scene: Scene
    camera_options: Dict[str, Any] = field(default_factory=dict)
    render_options: Dict[str, Any] = field(default_factory=dict)

    def camera(self, aspect_ratio: float) -> Camera:
        """Build the camera for the final image aspect ratio."""
        opts = self.camera_options
        position = _vec(opts.get("position", [0.0, 0.0, 0.0]), "camera.position")
        up = _vec(opts.get("up", [0.0, 1.0, 0.0]), "camera.up")
        kwargs = dict(
            fov=_number(opts.get("fov", DEFAULT_FOV), "camera.fov"),
            aspect_ratio=aspect_ratio,
            near=_number(opts.get("near", DEFAULT_NEAR), "camera.near"),
            far=_number(opts.get("far", DEFAULT_FAR), "camera.far"),
        )
        if "look_at" in opts:
            return Camera.look_at(position, _vec(opts["look_at"], "camera.look_at"), up, **kwargs)
        direction = _vec(opts.get("direction", [0.0, 0.0, -1.0]), "camera.direction")
        return Camera(position, direction, up, **kwargs)


def _vec(value, where: str) -> Vector3:
    try:
        return Vector3.from_iterable(value)
    except (TypeError, ValueError) as err:
        raise SceneFileError(f"{where}: expected three numbers, got {value!r}") from err


def _number(value, where: str) -> float:
    # JSON booleans are ints in Python; they are not numbers here.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SceneFileError(f"{where}: expected a number, got {value!r}")
    return float(value)


def _section(data: dict, name: str) -> dict:
    value = data.get(name, {})
    if not isinstance(value, dict):
        raise SceneFileError(f"{name}: expected a JSON object, got {value!r}")
    return value


def _render_options(section: dict) -> dict:
    options = {}
    for key, value in section.items():
        kind = RENDER_KEYS.get(key)
        if kind is None:
            continue
        where = f"render.{key}"
        if kind is float:
            options[key] = _number(value, where)
        elif kind is int:
            if isinstance(value, bool) or not isinstance(value, int):
                raise SceneFileError(f"{where}: expected an integer, got {value!r}")
            options[key] = value
        elif not isinstance(value, kind):
            raise SceneFileError(f"{where}: expected a string, got {value!r}")
        else:
            options[key] = value

    unknown = set(section) - set(RENDER_KEYS)
    if unknown:
        logger.warning("Ignoring unknown render options: %s", ", ".join(sorted(unknown)))
    return options


def _texture(spec, where: str, base_dir: Path, textures: dict):
    if isinstance(spec, str):
        if spec not in textures:
            raise SceneFileError(f"{where}: unknown texture {spec!r}")
        return textures[spec]
    if isinstance(spec, list):
        return SolidTexture(_vec(spec, where))
    if not isinstance(spec, dict):
        raise SceneFileError(f"{where}: expected a color, texture name or texture object")

    kind = spec.get("type", "solid")
    if kind == "solid":
        return SolidTexture(_vec(spec.get("color"), f"{where}.color"))
    if kind == "checker":
        colors = spec.get("colors", [[0.9, 0.9, 0.9], [0.1, 0.1, 0.1]])
        if len(colors) != 2:
            raise SceneFileError(f"{where}.colors: expected two colors")
        return CheckerTexture(_vec(colors[0], f"{where}.colors[0]"),
                              _vec(colors[1], f"{where}.colors[1]"),
                              float(spec.get("scale", 1.0)))
    if kind == "image":
        return ImageTexture(str(base_dir / spec["path"]))
    raise SceneFileError(f"{where}: unknown texture type {kind!r}")


def _material(name: str, spec: dict, base_dir: Path, textures: dict):
    where = f"materials.{name}"
    if "preset" in spec:
        try:
            factory = MATERIAL_PRESETS[spec["preset"]]
        except KeyError as err:
            raise SceneFileError(f"{where}: unknown preset {spec['preset']!r}") from err
        return factory()

    kind = spec.get("type")
    if kind == "lambertian":
        return Lambertian(_texture(spec.get("albedo", [0.5, 0.5, 0.5]), f"{where}.albedo", base_dir, textures))
    if kind == "metal":
        return Metal(_texture(spec.get("albedo", [0.9, 0.9, 0.9]), f"{where}.albedo", base_dir, textures),
                     float(spec.get("fuzz", 0.0)))
    if kind == "dielectric":
        try:
            return Dielectric(float(spec.get("ior", 1.5)), _vec(spec.get("tint", [1.0, 1.0, 1.0]), f"{where}.tint"))
        except ValueError as err:
            raise SceneFileError(f"{where}: {err}") from err
    if kind in ("light", "diffuse_light"):
        emit = _texture(spec.get("emit", [1.0, 1.0, 1.0]), f"{where}.emit", base_dir, textures)
        return DiffuseLight(emit)
    raise SceneFileError(f"{where}: unknown material type {kind!r}")


def _add_object(scene: Scene, index: int, spec: dict, materials: dict, base_dir: Path) -> None:
    where = f"objects[{index}]"
    material_name = spec.get("material")
    if material_name not in materials:
        raise SceneFileError(f"{where}: unknown material {material_name!r}")
    material = materials[material_name]

    kind = spec.get("type")
    if kind == "sphere":
        scene.add(Sphere(_vec(spec.get("center"), f"{where}.center"), float(spec.get("radius", 1.0)), material))
    elif kind == "triangle":
        vertices = spec.get("vertices") or []
        if len(vertices) != 3:
            raise SceneFileError(f"{where}.vertices: expected three vertices")
        v0, v1, v2 = (_vec(v, f"{where}.vertices") for v in vertices)
        scene.add(Triangle(v0, v1, v2, material))
    elif kind == "mesh":
        mesh = load_obj(str(base_dir / spec["path"]), material)
        if "scale" in spec:
            mesh = mesh.scale(float(spec["scale"]))
        if "translate" in spec:
            mesh = mesh.translate(_vec(spec["translate"], f"{where}.translate"))
        scene.add(mesh)
    else:
        raise SceneFileError(f"{where}: unknown object type {kind!r}")


def parse_scene(data: dict, base_dir: Path = Path(".")) -> SceneDescription:
    """Build a scene from an already-decoded JSON object."""
    if not isinstance(data, dict):
        raise SceneFileError("Scene description must be a JSON object")

    background = data.get("background")
    scene = Scene(
        background=_vec(background, "background") if background is not None else None,
        ambient=_vec(data.get("ambient", [0.1, 0.1, 0.1]), "ambient"),
    )

    try:
        textures = {}
        for name, spec in data.get("textures", {}).items():
            textures[name] = _texture(spec, f"textures.{name}", base_dir, textures)

        materials = {name: _material(name, spec, base_dir, textures)
                     for name, spec in data.get("materials", {}).items()}

        for i, spec in enumerate(data.get("objects", [])):
            _add_object(scene, i, spec, materials, base_dir)

        for i, spec in enumerate(data.get("lights", [])):
            scene.add_light(PointLight(
                _vec(spec.get("position"), f"lights[{i}].position"),
                _vec(spec.get("color", [1.0, 1.0, 1.0]), f"lights[{i}].color"),
                float(spec.get("intensity", 1.0)),
            ))
    except DegeneratePrimitiveError:
        raise
    except (KeyError, TypeError, AttributeError, ValueError) as err:
        raise SceneFileError(f"Malformed scene description: {err!r}") from err

    render_options = _render_options(_section(data, "render"))
    camera_options = _section(data, "camera")

    logger.info("Loaded scene with %d primitives, %d materials, %d lights",
                len(scene.objects), len(scene.materials), len(scene.lights))
    return SceneDescription(scene, dict(camera_options), render_options)


def load_scene(path) -> SceneDescription:
    """
    Read a JSON scene file.

    Raises:
        SceneFileError: unreadable file, invalid JSON or malformed content.
        DegeneratePrimitiveError: a sphere or triangle has no extent.
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as err:
        raise SceneFileError(f"Cannot read scene file {path}: {err}") from err
    except json.JSONDecodeError as err:
        raise SceneFileError(f"Invalid JSON in scene file {path}: {err}") from err
    return parse_scene(data, path.parent)
