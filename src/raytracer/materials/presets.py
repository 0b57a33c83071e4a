# materials/presets.py
"""
Named materials and colors.

Every factory returns a fresh material so scenes never share mutable state by
accident; the scene's material table deduplicates by identity, not by name.
"""
from functools import partial
from raytracer.core.vector import Vector3
from raytracer.materials.metal import Metal
from raytracer.materials.lambertian import Lambertian
from raytracer.materials.dielectric import Dielectric
from raytracer.materials.diffuse_light import DiffuseLight
from raytracer.materials.textures import CheckerTexture

RED = Vector3(0.9, 0.2, 0.2)
BLUE = Vector3(0.2, 0.3, 0.9)
WHITE = Vector3(0.9, 0.9, 0.9)
DARK = Vector3(0.1, 0.1, 0.1)

# name -> (albedo, fuzz)
METALS = {
    "gold": (Vector3(1.0, 0.78, 0.34), 0.1),
    "silver": (Vector3(0.95, 0.93, 0.88), 0.05),
    "copper": (Vector3(0.95, 0.64, 0.54), 0.1),
    "chrome": (Vector3(0.9, 0.9, 0.9), 0.05),
    "mirror": (Vector3(1.0, 1.0, 1.0), 0.0),
}

# name -> index of refraction
DIELECTRICS = {
    "glass": 1.52,
    "water": 1.33,
    "diamond": 2.42,
}

# name -> emitted color at intensity 1
LIGHTS = {
    "warm_light": Vector3(1.0, 0.95, 0.9),
    "daylight": Vector3(1.0, 1.0, 1.0),
}


def metal(name: str) -> Metal:
    albedo, fuzz = METALS[name]
    return Metal(albedo, fuzz=fuzz)


def dielectric(name: str) -> Dielectric:
    return Dielectric(DIELECTRICS[name])


def light(name: str, intensity: float = 1.0) -> DiffuseLight:
    return DiffuseLight(LIGHTS[name] * intensity)


def matte(color: Vector3) -> Lambertian:
    return Lambertian(color)


def checkerboard(color1: Vector3 = WHITE, color2: Vector3 = DARK, scale: float = 4.0) -> CheckerTexture:
    return CheckerTexture(color1, color2, scale)


# Names accepted by the scene loader's "preset" material field.
MATERIAL_PRESETS = {}
MATERIAL_PRESETS.update({name: partial(metal, name) for name in METALS})
MATERIAL_PRESETS.update({name: partial(dielectric, name) for name in DIELECTRICS})
MATERIAL_PRESETS.update({name: partial(light, name) for name in LIGHTS})
