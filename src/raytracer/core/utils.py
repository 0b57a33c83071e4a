# core/utils.py
import math
import random
from typing import Optional
from raytracer.core.vector import Vector3


def random_in_unit_sphere(rng: Optional[random.Random] = None) -> Vector3:
    """
    Returns a random point inside a unit sphere.
    """
    rng = rng or random
    while True:
        p = Vector3(rng.uniform(-1, 1),
                    rng.uniform(-1, 1),
                    rng.uniform(-1, 1))
        if p.dot(p) < 1.0:
            return p


def reflect(v: Vector3, n: Vector3) -> Vector3:
    """
    Reflects vector v about the normal n.
    """
    return v - n * 2 * v.dot(n)


def refract(uv: Vector3, n: Vector3, eta_ratio: float) -> Vector3:
    """
    Snell refraction of the unit vector ``uv`` through a surface with unit
    normal ``n`` facing against it. Callers must rule out total internal
    reflection first.
    """
    cos_theta = min(-uv.dot(n), 1.0)
    r_out_perp = (uv + n * cos_theta) * eta_ratio
    r_out_parallel = n * (-math.sqrt(abs(1.0 - r_out_perp.dot(r_out_perp))))
    return r_out_perp + r_out_parallel


def schlick(cos_theta: float, eta_ratio: float) -> float:
    """Schlick's approximation of Fresnel reflectance."""
    r0 = (1.0 - eta_ratio) / (1.0 + eta_ratio)
    r0 = r0 * r0
    return r0 + (1.0 - r0) * math.pow((1.0 - cos_theta), 5)
