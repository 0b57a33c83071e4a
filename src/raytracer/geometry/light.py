# geometry/light.py
from raytracer.core.vector import Vector3


class PointLight:
    """
    Infinitesimal light source. Radiance reaching a surface is
    ``color * intensity`` with no distance falloff, scaled by the cosine term
    and zeroed when the shadow ray is blocked.
    """
    def __init__(self, position: Vector3, color: Vector3 = Vector3(1.0, 1.0, 1.0), intensity: float = 1.0):
        self.position = position
        self.color = color
        self.intensity = float(intensity)

    @property
    def radiance(self) -> Vector3:
        return self.color * self.intensity

    def __repr__(self) -> str:
        return f"PointLight(position={self.position!r}, color={self.color!r}, intensity={self.intensity})"
