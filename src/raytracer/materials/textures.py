# materials/textures.py
import math
import numpy as np
from PIL import Image, UnidentifiedImageError
from raytracer.core.vector import Vector3
from raytracer.core.uv import UV
from raytracer.errors import SceneFileError


class Texture:
    """Base class for all textures."""
    def sample(self, uv: UV) -> Vector3:
        """Sample the texture at given UV coordinates."""
        raise NotImplementedError("sample() must be implemented by texture subclasses.")


class SolidTexture(Texture):
    """A solid color texture."""
    def __init__(self, color: Vector3):
        self.color = color

    def sample(self, uv: UV) -> Vector3:
        return self.color


class CheckerTexture(Texture):
    """A checker pattern texture."""
    def __init__(self, color1: Vector3, color2: Vector3, scale: float = 1.0):
        self.color1 = color1
        self.color2 = color2
        self.scale = scale

    def sample(self, uv: UV) -> Vector3:
        x = math.floor(uv.u * self.scale)
        y = math.floor(uv.v * self.scale)
        is_even = (x + y) % 2 == 0
        return self.color1 if is_even else self.color2


class ImageTexture(Texture):
    """A texture from an image file."""
    def __init__(self, image_path: str):
        try:
            with Image.open(image_path) as img:
                if img.mode != 'RGB':
                    img = img.convert('RGB')
                # Normalize to [0,1] once so sampling is a lookup.
                self.data = np.asarray(img, dtype=np.float64) / 255.0
        except (OSError, UnidentifiedImageError) as err:
            raise SceneFileError(f"Error loading texture {image_path}: {err}") from err
        self.height, self.width = self.data.shape[:2]

    def sample(self, uv: UV) -> Vector3:
        # Handle texture wrapping
        u = uv.u % 1.0
        v = 1.0 - (uv.v % 1.0)  # Flip V coordinate for OpenGL-style UV

        x = min(int(u * self.width), self.width - 1)
        y = min(int(v * self.height), self.height - 1)

        color = self.data[y, x]
        return Vector3(float(color[0]), float(color[1]), float(color[2]))
