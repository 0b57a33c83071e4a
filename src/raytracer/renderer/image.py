# renderer/image.py
import logging
import os
import numpy as np
from PIL import Image
from raytracer.errors import RenderConfigError, ImageWriteError

logger = logging.getLogger(__name__)


class ImageBuffer:
    """
    Caller-owned 8-bit RGB raster. ``pixels`` is a C-contiguous
    (height, width, 3) uint8 array that the renderer fills in place.
    """
    def __init__(self, width: int, height: int):
        if int(width) != width or int(height) != height or width <= 0 or height <= 0:
            raise RenderConfigError(f"Invalid resolution {width}x{height}: both dimensions must be positive integers")
        self.width = int(width)
        self.height = int(height)
        self.pixels = np.zeros((self.height, self.width, 3), dtype=np.uint8)

    @property
    def resolution(self):
        return self.width, self.height

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height

    def get_pixel(self, x: int, y: int):
        r, g, b = self.pixels[y, x]
        return int(r), int(g), int(b)

    def put_pixel(self, x: int, y: int, rgb) -> None:
        self.pixels[y, x] = rgb

    def to_image(self) -> Image.Image:
        return Image.fromarray(self.pixels)

    def save(self, path, image_format: str = "PNG") -> None:
        """
        Write the buffer as a lossless image (PNG by default).

        Raises:
            ImageWriteError: wrapping the underlying ``OSError`` or encoder error.
        """
        try:
            self.to_image().save(path, format=image_format)
        except (OSError, ValueError, KeyError) as err:
            raise ImageWriteError(f"Failed to write {image_format.lower()} output file {os.fspath(path)}: {err}") from err
        logger.info("Saved %dx%d image to %s", self.width, self.height, path)
