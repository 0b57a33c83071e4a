# renderer/raytracer.py
import logging
import os
import random
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple
import numpy as np
from raytracer.core.vector import Vector3
from raytracer.config import RenderSettings
from raytracer.errors import RenderError
from raytracer.renderer.image import ImageBuffer
from raytracer.renderer.shader import WhittedShader
from raytracer.renderer.tone_mapping import tone_map

logger = logging.getLogger(__name__)

# Final 8-bit color of any pixel whose traced color is NaN or infinite; it is
# written after tone mapping so exposure and tone curves never alter it.
SENTINEL_RGB = (255, 0, 255)

# Row chunks handed out per worker, for load balancing.
CHUNKS_PER_WORKER = 4


class RenderState(Enum):
    IDLE = "idle"
    RENDERING = "rendering"
    DONE = "done"
    CANCELLED = "cancelled"


@dataclass
class RenderStats:
    width: int
    height: int
    samples_per_pixel: int
    rows_rendered: int
    invalid_pixels: int
    elapsed: float

    @property
    def pixels_rendered(self) -> int:
        return self.rows_rendered * self.width


class Renderer:
    """
    Drives the per-pixel loop: camera ray generation, shading, sample
    averaging and conversion into the caller's ``ImageBuffer``.

    Rows are split into contiguous chunks rendered on a thread pool. Every
    chunk writes only its own rows of the float buffer, and each row draws
    jitter from its own ``random.Random`` seeded from ``(seed, row)``, so the
    output does not depend on the number of workers or on scheduling.
    """
    def __init__(self, settings: Optional[RenderSettings] = None, **overrides):
        settings = settings or RenderSettings()
        if overrides:
            settings = settings.updated(**overrides)
        self.settings = settings
        self.state = RenderState.IDLE
        self._cancel_flag = threading.Event()

    def cancel(self) -> None:
        """
        Ask a render to stop; checked before each row. A request made while
        idle applies to the next render. The flag is cleared once a render
        ends.
        """
        self._cancel_flag.set()

    @property
    def cancelled(self) -> bool:
        return self._cancel_flag.is_set()

    def _worker_count(self) -> int:
        return self.settings.workers or os.cpu_count() or 1

    @staticmethod
    def _row_chunks(height: int, workers: int):
        rows_per_chunk = max(1, height // (workers * CHUNKS_PER_WORKER))
        return [(y, min(y + rows_per_chunk, height)) for y in range(0, height, rows_per_chunk)]

    def _row_seed(self, y: int) -> int:
        return self.settings.seed * 1_000_003 + y

    def render(self, camera, scene, image: ImageBuffer) -> RenderStats:
        """
        Render ``scene`` as seen by ``camera`` into ``image``.

        The scene is validated (and its BVH built) before any pixel is
        touched. Non-finite pixel colors are logged, left out of tone
        mapping and written as ``SENTINEL_RGB``; they never abort the render.
        """
        if self.state is RenderState.RENDERING:
            raise RenderError("Renderer is already rendering")

        scene.prepare()
        width, height = image.width, image.height
        if abs(camera.aspect_ratio - image.aspect_ratio) > 1e-6:
            logger.warning("Camera aspect ratio %.4f differs from image aspect ratio %.4f",
                           camera.aspect_ratio, image.aspect_ratio)

        shader = WhittedShader(scene, self.settings.max_depth)
        linear = np.zeros((height, width, 3), dtype=np.float64)
        invalid_mask = np.zeros((height, width), dtype=np.bool_)
        workers = self._worker_count()
        chunks = self._row_chunks(height, workers)

        logger.info("Rendering %dx%d, %d samples/pixel, max depth %d, %d workers",
                    width, height, self.settings.samples, self.settings.max_depth, workers)

        self.state = RenderState.RENDERING
        start_time = time.perf_counter()
        try:
            with ThreadPoolExecutor(max_workers=workers) as pool:
                futures = [pool.submit(self._render_rows, camera, shader, linear, invalid_mask, y0, y1)
                           for y0, y1 in chunks]
                results = [future.result() for future in futures]
        except BaseException:
            self.state = RenderState.IDLE
            self._cancel_flag.clear()
            raise
        cancelled = self.cancelled
        self._cancel_flag.clear()

        tone_map(linear, image.pixels, mode=self.settings.tone_map,
                 exposure=self.settings.exposure, gamma=self.settings.gamma,
                 mask=~invalid_mask)
        image.pixels[invalid_mask] = SENTINEL_RGB

        elapsed = time.perf_counter() - start_time
        stats = RenderStats(
            width=width,
            height=height,
            samples_per_pixel=self.settings.samples,
            rows_rendered=sum(rows for rows, _ in results),
            invalid_pixels=sum(invalid for _, invalid in results),
            elapsed=elapsed,
        )

        if cancelled:
            self.state = RenderState.CANCELLED
            logger.info("Render cancelled after %d of %d rows", stats.rows_rendered, height)
        else:
            self.state = RenderState.DONE
            logger.info("Render finished in %.2fs", elapsed)
        if stats.invalid_pixels:
            logger.warning("%d pixels had non-finite colors and were replaced", stats.invalid_pixels)
        return stats

    def _render_rows(self, camera, shader: WhittedShader, linear: np.ndarray, invalid_mask: np.ndarray,
                     y0: int, y1: int) -> Tuple[int, int]:
        height, width = linear.shape[:2]
        rows = 0
        invalid = 0
        for y in range(y0, y1):
            if self._cancel_flag.is_set():
                break
            rng = random.Random(self._row_seed(y))
            for x in range(width):
                color = self.render_pixel(camera, shader, x, y, width, height, rng)
                if not color.is_finite():
                    logger.warning("Non-finite color %r at pixel (%d, %d); using sentinel", color, x, y)
                    invalid_mask[y, x] = True
                    invalid += 1
                    continue
                linear[y, x, 0] = color.x
                linear[y, x, 1] = color.y
                linear[y, x, 2] = color.z
            rows += 1
        return rows, invalid

    def render_pixel(self, camera, shader: WhittedShader, x: int, y: int,
                     width: int, height: int, rng: random.Random) -> Vector3:
        """Average of ``settings.samples`` rays through pixel (x, y)."""
        samples = self.settings.samples
        if samples == 1:
            ray = camera.generate_ray((x + 0.5) / width, (y + 0.5) / height)
            return shader.trace(ray, 0, rng)

        total = Vector3(0.0, 0.0, 0.0)
        for _ in range(samples):
            u = (x + rng.random()) / width
            v = (y + rng.random()) / height
            total = total + shader.trace(camera.generate_ray(u, v), 0, rng)
        return total / samples

    def render_gradient(self, image: ImageBuffer) -> None:
        """
        Fill ``image`` with the debug gradient: red follows x, green
        follows y, blue is zero. No scene or camera is involved.
        """
        if self.state is RenderState.RENDERING:
            raise RenderError("Renderer is already rendering")
        self.state = RenderState.RENDERING
        width, height = image.width, image.height
        xs = np.arange(width, dtype=np.float64) / max(width - 1, 1)
        ys = np.arange(height, dtype=np.float64) / max(height - 1, 1)
        linear = np.zeros((height, width, 3), dtype=np.float64)
        linear[:, :, 0] = xs[np.newaxis, :]
        linear[:, :, 1] = ys[:, np.newaxis]
        tone_map(linear, image.pixels, mode="clamp")
        self.state = RenderState.DONE
