# config.py
"""Configuration defaults for the ray tracer, overridable through environment variables."""

import os
from dataclasses import dataclass, replace
from typing import Optional

from raytracer.errors import RenderConfigError
from raytracer.renderer.tone_mapping import TONE_MAPS


def _env_int(name: str, default: Optional[int]) -> Optional[int]:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError as err:
        raise RenderConfigError(f"Environment variable {name} must be an integer, got {value!r}") from err


# Render settings
DEFAULT_WIDTH = _env_int("RAYTRACER_WIDTH", 720)
DEFAULT_HEIGHT = _env_int("RAYTRACER_HEIGHT", 480)
DEFAULT_SAMPLES = _env_int("RAYTRACER_SAMPLES", 1)
DEFAULT_MAX_DEPTH = _env_int("RAYTRACER_MAX_DEPTH", 4)
DEFAULT_WORKERS = _env_int("RAYTRACER_WORKERS", None)
DEFAULT_SEED = _env_int("RAYTRACER_SEED", 42)
DEFAULT_OUTPUT = os.getenv("RAYTRACER_OUTPUT", "render.png")
DEFAULT_TONE_MAP = os.getenv("RAYTRACER_TONE_MAP", "clamp")

# Logging settings
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")

# Samples per pixel and bounce limits for each quality level
QUALITY_LEVELS = {
    "interactive": {"samples": 1, "bounces": 2},
    "balanced": {"samples": 4, "bounces": 4},
    "high_quality": {"samples": 8, "bounces": 6},
}


@dataclass(frozen=True)
class RenderSettings:
    """
    Immutable render configuration handed to the renderer.

    Raises:
        RenderConfigError: for a non-positive resolution or sample count, a
            negative depth, or an unknown tone map.
    """
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    samples: int = DEFAULT_SAMPLES
    max_depth: int = DEFAULT_MAX_DEPTH
    workers: Optional[int] = DEFAULT_WORKERS
    seed: int = DEFAULT_SEED
    output: str = DEFAULT_OUTPUT
    tone_map: str = DEFAULT_TONE_MAP
    exposure: float = 1.0
    gamma: float = 1.0

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise RenderConfigError(f"Invalid resolution {self.width}x{self.height}: both dimensions must be positive")
        if self.samples < 1:
            raise RenderConfigError(f"samples must be at least 1, got {self.samples}")
        if self.max_depth < 0:
            raise RenderConfigError(f"max_depth must be non-negative, got {self.max_depth}")
        if self.workers is not None and self.workers < 1:
            raise RenderConfigError(f"workers must be at least 1, got {self.workers}")
        if self.tone_map not in TONE_MAPS:
            raise RenderConfigError(f"Unknown tone map {self.tone_map!r}; expected one of {TONE_MAPS}")
        if self.exposure <= 0 or self.gamma <= 0:
            raise RenderConfigError("exposure and gamma must be positive")

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height

    def with_quality(self, level: str) -> "RenderSettings":
        try:
            quality = QUALITY_LEVELS[level]
        except KeyError as err:
            raise RenderConfigError(f"Unknown quality level {level!r}; expected one of {sorted(QUALITY_LEVELS)}") from err
        return replace(self, samples=quality["samples"], max_depth=quality["bounces"])

    def updated(self, **changes) -> "RenderSettings":
        """Copy with the non-None entries of ``changes`` applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})
