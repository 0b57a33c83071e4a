# errors.py
"""
Exception hierarchy for the ray tracer.

Configuration problems (camera, scene, render settings) are detected before
any pixel is rendered and derive from ``ValueError`` as well, so callers that
only care about "bad input" can catch that.
"""


class RaytracerError(Exception):
    """Base class for all ray tracer errors."""


class CameraError(RaytracerError, ValueError):
    """The camera parameters do not describe an invertible view-projection."""


class SceneError(RaytracerError, ValueError):
    """The scene cannot be rendered as configured."""


class DegeneratePrimitiveError(SceneError):
    """A primitive has no area or volume (zero radius sphere, collinear triangle)."""


class RenderConfigError(RaytracerError, ValueError):
    """Invalid render settings such as a zero width or height."""


class SceneFileError(RaytracerError):
    """A scene description file could not be read or is malformed."""


class RenderError(RaytracerError):
    """The renderer was used in a state that does not allow the operation."""


class ImageWriteError(RaytracerError, OSError):
    """Writing the rendered image to disk failed."""
