# main.py
import argparse
import logging
import sys
from typing import Optional, Sequence

from raytracer.config import RenderSettings, QUALITY_LEVELS
from raytracer.errors import RaytracerError, ImageWriteError
from raytracer.logging_config import setup_logging
from raytracer.renderer.image import ImageBuffer
from raytracer.renderer.raytracer import Renderer
from raytracer.renderer.tone_mapping import TONE_MAPS
from raytracer.scene_loader import load_scene
from raytracer.scenes import create_world, create_camera

logger = logging.getLogger("raytracer.main")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="raytracer", description="CPU ray tracer")
    parser.add_argument("scene_file", nargs="?", default=None,
                        help="JSON scene description (default: built-in demo scene)")
    parser.add_argument("-o", "--output", default=None, help="Output PNG path (default: render.png)")
    parser.add_argument("--width", type=int, default=None, help="Image width in pixels")
    parser.add_argument("--height", type=int, default=None, help="Image height in pixels")
    parser.add_argument("--samples", type=int, default=None, help="Samples per pixel")
    parser.add_argument("--max-depth", type=int, default=None, help="Maximum number of secondary bounces")
    parser.add_argument("--quality", choices=sorted(QUALITY_LEVELS), default=None,
                        help="Quality preset (sets samples and max depth)")
    parser.add_argument("--workers", type=int, default=None, help="Worker threads (default: CPU count)")
    parser.add_argument("--seed", type=int, default=None, help="Seed for sample jitter")
    parser.add_argument("--tone-map", choices=TONE_MAPS, default=None, help="Tone mapping operator")
    parser.add_argument("--exposure", type=float, default=None, help="Exposure multiplier")
    parser.add_argument("--gamma", type=float, default=None, help="Gamma applied after clamping")
    parser.add_argument("--gradient", action="store_true",
                        help="Write the debug gradient instead of tracing the scene")
    parser.add_argument("--log-level", default=None, help="Logging level (DEBUG, INFO, ...)")
    parser.add_argument("--log-file", default=None, help="Also log to this file")
    return parser


def resolve_settings(args, scene_options: Optional[dict] = None) -> RenderSettings:
    """Defaults < scene file ``render`` section < quality preset < explicit flags."""
    settings = RenderSettings().updated(**(scene_options or {}))
    if args.quality:
        settings = settings.with_quality(args.quality)
    return settings.updated(
        width=args.width,
        height=args.height,
        samples=args.samples,
        max_depth=args.max_depth,
        workers=args.workers,
        seed=args.seed,
        output=args.output,
        tone_map=args.tone_map,
        exposure=args.exposure,
        gamma=args.gamma,
    )


def run(args) -> int:
    if args.scene_file:
        description = load_scene(args.scene_file)
        settings = resolve_settings(args, description.render_options)
        scene = description.scene
        camera = description.camera(settings.aspect_ratio)
    else:
        settings = resolve_settings(args)
        scene = create_world()
        camera = create_camera(settings.aspect_ratio)

    image = ImageBuffer(settings.width, settings.height)
    renderer = Renderer(settings)
    if args.gradient:
        renderer.render_gradient(image)
    else:
        renderer.render(camera, scene, image)

    try:
        image.save(settings.output)
    except ImageWriteError as err:
        logger.error("Failed to render with error: %s", err)
        return 1
    logger.info("Successfully rendered image")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level, args.log_file)
    try:
        return run(args)
    except RaytracerError as err:
        logger.error("Failed to render with error: %s", err)
        return 1


if __name__ == "__main__":
    sys.exit(main())
